import logging

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from sqlproc.api.main import api_router
from sqlproc.core.config import settings
from sqlproc.core.errors import (
    DuplicateOutputKey,
    EmptyScript,
    InvalidInput,
    MultipleRowsReturned,
    NotFound,
    ProcedureError,
    ScriptStoreError,
    SessionError,
    UnboundPlaceholder,
)

_logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    return f"{route.tags[0]}-{route.name}"


if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(dsn=str(settings.SENTRY_DSN), enable_tracing=True)

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    generate_unique_id_function=custom_generate_unique_id,
)


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

# Order matters: first matching class wins (QueryError is a SessionError).
_ERROR_STATUS: list[tuple[type[ProcedureError], int]] = [
    (InvalidInput, 400),
    (UnboundPlaceholder, 400),
    (EmptyScript, 400),
    (NotFound, 404),
    (MultipleRowsReturned, 422),
    (DuplicateOutputKey, 422),
    (SessionError, 502),
    (ScriptStoreError, 502),
]


def status_for(exc: ProcedureError) -> int:
    for cls, code in _ERROR_STATUS:
        if isinstance(exc, cls):
            return code
    return 500


@app.exception_handler(ProcedureError)
async def procedure_exception_handler(
    request: Request, exc: ProcedureError
) -> JSONResponse:
    """Return ``{error, detail}``; no partial output is ever sent with an error."""
    code = status_for(exc)
    if code >= 500:
        _logger.error("Procedure run failed (%s): %s", exc.kind, exc.message)
    else:
        _logger.warning("Procedure run rejected (%s): %s", exc.kind, exc.message)
    return JSONResponse(status_code=code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with a human-readable detail string instead of raw Pydantic errors."""
    errors = exc.errors()
    messages = []
    for err in errors:
        loc = " → ".join(str(l) for l in err.get("loc", []) if l != "body")
        msg = err.get("msg", "Invalid value")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return JSONResponse(
        status_code=422,
        content={"error": "InvalidRequest", "detail": "; ".join(messages)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Catch-all for unhandled exceptions: log and return 500 with safe message."""
    _logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    detail = "Internal server error"
    if settings.ENVIRONMENT == "local":
        detail = f"Internal server error: {exc}"
    return JSONResponse(
        status_code=500,
        content={"error": "InternalError", "detail": detail},
    )


app.include_router(api_router, prefix=settings.API_PREFIX)
