import asyncio

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from sqlproc.core.health import readiness_check

router = APIRouter(prefix="/utils", tags=["utils"])


@router.get("/liveness/", response_model=None)
async def liveness() -> bool:
    """
    Liveness probe: is the process alive and responsive?

    Lightweight: no database I/O.
    """
    return True


@router.get("/health-check/", response_model=None)
async def health_check() -> bool | JSONResponse:
    """
    Readiness probe: can the target database be reached?

    Returns 200 with true if a session opens and SELECT 1 succeeds; 503 otherwise.
    """
    ok, failures = await asyncio.to_thread(readiness_check)
    if not ok:
        return JSONResponse(
            status_code=503,
            content={
                "success": False,
                "message": "Service not ready",
                "data": failures,
            },
        )
    return True
