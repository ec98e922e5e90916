"""
POST /procedures/run: run a stored script and return its single-row output.

The executor is sync/blocking (DB-API drivers); it runs in a worker thread so
the event loop keeps accepting requests.
"""

import asyncio

from fastapi import APIRouter, Depends

from sqlproc.api.deps import RepositoryDep, SessionFactoryDep, verify_function_key
from sqlproc.engines import ProcedureExecutor
from sqlproc.schemas import ProcedureRequest, ProcedureResponse


router = APIRouter(prefix="/procedures", tags=["procedures"])


@router.post(
    "/run",
    response_model=ProcedureResponse,
    response_model_by_alias=True,
    dependencies=[Depends(verify_function_key)],
)
async def run_procedure(
    body: ProcedureRequest,
    repository: RepositoryDep,
    session_factory: SessionFactoryDep,
) -> ProcedureResponse:
    """
    Body: ``{databaseName, schemaName, storedProcedureName, parameters?}``.
    Returns ``{"customOutput": {column: value}}``. Errors are mapped by the
    ProcedureError handler in ``main``.
    """
    executor = ProcedureExecutor(repository, session_factory)
    output = await asyncio.to_thread(executor.execute, body)
    return ProcedureResponse(custom_output=output)
