import secrets
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from sqlproc.core.config import settings
from sqlproc.core.script_store import ScriptRepository, get_script_repository
from sqlproc.core.session import SqlSession, open_session

FUNCTION_KEY_HEADER = "x-functions-key"


def get_repository() -> ScriptRepository:
    return get_script_repository()


def get_session_factory() -> Callable[[], SqlSession]:
    return open_session


RepositoryDep = Annotated[ScriptRepository, Depends(get_repository)]
SessionFactoryDep = Annotated[Callable[[], SqlSession], Depends(get_session_factory)]


def verify_function_key(request: Request) -> None:
    """
    Require the shared function key when FUNCTION_KEY is configured.

    Accepted as header ``x-functions-key: <key>`` or query ``?code=<key>``.
    """
    expected = settings.FUNCTION_KEY
    if not expected:
        return
    supplied = (
        request.headers.get(FUNCTION_KEY_HEADER) or request.query_params.get("code") or ""
    ).strip()
    if not supplied or not secrets.compare_digest(supplied, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing function key",
        )
