"""
Procedure executor: one orchestrator call == one procedure run.

validate -> read script -> bind parameters -> split -> run on one session -> pivot.
Every failure propagates as a ProcedureError; no partial output is returned.
"""

import logging
import time
from collections.abc import Callable
from typing import Any

from sqlproc.core.script_store import ScriptRepository
from sqlproc.core.session import SqlSession, open_session
from sqlproc.core.validate import validate_parameters, validate_script_reference
from sqlproc.engines.sql import ScriptRunner, bind, pivot_row, split_statements
from sqlproc.schemas import ProcedureRequest

_log = logging.getLogger(__name__)


class ProcedureExecutor:
    """
    execute(request) -> {column: value} from the last statement's single row.

    ``repository`` supplies script text; ``session_factory`` opens the SQL
    session (defaults to the configured datasource).
    """

    def __init__(
        self,
        repository: ScriptRepository,
        session_factory: Callable[[], SqlSession] | None = None,
    ) -> None:
        self._repository = repository
        self._session_factory = session_factory or open_session

    def execute(self, request: ProcedureRequest) -> dict[str, str]:
        ref = request.reference
        # All inputs are checked before anything is read or substituted.
        validate_script_reference(ref)
        validate_parameters(request.parameters)

        started = time.perf_counter()
        _log.info("Procedure %s: started", ref.storage_key)

        sql_text = self._repository.read(ref).strip()
        bound = bind(sql_text, request.parameters)
        _log.debug(
            "Bound %d parameter(s) using %s", len(request.parameters), bound.strategy.value
        )

        statements = split_statements(bound.text)
        _log.info("Found %d queries to execute", len(statements))

        row_set = ScriptRunner(self._session_factory).run(statements, bound.prelude)
        output = pivot_row(row_set)

        _log.info(
            "Procedure %s: completed in %.1f ms",
            ref.storage_key,
            (time.perf_counter() - started) * 1000.0,
        )
        return output


def run_procedure(
    request: ProcedureRequest | dict[str, Any],
    repository: ScriptRepository,
    session_factory: Callable[[], SqlSession] | None = None,
) -> dict[str, str]:
    """Run one procedure; *request* may be the raw JSON body."""
    if not isinstance(request, ProcedureRequest):
        request = ProcedureRequest.model_validate(request)
    return ProcedureExecutor(repository, session_factory).execute(request)
