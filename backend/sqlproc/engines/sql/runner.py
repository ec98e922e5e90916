"""
Run a statement sequence on one SQL session.

States: IDLE -> PRELUDE (optional) -> EXECUTING -> FINAL -> CLOSED.

- The prelude and every statement but the last run with their results
  discarded; the last statement's full row set is returned.
- The first failure stops the sequence. Nothing is retried: session
  variables make re-running part of a script unsafe.
- The session is closed on every exit path.
"""

import enum
import logging
from collections.abc import Callable, Sequence

from sqlproc.core.errors import EmptyScript, QueryError
from sqlproc.core.session import RowSet, SqlSession

_log = logging.getLogger(__name__)


class RunnerState(str, enum.Enum):
    IDLE = "idle"
    PRELUDE = "prelude"
    EXECUTING = "executing"
    FINAL = "final"
    CLOSED = "closed"


class ScriptRunner:
    """Executes one script per instance; ``session_factory`` opens the session."""

    def __init__(self, session_factory: Callable[[], SqlSession]) -> None:
        self._session_factory = session_factory
        self.state = RunnerState.IDLE

    def run(self, statements: Sequence[str], prelude: str | None = None) -> RowSet:
        if self.state is not RunnerState.IDLE:
            raise RuntimeError("ScriptRunner instances are single-use")
        if not statements:
            raise EmptyScript()

        session: SqlSession | None = None
        try:
            session = self._session_factory()

            if prelude:
                self.state = RunnerState.PRELUDE
                _log.info("Running session prelude: %s", prelude)
                session.execute(prelude)

            self.state = RunnerState.EXECUTING
            last = len(statements) - 1
            for i, stmt in enumerate(statements[:last]):
                _log.info("Running SQL command #%d: %s", i, stmt)
                self._execute(session, i, stmt)

            self.state = RunnerState.FINAL
            _log.info("Running final SQL command: %s", statements[last])
            return self._execute(session, last, statements[last])
        finally:
            if session is not None:
                session.close()
            self.state = RunnerState.CLOSED

    @staticmethod
    def _execute(session: SqlSession, index: int, stmt: str) -> RowSet:
        try:
            return session.execute(stmt)
        except QueryError as e:
            _log.error("SQL command #%d failed: %s", index, e.driver_message)
            raise QueryError(stmt, e.driver_message, index=index) from e


def run_statements(
    session_factory: Callable[[], SqlSession],
    statements: Sequence[str],
    prelude: str | None = None,
) -> RowSet:
    """Convenience wrapper: run *statements* with a fresh ScriptRunner."""
    return ScriptRunner(session_factory).run(statements, prelude)
