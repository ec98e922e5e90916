"""
Error taxonomy for procedure runs.

Every error is fatal to the invocation. Each carries a stable ``kind`` (used in
HTTP error bodies and logs) and a human-readable message.
"""

from __future__ import annotations

from typing import Any


class ProcedureError(Exception):
    """Base class for all procedure-run failures."""

    kind = "ProcedureError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.kind, "detail": self.message}


class InvalidInput(ProcedureError):
    """Raised when an identifier or parameter fails its grammar."""

    kind = "InvalidInput"

    def __init__(self, input_kind: str, value: Any) -> None:
        super().__init__(f"Found invalid {input_kind} value: {value!r}")
        self.input_kind = input_kind
        self.value = value


class NotFound(ProcedureError):
    """Raised when the script repository has no script at the requested key."""

    kind = "NotFound"

    def __init__(self, key: str) -> None:
        super().__init__(f"Script not found: {key}")
        self.key = key


class ScriptStoreError(ProcedureError):
    """Raised when the script repository fails for a reason other than a missing key."""

    kind = "ScriptStoreError"


class EmptyScript(ProcedureError):
    kind = "EmptyScript"

    def __init__(self) -> None:
        super().__init__("Script contains no executable statements")


class UnboundPlaceholder(ProcedureError):
    """Raised when parameter markers are left in the script after substitution."""

    kind = "UnboundPlaceholder"

    def __init__(self, names: list[str]) -> None:
        listed = ", ".join(names) if names else "<unknown>"
        super().__init__(
            f"There are placeholders left over in the script after replacement: {listed}"
        )
        self.names = names


class SessionError(ProcedureError):
    """Raised when a database session cannot be opened or used."""

    kind = "SessionError"


class QueryError(SessionError):
    """Raised when one statement fails; carries the driver message.

    ``index`` is the statement's position in the script when known
    (``None`` for the session prelude or a session-level statement).
    """

    kind = "QueryError"

    def __init__(
        self, statement: str, driver_message: str, *, index: int | None = None
    ) -> None:
        where = "SQL command" if index is None else f"SQL command #{index}"
        super().__init__(f"{where} failed: {driver_message}")
        self.statement = statement
        self.driver_message = driver_message
        self.index = index


class MultipleRowsReturned(ProcedureError):
    kind = "MultipleRowsReturned"

    def __init__(self, row_count: int) -> None:
        super().__init__(
            f"Final SQL command must return at most one row, got {row_count}"
        )
        self.row_count = row_count


class DuplicateOutputKey(ProcedureError):
    """Raised when the final row has two columns with the same name."""

    kind = "DuplicateOutputKey"

    def __init__(self, column: str) -> None:
        super().__init__(
            f"An item with the same key has already been added. Key: {column}"
        )
        self.column = column
