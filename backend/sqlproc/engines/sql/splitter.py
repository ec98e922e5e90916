"""
Split a procedure script into statements.

Plain split on ``;``: the target databases run one statement per call, and
scripts are written so that ``;`` only ever ends a statement. Semicolons
inside string literals or comments are not supported.
"""

from sqlproc.core.errors import EmptyScript

TERMINATOR = ";"


def split_statements(sql: str) -> tuple[str, ...]:
    """Return trimmed, non-empty statements in script order.

    Raises EmptyScript if nothing executable is left.
    """
    statements = tuple(
        stmt for stmt in (part.strip() for part in sql.split(TERMINATOR)) if stmt
    )
    if not statements:
        raise EmptyScript()
    return statements
