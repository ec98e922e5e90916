"""
Pivot the final statement's row set into the flat ``customOutput`` mapping.
"""

from typing import Any

from sqlproc.core.errors import DuplicateOutputKey, MultipleRowsReturned
from sqlproc.core.session import RowSet


def stringify(value: Any) -> str:
    """Driver value → text. NULL becomes the empty string; nothing is reformatted."""
    if value is None:
        return ""
    return str(value)


def pivot_row(row_set: RowSet) -> dict[str, str]:
    """One row → ``{column: text}``; zero rows → ``{}``; more rows are an error."""
    if not row_set.rows:
        return {}
    if len(row_set.rows) > 1:
        raise MultipleRowsReturned(len(row_set.rows))

    output: dict[str, str] = {}
    for column, value in zip(row_set.columns, row_set.rows[0], strict=True):
        if column in output:
            raise DuplicateOutputKey(column)
        output[column] = stringify(value)
    return output
