"""
Input validation gate.

Every script-reference component and every parameter name/value/type passes
through here before it can reach SQL text or a storage key. Grammars are
deliberately narrow: parameter values cannot contain ``;`` or quote
characters, so they can neither end a statement nor escape a literal.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import TYPE_CHECKING, Literal

from sqlproc.core.errors import InvalidInput

if TYPE_CHECKING:
    from sqlproc.schemas import Parameter, ScriptReference

InputKind = Literal["identifier", "parameter-name", "parameter-value", "parameter-type"]

# Storage folder names (database, schema, procedure).
IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9_-]+$")
# Restricted unquoted SQL identifier.
PARAMETER_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")
PARAMETER_VALUE_RE = re.compile(r"^[A-Za-z0-9./\\ ]+$")
PARAMETER_TYPES: frozenset[str] = frozenset({"VARCHAR", "NUMBER"})

_PATTERNS: dict[str, re.Pattern[str]] = {
    "identifier": IDENTIFIER_RE,
    "parameter-name": PARAMETER_NAME_RE,
    "parameter-value": PARAMETER_VALUE_RE,
}


def validate(kind: InputKind, value: object) -> str:
    """Return *value* unchanged if it matches the grammar for *kind*.

    ``parameter-type`` is matched case-insensitively and returned upper-cased.
    Raises InvalidInput otherwise (including for non-string values).
    """
    if not isinstance(value, str):
        raise InvalidInput(kind, value)
    if kind == "parameter-type":
        normalized = value.upper()
        if normalized not in PARAMETER_TYPES:
            raise InvalidInput(kind, value)
        return normalized
    pattern = _PATTERNS.get(kind)
    if pattern is None:
        raise ValueError(f"Unknown input kind: {kind}")
    # fullmatch: "$" alone would accept a trailing newline
    if not pattern.fullmatch(value):
        raise InvalidInput(kind, value)
    return value


def validate_script_reference(ref: ScriptReference) -> None:
    for value in (ref.database_name, ref.schema_name, ref.stored_procedure_name):
        validate("identifier", value)


def validate_parameters(params: Iterable[Parameter]) -> None:
    """Validate every parameter; the first failure aborts."""
    for param in params:
        validate("parameter-name", param.name)
        validate("parameter-value", param.value)
        if param.type is not None:
            validate("parameter-type", param.type)
