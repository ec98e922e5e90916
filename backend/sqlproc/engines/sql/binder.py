"""
Parameter binding for procedure scripts.

Two conventions, chosen once per script:

INLINE_MARKERS
    The script carries a default value between an opening marker and a
    closing marker named after the parameter, so it still runs as-is in a
    SQL console::

        WHERE FirstName = /*Parameter_With_Quotes*/'Russell'/*FIRST_NAME*/
          AND Age > /*Parameter*/30/*AGE*/

    Each ``marker + default + closing marker`` run is replaced by the
    request value, single-quoted for ``Parameter_With_Quotes``.

SESSION_PRELUDE
    The script references session variables (``$FIRST_NAME``) and is left
    untouched; a single ``SET (A,B) = ('x',1)`` statement is run first.
    Needs a type on every parameter. A script without markers whose
    parameters are untyped (the ``{name: value}`` request form) binds inline
    instead, which leaves it unchanged.

Values are never escaped. The value grammar allows a trailing backslash, and
on MySQL (backslash escapes on by default) ``'abc\'`` escapes its own closing
quote, so two quoted markers on one line can merge into one literal. MySQL
targets that take such values need ``sql_mode`` with ``NO_BACKSLASH_ESCAPES``.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Sequence
from dataclasses import dataclass

from sqlproc.core.errors import InvalidInput, UnboundPlaceholder
from sqlproc.core.validate import validate
from sqlproc.schemas import Parameter

QUOTED_MARKER = "/*Parameter_With_Quotes*/"
UNQUOTED_MARKER = "/*Parameter*/"

# Default literal: anything on the same line that does not open another comment.
_DEFAULT_LITERAL = r"(?:(?!/\*)[^\n])*?"
_LEFTOVER_RE = re.compile(
    "(?:" + re.escape(QUOTED_MARKER) + "|" + re.escape(UNQUOTED_MARKER) + ")"
    + _DEFAULT_LITERAL
    + r"/\*([A-Za-z_][A-Za-z0-9_-]*)\*/"
)
_NUMBER_RE = re.compile(r"^[0-9]+(?:\.[0-9]+)?$")


class BindingStrategy(str, enum.Enum):
    INLINE_MARKERS = "inline_markers"
    SESSION_PRELUDE = "session_prelude"


@dataclass(frozen=True)
class BoundScript:
    strategy: BindingStrategy
    text: str
    prelude: str | None = None


def detect_strategy(script: str, params: Sequence[Parameter] = ()) -> BindingStrategy:
    """INLINE_MARKERS if the script contains any opening marker or any
    parameter is untyped, else SESSION_PRELUDE."""
    if QUOTED_MARKER in script or UNQUOTED_MARKER in script:
        return BindingStrategy.INLINE_MARKERS
    if any(p.type is None for p in params):
        return BindingStrategy.INLINE_MARKERS
    return BindingStrategy.SESSION_PRELUDE


def _marker_pattern(opening: str, name: str) -> re.Pattern[str]:
    return re.compile(re.escape(opening) + _DEFAULT_LITERAL + re.escape(f"/*{name}*/"))


def substitute_markers(script: str, params: Sequence[Parameter]) -> str:
    """Replace inline markers for every parameter; fail if any marker is left.

    Parameters that no marker refers to are ignored.
    """
    text = script
    for param in params:
        name = validate("parameter-name", param.name)
        value = validate("parameter-value", param.value)
        quoted = f"'{value}'"
        # Callable replacement: values may contain backslashes.
        text = _marker_pattern(QUOTED_MARKER, name).sub(lambda _m: quoted, text)
        text = _marker_pattern(UNQUOTED_MARKER, name).sub(lambda _m: value, text)

    if QUOTED_MARKER in text or UNQUOTED_MARKER in text:
        names = list(dict.fromkeys(_LEFTOVER_RE.findall(text)))
        raise UnboundPlaceholder(names)
    return text


def _prelude_literal(param: Parameter) -> str:
    if param.type is None:
        raise InvalidInput("parameter-type", None)
    ptype = validate("parameter-type", param.type)
    value = validate("parameter-value", param.value)
    if ptype == "NUMBER":
        if not _NUMBER_RE.match(value):
            raise InvalidInput("parameter-value", value)
        return value
    return f"'{value}'"


def build_session_prelude(params: Sequence[Parameter]) -> str | None:
    """Build ``SET (N1,N2) = (v1,v2)`` in supplied order; None when there are no params."""
    if not params:
        return None
    names = [validate("parameter-name", p.name) for p in params]
    values = [_prelude_literal(p) for p in params]
    return f"SET ({','.join(names)}) = ({','.join(values)})"


def bind(script: str, params: Sequence[Parameter]) -> BoundScript:
    strategy = detect_strategy(script, params)
    if strategy is BindingStrategy.INLINE_MARKERS:
        return BoundScript(strategy, substitute_markers(script, params))
    return BoundScript(strategy, script, build_session_prelude(params))
