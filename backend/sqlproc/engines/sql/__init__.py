"""
Procedure script engine: bind parameters, split, run, pivot.

Exports: bind, split_statements, ScriptRunner, run_statements, pivot_row.
"""

from sqlproc.engines.sql.binder import (
    BindingStrategy,
    BoundScript,
    bind,
    build_session_prelude,
    detect_strategy,
    substitute_markers,
)
from sqlproc.engines.sql.pivot import pivot_row
from sqlproc.engines.sql.runner import RunnerState, ScriptRunner, run_statements
from sqlproc.engines.sql.splitter import split_statements

__all__ = [
    "BindingStrategy",
    "BoundScript",
    "RunnerState",
    "ScriptRunner",
    "bind",
    "build_session_prelude",
    "detect_strategy",
    "pivot_row",
    "run_statements",
    "split_statements",
    "substitute_markers",
]
