"""
Engines: procedure script engine (bind/split/run/pivot) and the ProcedureExecutor
that drives it.
"""

from sqlproc.engines.executor import ProcedureExecutor, run_procedure
from sqlproc.engines.sql import ScriptRunner, bind, pivot_row, split_statements

__all__ = [
    "ProcedureExecutor",
    "ScriptRunner",
    "bind",
    "pivot_row",
    "run_procedure",
    "split_statements",
]
