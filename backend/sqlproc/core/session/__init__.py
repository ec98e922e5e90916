"""
SQL sessions for the target database: connect, execute, health check.

No pooling: every procedure run opens its own session and closes it.
"""

from .connect import (
    DataSourceConfig,
    ProductTypeEnum,
    RowSet,
    SqlSession,
    open_session,
)
from .health import health_check

__all__ = [
    "DataSourceConfig",
    "ProductTypeEnum",
    "RowSet",
    "SqlSession",
    "health_check",
    "open_session",
]
