"""
Connection health check for the target database.
"""

import logging

from sqlproc.core.errors import SessionError

from .connect import DataSourceConfig, open_session

_log = logging.getLogger(__name__)


def health_check(config: DataSourceConfig | None = None) -> bool:
    """
    Open a session, run SELECT 1 and close it. True if no exception.
    """
    session = None
    try:
        session = open_session(config)
        session.execute("SELECT 1")
        return True
    except SessionError as e:
        _log.warning("Database health check failed: %s", e)
        return False
    finally:
        if session is not None:
            session.close()
