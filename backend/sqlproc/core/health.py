"""
Readiness helper for the health-check probe: can the service reach its target
database? Liveness needs nothing beyond the process answering a request.
"""

from sqlproc.core.session import health_check as database_health_check


def readiness_check() -> tuple[bool, list[str]]:
    """
    Open a session to the target database and run SELECT 1.
    Returns (ok, list of failure messages).
    """
    failures: list[str] = []
    if not database_health_check():
        failures.append("database")
    return (len(failures) == 0, failures)
