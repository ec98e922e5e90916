"""
SQL sessions against the target analytic database.

Uses snowflake-connector-python (Snowflake), psycopg (PostgreSQL), pymysql
(MySQL) or trino (Trino) based on product_type. The session prelude
(``SET (A,B) = (...)``, ``$A`` references) is Snowflake syntax; the other
targets only run scripts that bind through inline markers.
One ``SqlSession`` wraps one DB-API connection; sessions are never pooled, so
session variables set by one procedure run cannot leak into the next.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, NamedTuple

import psycopg
import pymysql
import snowflake.connector
from pydantic import BaseModel
from trino.auth import BasicAuthentication
from trino.dbapi import connect as trino_connect
from trino.exceptions import Error as TrinoError
from trino.exceptions import HttpError as TrinoHttpError
from trino.exceptions import TrinoQueryError

from sqlproc.core.config import Settings, settings
from sqlproc.core.errors import QueryError, SessionError

_log = logging.getLogger(__name__)

_DRIVER_ERRORS: tuple[type[BaseException], ...] = (
    psycopg.Error,
    pymysql.Error,
    snowflake.connector.Error,
    TrinoQueryError,
    TrinoHttpError,
    TrinoError,
    ConnectionError,
)

_DEFAULT_PORTS = {"snowflake": 443, "postgres": 5432, "mysql": 3306, "trino": 8080}


class ProductTypeEnum(str, Enum):
    """Supported database product types (snowflake, postgres, mysql, trino)."""

    SNOWFLAKE = "snowflake"
    POSTGRES = "postgres"
    MYSQL = "mysql"
    TRINO = "trino"


class DataSourceConfig(BaseModel):
    product_type: ProductTypeEnum
    host: str | None = None
    port: int | None = None
    database: str | None = None
    username: str | None = None
    password: str = ""
    use_ssl: bool = False
    warehouse: str | None = None
    role: str | None = None
    connect_timeout: int = 10
    statement_timeout: float | None = None

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> DataSourceConfig:
        s = s or settings
        return cls(
            product_type=ProductTypeEnum(s.DATASOURCE_PRODUCT_TYPE),
            host=s.DATASOURCE_HOST,
            port=s.DATASOURCE_PORT,
            database=s.DATASOURCE_DATABASE,
            username=s.DATASOURCE_USERNAME,
            password=s.DATASOURCE_PASSWORD,
            use_ssl=s.DATASOURCE_USE_SSL,
            warehouse=s.DATASOURCE_WAREHOUSE,
            role=s.DATASOURCE_ROLE,
            connect_timeout=s.EXTERNAL_DB_CONNECT_TIMEOUT,
            statement_timeout=s.EXTERNAL_DB_STATEMENT_TIMEOUT,
        )


class RowSet(NamedTuple):
    """Result of one statement. ``columns`` is empty for statements without a result."""

    columns: tuple[str, ...]
    rows: list[tuple[Any, ...]]


class SqlSession:
    """One open connection; statements run one at a time, in call order."""

    def __init__(self, conn: Any, product_type: ProductTypeEnum) -> None:
        self._conn = conn
        self.product_type = product_type
        self.closed = False

    def execute(self, statement: str) -> RowSet:
        """Run *statement* and fetch its full result. Driver errors raise QueryError."""
        cur = self._conn.cursor()
        try:
            cur.execute(statement)
            desc = cur.description
            if not desc:
                return RowSet((), [])
            columns = tuple(d[0] for d in desc)
            return RowSet(columns, [tuple(row) for row in cur.fetchall()])
        except _DRIVER_ERRORS as e:
            raise QueryError(statement, str(e)) from e
        finally:
            try:
                cur.close()
            except Exception:
                _log.debug("Cursor close failed", exc_info=True)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            self._conn.close()
        except Exception:
            _log.warning("Closing %s connection failed", self.product_type.value, exc_info=True)


def _connect(cfg: DataSourceConfig) -> Any:
    for name, val in [
        ("host", cfg.host),
        ("database", cfg.database),
        ("username", cfg.username),
    ]:
        if not val:
            raise SessionError(f"datasource must provide {name}")

    pt = cfg.product_type
    port = cfg.port or _DEFAULT_PORTS[pt.value]
    timeout = cfg.connect_timeout

    # autocommit: every statement stands on its own, as on the analytic targets
    if pt == ProductTypeEnum.SNOWFLAKE:
        # host is the account identifier, e.g. "xy12345.eu-west-1"
        return snowflake.connector.connect(
            account=cfg.host,
            user=cfg.username,
            password=cfg.password,
            database=cfg.database,
            warehouse=cfg.warehouse,
            role=cfg.role,
            login_timeout=timeout,
            autocommit=True,
            application="sqlproc",
        )
    if pt == ProductTypeEnum.POSTGRES:
        return psycopg.connect(
            host=cfg.host,
            port=port,
            dbname=cfg.database,
            user=cfg.username,
            password=cfg.password,
            connect_timeout=timeout,
            autocommit=True,
        )
    if pt == ProductTypeEnum.MYSQL:
        return pymysql.connect(
            host=cfg.host,
            port=port,
            database=cfg.database,
            user=cfg.username,
            password=cfg.password,
            connect_timeout=timeout,
            autocommit=True,
        )
    if pt == ProductTypeEnum.TRINO:
        if cfg.use_ssl and not cfg.password.strip():
            raise SessionError("Password is required for Trino when using SSL/HTTPS.")
        return trino_connect(
            host=cfg.host,
            port=port,
            user=cfg.username,
            auth=BasicAuthentication(cfg.username, cfg.password) if cfg.use_ssl else None,
            catalog=cfg.database,
            schema="default",
            source="sqlproc",
            http_scheme="https" if cfg.use_ssl else "http",
            request_timeout=timeout,
        )
    raise SessionError(f"Unsupported product_type: {pt}")


def _statement_timeout_sql(pt: ProductTypeEnum, timeout_sec: float) -> str:
    timeout_ms = int(timeout_sec * 1000)
    if pt == ProductTypeEnum.SNOWFLAKE:
        return f"ALTER SESSION SET STATEMENT_TIMEOUT_IN_SECONDS = {max(1, int(timeout_sec))}"
    if pt == ProductTypeEnum.POSTGRES:
        return f"SET statement_timeout = {timeout_ms}"
    if pt == ProductTypeEnum.MYSQL:
        return f"SET SESSION max_execution_time = {timeout_ms}"
    return f"SET SESSION query_max_execution_time = '{int(timeout_sec)}s'"


def open_session(config: DataSourceConfig | None = None) -> SqlSession:
    """Open a session to the configured database (settings when *config* is None).

    Connection failures raise SessionError. A statement timeout, when
    configured, is set once for the whole session.
    """
    cfg = config or DataSourceConfig.from_settings()
    try:
        conn = _connect(cfg)
    except SessionError:
        raise
    except _DRIVER_ERRORS as e:
        raise SessionError(f"Database connection failed: {e}") from e

    session = SqlSession(conn, cfg.product_type)
    if cfg.statement_timeout is not None and cfg.statement_timeout > 0:
        try:
            session.execute(_statement_timeout_sql(cfg.product_type, cfg.statement_timeout))
        except QueryError as e:
            session.close()
            raise SessionError(f"Setting statement timeout failed: {e.driver_message}") from e
    return session
