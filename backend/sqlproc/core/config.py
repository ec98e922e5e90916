from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Use top level .env file (one level above ./backend/)
        env_file="../.env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "sqlproc"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    API_PREFIX: str = "/api"
    SENTRY_DSN: str | None = None

    # Shared secret required on /procedures/run (header x-functions-key or ?code=).
    # Unset = no key check (local development).
    FUNCTION_KEY: str | None = None

    # Target analytic database. Checked when a session is opened, not at startup.
    DATASOURCE_PRODUCT_TYPE: Literal["snowflake", "postgres", "mysql", "trino"] = "snowflake"
    # Snowflake: account identifier (e.g. "xy12345.eu-west-1"); others: hostname.
    DATASOURCE_HOST: str | None = None
    DATASOURCE_PORT: int | None = None
    DATASOURCE_DATABASE: str | None = None
    DATASOURCE_USERNAME: str | None = None
    DATASOURCE_PASSWORD: str = ""
    DATASOURCE_USE_SSL: bool = False
    # Snowflake only.
    DATASOURCE_WAREHOUSE: str | None = None
    DATASOURCE_ROLE: str | None = None

    EXTERNAL_DB_CONNECT_TIMEOUT: int = 10
    # Seconds; applied once per session. None or 0 = driver default.
    EXTERNAL_DB_STATEMENT_TIMEOUT: float | None = None

    SCRIPT_STORE_BACKEND: Literal["local", "s3"] = "local"
    SCRIPT_STORE_DIR: str | None = None
    SCRIPT_STORE_S3_BUCKET: str | None = None
    SCRIPT_STORE_S3_PREFIX: str = ""
    AWS_REGION: str | None = None

    @model_validator(mode="after")
    def _require_script_store_location(self) -> Self:
        if self.SCRIPT_STORE_BACKEND == "s3" and not self.SCRIPT_STORE_S3_BUCKET:
            raise ValueError(
                "SCRIPT_STORE_S3_BUCKET must be provided when SCRIPT_STORE_BACKEND=s3"
            )
        return self


settings = Settings()  # type: ignore
