"""
Process-level configuration, loaded once per cold start.

The connection string comes from POSTGRESQL_CONNECTION_STRING, or from the
Secrets Manager secret named by DB_SECRET_NAME when the variable is unset.
"""

import os
from typing import Mapping, Optional

from botocore.exceptions import BotoCoreError, ClientError
from psycopg2.extensions import make_dsn
from pydantic import BaseModel, ConfigDict, field_validator

from common.secrets import get_secret

CONNECTION_STRING_VAR = "POSTGRESQL_CONNECTION_STRING"
SECRET_NAME_VAR = "DB_SECRET_NAME"


class ConfigError(RuntimeError):
    """Raised when the service cannot be configured at startup."""


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    connection_string: str

    @field_validator("connection_string")
    @classmethod
    def connection_string_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Connection string must not be empty")
        return v.strip()


def _dsn_from_secret(secret: dict) -> Optional[str]:
    if secret.get("connection_string"):
        return secret["connection_string"]
    if not secret.get("host"):
        return None
    return make_dsn(
        host=secret["host"],
        port=secret.get("port", 5432),
        user=secret.get("username"),
        password=secret.get("password"),
        dbname=secret.get("dbname"),
    )


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    environ = os.environ if environ is None else environ

    dsn = (environ.get(CONNECTION_STRING_VAR) or "").strip()
    secret_name = environ.get(SECRET_NAME_VAR)

    if not dsn and secret_name:
        try:
            dsn = _dsn_from_secret(get_secret(secret_name)) or ""
        except (BotoCoreError, ClientError) as e:
            raise ConfigError(f"Failed to read secret {secret_name!r}: {e}") from e

    if not dsn:
        raise ConfigError(
            f"PostgreSQL connection string not found: set {CONNECTION_STRING_VAR} "
            f"or {SECRET_NAME_VAR}"
        )

    return Config(connection_string=dsn)
