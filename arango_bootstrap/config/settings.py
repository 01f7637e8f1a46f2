"""ArangoDB connection settings loaded from environment variables."""

from __future__ import annotations

import os
from typing import Any, List, Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

ENDPOINTS_ENV = "ARANGODB_ENDPOINTS"
USER_ENV = "ARANGODB_USER"
PASSWORD_ENV = "ARANGODB_PASSWORD"
DATABASE_ENV = "ARANGODB_DATABASE"
REQUEST_TIMEOUT_ENV = "ARANGODB_REQUEST_TIMEOUT"

REQUIRED_ENV = (ENDPOINTS_ENV, USER_ENV, PASSWORD_ENV, DATABASE_ENV)

DEFAULT_REQUEST_TIMEOUT = 60.0


def _split_endpoints(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class ArangoConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    endpoints: List[str] = Field(alias="adb_endpoints", min_length=1)
    user: str = Field(alias="adb_user", min_length=1)
    password: str = Field(alias="adb_password")
    database: str = Field(alias="adb_database", min_length=1)
    request_timeout: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT, alias="adb_request_timeout", gt=0
    )

    @field_validator("endpoints", mode="before")
    @classmethod
    def _coerce_endpoints(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _split_endpoints(value)
        return value

    @field_validator("endpoints")
    @classmethod
    def _reject_blank_endpoints(cls, value: List[str]) -> List[str]:
        cleaned = [endpoint.strip() for endpoint in value]
        if any(not endpoint for endpoint in cleaned):
            raise ValueError("endpoints must not contain blank entries")
        return cleaned


def config_from_mapping(data: Mapping[str, Any]) -> ArangoConfig:
    return ArangoConfig.model_validate(dict(data))


def load_config(environ: Mapping[str, str] | None = None) -> ArangoConfig:
    """Build the connection config from ``ARANGODB_*`` variables.

    With no explicit ``environ`` the process environment is used, after a
    ``.env`` file (if any) has been loaded without overriding variables that
    are already set.
    """
    if environ is None:
        load_dotenv(override=False)
        environ = os.environ

    missing = [name for name in REQUIRED_ENV if environ.get(name) is None]
    if missing:
        raise ValueError(f"missing required environment variables: {', '.join(missing)}")

    data: dict[str, Any] = {
        "endpoints": _split_endpoints(environ[ENDPOINTS_ENV]),
        "user": environ[USER_ENV],
        "password": environ[PASSWORD_ENV],
        "database": environ[DATABASE_ENV],
    }
    timeout = environ.get(REQUEST_TIMEOUT_ENV)
    if timeout:
        data["request_timeout"] = timeout
    return ArangoConfig(**data)
