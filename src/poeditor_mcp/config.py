"""
Process-wide configuration for the POEditor MCP server.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    PositiveInt,
    SecretStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from .exceptions import ConfigurationError

DEFAULT_API_BASE = "https://api.poeditor.com/v2"

TOKEN_ENV = "POEDITOR_API_TOKEN"
PROJECT_ID_ENV = "POEDITOR_PROJECT_ID"
API_BASE_ENV = "POEDITOR_API_BASE"

_http_url = TypeAdapter(HttpUrl)


class POEditorConfig(BaseModel):
    """Immutable settings shared by the adapter and identifier resolution.

    Built once at startup and passed to everything that needs it.
    """

    model_config = ConfigDict(frozen=True)

    api_token: SecretStr = Field(description="POEditor API token, injected into every request")
    project_id: PositiveInt | None = Field(
        default=None,
        description="Default project id used when a tool call omits project_id",
    )
    api_base: str = Field(default=DEFAULT_API_BASE, description="Base URL of the POEditor v2 API")

    @field_validator("api_token")
    @classmethod
    def _token_not_blank(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("API token must not be empty")
        return value

    @field_validator("api_base")
    @classmethod
    def _http_base_url(cls, value: str) -> str:
        try:
            _http_url.validate_python(value)
        except ValidationError:
            raise ValueError(f"not an http(s) URL: {value!r}") from None
        return value.rstrip("/")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "POEditorConfig":
        """Read configuration from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            A frozen POEditorConfig.

        Raises:
            ConfigurationError: If the token is missing or a value is invalid.
        """
        env = os.environ if environ is None else environ

        token = env.get(TOKEN_ENV)
        if not token:
            raise ConfigurationError(f"{TOKEN_ENV} is required (see .env.example)")

        values: dict[str, object] = {"api_token": token}
        if env.get(PROJECT_ID_ENV):
            values["project_id"] = env[PROJECT_ID_ENV]
        if env.get(API_BASE_ENV):
            values["api_base"] = env[API_BASE_ENV]

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigurationError(f"Invalid POEditor configuration: {problems}") from None
