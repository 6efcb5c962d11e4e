"""Provider endpoints, credentials and transport settings.

Values come from a YAML file, ``.env``, and ``WEB3_ANALYST_`` variables
(``__`` reaches into sub-models, e.g. ``WEB3_ANALYST_COINGECKO__API_KEY``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, Literal

import structlog
from pydantic import BaseModel, Field, SecretStr, ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) Web3AnalystMCP/1.0"
)


# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------


class CoinGeckoSettings(BaseModel):
    """Market-data provider (CoinGecko) configuration."""

    api_key: SecretStr = SecretStr("")
    base_url: str = "https://api.coingecko.com/api/v3"


class GitHubSettings(BaseModel):
    """Source-hosting provider (GitHub REST v3) configuration."""

    token: SecretStr = SecretStr("")
    base_url: str = "https://api.github.com"


class ExplorerSettings(BaseModel):
    """Chain explorer configuration."""

    base_url: str = "https://api.blockchain-explorer.com"


class HTTPSettings(BaseModel):
    """Shared outbound HTTP client configuration."""

    timeout: float = Field(
        default=10.0, gt=0.0, description="Per-request timeout in seconds."
    )
    user_agent: str = DEFAULT_USER_AGENT


class WebsiteSettings(BaseModel):
    """Website text extraction configuration."""

    max_chars: int = Field(
        default=1000, gt=0, description="Max characters of extracted page text."
    )


class FallbackSettings(BaseModel):
    """Synthetic fallback data configuration."""

    seed: int | None = Field(
        default=None,
        description="Seed for the fallback random source (None = nondeterministic).",
    )


class MCPSettings(BaseModel):
    """MCP HTTP+SSE transport settings."""

    host: str = "127.0.0.1"
    port: int = Field(default=8765, ge=1, le=65535)
    shared_secret: SecretStr | None = Field(
        default=None,
        description="Bearer secret required on MCP HTTP endpoints when set.",
    )
    max_events: int = Field(default=500, ge=1, le=10_000)


class LoggingSettings(BaseModel):
    """Logging / observability configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json"] = "console"
    file: Path | None = None


# ---------------------------------------------------------------------------
# Main Settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Top-level settings.

    Later sources win: field defaults, the YAML file (``config.yaml`` or
    ``--config``), ``.env``, ``WEB3_ANALYST_*`` variables, then keyword
    arguments passed to :meth:`load`.
    """

    model_config = SettingsConfigDict(
        env_prefix="WEB3_ANALYST_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        yaml_file="config.yaml",
        yaml_file_encoding="utf-8",
        extra="ignore",
    )

    _config_path_override: ClassVar[Path | None] = None

    coingecko: CoinGeckoSettings = Field(default_factory=CoinGeckoSettings)
    github: GitHubSettings = Field(default_factory=GitHubSettings)
    explorer: ExplorerSettings = Field(default_factory=ExplorerSettings)
    http: HTTPSettings = Field(default_factory=HTTPSettings)
    website: WebsiteSettings = Field(default_factory=WebsiteSettings)
    fallback: FallbackSettings = Field(default_factory=FallbackSettings)
    mcp: MCPSettings = Field(default_factory=MCPSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Put the YAML file below dotenv and the environment."""
        yaml_file = cls._config_path_override or settings_cls.model_config.get(
            "yaml_file", "config.yaml"
        )
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file),
        )

    @classmethod
    def load(cls, config_path: Path | None = None, **overrides: Any) -> Settings:
        """Build settings, reading ``config_path`` instead of ``config.yaml``.

        Logs which credentials are present without their values.
        """
        cls._config_path_override = config_path
        try:
            settings = cls(**overrides)
        finally:
            cls._config_path_override = None

        logger.debug(
            "settings_loaded",
            coingecko_key=_presence(settings.coingecko.api_key),
            github_token=_presence(settings.github.token),
            shared_secret=_presence(settings.mcp.shared_secret),
        )
        return settings


def _presence(secret: SecretStr | None) -> str:
    if secret is None or not secret.get_secret_value():
        return "missing"
    return "present"


def format_validation_error(exc: ValidationError) -> str:
    """Render a ValidationError as one indented line per bad field."""
    lines: list[str] = []
    for error in exc.errors():
        loc = " -> ".join(str(part) for part in error["loc"])
        msg = error["msg"]
        raw_input = error.get("input")
        if raw_input is not None:
            lines.append(f"  {loc}: {msg} (got {raw_input!r})")
        else:
            lines.append(f"  {loc}: {msg}")
    return "Configuration error:\n" + "\n".join(lines)
