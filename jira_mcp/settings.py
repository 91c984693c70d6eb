"""Settings resolution: env vars and .env over an optional TOML config file."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import tomlkit
import typer
from pydantic import SecretStr
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

CONFIG_PATH = Path.home() / ".config" / "jira-mcp" / "config.toml"

_REQUIRED_ENV = {"url": "JIRA_URL", "email": "JIRA_EMAIL", "pat": "JIRA_PAT"}


@lru_cache(maxsize=1)
def _load_toml() -> tomlkit.TOMLDocument:
    """Load ~/.config/jira-mcp/config.toml, returning empty document if missing."""
    if not CONFIG_PATH.exists():
        return tomlkit.document()
    with CONFIG_PATH.open() as fh:
        return tomlkit.load(fh)


class _TomlFileSource(PydanticBaseSettingsSource):
    """Top-level keys of the TOML config file, lowest precedence."""

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return _load_toml().unwrap().get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        values = _load_toml().unwrap()
        return {name: values[name] for name in self.settings_cls.model_fields if name in values}


class JiraSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="JIRA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Jira Cloud credentials
    url: str | None = None  # https://your-domain.atlassian.net
    email: str | None = None
    pat: SecretStr | None = None  # API token from id.atlassian.com

    api_path: str = "/rest/api/3"
    timeout: float = 30.0  # seconds, per request

    log_level: str = "INFO"

    # HTTP transport bind
    host: str = "0.0.0.0"
    port: int = 3001

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
            _TomlFileSource(settings_cls),
        )


def missing_credentials(settings: JiraSettings) -> list[str]:
    """Env var names of the required credentials that are unset."""
    return [env for field, env in _REQUIRED_ENV.items() if not getattr(settings, field)]


def get_settings() -> JiraSettings:
    """Resolve settings and make sure the Jira credentials are present.

    Precedence (highest to lowest):
    1. JIRA_* environment variables
    2. .env in cwd
    3. top-level keys in ~/.config/jira-mcp/config.toml
    """
    settings = JiraSettings()

    missing = missing_credentials(settings)
    if missing:
        typer.echo(
            f"Missing Jira credentials: {', '.join(missing)}. "
            f"Set them in the environment, a .env file, or {CONFIG_PATH}",
            err=True,
        )
        raise typer.Exit(1)
    return settings
