"""Configuration loading with pydantic-settings.

Sources, highest precedence first:
1. Keyword overrides passed to ``load_config``
2. Environment variables (TFINDEX__SECTION__KEY)
3. Project config (``.tfindex.yaml`` in the project root)
4. Global config (``~/.config/tfindex/config.yaml``)
5. Built-in defaults
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import (
    BaseSettings,
    InitSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from tfindex.config.models import IndexConfig, LoggingConfig, TfIndexConfig
from tfindex.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/tfindex/config.yaml").expanduser()
PROJECT_CONFIG_NAME = ".tfindex.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    """Read one YAML layer. A missing file is an empty layer."""
    try:
        text = path.read_text()
    except FileNotFoundError:
        return {}
    except OSError as e:
        raise ConfigError.parse_error(str(path), e.strerror or str(e)) from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated by ``override``; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = _deep_merge(current, value)
        merged[key] = value
    return merged


def _settings_class(file_config: dict[str, Any]) -> type[BaseSettings]:
    """Build a settings class bound to already-merged YAML layers."""

    class TfIndexSettings(BaseSettings):
        """Env vars: TFINDEX__LOGGING__LEVEL, TFINDEX__INDEX__STRICT_REFERENCES, ..."""

        model_config = SettingsConfigDict(
            env_prefix="TFINDEX__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        index: IndexConfig = IndexConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            return (init_settings, env_settings, InitSettingsSource(settings_cls, file_config))

    return TfIndexSettings


TfIndexSettings = _settings_class({})


def load_config(project_root: Path | None = None, **overrides: Any) -> TfIndexConfig:
    """Resolve configuration for a run rooted at ``project_root``.

    Args:
        project_root: Directory holding ``.tfindex.yaml``; the working
            directory when omitted.
        **overrides: Section values that win over every other source.

    Raises:
        ConfigError: A config file is not valid YAML or a value fails
            validation.
    """
    root = project_root or Path.cwd()

    file_config: dict[str, Any] = {}
    for layer in (GLOBAL_CONFIG_PATH, root / PROJECT_CONFIG_NAME):
        file_config = _deep_merge(file_config, _load_yaml(layer))

    try:
        settings = _settings_class(file_config)(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ConfigError.invalid_value(field, first.get("input"), first["msg"]) from e

    return TfIndexConfig.model_validate(settings.model_dump())
