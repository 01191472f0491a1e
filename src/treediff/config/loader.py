"""Configuration loading with pydantic-settings.

Sources, highest precedence first:
1. Direct kwargs
2. Environment variables (TREEDIFF__SECTION__KEY)
3. Repo config: the nearest .treediff/config.yaml at or above the compared
   repository directory, not crossing its repository root
4. Global config (~/.config/treediff/config.yaml)
5. Built-in defaults
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from treediff.config.models import CompareConfig, LoggingConfig, TreeDiffConfig
from treediff.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/treediff/config.yaml").expanduser()
REPO_CONFIG_NAME = Path(".treediff") / "config.yaml"


def find_repo_config(start: Path) -> Path | None:
    """Nearest repo config file from ``start`` upwards.

    The search stops at the first directory holding ``.git``, so a config in
    a parent of the repository is never picked up.
    """
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / REPO_CONFIG_NAME
        if candidate.is_file():
            return candidate
        if (directory / ".git").exists():
            break
    return None


def config_files(repo_dir: Path | None = None) -> list[Path]:
    """Existing YAML files feeding the config, lowest precedence first."""
    files = [GLOBAL_CONFIG_PATH] if GLOBAL_CONFIG_PATH.is_file() else []
    repo_config = find_repo_config(repo_dir or Path.cwd())
    if repo_config is not None:
        files.append(repo_config)
    return files


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlFilesSource(PydanticBaseSettingsSource):
    """YAML files merged section by section, later files winning."""

    def __init__(self, settings_cls: type[BaseSettings], files: Sequence[Path]) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        for path in files:
            self._data = _deep_merge(self._data, _load_yaml(path))

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._data


def _settings_class(files: Sequence[Path]) -> type[BaseSettings]:
    """Settings class bound to one call's YAML files."""

    class TreeDiffSettings(BaseSettings):
        model_config = SettingsConfigDict(
            env_prefix="TREEDIFF__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        compare: CompareConfig = CompareConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            return (init_settings, env_settings, _YamlFilesSource(settings_cls, files))

    return TreeDiffSettings


def load_config(repo_dir: Path | None = None, **kwargs: Any) -> TreeDiffConfig:
    """Resolve the configuration for comparing the repository at ``repo_dir``.

    Args:
        repo_dir: Directory of the (left) compared repository; its repo config
                  is used. Defaults to the current working directory.
        **kwargs: Override values keyed by section, e.g.
                  ``compare={"patch_mode": "deferred"}``.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    settings_cls = _settings_class(config_files(repo_dir))
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        raise ConfigError.from_validation_error(e) from e
    return TreeDiffConfig.model_validate(settings.model_dump())
