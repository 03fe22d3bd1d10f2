"""LatticeSettings: CLI flags, env vars and ``latticeview.toml`` merged once.

Sources in priority order:

1. keyword arguments (the root command's flags)
2. ``LATTICEVIEW_*`` environment variables, ``__`` between section and key
3. the discovered or ``--config`` TOML file
4. defaults on the section models

The result is frozen and shared by every command through ``AppContext``.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from latticeview.config.discovery import find_config
from latticeview.config.models import ExportConfig, LayoutConfig, PluginsConfig, ViewConfig

# File handed to the TOML source while from_cli() builds an instance.
_toml_file: ContextVar[Path | None] = ContextVar("latticeview_toml_file", default=None)


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


class LatticeSettings(BaseSettings):
    """Frozen settings for one CLI invocation.

    Attributes:
        config_path: The TOML file that was read, or None.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="LATTICEVIEW_",
        env_nested_delimiter="__",
    )

    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    view: ViewConfig = Field(default_factory=ViewConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

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
            TomlConfigSettingsSource(settings_cls, toml_file=_toml_file.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start_dir: Path | None = None,
        **cli_flags: Any,
    ) -> LatticeSettings:
        """Resolve the TOML file and build settings with *cli_flags* on top.

        An explicit *config_path* that does not exist is ignored; otherwise
        the file is found by walking up from *start_dir*. Unparseable TOML
        and invalid values surface as :class:`click.ClickException`.
        """
        if config_path:
            candidate = Path(config_path)
            toml_path = candidate if candidate.is_file() else None
        else:
            toml_path = find_config(start_dir)

        token = _toml_file.set(toml_path)
        try:
            return cls(config_path=toml_path, **cli_flags)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc
        except ValidationError as exc:
            where = toml_path or "environment"
            msg = f"Invalid configuration ({where}): {_describe(exc)}"
            raise click.ClickException(msg) from exc
        finally:
            _toml_file.reset(token)
