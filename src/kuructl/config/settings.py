"""Unified settings: CLI flags, env vars, and kuructl.toml in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``KURUCTL_*`` prefix, ``__`` between section and key
  3. TOML file    — ``kuructl.toml`` (see :mod:`kuructl.config.discovery`)
  4. Code defaults — baked into the section models

Relative paths in kuructl.toml are taken relative to the file itself, so a
project config can say ``socket_path = "run/kurud.sock"``.
"""

from __future__ import annotations

import logging
import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from kuructl.config.discovery import find_config
from kuructl.config.models import ConsoleConfig, DaemonConfig, PluginsConfig

logger = logging.getLogger(__name__)

# Path-valued keys per section, anchored at the directory of kuructl.toml.
PATH_KEYS: dict[str, tuple[str, ...]] = {
    "console": ("history_file",),
    "daemon": ("socket_path",),
}


def _anchor(value: Any, base: Path) -> Any:
    if not isinstance(value, str):
        return value
    path = Path(value).expanduser()
    return path if path.is_absolute() else base / path


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings read from one ``kuructl.toml``.

    Raises:
        click.ClickException: The file is not valid TOML.
    """

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path is None or not toml_path.is_file():
            return
        try:
            data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_path}: {exc}"
            raise click.ClickException(msg) from exc

        for key in sorted(data.keys() - settings_cls.model_fields.keys()):
            logger.warning("Ignoring unknown key %r in %s", key, toml_path)
            del data[key]

        base = toml_path.parent
        for section, keys in PATH_KEYS.items():
            table = data.get(section)
            if not isinstance(table, dict):
                continue
            data[section] = {
                key: _anchor(value, base) if key in keys else value
                for key, value in table.items()
            }
        self._data = data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class KuruSettings(BaseSettings):
    """Unified settings for the kuructl CLI.

    Stored on the :class:`~kuructl.commands._context.AppContext` created by
    the root CLI group.

    Attributes:
        config_path: The TOML file that was loaded, if any.
        socket_path: ``--socket`` override for the daemon console socket.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "KURUCTL_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    verbose: bool = False
    log_json: bool = False
    socket_path: Path | None = None

    # --- TOML sections ---
    console: ConsoleConfig = Field(default_factory=ConsoleConfig)
    daemon: DaemonConfig = Field(default_factory=DaemonConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @field_validator("socket_path")
    @classmethod
    def expand_socket_path(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start_dir: Path | None = None,
        **cli_flags: Any,
    ) -> KuruSettings:
        """Build settings for one CLI invocation.

        Args:
            config_path: Explicit ``--config``; must exist.
            start_dir: Where discovery starts (default: cwd).
            cli_flags: Field overrides. None means the flag was not given and
                the env var, TOML or default applies.

        Raises:
            click.ClickException: *config_path* is missing or the TOML is invalid.
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
        else:
            toml_path = find_config(start_dir)

        flags = {key: value for key, value in cli_flags.items() if value is not None}

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **flags)
        finally:
            _tls.toml_path = None

    @property
    def effective_socket(self) -> Path | None:
        """``--socket`` wins over ``[daemon] socket_path``."""
        return self.socket_path or self.daemon.socket_path
