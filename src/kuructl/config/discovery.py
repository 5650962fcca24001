"""Locate kuructl.toml.

Search order:
  1. ``KURUCTL_CONFIG`` (if set, it is the only candidate)
  2. ``kuructl.toml`` in the start directory or any parent
  3. ``$XDG_CONFIG_HOME/kuructl/kuructl.toml`` (``~/.config`` by default)

An explicit ``--config`` bypasses discovery entirely; see
:meth:`kuructl.config.settings.KuruSettings.from_cli`.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "kuructl.toml"
CONFIG_ENV_VAR = "KURUCTL_CONFIG"
APP_DIRNAME = "kuructl"


def user_config_path() -> Path:
    """Per-user config file, whether or not it exists."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / APP_DIRNAME / CONFIG_FILENAME


def _walk_up(start: Path) -> Iterator[Path]:
    current = start.resolve()
    yield current
    yield from current.parents


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), or None."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    for directory in _walk_up(start or Path.cwd()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

    user_path = user_config_path()
    if user_path.is_file():
        return user_path
    return None
