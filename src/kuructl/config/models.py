"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, kuructl.toml only contains
overrides. An empty file (or no file at all) is a valid configuration.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, model_validator

# --- kuructl.toml sections ---


class ConsoleConfig(BaseModel):
    """[console] section."""

    model_config = {"frozen": True}

    product: str = Field(default="kurupira", min_length=1, max_length=32)
    exit_keyword: str = Field(default="exit", pattern=r"^\S+$")
    prompt_max_chars: int = Field(default=30, ge=8)
    history_file: Path | None = None

    @model_validator(mode="after")
    def root_prompt_fits(self) -> ConsoleConfig:
        """The root prompt, product name plus ``# ``, must never be cut."""
        needed = len(self.product) + 2
        if self.prompt_max_chars < needed:
            msg = f"prompt_max_chars must be at least {needed} for product {self.product!r}"
            raise ValueError(msg)
        return self


class DaemonConfig(BaseModel):
    """[daemon] section."""

    model_config = {"frozen": True}

    socket_path: Path | None = None
    timeout: float | None = Field(default=5.0, gt=0)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    disabled: list[str] = Field(default_factory=list)
