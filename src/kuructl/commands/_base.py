"""Shared Click building blocks for kuructl subcommands.

``KuruCommand`` adds the ``--examples`` flag every command carries and,
for commands that talk to layers, the ``--local`` switch. ``LAYER`` is the
parameter type for layer arguments: a root menu name (``net``) or a numeric
layer id (``2``).
"""

from __future__ import annotations

from typing import Any

import click
from click.shell_completion import CompletionItem

from kuructl.domain.location import ROOT_REGISTRY

LOCAL_HELP = "Use in-process plugin layers instead of the daemon."


def _show_examples(examples: str) -> Any:
    def callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    return callback


class KuruCommand(click.Command):
    """Click Command with ``--examples`` and an optional ``--local`` flag.

    Args:
        examples: Text printed by ``--examples``; the flag is omitted when None.
        local_option: Add a ``--local`` flag passed to the callback as ``local``.
    """

    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        local_option: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if local_option:
            self.params.append(click.Option(["--local"], is_flag=True, help=LOCAL_HELP))
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_show_examples(examples),
                    help="Show usage examples.",
                )
            )


class LayerParamType(click.ParamType):
    """Converts a layer name or non-negative id to a layer id."""

    name = "layer"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> int:
        if isinstance(value, int):
            return value
        entry = ROOT_REGISTRY.find(value)
        if entry is not None:
            return entry.id
        try:
            layer_id = int(value)
        except ValueError:
            names = ", ".join(ROOT_REGISTRY.names())
            self.fail(f"unknown layer {value!r} (expected one of: {names})", param, ctx)
        if layer_id < 0:
            self.fail(f"layer id must be non-negative, got {layer_id}", param, ctx)
        return layer_id

    def shell_complete(
        self, ctx: click.Context, param: click.Parameter, incomplete: str
    ) -> list[CompletionItem]:
        return [
            CompletionItem(command.name, help=command.doc)
            for command in ROOT_REGISTRY
            if command.name.startswith(incomplete)
        ]


LAYER = LayerParamType()


def layer_title(layer_id: int) -> str:
    """Root menu name for *layer_id*, or the bare id when it has none."""
    entry = ROOT_REGISTRY.find_by_id(layer_id)
    return entry.name if entry is not None else str(layer_id)
