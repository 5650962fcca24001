"""Console locations and the built-in root menu.

The console is either at the root menu, where each entry selects a layer,
or inside one layer, where each entry is a command executed on the daemon.
Modelling this as ``Root | Layer(id)`` keeps the two meanings of a command
id apart.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from kuructl.domain.commands import CommandRegistry

LAYER_NAME_LENGTH = 32


class LayerId(IntEnum):
    """Identifiers of the daemon's protocol layers."""

    DAEMON = 0
    LINK = 1
    NET = 2
    UNRELIABLE = 3
    RELIABLE = 4


@dataclass(frozen=True)
class Root:
    """The root menu: a directory of layers."""

    def __str__(self) -> str:
        return "/"


@dataclass(frozen=True)
class Layer:
    """Inside the layer identified by *id*."""

    id: int

    def __str__(self) -> str:
        return f"/{self.id}"


Location = Root | Layer

ROOT = Root()

ROOT_REGISTRY = CommandRegistry.from_entries(
    [
        (LayerId.LINK, "link", "Changes to link layer directory"),
        (LayerId.NET, "net", "Changes to net layer directory"),
        (LayerId.UNRELIABLE, "unreliable", "Changes to unreliable transport layer directory"),
        (LayerId.RELIABLE, "reliable", "Changes to reliable transport layer directory"),
    ]
)
