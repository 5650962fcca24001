"""Command and CommandRegistry — the lookup tables the console navigates.

A registry is an ordered sequence of commands. Insertion order is the
display and completion order. Names are expected to be unique, but if a
registry carries duplicates the first entry in insertion order wins.
Negative identifiers are reserved for navigation signals and the wire-level
list request, so they never appear in a registry.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from kuructl.errors import RegistryError

COMMAND_NAME_LENGTH = 32
COMMAND_DOC_LENGTH = 64


class Command(BaseModel):
    """A single console command as exposed by a layer (or by the root menu)."""

    model_config = {"frozen": True}

    id: int = Field(ge=0)
    name: str = Field(min_length=1, max_length=COMMAND_NAME_LENGTH)
    doc: str = Field(default="", max_length=COMMAND_DOC_LENGTH)

    @field_validator("name", "doc")
    @classmethod
    def fits_record(cls, value: str, info: ValidationInfo) -> str:
        """Names and docs travel in fixed-width UTF-8 fields; the limits are in bytes."""
        limit = COMMAND_NAME_LENGTH if info.field_name == "name" else COMMAND_DOC_LENGTH
        if len(value.encode("utf-8", errors="replace")) > limit:
            msg = f"must be at most {limit} bytes of UTF-8"
            raise ValueError(msg)
        return value


class CommandRegistry:
    """Immutable, ordered collection of :class:`Command` entries."""

    __slots__ = ("_commands",)

    def __init__(self, commands: Iterable[Command] = ()) -> None:
        self._commands: tuple[Command, ...] = tuple(commands)
        for command in self._commands:
            if not isinstance(command, Command):
                msg = f"Registry entries must be Command instances, got {type(command).__name__}"
                raise RegistryError(msg)

    @classmethod
    def from_entries(cls, entries: Iterable[tuple[int, str, str]]) -> CommandRegistry:
        """Build a registry from ``(id, name, doc)`` triples."""
        return cls(Command(id=cid, name=name, doc=doc) for cid, name, doc in entries)

    def find(self, name: str) -> Command | None:
        """Return the first command named *name*, or None."""
        for command in self._commands:
            if command.name == name:
                return command
        return None

    def find_by_id(self, command_id: int) -> Command | None:
        """Return the first command whose id is *command_id*, or None."""
        for command in self._commands:
            if command.id == command_id:
                return command
        return None

    def names(self) -> list[str]:
        return [command.name for command in self._commands]

    @property
    def commands(self) -> Sequence[Command]:
        return self._commands

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommandRegistry):
            return NotImplemented
        return self._commands == other._commands

    def __hash__(self) -> int:
        return hash(self._commands)

    def __repr__(self) -> str:
        return f"CommandRegistry({self.names()!r})"
