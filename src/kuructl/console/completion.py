"""Command-name completion.

A :class:`CompletionCursor` is created fresh for every completion round and
holds its own prefix and position, so a line editor can pull candidates one
at a time. :class:`NavigatorCompleter` adapts the navigator to
prompt_toolkit.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

if TYPE_CHECKING:
    from kuructl.console.navigator import Navigator
    from kuructl.domain.commands import CommandRegistry


class CompletionCursor:
    """Yield registry names starting with *prefix*, then the exit keyword.

    Names come in registry order. The exit keyword is offered last and at
    most once per round, and only if the registry did not already offer it.
    """

    def __init__(self, registry: CommandRegistry, prefix: str, exit_keyword: str) -> None:
        self.prefix = prefix
        self._names = registry.names()
        self._exit_keyword = exit_keyword
        self._position = 0
        self._exit_done = False
        self._offered: set[str] = set()

    @property
    def position(self) -> int:
        """Index of the next registry entry to examine."""
        return self._position

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        while self._position < len(self._names):
            name = self._names[self._position]
            self._position += 1
            if name.startswith(self.prefix):
                self._offered.add(name)
                return name

        if not self._exit_done:
            self._exit_done = True
            if self._exit_keyword not in self._offered and self._exit_keyword.startswith(
                self.prefix
            ):
                return self._exit_keyword

        raise StopIteration


class NavigatorCompleter(Completer):
    """prompt_toolkit completer over the navigator's active registry.

    Only the first word of the line is completed; arguments are free text
    interpreted by the daemon.
    """

    def __init__(self, navigator: Navigator) -> None:
        self._navigator = navigator

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        if any(ch.isspace() for ch in text):
            return
        for name in self._navigator.iter_completions(text):
            yield Completion(
                name,
                start_position=-len(text),
                display_meta=self._navigator.describe(name),
            )
