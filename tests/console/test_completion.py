"""Tests for command-name completion."""

from __future__ import annotations

from io import StringIO

from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

from kuructl.console.completion import CompletionCursor, NavigatorCompleter
from kuructl.console.navigator import EXIT_DOC, Navigator
from kuructl.domain.commands import CommandRegistry

ROOT = CommandRegistry.from_entries([(1, "link", "Link layer"), (2, "net", "Net layer")])


def drain(navigator: Navigator, prefix: str) -> list[str]:
    """Pull candidates the way readline does: state 0 restarts."""
    found: list[str] = []
    candidate = navigator.complete(prefix, restart=True)
    while candidate is not None:
        found.append(candidate)
        candidate = navigator.complete(prefix, restart=False)
    return found


class TestCompletionCursor:
    def test_prefix_match(self) -> None:
        assert list(CompletionCursor(ROOT, "li", "exit")) == ["link"]

    def test_empty_prefix_offers_exit_last(self) -> None:
        assert list(CompletionCursor(ROOT, "", "exit")) == ["link", "net", "exit"]

    def test_exit_prefix(self) -> None:
        assert list(CompletionCursor(ROOT, "ex", "exit")) == ["exit"]

    def test_no_match(self) -> None:
        assert list(CompletionCursor(ROOT, "zz", "exit")) == []

    def test_exit_offered_once_when_registry_has_it(self) -> None:
        registry = CommandRegistry.from_entries([(1, "exit", "shadowed"), (2, "echo", "")])
        assert list(CompletionCursor(registry, "e", "exit")) == ["exit", "echo"]

    def test_position_advances(self) -> None:
        cursor = CompletionCursor(ROOT, "n", "exit")
        assert cursor.position == 0
        assert next(cursor) == "net"
        assert cursor.position == 2

    def test_exhausted_cursor_stays_exhausted(self) -> None:
        cursor = CompletionCursor(ROOT, "", "exit")
        assert len(list(cursor)) == 3
        assert next(cursor, None) is None


class TestNavigatorComplete:
    def test_rounds_against_root(self, source, channel) -> None:
        navigator = Navigator(source, channel, root_registry=ROOT, out=StringIO(), err=StringIO())
        assert drain(navigator, "li") == ["link"]
        assert drain(navigator, "") == ["link", "net", "exit"]

    def test_restart_starts_over(self, navigator: Navigator) -> None:
        assert navigator.complete("", restart=True) == "link"
        assert navigator.complete("", restart=False) == "net"
        assert navigator.complete("", restart=True) == "link"

    def test_new_prefix_restarts(self, navigator: Navigator) -> None:
        assert navigator.complete("", restart=True) == "link"
        assert navigator.complete("re", restart=False) == "reliable"

    def test_follows_active_registry(self, navigator: Navigator) -> None:
        navigator.handle("net")
        assert drain(navigator, "") == ["ping", "exit"]
        navigator.handle("exit")
        assert drain(navigator, "p") == []

    def test_describe(self, navigator: Navigator) -> None:
        assert navigator.describe("net") == "Changes to net layer directory"
        assert navigator.describe("exit") == EXIT_DOC
        assert navigator.describe("nothing") == ""


class TestNavigatorCompleter:
    def _complete(self, navigator: Navigator, text: str) -> list[str]:
        completer = NavigatorCompleter(navigator)
        document = Document(text, cursor_position=len(text))
        return [c.text for c in completer.get_completions(document, CompleteEvent())]

    def test_first_word(self, navigator: Navigator) -> None:
        assert self._complete(navigator, "n") == ["net"]

    def test_empty_line(self, navigator: Navigator) -> None:
        assert self._complete(navigator, "") == [
            "link",
            "net",
            "unreliable",
            "reliable",
            "exit",
        ]

    def test_arguments_not_completed(self, navigator: Navigator) -> None:
        navigator.handle("net")
        assert self._complete(navigator, "ping p") == []

    def test_replaces_typed_prefix(self, navigator: Navigator) -> None:
        completer = NavigatorCompleter(navigator)
        document = Document("unr", cursor_position=3)
        (completion,) = list(completer.get_completions(document, CompleteEvent()))
        assert completion.text == "unreliable"
        assert completion.start_position == -3
