"""Line readers and the console loop.

The loop reads one line at a time, hands it to the navigator, and only
reads the next line once the previous one (including any remote call) has
been fully handled.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, History, InMemoryHistory

from kuructl.console.completion import NavigatorCompleter
from kuructl.console.navigator import RouteOutcome

if TYPE_CHECKING:
    from kuructl.console.navigator import Navigator

logger = logging.getLogger(__name__)

MSG_INTERRUPTED = "connection interrupted."


class LineReader(Protocol):
    """Source of operator input."""

    def read(self, prompt: str) -> str | None:
        """Return the next raw line, or None at end of input."""
        ...

    def add_history(self, line: str) -> None: ...


class StreamLineReader:
    """Read lines from a text stream (pipes, scripts, tests)."""

    def __init__(self, stream: TextIO, *, echo: TextIO | None = None) -> None:
        self._stream = stream
        self._echo = echo
        self.history: list[str] = []

    def read(self, prompt: str) -> str | None:
        if self._echo is not None:
            self._echo.write(prompt)
            self._echo.flush()
        line = self._stream.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def add_history(self, line: str) -> None:
        self.history.append(line)


class PromptLineReader:
    """Interactive reader with history and command completion.

    prompt_toolkit records accepted lines in the session history itself,
    so :meth:`add_history` has nothing left to do.
    """

    def __init__(
        self,
        navigator: Navigator,
        *,
        history_file: Path | None = None,
        session: PromptSession[str] | None = None,
    ) -> None:
        if session is None:
            history: History
            if history_file is not None:
                history_file.parent.mkdir(parents=True, exist_ok=True)
                history = FileHistory(str(history_file))
            else:
                history = InMemoryHistory()
            session = PromptSession(
                history=history,
                completer=NavigatorCompleter(navigator),
                complete_while_typing=False,
            )
        self._session = session

    def read(self, prompt: str) -> str | None:
        while True:
            try:
                return self._session.prompt(prompt)
            except KeyboardInterrupt:
                # Ctrl-C discards the current line.
                continue
            except EOFError:
                return None

    def add_history(self, line: str) -> None:
        pass


def run_console(navigator: Navigator, reader: LineReader) -> None:
    """Drive *navigator* until ``exit`` at the root or end of input."""
    logger.debug("Console loop started")
    while True:
        line = reader.read(navigator.prompt)
        if line is None:
            navigator.say("")
            break

        line = line.strip()
        if not line:
            continue
        reader.add_history(line)

        try:
            outcome = navigator.handle(line)
        except (ConnectionError, KeyboardInterrupt) as exc:
            # The peer hung up or the operator interrupted a remote call.
            logger.warning("Console step interrupted: %s", type(exc).__name__)
            navigator.report(MSG_INTERRUPTED)
            continue

        if outcome is RouteOutcome.EXIT:
            break
    logger.debug("Console loop finished")
