"""Console Navigator — the directory-style state machine behind the shell.

The console is either at the root menu, whose entries select a layer, or
inside a layer, whose entries are executed on the daemon. Each accepted
input line is routed to one of: descend into a layer, execute a remote
command, go back up, or quit.

INVARIANT: the active registry always belongs to the current location.
At the root it is the built-in root registry; inside ``Layer(id)`` it is the
registry most recently loaded for ``id``. A failed load always leaves the
console at the root, with the root registry and prompt.

Operator-facing reports (unknown command, command help, send errors, load
failures) go to the error stream through ``click.echo``. They are not log
records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, TextIO

import click

from kuructl.config.logging import bind_console_location
from kuructl.console.completion import CompletionCursor
from kuructl.domain.location import ROOT, ROOT_REGISTRY, Layer, Location, Root
from kuructl.transport.contracts import ExecStatus, LoadStatus

if TYPE_CHECKING:
    from collections.abc import Iterator

    from kuructl.domain.commands import Command, CommandRegistry
    from kuructl.transport.contracts import CommandChannel, LayerCommandSource

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT = "kurupira"
EXIT_KEYWORD = "exit"
PROMPT_MAX_CHARS = 30
UNKNOWN_LAYER_NAME = "?"

MSG_NO_SUCH_COMMAND = "{token}: No such command."
MSG_LOAD_FAILED = "error: Could not load commands."
MSG_SEND_FAILED = "Error sending command."
EXIT_DOC = "Goes up one directory, or leaves the console at the root"


class RouteOutcome(StrEnum):
    """What the console loop should do after a line has been handled."""

    CONTINUE = "continue"
    EXIT = "exit"


@dataclass(frozen=True)
class ConsoleState:
    """Where the console is, the registry in force there, and its prompt."""

    location: Location
    registry: CommandRegistry
    prompt: str


def parse_line(line: str) -> tuple[str, str]:
    """Split *line* into its first word and the remaining argument text.

    Surrounding whitespace is dropped; whitespace inside the arguments is
    kept as typed.
    """
    parts = line.strip().split(maxsplit=1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1]


class Navigator:
    """Owns the console state and interprets one input line per step.

    Args:
        source: Supplies layer registries when descending into a layer.
        channel: Executes commands on the daemon.
        root_registry: The built-in list of layers shown at the root.
        product: Product name embedded in the prompt.
        exit_keyword: Reserved word that goes up a level or quits.
        prompt_max_chars: Prompts longer than this are truncated.
        out: Stream for command output (default: stdout).
        err: Stream for operator reports (default: stderr).
    """

    def __init__(
        self,
        source: LayerCommandSource,
        channel: CommandChannel,
        *,
        root_registry: CommandRegistry = ROOT_REGISTRY,
        product: str = DEFAULT_PRODUCT,
        exit_keyword: str = EXIT_KEYWORD,
        prompt_max_chars: int = PROMPT_MAX_CHARS,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self._source = source
        self._channel = channel
        self._root_registry = root_registry
        self._product = product
        self._exit_keyword = exit_keyword
        self._prompt_max_chars = prompt_max_chars
        self._out = out
        self._err = err
        self._cursor: CompletionCursor | None = None
        self._set_state(self._root_state())

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> ConsoleState:
        return self._state

    @property
    def location(self) -> Location:
        return self._state.location

    @property
    def registry(self) -> CommandRegistry:
        return self._state.registry

    @property
    def prompt(self) -> str:
        return self._state.prompt

    @property
    def root_registry(self) -> CommandRegistry:
        return self._root_registry

    @property
    def exit_keyword(self) -> str:
        return self._exit_keyword

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    def handle(self, line: str) -> RouteOutcome:
        """Parse and route one line. Blank lines are ignored."""
        token, rest = parse_line(line)
        if not token:
            return RouteOutcome.CONTINUE
        return self.route(token, rest)

    def route(self, token: str, rest: str) -> RouteOutcome:
        """Route a parsed line to navigation or remote execution."""
        if token == self._exit_keyword:
            if isinstance(self.location, Root):
                logger.debug("Exit requested at root")
                return RouteOutcome.EXIT
            self.go_root()
            return RouteOutcome.CONTINUE

        command = self.find(token)
        if command is None:
            self.report(MSG_NO_SUCH_COMMAND.format(token=token))
            return RouteOutcome.CONTINUE

        location = self.location
        if isinstance(location, Layer):
            self._execute(location.id, command, rest)
        else:
            # Entering a layer never takes arguments.
            self.load(command.id)
        return RouteOutcome.CONTINUE

    def find(self, name: str) -> Command | None:
        """Exact-match lookup in the active registry; first hit wins."""
        return self._state.registry.find(name)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def load(self, layer_id: int) -> bool:
        """Descend into *layer_id*, falling back to the root on any failure.

        Returns True when the layer's registry was installed.
        """
        self._release()

        try:
            registry, status = self._source.get_commands(layer_id)
        except Exception:
            logger.warning("Command source failed for layer %d", layer_id, exc_info=True)
            registry, status = None, LoadStatus.ERROR

        if status is not LoadStatus.OK or registry is None:
            logger.info("Loading layer %d failed; staying at root", layer_id)
            self.report(MSG_LOAD_FAILED)
            return False

        location = Layer(layer_id)
        self._set_state(ConsoleState(location, registry, self._format_prompt(location)))
        logger.debug("Entered layer %d with %d commands", layer_id, len(registry))
        return True

    def go_root(self) -> None:
        """Leave the current layer without contacting the daemon."""
        self._release()

    def _release(self) -> None:
        """Drop the current layer registry and adopt the root state."""
        if isinstance(self.location, Layer):
            logger.debug("Releasing registry of layer %d", self.location.id)
        self._set_state(self._root_state())
        self._cursor = None

    def _set_state(self, state: ConsoleState) -> None:
        self._state = state
        bind_console_location(state.location)

    def _root_state(self) -> ConsoleState:
        return ConsoleState(ROOT, self._root_registry, self._format_prompt(ROOT))

    def _format_prompt(self, location: Location) -> str:
        if isinstance(location, Root):
            prompt = f"{self._product}# "
        else:
            entry = self._root_registry.find_by_id(location.id)
            if entry is None:
                logger.warning("Layer %d is not listed in the root registry", location.id)
                name = UNKNOWN_LAYER_NAME
            else:
                name = entry.name
            prompt = f"{self._product}[{name}]# "
        return prompt[: self._prompt_max_chars]

    # ------------------------------------------------------------------
    # Remote execution
    # ------------------------------------------------------------------

    def _execute(self, layer_id: int, command: Command, args: str) -> None:
        logger.debug("Executing %s (id=%d) on layer %d", command.name, command.id, layer_id)
        result = self._channel.execute(layer_id, command.id, args)

        if result.status is ExecStatus.OK:
            if result.output:
                self.say(result.output.rstrip("\n"))
        elif result.status is ExecStatus.COMMAND_ERROR:
            self.report(command.doc)
        else:
            self.report(MSG_SEND_FAILED)

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def start_completion(self, prefix: str) -> CompletionCursor:
        """Begin a fresh completion round over the active registry."""
        return CompletionCursor(self._state.registry, prefix, self._exit_keyword)

    def iter_completions(self, prefix: str) -> Iterator[str]:
        return iter(self.start_completion(prefix))

    def complete(self, prefix: str, *, restart: bool) -> str | None:
        """Return the next candidate for *prefix*, or None when exhausted.

        ``restart=True`` starts a new round; otherwise the current round
        continues from where it stopped. A changed prefix also restarts.
        """
        if restart or self._cursor is None or self._cursor.prefix != prefix:
            self._cursor = self.start_completion(prefix)
        return next(self._cursor, None)

    def describe(self, name: str) -> str:
        """Doc string for a completion candidate."""
        if name == self._exit_keyword and self.find(name) is None:
            return EXIT_DOC
        command = self.find(name)
        return command.doc if command else ""

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def say(self, message: str) -> None:
        click.echo(message, file=self._out)

    def report(self, message: str) -> None:
        click.echo(message, file=self._err, err=self._err is None)
