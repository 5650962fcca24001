"""Console layer — navigation state machine, completion, and the input loop."""

from kuructl.console.navigator import ConsoleState, Navigator, RouteOutcome, parse_line
from kuructl.console.shell import run_console

__all__ = ["ConsoleState", "Navigator", "RouteOutcome", "parse_line", "run_console"]
