"""Exception hierarchy shared by the console, transport, and server layers."""

from __future__ import annotations


class KuruError(Exception):
    """Base class for all kuructl errors."""


class FramingError(KuruError):
    """A console socket frame was truncated or malformed."""


class CommandFailed(KuruError):
    """A layer rejected a command (bad arguments, invalid state, ...).

    Raised by :class:`~kuructl.transport.contracts.ConsoleLayer` implementations.
    The console answers it by printing the command's doc string as help.
    """


class RegistryError(KuruError):
    """A command registry could not be built from the supplied entries."""
