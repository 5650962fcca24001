"""Shared pytest fixtures and test doubles for kuructl tests."""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Generator
from io import StringIO
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from kuructl.console.navigator import Navigator
from kuructl.domain.commands import CommandRegistry
from kuructl.transport.contracts import ExecResult, ExecStatus, LoadStatus

NET_REGISTRY = CommandRegistry.from_entries([(5, "ping", "[ping <host>] - probe a host.")])


class FakeSource:
    """LayerCommandSource backed by a dict; missing layers fail to load."""

    def __init__(self, registries: dict[int, CommandRegistry] | None = None) -> None:
        self.registries = dict(registries or {})
        self.requests: list[int] = []

    def get_commands(self, layer_id: int) -> tuple[CommandRegistry | None, LoadStatus]:
        self.requests.append(layer_id)
        registry = self.registries.get(layer_id)
        if registry is None:
            return None, LoadStatus.ERROR
        return registry, LoadStatus.OK


class FakeChannel:
    """CommandChannel that records calls and replays a fixed result."""

    def __init__(self, result: ExecResult | None = None) -> None:
        self.result = result or ExecResult(status=ExecStatus.OK, output="done\n")
        self.calls: list[tuple[int, int, str]] = []

    def execute(self, layer_id: int, command_id: int, args: str) -> ExecResult:
        self.calls.append((layer_id, command_id, args))
        return self.result


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def source() -> FakeSource:
    return FakeSource({2: NET_REGISTRY})


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def out() -> StringIO:
    return StringIO()


@pytest.fixture
def err() -> StringIO:
    return StringIO()


@pytest.fixture
def navigator(source: FakeSource, channel: FakeChannel, out: StringIO, err: StringIO) -> Navigator:
    """Navigator over the fake source/channel with captured streams."""
    return Navigator(source, channel, out=out, err=err)


@pytest.fixture
def socket_path() -> Generator[Path, None, None]:
    """A short socket path; AF_UNIX paths are limited to ~100 bytes."""
    directory = Path(tempfile.mkdtemp(prefix="kuru"))
    try:
        yield directory / "kurud.sock"
    finally:
        shutil.rmtree(directory, ignore_errors=True)


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's kuructl.toml or KURUCTL_* env out of the tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for var in ("KURUCTL_CONFIG", "KURUCTL_VERBOSE", "KURUCTL_LOG_JSON", "KURUCTL_SOCKET_PATH"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None, None, None]:
    """Undo the handlers and levels configure_logging() installs."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    kuru = logging.getLogger("kuructl")
    kuru_level = kuru.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    kuru.setLevel(kuru_level)
    structlog.contextvars.clear_contextvars()
