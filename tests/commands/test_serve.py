"""Tests for the `serve` subcommand."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from kuructl.cli import cli
from kuructl.transport.server import ConsoleServer


class TestServeCommand:
    def test_serves_builtin_layers(
        self, cli_runner: CliRunner, socket_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        served: dict[str, object] = {}

        def fake_serve_forever(self: ConsoleServer) -> None:
            served["path"] = self.socket_path
            served["layers"] = self.layer_ids
            raise KeyboardInterrupt

        monkeypatch.setattr(ConsoleServer, "serve_forever", fake_serve_forever)
        result = cli_runner.invoke(cli, ["--socket", str(socket_path), "serve"])
        assert result.exit_code == 0, result.output
        assert served == {"path": socket_path, "layers": [1, 2]}
        assert f"Serving link(1), net(2) on {socket_path}" in result.stderr
        assert not socket_path.exists()

    def test_no_layers(self, cli_runner: CliRunner, tmp_path: Path, socket_path: Path) -> None:
        (tmp_path / "kuructl.toml").write_text('[plugins]\ndisabled = ["stubs"]\n')
        result = cli_runner.invoke(cli, ["--socket", str(socket_path), "serve"])
        assert result.exit_code == 1
        assert "No layers available to serve." in result.stderr

    def test_unbindable_path(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "missing-dir" / "kurud.sock"
        result = cli_runner.invoke(cli, ["--socket", str(path), "serve"])
        assert result.exit_code == 1
        assert "Cannot serve on" in result.stderr
