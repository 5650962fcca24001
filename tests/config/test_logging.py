"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from kuructl.config.logging import bind_console_location, configure_logging
from kuructl.console.navigator import Navigator
from kuructl.domain.location import ROOT, Layer


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("kuructl").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("kuructl").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("kuructl.test")
        log.warning("json test", answer=42)
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "kuructl.test"
        assert "timestamp" in parsed

    def test_stdlib_kuru_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)

        logging.getLogger("kuructl.transport.client").debug("Using console socket /tmp/x.sock")

        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "Using console socket /tmp/x.sock"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "kuructl.transport.client"

    def test_quiet_mode_hides_debug(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)

        logging.getLogger("kuructl.console.navigator").debug("noise")
        logging.getLogger("asyncio").info("loop noise")

        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=False, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1

    def test_prompt_toolkit_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)

        logging.getLogger("prompt_toolkit").debug("renderer noise")

        assert capfd.readouterr().err == ""


class TestConsoleLocation:
    def test_records_carry_location(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        bind_console_location(Layer(3))

        logging.getLogger("kuructl.test").warning("in a layer")

        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["console_location"] == "layer:3"

    def test_root_location(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        bind_console_location(ROOT)

        structlog.get_logger("kuructl.test").warning("at root")

        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["console_location"] == "root"

    def test_navigator_binds_on_transition(
        self, navigator: Navigator, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=False, log_json=True)
        navigator.handle("net")

        logging.getLogger("kuructl.test").warning("after load")
        assert json.loads(capfd.readouterr().err.strip())["console_location"] == "layer:2"

        navigator.handle("exit")
        logging.getLogger("kuructl.test").warning("after exit")
        assert json.loads(capfd.readouterr().err.strip())["console_location"] == "root"
