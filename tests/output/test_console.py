"""Tests for the Rich console factory and registry rendering."""

from __future__ import annotations

from kuructl.domain.commands import CommandRegistry
from kuructl.output.console import KURU_THEME, create_console, get_output, render_registry


class TestCreateConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console(no_color=True)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_theme_styles(self) -> None:
        for name in ("kuru.ok", "kuru.error", "kuru.id", "kuru.name", "kuru.doc", "kuru.title"):
            assert name in KURU_THEME.styles

    def test_width_override(self) -> None:
        assert create_console(width=60).width == 60


class TestRenderRegistry:
    def test_lists_every_command(self) -> None:
        registry = CommandRegistry.from_entries(
            [(1, "echo", "[echo <text>] - send <text> back."), (2, "benchmark", "")]
        )
        text = render_registry(registry, title="net", no_color=True, width=100)
        assert "net" in text
        assert "echo" in text
        assert "[echo <text>] - send <text> back." in text
        assert "benchmark" in text
        assert text.index("echo") < text.index("benchmark")

    def test_empty_registry_has_headers(self) -> None:
        text = render_registry(CommandRegistry(), no_color=True)
        assert "Command" in text
        assert "Description" in text
