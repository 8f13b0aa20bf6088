# tests/core/test_app.py
import json
from unittest.mock import Mock, patch

import pytest

from webanalyzer.app import __version__, main
from webanalyzer.core.command_registry import CommandRegistry
from webanalyzer.core.discovery import discover_handlers
from webanalyzer.core.managers.config_manager import config_manager

EXPECTED_COMMANDS = {"compare", "extract", "parse", "read", "stats", "transform"}


@pytest.fixture(autouse=True)
def packaged_settings():
    """Drops --set overrides so every test starts from settings.json."""
    yield
    config_manager.reset()


def test_discovery_finds_every_command():
    handlers, help_texts = discover_handlers()
    assert set(handlers) == EXPECTED_COMMANDS
    assert set(help_texts) == EXPECTED_COMMANDS
    assert help_texts["compare"].lstrip().startswith("compare <file1> <file2> <output>")


def test_no_command_prints_banner(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert f"Web Page Analyzer v{__version__}" in out
    assert "Use -h or --help to see available commands" in out


def test_version(capsys):
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.strip() == f"Web Page Analyzer v{__version__}"


def test_help_lists_commands(capsys):
    assert main(["--help"]) == 0
    out = capsys.readouterr().out
    for command in EXPECTED_COMMANDS:
        assert any(line.startswith(f"{command} ") for line in out.splitlines())


def test_unknown_command(capsys):
    assert main(["frobnicate"]) == 1
    assert "Error: Unknown command 'frobnicate'" in capsys.readouterr().err


def test_command_receives_its_options():
    mock_stats = Mock(return_value=0)
    with patch.dict(CommandRegistry, {"stats": mock_stats}):
        assert main(["--log-level", "error", "stats", "page.html", "out.json", "--include", "basic"]) == 0
    mock_stats.assert_called_once_with(["page.html", "out.json", "--include", "basic"])


def test_invalid_log_level_is_rejected(capsys):
    assert main(["--log-level", "loud"]) == 1
    assert "invalid choice" in capsys.readouterr().err


def test_set_overrides_command_defaults(tmp_path, capsys):
    first, second = tmp_path / "a.html", tmp_path / "b.html"
    first.write_text("<html><head><title>A</title></head><body></body></html>", encoding="utf-8")
    second.write_text("<html><head><title>B</title></head><body></body></html>", encoding="utf-8")
    output = tmp_path / "result.json"

    exit_code = main([
        "--set", "comparator.default_mode=structure", "--set", "fetcher.timeout=60",
        "compare", str(first), str(second), str(output),
    ])

    assert exit_code == 0
    result = json.loads(output.read_text(encoding="utf-8"))
    assert result["comparison"]["mode"] == "structure"
    assert result["summary"]["differencesByType"] == {"Title": 1}
    assert config_manager.get_nested("fetcher.timeout") == 60


@pytest.mark.parametrize("override", ["no-equals-sign", "=value", "debug.level.deeper=x"])
def test_invalid_set_override(override, capsys):
    assert main(["--set", override, "--version"]) == 1
    assert "Error: " in capsys.readouterr().err
