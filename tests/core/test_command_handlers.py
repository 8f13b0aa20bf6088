# tests/core/test_command_handlers.py
import json
from unittest.mock import patch

import pytest

from crawler.exceptions import FetchError
from webanalyzer.core.handlers.extract_handler import handle_extract
from webanalyzer.core.handlers.parse_handler import handle_parse
from webanalyzer.core.handlers.read_handler import handle_read
from webanalyzer.core.handlers.stats_handler import handle_stats
from webanalyzer.core.handlers.transform_handler import handle_transform

PAGE = """<!DOCTYPE html>
<html><head><title>Test Page</title></head>
<body>
  <h1>Welcome</h1>
  <p class="intro">Hello <a href="https://example.com/about">about</a></p>
  <ul><li>One</li><li>Two</li></ul>
  <img src="logo.png" alt="Logo">
</body></html>
"""


@pytest.fixture
def page_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(PAGE, encoding="utf-8")
    return path


# -------- parse --------

def test_parse_writes_dom_json(page_file, tmp_path, capsys):
    output = tmp_path / "dom.json"

    assert handle_parse([str(page_file), str(output), "--pretty"]) == 0

    dom = json.loads(output.read_text(encoding="utf-8"))
    assert dom["tagName"] == "html"
    assert [child["tagName"] for child in dom["children"]] == ["head", "body"]
    assert "Successfully parsed HTML to JSON" in capsys.readouterr().out


def test_parse_without_text(page_file, tmp_path):
    output = tmp_path / "dom.json"

    assert handle_parse([str(page_file), str(output), "--no-include-text"]) == 0
    assert '"text"' not in output.read_text(encoding="utf-8")


def test_parse_missing_input(tmp_path, capsys):
    output = tmp_path / "dom.json"

    assert handle_parse([str(tmp_path / "missing.html"), str(output)]) == 1
    assert not output.exists()
    assert "Error: Input file does not exist" in capsys.readouterr().err


# -------- extract --------

def test_extract_json_with_selected_attributes(page_file, tmp_path):
    output = tmp_path / "links.json"

    assert handle_extract([str(page_file), "a", str(output), "--attributes", "href"]) == 0
    assert json.loads(output.read_text(encoding="utf-8")) == [
        {"text": "about", "href": "https://example.com/about"}
    ]


def test_extract_csv(page_file, tmp_path, capsys):
    output = tmp_path / "items.csv"

    assert handle_extract([str(page_file), "li", str(output), "--format", "csv"]) == 0
    assert output.read_text(encoding="utf-8") == "text\nOne\nTwo"
    assert "Successfully extracted CSV data" in capsys.readouterr().out


def test_extract_bad_selector(page_file, tmp_path, capsys):
    output = tmp_path / "items.json"

    assert handle_extract([str(page_file), "a[", str(output)]) == 1
    assert not output.exists()
    assert "Error: Failed to extract elements from file" in capsys.readouterr().err


# -------- stats --------

def test_stats_json_sections(page_file, tmp_path):
    output = tmp_path / "stats.json"

    assert handle_stats([str(page_file), str(output), "--include", "basic,links"]) == 0

    stats = json.loads(output.read_text(encoding="utf-8"))
    assert set(stats) == {"basicInfo", "links"}
    assert stats["basicInfo"]["title"] == "Test Page"


def test_stats_text_report(page_file, tmp_path):
    output = tmp_path / "stats.txt"

    assert handle_stats([str(page_file), str(output), "--format", "txt"]) == 0
    assert output.read_text(encoding="utf-8").startswith("Web Page Statistics\n")


def test_stats_unknown_section(page_file, tmp_path, capsys):
    output = tmp_path / "stats.json"

    assert handle_stats([str(page_file), str(output), "--include", "colours"]) == 1
    assert not output.exists()
    assert "Unknown statistics section 'colours'" in capsys.readouterr().err


# -------- transform --------

def test_transform_to_markdown(page_file, tmp_path):
    output = tmp_path / "page.md"

    assert handle_transform([str(page_file), str(output)]) == 0

    markdown = output.read_text(encoding="utf-8")
    assert markdown.startswith("# Test Page\n\n")
    assert "[about](https://example.com/about)" in markdown
    assert "![Logo](logo.png)" in markdown


def test_transform_plain_without_links(page_file, tmp_path):
    output = tmp_path / "page.txt"

    assert handle_transform([str(page_file), str(output), "--format", "plain", "--no-preserve-links"]) == 0

    text = output.read_text(encoding="utf-8")
    assert text.startswith("TEST PAGE\n\n")
    assert "https://example.com/about" not in text


def test_transform_unsupported_format(page_file, tmp_path, capsys):
    output = tmp_path / "page.out"

    assert handle_transform([str(page_file), str(output), "--format", "pdf"]) == 1
    assert not output.exists()
    assert "Unsupported format: pdf" in capsys.readouterr().err


# -------- read --------

@patch("webanalyzer.core.handlers.read_handler.PageFetcher")
def test_read_writes_fetched_html(mock_fetcher, tmp_path, capsys):
    mock_fetcher.return_value.fetch_page_sync.return_value = "<html><body>ok</body></html>"
    output = tmp_path / "page.html"

    exit_code = handle_read([
        "example.com", str(output), "--timeout", "10", "--headers", "Accept=text/html", "--wait", "100",
    ])

    assert exit_code == 0
    assert output.read_text(encoding="utf-8") == "<html><body>ok</body></html>"
    options = mock_fetcher.call_args.args[0]
    assert options.timeout_ms == 10000
    assert options.wait_ms == 100
    assert options.headers == {"Accept": "text/html"}
    mock_fetcher.return_value.fetch_page_sync.assert_called_once_with("https://example.com")
    assert "Successfully downloaded page from https://example.com" in capsys.readouterr().out


@patch("webanalyzer.core.handlers.read_handler.PageFetcher")
def test_read_fetch_error(mock_fetcher, tmp_path, capsys):
    mock_fetcher.return_value.fetch_page_sync.side_effect = FetchError("HTTP error 404: Not Found")
    output = tmp_path / "page.html"

    assert handle_read(["https://example.com/missing", str(output)]) == 1
    assert not output.exists()
    assert "Error: HTTP error 404: Not Found" in capsys.readouterr().err


@patch("webanalyzer.core.handlers.read_handler.PageFetcher")
def test_read_rejects_malformed_headers(mock_fetcher, tmp_path, capsys):
    output = tmp_path / "page.html"

    assert handle_read(["https://example.com", str(output), "--headers", "no-equals-sign"]) == 1
    mock_fetcher.assert_not_called()
    assert "Invalid header" in capsys.readouterr().err
