# tests/core/test_html_transformer.py
import json

import pytest

from transformer.exceptions import TransformerError
from transformer.model import TransformOptions
from transformer.services.html_transformer_service import HtmlTransformer

PAGE = """<html><head><title>Guide</title><style>p { color: red }</style></head>
<body>
  <h1>Intro</h1>
  <p>Read the <a href="https://example.com/docs">docs</a> first.</p>
  <ul><li>Alpha</li><li>Beta</li></ul>
  <img src="/pic.png" alt="Picture">
  <script>console.log("never shown")</script>
</body></html>"""


@pytest.fixture
def transformer():
    return HtmlTransformer()


def test_markdown(transformer):
    markdown = transformer.transform(PAGE, "markdown")
    assert markdown.startswith("# Guide\n\n")
    assert "# Intro" in markdown
    assert "[docs](https://example.com/docs)" in markdown
    assert "* Alpha" in markdown
    assert "![Picture](/pic.png)" in markdown
    assert "never shown" not in markdown
    assert "color: red" not in markdown


def test_markdown_without_links_and_images(transformer):
    options = TransformOptions(preserve_links=False, include_images=False)
    markdown = transformer.transform(PAGE, "MARKDOWN", options)
    assert "https://example.com/docs" not in markdown
    assert "docs" in markdown
    assert "pic.png" not in markdown


def test_plain_text(transformer):
    text = transformer.transform(PAGE, "plain")
    assert text.startswith("GUIDE\n\n")
    assert "\nINTRO\n\n" in text
    assert "- Alpha\n" in text
    assert "docs [https://example.com/docs]" in text
    assert "[Image: Picture]" in text
    assert "never shown" not in text


def test_json(transformer):
    data = json.loads(transformer.transform(PAGE, "json"))
    assert data["title"] == "Guide"
    assert data["charset"] == "UTF-8"
    assert data["content"][0] == {"type": "heading", "level": 1, "text": "Intro"}
    paragraph = data["content"][1]
    assert paragraph["type"] == "paragraph"
    assert paragraph["links"] == [{"text": "docs", "url": "https://example.com/docs"}]
    assert data["content"][2] == {"type": "unordered_list", "items": ["Alpha", "Beta"]}
    assert data["content"][3] == {"type": "image", "src": "/pic.png", "alt": "Picture", "title": ""}


def test_json_respects_options(transformer):
    options = TransformOptions(preserve_links=False, include_images=False, pretty=True)
    output = transformer.transform(PAGE, "json", options)
    data = json.loads(output)
    assert output.startswith("{\n  ")
    assert "links" not in data["content"][1]
    assert all(item["type"] != "image" for item in data["content"])


def test_unsupported_format(transformer):
    with pytest.raises(TransformerError, match="Unsupported format: pdf"):
        transformer.transform(PAGE, "pdf")


def test_transform_file_keeps_unicode(transformer, tmp_path):
    path = tmp_path / "page.html"
    path.write_text("<title>Привіт</title><p>こんにちは</p>", encoding="utf-8")
    data = json.loads(transformer.transform_file(path, "json"))
    assert data["title"] == "Привіт"
    assert data["content"][0]["text"] == "こんにちは"
