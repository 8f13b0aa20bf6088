# tests/core/test_html_analyzer.py
import pytest

from analyzer.exceptions import AnalyzerError
from analyzer.model import AnalyzerOptions
from analyzer.services.html_analyzer_service import HtmlAnalyzer

PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="description" content="Test page">
  <meta property="og:title" content="OG">
  <title>Stats</title>
  <link rel="stylesheet" href="/s.css">
  <link rel="preload" href="/font.woff2">
  <style>p { margin: 0 }</style>
  <script src="/a.js" async></script>
  <script>var x = 1;</script>
</head>
<body>
  <header><nav><a href="#top">Top</a></nav></header>
  <section>
    <h1>Title</h1>
    <p>Some words here <a href="/about">About</a> <a href="https://example.com/x">Ext</a></p>
    <p><a href="mailto:me@example.com">Mail</a> <a href="javascript:void(0)">JS</a> <a href="">Empty</a></p>
    <img src="a.webp" alt="A" width="10" loading="lazy">
    <img src="b.png">
    <ul><li>One</li><li>Two</li></ul>
  </section>
  <footer><form><input name="q"><button>Go</button></form></footer>
</body>
</html>"""


@pytest.fixture
def stats():
    return HtmlAnalyzer().analyze(PAGE)


def test_all_sections_by_default(stats):
    assert list(stats) == ["basicInfo", "elements", "links", "structure", "content", "performance"]


def test_basic_info(stats):
    info = stats["basicInfo"]
    assert info["title"] == "Stats"
    assert info["doctype"] == "<!DOCTYPE html>"
    assert info["charset"] == "UTF-8"
    assert info["language"] == "en"
    assert info["metadata"] == {"description": "Test page", "og:title": "OG"}


def test_element_counts(stats):
    elements = stats["elements"]
    assert elements["elementsByTag"]["a"] == 6
    assert elements["forms"] == 1
    assert elements["inputFields"] == 1
    assert elements["buttons"] == 1
    assert elements["images"] == 2
    assert elements["scripts"] == 2
    assert elements["externalScripts"] == 1
    assert elements["inlineScripts"] == 1
    assert elements["styleSheets"] == 1
    assert elements["inlineStyles"] == 1


def test_link_types(stats):
    links = stats["links"]
    assert links["totalLinks"] == 6
    assert links["linkTypes"] == {
        "internal": 1, "external": 1, "mailto": 1, "javascript": 1, "anchor": 1, "other": 1,
    }
    assert links["externalDomains"] == ["example.com"]


def test_structure(stats):
    structure = stats["structure"]
    # body > header > nav > a
    assert structure["maxDOMDepth"] == 3
    assert structure["deepestElement"] == "a"
    assert structure["elementsByLevel"][0] == 1
    assert structure["sections"] == 1
    assert structure["headers"] == 1
    assert structure["footers"] == 1
    assert structure["navs"] == 1


def test_content(stats):
    content = stats["content"]
    assert content["headings"] == {"h1": 1, "h2": 0, "h3": 0, "h4": 0, "h5": 0, "h6": 0}
    assert content["unorderedLists"] == 1
    assert content["listItems"] == 2
    assert content["imagesWithAlt"] == 1
    assert content["imagesWithoutAlt"] == 1
    assert 0 < content["contentCodeRatio"] < 1
    assert content["wordCount"] > 5


def test_performance(stats):
    performance = stats["performance"]
    assert performance["scripts"] == {"async": 1, "defer": 0, "blocking": 1}
    assert performance["largeImagesWithoutDimensions"] == 1
    assert performance["preload"] == 1
    assert performance["modernImageFormats"] == 0
    assert performance["lazyLoadedImages"] == 1


def test_selected_sections_only():
    options = AnalyzerOptions.from_includes(["links", "basic"])
    stats = HtmlAnalyzer().analyze(PAGE, options)
    assert list(stats) == ["basicInfo", "links"]


def test_includes_all_and_unknown():
    assert AnalyzerOptions.from_includes(["all"]).include_all
    assert AnalyzerOptions.from_includes([]).include_all
    with pytest.raises(ValueError, match="Unknown statistics section 'colors'"):
        AnalyzerOptions.from_includes(["colors"])


def test_defaults_for_minimal_document():
    stats = HtmlAnalyzer().analyze("<p>hi</p>", AnalyzerOptions.from_includes(["basic"]))
    assert stats["basicInfo"]["doctype"] == "None"
    assert stats["basicInfo"]["language"] == "Not specified"
    assert "metadata" not in stats["basicInfo"]


def test_text_format(stats):
    text = HtmlAnalyzer().format_as_text(stats)
    assert text.startswith("Web Page Statistics\n=================\n\nDocument Information:\n")
    assert "  Title: Stats\n" in text
    assert "    og:title: OG\n" in text
    assert "  Total Links: 6\n" in text
    assert "    example.com\n" in text
    assert "  Maximum DOM Depth: 3\n" in text
    assert "    H1: 1\n" in text
    assert "    Async: 1\n" in text
    assert "    LazyLoadedImages: 1\n" in text


def test_analyze_file_errors(tmp_path):
    with pytest.raises(AnalyzerError, match="Failed to analyze HTML file"):
        HtmlAnalyzer().analyze_file(tmp_path / "missing.html")
