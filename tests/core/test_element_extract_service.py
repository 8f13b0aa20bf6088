# tests/core/test_element_extract_service.py
import json

import pytest

from parser.exceptions import ExtractorError
from parser.model import ExtractorOptions
from parser.services.element_extract_service import ElementExtractService

HTML = """<html><body>
<a href="/one" class="nav">One</a>
<a href="/two" title="Second, &quot;quoted&quot;">Two</a>
<p>not a link</p>
</body></html>"""


def extract(selector="a", **options):
    return ElementExtractService(ExtractorOptions(**options)).extract(HTML, selector)


def test_json_includes_text_and_all_attributes():
    items = json.loads(extract())
    assert items == [
        {"text": "One", "href": "/one", "class": "nav"},
        {"text": "Two", "href": "/two", "title": 'Second, "quoted"'},
    ]


def test_attribute_filter_keeps_only_present_attributes():
    items = json.loads(extract(attributes=["title", "missing"]))
    assert items == [{"text": "One"}, {"text": "Two", "title": 'Second, "quoted"'}]


def test_include_html():
    items = json.loads(extract(selector="p", include_html=True))
    assert items == [{"text": "not a link", "html": "<p>not a link</p>"}]


def test_csv_output_quotes_values():
    lines = extract(format="csv").split("\n")
    assert lines[0] == "text,href,class,title"
    assert lines[1] == "One,/one,nav,"
    assert lines[2] == 'Two,/two,,"Second, ""quoted"""'


def test_csv_without_matches_is_empty():
    assert extract(selector="table", format="csv") == ""


def test_text_output_blocks():
    output = extract(format="txt", attributes=["href"])
    assert output == "TEXT: One\nHREF: /one\n----------\n\nTEXT: Two\nHREF: /two\n----------\n"


def test_unknown_format_falls_back_to_text():
    assert extract(selector="p", format="yaml").startswith("TEXT: not a link")


def test_invalid_selector_is_wrapped():
    with pytest.raises(ExtractorError, match="Failed to extract elements"):
        extract(selector="a[")


def test_extract_from_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(HTML, encoding="utf-8")
    service = ElementExtractService(ExtractorOptions(pretty=True))
    output = service.extract_from_file(path, "a.nav")
    assert json.loads(output) == [{"text": "One", "href": "/one", "class": "nav"}]
    assert output.startswith("[\n  {")
