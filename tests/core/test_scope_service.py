# tests/core/test_scope_service.py
import pytest

from comparator.services.scope_service import build_shell, builds_shell, scope_documents
from parser.dom.document import HtmlDocument

HTML = """<html><head><title>Page</title></head><body>
<section id="intro" class="block"><p>Hello</p></section>
<section class="block"><p>World</p></section>
</body></html>"""


@pytest.fixture
def docs():
    return HtmlDocument.from_string(HTML), HtmlDocument.from_string(HTML)


@pytest.mark.parametrize("selector, expected", [
    ("#intro", True),
    (".block", True),
    ("section.block", True),
    ("section", False),
    ("body > p", False),
])
def test_builds_shell_only_for_id_and_class_selectors(selector, expected):
    assert builds_shell(selector) is expected


def test_no_selector_keeps_documents(docs):
    doc1, doc2 = docs
    scoped = scope_documents(doc1, doc2, None)

    assert scoped.first is doc1
    assert scoped.second is doc2
    assert not scoped.has_selector
    assert not scoped.is_shell
    assert len(scoped.elements1) == len(doc1.all_elements())


def test_tag_selector_keeps_full_documents_in_scope(docs):
    doc1, doc2 = docs
    scoped = scope_documents(doc1, doc2, "section")

    assert scoped.first is doc1
    assert scoped.has_selector
    assert not scoped.is_shell
    assert [el.name for el in scoped.elements1] == ["section", "section"]


def test_class_selector_builds_shells(docs):
    doc1, doc2 = docs
    scoped = scope_documents(doc1, doc2, ".block")

    assert scoped.is_shell
    assert scoped.first is not doc1
    assert scoped.first.title == ""
    assert [el.name for el in scoped.first.body.find_all(recursive=False)] == ["section", "section"]


def test_shell_holds_clones_and_leaves_source_untouched(docs):
    doc1, _ = docs
    matched = doc1.select("#intro")
    shell = build_shell(matched)

    shell.body.section["data-changed"] = "yes"

    assert "data-changed" not in doc1.select("#intro")[0].attrs
    assert len(doc1.select("section")) == 2
    assert shell.head is not None
    assert shell.charset == "UTF-8"
