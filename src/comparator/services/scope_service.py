import logging
from dataclasses import dataclass
from typing import List, Optional

from bs4 import Tag

from parser.dom.document import HtmlDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScopedDocuments:
    """
    The two documents a comparison runs on, after selector scoping.

    first/second are either the original documents or shell documents holding
    clones of the matched elements (is_shell). elements1/elements2 are the
    matched element lists (all elements when no selector was given).
    """
    first: HtmlDocument
    second: HtmlDocument
    elements1: List[Tag]
    elements2: List[Tag]
    selector: Optional[str] = None
    is_shell: bool = False

    @property
    def has_selector(self) -> bool:
        return bool(self.selector)


def builds_shell(selector: str) -> bool:
    """Id and class selectors isolate the matched elements in shell documents."""
    return "#" in selector or "." in selector


def build_shell(elements: List[Tag], encoding: str = "UTF-8") -> HtmlDocument:
    shell = HtmlDocument.create_shell(encoding)
    for element in elements:
        shell.append_clone(element)
    return shell


def scope_documents(doc1: HtmlDocument, doc2: HtmlDocument, selector: Optional[str]) -> ScopedDocuments:
    """
    Applies an optional selector to both documents.

    Without a selector both documents stay in scope. With a selector the
    matches are collected on each side; id/class selectors additionally replace
    each document by a shell holding only the matched elements, so document-wide
    checks (title, doctype, link counts) see nothing outside the selection.
    Plain tag selectors keep the full documents in scope.

    Raises:
        soupsieve.SelectorSyntaxError: If the selector is malformed.
    """
    if not selector:
        return ScopedDocuments(doc1, doc2, doc1.all_elements(), doc2.all_elements())

    elements1 = doc1.select(selector)
    elements2 = doc2.select(selector)
    logger.debug(
        "Selected %d elements from first document and %d elements from second document using selector: %s",
        len(elements1), len(elements2), selector
    )

    if builds_shell(selector):
        return ScopedDocuments(
            first=build_shell(elements1),
            second=build_shell(elements2),
            elements1=elements1,
            elements2=elements2,
            selector=selector,
            is_shell=True,
        )

    return ScopedDocuments(doc1, doc2, elements1, elements2, selector=selector)
