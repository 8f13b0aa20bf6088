# src/parser/dom/document.py
import codecs
import copy
import logging
import re
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from bs4 import BeautifulSoup, CData, Doctype, NavigableString, Tag

logger = logging.getLogger(__name__)

# lxml repairs malformed markup and always builds an <html>/<body> skeleton.
PARSER = "lxml"
DEFAULT_ENCODING = "UTF-8"

# Elements whose string content is data, not visible text.
NON_TEXT_ELEMENTS = frozenset({"script", "style", "template"})

_CHARSET_IN_CONTENT = re.compile(r"charset\s*=\s*['\"]?([\w.:-]+)", re.IGNORECASE)


def normalize_charset(name: str) -> str:
    """Returns the canonical upper-case name of a character set (e.g. 'UTF-8')."""
    cleaned = name.strip()
    try:
        canonical = codecs.lookup(cleaned).name
    except LookupError:
        return cleaned.upper()
    return canonical.upper()


def _normalize_space(text: str) -> str:
    return " ".join(text.split())


def _visible_strings(tag: Tag, recursive: bool = True) -> Iterator[str]:
    """Yields the text nodes of a tag, skipping comments and script/style data."""
    nodes = tag.descendants if recursive else tag.children
    for node in nodes:
        if type(node) not in (NavigableString, CData):
            continue
        parent = node.parent
        if parent is not None and parent.name in NON_TEXT_ELEMENTS:
            continue
        yield str(node)


def element_text(tag: Tag) -> str:
    """Whitespace-normalized text of the tag and all of its descendants."""
    if tag.name in NON_TEXT_ELEMENTS:
        return ""
    return _normalize_space(" ".join(_visible_strings(tag)))


def own_text(tag: Tag) -> str:
    """Whitespace-normalized text of the tag's direct text children only."""
    if tag.name in NON_TEXT_ELEMENTS:
        return ""
    return _normalize_space(" ".join(_visible_strings(tag, recursive=False)))


def inner_html(tag: Tag) -> str:
    return tag.decode_contents()


def outer_html(tag: Tag) -> str:
    return str(tag)


def class_names(tag: Tag) -> List[str]:
    """The whitespace-split tokens of the class attribute."""
    value = tag.get("class")
    if not value:
        return []
    if isinstance(value, str):
        return value.split()
    return [token for item in value for token in item.split()]


def attribute_items(tag: Tag) -> Dict[str, str]:
    """Maps attribute names to string values; multi-valued attributes are space-joined."""
    items: Dict[str, str] = {}
    for name, value in tag.attrs.items():
        items[name] = " ".join(value) if isinstance(value, list) else (value or "")
    return items


def element_locator(tag: Tag) -> str:
    """
    Builds a CSS-like locator for an element: '#id' when it has an id,
    otherwise 'tag.class1.class2', otherwise the bare tag name.
    """
    element_id = tag.get("id")
    if element_id:
        return f"#{element_id}"
    classes = class_names(tag)
    if classes:
        return f"{tag.name}." + ".".join(classes)
    return tag.name


class HtmlDocument:
    """
    A parsed HTML document.

    Wraps a BeautifulSoup tree and exposes the document-level accessors
    (doctype, title, charset) together with selector evaluation and text
    extraction used by the analysis services.
    """

    def __init__(self, soup: BeautifulSoup, encoding: str = DEFAULT_ENCODING, base_uri: str = ""):
        self.soup = soup
        self.encoding = encoding
        self.base_uri = base_uri

    # -------- Construction --------

    @classmethod
    def from_string(cls, html: str, encoding: str = DEFAULT_ENCODING, base_uri: str = "") -> "HtmlDocument":
        # A leading BOM would otherwise end up as text in the body.
        clean_html = (html or "").replace("\ufeff", "")
        return cls(BeautifulSoup(clean_html, PARSER), encoding=encoding, base_uri=base_uri)

    @classmethod
    def from_file(cls, path: Union[str, Path], encoding: str = DEFAULT_ENCODING) -> "HtmlDocument":
        """
        Reads and parses an HTML file.

        Raises:
            FileNotFoundError: If the path does not exist.
            LookupError: If the encoding is unknown.
            UnicodeDecodeError: If the bytes cannot be decoded with the encoding.
        """
        codecs.lookup(encoding)
        file_path = Path(path)
        html = file_path.read_text(encoding=encoding)
        logger.debug("Read %d characters from %s (%s)", len(html), file_path, encoding)
        return cls.from_string(html, encoding=encoding, base_uri=file_path.resolve().as_uri())

    @classmethod
    def create_shell(cls, encoding: str = DEFAULT_ENCODING) -> "HtmlDocument":
        """Creates an empty document holding only <html>, <head> and <body>."""
        soup = BeautifulSoup("", PARSER)
        html = soup.new_tag("html")
        html.append(soup.new_tag("head"))
        html.append(soup.new_tag("body"))
        soup.append(html)
        return cls(soup, encoding=encoding)

    def append_clone(self, tag: Tag) -> None:
        """Appends a deep copy of a tag (from any document) to this document's body."""
        self.body.append(copy.copy(tag))

    # -------- Document properties --------

    @property
    def doctype(self) -> Optional[str]:
        for item in self.soup.contents:
            if isinstance(item, Doctype):
                return f"<!DOCTYPE {item}>"
        return None

    @property
    def title(self) -> str:
        title_tag = self.soup.find("title")
        return element_text(title_tag) if title_tag else ""

    @property
    def charset(self) -> str:
        meta = self.soup.find("meta", attrs={"charset": True})
        if meta and meta.get("charset"):
            return normalize_charset(meta["charset"])

        for meta in self.soup.find_all("meta", attrs={"http-equiv": True}):
            if str(meta.get("http-equiv", "")).lower() != "content-type":
                continue
            match = _CHARSET_IN_CONTENT.search(meta.get("content", ""))
            if match:
                return normalize_charset(match.group(1))

        return normalize_charset(self.encoding)

    @property
    def root(self) -> Optional[Tag]:
        return self.soup.find("html")

    @property
    def head(self) -> Optional[Tag]:
        return self.soup.head

    @property
    def body(self) -> Optional[Tag]:
        return self.soup.body

    # -------- Traversal --------

    def all_elements(self) -> List[Tag]:
        """Every element of the document in document order."""
        return self.soup.find_all(True)

    def select(self, selector: str) -> List[Tag]:
        """
        Evaluates a CSS selector against the document.

        Raises:
            soupsieve.SelectorSyntaxError: If the selector is malformed.
        """
        return self.soup.select(selector)

    def text(self) -> str:
        return _normalize_space(" ".join(_visible_strings(self.soup)))

    def outer_html(self) -> str:
        return str(self.soup)

    def __repr__(self) -> str:
        return f"HtmlDocument(title={self.title!r}, elements={len(self.all_elements())})"
