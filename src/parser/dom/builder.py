# src/parser/dom/builder.py
import logging
from typing import Optional

from bs4 import Tag

from .core import DomNode
from .document import HtmlDocument, attribute_items, own_text

logger = logging.getLogger(__name__)


class DOMBuilder:
    """
    Builder responsible for turning a parsed HtmlDocument into a tree of DomNode models.
    """

    def __init__(self, include_text: bool = True):
        self.include_text = include_text

    def build(self, document: HtmlDocument) -> Optional[DomNode]:
        """
        Builds the DomNode tree rooted at the document's <html> element.

        Returns:
            Optional[DomNode]: The root node, or None for a document without elements.
        """
        root = document.root
        if root is None:
            logger.debug("Document has no root element; nothing to build.")
            return None
        return self._build_tree(root)

    def _build_tree(self, tag: Tag) -> DomNode:
        """Recursively converts a BeautifulSoup Tag and its child elements."""
        children = [self._build_tree(child) for child in tag.children if isinstance(child, Tag)]

        text = None
        if self.include_text:
            text = own_text(tag) or None

        return DomNode(
            tag_name=tag.name,
            attributes=attribute_items(tag),
            text=text,
            children=children,
        )
