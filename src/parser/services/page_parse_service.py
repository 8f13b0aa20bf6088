from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from parser.dom.builder import DOMBuilder
from parser.dom.document import HtmlDocument
from parser.exceptions import ParserError
from parser.model import ParseOptions
from webanalyzer.core.services.json_service import to_json

logger = logging.getLogger(__name__)


class PageParseService:
    """
    Converts HTML documents into a JSON representation of their DOM.
    Note: This is a stateless service; reading and writing files is left to the caller
    except for the convenience file entry point.
    """

    def __init__(self, options: Optional[ParseOptions] = None):
        self.options = options or ParseOptions()

    def parse_to_json(self, path: Union[str, Path]) -> str:
        """Reads an HTML file with the configured encoding and returns its DOM as JSON."""
        logger.debug("Parsing file %s with encoding %s", path, self.options.encoding)
        try:
            document = HtmlDocument.from_file(path, self.options.encoding)
            return self._convert_to_json(document)
        except Exception as e:
            logger.error("Error parsing HTML file: %s", e, exc_info=True)
            raise ParserError(f"Failed to parse HTML file: {e}") from e

    def parse_html_to_json(self, html: str) -> str:
        """Parses an HTML string and returns its DOM as JSON."""
        logger.debug("Parsing HTML string (length: %d)", len(html))
        try:
            document = HtmlDocument.from_string(html, self.options.encoding)
            return self._convert_to_json(document)
        except Exception as e:
            logger.error("Error parsing HTML string: %s", e, exc_info=True)
            raise ParserError(f"Failed to parse HTML string: {e}") from e

    def to_dom_dict(self, document: HtmlDocument) -> Dict[str, Any]:
        """Returns the DOM tree of a document as a JSON-compatible dictionary."""
        root = DOMBuilder(include_text=self.options.include_text).build(document)
        return root.to_dict() if root else {}

    def _convert_to_json(self, document: HtmlDocument) -> str:
        indent = 2 if self.options.pretty else None
        return to_json(self.to_dom_dict(document), indent=indent)
