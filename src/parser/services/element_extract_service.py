from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from bs4 import Tag

from parser.dom.document import HtmlDocument, attribute_items, element_text, outer_html
from parser.exceptions import ExtractorError
from parser.model import ExtractorOptions
from webanalyzer.core.services.json_service import to_json

logger = logging.getLogger(__name__)

TEXT_SEPARATOR = "----------"


class ElementExtractService:
    """
    Extracts elements matching a CSS selector and renders them as JSON, CSV or text.
    """

    def __init__(self, options: Optional[ExtractorOptions] = None):
        self.options = options or ExtractorOptions()

    def extract(self, html: str, selector: str) -> str:
        logger.debug("Extracting elements from HTML content using selector: %s", selector)
        try:
            document = HtmlDocument.from_string(html, self.options.encoding)
            return self._extract_from_document(document, selector)
        except Exception as e:
            logger.error("Error extracting elements: %s", e, exc_info=True)
            raise ExtractorError(f"Failed to extract elements: {e}") from e

    def extract_from_file(self, path: Union[str, Path], selector: str) -> str:
        logger.debug("Extracting elements from HTML file: %s using selector: %s", path, selector)
        try:
            document = HtmlDocument.from_file(path, self.options.encoding)
            return self._extract_from_document(document, selector)
        except Exception as e:
            logger.error("Error extracting elements from file: %s", e, exc_info=True)
            raise ExtractorError(f"Failed to extract elements from file: {e}") from e

    def _extract_from_document(self, document: HtmlDocument, selector: str) -> str:
        elements = document.select(selector)
        logger.debug("Found %d elements matching selector: %s", len(elements), selector)
        return self.format_items([self._to_item(element) for element in elements])

    def _to_item(self, element: Tag) -> Dict[str, str]:
        item = {"text": element_text(element)}
        attributes = attribute_items(element)

        if self.options.attributes:
            for name in self.options.attributes:
                if name in attributes:
                    item[name] = attributes[name]
        else:
            item.update(attributes)

        if self.options.include_html:
            item["html"] = outer_html(element)
        return item

    # -------- Formatting --------

    def format_items(self, items: List[Dict[str, str]]) -> str:
        fmt = self.options.format.lower()
        if fmt == "json":
            return to_json(items, indent=2 if self.options.pretty else None)
        if fmt == "csv":
            return self._format_as_csv(items)
        return self._format_as_text(items)

    @staticmethod
    def _format_as_csv(items: List[Dict[str, str]]) -> str:
        if not items:
            return ""

        # "text" always leads; other columns follow in first-seen order.
        headers = ["text"]
        for item in items:
            for key in item:
                if key not in headers:
                    headers.append(key)

        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=headers, restval="", lineterminator="\n")
        writer.writeheader()
        writer.writerows(items)
        return buffer.getvalue().rstrip("\n")

    @staticmethod
    def _format_as_text(items: List[Dict[str, str]]) -> str:
        blocks = []
        for item in items:
            lines = [f"TEXT: {item['text']}"]
            for key, value in item.items():
                if key not in ("text", "html"):
                    lines.append(f"{key.upper()}: {value}")
            if "html" in item:
                lines.append(f"HTML:\n{item['html']}")
            lines.append(TEXT_SEPARATOR)
            blocks.append("\n".join(lines) + "\n")
        return "\n".join(blocks)
