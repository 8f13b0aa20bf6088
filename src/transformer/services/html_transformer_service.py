# src/transformer/services/html_transformer_service.py
"""HTML to Markdown, plain text and JSON conversion.

Markdown output goes through markdownify with a converter that honours the
link and image options; plain text and JSON are built directly from the
parsed document.
"""
import copy
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from markdownify import MarkdownConverter as BaseMarkdownConverter

from parser.dom.document import HtmlDocument, element_text, own_text
from transformer.exceptions import TransformerError
from transformer.model import OutputFormat, TransformOptions
from webanalyzer.core.services.json_service import to_json

logger = logging.getLogger(__name__)

# Elements never rendered in any output format.
DROPPED_ELEMENTS = ["script", "style", "noscript", "template"]

_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


class OptionAwareConverter(BaseMarkdownConverter):
    """Markdownify converter that can drop link targets and images."""

    def __init__(self, preserve_links: bool = True, include_images: bool = True, **kwargs):
        super().__init__(**kwargs)
        self.preserve_links = preserve_links
        self.include_images = include_images

    def convert_a(self, el, text, parent_tags):
        if not self.preserve_links:
            return text.strip() if text else ""
        return super().convert_a(el, text, parent_tags)

    def convert_img(self, el, text, parent_tags):
        if not self.include_images:
            return ""
        alt = el.get("alt") or el.get("title") or "image"
        return f"![{alt}]({el.get('src', '')})"


class HtmlTransformer:
    """
    Service class for transforming HTML to various output formats.
    Supported formats: markdown, plain, json.
    """

    def transform(self, html: str, fmt: str, options: Optional[TransformOptions] = None) -> str:
        options = options or TransformOptions()
        logger.debug("Transforming HTML (%d characters) to %s", len(html), fmt)
        output_format = self._resolve_format(fmt)
        try:
            document = HtmlDocument.from_string(html, options.encoding)
            return self._render(document, output_format, options)
        except Exception as e:
            logger.error("Error transforming HTML: %s", e, exc_info=True)
            raise TransformerError(f"Failed to transform HTML: {e}") from e

    def transform_file(self, path: Union[str, Path], fmt: str, options: Optional[TransformOptions] = None) -> str:
        options = options or TransformOptions()
        logger.debug("Transforming HTML file: %s to %s", path, fmt)
        output_format = self._resolve_format(fmt)
        try:
            document = HtmlDocument.from_file(path, options.encoding)
            return self._render(document, output_format, options)
        except Exception as e:
            logger.error("Error transforming HTML file: %s", e, exc_info=True)
            raise TransformerError(f"Failed to transform HTML file: {e}") from e

    @staticmethod
    def _resolve_format(fmt: str) -> OutputFormat:
        try:
            return OutputFormat((fmt or "").strip().lower())
        except ValueError:
            raise TransformerError(f"Unsupported format: {fmt}") from None

    def _render(self, document: HtmlDocument, output_format: OutputFormat, options: TransformOptions) -> str:
        if output_format is OutputFormat.MARKDOWN:
            return self.to_markdown(document, options)
        if output_format is OutputFormat.PLAIN:
            return self.to_plain_text(document, options)
        return self.to_json_text(document, options)

    # -------- Markdown --------

    @staticmethod
    def to_markdown(document: HtmlDocument, options: TransformOptions) -> str:
        parts = []
        if document.title:
            parts.append(f"# {document.title}\n\n")

        body = document.body
        if body is not None:
            body = copy.copy(body)
            for element in body.find_all(DROPPED_ELEMENTS):
                element.decompose()

            converter = OptionAwareConverter(
                preserve_links=options.preserve_links,
                include_images=options.include_images,
                heading_style="atx",
                bullets="*",
                wrap=False,
            )
            markdown = converter.convert_soup(body).strip()
            if markdown:
                parts.append(_EXCESS_BLANK_LINES.sub("\n\n", markdown) + "\n")

        return "".join(parts)

    # -------- Plain text --------

    @staticmethod
    def to_plain_text(document: HtmlDocument, options: TransformOptions) -> str:
        text: List[str] = []
        if document.title:
            text.append(f"{document.title.upper()}\n\n")

        body = document.body
        if body is None:
            return "".join(text)

        for element in body.find_all(True):
            tag = element.name
            if tag in ("h1", "h2", "h3", "h4", "h5", "h6"):
                text.append(f"\n{element_text(element).upper()}\n\n")
            elif tag == "p":
                text.append(f"{own_text(element)}\n\n")
            elif tag == "li":
                text.append(f"- {own_text(element)}\n")
            elif tag == "a":
                if options.preserve_links:
                    text.append(f"{element_text(element)} [{element.get('href', '')}]")
                else:
                    text.append(element_text(element))
            elif tag == "br":
                text.append("\n")
            elif tag == "hr":
                text.append("\n----------\n\n")
            elif tag == "img" and options.include_images:
                text.append(f"[Image: {element.get('alt') or 'image'}]")

        return "".join(text)

    # -------- JSON --------

    @staticmethod
    def to_json_text(document: HtmlDocument, options: TransformOptions) -> str:
        content: List[Dict[str, Any]] = []

        for heading in document.select("h1, h2, h3, h4, h5, h6"):
            content.append({"type": "heading", "level": int(heading.name[1]), "text": element_text(heading)})

        for paragraph in document.select("p"):
            item: Dict[str, Any] = {"type": "paragraph", "text": element_text(paragraph)}
            links = paragraph.select("a")
            if links and options.preserve_links:
                item["links"] = [{"text": element_text(link), "url": link.get("href", "")} for link in links]
            content.append(item)

        for html_list in document.select("ul, ol"):
            content.append({
                "type": "unordered_list" if html_list.name == "ul" else "ordered_list",
                "items": [element_text(li) for li in html_list.select("li")],
            })

        if options.include_images:
            for img in document.select("img"):
                content.append({
                    "type": "image",
                    "src": img.get("src", ""),
                    "alt": img.get("alt", ""),
                    "title": img.get("title", ""),
                })

        result = {
            "title": document.title,
            "charset": document.charset,
            "baseUri": document.base_uri,
            "content": content,
        }
        return to_json(result, indent=2 if options.pretty else None)
