# src/analyzer/services/html_analyzer_service.py
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union
from urllib.parse import urlparse

from bs4 import Tag

from analyzer.exceptions import AnalyzerError
from analyzer.model import AnalyzerOptions
from parser.dom.document import HtmlDocument

logger = logging.getLogger(__name__)

TOP_TAGS = 10
TOP_DOMAINS = 10


def _walk(element: Optional[Tag]) -> Iterator[Tuple[Tag, int]]:
    """Depth-first (element, depth) pairs below and including element; element itself has depth 0."""
    if element is None:
        return
    stack = [(element, 0)]
    while stack:
        current, depth = stack.pop()
        yield current, depth
        children = [child for child in current.children if isinstance(child, Tag)]
        stack.extend((child, depth + 1) for child in reversed(children))


def _label(key: str) -> str:
    return key[:1].upper() + key[1:]


class HtmlAnalyzer:
    """
    Service class for analyzing HTML documents and generating statistics.

    The result is a plain dictionary with one entry per requested section
    (basicInfo, elements, links, structure, content, performance).
    """

    def analyze(self, html: str, options: Optional[AnalyzerOptions] = None) -> Dict[str, Any]:
        options = options or AnalyzerOptions()
        logger.debug("Analyzing HTML content (%d characters)", len(html))
        try:
            document = HtmlDocument.from_string(html, options.encoding)
            return self._analyze_document(document, options)
        except Exception as e:
            logger.error("Error analyzing HTML: %s", e, exc_info=True)
            raise AnalyzerError(f"Failed to analyze HTML: {e}") from e

    def analyze_file(self, path: Union[str, Path], options: Optional[AnalyzerOptions] = None) -> Dict[str, Any]:
        options = options or AnalyzerOptions()
        logger.debug("Analyzing HTML file: %s", path)
        try:
            document = HtmlDocument.from_file(path, options.encoding)
            return self._analyze_document(document, options)
        except Exception as e:
            logger.error("Error analyzing HTML file: %s", e, exc_info=True)
            raise AnalyzerError(f"Failed to analyze HTML file: {e}") from e

    def _analyze_document(self, document: HtmlDocument, options: AnalyzerOptions) -> Dict[str, Any]:
        sections = [
            ("include_basic_info", "basicInfo", self._analyze_basic_info),
            ("include_elements", "elements", self._analyze_elements),
            ("include_links", "links", self._analyze_links),
            ("include_structure", "structure", self._analyze_structure),
            ("include_content", "content", self._analyze_content),
            ("include_performance", "performance", self._analyze_performance),
        ]
        stats: Dict[str, Any] = {}
        for flag, key, analyze in sections:
            if options.wants(flag):
                stats[key] = analyze(document)
        return stats

    # -------- Sections --------

    @staticmethod
    def _analyze_basic_info(document: HtmlDocument) -> Dict[str, Any]:
        root = document.root
        info: Dict[str, Any] = {
            "title": document.title,
            "doctype": document.doctype or "None",
            "charset": document.charset,
            "language": (root.get("lang") if root is not None else None) or "Not specified",
            "baseUri": document.base_uri,
        }

        metadata: Dict[str, str] = {}
        for meta in document.select("meta"):
            content = meta.get("content")
            if content is None:
                continue
            key = meta.get("name") or meta.get("property")
            if key:
                metadata[key] = content
        if metadata:
            info["metadata"] = metadata
        return info

    @staticmethod
    def _analyze_elements(document: HtmlDocument) -> Dict[str, Any]:
        def count(selector: str) -> int:
            return len(document.select(selector))

        all_elements = document.all_elements()
        by_tag: Dict[str, int] = {}
        for element in all_elements:
            tag = element.name.lower()
            by_tag[tag] = by_tag.get(tag, 0) + 1

        scripts = count("script")
        external_scripts = count("script[src]")
        return {
            "totalElements": len(all_elements),
            "elementsByTag": by_tag,
            "forms": count("form"),
            "inputFields": count("input"),
            "selectFields": count("select"),
            "textareas": count("textarea"),
            "buttons": count("button"),
            "images": count("img"),
            "videos": count("video"),
            "audios": count("audio"),
            "scripts": scripts,
            "externalScripts": external_scripts,
            "inlineScripts": scripts - external_scripts,
            "styleSheets": count("link[rel=stylesheet]"),
            "inlineStyles": count("style"),
        }

    @staticmethod
    def _analyze_links(document: HtmlDocument) -> Dict[str, Any]:
        links = document.select("a[href]")
        link_types = {"internal": 0, "external": 0, "mailto": 0, "javascript": 0, "anchor": 0, "other": 0}
        external_domains: List[str] = []

        for link in links:
            href = link.get("href", "").strip()
            if href.startswith("#"):
                link_types["anchor"] += 1
            elif href.startswith("mailto:"):
                link_types["mailto"] += 1
            elif href.startswith("javascript:"):
                link_types["javascript"] += 1
            elif href.startswith(("http://", "https://")):
                link_types["external"] += 1
                host = urlparse(href).hostname
                if host and host not in external_domains:
                    external_domains.append(host)
            elif href:
                link_types["internal"] += 1
            else:
                link_types["other"] += 1

        analysis: Dict[str, Any] = {"totalLinks": len(links), "linkTypes": link_types}
        if external_domains:
            analysis["externalDomains"] = external_domains
        return analysis

    @staticmethod
    def _analyze_structure(document: HtmlDocument) -> Dict[str, Any]:
        def count(selector: str) -> int:
            return len(document.select(selector))

        max_depth = 0
        total_depth = 0
        element_count = 0
        deepest = ""
        by_level: Dict[int, int] = {}

        # Walk order is document order, so the first element reaching a new maximum is the deepest one.
        for element, depth in _walk(document.body):
            element_count += 1
            total_depth += depth
            by_level[depth] = by_level.get(depth, 0) + 1
            if depth > max_depth or not deepest:
                max_depth = max(max_depth, depth)
                deepest = element.name

        return {
            "maxDOMDepth": max_depth,
            "averageNestingLevel": total_depth / element_count if element_count else 0,
            "elementsByLevel": by_level,
            "deepestElement": deepest,
            "sections": count("section"),
            "divs": count("div"),
            "articles": count("article"),
            "headers": count("header"),
            "footers": count("footer"),
            "navs": count("nav"),
        }

    @staticmethod
    def _analyze_content(document: HtmlDocument) -> Dict[str, Any]:
        def count(selector: str) -> int:
            return len(document.select(selector))

        text = document.text()
        html_size = len(document.outer_html())
        images = document.select("img")
        with_alt = sum(1 for img in images if img.get("alt"))

        return {
            "textLength": len(text),
            "wordCount": len(text.split()),
            "contentCodeRatio": len(text) / html_size if html_size else 0,
            "headings": {f"h{level}": count(f"h{level}") for level in range(1, 7)},
            "orderedLists": count("ol"),
            "unorderedLists": count("ul"),
            "listItems": count("li"),
            "tables": count("table"),
            "tableRows": count("tr"),
            "tableCells": count("td, th"),
            "imagesWithAlt": with_alt,
            "imagesWithoutAlt": len(images) - with_alt,
        }

    @staticmethod
    def _analyze_performance(document: HtmlDocument) -> Dict[str, Any]:
        def count(selector: str) -> int:
            return len(document.select(selector))

        return {
            "scripts": {
                "async": count("script[async]"),
                "defer": count("script[defer]"),
                "blocking": count("script:not([async]):not([defer])"),
            },
            "largeImagesWithoutDimensions": count("img:not([width]):not([height])"),
            "inlineStyles": count("style"),
            "inlineScripts": count("script:not([src])"),
            "preload": count("link[rel=preload]"),
            "prefetch": count("link[rel=prefetch]"),
            "preconnect": count("link[rel=preconnect]"),
            "modernImageFormats": count('picture, source[type^="image/webp"], source[type^="image/avif"]'),
            "lazyLoadedImages": count("img[loading=lazy]"),
        }

    # -------- Text output --------

    @staticmethod
    def format_as_text(stats: Dict[str, Any]) -> str:
        lines = ["Web Page Statistics", "=================", ""]

        if "basicInfo" in stats:
            lines.append("Document Information:")
            for key, value in stats["basicInfo"].items():
                if key == "metadata":
                    lines.append("  Metadata:")
                    lines.extend(f"    {name}: {content}" for name, content in value.items())
                else:
                    lines.append(f"  {_label(key)}: {value}")
            lines.append("")

        if "elements" in stats:
            elements = stats["elements"]
            lines.append("Element Counts:")
            lines.append(f"  Total Elements: {elements['totalElements']}")
            top = sorted(elements["elementsByTag"].items(), key=lambda item: -item[1])[:TOP_TAGS]
            lines.append(f"  Top {TOP_TAGS} Elements by Tag:")
            lines.extend(f"    {tag}: {count}" for tag, count in top)
            lines.append("  Other Element Types:")
            for key, value in elements.items():
                if key not in ("totalElements", "elementsByTag"):
                    lines.append(f"    {_label(key)}: {value}")
            lines.append("")

        if "links" in stats:
            links = stats["links"]
            lines.append("Link Analysis:")
            lines.append(f"  Total Links: {links['totalLinks']}")
            for link_type, count in links["linkTypes"].items():
                lines.append(f"  {_label(link_type)}: {count}")
            domains = links.get("externalDomains")
            if domains:
                lines.append(f"  External Domains: {len(domains)}")
                lines.append("  External Domain List:")
                lines.extend(f"    {domain}" for domain in domains[:TOP_DOMAINS])
                if len(domains) > TOP_DOMAINS:
                    lines.append(f"    ... and {len(domains) - TOP_DOMAINS} more")
            lines.append("")

        if "structure" in stats:
            structure = stats["structure"]
            lines.append("Structure:")
            lines.append(f"  Maximum DOM Depth: {structure['maxDOMDepth']}")
            lines.append(f"  Average Nesting Level: {structure['averageNestingLevel']:.2f}")
            lines.append(f"  Deepest Element: {structure['deepestElement']}")
            lines.append("  Structural Elements:")
            for key, value in structure.items():
                if key not in ("maxDOMDepth", "averageNestingLevel", "deepestElement", "elementsByLevel"):
                    lines.append(f"    {_label(key)}: {value}")
            lines.append("")

        if "content" in stats:
            content = stats["content"]
            lines.append("Content:")
            lines.append(f"  Text Length: {content['textLength']} characters")
            lines.append(f"  Word Count: {content['wordCount']} words")
            lines.append(f"  Content/Code Ratio: {content['contentCodeRatio'] * 100:.2f}%")
            lines.append("  Heading Distribution:")
            lines.extend(f"    {heading.upper()}: {count}" for heading, count in content["headings"].items())
            lines.append("")

        if "performance" in stats:
            performance = stats["performance"]
            lines.append("Performance Considerations:")
            lines.append("  Script Loading:")
            lines.extend(f"    {_label(kind)}: {count}" for kind, count in performance["scripts"].items())
            lines.append("  Other Performance Metrics:")
            for key, value in performance.items():
                if key != "scripts":
                    lines.append(f"    {_label(key)}: {value}")

        return "\n".join(lines) + "\n"
