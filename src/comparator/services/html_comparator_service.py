# src/comparator/services/html_comparator_service.py
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Set, Union

from bs4 import Tag

from comparator.exceptions import ComparatorError
from comparator.model import (
    ComparisonMode,
    ComparisonOptions,
    ComparisonResult,
    Difference,
    DifferenceType,
)
from comparator.services.scope_service import ScopedDocuments, scope_documents
from parser.dom.document import (
    HtmlDocument,
    attribute_items,
    class_names,
    element_locator,
    element_text,
    inner_html,
)

logger = logging.getLogger(__name__)

# Number of examples listed in UniqueLinks / UniqueImages / UniqueAttributes details.
MAX_EXAMPLES = 5


def _examples(values: Sequence[str]) -> str:
    """Joins the first MAX_EXAMPLES values, marking truncation with '...'."""
    listed = ", ".join(values[:MAX_EXAMPLES])
    return listed + ("..." if len(values) > MAX_EXAMPLES else "")


def _only_in(first: Sequence[str], second: Sequence[str]) -> List[str]:
    """Sorted distinct values of first that do not occur in second."""
    return sorted(set(first) - set(second))


def _count_diff(dtype: DifferenceType, description: str, count1: int, count2: int) -> Optional[Difference]:
    if count1 == count2:
        return None
    return Difference(type=dtype, description=description, details=f"First: {count1}, Second: {count2}")


class HtmlComparator:
    """
    Service class for comparing HTML documents.

    Three strategies are available (structure, content, visual); each returns
    its differences in a fixed emission order. A comparison is a pure
    computation over two parsed documents: no state is kept between calls.
    """

    def __init__(self):
        self._strategies: Dict[ComparisonMode, Callable[[ScopedDocuments, Set[str]], List[Difference]]] = {
            ComparisonMode.STRUCTURE: self._compare_structure,
            ComparisonMode.CONTENT: self._compare_content,
            ComparisonMode.VISUAL: self._compare_visual,
        }

    # -------- Public API --------

    def compare(self, html1: str, html2: str, options: Optional[ComparisonOptions] = None) -> ComparisonResult:
        """Compares two HTML strings."""
        options = options or ComparisonOptions()
        logger.debug("Comparing HTML content (%d chars vs %d chars)", len(html1), len(html2))
        try:
            doc1 = HtmlDocument.from_string(html1, options.encoding)
            doc2 = HtmlDocument.from_string(html2, options.encoding)
            return self._compare_documents(doc1, doc2, options)
        except Exception as e:
            logger.error("Error comparing HTML: %s", e, exc_info=True)
            raise ComparatorError(f"Failed to compare HTML: {e}") from e

    def compare_files(
            self,
            path1: Union[str, Path],
            path2: Union[str, Path],
            options: Optional[ComparisonOptions] = None
    ) -> ComparisonResult:
        """Reads both files with options.encoding and compares them."""
        options = options or ComparisonOptions()
        logger.debug("Comparing HTML files: %s vs %s", path1, path2)
        try:
            doc1 = HtmlDocument.from_file(path1, options.encoding)
            doc2 = HtmlDocument.from_file(path2, options.encoding)
            return self._compare_documents(doc1, doc2, options)
        except Exception as e:
            logger.error("Error comparing HTML files: %s", e, exc_info=True)
            raise ComparatorError(f"Failed to compare HTML files: {e}") from e

    def compare_documents(
            self,
            doc1: HtmlDocument,
            doc2: HtmlDocument,
            options: Optional[ComparisonOptions] = None
    ) -> ComparisonResult:
        """Compares two already parsed documents."""
        options = options or ComparisonOptions()
        try:
            return self._compare_documents(doc1, doc2, options)
        except Exception as e:
            logger.error("Error comparing HTML documents: %s", e, exc_info=True)
            raise ComparatorError(f"Failed to compare HTML documents: {e}") from e

    # -------- Orchestration --------

    def _compare_documents(self, doc1: HtmlDocument, doc2: HtmlDocument, options: ComparisonOptions) -> ComparisonResult:
        scoped = scope_documents(doc1, doc2, options.selector)
        ignored = set(options.ignore_attributes)

        strategy = self._strategies[options.mode]
        differences = strategy(scoped, ignored)
        logger.info("Comparison (%s) found %d differences", options.mode.value, len(differences))

        return ComparisonResult(
            mode=options.mode,
            selector=options.selector,
            ignore_attributes=list(options.ignore_attributes),
            differences=differences,
        )

    # -------- Mode: structure --------

    def _compare_structure(self, scoped: ScopedDocuments, _ignored: Set[str]) -> List[Difference]:
        doc1, doc2 = scoped.first, scoped.second
        differences: List[Difference] = []

        if doc1.doctype != doc2.doctype:
            differences.append(Difference(
                type=DifferenceType.DOCTYPE,
                description="Document types differ",
                details=f"First: {doc1.doctype or 'None'}, Second: {doc2.doctype or 'None'}",
            ))

        if doc1.title != doc2.title:
            differences.append(Difference(
                type=DifferenceType.TITLE,
                description="Document titles differ",
                details=f"First: '{doc1.title}', Second: '{doc2.title}'",
            ))

        if doc1.charset != doc2.charset:
            differences.append(Difference(
                type=DifferenceType.CHARSET,
                description="Document character encodings differ",
                details=f"First: {doc1.charset}, Second: {doc2.charset}",
            ))

        tag_counts1 = self.count_elements_by_tag(doc1)
        tag_counts2 = self.count_elements_by_tag(doc2)
        all_tags = list(tag_counts1) + [tag for tag in tag_counts2 if tag not in tag_counts1]

        for tag in all_tags:
            diff = _count_diff(
                DifferenceType.ELEMENT_COUNT, f"Different number of <{tag}> elements",
                tag_counts1.get(tag, 0), tag_counts2.get(tag, 0)
            )
            if diff:
                differences.append(diff)

        diff = _count_diff(
            DifferenceType.DOM_DEPTH, "Different maximum DOM depth",
            self.calculate_max_depth(doc1.body), self.calculate_max_depth(doc2.body)
        )
        if diff:
            differences.append(diff)

        differences.extend(self._compare_head_elements(doc1, doc2))
        return differences

    @staticmethod
    def _compare_head_elements(doc1: HtmlDocument, doc2: HtmlDocument) -> List[Difference]:
        checks = [
            ("head > meta", DifferenceType.META_COUNT, "Different number of meta tags"),
            ("head > link[rel=stylesheet]", DifferenceType.STYLESHEET_COUNT, "Different number of stylesheet links"),
            ("head > script", DifferenceType.SCRIPT_COUNT, "Different number of script tags in head"),
        ]
        differences = []
        for selector, dtype, description in checks:
            diff = _count_diff(dtype, description, len(doc1.select(selector)), len(doc2.select(selector)))
            if diff:
                differences.append(diff)
        return differences

    # -------- Mode: content --------

    def _compare_content(self, scoped: ScopedDocuments, ignored: Set[str]) -> List[Difference]:
        doc1, doc2 = scoped.first, scoped.second
        differences: List[Difference] = []

        text1, text2 = doc1.text(), doc2.text()
        if text1 != text2:
            differences.append(Difference(
                type=DifferenceType.TEXT_CONTENT,
                description="Overall text content differs",
                details=f"Character length - First: {len(text1)}, Second: {len(text2)}",
            ))

        links1, links2 = doc1.select("a[href]"), doc2.select("a[href]")
        diff = _count_diff(DifferenceType.LINK_COUNT, "Different number of links", len(links1), len(links2))
        if diff:
            differences.append(diff)

        differences.extend(self._unique_values(
            DifferenceType.UNIQUE_LINKS, "Links", "links",
            [link.get("href", "") for link in links1],
            [link.get("href", "") for link in links2],
        ))

        images1, images2 = doc1.select("img"), doc2.select("img")
        diff = _count_diff(DifferenceType.IMAGE_COUNT, "Different number of images", len(images1), len(images2))
        if diff:
            differences.append(diff)

        differences.extend(self._unique_values(
            DifferenceType.UNIQUE_IMAGES, "Images", "sources",
            [img.get("src", "") for img in images1],
            [img.get("src", "") for img in images2],
        ))

        differences.extend(self._compare_attribute_sets(doc1, doc2, ignored))

        if scoped.has_selector and not scoped.is_shell:
            differences.extend(self._compare_matched_elements(scoped.elements1, scoped.elements2, ignored))

        return differences

    @staticmethod
    def _unique_values(
            dtype: DifferenceType, subject: str, noun: str, values1: List[str], values2: List[str]
    ) -> List[Difference]:
        differences = []
        for side, only in (("first", _only_in(values1, values2)), ("second", _only_in(values2, values1))):
            if only:
                differences.append(Difference(
                    type=dtype,
                    description=f"{subject} that exist only in the {side} document",
                    details=f"Count: {len(only)}, First {min(MAX_EXAMPLES, len(only))} {noun}: {_examples(only)}",
                ))
        return differences

    @staticmethod
    def qualified_attributes(doc: HtmlDocument, ignored: Set[str]) -> List[str]:
        """All attributes of the document as 'tag[name=value]' strings, minus ignored names."""
        qualified = []
        for element in doc.all_elements():
            for name, value in attribute_items(element).items():
                if name not in ignored:
                    qualified.append(f"{element.name}[{name}={value}]")
        return qualified

    def _compare_attribute_sets(self, doc1: HtmlDocument, doc2: HtmlDocument, ignored: Set[str]) -> List[Difference]:
        attrs1 = self.qualified_attributes(doc1, ignored)
        attrs2 = self.qualified_attributes(doc2, ignored)

        differences = []
        for side, only in (("first", _only_in(attrs1, attrs2)), ("second", _only_in(attrs2, attrs1))):
            if only:
                differences.append(Difference(
                    type=DifferenceType.UNIQUE_ATTRIBUTES,
                    description=f"Attributes that exist only in the {side} document",
                    details=f"Count: {len(only)}, Examples: {_examples(only)}",
                ))
        return differences

    @staticmethod
    def _filtered_attributes(element: Tag, ignored: Set[str]) -> Dict[str, str]:
        return {name: value for name, value in attribute_items(element).items() if name not in ignored}

    def _compare_matched_elements(
            self, elements1: List[Tag], elements2: List[Tag], ignored: Set[str]
    ) -> List[Difference]:
        """Compares selector matches pairwise by position."""
        differences: List[Difference] = []

        for index in range(max(len(elements1), len(elements2))):
            if index >= len(elements2):
                element1 = elements1[index]
                differences.append(Difference(
                    type=DifferenceType.MISSING_ELEMENT,
                    description=f"<{element1.name}> element exists only in the first document",
                    location=element_locator(element1),
                    details=f"Index: {index}",
                ))
                continue

            if index >= len(elements1):
                element2 = elements2[index]
                differences.append(Difference(
                    type=DifferenceType.ADDED_ELEMENT,
                    description=f"<{element2.name}> element exists only in the second document",
                    location=element_locator(element2),
                    details=f"Index: {index}",
                ))
                continue

            element1, element2 = elements1[index], elements2[index]

            attrs1 = self._filtered_attributes(element1, ignored)
            attrs2 = self._filtered_attributes(element2, ignored)
            if attrs1 != attrs2:
                differences.append(Difference(
                    type=DifferenceType.ATTRIBUTE_DIFFERENCE,
                    description="Element attributes differ",
                    location=element_locator(element1),
                    details=f"First: {attrs1}, Second: {attrs2}",
                ))

            text1, text2 = element_text(element1), element_text(element2)
            if text1 != text2:
                differences.append(Difference(
                    type=DifferenceType.TEXT_DIFFERENCE,
                    description="Element text differs",
                    location=element_locator(element1),
                    details=f"First: '{text1}', Second: '{text2}'",
                ))

        return differences

    # -------- Mode: visual --------

    def _compare_visual(self, scoped: ScopedDocuments, _ignored: Set[str]) -> List[Difference]:
        doc1, doc2 = scoped.first, scoped.second
        differences: List[Difference] = []

        styles1, styles2 = doc1.select("style"), doc2.select("style")
        diff = _count_diff(DifferenceType.STYLE_COUNT, "Different number of style elements", len(styles1), len(styles2))
        if diff:
            differences.append(diff)
        elif styles1:
            for style1, style2 in zip(styles1, styles2):
                css1, css2 = inner_html(style1), inner_html(style2)
                if css1 != css2:
                    differences.append(Difference(
                        type=DifferenceType.STYLE_CONTENT,
                        description="Style content differs",
                        details=f"First: '{css1}', Second: '{css2}'",
                    ))

        sheets1 = sorted(link.get("href", "") for link in doc1.select("link[rel=stylesheet]"))
        sheets2 = sorted(link.get("href", "") for link in doc2.select("link[rel=stylesheet]"))
        if sheets1 != sheets2:
            differences.append(Difference(
                type=DifferenceType.STYLESHEET_DIFFERENCE,
                description="Different external stylesheets",
                details=f"First: {', '.join(sheets1)}, Second: {', '.join(sheets2)}",
            ))

        diff = _count_diff(
            DifferenceType.INLINE_STYLE_COUNT, "Different number of elements with inline styles",
            len(doc1.select("[style]")), len(doc2.select("[style]"))
        )
        if diff:
            differences.append(diff)

        classes1 = self.collect_classes(doc1)
        classes2 = self.collect_classes(doc2)

        for side, own, other in (("first", classes1, classes2), ("second", classes2, classes1)):
            only = [name for name in own if name not in other]
            if only:
                differences.append(Difference(
                    type=DifferenceType.UNIQUE_CLASSES,
                    description=f"Classes that exist only in the {side} document",
                    details=f"Classes: {', '.join(only)}",
                ))

        for name, count1 in classes1.items():
            if name in classes2 and classes2[name] != count1:
                differences.append(Difference(
                    type=DifferenceType.CLASS_USAGE,
                    description=f"Different usage count for class '{name}'",
                    details=f"First: {count1}, Second: {classes2[name]}",
                ))

        return differences

    # -------- Document measurements --------

    @staticmethod
    def count_elements_by_tag(doc: HtmlDocument) -> Dict[str, int]:
        """Element counts per lower-case tag name, in order of first appearance."""
        counts: Dict[str, int] = {}
        for element in doc.all_elements():
            tag = element.name.lower()
            counts[tag] = counts.get(tag, 0) + 1
        return counts

    @staticmethod
    def calculate_max_depth(element: Optional[Tag]) -> int:
        """Maximum depth of the element tree; a leaf has depth 1, a missing element 0."""
        if element is None:
            return 0

        max_depth = 0
        stack = [(element, 1)]
        while stack:
            current, depth = stack.pop()
            max_depth = max(max_depth, depth)
            stack.extend((child, depth + 1) for child in current.children if isinstance(child, Tag))
        return max_depth

    @staticmethod
    def collect_classes(doc: HtmlDocument) -> Dict[str, int]:
        """Maps each CSS class name to the number of elements using it."""
        classes: Dict[str, int] = {}
        for element in doc.select("[class]"):
            for name in class_names(element):
                classes[name] = classes.get(name, 0) + 1
        return classes
