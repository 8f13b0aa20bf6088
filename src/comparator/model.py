# src/comparator/model.py
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ComparisonMode(str, Enum):
    STRUCTURE = "structure"
    CONTENT = "content"
    VISUAL = "visual"


class DifferenceType(str, Enum):
    """Closed vocabulary of difference tags reported by the comparator."""
    # structure
    DOCTYPE = "DocType"
    TITLE = "Title"
    CHARSET = "Charset"
    ELEMENT_COUNT = "ElementCount"
    DOM_DEPTH = "DOMDepth"
    META_COUNT = "MetaCount"
    STYLESHEET_COUNT = "StylesheetCount"
    SCRIPT_COUNT = "ScriptCount"
    # content
    TEXT_CONTENT = "TextContent"
    LINK_COUNT = "LinkCount"
    UNIQUE_LINKS = "UniqueLinks"
    IMAGE_COUNT = "ImageCount"
    UNIQUE_IMAGES = "UniqueImages"
    UNIQUE_ATTRIBUTES = "UniqueAttributes"
    MISSING_ELEMENT = "MissingElement"
    ADDED_ELEMENT = "AddedElement"
    ATTRIBUTE_DIFFERENCE = "AttributeDifference"
    TEXT_DIFFERENCE = "TextDifference"
    # visual
    STYLE_COUNT = "StyleCount"
    STYLE_CONTENT = "StyleContent"
    STYLESHEET_DIFFERENCE = "StylesheetDifference"
    INLINE_STYLE_COUNT = "InlineStyleCount"
    UNIQUE_CLASSES = "UniqueClasses"
    CLASS_USAGE = "ClassUsage"


class ComparisonOptions(BaseModel):
    """
    Options for HTML document comparison.

    mode:
        - "structure": Compare DOM structure and hierarchy
        - "content": Compare text and element content
        - "visual": Compare visual styling elements
    selector: Optional CSS selector limiting the comparison to matching elements.
    ignore_attributes: Attribute names left out of every attribute comparison.
    encoding: Character encoding used when reading files.
    """
    mode: ComparisonMode = ComparisonMode.CONTENT
    selector: Optional[str] = None
    ignore_attributes: List[str] = Field(default_factory=list)
    encoding: str = "UTF-8"

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("selector", mode="before")
    @classmethod
    def blank_selector_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class Difference(BaseModel):
    """A single discrepancy between two documents."""
    model_config = ConfigDict(frozen=True)

    type: DifferenceType
    description: str
    location: Optional[str] = None
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ComparisonSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_differences: int = Field(serialization_alias="totalDifferences")
    differences_by_type: Dict[str, int] = Field(serialization_alias="differencesByType")

    @classmethod
    def from_differences(cls, differences: List[Difference]) -> "ComparisonSummary":
        """Counts differences per type, in order of first appearance."""
        by_type: Dict[str, int] = {}
        for diff in differences:
            by_type[diff.type.value] = by_type.get(diff.type.value, 0) + 1
        return cls(total_differences=len(differences), differences_by_type=by_type)


class ComparisonResult(BaseModel):
    """
    Outcome of one comparison: the effective options, the ordered differences
    and a summary derived from them.
    """
    model_config = ConfigDict(frozen=True)

    mode: ComparisonMode
    selector: Optional[str] = None
    ignore_attributes: List[str] = Field(default_factory=list)
    differences: List[Difference] = Field(default_factory=list)

    @property
    def summary(self) -> ComparisonSummary:
        return ComparisonSummary.from_differences(self.differences)

    @property
    def comparison(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "selector": self.selector or "all elements",
            "ignoreAttributes": list(self.ignore_attributes),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Returns the public result map with the keys comparison, differences and summary."""
        return {
            "comparison": self.comparison,
            "differences": [diff.to_dict() for diff in self.differences],
            "summary": self.summary.model_dump(by_alias=True),
        }
