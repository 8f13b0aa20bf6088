# src/analyzer/model.py
from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel

# Section names accepted by --include, mapped to their option flag.
SECTION_FLAGS = {
    "basic": "include_basic_info",
    "elements": "include_elements",
    "links": "include_links",
    "structure": "include_structure",
    "content": "include_content",
    "performance": "include_performance",
}


class AnalyzerOptions(BaseModel):
    encoding: str = "UTF-8"
    include_all: bool = True
    include_basic_info: bool = False
    include_elements: bool = False
    include_links: bool = False
    include_structure: bool = False
    include_content: bool = False
    include_performance: bool = False

    @classmethod
    def from_includes(cls, includes: Iterable[str], encoding: str = "UTF-8") -> "AnalyzerOptions":
        """
        Builds options from section names such as ["basic", "links"].
        "all" (or an empty list) selects every section; unknown names raise ValueError.
        """
        names = [name.strip().lower() for name in includes if name and name.strip()]
        if not names or "all" in names:
            return cls(encoding=encoding)

        flags = {}
        for name in names:
            if name not in SECTION_FLAGS:
                raise ValueError(
                    f"Unknown statistics section '{name}'. Valid sections: all, {', '.join(SECTION_FLAGS)}"
                )
            flags[SECTION_FLAGS[name]] = True
        return cls(encoding=encoding, include_all=False, **flags)

    def wants(self, flag: str) -> bool:
        return self.include_all or getattr(self, flag)
