# ============================================
# file: src/parser/model.py
# ============================================
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class ParseOptions(BaseModel):
    encoding: str = "UTF-8"
    include_text: bool = True
    pretty: bool = False


class ExtractorOptions(BaseModel):
    encoding: str = "UTF-8"
    format: str = "json"
    attributes: List[str] = Field(default_factory=list)
    include_html: bool = False
    pretty: bool = False
