# src/transformer/model.py
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class OutputFormat(str, Enum):
    MARKDOWN = "markdown"
    PLAIN = "plain"
    JSON = "json"


class TransformOptions(BaseModel):
    encoding: str = "UTF-8"
    preserve_links: bool = True
    include_images: bool = True
    pretty: bool = False
