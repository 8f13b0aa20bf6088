# src/crawler/model.py (Fetch Layer)
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_USER_AGENT = "WebPageAnalyzer/1.0"


class FetchOptions(BaseModel):
    """
    Options for fetching a page.

    wait_ms / timeout_ms are in milliseconds; wait_ms only applies to dynamic fetches.
    """
    dynamic: bool = False
    wait_ms: int = Field(default=5000, ge=0)
    timeout_ms: int = Field(default=30000, gt=0)
    user_agent: str = DEFAULT_USER_AGENT
    encoding: str = "UTF-8"
    wait_for_selector: Optional[str] = None
    custom_javascript: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("wait_for_selector", "custom_javascript", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


def normalize_url(url: str) -> str:
    """Prefixes scheme-less URLs with https://."""
    url = url.strip()
    if not url.lower().startswith(("http://", "https://")):
        return f"https://{url}"
    return url


def parse_headers(raw: Optional[str]) -> Dict[str, str]:
    """
    Parses 'Name=value,Other=value' into a header dictionary.

    Raises:
        ValueError: If an entry has no '=' or an empty name.
    """
    headers: Dict[str, str] = {}
    if not raw:
        return headers
    for entry in raw.split(","):
        if not entry.strip():
            continue
        name, sep, value = entry.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Invalid header '{entry.strip()}', expected name=value")
        headers[name.strip()] = value.strip()
    return headers
