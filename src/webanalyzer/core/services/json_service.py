import json
from typing import Any, Optional


def to_json(data: Any, indent: Optional[int] = 2, ensure_ascii: bool = False) -> str:
    """
    Convert Python object to JSON string.

    Non-ASCII characters are written verbatim unless ensure_ascii is set.

    Args:
        data: Python object (dict, list, etc.)
        indent: Indentation level for pretty-printing (default: 2, None for compact)
        ensure_ascii: If True, escape non-ASCII chars (default: False)

    Returns:
        str: JSON string
    """
    return json.dumps(data, ensure_ascii=ensure_ascii, indent=indent)
