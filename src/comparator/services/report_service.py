# src/comparator/services/report_service.py
from typing import List

from comparator.model import ComparisonResult
from webanalyzer.core.services.json_service import to_json


def format_as_json(result: ComparisonResult, pretty: bool = True) -> str:
    """
    Serializes a comparison result.
    Non-ASCII characters are written as-is; ASCII control characters such as
    U+0001 must still be escaped (\\u0001) to keep the output valid JSON.
    """
    return to_json(result.to_dict(), indent=2 if pretty else None)


def format_as_text(result: ComparisonResult) -> str:
    """Renders a comparison result as a human-readable report."""
    comparison = result.comparison
    summary = result.summary
    ignored = comparison["ignoreAttributes"]

    lines: List[str] = [
        "HTML Comparison Results",
        "======================",
        "",
        "Comparison Details:",
        f"  Mode: {comparison['mode']}",
        f"  Selector: {comparison['selector']}",
        f"  Ignored Attributes: {', '.join(ignored) if ignored else 'none'}",
        "",
        "Summary:",
        f"  Total Differences: {summary.total_differences}",
    ]
    for diff_type, count in summary.differences_by_type.items():
        lines.append(f"  {diff_type}: {count}")

    lines.extend(["", "Differences:"])
    for diff in result.differences:
        lines.append(f"- {diff.type.value}: {diff.description}")
        if diff.location:
            lines.append(f"  Location: {diff.location}")
        if diff.details:
            lines.append(f"  Details: {diff.details}")
        lines.append("")

    return "\n".join(lines) + "\n"
