# tests/core/test_report_service.py
import json

from comparator.model import ComparisonMode, ComparisonResult, Difference, DifferenceType
from comparator.services.report_service import format_as_json, format_as_text


def make_result(**overrides):
    data = dict(
        mode=ComparisonMode.CONTENT,
        selector="div.card",
        ignore_attributes=["class", "id"],
        differences=[
            Difference(type=DifferenceType.TEXT_CONTENT, description="Overall text content differs",
                       details="Character length - First: 3, Second: 4"),
            Difference(type=DifferenceType.MISSING_ELEMENT, description="<p> element exists only in the first document",
                       location="p.note", details="Index: 2"),
            Difference(type=DifferenceType.TEXT_CONTENT, description="Overall text content differs"),
        ],
    )
    data.update(overrides)
    return ComparisonResult(**data)


def test_text_report_layout():
    expected = "\n".join([
        "HTML Comparison Results",
        "======================",
        "",
        "Comparison Details:",
        "  Mode: content",
        "  Selector: div.card",
        "  Ignored Attributes: class, id",
        "",
        "Summary:",
        "  Total Differences: 3",
        "  TextContent: 2",
        "  MissingElement: 1",
        "",
        "Differences:",
        "- TextContent: Overall text content differs",
        "  Details: Character length - First: 3, Second: 4",
        "",
        "- MissingElement: <p> element exists only in the first document",
        "  Location: p.note",
        "  Details: Index: 2",
        "",
        "- TextContent: Overall text content differs",
        "",
    ]) + "\n"
    assert format_as_text(make_result()) == expected


def test_text_report_defaults_for_empty_options():
    report = format_as_text(make_result(selector=None, ignore_attributes=[], differences=[]))
    assert "  Selector: all elements\n" in report
    assert "  Ignored Attributes: none\n" in report
    assert "  Total Differences: 0\n" in report
    assert report.endswith("Differences:\n")


def test_json_report_pretty_and_compact():
    result = make_result()
    pretty = format_as_json(result)
    compact = format_as_json(result, pretty=False)

    assert pretty.startswith('{\n  "comparison"')
    assert "\n" not in compact
    assert json.loads(pretty) == json.loads(compact) == result.to_dict()


def test_json_report_omits_absent_fields():
    data = json.loads(format_as_json(make_result()))
    assert "location" not in data["differences"][0]
    assert "details" not in data["differences"][2]
    assert data["summary"]["differencesByType"] == {"TextContent": 2, "MissingElement": 1}


def test_json_report_keeps_unicode():
    result = make_result(differences=[
        Difference(type=DifferenceType.TITLE, description="Document titles differ",
                   details="First: 'Привіт світе', Second: 'こんにちは世界'"),
    ])
    serialized = format_as_json(result)
    assert "\\u" not in serialized
    assert "Привіт світе" in serialized
    assert json.loads(serialized)["differences"][0]["details"].endswith("'こんにちは世界'")
