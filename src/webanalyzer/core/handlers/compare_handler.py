# src/webanalyzer/core/handlers/compare_handler.py
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from pydantic import ValidationError

from comparator.exceptions import ComparatorError
from comparator.model import ComparisonMode, ComparisonOptions
from comparator.services.html_comparator_service import HtmlComparator
from comparator.services.report_service import format_as_json, format_as_text
from webanalyzer.core.managers.config_manager import config_manager
from webanalyzer.core.utils.cli_utils import (
    fail,
    parse_command_args,
    split_list,
    validate_encoding,
    write_output,
)

logger = logging.getLogger(__name__)

compare_help_text = """
  compare <file1> <file2> <output> [--mode structure|content|visual] [--selector <css>]
          [--ignore-attributes a,b] [--format json|txt] [--encoding <enc>] [--no-pretty]
      Compares two HTML files and writes the differences as JSON or a text report.
""".strip()


def _build_parser() -> argparse.ArgumentParser:
    default_mode = config_manager.get_nested("comparator.default_mode", ComparisonMode.CONTENT.value)
    default_encoding = config_manager.get_nested("output.default_encoding", "UTF-8")

    parser = argparse.ArgumentParser(prog="compare", description="Compare two HTML files and identify differences.")
    parser.add_argument("file1", help="First HTML file path.")
    parser.add_argument("file2", help="Second HTML file path.")
    parser.add_argument("output", help="Output file path for comparison results.")
    parser.add_argument("--mode", default=default_mode,
                        help=f"Comparison mode: structure, content or visual (default: {default_mode}).")
    parser.add_argument("--selector", default=None, help="Limit comparison to elements matching this CSS selector.")
    parser.add_argument("--ignore-attributes", default="", help="Comma-separated list of attributes to ignore.")
    parser.add_argument("--format", default="json", choices=["json", "txt"], type=str.lower,
                        help="Output format (default: json).")
    parser.add_argument("--encoding", default=default_encoding, help=f"File encoding (default: {default_encoding}).")
    parser.add_argument("--pretty", action=argparse.BooleanOptionalAction, default=True,
                        help="Indent JSON output (default: on).")
    return parser


def handle_compare(args: List[str]) -> int:
    pargs, code = parse_command_args(_build_parser(), args)
    if pargs is None:
        return code

    logger.info("Comparing HTML files: %s and %s", pargs.file1, pargs.file2)

    try:
        validate_encoding(pargs.encoding)
        options = ComparisonOptions(
            mode=pargs.mode,
            selector=pargs.selector,
            ignore_attributes=split_list(pargs.ignore_attributes),
            encoding=pargs.encoding,
        )
    except (ValueError, ValidationError) as e:
        logger.error("Invalid compare options: %s", e)
        return fail(str(e))

    if not Path(pargs.file1).is_file():
        return fail(f"First input file does not exist: {pargs.file1}")
    if not Path(pargs.file2).is_file():
        return fail(f"Second input file does not exist: {pargs.file2}")

    try:
        result = HtmlComparator().compare_files(pargs.file1, pargs.file2, options)
        if pargs.format == "json":
            content = format_as_json(result, pretty=pargs.pretty)
        else:
            content = format_as_text(result)
        output = write_output(pargs.output, content, pargs.encoding)
    except (ComparatorError, OSError, UnicodeError) as e:
        logger.error("Error comparing HTML files: %s", e, exc_info=True)
        return fail(str(e))

    print(f"Found {result.summary.total_differences} differences. Results written to {output}")
    return 0
