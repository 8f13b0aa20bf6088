# src/webanalyzer/core/handlers/extract_handler.py
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from parser.exceptions import ExtractorError
from parser.model import ExtractorOptions
from parser.services.element_extract_service import ElementExtractService
from webanalyzer.core.managers.config_manager import config_manager
from webanalyzer.core.utils.cli_utils import (
    fail,
    parse_command_args,
    split_list,
    validate_encoding,
    write_output,
)

logger = logging.getLogger(__name__)

extract_help_text = """
  extract <input> <selector> <output> [--format json|csv|txt] [--attributes a,b]
          [--include-html] [--pretty] [--encoding <enc>]
      Extracts the elements matching a CSS selector.
""".strip()


def _build_parser() -> argparse.ArgumentParser:
    default_encoding = config_manager.get_nested("output.default_encoding", "UTF-8")
    parser = argparse.ArgumentParser(prog="extract", description="Extract elements from HTML using CSS selectors.")
    parser.add_argument("input", help="Input HTML file path.")
    parser.add_argument("selector", help="CSS selector.")
    parser.add_argument("output", help="Output file path.")
    parser.add_argument("--format", default="json", type=str.lower, help="Output format: json, csv or txt.")
    parser.add_argument("--attributes", default="", help="Comma-separated list of attributes to extract.")
    parser.add_argument("--include-html", action="store_true", help="Include the outer HTML of each element.")
    parser.add_argument("--pretty", action=argparse.BooleanOptionalAction, default=False,
                        help="Indent JSON output.")
    parser.add_argument("--encoding", default=default_encoding, help=f"File encoding (default: {default_encoding}).")
    return parser


def handle_extract(args: List[str]) -> int:
    pargs, code = parse_command_args(_build_parser(), args)
    if pargs is None:
        return code

    try:
        validate_encoding(pargs.encoding)
    except ValueError as e:
        return fail(str(e))

    if not Path(pargs.input).is_file():
        return fail(f"Input file does not exist: {pargs.input}")

    options = ExtractorOptions(
        encoding=pargs.encoding,
        format=pargs.format,
        attributes=split_list(pargs.attributes),
        include_html=pargs.include_html,
        pretty=pargs.pretty,
    )
    try:
        content = ElementExtractService(options).extract_from_file(pargs.input, pargs.selector)
        output = write_output(pargs.output, content, pargs.encoding)
    except (ExtractorError, OSError, UnicodeError) as e:
        logger.error("Error extracting elements: %s", e, exc_info=True)
        return fail(str(e))

    print(f"Successfully extracted {pargs.format.upper()} data to {output}")
    return 0
