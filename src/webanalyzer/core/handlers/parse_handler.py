# src/webanalyzer/core/handlers/parse_handler.py
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from parser.exceptions import ParserError
from parser.model import ParseOptions
from parser.services.page_parse_service import PageParseService
from webanalyzer.core.managers.config_manager import config_manager
from webanalyzer.core.utils.cli_utils import fail, parse_command_args, validate_encoding, write_output

logger = logging.getLogger(__name__)

parse_help_text = """
  parse <input> <output> [--pretty] [--no-include-text] [--encoding <enc>]
      Parses an HTML file and writes its DOM tree as JSON.
""".strip()


def _build_parser() -> argparse.ArgumentParser:
    default_encoding = config_manager.get_nested("output.default_encoding", "UTF-8")
    parser = argparse.ArgumentParser(prog="parse", description="Parse an HTML file and convert its DOM to JSON.")
    parser.add_argument("input", help="Input HTML file path.")
    parser.add_argument("output", help="Output JSON file path.")
    parser.add_argument("--pretty", action=argparse.BooleanOptionalAction, default=False,
                        help="Indent the JSON output.")
    parser.add_argument("--include-text", action=argparse.BooleanOptionalAction, default=True,
                        help="Include element text in the JSON (default: on).")
    parser.add_argument("--encoding", default=default_encoding, help=f"File encoding (default: {default_encoding}).")
    return parser


def handle_parse(args: List[str]) -> int:
    pargs, code = parse_command_args(_build_parser(), args)
    if pargs is None:
        return code

    try:
        validate_encoding(pargs.encoding)
    except ValueError as e:
        return fail(str(e))

    if not Path(pargs.input).is_file():
        return fail(f"Input file does not exist: {pargs.input}")

    options = ParseOptions(encoding=pargs.encoding, include_text=pargs.include_text, pretty=pargs.pretty)
    try:
        json_output = PageParseService(options).parse_to_json(pargs.input)
        output = write_output(pargs.output, json_output, pargs.encoding)
    except (ParserError, OSError, UnicodeError) as e:
        logger.error("Error parsing HTML: %s", e, exc_info=True)
        return fail(str(e))

    print(f"Successfully parsed HTML to JSON: {output}")
    return 0
