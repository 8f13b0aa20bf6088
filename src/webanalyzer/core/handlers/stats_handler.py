# src/webanalyzer/core/handlers/stats_handler.py
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from analyzer.exceptions import AnalyzerError
from analyzer.model import AnalyzerOptions
from analyzer.services.html_analyzer_service import HtmlAnalyzer
from webanalyzer.core.managers.config_manager import config_manager
from webanalyzer.core.services.json_service import to_json
from webanalyzer.core.utils.cli_utils import (
    fail,
    parse_command_args,
    split_list,
    validate_encoding,
    write_output,
)

logger = logging.getLogger(__name__)

stats_help_text = """
  stats <input> <output> [--format json|txt] [--include all|basic,elements,links,structure,content,performance]
        [--encoding <enc>]
      Generates statistics about an HTML document.
""".strip()


def _build_parser() -> argparse.ArgumentParser:
    default_encoding = config_manager.get_nested("output.default_encoding", "UTF-8")
    parser = argparse.ArgumentParser(prog="stats", description="Generate statistics about an HTML document.")
    parser.add_argument("input", help="Input HTML file path.")
    parser.add_argument("output", help="Output file path for statistics.")
    parser.add_argument("--format", default="json", choices=["json", "txt"], type=str.lower,
                        help="Output format (default: json).")
    parser.add_argument("--include", default="all",
                        help="Comma-separated sections: all, basic, elements, links, structure, content, performance.")
    parser.add_argument("--encoding", default=default_encoding, help=f"File encoding (default: {default_encoding}).")
    return parser


def handle_stats(args: List[str]) -> int:
    pargs, code = parse_command_args(_build_parser(), args)
    if pargs is None:
        return code

    try:
        validate_encoding(pargs.encoding)
        options = AnalyzerOptions.from_includes(split_list(pargs.include), encoding=pargs.encoding)
    except ValueError as e:
        return fail(str(e))

    if not Path(pargs.input).is_file():
        return fail(f"Input file does not exist: {pargs.input}")

    analyzer = HtmlAnalyzer()
    try:
        stats = analyzer.analyze_file(pargs.input, options)
        content = to_json(stats, indent=2) if pargs.format == "json" else analyzer.format_as_text(stats)
        output = write_output(pargs.output, content, pargs.encoding)
    except (AnalyzerError, OSError, UnicodeError) as e:
        logger.error("Error generating statistics: %s", e, exc_info=True)
        return fail(str(e))

    print(f"Successfully generated statistics to {output}")
    return 0
