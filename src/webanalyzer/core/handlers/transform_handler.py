# src/webanalyzer/core/handlers/transform_handler.py
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from transformer.exceptions import TransformerError
from transformer.model import OutputFormat, TransformOptions
from transformer.services.html_transformer_service import HtmlTransformer
from webanalyzer.core.managers.config_manager import config_manager
from webanalyzer.core.utils.cli_utils import fail, parse_command_args, validate_encoding, write_output

logger = logging.getLogger(__name__)

transform_help_text = """
  transform <input> <output> [--format markdown|plain|json] [--no-preserve-links] [--no-include-images]
            [--pretty] [--encoding <enc>]
      Converts an HTML file to Markdown, plain text or JSON.
""".strip()


def _build_parser() -> argparse.ArgumentParser:
    default_encoding = config_manager.get_nested("output.default_encoding", "UTF-8")
    parser = argparse.ArgumentParser(prog="transform", description="Transform HTML to another format.")
    parser.add_argument("input", help="Input HTML file path.")
    parser.add_argument("output", help="Output file path.")
    parser.add_argument("--format", default=OutputFormat.MARKDOWN.value,
                        help="Output format: markdown, plain or json (default: markdown).")
    parser.add_argument("--preserve-links", action=argparse.BooleanOptionalAction, default=True,
                        help="Keep hyperlink targets in the output (default: on).")
    parser.add_argument("--include-images", action=argparse.BooleanOptionalAction, default=True,
                        help="Include image references (default: on).")
    parser.add_argument("--pretty", action=argparse.BooleanOptionalAction, default=False,
                        help="Indent JSON output.")
    parser.add_argument("--encoding", default=default_encoding, help=f"File encoding (default: {default_encoding}).")
    return parser


def handle_transform(args: List[str]) -> int:
    pargs, code = parse_command_args(_build_parser(), args)
    if pargs is None:
        return code

    try:
        validate_encoding(pargs.encoding)
    except ValueError as e:
        return fail(str(e))

    if not Path(pargs.input).is_file():
        return fail(f"Input file does not exist: {pargs.input}")

    options = TransformOptions(
        encoding=pargs.encoding,
        preserve_links=pargs.preserve_links,
        include_images=pargs.include_images,
        pretty=pargs.pretty,
    )
    try:
        content = HtmlTransformer().transform_file(pargs.input, pargs.format, options)
        output = write_output(pargs.output, content, pargs.encoding)
    except (TransformerError, OSError, UnicodeError) as e:
        logger.error("Error transforming HTML: %s", e, exc_info=True)
        return fail(str(e))

    print(f"Successfully transformed HTML to {pargs.format}: {output}")
    return 0
