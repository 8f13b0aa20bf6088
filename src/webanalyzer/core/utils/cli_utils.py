# src/webanalyzer/core/utils/cli_utils.py
"""Argument and file helpers shared by the command handlers."""
import argparse
import codecs
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


def parse_command_args(parser: argparse.ArgumentParser, args: List[str]) -> Tuple[Optional[argparse.Namespace], int]:
    """
    Runs argparse without letting it exit the process.
    Returns (namespace, 0) on success, (None, 0) after --help and (None, 1) on a usage error.
    """
    try:
        return parser.parse_args(args), 0
    except SystemExit as e:
        return None, 0 if e.code == 0 else 1


def fail(message: str) -> int:
    """Reports an error the way every command does and returns the error exit code."""
    print(f"Error: {message}", file=sys.stderr)
    return 1


def validate_encoding(encoding: str) -> None:
    """
    Raises:
        ValueError: If Python has no codec for the encoding name.
    """
    try:
        codecs.lookup(encoding)
    except LookupError:
        raise ValueError(f"Unsupported encoding: {encoding}") from None


def split_list(value: Optional[str]) -> List[str]:
    """Splits a comma separated option value, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def write_output(path: str, content: str, encoding: str) -> Path:
    """
    Writes content with the given encoding, creating parent directories.
    Content is encoded before the file is opened, so an unencodable character leaves no file behind.
    Byte-order marks added by codecs such as UTF-16, UTF-32 and UTF-8-SIG are not written.
    """
    output = Path(path).expanduser()
    if output.parent and not output.parent.exists():
        output.parent.mkdir(parents=True, exist_ok=True)
    data = content.encode(encoding)
    bom = "".encode(encoding)
    if bom and data.startswith(bom):
        data = data[len(bom):]
    output.write_bytes(data)
    logger.debug("Wrote %d characters to %s (%s)", len(content), output, encoding)
    return output
