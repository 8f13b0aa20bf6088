# src/webanalyzer/core/handlers/read_handler.py
from __future__ import annotations

import argparse
import logging
from typing import List

from crawler.exceptions import FetchError
from crawler.model import DEFAULT_USER_AGENT, FetchOptions, normalize_url, parse_headers
from crawler.services.async_page_fetcher_service import PageFetcher
from webanalyzer.core.managers.config_manager import config_manager
from webanalyzer.core.utils.cli_utils import fail, parse_command_args, validate_encoding, write_output

logger = logging.getLogger(__name__)

read_help_text = """
  read <url> <output> [--dynamic] [--wait <ms>] [--timeout <s>] [--user-agent <ua>]
       [--wait-for-selector <css>] [--execute-js <script>] [--headers name=value,...] [--encoding <enc>]
      Fetches a web page (optionally rendered in a headless browser) and saves its HTML.
""".strip()


def _build_parser() -> argparse.ArgumentParser:
    default_encoding = config_manager.get_nested("output.default_encoding", "UTF-8")
    default_wait = int(config_manager.get_nested("fetcher.wait_ms", 5000))
    default_timeout = int(config_manager.get_nested("fetcher.timeout", 30))
    default_user_agent = config_manager.get_nested("fetcher.user_agent", DEFAULT_USER_AGENT)

    parser = argparse.ArgumentParser(prog="read", description="Fetch a web page and save it as HTML.")
    parser.add_argument("url", help="URL to fetch; https:// is added when no scheme is given.")
    parser.add_argument("output", help="Output HTML file path.")
    parser.add_argument("--dynamic", action="store_true", help="Render JavaScript in a headless browser.")
    parser.add_argument("--wait", type=int, default=default_wait,
                        help=f"Time to wait for dynamic content in ms (default: {default_wait}).")
    parser.add_argument("--timeout", type=int, default=default_timeout,
                        help=f"Connection timeout in seconds (default: {default_timeout}).")
    parser.add_argument("--user-agent", default=default_user_agent, help="Custom user agent.")
    parser.add_argument("--wait-for-selector", default=None, help="CSS selector to wait for in dynamic mode.")
    parser.add_argument("--execute-js", default=None, help="JavaScript to run after page load in dynamic mode.")
    parser.add_argument("--headers", default=None, help="Custom HTTP headers as 'name1=value1,name2=value2'.")
    parser.add_argument("--encoding", default=default_encoding,
                        help=f"Character encoding for the output file (default: {default_encoding}).")
    return parser


def handle_read(args: List[str]) -> int:
    pargs, code = parse_command_args(_build_parser(), args)
    if pargs is None:
        return code

    url = normalize_url(pargs.url)
    if url != pargs.url.strip():
        logger.info("Added https:// prefix to URL: %s", url)

    try:
        validate_encoding(pargs.encoding)
        options = FetchOptions(
            dynamic=pargs.dynamic,
            wait_ms=pargs.wait,
            timeout_ms=pargs.timeout * 1000,
            user_agent=pargs.user_agent,
            encoding=pargs.encoding,
            wait_for_selector=pargs.wait_for_selector,
            custom_javascript=pargs.execute_js,
            headers=parse_headers(pargs.headers),
        )
    except ValueError as e:
        return fail(str(e))

    logger.info("Fetching web page: %s", url)
    try:
        html = PageFetcher(options).fetch_page_sync(url)
        output = write_output(pargs.output, html, pargs.encoding)
    except (FetchError, OSError, UnicodeError) as e:
        logger.error("Error fetching web page: %s", e, exc_info=True)
        return fail(str(e))

    print(f"Successfully downloaded page from {url} to {output}")
    return 0
