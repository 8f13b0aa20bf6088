import asyncio
import logging
from typing import Optional

import aiohttp

from crawler.exceptions import FetchError
from crawler.model import FetchOptions

logger = logging.getLogger(__name__)


class StaticPageFetcher:
    """
    Fetches raw HTML over HTTP with aiohttp.
    A single GET per call; redirects are followed, no retries.
    """

    def __init__(self, options: FetchOptions):
        self.options = options
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def initialize(self):
        if not self.session or self.session.closed:
            timeout_obj = aiohttp.ClientTimeout(total=self.options.timeout_ms / 1000)
            default_headers = {
                'Accept-Encoding': 'gzip, deflate',
                'User-Agent': self.options.user_agent,
            }
            default_headers.update(self.options.headers)
            self.session = aiohttp.ClientSession(timeout=timeout_obj, headers=default_headers)
            logger.debug("Static fetcher initialized (timeout: %sms)", self.options.timeout_ms)

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str) -> str:
        if not self.session or self.session.closed:
            await self.initialize()

        logger.debug("Fetching static page: %s", url)
        async with self.session.get(url) as response:
            if response.status != 200:
                raise FetchError(f"HTTP error {response.status}: {response.reason}")
            body = await response.read()
            return body.decode(self.options.encoding, errors="replace")


class DynamicPageFetcher:
    """
    Renders a page in headless Chromium through Playwright and returns the resulting HTML.
    """

    def __init__(self, options: FetchOptions):
        self.options = options

    async def fetch(self, url: str) -> str:
        # Imported lazily; the browser stack is only needed for dynamic fetches.
        from playwright.async_api import async_playwright

        logger.debug("Fetching dynamic page: %s with wait time: %sms", url, self.options.wait_ms)
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True)
            try:
                context = await browser.new_context(
                    viewport={"width": 1920, "height": 1080},
                    user_agent=self.options.user_agent,
                    extra_http_headers=self.options.headers or None,
                )
                page = await context.new_page()
                await page.goto(url, wait_until="domcontentloaded", timeout=self.options.timeout_ms)

                if self.options.wait_ms > 0:
                    await page.wait_for_timeout(self.options.wait_ms)

                if self.options.wait_for_selector:
                    await page.wait_for_selector(self.options.wait_for_selector, timeout=self.options.timeout_ms)

                if self.options.custom_javascript:
                    await page.evaluate(self.options.custom_javascript)
                    await page.wait_for_timeout(500)

                return await page.content()
            finally:
                await browser.close()


class PageFetcher:
    """Dispatches a fetch to the static or the dynamic fetcher."""

    def __init__(self, options: Optional[FetchOptions] = None):
        self.options = options or FetchOptions()

    async def fetch_page(self, url: str) -> str:
        try:
            if self.options.dynamic:
                return await DynamicPageFetcher(self.options).fetch(url)
            async with StaticPageFetcher(self.options) as fetcher:
                return await fetcher.fetch(url)
        except FetchError as e:
            logger.error("Error fetching page %s: %s", url, e)
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("Error fetching page %s: %s", url, e, exc_info=True)
            raise FetchError(f"Failed to fetch page: {str(e) or type(e).__name__}") from e
        except Exception as e:
            logger.error("Internal fetch error for %s: %s", url, e, exc_info=True)
            kind = "dynamic page" if self.options.dynamic else "page"
            raise FetchError(f"Failed to fetch {kind}: {e}") from e

    def fetch_page_sync(self, url: str) -> str:
        return asyncio.run(self.fetch_page(url))
