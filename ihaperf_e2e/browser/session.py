import asyncio
import json
import logging
import uuid
from typing import Optional, Union

from playwright.async_api import BrowserContext, Page

from ihaperf_e2e.browser.driver import Driver
from ihaperf_e2e.config import BrowserName, RunConfig


def normalize_cookies(cookies: Union[str, dict, list, tuple]) -> list:
    """Normalize cookies into the list[dict] shape Playwright expects."""
    if isinstance(cookies, str):
        cookie_list = json.loads(cookies)
    elif isinstance(cookies, dict):
        cookie_list = [cookies]
    elif isinstance(cookies, (list, tuple)):
        cookie_list = list(cookies)
    else:
        raise TypeError("Unsupported cookies type; expected str, dict or list")

    if isinstance(cookie_list, dict):
        cookie_list = [cookie_list]
    if not isinstance(cookie_list, list):
        raise ValueError("Parsed cookies is not a list")
    return cookie_list


class BrowserSession:
    """One browser, context and page for the duration of a single test."""

    def __init__(self, config: Optional[RunConfig] = None, browser_name: Optional[BrowserName] = None,
                 session_id: str = None):
        self.session_id = session_id or str(uuid.uuid4())
        self.config = config or RunConfig()
        self.browser_name = browser_name
        self.driver: Optional[Driver] = None
        self._is_closed = False
        self._lock = asyncio.Lock()

    async def initialize(self):
        """Initialize browser session."""
        async with self._lock:
            if self._is_closed:
                raise RuntimeError("Browser session is closed")

            logging.debug(f"Initializing browser session {self.session_id}")
            try:
                self.driver = await Driver.getInstance(self.config, browser_name=self.browser_name)
                logging.debug(f"Browser session {self.session_id} initialized successfully via Driver")
            except Exception as e:
                logging.error(f"Failed to initialize browser session {self.session_id}: {e}")
                await self._cleanup()
                raise
        return self

    def _require_driver(self) -> Driver:
        if self._is_closed or not self.driver:
            raise RuntimeError("Browser session not initialized or closed")
        return self.driver

    def get_page(self) -> Page:
        return self._require_driver().get_page()

    def get_context(self) -> BrowserContext:
        return self._require_driver().get_context()

    async def add_cookies(self, cookies: Union[str, dict, list]):
        """Add cookies to the session's browser context.

        Raises:
            TypeError, ValueError: when ``cookies`` cannot be normalized.
        """
        cookie_list = normalize_cookies(cookies)
        await self.get_context().add_cookies(cookie_list)
        logging.info(f"Added {len(cookie_list)} cookies to session {self.session_id}")

    def is_closed(self) -> bool:
        return self._is_closed

    async def _cleanup(self):
        try:
            if self.driver and not self.driver.is_closed():
                await self.driver.close_browser()
        except Exception as e:
            logging.error(f"Error during cleanup: {e}")
        finally:
            self.driver = None

    async def close(self):
        """Close browser session."""
        async with self._lock:
            if self._is_closed:
                return
            logging.info(f"Closing browser session {self.session_id}")
            self._is_closed = True
            await self._cleanup()

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
