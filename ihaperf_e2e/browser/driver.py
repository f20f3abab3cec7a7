import asyncio
import logging
from typing import Optional

from playwright.async_api import async_playwright

from ihaperf_e2e.config import BrowserName, RunConfig

CHROMIUM_ARGS = [
    "--disable-dev-shm-usage",  # Mitigate shared memory issues in Docker
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-gpu",
    "--force-device-scale-factor=1",
]


class Driver:
    # Serialises Playwright start-up when several coroutines create drivers
    __lock = asyncio.Lock()

    @staticmethod
    async def getInstance(config: RunConfig, browser_name: Optional[BrowserName] = None):
        """Create a new Driver and launch its browser.

        Args:
            config (RunConfig): Run configuration.
            browser_name (BrowserName, optional): Engine to launch. Defaults to
                the first entry of ``config.browser.browsers``.
        """
        logging.info(f"Driver.getInstance called with browser: {browser_name or config.browser.browsers[0]}")
        async with Driver.__lock:
            driver = Driver(config=config, browser_name=browser_name)
            await driver.create_browser()
            return driver

    def __init__(self, config: RunConfig, browser_name: Optional[BrowserName] = None):
        self.config = config
        self.browser_name = BrowserName(browser_name or config.browser.browsers[0])
        self._is_closed = False
        self.page = None
        self.browser = None
        self.context = None
        self.playwright = None

    def is_closed(self):
        """Check if the browser instance is closed."""
        return getattr(self, "_is_closed", True)

    def _launch_args(self):
        browser_config = self.config.browser
        kwargs = {"headless": browser_config.headless, "slow_mo": browser_config.slow_mo}
        if self.browser_name == BrowserName.CHROMIUM:
            kwargs["args"] = CHROMIUM_ARGS + [
                f"--window-size={browser_config.viewport.width},{browser_config.viewport.height}",
            ]
        return kwargs

    def _context_args(self):
        browser_config = self.config.browser
        kwargs = {
            "base_url": self.config.base_url,
            "viewport": {"width": browser_config.viewport.width, "height": browser_config.viewport.height},
            "locale": browser_config.language,
            "ignore_https_errors": True,
        }
        if self.config.storage_state:
            kwargs["storage_state"] = self.config.storage_state
        return kwargs

    async def create_browser(self):
        """Launch the browser, open a context and a page.

        Returns:
            Page: The page every page object of the test will share.
        """
        try:
            self.playwright = await async_playwright().start()
            browser_type = getattr(self.playwright, self.browser_name.value)
            self.browser = await browser_type.launch(**self._launch_args())

            self.context = await self.browser.new_context(**self._context_args())
            self.context.set_default_timeout(self.config.element_timeout)
            self.context.set_default_navigation_timeout(self.config.navigation_timeout)
            self.page = await self.context.new_page()

            logging.debug(f"Browser instance created successfully: {self.browser_name.value}")
            return self.page

        except Exception as e:
            logging.error("Failed to create browser instance.", exc_info=True)
            # a half-started driver still owns a playwright process
            await self.close_browser()
            raise e

    def get_context(self):
        return self.context

    def get_page(self):
        """Returns the current page instance."""
        return self.page

    async def close_browser(self):
        """Closes the browser instance and stops Playwright."""
        if self.is_closed():
            return
        try:
            try:
                if self.browser is not None:
                    await self.browser.close()
            finally:
                if self.playwright is not None:
                    await self.playwright.stop()
            logging.info("Browser instance closed successfully.")
        except Exception as e:
            logging.error("Failed to close browser instance.", exc_info=True)
            raise e
        finally:
            self._is_closed = True
