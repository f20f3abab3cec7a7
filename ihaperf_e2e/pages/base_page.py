import logging
import os
from typing import List, Optional, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ihaperf_e2e.config import RunConfig, WaitUntil
from ihaperf_e2e.errors import ElementTimeoutError, NavigationError, PageActionError, ValidationMismatchError

# A selector string or an already-built locator
Target = Union[str, Locator]

CONNECTION_TIMEOUT = 5000


class BasePage:
    """Base class for all page objects of the IHAPerf application.

    Holds the main navigation menu, the WebSocket connection indicator and
    the wait-then-act helpers every feature page builds on. Failures surface
    as :class:`~ihaperf_e2e.errors.PageActionError` subclasses naming the
    selector or URL involved. Only the ``is_*`` probes turn a timeout into
    ``False``.

    Example:
        page_obj = BasePage(page, config)
        await page_obj.navigate_to_scenarios()
        connected = await page_obj.is_websocket_connected()
    """

    path = '/'

    def __init__(self, page: Page, config: Optional[RunConfig] = None):
        self.page = page
        self.config = config or RunConfig()

        # navigation menu
        self._logo_link = page.get_by_role('link', name='IHAPerf')
        self._dashboard_link = page.get_by_role('link', name='Dashboard')
        self._scenarios_link = page.get_by_role('link', name='Scenarios')
        self._executions_link = page.get_by_role('link', name='Executions')
        self._history_link = page.get_by_role('link', name='History')
        self._compare_link = page.get_by_role('link', name='Compare')

        self._connection_status = page.get_by_text('Connected', exact=True)
        self._page_heading = page.get_by_role('heading', level=1)

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def _locator(self, target: Target) -> Locator:
        if isinstance(target, str):
            return self.page.locator(target)
        return target

    @staticmethod
    def _describe(target: Target) -> str:
        return target if isinstance(target, str) else repr(target)

    def _timeout(self, timeout: Optional[float]) -> float:
        return self.config.element_timeout if timeout is None else timeout

    def _action_error(self, action: str, target: Target, error: PlaywrightError) -> PageActionError:
        selector = self._describe(target)
        logging.error(f'{action} failed on {selector}: {error}')
        if isinstance(error, PlaywrightTimeoutError):
            return ElementTimeoutError(f'{action} timed out', selector=selector, cause=error)
        return PageActionError(f'{action} failed', selector=selector, cause=error)

    async def navigate_to(self, path: str, wait_until: Optional[Union[WaitUntil, str]] = None) -> None:
        """Load ``path`` relative to the configured base URL.

        Args:
            path: Route such as ``/scenarios``; absolute URLs are used as-is.
            wait_until: Readiness condition, defaults to ``config.wait_until``.

        Raises:
            NavigationError: The page did not settle within the navigation timeout.
        """
        url = self.config.url_for(path)
        wait = WaitUntil(wait_until or self.config.wait_until).value
        logging.info(f'Navigating to {url} (wait_until={wait})')
        try:
            await self.page.goto(url, wait_until=wait, timeout=self.config.navigation_timeout)
        except PlaywrightError as e:
            logging.error(f'Navigation to {url} failed: {e}')
            raise NavigationError(url, cause=e) from e

    async def goto(self, path: Optional[str] = None) -> None:
        """Navigate to ``path``, or to this page's own route."""
        await self.navigate_to(path or self.path)

    async def _wait_for_path(self, path: str, timeout: Optional[float] = None) -> None:
        url = self.config.url_for(path)
        try:
            await self.page.wait_for_url(url, timeout=self.config.navigation_timeout if timeout is None else timeout)
        except PlaywrightError as e:
            logging.error(f'URL did not become {url}: {e}')
            raise NavigationError(url, cause=e, message='URL did not settle') from e

    async def wait_for_load_state(self, state: str = 'networkidle') -> None:
        try:
            await self.page.wait_for_load_state(state, timeout=self.config.navigation_timeout)
        except PlaywrightError as e:
            raise NavigationError(self.page.url, cause=e, message=f'Load state {state!r} not reached') from e

    async def wait_for_element(self, target: Target, timeout: Optional[float] = None) -> Locator:
        """Wait until the element is visible and return its locator.

        Raises:
            ElementTimeoutError: The element did not become visible in time.
        """
        locator = self._locator(target).first
        timeout = self._timeout(timeout)
        try:
            await locator.wait_for(state='visible', timeout=timeout)
        except PlaywrightError as e:
            raise self._action_error(f'Wait for visible ({timeout}ms)', target, e) from e
        return locator

    async def wait_for_element_hidden(self, target: Target, timeout: Optional[float] = None) -> None:
        locator = self._locator(target).first
        timeout = self._timeout(timeout)
        try:
            await locator.wait_for(state='hidden', timeout=timeout)
        except PlaywrightError as e:
            raise self._action_error(f'Wait for hidden ({timeout}ms)', target, e) from e

    async def safe_click(self, target: Target, timeout: Optional[float] = None) -> None:
        locator = await self.wait_for_element(target, timeout)
        try:
            await locator.click(timeout=self._timeout(timeout))
        except PlaywrightError as e:
            raise self._action_error('Click', target, e) from e

    async def safe_fill(self, target: Target, value, verify: bool = True, timeout: Optional[float] = None) -> None:
        """Fill a field and, when ``verify`` is set, read the value back.

        Raises:
            ElementTimeoutError: The field never became visible.
            ValidationMismatchError: The field holds something other than ``value``.
        """
        text = str(value)
        locator = await self.wait_for_element(target, timeout)
        try:
            await locator.fill(text, timeout=self._timeout(timeout))
            if not verify:
                return
            actual = await locator.input_value(timeout=self._timeout(timeout))
        except PlaywrightError as e:
            raise self._action_error('Fill', target, e) from e

        if actual != text:
            logging.error(f'Fill verification failed on {self._describe(target)}: expected {text!r}, got {actual!r}')
            raise ValidationMismatchError(self._describe(target), expected=text, actual=actual)

    async def safe_select(self, target: Target, value: str, timeout: Optional[float] = None) -> None:
        locator = await self.wait_for_element(target, timeout)
        try:
            await locator.select_option(value, timeout=self._timeout(timeout))
        except PlaywrightError as e:
            raise self._action_error('Select', target, e) from e

    async def is_element_visible(self, target: Target, timeout: Optional[float] = None) -> bool:
        """Return whether the element shows up within ``timeout``; never raises on absence."""
        try:
            await self._locator(target).first.wait_for(state='visible', timeout=self._timeout(timeout))
            return True
        except PlaywrightTimeoutError:
            logging.debug(f'Element not visible: {self._describe(target)}')
            return False

    async def get_text_content(self, target: Target, timeout: Optional[float] = None) -> str:
        try:
            text = await self._locator(target).first.text_content(timeout=self._timeout(timeout))
        except PlaywrightError as e:
            raise self._action_error('Read text', target, e) from e
        return text or ''

    def get_current_url(self) -> str:
        return self.page.url

    async def get_page_title(self) -> str:
        return await self.page.title()

    async def take_screenshot(self, name: Optional[str] = None, full_page: bool = False) -> bytes:
        """Capture the page as PNG bytes.

        Args:
            name: When given, the PNG is also written to ``config.screenshot_dir``.
            full_page: Capture the whole scrollable page.
        """
        try:
            await self.page.wait_for_load_state(timeout=self.config.navigation_timeout)
        except PlaywrightError as e:
            logging.warning(f'wait_for_load_state before screenshot failed: {e}; attempting screenshot anyway')

        kwargs = {'full_page': full_page}
        if name:
            file_name = name if name.endswith('.png') else f'{name}.png'
            os.makedirs(self.config.screenshot_dir, exist_ok=True)
            kwargs['path'] = os.path.join(self.config.screenshot_dir, file_name)
        try:
            return await self.page.screenshot(**kwargs)
        except PlaywrightError as e:
            logging.error(f'Page screenshot failed: {e}')
            raise PageActionError('Screenshot failed', cause=e) from e

    async def get_cookies(self) -> List[dict]:
        return await self.page.context.cookies()

    # ------------------------------------------------------------------
    # Navigation menu
    # ------------------------------------------------------------------

    async def _navigate_by_link(self, link: Locator, path: str) -> None:
        await self.safe_click(link)
        await self._wait_for_path(path)

    async def navigate_to_dashboard(self) -> None:
        await self._navigate_by_link(self._dashboard_link, '/')

    async def navigate_to_scenarios(self) -> None:
        await self._navigate_by_link(self._scenarios_link, '/scenarios')

    async def navigate_to_executions(self) -> None:
        await self._navigate_by_link(self._executions_link, '/executions')

    async def navigate_to_history(self) -> None:
        await self._navigate_by_link(self._history_link, '/history')

    async def navigate_to_compare(self) -> None:
        await self._navigate_by_link(self._compare_link, '/comparison')

    async def click_logo(self) -> None:
        """Return to the dashboard through the logo link."""
        await self._navigate_by_link(self._logo_link, '/')

    async def are_navigation_links_visible(self) -> bool:
        links = [
            self._logo_link,
            self._dashboard_link,
            self._scenarios_link,
            self._executions_link,
            self._history_link,
            self._compare_link,
        ]
        for link in links:
            if not await self.is_element_visible(link):
                return False
        return True

    # ------------------------------------------------------------------
    # Common elements
    # ------------------------------------------------------------------

    async def is_websocket_connected(self) -> bool:
        return await self.is_element_visible(self._connection_status)

    async def get_page_heading(self) -> str:
        return await self.get_text_content(self._page_heading)

    async def wait_for_page_load(self) -> None:
        """Wait for network idle, then for the connection indicator."""
        await self.wait_for_load_state('networkidle')
        await self.wait_for_element(self._connection_status, timeout=CONNECTION_TIMEOUT)
