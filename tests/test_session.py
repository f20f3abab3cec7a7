from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ihaperf_e2e.browser.driver import CHROMIUM_ARGS, Driver
from ihaperf_e2e.browser.session import BrowserSession, normalize_cookies
from ihaperf_e2e.config import BrowserName, RunConfig


def make_driver(page=None):
    driver = MagicMock(name='driver')
    driver.get_page.return_value = page or MagicMock(name='page')
    driver.get_context.return_value.add_cookies = AsyncMock()
    driver.is_closed.return_value = False
    driver.close_browser = AsyncMock()
    return driver


class TestNormalizeCookies:
    def test_json_string(self):
        assert normalize_cookies('[{"name": "a", "value": "1"}]') == [{'name': 'a', 'value': '1'}]

    def test_json_object_string(self):
        assert normalize_cookies('{"name": "a", "value": "1"}') == [{'name': 'a', 'value': '1'}]

    def test_single_dict(self):
        assert normalize_cookies({'name': 'a', 'value': '1'}) == [{'name': 'a', 'value': '1'}]

    def test_tuple(self):
        assert normalize_cookies(({'name': 'a'}, {'name': 'b'})) == [{'name': 'a'}, {'name': 'b'}]

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            normalize_cookies(42)

    def test_json_scalar(self):
        with pytest.raises(ValueError):
            normalize_cookies('"just a string"')


class TestBrowserSession:
    def test_page_before_initialize_raises(self):
        with pytest.raises(RuntimeError, match='not initialized'):
            BrowserSession().get_page()

    @pytest.mark.asyncio
    async def test_context_manager_opens_and_closes_driver(self):
        driver = make_driver()
        config = RunConfig()
        with patch('ihaperf_e2e.browser.session.Driver.getInstance', AsyncMock(return_value=driver)) as get_instance:
            async with BrowserSession(config, browser_name=BrowserName.FIREFOX) as session:
                assert session.get_page() is driver.get_page.return_value
                get_instance.assert_awaited_once_with(config, browser_name=BrowserName.FIREFOX)

        driver.close_browser.assert_awaited_once()
        assert session.is_closed()
        with pytest.raises(RuntimeError):
            session.get_page()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        driver = make_driver()
        with patch('ihaperf_e2e.browser.session.Driver.getInstance', AsyncMock(return_value=driver)):
            session = await BrowserSession().initialize()
            await session.close()
            await session.close()

        driver.close_browser.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_closed_session_cannot_be_reopened(self):
        session = BrowserSession()
        await session.close()

        with pytest.raises(RuntimeError, match='closed'):
            await session.initialize()

    @pytest.mark.asyncio
    async def test_failed_start_propagates(self):
        with patch('ihaperf_e2e.browser.session.Driver.getInstance', AsyncMock(side_effect=RuntimeError('no browser'))):
            session = BrowserSession()
            with pytest.raises(RuntimeError, match='no browser'):
                await session.initialize()

        assert session.driver is None

    @pytest.mark.asyncio
    async def test_add_cookies(self):
        driver = make_driver()
        with patch('ihaperf_e2e.browser.session.Driver.getInstance', AsyncMock(return_value=driver)):
            async with BrowserSession() as session:
                await session.add_cookies({'name': 'token', 'value': 'abc', 'url': 'http://localhost:5174'})

        driver.get_context.return_value.add_cookies.assert_awaited_once_with(
            [{'name': 'token', 'value': 'abc', 'url': 'http://localhost:5174'}]
        )


class TestDriver:
    def test_defaults_to_first_configured_browser(self):
        config = RunConfig(browser={'browsers': ['webkit', 'chromium']})

        assert Driver(config).browser_name == BrowserName.WEBKIT

    def test_chromium_launch_args(self):
        kwargs = Driver(RunConfig(browser={'headless': False, 'slow_mo': 50}))._launch_args()

        assert kwargs['headless'] is False
        assert kwargs['slow_mo'] == 50
        assert kwargs['args'][: len(CHROMIUM_ARGS)] == CHROMIUM_ARGS
        assert kwargs['args'][-1] == '--window-size=1280,720'

    def test_other_engines_get_no_chromium_flags(self):
        kwargs = Driver(RunConfig(), browser_name=BrowserName.FIREFOX)._launch_args()

        assert 'args' not in kwargs

    def test_context_args(self):
        config = RunConfig(base_url='http://app.local/', storage_state='auth/user.json')

        kwargs = Driver(config)._context_args()

        assert kwargs['base_url'] == 'http://app.local'
        assert kwargs['viewport'] == {'width': 1280, 'height': 720}
        assert kwargs['locale'] == 'en-US'
        assert kwargs['storage_state'] == 'auth/user.json'

    @pytest.mark.asyncio
    async def test_create_browser_applies_timeouts(self):
        playwright, browser, context, page = MagicMock(), MagicMock(), MagicMock(), MagicMock()
        playwright.firefox.launch = AsyncMock(return_value=browser)
        browser.new_context = AsyncMock(return_value=context)
        context.new_page = AsyncMock(return_value=page)
        starter = MagicMock()
        starter.return_value.start = AsyncMock(return_value=playwright)

        with patch('ihaperf_e2e.browser.driver.async_playwright', starter):
            driver = Driver(RunConfig(), browser_name='firefox')
            assert await driver.create_browser() is page

        context.set_default_timeout.assert_called_once_with(5000)
        context.set_default_navigation_timeout.assert_called_once_with(30000)
        assert driver.get_page() is page
        assert driver.get_context() is context

    @pytest.mark.asyncio
    async def test_failed_launch_stops_playwright(self):
        playwright = MagicMock()
        playwright.chromium.launch = AsyncMock(side_effect=RuntimeError('Executable does not exist'))
        playwright.stop = AsyncMock()
        starter = MagicMock()
        starter.return_value.start = AsyncMock(return_value=playwright)

        with patch('ihaperf_e2e.browser.driver.async_playwright', starter):
            driver = Driver(RunConfig())
            with pytest.raises(RuntimeError, match='Executable does not exist'):
                await driver.create_browser()

        playwright.stop.assert_awaited_once()
        assert driver.is_closed()

    @pytest.mark.asyncio
    async def test_close_browser_is_idempotent(self):
        driver = Driver(RunConfig())
        driver.browser = MagicMock()
        driver.browser.close = AsyncMock()
        driver.playwright = MagicMock()
        driver.playwright.stop = AsyncMock()

        await driver.close_browser()
        await driver.close_browser()

        driver.browser.close.assert_awaited_once()
        driver.playwright.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_browser_stops_playwright_after_crashed_browser(self):
        driver = Driver(RunConfig())
        driver.browser = MagicMock()
        driver.browser.close = AsyncMock(side_effect=RuntimeError('Target page, context or browser has been closed'))
        driver.playwright = MagicMock()
        driver.playwright.stop = AsyncMock()

        with pytest.raises(RuntimeError):
            await driver.close_browser()

        driver.playwright.stop.assert_awaited_once()
        assert driver.is_closed()
