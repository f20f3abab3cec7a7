import os
from unittest.mock import AsyncMock, MagicMock

import pytest

from ihaperf_e2e.config import RunConfig


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        '--app-url',
        action='store',
        default=None,
        help='URL of a running IHAPerf application; enables the e2e tests',
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line('markers', 'e2e: test drives a live IHAPerf application in a real browser')


def make_locator(name: str = 'locator') -> MagicMock:
    """Build a stand-in for a Playwright Locator.

    Chaining methods return the same mock, and ``input_value`` reads back
    whatever ``fill`` last wrote.
    """
    locator = MagicMock(name=name)
    state = {'value': ''}

    async def fill(value, **kwargs):
        state['value'] = value

    async def input_value(**kwargs):
        return state['value']

    locator.wait_for = AsyncMock()
    locator.click = AsyncMock()
    locator.fill = AsyncMock(side_effect=fill)
    locator.input_value = AsyncMock(side_effect=input_value)
    locator.select_option = AsyncMock()
    locator.text_content = AsyncMock(return_value=None)
    locator.is_enabled = AsyncMock(return_value=True)
    locator.count = AsyncMock(return_value=0)

    locator.first = locator
    locator.filter.return_value = locator
    locator.locator.return_value = locator
    locator.get_by_role.return_value = locator
    locator.get_by_text.return_value = locator
    return locator


def make_page(locator: MagicMock, url: str = 'http://localhost:5174/') -> MagicMock:
    """Build a stand-in for a Playwright Page whose queries all return ``locator``."""
    page = MagicMock(name='page')
    page.url = url
    page.goto = AsyncMock()
    page.wait_for_url = AsyncMock()
    page.wait_for_load_state = AsyncMock()
    page.title = AsyncMock(return_value='IHAPerf - Intelligent High-performance API Performance Testing Tool')
    page.screenshot = AsyncMock(return_value=b'\x89PNG')
    page.context.cookies = AsyncMock(return_value=[])
    page.context.storage_state = AsyncMock(return_value={})

    page.locator.return_value = locator
    page.get_by_role.return_value = locator
    page.get_by_text.return_value = locator
    page.get_by_label.return_value = locator
    return page


@pytest.fixture
def locator() -> MagicMock:
    return make_locator()


@pytest.fixture
def fake_page(locator: MagicMock) -> MagicMock:
    return make_page(locator)


@pytest.fixture
def run_config(tmp_path) -> RunConfig:
    return RunConfig(screenshot_dir=os.path.join(str(tmp_path), 'screenshots'))


@pytest.fixture
def app_url(request: pytest.FixtureRequest) -> str:
    # Priority: CLI --app-url > env IHAPERF_BASE_URL
    url = request.config.getoption('--app-url') or os.getenv('IHAPERF_BASE_URL')
    if not url:
        pytest.skip('No application URL; pass --app-url or set IHAPERF_BASE_URL')
    return url
