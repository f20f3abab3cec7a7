"""Fixtures for the live-application specs.

Every test here drives a real browser against a running IHAPerf instance and
is skipped unless ``--app-url`` or ``IHAPERF_BASE_URL`` names one. Tests that
take ``browser_name`` run once per engine listed in the configuration.
"""

import logging

import pytest
import pytest_asyncio

from ihaperf_e2e.browser.session import BrowserSession
from ihaperf_e2e.config import RunConfig, load_config
from ihaperf_e2e.data.factories import new_run_id


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    if 'browser_name' in metafunc.fixturenames:
        browsers = [name.value for name in load_config().browser.browsers]
        metafunc.parametrize('browser_name', browsers)


@pytest.fixture
def e2e_config(app_url: str) -> RunConfig:
    return load_config().model_copy(update={'base_url': app_url.rstrip('/')})


@pytest_asyncio.fixture
async def session(e2e_config: RunConfig, browser_name: str):
    async with BrowserSession(e2e_config, browser_name=browser_name) as browser_session:
        yield browser_session


@pytest.fixture
def browser_page(session: BrowserSession):
    return session.get_page()


@pytest.fixture
def run_id() -> str:
    run_id = new_run_id()
    logging.info(f'Scenario names of this test carry run id {run_id}')
    return run_id
