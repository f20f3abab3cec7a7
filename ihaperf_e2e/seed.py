"""Seed run: open the application once and record a baseline screenshot.

Used as a smoke check before a full suite and as context for test authoring.
"""

import logging
import os
from typing import Optional

from pydantic import BaseModel

from ihaperf_e2e.browser.session import BrowserSession
from ihaperf_e2e.config import RunConfig, WaitUntil
from ihaperf_e2e.pages.base_page import BasePage

SEED_SCREENSHOT = 'seed-screenshot.png'


class SeedResult(BaseModel):
    url: str
    title: str = ''
    screenshot_path: Optional[str] = None
    accessible: bool = False


async def seed_page(page: BasePage) -> SeedResult:
    """Run the seed steps on an already opened page."""
    await page.navigate_to('/', wait_until=WaitUntil.DOMCONTENTLOADED)

    current_url = page.get_current_url()
    accessible = current_url.startswith(page.config.base_url)
    if accessible:
        logging.info(f'Application is accessible at {current_url}')
    else:
        logging.warning(f'Expected a URL under {page.config.base_url}, landed on {current_url}')

    await page.wait_for_load_state('networkidle')
    await page.take_screenshot(SEED_SCREENSHOT, full_page=True)
    screenshot_path = os.path.join(page.config.screenshot_dir, SEED_SCREENSHOT)

    return SeedResult(
        url=current_url,
        title=await page.get_page_title(),
        screenshot_path=screenshot_path,
        accessible=accessible,
    )


async def run_seed(config: Optional[RunConfig] = None) -> SeedResult:
    config = config or RunConfig()
    logging.info(f'Starting seed run against {config.base_url}')
    async with BrowserSession(config) as session:
        result = await seed_page(BasePage(session.get_page(), config))
    logging.info(f'Seed run completed: {result.model_dump()}')
    return result
