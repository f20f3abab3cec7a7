import logging
import os
from typing import Optional

from playwright.async_api import Page

from ihaperf_e2e.config import RunConfig
from ihaperf_e2e.pages.base_page import BasePage


class LoginPage(BasePage):
    """Sign-in form used to produce a reusable authenticated storage state."""

    path = '/login'

    def __init__(self, page: Page, config: Optional[RunConfig] = None):
        super().__init__(page, config)
        self._username_input = page.get_by_label('Username')
        self._password_input = page.get_by_label('Password')
        self._sign_in_button = page.get_by_role('button', name='Sign in')
        self._welcome_message = page.get_by_text('Welcome')

    async def is_login_page_ready(self) -> bool:
        return await self.is_element_visible(self._username_input) and await self.is_element_visible(
            self._sign_in_button
        )

    async def login(self, username: str, password: str) -> None:
        """Sign in and wait for the welcome message."""
        logging.info(f'Signing in as {username}')
        await self.safe_fill(self._username_input, username)
        await self.safe_fill(self._password_input, password)
        await self.safe_click(self._sign_in_button)
        await self.wait_for_element(self._welcome_message, timeout=self.config.navigation_timeout)

    async def save_storage_state(self, path: str) -> str:
        """Write cookies and local storage of the signed-in context to ``path``."""
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        await self.page.context.storage_state(path=path)
        logging.info(f'Saved storage state to {path}')
        return path
