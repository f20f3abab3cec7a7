import logging
import re
from typing import Optional, Union

from playwright.async_api import Page

from ihaperf_e2e.config import RunConfig
from ihaperf_e2e.data.scenario import HttpMethod, LoadPattern, ScenarioConfig
from ihaperf_e2e.pages.base_page import BasePage

REDIRECT_TIMEOUT = 10000


class NewScenarioPage(BasePage):
    """Page object for the scenario form at ``/scenarios/new``.

    The same form is shown when editing an existing scenario. Sections:

    - basic information (name, description)
    - HTTP configuration (target URL, method, request builder tabs)
    - load configuration (pattern, virtual users, duration, ramp-up)

    Example:
        form = NewScenarioPage(page, config)
        await form.goto()
        await form.fill_complete_form(build_scenario('Login API', run_id))
        await form.create_scenario()
    """

    path = '/scenarios/new'

    def __init__(self, page: Page, config: Optional[RunConfig] = None):
        super().__init__(page, config)
        # basic information
        self._scenario_name_input = page.get_by_role('textbox', name=re.compile(r'e\.g\., Login API Load Test', re.I))
        self._description_input = page.get_by_role(
            'textbox', name=re.compile(r'Describe what this test scenario does', re.I)
        )

        # HTTP configuration
        self._target_url_input = page.get_by_role(
            'textbox', name=re.compile(r'https://api\.example\.com/endpoint', re.I)
        )
        self._test_url_button = page.get_by_role('button', name='Test', exact=True)
        self._http_method_select = page.get_by_role('combobox')

        # request builder tabs
        self._params_tab = page.get_by_role('button', name='Params', exact=True)
        self._headers_tab = page.get_by_role('button', name='Headers', exact=True)
        self._body_tab = page.get_by_role('button', name='Body', exact=True)
        self._auth_tab = page.get_by_role('button', name='Auth', exact=True)
        self._tests_tab = page.get_by_role('button', name='Tests', exact=True)
        self._preview_tab = page.get_by_role('button', name='Preview', exact=True)

        # load configuration
        self._virtual_users_input = page.get_by_role('spinbutton', name=re.compile('Virtual Users'))
        self._duration_input = page.get_by_role('spinbutton', name=re.compile(r'Duration \(seconds\)'))
        self._ramp_up_time_input = page.get_by_role('spinbutton', name=re.compile('Ramp-up Time'))
        self._load_pattern_preview = page.locator('[class*="preview"], [class*="chart"]').first

        # actions
        self._save_as_template_button = page.get_by_role('button', name='Save as Template')
        self._cancel_button = page.get_by_role('button', name='Cancel', exact=True)
        self._validate_button = page.get_by_role('button', name='Validate', exact=True)
        self._create_scenario_button = page.get_by_role('button', name='Create Scenario')
        self._advanced_options_toggle = page.get_by_role('button', name='Advanced HTTP Options')

    async def goto(self, path: Optional[str] = None) -> None:
        await self.navigate_to(path or self.path)
        await self.wait_for_load_state('networkidle')

    async def fill_basic_info(self, name: str, description: Optional[str] = None) -> None:
        await self.safe_fill(self._scenario_name_input, name)
        if description:
            await self.safe_fill(self._description_input, description)

    async def fill_http_config(self, url: str, method: Union[HttpMethod, str] = HttpMethod.GET) -> None:
        await self.safe_fill(self._target_url_input, url)
        await self.safe_select(self._http_method_select, HttpMethod(method).value)

    async def test_url(self) -> None:
        """Probe the target URL from the form and wait for the request to finish."""
        await self.safe_click(self._test_url_button)
        await self.wait_for_load_state('networkidle')

    async def select_load_pattern(self, pattern: Union[LoadPattern, str]) -> None:
        label = LoadPattern(pattern).value
        await self.safe_click(self.page.get_by_role('button', name=re.compile(re.escape(label), re.I)))

    async def set_load_config(self, virtual_users: int, duration: int, ramp_up_time: int = 10) -> None:
        await self.safe_fill(self._virtual_users_input, virtual_users)
        await self.safe_fill(self._duration_input, duration)
        await self.safe_fill(self._ramp_up_time_input, ramp_up_time)

    async def fill_virtual_users(self, value, verify: bool = True) -> None:
        await self.safe_fill(self._virtual_users_input, value, verify=verify)

    async def get_virtual_users_value(self) -> str:
        return await self._virtual_users_input.input_value()

    async def go_to_params_tab(self) -> None:
        await self.safe_click(self._params_tab)

    async def go_to_headers_tab(self) -> None:
        await self.safe_click(self._headers_tab)

    async def go_to_body_tab(self) -> None:
        await self.safe_click(self._body_tab)

    async def go_to_auth_tab(self) -> None:
        await self.safe_click(self._auth_tab)

    async def go_to_tests_tab(self) -> None:
        await self.safe_click(self._tests_tab)

    async def go_to_preview_tab(self) -> None:
        await self.safe_click(self._preview_tab)

    async def toggle_advanced_options(self) -> None:
        await self.safe_click(self._advanced_options_toggle)

    async def create_scenario(self) -> None:
        """Submit the form and wait for the redirect back to the list."""
        await self.safe_click(self._create_scenario_button)
        await self._wait_for_path('/scenarios', timeout=REDIRECT_TIMEOUT)

    async def save_changes(self) -> None:
        # the edit form reuses the create button
        await self.create_scenario()

    async def submit_expecting_rejection(self) -> None:
        """Click Create without waiting for a redirect, for validation checks."""
        await self.safe_click(self._create_scenario_button)

    async def update_fields(self, name: Optional[str] = None, virtual_users: Optional[int] = None) -> None:
        if name is not None:
            await self.safe_fill(self._scenario_name_input, name)
        if virtual_users is not None:
            await self.safe_fill(self._virtual_users_input, virtual_users)

    async def validate_scenario(self) -> None:
        await self.safe_click(self._validate_button)

    async def cancel(self) -> None:
        await self.safe_click(self._cancel_button)

    async def save_as_template(self) -> None:
        await self.safe_click(self._save_as_template_button)

    async def is_load_pattern_preview_visible(self) -> bool:
        return await self.is_element_visible(self._load_pattern_preview)

    async def get_validation_error(self, field_label: str) -> str:
        """Return the error shown next to ``field_label``, or an empty string."""
        error = self.page.get_by_text(field_label).locator('..').locator('[class*="error"]')
        if not await self.is_element_visible(error):
            return ''
        return await self.get_text_content(error)

    async def is_create_button_enabled(self) -> bool:
        return await self._create_scenario_button.is_enabled()

    async def fill_complete_form(self, config: ScenarioConfig) -> None:
        """Fill every section of the form in order.

        Steps run in a fixed order and are not rolled back: if one fails, the
        earlier fields stay filled in the live page.
        """
        logging.info(f'Filling scenario form for {config.name!r}')
        await self.fill_basic_info(config.name, config.description)
        await self.fill_http_config(config.url, config.method)
        if config.load_pattern:
            await self.select_load_pattern(config.load_pattern)
        await self.set_load_config(config.virtual_users, config.duration, config.ramp_up_time)
