import logging
import re
from typing import Optional

from playwright.async_api import Dialog, Locator, Page

from ihaperf_e2e.config import RunConfig
from ihaperf_e2e.data.scenario import ScenarioInfo
from ihaperf_e2e.pages.base_page import BasePage

CARD_SELECTOR = '[class*="scenario-card"], [class*="ScenarioCard"]'
LOADING_TIMEOUT = 5000


class ScenariosPage(BasePage):
    """Page object for the scenario list at ``/scenarios``.

    Covers listing, creating, editing, duplicating, deleting and starting
    scenarios. Cards are addressed by scenario name.
    """

    path = '/scenarios'

    def __init__(self, page: Page, config: Optional[RunConfig] = None):
        super().__init__(page, config)
        self._browse_templates_button = page.get_by_role('button', name='Browse Templates')
        self._new_scenario_button = page.get_by_role('button', name='New Scenario')
        self._scenario_cards = page.locator(CARD_SELECTOR)
        self._loading_indicator = page.get_by_text('Loading scenarios...')

    async def goto(self, path: Optional[str] = None) -> None:
        await self.navigate_to(path or self.path)
        await self.wait_for_scenarios_to_load()

    async def wait_for_scenarios_to_load(self) -> None:
        await self.wait_for_load_state('networkidle')
        await self.wait_for_element_hidden(self._loading_indicator, timeout=LOADING_TIMEOUT)

    async def click_browse_templates(self) -> None:
        await self.safe_click(self._browse_templates_button)

    async def click_new_scenario(self) -> None:
        await self.safe_click(self._new_scenario_button)
        await self._wait_for_path('/scenarios/new')

    def get_scenario_card(self, scenario_name: str) -> Locator:
        """Return the card whose heading is exactly ``scenario_name``.

        Matching on the heading keeps "X" from also selecting "X (Copy)".
        """
        heading = self.page.get_by_role('heading', level=3, name=scenario_name, exact=True)
        return self._scenario_cards.filter(has=heading)

    def get_start_test_button(self, scenario_name: str) -> Locator:
        return self.get_scenario_card(scenario_name).get_by_role('button', name='Start Test')

    def get_edit_button(self, scenario_name: str) -> Locator:
        return self.get_scenario_card(scenario_name).get_by_role('button', name='Edit')

    def get_duplicate_button(self, scenario_name: str) -> Locator:
        return self.get_scenario_card(scenario_name).get_by_role('button', name='Duplicate')

    def get_delete_button(self, scenario_name: str) -> Locator:
        return self.get_scenario_card(scenario_name).get_by_role('button', name='Delete')

    async def start_test(self, scenario_name: str) -> None:
        await self.safe_click(self.get_start_test_button(scenario_name))

    async def edit_scenario(self, scenario_name: str) -> None:
        await self.safe_click(self.get_edit_button(scenario_name))
        await self.wait_for_load_state('networkidle')

    async def duplicate_scenario(self, scenario_name: str) -> None:
        await self.safe_click(self.get_duplicate_button(scenario_name))
        await self.wait_for_scenarios_to_load()

    async def delete_scenario(self, scenario_name: str, confirm: bool = True) -> None:
        """Delete a scenario through its card, answering the confirmation dialog.

        The dialog fires while the click is still in flight, so the handler
        is attached before clicking.

        Args:
            scenario_name: Name shown on the card.
            confirm: Accept the dialog when True, dismiss it otherwise.
        """

        async def handle_dialog(dialog: Dialog) -> None:
            logging.info(f"{'Accepting' if confirm else 'Dismissing'} dialog: {dialog.message}")
            if confirm:
                await dialog.accept()
            else:
                await dialog.dismiss()

        self.page.once('dialog', handle_dialog)
        await self.safe_click(self.get_delete_button(scenario_name))
        await self.wait_for_scenarios_to_load()

    async def _read_card_field(self, card: Locator, label: str) -> str:
        value = card.get_by_text(re.compile(re.escape(label))).locator('..').locator('p')
        return await self.get_text_content(value)

    async def get_scenario_info(self, scenario_name: str) -> ScenarioInfo:
        card = self.get_scenario_card(scenario_name).first
        return ScenarioInfo(
            name=await self.get_text_content(card.get_by_role('heading', level=3)),
            target=await self._read_card_field(card, 'Target:'),
            method=await self._read_card_field(card, 'Method:'),
            virtual_users=await self._read_card_field(card, 'Virtual Users:'),
            duration=await self._read_card_field(card, 'Duration:'),
        )

    async def scenario_exists(self, scenario_name: str, timeout: Optional[float] = None) -> bool:
        return await self.is_element_visible(self.get_scenario_card(scenario_name), timeout)

    async def wait_for_scenario_removed(self, scenario_name: str) -> None:
        await self.wait_for_element_hidden(self.get_scenario_card(scenario_name))

    async def count_scenarios_named(self, scenario_name: str) -> int:
        await self.wait_for_scenarios_to_load()
        return await self.get_scenario_card(scenario_name).count()

    async def get_scenario_count(self) -> int:
        await self.wait_for_scenarios_to_load()
        return await self._scenario_cards.filter(has_text=re.compile('Target:')).count()

    async def has_timestamps(self) -> bool:
        first_card = self._scenario_cards.first
        return await self.is_element_visible(first_card.get_by_text(re.compile('Created:|Updated:')))

    async def is_browse_templates_visible(self) -> bool:
        return await self.is_element_visible(self._browse_templates_button)

    async def is_browse_templates_enabled(self) -> bool:
        return await self._browse_templates_button.is_enabled()

    async def is_new_scenario_button_visible(self) -> bool:
        return await self.is_element_visible(self._new_scenario_button)
