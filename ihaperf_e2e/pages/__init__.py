from .base_page import BasePage
from .login_page import LoginPage
from .new_scenario_page import NewScenarioPage
from .scenarios_page import ScenariosPage

__all__ = ["BasePage", "LoginPage", "NewScenarioPage", "ScenariosPage"]
