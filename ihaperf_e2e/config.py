import logging
import os
from enum import Enum
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

DEFAULT_BASE_URL = 'http://localhost:5174'
EXPECTED_TITLE = 'IHAPerf - Intelligent High-performance API Performance Testing Tool'


class BrowserName(str, Enum):
    CHROMIUM = 'chromium'
    FIREFOX = 'firefox'
    WEBKIT = 'webkit'


class WaitUntil(str, Enum):
    """Readiness conditions accepted by ``page.goto``."""

    LOAD = 'load'
    DOMCONTENTLOADED = 'domcontentloaded'
    NETWORKIDLE = 'networkidle'
    COMMIT = 'commit'


class Viewport(BaseModel):
    width: int = Field(default=1280, gt=0)
    height: int = Field(default=720, gt=0)


class BrowserConfig(BaseModel):
    headless: bool = True
    browsers: List[BrowserName] = Field(default_factory=lambda: [BrowserName.CHROMIUM])
    viewport: Viewport = Field(default_factory=Viewport)
    language: str = 'en-US'
    slow_mo: int = Field(default=0, ge=0)

    @field_validator('browsers')
    @classmethod
    def _at_least_one_browser(cls, value: List[BrowserName]) -> List[BrowserName]:
        if not value:
            raise ValueError('browsers must name at least one engine')
        return value


class RunConfig(BaseModel):
    """Settings shared by the browser session and every page object.

    Timeouts are in milliseconds, matching the Playwright API.
    """

    base_url: str = DEFAULT_BASE_URL
    navigation_timeout: int = Field(default=30000, gt=0)
    element_timeout: int = Field(default=5000, gt=0)
    wait_until: WaitUntil = WaitUntil.NETWORKIDLE
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    screenshot_dir: str = 'test-results'
    storage_state: Optional[str] = None
    log_level: str = 'info'

    @field_validator('base_url')
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('base_url must not be empty')
        return value.rstrip('/')

    def url_for(self, path: str) -> str:
        """Resolve ``path`` against ``base_url``; absolute URLs pass through."""
        if path.startswith(('http://', 'https://')):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"


def find_config_file(config_path: Optional[str] = None) -> Optional[str]:
    """Locate the YAML configuration file.

    An explicit path wins and must exist. Otherwise the default locations are
    searched in order and ``None`` is returned when none of them exist.
    """
    if config_path:
        if os.path.isfile(config_path):
            return config_path
        raise FileNotFoundError(f'Specified config file not found: {config_path}')

    current_dir = os.getcwd()
    project_dir = Path(__file__).resolve().parent.parent
    default_paths = [
        os.path.join(current_dir, 'config', 'config.yaml'),
        os.path.join(project_dir, 'config', 'config.yaml'),
        os.path.join(current_dir, 'config.yaml'),
    ]
    for path in default_paths:
        if os.path.isfile(path):
            logging.debug(f'Auto-discovered config file: {path}')
            return path
    return None


def _apply_env_overrides(raw: dict) -> dict:
    base_url = os.getenv('IHAPERF_BASE_URL')
    if base_url:
        raw['base_url'] = base_url

    browser = raw.get('browser') or {}
    if not isinstance(browser, dict):
        raise ValueError(f'browser must be a mapping, got {type(browser).__name__}')
    raw['browser'] = browser
    headless = os.getenv('IHAPERF_HEADLESS')
    if headless is not None and headless != '':
        browser['headless'] = headless.strip().lower() in ('1', 'true', 'yes', 'on')

    browsers = os.getenv('IHAPERF_BROWSERS')
    if browsers:
        browser['browsers'] = [name.strip().lower() for name in browsers.split(',') if name.strip()]

    # Docker has no display server
    if os.getenv('DOCKER_ENV') == 'true' and not browser.get('headless', True):
        logging.warning('Docker environment detected, forcing headless mode')
        browser['headless'] = True
    return raw


def load_config(config_path: Optional[str] = None) -> RunConfig:
    """Build the run configuration from YAML, ``.env`` and the environment.

    Environment variables take priority over the config file.
    """
    load_dotenv()

    raw = {}
    path = find_config_file(config_path)
    if path:
        with open(path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f'Config file {path} must contain a mapping, got {type(raw).__name__}')
        logging.info(f'Loaded config file: {path}')

    return RunConfig(**_apply_env_overrides(raw))
