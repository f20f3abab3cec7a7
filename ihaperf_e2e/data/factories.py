import uuid
from typing import Optional

from ihaperf_e2e.data.scenario import HttpMethod, ScenarioConfig

DEFAULT_TARGET_URL = 'https://jsonplaceholder.typicode.com/posts/1'
DEFAULT_DESCRIPTION = 'Created by Playwright automation test'


def new_run_id() -> str:
    """Return a fresh identifier for one test run.

    Callers keep the id and pass it to the helpers below; nothing here
    remembers it.
    """
    return uuid.uuid4().hex[:8]


def unique_name(base: str, run_id: Optional[str]) -> str:
    if not run_id:
        return base
    return f'{base} [{run_id}]'


def build_scenario(name: str, run_id: Optional[str] = None, **overrides) -> ScenarioConfig:
    """Build the suite's default scenario: GET, 2 virtual users, 60s, 5s ramp-up.

    Args:
        name: Base scenario name, suffixed with ``run_id`` when given.
        run_id: Identifier from :func:`new_run_id`.
        **overrides: Any ScenarioConfig field.
    """
    values = {
        'name': unique_name(name, run_id),
        'description': DEFAULT_DESCRIPTION,
        'url': DEFAULT_TARGET_URL,
        'method': HttpMethod.GET,
        'virtual_users': 2,
        'duration': 60,
        'ramp_up_time': 5,
    }
    values.update(overrides)
    return ScenarioConfig(**values)
