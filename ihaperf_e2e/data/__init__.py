from .scenario import HttpMethod, LoadPattern, ScenarioConfig, ScenarioInfo
from .factories import build_scenario, new_run_id, unique_name

__all__ = [
    "HttpMethod",
    "LoadPattern",
    "ScenarioConfig",
    "ScenarioInfo",
    "build_scenario",
    "new_run_id",
    "unique_name",
]
