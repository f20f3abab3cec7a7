from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class HttpMethod(str, Enum):
    GET = 'GET'
    POST = 'POST'
    PUT = 'PUT'
    PATCH = 'PATCH'
    DELETE = 'DELETE'


class LoadPattern(str, Enum):
    """Load patterns offered by the scenario form, valued by their button labels."""

    CONSTANT = 'Constant Load'
    RAMP_UP = 'Ramp-Up'
    RAMP_DOWN = 'Ramp-Down'
    SPIKE = 'Spike Test'
    STRESS = 'Stress Test'


class ScenarioConfig(BaseModel):
    """Values typed into the new-scenario form.

    Durations are in seconds. Range checks beyond non-negativity are left to
    the application under test.
    """

    name: str = Field(min_length=1)
    description: Optional[str] = None
    url: str
    method: HttpMethod = HttpMethod.GET
    virtual_users: int = Field(ge=0)
    duration: int = Field(ge=0)
    ramp_up_time: int = Field(default=10, ge=0)
    load_pattern: Optional[LoadPattern] = None


class ScenarioInfo(BaseModel):
    """Text shown on one scenario card."""

    name: str = ''
    target: str = ''
    method: str = ''
    virtual_users: str = ''
    duration: str = ''
