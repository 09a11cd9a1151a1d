"""
backend/models/studio.py

Per-tab interaction state for a studio session.

Each tab (and each secondary action such as captions or the action plan)
is in exactly one of Idle | Submitting | Succeeded | Failed.
"""

from typing import Annotated, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from backend.models.generation import (
    ActionPlanResult,
    AnalysisResult,
    CaptionsResult,
    RemixResult,
    TextResult,
)
from backend.models.lead import Identity
from backend.models.usage import FeatureTag

Tab = FeatureTag

GenerationResult = Annotated[
    Union[TextResult, CaptionsResult, RemixResult, AnalysisResult, ActionPlanResult],
    Field(discriminator="kind"),
]


class ErrorInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    message: str


class Idle(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["idle"] = "idle"


class Submitting(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["submitting"] = "submitting"
    action: str
    # Result being extended by a continuation, still shown while busy
    previous: Optional[GenerationResult] = None


class Succeeded(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["succeeded"] = "succeeded"
    result: GenerationResult


class Failed(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["failed"] = "failed"
    error: ErrorInfo
    previous: Optional[GenerationResult] = None


TabState = Annotated[Union[Idle, Submitting, Succeeded, Failed], Field(discriminator="status")]

IDLE = Idle()


class TabView(BaseModel):
    """Main state of a tab plus the states of its secondary actions."""

    state: TabState = IDLE
    secondary: Dict[str, TabState] = Field(default_factory=dict)


class RegistrationPrompt(BaseModel):
    """Shown when access is denied; limit_reached funnels to manual contact."""

    model_config = ConfigDict(frozen=True)

    feature: str
    limit_reached: bool = False


class CharacterSheets(BaseModel):
    generated: str = ""
    existing: str = ""


class SessionSnapshot(BaseModel):
    session_id: str
    identity: Optional[Identity] = None
    usage: Dict[str, int] = Field(default_factory=dict)
    active_tab: Tab
    tabs: Dict[str, TabView]
    character_sheets: CharacterSheets
    registration_prompt: Optional[RegistrationPrompt] = None
