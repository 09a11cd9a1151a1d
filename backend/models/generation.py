"""
backend/models/generation.py

Generation requests and structured results.

Structured results keep the field names the model is asked to produce
(Portuguese, matching the instruction text) as aliases, and expose English
attribute names to the rest of the service.
"""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MediaInput(BaseModel):
    """Raw bytes of an uploaded file plus its MIME type."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    mime_type: str
    filename: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    @property
    def is_video(self) -> bool:
        return self.mime_type.startswith("video/")


class OutputFormat(str, Enum):
    PLAIN = "plain"
    STRUCTURED = "structured"


class VideoType(str, Enum):
    NORMAL = "normal"
    COMMERCIAL = "commercial"


class RemixGoal(str, Enum):
    VIEWS = "views"
    INTERACTION = "interaction"
    FOLLOWERS = "followers"


class VideoPromptOptions(BaseModel):
    """Options bag for the video idea template. Built per call, never stored."""

    model_config = ConfigDict(frozen=True)

    duration: int = 8
    output_format: OutputFormat = OutputFormat.PLAIN
    dialogue_language: str = "sem-dialogo"
    influencer_prompt: Optional[str] = None
    existing_prompts: Optional[str] = None
    background_image: Optional[MediaInput] = None
    logo: Optional[MediaInput] = None
    video_type: VideoType = VideoType.NORMAL
    on_screen_text: bool = False

    @field_validator("duration")
    @classmethod
    def multiple_of_segment(cls, value: int) -> int:
        if value < 8 or value % 8 != 0:
            raise ValueError("duration must be a positive multiple of 8 seconds")
        return value

    @property
    def is_continuation(self) -> bool:
        return bool(self.existing_prompts and self.existing_prompts.strip())


class _StructuredReply(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class VideoSegment(_StructuredReply):
    segment: int = Field(alias="segmento")
    prompt: str


class CaptionVariation(_StructuredReply):
    variation: int = Field(alias="variacao")
    hook: str = Field(alias="gancho")
    body: str = Field(alias="desenvolvimento")
    call_to_action: str = Field(alias="cta")
    hashtags: str

    @field_validator("hashtags")
    @classmethod
    def hash_prefixed(cls, value: str) -> str:
        tokens = [token.strip(",;") for token in value.split()]
        return " ".join(token if token.startswith("#") else f"#{token}" for token in tokens if token)


class RemixScript(_StructuredReply):
    narration_script: str = Field(alias="roteiro_narracao")
    remix_instructions: str = Field(alias="instrucoes_remix")


class InitialAnalysis(_StructuredReply):
    evidence_quote: str = Field(alias="prova_de_analise")
    strengths: List[str] = Field(alias="pontos_fortes")
    weaknesses: List[str] = Field(alias="pontos_a_melhorar")

    @field_validator("evidence_quote")
    @classmethod
    def evidence_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("evidence quote must cite the screenshots")
        return value


class ActionStep(_StructuredReply):
    step: int = Field(alias="passo")
    action: str = Field(alias="acao")


class ViralContentSuggestion(_StructuredReply):
    idea: str = Field(alias="ideia")
    format: str = Field(alias="formato")
    suggested_script: str = Field(alias="roteiro_sugerido")


class ActionPlan(_StructuredReply):
    action_plan: List[ActionStep] = Field(alias="plano_de_acao")
    viral_content_suggestion: ViralContentSuggestion = Field(alias="sugestao_de_conteudo_viral")


class TextResult(BaseModel):
    kind: Literal["text"] = "text"
    text: str
    output_format: OutputFormat = OutputFormat.PLAIN


class CaptionsResult(BaseModel):
    kind: Literal["captions"] = "captions"
    variations: List[CaptionVariation]


class RemixResult(BaseModel):
    kind: Literal["remix"] = "remix"
    script: RemixScript


class AnalysisResult(BaseModel):
    kind: Literal["analysis"] = "analysis"
    analysis: InitialAnalysis


class ActionPlanResult(BaseModel):
    kind: Literal["action_plan"] = "action_plan"
    plan: ActionPlan
