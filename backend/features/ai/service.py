"""Generation services: template -> adapter call -> shaped result.

Every function raises a GenerationError subclass on failure:
    MissingInputError: required input empty, raised before any call
    DownstreamError: the generative service failed
    ResponseShapeError: structured reply did not match the expected shape
"""

from typing import List, Optional, Sequence

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from backend.core.errors import ResponseShapeError
from backend.features.ai import prompts
from backend.features.ai.adapter import GenerationOutput, GenerativeAdapter
from backend.models.generation import (
    ActionPlan,
    ActionPlanResult,
    AnalysisResult,
    CaptionsResult,
    CaptionVariation,
    InitialAnalysis,
    MediaInput,
    OutputFormat,
    RemixGoal,
    RemixResult,
    RemixScript,
    TextResult,
    VideoPromptOptions,
)

CAPTION_VARIATIONS = 3

_captions_adapter = TypeAdapter(List[CaptionVariation])


def _shape(model, data, failure_message: str):
    try:
        return model.validate_python(data) if isinstance(model, TypeAdapter) else model.model_validate(data)
    except PydanticValidationError as exc:
        raise ResponseShapeError(failure_message) from exc


async def generate_prompt_from_text(adapter: GenerativeAdapter, topic: str, target_ai: str) -> TextResult:
    spec = prompts.build_text_prompt(topic, target_ai)
    output = await adapter.generate(spec, failure_message="Erro ao gerar prompt")
    return TextResult(text=output.text)


async def generate_prompt_from_image(
    adapter: GenerativeAdapter, image: Optional[MediaInput], instruction: str, target_ai: str
) -> TextResult:
    spec = prompts.build_image_prompt(image, instruction, target_ai)
    output = await adapter.generate(spec, failure_message="Erro ao gerar prompt de imagem")
    return TextResult(text=output.text)


async def generate_image_edit_prompt(
    adapter: GenerativeAdapter, image: Optional[MediaInput], instruction: str
) -> TextResult:
    spec = prompts.build_image_edit_prompt(image, instruction)
    output = await adapter.generate(spec, failure_message="Erro ao gerar prompt de edição")
    return TextResult(text=output.text)


async def generate_prompt_from_video_idea(
    adapter: GenerativeAdapter, idea: str, target_ai: str, options: Optional[VideoPromptOptions] = None
) -> TextResult:
    spec = prompts.build_video_prompt(idea, target_ai, options)
    output: GenerationOutput = await adapter.generate(spec, failure_message="Erro ao gerar prompt de vídeo")
    structured = spec.structured and not output.degraded
    return TextResult(
        text=output.text,
        output_format=OutputFormat.STRUCTURED if structured else OutputFormat.PLAIN,
    )


async def generate_captions_and_hashtags(
    adapter: GenerativeAdapter, video_idea: str, platform: str
) -> CaptionsResult:
    failure = "Não foi possível gerar as legendas"
    spec = prompts.build_captions_prompt(video_idea, platform)
    output = await adapter.generate(spec, failure_message=failure)
    variations = _shape(_captions_adapter, output.data, failure)
    if len(variations) != CAPTION_VARIATIONS:
        raise ResponseShapeError(f"{failure}: esperadas {CAPTION_VARIATIONS} variações, recebidas {len(variations)}")
    return CaptionsResult(variations=variations)


async def generate_influencer_prompt(
    adapter: GenerativeAdapter, description: str, image: Optional[MediaInput] = None
) -> TextResult:
    spec = prompts.build_influencer_prompt(description, image)
    output = await adapter.generate(spec, failure_message="Não foi possível gerar o prompt do influenciador")
    return TextResult(text=output.text)


async def generate_remix_script(
    adapter: GenerativeAdapter, video: Optional[MediaInput], influencer_prompt: str, goal: RemixGoal
) -> RemixResult:
    failure = "Não foi possível gerar o roteiro de remix"
    spec = prompts.build_remix_prompt(video, influencer_prompt, goal)
    output = await adapter.generate(spec, failure_message=failure)
    return RemixResult(script=_shape(RemixScript, output.data, failure))


async def generate_initial_profile_analysis(
    adapter: GenerativeAdapter,
    platform: str,
    username: str,
    goal: str,
    screenshots: Sequence[MediaInput],
) -> AnalysisResult:
    failure = "Não foi possível gerar a análise estratégica"
    spec = prompts.build_analysis_prompt(platform, username, goal, screenshots)
    output = await adapter.generate(spec, failure_message=failure)
    return AnalysisResult(analysis=_shape(InitialAnalysis, output.data, failure))


async def generate_action_plan(
    adapter: GenerativeAdapter, analysis: InitialAnalysis, goal: str, platform: str
) -> ActionPlanResult:
    failure = "Não foi possível gerar o plano de ação"
    spec = prompts.build_action_plan_prompt(analysis, goal, platform)
    output = await adapter.generate(spec, failure_message=failure)
    return ActionPlanResult(plan=_shape(ActionPlan, output.data, failure))
