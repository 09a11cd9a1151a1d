"""
backend/features/studio/controller.py

Per-session studio controller.

Holds the interaction state of every tab as an explicit
Idle | Submitting | Succeeded | Failed value and drives each feature
invocation through: input check -> access gate -> generation -> state
update -> usage record.

Rules:
- Switching tabs resets every tab to Idle; character sheets survive.
- An input change returns a terminal (Succeeded/Failed) state to Idle.
- One in-flight request per (tab, action); a second submit is a conflict.
- A request always runs to completion; if the tab was reset meanwhile its
  result is not written back (usage is still recorded).
"""

import json
import logging
from collections import defaultdict
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Set, Tuple

from pydantic import ValidationError as PydanticValidationError

from backend.core.config import StudioConfig
from backend.core.errors import (
    AccessDeniedError,
    ConflictError,
    GenerationError,
    MissingInputError,
    StageOrderError,
    ValidationError,
)
from backend.features.access.service import AccessGate
from backend.features.ai import prompts
from backend.features.ai import service as ai
from backend.features.ai.adapter import GenerativeAdapter
from backend.features.catalog.service import default_model, find_model
from backend.features.leads.service import LeadStore
from backend.features.usage.service import LocalUsageStore
from backend.models.generation import (
    AnalysisResult,
    MediaInput,
    OutputFormat,
    RemixGoal,
    TextResult,
    VideoPromptOptions,
    VideoType,
)
from backend.models.lead import Identity
from backend.models.studio import (
    IDLE,
    CharacterSheets,
    ErrorInfo,
    Failed,
    GenerationResult,
    RegistrationPrompt,
    SessionSnapshot,
    Submitting,
    Succeeded,
    Tab,
    TabView,
)

logger = logging.getLogger("codeprompt.studio")

MAIN = "main"
CAPTIONS = "captions"
ACTION_PLAN = "action_plan"
INFLUENCER = "influencer"

UNEXPECTED_FAILURE = "Ops! Algo deu errado. Recarregue a página para tentar novamente."


class InfluencerOption(str, Enum):
    NONE = "none"
    CREATE = "create"
    EXISTING = "existing"


class RemixNarration(str, Enum):
    VOICE_ONLY = "voice_only"
    CREATE_INFLUENCER = "create_influencer"
    USE_INFLUENCER = "use_influencer"


class SheetTarget(str, Enum):
    GENERATED = "generated"
    EXISTING = "existing"


def merge_continuation(previous: TextResult, addition: TextResult) -> TextResult:
    """Append continuation segments to an earlier video result."""
    if previous.output_format == OutputFormat.STRUCTURED and addition.output_format == OutputFormat.STRUCTURED:
        earlier, later = prompts.parse_segments(previous.text), prompts.parse_segments(addition.text)
        if earlier is not None and later is not None:
            combined = [segment.model_dump(by_alias=True) for segment in earlier + later]
            return TextResult(
                text=json.dumps(combined, indent=2, ensure_ascii=False),
                output_format=OutputFormat.STRUCTURED,
            )
        logger.warning(
            "[studio] structured continuation merge failed; joining as text",
            extra={"tab": Tab.VIDEO.value, "event_type": "studio.merge_degraded"},
        )
    return TextResult(text=f"{previous.text}\n{addition.text}", output_format=OutputFormat.PLAIN)


class StudioSession:
    def __init__(
        self,
        session_id: str,
        config: StudioConfig,
        adapter: GenerativeAdapter,
        local: LocalUsageStore,
        leads: Optional[LeadStore] = None,
    ):
        self.session_id = session_id
        self.config = config
        self.adapter = adapter
        self.local = local
        self.gate = AccessGate(config, local, leads)
        self.active_tab: Tab = Tab.TEXT
        self.tabs: Dict[str, TabView] = {tab.value: TabView() for tab in Tab}
        self.character_sheets = CharacterSheets()
        self.registration_prompt: Optional[RegistrationPrompt] = None
        self._epochs: Dict[str, int] = defaultdict(int)
        self._in_flight: Set[Tuple[str, str]] = set()
        # Inputs of the last video / analysis submission, reused by the follow-up actions
        self._video_request: Optional[Tuple[str, str, VideoPromptOptions]] = None
        self._analysis_request: Optional[Tuple[str, str]] = None

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    def state(self, tab: Tab, action: str = MAIN):
        view = self.tabs[Tab(tab).value]
        return view.state if action == MAIN else view.secondary.get(action, IDLE)

    def _set_state(self, tab: Tab, action: str, state) -> None:
        view = self.tabs[tab.value]
        if action == MAIN:
            view.state = state
        else:
            view.secondary[action] = state

    def activate_tab(self, tab: Tab) -> SessionSnapshot:
        tab = Tab(tab)
        for name in self.tabs:
            self.tabs[name] = TabView()
            self._epochs[name] += 1
        self.active_tab = tab
        self.registration_prompt = None
        return self.snapshot()

    def input_changed(self, tab: Tab) -> SessionSnapshot:
        view = self.tabs[Tab(tab).value]
        if isinstance(view.state, (Succeeded, Failed)):
            view.state = IDLE
        for action, state in list(view.secondary.items()):
            if isinstance(state, (Succeeded, Failed)):
                view.secondary[action] = IDLE
        return self.snapshot()

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=self.session_id,
            identity=self.local.get_identity(),
            usage=self.local.get_usage().counts,
            active_tab=self.active_tab,
            tabs={name: view.model_copy(deep=True) for name, view in self.tabs.items()},
            character_sheets=self.character_sheets.model_copy(),
            registration_prompt=self.registration_prompt,
        )

    def register(self, identity: Identity) -> SessionSnapshot:
        self.gate.register(identity)
        self.registration_prompt = None
        return self.snapshot()

    # ------------------------------------------------------------------
    # Submission pipeline
    # ------------------------------------------------------------------

    def _fail(self, tab: Tab, action: str, epoch: int, code: str, message: str, previous) -> None:
        if self._epochs[tab.value] == epoch:
            self._set_state(tab, action, Failed(error=ErrorInfo(code=code, message=message), previous=previous))

    async def _run(
        self,
        tab: Tab,
        call: Callable[[], Awaitable[GenerationResult]],
        *,
        action: str = MAIN,
        validate: Optional[Callable[[], object]] = None,
        feature: Optional[str] = None,
        previous: Optional[GenerationResult] = None,
        merge: Optional[Callable[[GenerationResult], GenerationResult]] = None,
        commit: Optional[Callable[[], None]] = None,
    ) -> GenerationResult:
        """Drive one submission; `commit` runs only when the result is kept."""
        key = (tab.value, action)
        if key in self._in_flight:
            raise ConflictError("Esta geração já está em andamento.")

        if validate is not None:
            try:
                validate()
            except MissingInputError as exc:
                self._set_state(tab, action, Failed(error=ErrorInfo(code=exc.code, message=exc.message), previous=previous))
                raise

        if feature is not None:
            try:
                self.gate.require_access(feature)
            except AccessDeniedError as exc:
                self.registration_prompt = RegistrationPrompt(feature=feature, limit_reached=exc.limit_reached)
                raise

        epoch = self._epochs[tab.value]
        self._in_flight.add(key)
        self._set_state(tab, action, Submitting(action=action, previous=previous))
        try:
            result = await call()
            if merge is not None:
                result = merge(result)
            if feature is not None:
                self.gate.record_usage(feature)
        except GenerationError as exc:
            self._fail(tab, action, epoch, exc.code, exc.message, previous)
            raise
        except Exception:
            logger.error(
                "[studio] submission failed unexpectedly",
                exc_info=True,
                extra={"tab": tab.value, "session_id": self.session_id, "event_type": "studio.submit_failed"},
            )
            self._fail(tab, action, epoch, "internal_error", UNEXPECTED_FAILURE, previous)
            raise
        finally:
            self._in_flight.discard(key)

        if self._epochs[tab.value] != epoch:
            logger.info(
                "[studio] tab reset while generating; result not kept",
                extra={"tab": tab.value, "session_id": self.session_id, "event_type": "studio.result_discarded"},
            )
            return result
        if commit is not None:
            commit()
        self._set_state(tab, action, Succeeded(result=result))
        return result

    @staticmethod
    def _target(tab: Tab, target_ai: Optional[str]) -> str:
        if not target_ai:
            return default_model(tab.value)
        model = find_model(target_ai)
        if model is None or model.type != tab.value:
            raise ValidationError(f"Modelo '{target_ai}' não está disponível para a aba '{tab.value}'")
        return model.id

    # ------------------------------------------------------------------
    # Features
    # ------------------------------------------------------------------

    async def submit_text(self, topic: str, target_ai: Optional[str] = None):
        target = self._target(Tab.TEXT, target_ai)
        return await self._run(
            Tab.TEXT,
            lambda: ai.generate_prompt_from_text(self.adapter, topic, target),
            validate=lambda: prompts.build_text_prompt(topic, target),
            feature=Tab.TEXT.value,
        )

    async def submit_image(self, image: Optional[MediaInput], instruction: str, target_ai: Optional[str] = None):
        target = self._target(Tab.IMAGE, target_ai)
        return await self._run(
            Tab.IMAGE,
            lambda: ai.generate_prompt_from_image(self.adapter, image, instruction, target),
            validate=lambda: prompts.build_image_prompt(image, instruction, target),
            feature=Tab.IMAGE.value,
        )

    async def submit_image_edit(self, image: Optional[MediaInput], instruction: str):
        return await self._run(
            Tab.IMAGE_EDIT,
            lambda: ai.generate_image_edit_prompt(self.adapter, image, instruction),
            validate=lambda: prompts.build_image_edit_prompt(image, instruction),
            feature=Tab.IMAGE_EDIT.value,
        )

    def resolve_influencer(self, option: InfluencerOption, pasted: Optional[str] = None) -> str:
        """Character sheet text the video template should use for `option`."""
        option = InfluencerOption(option)
        if pasted and pasted.strip():
            self.character_sheets.existing = pasted.strip()
        if option == InfluencerOption.CREATE:
            return self.character_sheets.generated
        if option == InfluencerOption.EXISTING:
            return self.character_sheets.existing
        return ""

    def _video_options(self, **kwargs) -> VideoPromptOptions:
        try:
            return VideoPromptOptions(**kwargs)
        except PydanticValidationError as exc:
            raise ValidationError(f"Opções de vídeo inválidas: {exc.errors()[0]['msg']}") from exc

    async def submit_video(
        self,
        idea: str,
        target_ai: Optional[str] = None,
        *,
        duration: int = 8,
        output_format: OutputFormat = OutputFormat.PLAIN,
        dialogue_language: str = "sem-dialogo",
        influencer_option: InfluencerOption = InfluencerOption.NONE,
        existing_influencer_prompt: Optional[str] = None,
        background_image: Optional[MediaInput] = None,
        logo: Optional[MediaInput] = None,
        video_type: VideoType = VideoType.NORMAL,
        on_screen_text: bool = False,
    ):
        target = self._target(Tab.VIDEO, target_ai)
        options = self._video_options(
            duration=duration,
            output_format=output_format,
            dialogue_language=dialogue_language,
            influencer_prompt=self.resolve_influencer(influencer_option, existing_influencer_prompt) or None,
            background_image=background_image,
            logo=logo,
            video_type=video_type,
            on_screen_text=on_screen_text,
        )

        def commit():
            self._video_request = (idea, target, options)

        return await self._run(
            Tab.VIDEO,
            lambda: ai.generate_prompt_from_video_idea(self.adapter, idea, target, options),
            validate=lambda: prompts.build_video_prompt(idea, target, options),
            feature=Tab.VIDEO.value,
            commit=commit,
        )

    async def continue_video(self, additional_duration: int = 8):
        """Generate more segments after the current video result and append them."""
        current = self.state(Tab.VIDEO)
        request = self._video_request
        if not isinstance(current, Succeeded) or not isinstance(current.result, TextResult) or request is None:
            raise StageOrderError("Gere o prompt de vídeo antes de continuar a história.")
        previous: TextResult = current.result
        idea, target, base = request
        options = self._video_options(
            **{**dict(base), "duration": additional_duration, "existing_prompts": previous.text}
        )
        return await self._run(
            Tab.VIDEO,
            lambda: ai.generate_prompt_from_video_idea(self.adapter, idea, target, options),
            previous=previous,
            merge=lambda addition: merge_continuation(previous, addition),
        )

    async def submit_captions(self, video_idea: str, platform: str):
        return await self._run(
            Tab.VIDEO,
            lambda: ai.generate_captions_and_hashtags(self.adapter, video_idea, platform),
            action=CAPTIONS,
            validate=lambda: prompts.build_captions_prompt(video_idea, platform),
        )

    async def submit_influencer(
        self,
        description: str,
        image: Optional[MediaInput] = None,
        *,
        tab: Tab = Tab.VIDEO,
        target: SheetTarget = SheetTarget.GENERATED,
    ):
        tab, target = Tab(tab), SheetTarget(target)
        if tab not in (Tab.VIDEO, Tab.REMIX):
            raise ValidationError("Influenciadores só podem ser criados nas abas de vídeo e remix")

        def store(result: TextResult) -> TextResult:
            setattr(self.character_sheets, target.value, result.text)
            return result

        return await self._run(
            tab,
            lambda: ai.generate_influencer_prompt(self.adapter, description, image),
            action=INFLUENCER,
            validate=lambda: prompts.build_influencer_prompt(description, image),
            merge=store,
        )

    def remix_influencer(self, narration: RemixNarration, pasted: Optional[str] = None) -> str:
        narration = RemixNarration(narration)
        if narration == RemixNarration.VOICE_ONLY:
            return ""
        if pasted and pasted.strip():
            self.character_sheets.existing = pasted.strip()
        if narration == RemixNarration.CREATE_INFLUENCER:
            return self.character_sheets.generated
        return self.character_sheets.existing

    async def submit_remix(
        self,
        video: Optional[MediaInput],
        goal: RemixGoal = RemixGoal.VIEWS,
        narration: RemixNarration = RemixNarration.VOICE_ONLY,
        existing_influencer_prompt: Optional[str] = None,
    ):
        influencer = self.remix_influencer(narration, existing_influencer_prompt)

        def validate():
            if video is not None and not video.is_video:
                raise MissingInputError("Por favor, selecione um arquivo de vídeo válido.")
            if RemixNarration(narration) != RemixNarration.VOICE_ONLY and not influencer.strip():
                raise MissingInputError("Por favor, defina o influenciador para esta opção de remix.")
            return prompts.build_remix_prompt(video, influencer, goal)

        return await self._run(
            Tab.REMIX,
            lambda: ai.generate_remix_script(self.adapter, video, influencer, goal),
            validate=validate,
            feature=Tab.REMIX.value,
        )

    async def submit_analysis(self, platform: str, username: str, goal: str, screenshots: List[MediaInput]):
        def commit():
            self._analysis_request = (platform, goal)
            # A new diagnosis invalidates any earlier plan
            self._set_state(Tab.ANALYSIS, ACTION_PLAN, IDLE)

        return await self._run(
            Tab.ANALYSIS,
            lambda: ai.generate_initial_profile_analysis(self.adapter, platform, username, goal, screenshots),
            validate=lambda: prompts.build_analysis_prompt(platform, username, goal, screenshots),
            feature=Tab.ANALYSIS.value,
            commit=commit,
        )

    async def submit_action_plan(self):
        current = self.state(Tab.ANALYSIS)
        if not isinstance(current, Succeeded) or not isinstance(current.result, AnalysisResult):
            raise StageOrderError("Faça a análise do perfil antes de gerar o plano de ação.")
        analysis = current.result.analysis
        platform, goal = self._analysis_request or ("", "")
        return await self._run(
            Tab.ANALYSIS,
            lambda: ai.generate_action_plan(self.adapter, analysis, goal, platform),
            action=ACTION_PLAN,
        )
