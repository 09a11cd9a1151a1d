"""
Studio API: catalog, registration, session state and every generation action.

The client session is identified by the X-Session-Id header; when absent a
new session is opened and its id is echoed back in the same header.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile
from pydantic import BaseModel

from backend.core.errors import ValidationError
from backend.features.ai.adapter import media_from_upload
from backend.features.catalog.service import catalog_payload, random_idea
from backend.features.studio.controller import (
    InfluencerOption,
    RemixNarration,
    SheetTarget,
    StudioSession,
)
from backend.features.studio.sessions import SESSION_HEADER, SessionRegistry
from backend.models.generation import MediaInput, OutputFormat, RemixGoal, VideoType
from backend.models.lead import Identity
from backend.models.studio import Tab

router = APIRouter(prefix="/v1/studio", tags=["studio"])

INVALID_IMAGE = "Por favor, selecione um arquivo de imagem válido."
INVALID_VIDEO = "Por favor, selecione um arquivo de vídeo válido."


def get_session(request: Request, response: Response) -> StudioSession:
    registry: SessionRegistry = request.app.state.sessions
    session = registry.get_or_create(request.headers.get(SESSION_HEADER))
    response.headers[SESSION_HEADER] = session.session_id
    return session


async def _image(upload: Optional[UploadFile]) -> Optional[MediaInput]:
    media = await media_from_upload(upload)
    if media is not None and not media.is_image:
        raise ValidationError(INVALID_IMAGE)
    return media


def _result(session: StudioSession, result) -> dict:
    return {
        "session_id": session.session_id,
        "result": result.model_dump(mode="json"),
        "usage": session.local.get_usage().counts,
    }


class TextRequest(BaseModel):
    topic: str
    target_ai: Optional[str] = None


class CaptionsRequest(BaseModel):
    video_idea: str
    platform: str = "tiktok"


class InputChangedRequest(BaseModel):
    field: Optional[str] = None


@router.get("/catalog")
def get_catalog():
    return catalog_payload()


@router.get("/ideas/random")
def get_random_idea(tab: Tab):
    return {"tab": tab.value, "idea": random_idea(tab.value)}


@router.post("/register")
def register(identity: Identity, session: StudioSession = Depends(get_session)):
    return session.register(identity).model_dump(mode="json")


@router.get("/session")
def get_session_snapshot(session: StudioSession = Depends(get_session)):
    return session.snapshot().model_dump(mode="json")


@router.post("/tabs/{tab}/activate")
def activate_tab(tab: Tab, session: StudioSession = Depends(get_session)):
    return session.activate_tab(tab).model_dump(mode="json")


@router.post("/tabs/{tab}/input")
def input_changed(tab: Tab, body: Optional[InputChangedRequest] = None, session: StudioSession = Depends(get_session)):
    return session.input_changed(tab).model_dump(mode="json")


@router.post("/text")
async def generate_text(body: TextRequest, session: StudioSession = Depends(get_session)):
    result = await session.submit_text(body.topic, body.target_ai)
    return _result(session, result)


@router.post("/image")
async def generate_image(
    instruction: str = Form(""),
    target_ai: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    session: StudioSession = Depends(get_session),
):
    result = await session.submit_image(await _image(image), instruction, target_ai)
    return _result(session, result)


@router.post("/image-edit")
async def generate_image_edit(
    instruction: str = Form(""),
    image: Optional[UploadFile] = File(None),
    session: StudioSession = Depends(get_session),
):
    result = await session.submit_image_edit(await _image(image), instruction)
    return _result(session, result)


@router.post("/video")
async def generate_video(
    idea: str = Form(""),
    target_ai: Optional[str] = Form(None),
    duration: int = Form(8),
    output_format: OutputFormat = Form(OutputFormat.PLAIN),
    dialogue_language: str = Form("sem-dialogo"),
    influencer_option: InfluencerOption = Form(InfluencerOption.NONE),
    existing_influencer_prompt: Optional[str] = Form(None),
    video_type: VideoType = Form(VideoType.NORMAL),
    on_screen_text: bool = Form(False),
    background_image: Optional[UploadFile] = File(None),
    logo: Optional[UploadFile] = File(None),
    session: StudioSession = Depends(get_session),
):
    result = await session.submit_video(
        idea,
        target_ai,
        duration=duration,
        output_format=output_format,
        dialogue_language=dialogue_language,
        influencer_option=influencer_option,
        existing_influencer_prompt=existing_influencer_prompt,
        background_image=await _image(background_image),
        logo=await _image(logo),
        video_type=video_type,
        on_screen_text=on_screen_text,
    )
    return _result(session, result)


@router.post("/video/continue")
async def continue_video(
    additional_duration: int = Form(8),
    session: StudioSession = Depends(get_session),
):
    result = await session.continue_video(additional_duration)
    return _result(session, result)


@router.post("/video/captions")
async def generate_captions(body: CaptionsRequest, session: StudioSession = Depends(get_session)):
    result = await session.submit_captions(body.video_idea, body.platform)
    return _result(session, result)


@router.post("/influencer")
async def generate_influencer(
    description: str = Form(""),
    tab: Tab = Form(Tab.VIDEO),
    target: SheetTarget = Form(SheetTarget.GENERATED),
    image: Optional[UploadFile] = File(None),
    session: StudioSession = Depends(get_session),
):
    result = await session.submit_influencer(description, await _image(image), tab=tab, target=target)
    return {**_result(session, result), "character_sheets": session.character_sheets.model_dump()}


@router.post("/remix")
async def generate_remix(
    request: Request,
    goal: RemixGoal = Form(RemixGoal.VIEWS),
    narration: RemixNarration = Form(RemixNarration.VOICE_ONLY),
    existing_influencer_prompt: Optional[str] = Form(None),
    video: Optional[UploadFile] = File(None),
    session: StudioSession = Depends(get_session),
):
    media = await media_from_upload(video)
    if media is not None:
        if not media.is_video:
            raise ValidationError(INVALID_VIDEO)
        if media.size > request.app.state.config.max_remix_video_bytes:
            raise ValidationError("O vídeo deve ter no máximo 30 segundos (aprox. 30MB).")
    result = await session.submit_remix(media, goal, narration, existing_influencer_prompt)
    return _result(session, result)


@router.post("/analysis")
async def generate_analysis(
    platform: str = Form("tiktok"),
    username: str = Form(""),
    goal: str = Form("views"),
    screenshots: Optional[List[UploadFile]] = File(None),
    session: StudioSession = Depends(get_session),
):
    media = [m for m in [await _image(upload) for upload in screenshots or []] if m is not None]
    result = await session.submit_analysis(platform, username, goal, media)
    return _result(session, result)


@router.post("/analysis/action-plan")
async def generate_action_plan(session: StudioSession = Depends(get_session)):
    result = await session.submit_action_plan()
    return _result(session, result)
