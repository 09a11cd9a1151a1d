"""Prompt templates: pure builders, no network."""

import json

import pytest

from backend.core.errors import GenerationError, MissingInputError
from backend.features.ai import prompts
from backend.features.ai.schemas import CAPTIONS_SCHEMA, REMIX_SCHEMA, VIDEO_SEGMENTS_SCHEMA
from backend.models.generation import (
    InitialAnalysis,
    MediaInput,
    OutputFormat,
    RemixGoal,
    VideoPromptOptions,
    VideoType,
)

PNG = MediaInput(data=b"\x89PNG fake", mime_type="image/png", filename="ref.png")
MP4 = MediaInput(data=b"\x00\x00 ftyp", mime_type="video/mp4", filename="clip.mp4")


def test_text_prompt_asks_for_structured_directives():
    spec = prompts.build_text_prompt("cafeteria logo", "geral-texto")
    assert spec.parts == ('Tópico do usuário: "cafeteria logo"',)
    assert spec.temperature == 0.8
    for directive in ("Persona/Papel", "Tarefa", "Contexto", "Formato de Saída"):
        assert directive in spec.system_instruction
    assert '"geral-texto"' in spec.system_instruction
    assert spec.structured is False


@pytest.mark.parametrize("topic", ["", "   ", "\n\t"])
def test_text_prompt_rejects_blank_topic(topic):
    with pytest.raises(MissingInputError) as exc:
        prompts.build_text_prompt(topic, "geral-texto")
    assert isinstance(exc.value, GenerationError)


def test_image_prompt_modes():
    with_image = prompts.build_image_prompt(PNG, "", "midjourney")
    assert with_image.media_parts == (PNG,)
    assert "recriar uma imagem semelhante" in with_image.text_parts[0]

    merged = prompts.build_image_prompt(PNG, "adicione neve", "midjourney")
    assert 'instrução do usuário: "adicione neve"' in merged.text_parts[0]

    text_only = prompts.build_image_prompt(None, "um farol ao entardecer", "dall-e-3")
    assert text_only.media_parts == ()
    assert "APENAS na seguinte ideia" in text_only.text_parts[0]

    with pytest.raises(MissingInputError) as exc:
        prompts.build_image_prompt(None, "  ", "dall-e-3")
    assert exc.value.message == "Por favor, forneça uma descrição para a imagem."


def test_image_edit_requires_image_and_instruction():
    with pytest.raises(MissingInputError):
        prompts.build_image_edit_prompt(PNG, "")
    with pytest.raises(MissingInputError):
        prompts.build_image_edit_prompt(None, "adicione um chapéu")

    spec = prompts.build_image_edit_prompt(PNG, "adicione um chapéu")
    assert spec.parts == (PNG, 'Instrução do usuário: "adicione um chapéu"')
    assert spec.temperature == 0.7


def test_video_24_seconds_on_segmenting_model_requests_three_segments():
    spec = prompts.build_video_prompt("gato holográfico dirigindo", "Flow VEO", VideoPromptOptions(duration=24))
    assert "dividir a cena em 3 segmentos de 8 segundos" in spec.system_instruction
    assert "vídeo de 24 segundos" in spec.system_instruction
    assert "lista numerada" in spec.system_instruction
    assert spec.response_schema is None


def test_video_structured_output_uses_segment_schema():
    options = VideoPromptOptions(duration=16, output_format=OutputFormat.STRUCTURED)
    spec = prompts.build_video_prompt("corrida na chuva", "Flow VEO", options)
    assert spec.response_schema is VIDEO_SEGMENTS_SCHEMA
    assert spec.parse_policy == prompts.ParseFailurePolicy.RAW_TEXT
    assert '"segmento"' in spec.system_instruction


def test_video_continuation_numbering_starts_after_last_segment():
    existing = "1. Um gato entra no carro.\n2."
    assert prompts.next_segment_number(existing) == 3

    options = VideoPromptOptions(duration=8, existing_prompts=existing)
    spec = prompts.build_video_prompt("gato dirigindo", "Flow VEO", options)
    assert spec.name == "video-continuation"
    assert "começando a numeração a partir de 3" in spec.system_instruction
    assert "próximos 1 segmentos" in spec.system_instruction
    assert existing in spec.system_instruction


def test_segment_number_from_structured_reply():
    existing = json.dumps([{"segmento": 1, "prompt": "a"}, {"segmento": 4, "prompt": "b"}])
    assert prompts.last_segment_number(existing) == 4
    assert prompts.next_segment_number("") == 1
    assert prompts.next_segment_number("sem numeração") == 1


def test_parse_segments_requires_segment_items():
    segments = prompts.parse_segments(json.dumps([{"segmento": 2, "prompt": "b"}]))
    assert [(s.segment, s.prompt) for s in segments] == [(2, "b")]

    assert prompts.parse_segments('[{"x": 1}]') is None
    assert prompts.parse_segments('[{"segmento": "dois", "prompt": "b"}]') is None
    assert prompts.parse_segments("1. Um gato.") is None
    assert prompts.parse_segments(None) is None


def test_segment_number_ignores_invalid_structured_reply():
    # Not a segment array, so the numbered-line scan applies
    assert prompts.last_segment_number('[{"x": 1}]\n2. Um gato.') == 2


def test_non_segmenting_model_gets_single_prompt():
    spec = prompts.build_video_prompt("pôr do sol na praia", "Google VEO", VideoPromptOptions(duration=24))
    assert "dividir a cena" not in spec.system_instruction
    assert "prompt cinematográfico" in spec.system_instruction
    assert spec.response_schema is None


def test_video_option_instructions():
    plain = prompts.build_video_prompt("ideia", "Pika", VideoPromptOptions())
    assert "sem diálogos ou narração" in plain.system_instruction
    assert "sem nenhum texto na tela" in plain.system_instruction
    assert "BRIEFING DE COMERCIAL" not in plain.system_instruction

    options = VideoPromptOptions(
        dialogue_language="pt-br",
        influencer_prompt="mulher de cabelo azul, jaqueta neon",
        background_image=PNG,
        logo=PNG,
        video_type=VideoType.COMMERCIAL,
        on_screen_text=True,
    )
    rich = prompts.build_video_prompt("ideia", "Pika", options)
    assert "**Português (Brasil)**" in rich.system_instruction
    assert "mulher de cabelo azul, jaqueta neon" in rich.system_instruction
    assert "imagem de cenário fornecida" in rich.system_instruction
    assert "logomarca fornecida" in rich.system_instruction
    assert "sugestões de texto na tela" in rich.system_instruction
    # idea text first, then background, then logo
    assert rich.parts == ('Ideia do usuário: "ideia"', PNG, PNG)


def test_video_duration_must_be_multiple_of_eight():
    with pytest.raises(ValueError):
        VideoPromptOptions(duration=10)
    with pytest.raises(ValueError):
        VideoPromptOptions(duration=0)


def test_captions_prompt():
    spec = prompts.build_captions_prompt("gato dançando", "instagram-reels")
    assert spec.response_schema is CAPTIONS_SCHEMA
    assert "**Instagram Reels**" in spec.system_instruction
    assert "3 objetos" in spec.system_instruction
    assert spec.parse_policy == prompts.ParseFailurePolicy.FAIL


def test_influencer_prompt_from_image_only():
    spec = prompts.build_influencer_prompt("", PNG)
    assert spec.parts == (f'Instrução do usuário: "{prompts.FROM_IMAGE_DESCRIPTION}"', PNG)
    with pytest.raises(MissingInputError):
        prompts.build_influencer_prompt("  ")


def test_remix_goals_select_distinct_strategies():
    instructions = {
        goal: prompts.build_remix_prompt(MP4, "", goal).system_instruction for goal in RemixGoal
    }
    assert "MÁXIMA VISUALIZAÇÃO" in instructions[RemixGoal.VIEWS]
    assert "MÁXIMA INTERAÇÃO" in instructions[RemixGoal.INTERACTION]
    assert "GANHAR SEGUIDORES" in instructions[RemixGoal.FOLLOWERS]
    assert len(set(instructions.values())) == 3

    spec = prompts.build_remix_prompt(MP4, "", RemixGoal.VIEWS)
    assert spec.response_schema is REMIX_SCHEMA
    assert spec.parts[0] == MP4

    with pytest.raises(MissingInputError):
        prompts.build_remix_prompt(None, "", RemixGoal.VIEWS)


def test_analysis_requires_username_and_screenshots():
    with pytest.raises(MissingInputError):
        prompts.build_analysis_prompt("tiktok", "perfil", "views", [])
    with pytest.raises(MissingInputError):
        prompts.build_analysis_prompt("tiktok", " ", "views", [PNG])

    spec = prompts.build_analysis_prompt("tiktok", "@perfil", "views", [PNG, PNG])
    assert spec.media_parts == (PNG, PNG)
    assert "@perfil" in spec.system_instruction
    assert "@@perfil" not in spec.system_instruction
    assert "Aumentar Visualizações" in spec.system_instruction


def test_action_plan_prompt_carries_diagnosis():
    analysis = InitialAnalysis(
        prova_de_analise="Vi que sua bio diz 'café'",
        pontos_fortes=["identidade visual"],
        pontos_a_melhorar=["pouca frequência"],
    )
    spec = prompts.build_action_plan_prompt(analysis, "followers", "youtube-shorts")
    assert "identidade visual" in spec.system_instruction
    assert "pouca frequência" in spec.system_instruction
    assert "YouTube Shorts" in spec.system_instruction
    assert spec.temperature == 0.9
