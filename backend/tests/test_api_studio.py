"""Studio HTTP surface: sessions, gating and upload checks."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from backend.core.config import GenerationConfig, StudioConfig
from backend.features.ai.adapter import GenerativeAdapter
from backend.main import create_app
from backend.tests.mocks import FakeGenaiClient

IDENTITY = {"name": "Ana", "whatsapp": "+55 11 99999-0000", "email": "ana@example.com"}
SESSION = {"X-Session-Id": "api-session-0001"}


def _register(client, headers=SESSION):
    resp = client.post("/v1/studio/register", json=IDENTITY, headers=headers)
    assert resp.status_code == 200
    return resp


def test_catalog_lists_models_per_tab(client):
    resp = client.get("/v1/studio/catalog")
    assert resp.status_code == 200
    body = resp.json()
    video = {m["id"]: m for m in body["models"]["video"]}
    assert video["Flow VEO"]["supports_segments"] is True
    assert video["Google VEO"]["supports_segments"] is False
    assert body["video_durations"][:3] == [8, 16, 24]


def test_session_header_is_issued_and_echoed(client):
    fresh = client.get("/v1/studio/session")
    issued = fresh.headers["X-Session-Id"]
    assert issued
    assert fresh.json()["active_tab"] == "text"

    again = client.get("/v1/studio/session", headers={"X-Session-Id": issued})
    assert again.headers["X-Session-Id"] == issued


def test_invalid_session_id_is_rejected(client):
    resp = client.get("/v1/studio/session", headers={"X-Session-Id": "bad id!"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "validation_error"


def test_text_generation_then_limit(client, fake_client):
    _register(client)

    first = client.post("/v1/studio/text", json={"topic": "cafeteria logo", "target_ai": "geral-texto"}, headers=SESSION)
    assert first.status_code == 200
    body = first.json()
    assert body["result"]["text"] == "X"
    assert body["usage"] == {"text": 1}

    second = client.post("/v1/studio/text", json={"topic": "de novo"}, headers=SESSION)
    assert second.status_code == 403
    error = second.json()["error"]
    assert error["code"] == "usage_limit_reached"
    assert error["limit_reached"] is True
    assert len(fake_client.calls) == 1

    snapshot = client.get("/v1/studio/session", headers=SESSION).json()
    assert snapshot["registration_prompt"] == {"feature": "text", "limit_reached": True}


def test_unregistered_generation_is_forbidden(client, fake_client):
    resp = client.post("/v1/studio/text", json={"topic": "ideia"}, headers=SESSION)
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "registration_required"
    assert resp.json()["error"]["limit_reached"] is False
    assert fake_client.calls == []


def test_register_twice_conflicts(client):
    _register(client)
    resp = client.post("/v1/studio/register", json=IDENTITY, headers=SESSION)
    assert resp.status_code == 409


def test_register_rejects_bad_email(client):
    resp = client.post("/v1/studio/register", json=dict(IDENTITY, email="sem-arroba"), headers=SESSION)
    assert resp.status_code == 422


def test_image_edit_without_instruction(client, fake_client):
    _register(client)
    resp = client.post(
        "/v1/studio/image-edit",
        data={"instruction": ""},
        files={"image": ("foto.png", b"\x89PNG", "image/png")},
        headers=SESSION,
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "validation_error"
    assert fake_client.calls == []

    snapshot = client.get("/v1/studio/session", headers=SESSION).json()
    assert snapshot["tabs"]["image-edit"]["state"]["status"] == "failed"
    assert snapshot["usage"] == {}


def test_image_upload_must_be_an_image(client):
    _register(client)
    resp = client.post(
        "/v1/studio/image",
        data={"instruction": "x"},
        files={"image": ("doc.pdf", b"%PDF", "application/pdf")},
        headers=SESSION,
    )
    assert resp.status_code == 400


def test_video_generation_with_segments(client, fake_client):
    _register(client)
    fake_client.queue("1. cena\n2. cena\n3. cena")
    resp = client.post(
        "/v1/studio/video",
        data={"idea": "gato holográfico", "target_ai": "Flow VEO", "duration": "24"},
        headers=SESSION,
    )
    assert resp.status_code == 200
    assert "dividir a cena em 3 segmentos" in fake_client.calls[-1]["config"].system_instruction

    fake_client.queue("4. cena")
    cont = client.post("/v1/studio/video/continue", data={"additional_duration": "8"}, headers=SESSION)
    assert cont.status_code == 200
    assert cont.json()["result"]["text"].endswith("\n4. cena")
    assert cont.json()["usage"] == {"video": 1}


def test_video_duration_must_be_multiple_of_eight(client):
    _register(client)
    resp = client.post("/v1/studio/video", data={"idea": "x", "duration": "10"}, headers=SESSION)
    assert resp.status_code == 400


def test_remix_rejects_non_video(client, fake_client):
    _register(client)
    resp = client.post(
        "/v1/studio/remix",
        data={"goal": "views"},
        files={"video": ("foto.png", b"\x89PNG", "image/png")},
        headers=SESSION,
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Por favor, selecione um arquivo de vídeo válido."
    assert fake_client.calls == []


def test_remix_rejects_large_video(fake_client):
    config = StudioConfig(generation=GenerationConfig(api_key="k"), max_remix_video_bytes=10)
    app = create_app(config=config, adapter=GenerativeAdapter(config.generation, client=fake_client))
    client = TestClient(app)
    _register(client)

    resp = client.post(
        "/v1/studio/remix",
        files={"video": ("clip.mp4", b"0" * 11, "video/mp4")},
        headers=SESSION,
    )
    assert resp.status_code == 400
    assert "30 segundos" in resp.json()["error"]["message"]


def test_remix_voice_only(client, fake_client):
    _register(client)
    fake_client.queue(json.dumps({"roteiro_narracao": "Olha isso!", "instrucoes_remix": "Corte aos 2s"}))
    resp = client.post(
        "/v1/studio/remix",
        data={"goal": "interaction", "narration": "voice_only"},
        files={"video": ("clip.mp4", b"\x00ftyp", "video/mp4")},
        headers=SESSION,
    )
    assert resp.status_code == 200
    script = resp.json()["result"]["script"]
    assert script["narration_script"] == "Olha isso!"
    media = fake_client.last_media_parts()
    assert media[0].mime_type == "video/mp4"


def test_influencer_sheet_is_returned(client, fake_client):
    fake_client.queue("homem de barba ruiva")
    resp = client.post("/v1/studio/influencer", data={"description": "chef carismático"}, headers=SESSION)
    assert resp.status_code == 200
    assert resp.json()["character_sheets"]["generated"] == "homem de barba ruiva"


def test_random_idea(client):
    resp = client.get("/v1/studio/ideas/random", params={"tab": "video"})
    assert resp.status_code == 200
    assert resp.json()["idea"]

    assert client.get("/v1/studio/ideas/random", params={"tab": "remix"}).status_code == 400


def test_action_plan_before_analysis_is_stage_order(client):
    resp = client.post("/v1/studio/analysis/action-plan", headers=SESSION)
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "stage_order"


def test_analysis_flow(client, fake_client):
    _register(client)
    fake_client.queue(
        json.dumps({"prova_de_analise": "Bio diz 'fitness'", "pontos_fortes": ["a"], "pontos_a_melhorar": ["b"]})
    )
    resp = client.post(
        "/v1/studio/analysis",
        data={"platform": "instagram", "username": "@fit", "goal": "views"},
        files=[
            ("screenshots", ("s1.png", b"\x89PNG1", "image/png")),
            ("screenshots", ("s2.png", b"\x89PNG2", "image/png")),
        ],
        headers=SESSION,
    )
    assert resp.status_code == 200
    assert resp.json()["result"]["analysis"]["evidence_quote"] == "Bio diz 'fitness'"
    assert len(fake_client.last_media_parts()) == 2


def test_tab_activation_resets_state(client):
    _register(client)
    client.post("/v1/studio/text", json={"topic": "x"}, headers=SESSION)
    resp = client.post("/v1/studio/tabs/video/activate", headers=SESSION)
    body = resp.json()
    assert body["active_tab"] == "video"
    assert body["tabs"]["text"]["state"] == {"status": "idle"}


def test_generation_failure_maps_to_bad_gateway(client, fake_client):
    _register(client)
    fake_client.fail_with(TimeoutError("deadline"))
    resp = client.post("/v1/studio/text", json={"topic": "x"}, headers=SESSION)
    assert resp.status_code == 502
    assert resp.json()["error"]["code"] == "upstream_error"


@pytest.mark.asyncio
async def test_async_client_round_trip():
    client_fake = FakeGenaiClient(replies=["Y"])
    config = StudioConfig(generation=GenerationConfig(api_key="k"))
    app = create_app(config=config, adapter=GenerativeAdapter(config.generation, client=client_fake))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        await ac.post("/v1/studio/register", json=IDENTITY, headers=SESSION)
        resp = await ac.post("/v1/studio/text", json={"topic": "x"}, headers=SESSION)

    assert resp.status_code == 200
    assert resp.json()["result"]["text"] == "Y"


def test_header_less_requests_do_not_grow_registry(fake_client):
    config = StudioConfig(generation=GenerationConfig(api_key="k"), max_sessions=3)
    app = create_app(config=config, adapter=GenerativeAdapter(config.generation, client=fake_client))
    client = TestClient(app)

    for _ in range(20):
        assert client.get("/v1/studio/session").status_code == 200

    assert len(app.state.sessions) == 3
