import pytest
from fastapi.testclient import TestClient

import kiosk_overlay.routers.generation.router as generation_router_module
from kiosk_overlay.core import database_ops
from kiosk_overlay.core.errors import GenerationError, OverlayTransportError
from kiosk_overlay.main import app
from kiosk_overlay.routers.overlay.dependencies import get_orchestrator, get_sessions
from kiosk_overlay.services.processing_state import ProcessingSessions


@pytest.fixture
def sessions():
    return ProcessingSessions()


@pytest.fixture
def client_for(make_orchestrator, sessions):
    def _client(*outcomes):
        orchestrator, transport = make_orchestrator(*outcomes)
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
        app.dependency_overrides[get_sessions] = lambda: sessions
        return TestClient(app), transport

    yield _client
    app.dependency_overrides.clear()


@pytest.fixture
def saved(monkeypatch):
    records = []

    async def fake_save(**kwargs):
        records.append(kwargs)
        return {"id": "result-1", **kwargs}

    monkeypatch.setattr(database_ops, "save_tryon_result", fake_save)
    return records


def _body(person_image, product_images, **extra):
    return {
        "personImage": person_image,
        "productImages": product_images,
        "productName": "Silk Lehenga",
        "productCategory": "ethnic",
        **extra,
    }


# -------------------------
# /overlay
# -------------------------
def test_overlay_success(client_for, person_image, product_images):
    client, transport = client_for(
        {"success": True, "processedImageUrl": "X", "aiComment": "Y"}
    )

    response = client.post("/api/v1/overlay", json=_body(person_image, product_images))

    assert response.status_code == 200
    assert response.json() == {"kind": "success", "processedImageUrl": "X", "aiComment": "Y"}
    assert len(transport.calls) == 1


def test_overlay_soft_failure(client_for, person_image, product_images):
    client, _ = client_for({"success": False, "fallback": True})

    data = client.post("/api/v1/overlay", json=_body(person_image, product_images)).json()

    assert data["kind"] == "soft_failure"
    assert data["processedImageUrl"] == person_image
    assert data["fallbackReason"] == "generation_pending"
    assert data["fallback"] is True
    assert data["aiComment"]


def test_overlay_hard_failure_is_still_displayable(client_for, person_image, product_images):
    client, _ = client_for(OverlayTransportError("Network error calling overlay service"))

    response = client.post("/api/v1/overlay", json=_body(person_image, product_images))

    assert response.status_code == 200
    data = response.json()
    assert data["kind"] == "hard_failure"
    assert data["error"] == "Network error calling overlay service"
    assert data["processedImageUrl"] == person_image
    assert data["aiComment"]


def test_overlay_invalid_request_is_rejected_without_external_call(client_for):
    client, transport = client_for({"success": True})

    response = client.post("/api/v1/overlay", json=_body("", []))

    assert response.status_code == 400
    assert len(transport.calls) == 0


def test_overlay_result_is_persisted_when_session_and_product_given(
    client_for, saved, person_image, product_images
):
    client, _ = client_for({"success": True, "processedImageUrl": "X", "aiComment": "Y"})

    response = client.post(
        "/api/v1/overlay",
        json=_body(person_image, product_images, tryonSessionId="sess-1", productId="prod-9"),
    )

    assert response.status_code == 200
    assert saved == [
        {
            "session_id": "sess-1",
            "product_id": "prod-9",
            "result_image_url": "X",
            "ai_comment": "Y",
        }
    ]


def test_overlay_without_product_id_is_not_persisted(client_for, saved, person_image, product_images):
    client, _ = client_for({"success": True, "processedImageUrl": "X"})

    client.post("/api/v1/overlay", json=_body(person_image, product_images, tryonSessionId="sess-1"))

    assert saved == []


def test_hard_failures_are_not_persisted(client_for, saved, person_image, product_images):
    client, _ = client_for(OverlayTransportError("down"))

    client.post(
        "/api/v1/overlay",
        json=_body(person_image, product_images, tryonSessionId="sess-1", productId="prod-9"),
    )

    assert saved == []


def test_persistence_failure_does_not_affect_response(
    client_for, monkeypatch, person_image, product_images
):
    async def failing_save(**kwargs):
        raise ValueError("SUPABASE_URL or SUPABASE_SERVICE_KEY is not configured")

    monkeypatch.setattr(database_ops, "save_tryon_result", failing_save)
    client, _ = client_for({"success": True, "processedImageUrl": "X", "aiComment": "Y"})

    response = client.post(
        "/api/v1/overlay",
        json=_body(person_image, product_images, tryonSessionId="sess-1", productId="prod-9"),
    )

    assert response.status_code == 200
    assert response.json()["kind"] == "success"


# -------------------------
# /sessions/{session_id}
# -------------------------
def test_session_lifecycle(client_for, sessions, person_image, product_images):
    client, _ = client_for({"success": True, "processedImageUrl": "X", "aiComment": "Y"})

    idle = client.get("/api/v1/sessions/kiosk-1/overlay").json()
    assert idle == {"sessionId": "kiosk-1", "isProcessing": False}

    created = client.post("/api/v1/sessions/kiosk-1/overlay", json=_body(person_image, product_images))
    assert created.status_code == 200
    assert created.json()["kind"] == "success"

    state = client.get("/api/v1/sessions/kiosk-1/overlay").json()
    assert state["isProcessing"] is False
    assert state["lastResult"] == {"kind": "success", "processedImageUrl": "X", "aiComment": "Y"}

    reset = client.delete("/api/v1/sessions/kiosk-1/overlay/result").json()
    assert reset == {"sessionId": "kiosk-1", "isProcessing": False}
    assert sessions.get("kiosk-1").last_result is None

    again = client.delete("/api/v1/sessions/kiosk-1/overlay/result").json()
    assert again == reset

    assert client.delete("/api/v1/sessions/kiosk-1").json() == {"success": True, "discarded": True}
    assert client.delete("/api/v1/sessions/kiosk-1").json() == {"success": True, "discarded": False}


def test_session_overlay_conflicts_while_processing(client_for, sessions, person_image, product_images):
    client, transport = client_for({"success": True})
    sessions.get("kiosk-busy").begin()

    response = client.post("/api/v1/sessions/kiosk-busy/overlay", json=_body(person_image, product_images))

    assert response.status_code == 409
    assert len(transport.calls) == 0
    assert sessions.get("kiosk-busy").is_processing is True


def test_session_overlay_hard_failure_settles_state(client_for, sessions, person_image, product_images):
    client, _ = client_for(OverlayTransportError("down"))

    response = client.post("/api/v1/sessions/kiosk-2/overlay", json=_body(person_image, product_images))

    assert response.json()["kind"] == "hard_failure"
    state = sessions.get("kiosk-2")
    assert state.is_processing is False
    assert state.last_result.processed_image_url == person_image


def test_session_overlay_invalid_request_leaves_state_idle(client_for, sessions):
    client, _ = client_for({"success": True})

    response = client.post("/api/v1/sessions/kiosk-3/overlay", json=_body("", []))

    assert response.status_code == 400
    assert "kiosk-3" not in sessions


def test_rejected_session_requests_do_not_accumulate_state(client_for, sessions):
    client, transport = client_for({"success": True})

    for i in range(20):
        response = client.post(f"/api/v1/sessions/junk-{i}/overlay", json=_body("", []))
        assert response.status_code == 400

    assert len(sessions) == 0
    assert len(transport.calls) == 0


def test_session_overlay_persists_only_with_explicit_tryon_session(
    client_for, saved, person_image, product_images
):
    client, _ = client_for({"success": True, "processedImageUrl": "X", "aiComment": "Y"})

    client.post(
        "/api/v1/sessions/kiosk-4/overlay",
        json=_body(person_image, product_images, productId="prod-9"),
    )
    assert saved == []

    client.post(
        "/api/v1/sessions/kiosk-4/overlay",
        json=_body(person_image, product_images, tryonSessionId="sess-1", productId="prod-9"),
    )
    assert [record["session_id"] for record in saved] == ["sess-1"]


def test_sessions_are_isolated(client_for, sessions, person_image, product_images):
    client, _ = client_for({"success": True, "processedImageUrl": "X", "aiComment": "Y"})

    client.post("/api/v1/sessions/kiosk-a/overlay", json=_body(person_image, product_images))

    other = client.get("/api/v1/sessions/kiosk-b/overlay").json()
    assert other == {"sessionId": "kiosk-b", "isProcessing": False}


# -------------------------
# /tryon/generate-image
# -------------------------
def test_generate_image_endpoint(monkeypatch, person_image):
    async def fake_generate(**kwargs):
        assert kwargs["product_images"] == ["p.jpg"]
        return {"processedImageUrl": "data:image/png;base64,b3V0", "aiComment": "Nice", "success": True}

    monkeypatch.setattr(generation_router_module, "generate_tryon_image", fake_generate)

    response = TestClient(app).post(
        "/api/v1/tryon/generate-image",
        json={"personImage": person_image, "productImages": ["p.jpg"], "productName": "Kurta"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "processedImageUrl": "data:image/png;base64,b3V0",
        "aiComment": "Nice",
        "success": True,
    }


def test_generate_image_endpoint_fallback(monkeypatch, person_image):
    async def fake_generate(**kwargs):
        return {"processedImageUrl": person_image, "aiComment": "Hmm", "success": False, "fallback": True}

    monkeypatch.setattr(generation_router_module, "generate_tryon_image", fake_generate)

    data = TestClient(app).post(
        "/api/v1/tryon/generate-image",
        json={"personImage": person_image, "productImages": ["p.jpg"]},
    ).json()

    assert data["success"] is False
    assert data["fallback"] is True


def test_generate_image_endpoint_maps_generation_errors(monkeypatch):
    async def fake_generate(**kwargs):
        raise GenerationError(429, "Rate limit exceeded. Please try again later.")

    monkeypatch.setattr(generation_router_module, "generate_tryon_image", fake_generate)

    response = TestClient(app).post(
        "/api/v1/tryon/generate-image",
        json={"personImage": "x", "productImages": ["p.jpg"]},
    )

    assert response.status_code == 429
    assert response.json()["detail"] == "Rate limit exceeded. Please try again later."


# -------------------------
# /results, /health
# -------------------------
def test_result_lookup(monkeypatch):
    async def fake_get(result_id):
        return {"id": result_id, "ai_comment": "Y"} if result_id == "result-1" else None

    monkeypatch.setattr(database_ops, "get_tryon_result", fake_get)
    client = TestClient(app)

    found = client.get("/api/v1/results/result-1")
    missing = client.get("/api/v1/results/nope")

    assert found.status_code == 200
    assert found.json() == {"success": True, "record": {"id": "result-1", "ai_comment": "Y"}}
    assert missing.status_code == 404


def test_health():
    response = TestClient(app).get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
