import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_scan_service
from app.core.exceptions import ConfigurationError, RecognizerTransportError
from app.infrastructure.repositories.lottery_result_repository import InMemoryLotteryResultRepository
from app.main import app
from app.models.domain import LotteryResult
from app.services.hybrid_scanner import HybridScanner
from app.services.scan_service import ScanService
from tests.fakes import FakeAIScanner, FakeOCREngine, ai_json, number_tokens


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _use_service(repository, ai_response, ocr_engine=None, **kwargs):
    service = ScanService(HybridScanner(FakeAIScanner(ai_response), ocr_engine), repository, **kwargs)
    app.dependency_overrides[get_scan_service] = lambda: service
    return service


def test_scan_confirmed_ticket(client, repository, png_base64):
    blocks = [{"row1": [13, 22], "row2": [], "row3": []}]
    _use_service(
        repository,
        ai_json([13, 22], 0.9, blocks=blocks, ticket_id="T-9"),
        FakeOCREngine(tokens=number_tokens([13, 22], 0.9)),
    )

    response = client.post("/api/v1/tickets/scan", json={"image": png_base64, "user_id": "u1"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "confirmed"
    assert body["all_numbers"] == [13, 22]
    assert body["lottery_type"] == "LOTO"
    assert body["ticket_id"] == "T-9"
    assert body["blocks"] == [{"row1": [13, 22], "row2": [], "row3": []}]
    assert body["scan_id"]

    stored = client.get(f"/api/v1/tickets/{body['scan_id']}")
    assert stored.status_code == 200
    assert stored.json() == body

    history = client.get("/api/v1/tickets/history", params={"user_id": "u1"})
    assert history.status_code == 200
    assert [s["scan_id"] for s in history.json()["scans"]] == [body["scan_id"]]


def test_rejected_scan_is_a_normal_response(client, repository, png_base64):
    _use_service(repository, ai_json([13, 22], 0.2))

    response = client.post("/api/v1/tickets/scan", json={"image": png_base64})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "rejected"
    assert body["all_numbers"] == []
    assert body["scan_id"] is None
    assert body["notes"] == "confidence too low"


def test_invalid_image_is_bad_request(client, repository):
    _use_service(repository, ai_json([1], 0.9))

    response = client.post("/api/v1/tickets/scan", json={"image": "this is not an image!!"})

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "Image validation failed"


def test_malformed_model_output_is_unprocessable(client, repository, png_base64):
    _use_service(repository, "no json here")

    response = client.post("/api/v1/tickets/scan", json={"image": png_base64})

    assert response.status_code == 422
    assert response.json()["detail"]["provider"] == "fake-ai"


def test_unreachable_model_is_bad_gateway(client, repository, png_base64):
    _use_service(repository, RecognizerTransportError("down", provider="fake-ai"))

    response = client.post("/api/v1/tickets/scan", json={"image": png_base64})

    assert response.status_code == 502


def test_unknown_scan_is_not_found(client, repository):
    _use_service(repository, ai_json([1], 0.9))

    assert client.get("/api/v1/tickets/unknown-id").status_code == 404


def test_history_requires_user(client, repository):
    _use_service(repository, ai_json([1], 0.9))

    assert client.get("/api/v1/tickets/history").status_code == 422


def test_misconfigured_provider_is_service_unavailable(client):
    def broken():
        raise ConfigurationError("GOOGLE_API_KEY is required when AI_PROVIDER=gemini")

    app.dependency_overrides[get_scan_service] = broken

    response = client.get("/api/v1/health")

    assert response.status_code == 503
    assert "GOOGLE_API_KEY" in response.json()["detail"]["message"]


def test_health_and_readiness(client, repository):
    _use_service(repository, ai_json([1], 0.9), FakeOCREngine(available=False))

    health = client.get("/api/v1/health").json()
    ready = client.get("/api/v1/health/ready").json()

    assert health["status"] == "healthy"
    assert health["ai_provider"] == "fake-ai"
    assert health["hybrid_enabled"] is True
    assert health["ocr_engine_available"] is False
    assert ready["status"] == "not_ready"
    assert client.get("/ping").json() == {"status": "pong"}


def test_check_scan_against_draw_results(client, repository, png_base64):
    results = InMemoryLotteryResultRepository([
        LotteryResult(id="r1", date="2026-10-17", region="north", prize_type="special", winning_number="22"),
    ])
    _use_service(repository, ai_json([13, 22], 0.9), result_repository=results)
    scan_id = client.post("/api/v1/tickets/scan", json={"image": png_base64}).json()["scan_id"]

    response = client.get(f"/api/v1/tickets/{scan_id}/check")

    assert response.status_code == 200
    assert response.json() == {
        "scan_id": scan_id,
        "matches": [
            {"number": "13", "matched": False, "prize_type": None, "winning_number": None, "region": None},
            {"number": "22", "matched": True, "prize_type": "special", "winning_number": "22", "region": "north"},
        ],
    }
    assert client.get("/api/v1/tickets/unknown-id/check").status_code == 404
