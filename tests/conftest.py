import pytest

from kiosk_overlay.core.results import OverlayRequest
from kiosk_overlay.services.overlay_service import OverlayOrchestrator, RetryPolicy

PERSON_IMAGE = "https://cdn.example.com/kiosk/person.jpg"
PRODUCT_IMAGES = ["https://cdn.example.com/products/lehenga-front.jpg"]


class FakeTransport:
    """Replays queued outcomes; exceptions are raised, anything else returned."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def send(self, request: OverlayRequest):
        self.calls.append(request)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def person_image():
    return PERSON_IMAGE


@pytest.fixture
def product_images():
    return list(PRODUCT_IMAGES)


@pytest.fixture
def fake_transport():
    return FakeTransport


@pytest.fixture
def make_orchestrator():
    def _make(*outcomes, retry_policy=None, fallback=None):
        transport = FakeTransport(*outcomes)
        kwargs = {"retry_policy": retry_policy or RetryPolicy(backoff_seconds=0.0)}
        if fallback is not None:
            kwargs["fallback"] = fallback
        return OverlayOrchestrator(transport, **kwargs), transport

    return _make
