"""
Transports that carry an OverlayRequest to the overlay generation service.
Every failure below this boundary surfaces as OverlayTransportError.
"""

from typing import Any, Optional, Protocol

import httpx

from kiosk_overlay.config import (
    OVERLAY_SERVICE_KEY,
    OVERLAY_SERVICE_URL,
    OVERLAY_TIMEOUT_SECONDS,
    logger,
)
from kiosk_overlay.core.errors import GenerationError, OverlayTransportError
from kiosk_overlay.core.results import OverlayRequest


class OverlayTransport(Protocol):
    async def send(self, request: OverlayRequest) -> Any: ...


class HttpOverlayTransport:
    """POST the request to a remote generation endpoint (e.g. a Supabase edge function)."""

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        timeout: float = OVERLAY_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not url:
            raise ValueError("Overlay service URL is required")
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def send(self, request: OverlayRequest) -> Any:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.url,
                    json=request.to_payload(),
                    headers=headers,
                )
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as exc:
            raise OverlayTransportError(
                f"Overlay service HTTP error: {exc.response.status_code} - {exc.response.text[:200]}"
            ) from exc
        except httpx.TimeoutException as exc:
            raise OverlayTransportError(
                f"Overlay service timed out after {self.timeout}s"
            ) from exc
        except httpx.RequestError as exc:
            raise OverlayTransportError(
                f"Network error calling overlay service: {exc}"
            ) from exc
        except ValueError as exc:
            raise OverlayTransportError(
                f"Overlay service returned invalid JSON: {exc}"
            ) from exc


class LocalOverlayTransport:
    """Call the in-process generation service directly."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    async def send(self, request: OverlayRequest) -> Any:
        from kiosk_overlay.services.generation_service import generate_tryon_image

        try:
            return await generate_tryon_image(
                person_image=request.person_image,
                product_images=list(request.product_images),
                product_name=request.product_name,
                product_category=request.product_category,
                transport=self._transport,
            )
        except GenerationError as exc:
            raise OverlayTransportError(
                f"Overlay generation failed ({exc.status_code}): {exc.message}"
            ) from exc


def build_default_transport() -> OverlayTransport:
    """Remote service when OVERLAY_SERVICE_URL is set, else the local generator."""
    if OVERLAY_SERVICE_URL:
        logger.info(f"Using remote overlay service: {OVERLAY_SERVICE_URL}")
        return HttpOverlayTransport(OVERLAY_SERVICE_URL, api_key=OVERLAY_SERVICE_KEY)

    logger.info("Using in-process overlay generation service")
    return LocalOverlayTransport()


__all__ = [
    "OverlayTransport",
    "HttpOverlayTransport",
    "LocalOverlayTransport",
    "build_default_transport",
]
