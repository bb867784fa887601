import base64
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import httpx

from kiosk_overlay.config import GEMINI_IMAGE_MODEL, logger
from kiosk_overlay.core.errors import GenerationError

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
GENERATION_TIMEOUT_SECONDS = 120.0
DEFAULT_MIME_TYPE = "image/jpeg"

logger.info(f"Gemini module initialized for model: {GEMINI_IMAGE_MODEL}")


@dataclass(slots=True)
class GeneratedOverlay:
    """What came back from one Gemini image-generation call."""

    image_data_uri: Optional[str]
    text: str


async def generate_overlay_image(
    prompt: str,
    person_image: str,
    product_image: str,
    api_key: str,
    model: str = GEMINI_IMAGE_MODEL,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> GeneratedOverlay:
    """
    Generate a try-on overlay image using Gemini AI.

    Args:
        prompt: Rendered try-on prompt
        person_image: URL, data URI or base64 of the customer photo
        product_image: URL, data URI or base64 of the product photo
        api_key: Gemini API key
        model: Gemini image model name
        transport: Optional httpx transport (used by tests)

    Returns:
        GeneratedOverlay with a data URI when an image was produced

    Raises:
        GenerationError: 429/402 for quota errors, 500 for any other failure
    """
    person_mime, person_b64 = await _prepare_image_input(
        person_image, "person image", transport=transport
    )
    product_mime, product_b64 = await _prepare_image_input(
        product_image, "product image", transport=transport
    )

    # Order: text prompt, person image, product image
    content_parts = [
        {"text": prompt},
        {"inline_data": {"mime_type": person_mime, "data": person_b64}},
        {"inline_data": {"mime_type": product_mime, "data": product_b64}},
    ]

    payload = {
        "contents": [{"parts": content_parts}],
        "generationConfig": {
            "responseModalities": ["TEXT", "IMAGE"],
            "temperature": 0.4,
            "topK": 32,
            "topP": 1,
        },
    }

    headers = {"Content-Type": "application/json", "x-goog-api-key": api_key}

    try:
        async with httpx.AsyncClient(
            timeout=GENERATION_TIMEOUT_SECONDS, transport=transport
        ) as client:
            response = await client.post(
                f"{GEMINI_BASE_URL}/{model}:generateContent",
                json=payload,
                headers=headers,
            )
            response.raise_for_status()
            api_result = response.json()

    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        logger.error(f"Gemini API HTTP error: {status} - {exc.response.text[:500]}")
        if status == 429:
            raise GenerationError(429, "Rate limit exceeded. Please try again later.")
        if status == 402:
            raise GenerationError(402, "AI credits exhausted. Please add more credits.")
        raise GenerationError(500, "AI image generation failed") from exc
    except httpx.RequestError as exc:
        logger.error(f"Network error calling Gemini API: {exc}")
        raise GenerationError(500, "AI image generation failed") from exc
    except ValueError as exc:
        logger.error(f"Gemini API returned invalid JSON: {exc}")
        raise GenerationError(500, "AI image generation failed") from exc

    return _extract_overlay(api_result)


def _extract_overlay(api_result: Any) -> GeneratedOverlay:
    """Pull the first inline image and all text out of a generateContent result."""

    if not isinstance(api_result, dict):
        logger.error(f"Gemini API returned unexpected body: {type(api_result).__name__}")
        raise GenerationError(500, "AI image generation failed")

    candidates = api_result.get("candidates") or []
    if not isinstance(candidates, list) or not candidates:
        logger.warning(
            f"Gemini API returned no candidates: {api_result.get('promptFeedback')}"
        )
        return GeneratedOverlay(image_data_uri=None, text="")

    candidate = candidates[0] if isinstance(candidates[0], dict) else {}
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        parts = []

    image_data_uri = None
    texts = []
    for part in parts:
        if not isinstance(part, dict):
            continue
        # Check both camelCase and snake_case formats
        inline = part.get("inlineData") or part.get("inline_data")
        if isinstance(inline, dict) and inline.get("data") and image_data_uri is None:
            mime = inline.get("mimeType") or inline.get("mime_type") or "image/png"
            image_data_uri = f"data:{mime};base64,{inline['data']}"
        elif isinstance(part.get("text"), str):
            texts.append(part["text"])

    return GeneratedOverlay(image_data_uri=image_data_uri, text="".join(texts).strip())


async def _prepare_image_input(
    reference: str,
    label: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Tuple[str, str]:
    """Normalize an image reference (URL, data URI, or base64) to (mime, base64)."""

    try:
        if _is_url(reference):
            logger.info(f"Fetching {label} from URL: {reference}")
        elif reference.startswith("data:"):
            logger.info(f"Using data URI provided for {label}")
        else:
            logger.info(f"Using base64 payload provided for {label}")

        return await _fetch_and_encode(reference, transport=transport)
    except GenerationError:
        raise
    except Exception as exc:
        logger.error(f"Failed to prepare {label}: {exc}")
        raise GenerationError(500, f"Failed to prepare {label}: {exc}") from exc


def _is_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


async def _fetch_and_encode(
    reference: str,
    timeout: float = 60.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Tuple[str, str]:
    """Return the mime type and base64 representation of an image reference."""

    if _is_url(reference):
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
                response = await client.get(reference)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise Exception(
                f"Failed to fetch image from {reference}: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            raise Exception(f"Network error fetching {reference}: {exc}") from exc

        mime = response.headers.get("content-type", DEFAULT_MIME_TYPE).split(";")[0]
        return mime.strip() or DEFAULT_MIME_TYPE, base64.b64encode(
            response.content
        ).decode("utf-8")

    if reference.startswith("data:"):
        header, sep, data = reference.partition(",")
        if not sep or not data:
            raise Exception("Invalid data URI provided for image input")
        mime = header[len("data:") :].split(";")[0] or DEFAULT_MIME_TYPE
        return mime, data

    cleaned = reference.strip()
    if not cleaned:
        raise Exception("Empty base64 image input provided")

    try:
        base64.b64decode(cleaned, validate=True)
    except Exception as exc:
        raise Exception("Provided image string is not valid base64") from exc

    return DEFAULT_MIME_TYPE, cleaned


__all__ = ["GeneratedOverlay", "generate_overlay_image"]
