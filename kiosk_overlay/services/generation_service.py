"""Overlay generation service: one Gemini call reshaped into the overlay response."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import httpx

from kiosk_overlay.config import GEMINI_IMAGE_MODEL, GEMINI_KEY, logger
from kiosk_overlay.core.errors import GenerationError
from kiosk_overlay.core.gemini import generate_overlay_image
from kiosk_overlay.core.prompt_templates import build_tryon_prompt

NO_IMAGE_COMMENT = "This outfit would look great on you!"


def _log(level: int, message: str, **context: Any) -> None:
    """Helper to emit structured logs with contextual metadata."""
    logger.log(level, "%s | context=%s", message, context)


async def generate_tryon_image(
    person_image: Optional[str],
    product_images: Optional[Sequence[str]],
    product_name: Optional[str] = None,
    product_category: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """
    Produce a try-on overlay for the first product image.

    Returns:
        ``{processedImageUrl, aiComment, success}`` plus ``fallback: True``
        when the model answered without an image

    Raises:
        GenerationError: Invalid input, missing configuration or upstream failure
    """
    if not GEMINI_KEY:
        _log(logging.ERROR, "generation_not_configured")
        raise GenerationError(500, "GEMINI_KEY is not configured")

    if not person_image or not product_images:
        raise GenerationError(400, "Person image and product images are required")

    _log(
        logging.INFO,
        "generation_started",
        product_name=product_name,
        product_category=product_category,
        product_image_count=len(product_images),
    )

    prompt = build_tryon_prompt(product_name, product_category)
    generated = await generate_overlay_image(
        prompt=prompt,
        person_image=person_image,
        product_image=product_images[0],
        api_key=GEMINI_KEY,
        model=GEMINI_IMAGE_MODEL,
        transport=transport,
    )

    if not generated.image_data_uri:
        _log(logging.INFO, "generation_no_image", product_name=product_name)
        return {
            "processedImageUrl": person_image,
            "aiComment": generated.text or NO_IMAGE_COMMENT,
            "success": False,
            "fallback": True,
        }

    _log(logging.INFO, "generation_complete", product_name=product_name)
    return {
        "processedImageUrl": generated.image_data_uri,
        "aiComment": generated.text,
        "success": True,
    }


__all__ = ["generate_tryon_image", "NO_IMAGE_COMMENT"]
