"""Map a raw generation-service outcome onto one of the three result kinds."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from kiosk_overlay.core.fallback import DEFAULT_FALLBACK, FallbackPolicy
from kiosk_overlay.core.results import (
    OverlayHardFailure,
    OverlayResult,
    OverlaySoftFailure,
    OverlaySuccess,
)

REASON_PENDING = "generation_pending"
REASON_DECLINED = "generation_declined"


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _error_message(error: BaseException) -> str:
    return str(error) or type(error).__name__


def classify_outcome(
    person_image: str,
    response: Any = None,
    error: Optional[BaseException] = None,
    fallback: FallbackPolicy = DEFAULT_FALLBACK,
) -> OverlayResult:
    """
    Classify one external-call outcome.

    Args:
        person_image: The original customer photo of the request
        response: Parsed service response, ignored when ``error`` is given
        error: Exception raised by the transport, if any
        fallback: Policy supplying the substitute image and comment

    Returns:
        Exactly one OverlayResult variant
    """
    if error is not None:
        return OverlayHardFailure(
            error=_error_message(error),
            processed_image_url=fallback.identity_image(person_image),
            ai_comment=fallback.default_comment(),
        )

    if not isinstance(response, Mapping):
        return OverlayHardFailure(
            error=f"Malformed overlay response: expected object, got {type(response).__name__}",
            processed_image_url=fallback.identity_image(person_image),
            ai_comment=fallback.default_comment(),
        )

    comment = _non_empty_str(response.get("aiComment")) or fallback.default_comment()

    if response.get("success") is True:
        image = _non_empty_str(response.get("processedImageUrl"))
        return OverlaySuccess(
            processed_image_url=image or fallback.identity_image(person_image),
            ai_comment=comment,
        )

    raw_flag = response.get("fallback")
    flag = bool(raw_flag) if raw_flag is not None else None
    reason = _non_empty_str(response.get("error")) or (
        REASON_PENDING if flag else REASON_DECLINED
    )

    return OverlaySoftFailure(
        processed_image_url=fallback.identity_image(person_image),
        ai_comment=comment,
        fallback_reason=reason,
        fallback=flag,
    )


__all__ = ["classify_outcome", "REASON_PENDING", "REASON_DECLINED"]
