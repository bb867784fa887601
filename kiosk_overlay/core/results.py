"""Value types for overlay requests and their three-way results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from kiosk_overlay.core.errors import InvalidArgument


class ResultKind(str, Enum):
    SUCCESS = "success"
    SOFT_FAILURE = "soft_failure"
    HARD_FAILURE = "hard_failure"


@dataclass(frozen=True, slots=True)
class OverlayRequest:
    """One try-on overlay invocation. Build it with ``build_overlay_request``."""

    person_image: str
    product_images: Tuple[str, ...]
    product_name: str
    product_category: str

    def to_payload(self) -> Dict[str, Any]:
        """Wire shape expected by the overlay generation service."""
        return {
            "personImage": self.person_image,
            "productImages": list(self.product_images),
            "productName": self.product_name,
            "productCategory": self.product_category,
        }


def build_overlay_request(
    person_image: str,
    product_images: Sequence[str],
    product_name: str = "",
    product_category: str = "",
) -> OverlayRequest:
    """
    Validate caller input and return an immutable request.

    Raises:
        InvalidArgument: If the person image is empty or no product image is given
    """
    if not isinstance(person_image, str) or not person_image.strip():
        raise InvalidArgument("person_image must be a non-empty image reference")

    if isinstance(product_images, str) or product_images is None:
        raise InvalidArgument("product_images must be a sequence of image references")

    try:
        images = tuple(product_images)
    except TypeError as exc:
        raise InvalidArgument("product_images must be a sequence of image references") from exc
    if not images:
        raise InvalidArgument("At least one product image is required")
    if any(not isinstance(image, str) or not image.strip() for image in images):
        raise InvalidArgument("product_images must not contain empty references")

    return OverlayRequest(
        person_image=person_image,
        product_images=images,
        product_name=product_name or "",
        product_category=product_category or "",
    )


@dataclass(frozen=True, slots=True)
class OverlaySuccess:
    """The service produced a usable composited image."""

    processed_image_url: str
    ai_comment: str

    @property
    def kind(self) -> ResultKind:
        return ResultKind.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "processed_image_url": self.processed_image_url,
            "ai_comment": self.ai_comment,
        }


@dataclass(frozen=True, slots=True)
class OverlaySoftFailure:
    """The service answered but produced no image; the original photo is used."""

    processed_image_url: str
    ai_comment: str
    fallback_reason: str
    fallback: Optional[bool] = None

    @property
    def kind(self) -> ResultKind:
        return ResultKind.SOFT_FAILURE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "processed_image_url": self.processed_image_url,
            "ai_comment": self.ai_comment,
            "fallback_reason": self.fallback_reason,
            "fallback": self.fallback,
        }


@dataclass(frozen=True, slots=True)
class OverlayHardFailure:
    """The call itself failed. Still displayable through the fallback values."""

    error: str
    processed_image_url: str
    ai_comment: str

    @property
    def kind(self) -> ResultKind:
        return ResultKind.HARD_FAILURE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "processed_image_url": self.processed_image_url,
            "ai_comment": self.ai_comment,
            "error": self.error,
        }


OverlayResult = Union[OverlaySuccess, OverlaySoftFailure, OverlayHardFailure]


__all__ = [
    "ResultKind",
    "OverlayRequest",
    "build_overlay_request",
    "OverlaySuccess",
    "OverlaySoftFailure",
    "OverlayHardFailure",
    "OverlayResult",
]
