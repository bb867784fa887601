"""Pydantic models used by the overlay router."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from kiosk_overlay.core.results import (
    OverlayHardFailure,
    OverlayResult,
    OverlaySoftFailure,
)


class OverlayRequestBody(BaseModel):
    """Kiosk request for a try-on overlay."""

    model_config = ConfigDict(populate_by_name=True)

    person_image: str = Field(
        default="", alias="personImage", description="Customer photo (URL, data URI or base64)"
    )
    product_images: List[str] = Field(
        default_factory=list, alias="productImages", description="Product photos, first one is used"
    )
    product_name: str = Field(default="", alias="productName")
    product_category: str = Field(default="", alias="productCategory")
    tryon_session_id: Optional[str] = Field(
        default=None,
        alias="tryonSessionId",
        description="tryon_sessions row to attach the result to",
    )
    product_id: Optional[str] = Field(default=None, alias="productId")


class OverlayResultResponse(BaseModel):
    """Discriminated overlay result. ``kind`` tells the UI how to render it."""

    model_config = ConfigDict(populate_by_name=True)

    kind: str
    processed_image_url: str = Field(alias="processedImageUrl")
    ai_comment: str = Field(alias="aiComment")
    fallback_reason: Optional[str] = Field(default=None, alias="fallbackReason")
    fallback: Optional[bool] = None
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: OverlayResult) -> "OverlayResultResponse":
        response = cls(
            kind=result.kind.value,
            processed_image_url=result.processed_image_url,
            ai_comment=result.ai_comment,
        )
        if isinstance(result, OverlaySoftFailure):
            response.fallback_reason = result.fallback_reason
            response.fallback = result.fallback
        elif isinstance(result, OverlayHardFailure):
            response.error = result.error
        return response


class ProcessingStateResponse(BaseModel):
    """Processing state of one kiosk session."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    is_processing: bool = Field(alias="isProcessing")
    last_result: Optional[OverlayResultResponse] = Field(default=None, alias="lastResult")


class SessionDiscardResponse(BaseModel):
    success: bool
    discarded: bool
