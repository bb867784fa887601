"""Pydantic models for the overlay generation endpoint."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GenerateImageRequest(BaseModel):
    """Request payload accepted by the generation service."""

    model_config = ConfigDict(populate_by_name=True)

    person_image: Optional[str] = Field(default=None, alias="personImage")
    product_images: List[str] = Field(default_factory=list, alias="productImages")
    product_name: Optional[str] = Field(default=None, alias="productName")
    product_category: Optional[str] = Field(default=None, alias="productCategory")


class GenerateImageResponse(BaseModel):
    """Generation result. ``fallback`` is only present when no image was produced."""

    model_config = ConfigDict(populate_by_name=True)

    processed_image_url: str = Field(alias="processedImageUrl")
    ai_comment: str = Field(alias="aiComment")
    success: bool
    fallback: Optional[bool] = None
