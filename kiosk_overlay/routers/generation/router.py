"""FastAPI router exposing the overlay generation service."""

from fastapi import APIRouter, HTTPException

from kiosk_overlay.config import logger
from kiosk_overlay.core.errors import GenerationError
from kiosk_overlay.services.generation_service import generate_tryon_image

from .models import GenerateImageRequest, GenerateImageResponse

router = APIRouter(prefix="/api/v1/tryon", tags=["Overlay Generation"])


@router.post(
    "/generate-image",
    response_model=GenerateImageResponse,
    response_model_exclude_none=True,
)
async def generate_image(payload: GenerateImageRequest) -> GenerateImageResponse:
    """Generate a try-on image for the first product image."""

    logger.info(
        "Generate try-on image request received",
        extra={
            "product_name": payload.product_name,
            "product_category": payload.product_category,
        },
    )

    try:
        result = await generate_tryon_image(
            person_image=payload.person_image,
            product_images=payload.product_images,
            product_name=payload.product_name,
            product_category=payload.product_category,
        )
    except GenerationError as exc:
        logger.error(
            "Generate try-on image error",
            extra={"status_code": exc.status_code, "error": exc.message},
        )
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    except Exception as exc:
        logger.error("Unexpected error generating try-on image", exc_info=True)
        raise HTTPException(status_code=500, detail=str(exc) or "Unknown error")

    return GenerateImageResponse(**result)
