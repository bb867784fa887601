"""Utility helpers for the overlay router."""

from typing import Optional

from fastapi import BackgroundTasks

from kiosk_overlay.config import logger
from kiosk_overlay.core import database_ops
from kiosk_overlay.core.results import OverlayHardFailure, OverlayResult


async def persist_overlay_result(
    session_id: str,
    product_id: str,
    result: OverlayResult,
) -> None:
    """Store a displayed overlay. Failures are logged, never raised."""
    try:
        await database_ops.save_tryon_result(
            session_id=session_id,
            product_id=product_id,
            result_image_url=result.processed_image_url,
            ai_comment=result.ai_comment,
        )
    except Exception as exc:
        logger.warning(
            "Failed to persist try-on result",
            extra={"session_id": session_id, "product_id": product_id, "error": str(exc)},
        )


def schedule_persistence(
    background_tasks: BackgroundTasks,
    session_id: Optional[str],
    product_id: Optional[str],
    result: OverlayResult,
) -> bool:
    """Queue persistence for displayable results that name a session and product."""
    if not session_id or not product_id:
        return False
    if isinstance(result, OverlayHardFailure):
        logger.debug(
            "Skipping persistence for hard failure", extra={"session_id": session_id}
        )
        return False

    background_tasks.add_task(persist_overlay_result, session_id, product_id, result)
    return True
