"""FastAPI router for kiosk overlay endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from kiosk_overlay.config import logger
from kiosk_overlay.core import database_ops
from kiosk_overlay.core.errors import InvalidArgument
from kiosk_overlay.core.results import build_overlay_request
from kiosk_overlay.services.overlay_service import OverlayOrchestrator
from kiosk_overlay.services.processing_state import (
    ProcessingSessions,
    ProcessingState,
    run_overlay,
)

from .dependencies import get_orchestrator, get_sessions
from .models import (
    OverlayRequestBody,
    OverlayResultResponse,
    ProcessingStateResponse,
    SessionDiscardResponse,
)
from .utils import schedule_persistence

router = APIRouter(prefix="/api/v1", tags=["Kiosk Overlay"])


def _state_response(session_id: str, state: ProcessingState) -> ProcessingStateResponse:
    return ProcessingStateResponse(
        session_id=session_id,
        is_processing=state.is_processing,
        last_result=(
            OverlayResultResponse.from_result(state.last_result)
            if state.last_result
            else None
        ),
    )


@router.post(
    "/overlay",
    response_model=OverlayResultResponse,
    response_model_exclude_none=True,
)
async def create_overlay(
    payload: OverlayRequestBody,
    background_tasks: BackgroundTasks,
    orchestrator: OverlayOrchestrator = Depends(get_orchestrator),
) -> OverlayResultResponse:
    """Generate an overlay without session tracking."""

    logger.info(
        "Overlay request received",
        extra={
            "product_name": payload.product_name,
            "product_image_count": len(payload.product_images),
        },
    )

    try:
        result = await orchestrator.generate_overlay(
            payload.person_image,
            payload.product_images,
            payload.product_name,
            payload.product_category,
        )
    except InvalidArgument as exc:
        logger.warning("Rejected overlay request", extra={"error": str(exc)})
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.error("Unexpected error in overlay request", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"An unexpected error occurred: {exc}"
        )

    schedule_persistence(
        background_tasks, payload.tryon_session_id, payload.product_id, result
    )
    return OverlayResultResponse.from_result(result)


@router.post(
    "/sessions/{session_id}/overlay",
    response_model=OverlayResultResponse,
    response_model_exclude_none=True,
)
async def create_session_overlay(
    session_id: str,
    payload: OverlayRequestBody,
    background_tasks: BackgroundTasks,
    orchestrator: OverlayOrchestrator = Depends(get_orchestrator),
    sessions: ProcessingSessions = Depends(get_sessions),
) -> OverlayResultResponse:
    """Generate an overlay tracked through the session's processing state."""

    current = sessions.peek(session_id)
    if current is not None and current.is_processing:
        logger.warning(
            "Overlay already in progress", extra={"session_id": session_id}
        )
        raise HTTPException(
            status_code=409,
            detail="An overlay is already being generated for this session",
        )

    try:
        build_overlay_request(
            payload.person_image,
            payload.product_images,
            payload.product_name,
            payload.product_category,
        )
    except InvalidArgument as exc:
        logger.warning(
            "Rejected overlay request",
            extra={"session_id": session_id, "error": str(exc)},
        )
        raise HTTPException(status_code=400, detail=str(exc))

    state = sessions.get(session_id)
    try:
        result = await run_overlay(
            state,
            orchestrator,
            payload.person_image,
            payload.product_images,
            payload.product_name,
            payload.product_category,
        )
    except Exception as exc:
        logger.error(
            "Unexpected error in session overlay request",
            extra={"session_id": session_id},
            exc_info=True,
        )
        raise HTTPException(
            status_code=500, detail=f"An unexpected error occurred: {exc}"
        )

    schedule_persistence(
        background_tasks,
        payload.tryon_session_id,
        payload.product_id,
        result,
    )
    return OverlayResultResponse.from_result(result)


@router.get(
    "/sessions/{session_id}/overlay",
    response_model=ProcessingStateResponse,
    response_model_exclude_none=True,
)
async def get_session_overlay(
    session_id: str,
    sessions: ProcessingSessions = Depends(get_sessions),
) -> ProcessingStateResponse:
    """Report whether the session is processing and its last result."""

    state = sessions.peek(session_id) or ProcessingState()
    return _state_response(session_id, state)


@router.delete(
    "/sessions/{session_id}/overlay/result",
    response_model=ProcessingStateResponse,
    response_model_exclude_none=True,
)
async def reset_session_overlay(
    session_id: str,
    sessions: ProcessingSessions = Depends(get_sessions),
) -> ProcessingStateResponse:
    """Discard the shown result, leaving the processing flag alone."""

    state = sessions.peek(session_id)
    if state is None:
        return _state_response(session_id, ProcessingState())

    state.reset()
    logger.info("Overlay result reset", extra={"session_id": session_id})
    return _state_response(session_id, state)


@router.delete("/sessions/{session_id}", response_model=SessionDiscardResponse)
async def discard_session(
    session_id: str,
    sessions: ProcessingSessions = Depends(get_sessions),
) -> SessionDiscardResponse:
    """Drop the session's processing state when the kiosk session ends."""

    discarded = sessions.discard(session_id)
    logger.info(
        "Session state discarded",
        extra={"session_id": session_id, "discarded": discarded},
    )
    return SessionDiscardResponse(success=True, discarded=discarded)


@router.get("/results/{result_id}")
async def get_tryon_result(result_id: str) -> dict:
    """Retrieve a stored try-on result."""

    try:
        record = await database_ops.get_tryon_result(result_id)
        if not record:
            raise HTTPException(
                status_code=404,
                detail=f"Try-on result not found: {result_id}",
            )

        return {"success": True, "record": record}

    except HTTPException:
        raise
    except Exception as exc:
        logger.error(
            "Error retrieving try-on result",
            extra={"result_id": result_id, "error": str(exc)},
        )
        raise HTTPException(
            status_code=500,
            detail=f"Failed to retrieve result: {exc}",
        )


@router.get("/health")
async def health_check() -> dict:
    """Simple health check endpoint."""

    return {
        "status": "healthy",
        "service": "kiosk-overlay-api",
        "version": "1.0.0",
    }
