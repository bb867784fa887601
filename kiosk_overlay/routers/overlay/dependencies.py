"""FastAPI dependencies shared across overlay endpoints."""

from fastapi import Request

from kiosk_overlay.services.overlay_service import OverlayOrchestrator
from kiosk_overlay.services.processing_state import ProcessingSessions


def get_orchestrator(request: Request) -> OverlayOrchestrator:
    """Orchestrator configured on the running application."""
    return request.app.state.orchestrator


def get_sessions(request: Request) -> ProcessingSessions:
    """Processing states of this application instance's kiosk sessions."""
    return request.app.state.sessions
