"""Per-surface processing state for overlay invocations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from kiosk_overlay.config import logger
from kiosk_overlay.core.classifier import classify_outcome
from kiosk_overlay.core.results import OverlayResult, build_overlay_request
from kiosk_overlay.services.overlay_service import OverlayOrchestrator


@dataclass(slots=True)
class ProcessingState:
    """In-progress flag and last settled result, owned by one UI surface."""

    is_processing: bool = False
    last_result: Optional[OverlayResult] = None

    def begin(self) -> None:
        self.is_processing = True
        self.last_result = None

    def settle(self, result: OverlayResult) -> None:
        self.is_processing = False
        self.last_result = result

    def reset(self) -> None:
        self.last_result = None

    def snapshot(self) -> Dict[str, Any]:
        return {
            "is_processing": self.is_processing,
            "last_result": self.last_result.to_dict() if self.last_result else None,
        }


async def run_overlay(
    state: ProcessingState,
    orchestrator: OverlayOrchestrator,
    person_image: str,
    product_images: Sequence[str],
    product_name: str,
    product_category: str,
) -> OverlayResult:
    """
    Drive one invocation through ``state``: begin, await, settle.

    Validation happens before ``begin()``, so an InvalidArgument leaves the
    state untouched. Once begun, the state is always settled.
    """
    request = build_overlay_request(
        person_image, product_images, product_name, product_category
    )

    state.begin()
    result: Optional[OverlayResult] = None
    try:
        result = await orchestrator.run(request)
        return result
    finally:
        if result is None:
            logger.error("Overlay orchestrator raised; settling with fallback", exc_info=True)
            result = classify_outcome(
                request.person_image,
                error=RuntimeError("Overlay processing aborted"),
                fallback=orchestrator.fallback,
            )
        state.settle(result)


class ProcessingSessions:
    """One ProcessingState per kiosk session id, owned by the app instance."""

    def __init__(self) -> None:
        self._states: Dict[str, ProcessingState] = {}

    def get(self, session_id: str) -> ProcessingState:
        state = self._states.get(session_id)
        if state is None:
            state = ProcessingState()
            self._states[session_id] = state
            logger.debug(f"Created processing state for session {session_id}")
        return state

    def peek(self, session_id: str) -> Optional[ProcessingState]:
        return self._states.get(session_id)

    def discard(self, session_id: str) -> bool:
        return self._states.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._states


__all__ = ["ProcessingState", "ProcessingSessions", "run_overlay"]
