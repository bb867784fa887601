"""Orchestration of a single best-effort overlay call with guaranteed fallback."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from kiosk_overlay.config import (
    OVERLAY_DEFAULT_COMMENT,
    OVERLAY_MAX_ATTEMPTS,
    OVERLAY_RETRY_BACKOFF_SECONDS,
    logger,
)
from kiosk_overlay.core.classifier import classify_outcome
from kiosk_overlay.core.fallback import DEFAULT_FALLBACK, FallbackPolicy
from kiosk_overlay.core.overlay_client import OverlayTransport, build_default_transport
from kiosk_overlay.core.results import (
    OverlayHardFailure,
    OverlayRequest,
    OverlayResult,
    OverlaySoftFailure,
    build_overlay_request,
)


def _log(level: int, message: str, **context: Any) -> None:
    """Helper to emit structured logs with contextual metadata."""
    logger.log(level, "%s | context=%s", message, context)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Bounded retry for hard failures. One attempt means no retry at all."""

    max_attempts: int = 1
    backoff_seconds: float = 1.0
    backoff_multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff_seconds < 0:
            raise ValueError("backoff_seconds must not be negative")

    def delay_before(self, attempt: int) -> float:
        """Seconds to wait before ``attempt`` (1-based); zero for the first one."""
        if attempt <= 1:
            return 0.0
        return self.backoff_seconds * (self.backoff_multiplier ** (attempt - 2))


class OverlayOrchestrator:
    """Entry point for generating a try-on overlay.

    Holds configuration only. Every call is independent, so concurrent
    invocations may race and each caller keeps its own state.
    """

    def __init__(
        self,
        transport: OverlayTransport,
        fallback: FallbackPolicy = DEFAULT_FALLBACK,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.transport = transport
        self.fallback = fallback
        self.retry_policy = retry_policy or RetryPolicy()

    async def generate_overlay(
        self,
        person_image: str,
        product_images: Sequence[str],
        product_name: str,
        product_category: str,
    ) -> OverlayResult:
        """
        Generate an overlay, always returning a displayable result.

        Raises:
            InvalidArgument: If the request is malformed (no external call is made)
        """
        request = build_overlay_request(
            person_image, product_images, product_name, product_category
        )
        return await self.run(request)

    async def run(self, request: OverlayRequest) -> OverlayResult:
        """Execute an already validated request."""
        start_time = time.time()
        policy = self.retry_policy

        result: OverlayResult
        attempt = 0
        while True:
            attempt += 1
            delay = policy.delay_before(attempt)
            if delay:
                _log(
                    logging.INFO,
                    "overlay_retry_scheduled",
                    attempt=attempt,
                    delay_seconds=delay,
                )
                await asyncio.sleep(delay)

            result = await self._attempt(request, attempt)

            if not isinstance(result, OverlayHardFailure):
                break
            if attempt >= policy.max_attempts:
                break

        self._report(request, result, attempt, start_time)
        return result

    async def _attempt(self, request: OverlayRequest, attempt: int) -> OverlayResult:
        _log(
            logging.DEBUG,
            "overlay_attempt_started",
            attempt=attempt,
            product_name=request.product_name,
        )
        try:
            response = await self.transport.send(request)
        except Exception as exc:
            _log(
                logging.WARNING,
                "overlay_attempt_error",
                attempt=attempt,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return classify_outcome(request.person_image, error=exc, fallback=self.fallback)

        return classify_outcome(request.person_image, response=response, fallback=self.fallback)

    def _report(
        self,
        request: OverlayRequest,
        result: OverlayResult,
        attempts: int,
        start_time: float,
    ) -> None:
        elapsed_ms = int((time.time() - start_time) * 1000)
        context = {
            "product_name": request.product_name,
            "product_category": request.product_category,
            "attempts": attempts,
            "elapsed_ms": elapsed_ms,
        }

        if isinstance(result, OverlayHardFailure):
            _log(logging.ERROR, "overlay_hard_failure", error=result.error, **context)
        elif isinstance(result, OverlaySoftFailure):
            _log(
                logging.INFO,
                "overlay_soft_failure",
                reason=result.fallback_reason,
                **context,
            )
        else:
            _log(logging.INFO, "overlay_success", **context)


def build_default_orchestrator() -> OverlayOrchestrator:
    """Orchestrator wired from environment configuration."""
    return OverlayOrchestrator(
        transport=build_default_transport(),
        fallback=FallbackPolicy(comment=OVERLAY_DEFAULT_COMMENT),
        retry_policy=RetryPolicy(
            max_attempts=max(1, OVERLAY_MAX_ATTEMPTS),
            backoff_seconds=max(0.0, OVERLAY_RETRY_BACKOFF_SECONDS),
        ),
    )


__all__ = ["OverlayOrchestrator", "RetryPolicy", "build_default_orchestrator"]
