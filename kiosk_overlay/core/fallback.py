"""Always-available substitute values used when no overlay can be produced."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_COMMENT = "This outfit looks great on you!"


@dataclass(frozen=True, slots=True)
class FallbackPolicy:
    """Supplies the original photo and a canned comment as the last resort."""

    comment: Optional[str] = None

    def default_comment(self) -> str:
        # blank overrides never win over the built-in phrase
        if self.comment and self.comment.strip():
            return self.comment
        return DEFAULT_COMMENT

    def identity_image(self, person_image: str) -> str:
        return person_image


DEFAULT_FALLBACK = FallbackPolicy()


__all__ = ["DEFAULT_COMMENT", "DEFAULT_FALLBACK", "FallbackPolicy"]
