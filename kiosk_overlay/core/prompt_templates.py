"""Prompt templates and builders for the kiosk's Gemini try-on overlay."""

from __future__ import annotations
from dataclasses import dataclass


# --- GENERATION PROMPTS ---

OUTFIT_PROMPT_TEMPLATE = """Create a realistic virtual try-on image.
Take the person from the first image and show them wearing the outfit/costume from the second image ({PRODUCT_NAME}).
The clothing should fit naturally on the person's body, maintaining their pose and proportions.
Keep the person's face and features intact. Replace or overlay their current outfit with the new one.
Ensure {FIT_DESCRIPTION}.
Make it look like {STYLE_AESTHETIC}."""

JEWELLERY_PROMPT_TEMPLATE = """Create a realistic virtual try-on image.
Take the person from the first image and show them wearing the jewellery from the second image ({PRODUCT_NAME}).
The jewellery should look naturally placed on the person - {PLACEMENT_DESCRIPTION}.
Keep the person's face, body, and background intact. Only add the jewellery piece realistically.
Make it look like {STYLE_AESTHETIC}."""


@dataclass(frozen=True)
class PromptDefaults:
    """Default wording for try-on overlay prompts."""

    product_name: str = "the selected product"
    fit_description: str = "proper draping, fit, and realistic fabric appearance"
    placement_description: str = (
        "if it's a necklace, place it around their neck; if earrings, on their ears"
    )
    style_aesthetic: str = "a professional fashion photo"
    jewellery_categories: frozenset = frozenset({"jewellery", "jewelry"})


DEFAULTS = PromptDefaults()


def is_jewellery(product_category: str | None) -> bool:
    return (product_category or "").strip().lower() in DEFAULTS.jewellery_categories


def build_tryon_prompt(
    product_name: str | None,
    product_category: str | None,
    style_aesthetic: str | None = None,
) -> str:
    """Render the overlay prompt for the product's category."""
    name = (product_name or "").strip() or DEFAULTS.product_name
    style = style_aesthetic or DEFAULTS.style_aesthetic

    if is_jewellery(product_category):
        return JEWELLERY_PROMPT_TEMPLATE.format(
            PRODUCT_NAME=name,
            PLACEMENT_DESCRIPTION=DEFAULTS.placement_description,
            STYLE_AESTHETIC=style,
        )

    return OUTFIT_PROMPT_TEMPLATE.format(
        PRODUCT_NAME=name,
        FIT_DESCRIPTION=DEFAULTS.fit_description,
        STYLE_AESTHETIC=style,
    )


__all__ = [
    "OUTFIT_PROMPT_TEMPLATE",
    "JEWELLERY_PROMPT_TEMPLATE",
    "DEFAULTS",
    "PromptDefaults",
    "is_jewellery",
    "build_tryon_prompt",
]
