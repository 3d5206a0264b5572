"""Keyword-overlap fallback for category consistency.

Used when the tiered classifier could not settle on a category: the product
text and the classification text are each mapped to coarse keyword
families, and a mismatch is reported only when the two sides share no
family and the classification mentions none of the product family's
related terms.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from catalog_verifier.utils.text import contains_term, normalize

logger = logging.getLogger(__name__)


OVERLAP_CATEGORIES: dict[str, tuple[str, ...]] = {
    "oil": ("oil", "lubricant", "petroleum", "liquid", "fluid", "engine"),
    "food": ("food", "edible", "consumable", "nutrition", "grocery", "meal", "snack"),
    "beverage": ("drink", "water", "juice", "soda", "beverage", "liquid"),
    "electronics": ("device", "gadget", "tech", "digital", "electronic", "appliance"),
    "clothing": ("apparel", "garment", "wear", "fashion", "textile", "cloth"),
    "chemical": (
        "cleaner", "solution", "compound", "mixture", "solvent", "chemical",
        "washing powder", "detergent",
    ),
    "industrial": ("industrial", "business", "machinery", "equipment", "tool"),
    "automotive": ("car", "auto", "vehicle", "engine", "motor"),
}

RELATED_TERMS: dict[str, tuple[str, ...]] = {
    "food": ("edible", "consumable", "nutrition", "grocery", "meal", "snack"),
    "beverage": ("drink", "liquid", "water", "juice", "fluid"),
    "electronics": ("device", "gadget", "tech", "digital", "electronic", "appliance"),
    "clothing": ("apparel", "garment", "wear", "fashion", "textile"),
    "chemical": ("cleaner", "solution", "compound", "mixture", "solvent"),
    "household": ("home", "domestic", "kitchen", "bathroom", "living"),
    "beauty": ("cosmetic", "makeup", "skincare", "personal care"),
    "health": ("medical", "wellness", "medicine", "healthcare", "pharmacy"),
    "toy": ("game", "play", "entertainment", "children"),
}

FAMILY_HINTS: dict[str, str] = {
    "oil": "lubricants or engine oils",
    "food": "food items or consumables",
    "beverage": "beverages or drinks",
    "electronics": "electronic appliances or devices",
    "chemical": "cleaning products or detergents",
}

_OIL_SIGNALS = ("oil", "lubricant", "engine", "motor", "petroleum")
_VISCOSITY = re.compile(r"\b\d+w-?\d+\b")


@dataclass(frozen=True)
class OverlapMismatch:
    product_category: str
    classification_category: str
    message: str
    suggestion: str


class CategoryOverlapChecker:
    """Coarse product-vs-classification family comparison."""

    def check(
        self,
        product_text: Optional[str],
        classification_text: Optional[str],
    ) -> Optional[OverlapMismatch]:
        """Return a mismatch, or ``None`` when the texts agree or say too little."""
        product = normalize(product_text)
        classification = normalize(classification_text)
        if not product or not classification:
            return None

        if self._looks_oil_related(product) and self._looks_oil_related(classification):
            return None

        product_families = self.families(product)
        classification_families = self.families(classification)
        if not product_families or not classification_families:
            return None
        if set(product_families) & set(classification_families):
            return None

        primary = product_families[0]
        if any(contains_term(classification, t) for t in RELATED_TERMS.get(primary, ())):
            return None

        other = classification_families[0]
        family = FAMILY_HINTS.get(primary, f"{primary} products")
        logger.debug("Overlap mismatch: product=%s classification=%s", primary, other)
        return OverlapMismatch(
            product_category=primary,
            classification_category=other,
            message=f"Product category ({primary}) does not match classification category ({other})",
            suggestion=(
                f"The product appears to be in the {primary} family. Choose a classification "
                f"for {family} that reflects what the product actually is."
            ),
        )

    @staticmethod
    def families(text: str) -> list[str]:
        """Keyword families present in ``text``, most hits first."""
        hits = {
            name: sum(1 for term in terms if contains_term(text, term))
            for name, terms in OVERLAP_CATEGORIES.items()
        }
        ranked = sorted((n for n, c in hits.items() if c), key=lambda n: -hits[n])
        return ranked

    @staticmethod
    def _looks_oil_related(text: str) -> bool:
        return any(contains_term(text, s) for s in _OIL_SIGNALS) or bool(_VISCOSITY.search(text))
