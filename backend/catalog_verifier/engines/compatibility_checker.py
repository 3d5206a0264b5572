"""Classification-vs-unit compatibility checks.

Decides whether a product's declared unit fits its classification label,
e.g. an engine oil sold "per hour" or a washing powder sold in liters.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from catalog_verifier.domain.semantic_vectors import (
    UNIT_DOMAIN_VECTORS,
    average_vector,
    cosine_similarity,
)
from catalog_verifier.schemas.category import CompatibilityVerdict, DetectionMethod
from catalog_verifier.schemas.descriptors import ClassificationDescriptor, Dimension
from catalog_verifier.utils.text import contains_term

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnitCategory:
    """A family of products that share one expected unit dimension."""

    name: str
    dimension: Dimension
    keywords: tuple[str, ...]
    recommended_units: tuple[str, ...]


@dataclass(frozen=True)
class IndustryRule:
    """Hard domain rule: text matching ``pattern`` requires (or forbids) dimensions."""

    pattern: re.Pattern
    message: str
    recommended_units: tuple[str, ...]
    required: Optional[Dimension] = None
    prohibited: tuple[Dimension, ...] = field(default=())


UNIT_CATEGORIES: dict[str, UnitCategory] = {
    "liquid": UnitCategory(
        name="liquid",
        dimension=Dimension.VOLUME,
        keywords=(
            "liquid", "oil", "beverage", "drink", "fluid", "juice", "water", "milk",
            "sauce", "syrup", "lubricant", "solvent", "cream", "fuel",
        ),
        recommended_units=("L", "ML", "CL", "LTR", "LITER", "GAL", "OZ", "FLOZ"),
    ),
    "solid": UnitCategory(
        name="solid",
        dimension=Dimension.WEIGHT,
        keywords=(
            "powder", "solid", "grain", "food", "flour", "rice", "sugar", "salt",
            "cereal", "coffee", "spice", "detergent", "soap", "chemical",
        ),
        recommended_units=("KG", "G", "MG", "LB", "OZ", "TON"),
    ),
    "item": UnitCategory(
        name="item",
        dimension=Dimension.QUANTITY,
        keywords=(
            "device", "electronic", "appliance", "equipment", "apparatus", "phone",
            "computer", "machine", "tool", "furniture", "toy", "game", "clothing",
            "garment", "shoe", "accessory",
        ),
        recommended_units=("PC", "EA", "UNIT", "SET", "PAIR", "PCS", "EACH"),
    ),
    "length": UnitCategory(
        name="length",
        dimension=Dimension.LENGTH,
        keywords=("fabric", "textile", "cloth", "cable", "wire", "rope", "thread", "yarn", "ribbon"),
        recommended_units=("M", "CM", "MM", "FT", "IN", "YD"),
    ),
    "area": UnitCategory(
        name="area",
        dimension=Dimension.AREA,
        keywords=("carpet", "rug", "tile", "panel", "board", "sheet", "field", "land"),
        recommended_units=("M2", "SQM", "SQFT", "ACRE", "HA"),
    ),
}

CATEGORY_BY_DOMAIN: dict[Dimension, str] = {
    Dimension.VOLUME: "liquid",
    Dimension.WEIGHT: "solid",
    Dimension.QUANTITY: "item",
    Dimension.LENGTH: "length",
    Dimension.AREA: "area",
}

# Phrase overrides applied after vector/keyword detection
PHRASE_OVERRIDES: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"(washing|detergent|laundry)\s+(powder|granules)", re.IGNORECASE), "solid"),
    (re.compile(r"(engine|motor|transmission|hydraulic)\s+oil", re.IGNORECASE), "liquid"),
    (re.compile(r"liquid\s+(soap|detergent|cleaner)", re.IGNORECASE), "liquid"),
)
PHRASE_CONFIDENCE = 0.95

INDUSTRY_RULES: tuple[IndustryRule, ...] = (
    IndustryRule(
        pattern=re.compile(
            r"\b(engine|motor|automotive|car|vehicle)\b.*\b(oil|lubricant|fluid)s?\b"
            r"|\bapi\s+[a-z]{1,2}\b"
            r"|\b\d+w-?\d+\b",
            re.IGNORECASE,
        ),
        message="Automotive oil products must use volume units",
        recommended_units=("L", "ML", "LTR"),
        required=Dimension.VOLUME,
    ),
    IndustryRule(
        pattern=re.compile(
            r"\b(engine|motor|oil|lubricant|fluid)s?\b|\b\d+w-?\d+\b|\bapi\s+s[a-z]\b",
            re.IGNORECASE,
        ),
        message="Engine oil products cannot use rate/speed or length units - they must use volume units",
        recommended_units=("L", "ML", "LTR", "LITER"),
        prohibited=(Dimension.RATE, Dimension.LENGTH, Dimension.AREA),
    ),
    IndustryRule(
        pattern=re.compile(r"\b(washing|laundry|detergent)\b.*\b(powder|granule)s?\b", re.IGNORECASE),
        message="Washing/detergent powder products must use weight units",
        recommended_units=("KG", "G"),
        required=Dimension.WEIGHT,
    ),
    # coffee and tea are left out: both are sold by weight as often as by volume
    IndustryRule(
        pattern=re.compile(r"\b(drink|beverage|water|juice|soda|milk)s?\b", re.IGNORECASE),
        message="Beverage products must use volume units",
        recommended_units=("L", "ML", "FL OZ"),
        required=Dimension.VOLUME,
    ),
    IndustryRule(
        pattern=re.compile(r"\b(electronics|device|gadget|phone|computer|laptop|tablet)s?\b", re.IGNORECASE),
        message="Electronic products must use quantity units",
        recommended_units=("PC", "EA", "UNIT"),
        required=Dimension.QUANTITY,
    ),
    IndustryRule(
        pattern=re.compile(r"\b(clothing|garment|apparel|wear|fashion|dress|shirt|pant)s?\b", re.IGNORECASE),
        message="Clothing products must use quantity units",
        recommended_units=("PC", "EA", "PAIR"),
        required=Dimension.QUANTITY,
    ),
)

UNIT_CODE_FORMATS: dict[Dimension, tuple[str, ...]] = {
    Dimension.VOLUME: ("l", "ltr", "ml", "cl", "oz", "gal", "floz", "liter"),
    Dimension.WEIGHT: ("kg", "g", "mg", "lb", "oz", "ton"),
    Dimension.QUANTITY: ("pc", "ea", "pcs", "unit", "set", "pair", "each"),
    Dimension.LENGTH: ("m", "cm", "mm", "ft", "in", "yd"),
    Dimension.AREA: ("m2", "sqm", "sqft", "ha", "acre"),
}


class CompatibilityChecker:
    """Checks a classification label against a unit code and its dimension.

    Stages, first failure wins:
    1. detect the label's unit category (word vectors, keyword fallback,
       phrase overrides) and compare its dimension with the unit's;
    2. hard industry rules;
    3. unit-code format sanity check.
    """

    VECTOR_THRESHOLD = 0.5
    KEYWORD_FALLBACK_BELOW = 0.6
    MISMATCH_ABOVE = 0.6

    # ── main entry point ─────────────────────────────────────────────

    def check(
        self,
        classification_label: Optional[str],
        unit_code: Optional[str],
        unit_dimension: Optional[Dimension] = None,
    ) -> CompatibilityVerdict:
        if not classification_label or not unit_code:
            # Not enough information to call it incompatible
            return CompatibilityVerdict(compatible=True)

        dimension = unit_dimension or Dimension.UNKNOWN
        unit_code = unit_code.strip()
        description = ClassificationDescriptor.parse(classification_label).label.lower()

        # 1. Unit category implied by the label
        category, confidence, method = self._detect_category(description)
        if category is not None and confidence > self.MISMATCH_ABOVE:
            data = UNIT_CATEGORIES[category]
            if dimension != data.dimension:
                return CompatibilityVerdict(
                    compatible=False,
                    reason=(
                        f"Classification indicates a {category} product ({description}) but unit is "
                        f"{dimension.value} ({unit_code}). {category.capitalize()} products should use "
                        f"{data.dimension.value} units like {', '.join(data.recommended_units[:3])}."
                    ),
                    recommended_units=list(data.recommended_units),
                    confidence=round(confidence * 100),
                    detection_method=method,
                )

        # 2. Every industry rule whose pattern matches; first violation wins
        for rule in INDUSTRY_RULES:
            if not rule.pattern.search(description):
                continue
            if rule.required is not None and dimension != rule.required:
                return CompatibilityVerdict(
                    compatible=False,
                    reason=(
                        f"{rule.message} like {', '.join(rule.recommended_units)}, "
                        f"but unit is {dimension.value} ({unit_code})."
                    ),
                    recommended_units=list(rule.recommended_units),
                    confidence=95,
                    detection_method=DetectionMethod.INDUSTRY_RULE,
                )
            if dimension in rule.prohibited:
                return CompatibilityVerdict(
                    compatible=False,
                    reason=(
                        f"{rule.message}. Current unit ({unit_code}) is a {dimension.value} unit "
                        f"which is not appropriate."
                    ),
                    recommended_units=list(rule.recommended_units),
                    confidence=98,
                    detection_method=DetectionMethod.PROHIBITED_UNIT_TYPE,
                )

        # 3. Unit code that looks like a different dimension
        verdict = self._check_code_format(unit_code, dimension)
        if verdict is not None:
            return verdict

        return CompatibilityVerdict(compatible=True)

    # ── category detection ───────────────────────────────────────────

    def _detect_category(self, description: str) -> tuple[Optional[str], float, DetectionMethod]:
        category: Optional[str] = None
        confidence = 0.0
        method = DetectionMethod.KEYWORD

        vector = average_vector(re.findall(r"[a-z]+", description))
        best_domain, best_sim = None, -1.0
        for domain, domain_vector in UNIT_DOMAIN_VECTORS.items():
            sim = cosine_similarity(vector, domain_vector)
            if sim > best_sim:
                best_domain, best_sim = domain, sim

        if best_domain is not None and best_sim > self.VECTOR_THRESHOLD:
            category = CATEGORY_BY_DOMAIN[best_domain]
            confidence = best_sim
            method = DetectionMethod.VECTOR

        if category is None or confidence < self.KEYWORD_FALLBACK_BELOW:
            for name, data in UNIT_CATEGORIES.items():
                hits = sum(1 for kw in data.keywords if contains_term(description, kw))
                score = hits / len(data.keywords)
                if score > confidence:
                    category, confidence, method = name, score, DetectionMethod.KEYWORD

        for pattern, name in PHRASE_OVERRIDES:
            if pattern.search(description):
                category, confidence, method = name, PHRASE_CONFIDENCE, DetectionMethod.NGRAM
                break

        logger.debug(
            "Label %r → category=%s confidence=%.2f method=%s",
            description, category, confidence, method.value,
        )
        return category, confidence, method

    @staticmethod
    def _check_code_format(unit_code: str, dimension: Dimension) -> Optional[CompatibilityVerdict]:
        expected = UNIT_CODE_FORMATS.get(dimension)
        code = unit_code.lower()
        if expected is None or code in expected:
            return None

        looks_like = [dim for dim, codes in UNIT_CODE_FORMATS.items() if code in codes]
        if not looks_like:
            return None

        return CompatibilityVerdict(
            compatible=False,
            reason=(
                f"The unit code '{unit_code}' appears to be a {looks_like[0].value} unit but is "
                f"being used as a {dimension.value} unit. Please use appropriate "
                f"{dimension.value} units."
            ),
            recommended_units=[c.upper() for c in expected],
            confidence=85,
            detection_method=DetectionMethod.UNIT_FORMAT,
        )
