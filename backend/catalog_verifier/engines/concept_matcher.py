"""Compare concepts recognised in a product image with what the metadata implies.

Expected concepts are derived from the product name, the classification
label and the unit's packaging; detected concepts come from the visual
recognition service. Matches are exact, partial (substring, scaled by string
similarity) or semantic (related-concept table), weighted in that order.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from catalog_verifier.schemas.descriptors import ClassificationDescriptor, Dimension
from catalog_verifier.schemas.image import ConceptMatch, ConceptScore, MatchType, VisualConcept
from catalog_verifier.utils.text import STOP_WORDS, string_similarity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConceptExpansion:
    """Concepts added when the text contains any of ``any_of``.

    ``all_of`` must additionally all be present and ``none_of`` all absent.
    Refinements are only evaluated when the parent fires.
    """

    any_of: tuple[str, ...]
    concepts: tuple[str, ...]
    all_of: tuple[str, ...] = ()
    none_of: tuple[str, ...] = ()
    refinements: tuple["ConceptExpansion", ...] = field(default=())

    def fires(self, text: str) -> bool:
        return (
            (not self.any_of or any(t in text for t in self.any_of))
            and all(t in text for t in self.all_of)
            and not any(t in text for t in self.none_of)
        )

    def expand(self, text: str) -> list[str]:
        if not self.fires(text):
            return []
        out = list(self.concepts)
        for refinement in self.refinements:
            out.extend(refinement.expand(text))
        return out


NAME_EXPANSIONS: tuple[ConceptExpansion, ...] = (
    ConceptExpansion(
        any_of=("oil", "lubricant"),
        concepts=("oil", "bottle", "container", "liquid", "lubricant"),
        refinements=(
            ConceptExpansion(
                any_of=("engine", "motor"),
                concepts=(
                    "engine", "motor", "automotive", "car", "vehicle", "mechanical",
                    "plastic container", "oil container", "automotive fluid",
                ),
            ),
            ConceptExpansion(
                any_of=("cooking",),
                concepts=(
                    "cooking", "food", "kitchen", "cooking oil", "vegetable oil",
                    "glass bottle", "cooking oil bottle", "food oil",
                ),
            ),
            ConceptExpansion(any_of=("synthetic",), concepts=("synthetic", "synthetic oil")),
        ),
    ),
    ConceptExpansion(
        any_of=("water", "drink", "beverage", "juice", "soda", "coffee"),
        concepts=("bottle", "drink", "liquid", "beverage", "container"),
        refinements=(
            ConceptExpansion(
                any_of=("soft",),
                all_of=("water",),
                concepts=(
                    "soft drink", "soda", "carbonated", "refreshment",
                    "soft water bottle", "plastic bottle", "drink container",
                ),
            ),
            ConceptExpansion(any_of=("juice",), concepts=("juice", "fruit", "fruit juice", "juice bottle")),
            ConceptExpansion(
                any_of=("coffee",),
                concepts=("coffee", "coffee bean", "coffee package", "caffeine"),
            ),
            ConceptExpansion(any_of=("tea",), concepts=("tea", "tea bag", "tea box", "tea package")),
            ConceptExpansion(any_of=("milk",), concepts=("milk", "dairy", "milk bottle", "milk carton")),
        ),
    ),
    ConceptExpansion(
        any_of=("detergent", "cleaner", "soap", "washing"),
        concepts=("cleaning", "detergent", "soap", "bottle", "container", "household"),
        refinements=(
            ConceptExpansion(
                any_of=("powder",),
                concepts=("powder", "box", "package", "detergent powder", "washing powder"),
            ),
            ConceptExpansion(
                any_of=(),
                none_of=("powder",),
                concepts=("liquid", "liquid detergent", "cleaning liquid"),
            ),
            ConceptExpansion(any_of=("dish",), concepts=("dish", "dishwashing", "kitchen", "dish soap")),
            ConceptExpansion(
                any_of=("laundry",),
                concepts=("laundry", "clothes", "washing machine", "laundry detergent"),
            ),
            ConceptExpansion(
                any_of=("floor", "surface"),
                concepts=("floor", "surface", "floor cleaner", "mop"),
            ),
        ),
    ),
    ConceptExpansion(
        any_of=("food", "snack", "meal", "grocery", "cereal", "pasta"),
        concepts=("food", "package", "container", "grocery", "edible"),
        refinements=(
            ConceptExpansion(
                any_of=("snack",),
                concepts=("snack", "chips", "crackers", "snack bag", "snack package"),
            ),
            ConceptExpansion(any_of=("cereal",), concepts=("cereal", "breakfast", "cereal box", "grain")),
            ConceptExpansion(
                any_of=("pasta", "noodle"),
                concepts=("pasta", "noodle", "pasta package", "pasta box"),
            ),
            ConceptExpansion(
                any_of=("canned", "can"),
                concepts=("can", "canned food", "tin", "metal container"),
            ),
        ),
    ),
    ConceptExpansion(
        any_of=("electronic", "device", "gadget", "appliance", "phone", "computer"),
        concepts=("electronic", "device", "technology", "gadget", "box", "product packaging"),
        refinements=(
            ConceptExpansion(
                any_of=("phone", "mobile"),
                concepts=("phone", "mobile", "smartphone", "cell phone", "screen"),
            ),
            ConceptExpansion(
                any_of=("computer", "laptop"),
                concepts=("computer", "laptop", "keyboard", "screen", "monitor"),
            ),
            ConceptExpansion(
                any_of=("camera",),
                concepts=("camera", "lens", "digital camera", "photography"),
            ),
            ConceptExpansion(
                any_of=("tv", "television"),
                concepts=("tv", "television", "screen", "display"),
            ),
        ),
    ),
    ConceptExpansion(
        any_of=("clothing", "apparel", "wear", "garment", "shirt", "pants", "shoe"),
        concepts=("clothing", "fashion", "apparel", "garment", "clothes"),
        refinements=(
            ConceptExpansion(
                any_of=("shirt", "tshirt"),
                concepts=("shirt", "t-shirt", "top", "clothing item"),
            ),
            ConceptExpansion(
                any_of=("pant", "trouser", "jean"),
                concepts=("pants", "trousers", "jeans", "bottom", "clothing item"),
            ),
            ConceptExpansion(
                any_of=("shoe", "footwear"),
                concepts=("shoe", "footwear", "sneaker", "boot", "pair"),
            ),
            ConceptExpansion(
                any_of=("jacket", "coat"),
                concepts=("jacket", "coat", "outerwear", "winter clothing"),
            ),
        ),
    ),
)

CLASSIFICATION_EXPANSIONS: tuple[ConceptExpansion, ...] = (
    ConceptExpansion(any_of=("oil", "lubricant"), concepts=("oil", "lubricant", "automotive", "fluid", "bottle")),
    ConceptExpansion(
        any_of=("beverage", "drink"),
        concepts=("beverage", "drink", "liquid", "refreshment", "bottle"),
    ),
    ConceptExpansion(
        any_of=("food", "edible"),
        concepts=("food", "edible", "consumable", "package", "nutrition"),
    ),
    ConceptExpansion(
        any_of=("clean", "detergent"),
        concepts=("cleaner", "cleaning", "detergent", "soap", "household"),
    ),
)

PACKAGING_CONCEPTS: dict[Dimension, tuple[str, ...]] = {
    Dimension.VOLUME: ("bottle", "container", "liquid", "fluid", "packaging"),
    Dimension.WEIGHT: ("box", "package", "container", "solid", "packaging"),
    Dimension.QUANTITY: ("item", "product", "package", "individual", "unit"),
}
LARGE_VOLUME_CODES = frozenset({"l", "ltr", "liter", "litre", "gal", "gallon"})
LARGE_WEIGHT_CODES = frozenset({"kg", "lb", "pound", "ton"})

SEMANTIC_RELATIONS: dict[str, tuple[str, ...]] = {
    "bottle": ("container", "packaging", "plastic", "glass", "jar", "flask"),
    "container": ("bottle", "packaging", "box", "jar", "can", "plastic"),
    "package": ("box", "packaging", "container", "carton", "wrapper"),
    "box": ("package", "container", "carton", "packaging", "cardboard"),
    "liquid": ("fluid", "water", "oil", "beverage", "drink", "bottle"),
    "oil": ("lubricant", "fluid", "liquid", "petroleum", "bottle"),
    "water": ("liquid", "drink", "beverage", "bottle", "fluid"),
    "beverage": ("drink", "liquid", "bottle", "can", "water"),
    "food": ("edible", "grocery", "snack", "meal", "nutrition"),
    "cleaning": ("detergent", "soap", "cleaner", "household"),
    "electronic": ("device", "gadget", "technology", "appliance", "digital"),
    "clothing": ("apparel", "garment", "fashion", "wear", "outfit"),
    "vehicle": ("car", "automobile", "transportation", "automotive"),
    "plastic": ("synthetic", "polymer", "container", "bottle"),
    "soft drink": ("soda", "beverage", "carbonated", "bottle"),
    "detergent": ("soap", "cleaner", "washing", "laundry"),
}

MATCH_WEIGHTS = {MatchType.EXACT: 1.0, MatchType.PARTIAL: 0.8, MatchType.SEMANTIC: 0.6}


class ConceptMatcher:
    """Scores detected visual concepts against metadata-derived expectations."""

    SCORE_FLOOR = 0.65
    STRONG_EXACT_CONFIDENCE = 0.8

    def __init__(self, acceptance_threshold: float = 0.65):
        self.acceptance_threshold = acceptance_threshold

    # ── expected concepts ────────────────────────────────────────────

    def expected_concepts(
        self,
        product_name: Optional[str],
        classification_label: Optional[str],
        unit_code: Optional[str],
        unit_dimension: Optional[Dimension] = None,
    ) -> list[str]:
        concepts: list[str] = []

        if product_name:
            name = product_name.lower()
            concepts.extend(self._keywords(name))
            for expansion in NAME_EXPANSIONS:
                concepts.extend(expansion.expand(name))

        if classification_label:
            label = classification_label.lower()
            descriptor = ClassificationDescriptor.parse(label)
            if descriptor.code is not None and descriptor.description:
                concepts.extend(self._keywords(descriptor.description))
            for expansion in CLASSIFICATION_EXPANSIONS:
                concepts.extend(expansion.expand(label))

        if unit_code and unit_dimension in PACKAGING_CONCEPTS:
            code = unit_code.strip().lower()
            concepts.extend(PACKAGING_CONCEPTS[unit_dimension])
            if unit_dimension == Dimension.VOLUME:
                if code in LARGE_VOLUME_CODES:
                    concepts.extend(("large bottle", "large container", "gallon", "jug"))
                else:
                    concepts.extend(("small bottle", "flask", "small container"))
            elif unit_dimension == Dimension.WEIGHT:
                if code in LARGE_WEIGHT_CODES:
                    concepts.extend(("large package", "large box", "bag", "sack"))
                else:
                    concepts.extend(("small package", "small box", "packet"))
            elif "set" in code:
                concepts.extend(("set", "collection", "kit", "multiple items"))

        return list(dict.fromkeys(concepts))

    @staticmethod
    def _keywords(text: str) -> list[str]:
        return [w for w in text.split() if len(w) > 3 and w not in STOP_WORDS]

    # ── matching ─────────────────────────────────────────────────────

    def find_matches(
        self, expected: Sequence[str], detected: Sequence[VisualConcept]
    ) -> list[ConceptMatch]:
        matches: list[ConceptMatch] = []

        for concept in expected:
            target = concept.lower()

            exact = next((d for d in detected if d.name.lower() == target), None)
            if exact is not None:
                matches.append(ConceptMatch(
                    expected=concept, detected=exact.name,
                    confidence=exact.confidence, match_type=MatchType.EXACT,
                ))
                continue

            partial = [
                d for d in detected
                if target in d.name.lower() or d.name.lower() in target
            ]
            if partial:
                best = max(partial, key=lambda d: d.confidence)
                quality = string_similarity(target, best.name.lower())
                matches.append(ConceptMatch(
                    expected=concept, detected=best.name,
                    confidence=best.confidence * quality, match_type=MatchType.PARTIAL,
                ))

        matches.extend(self._semantic_matches(expected, detected, matches))
        return matches

    @staticmethod
    def _semantic_matches(
        expected: Sequence[str],
        detected: Sequence[VisualConcept],
        existing: list[ConceptMatch],
    ) -> list[ConceptMatch]:
        already = {m.expected for m in existing}
        found: dict[tuple[str, str], ConceptMatch] = {}

        for concept in expected:
            if concept in already:
                continue
            target = concept.lower()

            related = SEMANTIC_RELATIONS.get(target, ())
            candidates = [d for d in detected if d.name.lower() in related]
            if candidates:
                best = max(candidates, key=lambda d: d.confidence)
                found.setdefault((concept, best.name), ConceptMatch(
                    expected=concept, detected=best.name,
                    confidence=best.confidence, match_type=MatchType.SEMANTIC,
                ))

            # Reverse direction: the detected concept lists the expected one
            for d in detected:
                if target in SEMANTIC_RELATIONS.get(d.name.lower(), ()):
                    found.setdefault((concept, d.name), ConceptMatch(
                        expected=concept, detected=d.name,
                        confidence=d.confidence, match_type=MatchType.SEMANTIC,
                    ))

        return list(found.values())

    # ── scoring ──────────────────────────────────────────────────────

    def score(self, matches: Sequence[ConceptMatch], expected: Sequence[str]) -> ConceptScore:
        """Combine match coverage and match confidence into a [0, 1] score.

        score = 0.6 × match_ratio + 0.4 × weighted average confidence, raised
        to 0.65 when the evidence is strong (two good matches, or one confident
        exact match), plus up to 0.2 bonus for confident exact matches.
        """
        if not expected:
            return ConceptScore()

        match_ratio = min(1.0, len(matches) / len(expected))
        avg = (
            sum(m.confidence * MATCH_WEIGHTS[m.match_type] for m in matches) / len(matches)
            if matches else 0.0
        )
        strong_exact = sum(
            1 for m in matches
            if m.match_type == MatchType.EXACT and m.confidence > self.STRONG_EXACT_CONFIDENCE
        )

        score = match_ratio * 0.6 + avg * 0.4
        if (len(matches) >= 2 and avg > 0.7) or strong_exact >= 1:
            score = max(self.SCORE_FLOOR, score)
        score = min(1.0, score + min(0.2, strong_exact * 0.1))

        return ConceptScore(
            score=round(score, 4),
            is_valid=score >= self.acceptance_threshold,
            match_ratio=round(match_ratio, 4),
            average_confidence=round(avg, 4),
            exact_matches=strong_exact,
        )

    def evaluate(
        self,
        detected: Sequence[VisualConcept],
        product_name: Optional[str],
        classification_label: Optional[str],
        unit_code: Optional[str],
        unit_dimension: Optional[Dimension] = None,
    ) -> tuple[list[str], list[ConceptMatch], ConceptScore]:
        expected = self.expected_concepts(product_name, classification_label, unit_code, unit_dimension)
        matches = self.find_matches(expected, detected)
        result = self.score(matches, expected)
        logger.debug(
            "Concept match: %d expected, %d matched, score=%.3f",
            len(expected), len(matches), result.score,
        )
        return expected, matches, result
