"""Classify a product into a semantic category from its free-text fields.

Three tiers, strongest first:

1. contextual rules: co-occurrence patterns that settle the category outright
   (engine + oil, viscosity grades, API service categories, ...);
2. n-gram phrases: weighted multi-word votes that also carry the expected
   unit dimension;
3. keyword scoring: per-category keyword hits, with a bonus when the
   keyword appears in the product name itself.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from catalog_verifier.schemas.category import CategoryVerdict, DetectionMethod, ProductCategory
from catalog_verifier.schemas.descriptors import Dimension
from catalog_verifier.utils.text import contains_term, normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContextualRule:
    """A co-occurrence rule that classifies on its own when any pattern matches."""

    name: str
    patterns: tuple[re.Pattern, ...]
    category: ProductCategory
    confidence: float  # 0-1
    expected_dimension: Dimension
    explanation: str
    suggested_titles: tuple[str, ...] = field(default=())

    def matches(self, text: str) -> bool:
        return any(p.search(text) for p in self.patterns)


def _near(left: str, right: str) -> tuple[re.Pattern, ...]:
    """Both orders of two word groups appearing in the same text."""
    return (
        re.compile(rf"\b({left})\b.*\b({right})s?\b", re.IGNORECASE),
        re.compile(rf"\b({right})s?\b.*\b({left})\b", re.IGNORECASE),
    )


ENGINE_OIL_TITLES = (
    "Engine Oil/Engine Lubricants",
    "Motor Oils",
    "Automotive Lubricants",
    "Vehicle Lubricants",
    "Lubricating Oils",
)

CONTEXTUAL_RULES: tuple[ContextualRule, ...] = (
    ContextualRule(
        name="automotive_oil",
        patterns=_near("engine|motor|transmission|hydraulic", "oil|lubricant"),
        category=ProductCategory.OIL,
        confidence=0.95,
        expected_dimension=Dimension.VOLUME,
        explanation="This is an automotive oil product based on the context of engine/motor terminology",
    ),
    ContextualRule(
        name="viscosity_grade",
        patterns=(re.compile(r"\b\d+w-?\d+\b", re.IGNORECASE),),
        category=ProductCategory.OIL,
        confidence=0.98,
        expected_dimension=Dimension.VOLUME,
        explanation="This is an engine oil product based on the viscosity grade pattern (e.g., 0W20, 5W30)",
    ),
    ContextualRule(
        name="api_service_category",
        patterns=(re.compile(r"\bapi\s+(s[lpnmfg]|c[hjk])\b", re.IGNORECASE),),
        category=ProductCategory.OIL,
        confidence=0.98,
        expected_dimension=Dimension.VOLUME,
        explanation="This is an engine oil product based on API service category designation",
        suggested_titles=ENGINE_OIL_TITLES,
    ),
    ContextualRule(
        name="laundry_powder",
        patterns=_near("washing|laundry", "powder|detergent"),
        category=ProductCategory.CLEANING,
        confidence=0.95,
        expected_dimension=Dimension.WEIGHT,
        explanation="This is a laundry cleaning product that needs weight units",
    ),
    ContextualRule(
        name="cooking_oil",
        patterns=_near("cooking|olive|vegetable|sunflower|canola", "oil"),
        category=ProductCategory.FOOD,
        confidence=0.90,
        expected_dimension=Dimension.VOLUME,
        explanation="This is a cooking oil product that requires volume units",
    ),
)


class CategoryClassifier:
    """Tiered product-category classifier.

    Every call builds its score table from scratch; instances hold only
    read-only pattern tables.
    """

    NGRAM_WEIGHT = 2.0
    KEYWORD_WEIGHT = 1.0
    NAME_BONUS = 0.5

    # Short keywords that are prefixes of unrelated words ("table" in "tablet",
    # "gas" in "gasket") only count as whole words
    WHOLE_WORD_KEYWORDS = frozenset({"gas", "table", "tv", "tea", "bed", "wear", "coat"})

    # phrase → (category, expected dimension)
    NGRAMS: dict[str, tuple[ProductCategory, Dimension]] = {
        "washing powder": (ProductCategory.CLEANING, Dimension.WEIGHT),
        "laundry detergent": (ProductCategory.CLEANING, Dimension.VOLUME),
        "dish soap": (ProductCategory.CLEANING, Dimension.VOLUME),
        "motor oil": (ProductCategory.OIL, Dimension.VOLUME),
        "engine oil": (ProductCategory.OIL, Dimension.VOLUME),
        "transmission fluid": (ProductCategory.OIL, Dimension.VOLUME),
        "olive oil": (ProductCategory.FOOD, Dimension.VOLUME),
        "cooking oil": (ProductCategory.FOOD, Dimension.VOLUME),
        "soft drink": (ProductCategory.BEVERAGE, Dimension.VOLUME),
        "mobile phone": (ProductCategory.ELECTRONIC, Dimension.QUANTITY),
        "cell phone": (ProductCategory.ELECTRONIC, Dimension.QUANTITY),
        "t shirt": (ProductCategory.CLOTHING, Dimension.QUANTITY),
        "coffee machine": (ProductCategory.ELECTRONIC, Dimension.QUANTITY),
        "coffee maker": (ProductCategory.ELECTRONIC, Dimension.QUANTITY),
        "facial cream": (ProductCategory.PERSONAL_CARE, Dimension.WEIGHT),
        "body lotion": (ProductCategory.PERSONAL_CARE, Dimension.VOLUME),
    }

    KEYWORDS: dict[ProductCategory, tuple[str, ...]] = {
        ProductCategory.CLEANING: (
            "detergent", "washing powder", "cleaner", "soap", "laundry", "bleach",
            "softener", "stain remover", "dishwasher",
        ),
        ProductCategory.FOOD: (
            "food", "edible", "snack", "meal", "nutrition", "dietary", "eat", "cook",
            "bake", "breakfast", "dinner", "lunch", "vegetable", "fruit", "meat",
        ),
        ProductCategory.BEVERAGE: (
            "drink", "beverage", "water", "juice", "soda", "milk", "coffee", "tea",
            "alcohol", "wine", "beer", "liquor", "cocktail",
        ),
        ProductCategory.OIL: (
            "oil", "lubricant", "petroleum", "engine oil", "motor oil", "fuel", "gas",
            "diesel", "kerosene",
        ),
        ProductCategory.PERSONAL_CARE: (
            "shampoo", "conditioner", "lotion", "cream", "deodorant", "perfume",
            "cologne", "toothpaste", "mouthwash", "makeup", "cosmetic",
        ),
        ProductCategory.ELECTRONIC: (
            "electronic", "device", "computer", "laptop", "phone", "smartphone",
            "tablet", "tv", "television", "appliance", "gadget",
        ),
        ProductCategory.CLOTHING: (
            "clothing", "apparel", "wear", "dress", "shirt", "pant", "jean", "sock",
            "underwear", "jacket", "coat", "shoe",
        ),
        ProductCategory.HOUSEHOLD: (
            "household", "furniture", "decor", "kitchen", "bathroom", "bedroom",
            "living room", "table", "chair", "bed", "sofa",
        ),
    }

    def __init__(self, rules: tuple[ContextualRule, ...] = CONTEXTUAL_RULES):
        self.rules = rules

    # ── main entry point ─────────────────────────────────────────────

    def classify(
        self,
        product_name: Optional[str],
        brand_name: Optional[str] = None,
        classification_label: Optional[str] = None,
    ) -> CategoryVerdict:
        name = normalize(product_name)
        text = normalize(product_name, brand_name, classification_label)
        if not text:
            return CategoryVerdict()

        # 1. Contextual rules settle the category outright
        for rule in self.rules:
            if rule.matches(text):
                logger.debug("Contextual rule %s matched %r", rule.name, text)
                return CategoryVerdict(
                    category=rule.category,
                    confidence=rule.confidence * 100,
                    expected_dimension=rule.expected_dimension,
                    detection_method=DetectionMethod.CONTEXTUAL_RULE,
                    matched_patterns=[rule.name],
                    explanation=rule.explanation,
                    suggested_titles=list(rule.suggested_titles),
                )

        scores: dict[ProductCategory, float] = {}
        dimensions: dict[ProductCategory, Dimension] = {}
        matched: list[str] = []

        # 2. N-gram phrases
        ngram_hits = [p for p in self.NGRAMS if contains_term(text, p)]
        for phrase in ngram_hits:
            category, dimension = self.NGRAMS[phrase]
            scores[category] = scores.get(category, 0.0) + self.NGRAM_WEIGHT
            dimensions[category] = dimension
            matched.append(phrase)

        # 3. Keyword scoring
        for category, keywords in self.KEYWORDS.items():
            score = 0.0
            for keyword in keywords:
                whole_word = keyword in self.WHOLE_WORD_KEYWORDS
                if contains_term(text, keyword, whole_word):
                    score += self.KEYWORD_WEIGHT
                    matched.append(keyword)
                    if contains_term(name, keyword, whole_word):
                        score += self.NAME_BONUS
            if score > 0:
                scores[category] = scores.get(category, 0.0) + score

        # Washing powder named as such outranks stray keyword votes
        if "wash" in name and any(w in name for w in ("powder", "detergent", "soap")):
            scores[ProductCategory.CLEANING] = scores.get(ProductCategory.CLEANING, 0.0) + 2
            dimensions[ProductCategory.CLEANING] = (
                Dimension.WEIGHT if "powder" in name else Dimension.VOLUME
            )

        best, best_score = ProductCategory.NONE, 0.0
        for category, score in scores.items():
            if score > best_score:
                best, best_score = category, score

        if best == ProductCategory.NONE:
            return CategoryVerdict(matched_patterns=matched)

        return CategoryVerdict(
            category=best,
            confidence=min(best_score / 3 * 100, 100),
            expected_dimension=dimensions.get(best),
            detection_method=DetectionMethod.NGRAM if ngram_hits else DetectionMethod.KEYWORD,
            matched_patterns=self._dedupe(matched),
        )

    @staticmethod
    def _dedupe(items: list[str]) -> list[str]:
        return list(dict.fromkeys(items))
