"""Word vectors for classification-vs-unit compatibility.

Each vector has five components, one per unit domain:
``[volume, weight, quantity, area, length]``. The table is hand-curated
reference data. Edits change verdicts, so bump ``VOCABULARY_VERSION``
whenever an entry is added or altered; the pinned-entry tests fail until
they are updated alongside.

Usage:
    from catalog_verifier.domain.semantic_vectors import average_vector, cosine_similarity

    vec = average_vector(["engine", "oil"])
    cosine_similarity(vec, UNIT_DOMAIN_VECTORS[Dimension.VOLUME])  # 0.96...
"""

import math
from typing import Iterable, Optional, Sequence

from catalog_verifier.schemas.descriptors import Dimension

VOCABULARY_VERSION = "1.0.0"

Vector = tuple[float, float, float, float, float]

NEUTRAL_VECTOR: Vector = (0.2, 0.2, 0.2, 0.2, 0.2)

WORD_VECTORS: dict[str, Vector] = {
    # liquids
    "liquid": (0.8, 0.1, 0.0, 0.1, 0.0),
    "oil": (0.7, 0.2, 0.0, 0.1, 0.0),
    "beverage": (0.7, 0.0, 0.1, 0.2, 0.0),
    "drink": (0.7, 0.0, 0.2, 0.1, 0.0),
    "fluid": (0.9, 0.0, 0.0, 0.1, 0.0),
    "juice": (0.6, 0.0, 0.3, 0.1, 0.0),
    "water": (0.8, 0.0, 0.1, 0.1, 0.0),
    "milk": (0.6, 0.0, 0.3, 0.1, 0.0),
    "sauce": (0.6, 0.3, 0.1, 0.0, 0.0),
    "syrup": (0.7, 0.2, 0.1, 0.0, 0.0),
    "lubricant": (0.8, 0.1, 0.0, 0.1, 0.0),
    "solvent": (0.7, 0.2, 0.0, 0.1, 0.0),
    "cream": (0.5, 0.3, 0.1, 0.1, 0.0),
    "fuel": (0.8, 0.1, 0.0, 0.1, 0.0),
    # solids and powders
    "powder": (0.1, 0.8, 0.0, 0.1, 0.0),
    "solid": (0.0, 0.9, 0.0, 0.1, 0.0),
    "grain": (0.0, 0.7, 0.2, 0.1, 0.0),
    "food": (0.1, 0.5, 0.3, 0.1, 0.0),
    "flour": (0.0, 0.8, 0.2, 0.0, 0.0),
    "rice": (0.0, 0.7, 0.3, 0.0, 0.0),
    "sugar": (0.0, 0.8, 0.2, 0.0, 0.0),
    "salt": (0.0, 0.9, 0.1, 0.0, 0.0),
    "cereal": (0.0, 0.6, 0.4, 0.0, 0.0),
    "coffee": (0.0, 0.7, 0.3, 0.0, 0.0),
    "spice": (0.0, 0.8, 0.2, 0.0, 0.0),
    "detergent": (0.0, 0.7, 0.0, 0.3, 0.0),
    "soap": (0.0, 0.6, 0.0, 0.4, 0.0),
    "chemical": (0.2, 0.6, 0.0, 0.2, 0.0),
    # discrete items
    "device": (0.0, 0.0, 0.9, 0.1, 0.0),
    "electronic": (0.0, 0.0, 0.8, 0.2, 0.0),
    "appliance": (0.0, 0.0, 0.7, 0.3, 0.0),
    "equipment": (0.0, 0.0, 0.8, 0.2, 0.0),
    "apparatus": (0.0, 0.0, 0.7, 0.3, 0.0),
    "phone": (0.0, 0.0, 0.9, 0.1, 0.0),
    "computer": (0.0, 0.0, 0.9, 0.1, 0.0),
    "machine": (0.0, 0.0, 0.8, 0.2, 0.0),
    "tool": (0.0, 0.0, 0.7, 0.3, 0.0),
    "furniture": (0.0, 0.0, 0.9, 0.1, 0.0),
    "toy": (0.0, 0.0, 0.9, 0.1, 0.0),
    "game": (0.0, 0.0, 0.8, 0.2, 0.0),
    "clothing": (0.0, 0.0, 0.9, 0.1, 0.0),
    "garment": (0.0, 0.0, 0.9, 0.1, 0.0),
    "shoe": (0.0, 0.0, 0.9, 0.1, 0.0),
    "accessory": (0.0, 0.0, 0.8, 0.2, 0.0),
    # sold by length
    "fabric": (0.0, 0.1, 0.1, 0.0, 0.8),
    "textile": (0.0, 0.1, 0.1, 0.0, 0.8),
    "cloth": (0.0, 0.1, 0.1, 0.0, 0.8),
    "cable": (0.0, 0.0, 0.2, 0.0, 0.8),
    "wire": (0.0, 0.0, 0.2, 0.0, 0.8),
    "rope": (0.0, 0.1, 0.1, 0.0, 0.8),
    "thread": (0.0, 0.1, 0.0, 0.0, 0.9),
    "yarn": (0.0, 0.1, 0.0, 0.0, 0.9),
    "ribbon": (0.0, 0.1, 0.0, 0.0, 0.9),
}

UNIT_DOMAIN_VECTORS: dict[Dimension, Vector] = {
    Dimension.VOLUME: (0.9, 0.0, 0.0, 0.1, 0.0),
    Dimension.WEIGHT: (0.0, 0.9, 0.0, 0.1, 0.0),
    Dimension.QUANTITY: (0.0, 0.0, 0.9, 0.1, 0.0),
    Dimension.LENGTH: (0.0, 0.0, 0.0, 0.1, 0.9),
    Dimension.AREA: (0.0, 0.0, 0.0, 0.9, 0.1),
}


def lookup(word: str) -> Optional[Vector]:
    """Vector for a word, trying the singular form of plurals."""
    if word in WORD_VECTORS:
        return WORD_VECTORS[word]
    if word.endswith("s") and word[:-1] in WORD_VECTORS:
        return WORD_VECTORS[word[:-1]]
    return None


def average_vector(words: Iterable[str]) -> Vector:
    """Mean vector of the known words, or the neutral vector when none are known."""
    known = [v for v in (lookup(w) for w in words) if v is not None]
    if not known:
        return NEUTRAL_VECTOR
    n = len(known)
    return tuple(sum(v[i] for v in known) / n for i in range(5))  # type: ignore[return-value]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity, 0.0 when either vector is all zeros."""
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if not norm_a or not norm_b:
        return 0.0
    return dot / (norm_a * norm_b)
