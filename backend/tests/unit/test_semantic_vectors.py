"""Pinned entries of the word-vector vocabulary and the taxonomy tables.

These values drive compatibility verdicts. Changing one must be deliberate:
bump VOCABULARY_VERSION and update the pins here in the same change.
"""

import pytest

from catalog_verifier.domain.semantic_vectors import (
    NEUTRAL_VECTOR,
    UNIT_DOMAIN_VECTORS,
    VOCABULARY_VERSION,
    WORD_VECTORS,
    average_vector,
    cosine_similarity,
    lookup,
)
from catalog_verifier.domain.taxonomy import (
    category_label,
    fallback_titles,
    recommended_units,
)
from catalog_verifier.schemas.category import ProductCategory
from catalog_verifier.schemas.descriptors import Dimension


class TestVocabulary:
    def test_version(self):
        assert VOCABULARY_VERSION == "1.0.0"

    @pytest.mark.parametrize(
        "word,vector",
        [
            ("oil", (0.7, 0.2, 0.0, 0.1, 0.0)),
            ("lubricant", (0.8, 0.1, 0.0, 0.1, 0.0)),
            ("powder", (0.1, 0.8, 0.0, 0.1, 0.0)),
            ("detergent", (0.0, 0.7, 0.0, 0.3, 0.0)),
            ("device", (0.0, 0.0, 0.9, 0.1, 0.0)),
            ("cable", (0.0, 0.0, 0.2, 0.0, 0.8)),
        ],
    )
    def test_pinned_entries(self, word, vector):
        assert WORD_VECTORS[word] == vector

    def test_domain_vectors(self):
        assert UNIT_DOMAIN_VECTORS[Dimension.VOLUME] == (0.9, 0.0, 0.0, 0.1, 0.0)
        assert UNIT_DOMAIN_VECTORS[Dimension.WEIGHT] == (0.0, 0.9, 0.0, 0.1, 0.0)
        assert set(UNIT_DOMAIN_VECTORS) == {
            Dimension.VOLUME, Dimension.WEIGHT, Dimension.QUANTITY, Dimension.LENGTH, Dimension.AREA,
        }

    def test_every_vector_has_five_components(self):
        assert all(len(v) == 5 for v in WORD_VECTORS.values())


class TestVectorMath:
    def test_plural_lookup(self):
        assert lookup("oils") == WORD_VECTORS["oil"]
        assert lookup("gizmo") is None

    def test_average_of_unknown_words_is_neutral(self):
        assert average_vector([]) == NEUTRAL_VECTOR
        assert average_vector(["type", "target"]) == NEUTRAL_VECTOR

    def test_average_ignores_unknown_words(self):
        assert average_vector(["engine", "oil"]) == pytest.approx(WORD_VECTORS["oil"])

    def test_cosine(self):
        assert cosine_similarity((1, 0), (1, 0)) == pytest.approx(1.0)
        assert cosine_similarity((1, 0), (0, 1)) == 0.0
        assert cosine_similarity((0, 0), (1, 0)) == 0.0

    def test_engine_oil_is_closest_to_volume(self):
        vector = average_vector(["engine", "oil"])
        sims = {d: cosine_similarity(vector, v) for d, v in UNIT_DOMAIN_VECTORS.items()}

        assert max(sims, key=sims.get) == Dimension.VOLUME
        assert sims[Dimension.VOLUME] == pytest.approx(0.962, abs=0.001)


class TestTaxonomy:
    def test_recommended_units(self):
        assert recommended_units(Dimension.VOLUME) == ["L", "ML", "LTR"]
        assert recommended_units(Dimension.WEIGHT) == ["KG", "G"]
        assert recommended_units(Dimension.UNKNOWN) == []

    def test_recommended_units_returns_a_copy(self):
        recommended_units(Dimension.VOLUME).append("GAL")
        assert recommended_units(Dimension.VOLUME) == ["L", "ML", "LTR"]

    def test_labels_and_titles(self):
        assert category_label(ProductCategory.PERSONAL_CARE) == "personal care"
        assert fallback_titles(ProductCategory.OIL)[:2] == ["Engine Oil/Engine Lubricants", "Motor Oils"]
        assert fallback_titles(ProductCategory.NONE) == ["None Products"]
