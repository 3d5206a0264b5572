"""Unit tests for the keyword-overlap category fallback."""

import pytest

from catalog_verifier.engines.category_overlap import CategoryOverlapChecker


@pytest.fixture()
def checker() -> CategoryOverlapChecker:
    return CategoryOverlapChecker()


class TestCheck:
    def test_disjoint_families(self, checker):
        mismatch = checker.check("wireless gizmo techcorp electronics", "bottled water")

        assert mismatch is not None
        assert mismatch.product_category == "electronics"
        assert mismatch.classification_category == "beverage"
        assert "electronic appliances or devices" in mismatch.suggestion

    def test_oil_on_both_sides(self, checker):
        assert checker.check("sama engine oil", "motor lubricants") is None

    def test_viscosity_counts_as_oil(self, checker):
        assert checker.check("promax 0w16", "engine lubricants") is None

    def test_shared_family(self, checker):
        assert checker.check("organic snack food", "edible grocery") is None

    def test_related_term_in_classification(self, checker):
        """'fluid' belongs to the oil family but is a related term for beverages."""
        assert checker.check("fruit juice", "hydraulic fluid") is None

    @pytest.mark.parametrize("product,classification", [("", "bottled water"), ("gizmo", None), ("gizmo", "water")])
    def test_too_little_information(self, checker, product, classification):
        assert checker.check(product, classification) is None


def test_families_ranked_by_hits():
    assert CategoryOverlapChecker.families("engine oil lubricant car") == ["oil", "automotive"]
    assert CategoryOverlapChecker.families("gift voucher") == []
