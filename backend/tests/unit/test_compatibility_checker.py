"""Unit tests for classification-vs-unit compatibility."""

import pytest

from catalog_verifier.engines.compatibility_checker import CompatibilityChecker
from catalog_verifier.schemas.category import DetectionMethod
from catalog_verifier.schemas.descriptors import Dimension


@pytest.fixture()
def checker() -> CompatibilityChecker:
    return CompatibilityChecker()


ENGINE_OIL_LABELS = [
    "Engine Oil",
    "20002871-Type of Engine Oil Target",
    "Synthetic Engine Oil 5W30",
]


class TestEngineOil:
    @pytest.mark.parametrize("label", ENGINE_OIL_LABELS)
    @pytest.mark.parametrize("unit_code", ["KG", "G", "LB"])
    def test_weight_units_never_fit(self, checker, label, unit_code):
        verdict = checker.check(label, unit_code, Dimension.WEIGHT)

        assert verdict.compatible is False
        assert "L" in verdict.recommended_units

    @pytest.mark.parametrize("label", ENGINE_OIL_LABELS)
    @pytest.mark.parametrize("unit_code", ["L", "ML", "LTR", "CL", "GAL", "FLOZ"])
    def test_volume_units_always_fit(self, checker, label, unit_code):
        verdict = checker.check(label, unit_code, Dimension.VOLUME)

        assert verdict.compatible is True

    def test_phrase_override_reported(self, checker):
        verdict = checker.check("Engine Oil", "KG", Dimension.WEIGHT)

        assert verdict.detection_method == DetectionMethod.NGRAM
        assert verdict.confidence == 95
        assert "liquid product" in verdict.reason

    def test_rate_unit_rejected(self, checker):
        verdict = checker.check("Engine Oil", "LPH", Dimension.RATE)

        assert verdict.compatible is False


class TestOtherCategories:
    def test_washing_powder_in_liters(self, checker):
        verdict = checker.check("Washing Powder", "L", Dimension.VOLUME)

        assert verdict.compatible is False
        assert verdict.recommended_units[:2] == ["KG", "G"]

    def test_industry_rule_without_vector_signal(self, checker):
        """'Laptops' has no word vector; the electronics rule still demands a quantity unit."""
        verdict = checker.check("Laptops", "KG", Dimension.WEIGHT)

        assert verdict.compatible is False
        assert verdict.detection_method == DetectionMethod.INDUSTRY_RULE
        assert verdict.recommended_units == ["PC", "EA", "UNIT"]

    def test_later_industry_rule_still_applies(self, checker):
        """'Motor' satisfies the broad oil rule; the electronics rule after it still runs."""
        verdict = checker.check("Motor Tablets", "KG", Dimension.WEIGHT)

        assert verdict.compatible is False
        assert verdict.detection_method == DetectionMethod.INDUSTRY_RULE
        assert verdict.recommended_units == ["PC", "EA", "UNIT"]

    def test_every_matching_industry_rule_satisfied(self, checker):
        assert checker.check("Motor Tablets", "PC", Dimension.QUANTITY).compatible is True

    def test_unit_code_of_another_dimension(self, checker):
        """A weight code declared as a quantity unit is flagged by the format check."""
        verdict = checker.check("Gift Cards", "KG", Dimension.QUANTITY)

        assert verdict.compatible is False
        assert verdict.detection_method == DetectionMethod.UNIT_FORMAT
        assert "PC" in verdict.recommended_units

    def test_neutral_label_passes(self, checker):
        assert checker.check("Gift Cards", "PC", Dimension.QUANTITY).compatible is True


class TestMissingInput:
    @pytest.mark.parametrize("label,unit_code", [(None, "KG"), ("Engine Oil", None), ("", "")])
    def test_not_enough_information(self, checker, label, unit_code):
        verdict = checker.check(label, unit_code, Dimension.WEIGHT)

        assert verdict.compatible is True
        assert verdict.reason is None

    def test_unknown_dimension_is_incompatible_with_liquids(self, checker):
        verdict = checker.check("Engine Oil", "BOX")

        assert verdict.compatible is False
