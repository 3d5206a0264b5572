"""Unit tests for domain.scoring module."""

import pytest

from catalog_verifier.domain.scoring import (
    CHECK_CAPS,
    CheckName,
    charged_penalty,
    confidence_level,
    image_confidence,
    verification_score,
)
from catalog_verifier.schemas.common import Severity
from catalog_verifier.schemas.verification import Issue, Rule


def _issue(rule: Rule, severity: Severity) -> Issue:
    return Issue(rule=rule, severity=severity, message="test")


class TestChargedPenalty:
    """Per-check penalties: summed weights capped per check."""

    def test_no_issues(self):
        assert charged_penalty(CheckName.COMPATIBILITY, []) == 0.0

    def test_single_high_issue(self):
        issues = [_issue(Rule.CLASSIFICATION_UNIT, Severity.HIGH)]
        assert charged_penalty(CheckName.COMPATIBILITY, issues) == 15.0

    def test_capped(self):
        """Two high image issues (2 × 15) and a critical (25) are capped at 30."""
        issues = [
            _issue(Rule.IMAGE_ANALYSIS, Severity.HIGH),
            _issue(Rule.IMAGE_CONTENT, Severity.HIGH),
            _issue(Rule.IMAGE_ANALYSIS, Severity.CRITICAL),
        ]
        assert charged_penalty(CheckName.IMAGE, issues) == 30.0

    def test_only_own_rule_counts(self):
        issues = [_issue(Rule.BARCODE_FORMAT, Severity.MEDIUM)]
        assert charged_penalty(CheckName.CATEGORY, issues) == 0.0
        assert charged_penalty(CheckName.BARCODE, issues) == 10.0

    def test_missing_input_charges_full_cap(self):
        for check in CheckName:
            if check == CheckName.BARCODE:
                continue
            assert charged_penalty(check, [], missing_fields=["classification_code"]) == CHECK_CAPS[check]

    def test_required_field_issues_belong_to_no_check(self):
        issues = [_issue(Rule.REQUIRED_FIELD, Severity.CRITICAL)]
        assert all(charged_penalty(check, issues) == 0.0 for check in CheckName)


class TestVerificationScore:
    def test_clean_product(self):
        assert verification_score([]) == 100.0

    def test_missing_image(self):
        """25 for the field plus the image check's 30 cap."""
        assert verification_score([], missing_fields=["front_image"]) == 45.0

    def test_floored_at_zero(self):
        assert verification_score([], missing_fields=["front_image", "brand_name", "classification_code"]) == 0.0

    def test_issues_across_checks(self):
        issues = [
            _issue(Rule.UNIT_COMPATIBILITY, Severity.HIGH),
            _issue(Rule.CLASSIFICATION_UNIT, Severity.HIGH),
            _issue(Rule.BARCODE_FORMAT, Severity.MEDIUM),
        ]
        assert verification_score(issues) == 60.0

    def test_required_field_penalty_is_configurable(self):
        assert verification_score([], missing_fields=["front_image"], required_field_penalty=10.0) == 60.0

    def test_monotone_in_missing_fields(self):
        fields = ["front_image", "brand_name", "classification_code", "unit_code"]
        scores = [verification_score([], missing_fields=fields[:n]) for n in range(len(fields) + 1)]
        assert scores == sorted(scores, reverse=True)


class TestConfidenceLevel:
    def test_baseline(self):
        assert confidence_level() == 95.0

    def test_fallback_only(self):
        assert confidence_level(fallback_only=True) == 70.0

    @pytest.mark.parametrize("classifier,expected", [(98.0, 95.0), (80.0, 80.0), (30.0, 50.0)])
    def test_classifier_driven_mismatch(self, classifier, expected):
        assert confidence_level(classifier_confidence=classifier) == expected

    def test_missing_fields_keep_baseline(self):
        assert confidence_level(["front_image"], fallback_only=True, classifier_confidence=40.0) == 95.0

    def test_recognition_unavailable(self):
        assert confidence_level(recognition_unavailable=True) == 80.0
        assert confidence_level(classifier_confidence=60.0, recognition_unavailable=True) == 45.0


class TestImageConfidence:
    def test_no_issues(self):
        assert image_confidence([]) == 100.0

    def test_penalties(self):
        assert image_confidence([Severity.CRITICAL]) == 60.0
        assert image_confidence([Severity.HIGH, Severity.MEDIUM, Severity.LOW, Severity.INFO]) == 55.0

    def test_floor(self):
        assert image_confidence([Severity.CRITICAL] * 3) == 0.0
