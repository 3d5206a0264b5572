"""All scoring formulas: verification score, confidence level, image confidence.

Usage:
    from catalog_verifier.domain.scoring import verification_score, confidence_level

    score = verification_score(issues, missing_fields=["front_image"])  # 45.0
    level = confidence_level(missing_fields=["front_image"])              # 95.0
"""

from enum import Enum
from typing import Iterable, Optional, Sequence

from catalog_verifier.schemas.common import Severity
from catalog_verifier.schemas.verification import Issue, Rule


class CheckName(str, Enum):
    COMPATIBILITY = "compatibility"
    CATEGORY = "category"
    UNIT_CATEGORY = "unit_category"
    IMAGE = "image"
    BARCODE = "barcode"


# Required fields, in the order they are checked
REQUIRED_FIELDS = ("front_image", "brand_name", "classification_code", "unit_code")

SEVERITY_WEIGHTS: dict[Severity, float] = {
    Severity.CRITICAL: 25.0,
    Severity.HIGH: 15.0,
    Severity.MEDIUM: 10.0,
    Severity.LOW: 5.0,
    Severity.INFO: 0.0,
}

CHECK_CAPS: dict[CheckName, float] = {
    CheckName.COMPATIBILITY: 20.0,
    CheckName.CATEGORY: 15.0,
    CheckName.UNIT_CATEGORY: 15.0,
    CheckName.IMAGE: 30.0,
    CheckName.BARCODE: 10.0,
}

# A check whose inputs are missing is charged its full cap
CHECK_INPUTS: dict[CheckName, frozenset[str]] = {
    CheckName.COMPATIBILITY: frozenset({"classification_code", "unit_code"}),
    CheckName.CATEGORY: frozenset({"classification_code", "brand_name"}),
    CheckName.UNIT_CATEGORY: frozenset({"classification_code", "brand_name", "unit_code"}),
    CheckName.IMAGE: frozenset({"front_image", "classification_code", "unit_code"}),
    CheckName.BARCODE: frozenset(),
}

CHECK_BY_RULE: dict[Rule, CheckName] = {
    Rule.CLASSIFICATION_UNIT: CheckName.COMPATIBILITY,
    Rule.CATEGORY_MATCH: CheckName.CATEGORY,
    Rule.UNIT_COMPATIBILITY: CheckName.UNIT_CATEGORY,
    Rule.IMAGE_ANALYSIS: CheckName.IMAGE,
    Rule.IMAGE_CONTENT: CheckName.IMAGE,
    Rule.BARCODE_FORMAT: CheckName.BARCODE,
}

IMAGE_PENALTIES: dict[Severity, float] = {
    Severity.CRITICAL: 40.0,
    Severity.HIGH: 25.0,
    Severity.MEDIUM: 15.0,
    Severity.LOW: 5.0,
    Severity.INFO: 0.0,
}

BASELINE_CONFIDENCE = 95.0
FALLBACK_ONLY_CONFIDENCE = 70.0
MISMATCH_CONFIDENCE_FLOOR = 50.0
RECOGNITION_UNAVAILABLE_PENALTY = 15.0


def charged_penalty(
    check: CheckName,
    issues: Iterable[Issue],
    missing_fields: Iterable[str] = (),
) -> float:
    """Penalty charged for one check.

    ``min(cap, Σ severity weights)`` over the check's own issues, or the full
    cap when any of the check's inputs is missing.

    Examples:
        >>> charged_penalty(CheckName.IMAGE, [], missing_fields=["front_image"])
        30.0
        >>> charged_penalty(CheckName.BARCODE, [])
        0.0
    """
    cap = CHECK_CAPS[check]
    if CHECK_INPUTS[check] & set(missing_fields):
        return cap
    total = sum(SEVERITY_WEIGHTS[i.severity] for i in issues if CHECK_BY_RULE.get(i.rule) == check)
    return min(cap, total)


def verification_score(
    issues: Sequence[Issue],
    missing_fields: Sequence[str] = (),
    required_field_penalty: float = 25.0,
) -> float:
    """Overall verification score on a 0-100 scale.

    Formula:
        score = max(0, 100 - 25 × missing - Σ charged_penalty(check))

    Removing a required field never raises the score: it costs its own
    penalty and pushes every dependent check to its cap.

    Args:
        issues: All issues recorded for the product
        missing_fields: Names of absent required fields
        required_field_penalty: Cost of each missing required field

    Returns:
        Score in [0.0, 100.0]

    Examples:
        >>> verification_score([])
        100.0
        >>> verification_score([], missing_fields=["front_image"])
        45.0
    """
    total = len(missing_fields) * required_field_penalty
    total += sum(charged_penalty(check, issues, missing_fields) for check in CheckName)
    return max(0.0, 100.0 - total)


def confidence_level(
    missing_fields: Sequence[str] = (),
    fallback_only: bool = False,
    classifier_confidence: Optional[float] = None,
    recognition_unavailable: bool = False,
) -> float:
    """How certain the checks were, on a 0-100 scale.

    Missing required fields are certain failures and keep the baseline.
    A verdict resting only on the keyword-overlap fallback is capped at 70;
    a classifier-driven mismatch is capped by the classifier's own confidence
    (never below 50). An unavailable recognition service costs 15 points.

    Examples:
        >>> confidence_level()
        95.0
        >>> confidence_level(fallback_only=True)
        70.0
        >>> confidence_level(classifier_confidence=60.0, recognition_unavailable=True)
        45.0
    """
    level = BASELINE_CONFIDENCE
    if not missing_fields:
        if fallback_only:
            level = min(level, FALLBACK_ONLY_CONFIDENCE)
        if classifier_confidence is not None:
            level = min(level, max(MISMATCH_CONFIDENCE_FLOOR, classifier_confidence))
    if recognition_unavailable:
        level -= RECOGNITION_UNAVAILABLE_PENALTY
    return max(0.0, min(100.0, level))


def image_confidence(severities: Iterable[Severity]) -> float:
    """Image verdict confidence: 100 minus per-issue penalties, floored at 0.

    Examples:
        >>> image_confidence([])
        100.0
        >>> image_confidence([Severity.CRITICAL, Severity.LOW])
        55.0
    """
    return max(0.0, 100.0 - sum(IMAGE_PENALTIES[s] for s in severities))
