"""Core verification engine: decides whether a catalog product is consistent.

Every check is a pure function of the product and the reference rows passed
in; nothing is cached between calls.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from catalog_verifier.config import Settings
from catalog_verifier.domain.scoring import REQUIRED_FIELDS, confidence_level, verification_score
from catalog_verifier.domain.taxonomy import (
    FAMILY_TERMS,
    UNIT_EXPLANATIONS,
    category_label,
    fallback_titles,
    recommended_units,
)
from catalog_verifier.domain.verdicts import assign_status
from catalog_verifier.engines.barcode_validator import BARCODE_SUGGESTION, BarcodeValidator
from catalog_verifier.engines.category_classifier import CategoryClassifier
from catalog_verifier.engines.category_overlap import CategoryOverlapChecker
from catalog_verifier.engines.compatibility_checker import CompatibilityChecker
from catalog_verifier.engines.image_analyzer import ImageConsistencyAnalyzer
from catalog_verifier.engines.unit_dimension_resolver import UnitDimensionResolver
from catalog_verifier.schemas.category import CategoryVerdict, ProductCategory
from catalog_verifier.schemas.common import Importance, Severity, importance_for
from catalog_verifier.schemas.descriptors import ClassificationDescriptor, Dimension
from catalog_verifier.schemas.image import (
    CONCEPT_PHASE_ISSUES,
    ConceptDetection,
    DetectionStatus,
    ImageIssueType,
    ImageVerdict,
)
from catalog_verifier.schemas.product import BrandRef, ClassificationRef, ProductRecord, UnitRef
from catalog_verifier.schemas.verification import Issue, Rule, Suggestion, VerificationResult
from catalog_verifier.utils.text import contains_term, normalize

logger = logging.getLogger(__name__)


REQUIRED_FIELD_TEXT: dict[str, tuple[str, str]] = {
    "front_image": (
        "Product front image is missing",
        "Upload a high-quality front image of the product showing the packaging "
        "and product details clearly",
    ),
    "brand_name": (
        "Brand name is missing",
        "Add the product's official brand name exactly as it appears on the packaging",
    ),
    "classification_code": (
        "Product classification is missing",
        "Select an appropriate product classification (GPC) that accurately "
        "describes what the product is",
    ),
    "unit_code": (
        "Unit of measurement is missing",
        "Specify the appropriate unit of measurement (e.g., kg, liter, piece) for this product",
    ),
}

GENERAL_REVIEW_SUGGESTION = (
    "Please review all product information for accuracy and completeness, "
    "including classification, unit and image"
)

ENHANCEMENT_TIPS: dict[ProductCategory, str] = {
    ProductCategory.OIL: (
        "Consider adding technical specifications such as viscosity grade and "
        "API certification to the product description"
    ),
    ProductCategory.FOOD: (
        "Consider adding nutritional information and allergen details to the product description"
    ),
}


@dataclass
class _Findings:
    """Issues and suggestions accumulated while one product is checked."""

    issues: list[Issue] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)
    missing_fields: list[str] = field(default_factory=list)

    def issue(self, rule: Rule, severity: Severity, message: str) -> None:
        self.issues.append(Issue(rule=rule, severity=severity, message=message))

    def suggest(
        self,
        field_name: str,
        text: str,
        importance: Importance,
        units: Optional[list[str]] = None,
    ) -> None:
        self.suggestions.append(Suggestion(
            field=field_name, suggestion=text, importance=importance, recommended_units=units,
        ))


class VerificationEngine:
    """Verifies a single catalog product against its reference rows.

    Pipeline per product:
    1. Required fields present
    2. Classification vs unit compatibility
    3. Product category vs classification
    4. Unit vs the category's expected dimension
    5. Image consistency
    6. Barcode format
    7. Status, score and confidence
    """

    def __init__(
        self,
        resolver: UnitDimensionResolver,
        classifier: CategoryClassifier,
        checker: CompatibilityChecker,
        image_analyzer: ImageConsistencyAnalyzer,
        overlap_checker: CategoryOverlapChecker,
        barcode_validator: BarcodeValidator,
        settings: Settings,
    ):
        self.resolver = resolver
        self.classifier = classifier
        self.checker = checker
        self.image_analyzer = image_analyzer
        self.overlap = overlap_checker
        self.barcodes = barcode_validator
        self.fallback_threshold = settings.classification_fallback_threshold  # 50
        self.mismatch_threshold = settings.category_mismatch_threshold        # 70
        self.required_field_penalty = settings.required_field_penalty         # 25

    # ── main entry point ─────────────────────────────────────────────

    def verify(
        self,
        product: ProductRecord,
        brand: Optional[BrandRef] = None,
        unit: Optional[UnitRef] = None,
        classification: Optional[ClassificationRef] = None,
        detected_concepts: Optional[ConceptDetection] = None,
        title_suggestions: Optional[dict[ProductCategory, list[str]]] = None,
    ) -> VerificationResult:
        found = _Findings()

        # 1. Required fields
        self._check_required(product, found)

        unit_desc = self.resolver.describe(product.unit_code, unit) if product.unit_code else None
        dimension = unit_desc.dimension if unit_desc else None
        class_desc = ClassificationDescriptor.parse(product.classification_code)
        label = self._classification_label(product, class_desc, classification)
        class_text = normalize(
            class_desc.description,
            classification.title if classification else None,
            classification.category if classification else None,
        )

        # 2. Classification vs unit
        compatibility = self.checker.check(label, product.unit_code, dimension)
        if not compatibility.compatible:
            found.issue(Rule.CLASSIFICATION_UNIT, Severity.HIGH, compatibility.reason or "")
            found.suggest(
                "unit_code",
                f'Your product with classification "{product.classification_code}" requires a '
                f"different unit of measurement. {compatibility.reason}",
                Importance.HIGH,
                compatibility.recommended_units,
            )

        # 3. Category vs classification
        brand_text = normalize(product.brand_name, brand.category if brand else None)
        category = self.classifier.classify(product.name, brand_text, class_text or label)
        fallback_fired = False
        classifier_confidence: Optional[float] = None

        if product.classification_code:
            if category.category == ProductCategory.NONE or category.confidence < self.fallback_threshold:
                mismatch = self.overlap.check(normalize(product.name, brand_text), class_text or label)
                if mismatch is not None:
                    fallback_fired = True
                    found.issue(Rule.CATEGORY_MATCH, Severity.HIGH, mismatch.message)
                    found.suggest("classification_code", mismatch.suggestion, Importance.HIGH)
            elif self._category_mismatch(category, class_text or label.lower()):
                classifier_confidence = category.confidence
                cat = category_label(category.category)
                titles = self._titles(category, title_suggestions)
                found.issue(
                    Rule.CATEGORY_MATCH,
                    Severity.HIGH,
                    f"Product appears to be a {cat} but classification doesn't reflect this category",
                )
                found.suggest(
                    "classification_code",
                    f"Consider changing the classification to one that describes a {cat}, "
                    f"such as: {', '.join(titles[:3])}",
                    Importance.HIGH,
                )

        # 4. Unit vs the category's expected dimension
        expected = category.expected_dimension
        if expected and dimension not in (None, Dimension.UNKNOWN) and expected != dimension:
            cat = category_label(category.category)
            units = recommended_units(expected)
            classifier_confidence = min(classifier_confidence or 100.0, category.confidence)
            found.issue(
                Rule.UNIT_COMPATIBILITY,
                Severity.HIGH,
                f'Product category "{cat}" should use {expected.value} units, '
                f"but uses {dimension.value} units",
            )
            found.suggest(
                "unit_code",
                f"This {cat} should be measured in {UNIT_EXPLANATIONS[expected]}. "
                f"Recommended units: {', '.join(units)}",
                Importance.HIGH,
                units,
            )

        # 5. Image
        image_verdict: Optional[ImageVerdict] = None
        if product.front_image:
            image_verdict = self.image_analyzer.analyze(
                product.front_image, label, product.unit_code, product.name,
                detected_concepts=detected_concepts, unit_dimension=dimension,
            )
            if not image_verdict.is_valid:
                self._record_image_issues(image_verdict, detected_concepts, found)

        # 6. Barcode
        problem = self.barcodes.validate(product.barcode)
        if problem:
            found.issue(Rule.BARCODE_FORMAT, Severity.MEDIUM, problem)
            found.suggest("barcode", BARCODE_SUGGESTION, Importance.MEDIUM)

        # 7. Finalize
        is_valid, status = assign_status(i.severity for i in found.issues)
        if not is_valid and not found.suggestions:
            found.suggest("general", GENERAL_REVIEW_SUGGESTION, Importance.MEDIUM)
        if is_valid and category.category in ENHANCEMENT_TIPS:
            found.suggest("enhancement_tip", ENHANCEMENT_TIPS[category.category], Importance.LOW)

        recognition_down = (
            image_verdict is not None
            and detected_concepts is not None
            and detected_concepts.status == DetectionStatus.UNAVAILABLE
        )
        result = VerificationResult(
            product_id=product.id,
            is_valid=is_valid,
            verification_score=verification_score(
                found.issues, found.missing_fields, self.required_field_penalty
            ),
            confidence_level=confidence_level(
                found.missing_fields,
                fallback_only=fallback_fired and classifier_confidence is None,
                classifier_confidence=classifier_confidence,
                recognition_unavailable=recognition_down,
            ),
            status=status,
            issues=found.issues,
            missing_fields=found.missing_fields,
            suggestions=found.suggestions,
            unit=unit_desc,
            classification_descriptor=class_desc,
            category=category,
            compatibility=compatibility,
            image_analysis=image_verdict,
        )

        logger.debug(
            "Product %s: status=%s score=%.0f issues=%d",
            product.id, status.value, result.verification_score, len(found.issues),
        )
        return result

    # ── stages ───────────────────────────────────────────────────────

    @staticmethod
    def _check_required(product: ProductRecord, found: _Findings) -> None:
        for name in REQUIRED_FIELDS:
            if getattr(product, name):
                continue
            message, suggestion = REQUIRED_FIELD_TEXT[name]
            found.missing_fields.append(name)
            found.issue(Rule.REQUIRED_FIELD, Severity.CRITICAL, message)
            found.suggest(name, suggestion, Importance.CRITICAL)

    @staticmethod
    def _classification_label(
        product: ProductRecord,
        descriptor: ClassificationDescriptor,
        classification: Optional[ClassificationRef],
    ) -> Optional[str]:
        """Raw classification string, or the reference title when the raw value is a bare code."""
        if descriptor.description or classification is None or not classification.title:
            return product.classification_code
        return classification.title

    def _category_mismatch(self, category: CategoryVerdict, classification_text: str) -> bool:
        """True when a confident category finds none of its family terms in the classification."""
        terms = FAMILY_TERMS.get(category.category)
        if not terms or category.confidence <= self.mismatch_threshold:
            return False
        return not any(contains_term(classification_text, t) for t in terms)

    def _titles(
        self,
        category: CategoryVerdict,
        prefetched: Optional[dict[ProductCategory, list[str]]],
    ) -> list[str]:
        if prefetched and prefetched.get(category.category):
            return list(prefetched[category.category])
        if category.suggested_titles:
            return list(category.suggested_titles)
        return fallback_titles(category.category)

    @staticmethod
    def _record_image_issues(
        verdict: ImageVerdict,
        detection: Optional[ConceptDetection],
        found: _Findings,
    ) -> None:
        for issue in verdict.issues:
            rule = Rule.IMAGE_CONTENT if issue.type in CONCEPT_PHASE_ISSUES else Rule.IMAGE_ANALYSIS
            found.issue(rule, issue.severity, issue.message)

            text = issue.suggestion
            if issue.type == ImageIssueType.IMAGE_CONTENT_MISMATCH:
                detected = [c.name for c in detection.concepts] if detection else []
                text = (
                    f"The image should show {', '.join(verdict.expected_concepts[:5])}, "
                    f"but it appears to show {', '.join(detected[:3]) or 'something else'}. "
                    "Upload an image that clearly shows the product"
                )
            if text:
                found.suggest("front_image", text, importance_for(issue.severity))

            if issue.type == ImageIssueType.CONTENT_TYPE_MISMATCH:
                found.suggest(
                    "general",
                    f"IMPORTANT: Your product appears to have an inappropriate image. "
                    f"{issue.message}. This will cause product verification to fail "
                    "and may confuse customers.",
                    Importance.CRITICAL,
                )
