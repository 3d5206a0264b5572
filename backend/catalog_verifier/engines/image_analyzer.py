"""Decide whether a product image plausibly shows the declared product.

Two phases:

1. **Filename heuristics** (always, when an image reference exists): tokens
   of the image's base filename are scored against per-category packaging
   vocabulary and against unrelated-content domains (animals, people,
   landscapes, ...) that specific categories can never show.
2. **Recognised concepts** (optional): concepts returned by the visual
   recognition service are compared with the concepts the metadata implies,
   via :class:`ConceptMatcher`.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from catalog_verifier.domain.scoring import image_confidence
from catalog_verifier.engines.concept_matcher import ConceptMatcher
from catalog_verifier.schemas.common import BLOCKING_SEVERITIES, Severity
from catalog_verifier.schemas.descriptors import Dimension
from catalog_verifier.schemas.image import (
    ConceptDetection,
    ContentConsistency,
    DetectionStatus,
    ImageIssue,
    ImageIssueType,
    ImageVerdict,
)
from catalog_verifier.utils.text import contains_term

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageCategory:
    """What an image of a product in this category should (and must not) show."""

    name: str
    keywords: tuple[str, ...]
    features: tuple[str, ...]
    image_patterns: tuple[str, ...]
    signatures: tuple[str, ...]
    incompatible: tuple[str, ...]
    description: str

    @property
    def label(self) -> str:
        return self.name.replace("_", " ")

    def vocabulary(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(self.features + self.image_patterns + self.signatures))


@dataclass(frozen=True)
class ContentDomain:
    """Image content that is unrelated to any product packaging."""

    name: str
    keywords: tuple[str, ...]
    description: str


IMAGE_CATEGORIES: dict[str, ImageCategory] = {
    c.name: c for c in (
        ImageCategory(
            name="oil_products",
            keywords=("oil", "lubricant", "fluid", "liquid", "engine", "motor", "petroleum", "synthetic"),
            features=("bottle", "container", "can", "jug", "drum", "packaging"),
            image_patterns=("bottle", "container", "packaging", "oil", "lubricant", "motor"),
            signatures=("glossy liquid", "amber color", "yellow", "golden", "brown"),
            incompatible=("animal", "person", "landscape", "building", "abstract"),
            description="Automotive or industrial oils and lubricants",
        ),
        ImageCategory(
            name="cleaning_products",
            keywords=("detergent", "cleaner", "soap", "washing", "bleach", "disinfectant", "sanitizer"),
            features=("bottle", "box", "package", "spray", "container", "jug", "pouch"),
            image_patterns=("bottle", "box", "container", "cleaner", "soap", "detergent"),
            signatures=("spray bottle", "plastic container", "powder", "liquid soap"),
            incompatible=("animal", "person", "landscape", "vehicle", "abstract"),
            description="Household or industrial cleaning products",
        ),
        ImageCategory(
            name="food_products",
            keywords=("food", "snack", "meal", "nutrition", "edible", "grocery", "consumable", "ingredient"),
            features=("package", "box", "bag", "container", "wrapper", "pouch", "jar", "can"),
            image_patterns=("package", "container", "food", "edible", "snack", "meal"),
            signatures=("food product", "edible content", "packaging with food images"),
            incompatible=("vehicle", "building", "technology"),
            description="Edible food products and ingredients",
        ),
        ImageCategory(
            name="beverages",
            keywords=("drink", "beverage", "water", "juice", "soda", "milk", "coffee", "tea"),
            features=("bottle", "can", "container", "pack", "carton", "glass", "cup"),
            image_patterns=("bottle", "can", "container", "drink", "beverage", "liquid"),
            signatures=("transparent bottle", "colorful liquid", "drinking container"),
            incompatible=("vehicle", "building", "technology"),
            description="Drinkable liquid products",
        ),
        ImageCategory(
            name="electronics",
            keywords=("device", "gadget", "electronic", "digital", "tech", "appliance", "computer"),
            features=("box", "device", "product", "packaging", "electronics", "hardware"),
            image_patterns=("device", "box", "product", "electronic", "digital", "tech"),
            signatures=("electronic device", "circuit board", "screen", "control panel"),
            incompatible=("animal", "landscape"),
            description="Electronic devices and gadgets",
        ),
        ImageCategory(
            name="personal_care",
            keywords=("cosmetic", "beauty", "makeup", "skin", "hair", "care", "personal", "hygiene"),
            features=("bottle", "tube", "jar", "container", "packaging", "beauty product"),
            image_patterns=("cosmetic", "beauty", "personal", "care", "hygiene", "makeup"),
            signatures=("cream jar", "beauty product", "cosmetic packaging"),
            incompatible=("vehicle", "building", "technology"),
            description="Personal care and beauty products",
        ),
        ImageCategory(
            name="clothing",
            keywords=("apparel", "clothing", "wear", "garment", "fashion", "textile", "fabric"),
            features=("garment", "clothing", "apparel", "fabric", "textile", "fashion item"),
            image_patterns=("clothing", "apparel", "garment", "fashion", "wear"),
            signatures=("fabric texture", "clothing item", "folded garment", "hanger"),
            incompatible=("vehicle", "building", "technology"),
            description="Clothing and apparel items",
        ),
    )
}

CONTENT_DOMAINS: dict[str, ContentDomain] = {
    d.name: d for d in (
        ContentDomain(
            "animal",
            ("animal", "dog", "cat", "bird", "pet", "wildlife", "lion", "tiger", "bear", "elephant", "horse"),
            "Animal or wildlife imagery",
        ),
        ContentDomain(
            "person",
            ("person", "people", "human", "man", "woman", "child", "baby", "portrait", "face", "selfie"),
            "Human portrait or people imagery",
        ),
        ContentDomain(
            "landscape",
            ("landscape", "mountain", "beach", "ocean", "sea", "lake", "forest", "nature", "outdoor", "sky", "sunset"),
            "Natural landscape imagery",
        ),
        ContentDomain(
            "building",
            ("building", "house", "architecture", "city", "urban", "construction", "office", "tower", "apartment"),
            "Buildings or architectural imagery",
        ),
        ContentDomain(
            "vehicle",
            ("vehicle", "car", "truck", "motorcycle", "bike", "bicycle", "auto", "automotive", "transport"),
            "Vehicle imagery",
        ),
        ContentDomain(
            "abstract",
            ("abstract", "pattern", "texture", "art", "design", "illustration", "graphic"),
            "Abstract art or pattern imagery",
        ),
        ContentDomain(
            "technology",
            ("technology", "computer", "laptop", "phone", "device", "electronic", "digital", "screen", "tech"),
            "Technology or device imagery",
        ),
    )
}

CLASSIFICATION_KEYWORD_WEIGHT = 1.5
NAME_KEYWORD_WEIGHT = 1.0
EXACT_TOKEN_WEIGHT = 1.5
SUBSTRING_WEIGHT = 0.5
MIN_SUBSTRING_LENGTH = 4


@dataclass(frozen=True)
class ParsedImageRef:
    base_name: str
    extension: Optional[str]
    tokens: tuple[str, ...]


def parse_image_ref(image_ref: str) -> ParsedImageRef:
    """Split an image path or URL into base filename, extension and tokens.

    Examples:
        >>> parse_image_ref("uploads\\\\front-oil_bottle.JPG?v=2").tokens
        ('front', 'oil', 'bottle')
        >>> parse_image_ref("https://cdn.example.com/a/dog-park.png#x").extension
        'png'
    """
    path = image_ref.strip().replace("\\", "/")
    path = re.split(r"[?#]", path, maxsplit=1)[0]
    base_name = path.rstrip("/").rsplit("/", 1)[-1]

    stem, extension = base_name, None
    if "." in base_name.lstrip("."):
        stem, extension = base_name.rsplit(".", 1)
        extension = extension.lower() or None

    tokens = tuple(t for t in re.split(r"[-_\s.]+", stem.lower()) if t)
    return ParsedImageRef(base_name=base_name, extension=extension, tokens=tokens)


class ImageConsistencyAnalyzer:
    """Judges image/metadata consistency from the filename and, optionally, recognised concepts."""

    def __init__(
        self,
        concept_matcher: Optional[ConceptMatcher] = None,
        preferred_formats: Sequence[str] = ("jpg", "jpeg", "png", "webp"),
    ):
        self.concept_matcher = concept_matcher or ConceptMatcher()
        self.preferred_formats = frozenset(f.lower().lstrip(".") for f in preferred_formats)

    # ── main entry point ─────────────────────────────────────────────

    def analyze(
        self,
        image_ref: Optional[str],
        classification_label: Optional[str],
        unit_code: Optional[str],
        product_name: Optional[str],
        detected_concepts: Optional[ConceptDetection] = None,
        unit_dimension: Optional[Dimension] = None,
    ) -> ImageVerdict:
        if not image_ref or not image_ref.strip():
            return ImageVerdict(
                is_valid=False,
                confidence=0,
                content_consistency=ContentConsistency.UNKNOWN,
                issues=[ImageIssue(
                    type=ImageIssueType.INVALID_REFERENCE,
                    severity=Severity.CRITICAL,
                    confidence=100,
                    message="Invalid image URL format",
                    suggestion="Provide a valid image path or URL for the product's front image",
                )],
            )

        parsed = parse_image_ref(image_ref)
        category, meta_score = self._metadata_category(classification_label, product_name)
        detected = self._detect_content(parsed.tokens)

        issues: list[ImageIssue] = []
        consistency, semantic_score = self._filename_phase(parsed, category, meta_score, detected, issues)

        if parsed.extension and parsed.extension not in self.preferred_formats:
            issues.append(ImageIssue(
                type=ImageIssueType.IMAGE_FORMAT_WARNING,
                severity=Severity.LOW,
                confidence=90,
                message=f"Image format .{parsed.extension} may not be optimal for product display",
                suggestion=(
                    "Consider using industry standard formats like JPG, PNG or WebP "
                    "for better compatibility and performance"
                ),
            ))

        verdict = ImageVerdict(
            is_valid=True,
            content_consistency=consistency,
            metadata_category=category.name if category else None,
            detected_content=list(detected),
            semantic_score=semantic_score,
        )

        if detected_concepts is not None:
            consistency = self._concept_phase(
                verdict, detected_concepts, consistency, issues,
                classification_label, unit_code, product_name, unit_dimension,
            )

        verdict.issues = issues
        verdict.content_consistency = consistency
        verdict.is_valid = not any(i.severity in BLOCKING_SEVERITIES for i in issues)
        verdict.confidence = image_confidence(i.severity for i in issues)

        logger.debug(
            "Image %s: consistency=%s category=%s content=%s issues=%d",
            parsed.base_name, consistency.value, verdict.metadata_category,
            verdict.detected_content, len(issues),
        )
        return verdict

    # ── filename phase ───────────────────────────────────────────────

    def _filename_phase(
        self,
        parsed: ParsedImageRef,
        category: Optional[ImageCategory],
        meta_score: float,
        detected: dict[str, float],
        issues: list[ImageIssue],
    ) -> tuple[ContentConsistency, float]:
        if category is None:
            if detected:
                desc = CONTENT_DOMAINS[next(iter(detected))].description.lower()
                issues.append(ImageIssue(
                    type=ImageIssueType.CONTENT_CATEGORY_MISMATCH,
                    severity=Severity.HIGH,
                    confidence=75,
                    message=f"Image appears to contain {desc} which doesn't match product metadata",
                    suggestion="Upload an image that clearly shows the product described in your metadata",
                ))
                return ContentConsistency.INDETERMINATE, 0.0
            issues.append(ImageIssue(
                type=ImageIssueType.INSUFFICIENT_METADATA,
                severity=Severity.MEDIUM,
                confidence=60,
                message="Unable to determine product category from available metadata",
                suggestion=(
                    "Ensure classification accurately describes your product "
                    "and image clearly shows the product"
                ),
            ))
            return ContentConsistency.UNKNOWN, 0.0

        # Content the category can never show outranks any packaging match,
        # but only when a whole filename token named it
        conflicting = [
            d for d in detected
            if d in category.incompatible and detected[d] >= EXACT_TOKEN_WEIGHT
        ]
        if conflicting:
            worst = max(conflicting, key=lambda d: detected[d])
            issues.append(ImageIssue(
                type=ImageIssueType.CONTENT_TYPE_MISMATCH,
                severity=Severity.CRITICAL,
                confidence=min(95, detected[worst] * 20),
                message=(
                    f"Image appears to contain {CONTENT_DOMAINS[worst].description.lower()} "
                    f"which is inconsistent with {category.label} products"
                ),
                suggestion=(
                    f"Upload an image that clearly shows the {category.description.lower()} "
                    f"with visible {', '.join(category.features[:3])}"
                ),
            ))
            return ContentConsistency.INCONSISTENT, 0.0

        joined = " ".join(parsed.tokens)
        image_score = sum(1 for term in category.vocabulary() if contains_term(joined, term))
        if image_score:
            return ContentConsistency.CONSISTENT, min(100.0, (meta_score + image_score) * 10)

        if detected:
            issues.append(ImageIssue(
                type=ImageIssueType.AMBIGUOUS_IMAGE_CONTENT,
                severity=Severity.MEDIUM,
                confidence=70,
                message=f"Image filename doesn't clearly indicate {category.label} product content",
                suggestion=(
                    f"Ensure image clearly shows the product with visible "
                    f"{', '.join(category.features[:3])}"
                ),
            ))
            return ContentConsistency.AMBIGUOUS, 0.0

        issues.append(ImageIssue(
            type=ImageIssueType.UNDETERMINED_IMAGE_CONTENT,
            severity=Severity.INFO,
            confidence=50,
            message="Image filename doesn't provide clear indicators of product content",
            suggestion=f"Rename image to include descriptive terms related to your {category.description.lower()}",
        ))
        return ContentConsistency.UNDETERMINED, 0.0

    @staticmethod
    def _metadata_category(
        classification_label: Optional[str], product_name: Optional[str]
    ) -> tuple[Optional[ImageCategory], float]:
        label = (classification_label or "").lower()
        name = (product_name or "").lower()

        best, best_score = None, 0.0
        for category in IMAGE_CATEGORIES.values():
            score = 0.0
            for keyword in category.keywords:
                if contains_term(label, keyword):
                    score += CLASSIFICATION_KEYWORD_WEIGHT
                if contains_term(name, keyword):
                    score += NAME_KEYWORD_WEIGHT
            if score > best_score:
                best, best_score = category, score
        return best, best_score

    @staticmethod
    def _detect_content(tokens: Sequence[str]) -> dict[str, float]:
        """Unrelated-content domains found in the filename tokens, with scores."""
        detected: dict[str, float] = {}
        for domain in CONTENT_DOMAINS.values():
            score = 0.0
            for keyword in domain.keywords:
                if keyword in tokens:
                    score += EXACT_TOKEN_WEIGHT
                elif len(keyword) >= MIN_SUBSTRING_LENGTH and any(keyword in t for t in tokens):
                    score += SUBSTRING_WEIGHT
            if score > 0:
                detected[domain.name] = score
        return detected

    # ── concept phase ────────────────────────────────────────────────

    def _concept_phase(
        self,
        verdict: ImageVerdict,
        detection: ConceptDetection,
        consistency: ContentConsistency,
        issues: list[ImageIssue],
        classification_label: Optional[str],
        unit_code: Optional[str],
        product_name: Optional[str],
        unit_dimension: Optional[Dimension],
    ) -> ContentConsistency:
        if detection.status == DetectionStatus.SKIPPED:
            return consistency

        if detection.status == DetectionStatus.UNAVAILABLE:
            issues.append(ImageIssue(
                type=ImageIssueType.RECOGNITION_UNAVAILABLE,
                severity=Severity.LOW,
                confidence=30,
                message="Image recognition service was unavailable; image content could not be verified",
                suggestion="Re-run verification later to confirm the image content",
            ))
            if consistency == ContentConsistency.INCONSISTENT:
                return consistency
            return ContentConsistency.UNDETERMINED

        expected, matches, score = self.concept_matcher.evaluate(
            detection.concepts, product_name, classification_label, unit_code, unit_dimension,
        )
        verdict.expected_concepts = expected
        verdict.concept_matches = matches
        verdict.concept_score = score

        if score.is_valid:
            if consistency == ContentConsistency.INCONSISTENT:
                return consistency
            return ContentConsistency.CONSISTENT

        detected_names = [c.name for c in detection.concepts]
        issues.append(ImageIssue(
            type=ImageIssueType.IMAGE_CONTENT_MISMATCH,
            severity=Severity.HIGH,
            confidence=round((1 - score.score) * 100),
            message=(
                f"Image content does not match product metadata "
                f"(match score {score.score:.2f}). Expected concepts like "
                f"{', '.join(expected[:5]) or 'none'}; detected "
                f"{', '.join(detected_names[:3]) or 'nothing recognisable'}"
            ),
            suggestion="Upload an image that clearly shows the product and its packaging",
        ))
        return ContentConsistency.INCONSISTENT
