"""Image consistency verdicts and visual-recognition results."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from catalog_verifier.schemas.common import Severity, clamp_confidence


class ContentConsistency(str, Enum):
    CONSISTENT = "consistent"
    INCONSISTENT = "inconsistent"
    AMBIGUOUS = "ambiguous"
    UNDETERMINED = "undetermined"
    INDETERMINATE = "indeterminate"
    UNKNOWN = "unknown"


class ImageIssueType(str, Enum):
    INVALID_REFERENCE = "invalid_reference"
    CONTENT_TYPE_MISMATCH = "content_type_mismatch"
    CONTENT_CATEGORY_MISMATCH = "content_category_mismatch"
    AMBIGUOUS_IMAGE_CONTENT = "ambiguous_image_content"
    UNDETERMINED_IMAGE_CONTENT = "undetermined_image_content"
    INSUFFICIENT_METADATA = "insufficient_metadata"
    IMAGE_FORMAT_WARNING = "image_format_warning"
    IMAGE_CONTENT_MISMATCH = "image_content_mismatch"
    RECOGNITION_UNAVAILABLE = "recognition_unavailable"


# Issues produced by comparing recognised concepts rather than the filename
CONCEPT_PHASE_ISSUES = frozenset({
    ImageIssueType.IMAGE_CONTENT_MISMATCH,
    ImageIssueType.RECOGNITION_UNAVAILABLE,
})


class ImageIssue(BaseModel):
    type: ImageIssueType
    severity: Severity
    confidence: float = 0.0
    message: str
    suggestion: Optional[str] = None

    @field_validator("confidence")
    @classmethod
    def clamp(cls, v: float) -> float:
        return clamp_confidence(v)


class VisualConcept(BaseModel):
    """A concept returned by the recognition service, confidence in [0, 1]."""

    name: str
    confidence: float = Field(ge=0.0, le=1.0)


class DetectionStatus(str, Enum):
    DETECTED = "detected"
    UNAVAILABLE = "unavailable"
    SKIPPED = "skipped"


class ConceptDetection(BaseModel):
    status: DetectionStatus = DetectionStatus.SKIPPED
    concepts: list[VisualConcept] = []
    error: Optional[str] = None

    @classmethod
    def detected(cls, concepts: list[VisualConcept]) -> "ConceptDetection":
        return cls(status=DetectionStatus.DETECTED, concepts=concepts)

    @classmethod
    def unavailable(cls, error: str) -> "ConceptDetection":
        return cls(status=DetectionStatus.UNAVAILABLE, error=error)


class MatchType(str, Enum):
    EXACT = "exact"
    PARTIAL = "partial"
    SEMANTIC = "semantic"


class ConceptMatch(BaseModel):
    expected: str
    detected: str
    confidence: float
    match_type: MatchType


class ConceptScore(BaseModel):
    score: float = 0.0
    is_valid: bool = False
    match_ratio: float = 0.0
    average_confidence: float = 0.0
    exact_matches: int = 0


class ImageVerdict(BaseModel):
    is_valid: bool
    confidence: float = 0.0
    content_consistency: ContentConsistency = ContentConsistency.UNKNOWN
    issues: list[ImageIssue] = []
    metadata_category: Optional[str] = None
    detected_content: list[str] = []
    semantic_score: float = 0.0

    # External-concept phase, empty when no concepts were supplied
    expected_concepts: list[str] = []
    concept_matches: list[ConceptMatch] = []
    concept_score: Optional[ConceptScore] = None

    @field_validator("confidence")
    @classmethod
    def clamp(cls, v: float) -> float:
        return clamp_confidence(v)
