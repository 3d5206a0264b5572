"""Pydantic schemas for catalog records, verdicts and batch results."""

from catalog_verifier.schemas.category import (
    CategoryVerdict,
    CompatibilityVerdict,
    DetectionMethod,
    ProductCategory,
)
from catalog_verifier.schemas.common import Importance, Severity
from catalog_verifier.schemas.descriptors import (
    ClassificationDescriptor,
    Dimension,
    UnitDescriptor,
)
from catalog_verifier.schemas.image import (
    ConceptDetection,
    ContentConsistency,
    DetectionStatus,
    ImageIssue,
    ImageIssueType,
    ImageVerdict,
    VisualConcept,
)
from catalog_verifier.schemas.pipeline import (
    BatchVerificationResult,
    PageRequest,
    Pagination,
    ProductFilter,
    ProductVerification,
)
from catalog_verifier.schemas.product import (
    BrandRef,
    ClassificationRef,
    ProductRecord,
    UnitRef,
)
from catalog_verifier.schemas.verification import (
    Issue,
    Rule,
    Suggestion,
    VerificationResult,
    VerificationStatus,
)

__all__ = [
    "ProductRecord", "BrandRef", "UnitRef", "ClassificationRef",
    "Dimension", "UnitDescriptor", "ClassificationDescriptor",
    "ProductCategory", "DetectionMethod", "CategoryVerdict", "CompatibilityVerdict",
    "ContentConsistency", "ImageIssueType", "ImageIssue", "ImageVerdict",
    "VisualConcept", "ConceptDetection", "DetectionStatus",
    "Severity", "Importance",
    "Rule", "Issue", "Suggestion", "VerificationResult", "VerificationStatus",
    "ProductFilter", "PageRequest", "Pagination", "ProductVerification",
    "BatchVerificationResult",
]
