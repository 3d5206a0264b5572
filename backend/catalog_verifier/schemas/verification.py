"""Verification result schema and supporting enums."""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

from catalog_verifier.schemas.category import CategoryVerdict, CompatibilityVerdict
from catalog_verifier.schemas.common import Importance, Severity
from catalog_verifier.schemas.descriptors import ClassificationDescriptor, UnitDescriptor
from catalog_verifier.schemas.image import ImageVerdict


class VerificationStatus(str, Enum):
    VERIFIED = "verified"
    UNVERIFIED = "unverified"


class Rule(str, Enum):
    """Rule names attached to verification issues."""

    REQUIRED_FIELD = "Required Field"
    CLASSIFICATION_UNIT = "Classification-Unit Compatibility"
    CATEGORY_MATCH = "Category Match"
    UNIT_COMPATIBILITY = "Unit Compatibility"
    IMAGE_ANALYSIS = "Image Analysis"
    IMAGE_CONTENT = "Image Content Verification"
    BARCODE_FORMAT = "Barcode Format"


class Issue(BaseModel):
    rule: Rule
    severity: Severity
    message: str


class Suggestion(BaseModel):
    field: str
    suggestion: str
    importance: Importance
    recommended_units: Optional[list[str]] = None


class VerificationResult(BaseModel):
    product_id: Optional[Union[int, str]] = None
    is_valid: bool
    verification_score: float = Field(ge=0.0, le=100.0)
    confidence_level: float = Field(ge=0.0, le=100.0)
    status: VerificationStatus
    issues: list[Issue] = []
    missing_fields: list[str] = []
    suggestions: list[Suggestion] = []

    unit: Optional[UnitDescriptor] = None
    classification_descriptor: Optional[ClassificationDescriptor] = None
    category: Optional[CategoryVerdict] = None
    compatibility: Optional[CompatibilityVerdict] = None
    image_analysis: Optional[ImageVerdict] = None

    def issues_for(self, rule: Rule) -> list[Issue]:
        return [i for i in self.issues if i.rule == rule]
