"""Category and unit-compatibility verdicts."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator

from catalog_verifier.schemas.common import clamp_confidence
from catalog_verifier.schemas.descriptors import Dimension


class ProductCategory(str, Enum):
    OIL = "oil_product"
    CLEANING = "cleaning_product"
    FOOD = "food_product"
    BEVERAGE = "beverage_product"
    PERSONAL_CARE = "personal_care"
    ELECTRONIC = "electronic_product"
    CLOTHING = "clothing_product"
    HOUSEHOLD = "household_product"
    NONE = "none"


class DetectionMethod(str, Enum):
    CONTEXTUAL_RULE = "contextual_rule"
    NGRAM = "n-gram"
    KEYWORD = "keyword"
    VECTOR = "vector"
    INDUSTRY_RULE = "industry-rule"
    PROHIBITED_UNIT_TYPE = "prohibited-unit-type"
    UNIT_FORMAT = "unit-format"
    NONE = "none"


class CategoryVerdict(BaseModel):
    category: ProductCategory = ProductCategory.NONE
    confidence: float = 0.0
    expected_dimension: Optional[Dimension] = None
    detection_method: DetectionMethod = DetectionMethod.NONE
    matched_patterns: list[str] = []
    explanation: Optional[str] = None
    suggested_titles: list[str] = []

    @field_validator("confidence")
    @classmethod
    def clamp(cls, v: float) -> float:
        return clamp_confidence(v)


class CompatibilityVerdict(BaseModel):
    compatible: bool = True
    reason: Optional[str] = None
    recommended_units: list[str] = []
    confidence: float = 0.0
    detection_method: DetectionMethod = DetectionMethod.NONE

    @field_validator("confidence")
    @classmethod
    def clamp(cls, v: float) -> float:
        return clamp_confidence(v)
