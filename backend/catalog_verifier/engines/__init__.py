"""Core verification engines."""

from catalog_verifier.engines.barcode_validator import BarcodeValidator
from catalog_verifier.engines.category_classifier import CategoryClassifier
from catalog_verifier.engines.category_overlap import CategoryOverlapChecker
from catalog_verifier.engines.compatibility_checker import CompatibilityChecker
from catalog_verifier.engines.concept_matcher import ConceptMatcher
from catalog_verifier.engines.image_analyzer import ImageConsistencyAnalyzer
from catalog_verifier.engines.unit_dimension_resolver import UnitDimensionResolver
from catalog_verifier.engines.verification_engine import VerificationEngine

__all__ = [
    "UnitDimensionResolver",
    "CategoryClassifier",
    "CompatibilityChecker",
    "ConceptMatcher",
    "ImageConsistencyAnalyzer",
    "CategoryOverlapChecker",
    "BarcodeValidator",
    "VerificationEngine",
]
