"""Shared test fixtures.

Every test builds its own engines and in-memory catalog, so tests are fully
isolated.
"""

import asyncio
from typing import Dict, List, Optional

import pytest

from catalog_verifier.config import Settings
from catalog_verifier.engines.barcode_validator import BarcodeValidator
from catalog_verifier.engines.category_classifier import CategoryClassifier
from catalog_verifier.engines.category_overlap import CategoryOverlapChecker
from catalog_verifier.engines.compatibility_checker import CompatibilityChecker
from catalog_verifier.engines.concept_matcher import ConceptMatcher
from catalog_verifier.engines.image_analyzer import ImageConsistencyAnalyzer
from catalog_verifier.engines.unit_dimension_resolver import UnitDimensionResolver
from catalog_verifier.engines.verification_engine import VerificationEngine
from catalog_verifier.repositories.memory_repo import InMemoryCatalogRepository
from catalog_verifier.schemas.image import ConceptDetection, VisualConcept
from catalog_verifier.schemas.product import BrandRef, ClassificationRef, ProductRecord, UnitRef


@pytest.fixture()
def settings() -> Settings:
    return Settings(recognition_api_key="", catalog_path="unused.json")


@pytest.fixture()
def engine(settings: Settings) -> VerificationEngine:
    return VerificationEngine(
        resolver=UnitDimensionResolver(),
        classifier=CategoryClassifier(),
        checker=CompatibilityChecker(),
        image_analyzer=ImageConsistencyAnalyzer(ConceptMatcher()),
        overlap_checker=CategoryOverlapChecker(),
        barcode_validator=BarcodeValidator(),
        settings=settings,
    )


# ── Convenience fixtures ─────────────────────────────────────────────────

ENGINE_OIL_CLASSIFICATION = "20002871-Type of Engine Oil Target"


@pytest.fixture()
def engine_oil() -> ProductRecord:
    """The canonical well-formed product: a boxed engine oil sold by the liter."""
    return ProductRecord(
        id=1,
        name="PROMAX SP 0W16",
        brand_name="SAMA OIL",
        classification_code=ENGINE_OIL_CLASSIFICATION,
        unit_code="LTR",
        front_image="uploads/products/front-oil-bottle.jpg",
    )


@pytest.fixture()
def engine_oil_refs() -> Dict[str, object]:
    return {
        "brand": BrandRef(name="SAMA OIL", category="Automotive"),
        "unit": UnitRef(code="LTR", name="Liter"),
        "classification": ClassificationRef(code="20002871", title="Engine Oil/Engine Lubricants"),
    }


@pytest.fixture()
def catalog_data() -> dict:
    """Raw catalog rows using the product store's column names."""
    return {
        "products": [
            {
                "id": 1,
                "productnameenglish": "PROMAX SP 0W16",
                "BrandName": "SAMA OIL",
                "gpc": ENGINE_OIL_CLASSIFICATION,
                "unit": "LTR",
                "front_image": "uploads/front-oil-bottle.jpg",
            },
            {
                "id": 2,
                "productnameenglish": "PROMAX SP 0W16 Carton",
                "BrandName": "SAMA OIL",
                "gpc": ENGINE_OIL_CLASSIFICATION,
                "unit": "PC",
                "front_image": "uploads/front-oil-bottle.jpg",
            },
            {
                "id": 3,
                "productnameenglish": "Fresh Orange Juice",
                "BrandName": "Sunny Farms",
                "gpc": "10000227-Fruit Juice Drinks",
                "unit": "ML",
                "front_image": None,
            },
            {
                "id": 4,
                "productnameenglish": "Old Listing",
                "BrandName": "SAMA OIL",
                "gpc": ENGINE_OIL_CLASSIFICATION,
                "unit": "LTR",
                "front_image": "uploads/old.jpg",
                "deleted_at": "2024-01-15T10:00:00",
            },
        ],
        "brands": [
            {"name": "SAMA OIL", "category": "Automotive"},
            {"name": "Sunny Farms", "category": "Food"},
        ],
        "units": [
            {"code": "LTR", "name": "Liter"},
            {"code": "PC", "name": "Piece"},
            {"code": "ml", "name": "Milliliter"},
        ],
        "classifications": [
            {"code": "20002871", "title": "Engine Oil/Engine Lubricants"},
            {"code": "10000227", "title": "Fruit Juice Drinks"},
            {"code": "10000300", "title": "Motor Oils"},
        ],
    }


@pytest.fixture()
def catalog_repo(catalog_data) -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository.from_dict(catalog_data)


class FakeDetector:
    """ConceptDetector double that records calls and tracks concurrency."""

    def __init__(
        self,
        concepts: Optional[List[VisualConcept]] = None,
        delay: float = 0.0,
        error: Optional[Exception] = None,
    ):
        self.concepts = concepts or []
        self.delay = delay
        self.error = error
        self.calls: List[str] = []
        self.active = 0
        self.max_active = 0

    async def detect_visual_concepts(self, image_ref: str) -> ConceptDetection:
        self.calls.append(image_ref)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
            return ConceptDetection.detected(list(self.concepts))
        finally:
            self.active -= 1


@pytest.fixture()
def bottle_concepts() -> List[VisualConcept]:
    return [
        VisualConcept(name="bottle", confidence=0.97),
        VisualConcept(name="oil", confidence=0.91),
        VisualConcept(name="container", confidence=0.88),
        VisualConcept(name="lubricant", confidence=0.84),
    ]


@pytest.fixture()
def make_detector():
    """Factory for :class:`FakeDetector` instances."""
    return FakeDetector
