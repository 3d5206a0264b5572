"""Verification facade: single entry point for every consumer.

The CLI and library callers use this instead of wiring engines and
services directly. If the internal pipeline changes (new checks, another
repository) only this file needs updating.

Usage::

    facade = VerificationFacade()              # uses Settings() from .env
    result = facade.verify({"name": "PROMAX SP 0W16", "unit_code": "LTR", ...})
    page = facade.verify_page(page=1, page_size=20)
    facade.close()
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, TypeVar, Union

from catalog_verifier.clients.recognition_client import ConceptDetector
from catalog_verifier.config import Settings
from catalog_verifier.container import build_recognition_client
from catalog_verifier.engines.barcode_validator import BarcodeValidator
from catalog_verifier.engines.category_classifier import CategoryClassifier
from catalog_verifier.engines.category_overlap import CategoryOverlapChecker
from catalog_verifier.engines.compatibility_checker import CompatibilityChecker
from catalog_verifier.engines.concept_matcher import ConceptMatcher
from catalog_verifier.engines.image_analyzer import ImageConsistencyAnalyzer
from catalog_verifier.engines.unit_dimension_resolver import UnitDimensionResolver
from catalog_verifier.engines.verification_engine import VerificationEngine
from catalog_verifier.repositories.base import ReferenceRepository
from catalog_verifier.repositories.memory_repo import InMemoryCatalogRepository
from catalog_verifier.schemas.image import ConceptDetection
from catalog_verifier.schemas.pipeline import (
    BatchVerificationResult,
    ProductFilter,
    ProductVerification,
)
from catalog_verifier.schemas.product import BrandRef, ClassificationRef, ProductRecord, UnitRef
from catalog_verifier.schemas.verification import VerificationResult
from catalog_verifier.services.verification_service import VerificationService

logger = logging.getLogger(__name__)

T = TypeVar("T")
ProductInput = Union[ProductRecord, Dict[str, Any]]


class VerificationFacade:
    """High-level API for catalog product verification.

    Hides all internal wiring (repository, engines, service, clients).
    Returns only Pydantic schemas.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        repository: Optional[ReferenceRepository] = None,
        concept_detector: Optional[ConceptDetector] = None,
    ):
        self._settings = settings or Settings()
        self._repo = repository
        self._owns_repo = repository is None
        self._detector = concept_detector
        self._setup_engine()

    # ── internal wiring (private) ─────────────────────────────────────

    def _setup_engine(self) -> None:
        s = self._settings
        analyzer = ImageConsistencyAnalyzer(
            concept_matcher=ConceptMatcher(acceptance_threshold=s.image_acceptance_threshold),
            preferred_formats=s.preferred_image_formats,
        )
        self._engine = VerificationEngine(
            resolver=UnitDimensionResolver(),
            classifier=CategoryClassifier(),
            checker=CompatibilityChecker(),
            image_analyzer=analyzer,
            overlap_checker=CategoryOverlapChecker(),
            barcode_validator=BarcodeValidator(),
            settings=s,
        )

    @property
    def repository(self) -> ReferenceRepository:
        """The reference catalog, loaded from ``catalog_path`` on first use."""
        if self._repo is None:
            self._repo = InMemoryCatalogRepository.from_file(self._settings.catalog_path)
        return self._repo

    def _service(self, detector: Optional[ConceptDetector]) -> VerificationService:
        s = self._settings
        return VerificationService(
            verification_engine=self._engine,
            repository=self.repository,
            concept_detector=detector,
            max_concurrency=s.recognition_max_concurrency,
            recognition_timeout=s.recognition_timeout,
            batch_timeout=s.batch_timeout,
        )

    async def _with_service(self, action: Callable[[VerificationService], Awaitable[T]]) -> T:
        if self._detector is not None:
            return await action(self._service(self._detector))
        # One client per event loop; httpx connection pools are loop-bound
        client = build_recognition_client(self._settings)
        if client is None:
            return await action(self._service(None))
        async with client:
            return await action(self._service(client))

    # ══════════════════════════════════════════════════════════════════
    # SINGLE PRODUCT
    # ══════════════════════════════════════════════════════════════════

    def verify(
        self,
        product: ProductInput,
        brand: Optional[BrandRef] = None,
        unit: Optional[UnitRef] = None,
        classification: Optional[ClassificationRef] = None,
        detected_concepts: Optional[ConceptDetection] = None,
    ) -> VerificationResult:
        """Verify one product against the reference rows passed in.

        No repository or network access: recognition results, if any, are
        supplied by the caller.
        """
        return self._engine.verify(
            self._as_record(product),
            brand=brand,
            unit=unit,
            classification=classification,
            detected_concepts=detected_concepts,
        )

    def verify_product_id(self, product_id: Union[int, str]) -> Optional[ProductVerification]:
        """Verify a catalog product by id, or None if it does not exist."""
        product = self.repository.get_product(product_id)
        if product is None:
            return None
        result = self.verify_products([product])
        return result.items[0]

    # ══════════════════════════════════════════════════════════════════
    # BATCHES
    # ══════════════════════════════════════════════════════════════════

    def verify_products(self, products: Iterable[ProductInput]) -> BatchVerificationResult:
        records = [self._as_record(p) for p in products]
        return asyncio.run(self._with_service(lambda svc: svc.verify_products(records)))

    def verify_page(
        self,
        filter: Optional[ProductFilter] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> BatchVerificationResult:
        size = page_size or self._settings.default_page_size
        return asyncio.run(self._with_service(lambda svc: svc.verify_page(filter, page, size)))

    @staticmethod
    def _as_record(product: ProductInput) -> ProductRecord:
        if isinstance(product, ProductRecord):
            return product
        return ProductRecord.model_validate(product)

    # ── lifecycle ─────────────────────────────────────────────────────

    def close(self) -> None:
        """Drop a catalog loaded from disk; the next batch call reloads it.

        An injected repository belongs to the caller and is kept.
        """
        if self._owns_repo:
            self._repo = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
