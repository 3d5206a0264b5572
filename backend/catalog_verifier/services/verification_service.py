"""Orchestrates verification of a batch of catalog products."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from catalog_verifier.clients.recognition_client import ConceptDetector
from catalog_verifier.domain.taxonomy import FAMILY_TERMS, PREFETCH_CATEGORIES
from catalog_verifier.engines.verification_engine import VerificationEngine
from catalog_verifier.logging_config import batch_context, get_logger
from catalog_verifier.repositories.base import ReferenceRepository
from catalog_verifier.schemas.category import ProductCategory
from catalog_verifier.schemas.descriptors import ClassificationDescriptor
from catalog_verifier.schemas.image import ConceptDetection
from catalog_verifier.schemas.pipeline import (
    BatchVerificationResult,
    Pagination,
    ProductFilter,
    ProductVerification,
)
from catalog_verifier.schemas.product import BrandRef, ClassificationRef, ProductRecord, UnitRef

logger = get_logger(__name__)


@dataclass
class _References:
    """Reference rows resolved once for a whole batch."""

    brands: Dict[str, BrandRef] = field(default_factory=dict)
    units: Dict[str, UnitRef] = field(default_factory=dict)
    classifications: Dict[str, ClassificationRef] = field(default_factory=dict)

    def brand_for(self, product: ProductRecord) -> Optional[BrandRef]:
        return self.brands.get((product.brand_name or "").lower())

    def unit_for(self, product: ProductRecord) -> Optional[UnitRef]:
        return self.units.get((product.unit_code or "").lower())

    def classification_for(self, product: ProductRecord) -> Optional[ClassificationRef]:
        raw = product.classification_code
        if not raw:
            return None
        code = ClassificationDescriptor.parse(raw).code
        return self.classifications.get(code or "") or self.classifications.get(raw)


class VerificationService:
    """Verifies products concurrently.

    References are resolved in bulk once per batch, then one task runs per
    product. Only recognition calls are awaited; they share a semaphore and
    each has its own deadline. The whole batch has a deadline as well.
    """

    def __init__(
        self,
        verification_engine: VerificationEngine,
        repository: ReferenceRepository,
        concept_detector: Optional[ConceptDetector] = None,
        max_concurrency: int = 4,
        recognition_timeout: float = 10.0,
        batch_timeout: float = 60.0,
    ):
        self.engine = verification_engine
        self.repo = repository
        self.detector = concept_detector
        self.max_concurrency = max(1, max_concurrency)
        self.recognition_timeout = recognition_timeout
        self.batch_timeout = batch_timeout

    # ── public API ───────────────────────────────────────────────────

    async def verify_batch(self, products: Sequence[ProductRecord]) -> List[ProductVerification]:
        """Verify ``products``, preserving order.

        Raises:
            TimeoutError: the batch did not finish within ``batch_timeout``
        """
        if not products:
            return []

        with batch_context():
            refs = self._resolve_references(products)
            titles = self._prefetch_titles()
            semaphore = asyncio.Semaphore(self.max_concurrency)

            tasks = [self._verify_one(p, refs, titles, semaphore) for p in products]
            try:
                items = await asyncio.wait_for(asyncio.gather(*tasks), timeout=self.batch_timeout)
            except asyncio.TimeoutError as exc:
                logger.error("batch_verification_timed_out", products=len(products), timeout=self.batch_timeout)
                raise TimeoutError(
                    f"Verification of {len(products)} products exceeded {self.batch_timeout}s"
                ) from exc

            verified = sum(1 for i in items if i.verification.is_valid)
            logger.info(
                "batch_verification_completed",
                products=len(items),
                verified=verified,
                unverified=len(items) - verified,
            )
        return list(items)

    async def verify_products(self, products: Sequence[ProductRecord]) -> BatchVerificationResult:
        items = await self.verify_batch(products)
        return BatchVerificationResult(items=items, summary=BatchVerificationResult.summarize(items))

    async def verify_page(
        self,
        filter: Optional[ProductFilter] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> BatchVerificationResult:
        records, total = self.repo.resolve_products(filter or ProductFilter(), page, page_size)
        items = await self.verify_batch(records)
        return BatchVerificationResult(
            items=items,
            pagination=Pagination.build(page=page, page_size=page_size, total_count=total),
            summary=BatchVerificationResult.summarize(items),
        )

    # ── per product ──────────────────────────────────────────────────

    async def _verify_one(
        self,
        product: ProductRecord,
        refs: _References,
        titles: Dict[ProductCategory, List[str]],
        semaphore: asyncio.Semaphore,
    ) -> ProductVerification:
        detection = None
        if self.detector is not None and product.front_image:
            detection = await self._detect(product.front_image, semaphore)

        brand = refs.brand_for(product)
        unit = refs.unit_for(product)
        classification = refs.classification_for(product)

        result = self.engine.verify(
            product,
            brand=brand,
            unit=unit,
            classification=classification,
            detected_concepts=detection,
            title_suggestions=titles,
        )
        return ProductVerification(
            product=product,
            brand=brand,
            unit=unit,
            classification=classification,
            verification=result,
        )

    async def _detect(self, image_ref: str, semaphore: asyncio.Semaphore) -> ConceptDetection:
        async with semaphore:
            try:
                return await asyncio.wait_for(
                    self.detector.detect_visual_concepts(image_ref),
                    timeout=self.recognition_timeout,
                )
            except asyncio.TimeoutError:
                logger.warning("recognition_call_timed_out", image=image_ref, timeout=self.recognition_timeout)
                return ConceptDetection.unavailable(f"Timed out after {self.recognition_timeout}s")
            except Exception as exc:
                logger.warning("recognition_call_failed", image=image_ref, error=str(exc))
                return ConceptDetection.unavailable(f"{type(exc).__name__}: {exc}")

    # ── batch lookups ────────────────────────────────────────────────

    def _resolve_references(self, products: Sequence[ProductRecord]) -> _References:
        brand_names = {p.brand_name for p in products if p.brand_name}
        unit_codes = {p.unit_code for p in products if p.unit_code}
        class_keys = set()
        for p in products:
            if p.classification_code:
                class_keys.add(p.classification_code)
                code = ClassificationDescriptor.parse(p.classification_code).code
                if code:
                    class_keys.add(code)

        brands = self._lookup("brands", self.repo.resolve_brands, brand_names)
        units = self._lookup("units", self.repo.resolve_units, unit_codes)
        classifications = self._lookup("classifications", self.repo.resolve_classifications, class_keys)

        return _References(
            brands={b.name.lower(): b for b in brands},
            units={u.code.lower(): u for u in units},
            classifications={c.code: c for c in classifications},
        )

    def _prefetch_titles(self) -> Dict[ProductCategory, List[str]]:
        titles: Dict[ProductCategory, List[str]] = {}
        for category in PREFETCH_CATEGORIES:
            found = self._lookup(
                f"titles:{category.value}",
                self.repo.find_classification_titles,
                FAMILY_TERMS[category],
            )
            if found:
                titles[category] = found
        return titles

    @staticmethod
    def _lookup(name: str, fn: Callable[..., List[Any]], keys) -> List[Any]:
        """Run a repository lookup; a failing store counts as no matches."""
        if not keys:
            return []
        try:
            return fn(sorted(keys)) if isinstance(keys, set) else fn(keys)
        except Exception as exc:
            logger.warning("reference_lookup_failed", lookup=name, error=str(exc))
            return []
