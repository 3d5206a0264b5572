"""Read-only access to products and the reference tables they point at."""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple, Union

from catalog_verifier.schemas.pipeline import ProductFilter
from catalog_verifier.schemas.product import BrandRef, ClassificationRef, ProductRecord, UnitRef


class ReferenceRepository(ABC):
    """Bulk lookups keyed by natural identifier.

    Lookups tolerate partial and empty matches: a key with no row is simply
    absent from the result.
    """

    # ── products ─────────────────────────────────────────────────────

    @abstractmethod
    def resolve_products(
        self, filter: ProductFilter, page: int = 1, page_size: int = 10
    ) -> Tuple[List[ProductRecord], int]:
        """One page of products matching ``filter`` and the total match count.

        Soft-deleted products are excluded unless ``filter.include_deleted``.
        """

    @abstractmethod
    def get_product(self, product_id: Union[int, str]) -> Optional[ProductRecord]:
        ...

    # ── reference tables ─────────────────────────────────────────────

    @abstractmethod
    def resolve_brands(self, names: Iterable[str]) -> List[BrandRef]:
        ...

    @abstractmethod
    def resolve_units(self, codes: Iterable[str]) -> List[UnitRef]:
        """Units whose code matches one of ``codes``, case-insensitively."""

    @abstractmethod
    def resolve_classifications(self, codes: Iterable[str]) -> List[ClassificationRef]:
        ...

    @abstractmethod
    def find_classification_titles(self, terms: Iterable[str], limit: int = 5) -> List[str]:
        """Distinct classification titles containing any of ``terms``."""
