"""In-memory catalog backed by plain dicts or a JSON file.

The JSON document has four optional arrays::

    {
      "products": [{"id": 1, "productnameenglish": "...", "BrandName": "...", "gpc": "...", ...}],
      "brands": [{"name": "SAMA OIL", "category": "Automotive"}],
      "units": [{"code": "LTR", "name": "Liter"}],
      "classifications": [{"code": "20002871", "title": "Engine Oil/Engine Lubricants"}]
    }
"""

import json
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple, Union

from catalog_verifier.logging_config import get_logger
from catalog_verifier.repositories.base import ReferenceRepository
from catalog_verifier.schemas.pipeline import ProductFilter
from catalog_verifier.schemas.product import BrandRef, ClassificationRef, ProductRecord, UnitRef
from catalog_verifier.utils.text import contains_term

logger = get_logger(__name__)


class InMemoryCatalogRepository(ReferenceRepository):
    def __init__(
        self,
        products: Optional[Iterable[Union[ProductRecord, dict]]] = None,
        brands: Optional[Iterable[Union[BrandRef, dict]]] = None,
        units: Optional[Iterable[Union[UnitRef, dict]]] = None,
        classifications: Optional[Iterable[Union[ClassificationRef, dict]]] = None,
    ):
        self.products = [self._load(ProductRecord, p) for p in products or []]
        self.brands = [self._load(BrandRef, b) for b in brands or []]
        self.units = [self._load(UnitRef, u) for u in units or []]
        self.classifications = [self._load(ClassificationRef, c) for c in classifications or []]

    @staticmethod
    def _load(model, item):
        return item if isinstance(item, model) else model.model_validate(item)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InMemoryCatalogRepository":
        return cls(
            products=data.get("products"),
            brands=data.get("brands"),
            units=data.get("units"),
            classifications=data.get("classifications"),
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "InMemoryCatalogRepository":
        """Load a catalog JSON file; raises FileNotFoundError / ValueError on bad input."""
        path = Path(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Catalog file {path} must contain a JSON object")
        repo = cls.from_dict(data)
        logger.info(
            "catalog_loaded",
            path=str(path),
            products=len(repo.products),
            brands=len(repo.brands),
            units=len(repo.units),
            classifications=len(repo.classifications),
        )
        return repo

    # ── products ─────────────────────────────────────────────────────

    def resolve_products(
        self, filter: ProductFilter, page: int = 1, page_size: int = 10
    ) -> Tuple[List[ProductRecord], int]:
        matches = [p for p in self.products if self._matches(p, filter)]
        start = (page - 1) * page_size
        return matches[start:start + page_size], len(matches)

    @staticmethod
    def _matches(product: ProductRecord, filter: ProductFilter) -> bool:
        if product.deleted_at is not None and not filter.include_deleted:
            return False
        if filter.brand_name and (product.brand_name or "").lower() != filter.brand_name.lower():
            return False
        if filter.search:
            needle = filter.search.lower()
            haystacks = [product.name, product.classification_code, *product.localized_names.values()]
            if not any(h and needle in h.lower() for h in haystacks):
                return False
        return True

    def get_product(self, product_id: Union[int, str]) -> Optional[ProductRecord]:
        return next((p for p in self.products if str(p.id) == str(product_id)), None)

    # ── reference tables ─────────────────────────────────────────────

    def resolve_brands(self, names: Iterable[str]) -> List[BrandRef]:
        wanted = {n.lower() for n in names if n}
        return [b for b in self.brands if b.name.lower() in wanted]

    def resolve_units(self, codes: Iterable[str]) -> List[UnitRef]:
        wanted = {c.lower() for c in codes if c}
        return [u for u in self.units if u.code.lower() in wanted]

    def resolve_classifications(self, codes: Iterable[str]) -> List[ClassificationRef]:
        wanted = {c.strip() for c in codes if c}
        return [c for c in self.classifications if c.code in wanted]

    def find_classification_titles(self, terms: Iterable[str], limit: int = 5) -> List[str]:
        terms = [t.lower() for t in terms if t]
        titles: list[str] = []
        for ref in self.classifications:
            if not ref.title or ref.title in titles:
                continue
            if any(contains_term(ref.title.lower(), t) for t in terms):
                titles.append(ref.title)
                if len(titles) >= limit:
                    break
        return titles
