"""Schemas for batch verification runs.

Provides paging input validation and the batch response shape.
"""

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from catalog_verifier.schemas.product import BrandRef, ClassificationRef, ProductRecord, UnitRef
from catalog_verifier.schemas.verification import VerificationResult, VerificationStatus


class ProductFilter(BaseModel):
    """Selection criteria for a page of products."""

    brand_name: Optional[str] = Field(
        default=None,
        description="Only products of this brand (case-insensitive).",
    )
    search: Optional[str] = Field(
        default=None,
        description="Substring matched against product names and classification codes.",
        max_length=200,
    )
    include_deleted: bool = Field(
        default=False,
        description="Include soft-deleted products.",
    )


class PageRequest(BaseModel):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=500)


class Pagination(BaseModel):
    page: int
    page_size: int
    total_count: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def build(cls, page: int, page_size: int, total_count: int) -> "Pagination":
        """Paging metadata for ``total_count`` items.

        Examples:
            >>> Pagination.build(page=2, page_size=10, total_count=25).total_pages
            3
        """
        total_pages = math.ceil(total_count / page_size) if page_size else 0
        return cls(
            page=page,
            page_size=page_size,
            total_count=total_count,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1,
        )


class ProductVerification(BaseModel):
    """One product with its resolved references and verdict."""

    product: ProductRecord
    brand: Optional[BrandRef] = None
    unit: Optional[UnitRef] = None
    classification: Optional[ClassificationRef] = None
    verification: VerificationResult


class BatchVerificationResult(BaseModel):
    items: List[ProductVerification] = []
    pagination: Optional[Pagination] = None
    summary: Dict[str, Any] = {}

    @staticmethod
    def summarize(items: List[ProductVerification]) -> Dict[str, Any]:
        verified = sum(
            1 for i in items if i.verification.status == VerificationStatus.VERIFIED
        )
        scores = [i.verification.verification_score for i in items]
        return {
            "total": len(items),
            "verified": verified,
            "unverified": len(items) - verified,
            "average_score": round(sum(scores) / len(scores), 1) if scores else 0.0,
        }
