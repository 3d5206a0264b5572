"""Data access repositories."""

from catalog_verifier.repositories.base import ReferenceRepository
from catalog_verifier.repositories.memory_repo import InMemoryCatalogRepository

__all__ = [
    "ReferenceRepository",
    "InMemoryCatalogRepository",
]
