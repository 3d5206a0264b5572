"""Service-layer orchestration modules."""

from catalog_verifier.services.verification_service import VerificationService

__all__ = [
    "VerificationService",
]
