"""Dependency Injection Container.

Centralized definition of all verifier dependencies using dependency-injector.

Usage::

    from catalog_verifier.container import AppContainer

    container = AppContainer()
    engine = container.verification_engine()
    service = container.verification_service()

    # Tests swap collaborators without touching the wiring
    container.repository.override(providers.Object(fake_repo))
"""

from typing import Optional

from dependency_injector import containers, providers

from catalog_verifier.clients.recognition_client import VisualRecognitionClient
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
from catalog_verifier.services.verification_service import VerificationService


def build_recognition_client(settings: Settings) -> Optional[VisualRecognitionClient]:
    """Recognition client, or None while no API key is configured."""
    if not settings.recognition_enabled:
        return None
    return VisualRecognitionClient(
        api_key=settings.recognition_api_key,
        base_url=settings.recognition_base_url,
        model_id=settings.recognition_model_id,
        image_base_url=settings.image_base_url,
        min_concept_confidence=settings.recognition_min_concept_confidence,
        timeout=settings.recognition_timeout,
        retry_max_attempts=settings.retry_max_attempts,
    )


class AppContainer(containers.DeclarativeContainer):
    """Application Dependency Injection Container.

    - Configuration (Settings)
    - Repository (reference catalog)
    - Clients (visual recognition)
    - Engines (verification checks)
    - Services (batch orchestration)
    """

    # ══════════════════════════════════════════════════════════════════
    # CONFIGURATION
    # ══════════════════════════════════════════════════════════════════

    settings = providers.Singleton(Settings)

    # ══════════════════════════════════════════════════════════════════
    # REPOSITORY (Data Access Layer)
    # ══════════════════════════════════════════════════════════════════

    repository = providers.Singleton(
        InMemoryCatalogRepository.from_file,
        path=settings.provided.catalog_path,
    )

    # ══════════════════════════════════════════════════════════════════
    # EXTERNAL CLIENTS (Infrastructure)
    # ══════════════════════════════════════════════════════════════════

    recognition_client = providers.Singleton(
        build_recognition_client,
        settings=settings,
    )

    # ══════════════════════════════════════════════════════════════════
    # ENGINES (Business Logic Layer)
    # ══════════════════════════════════════════════════════════════════

    unit_resolver = providers.Factory(UnitDimensionResolver)

    category_classifier = providers.Factory(CategoryClassifier)

    compatibility_checker = providers.Factory(CompatibilityChecker)

    concept_matcher = providers.Factory(
        ConceptMatcher,
        acceptance_threshold=settings.provided.image_acceptance_threshold,
    )

    image_analyzer = providers.Factory(
        ImageConsistencyAnalyzer,
        concept_matcher=concept_matcher,
        preferred_formats=settings.provided.preferred_image_formats,
    )

    overlap_checker = providers.Factory(CategoryOverlapChecker)

    barcode_validator = providers.Factory(BarcodeValidator)

    verification_engine = providers.Factory(
        VerificationEngine,
        resolver=unit_resolver,
        classifier=category_classifier,
        checker=compatibility_checker,
        image_analyzer=image_analyzer,
        overlap_checker=overlap_checker,
        barcode_validator=barcode_validator,
        settings=settings,
    )

    # ══════════════════════════════════════════════════════════════════
    # SERVICES (Orchestration Layer)
    # ══════════════════════════════════════════════════════════════════

    verification_service = providers.Factory(
        VerificationService,
        verification_engine=verification_engine,
        repository=repository,
        concept_detector=recognition_client,
        max_concurrency=settings.provided.recognition_max_concurrency,
        recognition_timeout=settings.provided.recognition_timeout,
        batch_timeout=settings.provided.batch_timeout,
    )
