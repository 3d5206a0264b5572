"""Tests for VerificationFacade, the single entry point used by the CLI and
library callers.

The facade is tested with the in-memory catalog and a fake concept detector
so no request ever reaches the recognition service.
"""

import json

import pytest

from catalog_verifier.config import Settings
from catalog_verifier.facade import VerificationFacade
from catalog_verifier.schemas.image import ConceptDetection
from catalog_verifier.schemas.pipeline import ProductFilter
from catalog_verifier.schemas.verification import Rule, VerificationStatus


@pytest.fixture()
def facade(settings, catalog_repo):
    with VerificationFacade(settings=settings, repository=catalog_repo) as f:
        yield f


# ── Single product ────────────────────────────────────────────────────────


class TestVerify:
    def test_verify_dict_with_store_columns(self, facade, engine_oil_refs):
        result = facade.verify(
            {
                "productnameenglish": "PROMAX SP 0W16",
                "BrandName": "SAMA OIL",
                "gpc": "20002871-Type of Engine Oil Target",
                "unit": "LTR",
                "front_image": "uploads/front-oil-bottle.jpg",
            },
            **engine_oil_refs,
        )

        assert result.status == VerificationStatus.VERIFIED
        assert result.verification_score == 100.0

    def test_verify_model(self, facade, engine_oil, engine_oil_refs):
        product = engine_oil.model_copy(update={"unit_code": "KG"})
        refs = dict(engine_oil_refs, unit=None)

        result = facade.verify(product, **refs)

        assert result.is_valid is False
        assert result.issues_for(Rule.CLASSIFICATION_UNIT)

    def test_verify_passes_detected_concepts(self, facade, engine_oil, engine_oil_refs):
        result = facade.verify(
            engine_oil,
            detected_concepts=ConceptDetection.unavailable("offline"),
            **engine_oil_refs,
        )

        assert result.confidence_level == 80.0

    def test_verify_needs_no_catalog(self):
        facade = VerificationFacade(settings=Settings(catalog_path="/does/not/exist.json"))

        result = facade.verify({"name": "Mystery"})

        assert result.status == VerificationStatus.UNVERIFIED


class TestVerifyProductId:
    def test_known_product(self, facade):
        item = facade.verify_product_id(2)

        assert item.product.id == 2
        assert item.unit.code == "PC"
        assert item.verification.status == VerificationStatus.UNVERIFIED

    def test_string_id(self, facade):
        assert facade.verify_product_id("1").verification.status == VerificationStatus.VERIFIED

    def test_unknown_product(self, facade):
        assert facade.verify_product_id(99) is None


# ── Batches ───────────────────────────────────────────────────────────────


class TestBatches:
    def test_verify_page_uses_default_page_size(self, catalog_repo):
        facade = VerificationFacade(
            settings=Settings(recognition_api_key="", default_page_size=2),
            repository=catalog_repo,
        )

        result = facade.verify_page()

        assert [i.product.id for i in result.items] == [1, 2]
        assert result.pagination.page_size == 2
        assert result.pagination.total_pages == 2

    def test_verify_page_with_filter(self, facade):
        result = facade.verify_page(ProductFilter(search="juice"), page=1, page_size=10)

        assert [i.product.id for i in result.items] == [3]
        assert result.summary["unverified"] == 1

    def test_verify_products_with_detector(self, settings, catalog_repo, make_detector, bottle_concepts):
        detector = make_detector(concepts=bottle_concepts)
        facade = VerificationFacade(settings=settings, repository=catalog_repo, concept_detector=detector)

        result = facade.verify_products([catalog_repo.get_product(1), {"id": "new", "name": "Loose"}])

        assert detector.calls == ["uploads/front-oil-bottle.jpg"]
        assert [i.product.id for i in result.items] == [1, "new"]
        assert result.items[0].verification.image_analysis.concept_score.is_valid is True
        assert result.pagination is None

    def test_each_call_runs_its_own_event_loop(self, facade):
        first = facade.verify_page(page=1, page_size=1)
        second = facade.verify_page(page=2, page_size=1)

        assert first.items[0].product.id == 1
        assert second.items[0].product.id == 2


# ── Lifecycle ─────────────────────────────────────────────────────────────


class TestLifecycle:
    def test_close_keeps_injected_repository(self, settings, catalog_repo):
        facade = VerificationFacade(settings=settings, repository=catalog_repo)

        facade.close()

        assert facade.repository is catalog_repo

    def test_close_drops_loaded_catalog(self, tmp_path, catalog_data):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(catalog_data), encoding="utf-8")
        facade = VerificationFacade(settings=Settings(recognition_api_key="", catalog_path=str(path)))

        loaded = facade.repository
        assert facade.repository is loaded

        facade.close()

        assert facade.repository is not loaded
        assert len(facade.repository.products) == 4

    def test_missing_catalog_surfaces_on_use(self, tmp_path):
        facade = VerificationFacade(settings=Settings(catalog_path=str(tmp_path / "missing.json")))

        with pytest.raises(FileNotFoundError):
            facade.verify_product_id(1)
