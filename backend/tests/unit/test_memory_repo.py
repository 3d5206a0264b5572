"""Unit tests for InMemoryCatalogRepository."""

import json

import pytest

from catalog_verifier.repositories.memory_repo import InMemoryCatalogRepository
from catalog_verifier.schemas.pipeline import ProductFilter
from catalog_verifier.schemas.product import BrandRef, ProductRecord


class TestLoading:
    def test_store_column_names_are_accepted(self, catalog_repo):
        product = catalog_repo.get_product(1)

        assert product.name == "PROMAX SP 0W16"
        assert product.brand_name == "SAMA OIL"
        assert product.classification_code == "20002871-Type of Engine Oil Target"
        assert product.unit_code == "LTR"

    def test_models_and_dicts_mix(self):
        repo = InMemoryCatalogRepository(
            products=[ProductRecord(id=1, name="A"), {"id": 2, "name": "B"}],
            brands=[BrandRef(name="X")],
        )

        assert [p.name for p in repo.products] == ["A", "B"]
        assert repo.units == []

    def test_empty_document(self):
        repo = InMemoryCatalogRepository.from_dict({})

        assert repo.resolve_products(ProductFilter()) == ([], 0)

    def test_from_file(self, tmp_path, catalog_data):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(catalog_data), encoding="utf-8")

        repo = InMemoryCatalogRepository.from_file(path)

        assert len(repo.products) == 4
        assert len(repo.classifications) == 3

    def test_from_file_rejects_non_object(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        with pytest.raises(ValueError, match="JSON object"):
            InMemoryCatalogRepository.from_file(path)

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            InMemoryCatalogRepository.from_file(tmp_path / "nope.json")


class TestResolveProducts:
    def test_deleted_products_excluded(self, catalog_repo):
        products, total = catalog_repo.resolve_products(ProductFilter())

        assert [p.id for p in products] == [1, 2, 3]
        assert total == 3

    def test_include_deleted(self, catalog_repo):
        products, total = catalog_repo.resolve_products(ProductFilter(include_deleted=True))

        assert total == 4
        assert products[-1].deleted_at is not None

    def test_brand_filter_ignores_case(self, catalog_repo):
        products, total = catalog_repo.resolve_products(ProductFilter(brand_name="sunny farms"))

        assert [p.id for p in products] == [3]
        assert total == 1

    @pytest.mark.parametrize("search,expected", [
        ("juice", [3]),
        ("20002871", [1, 2]),
        ("CARTON", [2]),
        ("nothing matches", []),
    ])
    def test_search(self, catalog_repo, search, expected):
        products, _ = catalog_repo.resolve_products(ProductFilter(search=search))

        assert [p.id for p in products] == expected

    def test_search_covers_localized_names(self):
        repo = InMemoryCatalogRepository(products=[
            {"id": 1, "name": "Engine Oil", "localized_names": {"ar": "زيت محرك"}},
        ])

        products, _ = repo.resolve_products(ProductFilter(search="زيت"))

        assert [p.id for p in products] == [1]

    def test_paging(self, catalog_repo):
        first, total = catalog_repo.resolve_products(ProductFilter(), page=1, page_size=2)
        second, _ = catalog_repo.resolve_products(ProductFilter(), page=2, page_size=2)
        third, _ = catalog_repo.resolve_products(ProductFilter(), page=3, page_size=2)

        assert [p.id for p in first] == [1, 2]
        assert [p.id for p in second] == [3]
        assert third == []
        assert total == 3

    @pytest.mark.parametrize("product_id", [1, "1"])
    def test_get_product(self, catalog_repo, product_id):
        assert catalog_repo.get_product(product_id).name == "PROMAX SP 0W16"

    def test_get_product_returns_deleted(self, catalog_repo):
        assert catalog_repo.get_product(4).deleted_at is not None

    def test_get_unknown_product(self, catalog_repo):
        assert catalog_repo.get_product(99) is None


class TestReferenceTables:
    def test_brands_match_ignoring_case(self, catalog_repo):
        brands = catalog_repo.resolve_brands(["sama oil", "Unknown"])

        assert [b.name for b in brands] == ["SAMA OIL"]

    def test_units_match_ignoring_case(self, catalog_repo):
        units = catalog_repo.resolve_units(["ML", "ltr", ""])

        assert sorted(u.code for u in units) == ["LTR", "ml"]

    def test_classifications_by_code(self, catalog_repo):
        refs = catalog_repo.resolve_classifications(["20002871", " 10000227 ", "99999999"])

        assert [c.title for c in refs] == ["Engine Oil/Engine Lubricants", "Fruit Juice Drinks"]

    def test_numeric_codes_load_as_strings(self):
        repo = InMemoryCatalogRepository.from_dict({
            "units": [{"code": 100, "name": "Hundred pack"}],
            "classifications": [{"code": 20002871, "title": "Engine Oil"}],
        })

        assert repo.classifications[0].code == "20002871"
        assert [c.title for c in repo.resolve_classifications(["20002871"])] == ["Engine Oil"]
        assert [u.name for u in repo.resolve_units(["100"])] == ["Hundred pack"]

    def test_empty_keys(self, catalog_repo):
        assert catalog_repo.resolve_brands([]) == []
        assert catalog_repo.resolve_units([]) == []
        assert catalog_repo.resolve_classifications([]) == []


class TestFindClassificationTitles:
    def test_terms_match_word_starts(self, catalog_repo):
        titles = catalog_repo.find_classification_titles(["oil"])

        assert titles == ["Engine Oil/Engine Lubricants", "Motor Oils"]

    def test_limit(self, catalog_repo):
        assert catalog_repo.find_classification_titles(["oil", "drink"], limit=1) == [
            "Engine Oil/Engine Lubricants",
        ]

    def test_titles_are_distinct(self):
        repo = InMemoryCatalogRepository(classifications=[
            {"code": "1", "title": "Motor Oils"},
            {"code": "2", "title": "Motor Oils"},
            {"code": "3"},
        ])

        assert repo.find_classification_titles(["motor oil"]) == ["Motor Oils"]

    def test_no_match(self, catalog_repo):
        assert catalog_repo.find_classification_titles(["laptop"]) == []
