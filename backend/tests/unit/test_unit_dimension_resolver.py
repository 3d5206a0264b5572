"""Unit tests for UnitDimensionResolver."""

import pytest

from catalog_verifier.engines.unit_dimension_resolver import UnitDimensionResolver
from catalog_verifier.schemas.descriptors import Dimension
from catalog_verifier.schemas.product import UnitRef


@pytest.fixture()
def resolver() -> UnitDimensionResolver:
    return UnitDimensionResolver()


class TestResolve:
    @pytest.mark.parametrize(
        "code,name,expected",
        [
            ("KG", None, Dimension.WEIGHT),
            (None, "Kilogram", Dimension.WEIGHT),
            ("", "kilograms", Dimension.WEIGHT),
            ("L", None, Dimension.VOLUME),
            (None, "Liter", Dimension.VOLUME),
            ("ML", "Milliliter", Dimension.VOLUME),
            ("LTR", "Liter", Dimension.VOLUME),
            ("PC", None, Dimension.QUANTITY),
            (None, "Piece", Dimension.QUANTITY),
            ("pcs", None, Dimension.QUANTITY),
            ("M", None, Dimension.LENGTH),
            (None, "meter", Dimension.LENGTH),
            ("M2", "Square Meter", Dimension.AREA),
            ("SQM", None, Dimension.AREA),
            ("LPH", "Liters per hour", Dimension.RATE),
        ],
    )
    def test_known_units(self, resolver, code, name, expected):
        assert resolver.resolve(code, name) == expected

    def test_ounce_resolves_to_volume_by_order(self, resolver):
        """OZ is both a volume and a weight pattern; volume is checked first."""
        assert resolver.resolve("OZ") == Dimension.VOLUME

    def test_area_blocks_length(self, resolver):
        """'square meter' contains a length word but is an area."""
        assert resolver.resolve(None, "square meter") == Dimension.AREA

    @pytest.mark.parametrize("code,name", [(None, None), ("", "  "), ("XYZ", None), ("BOX", "Box")])
    def test_unknown(self, resolver, code, name):
        assert resolver.resolve(code, name) == Dimension.UNKNOWN

    def test_no_hidden_state(self, resolver):
        first = [resolver.resolve(c) for c in ("KG", "LTR", "PC", "XYZ")]
        second = [resolver.resolve(c) for c in ("KG", "LTR", "PC", "XYZ")]
        assert first == second


class TestDescribe:
    def test_reference_row_drives_dimension(self, resolver):
        desc = resolver.describe("pc", UnitRef(code="PC", name="Piece"))

        assert desc.code == "PC"
        assert desc.name == "Piece"
        assert desc.dimension == Dimension.QUANTITY

    def test_builtin_table_without_reference(self, resolver):
        desc = resolver.describe("ltr")

        assert desc.code == "LTR"
        assert desc.name == "Liter"
        assert desc.dimension == Dimension.VOLUME

    def test_reference_without_name_uses_table(self, resolver):
        desc = resolver.describe("KG", UnitRef(code="KG"))

        assert desc.dimension == Dimension.WEIGHT
        assert desc.name == "Kilogram"

    def test_unrecognised_code(self, resolver):
        desc = resolver.describe("BOX")

        assert desc.dimension == Dimension.UNKNOWN
        assert desc.name is None
