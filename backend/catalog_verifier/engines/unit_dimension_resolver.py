"""Resolve the measurement dimension of a unit of measure.

Unit codes in the catalog are free text ("KG", "Ltr", "pcs", "Square
Meter"), so the dimension is inferred from the code and the unit's display
name with ordered pattern sets.
"""

import logging
from typing import Optional

from catalog_verifier.schemas.descriptors import Dimension, UnitDescriptor
from catalog_verifier.schemas.product import UnitRef
from catalog_verifier.utils.text import tokenize

logger = logging.getLogger(__name__)


class UnitDimensionResolver:
    """Maps a unit (code, name) pair to a :class:`Dimension`.

    Pattern sets are checked in order and the first set with a match wins.
    Rate comes first so "liters per hour" is a rate rather than a volume;
    OZ is listed under volume and weight and resolves to volume by order.
    """

    PATTERNS: dict[Dimension, tuple[str, ...]] = {
        Dimension.RATE: (
            "per", "perhour", "persecond", "perminute", "ph", "ps", "pm",
            "hz", "rpm", "sps", "mps", "fps", "m60",
        ),
        Dimension.VOLUME: (
            "l", "ml", "liter", "litre", "gallon", "oz", "fluid", "ltr",
            "fl", "cl", "dl", "pt", "qt", "gal",
        ),
        Dimension.WEIGHT: (
            "kg", "g", "mg", "lb", "pound", "ton", "gram", "kilo", "oz",
            "ounce", "t",
        ),
        Dimension.QUANTITY: (
            "pc", "piece", "unit", "each", "item", "count", "ea", "pcs",
            "pair", "set", "pack", "pkg",
        ),
        Dimension.LENGTH: (
            "m", "cm", "mm", "ft", "inch", "yard", "metre", "meter", "in",
            "yd", "km", "mi", "mile",
        ),
        Dimension.AREA: (
            "m2", "sqm", "sq m", "square meter", "ha", "acre", "sqft",
            "sq ft", "square foot",
        ),
    }

    # "sq ft" and "square meter" also contain length words
    LENGTH_BLOCKED_BY = (Dimension.RATE, Dimension.AREA)

    CODE_DIMENSIONS: dict[str, Dimension] = {
        "kg": Dimension.WEIGHT, "g": Dimension.WEIGHT, "mg": Dimension.WEIGHT,
        "lb": Dimension.WEIGHT, "oz": Dimension.WEIGHT, "ton": Dimension.WEIGHT,
        "l": Dimension.VOLUME, "ml": Dimension.VOLUME, "ltr": Dimension.VOLUME,
        "cl": Dimension.VOLUME, "gal": Dimension.VOLUME, "floz": Dimension.VOLUME,
        "fl oz": Dimension.VOLUME,
        "pc": Dimension.QUANTITY, "pcs": Dimension.QUANTITY, "ea": Dimension.QUANTITY,
        "unit": Dimension.QUANTITY, "set": Dimension.QUANTITY, "pair": Dimension.QUANTITY,
        "each": Dimension.QUANTITY,
        "m": Dimension.LENGTH, "cm": Dimension.LENGTH, "mm": Dimension.LENGTH,
        "ft": Dimension.LENGTH, "in": Dimension.LENGTH, "yd": Dimension.LENGTH,
        "m2": Dimension.AREA, "sqm": Dimension.AREA, "sqft": Dimension.AREA,
        "acre": Dimension.AREA, "ha": Dimension.AREA,
    }

    UNIT_NAMES: dict[str, str] = {
        "KG": "Kilogram", "G": "Gram", "MG": "Milligram", "LB": "Pound",
        "OZ": "Ounce", "TON": "Ton",
        "L": "Liter", "LTR": "Liter", "ML": "Milliliter", "CL": "Centiliter",
        "GAL": "Gallon", "FLOZ": "Fluid Ounce", "FL OZ": "Fluid Ounce",
        "PC": "Piece", "PCS": "Pieces", "EA": "Each", "UNIT": "Unit",
        "SET": "Set", "PAIR": "Pair", "EACH": "Each",
        "M": "Meter", "CM": "Centimeter", "MM": "Millimeter", "FT": "Foot",
        "IN": "Inch", "YD": "Yard",
        "M2": "Square Meter", "SQM": "Square Meter", "SQFT": "Square Foot",
        "ACRE": "Acre", "HA": "Hectare",
    }

    # ── main entry points ────────────────────────────────────────────

    def resolve(self, code: Optional[str], name: Optional[str] = None) -> Dimension:
        """Infer the dimension from a unit code and display name.

        Examples:
            >>> UnitDimensionResolver().resolve("LTR", "Liter")
            <Dimension.VOLUME: 'volume'>
            >>> UnitDimensionResolver().resolve("M2", "Square Meter")
            <Dimension.AREA: 'area'>
            >>> UnitDimensionResolver().resolve("LPH", "Liters per hour")
            <Dimension.RATE: 'rate'>
        """
        code = (code or "").strip().lower()
        name = (name or "").strip().lower()
        if not code and not name:
            return Dimension.UNKNOWN

        raw_tokens = tokenize(code) + tokenize(name)
        singular = [self._singular(t) for t in raw_tokens]
        tokens = raw_tokens + [t for t in singular if t not in raw_tokens]
        phrase = f" {' '.join(singular)} "

        hits = {
            dim
            for dim, patterns in self.PATTERNS.items()
            if any(self._matches(p, tokens, phrase) for p in patterns)
        }

        for dim in self.PATTERNS:
            if dim not in hits:
                continue
            if dim == Dimension.LENGTH and hits.intersection(self.LENGTH_BLOCKED_BY):
                continue
            return dim

        if code in self.CODE_DIMENSIONS:
            return self.CODE_DIMENSIONS[code]

        logger.debug("Unresolved unit dimension for code=%r name=%r", code, name)
        return Dimension.UNKNOWN

    def describe(self, code: str, unit_ref: Optional[UnitRef] = None) -> UnitDescriptor:
        """Build a :class:`UnitDescriptor` for a product's unit code.

        With a reference record the dimension comes from its code and name.
        Without one, known codes use the built-in table and anything else
        falls back to :meth:`resolve` on the code alone.
        """
        upper = code.strip().upper()

        if unit_ref is not None and unit_ref.name:
            return UnitDescriptor(
                code=upper,
                name=unit_ref.name,
                dimension=self.resolve(upper, unit_ref.name),
            )

        dimension = self.CODE_DIMENSIONS.get(upper.lower()) or self.resolve(upper)
        return UnitDescriptor(code=upper, name=self.UNIT_NAMES.get(upper), dimension=dimension)

    # ── matching helpers ─────────────────────────────────────────────

    @staticmethod
    def _singular(token: str) -> str:
        if len(token) > 3 and token.endswith("s"):
            return token[:-1]
        return token

    @staticmethod
    def _matches(pattern: str, tokens: list[str], phrase: str) -> bool:
        if " " in pattern:
            return f" {pattern} " in phrase
        if len(pattern) < 4:
            return pattern in tokens
        # "kilogram" → gram, "milliliter" → liter
        return any(t == pattern or t.endswith(pattern) for t in tokens)
