"""Barcode format check (EAN-8, UPC-A, EAN-13, GTIN-14)."""

from typing import Optional

VALID_LENGTHS = (8, 12, 13, 14)

BARCODE_SUGGESTION = (
    "Use standard barcode formats: EAN-13 (13 digits), UPC-A (12 digits), "
    "or GTIN-14 (14 digits)."
)


class BarcodeValidator:
    def validate(self, barcode: Optional[str]) -> Optional[str]:
        """Return a problem description, or ``None`` when the barcode is fine or absent.

        Examples:
            >>> BarcodeValidator().validate("6281234567890") is None
            True
            >>> BarcodeValidator().validate("62812-3456")
            'Barcode contains non-numeric characters'
            >>> BarcodeValidator().validate("12345")
            'Invalid barcode length (5)'
        """
        if barcode is None:
            return None
        value = barcode.strip()
        if not value:
            return None
        if not (value.isascii() and value.isdigit()):
            return "Barcode contains non-numeric characters"
        if len(value) not in VALID_LENGTHS:
            return f"Invalid barcode length ({len(value)})"
        return None
