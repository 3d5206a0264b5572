"""Unit tests for barcode format validation."""

import pytest

from catalog_verifier.engines.barcode_validator import BarcodeValidator


@pytest.mark.parametrize("barcode", ["12345670", "036000291452", "6281234567890", "10012345678902"])
def test_standard_lengths_pass(barcode):
    assert BarcodeValidator().validate(barcode) is None


@pytest.mark.parametrize("barcode", [None, "", "   "])
def test_absent_barcode_is_not_a_problem(barcode):
    assert BarcodeValidator().validate(barcode) is None


@pytest.mark.parametrize("barcode", ["62812-3456", "ABC1234567890", "６２８１２３４５６７８９０"])
def test_non_numeric(barcode):
    assert BarcodeValidator().validate(barcode) == "Barcode contains non-numeric characters"


@pytest.mark.parametrize("barcode,length", [("12345", 5), ("1234567890", 10), ("123456789012345", 15)])
def test_bad_length(barcode, length):
    assert BarcodeValidator().validate(barcode) == f"Invalid barcode length ({length})"
