from decimal import Decimal

import pytest

from ledger.core.exceptions import ValidationError
from ledger.core.money import MAX_MINOR, from_minor, positive_minor, to_decimal, to_minor


def test_to_minor_scales_to_paise() -> None:
    assert to_minor("1234.56") == 123456
    assert to_minor(Decimal("10")) == 1000
    assert to_minor(7) == 700


def test_float_goes_through_str() -> None:
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_minor(0.1) == 10


def test_extra_precision_rejected() -> None:
    with pytest.raises(ValidationError) as exc_info:
        to_minor("10.005")
    assert exc_info.value.error_code == "VAL_002"


def test_trailing_zeros_are_not_extra_precision() -> None:
    assert to_minor("10.500") == 1050


@pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", True])
def test_not_a_number(value) -> None:
    with pytest.raises(ValidationError) as exc_info:
        to_minor(value)
    assert exc_info.value.error_code == "VAL_001"


def test_custom_minor_unit() -> None:
    assert to_minor("12", minor_unit=0) == 12
    assert from_minor(1234, minor_unit=3) == Decimal("1.234")


def test_from_minor_keeps_places() -> None:
    assert from_minor(50000) == Decimal("500.00")
    assert str(from_minor(5)) == "0.05"
    assert from_minor(-20000) == Decimal("-200.00")


@pytest.mark.parametrize("value", ["0", "-5"])
def test_positive_minor_rejects_zero_and_negative(value) -> None:
    with pytest.raises(ValidationError) as exc_info:
        positive_minor(value)
    assert exc_info.value.error_code == "VAL_001"


@pytest.mark.parametrize("value", ["1e30", "1e20", Decimal("92233720368547758.08")])
def test_amounts_beyond_storage_range(value) -> None:
    with pytest.raises(ValidationError) as exc_info:
        to_minor(value)
    assert exc_info.value.error_code == "VAL_001"


def test_largest_storable_amount() -> None:
    assert to_minor("92233720368547758.07") == MAX_MINOR
