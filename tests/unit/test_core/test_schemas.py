from datetime import timezone
from decimal import Decimal

import pytest

from ledger.core.exceptions import ValidationError
from ledger.models.enums import TransactionType
from ledger.schemas.base import parse
from ledger.schemas.catalog import CategoryCreate, RuleCreate
from ledger.schemas.events import InboundEvent
from ledger.schemas.ledger import EntryCreate, EntryUpdate


def test_entry_defaults() -> None:
    entry = parse(EntryCreate, {"amount": "249.50"})
    assert entry.amount == Decimal("249.50")
    assert entry.type == TransactionType.EXPENSE
    assert entry.txn_date.tzinfo == timezone.utc


@pytest.mark.parametrize(
    "amount,code",
    [("0", "VAL_001"), ("-10", "VAL_001"), ("abc", "VAL_001"), ("1.234", "VAL_002")],
)
def test_bad_amounts(amount, code) -> None:
    with pytest.raises(ValidationError) as exc_info:
        parse(EntryCreate, {"amount": amount})
    assert exc_info.value.error_code == code
    assert exc_info.value.details["field"] == "amount"


def test_missing_amount() -> None:
    with pytest.raises(ValidationError) as exc_info:
        parse(EntryCreate, {})
    assert exc_info.value.error_code == "VAL_003"


def test_bad_enum_is_out_of_range() -> None:
    with pytest.raises(ValidationError) as exc_info:
        parse(EntryCreate, {"amount": "10", "type": "TRANSFER"})
    assert exc_info.value.error_code == "VAL_004"


def test_update_tracks_only_set_fields() -> None:
    update = parse(EntryUpdate, {"amount": "300", "note": None})
    assert update.model_dump(exclude_unset=True) == {"amount": Decimal("300"), "note": None}


@pytest.mark.parametrize("model,field", [(CategoryCreate, "name"), (RuleCreate, "match_text")])
def test_blank_text_fields(model, field) -> None:
    data = {"name": "  ", "match_text": "  ", "category_id": "food"}
    with pytest.raises(ValidationError) as exc_info:
        parse(model, data)
    assert exc_info.value.error_code == "VAL_003"
    assert exc_info.value.details["field"] == field


def test_text_fields_are_stripped() -> None:
    assert parse(RuleCreate, {"match_text": " swig ", "category_id": "food"}).match_text == "swig"


def test_inbound_event() -> None:
    event = parse(InboundEvent, {"sender": "VM-HDFCBK", "amount": 120})
    assert event.transaction_type is None
    assert event.raw_text == ""


@pytest.mark.parametrize("amount", ["1e30", "1e20"])
def test_amounts_too_large_to_store(amount) -> None:
    with pytest.raises(ValidationError) as exc_info:
        parse(EntryCreate, {"amount": amount})
    assert exc_info.value.error_code == "VAL_001"


def test_minor_unit_comes_from_caller() -> None:
    with pytest.raises(ValidationError) as exc_info:
        parse(EntryCreate, {"amount": "10.50"}, minor_unit=0)
    assert exc_info.value.error_code == "VAL_002"

    assert parse(EntryCreate, {"amount": "10.505"}, minor_unit=3).amount == Decimal("10.505")
    assert parse(InboundEvent, {"sender": "AX-SBIINB", "amount": "7"}, minor_unit=0).amount == 7
