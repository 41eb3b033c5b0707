from decimal import Decimal

import pytest
from pydantic import ValidationError

from finance_ledger.models import (
    DateRangePreset,
    FilterSpec,
    Transaction,
    amount_within_bounds,
    format_amount,
    is_iso_date,
)


def test_transaction_accepts_valid_fields_and_strips_text():
    t = Transaction(type="expense", amount="12.50", category=" Ocio ", date="2024-03-05", note=" cine ")
    assert t.amount == Decimal("12.50")
    assert t.category == "Ocio"
    assert t.note == "cine"
    assert t.id == ""
    assert t.month == "2024-03"


@pytest.mark.parametrize("amount", ["0", "-5", "NaN"])
def test_transaction_rejects_non_positive_amount(amount):
    with pytest.raises(ValidationError):
        Transaction(type="income", amount=amount, category="Otros", date="2024-03-05")


@pytest.mark.parametrize("bad_date", ["05/03/2024", "2024-3-5", "2024-02-30", ""])
def test_transaction_rejects_malformed_dates(bad_date):
    with pytest.raises(ValidationError):
        Transaction(type="income", amount="1", category="Otros", date=bad_date)


def test_transaction_rejects_empty_category_and_unknown_type():
    with pytest.raises(ValidationError):
        Transaction(type="income", amount="1", category="   ", date="2024-03-05")
    with pytest.raises(ValidationError):
        Transaction(type="refund", amount="1", category="Otros", date="2024-03-05")


def test_transaction_is_immutable():
    t = Transaction(type="income", amount="1", category="Otros", date="2024-03-05")
    with pytest.raises(ValidationError):
        t.amount = Decimal("2")  # type: ignore[misc]


def test_none_note_becomes_empty_string():
    t = Transaction.model_validate(
        {"id": "x", "type": "income", "amount": 3, "category": "Otros", "date": "2024-03-05", "note": None}
    )
    assert t.note == ""


def test_to_record_uses_plain_decimal_text():
    t = Transaction(id="x", type="expense", amount=Decimal("1234.50"), category="Ocio", date="2024-03-05")
    assert t.to_record() == {
        "id": "x",
        "type": "expense",
        "amount": "1234.50",
        "category": "Ocio",
        "date": "2024-03-05",
        "note": "",
    }


def test_format_amount_never_uses_exponent():
    assert format_amount(Decimal("1E+2")) == "100"
    assert format_amount(Decimal("0.10")) == "0.10"


def test_is_iso_date():
    assert is_iso_date("2024-02-29")
    assert not is_iso_date("2023-02-29")
    assert not is_iso_date("2024-03-05T10:00")


def test_filter_spec_defaults_pass_everything_and_reset_uses_last_30_days():
    spec = FilterSpec()
    assert spec.date_range is DateRangePreset.ALL
    assert (spec.type, spec.category, spec.search_text) == ("all", "all", "")
    assert spec.from_date is None and spec.to_date is None
    assert FilterSpec.reset().date_range is DateRangePreset.LAST_30_DAYS


@pytest.mark.parametrize("amount", ["1e20000000", "1e-20000000", "1000000000000000"])
def test_transaction_rejects_amounts_with_unbounded_text_form(amount):
    with pytest.raises(ValidationError):
        Transaction(type="income", amount=amount, category="Otros", date="2024-03-05")


def test_amount_within_bounds_limits():
    assert amount_within_bounds(Decimal("999999999999999.99"))
    assert not amount_within_bounds(Decimal("1E+15"))
    assert amount_within_bounds(Decimal("1E-20"))
    assert not amount_within_bounds(Decimal("1E-21"))
