from datetime import UTC, datetime

import pytest

from finance_ledger.filters import apply_filters
from finance_ledger.models import DateRangePreset, FilterSpec
from tests.helpers.samples import tx

NOW = datetime(2024, 3, 20, 15, 30, tzinfo=UTC)


@pytest.fixture
def sample():
    return [
        tx(id="old", type="income", category="Nómina", date="2023-12-28", note="Payroll"),
        tx(id="jan", type="expense", category="Supermercado", date="2024-01-15", note="MERCADONA"),
        tx(id="feb", type="expense", category="Ocio", date="2024-02-25", note="Cine con Ana"),
        tx(id="mar", type="income", category="Bizum", date="2024-03-14", note="bizum de juan"),
        tx(id="today", type="expense", category="Ocio", date="2024-03-20", note="steam"),
    ]


def _ids(items):
    return [t.id for t in items]


def test_all_preset_with_defaults_is_identity(sample):
    assert apply_filters(sample, FilterSpec(), now=NOW) == sample


def test_result_is_ordered_subset(sample):
    out = apply_filters(sample, FilterSpec(type="expense"), now=NOW)
    assert _ids(out) == ["jan", "feb", "today"]
    assert all(t in sample for t in out)


def test_last_7_days_uses_reference_time(sample):
    out = apply_filters(sample, FilterSpec(date_range=DateRangePreset.LAST_7_DAYS), now=NOW)
    assert _ids(out) == ["mar", "today"]


def test_last_30_days_excludes_older_dates(sample):
    out = apply_filters(sample, FilterSpec(date_range=DateRangePreset.LAST_30_DAYS), now=NOW)
    assert _ids(out) == ["feb", "mar", "today"]


def test_year_to_date_starts_on_january_first(sample):
    out = apply_filters(sample, FilterSpec(date_range=DateRangePreset.YEAR_TO_DATE), now=NOW)
    assert "old" not in _ids(out)
    assert _ids(out)[0] == "jan"


def test_naive_reference_time_is_treated_as_utc(sample):
    naive = datetime(2024, 3, 20, 15, 30)
    spec = FilterSpec(date_range=DateRangePreset.LAST_7_DAYS)
    assert apply_filters(sample, spec, now=naive) == apply_filters(sample, spec, now=NOW)


def test_category_filter_is_exact(sample):
    assert _ids(apply_filters(sample, FilterSpec(category="Ocio"), now=NOW)) == ["feb", "today"]
    assert apply_filters(sample, FilterSpec(category="ocio"), now=NOW) == []


def test_from_and_to_bounds_are_inclusive(sample):
    spec = FilterSpec(from_date="2024-01-15", to_date="2024-03-14")
    assert _ids(apply_filters(sample, spec, now=NOW)) == ["jan", "feb", "mar"]


def test_search_matches_category_or_note_case_insensitively(sample):
    assert _ids(apply_filters(sample, FilterSpec(search_text="  CINE "), now=NOW)) == ["feb"]
    assert _ids(apply_filters(sample, FilterSpec(search_text="bizum"), now=NOW)) == ["mar"]
    assert apply_filters(sample, FilterSpec(search_text="nothing like it"), now=NOW) == []


def test_predicates_combine(sample):
    spec = FilterSpec(
        date_range=DateRangePreset.YEAR_TO_DATE, type="expense", category="Ocio", search_text="steam"
    )
    assert _ids(apply_filters(sample, spec, now=NOW)) == ["today"]


def test_input_is_not_modified(sample):
    snapshot = list(sample)
    apply_filters(sample, FilterSpec(type="income"), now=NOW)
    assert sample == snapshot
