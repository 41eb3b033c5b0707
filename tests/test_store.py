import json
from decimal import Decimal

import pytest
from pydantic import ValidationError

from finance_ledger.persistence import TRANSACTIONS_KEY, InMemoryKeyValueStore
from finance_ledger.store import TransactionStore, parse_transactions
from tests.helpers.backends import FailingKeyValueStore
from tests.helpers.samples import tx


def _stored(kv: InMemoryKeyValueStore) -> list[dict]:
    return json.loads(kv.data[TRANSACTIONS_KEY])


def test_add_assigns_id_and_persists(kv):
    store = TransactionStore(kv)
    added = store.add(tx(note="cine"))
    assert added.id
    assert store.get(added.id) == added
    assert [r["id"] for r in _stored(kv)] == [added.id]
    assert _stored(kv)[0]["amount"] == "10.00"


def test_add_rejects_duplicate_id(kv):
    store = TransactionStore(kv)
    store.add(tx(id="a"))
    with pytest.raises(ValueError):
        store.add(tx(id="a"))
    assert len(store) == 1


def test_add_then_remove_restores_previous_state(kv):
    store = TransactionStore(kv)
    store.add(tx(id="a"))
    before = store.all()
    added = store.add(tx(note="temp"))
    assert store.remove(added.id)
    assert store.all() == before


def test_remove_unknown_id_is_noop(kv):
    store = TransactionStore(kv)
    store.add(tx(id="a"))
    assert not store.remove("missing")
    assert store.ids() == {"a"}


def test_update_replaces_fields_but_keeps_id_and_position(kv):
    store = TransactionStore(kv)
    store.add(tx(id="a"))
    store.add(tx(id="b"))
    updated = store.update("a", {"amount": "99", "category": "Salud", "id": "hijack"})
    assert updated is not None
    assert updated.id == "a"
    assert updated.amount == Decimal("99")
    assert [t.id for t in store.all()] == ["a", "b"]
    assert _stored(kv)[0]["category"] == "Salud"


def test_update_unknown_id_returns_none_and_changes_nothing(kv):
    store = TransactionStore(kv)
    store.add(tx(id="a"))
    snapshot = store.all()
    assert store.update("missing", {"amount": "1"}) is None
    assert store.all() == snapshot


def test_update_with_invalid_values_leaves_transaction_untouched(kv):
    store = TransactionStore(kv)
    original = store.add(tx(id="a"))
    with pytest.raises(ValidationError):
        store.update("a", {"amount": "-3"})
    assert store.get("a") == original


def test_extend_is_all_or_nothing():
    store = TransactionStore()
    store.add(tx(id="a"))
    with pytest.raises(ValueError):
        store.extend([tx(id="b"), tx(id="a")])
    assert store.ids() == {"a"}

    added = store.extend([tx(id="b"), tx()])
    assert [t.id for t in added][0] == "b"
    assert len(store) == 3


def test_clear_empties_and_persists(kv):
    store = TransactionStore(kv)
    store.add(tx())
    store.clear()
    assert len(store) == 0
    assert _stored(kv) == []


def test_write_failure_keeps_in_memory_state():
    backend = FailingKeyValueStore(fail_reads=False)
    store = TransactionStore(backend)
    added = store.add(tx())
    assert store.get(added.id) == added
    assert backend.write_attempts == [TRANSACTIONS_KEY]


def test_read_failure_starts_empty():
    store = TransactionStore(FailingKeyValueStore())
    store.load()
    assert len(store) == 0


def test_load_round_trips_through_backend(kv):
    store = TransactionStore(kv)
    store.add(tx(id="a", amount="1234.50", note="Lunch, with friends"))
    again = TransactionStore(kv)
    again.load()
    assert again.all() == store.all()


@pytest.mark.parametrize("raw", [None, "", "{oops", '{"id": "a"}'])
def test_parse_transactions_tolerates_missing_or_corrupt_records(raw):
    assert parse_transactions(raw) == []


def test_parse_transactions_drops_invalid_items_and_reassigns_duplicate_ids():
    raw = json.dumps(
        [
            {"id": "a", "type": "income", "amount": "5", "category": "Otros", "date": "2024-01-01"},
            {"id": "a", "type": "income", "amount": "6", "category": "Otros", "date": "2024-01-02"},
            {"id": "b", "type": "income", "amount": "0", "category": "Otros", "date": "2024-01-03"},
            "not a record",
        ]
    )
    out = parse_transactions(raw)
    assert len(out) == 2
    assert out[0].id == "a"
    assert out[1].id != "a" and out[1].amount == Decimal("6")
