import pytest

from finance_ledger.errors import ImportFormatError, NothingImportedError
from finance_ledger.ingest import parse_csv
from tests.helpers.samples import BANK_STATEMENT_CSV, LEDGER_CSV


def test_bank_statement_is_tried_first():
    assert parse_csv(BANK_STATEMENT_CSV).dialect == "bank_statement"


def test_anything_else_falls_through_to_the_ledger_format():
    batch = parse_csv(LEDGER_CSV, existing_ids={"a2"})
    assert batch.dialect == "ledger"
    ids = [t.id for t in batch.transactions]
    assert ids[0] == "a1" and ids[2] == "a3"
    assert ids[1] != "a2"


@pytest.mark.parametrize("text", ["", "   \n\n", "id,type,amount,category,date,note\n"])
def test_fewer_than_two_lines_is_a_format_error(text):
    with pytest.raises(ImportFormatError):
        parse_csv(text)


def test_unrecognized_header_is_a_format_error():
    with pytest.raises(ImportFormatError) as exc:
        parse_csv("foo,bar\n1,2")
    assert not isinstance(exc.value, NothingImportedError)


def test_recognized_dialect_with_no_usable_rows():
    with pytest.raises(NothingImportedError):
        parse_csv("Concepto;Fecha;Importe\nX;01/01/2024;0,00")
    with pytest.raises(NothingImportedError):
        parse_csv("type,amount,category,date\nincome,0,Otros,2024-01-01")
