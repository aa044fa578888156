"""
Unit tests for the balance ledger and transaction records.
"""
import pytest

from core.exceptions import DataNotFoundError
from core.ledger import Ledger
from core.schema import PartyReference, TransactionKind, TransactionRecord

ALICE = PartyReference(routing_number=111222333, account_number=9991)
BOB = PartyReference(routing_number=444555666, account_number=123456)


def make_transaction(kind: str, amount: int = 100) -> TransactionRecord:
    return TransactionRecord(
        number=1,
        originator=ALICE,
        recipient=BOB,
        type=kind,
        amount=amount,
    )


def test_party_reference_value_equality():
    """Test references with equal fields are equal and hash alike."""
    other = PartyReference(routing_number=111222333, account_number=9991)

    assert other == ALICE
    assert hash(other) == hash(ALICE)
    assert {ALICE: 1}[other] == 1
    assert str(other) == "111222333 / 9991"


def test_party_reference_is_immutable():
    """Test references cannot be changed after creation."""
    with pytest.raises(Exception):
        ALICE.account_number = 1


def test_kind_mapping():
    """Test only the exact Debit literal selects debit semantics."""
    assert TransactionKind.from_type("Debit") is TransactionKind.DEBIT
    assert TransactionKind.from_type("Credit") is TransactionKind.CREDIT
    assert TransactionKind.from_type("DEBIT") is TransactionKind.CREDIT
    assert TransactionKind.from_type("") is TransactionKind.CREDIT


def test_credit_payer_and_payee():
    """Test credits pay from originator to recipient."""
    txn = make_transaction("Credit")
    assert txn.payer == ALICE
    assert txn.payee == BOB


def test_debit_payer_and_payee():
    """Test debits pay from recipient to originator."""
    txn = make_transaction("Debit")
    assert txn.kind is TransactionKind.DEBIT
    assert txn.payer == BOB
    assert txn.payee == ALICE


def test_touch_seeds_zero_balance():
    """Test first sight of an account opens it at zero."""
    ledger = Ledger()
    ledger.touch(ALICE)

    assert ALICE in ledger
    assert ledger.balance_of(ALICE) == 0
    assert ledger.touched_pairs() == [ALICE]


def test_touch_does_not_reset_balance():
    """Test touching an existing account keeps its balance."""
    ledger = Ledger()
    ledger.touch(ALICE)
    ledger.touch(BOB)
    ledger.apply(make_transaction("Credit", 50))
    ledger.touch(ALICE)

    assert ledger.balance_of(ALICE) == -50


def test_apply_credit_and_debit():
    """Test application moves amounts in the right direction."""
    ledger = Ledger()
    ledger.touch(ALICE)
    ledger.touch(BOB)

    ledger.apply(make_transaction("Credit", 300))
    ledger.apply(make_transaction("Debit", 100))

    assert ledger.balance_of(ALICE) == -200
    assert ledger.balance_of(BOB) == 200
    assert ledger.total() == 0


def test_apply_requires_known_accounts():
    """Test applying to an untouched account fails without changes."""
    ledger = Ledger()
    ledger.touch(ALICE)

    with pytest.raises(DataNotFoundError) as exc_info:
        ledger.apply(make_transaction("Credit"))

    assert exc_info.value.details["routing_number"] == BOB.routing_number
    assert ledger.balance_of(ALICE) == 0


def test_balance_of_unknown_account():
    """Test looking up an untouched account fails."""
    with pytest.raises(DataNotFoundError):
        Ledger().balance_of(ALICE)


def test_touched_pairs_deduplicated_in_first_seen_order():
    """Test duplicates are dropped and first occurrence wins."""
    carol = PartyReference(routing_number=1, account_number=1)
    ledger = Ledger()
    for party in (BOB, ALICE, BOB, carol, ALICE):
        ledger.touch(party)

    assert ledger.touched_pairs() == [BOB, ALICE, carol]


def test_summaries():
    """Test the ledger projects into account summaries."""
    ledger = Ledger()
    ledger.touch(ALICE)
    ledger.touch(BOB)
    ledger.apply(make_transaction("Credit", 10000))

    summaries = ledger.summaries()

    assert [s.model_dump() for s in summaries] == [
        {"routing_number": 111222333, "account_number": 9991, "net_transactions": -10000},
        {"routing_number": 444555666, "account_number": 123456, "net_transactions": 10000},
    ]


def test_negative_amount_rejected():
    """Test transaction amounts cannot be negative."""
    with pytest.raises(Exception):
        make_transaction("Credit", -1)
