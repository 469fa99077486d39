"""Tests for the notified-id ledger."""

from zte_sms_notice.ledger import NotifiedLedger


def test_add_and_contains():
    ledger = NotifiedLedger()
    assert "1" not in ledger

    ledger.add("1")
    ledger.add("1")
    ledger.add("2")

    assert "1" in ledger
    assert len(ledger) == 2
    assert sorted(ledger) == ["1", "2"]


def test_instances_are_independent():
    first = NotifiedLedger()
    first.add("1")
    assert "1" not in NotifiedLedger()
