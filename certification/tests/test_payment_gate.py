"""
Tests for the reattempt payment gate and its ledger.
"""

import asyncio
from types import SimpleNamespace

import pytest

from certification.errors import ConfigurationError, GatewayError, PaymentRequired, UnknownReference
from certification.payments import ledger
from certification.payments.config import PaymentSettings
from certification.payments.gate import PaymentGate, can_start_paid_attempt, generate_reference
from conftest import FakeGateway


def _reconcile(gate, db, reference, **kwargs):
    return asyncio.run(gate.reconcile(db, reference, **kwargs))


def test_references_are_unique():
    refs = {generate_reference() for _ in range(200)}
    assert len(refs) == 200


def test_initiate_persists_pending_row(db, user, settings, gateway):
    gate = PaymentGate(settings, gateway)
    txn = gate.initiate(db, user.id)

    stored = ledger.get_transaction(db, txn.reference)
    assert stored is not None
    assert stored.status == "pending"
    assert stored.amount == 250000
    assert stored.currency == "KES"
    assert stored.purpose == "reattempt"
    assert gateway.calls == []


def test_initiate_requires_public_key(db, user, gateway):
    gate = PaymentGate(PaymentSettings(public_key="sk_live_wrong", secret_key="sk_test_abcdefghijkl"), gateway)
    with pytest.raises(ConfigurationError):
        gate.initiate(db, user.id)

    gate = PaymentGate(PaymentSettings(), gateway)
    with pytest.raises(ConfigurationError):
        gate.initiate(db, user.id)
    assert ledger.list_transactions(db, user.id) == []


def test_reconcile_success_is_idempotent(db, user, settings, gateway):
    gate = PaymentGate(settings, gateway)
    txn = gate.initiate(db, user.id)

    for _ in range(2):
        result = _reconcile(gate, db, txn.reference)
        assert result.status == "verified"
        assert result.gateway_status == "success"
        assert result.amount == 250000
        assert ledger.get_transaction(db, txn.reference).status == "verified"

    stored = ledger.get_transaction(db, txn.reference)
    assert stored.gateway_response["data"]["status"] == "success"
    assert gateway.calls == [txn.reference, txn.reference]


def test_reconcile_declined_marks_failed(db, user, settings):
    gate = PaymentGate(settings, FakeGateway(status="abandoned"))
    txn = gate.initiate(db, user.id)

    result = _reconcile(gate, db, txn.reference)
    assert result.status == "failed"
    assert result.gateway_status == "abandoned"
    assert ledger.get_transaction(db, txn.reference).status == "failed"


def test_reconcile_unknown_reference_never_mutates(db, user, settings, gateway):
    gate = PaymentGate(settings, gateway)
    txn = gate.initiate(db, user.id)

    with pytest.raises(UnknownReference):
        _reconcile(gate, db, "does-not-exist")

    assert gateway.calls == []
    rows = ledger.list_transactions(db, user.id)
    assert [(r.reference, r.status) for r in rows] == [(txn.reference, "pending")]


def test_reconcile_other_users_reference_is_unknown(db, user, settings, gateway):
    gate = PaymentGate(settings, gateway)
    txn = gate.initiate(db, user.id)

    with pytest.raises(UnknownReference):
        _reconcile(gate, db, txn.reference, owner_id="someone-else")
    assert ledger.get_transaction(db, txn.reference).status == "pending"


def test_gateway_error_leaves_row_pending(db, user, settings, failing_gateway):
    gate = PaymentGate(settings, failing_gateway)
    txn = gate.initiate(db, user.id)

    with pytest.raises(GatewayError):
        _reconcile(gate, db, txn.reference)

    stored = ledger.get_transaction(db, txn.reference)
    assert stored.status == "pending"
    assert stored.gateway_response is None


def test_missing_secret_fails_before_gateway(db, user, gateway):
    gate = PaymentGate(PaymentSettings(public_key="pk_test_123456"), gateway)
    txn = gate.initiate(db, user.id)

    with pytest.raises(ConfigurationError):
        _reconcile(gate, db, txn.reference)
    assert gateway.calls == []
    assert ledger.get_transaction(db, txn.reference).status == "pending"


def test_can_start_paid_attempt_predicate():
    verified = SimpleNamespace(purpose="reattempt", status="verified", consumed_at=None)
    consumed = SimpleNamespace(purpose="reattempt", status="verified", consumed_at="2024-03-05")
    pending = SimpleNamespace(purpose="reattempt", status="pending", consumed_at=None)
    client_reported = SimpleNamespace(purpose="reattempt", status="success", consumed_at=None)
    other = SimpleNamespace(purpose="coaching", status="verified", consumed_at=None)

    assert can_start_paid_attempt([pending, verified])
    assert not can_start_paid_attempt([])
    assert not can_start_paid_attempt([consumed, pending, client_reported, other])


def test_consume_reattempt_claims_once(db, user, settings, gateway):
    gate = PaymentGate(settings, gateway)
    txn = gate.initiate(db, user.id)
    _reconcile(gate, db, txn.reference)
    assert gate.can_start_attempt(db, user.id)

    reference = gate.consume_reattempt(db, user.id, "attempt-1")
    db.commit()
    assert reference == txn.reference

    stored = ledger.get_transaction(db, txn.reference)
    assert stored.consumed_by_attempt_id == "attempt-1"
    assert stored.consumed_at is not None
    assert not gate.can_start_attempt(db, user.id)

    with pytest.raises(PaymentRequired):
        gate.consume_reattempt(db, user.id, "attempt-2")


def test_reconcile_keeps_consumption(db, user, settings, gateway):
    gate = PaymentGate(settings, gateway)
    txn = gate.initiate(db, user.id)
    _reconcile(gate, db, txn.reference)
    gate.consume_reattempt(db, user.id, "attempt-1")
    db.commit()

    _reconcile(gate, db, txn.reference)
    stored = ledger.get_transaction(db, txn.reference)
    assert stored.status == "verified"
    assert stored.consumed_by_attempt_id == "attempt-1"


def test_mark_consumed_rejects_unverified(db, user, settings, gateway):
    gate = PaymentGate(settings, gateway)
    txn = gate.initiate(db, user.id)
    assert not ledger.mark_consumed(db, txn.reference, "attempt-1")
    with pytest.raises(PaymentRequired):
        gate.consume_reattempt(db, user.id, "attempt-1")


def test_status_reports_disabled_reason():
    status = PaymentGate(PaymentSettings(), FakeGateway()).status()
    assert not status.enabled
    assert status.public_key is None
    assert status.reason == "Payment unavailable. Configure Paystack key."
    assert status.amount == 250000

    status = PaymentGate(PaymentSettings(public_key="pk_live_abc"), FakeGateway()).status()
    assert status.enabled
    assert status.public_key == "pk_live_abc"
    assert status.reason is None
