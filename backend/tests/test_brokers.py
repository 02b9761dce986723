"""
Tests for brokers, broker payouts and the commission summary.
"""

import pytest
from datetime import date
from decimal import Decimal

import crud.bookings as crud_bookings
import crud.broker_payments as crud_broker_payments
import crud.brokers as crud_brokers
from exceptions import BrokerNotFound, InvalidAmount
from schemas.broker_payments import BrokerPaymentCreate, BrokerPaymentUpdate
from schemas.brokers import BrokerUpdate

USER = "tester"


def payout(db, broker_id, amount):
    return crud_broker_payments.create_broker_payment(
        db,
        BrokerPaymentCreate(broker_id=broker_id, payment_amount=Decimal(amount), payment_date=date(2026, 10, 20)),
        USER,
    )


class TestBookingCommission:

    def test_commission_on_booking(self, broker, make_booking):
        booking, _ = make_booking(broker_id=broker.id, associate_rate=Decimal("3000"))
        assert booking.broker_commission == Decimal("600000")

    def test_associate_rate_above_rate(self, broker, make_booking):
        booking, _ = make_booking(broker_id=broker.id, associate_rate=Decimal("3800"))
        assert booking.broker_commission == Decimal("0")

    def test_no_broker_no_commission(self, make_booking):
        booking, _ = make_booking(associate_rate=Decimal("3000"))
        assert booking.broker_commission == Decimal("0")

    def test_unknown_broker_rejected(self, make_booking):
        with pytest.raises(BrokerNotFound):
            make_booking(broker_id=999, associate_rate=Decimal("3000"))


class TestCommissionSummary:

    def test_summary_splits_by_registry(self, db, broker, make_booking):
        registered, _ = make_booking(broker_id=broker.id, associate_rate=Decimal("3000"))
        make_booking(plot_no="A-13", broker_id=broker.id, associate_rate=Decimal("3200"))
        crud_bookings.mark_registry(db, registered.id, True, None, USER)
        payout(db, broker.id, "100000")

        summary = crud_brokers.get_broker_commission_summary(db, broker.id)

        assert summary.total_bookings == 2
        assert summary.registered_bookings == 1
        assert summary.non_registered_bookings == 1
        assert summary.total_commission == Decimal("960000")
        assert summary.total_commission_registered == Decimal("600000")
        assert summary.total_commission_non_registered == Decimal("360000")
        assert summary.total_commission_paid == Decimal("100000")
        assert summary.commission_remaining == Decimal("860000")
        assert summary.commission_remaining_registered == Decimal("500000")

    def test_deleted_rows_do_not_count(self, db, broker, make_booking):
        kept, _ = make_booking(broker_id=broker.id, associate_rate=Decimal("3000"))
        dropped, _ = make_booking(plot_no="A-13", broker_id=broker.id, associate_rate=Decimal("3000"))
        crud_bookings.delete_booking(db, dropped.id, USER)
        payment = payout(db, broker.id, "50000")
        crud_broker_payments.delete_broker_payment(db, payment.id, USER)

        summary = crud_brokers.get_broker_commission_summary(db, broker.id)

        assert summary.total_bookings == 1
        assert summary.total_commission == Decimal("600000")
        assert summary.total_commission_paid == Decimal("0")

    def test_summary_for_deleted_broker(self, db, broker, make_booking):
        make_booking(broker_id=broker.id, associate_rate=Decimal("3000"))
        crud_brokers.delete_broker(db, broker.id, USER)

        summary = crud_brokers.get_broker_commission_summary(db, broker.id)
        assert summary.total_commission == Decimal("600000")

    def test_unknown_broker(self, db):
        with pytest.raises(BrokerNotFound):
            crud_brokers.get_broker_commission_summary(db, 999)


class TestBrokerPayments:

    @pytest.mark.parametrize("amount", ["0", "-1"])
    def test_rejects_non_positive(self, db, broker, amount):
        with pytest.raises(InvalidAmount):
            payout(db, broker.id, amount)

    def test_unknown_broker(self, db):
        with pytest.raises(BrokerNotFound):
            payout(db, 999, "1000")

    def test_update_amount(self, db, broker):
        payment = payout(db, broker.id, "1000")
        updated = crud_broker_payments.update_broker_payment(
            db, payment.id, BrokerPaymentUpdate(payment_amount=Decimal("2500"), remarks="Revised"), USER
        )
        assert updated.payment_amount == Decimal("2500")
        assert updated.remarks == "Revised"


class TestBrokerLifecycle:

    def test_update_and_restore(self, db, broker):
        crud_brokers.update_broker(db, broker.id, BrokerUpdate(email="agent@example.com"), USER)
        crud_brokers.delete_broker(db, broker.id, USER)
        assert crud_brokers.get_brokers(db) == []

        restored = crud_brokers.restore_broker(db, broker.id, USER)

        assert restored.is_active is True
        assert restored.email == "agent@example.com"
        assert [b.id for b in crud_brokers.get_brokers(db, active_only=True)] == [broker.id]
