"""
Tests for the payment ledger.

The paid sum of a booking never exceeds its total. Every write that could
break this is rejected and leaves the stored rows unchanged.
"""

import pytest
from pydantic import ValidationError
from decimal import Decimal

import crud.bookings as crud_bookings
import crud.payments as crud_payments
from crud.audit_log import get_audit_logs
from exceptions import (
    BookingCancelled,
    BookingNotFound,
    ExceedsRemainingBalance,
    ExceedsTotal,
    InvalidAmount,
    PaymentNotFound,
)
from models.payments import Payment, PaymentMode, PaymentType
from schemas.bookings import BookingCreate, BookingUpdate
from schemas.payments import PaymentCreate, PaymentUpdate

USER = "tester"


def pay(db, booking_id, amount, mode=PaymentMode.CASH):
    return crud_payments.record_payment(
        db,
        PaymentCreate(booking_id=booking_id, payment_amount=Decimal(amount), payment_mode=mode),
        USER,
    )


def payment_count(db, booking_id):
    return db.query(Payment).filter(Payment.booking_id == booking_id).execution_options(include_deleted=True).count()


class TestBookingBalance:

    def test_new_booking_is_unpaid(self, db, make_booking):
        booking, payment = make_booking()
        assert payment is None
        balance = crud_bookings.get_booking_balance(db, booking.id)
        assert balance.total_amount == Decimal("4130000")
        assert balance.total_paid == Decimal("0")
        assert balance.remaining_amount == Decimal("4130000")
        assert balance.payment_status == "Unpaid"

    def test_initial_payment_reduces_remaining(self, db, make_booking):
        booking, payment = make_booking(booking_amount=Decimal("500000"), payment_mode=PaymentMode.CHEQUE)
        assert payment.payment_type == PaymentType.BOOKING
        assert payment.payment_mode == PaymentMode.CHEQUE
        assert payment.receipt_date == booking.booking_date

        balance = crud_bookings.get_booking_balance(db, booking.id)
        assert balance.total_paid == Decimal("500000")
        assert balance.remaining_amount == Decimal("3630000")
        assert balance.payment_status == "Partially Paid"

    def test_fully_paid(self, db, make_booking):
        booking, _ = make_booking(booking_amount=Decimal("4130000"))
        balance = crud_bookings.get_booking_balance(db, booking.id)
        assert balance.remaining_amount == Decimal("0")
        assert balance.payment_status == "Paid"

    def test_initial_payment_over_total_writes_nothing(self, db, make_booking):
        with pytest.raises(ExceedsTotal):
            make_booking(booking_amount=Decimal("5000000"))
        assert crud_bookings.get_bookings(db) == []
        assert db.query(Payment).count() == 0

    def test_sub_paisa_area_writes_nothing(self, db, project, customer):
        # Bypass request validation to reach the crud guard
        booking = BookingCreate.model_construct(
            project_id=project.id,
            customer_id=customer.id,
            plot_no="A-12",
            area=Decimal("1200.004"),
            rate=Decimal("3500"),
            booking_amount=Decimal("500000"),
        )
        with pytest.raises(InvalidAmount):
            crud_bookings.create_booking(db, booking, USER)
        assert crud_bookings.get_bookings(db) == []
        assert db.query(Payment).count() == 0

    def test_sub_paisa_fields_fail_request_validation(self, project, customer):
        with pytest.raises(ValidationError):
            BookingCreate(project_id=project.id, customer_id=customer.id, plot_no="A-12", area=Decimal("1200.004"), rate=Decimal("3500"))


class TestRecordPayment:

    def test_rejects_over_remaining_with_max_allowed(self, db, make_booking):
        booking, _ = make_booking(booking_amount=Decimal("500000"))
        with pytest.raises(ExceedsRemainingBalance) as exc_info:
            pay(db, booking.id, "3700000")
        assert exc_info.value.max_allowed == Decimal("3630000")
        assert exc_info.value.to_dict()["max_allowed"] == "3630000.00"
        assert payment_count(db, booking.id) == 1

    def test_exact_remaining_is_accepted(self, db, make_booking):
        booking, _ = make_booking(booking_amount=Decimal("500000"))
        pay(db, booking.id, "3630000")
        assert crud_bookings.get_booking_balance(db, booking.id).payment_status == "Paid"

    def test_fully_paid_booking_rejects_more(self, db, make_booking):
        booking, _ = make_booking(booking_amount=Decimal("4130000"))
        with pytest.raises(ExceedsRemainingBalance) as exc_info:
            pay(db, booking.id, "1")
        assert exc_info.value.max_allowed == Decimal("0")

    @pytest.mark.parametrize("amount", ["0", "-100"])
    def test_rejects_non_positive(self, db, make_booking, amount):
        booking, _ = make_booking()
        with pytest.raises(InvalidAmount):
            pay(db, booking.id, amount)

    def test_rejects_fraction_of_a_paisa(self, db, make_booking):
        booking, _ = make_booking()
        with pytest.raises(InvalidAmount):
            crud_payments.check_amount_fits(db, booking, Decimal("0.004"))
        with pytest.raises(ValidationError):
            PaymentCreate(booking_id=booking.id, payment_amount=Decimal("0.004"), payment_mode=PaymentMode.CASH)
        assert payment_count(db, booking.id) == 0

    def test_unknown_booking(self, db):
        with pytest.raises(BookingNotFound):
            pay(db, 999, "100")

    def test_cancelled_booking_rejects_payments(self, db, make_booking):
        booking, _ = make_booking()
        crud_bookings.cancel_booking(db, booking.id, USER)
        with pytest.raises(BookingCancelled):
            pay(db, booking.id, "1000")

    def test_payment_is_audited(self, db, make_booking):
        booking, _ = make_booking()
        payment = pay(db, booking.id, "1000", mode=PaymentMode.UPI)
        logs = get_audit_logs(db, "payments", payment.id)
        assert [log.action for log in logs] == ["CREATE"]
        assert Decimal(logs[0].new_values["payment_amount"]) == Decimal("1000")


class TestEditPayment:

    def test_edit_is_checked_against_other_payments_only(self, db, make_booking):
        booking, payment = make_booking(booking_amount=Decimal("500000"))
        updated = crud_payments.update_payment(
            db, payment.id, PaymentUpdate(payment_amount=Decimal("600000")), USER
        )
        assert updated.payment_amount == Decimal("600000")
        assert crud_bookings.get_booking_balance(db, booking.id).remaining_amount == Decimal("3530000")

    def test_edit_over_total_is_rejected(self, db, make_booking):
        booking, payment = make_booking(booking_amount=Decimal("500000"))
        with pytest.raises(ExceedsRemainingBalance) as exc_info:
            crud_payments.update_payment(db, payment.id, PaymentUpdate(payment_amount=Decimal("4200000")), USER)
        assert exc_info.value.max_allowed == Decimal("4130000")
        db.expire_all()
        assert crud_payments.get_payment(db, payment.id).payment_amount == Decimal("500000")

    def test_edit_with_other_payments(self, db, make_booking):
        booking, first = make_booking(booking_amount=Decimal("500000"))
        pay(db, booking.id, "3000000")
        with pytest.raises(ExceedsRemainingBalance) as exc_info:
            crud_payments.update_payment(db, first.id, PaymentUpdate(payment_amount=Decimal("1200000")), USER)
        assert exc_info.value.max_allowed == Decimal("1130000")

    def test_edit_without_amount_keeps_amount(self, db, make_booking):
        booking, payment = make_booking(booking_amount=Decimal("500000"))
        updated = crud_payments.update_payment(db, payment.id, PaymentUpdate(remarks="Cheque cleared"), USER)
        assert updated.remarks == "Cheque cleared"
        assert updated.payment_amount == Decimal("500000")


class TestDeleteAndRestorePayment:

    def test_delete_frees_balance(self, db, make_booking):
        booking, payment = make_booking(booking_amount=Decimal("500000"))
        crud_payments.delete_payment(db, payment.id, USER)
        balance = crud_bookings.get_booking_balance(db, booking.id)
        assert balance.total_paid == Decimal("0")
        assert balance.remaining_amount == Decimal("4130000")
        with pytest.raises(PaymentNotFound):
            crud_payments.get_payment_or_404(db, payment.id)

    def test_delete_locks_the_booking(self, db, make_booking, monkeypatch):
        booking, payment = make_booking(booking_amount=Decimal("500000"))
        locked = []
        original = crud_payments.lock_booking

        def spy(session, booking_id):
            locked.append(booking_id)
            return original(session, booking_id)

        monkeypatch.setattr(crud_payments, "lock_booking", spy)
        crud_payments.delete_payment(db, payment.id, USER)
        assert locked == [booking.id]

    def test_delete_twice_is_not_found(self, db, make_booking):
        booking, payment = make_booking(booking_amount=Decimal("500000"))
        crud_payments.delete_payment(db, payment.id, USER)
        with pytest.raises(PaymentNotFound):
            crud_payments.delete_payment(db, payment.id, USER)
        assert crud_bookings.get_booking_balance(db, booking.id).total_paid == Decimal("0")

    def test_deleted_payment_hidden_from_lists(self, db, make_booking):
        booking, payment = make_booking(booking_amount=Decimal("500000"))
        crud_payments.delete_payment(db, payment.id, USER)
        assert crud_payments.get_booking_payments(db, booking.id) == []
        assert crud_payments.get_payments(db, booking_id=booking.id) == []

    def test_restore_when_it_still_fits(self, db, make_booking):
        booking, payment = make_booking(booking_amount=Decimal("500000"))
        crud_payments.delete_payment(db, payment.id, USER)
        restored = crud_payments.restore_payment(db, payment.id, USER)
        assert restored.is_deleted is False
        assert crud_bookings.get_booking_balance(db, booking.id).total_paid == Decimal("500000")

    def test_restore_rejected_when_balance_taken(self, db, make_booking):
        booking, payment = make_booking(booking_amount=Decimal("500000"))
        crud_payments.delete_payment(db, payment.id, USER)
        pay(db, booking.id, "4000000")
        with pytest.raises(ExceedsRemainingBalance) as exc_info:
            crud_payments.restore_payment(db, payment.id, USER)
        assert exc_info.value.max_allowed == Decimal("130000")
        assert crud_payments.get_payment(db, payment.id, include_deleted=True).is_deleted is True


class TestEditBooking:

    def test_edit_recomputes_valuation(self, db, make_booking):
        booking, _ = make_booking()
        updated = crud_bookings.update_booking(db, booking.id, BookingUpdate(discount=Decimal("0")), USER)
        assert updated.effective_rate == Decimal("3500")
        assert updated.total_amount == Decimal("4250000")

    def test_edit_cannot_drop_total_below_paid(self, db, make_booking):
        booking, _ = make_booking(booking_amount=Decimal("4000000"))
        with pytest.raises(ExceedsTotal):
            crud_bookings.update_booking(db, booking.id, BookingUpdate(area=Decimal("1000")), USER)
        db.expire_all()
        assert crud_bookings.get_booking(db, booking.id).area == Decimal("1200")

    def test_edit_rejects_invalid_discount(self, db, make_booking):
        booking, _ = make_booking()
        with pytest.raises(InvalidAmount):
            crud_bookings.update_booking(db, booking.id, BookingUpdate(discount=Decimal("4000")), USER)
