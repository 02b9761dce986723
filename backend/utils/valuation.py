"""Booking valuation.

Pure arithmetic over the raw booking inputs. The results are fixed at
creation/edit time; `total_amount` and `broker_commission` are never stored,
the Booking model recomputes them from its columns with the same functions.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from exceptions import ExceedsTotal, InvalidAmount

TWO_PLACES = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def two_places(value, label: str) -> Decimal:
    """Reject values the Numeric(.., 2) columns would silently round."""
    value = to_decimal(value)
    if value != quantize(value):
        raise InvalidAmount(f"{label} cannot have more than 2 decimal places")
    return value


@dataclass(frozen=True)
class BookingValuation:
    effective_rate: Decimal
    total_amount: Decimal
    broker_commission: Decimal


def effective_rate_for(rate, discount) -> Decimal:
    return to_decimal(rate) - to_decimal(discount)


def total_amount_for(area, effective_rate, plc) -> Decimal:
    # PLC is a flat add-on, independent of area and rate
    return quantize(to_decimal(area) * to_decimal(effective_rate) + to_decimal(plc))


def broker_commission_for(area, rate, associate_rate, broker_id) -> Decimal:
    associate_rate = to_decimal(associate_rate)
    if not broker_id or associate_rate <= 0:
        return Decimal("0.00")
    commission = (to_decimal(rate) - associate_rate) * to_decimal(area)
    return quantize(max(Decimal("0"), commission))


def compute_valuation(
    area,
    rate,
    discount=0,
    plc=0,
    associate_rate: Optional[Decimal] = None,
    broker_id: Optional[int] = None,
) -> BookingValuation:
    """Validate raw booking inputs and derive the monetary terms.

    Raises:
        InvalidAmount: when an input is out of range or the total is not positive.
    """
    area = two_places(area, "Area")
    rate = two_places(rate, "Rate")
    discount = two_places(discount, "Discount")
    plc = two_places(plc, "PLC")
    if associate_rate is not None:
        associate_rate = two_places(associate_rate, "Associate rate")

    if area <= 0:
        raise InvalidAmount("Area must be greater than 0")
    if rate <= 0:
        raise InvalidAmount("Rate must be greater than 0")
    if discount < 0:
        raise InvalidAmount("Discount cannot be negative")
    if discount > rate:
        raise InvalidAmount("Discount cannot exceed the rate")
    if plc < 0:
        raise InvalidAmount("PLC cannot be negative")
    if associate_rate is not None and associate_rate < 0:
        raise InvalidAmount("Associate rate cannot be negative")

    effective_rate = effective_rate_for(rate, discount)
    total_amount = total_amount_for(area, effective_rate, plc)
    if total_amount <= 0:
        raise InvalidAmount(f"Total amount must be greater than 0 (computed {total_amount})")

    return BookingValuation(
        effective_rate=quantize(effective_rate),
        total_amount=total_amount,
        broker_commission=broker_commission_for(area, rate, associate_rate, broker_id),
    )


def validate_initial_payment(amount, total_amount) -> Decimal:
    amount = two_places(amount, "Booking amount")
    if amount <= 0:
        raise InvalidAmount("Booking amount must be greater than 0")
    if amount > to_decimal(total_amount):
        raise ExceedsTotal(f"Booking amount ({amount}) cannot exceed total amount ({total_amount})")
    return amount
