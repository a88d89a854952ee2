"""Balance resolution - outstanding amount, payment status and per-rental risk tier"""

from datetime import date, datetime
from typing import Optional
from rental_ledger.domain.models import (
    RentalContract,
    RentalStatus,
    PaymentStatus,
    RiskTier,
    BalanceResult,
)
from rental_ledger.domain.money import major_to_minor

# Tier thresholds, quoted in lira and held as kuruş
CRITICAL_BALANCE_CENTS = major_to_minor(15_000)
HIGH_BALANCE_CENTS = major_to_minor(10_000)
MEDIUM_BALANCE_CENTS = major_to_minor(5_000)

CRITICAL_OVERDUE_DAYS = 60
HIGH_OVERDUE_DAYS = 30
MEDIUM_OVERDUE_DAYS = 15


def display_balance(raw_balance_cents: int) -> int:
    """Amount still owed as shown to users; overpayment shows as zero"""
    return max(0, raw_balance_cents)


def classify_payment(raw_balance_cents: int, total_paid_cents: int) -> PaymentStatus:
    if raw_balance_cents <= 0:
        return PaymentStatus.PAID
    if total_paid_cents > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.UNPAID


def days_overdue(
    contract: RentalContract,
    payment_status: PaymentStatus,
    today: date,
) -> int:
    """
    Whole days past the end date for an unsettled rental.

    Only counted once the rental has left ACTIVE; a paid rental is never overdue.
    """
    if payment_status == PaymentStatus.PAID or contract.status == RentalStatus.ACTIVE:
        return 0
    return max(0, (today - contract.end_date).days)


def determine_risk_tier(display_balance_cents: int, overdue_days: int) -> RiskTier:
    """
    Map balance and overdue duration to a risk tier. First match wins:

    - balance > 15000 or overdue > 60 days: CRITICAL
    - balance > 10000 or overdue > 30 days: HIGH
    - balance > 5000  or overdue > 15 days: MEDIUM
    - otherwise: LOW

    A rental that owes nothing is LOW whatever its overdue days.
    """
    if display_balance_cents <= 0:
        return RiskTier.LOW

    if display_balance_cents > CRITICAL_BALANCE_CENTS or overdue_days > CRITICAL_OVERDUE_DAYS:
        return RiskTier.CRITICAL
    elif display_balance_cents > HIGH_BALANCE_CENTS or overdue_days > HIGH_OVERDUE_DAYS:
        return RiskTier.HIGH
    elif display_balance_cents > MEDIUM_BALANCE_CENTS or overdue_days > MEDIUM_OVERDUE_DAYS:
        return RiskTier.MEDIUM
    else:
        return RiskTier.LOW


def resolve_balance(
    contract: RentalContract,
    total_due_cents: int,
    total_paid_cents: int,
    today: date,
    settled: Optional[datetime] = None,
) -> BalanceResult:
    """Combine amount due and amount paid into a BalanceResult"""
    raw_balance = total_due_cents - total_paid_cents
    shown = display_balance(raw_balance)
    status = classify_payment(raw_balance, total_paid_cents)
    overdue = days_overdue(contract, status, today)

    return BalanceResult(
        rental_id=contract.rental_id,
        raw_balance_cents=raw_balance,
        display_balance_cents=shown,
        status=status,
        days_overdue=overdue,
        risk_tier=determine_risk_tier(shown, overdue),
        settled_at=settled if status is PaymentStatus.PAID else None,
    )
