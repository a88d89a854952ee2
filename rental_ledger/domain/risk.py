"""Customer risk scoring - aggregate payment behaviour across a rental history"""

from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional
from rental_ledger.domain.models import (
    RentalEvaluation,
    CustomerRiskProfile,
    PaymentStatus,
    RiskTier,
)
from rental_ledger.domain.money import major_to_minor

HIGH_DEBT_CENTS = major_to_minor(10_000)
DELAY_THRESHOLD_DAYS = 15

DEBT_POINTS = 30
HIGH_DEBT_POINTS = 20
DELAY_POINTS = 20
CRITICAL_POINTS_EACH = 10
CRITICAL_POINTS_CAP = 30
MAX_SCORE = 100


def payment_delay_days(evaluation: RentalEvaluation) -> Optional[int]:
    """Days between rental end and settlement, or None if not settled on a known date"""
    balance = evaluation.balance
    if balance.status is not PaymentStatus.PAID or balance.settled_at is None:
        return None
    return max(0, (balance.settled_at.date() - evaluation.contract.end_date).days)


def average_payment_delay(evaluations: Iterable[RentalEvaluation]) -> Optional[float]:
    """
    Mean payment delay over paid rentals with a known settlement date.

    Rentals without a settlement date are left out rather than counted as zero.
    Returns None when no rental qualifies.
    """
    delays = [d for d in (payment_delay_days(e) for e in evaluations) if d is not None]
    if not delays:
        return None
    return sum(delays) / len(delays)


def calculate_risk_score(
    current_debt_cents: int,
    avg_payment_delay_days: Optional[float],
    critical_contracts: int,
) -> int:
    """
    Additive 0-100 risk score (higher is riskier).

    - +30: any outstanding debt
    - +20: debt above 10000
    - +20: average payment delay above 15 days
    - +10 per CRITICAL rental, at most +30
    """
    score = 0
    if current_debt_cents > 0:
        score += DEBT_POINTS
    if current_debt_cents > HIGH_DEBT_CENTS:
        score += HIGH_DEBT_POINTS
    if avg_payment_delay_days is not None and avg_payment_delay_days > DELAY_THRESHOLD_DAYS:
        score += DELAY_POINTS
    score += min(CRITICAL_POINTS_CAP, CRITICAL_POINTS_EACH * critical_contracts)

    return min(MAX_SCORE, score)


def build_customer_profile(customer_id: str, evaluations: List[RentalEvaluation]) -> CustomerRiskProfile:
    """
    Fold one customer's full rental history into a CustomerRiskProfile.

    Expects every evaluation of that customer; an empty history yields a
    zero profile.
    """
    total_billed = sum(e.charges.total_due_cents for e in evaluations)
    total_paid = sum(e.payments.total_paid_cents for e in evaluations)
    current_debt = sum(e.balance.display_balance_cents for e in evaluations)
    critical = sum(1 for e in evaluations if e.balance.risk_tier is RiskTier.CRITICAL)
    avg_delay = average_payment_delay(evaluations)

    payment_dates: List[datetime] = [e.last_payment_at for e in evaluations if e.last_payment_at is not None]

    return CustomerRiskProfile(
        customer_id=customer_id,
        contract_count=len(evaluations),
        total_billed_cents=total_billed,
        total_paid_cents=total_paid,
        current_debt_cents=current_debt,
        risk_score=calculate_risk_score(current_debt, avg_delay, critical),
        avg_payment_delay_days=avg_delay,
        critical_contracts=critical,
        last_payment_at=max(payment_dates) if payment_dates else None,
    )


def profile_customers(evaluations: Iterable[RentalEvaluation]) -> Dict[str, CustomerRiskProfile]:
    """Group evaluations by customer and profile each one independently"""
    by_customer: Dict[str, List[RentalEvaluation]] = defaultdict(list)
    for evaluation in evaluations:
        by_customer[evaluation.contract.customer_id].append(evaluation)

    return {
        customer_id: build_customer_profile(customer_id, history)
        for customer_id, history in by_customer.items()
    }
