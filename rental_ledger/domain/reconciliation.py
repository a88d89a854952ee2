"""Per-rental reconciliation: charges, payments and balance in one pass

Evaluations are pure functions of a frozen contract snapshot and a reference
date, so they are memoized on exactly those inputs.
"""

from datetime import date
from functools import lru_cache
from typing import Iterable, List
from rental_ledger.domain.models import RentalContract, RentalEvaluation
from rental_ledger.domain.charges import calculate_charges
from rental_ledger.domain.payments import aggregate_payments, last_payment_at, settled_at
from rental_ledger.domain.balance import resolve_balance

EVALUATION_CACHE_SIZE = 4096


def _evaluate(contract: RentalContract, today: date) -> RentalEvaluation:
    charges = calculate_charges(contract)
    payments = aggregate_payments(contract)
    balance = resolve_balance(
        contract,
        total_due_cents=charges.total_due_cents,
        total_paid_cents=payments.total_paid_cents,
        today=today,
        settled=settled_at(contract, charges.total_due_cents),
    )

    return RentalEvaluation(
        contract=contract,
        charges=charges,
        payments=payments,
        balance=balance,
        last_payment_at=last_payment_at(contract),
    )


_cached_evaluate = lru_cache(maxsize=EVALUATION_CACHE_SIZE)(_evaluate)


def evaluate_rental(contract: RentalContract, today: date | None = None) -> RentalEvaluation:
    """
    Main entry point for one rental: charges, payments and balance.

    Results are shared between callers holding the same snapshot; treat them
    as read-only.
    """
    return _cached_evaluate(contract, today or date.today())


def evaluate_rentals(contracts: Iterable[RentalContract], today: date | None = None) -> List[RentalEvaluation]:
    today = today or date.today()
    return [evaluate_rental(contract, today) for contract in contracts]


def configure_cache(maxsize: int) -> None:
    """Resize the evaluation cache (drops existing entries)"""
    global _cached_evaluate
    _cached_evaluate = lru_cache(maxsize=maxsize)(_evaluate)


def clear_cache() -> None:
    _cached_evaluate.cache_clear()
