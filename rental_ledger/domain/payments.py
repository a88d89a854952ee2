"""Payment aggregation over installment slots and the payment ledger"""

from datetime import datetime
from typing import List, Optional, Tuple
from rental_ledger.domain.models import RentalContract, PaymentTotal


def aggregate_payments(contract: RentalContract) -> PaymentTotal:
    """
    Sum what has been paid on a rental from both payment sources.

    - installmentTotal: upfront + pay1..pay4 stored on the contract
    - ledgerTotal: sum of the discrete payment records
    - totalPaid: both together; a rental may be settled through either or a mix
    """
    installment_total = sum(slot or 0 for slot in contract.installment_slots)
    ledger_total = sum(payment.amount_cents or 0 for payment in contract.payments)

    return PaymentTotal(
        installment_total_cents=installment_total,
        ledger_total_cents=ledger_total,
        total_paid_cents=installment_total + ledger_total,
    )


def payment_events(contract: RentalContract) -> List[Tuple[datetime, int]]:
    """
    Build a dated list of every payment on a rental, oldest first.

    Installment slots carry no date of their own, so each non-zero slot is
    dated at the contract's creation time. That date is an approximation of
    when the money arrived, not a recorded fact. Slots are skipped when the
    contract has no creation time.
    """
    events: List[Tuple[datetime, int]] = []

    if contract.created_at is not None:
        for slot in contract.installment_slots:
            if slot:
                events.append((contract.created_at, slot))

    for payment in contract.payments:
        events.append((payment.paid_at, payment.amount_cents or 0))

    return sorted(events, key=lambda e: e[0])


def last_payment_at(contract: RentalContract) -> Optional[datetime]:
    """Most recent payment date across installments (synthetic) and ledger records"""
    events = payment_events(contract)
    return events[-1][0] if events else None


def settled_at(contract: RentalContract, total_due_cents: int) -> Optional[datetime]:
    """
    Date the running paid total first reached the amount due.

    Returns None when nothing is due, or when the dated payments never
    cover the total.
    """
    if total_due_cents <= 0:
        return None

    running = 0
    for paid_at, amount in payment_events(contract):
        running += amount
        if running >= total_due_cents:
            return paid_at

    return None
