"""GET /v1/rentals/{rental_id}/balance - Reconcile one rental"""

import logging
import time
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from rental_ledger.api.v1.schemas import RentalBalanceResponse, ChargeSchema, PaymentTotalSchema
from rental_ledger.api.dependencies import SnapshotSource, get_snapshot_source, get_request_id
from rental_ledger.domain.exceptions import SnapshotSourceError
from rental_ledger.domain.reconciliation import evaluate_rental
from rental_ledger.infrastructure.observability.metrics import (
    report_counter,
    risk_tier_counter,
    snapshot_fetch_failures_counter,
)
from rental_ledger.infrastructure.observability.logging import log_report

router = APIRouter()


@router.get("/rentals/{rental_id}/balance", response_model=RentalBalanceResponse)
async def get_rental_balance(
    rental_id: str,
    request: Request,
    as_of: Optional[date] = Query(None, description="Reference date for overdue days (default today)"),
    source: SnapshotSource = Depends(get_snapshot_source),
):
    """
    Charges, payments and outstanding balance for one rental.

    Returns:
        Charge breakdown, both payment totals, signed and displayed balance,
        payment status, overdue days and risk tier
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        contract = await source.get_rental(rental_id)
    except SnapshotSourceError as e:
        snapshot_fetch_failures_counter.inc()
        logging.error(f"Snapshot source error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Back-office data unavailable")

    if not contract:
        raise HTTPException(status_code=404, detail="Rental not found")

    evaluation = evaluate_rental(contract, as_of or date.today())
    balance = evaluation.balance

    report_counter.labels(report="rental_balance").inc()
    risk_tier_counter.labels(tier=balance.risk_tier.value).inc()
    log_report(
        request_id,
        "rental_balance",
        1,
        (time.time() - start_time) * 1000,
        rental_id=rental_id,
        payment_status=balance.status.value,
    )

    return RentalBalanceResponse(
        rental_id=contract.rental_id,
        vehicle_id=contract.vehicle_id,
        customer_id=contract.customer_id,
        rental_status=contract.status.value,
        charges=ChargeSchema(**vars(evaluation.charges)),
        payments=PaymentTotalSchema(**vars(evaluation.payments)),
        raw_balance_cents=balance.raw_balance_cents,
        balance_cents=balance.display_balance_cents,
        payment_status=balance.status.value,
        days_overdue=balance.days_overdue,
        risk_tier=balance.risk_tier.value,
        settled_at=balance.settled_at,
        last_payment_at=evaluation.last_payment_at,
    )
