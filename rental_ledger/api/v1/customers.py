"""GET /v1/customers/{customer_id}/risk - Customer risk profile"""

import logging
import time
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from rental_ledger.api.v1.schemas import CustomerRiskResponse
from rental_ledger.api.dependencies import SnapshotSource, get_snapshot_source, get_request_id
from rental_ledger.domain.exceptions import SnapshotSourceError
from rental_ledger.domain.reconciliation import evaluate_rentals
from rental_ledger.domain.risk import build_customer_profile
from rental_ledger.infrastructure.observability.metrics import (
    report_counter,
    record_customer_risk,
    snapshot_fetch_failures_counter,
)
from rental_ledger.infrastructure.observability.logging import log_report

router = APIRouter()


@router.get("/customers/{customer_id}/risk", response_model=CustomerRiskResponse)
async def get_customer_risk(
    customer_id: str,
    request: Request,
    as_of: Optional[date] = Query(None, description="Reference date for overdue days (default today)"),
    source: SnapshotSource = Depends(get_snapshot_source),
):
    """
    Aggregate risk profile over the customer's full rental history.

    Returns:
        Billed, paid and owed totals, 0-100 risk score and average payment delay
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        customer = await source.get_customer(customer_id)
        if not customer:
            raise HTTPException(status_code=404, detail="Customer not found")

        history = evaluate_rentals(await source.list_rentals(customer_id=customer_id), as_of or date.today())
    except SnapshotSourceError as e:
        snapshot_fetch_failures_counter.inc()
        logging.error(f"Snapshot source error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Back-office data unavailable")

    profile = build_customer_profile(customer_id, history)

    report_counter.labels(report="customer_risk").inc()
    record_customer_risk(profile.risk_score)
    log_report(
        request_id,
        "customer_risk",
        profile.contract_count,
        (time.time() - start_time) * 1000,
        customer_id=customer_id,
        risk_score=profile.risk_score,
    )

    return CustomerRiskResponse(
        customer_name=customer.full_name,
        **vars(profile),
    )
