"""GET /v1/reports/* - Revenue, collection and debt reports"""

import logging
import time
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from rental_ledger.api.v1.schemas import (
    DashboardResponse,
    DebtorItem,
    DebtorReportResponse,
    MonthlyCollectionItem,
    MonthlyCollectionResponse,
    MonthlyRevenueItem,
    MonthlyRevenueResponse,
    VehicleIncomeItem,
    VehicleIncomeResponse,
    VehicleRevenueItem,
    VehicleRevenueResponse,
)
from rental_ledger.api.dependencies import SnapshotSource, get_snapshot_source, get_request_id
from rental_ledger.domain.exceptions import MalformedContractError, SnapshotSourceError
from rental_ledger.domain.reconciliation import evaluate_rentals
from rental_ledger.domain.reports import (
    dashboard_stats,
    debtor_report,
    monthly_collection_report,
    vehicle_income_report,
    vehicle_revenue_report,
)
from rental_ledger.domain.revenue import monthly_report
from rental_ledger.infrastructure.observability.metrics import (
    report_counter,
    malformed_contract_counter,
    snapshot_fetch_failures_counter,
)
from rental_ledger.infrastructure.observability.logging import log_report

router = APIRouter()


def _malformed(e: MalformedContractError, request_id: str) -> HTTPException:
    malformed_contract_counter.inc()
    logging.warning(f"Malformed contract: {e}", extra={"request_id": request_id, "rental_id": e.rental_id})
    return HTTPException(status_code=422, detail=str(e))


def _unavailable(e: SnapshotSourceError, request_id: str) -> HTTPException:
    snapshot_fetch_failures_counter.inc()
    logging.error(f"Snapshot source error: {e}", extra={"request_id": request_id})
    return HTTPException(status_code=503, detail="Back-office data unavailable")


@router.get("/reports/revenue/monthly", response_model=MonthlyRevenueResponse)
async def get_monthly_revenue(
    request: Request,
    year: int = Query(..., ge=2000, le=2100, description="Calendar year"),
    vehicle_id: Optional[str] = Query(None, description="Restrict to one vehicle"),
    source: SnapshotSource = Depends(get_snapshot_source),
):
    """
    Rate and distance revenue attributed day by day, summed per month.

    Returns:
        Twelve all-vehicle month totals and the per-vehicle month buckets
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        contracts = await source.list_rentals(vehicle_id=vehicle_id)
        totals, per_vehicle = monthly_report(contracts, year)
        plates = {v.vehicle_id: v.plate for v in await source.list_vehicles()}
    except SnapshotSourceError as e:
        raise _unavailable(e, request_id)
    except MalformedContractError as e:
        raise _malformed(e, request_id)

    report_counter.labels(report="monthly_revenue").inc()
    log_report(request_id, "monthly_revenue", len(contracts), (time.time() - start_time) * 1000, year=year)

    return MonthlyRevenueResponse(
        year=year,
        totals=[
            MonthlyRevenueItem(
                year=m.year,
                month=m.month,
                revenue_cents=round(m.revenue_cents),
                rental_days=m.rental_days,
            )
            for m in totals
        ],
        vehicles=[
            MonthlyRevenueItem(
                vehicle_id=m.vehicle_id,
                plate=plates.get(m.vehicle_id),
                year=m.year,
                month=m.month,
                revenue_cents=round(m.revenue_cents),
                rental_days=m.rental_days,
            )
            for m in per_vehicle
        ],
    )


@router.get("/reports/collections/monthly", response_model=MonthlyCollectionResponse)
async def get_monthly_collections(
    request: Request,
    year: int = Query(..., ge=2000, le=2100, description="Calendar year"),
    source: SnapshotSource = Depends(get_snapshot_source),
):
    """Billed, collected and outstanding amounts for each month of a year"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        evaluations = evaluate_rentals(await source.list_rentals())
        months = monthly_collection_report(evaluations, year)
    except SnapshotSourceError as e:
        raise _unavailable(e, request_id)
    except MalformedContractError as e:
        raise _malformed(e, request_id)

    report_counter.labels(report="monthly_collections").inc()
    log_report(request_id, "monthly_collections", len(evaluations), (time.time() - start_time) * 1000, year=year)

    return MonthlyCollectionResponse(
        year=year,
        months=[
            MonthlyCollectionItem(
                year=m.year,
                month=m.month,
                billed_cents=round(m.billed_cents),
                collected_cents=round(m.collected_cents),
                outstanding_cents=round(m.outstanding_cents),
            )
            for m in months
        ],
    )


@router.get("/reports/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    request: Request,
    year: Optional[int] = Query(None, ge=2000, le=2100, description="Calendar year (default current)"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Month 1-12 (default current)"),
    source: SnapshotSource = Depends(get_snapshot_source),
):
    """Fleet status counts and one month's money figures"""
    start_time = time.time()
    request_id = get_request_id(request)
    today = date.today()
    year = year or today.year
    month = month or today.month

    try:
        evaluations = evaluate_rentals(await source.list_rentals(), today)
        stats = dashboard_stats(evaluations, await source.list_vehicles(), year, month)
    except SnapshotSourceError as e:
        raise _unavailable(e, request_id)
    except MalformedContractError as e:
        raise _malformed(e, request_id)

    report_counter.labels(report="dashboard").inc()
    log_report(request_id, "dashboard", stats.total_vehicles, (time.time() - start_time) * 1000, year=year, month=month)

    return DashboardResponse(
        year=stats.year,
        month=stats.month,
        total_vehicles=stats.total_vehicles,
        rented=stats.rented,
        idle=stats.idle,
        reserved=stats.reserved,
        service=stats.service,
        billed_cents=round(stats.billed_cents),
        collected_cents=round(stats.collected_cents),
        outstanding_cents=round(stats.outstanding_cents),
        vehicle_profit_cents=round(stats.vehicle_profit_cents),
    )


@router.get("/reports/debtors", response_model=DebtorReportResponse)
async def get_debtors(
    request: Request,
    as_of: Optional[date] = Query(None, description="Reference date (default today)"),
    source: SnapshotSource = Depends(get_snapshot_source),
):
    """Customers with an outstanding balance, largest debt first"""
    start_time = time.time()
    request_id = get_request_id(request)
    as_of = as_of or date.today()

    try:
        evaluations = evaluate_rentals(await source.list_rentals(), as_of)
        owing = {e.contract.customer_id for e in evaluations if e.balance.display_balance_cents > 0}
        debtors = debtor_report(evaluations, await source.customers_by_id(owing))
    except SnapshotSourceError as e:
        raise _unavailable(e, request_id)

    report_counter.labels(report="debtors").inc()
    log_report(request_id, "debtors", len(debtors), (time.time() - start_time) * 1000)

    return DebtorReportResponse(
        as_of=as_of,
        total_debt_cents=sum(d.total_debt_cents for d in debtors),
        debtors=[DebtorItem(**vars(d)) for d in debtors],
    )


@router.get("/reports/vehicles/revenue", response_model=VehicleRevenueResponse)
async def get_vehicle_revenue(
    request: Request,
    source: SnapshotSource = Depends(get_snapshot_source),
):
    """Rate and distance revenue per active vehicle, highest first"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        entries = vehicle_revenue_report(await source.list_rentals(), await source.list_vehicles())
    except SnapshotSourceError as e:
        raise _unavailable(e, request_id)

    report_counter.labels(report="vehicle_revenue").inc()
    log_report(request_id, "vehicle_revenue", len(entries), (time.time() - start_time) * 1000)

    return VehicleRevenueResponse(vehicles=[VehicleRevenueItem(**vars(e)) for e in entries])


@router.get("/reports/vehicles/income", response_model=VehicleIncomeResponse)
async def get_vehicle_income(
    request: Request,
    source: SnapshotSource = Depends(get_snapshot_source),
):
    """Vehicle revenue split into collected and outstanding, highest collected first"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        evaluations = evaluate_rentals(await source.list_rentals())
        entries = vehicle_income_report(evaluations, await source.list_vehicles())
    except SnapshotSourceError as e:
        raise _unavailable(e, request_id)

    report_counter.labels(report="vehicle_income").inc()
    log_report(request_id, "vehicle_income", len(entries), (time.time() - start_time) * 1000)

    return VehicleIncomeResponse(
        vehicles=[
            VehicleIncomeItem(
                vehicle_id=e.vehicle_id,
                plate=e.plate,
                billed_cents=e.billed_cents,
                collected_cents=round(e.collected_cents),
                outstanding_cents=round(e.outstanding_cents),
                rental_count=e.rental_count,
            )
            for e in entries
        ],
    )
