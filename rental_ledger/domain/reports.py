"""Report roll-ups built on the reconciliation engine"""

from collections import Counter
from typing import Dict, Iterable, List
from rental_ledger.domain.models import (
    Customer,
    DashboardStats,
    DebtorEntry,
    MonthlyCollection,
    RentalContract,
    RentalEvaluation,
    Vehicle,
    VehicleIncomeEntry,
    VehicleRevenueEntry,
    VehicleStatus,
)
from rental_ledger.domain.charges import vehicle_revenue
from rental_ledger.domain.revenue import revenue_for_month, span_days
from rental_ledger.utils.date_utils import days_in_month_overlap


def debtor_report(
    evaluations: Iterable[RentalEvaluation],
    customers: Dict[str, Customer],
) -> List[DebtorEntry]:
    """Customers who still owe money, largest debt first"""
    debtors: Dict[str, DebtorEntry] = {}

    for evaluation in evaluations:
        owed = evaluation.balance.display_balance_cents
        if owed <= 0:
            continue

        customer_id = evaluation.contract.customer_id
        entry = debtors.get(customer_id)
        if entry is None:
            customer = customers.get(customer_id)
            entry = DebtorEntry(
                customer_id=customer_id,
                customer_name=customer.full_name if customer else "",
                total_debt_cents=0,
                open_rentals=0,
            )
            debtors[customer_id] = entry

        entry.total_debt_cents += owed
        entry.open_rentals += 1

    return sorted(debtors.values(), key=lambda d: d.total_debt_cents, reverse=True)


def vehicle_revenue_report(
    contracts: Iterable[RentalContract],
    vehicles: Iterable[Vehicle],
) -> List[VehicleRevenueEntry]:
    """
    Rate and distance revenue per vehicle, from stored billed days.

    Every vehicle is listed, including those with no rentals.
    """
    entries: Dict[str, VehicleRevenueEntry] = {
        v.vehicle_id: VehicleRevenueEntry(vehicle_id=v.vehicle_id, plate=v.plate, revenue_cents=0, rental_count=0)
        for v in vehicles
    }

    for contract in contracts:
        entry = entries.get(contract.vehicle_id)
        if entry is None:
            continue
        entry.revenue_cents += vehicle_revenue(contract)
        entry.rental_count += 1

    return sorted(entries.values(), key=lambda e: e.revenue_cents, reverse=True)


def payment_ratio(evaluation: RentalEvaluation) -> float:
    """Share of the amount due that has been paid; 0 when nothing is due"""
    total_due = evaluation.charges.total_due_cents
    if total_due <= 0:
        return 0.0
    return evaluation.payments.total_paid_cents / total_due


def billed_in_month(evaluation: RentalEvaluation, year: int, month: int) -> int:
    """
    Amount a rental bills in one calendar month.

    Daily rate × rental days falling inside the month, plus the distance,
    cleaning, toll, damage and fuel fees booked in the month the rental starts.

    Raises:
        MalformedContractError: If the rental ends before it starts
    """
    contract = evaluation.contract
    span_days(contract)

    days = days_in_month_overlap(contract.start_date, contract.end_date, year, month)
    if days == 0:
        return 0

    billed = days * (contract.daily_rate_cents or 0)
    if (contract.start_date.year, contract.start_date.month) == (year, month):
        charges = evaluation.charges
        billed += (
            charges.km_fee_cents
            + charges.cleaning_fee_cents
            + charges.toll_fee_cents
            + charges.damage_fee_cents
            + charges.fuel_fee_cents
        )
    return billed


def monthly_collection_report(evaluations: Iterable[RentalEvaluation], year: int) -> List[MonthlyCollection]:
    """
    Billed, collected and outstanding amounts for each month of a year.

    Collection is not dated per month: each rental's monthly billing is split
    by its overall paid / due ratio, and what remains is outstanding (never
    below zero for a single rental).

    Example:
        Rental billing 1000.00 in March and 500.00 in April, half paid
        March: billed 1000.00, collected 500.00, outstanding 500.00
        April: billed 500.00, collected 250.00, outstanding 250.00
    """
    months = [MonthlyCollection(year, month, 0.0, 0.0, 0.0) for month in range(1, 13)]

    for evaluation in evaluations:
        ratio = payment_ratio(evaluation)
        for row in months:
            billed = billed_in_month(evaluation, year, row.month)
            if billed == 0:
                continue
            collected = billed * ratio
            row.billed_cents += billed
            row.collected_cents += collected
            row.outstanding_cents += max(0.0, billed - collected)

    return months


def vehicle_income_report(
    evaluations: Iterable[RentalEvaluation],
    vehicles: Iterable[Vehicle],
) -> List[VehicleIncomeEntry]:
    """
    Vehicle revenue per vehicle, split into collected and outstanding.

    Billed is `vehicle_revenue` (stored days × rate + distance fee); the
    collected share follows each rental's paid / due ratio. Sorted by
    collected amount, highest first.
    """
    entries: Dict[str, VehicleIncomeEntry] = {
        v.vehicle_id: VehicleIncomeEntry(
            vehicle_id=v.vehicle_id,
            plate=v.plate,
            billed_cents=0,
            collected_cents=0.0,
            outstanding_cents=0.0,
            rental_count=0,
        )
        for v in vehicles
    }

    for evaluation in evaluations:
        entry = entries.get(evaluation.contract.vehicle_id)
        if entry is None:
            continue
        billed = vehicle_revenue(evaluation.contract)
        collected = billed * payment_ratio(evaluation)
        entry.billed_cents += billed
        entry.collected_cents += collected
        entry.outstanding_cents += max(0.0, billed - collected)
        entry.rental_count += 1

    return sorted(entries.values(), key=lambda e: e.collected_cents, reverse=True)


def dashboard_stats(
    evaluations: Iterable[RentalEvaluation],
    vehicles: Iterable[Vehicle],
    year: int,
    month: int,
) -> DashboardStats:
    """Vehicle counts by status plus one month's billed, collected, outstanding and vehicle profit"""
    evaluations = list(evaluations)
    counts = Counter(VehicleStatus(v.status) for v in vehicles)
    row = monthly_collection_report(evaluations, year)[month - 1]

    return DashboardStats(
        year=year,
        month=month,
        total_vehicles=sum(counts.values()),
        rented=counts[VehicleStatus.RENTED],
        idle=counts[VehicleStatus.IDLE],
        reserved=counts[VehicleStatus.RESERVED],
        service=counts[VehicleStatus.SERVICE],
        billed_cents=row.billed_cents,
        collected_cents=row.collected_cents,
        outstanding_cents=row.outstanding_cents,
        vehicle_profit_cents=revenue_for_month((e.contract for e in evaluations), year, month),
    )
