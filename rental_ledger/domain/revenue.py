"""Revenue attribution - spread rental revenue over calendar days and months"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple
from rental_ledger.domain.models import RentalContract, DailyRevenueSample, MonthlyRevenue
from rental_ledger.domain.exceptions import MalformedContractError
from rental_ledger.utils.date_utils import generate_date_range, inclusive_days

VehicleMonthKey = Tuple[str, int, int]
MonthKey = Tuple[int, int]


def attributable_revenue(contract: RentalContract) -> int:
    """
    Revenue this engine spreads over the rental's days.

    Daily rate × actual span days + distance fee. Cleaning, toll, damage and
    fuel fees are excluded; the monthly revenue views only chart rate and
    distance income.
    """
    total_days = span_days(contract)
    return (contract.daily_rate_cents or 0) * total_days + (contract.km_fee_cents or 0)


def span_days(contract: RentalContract) -> int:
    """Calendar days from start to end inclusive; rejects inverted spans"""
    if contract.end_date < contract.start_date:
        raise MalformedContractError(
            contract.rental_id,
            f"end date {contract.end_date} is before start date {contract.start_date}",
        )
    return inclusive_days(contract.start_date, contract.end_date)


def attribute_rental(contract: RentalContract) -> List[DailyRevenueSample]:
    """
    Produce one revenue sample per calendar day of the rental span.

    Every day gets the same flat per-diem, (rate × days + distance) / days.
    The date span is used here, not the stored `days` field that billing uses.

    Example:
        Jan 7 - Feb 5, rate 500.00, distance 600.00
        30 days → 15600.00 / 30 = 520.00 per day
        January: 25 × 520.00, February: 5 × 520.00
    """
    total_days = span_days(contract)
    per_diem = attributable_revenue(contract) / total_days

    return [
        DailyRevenueSample(
            day=day,
            vehicle_id=contract.vehicle_id,
            rental_id=contract.rental_id,
            revenue_cents=per_diem,
        )
        for day in generate_date_range(contract.start_date, contract.end_date)
    ]


def attribute_revenue(contracts: Iterable[RentalContract]) -> List[DailyRevenueSample]:
    """Daily samples for every contract in a snapshot"""
    samples: List[DailyRevenueSample] = []
    for contract in contracts:
        samples.extend(attribute_rental(contract))
    return samples


def aggregate_by_vehicle_month(samples: Iterable[DailyRevenueSample]) -> Dict[VehicleMonthKey, MonthlyRevenue]:
    """Sum samples into (vehicle, year, month) buckets"""
    buckets: Dict[VehicleMonthKey, MonthlyRevenue] = {}
    for sample in samples:
        key = (sample.vehicle_id, sample.day.year, sample.day.month)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = MonthlyRevenue(
                vehicle_id=sample.vehicle_id,
                year=sample.day.year,
                month=sample.day.month,
                revenue_cents=0.0,
                rental_days=0,
            )
            buckets[key] = bucket
        bucket.revenue_cents += sample.revenue_cents
        bucket.rental_days += 1
    return buckets


def aggregate_by_month(samples: Iterable[DailyRevenueSample]) -> Dict[MonthKey, MonthlyRevenue]:
    """All-vehicle monthly totals"""
    revenue: Dict[MonthKey, float] = defaultdict(float)
    days: Dict[MonthKey, int] = defaultdict(int)
    for sample in samples:
        key = (sample.day.year, sample.day.month)
        revenue[key] += sample.revenue_cents
        days[key] += 1

    return {
        key: MonthlyRevenue(
            vehicle_id=None,
            year=key[0],
            month=key[1],
            revenue_cents=revenue[key],
            rental_days=days[key],
        )
        for key in revenue
    }


def revenue_for_month(
    contracts: Iterable[RentalContract],
    year: int,
    month: int,
    vehicle_id: Optional[str] = None,
) -> float:
    """Attributed revenue landing in one calendar month"""
    return sum(
        sample.revenue_cents
        for sample in attribute_revenue(contracts)
        if sample.day.year == year
        and sample.day.month == month
        and (vehicle_id is None or sample.vehicle_id == vehicle_id)
    )


def monthly_report(
    contracts: Iterable[RentalContract],
    year: int,
) -> Tuple[List[MonthlyRevenue], List[MonthlyRevenue]]:
    """
    Revenue for each month of a year.

    Returns (totals, per_vehicle): twelve all-vehicle totals, zero-filled,
    and the non-empty per-vehicle buckets for that year ordered by vehicle then month.
    """
    samples = [s for s in attribute_revenue(contracts) if s.day.year == year]

    by_month = aggregate_by_month(samples)
    totals = [
        by_month.get((year, month), MonthlyRevenue(None, year, month, 0.0, 0))
        for month in range(1, 13)
    ]

    per_vehicle = sorted(
        aggregate_by_vehicle_month(samples).values(),
        key=lambda b: (b.vehicle_id, b.month),
    )

    return totals, per_vehicle
