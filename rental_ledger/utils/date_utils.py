"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import List, Tuple
from rental_ledger.domain.models import RentalContract, RentalStatus


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def inclusive_days(start: date, end: date) -> int:
    """Calendar days covered by [start, end]; a same-day span is 1"""
    return (end - start).days + 1


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a calendar month"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def days_in_month_overlap(start: date, end: date, year: int, month: int) -> int:
    """How many days of [start, end] fall inside the given month"""
    month_start, month_end = month_bounds(year, month)
    range_start = max(start, month_start)
    range_end = min(end, month_end)
    if range_start > range_end:
        return 0
    return (range_end - range_start).days + 1


def to_naive_utc(value: datetime) -> datetime:
    """Normalize aware timestamps to naive UTC so mixed sources compare"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def is_rental_active_on(contract: RentalContract, day: date) -> bool:
    """True when the rental is ACTIVE and the day falls inside its span"""
    return contract.status == RentalStatus.ACTIVE and contract.start_date <= day <= contract.end_date
