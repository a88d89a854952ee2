"""Charge calculation - total owed for one rental from its tariff fields"""

from typing import Optional
from rental_ledger.domain.models import RentalContract, ChargeBreakdown


def _amount(value: Optional[int]) -> int:
    """Missing numeric fields count as zero"""
    return value or 0


def calculate_charges(contract: RentalContract) -> ChargeBreakdown:
    """
    Derive the total amount owed for a rental.

    totalDue = days × dailyRate + km + cleaning + toll + damage + fuel

    Billing uses the stored `days` field, not the date span, since the two
    can be edited independently. Negative fees are not rejected and reduce
    the total like a credit.
    """
    rental_charge = _amount(contract.days) * _amount(contract.daily_rate_cents)
    km_fee = _amount(contract.km_fee_cents)
    cleaning_fee = _amount(contract.cleaning_fee_cents)
    toll_fee = _amount(contract.toll_fee_cents)
    damage_fee = _amount(contract.damage_fee_cents)
    fuel_fee = _amount(contract.fuel_fee_cents)

    return ChargeBreakdown(
        rental_charge_cents=rental_charge,
        km_fee_cents=km_fee,
        cleaning_fee_cents=cleaning_fee,
        toll_fee_cents=toll_fee,
        damage_fee_cents=damage_fee,
        fuel_fee_cents=fuel_fee,
        total_due_cents=rental_charge + km_fee + cleaning_fee + toll_fee + damage_fee + fuel_fee,
    )


def calculate_total_due(contract: RentalContract) -> int:
    return calculate_charges(contract).total_due_cents


def vehicle_revenue(contract: RentalContract) -> int:
    """Revenue earned by the vehicle itself: rental charge plus distance fee only"""
    return _amount(contract.days) * _amount(contract.daily_rate_cents) + _amount(contract.km_fee_cents)
