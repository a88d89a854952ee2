"""Pydantic schemas for API responses"""

from pydantic import BaseModel
from datetime import date, datetime
from typing import List, Optional


class ChargeSchema(BaseModel):
    rental_charge_cents: int
    km_fee_cents: int
    cleaning_fee_cents: int
    toll_fee_cents: int
    damage_fee_cents: int
    fuel_fee_cents: int
    total_due_cents: int


class PaymentTotalSchema(BaseModel):
    installment_total_cents: int
    ledger_total_cents: int
    total_paid_cents: int


class RentalBalanceResponse(BaseModel):
    """Response for GET /v1/rentals/{rental_id}/balance"""

    rental_id: str
    vehicle_id: str
    customer_id: str
    rental_status: str
    charges: ChargeSchema
    payments: PaymentTotalSchema
    raw_balance_cents: int
    balance_cents: int
    payment_status: str
    days_overdue: int
    risk_tier: str
    settled_at: Optional[datetime] = None
    last_payment_at: Optional[datetime] = None


class CustomerRiskResponse(BaseModel):
    """Response for GET /v1/customers/{customer_id}/risk"""

    customer_id: str
    customer_name: str
    contract_count: int
    total_billed_cents: int
    total_paid_cents: int
    current_debt_cents: int
    risk_score: int
    avg_payment_delay_days: Optional[float] = None
    critical_contracts: int
    last_payment_at: Optional[datetime] = None


class MonthlyRevenueItem(BaseModel):
    """Revenue attributed to one month (one vehicle, or all when vehicle_id is null)"""

    vehicle_id: Optional[str] = None
    plate: Optional[str] = None
    year: int
    month: int
    revenue_cents: int
    rental_days: int


class MonthlyRevenueResponse(BaseModel):
    """Response for GET /v1/reports/revenue/monthly"""

    year: int
    totals: List[MonthlyRevenueItem]
    vehicles: List[MonthlyRevenueItem]


class DebtorItem(BaseModel):
    customer_id: str
    customer_name: str
    total_debt_cents: int
    open_rentals: int


class DebtorReportResponse(BaseModel):
    """Response for GET /v1/reports/debtors"""

    as_of: date
    total_debt_cents: int
    debtors: List[DebtorItem]


class VehicleRevenueItem(BaseModel):
    vehicle_id: str
    plate: str
    revenue_cents: int
    rental_count: int


class VehicleRevenueResponse(BaseModel):
    """Response for GET /v1/reports/vehicles/revenue"""

    vehicles: List[VehicleRevenueItem]


class MonthlyCollectionItem(BaseModel):
    year: int
    month: int
    billed_cents: int
    collected_cents: int
    outstanding_cents: int


class MonthlyCollectionResponse(BaseModel):
    """Response for GET /v1/reports/collections/monthly"""

    year: int
    months: List[MonthlyCollectionItem]


class VehicleIncomeItem(BaseModel):
    vehicle_id: str
    plate: str
    billed_cents: int
    collected_cents: int
    outstanding_cents: int
    rental_count: int


class VehicleIncomeResponse(BaseModel):
    """Response for GET /v1/reports/vehicles/income"""

    vehicles: List[VehicleIncomeItem]


class DashboardResponse(BaseModel):
    """Response for GET /v1/reports/dashboard"""

    year: int
    month: int
    total_vehicles: int
    rented: int
    idle: int
    reserved: int
    service: int
    billed_cents: int
    collected_cents: int
    outstanding_cents: int
    vehicle_profit_cents: int
