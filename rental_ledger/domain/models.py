"""Domain models - pure Python dataclasses representing rental ledger entities

All currency fields are integer minor units (kuruş). Inputs are frozen so that
an evaluation can be memoized on the snapshot it was computed from.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple


class RentalStatus(str, Enum):
    RESERVED = "RESERVED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CARD = "CARD"
    TRANSFER = "TRANSFER"


class VehicleStatus(str, Enum):
    IDLE = "IDLE"
    RENTED = "RENTED"
    RESERVED = "RESERVED"
    SERVICE = "SERVICE"


class PaymentStatus(str, Enum):
    PAID = "PAID"
    PARTIAL = "PARTIAL"
    UNPAID = "UNPAID"


class RiskTier(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class PaymentRecord:
    """Discrete ledger payment, separate from the installment slots"""

    payment_id: str
    rental_id: str
    amount_cents: Optional[int]
    method: PaymentMethod
    paid_at: datetime


@dataclass(frozen=True)
class RentalContract:
    """One rental transaction as read from the back office"""

    rental_id: str
    vehicle_id: str
    customer_id: str
    start_date: date
    end_date: date
    days: Optional[int] = 0  # nominal billed days, edited independently of the date span
    daily_rate_cents: Optional[int] = 0
    km_fee_cents: Optional[int] = 0  # distance overage
    cleaning_fee_cents: Optional[int] = 0
    toll_fee_cents: Optional[int] = 0
    damage_fee_cents: Optional[int] = 0
    fuel_fee_cents: Optional[int] = 0
    upfront_cents: Optional[int] = 0
    pay1_cents: Optional[int] = 0
    pay2_cents: Optional[int] = 0
    pay3_cents: Optional[int] = 0
    pay4_cents: Optional[int] = 0
    status: RentalStatus = RentalStatus.ACTIVE
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    payments: Tuple[PaymentRecord, ...] = field(default_factory=tuple)

    @property
    def installment_slots(self) -> Tuple[Optional[int], ...]:
        return (
            self.upfront_cents,
            self.pay1_cents,
            self.pay2_cents,
            self.pay3_cents,
            self.pay4_cents,
        )


@dataclass(frozen=True)
class Customer:
    customer_id: str
    full_name: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class Vehicle:
    vehicle_id: str
    plate: str
    status: VehicleStatus = VehicleStatus.IDLE
    name: Optional[str] = None


@dataclass
class ChargeBreakdown:
    """Total owed for one rental and its components"""

    rental_charge_cents: int  # days × daily rate
    km_fee_cents: int
    cleaning_fee_cents: int
    toll_fee_cents: int
    damage_fee_cents: int
    fuel_fee_cents: int
    total_due_cents: int


@dataclass
class PaymentTotal:
    """Total paid from both payment representations"""

    installment_total_cents: int
    ledger_total_cents: int
    total_paid_cents: int


@dataclass
class BalanceResult:
    """Outstanding balance and classification for one rental"""

    rental_id: str
    raw_balance_cents: int  # signed; negative means overpaid
    display_balance_cents: int  # floored at zero
    status: PaymentStatus
    days_overdue: int
    risk_tier: RiskTier
    settled_at: Optional[datetime] = None


@dataclass
class RentalEvaluation:
    """Everything the engine derives for one contract"""

    contract: RentalContract
    charges: ChargeBreakdown
    payments: PaymentTotal
    balance: BalanceResult
    last_payment_at: Optional[datetime] = None


@dataclass
class DailyRevenueSample:
    """Revenue share attributed to one calendar day of a rental"""

    day: date
    vehicle_id: str
    rental_id: str
    revenue_cents: float


@dataclass
class MonthlyRevenue:
    """Attributed revenue summed into one (vehicle, year, month) bucket"""

    vehicle_id: Optional[str]  # None for the all-vehicle total
    year: int
    month: int
    revenue_cents: float
    rental_days: int


@dataclass
class CustomerRiskProfile:
    """Aggregate payment behaviour across one customer's rental history"""

    customer_id: str
    contract_count: int
    total_billed_cents: int
    total_paid_cents: int
    current_debt_cents: int
    risk_score: int  # 0-100
    avg_payment_delay_days: Optional[float]  # None when no paid contract has a known settlement date
    critical_contracts: int
    last_payment_at: Optional[datetime] = None


@dataclass
class DebtorEntry:
    customer_id: str
    customer_name: str
    total_debt_cents: int
    open_rentals: int


@dataclass
class VehicleRevenueEntry:
    vehicle_id: str
    plate: str
    revenue_cents: int
    rental_count: int


@dataclass
class MonthlyCollection:
    """Billed amount for one month and how much of it has been collected"""

    year: int
    month: int
    billed_cents: float
    collected_cents: float  # billed × the rental's paid / due ratio
    outstanding_cents: float  # floored at zero per rental


@dataclass
class VehicleIncomeEntry:
    vehicle_id: str
    plate: str
    billed_cents: int
    collected_cents: float
    outstanding_cents: float
    rental_count: int


@dataclass
class DashboardStats:
    """Fleet status counts and the money figures for one month"""

    year: int
    month: int
    total_vehicles: int
    rented: int
    idle: int
    reserved: int
    service: int
    billed_cents: float
    collected_cents: float
    outstanding_cents: float
    vehicle_profit_cents: float  # attributed rate and distance revenue
