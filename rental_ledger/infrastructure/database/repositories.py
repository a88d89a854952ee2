"""Data access layer: load back-office rows as frozen domain snapshots"""

from typing import Dict, List, Optional
from sqlalchemy.orm import Session, selectinload
from rental_ledger.infrastructure.database.models import CustomerRow, VehicleRow, RentalRow, PaymentRow
from rental_ledger.domain.models import (
    Customer,
    PaymentMethod,
    PaymentRecord,
    RentalContract,
    RentalStatus,
    Vehicle,
    VehicleStatus,
)
from rental_ledger.domain.money import Money
from rental_ledger.utils.date_utils import to_naive_utc


def _minor(value: Optional[int]) -> Optional[int]:
    """Columns are already kuruş; None stays None for the engine to zero"""
    return None if value is None else Money.minor(value).to_minor()


def payment_from_row(row: PaymentRow) -> PaymentRecord:
    return PaymentRecord(
        payment_id=row.id,
        rental_id=row.rental_id,
        amount_cents=_minor(row.amount),
        method=PaymentMethod(row.method),
        paid_at=to_naive_utc(row.paid_at),
    )


def rental_from_row(row: RentalRow) -> RentalContract:
    """Map a rental row and its payment rows onto a RentalContract"""
    return RentalContract(
        rental_id=row.id,
        vehicle_id=row.vehicle_id,
        customer_id=row.customer_id,
        start_date=row.start_date,
        end_date=row.end_date,
        days=row.days,
        daily_rate_cents=_minor(row.daily_price),
        km_fee_cents=_minor(row.km_diff),
        cleaning_fee_cents=_minor(row.cleaning),
        toll_fee_cents=_minor(row.hgs),
        damage_fee_cents=_minor(row.damage),
        fuel_fee_cents=_minor(row.fuel),
        upfront_cents=_minor(row.upfront),
        pay1_cents=_minor(row.pay1),
        pay2_cents=_minor(row.pay2),
        pay3_cents=_minor(row.pay3),
        pay4_cents=_minor(row.pay4),
        status=RentalStatus(row.status),
        note=row.note,
        created_at=to_naive_utc(row.created_at) if row.created_at else None,
        payments=tuple(payment_from_row(p) for p in row.payments),
    )


class RentalRepository:
    """Read-only repository for rentals and their payments"""

    def __init__(self, db: Session):
        self.db = db

    def get_rental(self, rental_id: str) -> Optional[RentalContract]:
        """Fetch one non-deleted rental with payments"""
        row = (
            self.db.query(RentalRow)
            .options(selectinload(RentalRow.payments))
            .filter(RentalRow.id == rental_id, RentalRow.deleted.is_(False))
            .first()
        )
        return rental_from_row(row) if row else None

    def list_rentals(
        self,
        customer_id: Optional[str] = None,
        vehicle_id: Optional[str] = None,
    ) -> List[RentalContract]:
        """Fetch all non-deleted rentals, optionally for one customer or vehicle"""
        query = (
            self.db.query(RentalRow)
            .options(selectinload(RentalRow.payments))
            .filter(RentalRow.deleted.is_(False))
        )
        if customer_id is not None:
            query = query.filter(RentalRow.customer_id == customer_id)
        if vehicle_id is not None:
            query = query.filter(RentalRow.vehicle_id == vehicle_id)

        return [rental_from_row(row) for row in query.order_by(RentalRow.start_date).all()]


class DirectoryRepository:
    """Read-only repository for customers and vehicles used to enrich reports"""

    def __init__(self, db: Session):
        self.db = db

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        row = self.db.query(CustomerRow).filter(CustomerRow.id == customer_id).first()
        if not row:
            return None
        return Customer(customer_id=row.id, full_name=row.full_name, phone=row.phone)

    def customers_by_id(self) -> Dict[str, Customer]:
        return {
            row.id: Customer(customer_id=row.id, full_name=row.full_name, phone=row.phone)
            for row in self.db.query(CustomerRow).all()
        }

    def list_vehicles(self) -> List[Vehicle]:
        """Active vehicles only"""
        return [
            Vehicle(vehicle_id=row.id, plate=row.plate, status=VehicleStatus(row.status), name=row.name)
            for row in self.db.query(VehicleRow).filter(VehicleRow.active.is_(True)).order_by(VehicleRow.plate).all()
        ]
