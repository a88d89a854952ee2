"""SQLAlchemy ORM models mapping the back-office tables (read-only)

Money columns hold integer minor units (kuruş).
"""

from sqlalchemy import Column, String, BigInteger, Boolean, DateTime, Date, Integer, ForeignKey, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class CustomerRow(Base):
    __tablename__ = "customers"

    id = Column(String(64), primary_key=True)
    full_name = Column(Text, nullable=False)
    phone = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    rentals = relationship("RentalRow", back_populates="customer")


class VehicleRow(Base):
    __tablename__ = "vehicles"

    id = Column(String(64), primary_key=True)
    plate = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="IDLE")
    active = Column(Boolean, nullable=False, default=True)

    rentals = relationship("RentalRow", back_populates="vehicle")


class RentalRow(Base):
    """Rental contract with tariff fields and the five installment slots"""

    __tablename__ = "rentals"

    id = Column(String(64), primary_key=True)
    vehicle_id = Column(String(64), ForeignKey("vehicles.id"), nullable=False, index=True)
    customer_id = Column(String(64), ForeignKey("customers.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    days = Column(Integer, nullable=True)
    daily_price = Column(BigInteger, nullable=True)
    km_diff = Column(BigInteger, nullable=True)
    cleaning = Column(BigInteger, nullable=True)
    hgs = Column(BigInteger, nullable=True)  # road toll
    damage = Column(BigInteger, nullable=True)
    fuel = Column(BigInteger, nullable=True)
    upfront = Column(BigInteger, nullable=True)
    pay1 = Column(BigInteger, nullable=True)
    pay2 = Column(BigInteger, nullable=True)
    pay3 = Column(BigInteger, nullable=True)
    pay4 = Column(BigInteger, nullable=True)
    status = Column(Text, nullable=False, default="ACTIVE")
    note = Column(Text, nullable=True)
    deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    vehicle = relationship("VehicleRow", back_populates="rentals")
    customer = relationship("CustomerRow", back_populates="rentals")
    payments = relationship("PaymentRow", back_populates="rental", order_by="PaymentRow.paid_at")


class PaymentRow(Base):
    __tablename__ = "payments"

    id = Column(String(64), primary_key=True)
    rental_id = Column(String(64), ForeignKey("rentals.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(BigInteger, nullable=False)
    method = Column(Text, nullable=False)
    paid_at = Column(DateTime, nullable=False)

    rental = relationship("RentalRow", back_populates="payments")
