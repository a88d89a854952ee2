"""Dependency injection for FastAPI endpoints"""

import asyncio
from typing import Dict, Generator, Iterable, List, Optional
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from rental_ledger.config import settings
from rental_ledger.domain.models import Customer, RentalContract, Vehicle
from rental_ledger.infrastructure.clients.backoffice import BackOfficeClient
from rental_ledger.infrastructure.database.repositories import RentalRepository, DirectoryRepository
from rental_ledger.infrastructure.database.session import SessionLocal
from rental_ledger.infrastructure.observability.metrics import snapshot_size_histogram


class SnapshotSource:
    """Read-only snapshot of rentals, customers and vehicles"""

    async def list_rentals(
        self,
        customer_id: Optional[str] = None,
        vehicle_id: Optional[str] = None,
    ) -> List[RentalContract]:
        raise NotImplementedError

    async def get_rental(self, rental_id: str) -> Optional[RentalContract]:
        raise NotImplementedError

    async def get_customer(self, customer_id: str) -> Optional[Customer]:
        raise NotImplementedError

    async def customers_by_id(self, customer_ids: Optional[Iterable[str]] = None) -> Dict[str, Customer]:
        """Customer directory; `customer_ids` names the customers a report needs"""
        raise NotImplementedError

    async def list_vehicles(self) -> List[Vehicle]:
        raise NotImplementedError


class DatabaseSnapshotSource(SnapshotSource):
    """Snapshot read straight from the back-office tables"""

    def __init__(self, db: Session):
        self.rentals = RentalRepository(db)
        self.directory = DirectoryRepository(db)

    async def list_rentals(self, customer_id=None, vehicle_id=None):
        contracts = self.rentals.list_rentals(customer_id=customer_id, vehicle_id=vehicle_id)
        snapshot_size_histogram.observe(len(contracts))
        return contracts

    async def get_rental(self, rental_id):
        return self.rentals.get_rental(rental_id)

    async def get_customer(self, customer_id):
        return self.directory.get_customer(customer_id)

    async def customers_by_id(self, customer_ids=None):
        return self.directory.customers_by_id()

    async def list_vehicles(self):
        return self.directory.list_vehicles()


class BackOfficeSnapshotSource(SnapshotSource):
    """Snapshot fetched through the back-office REST API"""

    def __init__(self, client: BackOfficeClient):
        self.client = client

    async def list_rentals(self, customer_id=None, vehicle_id=None):
        contracts = [
            c
            for c in await self.client.fetch_rentals()
            if (customer_id is None or c.customer_id == customer_id)
            and (vehicle_id is None or c.vehicle_id == vehicle_id)
        ]
        snapshot_size_histogram.observe(len(contracts))
        return contracts

    async def get_rental(self, rental_id):
        return next((c for c in await self.client.fetch_rentals() if c.rental_id == rental_id), None)

    async def get_customer(self, customer_id):
        return await self.client.fetch_customer(customer_id)

    async def customers_by_id(self, customer_ids=None):
        customers = {c.customer_id: c for c in await self.client.fetch_customers()}

        # The directory listing can be capped; look up whoever it left out
        missing = sorted(set(customer_ids or ()) - set(customers))
        for customer in await asyncio.gather(*(self.client.fetch_customer(cid) for cid in missing)):
            if customer is not None:
                customers[customer.customer_id] = customer
        return customers

    async def list_vehicles(self):
        return await self.client.fetch_vehicles()


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_backoffice_client() -> BackOfficeClient:
    """Provide back-office API client instance"""
    return BackOfficeClient()


def get_snapshot_source(
    client: BackOfficeClient = Depends(get_backoffice_client),
) -> Generator[SnapshotSource, None, None]:
    """
    Pick the configured snapshot source.

    A database session is opened only when reading from the database and is
    closed once the response is sent.
    """
    if settings.snapshot_source == "backoffice":
        yield BackOfficeSnapshotSource(client)
        return

    db = SessionLocal()
    try:
        yield DatabaseSnapshotSource(db)
    finally:
        db.close()
