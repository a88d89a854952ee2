"""Back-office REST API client for fetching rental snapshots"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import httpx
from rental_ledger.domain.models import (
    Customer,
    PaymentMethod,
    PaymentRecord,
    RentalContract,
    RentalStatus,
    Vehicle,
    VehicleStatus,
)
from rental_ledger.domain.money import CurrencyUnit, Money
from rental_ledger.domain.exceptions import SnapshotSourceError, InvalidMoneyError
from rental_ledger.utils.date_utils import to_naive_utc
from rental_ledger.config import settings

logger = logging.getLogger(__name__)

MONEY_FIELDS = {
    "daily_rate_cents": "dailyPrice",
    "km_fee_cents": "kmDiff",
    "cleaning_fee_cents": "cleaning",
    "toll_fee_cents": "hgs",
    "damage_fee_cents": "damage",
    "fuel_fee_cents": "fuel",
    "upfront_cents": "upfront",
    "pay1_cents": "pay1",
    "pay2_cents": "pay2",
    "pay3_cents": "pay3",
    "pay4_cents": "pay4",
}


def _parse_datetime(value: str) -> datetime:
    # fromisoformat only accepts a trailing "Z" from Python 3.11
    return to_naive_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def _parse_date(value: str) -> date:
    return _parse_datetime(value).date() if "T" in value else date.fromisoformat(value)


def _items(payload: Any) -> List[Dict[str, Any]]:
    """Endpoints answer either a bare list or {"data": [...]}"""
    if isinstance(payload, list):
        return payload
    return payload.get("data", [])


class BackOfficeClient:
    """Client for the back-office REST API (read-only)"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        page_size: int | None = None,
        currency_unit: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.backoffice_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.page_size = page_size or settings.backoffice_page_size
        self.currency_unit = CurrencyUnit(currency_unit or settings.backoffice_currency_unit)
        self.transport = transport

    def _money(self, raw: Any) -> Optional[int]:
        if raw is None:
            return None
        return Money(raw, self.currency_unit).to_minor()

    def _parse_payment(self, raw: Dict[str, Any], rental_id: str) -> PaymentRecord:
        return PaymentRecord(
            payment_id=raw["id"],
            rental_id=raw.get("rentalId", rental_id),
            amount_cents=self._money(raw.get("amount")),
            method=PaymentMethod(raw["method"]),
            paid_at=_parse_datetime(raw["paidAt"]),
        )

    def parse_rental(self, raw: Dict[str, Any]) -> RentalContract:
        """Map one API rental onto a RentalContract, normalizing money once"""
        rental_id = raw["id"]
        money = {field: self._money(raw.get(key)) for field, key in MONEY_FIELDS.items()}
        created_at = raw.get("createdAt")

        return RentalContract(
            rental_id=rental_id,
            vehicle_id=raw["vehicleId"],
            customer_id=raw["customerId"],
            start_date=_parse_date(raw["startDate"]),
            end_date=_parse_date(raw["endDate"]),
            days=raw.get("days"),
            status=RentalStatus(raw.get("status", RentalStatus.ACTIVE.value)),
            note=raw.get("note"),
            created_at=_parse_datetime(created_at) if created_at else None,
            payments=tuple(self._parse_payment(p, rental_id) for p in raw.get("payments") or []),
            **money,
        )

    async def _get(
        self,
        client: httpx.AsyncClient,
        path: str,
        params: Dict[str, Any] | None = None,
        allow_missing: bool = False,
    ) -> Any:
        try:
            response = await client.get(f"{self.base_url}{path}", params=params)
            if allow_missing and response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            raise SnapshotSourceError(f"Back-office API timeout after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise SnapshotSourceError(f"Back-office API error: {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise SnapshotSourceError(f"Back-office API unreachable: {e}") from e
        except ValueError as e:
            raise SnapshotSourceError(f"Invalid JSON from back office: {e}") from e

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def fetch_rentals(self, **filters: Any) -> List[RentalContract]:
        """
        Fetch every non-deleted rental, page by page.

        Raises:
            SnapshotSourceError: On timeout, HTTP errors, or invalid rental data
        """
        rentals: List[RentalContract] = []
        page = 1
        async with self._client() as client:
            while True:
                payload = await self._get(client, "/rentals", {"page": page, "limit": self.page_size, **filters})
                try:
                    rentals.extend(self.parse_rental(raw) for raw in _items(payload))
                except (KeyError, ValueError, TypeError, InvalidMoneyError) as e:
                    raise SnapshotSourceError(f"Invalid rental data from back office: {e}") from e

                pages = payload.get("pagination", {}).get("pages", 1) if isinstance(payload, dict) else 1
                if page >= pages:
                    break
                page += 1

        logger.debug("Fetched rental snapshot", extra={"contracts": len(rentals), "pages": page})
        return rentals

    def _parse_customer(self, raw: Dict[str, Any]) -> Customer:
        try:
            return Customer(customer_id=raw["id"], full_name=raw["fullName"], phone=raw.get("phone"))
        except (KeyError, TypeError) as e:
            raise SnapshotSourceError(f"Invalid customer data from back office: {e}") from e

    async def fetch_customer(self, customer_id: str) -> Optional[Customer]:
        """
        Fetch one customer by id.

        Returns:
            The customer, or None when the back office answers 404
        """
        async with self._client() as client:
            payload = await self._get(client, f"/customers/{customer_id}", allow_missing=True)
        if payload is None:
            return None
        raw = payload.get("data", payload) if isinstance(payload, dict) else payload
        return self._parse_customer(raw)

    async def fetch_customers(self) -> List[Customer]:
        """
        Fetch the customer directory, page by page.

        Stops on a short page, on the last page the pagination block reports,
        or when a page brings no customer not already seen.
        """
        customers: Dict[str, Customer] = {}
        page = 1
        async with self._client() as client:
            while True:
                payload = await self._get(client, "/customers", {"page": page, "limit": self.page_size})
                items = _items(payload)
                seen = len(customers)
                for raw in items:
                    customer = self._parse_customer(raw)
                    customers[customer.customer_id] = customer

                pages = payload.get("pagination", {}).get("pages") if isinstance(payload, dict) else None
                if len(items) < self.page_size or len(customers) == seen or (pages is not None and page >= pages):
                    break
                page += 1

        logger.debug("Fetched customer directory", extra={"customers": len(customers), "pages": page})
        return list(customers.values())

    async def fetch_vehicles(self) -> List[Vehicle]:
        async with self._client() as client:
            payload = await self._get(client, "/vehicles")
        try:
            return [
                Vehicle(
                    vehicle_id=raw["id"],
                    plate=raw["plate"],
                    status=VehicleStatus(raw.get("status", VehicleStatus.IDLE.value)),
                    name=raw.get("name"),
                )
                for raw in _items(payload)
                if raw.get("active", True)
            ]
        except (KeyError, ValueError, TypeError) as e:
            raise SnapshotSourceError(f"Invalid vehicle data from back office: {e}") from e
