"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class MalformedContractError(DomainException):
    """Rental contract cannot be attributed (end date before start date)"""

    def __init__(self, rental_id: str, message: str):
        super().__init__(f"Rental {rental_id}: {message}")
        self.rental_id = rental_id


class SnapshotSourceError(DomainException):
    """Back-office data source returned an error or is unavailable"""

    pass


class InvalidMoneyError(DomainException):
    """Money amount cannot be normalized to minor units"""

    pass
