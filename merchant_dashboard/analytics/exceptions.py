"""
Data integrity errors raised while reading or aggregating transactions.

These are never mapped to zero values: a dashboard built over bad records
must fail loudly so callers can tell "no activity" from "corrupt data".
"""

from typing import Any, Optional


class DataIntegrityError(Exception):
    """Base class for malformed transaction records"""

    error_code = "data_integrity_error"

    def __init__(
        self,
        message: str,
        transaction_id: Optional[str] = None,
        value: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.transaction_id = transaction_id
        self.value = value

    def to_dict(self) -> dict:
        return {
            "error": self.error_code,
            "message": self.message,
            "transaction_id": self.transaction_id,
        }


class InvalidStatus(DataIntegrityError):
    """Status outside completed, pending, failed, cancelled"""

    error_code = "invalid_status"


class MalformedTimestamp(DataIntegrityError):
    """created_at cannot be parsed or truncated to a calendar day"""

    error_code = "malformed_timestamp"


class InvalidAmount(DataIntegrityError):
    """Amount missing, non-numeric or negative"""

    error_code = "invalid_amount"
