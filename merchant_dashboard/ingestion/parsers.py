"""
Transaction Record Parser

Converts raw records from the transaction store (JSON payloads, file rows)
into Transaction values. Every rejection raises a DataIntegrityError subclass
naming the offending record.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional

from merchant_dashboard.analytics.exceptions import DataIntegrityError, InvalidAmount
from merchant_dashboard.analytics.models import Transaction, TransactionStatus
from merchant_dashboard.analytics.windows import parse_timestamp


def _clean_optional(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_amount(value: Any, transaction_id: Optional[str] = None) -> Decimal:
    """Parse a non-negative monetary amount"""
    if isinstance(value, bool) or value is None:
        raise InvalidAmount(f"Invalid amount: {value!r}", transaction_id=transaction_id, value=value)

    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidAmount(f"Invalid amount: {value!r}", transaction_id=transaction_id, value=value)

    if not amount.is_finite() or amount < 0:
        raise InvalidAmount(f"Invalid amount: {value!r}", transaction_id=transaction_id, value=value)
    return amount


def parse_status(value: Any, transaction_id: Optional[str] = None) -> TransactionStatus:
    """Parse a status, tolerating case and surrounding whitespace"""
    if isinstance(value, str):
        value = value.strip().lower()
    return TransactionStatus.parse(value, transaction_id=transaction_id)


def parse_transaction(record: Mapping[str, Any]) -> Transaction:
    """
    Build a Transaction from a raw record.

    Raises:
        DataIntegrityError: missing id
        InvalidAmount: amount missing, non-numeric or negative
        InvalidStatus: status outside the known enumeration
        MalformedTimestamp: created_at cannot be parsed
    """
    transaction_id = _clean_optional(record.get("id"))
    if transaction_id is None:
        raise DataIntegrityError("Transaction record has no id", value=dict(record))

    created_at: datetime = parse_timestamp(record.get("created_at"), transaction_id)

    return Transaction(
        id=transaction_id,
        customer_id=_clean_optional(record.get("customer_id")),
        amount=parse_amount(record.get("amount"), transaction_id),
        status=parse_status(record.get("status"), transaction_id),
        created_at=created_at,
    )


def parse_transactions(records: Iterable[Mapping[str, Any]]) -> List[Transaction]:
    """Parse every record, stopping at the first bad one"""
    return [parse_transaction(record) for record in records]
