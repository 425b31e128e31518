"""
Transaction Ingestion Module
"""
from .parsers import parse_amount, parse_status, parse_transaction, parse_transactions
from .sources import (
    FileFormat,
    FileTransactionSource,
    InMemoryTransactionSource,
    TransactionFilter,
    TransactionSource,
    TransactionSourceError,
    apply_filter,
    create_transaction_source,
)

__all__ = [
    "parse_amount",
    "parse_status",
    "parse_transaction",
    "parse_transactions",
    "FileFormat",
    "FileTransactionSource",
    "InMemoryTransactionSource",
    "TransactionFilter",
    "TransactionSource",
    "TransactionSourceError",
    "apply_filter",
    "create_transaction_source",
]
