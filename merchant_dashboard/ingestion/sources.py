"""
Transaction Sources

Implementations of the transaction store interface the dashboard reads
from. A source returns a bounded snapshot, newest first; it never
aggregates.

Supports:
- In-memory snapshots (tests, demo data)
- CSV, JSON, JSON Lines and Parquet files read with Polars
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Union

import polars as pl
import structlog

from merchant_dashboard.analytics.models import Transaction, TransactionStatus
from merchant_dashboard.analytics.windows import align_to
from merchant_dashboard.config import get_settings
from merchant_dashboard.config.settings import Settings
from merchant_dashboard.data.generators import TransactionGenerator
from merchant_dashboard.quality.validators import (
    DataValidator,
    ValidationStatus,
    create_transactions_validator,
)
from .parsers import parse_transactions

logger = structlog.get_logger(__name__)


class FileFormat(str, Enum):
    """Supported file formats"""
    CSV = "csv"
    JSON = "json"
    JSONL = "jsonl"
    PARQUET = "parquet"


class TransactionSourceError(Exception):
    """The transaction store could not be read"""


@dataclass(frozen=True)
class TransactionFilter:
    """Query passed to a transaction source"""
    limit: int = 100
    since: Optional[datetime] = None
    statuses: Optional[FrozenSet[TransactionStatus]] = None
    customer_id: Optional[str] = None

    def __post_init__(self):
        if self.limit < 1:
            raise ValueError(f"limit must be at least 1, got {self.limit}")

    def matches(self, tx: Transaction) -> bool:
        if self.since is not None and align_to(tx.created_at, self.since) < self.since:
            return False
        if self.statuses is not None and tx.status not in self.statuses:
            return False
        if self.customer_id is not None and tx.customer_id != self.customer_id:
            return False
        return True


def _sort_key(tx: Transaction, reference: datetime) -> datetime:
    # Naive timestamps are read in the reference zone, as the aggregator does
    return align_to(tx.created_at, reference)


def apply_filter(
    transactions: Iterable[Transaction],
    query: Optional[TransactionFilter] = None,
    tz: Optional[tzinfo] = None,
) -> List[Transaction]:
    """Newest-first, filtered and limited snapshot; naive timestamps are taken to be in tz"""
    query = query or TransactionFilter()
    reference = datetime.now(tz or timezone.utc)
    matching = [tx for tx in transactions if query.matches(tx)]
    matching.sort(key=lambda tx: _sort_key(tx, reference), reverse=True)
    return matching[:query.limit]


class TransactionSource(ABC):
    """Read access to the merchant's transaction store"""

    name: str = "transactions"

    @abstractmethod
    async def list_transactions(
        self,
        query: Optional[TransactionFilter] = None,
    ) -> List[Transaction]:
        """Return a bounded snapshot of recent transactions, newest first"""

    async def health_check(self) -> Dict[str, Any]:
        return {"status": "healthy", "source": self.name}


class InMemoryTransactionSource(TransactionSource):
    """Transaction source over an in-memory list"""

    name = "memory"

    def __init__(
        self,
        transactions: Optional[Iterable[Transaction]] = None,
        tz: Optional[tzinfo] = None,
    ):
        self._transactions: List[Transaction] = list(transactions or [])
        self.tz = tz

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        tz: Optional[tzinfo] = None,
    ) -> "InMemoryTransactionSource":
        return cls(parse_transactions(records), tz=tz)

    def add(self, transaction: Transaction) -> None:
        self._transactions.append(transaction)

    def __len__(self) -> int:
        return len(self._transactions)

    async def list_transactions(
        self,
        query: Optional[TransactionFilter] = None,
    ) -> List[Transaction]:
        return apply_filter(self._transactions, query, tz=self.tz)

    async def health_check(self) -> Dict[str, Any]:
        return {"status": "healthy", "source": self.name, "transactions": len(self._transactions)}


class FileTransactionSource(TransactionSource):
    """
    Transaction source backed by an exported file.

    The file is re-read on every call; each dashboard request works on a
    fresh snapshot.

    Example:
        source = FileTransactionSource("data/transactions.csv", FileFormat.CSV)
        transactions = await source.list_transactions(TransactionFilter(limit=100))
    """

    name = "file"

    def __init__(
        self,
        path: Union[str, Path],
        file_format: Union[FileFormat, str] = FileFormat.CSV,
        validate: bool = True,
        validator: Optional[DataValidator] = None,
        tz: Optional[tzinfo] = None,
    ):
        self.path = Path(path)
        self.tz = tz
        self.file_format = FileFormat(file_format)
        self.validate = validate
        self.validator = validator or create_transactions_validator()

    def _read_csv(self) -> pl.DataFrame:
        # All columns as text so amounts keep their exact decimal digits
        return pl.read_csv(self.path, infer_schema_length=0, null_values=[""])

    def _read_json(self) -> pl.DataFrame:
        return pl.read_json(self.path)

    def _read_jsonl(self) -> pl.DataFrame:
        return pl.read_ndjson(self.path)

    def _read_parquet(self) -> pl.DataFrame:
        return pl.read_parquet(self.path)

    def read_frame(self) -> pl.DataFrame:
        """Read the raw file into a DataFrame"""
        readers = {
            FileFormat.CSV: self._read_csv,
            FileFormat.JSON: self._read_json,
            FileFormat.JSONL: self._read_jsonl,
            FileFormat.PARQUET: self._read_parquet,
        }
        try:
            return readers[self.file_format]()
        except pl.exceptions.NoDataError:
            return pl.DataFrame()
        except (OSError, pl.exceptions.PolarsError) as e:
            raise TransactionSourceError(f"Failed to read {self.path}: {e}") from e

    async def list_transactions(
        self,
        query: Optional[TransactionFilter] = None,
    ) -> List[Transaction]:
        df = self.read_frame()
        logger.debug("Read transactions file", path=str(self.path), rows=len(df))

        if df.is_empty():
            return []

        if self.validate:
            result = self.validator.validate(df)
            if result.status == ValidationStatus.FAILED:
                logger.error(
                    "Transactions file failed validation",
                    path=str(self.path),
                    failed_checks=[c.name for c in result.failures],
                )

        return apply_filter(parse_transactions(df.to_dicts()), query, tz=self.tz)

    async def health_check(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {"status": "unhealthy", "source": self.name, "error": f"{self.path} not found"}
        return {"status": "healthy", "source": self.name, "path": str(self.path)}


def create_transaction_source(
    settings: Optional[Settings] = None,
    now: Optional[datetime] = None,
) -> TransactionSource:
    """Build the transaction source selected in settings"""
    settings = settings or get_settings()
    config = settings.transactions

    if config.backend == "file":
        logger.info("Using file transaction source", path=config.path, format=config.file_format)
        return FileTransactionSource(
            config.path,
            file_format=config.file_format,
            validate=config.validate_on_load,
            tz=settings.analytics.tzinfo,
        )

    now = now or datetime.now(settings.analytics.tzinfo)
    generator = TransactionGenerator(seed=config.demo_seed)
    transactions = generator.generate(config.demo_size, now=now, days=config.demo_days)
    logger.info("Using demo transaction source", transactions=len(transactions), seed=config.demo_seed)
    return InMemoryTransactionSource(transactions, tz=settings.analytics.tzinfo)
