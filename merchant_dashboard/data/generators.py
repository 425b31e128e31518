"""
Synthetic Data Generator

Generates realistic merchant transactions for demos, local development and
tests. Output is reproducible for a given seed and reference time.
"""

import random
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import numpy as np
import polars as pl
from faker import Faker

from merchant_dashboard.analytics.models import Transaction, TransactionStatus


# =============================================================================
# CONFIGURATION
# =============================================================================

STATUS_WEIGHTS = [
    (TransactionStatus.COMPLETED, 0.72),
    (TransactionStatus.PENDING, 0.12),
    (TransactionStatus.FAILED, 0.10),
    (TransactionStatus.CANCELLED, 0.06),
]

ANONYMOUS_RATE = 0.15

# Log-normal parameters giving a median ticket around $40
AMOUNT_MEAN = 3.7
AMOUNT_SIGMA = 0.8


# =============================================================================
# GENERATORS
# =============================================================================

class TransactionGenerator:
    """
    Generate merchant payment transactions.

    Example:
        generator = TransactionGenerator(seed=7)
        transactions = generator.generate(200, now=datetime.now(timezone.utc))
        generator.write(transactions, "data/transactions.csv")
    """

    def __init__(
        self,
        seed: int = 42,
        anonymous_rate: float = ANONYMOUS_RATE,
        customers_per_transaction: float = 0.35,
    ):
        self.seed = seed
        self.anonymous_rate = anonymous_rate
        self.customers_per_transaction = customers_per_transaction
        self._random = random.Random(seed)
        self._rng = np.random.default_rng(seed)
        self._fake = Faker()
        self._fake.seed_instance(seed)

    def _customer_pool(self, n: int) -> List[str]:
        size = max(1, int(n * self.customers_per_transaction))
        return [f"cus_{self._fake.uuid4().replace('-', '')[:16]}" for _ in range(size)]

    def _amount(self) -> Decimal:
        value = self._rng.lognormal(mean=AMOUNT_MEAN, sigma=AMOUNT_SIGMA)
        return Decimal(f"{value:.2f}")

    def generate(
        self,
        n: int,
        now: datetime,
        days: int = 21,
    ) -> List[Transaction]:
        """Generate n transactions spread over the days before now"""
        if n <= 0:
            return []

        customers = self._customer_pool(n)
        statuses = [s for s, _ in STATUS_WEIGHTS]
        weights = [w for _, w in STATUS_WEIGHTS]
        span_seconds = days * 24 * 60 * 60

        transactions = []
        for _ in range(n):
            offset = self._rng.uniform(0, span_seconds)
            customer_id = None
            if self._random.random() >= self.anonymous_rate:
                customer_id = self._random.choice(customers)

            transactions.append(Transaction(
                id=f"txn_{self._fake.uuid4().replace('-', '')}",
                customer_id=customer_id,
                amount=self._amount(),
                status=self._random.choices(statuses, weights=weights)[0],
                created_at=now - timedelta(seconds=float(offset)),
            ))

        transactions.sort(key=lambda tx: tx.created_at, reverse=True)
        return transactions

    @staticmethod
    def to_records(transactions: Sequence[Transaction]) -> List[Dict[str, Optional[str]]]:
        """Plain records in the transaction store's export layout"""
        return [
            {
                "id": tx.id,
                "customer_id": tx.customer_id,
                "amount": f"{tx.amount:.2f}",
                "status": tx.status.value,
                "created_at": tx.created_at.isoformat(),
            }
            for tx in transactions
        ]

    def to_frame(self, transactions: Sequence[Transaction]) -> pl.DataFrame:
        """Transactions as a DataFrame of text columns"""
        return pl.DataFrame(
            self.to_records(transactions),
            schema={
                "id": pl.Utf8,
                "customer_id": pl.Utf8,
                "amount": pl.Utf8,
                "status": pl.Utf8,
                "created_at": pl.Utf8,
            },
        )

    def write(
        self,
        transactions: Sequence[Transaction],
        path: Union[str, Path],
        file_format: str = "csv",
    ) -> Path:
        """Write transactions to a CSV, JSON, JSON Lines or Parquet file"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        df = self.to_frame(transactions)

        writers = {
            "csv": df.write_csv,
            "json": df.write_json,
            "jsonl": df.write_ndjson,
            "parquet": df.write_parquet,
        }
        writer = writers.get(file_format)
        if writer is None:
            raise ValueError(f"Unsupported file format: {file_format}")
        writer(path)
        return path
