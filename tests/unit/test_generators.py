"""
Unit Tests - Synthetic Data
"""
from datetime import timedelta
from decimal import Decimal

import polars as pl
import pytest

from merchant_dashboard.analytics import TransactionStatus
from merchant_dashboard.data import TransactionGenerator


class TestTransactionGenerator:
    """Tests for TransactionGenerator"""

    def test_same_seed_same_output(self, now):
        """Test output is reproducible for a seed"""
        first = TransactionGenerator(seed=5).generate(30, now=now)
        second = TransactionGenerator(seed=5).generate(30, now=now)

        assert first == second

    def test_different_seed_differs(self, now):
        first = TransactionGenerator(seed=5).generate(30, now=now)
        second = TransactionGenerator(seed=6).generate(30, now=now)

        assert [tx.id for tx in first] != [tx.id for tx in second]

    def test_count_and_span(self, now):
        """Test timestamps fall within the requested days"""
        transactions = TransactionGenerator().generate(200, now=now, days=14)

        assert len(transactions) == 200
        assert all(now - timedelta(days=14) <= tx.created_at <= now for tx in transactions)

    def test_newest_first(self, generated_transactions):
        timestamps = [tx.created_at for tx in generated_transactions]

        assert timestamps == sorted(timestamps, reverse=True)

    def test_valid_records(self, generated_transactions):
        """Test generated values satisfy the record invariants"""
        assert len({tx.id for tx in generated_transactions}) == len(generated_transactions)
        assert all(isinstance(tx.status, TransactionStatus) for tx in generated_transactions)
        assert all(tx.amount >= 0 for tx in generated_transactions)
        assert all(tx.amount == tx.amount.quantize(Decimal("0.01")) for tx in generated_transactions)

    def test_mix_of_anonymous_and_repeat_customers(self, generated_transactions):
        anonymous = [tx for tx in generated_transactions if tx.is_anonymous]
        customers = {tx.customer_id for tx in generated_transactions if not tx.is_anonymous}

        assert 0 < len(anonymous) < len(generated_transactions)
        assert len(customers) < len(generated_transactions) - len(anonymous)

    def test_zero_count(self, now):
        assert TransactionGenerator().generate(0, now=now) == []

    def test_to_frame_schema(self, now):
        generator = TransactionGenerator(seed=1)
        df = generator.to_frame(generator.generate(5, now=now))

        assert df.columns == ["id", "customer_id", "amount", "status", "created_at"]
        assert all(dtype == pl.Utf8 for dtype in df.dtypes)
        assert df.height == 5

    def test_write_rejects_unknown_format(self, tmp_path, now):
        generator = TransactionGenerator(seed=1)

        with pytest.raises(ValueError, match="xml"):
            generator.write(generator.generate(2, now=now), tmp_path / "t.xml", "xml")
