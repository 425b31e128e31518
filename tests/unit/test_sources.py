"""
Unit Tests - Transaction Sources
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from merchant_dashboard.analytics import InvalidStatus, TransactionStatus
from merchant_dashboard.config import Settings
from merchant_dashboard.config.settings import AnalyticsSettings, TransactionSourceSettings
from merchant_dashboard.data import TransactionGenerator
from merchant_dashboard.ingestion import (
    FileTransactionSource,
    InMemoryTransactionSource,
    TransactionFilter,
    TransactionSourceError,
    create_transaction_source,
)


class TestTransactionFilter:
    """Tests for TransactionFilter"""

    def test_rejects_non_positive_limit(self):
        with pytest.raises(ValueError):
            TransactionFilter(limit=0)

    def test_default_limit(self):
        assert TransactionFilter().limit == 100


class TestInMemorySource:
    """Tests for InMemoryTransactionSource"""

    @pytest.mark.asyncio
    async def test_newest_first(self, make_tx, days_ago):
        source = InMemoryTransactionSource([
            make_tx(id="old", created_at=days_ago(3)),
            make_tx(id="new", created_at=days_ago(0)),
            make_tx(id="mid", created_at=days_ago(1)),
        ])

        result = await source.list_transactions()

        assert [tx.id for tx in result] == ["new", "mid", "old"]

    @pytest.mark.asyncio
    async def test_limit_keeps_most_recent(self, make_tx, days_ago):
        source = InMemoryTransactionSource(
            [make_tx(id=f"t{i}", created_at=days_ago(i)) for i in range(10)]
        )

        result = await source.list_transactions(TransactionFilter(limit=3))

        assert [tx.id for tx in result] == ["t0", "t1", "t2"]

    @pytest.mark.asyncio
    async def test_filters(self, make_tx, days_ago, now):
        source = InMemoryTransactionSource([
            make_tx(id="a", status="completed", customer_id="cus_1", created_at=days_ago(1)),
            make_tx(id="b", status="failed", customer_id="cus_1", created_at=days_ago(2)),
            make_tx(id="c", status="completed", customer_id="cus_2", created_at=days_ago(10)),
        ])

        since = await source.list_transactions(TransactionFilter(since=now - timedelta(days=5)))
        completed = await source.list_transactions(
            TransactionFilter(statuses=frozenset({TransactionStatus.COMPLETED}))
        )
        customer = await source.list_transactions(TransactionFilter(customer_id="cus_2"))

        assert [tx.id for tx in since] == ["a", "b"]
        assert [tx.id for tx in completed] == ["a", "c"]
        assert [tx.id for tx in customer] == ["c"]

    @pytest.mark.asyncio
    async def test_from_records_and_add(self, make_tx):
        source = InMemoryTransactionSource.from_records([{
            "id": "r1",
            "amount": "3.50",
            "status": "Pending",
            "created_at": "2026-10-15T10:00:00Z",
        }])
        source.add(make_tx(id="r2"))

        result = await source.list_transactions()

        assert len(source) == 2
        assert {tx.id for tx in result} == {"r1", "r2"}

    @pytest.mark.asyncio
    async def test_naive_timestamps_read_in_source_zone(self, make_tx):
        """A naive 10:00 in New York is 14:00 UTC, newer than 12:00 UTC"""
        new_york = ZoneInfo("America/New_York")
        source = InMemoryTransactionSource(
            [
                make_tx(id="aware", created_at=datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)),
                make_tx(id="naive", created_at=datetime(2026, 10, 17, 10, 0)),
            ],
            tz=new_york,
        )

        result = await source.list_transactions()
        limited = await source.list_transactions(TransactionFilter(limit=1))

        assert [tx.id for tx in result] == ["naive", "aware"]
        assert [tx.id for tx in limited] == ["naive"]

    @pytest.mark.asyncio
    async def test_naive_timestamps_default_to_utc(self, make_tx):
        source = InMemoryTransactionSource([
            make_tx(id="aware", created_at=datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)),
            make_tx(id="naive", created_at=datetime(2026, 10, 17, 10, 0)),
        ])

        result = await source.list_transactions()

        assert [tx.id for tx in result] == ["aware", "naive"]

    @pytest.mark.asyncio
    async def test_health_check(self):
        health = await InMemoryTransactionSource().health_check()

        assert health["status"] == "healthy"
        assert health["transactions"] == 0


class TestFileSource:
    """Tests for FileTransactionSource"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("file_format", ["csv", "json", "jsonl", "parquet"])
    async def test_round_trip(self, tmp_path, now, file_format):
        generator = TransactionGenerator(seed=3)
        transactions = generator.generate(25, now=now, days=10)
        path = generator.write(transactions, tmp_path / f"transactions.{file_format}", file_format)

        source = FileTransactionSource(path, file_format=file_format)
        result = await source.list_transactions(TransactionFilter(limit=100))

        assert [tx.id for tx in result] == [tx.id for tx in transactions]
        assert [tx.amount for tx in result] == [tx.amount for tx in transactions]
        assert [tx.customer_id for tx in result] == [tx.customer_id for tx in transactions]
        assert [tx.status for tx in result] == [tx.status for tx in transactions]

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        source = FileTransactionSource(tmp_path / "missing.csv")

        with pytest.raises(TransactionSourceError):
            await source.list_transactions()

        health = await source.health_check()
        assert health["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_empty_csv(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")

        result = await FileTransactionSource(path).list_transactions()

        assert result == []

    @pytest.mark.asyncio
    async def test_invalid_status_raises(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text(
            "id,customer_id,amount,status,created_at\n"
            "t1,cus_1,10.00,completed,2026-10-16T10:00:00+00:00\n"
            "t2,cus_2,5.00,refunded,2026-10-16T11:00:00+00:00\n"
        )

        with pytest.raises(InvalidStatus) as exc_info:
            await FileTransactionSource(path).list_transactions()

        assert exc_info.value.transaction_id == "t2"

    @pytest.mark.asyncio
    async def test_csv_amounts_keep_decimal_digits(self, tmp_path):
        path = tmp_path / "amounts.csv"
        path.write_text(
            "id,customer_id,amount,status,created_at\n"
            "t1,,0.10,completed,2026-10-16T10:00:00Z\n"
            "t2,,0.20,completed,2026-10-16T11:00:00Z\n"
        )

        result = await FileTransactionSource(path).list_transactions()

        assert sum(tx.amount for tx in result) == Decimal("0.30")
        assert all(tx.customer_id is None for tx in result)

    @pytest.mark.asyncio
    async def test_health_check_existing_file(self, tmp_path):
        path = tmp_path / "t.csv"
        path.write_text("id\n")

        health = await FileTransactionSource(path).health_check()

        assert health["status"] == "healthy"


class TestCreateTransactionSource:
    """Tests for create_transaction_source"""

    @pytest.mark.asyncio
    async def test_demo_backend(self, now):
        settings = Settings(
            app_env="testing",
            transactions=TransactionSourceSettings(backend="demo", demo_size=20),
        )

        source = create_transaction_source(settings, now=now)
        result = await source.list_transactions()

        assert isinstance(source, InMemoryTransactionSource)
        assert len(result) == 20

    def test_file_backend(self, tmp_path):
        settings = Settings(
            app_env="testing",
            transactions=TransactionSourceSettings(
                backend="file",
                path=str(tmp_path / "t.jsonl"),
                file_format="jsonl",
            ),
        )

        source = create_transaction_source(settings)

        assert isinstance(source, FileTransactionSource)
        assert source.file_format.value == "jsonl"

    def test_sources_use_configured_zone(self, tmp_path, now):
        analytics = AnalyticsSettings(timezone="Asia/Tokyo")
        demo = Settings(
            app_env="testing",
            analytics=analytics,
            transactions=TransactionSourceSettings(backend="demo", demo_size=1),
        )
        file = Settings(
            app_env="testing",
            analytics=analytics,
            transactions=TransactionSourceSettings(backend="file", path=str(tmp_path / "t.csv")),
        )

        assert create_transaction_source(demo, now=now).tz == ZoneInfo("Asia/Tokyo")
        assert create_transaction_source(file).tz == ZoneInfo("Asia/Tokyo")
