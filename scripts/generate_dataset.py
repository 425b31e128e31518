"""
Transaction Dataset Generator

Writes a synthetic transaction export that the file source can serve.

Usage:
    python scripts/generate_dataset.py --count 500 --format csv --output data/transactions.csv
"""

import argparse
from datetime import datetime

from merchant_dashboard.analytics import aggregate
from merchant_dashboard.config import get_settings
from merchant_dashboard.data import TransactionGenerator


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Generate synthetic merchant transactions")
    parser.add_argument("--count", type=int, default=500, help="Number of transactions")
    parser.add_argument("--days", type=int, default=21, help="Days of history to cover")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--format", default="csv", choices=["csv", "json", "jsonl", "parquet"])
    parser.add_argument("--output", default=settings.transactions.path, help="Output file")
    args = parser.parse_args()

    now = datetime.now(settings.analytics.tzinfo)
    generator = TransactionGenerator(seed=args.seed)
    transactions = generator.generate(args.count, now=now, days=args.days)
    path = generator.write(transactions, args.output, file_format=args.format)

    stats = aggregate(transactions, now=now).stats
    print(f"Generated {len(transactions):,} transactions -> {path}")
    print(f"   completed={stats.completed} pending={stats.pending} "
          f"failed={stats.failed} cancelled={stats.cancelled} revenue={stats.total_amount}")


if __name__ == "__main__":
    main()
