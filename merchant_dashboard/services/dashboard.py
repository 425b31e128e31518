"""
Dashboard Service

Builds the merchant home dashboard: fetches a bounded transaction snapshot,
runs the analytics aggregation over it and bundles the result with the
latest transactions and the greeting name.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Tuple

import structlog

from merchant_dashboard.analytics import DashboardMetrics, Transaction, aggregate
from merchant_dashboard.config import get_settings
from merchant_dashboard.config.settings import AnalyticsSettings
from merchant_dashboard.ingestion.sources import TransactionFilter, TransactionSource

logger = structlog.get_logger(__name__)

DEFAULT_DISPLAY_NAME = "there"


@dataclass(frozen=True)
class CurrentUser:
    """Signed-in merchant as reported by the identity provider"""
    id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class DashboardSnapshot:
    """Immutable result handed to presentation"""
    generated_at: datetime
    display_name: str
    metrics: DashboardMetrics
    recent_transactions: Tuple[Transaction, ...]


class ProfileDirectory(ABC):
    """Read access to merchant profiles"""

    @abstractmethod
    async def get_display_name(self, user_id: str) -> Optional[str]:
        """Profile display name, or None when unset"""


class InMemoryProfileDirectory(ProfileDirectory):
    """Profile directory over a dict of user id to display name"""

    def __init__(self, display_names: Optional[Dict[str, str]] = None):
        self._display_names = dict(display_names or {})

    def set_display_name(self, user_id: str, display_name: str) -> None:
        self._display_names[user_id] = display_name

    async def get_display_name(self, user_id: str) -> Optional[str]:
        return self._display_names.get(user_id)


def resolve_display_name(display_name: Optional[str], email: Optional[str]) -> str:
    """Profile name, else the email's local part, else a generic greeting"""
    if display_name and display_name.strip():
        return display_name.strip()
    if email and "@" in email:
        local_part = email.split("@", 1)[0].strip()
        if local_part:
            return local_part
    return DEFAULT_DISPLAY_NAME


class DashboardService:
    """
    Assembles dashboard snapshots.

    Every call fetches a fresh snapshot from the transaction source and
    recomputes all metrics; nothing is cached between calls.

    Example:
        service = DashboardService(source, profiles)
        snapshot = await service.build(user, now=datetime.now(timezone.utc))
    """

    def __init__(
        self,
        source: TransactionSource,
        profiles: Optional[ProfileDirectory] = None,
        config: Optional[AnalyticsSettings] = None,
    ):
        self.source = source
        self.profiles = profiles or InMemoryProfileDirectory()
        self.config = config or get_settings().analytics

    async def display_name_for(self, user: CurrentUser) -> str:
        display_name = await self.profiles.get_display_name(user.id)
        return resolve_display_name(display_name, user.email)

    async def build(self, user: CurrentUser, now: datetime) -> DashboardSnapshot:
        """
        Build the dashboard for a user as of now.

        Raises:
            DataIntegrityError: the snapshot contains a malformed record
            TransactionSourceError: the transaction store could not be read
        """
        log = logger.bind(user_id=user.id)
        started = time.perf_counter()

        display_name = await self.display_name_for(user)
        transactions = await self.source.list_transactions(
            TransactionFilter(limit=self.config.snapshot_limit)
        )
        fetch_ms = (time.perf_counter() - started) * 1000

        metrics = aggregate(
            transactions,
            now=now,
            window_days=self.config.window_days,
            period_days=self.config.comparison_days,
        )

        log.info(
            "Dashboard built",
            transactions=len(transactions),
            fetch_ms=round(fetch_ms, 2),
            total_ms=round((time.perf_counter() - started) * 1000, 2),
        )

        return DashboardSnapshot(
            generated_at=now,
            display_name=display_name,
            metrics=metrics,
            recent_transactions=tuple(transactions[:self.config.recent_limit]),
        )
