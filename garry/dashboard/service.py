"""
Dashboard Service

Builds the warranty dashboard: fetches warranties from the API and
evaluates every row against one reference date, so a list never mixes
results computed on different days.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional, Union

from garry.api.client import GarryAPIClient
from garry.compute.service import (
    DateLike,
    InvalidDateFormat,
    WarrantyEvaluation,
    WarrantyStatusEvaluator,
    summarize_statuses,
)
from garry.i18n import AppLocale, STATUS_LABELS
from garry.models import Stats, Warranty, WarrantyStatus

logger = logging.getLogger(__name__)


@dataclass
class DashboardRow:
    """One warranty with its evaluation, or the reason it has none."""
    warranty: Warranty
    evaluation: Optional[WarrantyEvaluation] = None
    error: Optional[str] = None

    @property
    def status(self) -> Optional[WarrantyStatus]:
        return self.evaluation.status if self.evaluation else None


@dataclass
class DashboardView:
    """Result of a single render pass."""
    today: date
    locale: AppLocale
    rows: List[DashboardRow] = field(default_factory=list)
    stats: Stats = field(default_factory=Stats)

    def rows_with_status(self, status: WarrantyStatus) -> List[DashboardRow]:
        return [row for row in self.rows if row.status is status]

    @property
    def invalid_rows(self) -> List[DashboardRow]:
        return [row for row in self.rows if row.error is not None]


class DashboardService:
    """Loads warranties and evaluates them for display."""

    def __init__(self, client: GarryAPIClient, locale: Union[str, AppLocale, None] = None):
        self.client = client
        self.locale = AppLocale.from_value(locale)

    async def load(self, now: Optional[DateLike] = None) -> DashboardView:
        """
        Fetch the user's warranties and build the dashboard view.

        Args:
            now: Reference date (defaults to today, read once)

        Returns:
            DashboardView
        """
        warranties = await self.client.get_warranties()
        logger.info(f"Loaded warranties - count={len(warranties)}")
        return self.build_view(warranties, now)

    def build_view(self, warranties: Iterable[Warranty], now: Optional[DateLike] = None) -> DashboardView:
        """
        Evaluate warranties against a single reference date.

        Rows are sorted by end date, soonest first. A warranty whose end date
        cannot be parsed keeps its row with an error label instead of a
        status, and is left out of the status counters.
        """
        evaluator = WarrantyStatusEvaluator(today=now, locale=self.locale)
        rows = []

        for warranty in warranties:
            try:
                rows.append(DashboardRow(warranty=warranty, evaluation=evaluator.evaluate(warranty)))
            except InvalidDateFormat as e:
                logger.warning(f"Unparseable warranty end date - id={warranty.id}, error={e}")
                rows.append(DashboardRow(warranty=warranty, error=STATUS_LABELS[self.locale]["invalid"]))

        rows.sort(key=lambda row: (row.evaluation is None, row.evaluation.end_date if row.evaluation else date.max))
        stats = summarize_statuses(
            (row.evaluation.status for row in rows if row.evaluation),
            total=len(rows),
        )
        return DashboardView(today=evaluator.today, locale=self.locale, rows=rows, stats=stats)
