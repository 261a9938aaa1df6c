"""
Dashboard Report Generator

Renders a dashboard view as a plain-text report for the terminal or a file.
"""

import logging
from typing import List

from garry.compute.service import format_display_date
from garry.dashboard.service import DashboardRow, DashboardView

logger = logging.getLogger(__name__)

WIDTH = 90

HEADINGS = {
    "fr": {
        "title": "GARRY - MES GARANTIES",
        "today": "Date",
        "total": "Total",
        "active": "Actives",
        "expiring": "Expirent bientôt",
        "expired": "Expirées",
        "empty": "(aucune garantie)",
        "ends": "Fin",
        "store": "Magasin",
    },
    "en": {
        "title": "GARRY - MY WARRANTIES",
        "today": "Date",
        "total": "Total",
        "active": "Active",
        "expiring": "Expiring soon",
        "expired": "Expired",
        "empty": "(no warranties)",
        "ends": "Ends",
        "store": "Store",
    },
}


class DashboardReporter:
    """Generates formatted dashboard reports."""

    def __init__(self, view: DashboardView):
        self.view = view
        self.headings = HEADINGS[view.locale.value]

    def render(self) -> str:
        """Render the whole report."""
        h = self.headings
        stats = self.view.stats
        lines = []

        # Header
        lines.append("=" * WIDTH)
        lines.append(h["title"])
        lines.append("=" * WIDTH)
        lines.append(f"{h['today']}: {format_display_date(self.view.today.isoformat(), self.view.locale)}")
        lines.append("")

        # Summary
        lines.append("-" * WIDTH)
        lines.append(f"{h['total']}: {stats.total_warranties}")
        lines.append(f"{h['active']}: {stats.active_warranties}")
        lines.append(f"{h['expiring']}: {stats.expiring_soon_warranties}")
        lines.append(f"{h['expired']}: {stats.expired_warranties}")
        lines.append("-" * WIDTH)
        lines.append("")

        if not self.view.rows:
            lines.append(h["empty"])
        for i, row in enumerate(self.view.rows, 1):
            lines.extend(self._format_row(row, i))

        lines.append("=" * WIDTH)
        return "\n".join(lines)

    def _format_row(self, row: DashboardRow, number: int) -> List[str]:
        """Format one warranty."""
        warranty = row.warranty
        name = warranty.product_name
        if warranty.brand:
            name = f"{name} ({warranty.brand})"

        if row.evaluation:
            badge = row.evaluation.label
            ends = row.evaluation.display_end_date
        else:
            badge = row.error
            ends = warranty.warranty_end_date

        lines = [f"  {number}. {name} [{badge}]"]
        lines.append(f"     {warranty.category.display_name(self.view.locale)} - {self.headings['ends']}: {ends}")
        if warranty.store:
            lines.append(f"     {self.headings['store']}: {warranty.store}")
        lines.append("")
        return lines

    def write(self, output_path: str) -> None:
        """Write the report to a file."""
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.render())
        logger.info(f"Dashboard report written: {output_path}")
