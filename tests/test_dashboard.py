"""
Tests for the Dashboard Service and Report

Checks that one render pass classifies every row against the same date.
"""

import pytest
from datetime import date

from garry.dashboard import DashboardService
from garry.models import Warranty, WarrantyStatus
from garry.utils import DashboardReporter


def make_warranty(warranty_id: str, end_date: str, **overrides) -> Warranty:
    data = {
        "id": warranty_id,
        "user_id": "user-1",
        "product_name": f"Product {warranty_id}",
        "category": "electronics",
        "purchase_date": "2023-01-15",
        "warranty_end_date": end_date,
        "warranty_months": 24,
    }
    data.update(overrides)
    return Warranty.model_validate(data)


class StubClient:
    """Stands in for GarryAPIClient.get_warranties."""

    def __init__(self, warranties):
        self.warranties = warranties
        self.calls = 0

    async def get_warranties(self):
        self.calls += 1
        return list(self.warranties)


@pytest.fixture
def warranties():
    return [
        make_warranty("w-active", "2025-03-15T10:00:00Z", product_name="Téléviseur", brand="Sony", store="Fnac"),
        make_warranty("w-broken", "31/12/2025"),
        make_warranty("w-expired", "2025-01-01T10:00:00Z", category="clothing"),
        make_warranty("w-soon", "2025-02-01T10:00:00Z"),
        make_warranty("w-today", "2025-01-15"),
    ]


class TestDashboardService:

    def test_rows_sorted_by_end_date(self, warranties):
        view = DashboardService(StubClient([]), locale="fr").build_view(warranties, now=date(2025, 1, 15))

        assert view.today == date(2025, 1, 15)
        assert [row.warranty.id for row in view.rows] == [
            "w-expired", "w-today", "w-soon", "w-active", "w-broken",
        ]

    def test_single_reference_date_for_all_rows(self, warranties):
        view = DashboardService(StubClient([]), locale="fr").build_view(warranties, now="2025-01-15")

        by_id = {row.warranty.id: row for row in view.rows}
        assert by_id["w-today"].status is WarrantyStatus.EXPIRING
        assert by_id["w-today"].evaluation.days_remaining == 0
        assert by_id["w-soon"].evaluation.days_remaining == 17
        assert by_id["w-active"].status is WarrantyStatus.ACTIVE
        assert by_id["w-expired"].status is WarrantyStatus.EXPIRED

    def test_unparseable_end_date_is_kept_and_flagged(self, warranties):
        view = DashboardService(StubClient([]), locale="fr").build_view(warranties, now=date(2025, 1, 15))

        assert [row.warranty.id for row in view.invalid_rows] == ["w-broken"]
        assert view.invalid_rows[0].error == "Date invalide"
        assert view.invalid_rows[0].status is None

    def test_stats(self, warranties):
        view = DashboardService(StubClient([]), locale="fr").build_view(warranties, now=date(2025, 1, 15))

        assert view.stats.total_warranties == 5
        assert view.stats.active_warranties == 1
        assert view.stats.expiring_soon_warranties == 2
        assert view.stats.expired_warranties == 1
        assert len(view.rows_with_status(WarrantyStatus.EXPIRING)) == 2

    @pytest.mark.asyncio
    async def test_load_fetches_once(self, warranties):
        client = StubClient(warranties)

        view = await DashboardService(client, locale="en").load(now=date(2025, 1, 15))

        assert client.calls == 1
        assert len(view.rows) == 5
        assert view.rows[1].evaluation.label == "Expires today"


class TestDashboardReporter:

    def test_render_french(self, warranties):
        view = DashboardService(StubClient([]), locale="fr").build_view(warranties, now=date(2025, 1, 15))
        report = DashboardReporter(view).render()

        assert "GARRY - MES GARANTIES" in report
        assert "Date: 15 janvier 2025" in report
        assert "Expirent bientôt: 2" in report
        assert "Téléviseur (Sony) [Active]" in report
        assert "[Expire dans 17 jours]" in report
        assert "Vêtements - Fin: 1 janvier 2025" in report
        assert "[Date invalide]" in report
        assert "Magasin: Fnac" in report

    def test_render_english_empty(self):
        view = DashboardService(StubClient([]), locale="en").build_view([], now=date(2025, 1, 15))
        report = DashboardReporter(view).render()

        assert "Date: January 15, 2025" in report
        assert "Total: 0" in report
        assert "(no warranties)" in report

    def test_write(self, warranties, tmp_path):
        view = DashboardService(StubClient([]), locale="fr").build_view(warranties, now=date(2025, 1, 15))
        output = tmp_path / "dashboard.txt"

        DashboardReporter(view).write(str(output))

        assert output.read_text(encoding="utf-8") == DashboardReporter(view).render()
