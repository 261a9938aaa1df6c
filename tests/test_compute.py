"""
Unit Tests for Compute Service

Tests deterministic warranty date calculations: parsing, day counts,
status buckets and formatting.
"""

import pytest
from datetime import date, datetime, timedelta

from garry.compute.service import (
    EXPIRING_THRESHOLD_DAYS,
    InvalidDateFormat,
    WarrantyStatusEvaluator,
    days_between,
    default_warranty_months,
    estimate_end_date,
    format_display_date,
    format_machine_date,
    get_days_remaining,
    get_evaluator,
    get_warranty_status,
    parse_date,
    status_label,
    to_calendar_date,
)
from garry.models import Warranty, WarrantyCategory, WarrantyStatus


TODAY = date(2025, 1, 15)


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


class TestParseDate:
    """Tests for ISO-8601 parsing."""

    def test_date_only(self):
        assert parse_date("2025-01-15") == date(2025, 1, 15)

    def test_datetime_drops_time_of_day(self):
        """Time of day is discarded, the written date is kept."""
        assert parse_date("2025-01-15T10:00:00Z") == date(2025, 1, 15)
        assert parse_date("2025-01-15T23:59:59.999+02:00") == date(2025, 1, 15)
        assert parse_date("2025-01-15T00:00:00-05:00") == date(2025, 1, 15)

    @pytest.mark.parametrize("value", ["not-a-date", "15/01/2025", "2025-13-01", "2025-02-30", ""])
    def test_invalid_input_raises(self, value):
        with pytest.raises(InvalidDateFormat) as exc_info:
            parse_date(value)
        assert exc_info.value.value == value

    def test_invalid_date_format_is_value_error(self):
        """Callers catching ValueError also catch malformed dates."""
        with pytest.raises(ValueError):
            parse_date("garbage")

    def test_non_string_raises(self):
        with pytest.raises(InvalidDateFormat):
            parse_date(None)

    def test_reference_date_resolution(self):
        assert to_calendar_date(TODAY) == TODAY
        assert to_calendar_date(datetime(2025, 1, 15, 23, 30)) == TODAY
        assert to_calendar_date("2025-01-15T08:00:00Z") == TODAY
        assert isinstance(to_calendar_date(), date)


class TestDaysRemaining:
    """Tests for calendar-day arithmetic."""

    def test_days_between_signs(self):
        assert days_between(TODAY, date(2025, 1, 25)) == 10
        assert days_between(TODAY, date(2025, 1, 5)) == -10
        assert days_between(TODAY, TODAY) == 0

    def test_days_between_crosses_year_and_leap_day(self):
        assert days_between(date(2023, 12, 31), date(2024, 1, 1)) == 1
        assert days_between(date(2024, 2, 28), date(2024, 3, 1)) == 2

    def test_ends_today_is_zero(self):
        assert get_days_remaining("2025-01-15", now=TODAY) == 0

    def test_time_of_day_does_not_change_count(self):
        """Morning and evening timestamps on the same day count the same."""
        assert get_days_remaining("2025-01-25T00:00:01Z", now=datetime(2025, 1, 15, 23, 0)) == 10
        assert get_days_remaining("2025-01-25T23:59:00Z", now=datetime(2025, 1, 15, 0, 1)) == 10

    def test_one_day_overdue(self):
        assert get_days_remaining("2025-01-14", now=TODAY) == -1

    def test_reference_date_as_string(self):
        assert get_days_remaining("2025-01-25T12:00:00Z", now="2025-01-15T12:00:00Z") == 10

    def test_invalid_end_date_propagates(self):
        with pytest.raises(InvalidDateFormat):
            get_days_remaining("soon", now=TODAY)


class TestWarrantyStatus:
    """Tests for the active / expiring / expired buckets."""

    def test_ends_today_is_expiring(self):
        assert get_warranty_status("2025-01-15", now=TODAY) == WarrantyStatus.EXPIRING

    def test_thirty_days_is_expiring(self):
        assert get_warranty_status("2025-02-14", now=TODAY) == WarrantyStatus.EXPIRING

    def test_thirty_one_days_is_active(self):
        assert get_warranty_status("2025-02-15", now=TODAY) == WarrantyStatus.ACTIVE

    def test_yesterday_is_expired(self):
        assert get_warranty_status("2025-01-14", now=TODAY) == WarrantyStatus.EXPIRED

    def test_datetime_inputs(self):
        assert get_warranty_status("2025-03-15T10:00:00Z", now=TODAY) == WarrantyStatus.ACTIVE
        assert get_warranty_status("2025-02-01T10:00:00Z", now=TODAY) == WarrantyStatus.EXPIRING
        assert get_warranty_status("2025-01-01T10:00:00Z", now=TODAY) == WarrantyStatus.EXPIRED

    def test_buckets_partition_day_counts(self):
        """Every day count maps to exactly the bucket its range defines."""
        for offset in range(-60, 61):
            end_date = (TODAY + timedelta(days=offset)).isoformat()
            days = days_between(TODAY, parse_date(end_date))
            status = get_warranty_status(end_date, now=TODAY)

            assert (status == WarrantyStatus.EXPIRED) == (days < 0)
            assert (status == WarrantyStatus.EXPIRING) == (0 <= days <= EXPIRING_THRESHOLD_DAYS)
            assert (status == WarrantyStatus.ACTIVE) == (days > EXPIRING_THRESHOLD_DAYS)

    def test_status_never_goes_back_as_time_advances(self):
        order = [WarrantyStatus.ACTIVE, WarrantyStatus.EXPIRING, WarrantyStatus.EXPIRED]
        seen = []
        for offset in range(0, 90):
            status = get_warranty_status("2025-03-01", now=TODAY + timedelta(days=offset))
            seen.append(order.index(status))
        assert seen == sorted(seen)


class TestFormatting:
    """Tests for display and machine date formatting."""

    def test_display_date_french(self):
        result = format_display_date("2025-01-15T10:00:00Z", "fr")
        assert result == "15 janvier 2025"

    def test_display_date_defaults_to_french(self):
        result = format_display_date("2025-06-20T10:00:00Z")
        assert "20" in result
        assert "juin" in result

    def test_display_date_english(self):
        assert format_display_date("2025-08-01", "en") == "August 1, 2025"

    def test_display_date_accepts_region_codes(self):
        assert format_display_date("2025-12-25", "fr-FR") == "25 décembre 2025"
        assert format_display_date("2025-12-25", "en_US") == "December 25, 2025"

    def test_display_date_unsupported_locale(self):
        with pytest.raises(ValueError):
            format_display_date("2025-01-15", "de")

    def test_machine_date(self):
        assert format_machine_date("2025-01-15T10:00:00Z") == "2025-01-15"
        assert format_machine_date("2025-01-05") == "2025-01-05"

    def test_empty_input_is_empty_output(self):
        assert format_display_date("") == ""
        assert format_machine_date("") == ""

    def test_malformed_input_raises(self):
        with pytest.raises(InvalidDateFormat):
            format_display_date("yesterday")
        with pytest.raises(InvalidDateFormat):
            format_machine_date("yesterday")

    @pytest.mark.parametrize("value", [
        "2025-01-15",
        "2025-01-15T10:00:00Z",
        "2024-02-29T23:59:59+01:00",
        "1999-12-31T00:00:00",
        "0999-03-04",
    ])
    def test_machine_date_is_stable(self, value):
        """Normalized dates are a fixed point and parse back to the same day."""
        machine = format_machine_date(value)
        assert format_machine_date(machine) == machine
        assert parse_date(machine) == parse_date(value)

    def test_machine_date_pads_short_years(self):
        assert format_machine_date("0999-03-04") == "0999-03-04"
        assert format_machine_date("0099-12-31T08:00:00Z") == "0099-12-31"


class TestHelpers:
    """Tests for end date estimates, defaults and labels."""

    def test_estimate_end_date(self):
        assert estimate_end_date("2024-01-15", 24) == "2026-01-15"
        assert estimate_end_date("2024-06-15T10:00:00Z", 6) == "2024-12-15"
        assert estimate_end_date("0998-09-01", 6) == "0999-03-01"

    def test_estimate_end_date_clamps_month_end(self):
        assert estimate_end_date("2024-01-31", 1) == "2024-02-29"

    def test_estimate_end_date_rejects_non_positive_months(self):
        with pytest.raises(ValueError):
            estimate_end_date("2024-01-15", 0)

    def test_default_warranty_months(self):
        assert default_warranty_months("electronics") == 24
        assert default_warranty_months(WarrantyCategory.CLOTHING) == 6
        assert default_warranty_months("sports") == 12
        assert default_warranty_months("unknown") == 24

    def test_status_labels_french(self):
        assert status_label(WarrantyStatus.ACTIVE, 90) == "Active"
        assert status_label(WarrantyStatus.EXPIRING, 12) == "Expire dans 12 jours"
        assert status_label(WarrantyStatus.EXPIRING, 0) == "Expire aujourd'hui"
        assert status_label(WarrantyStatus.EXPIRED, -3) == "Expirée"

    def test_status_labels_english(self):
        assert status_label("expiring", 5, "en") == "Expires in 5 days"
        assert status_label("expired", -1, "en") == "Expired"


class TestEvaluator:
    """Tests for the WarrantyStatusEvaluator class."""

    @pytest.fixture
    def warranties(self):
        return [
            make_warranty("w-active", "2025-03-15T10:00:00Z"),
            make_warranty("w-soon", "2025-02-01T10:00:00Z"),
            make_warranty("w-today", "2025-01-15"),
            make_warranty("w-expired", "2025-01-01T10:00:00Z"),
        ]

    def test_captures_today_once(self):
        evaluator = WarrantyStatusEvaluator(today="2025-01-15")
        assert evaluator.today == TODAY
        assert evaluator.locale.value == "fr"

    def test_evaluate(self, warranties):
        evaluation = get_evaluator(today=TODAY).evaluate(warranties[1])

        assert evaluation.warranty_id == "w-soon"
        assert evaluation.status == WarrantyStatus.EXPIRING
        assert evaluation.days_remaining == 17
        assert evaluation.end_date == date(2025, 2, 1)
        assert evaluation.display_end_date == "1 février 2025"
        assert evaluation.label == "Expire dans 17 jours"

    def test_evaluate_invalid_end_date(self):
        with pytest.raises(InvalidDateFormat):
            get_evaluator(today=TODAY).evaluate(make_warranty("bad", "n/a"))

    def test_summarize(self, warranties):
        stats = get_evaluator(today=TODAY).summarize(warranties)

        assert stats.total_warranties == 4
        assert stats.active_warranties == 1
        assert stats.expiring_soon_warranties == 2
        assert stats.expired_warranties == 1

    def test_filter_expiring(self, warranties):
        evaluator = get_evaluator(today=TODAY)

        ids = [w.id for w in evaluator.filter_expiring(warranties)]
        assert ids == ["w-today", "w-soon"]

        ids = [w.id for w in evaluator.filter_expiring(warranties, days=60)]
        assert ids == ["w-today", "w-soon", "w-active"]

        assert evaluator.filter_expiring(warranties, days=0)[0].id == "w-today"

    def test_filter_expiring_rejects_negative_window(self, warranties):
        with pytest.raises(ValueError):
            get_evaluator(today=TODAY).filter_expiring(warranties, days=-1)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
