"""
Compute Service

Deterministic warranty date computations shared by every Garry client:
- Parsing ISO-8601 dates down to calendar dates
- Calendar-day arithmetic (days remaining before a warranty end date)
- Status classification (active / expiring / expired)
- Long-form and machine-readable date formatting

All calculations are deterministic: same input + same reference date → same output.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from garry.i18n import AppLocale, STATUS_LABELS, month_name
from garry.i18n.locale import DATE_PATTERNS
from garry.models import Stats, Warranty, WarrantyCategory, WarrantyStatus


# Days before the end date during which a warranty is "expiring" (inclusive)
EXPIRING_THRESHOLD_DAYS = 30

DateLike = Union[date, datetime, str]


class InvalidDateFormat(ValueError):
    """Raised when a date string is not ISO-8601."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid date format: {value!r}")


def parse_date(value: str) -> date:
    """
    Parse an ISO-8601 date or date-time string into a calendar date.

    The time of day, if any, is dropped as written; no timezone conversion
    happens, so "2025-01-15T23:30:00-05:00" is 2025-01-15.

    Args:
        value: ISO-8601 string, e.g. "2025-01-15" or "2025-01-15T10:00:00Z"

    Returns:
        Calendar date

    Raises:
        InvalidDateFormat: If the string does not parse as ISO-8601
    """
    try:
        return isoparse(value).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise InvalidDateFormat(value) from e


def to_calendar_date(value: Optional[DateLike] = None) -> date:
    """Resolve a reference date; None means today on the system clock."""
    if value is None:
        return date.today()
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_date(value)


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end (negative when end is before start)."""
    return (end - start).days


def get_days_remaining(warranty_end_date: str, now: Optional[DateLike] = None) -> int:
    """
    Days left before the warranty end date.

    Args:
        warranty_end_date: ISO-8601 end date
        now: Reference date (defaults to today)

    Returns:
        Positive when days are left, 0 when it ends today, negative when overdue
    """
    return days_between(to_calendar_date(now), parse_date(warranty_end_date))


def classify_days_remaining(days: int) -> WarrantyStatus:
    """Bucket a day count: < 0 expired, 0..30 expiring, > 30 active."""
    if days < 0:
        return WarrantyStatus.EXPIRED
    if days <= EXPIRING_THRESHOLD_DAYS:
        return WarrantyStatus.EXPIRING
    return WarrantyStatus.ACTIVE


def get_warranty_status(warranty_end_date: str, now: Optional[DateLike] = None) -> WarrantyStatus:
    """
    Classify a warranty against a reference date.

    A warranty ending today is still expiring; it is expired from the
    next day on.

    Args:
        warranty_end_date: ISO-8601 end date
        now: Reference date (defaults to today)

    Returns:
        WarrantyStatus
    """
    return classify_days_remaining(get_days_remaining(warranty_end_date, now))


def format_display_date(value: str, locale: Union[str, AppLocale, None] = None) -> str:
    """
    Long-form date for display, e.g. "15 janvier 2025" or "January 15, 2025".

    Args:
        value: ISO-8601 date string; empty means "no date"
        locale: Display locale (defaults to French)

    Returns:
        Formatted date, or "" for empty input
    """
    if not value:
        return ""
    resolved = AppLocale.from_value(locale)
    parsed = parse_date(value)
    return DATE_PATTERNS[resolved].format(
        day=parsed.day,
        month=month_name(parsed.month, resolved),
        year=parsed.year,
    )


def format_machine_date(value: str) -> str:
    """YYYY-MM-DD rendering for date inputs and API payloads ("" stays "")."""
    if not value:
        return ""
    return parse_date(value).isoformat()


def estimate_end_date(purchase_date: str, warranty_months: int) -> str:
    """
    Preview the end date of a warranty from its nominal duration.

    The service owns the authoritative end date; this is only used to show
    an estimate while a warranty is being entered.

    Args:
        purchase_date: ISO-8601 purchase date
        warranty_months: Nominal duration in months (positive)

    Returns:
        Estimated end date as YYYY-MM-DD
    """
    if warranty_months <= 0:
        raise ValueError("Warranty duration must be positive")
    end = parse_date(purchase_date) + relativedelta(months=warranty_months)
    return end.isoformat()


def default_warranty_months(category: Union[str, WarrantyCategory]) -> int:
    """Default warranty duration for a category (unknown categories use "other")."""
    if not isinstance(category, WarrantyCategory):
        category = WarrantyCategory.from_value(category)
    return category.default_warranty_months


def status_label(
    status: WarrantyStatus,
    days_remaining: Optional[int] = None,
    locale: Union[str, AppLocale, None] = None,
) -> str:
    """Badge label for a status, e.g. "Expire dans 12 jours"."""
    labels = STATUS_LABELS[AppLocale.from_value(locale)]
    status = WarrantyStatus(status)
    if status is WarrantyStatus.EXPIRING:
        if days_remaining == 0:
            return labels["expiring_today"]
        return labels["expiring"].format(days=days_remaining)
    return labels[status.value]


def summarize_statuses(statuses: Iterable[WarrantyStatus], total: Optional[int] = None) -> Stats:
    """
    Count statuses into a Stats record.

    Args:
        statuses: Statuses from a single render pass
        total: Total warranty count, when some could not be classified

    Returns:
        Stats
    """
    counts = {status: 0 for status in WarrantyStatus}
    classified = 0
    for status in statuses:
        counts[WarrantyStatus(status)] += 1
        classified += 1

    return Stats(
        total_warranties=classified if total is None else total,
        active_warranties=counts[WarrantyStatus.ACTIVE],
        expired_warranties=counts[WarrantyStatus.EXPIRED],
        expiring_soon_warranties=counts[WarrantyStatus.EXPIRING],
    )


@dataclass(frozen=True)
class WarrantyEvaluation:
    """Status of one warranty within a render pass."""
    warranty_id: str
    status: WarrantyStatus
    days_remaining: int
    end_date: date
    display_end_date: str
    label: str


class WarrantyStatusEvaluator:
    """
    Evaluates warranties against one reference date.

    Build one evaluator per render pass so every item of a list is
    classified against the same "today".
    """

    def __init__(
        self,
        today: Optional[DateLike] = None,
        locale: Union[str, AppLocale, None] = None,
    ):
        """
        Initialize the evaluator.

        Args:
            today: Reference date, read from the system clock once when omitted
            locale: Locale for display dates and labels
        """
        self.today = to_calendar_date(today)
        self.locale = AppLocale.from_value(locale)

    def days_remaining(self, warranty_end_date: str) -> int:
        return get_days_remaining(warranty_end_date, self.today)

    def status(self, warranty_end_date: str) -> WarrantyStatus:
        return get_warranty_status(warranty_end_date, self.today)

    def evaluate(self, warranty: Warranty) -> WarrantyEvaluation:
        """
        Classify a warranty and prepare its display values.

        Raises:
            InvalidDateFormat: If the warranty end date is malformed
        """
        end_date = parse_date(warranty.warranty_end_date)
        days = days_between(self.today, end_date)
        status = classify_days_remaining(days)
        return WarrantyEvaluation(
            warranty_id=warranty.id,
            status=status,
            days_remaining=days,
            end_date=end_date,
            display_end_date=format_display_date(warranty.warranty_end_date, self.locale),
            label=status_label(status, days, self.locale),
        )

    def summarize(self, warranties: Iterable[Warranty]) -> Stats:
        """Client-side stats, using the same buckets as status()."""
        return summarize_statuses(self.status(w.warranty_end_date) for w in warranties)

    def filter_expiring(
        self,
        warranties: Iterable[Warranty],
        days: int = EXPIRING_THRESHOLD_DAYS,
    ) -> List[Warranty]:
        """
        Warranties ending within the next `days` days (today included).

        Args:
            warranties: Warranties to filter
            days: Look-ahead window, independent from the status threshold

        Returns:
            Matching warranties, soonest end date first
        """
        if days < 0:
            raise ValueError("Look-ahead window cannot be negative")

        matched = []
        for warranty in warranties:
            remaining = self.days_remaining(warranty.warranty_end_date)
            if 0 <= remaining <= days:
                matched.append((remaining, warranty))

        matched.sort(key=lambda item: item[0])
        return [warranty for _, warranty in matched]


# Factory function for service discovery
def get_evaluator(
    today: Optional[DateLike] = None,
    locale: Union[str, AppLocale, None] = None,
) -> WarrantyStatusEvaluator:
    """Create an evaluator bound to a single reference date."""
    return WarrantyStatusEvaluator(today=today, locale=locale)
