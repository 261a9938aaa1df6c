"""Locale tables for dates, categories and status labels."""
from .locale import (
    AppLocale,
    CATEGORY_NAMES,
    MONTH_NAMES,
    STATUS_LABELS,
    category_name,
    month_name,
)

__all__ = [
    "AppLocale",
    "CATEGORY_NAMES",
    "MONTH_NAMES",
    "STATUS_LABELS",
    "category_name",
    "month_name",
]
