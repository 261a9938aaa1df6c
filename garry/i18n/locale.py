"""
Locale Tables
=============
Locales shipped by Garry and the handful of strings the date formatting
and status badges need: month names, category names and status labels.
"""

from enum import Enum
from typing import Dict, Optional, Union


class AppLocale(str, Enum):
    """Supported display locales."""
    FRENCH = "fr"
    ENGLISH = "en"

    @classmethod
    def default(cls) -> "AppLocale":
        return cls.FRENCH

    @classmethod
    def from_value(cls, value: Optional[Union[str, "AppLocale"]]) -> "AppLocale":
        """
        Resolve a locale code such as "fr", "fr-FR" or "en_US".

        Args:
            value: Locale code or AppLocale (None means the default locale)

        Returns:
            Matching AppLocale

        Raises:
            ValueError: If the language is not shipped
        """
        if value is None or value == "":
            return cls.default()
        if isinstance(value, cls):
            return value

        language = str(value).replace("_", "-").split("-")[0].lower()
        for locale in cls:
            if locale.value == language:
                return locale
        raise ValueError(f"Unsupported locale: {value}")


MONTH_NAMES: Dict[AppLocale, tuple] = {
    AppLocale.FRENCH: (
        "janvier", "février", "mars", "avril", "mai", "juin",
        "juillet", "août", "septembre", "octobre", "novembre", "décembre",
    ),
    AppLocale.ENGLISH: (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
}

# Long-form date patterns, filled with day / month / year
DATE_PATTERNS: Dict[AppLocale, str] = {
    AppLocale.FRENCH: "{day} {month} {year}",
    AppLocale.ENGLISH: "{month} {day}, {year}",
}

CATEGORY_NAMES: Dict[AppLocale, Dict[str, str]] = {
    AppLocale.FRENCH: {
        "electronics": "Électronique",
        "appliances": "Électroménager",
        "furniture": "Mobilier",
        "clothing": "Vêtements",
        "automotive": "Automobile",
        "sports": "Sport",
        "other": "Autre",
    },
    AppLocale.ENGLISH: {
        "electronics": "Electronics",
        "appliances": "Appliances",
        "furniture": "Furniture",
        "clothing": "Clothing",
        "automotive": "Automotive",
        "sports": "Sports",
        "other": "Other",
    },
}

STATUS_LABELS: Dict[AppLocale, Dict[str, str]] = {
    AppLocale.FRENCH: {
        "active": "Active",
        "expiring": "Expire dans {days} jours",
        "expiring_today": "Expire aujourd'hui",
        "expired": "Expirée",
        "invalid": "Date invalide",
    },
    AppLocale.ENGLISH: {
        "active": "Active",
        "expiring": "Expires in {days} days",
        "expiring_today": "Expires today",
        "expired": "Expired",
        "invalid": "Invalid date",
    },
}


def month_name(month: int, locale: Union[str, AppLocale, None] = None) -> str:
    """Full month name (1-12) in the given locale."""
    return MONTH_NAMES[AppLocale.from_value(locale)][month - 1]


def category_name(category: str, locale: Union[str, AppLocale, None] = None) -> str:
    """Display name of a category value, falling back to "other"."""
    names = CATEGORY_NAMES[AppLocale.from_value(locale)]
    return names.get(category, names["other"])
