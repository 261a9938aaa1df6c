"""Compute package - warranty date computations."""
from .service import (
    EXPIRING_THRESHOLD_DAYS,
    InvalidDateFormat,
    WarrantyEvaluation,
    WarrantyStatusEvaluator,
    days_between,
    estimate_end_date,
    format_display_date,
    format_machine_date,
    get_days_remaining,
    get_evaluator,
    get_warranty_status,
    parse_date,
    status_label,
)

__all__ = [
    "EXPIRING_THRESHOLD_DAYS",
    "InvalidDateFormat",
    "WarrantyEvaluation",
    "WarrantyStatusEvaluator",
    "days_between",
    "estimate_end_date",
    "format_display_date",
    "format_machine_date",
    "get_days_remaining",
    "get_evaluator",
    "get_warranty_status",
    "parse_date",
    "status_label",
]
