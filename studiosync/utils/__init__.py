"""
Shared utilities: calendar-month date arithmetic and branding colours.
"""

from studiosync.utils.date_utils import (
    UTC,
    MONTH_NAMES,
    DateUtilsError,
    now_utc,
    to_utc,
    coerce_date,
    add_months,
    months_between,
    month_label,
    isoformat_utc,
)
from studiosync.utils.color_utils import adjust_color, is_hex_color

__all__ = [
    "UTC",
    "MONTH_NAMES",
    "DateUtilsError",
    "now_utc",
    "to_utc",
    "coerce_date",
    "add_months",
    "months_between",
    "month_label",
    "isoformat_utc",
    "adjust_color",
    "is_hex_color",
]
