"""
Date and time display configuration.
"""
from zoneinfo import ZoneInfo

# The business runs on Swedish time
DEFAULT_TIMEZONE = ZoneInfo("Europe/Stockholm")

DATETIME_FORMATS = {
    "full_datetime": "%Y-%m-%d %H:%M",        # 2025-09-28 12:34
    "date_only": "%Y-%m-%d",                  # 2025-09-28
    "time_only": "%H:%M",                     # 12:34
    "month_year": "%Y-%m",                    # 2025-09
}

# Wire format for date ranges sent to the backend
API_DATE_FORMAT = "%Y-%m-%d"


def get_datetime_format(format_type: str = "full_datetime") -> str:
    """
    Format string by type.

    Args:
        format_type: Key of DATETIME_FORMATS

    Returns:
        strftime format, full_datetime when the key is unknown
    """
    return DATETIME_FORMATS.get(format_type, DATETIME_FORMATS["full_datetime"])
