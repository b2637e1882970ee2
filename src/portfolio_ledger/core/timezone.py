"""
Market clock helpers.

Executions are stamped in US/Eastern. The trade date used for holding
periods and tax years is the Eastern calendar date, whatever offset the
caller sent.
"""

from datetime import date, datetime
from typing import Union

import pytz
from dateutil import parser as date_parser

EASTERN_TZ = pytz.timezone("US/Eastern")


def now_eastern() -> datetime:
    return datetime.now(EASTERN_TZ)


def to_eastern(dt: datetime) -> datetime:
    """Naive values are Eastern wall time; aware values are converted."""
    if dt.tzinfo is None:
        return EASTERN_TZ.localize(dt)
    return dt.astimezone(EASTERN_TZ)


def parse_datetime_eastern(value: Union[str, datetime]) -> datetime:
    """
    Read an execution timestamp as an Eastern datetime.

    Strings must be ISO 8601, with or without an offset. A bare date
    ("2024-01-15") means midnight Eastern of that day.

    Raises:
        ValueError: if a string is not ISO 8601.
    """
    if isinstance(value, str):
        value = date_parser.isoparse(value.strip())
    return to_eastern(value)


def trade_date(executed_at: datetime) -> date:
    return to_eastern(executed_at).date()
