from datetime import date, datetime
from typing import NamedTuple, Optional

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime


class DateRange(NamedTuple):
    """Half-open stay [start, end): the checkout day is not occupied."""
    start: date
    end: date

    @property
    def nights(self) -> int:
        return (self.end - self.start).days

    def overlaps(self, other: "DateRange") -> bool:
        return self.start < other.end and other.start < self.end


def normalize_date(value) -> Optional[date]:
    """
    Accept a date, a datetime or an ISO-8601 string and return the calendar
    day it falls on (time of day stripped). Returns None when unparsable.
    Aware datetimes are read in the project time zone.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _local(value).date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    raw = value.strip()
    try:
        parsed = parse_date(raw)
        if parsed is not None:
            return parsed
        moment = parse_datetime(raw)
    except ValueError:
        # well-formed but impossible, e.g. 2024-02-30
        return None
    return _local(moment).date() if moment is not None else None


def _local(moment: datetime) -> datetime:
    if timezone.is_aware(moment):
        return timezone.localtime(moment)
    return moment
