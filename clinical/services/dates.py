"""Coercion of caller-supplied dates.

Dates are user input (no clock is read here).  Strings are accepted in
ISO form, e.g. ``2024-08-01`` or ``2024-08-01 10:00:00``.
"""
from __future__ import annotations

from datetime import date, datetime

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from clinical.exceptions import InvalidInput


def as_date(value, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = None
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = parse_date(text)
            if parsed is None:
                dt = parse_datetime(text)
                parsed = dt.date() if dt else None
        except ValueError:
            # well formed but out of range, e.g. 2024-02-30 or 99:99
            parsed = None
    if parsed is None:
        raise InvalidInput(f'{field} must be a date (YYYY-MM-DD).', field=field, value=str(value))
    return parsed


def as_datetime(value, field: str) -> datetime:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        dt = None
        if isinstance(value, str):
            try:
                dt = parse_datetime(value.strip())
            except ValueError:
                dt = None
        if dt is None:
            raise InvalidInput(
                f'{field} must be a date-time (YYYY-MM-DD HH:MM:SS).', field=field, value=str(value)
            )
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt, timezone.get_current_timezone())
    return dt
