"""Invoice due dates from a customer's trading terms.

Rules (reference date decomposed into day/month/year):

- ``DEFAULT`` (no terms on file): end of the month after the reference
  month, e.g. 2023-01-15 → 2023-02-28.
- ``DAYS_AFTER_BILL_DATE``: reference day + ``days``; overflow rolls into the
  following month(s).
- ``OF_FOLLOWING_MONTH``: day ``days`` of the following month, rolling the
  year after December.
- Anything else: the reference date itself, logged at WARNING.

Day and month components are normalised the way a calendar constructor does:
day 0 is the last day of the previous month and day 32 spills into the next.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta, timezone

from .logging_setup import get_logger
from .models import TermsType, TradingTerms

_LOGGER = get_logger("day_docket.due_dates")


def org_timezone(tz_offset_hours: float) -> timezone:
    return timezone(timedelta(hours=tz_offset_hours))


def compose_date(year: int, month0: int, day: int) -> date:
    """Build a date from a 0-based month and a possibly out-of-range day."""

    year += month0 // 12
    month0 %= 12
    return date(year, month0 + 1, 1) + timedelta(days=day - 1)


def due_date(
    reference: date,
    terms: TradingTerms | None,
    *,
    tz_offset_hours: float = 0.0,
) -> str:
    """Return the ISO due date for an invoice dated ``reference``."""

    terms = terms or TradingTerms()
    day, month0, year = reference.day, reference.month - 1, reference.year

    if terms.type is TermsType.DEFAULT:
        day = 0
        month0 += 1
        if month0 > 11:
            year += 1
            month0 = 0
        month0 += 1
    elif terms.type is TermsType.DAYS_AFTER_BILL_DATE:
        day += terms.days
    elif terms.type is TermsType.OF_FOLLOWING_MONTH:
        day = terms.days
        month0 += 1
        if month0 > 11:
            year += 1
            month0 = 0
    else:
        _LOGGER.warning(
            "No due-date rule for trading terms %s (%s); using the invoice date %s",
            terms.type.value,
            terms.raw_code or "-",
            reference.isoformat(),
        )

    composed = compose_date(year, month0, day)
    # Place the date at the offset hour in the organisation's timezone before
    # converting to UTC, so the calendar day survives the conversion.
    local = datetime.combine(composed, time(), tzinfo=org_timezone(tz_offset_hours))
    local += timedelta(hours=tz_offset_hours)
    return local.astimezone(UTC).date().isoformat()


def to_local(ts: datetime, tz_offset_hours: float) -> datetime:
    """Render a ledger timestamp (naive UTC) as organisation-local wall time."""

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(org_timezone(tz_offset_hours))


__all__ = ["org_timezone", "compose_date", "due_date", "to_local"]
