"""
Event Window Calculator

Banners are printed ahead of Memorial Day and Veterans Day. These helpers
work out which event a submission will make, in the US Eastern calendar,
so messages can say "ahead of Memorial Day" or "ahead of Veterans Day".

All functions take an optional reference instant `now`:
- aware datetimes are converted to America/New_York
- naive datetimes are taken as Eastern wall-clock time
- dates are used as-is
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

EASTERN = ZoneInfo("America/New_York")

MEMORIAL_DAY_PHRASE = "ahead of Memorial Day"
VETERANS_DAY_PHRASE = "ahead of Veterans Day"

DEFAULT_CUTOFF_DAYS = 21
NOTICE_WINDOW_DAYS = 14


def memorial_day(year: int) -> date:
    """Last Monday of May."""
    may_31 = date(year, 5, 31)
    return may_31 - timedelta(days=may_31.weekday())


def veterans_day(year: int) -> date:
    """November 11, no weekday adjustment."""
    return date(year, 11, 11)


def eastern_date(moment: datetime | date) -> date:
    """Civil date of `moment` in the US Eastern calendar."""
    if isinstance(moment, datetime):
        if moment.tzinfo is None:
            return moment.date()
        return moment.astimezone(EASTERN).date()
    return moment


def days_until(now: datetime | date, target: datetime | date) -> int:
    """
    Whole calendar days from `now` to `target`, both as Eastern dates.

    Calendar-date subtraction, so DST transitions never shift the result.
    """
    return (eastern_date(target) - eastern_date(now)).days


def _now() -> datetime:
    return datetime.now(EASTERN)


@dataclass(frozen=True)
class EventWindow:
    """Upcoming occurrences of both print events relative to a reference day."""

    memorial_day: date
    veterans_day: date
    days_to_memorial_day: int
    days_to_veterans_day: int

    @property
    def memorial_day_is_next(self) -> bool:
        # Ties favor Memorial Day
        return self.days_to_memorial_day <= self.days_to_veterans_day


def event_window(now: datetime | date | None = None) -> EventWindow:
    """Next Memorial Day and Veterans Day on or after today (Eastern)."""
    now = now if now is not None else _now()
    year = eastern_date(now).year

    next_memorial = memorial_day(year)
    if days_until(now, next_memorial) < 0:
        next_memorial = memorial_day(year + 1)

    next_veterans = veterans_day(year)
    if days_until(now, next_veterans) < 0:
        next_veterans = veterans_day(year + 1)

    return EventWindow(
        memorial_day=next_memorial,
        veterans_day=next_veterans,
        days_to_memorial_day=days_until(now, next_memorial),
        days_to_veterans_day=days_until(now, next_veterans),
    )


def next_event_phrase(now: datetime | date | None = None) -> str:
    """Phrase for whichever event comes first."""
    window = event_window(now)
    return MEMORIAL_DAY_PHRASE if window.memorial_day_is_next else VETERANS_DAY_PHRASE


def suggested_event_phrase(
    now: datetime | date | None = None,
    cutoff_days: int = DEFAULT_CUTOFF_DAYS,
) -> str:
    """
    Phrase for the event a new banner can realistically be printed for.

    Same as `next_event_phrase`, except that when the nearest event is within
    `cutoff_days` (inclusive) the print run has been missed and the following
    event is named instead.
    """
    window = event_window(now)
    if window.memorial_day_is_next:
        if window.days_to_memorial_day <= cutoff_days:
            return VETERANS_DAY_PHRASE
        return MEMORIAL_DAY_PHRASE
    if window.days_to_veterans_day <= cutoff_days:
        return MEMORIAL_DAY_PHRASE
    return VETERANS_DAY_PHRASE


def window_phrase_or_none(
    now: datetime | date | None = None,
    window_days: int = NOTICE_WINDOW_DAYS,
) -> str | None:
    """Phrase for an event falling within the next `window_days`, else None."""
    window = event_window(now)
    if 0 <= window.days_to_memorial_day <= window_days:
        return MEMORIAL_DAY_PHRASE
    if 0 <= window.days_to_veterans_day <= window_days:
        return VETERANS_DAY_PHRASE
    return None
