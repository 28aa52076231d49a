"""Calendar arithmetic for streaks and weekly stats."""

from datetime import date, datetime, timedelta


def local_date(moment: datetime) -> date:
    """Calendar date of a timestamp in local time.

    Aware timestamps (e.g. ``2024-05-01T23:30:00Z`` written by a browser) are
    converted to local time first so they compare with naive local clocks.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def week_start(day: date) -> date:
    """Sunday on or before ``day``."""
    # date.weekday(): Monday == 0 ... Sunday == 6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def day_diff(earlier: datetime, later: datetime) -> int:
    """Whole calendar days from ``earlier`` to ``later`` (negative on clock skew)."""
    return (local_date(later) - local_date(earlier)).days


def calculate_streak(streak_days: int, last_study_date: datetime, now: datetime) -> int:
    """Next streak value for a session studied at ``now``.

    Same day keeps the streak, the next day extends it, anything else
    (a gap or a clock that went backwards) starts over at 1.
    """
    diff = day_diff(last_study_date, now)
    if diff == 0:
        return streak_days
    elif diff == 1:
        return streak_days + 1
    else:
        return 1
