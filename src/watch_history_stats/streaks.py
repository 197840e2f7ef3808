from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta, tzinfo

from watch_history_stats.models import WatchEvent


def active_dates(events: Iterable[WatchEvent], tz: tzinfo) -> list[date]:
    return sorted({event.watched_at.astimezone(tz).date() for event in events if event.is_dated})


def longest_streak(events: Iterable[WatchEvent], tz: tzinfo) -> int:
    """Longest run of consecutive local calendar days with at least one event.

    Returns 0 when no event carries a usable timestamp.
    """
    dates = active_dates(events, tz)
    if not dates:
        return 0

    best = 1
    run = 1
    for previous, day in zip(dates, dates[1:]):
        if day - previous == timedelta(days=1):
            run += 1
            best = max(best, run)
        else:
            run = 1
    return best
