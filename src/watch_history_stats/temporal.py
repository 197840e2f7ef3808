from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, tzinfo

from watch_history_stats.classifier import estimate_minutes
from watch_history_stats.models import WatchEvent

DAYS_OF_WEEK = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


@dataclass(frozen=True)
class HistogramBucket:
    key: int | str
    count: int
    watch_minutes: float


@dataclass(frozen=True)
class TemporalHistograms:
    hour_of_day: tuple[HistogramBucket, ...]
    day_of_week: tuple[HistogramBucket, ...]
    months: tuple[HistogramBucket, ...]
    years: tuple[HistogramBucket, ...]



def local_datetimes(events: Iterable[WatchEvent], tz: tzinfo) -> list[tuple[datetime, WatchEvent]]:
    return [
        (event.watched_at.astimezone(tz), event)
        for event in events
        if event.is_dated
    ]



def _day_index(moment: datetime) -> int:
    # datetime.weekday() starts at Monday, the buckets start at Sunday.
    return (moment.weekday() + 1) % 7



def _bucketize(pairs: list[tuple[int | str, float]]) -> dict[int | str, list[float]]:
    buckets: dict[int | str, list[float]] = {}
    for key, minutes in pairs:
        buckets.setdefault(key, []).append(minutes)
    return buckets



def _fixed_buckets(keys: Iterable[int | str], grouped: dict[int | str, list[float]]) -> tuple[HistogramBucket, ...]:
    return tuple(
        HistogramBucket(key=key, count=len(grouped.get(key, [])), watch_minutes=sum(grouped.get(key, [])))
        for key in keys
    )



def _open_buckets(grouped: dict[int | str, list[float]]) -> tuple[HistogramBucket, ...]:
    return tuple(
        HistogramBucket(key=key, count=len(minutes), watch_minutes=sum(minutes))
        for key, minutes in sorted(grouped.items())
    )



def build_histograms(events: Iterable[WatchEvent], tz: tzinfo) -> TemporalHistograms:
    """Bucket dated events by local hour, weekday, month and year.

    Hour and weekday buckets are always complete (24 and 7 entries), month and
    year buckets only exist for periods that contain at least one event.
    """
    dated = [(moment, estimate_minutes(event)) for moment, event in local_datetimes(events, tz)]

    by_hour = _bucketize([(moment.hour, minutes) for moment, minutes in dated])
    by_day = _bucketize([(DAYS_OF_WEEK[_day_index(moment)], minutes) for moment, minutes in dated])
    by_month = _bucketize([(f"{moment.year:04d}-{moment.month:02d}", minutes) for moment, minutes in dated])
    by_year = _bucketize([(moment.year, minutes) for moment, minutes in dated])

    return TemporalHistograms(
        hour_of_day=_fixed_buckets(range(24), by_hour),
        day_of_week=_fixed_buckets(DAYS_OF_WEEK, by_day),
        months=_open_buckets(by_month),
        years=_open_buckets(by_year),
    )



def peak_hours(histograms: TemporalHistograms, k: int = 3) -> list[int]:
    active = [bucket for bucket in histograms.hour_of_day if bucket.count > 0]
    ranked = sorted(active, key=lambda bucket: (-bucket.count, bucket.key))
    return [int(bucket.key) for bucket in ranked[:k]]



def peak_month(histograms: TemporalHistograms) -> str | None:
    # Buckets are sorted by key, so max() keeps the earliest month on ties.
    if not histograms.months:
        return None
    return str(max(histograms.months, key=lambda bucket: bucket.watch_minutes).key)



def most_active_year(histograms: TemporalHistograms) -> int | None:
    if not histograms.years:
        return None
    return int(max(histograms.years, key=lambda bucket: bucket.count).key)
