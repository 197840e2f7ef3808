from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, tzinfo
from types import MappingProxyType

from watch_history_stats.classifier import ContentType, classify, estimate_minutes
from watch_history_stats.models import WatchEvent
from watch_history_stats.rounding import round_whole
from watch_history_stats.streaks import longest_streak
from watch_history_stats.temporal import HistogramBucket, build_histograms

DISPLAY_NAME_LIMIT = 30


@dataclass(frozen=True)
class ChannelRollup:
    name: str
    url: str | None
    video_count: int
    watch_minutes_estimate: float
    first_seen: datetime | None
    last_seen: datetime | None
    member_events: tuple[WatchEvent, ...]

    @property
    def display_name(self) -> str:
        return display_name(self.name)

    @property
    def active_span_days(self) -> int:
        if self.first_seen is None or self.last_seen is None:
            return 0
        return round_whole((self.last_seen - self.first_seen).total_seconds() / 86400)


@dataclass(frozen=True)
class ChannelSummary:
    name: str
    display_name: str
    videos: int
    watch_hours: int
    active_span_days: int
    longest_streak: int


@dataclass(frozen=True)
class ChannelDetail:
    name: str
    url: str | None
    video_count: int
    watch_minutes_estimate: float
    first_seen: datetime | None
    last_seen: datetime | None
    months: tuple[HistogramBucket, ...]
    day_of_week: tuple[HistogramBucket, ...]
    content_types: Mapping[ContentType, int]
    longest_streak: int
    events_newest_first: tuple[WatchEvent, ...]



def display_name(name: str, limit: int = DISPLAY_NAME_LIMIT) -> str:
    if len(name) > limit:
        return name[:limit] + "..."
    return name



def _build_rollup(name: str, events: list[WatchEvent]) -> ChannelRollup:
    dated = [event.watched_at for event in events if event.is_dated]
    url = next((event.channel.url for event in events if event.channel and event.channel.url), None)
    return ChannelRollup(
        name=name,
        url=url,
        video_count=len(events),
        watch_minutes_estimate=sum(estimate_minutes(event) for event in events),
        first_seen=min(dated) if dated else None,
        last_seen=max(dated) if dated else None,
        member_events=tuple(events),
    )



def build_channel_rollups(events: Iterable[WatchEvent]) -> tuple[ChannelRollup, ...]:
    """Group events by channel name and rank by video count.

    Events without a channel are left out. Ties keep the order in which the
    channels first appear in ``events``.
    """
    grouped: dict[str, list[WatchEvent]] = {}
    for event in events:
        if event.channel is None:
            continue
        grouped.setdefault(event.channel.name, []).append(event)

    rollups = [_build_rollup(name, members) for name, members in grouped.items()]
    return tuple(sorted(rollups, key=lambda rollup: -rollup.video_count))



def summarize_channels(
    rollups: Iterable[ChannelRollup],
    tz: tzinfo,
    limit: int | None = None,
) -> tuple[ChannelSummary, ...]:
    selected = list(rollups)
    if limit is not None:
        selected = selected[:limit]
    return tuple(
        ChannelSummary(
            name=rollup.name,
            display_name=rollup.display_name,
            videos=rollup.video_count,
            watch_hours=round_whole(rollup.watch_minutes_estimate / 60),
            active_span_days=rollup.active_span_days,
            longest_streak=longest_streak(rollup.member_events, tz),
        )
        for rollup in selected
    )



def build_channel_detail(rollup: ChannelRollup, tz: tzinfo) -> ChannelDetail:
    histograms = build_histograms(rollup.member_events, tz)

    content_types = {content_type: 0 for content_type in ContentType}
    for event in rollup.member_events:
        content_types[classify(event).content_type] += 1

    # Undated events stay at the end.
    dated = [event for event in rollup.member_events if event.is_dated]
    undated = [event for event in rollup.member_events if not event.is_dated]

    return ChannelDetail(
        name=rollup.name,
        url=rollup.url,
        video_count=rollup.video_count,
        watch_minutes_estimate=rollup.watch_minutes_estimate,
        first_seen=rollup.first_seen,
        last_seen=rollup.last_seen,
        months=histograms.months,
        day_of_week=histograms.day_of_week,
        content_types=MappingProxyType(content_types),
        longest_streak=longest_streak(rollup.member_events, tz),
        events_newest_first=tuple(list(reversed(dated)) + undated),
    )
