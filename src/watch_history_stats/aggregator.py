from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable
from dataclasses import dataclass, fields, is_dataclass
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Any

from watch_history_stats.channels import ChannelRollup, ChannelSummary, build_channel_rollups, summarize_channels
from watch_history_stats.classifier import ContentType, classify
from watch_history_stats.config import DEFAULT_SETTINGS, Settings
from watch_history_stats.decoder import decode_payloads
from watch_history_stats.domains import DomainCount, build_domain_breakdown
from watch_history_stats.exceptions import EmptyInputError, MalformedRecordWarning
from watch_history_stats.models import WatchEvent, sort_chronologically
from watch_history_stats.rounding import round_half_up, round_whole
from watch_history_stats.streaks import longest_streak
from watch_history_stats.temporal import (
    TemporalHistograms,
    build_histograms,
    most_active_year,
    peak_hours,
    peak_month,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BasicStats:
    total_videos: int
    total_days: int
    unique_channels: int
    average_videos_per_channel: int
    videos_per_day: float
    first_video: datetime | None
    last_video: datetime | None
    peak_hours: tuple[int, ...]
    most_active_year: int | None
    peak_month: str | None
    longest_streak: int


@dataclass(frozen=True)
class WatchTimeStats:
    total_minutes: int
    total_hours: int
    total_days: int
    average_minutes_per_day: int


@dataclass(frozen=True)
class ContentTypeBreakdown:
    regular: int
    short_form: int
    live_stream: int
    regular_percent: int
    short_form_percent: int
    live_stream_percent: int


@dataclass(frozen=True)
class SkippedRecords:
    timestamps: int
    urls: int


@dataclass(frozen=True)
class SummaryReport:
    basic: BasicStats
    watch_time: WatchTimeStats
    content_types: ContentTypeBreakdown
    channels: tuple[ChannelRollup, ...]
    top_channels: tuple[ChannelSummary, ...]
    histograms: TemporalHistograms
    domains: tuple[DomainCount, ...]
    skipped: SkippedRecords

    def to_dict(self, include_events: bool = False) -> dict[str, Any]:
        """JSON-compatible view of the report.

        Member events of every channel are omitted unless ``include_events``.
        """
        out = _jsonable(self)
        if not include_events:
            for channel in out["channels"]:
                channel.pop("member_events", None)
        return out



def _percent(part: int, total: int) -> int:
    if total == 0:
        return 0
    return round_whole(part / total * 100)



def _content_type_breakdown(events: list[WatchEvent]) -> ContentTypeBreakdown:
    counts = {content_type: 0 for content_type in ContentType}
    for event in events:
        counts[classify(event).content_type] += 1

    total = len(events)
    return ContentTypeBreakdown(
        regular=counts[ContentType.REGULAR],
        short_form=counts[ContentType.SHORT_FORM],
        live_stream=counts[ContentType.LIVE_STREAM],
        regular_percent=_percent(counts[ContentType.REGULAR], total),
        short_form_percent=_percent(counts[ContentType.SHORT_FORM], total),
        live_stream_percent=_percent(counts[ContentType.LIVE_STREAM], total),
    )



def _watch_time_stats(events: list[WatchEvent], total_days: int) -> WatchTimeStats:
    estimated_minutes = sum(classify(event).minutes for event in events)
    return WatchTimeStats(
        total_minutes=round_whole(estimated_minutes),
        total_hours=round_whole(estimated_minutes / 60),
        total_days=round_whole(estimated_minutes / 1440),
        average_minutes_per_day=round_whole(estimated_minutes / max(total_days, 1)),
    )



def build_summary_report(
    events: Iterable[WatchEvent],
    tz: tzinfo = timezone.utc,
    top_channels: int = DEFAULT_SETTINGS.top_channels,
) -> SummaryReport:
    ordered = sort_chronologically(list(events))
    if not ordered:
        raise EmptyInputError("No watch events to analyze")

    total_videos = len(ordered)
    dated = [event.watched_at for event in ordered if event.is_dated]
    first_video = dated[0] if dated else None
    last_video = dated[-1] if dated else None
    total_days = (last_video - first_video).days if dated else 0

    channels = build_channel_rollups(ordered)
    histograms = build_histograms(ordered, tz)
    domains = build_domain_breakdown(ordered)
    skipped = SkippedRecords(timestamps=total_videos - len(dated), urls=domains.skipped)

    unique_channels = len(channels)
    basic = BasicStats(
        total_videos=total_videos,
        total_days=total_days,
        unique_channels=unique_channels,
        average_videos_per_channel=round_whole(total_videos / unique_channels) if unique_channels else 0,
        videos_per_day=round_half_up(total_videos / max(total_days, 1), 1),
        first_video=first_video,
        last_video=last_video,
        peak_hours=tuple(peak_hours(histograms)),
        most_active_year=most_active_year(histograms),
        peak_month=peak_month(histograms),
        longest_streak=longest_streak(ordered, tz),
    )

    if skipped.timestamps or skipped.urls:
        logger.warning(
            "records_skipped",
            extra={"timestamps": skipped.timestamps, "urls": skipped.urls},
        )
        warnings.warn(
            f"{skipped.timestamps} record(s) without a usable timestamp and "
            f"{skipped.urls} record(s) without a usable URL were left out of derived aggregates",
            MalformedRecordWarning,
            stacklevel=2,
        )

    report = SummaryReport(
        basic=basic,
        watch_time=_watch_time_stats(ordered, total_days),
        content_types=_content_type_breakdown(ordered),
        channels=channels,
        top_channels=summarize_channels(channels, tz, limit=top_channels),
        histograms=histograms,
        domains=domains.domains,
        skipped=skipped,
    )
    logger.info(
        "report_built",
        extra={"total_videos": total_videos, "unique_channels": unique_channels},
    )
    return report



def analyze_payloads(
    payloads: Iterable[str | bytes],
    settings: Settings | None = None,
) -> SummaryReport:
    settings = settings or DEFAULT_SETTINGS
    events = decode_payloads(payloads)
    return build_summary_report(events, tz=settings.tzinfo, top_channels=settings.top_channels)



def _jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        out = {field.name: _jsonable(getattr(value, field.name)) for field in fields(value)}
        if isinstance(value, ChannelRollup):
            out["display_name"] = value.display_name
            out["active_span_days"] = value.active_span_days
        return out
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(_jsonable(key)): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value
