from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class ChannelRef:
    name: str
    url: str | None


@dataclass(frozen=True)
class WatchEvent:
    watched_at: datetime | None
    title: str
    title_url: str
    channel: ChannelRef | None
    raw_time: str | None = None

    @property
    def is_dated(self) -> bool:
        return usable_timestamp(self.watched_at)

    @property
    def channel_name(self) -> str | None:
        return self.channel.name if self.channel is not None else None



# Within these bounds an instant converts to any UTC offset without overflowing.
EARLIEST_TIMESTAMP = datetime(1, 1, 2, tzinfo=timezone.utc)
LATEST_TIMESTAMP = datetime(9999, 12, 30, tzinfo=timezone.utc)



def usable_timestamp(value: datetime | None) -> bool:
    return value is not None and EARLIEST_TIMESTAMP <= value <= LATEST_TIMESTAMP


def parse_datetime(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)



def _parse_optional_datetime(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = parse_datetime(value)
    except (ValueError, OverflowError):
        return None
    return parsed if usable_timestamp(parsed) else None



def _extract_channel(payload: dict[str, Any]) -> ChannelRef | None:
    subtitles = payload.get("subtitles")
    if subtitles is None:
        return None
    if not isinstance(subtitles, list):
        raise ValueError("subtitles must be a list")
    if not subtitles:
        return None

    first = subtitles[0]
    if not isinstance(first, dict):
        raise ValueError("subtitles entries must be objects")

    name = first.get("name")
    if not isinstance(name, str) or not name:
        return None
    url = first.get("url")
    return ChannelRef(name=name, url=str(url) if url else None)



def parse_watch_event(payload: dict[str, Any]) -> WatchEvent:
    if not isinstance(payload, dict):
        raise ValueError(f"Expected an object, got {type(payload).__name__}")

    title = payload.get("title")
    if not isinstance(title, str):
        raise ValueError("Missing title in payload")

    raw_time = payload.get("time")
    title_url = payload.get("titleUrl")

    return WatchEvent(
        watched_at=_parse_optional_datetime(raw_time),
        title=title,
        title_url=title_url if isinstance(title_url, str) else "",
        channel=_extract_channel(payload),
        raw_time=str(raw_time) if raw_time is not None else None,
    )



def sort_chronologically(events: list[WatchEvent]) -> list[WatchEvent]:
    """Stable chronological order; undated events go last, in input order."""
    return sorted(
        events,
        key=lambda event: (
            not event.is_dated,
            event.watched_at if event.is_dated else EARLIEST_TIMESTAMP,
        ),
    )
