from __future__ import annotations

from datetime import datetime

import pytest

from watch_history_stats.models import ChannelRef, WatchEvent, parse_datetime


def make_event(
    when: str | None,
    title: str = "Watched Cooking pasta",
    channel: str | None = "Alice",
    url: str = "https://www.youtube.com/watch?v=abc",
) -> WatchEvent:
    watched_at: datetime | None = parse_datetime(when) if when else None
    return WatchEvent(
        watched_at=watched_at,
        title=title,
        title_url=url,
        channel=ChannelRef(name=channel, url=f"https://www.youtube.com/@{channel}") if channel else None,
        raw_time=when,
    )


def make_record(
    when: str,
    title: str = "Watched Cooking pasta",
    channel: str | None = "Alice",
    url: str = "https://www.youtube.com/watch?v=abc",
) -> dict:
    record = {
        "header": "YouTube",
        "title": title,
        "titleUrl": url,
        "time": when,
        "products": ["YouTube"],
    }
    if channel:
        record["subtitles"] = [{"name": channel, "url": f"https://www.youtube.com/@{channel}"}]
    return record


@pytest.fixture
def event_factory():
    return make_event


@pytest.fixture
def record_factory():
    return make_record
