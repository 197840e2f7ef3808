"""Content-type classification of watch events.

The rules are text heuristics over the title and the destination URL path.
The watch-history export carries no real durations, so each content type
maps to a fixed estimate in minutes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

from watch_history_stats.models import WatchEvent


class ContentType(str, Enum):
    SHORT_FORM = "short-form"
    LIVE_STREAM = "live/stream"
    REGULAR = "regular"


@dataclass(frozen=True)
class ClassificationRule:
    content_type: ContentType
    minutes: float
    title_markers: tuple[str, ...] = ()
    url_path_markers: tuple[str, ...] = ()

    def matches(self, title: str, url_path: str) -> bool:
        if any(marker in title for marker in self.title_markers):
            return True
        return any(marker in url_path for marker in self.url_path_markers)


@dataclass(frozen=True)
class Classification:
    content_type: ContentType
    minutes: float


# Evaluated top to bottom, first match wins.
RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        content_type=ContentType.SHORT_FORM,
        minutes=0.75,
        title_markers=("short", "#shorts"),
        url_path_markers=("/shorts/",),
    ),
    ClassificationRule(
        content_type=ContentType.LIVE_STREAM,
        minutes=45.0,
        title_markers=("stream", "live", "[live]", "\U0001f534"),
    ),
)

FALLBACK = Classification(content_type=ContentType.REGULAR, minutes=8.0)


def _url_path(url: str) -> str:
    try:
        return urlsplit(url).path.lower()
    except ValueError:
        return url.lower()


def classify(event: WatchEvent) -> Classification:
    title = event.title.lower()
    url_path = _url_path(event.title_url)
    for rule in RULES:
        if rule.matches(title, url_path):
            return Classification(content_type=rule.content_type, minutes=rule.minutes)
    return FALLBACK


def estimate_minutes(event: WatchEvent) -> float:
    return classify(event).minutes
