from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import urlsplit

from watch_history_stats.models import WatchEvent


@dataclass(frozen=True)
class DomainCount:
    domain: str
    count: int


@dataclass(frozen=True)
class DomainBreakdown:
    domains: tuple[DomainCount, ...]
    skipped: int


def extract_domain(url: str) -> str | None:
    if not url:
        return None
    try:
        hostname = urlsplit(url.strip()).hostname
    except ValueError:
        return None
    if not hostname:
        return None
    hostname = hostname.lower()
    if hostname.startswith("www."):
        hostname = hostname[len("www."):]
    return hostname or None


def build_domain_breakdown(events: Iterable[WatchEvent]) -> DomainBreakdown:
    counts: Counter[str] = Counter()
    skipped = 0
    for event in events:
        domain = extract_domain(event.title_url)
        if domain is None:
            skipped += 1
            continue
        counts[domain] += 1

    # Counter.most_common keeps insertion order for equal counts.
    ranked = tuple(DomainCount(domain=domain, count=count) for domain, count in counts.most_common())
    return DomainBreakdown(domains=ranked, skipped=skipped)
