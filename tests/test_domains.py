import pytest

from watch_history_stats.domains import build_domain_breakdown, extract_domain


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://www.youtube.com/watch?v=abc", "youtube.com"),
        ("https://WWW.YouTube.com/shorts/abc", "youtube.com"),
        ("https://music.youtube.com/watch?v=abc", "music.youtube.com"),
        ("http://youtu.be/abc", "youtu.be"),
        ("not a url", None),
        ("", None),
        ("https://[::1", None),
    ],
)
def test_extract_domain(url: str, expected: str | None) -> None:
    assert extract_domain(url) == expected


def test_build_domain_breakdown_ranks_and_counts_skipped(event_factory) -> None:
    events = [
        event_factory("2024-01-01T10:00:00Z", url="https://music.youtube.com/watch?v=1"),
        event_factory("2024-01-01T11:00:00Z", url="https://www.youtube.com/watch?v=2"),
        event_factory("2024-01-01T12:00:00Z", url="https://youtube.com/watch?v=3"),
        event_factory("2024-01-01T13:00:00Z", url="garbage"),
    ]

    breakdown = build_domain_breakdown(events)

    assert [(item.domain, item.count) for item in breakdown.domains] == [
        ("youtube.com", 2),
        ("music.youtube.com", 1),
    ]
    assert breakdown.skipped == 1
