from datetime import timezone
from zoneinfo import ZoneInfo

from watch_history_stats.streaks import longest_streak


def _events(event_factory, days: list[str]):
    return [event_factory(f"{day}T12:00:00Z") for day in days]


def test_longest_streak_counts_consecutive_calendar_days(event_factory) -> None:
    events = _events(event_factory, ["2024-01-01", "2024-01-02", "2024-01-04"])

    assert longest_streak(events, timezone.utc) == 2


def test_longest_streak_edge_cases(event_factory) -> None:
    assert longest_streak([], timezone.utc) == 0
    assert longest_streak([event_factory(None)], timezone.utc) == 0
    assert longest_streak(_events(event_factory, ["2024-01-01"]), timezone.utc) == 1
    assert longest_streak(_events(event_factory, ["2024-01-01", "2024-01-01"]), timezone.utc) == 1


def test_longest_streak_crosses_month_and_year_boundaries(event_factory) -> None:
    events = _events(event_factory, ["2023-12-30", "2023-12-31", "2024-01-01", "2024-01-03"])

    assert longest_streak(events, timezone.utc) == 3


def test_longest_streak_never_shrinks_when_days_are_added(event_factory) -> None:
    smaller = _events(event_factory, ["2024-01-01", "2024-01-02", "2024-01-04", "2024-01-10"])
    larger = smaller + _events(event_factory, ["2024-01-03", "2024-01-20"])

    assert longest_streak(smaller, timezone.utc) == 2
    assert longest_streak(larger, timezone.utc) == 4
    assert longest_streak(larger, timezone.utc) >= longest_streak(smaller, timezone.utc)


def test_longest_streak_uses_local_dates(event_factory) -> None:
    events = [
        event_factory("2024-01-01T22:30:00Z"),
        event_factory("2024-01-01T23:30:00Z"),
    ]

    assert longest_streak(events, timezone.utc) == 1
    assert longest_streak(events, ZoneInfo("Europe/Berlin")) == 2
