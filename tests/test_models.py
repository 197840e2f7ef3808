from datetime import datetime, timezone

from watch_history_stats.models import parse_datetime, parse_watch_event, sort_chronologically


def test_parse_datetime_handles_zulu_offsets_and_naive_values() -> None:
    assert parse_datetime("2024-01-01T10:00:00.123Z") == datetime(2024, 1, 1, 10, 0, 0, 123000, tzinfo=timezone.utc)
    assert parse_datetime("2024-01-01T12:00:00+02:00") == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    assert parse_datetime("2024-01-01") == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_parse_watch_event_reads_channel_and_ignores_extra_fields(record_factory) -> None:
    record = record_factory("2024-01-01T10:00:00Z", channel="Alice")
    record["details"] = [{"name": "something"}]

    event = parse_watch_event(record)

    assert event.title == "Watched Cooking pasta"
    assert event.title_url == "https://www.youtube.com/watch?v=abc"
    assert event.channel_name == "Alice"
    assert event.channel.url == "https://www.youtube.com/@Alice"
    assert event.watched_at == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


def test_parse_watch_event_keeps_records_with_bad_timestamps() -> None:
    event = parse_watch_event({"title": "Watched something", "time": "yesterday-ish"})

    assert event.watched_at is None
    assert event.raw_time == "yesterday-ish"
    assert event.channel is None
    assert event.title_url == ""


def test_sort_chronologically_is_stable_and_puts_undated_last(event_factory) -> None:
    first = event_factory("2024-01-02T10:00:00Z", title="first tie")
    second = event_factory("2024-01-02T10:00:00Z", title="second tie")
    undated = event_factory(None, title="no date")
    earliest = event_factory("2024-01-01T10:00:00Z", title="earliest")

    ordered = sort_chronologically([undated, first, second, earliest])

    assert [event.title for event in ordered] == ["earliest", "first tie", "second tie", "no date"]


def test_timestamps_outside_the_convertible_range_are_treated_as_undated() -> None:
    underflow = parse_watch_event({"title": "Watched x", "time": "0001-01-01T00:00:00+01:00"})
    near_end = parse_watch_event({"title": "Watched y", "time": "9999-12-31T23:00:00Z"})

    assert underflow.watched_at is None
    assert underflow.raw_time == "0001-01-01T00:00:00+01:00"
    assert near_end.watched_at is None
    assert not near_end.is_dated


def test_directly_built_events_near_the_range_end_sort_as_undated(event_factory) -> None:
    edge = event_factory("9999-12-31T23:00:00Z", title="edge")
    normal = event_factory("2024-01-01T10:00:00Z", title="normal")

    assert edge.watched_at is not None
    assert not edge.is_dated
    assert [event.title for event in sort_chronologically([edge, normal])] == ["normal", "edge"]
