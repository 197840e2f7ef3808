import pytest

from watch_history_stats.classifier import ContentType, classify


@pytest.mark.parametrize(
    ("title", "url", "expected", "minutes"),
    [
        ("My Great #shorts Clip", "https://www.youtube.com/shorts/abc", ContentType.SHORT_FORM, 0.75),
        ("Watched a quick SHORT", "https://www.youtube.com/watch?v=abc", ContentType.SHORT_FORM, 0.75),
        ("Watched Cooking pasta", "https://www.youtube.com/shorts/abc", ContentType.SHORT_FORM, 0.75),
        ("Short stream highlights", "https://www.youtube.com/watch?v=abc", ContentType.SHORT_FORM, 0.75),
        ("LIVE: Launch day", "https://www.youtube.com/watch?v=abc", ContentType.LIVE_STREAM, 45.0),
        ("Sunday Livestream", "https://www.youtube.com/watch?v=abc", ContentType.LIVE_STREAM, 45.0),
        ("\U0001f534 Now on air", "https://www.youtube.com/watch?v=abc", ContentType.LIVE_STREAM, 45.0),
        ("Watched Cooking pasta", "https://www.youtube.com/watch?v=abc", ContentType.REGULAR, 8.0),
        ("Watched Cooking pasta", "not a url", ContentType.REGULAR, 8.0),
    ],
)
def test_classify_applies_rules_in_priority_order(event_factory, title, url, expected, minutes) -> None:
    result = classify(event_factory("2024-01-01T10:00:00Z", title=title, url=url))

    assert result.content_type is expected
    assert result.minutes == minutes


def test_shorts_marker_in_query_string_is_not_a_path_match(event_factory) -> None:
    event = event_factory(
        "2024-01-01T10:00:00Z",
        title="Watched Cooking pasta",
        url="https://www.youtube.com/watch?v=abc&ref=/shorts/",
    )

    assert classify(event).content_type is ContentType.REGULAR
