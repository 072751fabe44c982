import pytest

from fitcoach.models.workout import Block, Exercise, WorkoutDay
from fitcoach.services.sanitize import sanitize_days, sanitize_text, sanitize_video_url


def test_sanitize_text_strips_markup():
    assert sanitize_text("<b>Leg</b> <em>day</em>") == "Leg day"
    assert sanitize_text(None) == ""


def test_sanitize_text_keeps_encoded_markup_inert():
    cleaned = sanitize_text("&lt;script&gt;alert(1)&lt;/script&gt;")
    assert "<" not in cleaned
    assert cleaned == "&lt;script&gt;alert(1)&lt;/script&gt;"


def test_sanitize_text_is_stable_when_reapplied():
    once = sanitize_text("Rock &amp; <b>roll</b> &lt;img&gt;")
    assert once == "Rock &amp; roll &lt;img&gt;"
    assert sanitize_text(once) == once


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://www.youtube.com/watch?v=abc123", "https://www.youtube.com/embed/abc123"),
        ("https://youtu.be/abc123", "https://www.youtube.com/embed/abc123"),
        ("https://www.youtube.com/embed/abc123", "https://www.youtube.com/embed/abc123"),
        ("https://vimeo.com/76979871", "https://player.vimeo.com/video/76979871"),
        ("https://player.vimeo.com/video/1", "https://player.vimeo.com/video/1"),
        (
            "https://bucket.s3.amazonaws.com/clips/squat.mp4",
            "https://bucket.s3.amazonaws.com/clips/squat.mp4",
        ),
    ],
)
def test_allowed_video_urls(url, expected):
    assert sanitize_video_url(url) == expected


@pytest.mark.parametrize(
    "url",
    [
        "http://www.youtube.com/watch?v=abc123",
        "javascript:alert(1)",
        "https://evil.example.com/video.mp4",
        "https://bucket.s3.amazonaws.com/notes.txt",
        "https://www.youtube.com/watch",
        "",
    ],
)
def test_rejected_video_urls(url):
    assert sanitize_video_url(url) is None


def test_sanitize_days_cleans_whole_tree():
    days = [
        WorkoutDay(
            name="<i>Day</i> 1",
            blocks=[
                Block(
                    name="Warm<br>up",
                    exercises=[
                        Exercise(
                            name="<b>Squat</b>",
                            notes="<a href='x'>deep</a>",
                            video_url="https://evil.example.com/x",
                        )
                    ],
                )
            ],
        )
    ]
    cleaned = sanitize_days(days)

    day = cleaned[0]
    exercise = day.blocks[0].exercises[0]
    assert day.name == "Day 1"
    assert day.blocks[0].name == "Warmup"
    assert exercise.name == "Squat"
    assert exercise.notes == "deep"
    assert exercise.video_url == ""
    assert exercise.id == days[0].blocks[0].exercises[0].id
