from urllib.parse import parse_qs, urlparse

from markupsafe import Markup, escape

from fitcoach.models.workout import Block, Exercise, WorkoutDay

ALLOWED_VIDEO_HOSTS = (
    "youtube.com",
    "www.youtube.com",
    "youtu.be",
    "vimeo.com",
    "player.vimeo.com",
)

# Direct video files are accepted from these hosts and their subdomains
ALLOWED_STORAGE_HOSTS = (
    "storage.googleapis.com",
    "firebasestorage.googleapis.com",
    "amazonaws.com",
    "cloudfront.net",
    "res.cloudinary.com",
)

VIDEO_EXTENSIONS = (".mp4", ".webm", ".ogg", ".mov")


def sanitize_text(value: str | None) -> str:
    """Strip markup from user-provided text.

    ``striptags`` decodes entities after removing tags, so the result is
    escaped again and never carries a live ``<``.
    """
    if not value:
        return ""
    return str(escape(Markup(value).striptags()))


def _is_storage_host(host: str) -> bool:
    return any(host == h or host.endswith(f".{h}") for h in ALLOWED_STORAGE_HOSTS)


def sanitize_video_url(url: str | None) -> str | None:
    """Return a safe (embeddable) form of ``url`` or ``None`` if not allowed."""
    if not url:
        return None
    parsed = urlparse(url.strip())
    if parsed.scheme != "https" or not parsed.hostname:
        return None
    host = parsed.hostname.lower()

    if parsed.path.lower().endswith(VIDEO_EXTENSIONS) and _is_storage_host(host):
        return parsed.geturl()

    if host not in ALLOWED_VIDEO_HOSTS:
        return None

    if host.endswith("youtube.com"):
        if parsed.path.startswith("/embed/"):
            return parsed.geturl()
        video_id = parse_qs(parsed.query).get("v", [""])[0]
        return f"https://www.youtube.com/embed/{video_id}" if video_id else None

    if host == "youtu.be":
        video_id = parsed.path.lstrip("/")
        return f"https://www.youtube.com/embed/{video_id}" if video_id else None

    if host == "vimeo.com":
        video_id = parsed.path.strip("/")
        return f"https://player.vimeo.com/video/{video_id}" if video_id else None

    # player.vimeo.com
    return parsed.geturl()


def sanitize_exercise(exercise: Exercise) -> Exercise:
    return exercise.model_copy(
        update={
            "name": sanitize_text(exercise.name),
            "notes": sanitize_text(exercise.notes),
            "video_url": sanitize_video_url(exercise.video_url) or "",
        }
    )


def sanitize_block(block: Block) -> Block:
    return block.model_copy(
        update={
            "name": sanitize_text(block.name),
            "exercises": [sanitize_exercise(e) for e in block.exercises],
        }
    )


def sanitize_days(days: list[WorkoutDay]) -> list[WorkoutDay]:
    return [
        day.model_copy(
            update={
                "name": sanitize_text(day.name),
                "blocks": [sanitize_block(b) for b in day.blocks],
            }
        )
        for day in days
    ]
