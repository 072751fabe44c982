from pydantic import BaseModel

from fitcoach.models.workout import BodyZone


class CatalogExercise(BaseModel):
    id: str
    name: str
    tags: list[BodyZone]
    video_url: str
    notes: str = ""


EXERCISES: tuple[CatalogExercise, ...] = (
    CatalogExercise(
        id="bench-press",
        name="Flat Bench Press",
        tags=[BodyZone.CHEST, BodyZone.TRICEPS],
        video_url="https://www.youtube.com/embed/rT7DgCr-3pg",
        notes="Shoulders back and down, elbows at about 45 degrees.",
    ),
    CatalogExercise(
        id="incline-press",
        name="Incline Bench Press",
        tags=[BodyZone.CHEST, BodyZone.SHOULDERS],
        video_url="https://www.youtube.com/embed/SrqOu55lrYU",
        notes="Bench at 30-45 degrees.",
    ),
    CatalogExercise(
        id="dumbbell-fly",
        name="Dumbbell Fly",
        tags=[BodyZone.CHEST],
        video_url="https://www.youtube.com/embed/eozdVDA78K0",
        notes="Keep a slight bend in the elbows throughout.",
    ),
    CatalogExercise(
        id="pull-up",
        name="Pull-up",
        tags=[BodyZone.BACK, BodyZone.BICEPS],
        video_url="https://www.youtube.com/embed/eGo4IYlbE5g",
    ),
    CatalogExercise(
        id="barbell-row",
        name="Barbell Row",
        tags=[BodyZone.BACK],
        video_url="https://www.youtube.com/embed/FWJR5Ve8bnQ",
        notes="Neutral spine, pull towards the lower ribs.",
    ),
    CatalogExercise(
        id="overhead-press",
        name="Overhead Press",
        tags=[BodyZone.SHOULDERS, BodyZone.TRICEPS],
        video_url="https://www.youtube.com/embed/2yjwXTZQDDI",
    ),
    CatalogExercise(
        id="biceps-curl",
        name="Biceps Curl",
        tags=[BodyZone.BICEPS],
        video_url="https://www.youtube.com/embed/ykJmrZ5v0Oo",
    ),
    CatalogExercise(
        id="triceps-dip",
        name="Triceps Dip",
        tags=[BodyZone.TRICEPS, BodyZone.CHEST],
        video_url="https://www.youtube.com/embed/6kALZikXxLc",
    ),
    CatalogExercise(
        id="back-squat",
        name="Back Squat",
        tags=[BodyZone.LEGS, BodyZone.GLUTES],
        video_url="https://www.youtube.com/embed/ultWZbUMPL8",
        notes="Knees track over toes, hips below parallel.",
    ),
    CatalogExercise(
        id="romanian-deadlift",
        name="Romanian Deadlift",
        tags=[BodyZone.LEGS, BodyZone.GLUTES, BodyZone.BACK],
        video_url="https://www.youtube.com/embed/JCXUYuzwNrM",
    ),
    CatalogExercise(
        id="hip-thrust",
        name="Hip Thrust",
        tags=[BodyZone.GLUTES],
        video_url="https://www.youtube.com/embed/SEdqd1n0cvg",
    ),
    CatalogExercise(
        id="plank",
        name="Plank",
        tags=[BodyZone.CORE, BodyZone.ABS],
        video_url="https://www.youtube.com/embed/pSHjTRCQxIw",
    ),
    CatalogExercise(
        id="crunch",
        name="Crunch",
        tags=[BodyZone.ABS],
        video_url="https://www.youtube.com/embed/Xyd_fa5zoEU",
    ),
    CatalogExercise(
        id="burpee",
        name="Burpee",
        tags=[BodyZone.FULLBODY, BodyZone.CARDIO],
        video_url="https://www.youtube.com/embed/dZgVxmf6jkA",
    ),
)


def list_exercises(tag: BodyZone | None = None) -> list[CatalogExercise]:
    if tag is None:
        return list(EXERCISES)
    return [e for e in EXERCISES if tag in e.tags]
