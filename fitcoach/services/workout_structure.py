"""Pure edits over a workout's day → block → exercise tree.

Every function returns a new list and leaves its input untouched, so the
result can be written straight back to the JSON column.
"""

from fitcoach.core.errors import NotFoundError
from fitcoach.models.workout import (
    Block,
    Exercise,
    ExerciseCreate,
    ExerciseUpdate,
    WorkoutDay,
)

DEFAULT_DAY_COUNT = 3
DEFAULT_BLOCK_COUNT = 3


def default_days(
    day_count: int = DEFAULT_DAY_COUNT, block_count: int = DEFAULT_BLOCK_COUNT
) -> list[WorkoutDay]:
    return [
        WorkoutDay(
            name=f"Day {d + 1}",
            blocks=[Block(name=f"Block {b + 1}") for b in range(block_count)],
        )
        for d in range(day_count)
    ]


def clone_days(days: list[WorkoutDay]) -> list[WorkoutDay]:
    """Deep copy with fresh ids on every day, block and exercise."""
    return [
        WorkoutDay(
            name=day.name,
            blocks=[
                Block(
                    name=block.name,
                    exercises=[
                        Exercise(**e.model_dump(exclude={"id"})) for e in block.exercises
                    ],
                )
                for block in day.blocks
            ],
        )
        for day in days
    ]


def _copy(days: list[WorkoutDay]) -> list[WorkoutDay]:
    return [day.model_copy(deep=True) for day in days]


def _find_day(days: list[WorkoutDay], day_id: str) -> WorkoutDay:
    for day in days:
        if day.id == day_id:
            return day
    raise NotFoundError("Day not found")


def _find_block(day: WorkoutDay, block_id: str) -> Block:
    for block in day.blocks:
        if block.id == block_id:
            return block
    raise NotFoundError("Block not found")


def _find_exercise(block: Block, exercise_id: str) -> Exercise:
    for exercise in block.exercises:
        if exercise.id == exercise_id:
            return exercise
    raise NotFoundError("Exercise not found")


def add_day(days: list[WorkoutDay], name: str | None = None) -> list[WorkoutDay]:
    result = _copy(days)
    result.append(WorkoutDay(name=name or f"Day {len(result) + 1}"))
    return result


def rename_day(days: list[WorkoutDay], day_id: str, name: str) -> list[WorkoutDay]:
    result = _copy(days)
    _find_day(result, day_id).name = name
    return result


def delete_day(days: list[WorkoutDay], day_id: str) -> list[WorkoutDay]:
    _find_day(days, day_id)
    return [day.model_copy(deep=True) for day in days if day.id != day_id]


def add_block(
    days: list[WorkoutDay], day_id: str, name: str | None = None
) -> list[WorkoutDay]:
    result = _copy(days)
    day = _find_day(result, day_id)
    day.blocks.append(Block(name=name or f"Block {len(day.blocks) + 1}"))
    return result


def rename_block(
    days: list[WorkoutDay], day_id: str, block_id: str, name: str
) -> list[WorkoutDay]:
    result = _copy(days)
    _find_block(_find_day(result, day_id), block_id).name = name
    return result


def delete_block(days: list[WorkoutDay], day_id: str, block_id: str) -> list[WorkoutDay]:
    result = _copy(days)
    day = _find_day(result, day_id)
    _find_block(day, block_id)
    day.blocks = [b for b in day.blocks if b.id != block_id]
    return result


def add_exercise(
    days: list[WorkoutDay], day_id: str, block_id: str, data: ExerciseCreate
) -> list[WorkoutDay]:
    result = _copy(days)
    block = _find_block(_find_day(result, day_id), block_id)
    block.exercises.append(Exercise(**data.model_dump()))
    return result


def update_exercise(
    days: list[WorkoutDay],
    day_id: str,
    block_id: str,
    exercise_id: str,
    changes: ExerciseUpdate,
) -> list[WorkoutDay]:
    result = _copy(days)
    block = _find_block(_find_day(result, day_id), block_id)
    current = _find_exercise(block, exercise_id)
    updated = current.model_copy(
        update=changes.model_dump(exclude_unset=True, exclude_none=True)
    )
    block.exercises = [updated if e.id == exercise_id else e for e in block.exercises]
    return result


def delete_exercise(
    days: list[WorkoutDay], day_id: str, block_id: str, exercise_id: str
) -> list[WorkoutDay]:
    result = _copy(days)
    block = _find_block(_find_day(result, day_id), block_id)
    _find_exercise(block, exercise_id)
    block.exercises = [e for e in block.exercises if e.id != exercise_id]
    return result
