import pytest

from fitcoach.core.errors import NotFoundError
from fitcoach.models.workout import BodyZone, ExerciseCreate, ExerciseUpdate
from fitcoach.services import workout_structure as structure


@pytest.fixture
def days():
    return structure.default_days()


def test_default_days_layout(days):
    assert [d.name for d in days] == ["Day 1", "Day 2", "Day 3"]
    assert [b.name for b in days[0].blocks] == ["Block 1", "Block 2", "Block 3"]
    ids = {d.id for d in days} | {b.id for d in days for b in d.blocks}
    assert len(ids) == 12


def test_add_day_does_not_touch_input(days):
    result = structure.add_day(days)
    assert len(days) == 3
    assert result[-1].name == "Day 4"
    assert structure.add_day(days, "Rest")[-1].name == "Rest"


def test_rename_and_delete_day(days):
    target = days[1].id
    renamed = structure.rename_day(days, target, "Pull")
    assert renamed[1].name == "Pull"
    assert days[1].name == "Day 2"

    remaining = structure.delete_day(renamed, target)
    assert [d.name for d in remaining] == ["Day 1", "Day 3"]


def test_block_edits(days):
    day_id = days[0].id
    added = structure.add_block(days, day_id)
    assert added[0].blocks[-1].name == "Block 4"

    block_id = added[0].blocks[0].id
    renamed = structure.rename_block(added, day_id, block_id, "Warm-up")
    assert renamed[0].blocks[0].name == "Warm-up"

    deleted = structure.delete_block(renamed, day_id, block_id)
    assert block_id not in {b.id for b in deleted[0].blocks}


def test_exercise_edits(days):
    day_id, block_id = days[0].id, days[0].blocks[0].id
    added = structure.add_exercise(
        days,
        day_id,
        block_id,
        ExerciseCreate(name="Squat", sets=5, reps=5, weight=100, tags=[BodyZone.LEGS]),
    )
    exercise = added[0].blocks[0].exercises[0]
    assert exercise.name == "Squat"
    assert days[0].blocks[0].exercises == []

    updated = structure.update_exercise(
        added, day_id, block_id, exercise.id, ExerciseUpdate(reps=3, notes="Paused")
    )
    changed = updated[0].blocks[0].exercises[0]
    assert (changed.sets, changed.reps, changed.notes) == (5, 3, "Paused")
    assert changed.id == exercise.id

    removed = structure.delete_exercise(updated, day_id, block_id, exercise.id)
    assert removed[0].blocks[0].exercises == []


def test_unknown_ids_raise(days):
    with pytest.raises(NotFoundError, match="Day not found"):
        structure.rename_day(days, "missing", "x")
    with pytest.raises(NotFoundError, match="Block not found"):
        structure.delete_block(days, days[0].id, "missing")
    with pytest.raises(NotFoundError, match="Exercise not found"):
        structure.delete_exercise(days, days[0].id, days[0].blocks[0].id, "missing")


def test_clone_days_assigns_fresh_ids(days):
    days = structure.add_exercise(
        days, days[0].id, days[0].blocks[0].id, ExerciseCreate(name="Row")
    )
    clone = structure.clone_days(days)

    def all_ids(tree):
        return (
            {d.id for d in tree}
            | {b.id for d in tree for b in d.blocks}
            | {e.id for d in tree for b in d.blocks for e in b.exercises}
        )

    assert all_ids(clone).isdisjoint(all_ids(days))
    assert clone[0].blocks[0].exercises[0].name == "Row"
