from fitcoach.models.workout import BodyZone
from fitcoach.services.catalog import EXERCISES, list_exercises


def test_list_all():
    assert len(list_exercises()) == len(EXERCISES)


def test_filter_by_tag():
    glutes = list_exercises(BodyZone.GLUTES)
    assert glutes
    assert all(BodyZone.GLUTES in e.tags for e in glutes)


def test_catalog_ids_are_unique():
    ids = [e.id for e in EXERCISES]
    assert len(ids) == len(set(ids))
