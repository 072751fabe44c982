from fastapi import APIRouter

from fitcoach.models.workout import BodyZone
from fitcoach.services.catalog import CatalogExercise, list_exercises

router = APIRouter(prefix="/exercises", tags=["exercises"])


@router.get("", response_model=list[CatalogExercise])
async def get_exercises(tag: BodyZone | None = None):
    """The built-in exercise library, optionally filtered by body zone."""
    return list_exercises(tag)
