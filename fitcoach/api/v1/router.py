from fastapi import APIRouter

from fitcoach.api.v1.admin import router as admin_router
from fitcoach.api.v1.auth import router as auth_router
from fitcoach.api.v1.coaches import router as coaches_router
from fitcoach.api.v1.exercises import router as exercises_router
from fitcoach.api.v1.users import router as users_router
from fitcoach.api.v1.workout_structure import router as workout_structure_router
from fitcoach.api.v1.workouts import router as workouts_router

router = APIRouter(prefix="/api/v1")

router.include_router(auth_router)
router.include_router(users_router)
router.include_router(admin_router)
router.include_router(coaches_router)
router.include_router(workouts_router)
router.include_router(workout_structure_router)
router.include_router(exercises_router)
