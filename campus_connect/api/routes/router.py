from fastapi import APIRouter

from campus_connect.api.routes.chat import router as chat_router
from campus_connect.api.routes.events import router as events_router
from campus_connect.api.routes.photos import router as photos_router
from campus_connect.api.routes.registrations import router as registrations_router
from campus_connect.api.routes.users import router as users_router

router = APIRouter()
router.include_router(events_router)
router.include_router(registrations_router)
router.include_router(chat_router)
router.include_router(photos_router)
router.include_router(users_router)
