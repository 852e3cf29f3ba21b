from fastapi import APIRouter
from .users import router as users_router
from .profile import router as profile_router
from .requests import router as requests_router
from .messages import router as messages_router

router = APIRouter()
router.include_router(users_router, prefix='/users', tags=['users'])
router.include_router(profile_router, prefix='/profile', tags=['profile'])
router.include_router(requests_router, prefix='/requests', tags=['requests'])
router.include_router(messages_router, prefix='/messages', tags=['messages'])
