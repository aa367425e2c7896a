# signup/api/routes.py
from fastapi import APIRouter

from signup.api import attendance, sessions

router = APIRouter(prefix="/api")

router.include_router(sessions.router)
router.include_router(attendance.router)
