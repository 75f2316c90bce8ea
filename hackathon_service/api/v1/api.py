# hackathon_service/api/v1/api.py

from fastapi import APIRouter

from hackathon_service.api.v1.endpoints import (
    admin_participants,
    admin_workshops,
    admins,
    profile,
    registration,
    rsvp,
    workshops,
)

api_router = APIRouter()

api_router.include_router(registration.router)
api_router.include_router(profile.router)
api_router.include_router(workshops.router)
api_router.include_router(rsvp.router)
api_router.include_router(admin_workshops.router)
api_router.include_router(admin_participants.router)
api_router.include_router(admins.router)
