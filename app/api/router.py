from fastapi import APIRouter

from app.api.v1 import auth, events, participations, evaluations

# Initialize API router
api_router = APIRouter()

# Include routers from different modules
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(events.router, prefix="/events", tags=["Events"])
api_router.include_router(participations.router, prefix="/participations", tags=["Participations"])
api_router.include_router(evaluations.router, prefix="/evaluations", tags=["Evaluations"])
