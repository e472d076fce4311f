from fastapi import APIRouter
from app.routers import (
    auth, users, positions, employee_profiles, contracts, performance, seeder
)

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(users.router, tags=["Employee Directory"])
api_router.include_router(positions.router, tags=["Organization Chart"])
api_router.include_router(employee_profiles.router, tags=["Employee Profiles"])
api_router.include_router(contracts.router, tags=["Contracts"])
api_router.include_router(performance.router, tags=["Performance"])
api_router.include_router(seeder.router, tags=["Demo Data"])
