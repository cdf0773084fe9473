"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from runlens.api.v1.routes import analysis, strava

api_router = APIRouter()

api_router.include_router(strava.router, tags=["Strava"])
api_router.include_router(analysis.router, tags=["Analysis"])
