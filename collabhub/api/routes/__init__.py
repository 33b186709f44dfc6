"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from collabhub.api.routes.auth_routes import router as auth_router
from collabhub.api.routes.user_routes import router as user_router
from collabhub.api.routes.project_routes import router as project_router
from collabhub.api.routes.application_routes import router as application_router
from collabhub.api.routes.message_routes import router as message_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(project_router)
api_router.include_router(application_router)
api_router.include_router(message_router)
