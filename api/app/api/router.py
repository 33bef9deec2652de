from fastapi import APIRouter

from app.api.routes import admin, auth, health, jobs, settings, talents, uploads

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(jobs.router, prefix="/jobs", tags=["public"])
api_router.include_router(talents.router, prefix="/talents", tags=["public"])
api_router.include_router(uploads.router, prefix="/upload", tags=["uploads"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(admin.router, prefix="/admin", tags=["moderation"])
