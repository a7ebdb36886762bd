from fastapi import APIRouter

from pharmaguard.api.routes import analysis, upload

api_router = APIRouter()

api_router.include_router(upload.router, prefix="/upload", tags=["Upload"])
api_router.include_router(analysis.router, tags=["Analysis"])
