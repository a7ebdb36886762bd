from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pharmaguard import __version__
from pharmaguard.api.router import api_router
from pharmaguard.core import logging  # Initialize logging  # noqa: F401

app = FastAPI(
    title="PharmaGuard API",
    description="CPIC-aligned Pharmacogenomic Decision Engine",
    version=__version__,
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API Routers
app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "PharmaGuard"}
