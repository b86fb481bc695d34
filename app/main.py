"""
Placify - Main Application

FastAPI backend with:
- PostgreSQL for users, profiles and analyses
- MongoDB for intake drafts and uploaded documents
- Generative AI (OpenAI-compatible API) for the readiness analysis
- JWT authentication
- Single-page frontend served from /frontend

Run: uvicorn app.main:app --reload
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse

from app import __version__
from app.api.routes import api_router
from app.core.config import get_settings
from app.core.logging import configure_logging
from app.db.mongodb import init_mongo_indexes
from app.db.schema import init_schema

configure_logging()
logger = logging.getLogger(__name__)

settings = get_settings()

# Get the project root directory
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
FRONTEND_DIR = os.path.join(PROJECT_ROOT, "frontend", "public")

# Create FastAPI app
app = FastAPI(
    title="Placify",
    description="""
    AI placement readiness companion.

    ## Features
    - **Authentication**: sign up, sign in, sign out (JWT)
    - **Intake**: multi-step profile form with per-step completion
    - **Analysis**: AI comparison of profile + resume against company requirements
    - **Dashboard**: score, skill gaps, company matches and action plan

    ## Databases
    - PostgreSQL: users, profiles, analyses
    - MongoDB: intake drafts, uploaded documents
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")

# Serve static files (for any additional assets)
if os.path.exists(FRONTEND_DIR):
    app.mount("/static", StaticFiles(directory=FRONTEND_DIR), name="static")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create tables and MongoDB indexes on startup."""
    try:
        init_schema()
        logger.info("Database schema ready")
    except Exception as e:
        logger.error("Database schema initialization failed: %s", e)

    try:
        init_mongo_indexes()
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)


# Serve frontend for root path
@app.get("/", tags=["Frontend"])
async def serve_frontend():
    """Serve the single-page frontend (landing page for signed-out users)."""
    index_path = os.path.join(FRONTEND_DIR, "index.html")
    if os.path.exists(index_path):
        return FileResponse(index_path)
    return {"status": "healthy", "app": "Placify", "message": "Frontend not found. API is running."}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    from app.db.postgres import test_postgres_connection
    from app.db.mongodb import test_mongo_connection

    return {
        "status": "healthy",
        "postgres": "connected" if test_postgres_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
