"""
Glance API - FastAPI application entry point
PDF library with retrieval-augmented chat, academic search and writing assistance
"""

import logging

from glance.config import settings

# Configure logging once for the whole process
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(levelname)s:%(name)s:%(message)s"
)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import make_url

from glance.database import create_tables
from glance.middleware.rate_limiter import setup_rate_limiting
from glance.utils.error_handlers import setup_error_handlers

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Upload PDFs, chat with them, and search academic papers",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "upload", "description": "PDF upload"},
        {"name": "documents", "description": "Document management"},
        {"name": "chat", "description": "Document chat and writing assistant"},
        {"name": "search", "description": "Academic paper search"},
        {"name": "system", "description": "Configuration check"},
    ]
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Search rate limiter on app.state
setup_rate_limiting(app)

# {"error", "code"} bodies for every failure
setup_error_handlers(app)


@app.on_event("startup")
async def startup_event():
    """Initialize database tables on startup"""
    create_tables()
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} started")
    logger.info(f"Database: {make_url(settings.DATABASE_URL).render_as_string(hide_password=True)}")
    logger.info(f"API Docs: http://{settings.API_HOST}:{settings.API_PORT}/docs")


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "healthy"
    }


@app.get("/health")
async def health_check():
    """Liveness check"""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
    }


# Import and register routers
from glance.api import upload, documents, chat, search, system

app.include_router(upload.router, prefix="/api")
app.include_router(documents.router, prefix="/api")
app.include_router(chat.router, prefix="/api")
app.include_router(search.router, prefix="/api")
app.include_router(system.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "glance.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_RELOAD
    )
