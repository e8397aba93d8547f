"""
Taskboard - project and task management API with consistent cross references.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.config import get_settings
from app.database import init_db
from app.routes import auth, projects, tasks
from app.exceptions import register_exception_handlers
from app.logging_config import setup_logging, get_logger

# Initialize logging
setup_logging()
logger = get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting Taskboard API...")
    await init_db()
    logger.info("Database initialized")
    yield
    logger.info("Shutting down Taskboard API...")


app = FastAPI(
    title="Taskboard",
    description="Project and task management with users, memberships and assignments",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register custom exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix=f"{settings.api_prefix}/auth", tags=["Auth"])
app.include_router(projects.router, prefix=f"{settings.api_prefix}/projects", tags=["Projects"])
app.include_router(tasks.router, prefix=f"{settings.api_prefix}/tasks", tags=["Tasks"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
