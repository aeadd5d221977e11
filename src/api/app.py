"""FastAPI application."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import planning, tokens, webhooks, weddings
from src.core.config import get_settings
from src.core.exceptions import APIException
from src.core.logging import get_logger
from src.webhooks.dispatcher import WebhookDispatcher

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    logger.info("application_starting", version="0.1.0")
    app.state.dispatcher = WebhookDispatcher()
    yield
    logger.info("application_shutting_down", pending_webhooks=app.state.dispatcher.pending)
    await app.state.dispatcher.drain()


app = FastAPI(
    title="Wedding Hooks API",
    description="Webhook notifications for wedding planning events",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(weddings.router, prefix="/api")
app.include_router(tokens.router, prefix="/api")
app.include_router(webhooks.router, prefix="/api")
app.include_router(planning.router, prefix="/api")


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Render domain errors as JSON."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "name": "Wedding Hooks API",
        "version": "0.1.0",
        "status": "running",
        "docs": "/api/docs",
    }


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": "0.1.0",
    }
