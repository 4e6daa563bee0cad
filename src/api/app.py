"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.ai import router as ai_router
from src.api.payments import callback_router
from src.api.payments import router as payments_router
from src.api.tools import router as tools_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Log application startup and shutdown.

    The Firestore client and the document AI service are created lazily on
    first use, so nothing is initialized here.
    """
    logger.info("Starting DocuEase API...")
    yield
    logger.info("Shutting down DocuEase API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="DocuEase API",
        description=(
            "PDF tools, document AI and print checkout. Rasterizes and edits "
            "uploaded PDFs, runs OCR, table extraction and summarization "
            "through an LLM, and reconciles PhonePe payments with their "
            "signed server callbacks."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    application.include_router(tools_router)
    application.include_router(ai_router)
    application.include_router(payments_router)
    application.include_router(callback_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "docuease-api"}

    return application


app = create_app()
