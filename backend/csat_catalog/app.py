"""
FastAPI application factory for the exam catalog.

Read-only catalog API over exam PDFs and their metadata.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient

from . import __version__
from .config.settings import Settings, settings
from .routes import create_document_routes
from .services import DocumentCatalogService
from .storage import DocumentRepository

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings = settings,
    catalog: Optional[DocumentCatalogService] = None,
) -> FastAPI:
    """
    Build the application.

    When catalog is given it is used as-is and no database connection is
    opened (tests inject one backed by a fake collection).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """FastAPI lifespan context manager for startup/shutdown."""
        client = None

        # STARTUP
        logger.info("🚀 CSAT Catalog Backend Starting Up...")

        if app.state.catalog is None:
            try:
                app_settings.validate()
                logger.info("✅ Settings validated")

                client = AsyncIOMotorClient(
                    app_settings.MONGODB_URL,
                    maxPoolSize=50,
                    serverSelectionTimeoutMS=5000,
                )

                # Test connection
                await client.server_info()
                db = client[app_settings.DATABASE_NAME]
                logger.info(f"✅ Connected to MongoDB: {app_settings.DATABASE_NAME}")

                repository = DocumentRepository(db)
                await repository.ensure_indexes()
                logger.info("✅ Database indexes created")

                app.state.catalog = DocumentCatalogService(repository)
            except Exception as e:
                logger.error(f"❌ Startup failed: {e}")
                if client is not None:
                    client.close()
                raise

        logger.info("✅ Application startup complete")

        yield

        # SHUTDOWN
        logger.info("🛑 Shutting down...")
        if client is not None:
            client.close()
            logger.info("✅ Database connection closed")

    app = FastAPI(
        title="CSAT Exam Catalog API",
        description="Catalog of Korean CSAT exam documents",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.catalog = catalog

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_document_routes())

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "catalog": "ready" if app.state.catalog is not None else "unavailable",
        }

    @app.get("/")
    async def root():
        return {
            "app": "CSAT Exam Catalog",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    return app

