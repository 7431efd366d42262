"""
Production FastAPI Application

Run with: granian --interface asgi eventia.main:app
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from eventia.platform.app_factory import create_app
from eventia.platform.config.di import container
from eventia.platform.config.wire_modules import WIRE_MODULES
from eventia.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Eventia] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Eventia] Dependency injection wired')

    database = container.database()
    await database.create_db_and_tables()

    # Never raises; falls back to the in-memory backend if redis is down
    cache_client = container.cache_client()
    await cache_client.initialize()
    Logger.base.info(f'📡 [Eventia] Cache backend: {cache_client.backend}')

    Logger.base.info('✅ [Eventia] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Eventia] Shutting down...')

    await container.cache_aside().drain()
    await cache_client.close()
    await database.dispose()

    container.unwire()

    Logger.base.info('👋 [Eventia] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
