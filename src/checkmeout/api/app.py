"""FastAPI application factory."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from checkmeout.api.routes import router as store_router
from checkmeout.app_logging import configure_logging
from checkmeout.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level.upper())
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        gate_task: asyncio.Task[None] | None = None
        if state_container.auth_source is not None:
            gate_task = asyncio.create_task(
                state_container.store.gate.run(state_container.auth_source.states())
            )
            logger.info("Listening for authentication changes")
        yield
        if gate_task is not None:
            gate_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await gate_task
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(store_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
