import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from teamowners import __version__
from teamowners.api.routes import router
from teamowners.core.config import Settings
from teamowners.core.dependencies import build_registry
from teamowners.data.registry import TeamRegistry

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


async def _periodic_refresh_loop(registry: TeamRegistry, interval_seconds: float) -> None:
    """
    Background task that rebuilds the registry every interval_seconds.
    """
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await asyncio.to_thread(registry.refresh)
        except Exception as e:
            logger.error(f"Error in periodic refresh loop: {e}", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the initial registry snapshot and, when configured, keep it fresh
    in the background until shutdown.
    """
    settings: Settings = app.state.settings
    registry: TeamRegistry = app.state.registry

    result = await asyncio.to_thread(registry.refresh)
    logger.info(
        f"Initial refresh from {settings.manifest_dir}: {result.status}, "
        f"{result.team_count} teams"
    )

    task = None
    app.state.refresh_task = None
    if settings.refresh_interval_seconds > 0:
        task = app.state.refresh_task = asyncio.create_task(
            _periodic_refresh_loop(registry, settings.refresh_interval_seconds)
        )

    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass


async def not_found(request: Request, exc: Exception) -> PlainTextResponse:
    logger.debug(f"Not found: {request.url.path}")
    return PlainTextResponse("Not found", status_code=404)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create the application with its own registry.

    The registry lives on `app.state` and reaches the handlers through the
    dependencies in `teamowners.core.dependencies`. Serve it with
    `uvicorn --factory teamowners.main:create_app`.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Team Owners",
        version=__version__,
        description="Find the team owning a package from a stack trace line.",
        lifespan=lifespan,
        exception_handlers={404: not_found},
    )
    app.state.settings = settings
    app.state.registry = build_registry(settings)
    app.include_router(router)
    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(
        "teamowners.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )
