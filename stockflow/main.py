"""Main application entry point with monitoring and health checks."""

import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from loguru import logger

from stockflow import __version__
from stockflow.api.v1.router import router as api_v1_router
from stockflow.config import config
from stockflow.monitor import get_monitor


def _setup_logging() -> None:
    """Configure logging."""
    log_level = config.logging.level
    logger.remove()

    if config.logging.json_format:
        logger.add(
            sys.stdout,
            level=log_level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
            serialize=True,
        )
    else:
        logger.add(
            sys.stdout,
            level=log_level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}:{function}:{line}</cyan> | <level>{message}</level>",
        )

    if config.logging.file:
        log_path = Path(config.logging.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            level=log_level,
            rotation=config.logging.rotation,
            retention=config.logging.retention,
            compression="zip",
            serialize=config.logging.json_format,
        )

    logger.info(f"Logging configured at {log_level} level")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager.

    Args:
        app: FastAPI instance

    Yields:
        None
    """
    _setup_logging()
    logger.info("Starting stockflow...")

    monitor = get_monitor()
    await monitor.start()

    yield

    logger.info("Shutting down stockflow...")
    await monitor.stop()


app = FastAPI(
    title="stockflow",
    description="NSE corporate announcement alerts over Telegram and WhatsApp",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.include_router(api_v1_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "stockflow.main:app",
        host=config.api.host,
        port=config.api.port,
        log_config=None,
        access_log=False,
    )
