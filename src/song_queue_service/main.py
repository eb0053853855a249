"""
Song Queue Service - FastAPI application entry point.
"""

import argparse
import logging
import sys
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from . import __version__
from .config import SongQueueConfig, parse_origins
from .errors import EmptyQueue, NotFound, SongQueueError
from .middleware import install_cors
from .queue_store import SongQueueStore
from .api import songs_router, stats_router, health_router

# Configure logging
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    config: SongQueueConfig = app.state.config

    # Add file handler if configured
    file_handler = None
    if config.log_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)

    # Startup
    logger.info("=" * 60)
    logger.info(f"Song Queue Service v{__version__} - Song Request Queue")
    logger.info("=" * 60)
    logger.info(f"CORS origins: {', '.join(config.cors_origins)}")
    logger.info(f"Max queue size: {config.max_queue_size or 'unbounded'}")
    logger.info(f"Played history size: {config.history_size}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info(f"Shutting down Song Queue Service ({len(app.state.store)} songs still queued)")
    if file_handler is not None:
        logging.getLogger().removeHandler(file_handler)
        file_handler.close()


async def song_queue_error_handler(request: Request, exc: SongQueueError):
    if isinstance(exc, EmptyQueue):
        logger.debug(f"{request.method} {request.url.path}: queue is empty")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and unsupported methods on known paths are both "Not Found"
    if exc.status_code in (404, 405):
        return PlainTextResponse(NotFound.default_message, status_code=NotFound.status_code)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info(f"{request.method} {request.url.path} rejected: invalid parameters")
    return JSONResponse(status_code=400, content={"error": "Invalid request parameters"})


def create_app(
    config: Optional[SongQueueConfig] = None,
    store: Optional[SongQueueStore] = None,
) -> FastAPI:
    """
    Build the application around a single queue store.

    Args:
        config: Service configuration, loaded from the environment when omitted
        store: Queue store to serve, created from the configuration when omitted

    Returns:
        FastAPI app whose handlers reach the store only through app.state
    """
    config = config or SongQueueConfig.from_env()
    if store is None:
        store = SongQueueStore(
            max_queue_size=config.max_queue_size,
            history_size=config.history_size,
        )

    app = FastAPI(
        title="Song Queue Service",
        description="Song request queue: requesters submit URLs, the host pops the oldest",
        version=__version__,
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.config = config
    app.state.store = store

    install_cors(app, config.cors_origins)

    app.add_exception_handler(SongQueueError, song_queue_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Register routers
    app.include_router(health_router)
    app.include_router(songs_router)
    app.include_router(stats_router)

    return app


def main(argv: Optional[List[str]] = None):
    """Run the song queue service."""
    base_config = SongQueueConfig.from_env()

    parser = argparse.ArgumentParser(description="Song Queue Service - Song Request Queue")
    parser.add_argument(
        "--port",
        type=int,
        default=base_config.port,
        help=f"Port to run the service on (default: PORT or {base_config.port})"
    )
    parser.add_argument(
        "--host",
        type=str,
        default=base_config.host,
        help=f"Host to bind to (default: {base_config.host})"
    )
    parser.add_argument(
        "--cors-origin",
        type=str,
        default=None,
        help="Comma-separated allowed CORS origins (overrides CORS_ORIGIN env var)"
    )
    parser.add_argument(
        "--max-queue-size",
        type=int,
        default=base_config.max_queue_size,
        help="Maximum number of queued songs, 0 for unbounded"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=LOG_LEVELS,
        default=base_config.log_level if base_config.log_level in LOG_LEVELS else "INFO",
        help="Logging level (default: INFO)"
    )

    args = parser.parse_args(argv)

    cors_origins = base_config.cors_origins
    if args.cors_origin:
        cors_origins = parse_origins(args.cors_origin)

    # Update configuration (uses env vars if CLI args not provided)
    config = SongQueueConfig(
        host=args.host,
        port=args.port,
        cors_origins=cors_origins,
        max_queue_size=args.max_queue_size,
        history_size=base_config.history_size,
        log_level=args.log_level,
        log_file=base_config.log_file,
    )

    # Set log level
    logging.getLogger().setLevel(getattr(logging, args.log_level))

    logger.info(f"Starting Song Queue Service on {args.host}:{args.port}")

    uvicorn.run(
        create_app(config),
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
