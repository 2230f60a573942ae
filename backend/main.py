import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")

from database.base import init_engine  # noqa: E402
from handlers.collection_handler import router as collection_router  # noqa: E402
from handlers.exhibit_handler import router as exhibit_router  # noqa: E402
from handlers.health_handler import router as health_router  # noqa: E402
from handlers.query_handler import router as query_router  # noqa: E402
from handlers.timeline_handler import router as timeline_router  # noqa: E402
from handlers.user_handler import router as user_router  # noqa: E402
from redis_client import get_queue, get_redis, init_redis  # noqa: E402
from settings import ServiceSettings, load_settings  # noqa: E402
from utils.cache import Cache, build_cache  # noqa: E402
from utils.thumbnails import NullThumbnailGenerator, ThumbnailGenerator  # noqa: E402

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def _attach_file_handler(
    logger_name: str,
    log_file_path: Path,
    level_name: str | None = None,
) -> None:
    logger_level = (level_name or LOG_LEVEL).upper()
    logger_level_value = getattr(logging, logger_level, logging.INFO)

    log_file_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
    file_handler.setLevel(logger_level_value)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    )

    target_logger = logging.getLogger(logger_name)
    if not any(
        isinstance(handler, logging.FileHandler)
        and getattr(handler, "baseFilename", None) == str(log_file_path)
        for handler in target_logger.handlers
    ):
        target_logger.addHandler(file_handler)
    target_logger.setLevel(logger_level_value)


TREE_MUTATIONS_LOG_FILE = os.getenv(
    "TREE_MUTATIONS_LOG_FILE", "backend/log/tree_mutations.log"
).strip()
TREE_MUTATIONS_LOG_LEVEL = os.getenv("TREE_MUTATIONS_LOG_LEVEL", "INFO").strip()
if TREE_MUTATIONS_LOG_FILE:
    mutations_log_path = Path(TREE_MUTATIONS_LOG_FILE)
    if not mutations_log_path.is_absolute():
        mutations_log_path = ROOT_DIR / mutations_log_path
    for mutation_logger in (
        "operators.collection_operator",
        "operators.timeline_operator",
        "operators.exhibit_operator",
        "operators.user_operator",
        "utils.thumbnails",
    ):
        _attach_file_handler(
            mutation_logger, mutations_log_path, level_name=TREE_MUTATIONS_LOG_LEVEL
        )


def _build_cache(settings: ServiceSettings) -> Cache:
    redis_client = None
    if settings.cache_backend == "redis":
        redis_client = get_redis(settings.redis_cache_url)
    return build_cache(
        settings.cache_backend, settings.cache_ttl_seconds, redis_client=redis_client
    )


def _build_thumbnail_generator(settings: ServiceSettings):
    if not settings.thumbnails_enabled:
        return NullThumbnailGenerator()
    queue = get_queue(settings.thumbnail_queue, settings.redis_rq_url)
    return ThumbnailGenerator(queue, settings.thumbnail_job)


def create_app(
    settings: ServiceSettings | None = None,
    cache: Cache | None = None,
    thumbnails=None,
    init_database: bool = True,
) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_database:
            init_engine(settings.database_url)
            logger.info("database_engine_ready")
        if settings.cache_backend == "redis" and cache is None:
            init_redis(get_redis(settings.redis_cache_url))
            logger.info("redis_cache_ready url=%s", settings.redis_cache_url)
        yield

    app = FastAPI(title="Timeline Tree Service", lifespan=lifespan)
    app.state.settings = settings
    app.state.cache = cache if cache is not None else _build_cache(settings)
    app.state.thumbnails = (
        thumbnails if thumbnails is not None else _build_thumbnail_generator(settings)
    )

    app.include_router(health_router)
    app.include_router(query_router)
    app.include_router(user_router)
    app.include_router(timeline_router)
    app.include_router(exhibit_router)
    app.include_router(collection_router)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
