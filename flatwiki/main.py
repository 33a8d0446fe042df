import logging
import logging.config
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from flatwiki.config import Settings, get_settings
from flatwiki.dependencies import Wiki
from flatwiki.routers.wiki import limiter, router as wiki_router
from flatwiki.services.store import PageStore
from flatwiki.services.templates import load_templates

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": get_settings().LOG_LEVEL, "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the wiki application.

    Templates are compiled here, once; a missing or broken template stops
    construction instead of failing on the first request.
    """
    settings = settings or get_settings()

    try:
        templates = load_templates(settings.TEMPLATE_DIR)
    except Exception:
        logger.critical("Failed to load templates from %s", settings.TEMPLATE_DIR)
        raise

    app = FastAPI(
        title="flatwiki",
        description="A minimal wiki storing one plain-text file per page.",
        version="1.0.0",
    )

    app.state.wiki = Wiki(
        store=PageStore(settings.DATA_DIR),
        templates=templates,
        front_page=settings.FRONT_PAGE,
    )

    # Rate-limiting state
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception for %s", request.url)
        return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})

    app.include_router(wiki_router)

    logger.info("Wiki initialized", extra={"data_dir": str(settings.DATA_DIR)})
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    logger.info("Starting server at http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
