import logging
import logging.config
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.routers.recent import limiter, router as recent_router

VERSION = "1.0.0"

# Console log level, e.g. DEBUG to see per-request aggregation counts
LOG_LEVEL = os.environ.get("PAGEINDEX_LOG_LEVEL", "INFO").upper()


def _logging_config(level: str) -> dict:
    """Return a dictConfig mapping that writes one JSON object per log line."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": (
                    '{"time": "%(asctime)s", "level": "%(levelname)s", '
                    '"logger": "%(name)s", "message": "%(message)s"}'
                ),
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "loggers": {
            "app": {"level": level},
            # Keep the server's access log quieter than our own records
            "uvicorn.access": {"level": "WARNING"},
        },
        "root": {"level": "INFO", "handlers": ["console"]},
    }


logging.config.dictConfig(_logging_config(LOG_LEVEL))

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Pageindex – Recent Updates API",
    description=(
        "Sorts a static site's pages by date and builds its recent-updates "
        "listing: the most recently updated pages plus the same pages grouped "
        "by month, as JSON, an HTML fragment or a Markdown page."
    ),
    version=VERSION,
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(recent_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"service": "pageindex", "version": VERSION, "status": "ok"}
