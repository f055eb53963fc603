import os

import uvicorn

from weather_lookup.config import settings
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


def warn_if_unconfigured() -> None:
    """
    Log a clear message when the OpenWeatherMap key is missing. Set it with
    WEATHER_API_KEY; without it every lookup ends in an upstream error.
    """
    if not settings.api_key:
        logger.warning("WEATHER_API_KEY is not set; lookups will fail until it is configured.")


if __name__ == "__main__":
    setup_logging(level=settings.log_level, job_name="weather_lookup")
    warn_if_unconfigured()

    uvicorn.run(
        "weather_lookup.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=False,
    )
