"""
Completion client factory.

One openai.AsyncOpenAI instance is built at startup and shared by all requests.
Returns None (and logs) when no API key is configured, so the service can still
start and serve /docs; classification then fails with UpstreamError.
"""

import logging
from typing import Optional

from openai import AsyncOpenAI

from text_classifier.config import Settings

logger = logging.getLogger(__name__)


def build_completion_client(settings: Settings) -> Optional[AsyncOpenAI]:
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY not set. Any /classify call will fail until you set it.")
        return None

    # one attempt per request
    kwargs = {"api_key": settings.openai_api_key, "max_retries": 0}
    if settings.openai_timeout is not None:
        kwargs["timeout"] = settings.openai_timeout

    client = AsyncOpenAI(**kwargs)
    logger.info("OpenAI client initialised (timeout=%s)", settings.openai_timeout or "default")
    return client
