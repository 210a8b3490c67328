"""
Run the classifier service with uvicorn.

Usage: python -m text_classifier   (or the text-classifier console script)

Reads OPENAI_API_KEY, HOST, PORT (default 3000), OPENAI_TIMEOUT and LOG_LEVEL
from the environment or a .env file.
"""

import logging

import uvicorn

from text_classifier.config import get_settings
from text_classifier.main import create_app


def main():
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = create_app(settings=settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
