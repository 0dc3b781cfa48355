"""
Main entrypoint: run the Holderscope FastAPI server.

Env: SOLSCAN_API_KEY (or SOLSCAN_API_MODE=public), API_HOST, API_PORT, LOG_LEVEL, etc.

Equivalent: uvicorn holderscope.api_server.app:app --host 0.0.0.0 --port 8000
"""

import os
import sys

# Configure structured JSON logging before other imports that may log
from holderscope.holderscope_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Validate configuration, then serve the API in the main thread."""
    from holderscope.config import get_settings
    from holderscope.config.env import mask_api_key
    from holderscope.core.exceptions import ConfigurationError

    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error("main_config_error", message=e.message)
        sys.exit(1)

    if settings.api_mode == "pro" and not settings.api_key:
        # Requests will answer 500 until a key is configured
        logger.warning("main_api_key_missing", message="SOLSCAN_API_KEY is not set; Pro API requests will fail")

    logger.info(
        "main_settings_loaded",
        api_mode=settings.api_mode,
        api_key=mask_api_key(settings.api_key),
        page_size=settings.page_size,
        max_trader_records=settings.max_trader_records,
        max_interval_records=settings.max_interval_records,
    )

    from holderscope.api_server.app import app
    import uvicorn

    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
