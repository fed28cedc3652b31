import logging
import sys

from core.config import settings


def setup_logger(name: str = "expense_tracker") -> logging.Logger:
    """Configure and return the application logger."""
    app_logger = logging.getLogger(name)

    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        app_logger.addHandler(handler)

    app_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    return app_logger


logger = setup_logger()
