import logging
import os
from typing import Optional


def configure_logging(level: Optional[str] = None) -> None:
    """Configure structured logging defaults for the application."""
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # The Stripe SDK logs every request body at INFO
    logging.getLogger("stripe").setLevel(logging.WARNING)
