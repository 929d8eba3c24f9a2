"""
Runtime configuration and logging setup.

Values come from the environment, optionally seeded from a .env file.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


@dataclass(frozen=True)
class GatewaySettings:
    """Connection and server defaults for the gateway."""

    mongo_uri: str = field(default_factory=lambda: os.getenv("MONGO_URI", "mongodb://localhost:27017"))
    database_name: str = field(default_factory=lambda: os.getenv("MONGO_DATABASE", "telegrafData"))
    # Deadline for each store call; unset means no deadline.
    query_timeout_ms: Optional[int] = field(default_factory=lambda: _env_int("QUERY_TIMEOUT_MS", None))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    api_host: str = field(default_factory=lambda: os.getenv("API_HOST", "0.0.0.0"))
    api_port: int = field(default_factory=lambda: _env_int("API_PORT", 8000))


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the "query_gateway" logger namespace.

    Existing handlers are replaced so repeated calls don't duplicate output.
    """
    logger = logging.getLogger("query_gateway")
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False
    return logger
