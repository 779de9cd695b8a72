"""
Barrel + Verse Backend — Storage Package
==========================================

What:  The Data Access Layer and the startup-time choice of backend.

Selection (create_storage):
    DATABASE_URL set                      → DatabaseStorage
    DATABASE_URL unset, production mode   → ConfigurationError (fail fast)
    DATABASE_URL unset, otherwise         → MemoryStorage (with a warning)

Handlers never choose a backend; they receive whichever one the app
factory installed on app.state.
"""

import logging

from barrelverse.config import Settings
from barrelverse.exceptions import ConfigurationError
from barrelverse.storage.base import Storage
from barrelverse.storage.database import DatabaseStorage
from barrelverse.storage.memory import MemoryStorage

logger = logging.getLogger(__name__)

__all__ = ["DatabaseStorage", "MemoryStorage", "Storage", "create_storage"]


def create_storage(settings: Settings) -> Storage:
    """
    Build the single Storage instance for this process.

    Raises:
        ConfigurationError: production mode without DATABASE_URL
    """
    if settings.database_url:
        logger.info("Using relational storage")
        return DatabaseStorage.from_url(settings.database_url, settings)

    if settings.is_production:
        raise ConfigurationError(
            "DATABASE_URL must be set when ENVIRONMENT=production; "
            "refusing to fall back to in-memory storage."
        )

    logger.warning("DATABASE_URL not set: using in-memory storage, data is lost on restart")
    return MemoryStorage()
