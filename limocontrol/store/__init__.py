from ..config import Settings
from ..logging_config import get_logger
from .base import Store
from .memory import MemoryStore
from .sql import SqlStore

logger = get_logger(__name__)


def build_store(cfg: Settings) -> Store:
    """Relational store when DATABASE_URL is configured, in-memory otherwise."""
    if cfg.DATABASE_URL:
        logger.info("using relational store")
        return SqlStore(cfg.DATABASE_URL)
    logger.warning("DATABASE_URL not provided, running with in-memory data")
    return MemoryStore()


__all__ = ["Store", "MemoryStore", "SqlStore", "build_store"]
