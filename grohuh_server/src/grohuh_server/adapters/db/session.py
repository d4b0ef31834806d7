import logging
from functools import lru_cache

from grohuh_core.config.environments import get_settings
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

log = logging.getLogger(__name__)

Base = declarative_base()


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Create the engine from current settings, once per process."""
    settings = get_settings()

    log.info(f"Initializing database connection for {settings.ENVIRONMENT.value} environment")
    log.info(f"Database URL: {settings.DATABASE_URL}")

    return create_engine(settings.DATABASE_URL, future=True, echo=False, pool_pre_ping=True)


@lru_cache(maxsize=1)
def get_session_factory():
    return sessionmaker(bind=get_engine(), autoflush=False, autocommit=False, future=True)
