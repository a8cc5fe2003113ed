"""Engine and session factory configuration."""

from collections.abc import Generator
import logging
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from catalog.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _engine_options(settings: Settings) -> dict[str, Any]:
    """Pick pool and connect arguments for the configured backend."""
    if settings.is_sqlite:
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live on a single connection
        if settings.database_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    # pool_pre_ping: Test connections before using (handles stale connections)
    # pool_recycle: Recycle connections after 30 minutes (prevents timeout)
    return {
        "poolclass": QueuePool,
        "pool_pre_ping": True,
        "pool_recycle": 1800,
        "pool_size": 5,
        "max_overflow": 10,
        "connect_args": {"connect_timeout": 10},
    }


engine = create_engine(
    settings.database_url,
    echo=False,
    **_engine_options(settings),
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db() -> Generator[Session, None, None]:
    """Yield a transactional session scoped to a single request."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create missing tables for all registered models."""
    # Import models so they register on the metadata
    from catalog.db import models  # noqa: F401
    from catalog.db.base import Base

    logger.info("Ensuring database tables exist")
    Base.metadata.create_all(bind=engine)
