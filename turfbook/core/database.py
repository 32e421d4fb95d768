from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from fastapi import Request
from typing import Generator, Optional
import logging

import redis

from .config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Persistence handle with an explicit connect/dispose lifecycle."""

    def __init__(self, url: str):
        self.url = url
        self.engine = None
        self._session_factory: Optional[sessionmaker] = None

    def connect(self) -> None:
        if self.url.startswith("sqlite"):
            self.engine = create_engine(
                self.url, connect_args={"check_same_thread": False}
            )
        else:
            self.engine = create_engine(
                self.url,
                pool_size=5,
                max_overflow=10,
                pool_timeout=30,
                pool_recycle=1800,  # Recycle connections after 30 minutes
            )
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    @property
    def backend(self) -> str:
        if "postgresql" in self.url:
            return "PostgreSQL"
        if "sqlite" in self.url:
            return "SQLite"
        return "Unknown"

    def create_all(self) -> None:
        """Create tables for every registered model."""
        from .. import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")
        return self._session_factory()

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self._session_factory = None


# Redis setup - mock for testing
if settings.TESTING:
    # Use a simple dict-based mock for Redis in tests
    class RedisMock:
        def __init__(self):
            self.data = {}

        def setex(self, key, time, value):
            self.data[key] = str(value)
            return True

        def get(self, key):
            return self.data.get(key)

        def incr(self, key):
            self.data[key] = str(int(self.data.get(key, "0")) + 1)
            return int(self.data[key])

        def flushdb(self):
            self.data.clear()
            return True

    redis_client = RedisMock()
else:
    # Real Redis client for production
    redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)


# Database dependency
def get_db(request: Request) -> Generator[Session, None, None]:
    """Get a request-scoped database session."""
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()


# Redis dependency
def get_redis():
    """Get Redis client."""
    return redis_client
