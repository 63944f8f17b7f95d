"""Engine factory and request-scoped sessions for the ordering API."""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from tableside.core.config import settings


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections may be shared across threadpool workers."""
    connect_args: dict[str, bool] = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args)


engine: Engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield one session per request and close it afterwards."""
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
