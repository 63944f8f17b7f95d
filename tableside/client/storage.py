"""Key-value persistence adapters for the cart store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from tableside.core.config import settings
from tableside.db.session import build_engine
from tableside.models.cart import CartEntry


class CartStorage(Protocol):
    """Durable string storage; only the cart store writes to it."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


@dataclass
class InMemoryCartStorage(CartStorage):
    _store: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        self._store[key] = value

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._store)


class SqlCartStorage(CartStorage):
    """Stores cart entries in the `cart_entries` table of any SQLAlchemy database."""

    def __init__(self, engine: Engine) -> None:
        CartEntry.__table__.create(bind=engine, checkfirst=True)
        self._sessions = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    @classmethod
    def from_url(cls, url: str | None = None) -> SqlCartStorage:
        return cls(build_engine(url or settings.cart_storage_url))

    def get(self, key: str) -> str | None:
        with self._sessions() as session:
            entry: CartEntry | None = session.get(CartEntry, key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: str) -> None:
        with self._sessions() as session:
            entry: CartEntry | None = session.get(CartEntry, key)
            if entry is None:
                session.add(CartEntry(key=key, value=value))
            else:
                entry.value = value
                entry.updated_at = datetime.now(timezone.utc)
            session.commit()

    def delete(self, key: str) -> None:
        with self._sessions() as session:
            entry: CartEntry | None = session.get(CartEntry, key)
            if entry is not None:
                session.delete(entry)
                session.commit()
