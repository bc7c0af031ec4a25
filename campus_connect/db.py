from __future__ import annotations

import threading
from collections.abc import Iterator
from functools import lru_cache

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from campus_connect.core.config import settings
from campus_connect.models import Base


class Database:
    """Store handle shared by every request in the process.

    The engine is created on first use, at most once, so importing the app
    never opens a connection.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.echo = echo
        self._engine: Engine | None = None
        self._sessionmaker: sessionmaker[Session] | None = None
        self._lock = threading.Lock()

    def _engine_kwargs(self) -> dict:
        kwargs: dict = {"echo": self.echo}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in self.url or self.url.rstrip("/").endswith("sqlite:"):
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True
        return kwargs

    def _connect(self) -> sessionmaker[Session]:
        if self._sessionmaker is None:
            with self._lock:
                if self._sessionmaker is None:
                    engine = create_engine(self.url, **self._engine_kwargs())
                    self._engine = engine
                    self._sessionmaker = sessionmaker(
                        bind=engine, autoflush=False, expire_on_commit=False
                    )
        return self._sessionmaker

    @property
    def engine(self) -> Engine:
        self._connect()
        assert self._engine is not None
        return self._engine

    def session(self) -> Session:
        return self._connect()()

    def create_all(self) -> None:
        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(self.engine)

    def dispose(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._sessionmaker = None


@lru_cache(maxsize=1)
def get_database() -> Database:
    return Database(settings.database_url, echo=settings.database_echo)


def get_db() -> Iterator[Session]:
    db = get_database().session()
    try:
        yield db
    finally:
        db.close()
