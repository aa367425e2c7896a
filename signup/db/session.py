# signup/db/session.py
"""Store client shared by the session registry and the attendance ledger.

A ``Database`` owns one SQLAlchemy engine and its session factory. It is built
once by ``create_app()`` (or by a test fixture) and handed to the components
that need it; nothing in the package creates an engine at import time.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager, nullcontext
from typing import Callable, Iterator, TypeVar

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from signup.db.base import Base, import_models

log = logging.getLogger("signup.db")

T = TypeVar("T")

# seconds a SQLite writer waits for the lock held by a concurrent transaction
SQLITE_BUSY_TIMEOUT = 30


def normalize_dsn(url: str | None) -> str | None:
    """Railway/Heroku style ``postgres://`` URLs → SQLAlchemy psycopg URLs."""
    if not url:
        return url
    url = url.strip()
    if url.startswith("postgres://"):
        return "postgresql+psycopg://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        return "postgresql+psycopg://" + url[len("postgresql://"):]
    return url


def _install_sqlite_hooks(engine) -> None:
    """
    pysqlite defers BEGIN until the first write and ignores FOREIGN KEY
    clauses by default. Take over transaction control so every transaction
    starts with BEGIN IMMEDIATE (one writer at a time, which serializes the
    count-and-insert of a join) and enable ON DELETE CASCADE.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    def __init__(self, url: str, *, echo: bool = False):
        self.url = normalize_dsn(url)
        parsed = make_url(self.url)
        self.is_sqlite = parsed.get_backend_name() == "sqlite"
        self._serial = None

        kwargs = {"future": True, "echo": echo}
        if self.is_sqlite:
            kwargs["connect_args"] = {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT}
            if parsed.database in (None, "", ":memory:"):
                # one shared connection, otherwise every checkout sees an empty db
                kwargs["poolclass"] = StaticPool
                # BEGIN IMMEDIATE cannot serialize transactions that share a connection
                self._serial = threading.RLock()
        else:
            kwargs["pool_pre_ping"] = True

        self.engine = create_engine(self.url, **kwargs)
        if self.is_sqlite:
            _install_sqlite_hooks(self.engine)

        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    # ------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------
    def create_all(self) -> None:
        import_models()
        Base.metadata.create_all(self.engine)

    # ------------------------------------------------------------
    # Sessions / transactions
    # ------------------------------------------------------------
    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        One unit of work: commits when the block exits normally, rolls back
        and re-raises on exception, always closes the ORM session.
        """
        with self._serial or nullcontext():
            db = self.SessionLocal()
            try:
                with db.begin():
                    yield db
            finally:
                db.close()

    def ping(self) -> bool:
        try:
            with self._serial or nullcontext(), self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    def dispose(self) -> None:
        self.engine.dispose()


# ------------------------------------------------------------
# Inserting rows that carry random unique codes
# ------------------------------------------------------------
class CodeCollisionError(Exception):
    """Every freshly generated code collided with an existing one."""


def save_with_fresh_codes(db: Session, build: Callable[[], T], tries: int) -> T:
    """
    Call ``build()`` (which must generate new random codes each time), add
    the result and flush it inside a SAVEPOINT. A unique-constraint
    violation rolls back only that savepoint and the next attempt gets new
    codes; the surrounding transaction, and any row lock it holds, survive.
    """
    for attempt in range(1, tries + 1):
        try:
            with db.begin_nested():
                obj = build()
                db.add(obj)
                db.flush()
            return obj
        except IntegrityError:
            log.warning("generated code collided, retrying (attempt %d/%d)", attempt, tries)
    raise CodeCollisionError(f"no unique code after {tries} attempts")
