"""
Module: restoration_kernel.db.engine
Responsibility: engine construction, transactional scope, and schema
    management for the SQL ledger store.
Architecture position: Kernel > DB.  May import from db/base.py.  MUST NOT
    import from store/ or domain/ (except create_tables/drop_tables, which
    import models so Base.metadata is complete).

Invariants enforced:
    - No module-level engine.  Each SqlLedgerStore owns the engine it was
      built with, so two stores never share state by accident.
    - PostgreSQL connections run at READ COMMITTED; callers take row locks
      (FOR UPDATE) where they need stronger guarantees.
    - In-memory SQLite uses a StaticPool so every session of one engine
      sees the same database.

Failure modes:
    - sqlalchemy.exc.ArgumentError for malformed URLs.
    - Pool exhaustion if pool_size + max_overflow is exceeded (PostgreSQL).

Audit relevance:
    Every ledger transaction goes through session_scope(), which commits on
    success and rolls back on any exception.
"""

from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from restoration_kernel.logging_config import get_logger

logger = get_logger("db.engine")

POSTGRES_POOL_DEFAULTS: dict[str, Any] = {
    "pool_size": 20,
    "max_overflow": 10,
    "pool_pre_ping": True,
    "pool_timeout": 30,
    "pool_recycle": 1800,
}


def build_engine(database_url: str, echo: bool = False, **pool_options: Any) -> Engine:
    """
    Create an engine for ``database_url``.

    SQLite engines allow cross-thread use; ``sqlite://`` and ``:memory:``
    URLs get a StaticPool.  Any other backend gets a QueuePool built from
    POSTGRES_POOL_DEFAULTS updated with ``pool_options``.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)
    else:
        options = {**POSTGRES_POOL_DEFAULTS, **pool_options}
        engine = create_engine(
            url,
            echo=echo,
            poolclass=QueuePool,
            isolation_level="READ COMMITTED",
            **options,
        )

    logger.info(
        "engine_built",
        extra={"dialect": engine.dialect.name, "echo": echo},
    )
    return engine


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """
    Provide a transactional scope around a series of operations.

    Postconditions: On normal exit, session is committed and closed.
        On exception, session is rolled back and closed, and the exception
        is re-raised to the caller.

    Usage:
        with session_scope(factory) as session:
            session.add(record)
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.debug("transaction_rolled_back")
        raise
    finally:
        session.close()


def create_tables(engine: Engine) -> None:
    """Create every ledger table that does not exist yet."""
    from restoration_kernel.db.base import Base
    import restoration_kernel.models  # noqa: F401

    Base.metadata.create_all(engine)


def drop_tables(engine: Engine) -> None:
    """Drop every ledger table. Test teardown only."""
    from restoration_kernel.db.base import Base
    import restoration_kernel.models  # noqa: F401

    Base.metadata.drop_all(engine)
