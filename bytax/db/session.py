
"""Engine and session factories for the record store.

Every engine bounds its queries by STORE_TIMEOUT_SECONDS: PostgreSQL through
statement_timeout, SQLite through its busy timeout. Test runs without a
DATABASE_URL share one in-memory SQLite database across connections.
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from bytax.core.config import settings

raw_url = settings.DATABASE_URL

if settings.ENV.lower() == "test" and (not raw_url or raw_url == "sqlite:///:memory:"):
    raw_url = "sqlite:///file:test_db?mode=memory&cache=shared&uri=true"  # shared cache enables multiple connections
    engine = create_engine(raw_url, future=True)
elif raw_url and raw_url.startswith("postgresql"):
    # statement_timeout bounds every record store query; a timeout surfaces
    # as OperationalError and is reported as a transient store failure.
    timeout_ms = settings.STORE_TIMEOUT_SECONDS * 1000
    engine = create_engine(
        raw_url,
        future=True,
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,
        pool_pre_ping=True,
        connect_args={"options": f"-c statement_timeout={timeout_ms}"},
    )
else:
    engine = create_engine(
        raw_url or "sqlite:///./storage/dev.db",
        future=True,
        connect_args={"timeout": settings.STORE_TIMEOUT_SECONDS},
    )
SessionLocal = sessionmaker(bind=engine, class_=Session, expire_on_commit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
