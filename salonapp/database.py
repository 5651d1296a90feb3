import logging
import time

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import (
    DATABASE_URL,
    DB_LOG_SLOW_QUERIES,
    DB_MAX_OVERFLOW,
    DB_POOL_RECYCLE,
    DB_POOL_SIZE,
    DB_POOL_TIMEOUT,
    DB_SLOW_QUERY_THRESHOLD,
)

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live as long as their single connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_pre_ping": True,
        "pool_size": DB_POOL_SIZE,
        "max_overflow": DB_MAX_OVERFLOW,
        "pool_timeout": DB_POOL_TIMEOUT,
        "pool_recycle": DB_POOL_RECYCLE,
    }


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))
logger.info(f"✅ Database engine ready ({engine.dialect.name})")


def _start_timer(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault("salon_query_started", []).append(time.perf_counter())


def _report_slow_statement(conn, cursor, statement, parameters, context, executemany):
    elapsed = time.perf_counter() - conn.info["salon_query_started"].pop()
    if elapsed > DB_SLOW_QUERY_THRESHOLD:
        logger.warning(f"🐌 {elapsed:.2f}s spent on: {statement[:200]}")


if DB_LOG_SLOW_QUERIES:
    event.listen(engine, "before_cursor_execute", _start_timer)
    event.listen(engine, "after_cursor_execute", _report_slow_statement)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def get_db():
    """Request-scoped session; services commit, this only closes"""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
