# blog_server/database.py

import math
from pathlib import Path

import structlog
from fastapi import HTTPException, Request
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from blog_server.core.config import Settings
from blog_server.models import Base
from blog_server.models import blog, user  # noqa: F401  (registers tables)


logger = structlog.get_logger(__name__)


def driver_timeout_args(url: URL, timeout: float) -> dict:
    """
    connect_args bounding connect and statement time on the server drivers.
    Other backends get none.
    """
    seconds = max(1, math.ceil(timeout))
    backend = url.get_backend_name()

    if backend in ("mysql", "mariadb"):
        return {
            "connect_timeout": seconds,
            "read_timeout": seconds,
            "write_timeout": seconds,
        }
    if backend == "postgresql":
        return {
            "connect_timeout": seconds,
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }
    return {}


def create_db_engine(settings: Settings) -> Engine:
    """
    Builds the engine for settings.database_url. Every store call is bounded by
    settings.db_timeout: the SQLite lock wait, or the pool checkout plus the
    driver's connect and statement timeouts otherwise.
    """
    url = make_url(settings.database_url)

    if url.get_backend_name() == "sqlite":
        connect_args = {"check_same_thread": False, "timeout": settings.db_timeout}
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise each checkout sees an empty database
            return create_engine(url, connect_args=connect_args, poolclass=StaticPool)
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(
            url, connect_args=connect_args, pool_timeout=settings.db_timeout
        )

    return create_engine(
        url,
        connect_args=driver_timeout_args(url, settings.db_timeout),
        pool_timeout=settings.db_timeout,
        pool_pre_ping=True,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine
    )


def init_db(engine: Engine):
    Base.metadata.create_all(bind=engine)


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def store_failure(db: Session, detail: str, **context) -> HTTPException:
    """
    Rolls back the session, logs the active exception and returns the generic
    500 to raise. Call only from inside an except block.
    """
    db.rollback()
    logger.exception("store_failure", detail=detail, **context)
    return HTTPException(status_code=500, detail=detail)
