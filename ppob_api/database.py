"""
PPOB API - Database
Engine, session factory and the per-request session dependency
"""
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    """Create the engine; SQLite connections are shared across threads."""
    kwargs = {}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory databases live per connection, so keep a single one
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine):
    # Import models so they register on Base.metadata
    from ppob_api import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db(request: Request):
    """Yield a session bound to the app's engine, closed after the request"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
