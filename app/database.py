# app/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL (SQLite for local runs and tests). All models
are auto-imported here so create_tables() creates every table in one call.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings


def configure_sqlite_locking(engine: Engine) -> Engine:
    """
    Start every SQLite transaction with BEGIN IMMEDIATE.
    SQLite ignores SELECT ... FOR UPDATE, so this is what serializes
    concurrent registry_id assignment on a SQLite store.
    """
    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        return configure_sqlite_locking(
            create_engine(url, connect_args={"check_same_thread": False})
        )
    return create_engine(
        url,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        pool_size=10,
        max_overflow=20,
        echo=False,                  # Set True to log all SQL queries (debug only)
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind: Engine = None):
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from app.models.department import Department                 # noqa
    from app.models.division import Division                     # noqa
    from app.models.public_user import PublicUser                # noqa
    from app.models.registry_entry import RegistryEntry          # noqa
    from app.models.registry_sequence import RegistrySequence    # noqa

    Base.metadata.create_all(bind=bind or engine)
