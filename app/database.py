# app/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL (SQLite works for local runs and tests).
All models are auto-imported here so create_tables() creates every table in one call.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings

_engine_options = {
    "pool_pre_ping": True,       # Auto-reconnect if DB connection drops
    "echo": False,               # Set True to log all SQL queries (debug only)
}
if settings.DATABASE_URL.startswith("sqlite"):
    _engine_options["connect_args"] = {"check_same_thread": False}
else:
    _engine_options.update(pool_size=10, max_overflow=20)


def use_immediate_transactions(sqlite_engine):
    """
    SQLite ignores FOR UPDATE and only takes its write lock at the first write.
    BEGIN IMMEDIATE takes it up front so the capacity check in create_booking
    runs under the lock.
    """
    @event.listens_for(sqlite_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(sqlite_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


engine = create_engine(settings.DATABASE_URL, **_engine_options)
if engine.dialect.name == "sqlite":
    use_immediate_transactions(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from app.models.user import User            # noqa
    from app.models.vehicle import Vehicle      # noqa
    from app.models.booking import Booking      # noqa
    from app.models.payment import Payment      # noqa

    Base.metadata.create_all(bind=engine)
