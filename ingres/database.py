"""
Database engine and sessions for the INGRES store.

SQLite (a file under DATABASE_PATH) is the default so the API and the seed
script run with no server. Setting USE_POSTGRES=true switches to DATABASE_URL
with a pooled engine; queries avoid dialect-specific defaults such as NULL
ordering so both backends page identically.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from ingres.config import settings
from typing import Generator

SQLALCHEMY_DATABASE_URL = settings.database_url

if settings.is_postgres:
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        echo=False,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )
else:
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        echo=False,
        pool_pre_ping=True,
    )

    # regions.parent_id and the assessment/reading region_id references
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; overridden in tests with an in-memory engine."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create the regions, assessment and historical tables on `bind` (default engine)."""
    from ingres.models import region, assessment, historical_data  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
