"""Database engine and session configuration."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from taskboard.config import get_settings

settings = get_settings()

# SQLite doesn't support pool_size/max_overflow
engine_kwargs = {
    "echo": settings.debug,
}

if not settings.database_url.startswith("sqlite"):
    engine_kwargs.update(
        {
            "pool_pre_ping": True,
            "pool_size": 5,
            "max_overflow": 10,
        }
    )
else:
    engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(settings.database_url, **engine_kwargs)

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def init_db() -> None:
    """Initialize database tables.

    Creates all tables defined in models if they don't exist.
    In production, use Alembic migrations instead.
    """
    from taskboard.db.models import Base

    if settings.debug:
        Base.metadata.create_all(bind=engine)
