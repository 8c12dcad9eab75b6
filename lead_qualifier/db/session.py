"""Engine and session factory, bound to settings.database_url."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from lead_qualifier.core.config import settings

# SQLite needs check_same_thread=False when sessions cross threadpool workers
_connect_args = (
    {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
)

engine = create_engine(settings.database_url, connect_args=_connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
