from collections.abc import Iterator

from sqlalchemy.orm import Session

from lead_qualifier.db import session as db_session


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a request-scoped session."""
    db = db_session.SessionLocal()
    try:
        yield db
    finally:
        db.close()
