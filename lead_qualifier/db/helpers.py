"""Database session helpers."""

from sqlalchemy.orm import Session


def commit_and_refresh(db: Session, *instances) -> None:
    """
    Commit the transaction and refresh each given instance.
    Use where a write is followed by reading server-generated columns (ids, timestamps).
    """
    db.commit()
    for obj in instances:
        if obj is not None:
            db.refresh(obj)
