import logging
from contextlib import contextmanager

from fastapi import HTTPException
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session, operation: str, **context):
    """Commit the block as one transaction, roll back everything on failure.

    Business errors (HTTPException subclasses) are re-raised untouched;
    anything else is logged with the operation name and ids first.
    """
    try:
        yield db
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        details = ", ".join(f"{key}={value}" for key, value in context.items())
        logger.exception(f"{operation} failed ({details})")
        raise
