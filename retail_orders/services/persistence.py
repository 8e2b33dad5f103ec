import logging

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from retail_orders.core.errors import (
    IntegrityViolation,
    RecordNotFound,
    domain_error_from_validation,
    translate_integrity_error,
)

logger = logging.getLogger(__name__)


def validate(schema: type[BaseModel], **values) -> BaseModel:
    try:
        return schema(**values)
    except ValidationError as exc:
        error = domain_error_from_validation(exc)
        logger.warning("Rejected %s: %s", schema.__name__, error.detail)
        raise error from exc


def require(db: Session, model, key, entity: str):
    instance = db.get(model, key)
    if instance is None:
        raise RecordNotFound(entity, key)
    return instance


def reject(db: Session, error: IntegrityViolation, action: str) -> IntegrityViolation:
    db.rollback()
    logger.warning("Rejected %s: %s", action, error.detail)
    return error


def flush_or_raise(db: Session, action: str) -> None:
    """Flush pending changes, mapping constraint failures onto the error taxonomy.

    On failure the whole transaction is rolled back so no part of the
    offending write survives.
    """
    try:
        db.flush()
    except IntegrityError as exc:
        raise reject(db, translate_integrity_error(exc), action) from exc
    except SQLAlchemyError:
        db.rollback()
        raise


def execute_or_raise(db: Session, statement, action: str):
    try:
        return db.execute(statement)
    except IntegrityError as exc:
        raise reject(db, translate_integrity_error(exc), action) from exc


def commit_or_raise(db: Session, action: str) -> None:
    flush_or_raise(db, action)
    try:
        db.commit()
    except IntegrityError as exc:
        # Deferred constraints surface at commit rather than flush.
        raise reject(db, translate_integrity_error(exc), action) from exc
    except SQLAlchemyError:
        db.rollback()
        raise


__all__ = [
    "commit_or_raise",
    "execute_or_raise",
    "flush_or_raise",
    "reject",
    "require",
    "validate",
]
