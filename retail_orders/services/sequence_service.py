"""Named, durable sequences backed by ``SEQUENCE_COUNTERS`` rows.

Values start at the configured start value, grow by ``IncrementBy``, never
cycle and are never cached ahead of time.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from retail_orders.core.constants import ORDER_SEQUENCE_NAME, SEQUENCE_MAX_VALUE
from retail_orders.core.errors import SequenceExhaustedError
from retail_orders.database.session import SessionLocal, get_db
from retail_orders.models.sequences import SequenceCounter

logger = logging.getLogger(__name__)


def ensure_sequence(
    db: Session,
    name: str,
    *,
    start: int = 1,
    increment: int = 1,
    max_value: int = SEQUENCE_MAX_VALUE,
) -> bool:
    """Create the counter row when it is missing. Returns True if a row was added."""
    exists = db.execute(
        select(SequenceCounter.name).where(SequenceCounter.name == name)
    ).first()
    if exists:
        return False
    db.add(
        SequenceCounter(
            name=name,
            next_value=start,
            increment_by=increment,
            max_value=max_value,
        )
    )
    db.flush()
    logger.info(
        "Created sequence %s (start %s, increment %s)",
        name,
        start,
        increment,
        extra={"sequence": name},
    )
    return True


def _increment(db: Session, name: str) -> bool:
    result = db.execute(
        update(SequenceCounter)
        .where(
            SequenceCounter.name == name,
            SequenceCounter.next_value <= SequenceCounter.max_value,
        )
        .values(
            {SequenceCounter.next_value: SequenceCounter.next_value + SequenceCounter.increment_by}
        )
        .execution_options(synchronize_session=False)
    )
    return bool(result.rowcount)


def next_value(db: Session, name: str = ORDER_SEQUENCE_NAME) -> int:
    """Take the next value inside the caller's transaction.

    The counter row stays locked until the caller commits or rolls back, so
    concurrent callers serialize on it. A rollback returns the value.
    """
    if not _increment(db, name):
        max_value = db.execute(
            select(SequenceCounter.max_value).where(SequenceCounter.name == name)
        ).scalar_one_or_none()
        if max_value is not None:
            raise SequenceExhaustedError(
                f"sequence {name} exhausted at {max_value}; it does not cycle"
            )
        ensure_sequence(db, name)
        if not _increment(db, name):
            raise SequenceExhaustedError(f"sequence {name} has no values available")

    current, increment = db.execute(
        select(SequenceCounter.next_value, SequenceCounter.increment_by)
        .where(SequenceCounter.name == name)
    ).one()
    return current - increment


def allocate(
    name: str = ORDER_SEQUENCE_NAME,
    session_factory: sessionmaker = SessionLocal,
) -> int:
    """Allocate one value in its own transaction and commit it before returning."""
    with get_db(session_factory) as db:
        try:
            value = next_value(db, name)
            db.commit()
        except (SQLAlchemyError, SequenceExhaustedError):
            db.rollback()
            raise
    logger.debug("Allocated %s from %s", value, name, extra={"sequence": name})
    return value


def peek_next_value(db: Session, name: str = ORDER_SEQUENCE_NAME) -> int | None:
    return db.execute(
        select(SequenceCounter.next_value).where(SequenceCounter.name == name)
    ).scalar_one_or_none()


__all__ = ["allocate", "ensure_sequence", "next_value", "peek_next_value"]
