from sqlalchemy import BigInteger, CheckConstraint, Column, String

from retail_orders.core.constants import SEQUENCE_MAX_VALUE
from retail_orders.database.base import Base


class SequenceCounter(Base):
    """Durable counter row backing a named sequence.

    ``next_value`` is the value the next allocation hands out. Allocations
    increment it in place, so the row lock taken by the ``UPDATE`` serializes
    concurrent callers until their transaction ends.
    """

    __tablename__ = "SEQUENCE_COUNTERS"

    name = Column("SequenceName", String(30), primary_key=True)
    next_value = Column("NextValue", BigInteger, nullable=False, default=1)
    increment_by = Column("IncrementBy", BigInteger, nullable=False, default=1)
    max_value = Column("MaxValue", BigInteger, nullable=False, default=SEQUENCE_MAX_VALUE)

    __table_args__ = (
        CheckConstraint('"NextValue" > 0', name="next_value_positive"),
        CheckConstraint('"IncrementBy" > 0', name="increment_positive"),
    )


__all__ = ["SequenceCounter"]
