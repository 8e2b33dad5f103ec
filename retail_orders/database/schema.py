import logging

from retail_orders.core.constants import ORDER_SEQUENCE_NAME
from retail_orders.database.base import Base
from retail_orders.database.session import make_session_factory

logger = logging.getLogger(__name__)


def create_schema(bind) -> None:
    """Create all tables and seed the order-identifier sequence.

    Safe to run repeatedly: existing tables and counter rows are left alone.
    """
    from retail_orders.models import import_all_models
    from retail_orders.services.sequence_service import ensure_sequence

    import_all_models()
    Base.metadata.create_all(bind=bind)

    session_factory = make_session_factory(bind)
    db = session_factory()
    try:
        ensure_sequence(db, ORDER_SEQUENCE_NAME)
        db.commit()
    finally:
        db.close()
    logger.debug("Schema ready on %s", bind.url.render_as_string(hide_password=True))


def drop_schema(bind) -> None:
    from retail_orders.models import import_all_models

    import_all_models()
    Base.metadata.drop_all(bind=bind)
