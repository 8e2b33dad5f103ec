import logging

from retail_orders.config import Settings, get_settings
from retail_orders.core.logging import setup_logging
from retail_orders.database import create_schema, engine

logger = logging.getLogger(__name__)


def initialize(bind=None, settings: Settings | None = None):
    """Configure logging and make sure every table and sequence exists."""
    settings = settings or get_settings()
    setup_logging(settings)

    bind = bind if bind is not None else engine
    create_schema(bind)
    logger.info("%s schema ready (%s)", settings.APP_NAME, settings.ENVIRONMENT)
    return bind


__all__ = ["initialize"]
