from retail_orders.database.base import Base
from retail_orders.database.engine import build_engine, engine
from retail_orders.database.schema import create_schema, drop_schema
from retail_orders.database.session import SessionLocal, get_db, make_session_factory

__all__ = [
    "Base",
    "SessionLocal",
    "build_engine",
    "create_schema",
    "drop_schema",
    "engine",
    "get_db",
    "make_session_factory",
]
