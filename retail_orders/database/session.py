from contextlib import contextmanager

from sqlalchemy.orm import sessionmaker

from retail_orders.database.engine import engine


def make_session_factory(bind) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=bind,
    )


SessionLocal = make_session_factory(engine)


@contextmanager
def get_db(session_factory=SessionLocal):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
