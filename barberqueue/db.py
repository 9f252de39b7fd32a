# barberqueue/db.py

import logging

from sqlmodel import SQLModel, create_engine, Session

from barberqueue.config import DATABASE_URL, DB_ECHO, DB_TIMEOUT

logger = logging.getLogger(__name__)


def build_engine(url: str = DATABASE_URL, **kwargs):
    connect_args = {}
    if url.startswith("sqlite"):
        # required for SQLite + FastAPI; timeout is the busy wait for the write lock
        connect_args = {"check_same_thread": False, "timeout": DB_TIMEOUT}
    return create_engine(url, echo=DB_ECHO, connect_args=connect_args, **kwargs)


# Engine = connection to the database
engine = build_engine()


def init_db(bind=None) -> None:
    from barberqueue import models  # noqa: F401  registers the tables

    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database tables ready")


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
