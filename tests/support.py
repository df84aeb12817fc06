# tests/support.py
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from foodprint.models import user as _user_models  # noqa: F401

ADDRESS = "0xABCDEF0123456789ABCDEF0123456789ABCDEF01"
ADDRESS_LOWER = ADDRESS.lower()


def make_engine():
    """Fresh in-memory SQLite database shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


def make_session(engine) -> Session:
    return Session(engine)
