# foodprint/database.py
from sqlalchemy.engine import URL
from sqlmodel import SQLModel, create_engine, Session

from foodprint.core.config import Settings, get_settings

settings = get_settings()


def resolve_database_url(cfg: Settings) -> str | URL:
    """
    Pick the database to connect to.

    Order:
      1. DB_USE_SQLITE -> sqlite file in the working directory
      2. DATABASE_URL  -> used as-is
      3. discrete DB_* parameters
    """
    if cfg.DB_USE_SQLITE:
        return f"sqlite:///{cfg.SQLITE_PATH}"
    if cfg.DATABASE_URL:
        return cfg.DATABASE_URL
    return URL.create(
        cfg.DB_DIALECT,
        username=cfg.DB_USER,
        password=cfg.DB_PASSWORD or None,
        host=cfg.DB_HOST,
        port=cfg.DB_PORT,
        database=cfg.DB_NAME,
    )


def build_engine(cfg: Settings):
    """
    Create the SQLAlchemy engine for the configured backend.

    - pool_pre_ping=True: validate connections before using them
    - SQLite needs check_same_thread=False because FastAPI runs sync
      endpoints in a threadpool.
    """
    url = resolve_database_url(cfg)
    connect_args = {}
    if str(url).startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        url,
        echo=cfg.DB_ECHO,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = build_engine(settings)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup. Schema changes to existing
    databases go through the Alembic migrations in `migrations/`.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
