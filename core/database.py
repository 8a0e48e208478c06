from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from core.config import Settings

Base = declarative_base()


def create_db_engine(settings: Settings) -> Engine:
    """
    Build the pooled engine shared by every request.

    The pool is bounded (size + overflow) and connections are recycled
    after DB_POOL_RECYCLE seconds so a long-running process never holds
    stale connections.
    """
    url = settings.DATABASE_URL
    connect_args = {}

    if url.startswith("sqlite"):
        # SQLite connections are handed between threadpool workers
        connect_args["check_same_thread"] = False
    elif url.startswith("postgresql"):
        connect_args["options"] = f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"

    return create_engine(
        url,
        connect_args=connect_args,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )


def create_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)
