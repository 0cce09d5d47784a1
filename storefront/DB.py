# storefront/DB.py
import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .errors import Internal
from .models import table_registry

logger = logging.getLogger(__name__)


def build_engine(url: str, connect_timeout: int = 5) -> Engine:
    if url.startswith('sqlite'):
        options = {'connect_args': {'check_same_thread': False, 'timeout': connect_timeout}}
        if url in ('sqlite://', 'sqlite:///:memory:'):
            # A single shared connection, otherwise every checkout sees an empty database
            options['poolclass'] = StaticPool
        return create_engine(url, **options)

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_timeout=connect_timeout,
        connect_args={'connect_timeout': connect_timeout},
    )


class Database:
    """
    Process-wide persistence handle.

    Acquired once by the application lifespan (``connect``) and released on
    shutdown (``dispose``). Request handlers get their own ``Session`` from it.
    """

    def __init__(self, url: str, connect_timeout: int = 5):
        self.url = url
        self.engine = build_engine(url, connect_timeout)
        self.SessionLocal = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    def connect(self) -> None:
        table_registry.metadata.create_all(self.engine)
        with self.engine.connect() as conn:
            conn.execute(text('SELECT 1'))
        logger.info(f"Database ready ({self.engine.url.get_backend_name()})")

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            return conn.execute(text('SELECT 1')).scalar() == 1

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connections released")

    @contextmanager
    def session(self) -> Iterator[Session]:
        with self.SessionLocal() as session:
            yield session


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_session(request: Request) -> Generator[Session, None, None]:
    with get_database(request).session() as session:
        yield session


@contextmanager
def atomic(session: Session) -> Iterator[Session]:
    """
    Commit the work done inside the block as one transaction.

    IntegrityError is re-raised untouched so callers can map constraint
    violations; any other database failure becomes ``Internal``.
    """
    try:
        yield session
        session.commit()
    except IntegrityError:
        session.rollback()
        raise
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Transaction failed")
        raise Internal() from exc
