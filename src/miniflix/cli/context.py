from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from ..infra.db import create_schema, ensure_sqlite_directory, get_engine, get_sessionmaker
from ..infra.exceptions import StorageUnavailable
from ..infra.settings import settings
from ..infra.uow import STORAGE_ERRORS, session


@contextmanager
def open_session() -> Iterator[Session]:
    """Unit of Work against the configured database, creating tables if needed.

    The engine lives only as long as the session; it is disposed on exit.
    """
    ensure_sqlite_directory(settings.database_url)
    engine = get_engine(cfg=settings)
    try:
        try:
            create_schema(engine)
        except STORAGE_ERRORS as exc:
            raise StorageUnavailable(str(getattr(exc, "orig", exc))) from exc
        with session(get_sessionmaker(engine)) as db:
            yield db
    finally:
        engine.dispose()
