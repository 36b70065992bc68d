"""
This is the canonical Unit of Work boundary for MiniFlix. All transactional changes must go through this.

Do not open ad hoc sessions elsewhere.

Both the CLI and the HTTP handlers open their sessions here, so every
operation shares the same transaction semantics and the same translation of
driver-level connectivity failures into ``StorageUnavailable``.
"""

from __future__ import annotations

import contextlib
from collections.abc import Generator

from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .exceptions import StorageUnavailable

# Driver errors that mean "the database is not there", as opposed to a bug
# in the statement being executed.
STORAGE_ERRORS = (OperationalError, InterfaceError)


@contextlib.contextmanager
def session(factory: sessionmaker) -> Generator[Session, None, None]:
    """
    Database session context manager for CLI operations and request handlers.

    Provides Unit of Work semantics:
    - Opens a DB session from ``factory``
    - Yields it for use
    - On success: commits the transaction
    - On exception: rolls back and re-raises the exception
    - Always closes the session

    Connectivity failures (including a failed commit) are re-raised as
    ``StorageUnavailable``.

    Usage:
        with session(factory) as db:
            repo = WatchProgressRepository(db)
            repo.upsert(identity, "intro.mp4", 42)
    """
    db = factory()
    try:
        yield db
        db.commit()
    except STORAGE_ERRORS as exc:
        with contextlib.suppress(SQLAlchemyError):
            db.rollback()
        raise StorageUnavailable(str(getattr(exc, "orig", exc))) from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
