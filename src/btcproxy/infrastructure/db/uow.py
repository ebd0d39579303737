# File: src/btcproxy/infrastructure/db/uow.py
import logging
from contextlib import contextmanager
from typing import Callable, Generator

from sqlalchemy.orm import Session

from .base import SessionLocal

log = logging.getLogger(__name__)


@contextmanager
def session_scope(session_factory: Callable[[], Session] = SessionLocal) -> Generator[Session, None, None]:
    """
    Provide a transactional scope around a series of operations.
    This handles session creation, commit, rollback, and closing.
    """
    session = session_factory()
    log.debug(f"Session {id(session)} opened.")
    try:
        yield session
        session.commit()
        log.debug(f"Session {id(session)} committed.")
    except Exception as e:
        log.error(f"Session {id(session)} rollback due to exception: {e}")
        session.rollback()
        raise
    finally:
        session.close()
        log.debug(f"Session {id(session)} closed.")
