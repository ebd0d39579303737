# src/btcproxy/infrastructure/db/base.py
"""
Database engine setup and session management.
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from btcproxy.config import settings
from .models import Base

log = logging.getLogger(__name__)


def build_engine(url: str, **kwargs) -> Engine:
    """
    Creates an engine for `url`. For SQLite, same-thread checking is disabled
    because FastAPI may touch the connection from worker threads.
    """
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True, **kwargs)


# --- Database Engine Creation ---
# Connections are opened lazily, so importing this module does not touch the database.
engine = build_engine(settings.DATABASE_URL)

# --- Session Management ---
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def create_tables(bind: Engine = engine) -> None:
    """Creates all tables defined in the models package."""
    log.info("Creating database tables if they do not exist...")
    try:
        Base.metadata.create_all(bind)
        log.info("Database tables checked/created successfully.")
    except Exception as e:
        log.critical(f"Failed to create database tables: {e}", exc_info=True)
        raise
