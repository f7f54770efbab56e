"""
Database configuration and session management.

Every session is opened for an explicit ``SessionContext``; the access policy
layer (``domain.security.enforcement``) reads it from ``Session.info`` to filter
reads and authorize writes.
"""

import logging
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import settings
from domain.security.context import SESSION_CONTEXT_KEY, SessionContext

logger = logging.getLogger("angiday.database")

# Create SQLAlchemy Base
Base = declarative_base()


def create_app_engine(url: str, echo: bool = False, **kwargs) -> Engine:
    """Create an engine; SQLite connections get foreign key enforcement switched on."""
    engine = create_engine(url, echo=echo, future=True, **kwargs)
    if engine.dialect.name == "sqlite":

        @event.listens_for(engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


# Create engine
engine = create_app_engine(settings.database_url, echo=settings.db_echo)

# Create session factory
SessionLocal = sessionmaker(bind=engine, future=True)


def open_session(ctx: SessionContext, factory: Optional[sessionmaker] = None) -> Session:
    """Open a session acting on behalf of ``ctx``."""
    factory = factory or SessionLocal
    return factory(info={SESSION_CONTEXT_KEY: ctx})


def init_database(bind: Optional[Engine] = None, identity_sql: Optional[str] = None):
    """Initialize database schema, native row level security and the tag catalog

    ``identity_sql`` overrides the configured caller identity expression used
    by the installed policies.
    """
    from domain.security.migration import apply_policies
    from services.tag_service import TagService

    bind = bind or engine
    with bind.begin() as conn:
        Base.metadata.create_all(bind=conn)
        logger.info("Database tables created successfully")

        if conn.dialect.name == "postgresql" and settings.install_native_policies:
            apply_policies(
                conn,
                identity_sql=identity_sql or settings.policy_identity_sql,
                role=settings.policy_db_role,
            )
        elif conn.dialect.name != "postgresql":
            logger.info(
                f"Dialect {conn.dialect.name} has no native row level security; "
                "policies are enforced in-process only"
            )

    if settings.seed_tag_catalog:
        factory = sessionmaker(bind=bind, future=True)
        db = open_session(SessionContext.service(), factory)
        try:
            TagService.seed_catalog(db)
        finally:
            db.close()
