from contextlib import contextmanager
from typing import Generator, Optional
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import NullPool, StaticPool
import logging
import os

from .models import Base

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(self, database_url: Optional[str] = None):
        actual_url = database_url or os.getenv('DATABASE_URL')

        if not actual_url:
            raise ValueError("DATABASE_URL not provided")

        if actual_url in ('sqlite://', 'sqlite:///:memory:'):
            # A single shared connection keeps the in-memory database alive
            self.engine = create_engine(
                actual_url,
                poolclass=StaticPool,
                connect_args={'check_same_thread': False},
                echo=False
            )
        else:
            self.engine = create_engine(
                actual_url,
                poolclass=NullPool,
                echo=False
            )
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine
        )

    def init_db(self):
        """Create all tables that do not exist yet"""
        Base.metadata.create_all(self.engine)
        logger.info("Database tables created")

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Session error: {e}")
            raise
        finally:
            session.close()

    def close(self):
        self.engine.dispose()

    def health_check(self) -> bool:
        """Check database health by attempting a simple query"""
        try:
            with self.engine.connect() as conn:
                result = conn.execute(text("SELECT 1"))
                return result.scalar() == 1
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

