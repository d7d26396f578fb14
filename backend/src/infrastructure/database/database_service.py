import logging
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()

class DatabaseService:
    """
    Service for managing database connections and sessions.
    """

    def __init__(self, db_url: str):
        self.db_url = db_url

        try:
            # pool_pre_ping=True helps with dropped connections (common in cloud envs)
            self.engine = create_engine(
                self.db_url,
                pool_pre_ping=True,
                # SQLite doesn't support multiple threads by default in SQLAlchemy
                connect_args={"check_same_thread": False} if self.db_url.startswith("sqlite") else {}
            )

            self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

            logger.info(f"DatabaseService initialized with {self.db_url.split('@')[-1] if '@' in self.db_url else 'local DB'}")

        except Exception as e:
            logger.error(f"Failed to initialize DatabaseService: {e}")
            raise e

    def create_tables(self):
        """Create all tables defined in Base."""
        # Import models so they are registered on Base.metadata
        from src.infrastructure.database import models  # noqa: F401
        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("Database tables created successfully")
        except Exception as e:
            logger.error(f"Failed to create database tables: {e}")
            raise e

    def get_session(self):
        """Get a new database session."""
        return self.SessionLocal()

    def ping(self) -> bool:
        """Run ``SELECT 1`` against the database. Returns False when it is unreachable."""
        try:
            with self.engine.connect() as conn:
                return conn.execute(text("SELECT 1")).scalar() == 1
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {e}")
            return False

    def dispose(self):
        self.engine.dispose()
