"""
SQLAlchemy database setup and ORM models for Ashpaz.
"""

import logging

import sqlalchemy as sa
from fastapi import Request
from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String, create_engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker
from sqlalchemy.pool import StaticPool

from ashpaz.config import Settings
from ashpaz.utils_time import utc_now

logger = logging.getLogger(__name__)

Base = declarative_base()


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(320), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    password_hash = Column(String, nullable=True)  # NULL for OAuth-only accounts
    google_id = Column(String, unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)
    saved_recipes = relationship(
        "SavedRecipe",
        back_populates="user",
        cascade="all, delete-orphan",
    )


class SavedRecipe(Base):
    __tablename__ = "saved_recipes"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "title", name="uq_saved_recipe_user_title"),
    )
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    recipe_data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)
    user = relationship("User", back_populates="saved_recipes")


class Database:
    """
    Owns the engine (and its connection pool) and the session factory.
    Created by the application factory and disposed on shutdown.
    """

    def __init__(self, url: str, **engine_kwargs):
        self.url = url
        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        url = settings.database_url
        if url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in url or url.rstrip("/") == "sqlite:":
                # One shared connection, otherwise every checkout sees an empty database.
                kwargs["poolclass"] = StaticPool
            return cls(url, **kwargs)

        connect_args = {"connect_timeout": settings.db_pool_timeout}
        if settings.db_sslmode:
            connect_args["sslmode"] = settings.db_sslmode
        return cls(
            url,
            pool_pre_ping=True,                         # Checks connection before use
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,      # Seconds to wait for a free connection
            pool_recycle=settings.db_pool_recycle,
            connect_args=connect_args,
        )

    def init_db(self):
        Base.metadata.create_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()


def get_db(request: Request):
    """Per-request session from the application's Database; always closed."""
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()
