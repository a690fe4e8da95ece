"""
SQLAlchemy ORM models for users, movies and the favorites list.

Column types are the portable ones (``Uuid``, ``JSON``) so the same models
run on PostgreSQL in production and SQLite in tests.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    String,
    Table,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


user_favorite_movies = Table(
    "user_favorite_movies",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True),
    Column("movie_id", Uuid, ForeignKey("movies.movie_id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    user_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(64), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    birthday = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    favorite_movies = relationship("Movie", secondary=user_favorite_movies, lazy="selectin")


class Movie(Base):
    __tablename__ = "movies"

    movie_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=False)
    genre = Column(JSON, default=dict)        # {"Name": ..., "Description": ...}
    director = Column(JSON, default=dict)     # {"Name": ..., "Bio": ...}
    actors = Column(JSON, default=list)
    image_path = Column(String(512))
    featured = Column(Boolean, default=False)
