"""
Database helper functions — user and movie reads/writes used by the routes.

"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Movie, User

logger = logging.getLogger(__name__)


def _to_uuid(value: str | uuid.UUID) -> uuid.UUID:
    return uuid.UUID(value) if isinstance(value, str) else value


# ── Users ───────────────────────────────────────────────────────────────


async def get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: str | uuid.UUID) -> Optional[User]:
    result = await session.execute(select(User).where(User.user_id == _to_uuid(user_id)))
    return result.scalar_one_or_none()


async def list_users(session: AsyncSession) -> List[User]:
    result = await session.execute(select(User).order_by(User.username))
    return list(result.scalars().all())


async def create_user(
    session: AsyncSession,
    *,
    username: str,
    password_hash: str,
    email: str,
    birthday: date,
) -> User:
    user = User(
        user_id=uuid.uuid4(),
        username=username,
        password_hash=password_hash,
        email=email,
        birthday=birthday,
        favorite_movies=[],
    )
    session.add(user)
    await session.flush()
    return user


async def update_user(session: AsyncSession, user: User, changes: Dict[str, Any]) -> User:
    """Apply ``changes`` (already validated, password already hashed)."""
    for field, value in changes.items():
        setattr(user, field, value)
    await session.flush()
    return user


async def delete_user(session: AsyncSession, user: User) -> None:
    await session.delete(user)
    await session.flush()
    logger.info("Deleted user %s (%s)", user.username, user.user_id)


# ── Movies ──────────────────────────────────────────────────────────────


async def list_movies(session: AsyncSession) -> List[Movie]:
    result = await session.execute(select(Movie).order_by(Movie.title))
    return list(result.scalars().all())


async def get_movie_by_title(session: AsyncSession, title: str) -> Optional[Movie]:
    result = await session.execute(select(Movie).where(Movie.title == title))
    return result.scalar_one_or_none()


async def get_movie_by_id(session: AsyncSession, movie_id: str | uuid.UUID) -> Optional[Movie]:
    result = await session.execute(select(Movie).where(Movie.movie_id == _to_uuid(movie_id)))
    return result.scalar_one_or_none()


async def find_genre(session: AsyncSession, name: str) -> Optional[Dict[str, Any]]:
    """Return the ``genre`` block of the first movie whose genre is ``name``."""
    for movie in await list_movies(session):
        if (movie.genre or {}).get("Name") == name:
            return movie.genre
    return None


async def find_director(session: AsyncSession, name: str) -> Optional[Dict[str, Any]]:
    """Return the ``director`` block of the first movie directed by ``name``."""
    for movie in await list_movies(session):
        if (movie.director or {}).get("Name") == name:
            return movie.director
    return None


async def create_movie(session: AsyncSession, data: Dict[str, Any]) -> Movie:
    movie = Movie(movie_id=uuid.uuid4(), **data)
    session.add(movie)
    await session.flush()
    return movie


async def update_movie(session: AsyncSession, movie: Movie, changes: Dict[str, Any]) -> Movie:
    for field, value in changes.items():
        setattr(movie, field, value)
    await session.flush()
    return movie


async def delete_movie(session: AsyncSession, movie: Movie) -> None:
    await session.delete(movie)
    await session.flush()


# ── Favorites ───────────────────────────────────────────────────────────


async def add_favorite(session: AsyncSession, user: User, movie: Movie) -> User:
    """Add ``movie`` to the user's favorites (no-op if already present)."""
    if all(m.movie_id != movie.movie_id for m in user.favorite_movies):
        user.favorite_movies.append(movie)
        await session.flush()
    return user


async def remove_favorite(session: AsyncSession, user: User, movie_id: str | uuid.UUID) -> User:
    mid = _to_uuid(movie_id)
    user.favorite_movies = [m for m in user.favorite_movies if m.movie_id != mid]
    await session.flush()
    return user
