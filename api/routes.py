"""
REST API routes for users, favorites and movies.

Every route here requires a valid bearer token.  Routes that modify a
user additionally require the token's identity to own that user.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_current_identity
from auth.gate import AuthenticatedIdentity
from auth.password import hash_password
from database import helpers
from database.models import Movie, User
from utils.schemas import (
    Director,
    Genre,
    MovieCreate,
    MovieOut,
    MovieUpdate,
    UserOut,
    UserUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_identity)])


# ── Helpers ─────────────────────────────────────────────────────────────


async def _require_user(session: AsyncSession, username: str) -> User:
    user = await helpers.get_user_by_username(session, username)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


async def _require_movie(session: AsyncSession, title: str) -> Movie:
    movie = await helpers.get_movie_by_title(session, title)
    if movie is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movie not found")
    return movie


def _require_owner(identity: AuthenticatedIdentity, username: str) -> None:
    if identity.username != username:
        logger.warning("%s tried to modify %s", identity.username, username)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Permission denied")


# ── Users ───────────────────────────────────────────────────────────────


@router.get("/users", response_model=List[UserOut], tags=["users"])
async def list_users(session: AsyncSession = Depends(db_session)) -> List[UserOut]:
    return [UserOut.from_record(u) for u in await helpers.list_users(session)]


@router.get("/users/{username}", response_model=UserOut, tags=["users"])
async def get_user(username: str, session: AsyncSession = Depends(db_session)) -> UserOut:
    return UserOut.from_record(await _require_user(session, username))


@router.put("/users/{username}", response_model=UserOut, tags=["users"])
async def update_user(
    username: str,
    req: UserUpdate,
    session: AsyncSession = Depends(db_session),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
) -> UserOut:
    """Update the caller's own profile. A new password is re-hashed."""
    _require_owner(identity, username)
    user = await _require_user(session, username)

    changes: Dict[str, Any] = {}
    if req.Username is not None and req.Username != user.username:
        if await helpers.get_user_by_username(session, req.Username) is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username already exists",
            )
        changes["username"] = req.Username
    if req.Password is not None:
        changes["password_hash"] = hash_password(req.Password)
    if req.Email is not None:
        changes["email"] = req.Email
    if req.Birthday is not None:
        changes["birthday"] = req.Birthday

    user = await helpers.update_user(session, user, changes)
    logger.info("Updated user %s (%s): %s", user.username, user.user_id, sorted(changes))
    return UserOut.from_record(user)


@router.delete("/users/{username}", tags=["users"])
async def delete_user(
    username: str,
    session: AsyncSession = Depends(db_session),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
) -> Dict[str, str]:
    _require_owner(identity, username)
    user = await _require_user(session, username)
    await helpers.delete_user(session, user)
    return {"message": f"{username} was deleted"}


# ── Favorites ───────────────────────────────────────────────────────────


@router.post("/users/{username}/movies/{movie_id}", response_model=UserOut, tags=["favorites"])
async def add_favorite(
    username: str,
    movie_id: str,
    session: AsyncSession = Depends(db_session),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
) -> UserOut:
    _require_owner(identity, username)
    user = await _require_user(session, username)
    try:
        movie = await helpers.get_movie_by_id(session, movie_id)
    except ValueError:
        movie = None
    if movie is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movie not found")
    user = await helpers.add_favorite(session, user, movie)
    return UserOut.from_record(user)


@router.delete("/users/{username}/movies/{movie_id}", response_model=UserOut, tags=["favorites"])
async def remove_favorite(
    username: str,
    movie_id: str,
    session: AsyncSession = Depends(db_session),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
) -> UserOut:
    _require_owner(identity, username)
    user = await _require_user(session, username)
    try:
        user = await helpers.remove_favorite(session, user, movie_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movie not found")
    return UserOut.from_record(user)


# ── Movies ──────────────────────────────────────────────────────────────


@router.get("/movies", response_model=List[MovieOut], tags=["movies"])
async def list_movies(session: AsyncSession = Depends(db_session)) -> List[MovieOut]:
    return [MovieOut.from_record(m) for m in await helpers.list_movies(session)]


@router.get("/movies/genre/{name}", response_model=Genre, tags=["movies"])
async def get_genre(name: str, session: AsyncSession = Depends(db_session)) -> Dict[str, Any]:
    genre = await helpers.find_genre(session, name)
    if genre is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Genre not found")
    return genre


@router.get("/movies/directors/{name}", response_model=Director, tags=["movies"])
async def get_director(name: str, session: AsyncSession = Depends(db_session)) -> Dict[str, Any]:
    director = await helpers.find_director(session, name)
    if director is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Director not found")
    return director


@router.get("/movies/{title}", response_model=MovieOut, tags=["movies"])
async def get_movie(title: str, session: AsyncSession = Depends(db_session)) -> MovieOut:
    return MovieOut.from_record(await _require_movie(session, title))


@router.post(
    "/movies",
    response_model=MovieOut,
    status_code=status.HTTP_201_CREATED,
    tags=["movies"],
)
async def create_movie(req: MovieCreate, session: AsyncSession = Depends(db_session)) -> MovieOut:
    if await helpers.get_movie_by_title(session, req.title) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{req.title} already exists",
        )
    movie = await helpers.create_movie(session, req.to_columns())
    logger.info("Created movie %r (%s)", movie.title, movie.movie_id)
    return MovieOut.from_record(movie)


@router.put("/movies/{title}", response_model=MovieOut, tags=["movies"])
async def update_movie(
    title: str,
    req: MovieUpdate,
    session: AsyncSession = Depends(db_session),
) -> MovieOut:
    movie = await _require_movie(session, title)
    changes = req.to_columns()
    new_title = changes.get("title")
    if new_title and new_title != movie.title:
        if await helpers.get_movie_by_title(session, new_title) is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{new_title} already exists",
            )
    movie = await helpers.update_movie(session, movie, changes)
    return MovieOut.from_record(movie)


@router.delete("/movies/{title}", tags=["movies"])
async def delete_movie(title: str, session: AsyncSession = Depends(db_session)) -> Dict[str, str]:
    movie = await _require_movie(session, title)
    await helpers.delete_movie(session, movie)
    return {"message": "Movie deleted"}
