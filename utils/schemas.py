"""
Pydantic schemas for the Flix REST API.

Field names follow the JSON the frontend already speaks
(``Username``, ``Password``, ``imagePath`` …).
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from database.models import Movie, User


# ═══════════════════════════════════════════════════════════════════════════════
# Auth
# ═══════════════════════════════════════════════════════════════════════════════


class LoginRequest(BaseModel):
    # Optional so that missing fields reach the gate and come back as 400
    Username: Optional[str] = None
    Password: Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════════════
# Users
# ═══════════════════════════════════════════════════════════════════════════════


# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def _check_password_bytes(value: Optional[str]) -> Optional[str]:
    if value is not None:
        raw = value.encode()
        if len(raw) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        if b"\x00" in raw:
            raise ValueError("Password must not contain NUL characters")
    return value


class UserCreate(BaseModel):
    Username: str = Field(..., min_length=1, max_length=64)
    Password: str = Field(..., min_length=1, max_length=72)
    Email: str = Field(..., min_length=3, max_length=255)
    Birthday: date

    @field_validator("Password")
    @classmethod
    def password_fits_bcrypt(cls, value: Optional[str]) -> Optional[str]:
        return _check_password_bytes(value)


class UserUpdate(BaseModel):
    Username: Optional[str] = Field(None, min_length=1, max_length=64)
    Password: Optional[str] = Field(None, min_length=1, max_length=72)
    Email: Optional[str] = Field(None, min_length=3, max_length=255)
    Birthday: Optional[date] = None

    @field_validator("Password")
    @classmethod
    def password_fits_bcrypt(cls, value: Optional[str]) -> Optional[str]:
        return _check_password_bytes(value)


class UserOut(BaseModel):
    """Public view of a user; never includes the password hash."""

    id: str
    Username: str
    Email: str
    Birthday: Optional[date] = None
    FavoriteMovies: List[str] = Field(default_factory=list)

    @classmethod
    def from_record(cls, user: User) -> "UserOut":
        return cls(
            id=str(user.user_id),
            Username=user.username,
            Email=user.email,
            Birthday=user.birthday,
            FavoriteMovies=[str(m.movie_id) for m in user.favorite_movies],
        )


class LoginResponse(BaseModel):
    user: UserOut
    token: str


class UserCreatedResponse(BaseModel):
    message: str
    user: UserOut


# ═══════════════════════════════════════════════════════════════════════════════
# Movies
# ═══════════════════════════════════════════════════════════════════════════════


class Genre(BaseModel):
    Name: Optional[str] = None
    Description: Optional[str] = None


class Director(BaseModel):
    Name: Optional[str] = None
    Bio: Optional[str] = None


class MovieCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    genre: Genre = Field(default_factory=Genre)
    director: Director = Field(default_factory=Director)
    actors: List[str] = Field(default_factory=list)
    image_path: Optional[str] = Field(None, alias="imagePath")
    featured: bool = False

    def to_columns(self) -> Dict[str, Any]:
        return self.model_dump()


class MovieUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    genre: Optional[Genre] = None
    director: Optional[Director] = None
    actors: Optional[List[str]] = None
    image_path: Optional[str] = Field(None, alias="imagePath")
    featured: Optional[bool] = None

    def to_columns(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class MovieOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str
    genre: Genre
    director: Director
    actors: List[str]
    image_path: Optional[str] = Field(None, serialization_alias="imagePath")
    featured: bool

    @classmethod
    def from_record(cls, movie: Movie) -> "MovieOut":
        return cls(
            id=str(movie.movie_id),
            title=movie.title,
            description=movie.description,
            genre=Genre(**(movie.genre or {})),
            director=Director(**(movie.director or {})),
            actors=list(movie.actors or []),
            image_path=movie.image_path,
            featured=bool(movie.featured),
        )
