"""
Auth API routes — register, login.

Mounted at the application root: ``POST /users`` and ``POST /login``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_auth_gate
from auth.gate import AuthGate
from auth.password import hash_password
from database.helpers import create_user, get_user_by_username
from utils.schemas import (
    LoginRequest,
    LoginResponse,
    UserCreate,
    UserCreatedResponse,
    UserOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post(
    "/users",
    response_model=UserCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    req: UserCreate,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Register a new user."""
    if await get_user_by_username(session, req.Username) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already exists",
        )

    try:
        user = await create_user(
            session,
            username=req.Username,
            password_hash=hash_password(req.Password),
            email=req.Email,
            birthday=req.Birthday,
        )
    except IntegrityError as exc:
        # a concurrent registration claimed the name after the check above
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already exists",
        ) from exc
    logger.info("Registered user %s (%s)", user.username, user.user_id)

    return {
        "message": "User created successfully",
        "user": UserOut.from_record(user),
    }


@router.post("/login", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    gate: AuthGate = Depends(get_auth_gate),
) -> Dict[str, Any]:
    """Login with Username + Password; returns the user and a bearer token."""
    result = await gate.login(req.Username, req.Password)
    return {
        "user": UserOut.from_record(result.user),
        "token": result.token.encoded,
    }
