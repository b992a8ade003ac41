from datetime import datetime, timezone
from typing import Optional

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.auth.models import User
from academy.auth.schemas import LoginRequest, LoginResponse, UserInfo
from academy.auth.security import create_access_token, verify_password
from academy.core.exceptions import ServiceError
from academy.core.store import storage_errors


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    # 1. Find user by email (case-insensitive)
    async with storage_errors(db, "loading user"):
        user_result = await db.execute(
            select(User).where(func.lower(User.email) == func.lower(payload.email))
        )
        user: Optional[User] = user_result.scalar_one_or_none()
    if not user:
        raise ServiceError("Invalid credentials", status.HTTP_401_UNAUTHORIZED)

    # 2. Verify password hash
    if not verify_password(payload.password, user.password_hash):
        raise ServiceError("Invalid credentials", status.HTTP_401_UNAUTHORIZED)

    # 3. Check user status
    if user.status != "ACTIVE":
        raise ServiceError("User is inactive", status.HTTP_403_FORBIDDEN)

    issued_at = datetime.now(timezone.utc)
    access_token = create_access_token(user.id, user.role, issued_at=issued_at)
    return LoginResponse(
        access_token=access_token,
        user=UserInfo(id=user.id, name=user.full_name, email=user.email, role=user.role),
        issued_at=issued_at,
    )
