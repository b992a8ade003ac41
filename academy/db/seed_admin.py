"""
Seed script to create the first ADMIN user.

Run once (after init_db) with env set:
  ADMIN_EMAIL=admin@youracademy.com
  ADMIN_PASSWORD=YourSecurePassword

Creates or updates one auth user with role ADMIN. Nothing is created when the
credentials are not configured.
"""
import asyncio
import logging
import logging.config
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.auth.models import User
from academy.auth.security import hash_password
from academy.core.config import LOGGING, settings
from academy.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_FULL_NAME = "Academy Admin"


async def seed_admin(
    db: AsyncSession,
    email: Optional[str] = None,
    password: Optional[str] = None,
) -> Optional[User]:
    email = email or settings.admin_email
    password = password or settings.admin_password
    if not email or not password:
        logger.warning("ADMIN_EMAIL / ADMIN_PASSWORD not set; skipping admin user.")
        return None

    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if not user:
        user = User(
            full_name=DEFAULT_ADMIN_FULL_NAME,
            email=email,
            password_hash=hash_password(password),
            role="ADMIN",
            status="ACTIVE",
        )
        db.add(user)
        logger.info("Created ADMIN user: %s", email)
    else:
        user.role = "ADMIN"
        user.status = "ACTIVE"
        user.password_hash = hash_password(password)
        logger.info("Updated existing user to ADMIN: %s", email)

    await db.commit()
    await db.refresh(user)
    return user


async def main() -> None:
    async with AsyncSessionLocal() as db:
        try:
            await seed_admin(db)
        except Exception:
            await db.rollback()
            logger.exception("Admin seed failed")
            raise


if __name__ == "__main__":
    logging.config.dictConfig(LOGGING)
    asyncio.run(main())
