"""CRUD operations for users."""

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.user import User

if TYPE_CHECKING:
    from src.auth.models import LarkUser


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_lark_id(db: AsyncSession, lark_id: str) -> User | None:
    result = await db.execute(select(User).where(User.lark_id == lark_id))
    return result.scalar_one_or_none()


async def upsert_lark_user(
    db: AsyncSession,
    lark_user: "LarkUser",
    access_token: str,
) -> tuple[User, bool]:
    """Create the user on first login, otherwise refresh the stored provider token.

    Profile fields of an existing user are left untouched.

    Returns:
        (user, created)
    """
    user = await get_user_by_lark_id(db, lark_user.user_id)
    if user:
        user.lark_access_token = access_token
        await db.commit()
        return user, False

    user = User(
        lark_id=lark_user.user_id,
        email=lark_user.normalized_email,
        name=lark_user.display_name,
        avatar_url=lark_user.avatar_url,
        lark_access_token=access_token,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user, True
