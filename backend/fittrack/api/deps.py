"""
Shared API dependencies.
"""
from fastapi import Depends, Header, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.core.database import get_db
from fittrack.models.user import User
from fittrack.services.analytics.store import EventStore, SqlEventStore


async def get_current_user_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
) -> int:
    """
    Resolve the calling user.
    
    Credentials are validated upstream; the gateway forwards the
    authenticated user id in the X-User-Id header.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing user identity")
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid user identity")
    if user_id <= 0:
        raise HTTPException(status_code=401, detail="Invalid user identity")
    return user_id


async def get_existing_user_id(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> int:
    """
    Resolve the calling user and check that the account row exists.
    
    Used by endpoints that write rows referencing `users.id`.
    """
    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user_id


async def get_event_store(db: AsyncSession = Depends(get_db)) -> EventStore:
    """Event store bound to the request session."""
    return SqlEventStore(db)
