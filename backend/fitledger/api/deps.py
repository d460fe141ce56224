"""
Shared API dependencies: clock, store, service and the access layer.
"""
from datetime import datetime
from typing import Callable

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fitledger.core.config import settings
from fitledger.core.database import get_db
from fitledger.services.ledger import ActivityService, RecordStore, UserLockRegistry


def get_clock() -> Callable[[], datetime]:
    """Server-local wall clock. Overridden in tests."""
    return datetime.now


def get_store(
    db: AsyncSession = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> RecordStore:
    return RecordStore(db, clock=clock)


def get_user_locks(request: Request) -> UserLockRegistry:
    return request.app.state.user_locks


def get_activity_service(
    store: RecordStore = Depends(get_store),
    locks: UserLockRegistry = Depends(get_user_locks),
) -> ActivityService:
    return ActivityService(store, locks)


async def get_current_user_id(
    request: Request,
    store: RecordStore = Depends(get_store),
) -> str:
    """
    Authenticated user id attached by the access layer.

    The header value is trusted as-is; only its presence and the user's
    existence are checked.
    """
    user_id = request.headers.get(settings.AUTH_USER_HEADER)
    if not user_id or await store.get_user(user_id) is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user_id
