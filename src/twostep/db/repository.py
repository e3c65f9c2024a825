"""
User Directory
Storage boundary for the two-factor services
"""

import logging
from typing import Any, Dict, Optional, Protocol

from ..models.user import UserRecord

logger = logging.getLogger(__name__)


class UserDirectory(Protocol):
    """
    Account storage used by the enrollment and verification services.

    Implementations raise DirectoryUnavailable when the backing store
    cannot be reached.
    """

    async def get(self, user_id: str) -> Optional[UserRecord]:
        """Return the user, or None if no such user exists."""
        ...

    async def update(self, user_id: str, fields: Dict[str, Any]) -> bool:
        """Apply a partial update. Returns False if no such user exists."""
        ...


class InMemoryUserDirectory:
    """Dictionary backed directory for tests and local runs."""

    def __init__(self, users: Optional[Dict[str, UserRecord]] = None):
        self._users: Dict[str, UserRecord] = {}
        for user in (users or {}).values():
            self._users[user.id] = user.model_copy()

    async def create(self, user_data: dict) -> UserRecord:
        """Create a new user."""
        user = UserRecord.model_validate(user_data)
        self._users[user.id] = user
        logger.debug("Created user %s", user.id)
        return user.model_copy()

    async def get(self, user_id: str) -> Optional[UserRecord]:
        user = self._users.get(user_id)
        return user.model_copy() if user is not None else None

    async def update(self, user_id: str, fields: Dict[str, Any]) -> bool:
        current = self._users.get(user_id)
        if current is None:
            return False

        # Re-validate the merged record so invariants hold at rest.
        merged = {**current.model_dump(), **fields, "id": user_id}
        self._users[user_id] = UserRecord.model_validate(merged)
        return True

    def __len__(self) -> int:
        return len(self._users)
