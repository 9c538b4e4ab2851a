"""
Business logic for users.

``UserService`` wraps the ``users`` collection.  Every method returns
either a ``SafeUser`` or an ``ErrorResult``; nothing is raised to the
caller.  The password is excluded from every document read back from
the collection, so it never leaves this module.

Passwords are stored and compared in plain form.  Login is a single
lookup on username *and* password, so a wrong username and a wrong
password produce the same error.
"""

import logging
from typing import Any, Dict, Union

from ..core.errors import ErrorResult
from ..core.store import Collection
from ..schemas.user import SafeUser, User, UserCredentials


UserResponse = Union[SafeUser, ErrorResult]

CREDENTIAL_FIELDS = ("password",)

logger = logging.getLogger(__name__)


class UserService:
    """Service for user accounts, bound to one ``users`` collection."""

    def __init__(self, users: Collection) -> None:
        self.users = users

    async def save_user(self, user: User) -> UserResponse:
        """Create a user and return it without the password."""
        logger.info("Registering user %s", user.username)
        try:
            created = await self.users.create(user.model_dump(by_alias=True))
            if not created:
                raise RuntimeError("User creation failed!")
            return SafeUser(
                id=created["id"],
                username=created["username"],
                date_joined=created["dateJoined"],
            )
        except Exception as exc:
            logger.warning("Saving user %s failed: %s", user.username, exc)
            return ErrorResult(error=f"Error occurred while saving the user: {exc}")

    async def get_user_by_username(self, username: str) -> UserResponse:
        try:
            found = await self.users.find_one({"username": username}, exclude=CREDENTIAL_FIELDS)
            if not found:
                raise LookupError("User not found")
            return SafeUser.model_validate(found)
        except Exception as exc:
            logger.warning("Fetching user %s failed: %s", username, exc)
            return ErrorResult(error=f"Error occurred while retrieving user by username: {exc}")

    async def login_user(self, credentials: UserCredentials) -> UserResponse:
        """Return the user matching both username and password."""
        try:
            found = await self.users.find_one(
                {"username": credentials.username, "password": credentials.password},
                exclude=CREDENTIAL_FIELDS,
            )
            if not found:
                raise LookupError("User not found!")
            return SafeUser.model_validate(found)
        except Exception as exc:
            logger.warning("Login for %s failed: %s", credentials.username, exc)
            return ErrorResult(error=f"Error occurred while authenticating user: {exc}")

    async def delete_user_by_username(self, username: str) -> UserResponse:
        try:
            deleted = await self.users.find_one_and_delete({"username": username}, exclude=CREDENTIAL_FIELDS)
            if not deleted:
                raise LookupError("User not found!")
            logger.info("Deleted user %s", username)
            return SafeUser.model_validate(deleted)
        except Exception as exc:
            logger.warning("Deleting user %s failed: %s", username, exc)
            return ErrorResult(error=f"Error occurred while deleting the user: {exc}")

    async def update_user(self, username: str, updates: Dict[str, Any]) -> UserResponse:
        """Apply a partial update; only the keys present in ``updates`` change."""
        try:
            updated = await self.users.find_one_and_update(
                {"username": username}, updates, exclude=CREDENTIAL_FIELDS
            )
            if not updated:
                raise LookupError("User not found!")
            logger.info("Updated user %s (%s)", username, ", ".join(sorted(updates)))
            return SafeUser.model_validate(updated)
        except Exception as exc:
            logger.warning("Updating user %s failed: %s", username, exc)
            return ErrorResult(error=f"Error occurred while updating the user's details: {exc}")
