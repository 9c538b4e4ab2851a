"""
User endpoints for API v1.

Signup, login, lookup, deletion and password reset.  Request bodies
are checked by hand rather than through a pydantic body model because
a malformed body must produce ``400 Invalid user body`` as plain text,
not FastAPI's 422 payload.  Service errors become ``500`` responses
with a per‑route message prefix.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from chat_api.app.core.errors import ErrorResult, InvalidRequestError, PersistenceError
from chat_api.app.schemas.user import SafeUser, User, UserCredentials
from chat_api.app.services.user_service import UserService, UserResponse


router = APIRouter()

INVALID_USER_BODY = "Invalid user body"


def get_user_service(request: Request) -> UserService:
    return UserService(request.app.state.store.users)


def validate_user_body(body: Any) -> UserCredentials:
    """Return the credentials in ``body`` or raise ``InvalidRequestError``.

    Both ``username`` and ``password`` must be present, non‑empty
    strings.
    """
    if not isinstance(body, dict):
        raise InvalidRequestError(INVALID_USER_BODY)
    username = body.get("username")
    password = body.get("password")
    if not username or not password or not isinstance(username, str) or not isinstance(password, str):
        raise InvalidRequestError(INVALID_USER_BODY)
    return UserCredentials(username=username, password=password)


def unwrap(result: UserResponse, message: str) -> SafeUser:
    if isinstance(result, ErrorResult):
        raise PersistenceError(f"{message}: {result.error}")
    return result


@router.post("/signup", response_model=SafeUser)
async def create_user(body: Any = Body(None), service: UserService = Depends(get_user_service)) -> SafeUser:
    """Register a user; ``dateJoined`` is set to the current UTC time."""
    credentials = validate_user_body(body)
    user = User(
        username=credentials.username,
        password=credentials.password,
        date_joined=datetime.now(timezone.utc),
    )
    created = await service.save_user(user)
    return unwrap(created, "Error occurred while creating the user")


@router.post("/login", response_model=SafeUser)
async def login_user(body: Any = Body(None), service: UserService = Depends(get_user_service)) -> SafeUser:
    credentials = validate_user_body(body)
    user = await service.login_user(credentials)
    # "occured" is part of the published error text
    return unwrap(user, "Error occured while logging in")


@router.get("/getUser/{username}", response_model=SafeUser)
async def get_user(username: str, service: UserService = Depends(get_user_service)) -> SafeUser:
    user = await service.get_user_by_username(username)
    return unwrap(user, "Error occurred while fetching user")


@router.delete("/deleteUser/{username}", response_model=SafeUser)
async def delete_user(username: str, service: UserService = Depends(get_user_service)) -> SafeUser:
    deleted = await service.delete_user_by_username(username)
    return unwrap(deleted, "Error occurred while deleting user")


@router.patch("/resetPassword", response_model=SafeUser)
async def reset_password(body: Any = Body(None), service: UserService = Depends(get_user_service)) -> SafeUser:
    """Replace the password of ``username``; other fields are untouched."""
    credentials = validate_user_body(body)
    updated = await service.update_user(credentials.username, {"password": credentials.password})
    return unwrap(updated, "Error occurred while resetting user password")
