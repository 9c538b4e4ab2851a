"""
Top‑level router for version 1 of the API.

Aggregates the ``/user`` and ``/messaging`` routers.  When a new
resource is added, include its router here.
"""

from fastapi import APIRouter

from .endpoints import messages, users


router = APIRouter()

router.include_router(users.router, prefix="/user", tags=["users"])
router.include_router(messages.router, prefix="/messaging", tags=["messages"])
