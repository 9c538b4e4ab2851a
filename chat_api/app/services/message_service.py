"""
Service layer for chat messages.

Messages are immutable once stored: the service only creates and
lists them.  Listing never fails from the caller's point of view; a
storage error is logged and an empty list is returned.
"""

import logging
from typing import List, Union

from ..core.errors import ErrorResult
from ..core.store import ASCENDING, Collection
from ..schemas.message import Message, StoredMessage


MessageResponse = Union[StoredMessage, ErrorResult]

logger = logging.getLogger(__name__)


class MessageService:
    """Service for chat messages, bound to one ``messages`` collection."""

    def __init__(self, messages: Collection) -> None:
        self.messages = messages

    async def save_message(self, message: Message) -> MessageResponse:
        """Persist ``message`` and return it with its assigned ``id``."""
        try:
            created = await self.messages.create(message.model_dump(by_alias=True, mode="json"))
            if not created:
                raise RuntimeError("Failed to create new message")
            logger.info("Stored message %s from %s", created["id"], message.msg_from)
            return StoredMessage.model_validate(created)
        except Exception as exc:
            logger.warning("Saving message from %s failed: %s", message.msg_from, exc)
            return ErrorResult(error=f"Error occurred while saving message: {exc}")

    async def get_messages(self) -> List[StoredMessage]:
        """Return all messages, oldest ``msgDateTime`` first."""
        try:
            documents = await self.messages.find(sort=[("msgDateTime", ASCENDING)])
            return [StoredMessage.model_validate(document) for document in documents]
        except Exception:
            logger.exception("Listing messages failed; returning an empty list")
            return []
