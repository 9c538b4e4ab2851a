"""
Message endpoints for API v1.

``/addMessage`` validates and stores a message, then publishes a
``messageUpdate`` event to the notification channel.  ``/getMessages``
lists every message in ``msgDateTime`` order.  ``/ws`` is the
websocket on which live updates are pushed.
"""

import logging
from typing import Any, List

from fastapi import APIRouter, Body, Depends, Request, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from chat_api.app.core.errors import ErrorResult, InvalidRequestError, PersistenceError
from chat_api.app.core.notifications import MESSAGE_UPDATE, NotificationChannel
from chat_api.app.schemas.message import Message, StoredMessage
from chat_api.app.services.message_service import MessageService


router = APIRouter()
logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("msg", "msgFrom", "msgDateTime")


def get_message_service(request: Request) -> MessageService:
    return MessageService(request.app.state.store.messages)


def get_notifier(request: Request) -> NotificationChannel:
    return request.app.state.notifier


def is_request_valid(body: Any) -> bool:
    return isinstance(body, dict) and body.get("messageToAdd") is not None


def is_message_valid(message: Any) -> bool:
    """True if every required field is present and truthy."""
    return isinstance(message, dict) and all(message.get(field) for field in REQUIRED_FIELDS)


@router.post("/addMessage", response_model=StoredMessage)
async def add_message(
    body: Any = Body(None),
    service: MessageService = Depends(get_message_service),
    notifier: NotificationChannel = Depends(get_notifier),
) -> StoredMessage:
    if not is_request_valid(body):
        raise InvalidRequestError("Invalid request")
    message_to_add = body["messageToAdd"]
    if not is_message_valid(message_to_add):
        raise InvalidRequestError("Invalid message body")
    try:
        message = Message.model_validate(message_to_add)
    except ValidationError:
        # truthy but unusable, e.g. a msgDateTime that is not a timestamp
        raise InvalidRequestError("Invalid message body")

    saved = await service.save_message(message)
    if isinstance(saved, ErrorResult):
        raise PersistenceError(f"Error occurred while adding a message: {saved.error}")

    try:
        await notifier.publish(MESSAGE_UPDATE, {"msg": saved.model_dump(by_alias=True, mode="json")})
    except Exception as exc:
        logger.exception("Publishing %s for message %s failed", MESSAGE_UPDATE, saved.id)
        raise PersistenceError(f"Error occurred while adding a message: {exc}")
    return saved


@router.get("/getMessages", response_model=List[StoredMessage])
async def get_messages(service: MessageService = Depends(get_message_service)) -> List[StoredMessage]:
    """List all messages, oldest first.  Storage failures yield ``[]``."""
    return await service.get_messages()


@router.websocket("/ws")
async def message_updates(websocket: WebSocket) -> None:
    notifier = websocket.app.state.notifier
    await notifier.connect(websocket)
    try:
        while True:
            # clients only listen; anything they send is ignored
            await websocket.receive_text()
    except WebSocketDisconnect:
        notifier.disconnect(websocket)
