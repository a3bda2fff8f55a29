"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from dapdip.application.use_cases.notifications import (
    MAX_PAGE_SIZE,
    get_unread_count as get_unread_count_uc,
    list_notifications as list_notifications_uc,
    mark_read as mark_read_uc,
    notify as notify_uc,
    serialize_notification,
)
from dapdip.application.use_cases.users import get_user as get_user_uc
from dapdip.domain.entities import Notification, User
from dapdip.domain.errors import NotificationNotFoundError
from dapdip.infrastructure.database import SessionLocal, get_db
from dapdip.infrastructure.notifications import RelayPublisher, notification_relay
from dapdip.interfaces.api.dependencies import (
    get_current_active_user,
    get_relay_publisher,
    resolve_current_user,
)
from dapdip.interfaces.api.schemas import (
    NotificationCreate,
    NotificationCreateResponse,
    NotificationListResponse,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    UnreadCountResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(serialize_notification(notification))


@router.get("/", response_model=NotificationListResponse)
def list_notifications(
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    cursor: int | None = Query(None, ge=1),
    unread_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationListResponse:
    """Return a page of notifications for the authenticated user, newest first."""

    page = list_notifications_uc(
        db, current_user.id, limit=limit, cursor=cursor, unread_only=unread_only
    )
    return NotificationListResponse(
        notifications=[_notification_to_schema(n) for n in page["notifications"]],
        unread_count=page["unread_count"],
        next_cursor=page["next_cursor"],
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> UnreadCountResponse:
    return UnreadCountResponse(unread_count=get_unread_count_uc(db, current_user.id))


@router.post(
    "/",
    response_model=NotificationCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    publisher: RelayPublisher = Depends(get_relay_publisher),
) -> NotificationCreateResponse:
    """Notify ``recipient_id`` on behalf of the authenticated user."""

    try:
        get_user_uc(db, payload.recipient_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    result = notify_uc(
        db,
        recipient_id=payload.recipient_id,
        notification_type=payload.type,
        sender_id=current_user.id,
        content=payload.content,
        priority=payload.priority,
        is_actionable=payload.is_actionable,
        action_label=payload.action_label,
        action_url=payload.action_url,
        url=payload.url,
        image_url=payload.image_url,
        group_id=payload.group_id,
        page_id=payload.page_id,
        metadata=payload.metadata,
        publisher=publisher,
    )
    return NotificationCreateResponse(
        created=result.created,
        skipped_reason=result.skipped_reason,
        silent=result.silent,
        notification=_notification_to_schema(result.notification)
        if result.notification
        else None,
    )


@router.post("/read", response_model=NotificationMarkReadResponse)
def mark_notifications_read(
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    publisher: RelayPublisher = Depends(get_relay_publisher),
) -> NotificationMarkReadResponse:
    """Mark one notification, or all of them when no id is sent, as read."""

    try:
        updated = mark_read_uc(
            db, current_user.id, payload.notification_id, publisher=publisher
        )
    except NotificationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return NotificationMarkReadResponse(
        updated=updated,
        unread_count=get_unread_count_uc(db, current_user.id),
    )


def _acknowledge(user_id: int, ids: list[Any]) -> None:
    session = SessionLocal()
    try:
        for notification_id in ids:
            if not isinstance(notification_id, int):
                continue
            try:
                mark_read_uc(session, user_id, notification_id)
            except NotificationNotFoundError:
                logger.debug("Ignoring ack for unknown notification %s", notification_id)
    finally:
        session.close()


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the authenticated user."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
        page = list_notifications_uc(session, user.id, limit=MAX_PAGE_SIZE, unread_only=True)
        pending = [serialize_notification(n) for n in page["notifications"]]
    except HTTPException:
        await websocket.close(code=1008)
        return
    finally:
        session.close()

    await notification_relay.connect(user.id, websocket)
    try:
        await websocket.send_json(
            {"type": "init", "data": pending, "unread_count": page["unread_count"]}
        )
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    _acknowledge(user.id, ids)
    except WebSocketDisconnect:
        pass
    finally:
        notification_relay.disconnect(user.id, websocket)
