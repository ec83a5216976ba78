import logging
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from healthaccess import crud
from healthaccess.api import deps
from healthaccess.db.session import SessionLocal
from healthaccess.schemas.notification import Notification
from healthaccess.schemas.user import SessionContext
from healthaccess.websocket import manager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[Notification])
def read_notifications(
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
    unread_only: bool = False,
    skip: int = 0,
    limit: int = Query(50, le=200),
) -> Any:
    """
    Notifications for the current user, newest first. Clients without a socket poll this.
    """
    return crud.notification.get_for_user(
        db, user_id=session.user_id, unread_only=unread_only, skip=skip, limit=limit
    )


@router.get("/unread-count")
def read_unread_count(
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
) -> Any:
    return {"unread": crud.notification.count_unread(db, user_id=session.user_id)}


@router.post("/read-all")
def mark_all_notifications_read(
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
) -> Any:
    return {"updated": crud.notification.mark_all_read(db, user_id=session.user_id)}


@router.post("/{notification_id}/read", response_model=Notification)
def mark_notification_read(
    notification_id: str,
    db: Session = Depends(deps.get_db),
    session: SessionContext = Depends(deps.get_current_session),
) -> Any:
    notification = crud.notification.mark_read(
        db, user_id=session.user_id, notification_id=notification_id
    )
    if notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification


@router.websocket("/ws")
async def notifications_socket(websocket: WebSocket, token: str = Query(...)):
    """Push channel for the current user's notifications."""
    db = SessionLocal()
    try:
        user = deps.user_from_token(db, token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    finally:
        db.close()

    await manager.connect(websocket, user.id)
    logger.info(f"Notification socket opened for user {user.id}")
    try:
        while True:
            # Clients may send pings; nothing else is expected
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(websocket, user.id)
        logger.info(f"Notification socket closed for user {user.id}")
