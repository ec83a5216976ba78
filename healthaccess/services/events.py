import json
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

import redis
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from healthaccess import crud
from healthaccess.core.config import settings
from healthaccess.core.redis import get_redis
from healthaccess.models.notification import Notification
from healthaccess.websocket import ConnectionManager, manager
from healthaccess.workflow.exceptions import CollaboratorFailure

logger = logging.getLogger(__name__)

APPOINTMENT_BOOKED = "appointment_booked"
APPOINTMENT_STATUS_CHANGED = "appointment_status_changed"
CONSULTATION_STARTED = "consultation_started"
CONSULTATION_STATUS_CHANGED = "consultation_status_changed"
PRESCRIPTION_CREATED = "prescription_created"
PRESCRIPTION_STATUS_CHANGED = "prescription_status_changed"
CONSULTATION_REMINDER = "consultation_reminder"


class EventPublisher:
    """Stores a notification and pushes it to the user over websocket and Redis.

    The stored notification is the source of truth; push failures are logged
    and never undo it.
    """

    def __init__(
        self,
        connections: ConnectionManager = manager,
        redis_factory: Callable[[], Optional[redis.Redis]] = get_redis,
        channel: Optional[str] = None,
    ):
        self.connections = connections
        self._redis_factory = redis_factory
        self.channel = channel or settings.EVENTS_CHANNEL

    async def publish(
        self,
        db: Session,
        *,
        user_id: str,
        event: str,
        message: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Notification:
        notification = crud.notification.create(
            db, user_id=user_id, event=event, message=message, payload=jsonable_encoder(payload or {})
        )
        body = {
            "id": notification.id,
            "event": event,
            "message": message,
            "payload": notification.payload,
            "created_at": notification.created_at.isoformat() if notification.created_at else None,
        }

        delivered = await self.connections.send_to_user(body, user_id)
        logger.debug(f"{event} for user {user_id} delivered to {delivered} socket(s)")

        try:
            self._fan_out({**body, "user_id": user_id})
        except CollaboratorFailure as e:
            logger.warning(f"Event {event} stored but not fanned out: {e}")
        return notification

    async def publish_many(
        self,
        db: Session,
        *,
        user_ids: Iterable[str],
        event: str,
        message: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> List[Notification]:
        return [
            await self.publish(db, user_id=user_id, event=event, message=message, payload=payload)
            for user_id in user_ids
        ]

    def _fan_out(self, body: Dict[str, Any]):
        client = self._redis_factory()
        if client is None:
            return
        try:
            client.publish(self.channel, json.dumps(body))
        except redis.RedisError as e:
            raise CollaboratorFailure("redis", str(e)) from e


event_publisher = EventPublisher()


def get_event_publisher() -> EventPublisher:
    return event_publisher
