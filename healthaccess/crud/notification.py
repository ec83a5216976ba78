from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from healthaccess.models.notification import Notification


class CRUDNotification:
    def create(
        self, db: Session, *, user_id: str, event: str, message: str, payload: Optional[Dict[str, Any]] = None
    ) -> Notification:
        db_obj = Notification(user_id=user_id, event=event, message=message, payload=payload or {})
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_for_user(
        self, db: Session, *, user_id: str, unread_only: bool = False, skip: int = 0, limit: int = 50
    ) -> List[Notification]:
        query = db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.read.is_(False))
        return query.order_by(Notification.created_at.desc()).offset(skip).limit(limit).all()

    def count_unread(self, db: Session, *, user_id: str) -> int:
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .count()
        )

    def mark_read(self, db: Session, *, user_id: str, notification_id: str) -> Optional[Notification]:
        db_obj = (
            db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )
        if db_obj is None:
            return None
        db_obj.read = True
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def mark_all_read(self, db: Session, *, user_id: str) -> int:
        updated = (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .update({Notification.read: True}, synchronize_session=False)
        )
        db.commit()
        return updated


notification = CRUDNotification()
