from datetime import datetime
from typing import Any, Dict
from pydantic import BaseModel


class Notification(BaseModel):
    id: str
    event: str
    message: str
    payload: Dict[str, Any] = {}
    read: bool
    created_at: datetime

    class Config:
        from_attributes = True
