from .user import user
from .appointment import appointment
from .consultation import consultation
from .prescription import prescription
from .vitals import vitals
from .notification import notification
from .medicine import medicine

__all__ = ["user", "appointment", "consultation", "prescription", "vitals", "notification", "medicine"]
