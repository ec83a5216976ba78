from .user import User, UserRole
from .appointment import Appointment
from .consultation import Consultation
from .prescription import Prescription
from .vitals import VitalRecord
from .notification import Notification
from .medicine import Medicine, StockMovement
