from .user import (
    User,
    UserCreate,
    Participant,
    DoctorAvailability,
    DoctorProfile,
    DoctorStatusUpdate,
    Token,
    TokenPayload,
    SessionContext,
)
from .appointment import Appointment, AppointmentCreate, AppointmentEligibility, AppointmentWithDetails
from .consultation import (
    Consultation,
    ConsultationCreate,
    ConsultationUpdate,
    ConsultationStatusUpdate,
    ConsultationWithParticipants,
    PrescribableConsultations,
    ConsultationDiagnostic,
)
from .prescription import (
    Prescription,
    PrescriptionCreate,
    PrescriptionStatus,
    PrescriptionStatusUpdate,
    PrescriptionWithParticipants,
)
from .vitals import VitalRecord, VitalRecordCreate, VitalRecordUpdate, AlertLevel
from .notification import Notification
from .medicine import (
    MedicineCreate,
    MedicineItem,
    MedicineList,
    MedicineUpdate,
    StockMovement,
    StockMovementCreate,
    StockMovementType,
    StockStatus,
)
