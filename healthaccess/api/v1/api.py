from fastapi import APIRouter

from healthaccess.api.v1.endpoints import auth
from healthaccess.api.v1.endpoints import doctors
from healthaccess.api.v1.endpoints import appointments
from healthaccess.api.v1.endpoints import consultations
from healthaccess.api.v1.endpoints import prescriptions
from healthaccess.api.v1.endpoints import vitals
from healthaccess.api.v1.endpoints import notifications
from healthaccess.api.v1.endpoints import pharmacist

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["doctors"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
api_router.include_router(consultations.router, prefix="/consultations", tags=["consultations"])
api_router.include_router(prescriptions.router, prefix="/prescriptions", tags=["prescriptions"])
api_router.include_router(vitals.router, prefix="/vitals", tags=["vitals"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(pharmacist.router, prefix="/pharmacist", tags=["pharmacist"])
