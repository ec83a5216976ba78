"""
HealthAccess Backend Application Package

Appointments, consultations, prescriptions and vitals for the multi-role
healthcare platform (admin, doctor, patient, local healthcare worker,
pharmacist).
"""
