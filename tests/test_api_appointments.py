from datetime import datetime, timedelta, timezone

from healthaccess.models.appointment import Appointment
from tests.conftest import auth_headers, make_appointment

API = "/api/v1/appointments"
START = datetime(2025, 6, 2, 10, 0, tzinfo=timezone.utc)


def booking(doctor, **overrides):
    body = {
        "doctor_id": doctor.id,
        "start_time": "2025-06-02T10:00:00Z",
        "end_time": "2025-06-02T10:30:00Z",
        "reason": "Persistent cough",
    }
    body.update(overrides)
    return body


def test_patient_books_pending_appointment(client, doctor, patient_headers):
    response = client.post(f"{API}/", json=booking(doctor), headers=patient_headers)
    assert response.status_code == 201, response.text
    data = response.json()
    assert data["status"] == "pending"
    assert data["canonical_status"] == "PENDING"
    assert data["date"] == "2025-06-02"
    assert data["reason_for_visit"] == "Persistent cough"
    assert data["doctor"]["full_name"] == "Ayesha Khan"
    # Inside the window but not approved yet
    assert data["eligibility"]["eligible"] is True
    assert data["eligibility"]["can_join"] is False


def test_booking_notifies_the_doctor(client, doctor, patient_headers, doctor_headers):
    client.post(f"{API}/", json=booking(doctor), headers=patient_headers)
    notes = client.get("/api/v1/notifications/", headers=doctor_headers).json()
    assert [n["event"] for n in notes] == ["appointment_booked"]
    assert "Sara Ahmed" in notes[0]["message"]


def test_end_must_follow_start(client, doctor, patient_headers):
    response = client.post(
        f"{API}/", json=booking(doctor, end_time="2025-06-02T09:30:00Z"), headers=patient_headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "End time must be after start time"


def test_date_must_match_start_time(client, doctor, patient_headers):
    response = client.post(f"{API}/", json=booking(doctor, date="2025-06-03"), headers=patient_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Appointment date does not match start time"


def test_cannot_book_in_the_past(client, doctor, patient_headers):
    response = client.post(
        f"{API}/",
        json=booking(doctor, start_time="2025-06-02T08:00:00Z", end_time="2025-06-02T08:30:00Z"),
        headers=patient_headers,
    )
    assert response.status_code == 400


def test_only_patients_book(client, doctor, other_doctor, doctor_headers):
    response = client.post(f"{API}/", json=booking(other_doctor), headers=doctor_headers)
    assert response.status_code == 403


def test_unknown_doctor(client, patient, patient_headers):
    response = client.post(f"{API}/", json=booking(patient), headers=patient_headers)
    assert response.status_code == 404


def test_requires_authentication(client):
    assert client.get(f"{API}/").status_code == 401


def test_doctor_approves_and_can_join(client, doctor, patient_headers, doctor_headers):
    appointment_id = client.post(f"{API}/", json=booking(doctor), headers=patient_headers).json()["id"]

    response = client.post(f"{API}/{appointment_id}/approve", headers=doctor_headers)
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["status"] == "approved"
    assert data["eligibility"]["can_join"] is True
    assert data["eligibility"]["label"] == "ready"
    assert data["eligibility"]["state"] == "open"


def test_countdown_before_window(client, clock, db_session, patient, doctor, patient_headers):
    appointment = make_appointment(db_session, patient, doctor, START)
    clock.now = datetime(2025, 6, 2, 9, 40, tzinfo=timezone.utc)

    data = client.get(f"{API}/{appointment.id}/eligibility", headers=patient_headers).json()
    assert data["eligible"] is False
    assert data["state"] == "upcoming"
    assert data["label"] == "Starts in 20m"
    assert data["seconds_until_open"] == 15 * 60


def test_window_closed_after_end(client, clock, db_session, patient, doctor, patient_headers):
    appointment = make_appointment(db_session, patient, doctor, START)
    clock.now = START + timedelta(minutes=31)

    data = client.get(f"{API}/{appointment.id}/eligibility", headers=patient_headers).json()
    assert data["can_join"] is False
    assert data["label"] == "Ended"


def test_filter_by_canonical_status_covers_legacy_values(client, db_session, patient, doctor, doctor_headers):
    accepted = make_appointment(db_session, patient, doctor, START, status="accepted")
    make_appointment(db_session, patient, doctor, START + timedelta(hours=1), status="scheduled")
    make_appointment(db_session, patient, doctor, START + timedelta(hours=2), status="cancelled")

    approved = client.get(f"{API}/", params={"status": "APPROVED"}, headers=doctor_headers).json()
    assert [a["id"] for a in approved] == [accepted.id]
    assert approved[0]["status"] == "accepted"

    pending = client.get(f"{API}/", params={"status": "PENDING"}, headers=doctor_headers).json()
    assert [a["canonical_status"] for a in pending] == ["PENDING"]


def test_unknown_status_is_flagged_not_joinable(client, db_session, patient, doctor, patient_headers):
    appointment = make_appointment(db_session, patient, doctor, START, status="on-hold")
    data = client.get(f"{API}/{appointment.id}", headers=patient_headers).json()
    assert data["canonical_status"] == "UNKNOWN"
    assert data["status_recognized"] is False
    assert data["eligibility"]["can_join"] is False


def test_upcoming_view_hides_finished(client, db_session, patient, doctor, patient_headers):
    make_appointment(db_session, patient, doctor, START - timedelta(days=1))
    upcoming = make_appointment(db_session, patient, doctor, START)

    data = client.get(f"{API}/", params={"view": "upcoming"}, headers=patient_headers).json()
    assert [a["id"] for a in data] == [upcoming.id]


def test_completed_appointment_cannot_be_approved(client, db_session, patient, doctor, doctor_headers):
    appointment = make_appointment(db_session, patient, doctor, START, status="completed")
    response = client.post(f"{API}/{appointment.id}/approve", headers=doctor_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot move appointment from COMPLETED to APPROVED"


def test_other_doctor_cannot_approve(client, db_session, patient, doctor, other_doctor):
    appointment = make_appointment(db_session, patient, doctor, START, status="pending")
    response = client.post(f"{API}/{appointment.id}/approve", headers=auth_headers(other_doctor))
    assert response.status_code == 404


def test_appointments_are_private(client, db_session, patient, other_patient, doctor):
    appointment = make_appointment(db_session, patient, doctor, START)
    response = client.get(f"{API}/{appointment.id}", headers=auth_headers(other_patient))
    assert response.status_code == 404


def test_patient_cancels(client, db_session, patient, doctor, patient_headers):
    appointment = make_appointment(db_session, patient, doctor, START, status="pending")
    response = client.post(f"{API}/{appointment.id}/cancel", headers=patient_headers)
    assert response.status_code == 200
    assert response.json()["canonical_status"] == "REJECTED"

    db_session.expire_all()
    assert db_session.get(Appointment, appointment.id).status == "rejected"


def test_status_filter_applies_before_paging(client, db_session, patient, doctor, doctor_headers):
    make_appointment(db_session, patient, doctor, START + timedelta(hours=1), status="pending")
    approved = make_appointment(db_session, patient, doctor, START, status="approved")

    data = client.get(f"{API}/", params={"status": "APPROVED", "limit": 1}, headers=doctor_headers).json()
    assert [a["id"] for a in data] == [approved.id]

    second_page = client.get(
        f"{API}/", params={"status": "APPROVED", "skip": 1, "limit": 1}, headers=doctor_headers
    ).json()
    assert second_page == []


def test_view_filter_applies_before_paging(client, db_session, patient, doctor, patient_headers):
    upcoming = make_appointment(db_session, patient, doctor, START)
    make_appointment(db_session, patient, doctor, START - timedelta(days=1))
    make_appointment(db_session, patient, doctor, START - timedelta(days=2))

    data = client.get(f"{API}/", params={"view": "upcoming", "limit": 1}, headers=patient_headers).json()
    assert [a["id"] for a in data] == [upcoming.id]


def test_status_filter_accepts_stored_spellings(client, db_session, patient, doctor, doctor_headers):
    accepted = make_appointment(db_session, patient, doctor, START, status=" Accepted ")
    make_appointment(db_session, patient, doctor, START + timedelta(hours=1), status="pending")

    for spelling in ("approved", "accepted", " APPROVED "):
        response = client.get(f"{API}/", params={"status": spelling}, headers=doctor_headers)
        assert response.status_code == 200
        assert [a["id"] for a in response.json()] == [accepted.id]


def test_status_filter_unknown_selects_unrecognized_rows(client, db_session, patient, doctor, doctor_headers):
    odd = make_appointment(db_session, patient, doctor, START, status="on-hold")
    make_appointment(db_session, patient, doctor, START + timedelta(hours=1), status="approved")

    data = client.get(f"{API}/", params={"status": "UNKNOWN"}, headers=doctor_headers).json()
    assert [a["id"] for a in data] == [odd.id]
