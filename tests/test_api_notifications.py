import pytest
from starlette.websockets import WebSocketDisconnect

from healthaccess.core import security


API = "/api/v1/notifications"


def book(client, doctor, patient_headers):
    client.post(
        "/api/v1/appointments/",
        json={"doctor_id": doctor.id, "start_time": "2025-06-02T10:00:00Z", "end_time": "2025-06-02T10:30:00Z"},
        headers=patient_headers,
    )


def test_mark_read(client, doctor, patient_headers, doctor_headers):
    book(client, doctor, patient_headers)
    notes = client.get(f"{API}/", headers=doctor_headers).json()
    assert client.get(f"{API}/unread-count", headers=doctor_headers).json() == {"unread": 1}

    response = client.post(f"{API}/{notes[0]['id']}/read", headers=doctor_headers)
    assert response.json()["read"] is True
    assert client.get(f"{API}/", params={"unread_only": True}, headers=doctor_headers).json() == []


def test_mark_all_read(client, doctor, patient_headers, doctor_headers):
    book(client, doctor, patient_headers)
    book(client, doctor, patient_headers)
    assert client.post(f"{API}/read-all", headers=doctor_headers).json() == {"updated": 2}
    assert client.get(f"{API}/unread-count", headers=doctor_headers).json() == {"unread": 0}


def test_cannot_read_someone_elses_notification(client, doctor, patient_headers, doctor_headers):
    book(client, doctor, patient_headers)
    note_id = client.get(f"{API}/", headers=doctor_headers).json()[0]["id"]
    assert client.post(f"{API}/{note_id}/read", headers=patient_headers).status_code == 404


def test_socket_receives_pushed_events(client, doctor, patient_headers):
    token = security.create_access_token(doctor.id, role=doctor.role)
    with client.websocket_connect(f"{API}/ws?token={token}") as socket:
        book(client, doctor, patient_headers)
        message = socket.receive_json()
    assert message["event"] == "appointment_booked"


def test_socket_rejects_bad_token(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"{API}/ws?token=not-a-token") as socket:
            socket.receive_json()
