import pytest

from healthaccess.models.medicine import StockMovement
from tests.conftest import auth_headers

API = "/api/v1/pharmacist/medicines"


@pytest.fixture
def pharmacist_headers(pharmacist):
    return auth_headers(pharmacist)


def add_medicine(client, headers, **overrides):
    body = {
        "name": "Amoxicillin 500mg",
        "category": "Antibiotic",
        "dosage": "500mg",
        "frequency": "3 times daily",
        "price": 4.5,
        "stock": 40,
        "description": "Broad-spectrum antibiotic",
    }
    body.update(overrides)
    response = client.post(API, json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_add_and_list_medicines(client, pharmacist_headers):
    created = add_medicine(client, pharmacist_headers)
    assert created["stock_status"] == "available"
    assert created["low_stock"] is False
    assert created["reorder_level"] == 10

    data = client.get(API, headers=pharmacist_headers).json()
    assert data["total"] == 1
    assert [m["name"] for m in data["medicines"]] == ["Amoxicillin 500mg"]


def test_service_payload_field_names(client, pharmacist_headers):
    response = client.post(
        API,
        json={"medicineName": "Paracetamol", "genericName": "Acetaminophen", "stock": 3, "reorderLevel": 5},
        headers=pharmacist_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["generic_name"] == "Acetaminophen"
    assert data["stock_status"] == "low-stock"
    assert data["low_stock"] is True


def test_duplicate_name_rejected(client, pharmacist_headers):
    add_medicine(client, pharmacist_headers)
    response = client.post(API, json={"name": "amoxicillin 500MG"}, headers=pharmacist_headers)
    assert response.status_code == 400


def test_blank_name_rejected(client, pharmacist_headers):
    assert client.post(API, json={"name": "   "}, headers=pharmacist_headers).status_code == 422


def test_filter_by_stock_status_and_category(client, pharmacist_headers):
    add_medicine(client, pharmacist_headers)
    add_medicine(client, pharmacist_headers, name="Ibuprofen", category="Painkiller", stock=4)
    add_medicine(client, pharmacist_headers, name="Zinc", category="Supplement", stock=0)

    low = client.get(API, params={"status": "low-stock"}, headers=pharmacist_headers).json()
    assert [m["name"] for m in low["medicines"]] == ["Ibuprofen"]

    out = client.get(API, params={"status": "out-of-stock"}, headers=pharmacist_headers).json()
    assert [m["name"] for m in out["medicines"]] == ["Zinc"]

    painkillers = client.get(API, params={"category": "Painkiller"}, headers=pharmacist_headers).json()
    assert painkillers["total"] == 1


def test_low_stock_report(client, pharmacist_headers):
    add_medicine(client, pharmacist_headers)
    add_medicine(client, pharmacist_headers, name="Ibuprofen", stock=4)
    add_medicine(client, pharmacist_headers, name="Zinc", stock=0)

    data = client.get(f"{API}/low-stock", headers=pharmacist_headers).json()
    assert [m["name"] for m in data["medicines"]] == ["Zinc", "Ibuprofen"]
    assert all(m["low_stock"] for m in data["medicines"])


def test_search(client, pharmacist_headers):
    add_medicine(client, pharmacist_headers)
    add_medicine(client, pharmacist_headers, name="Panadol", generic_name="Paracetamol")

    data = client.get(f"{API}/search", params={"query": "paracet"}, headers=pharmacist_headers).json()
    assert [m["name"] for m in data["medicines"]] == ["Panadol"]


def test_stock_movements(client, db_session, pharmacist, pharmacist_headers):
    medicine = add_medicine(client, pharmacist_headers, stock=12)

    response = client.post(
        f"{API}/{medicine['id']}/stock",
        json={"quantity": 5, "type": "dispensed", "notes": "Rx 1042"},
        headers=pharmacist_headers,
    )
    assert response.status_code == 200
    assert response.json()["stock"] == 7
    assert response.json()["stock_status"] == "low-stock"

    response = client.post(
        f"{API}/{medicine['id']}/stock", json={"quantity": 8, "type": "dispensed"}, headers=pharmacist_headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Insufficient stock: only 7 available"

    client.post(f"{API}/{medicine['id']}/stock", json={"quantity": 20, "type": "added"}, headers=pharmacist_headers)

    history = client.get(f"{API}/{medicine['id']}/stock", headers=pharmacist_headers).json()
    assert sorted(m["stock_after"] for m in history) == [7, 27]
    assert {m["recorded_by_id"] for m in history} == {pharmacist.id}
    assert client.get(f"{API}/{medicine['id']}", headers=pharmacist_headers).json()["stock"] == 27


def test_update_medicine(client, pharmacist_headers):
    medicine = add_medicine(client, pharmacist_headers)
    add_medicine(client, pharmacist_headers, name="Ibuprofen")

    response = client.put(
        f"{API}/{medicine['id']}", json={"price": 5.25, "reorderLevel": 50}, headers=pharmacist_headers
    )
    assert response.status_code == 200
    assert response.json()["price"] == 5.25
    assert response.json()["stock_status"] == "low-stock"

    clash = client.put(f"{API}/{medicine['id']}", json={"name": "Ibuprofen"}, headers=pharmacist_headers)
    assert clash.status_code == 400

    discontinued = client.put(
        f"{API}/{medicine['id']}", json={"is_discontinued": True}, headers=pharmacist_headers
    ).json()
    assert discontinued["stock_status"] == "discontinued"
    assert discontinued["low_stock"] is False


def test_delete_medicine_removes_history(client, db_session, pharmacist_headers):
    medicine = add_medicine(client, pharmacist_headers)
    client.post(f"{API}/{medicine['id']}/stock", json={"quantity": 1, "type": "expired"}, headers=pharmacist_headers)

    assert client.delete(f"{API}/{medicine['id']}", headers=pharmacist_headers).status_code == 204
    assert client.get(f"{API}/{medicine['id']}", headers=pharmacist_headers).status_code == 404
    db_session.expire_all()
    assert db_session.query(StockMovement).count() == 0


def test_inventory_is_pharmacist_only(client, pharmacist_headers, doctor_headers, patient_headers):
    assert client.get(API, headers=doctor_headers).status_code == 403
    assert client.post(API, json={"name": "Aspirin"}, headers=patient_headers).status_code == 403
    assert client.get(API).status_code == 401
