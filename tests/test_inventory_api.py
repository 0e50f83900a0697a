from datetime import datetime, timedelta

import pytest

from .conftest import auth_header

ADMIN = auth_header("admin", user_id=1, username="boss")
USER = auth_header("user", user_id=2, username="worker")
GUEST = auth_header("guest", user_id=3, username="visitor")

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 120


def add(client, rack_id="R-001", display_name="Cotton Blend", quantity=25.5, **fields):
    response = client.post("/", headers=ADMIN, json={
        "rack_id": rack_id, "display_name": display_name, "quantity": quantity, **fields,
    })
    assert response.status_code == 201, response.text
    return response.json()


def test_health(inventory_api):
    assert inventory_api.get("/healthz").json() == {"status": "healthy"}


def test_create_and_get(inventory_api):
    created = add(inventory_api, category="Fabric")
    assert created["unit"] == "meters"
    assert created["category"] == "Fabric"

    fetched = inventory_api.get("/R-001", headers=GUEST).json()
    assert fetched["display_name"] == "Cotton Blend"
    assert fetched["quantity"] == 25.5


def test_list_preserves_insertion_order(inventory_api):
    for rack in ("Z-9", "A-1", "M-5"):
        add(inventory_api, rack_id=rack, display_name=f"Fabric {rack}")
    racks = [item["rack_id"] for item in inventory_api.get("/", headers=GUEST).json()]
    assert racks == ["Z-9", "A-1", "M-5"]


def test_duplicate_rack_id_is_rejected(inventory_api):
    add(inventory_api)
    response = inventory_api.post("/", headers=ADMIN, json={
        "rack_id": "R-001", "display_name": "Other", "quantity": 1,
    })
    assert response.status_code == 400


@pytest.mark.parametrize("quantity", [0, -5])
def test_new_stock_needs_positive_quantity(inventory_api, quantity):
    response = inventory_api.post("/", headers=ADMIN, json={
        "rack_id": "R-001", "display_name": "Cotton", "quantity": quantity,
    })
    assert response.status_code == 422


def test_purchase_date_cannot_be_in_the_future(inventory_api):
    tomorrow = (datetime.utcnow() + timedelta(days=2)).isoformat()
    response = inventory_api.post("/", headers=ADMIN, json={
        "rack_id": "R-001", "display_name": "Cotton", "quantity": 1, "purchase_date": tomorrow,
    })
    assert response.status_code == 422


def test_only_admins_create_and_delete(inventory_api):
    payload = {"rack_id": "R-001", "display_name": "Cotton", "quantity": 1}
    assert inventory_api.post("/", headers=USER, json=payload).status_code == 403
    add(inventory_api)
    assert inventory_api.delete("/R-001", headers=USER).status_code == 403
    assert inventory_api.delete("/R-001", headers=ADMIN).status_code == 204
    assert inventory_api.get("/R-001", headers=ADMIN).status_code == 404


def test_user_may_change_quantity_but_not_details(inventory_api):
    add(inventory_api)
    response = inventory_api.put("/R-001", headers=USER, json={"quantity": 20})
    assert response.status_code == 200
    assert response.json()["quantity"] == 20

    assert inventory_api.put("/R-001", headers=USER, json={"display_name": "X"}).status_code == 403
    assert inventory_api.put("/R-001", headers=GUEST, json={"quantity": 1}).status_code == 403


def test_quantity_can_never_be_negative(inventory_api):
    add(inventory_api)
    assert inventory_api.put("/R-001", headers=ADMIN, json={"quantity": -1}).status_code == 422


def test_rename_moves_record_to_new_key(inventory_api):
    add(inventory_api)
    response = inventory_api.put("/R-001", headers=ADMIN, json={"rack_id": "R-100", "quantity": 12})
    assert response.status_code == 200
    assert response.json()["rack_id"] == "R-100"
    assert inventory_api.get("/R-001", headers=ADMIN).status_code == 404
    assert inventory_api.get("/R-100", headers=ADMIN).json()["quantity"] == 12


def test_rename_onto_existing_rack_is_rejected(inventory_api):
    add(inventory_api, rack_id="R-001")
    add(inventory_api, rack_id="R-002", display_name="Silk")
    response = inventory_api.put("/R-001", headers=ADMIN, json={"rack_id": "R-002"})
    assert response.status_code == 400
    assert inventory_api.get("/R-001", headers=ADMIN).status_code == 200


def test_update_missing_record(inventory_api):
    assert inventory_api.put("/NOPE", headers=ADMIN, json={"quantity": 1}).status_code == 404


def test_search(inventory_api):
    add(inventory_api, rack_id="R-001", display_name="Cotton Blend", category="Fabric")
    add(inventory_api, rack_id="T-001", display_name="Polyester", category="Thread")
    found = inventory_api.get("/search", params={"term": "thread"}, headers=GUEST).json()
    assert [item["rack_id"] for item in found] == ["T-001"]
    everything = inventory_api.get("/search", params={"term": ""}, headers=GUEST).json()
    assert len(everything) == 2


def test_analytics(inventory_api):
    add(inventory_api, rack_id="A", quantity=50)
    add(inventory_api, rack_id="B", quantity=3)
    add(inventory_api, rack_id="C", quantity=1)
    inventory_api.put("/C", headers=ADMIN, json={"quantity": 0})

    data = inventory_api.get("/analytics", headers=GUEST).json()
    assert data["total_items"] == 3
    assert data["out_of_stock"] == 1
    assert data["low_stock"] == 1
    assert data["low_stock_items"][0]["rack_id"] == "B"


def test_audit_log_records_every_change(inventory_api):
    add(inventory_api)
    inventory_api.put("/R-001", headers=USER, json={"quantity": 20})
    inventory_api.put("/R-001", headers=ADMIN, json={"rack_id": "R-002"})
    inventory_api.put("/R-002", headers=ADMIN, json={"display_name": "Cotton"})
    inventory_api.delete("/R-002", headers=ADMIN)

    assert inventory_api.get("/audit", headers=USER).status_code == 403
    log = inventory_api.get("/audit", headers=ADMIN).json()
    assert [entry["action"] for entry in log] == [
        "deleted", "updated", "renamed", "quantity_adjusted", "created",
    ]
    assert log[3]["user_id"] == 2
    assert log[3]["quantity"] == 20


def test_export_csv(inventory_api):
    add(inventory_api)
    response = inventory_api.get("/export/csv", headers=GUEST)
    assert response.status_code == 200
    lines = response.text.strip().splitlines()
    assert lines[0] == "rack_id,display_name,category,quantity,unit,purchase_date"
    assert lines[1].startswith("R-001,Cotton Blend,,25.5,meters")


def test_photo_upload_and_serve(inventory_api):
    response = inventory_api.post(
        "/photos", headers=USER, files={"file": ("fabric.png", PNG_BYTES, "image/png")}
    )
    assert response.status_code == 201
    ref = response.json()
    assert ref["url"] == f"/photos/{ref['id']}"

    served = inventory_api.get(ref["url"])
    assert served.status_code == 200
    assert served.content == PNG_BYTES
    assert served.headers["content-type"] == "image/png"

    created = add(inventory_api, item_photo=ref["id"])
    assert created["item_photo"] == ref["id"]


def test_photo_upload_rejects_non_images(inventory_api):
    response = inventory_api.post(
        "/photos", headers=USER, files={"file": ("notes.txt", b"hello", "text/plain")}
    )
    assert response.status_code == 400


def test_photo_upload_rejects_large_files(inventory_api, monkeypatch):
    from services.inventory.app import main

    monkeypatch.setattr(main, "MAX_PHOTO_BYTES", 10)
    response = inventory_api.post(
        "/photos", headers=USER, files={"file": ("fabric.png", PNG_BYTES, "image/png")}
    )
    assert response.status_code == 400


def test_missing_photo(inventory_api):
    assert inventory_api.get("/photos/does-not-exist").status_code == 404


def test_token_without_role_is_rejected(inventory_api):
    from jose import jwt
    from .conftest import SECRET_KEY

    token = jwt.encode({"sub": "1", "username": "x"}, SECRET_KEY, algorithm="HS256")
    response = inventory_api.get("/", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_list_is_not_capped(inventory_api):
    from services.inventory.app import models
    from services.inventory.app.database import SessionLocal

    db = SessionLocal()
    db.add_all([
        models.InventoryItem(rack_id=f"R-{n:05d}", display_name=f"Fabric {n}", quantity=1)
        for n in range(1001)
    ])
    db.commit()
    db.close()

    racks = [item["rack_id"] for item in inventory_api.get("/", headers=GUEST).json()]
    assert len(racks) == 1001
    assert racks[-1] == "R-01000"
    assert inventory_api.get("/analytics", headers=GUEST).json()["total_items"] == 1001
    page = inventory_api.get("/", params={"skip": 1000, "limit": 5}, headers=GUEST).json()
    assert [item["rack_id"] for item in page] == ["R-01000"]


@pytest.mark.parametrize("field", ["quantity", "display_name", "unit", "rack_id"])
def test_null_for_required_field_is_rejected(inventory_api, field):
    add(inventory_api)
    headers = USER if field == "quantity" else ADMIN
    response = inventory_api.put("/R-001", headers=headers, json={field: None})
    assert response.status_code == 422
    assert inventory_api.get("/R-001", headers=GUEST).json()["quantity"] == 25.5
