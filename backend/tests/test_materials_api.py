from __future__ import annotations

import json
from datetime import datetime, timedelta

from reclaim_api.models.material import Material


def desk_payload(**overrides):
    payload = {
        "name": "Desk A",
        "category": "Furniture",
        "materialType": "DESK",
        "condition": "Reusable",
        "color": "Oak",
        "width": 160,
        "height": 75,
        "depth": 80,
        "deskType": "STRAIGHT_DESK",
        "heightAdjustable": False,
    }
    payload.update(overrides)
    return payload


def test_create_and_fetch_material(client):
    response = client.post("/api/materials", json=desk_payload())

    assert response.status_code == 201
    created = response.json()
    assert created["id"] > 0
    assert created["materialType"] == "DESK"
    assert created["deskType"] == "STRAIGHT_DESK"
    assert created["pictures"] == []

    fetched = client.get(f"/api/materials/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Desk A"


def test_create_accepts_class_style_material_type(client):
    response = client.post(
        "/api/materials",
        json={
            "name": "Drawers",
            "category": "Storage",
            "materialType": "DrawerUnit",
            "condition": "Repairable",
            "color": "Black",
            "width": 60,
            "height": 75,
            "depth": 45,
            "hasWheels": True,
        },
    )

    assert response.status_code == 201
    assert response.json()["materialType"] == "DRAWER_UNIT"


def test_create_rejects_missing_required_fields(client):
    response = client.post("/api/materials", json=desk_payload(name="", deskType=None))

    assert response.status_code == 422
    assert response.json()["detail"]["name"] == "Name is required"
    assert response.json()["detail"]["deskType"] == "Desk type is required"


def test_adjustable_desk_requires_maximum_height(client):
    response = client.post("/api/materials", json=desk_payload(heightAdjustable=True))

    assert response.status_code == 422
    assert response.json()["detail"] == {"maximumHeight": "Maximum height is required"}


def test_create_drops_attributes_of_other_types(client):
    response = client.post("/api/materials", json=desk_payload(swingDirection="LEFT", hasWheels=True))

    assert response.status_code == 201
    assert response.json()["swingDirection"] is None
    assert response.json()["hasWheels"] is None


def test_create_multipart_with_pictures(client):
    response = client.post(
        "/api/materials",
        data={"material": json.dumps(desk_payload())},
        files=[
            ("pictures", ("front.jpg", b"front-bytes", "image/jpeg")),
            ("pictures", ("side.jpg", b"side-bytes", "image/jpeg")),
        ],
    )

    assert response.status_code == 201
    pictures = response.json()["pictures"]
    assert [picture["fileName"] for picture in pictures] == ["front.jpg", "side.jpg"]
    assert [picture["isPrimary"] for picture in pictures] == [True, False]

    image = client.get(f"/api/materials/pictures/{pictures[1]['id']}")
    assert image.status_code == 200
    assert image.content == b"side-bytes"
    assert image.headers["content-type"] == "image/jpeg"


def test_multipart_without_material_part_is_rejected(client):
    response = client.post(
        "/api/materials",
        data={"other": "x"},
        files=[("pictures", ("front.jpg", b"front-bytes", "image/jpeg"))],
    )

    assert response.status_code == 400


def test_get_missing_material_returns_404(client):
    response = client.get("/api/materials/999")

    assert response.status_code == 404
    assert response.json()["detail"] == "Material not found"


def test_list_materials_filters_and_envelope(client):
    client.post("/api/materials", json=desk_payload(name="Desk A"))
    client.post("/api/materials", json=desk_payload(name="Desk B", condition="Damaged"))
    client.post(
        "/api/materials",
        json={
            "name": "Oak Door",
            "category": "Doors",
            "materialType": "DOOR",
            "condition": "Repairable",
            "color": "Oak",
            "width": 90,
            "height": 210,
            "depth": 4,
            "swingDirection": "LEFT",
        },
    )

    everything = client.get("/api/materials").json()
    assert everything["totalElements"] == 3
    assert everything["totalPages"] == 1
    assert len(everything["content"]) == 3

    damaged = client.get("/api/materials", params={"condition": "Damaged"}).json()
    assert [item["name"] for item in damaged["content"]] == ["Desk B"]

    doors = client.get("/api/materials", params={"type": "Door"}).json()
    assert [item["name"] for item in doors["content"]] == ["Oak Door"]

    searched = client.get("/api/materials", params={"query": "desk"}).json()
    assert {item["name"] for item in searched["content"]} == {"Desk A", "Desk B"}

    paged = client.get("/api/materials", params={"page": 1, "size": 2}).json()
    assert paged["totalPages"] == 2
    assert paged["number"] == 1
    assert len(paged["content"]) == 1


def test_update_is_partial_and_validated(client):
    created = client.post("/api/materials", json=desk_payload()).json()

    response = client.put(f"/api/materials/{created['id']}", json={"condition": "Repairable", "notes": "Scratched"})

    assert response.status_code == 200
    updated = response.json()
    assert updated["condition"] == "Repairable"
    assert updated["notes"] == "Scratched"
    assert updated["deskType"] == "STRAIGHT_DESK"

    invalid = client.put(f"/api/materials/{created['id']}", json={"condition": "Broken"})
    assert invalid.status_code == 422
    assert invalid.json()["detail"]["condition"].startswith("Condition must be one of")
    assert client.get(f"/api/materials/{created['id']}").json()["condition"] == "Repairable"


def test_update_missing_material_returns_404(client):
    response = client.put("/api/materials/42", json={"condition": "Damaged"})

    assert response.status_code == 404


def test_delete_material(client):
    created = client.post("/api/materials", json=desk_payload()).json()

    response = client.delete(f"/api/materials/{created['id']}")

    assert response.status_code == 204
    assert client.get(f"/api/materials/{created['id']}").status_code == 404
    assert client.delete(f"/api/materials/{created['id']}").status_code == 404


def test_stats_counts(client, db_session):
    client.post("/api/materials", json=desk_payload(name="Desk A"))
    client.post("/api/materials", json=desk_payload(name="Desk B", condition="Damaged"))
    old = db_session.query(Material).filter_by(name="Desk B").one()
    old.date_added = datetime.utcnow() - timedelta(days=90)
    db_session.commit()

    stats = client.get("/api/materials/stats").json()

    assert stats["totalCount"] == 2
    assert stats["conditionCounts"] == {"Reusable": 1, "Damaged": 1}
    assert stats["typeCounts"] == {"DESK": 2}
    assert stats["categoryCounts"] == {"Furniture": 2}
    assert stats["recentAdditionsCount"] == 1


def test_picture_primary_and_removal(client):
    created = client.post("/api/materials", json=desk_payload()).json()
    material_id = created["id"]

    added = client.post(
        f"/api/materials/{material_id}/pictures",
        files=[
            ("pictures", ("one.png", b"1", "image/png")),
            ("pictures", ("two.png", b"2", "image/png")),
        ],
    )
    assert added.status_code == 200
    first, second = added.json()["pictures"]
    assert first["isPrimary"] is True

    promoted = client.put(f"/api/materials/{material_id}/pictures/{second['id']}/primary")
    assert promoted.status_code == 200
    assert [picture["isPrimary"] for picture in promoted.json()["pictures"]] == [False, True]

    removed = client.delete(f"/api/materials/{material_id}/pictures/{second['id']}")
    assert removed.status_code == 200
    remaining = removed.json()["pictures"]
    assert len(remaining) == 1
    assert remaining[0]["isPrimary"] is True

    missing = client.delete(f"/api/materials/{material_id}/pictures/{second['id']}")
    assert missing.status_code == 404
