from __future__ import annotations


def _create(client, name="Desk A"):
    return client.post(
        "/api/materials",
        json={
            "name": name,
            "category": "Furniture",
            "materialType": "DESK",
            "condition": "Reusable",
            "color": "Oak",
            "width": 160,
            "height": 75,
            "depth": 80,
            "deskType": "CORNER_DESK",
        },
    ).json()


def test_audit_trail_records_lifecycle(client):
    material = _create(client)
    client.put(f"/api/materials/{material['id']}", json={"color": "Walnut"})
    client.delete(f"/api/materials/{material['id']}")

    entries = client.get("/api/audit-trail").json()

    assert [entry["action"] for entry in entries] == ["DELETED", "UPDATED", "CREATED"]
    assert all(entry["materialName"] == "Desk A" for entry in entries)
    assert entries[1]["details"] == "Updated color"
    assert entries[2]["userName"] == "system"


def test_material_activity_only_lists_that_material(client):
    first = _create(client, "Desk A")
    _create(client, "Desk B")

    entries = client.get(f"/api/audit-trail/material/{first['id']}").json()

    assert len(entries) == 1
    assert entries[0]["materialId"] == first["id"]


def test_audit_entries_carry_signed_in_user(client, auth_enabled, auth_headers, admin_user):
    response = client.post(
        "/api/materials",
        headers=auth_headers,
        json={
            "name": "Window",
            "category": "Windows",
            "materialType": "WINDOW",
            "condition": "Reusable",
            "color": "White",
            "width": 120,
            "height": 150,
            "depth": 10,
            "openingType": "TILT",
        },
    )
    assert response.status_code == 201

    entries = client.get(f"/api/audit-trail/user/{admin_user.id}", headers=auth_headers).json()

    assert len(entries) == 1
    assert entries[0]["userName"] == "Admin User"
