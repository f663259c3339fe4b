"""Integration tests for faction-scoped operative records."""
from pathlib import Path

import pytest
from httpx import AsyncClient

from dayzone.models import Role


def payload(callsign: str, face_id: str, **extra) -> dict:
    return {"callsign": callsign, "fullName": f"{callsign} Stalkerovich", "faceId": face_id, **extra}


@pytest.mark.asyncio
async def test_member_creates_in_own_faction(client: AsyncClient, make_user) -> None:
    _, headers = await make_user("wolf", Role.DUTY)

    response = await client.post("/api/operatives/", json=payload("Wolf", "ST100"), headers=headers)
    assert response.status_code == 201
    data = response.json()
    assert data["role"] == "Duty"
    assert data["faceId"] == "ST100"
    assert data["photo"] is None

    explicit = await client.post(
        "/api/operatives/", json=payload("Bear", "ST101", role="Duty"), headers=headers
    )
    assert explicit.status_code == 201


@pytest.mark.asyncio
async def test_member_cannot_create_for_other_faction(client: AsyncClient, make_user) -> None:
    _, headers = await make_user("wolf", Role.DUTY)
    response = await client.post(
        "/api/operatives/", json=payload("Fox", "ST100", role="Freedom"), headers=headers
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_visibility_is_limited_to_own_faction(client: AsyncClient, make_user, admin_headers) -> None:
    _, duty = await make_user("wolf", Role.DUTY)
    _, freedom = await make_user("fox", Role.FREEDOM)
    wolf = (await client.post("/api/operatives/", json=payload("Wolf", "ST100"), headers=duty)).json()
    await client.post("/api/operatives/", json=payload("Fox", "ST200"), headers=freedom)

    own = await client.get("/api/operatives/", headers=duty)
    assert own.status_code == 200
    assert own.json()["role"] == "Duty"
    assert [item["callsign"] for item in own.json()["items"]] == ["Wolf"]

    assert (await client.get("/api/operatives/role/Duty", headers=freedom)).status_code == 403
    assert (await client.get("/api/operatives/?role=Duty", headers=freedom)).status_code == 403
    assert (await client.get(f"/api/operatives/{wolf['id']}", headers=freedom)).status_code == 403
    assert (await client.get(f"/api/operatives/{wolf['id']}", headers=duty)).status_code == 200
    assert (await client.get("/api/operatives/9999", headers=duty)).status_code == 404

    everyone = await client.get("/api/operatives/", headers=admin_headers)
    assert everyone.json()["total"] == 2
    assert everyone.json()["role"] is None

    only_freedom = await client.get("/api/operatives/role/Freedom", headers=admin_headers)
    assert [item["callsign"] for item in only_freedom.json()["items"]] == ["Fox"]


@pytest.mark.asyncio
async def test_search(client: AsyncClient, make_user) -> None:
    _, headers = await make_user("wolf", Role.DUTY)
    await client.post("/api/operatives/", json=payload("Wolf", "ST100"), headers=headers)
    await client.post("/api/operatives/", json=payload("Bear", "ST101"), headers=headers)

    found = await client.get(
        "/api/operatives/", params={"searchBy": "callsign", "searchTerm": "wo"}, headers=headers
    )
    assert [item["callsign"] for item in found.json()["items"]] == ["Wolf"]

    ignored = await client.get(
        "/api/operatives/", params={"searchBy": "note", "searchTerm": "wo"}, headers=headers
    )
    assert ignored.json()["total"] == 2


@pytest.mark.asyncio
async def test_face_id_conflict_across_factions(client: AsyncClient, admin_headers) -> None:
    first = await client.post(
        "/api/operatives/", json=payload("Wolf", "ST100", role="Duty"), headers=admin_headers
    )
    assert first.status_code == 201
    second = await client.post(
        "/api/operatives/", json=payload("Fox", "ST100", role="Freedom"), headers=admin_headers
    )
    assert second.status_code == 409


@pytest.mark.asyncio
async def test_roles_list(client: AsyncClient, make_user) -> None:
    _, headers = await make_user("wolf", Role.DUTY)
    response = await client.get("/api/operatives/roles/list", headers=headers)
    assert response.status_code == 200
    values = [role["value"] for role in response.json()]
    assert "Admin" not in values
    assert len(values) == 8
    assert {"value": "ClearSky", "label": "Clear Sky", "color": "#00ffff"} in response.json()


@pytest.mark.asyncio
async def test_update_and_delete_rules(client: AsyncClient, make_user, settings) -> None:
    _, duty = await make_user("wolf", Role.DUTY)
    _, freedom = await make_user("fox", Role.FREEDOM)
    uploads = Path(settings.upload_dir) / "stalkers"
    uploads.mkdir(parents=True)
    old_photo = uploads / "old.jpg"
    old_photo.write_bytes(b"old")

    created = await client.post(
        "/api/operatives/",
        json=payload("Wolf", "ST100", photoRef="stalkers/old.jpg"),
        headers=duty,
    )
    record = created.json()
    assert record["photo"] == "/uploads/stalkers/old.jpg"
    url = f"/api/operatives/{record['id']}"

    assert (await client.put(url, json=payload("Wolf", "ST100"), headers=freedom)).status_code == 403
    assert (await client.delete(url, headers=freedom)).status_code == 403
    moved = await client.put(url, json=payload("Wolf", "ST100", role="Freedom"), headers=duty)
    assert moved.status_code == 403

    kept = await client.put(url, json=payload("Wolf", "ST100", note="at Rostok"), headers=duty)
    assert kept.status_code == 200
    assert kept.json()["note"] == "at Rostok"
    assert kept.json()["photoRef"] == "stalkers/old.jpg"
    assert old_photo.exists()

    replaced = await client.put(
        url, json=payload("Wolf", "ST100", photoRef="stalkers/new.jpg"), headers=duty
    )
    assert replaced.json()["photo"] == "/uploads/stalkers/new.jpg"
    assert not old_photo.exists()

    new_photo = uploads / "new.jpg"
    new_photo.write_bytes(b"new")
    deleted = await client.delete(url, headers=duty)
    assert deleted.status_code == 200
    assert not new_photo.exists()
    assert (await client.get(url, headers=duty)).status_code == 404


@pytest.mark.asyncio
async def test_admin_moves_record_between_factions(client: AsyncClient, admin_headers, make_user) -> None:
    _, freedom = await make_user("fox", Role.FREEDOM)
    created = await client.post(
        "/api/operatives/", json=payload("Wolf", "ST100", role="Duty"), headers=admin_headers
    )
    url = f"/api/operatives/{created.json()['id']}"

    moved = await client.put(url, json=payload("Wolf", "ST100", role="Freedom"), headers=admin_headers)
    assert moved.status_code == 200
    assert moved.json()["role"] == "Freedom"
    assert (await client.get(url, headers=freedom)).status_code == 200


@pytest.mark.asyncio
async def test_missing_fields_and_auth(client: AsyncClient, make_user) -> None:
    _, headers = await make_user("wolf", Role.DUTY)
    response = await client.post("/api/operatives/", json={"callsign": "Wolf"}, headers=headers)
    assert response.status_code == 400
    assert {"fullName", "faceId"} <= {error["field"] for error in response.json()["errors"]}

    assert (await client.get("/api/operatives/")).status_code == 401


@pytest.mark.asyncio
async def test_photo_ref_is_confined_to_operative_directory(
    client: AsyncClient, make_user, admin_headers, settings
) -> None:
    _, duty = await make_user("wolf", Role.DUTY)
    bounty = Path(settings.upload_dir) / "wanted" / "bounty.jpg"
    bounty.parent.mkdir(parents=True)
    bounty.write_bytes(b"bounty")
    wanted = await client.post(
        "/api/wanted/",
        json={
            "callsign": "Raider",
            "fullName": "Kriminal Kriminalovich",
            "faceId": "W100",
            "reward": 100,
            "lastSeen": "Garbage",
            "reason": "Robbery",
            "photoRef": "wanted/bounty.jpg",
        },
        headers=admin_headers,
    )
    assert wanted.status_code == 201

    for ref in ("wanted/bounty.jpg", "stalkers/../wanted/bounty.jpg", "../uploads/wanted/bounty.jpg"):
        response = await client.post(
            "/api/operatives/", json=payload("Wolf", "ST100", photoRef=ref), headers=duty
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "photoRef"
    assert bounty.exists()


@pytest.mark.asyncio
async def test_shared_photo_survives_other_faction_delete(
    client: AsyncClient, make_user, settings
) -> None:
    _, duty = await make_user("wolf", Role.DUTY)
    _, freedom = await make_user("fox", Role.FREEDOM)
    photo = Path(settings.upload_dir) / "stalkers" / "fox.jpg"
    photo.parent.mkdir(parents=True)
    photo.write_bytes(b"fox")

    fox = await client.post(
        "/api/operatives/", json=payload("Fox", "ST200", photoRef="stalkers/fox.jpg"), headers=freedom
    )
    assert fox.status_code == 201
    copycat = await client.post(
        "/api/operatives/", json=payload("Wolf", "ST100", photoRef="stalkers/fox.jpg"), headers=duty
    )
    assert copycat.status_code == 201

    deleted = await client.delete(f"/api/operatives/{copycat.json()['id']}", headers=duty)
    assert deleted.status_code == 200
    assert photo.exists()

    deleted = await client.delete(f"/api/operatives/{fox.json()['id']}", headers=freedom)
    assert deleted.status_code == 200
    assert not photo.exists()
