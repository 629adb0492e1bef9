"""Draw endpoint behaviour: arithmetic, preconditions, atomicity and reads."""

from __future__ import annotations

from fastapi.testclient import TestClient

from aemoz.services import Internal
from aemoz.services.draw import GroupingEngine, PALETTE


def _member_ids(groups: list[dict]) -> list[str]:
    return [member["id"] for group in groups for member in group["members"]]


def _snapshot(client: TestClient, headers) -> list[tuple[str, str, list[str]]]:
    groups = client.get("/admin/sorteio/result", headers=headers).json()["groups"]
    return [
        (group["id"], group["name"], [m["id"] for m in group["members"]])
        for group in groups
    ]


def test_twenty_participants_in_four_courses_make_five_full_groups(
    client: TestClient, admin_headers, register
):
    register(20, courses=4)

    response = client.post("/admin/sorteio", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["stats"] == {
        "totalParticipants": 20,
        "totalGroups": 5,
        "participantsInGroups": 20,
        "remainingParticipants": 0,
    }
    assert [g["name"] for g in body["groups"]] == [f"Group {i}" for i in range(1, 6)]
    assert [g["color"] for g in body["groups"]] == list(PALETTE[:5])
    assert all(len(g["members"]) == 4 for g in body["groups"])
    ids = _member_ids(body["groups"])
    assert len(ids) == len(set(ids)) == 20


def test_leftover_participants_are_reported_not_placed(
    client: TestClient, admin_headers, register
):
    created = register(23, courses=5)

    body = client.post("/admin/sorteio", headers=admin_headers).json()

    assert body["stats"]["totalGroups"] == 5
    assert body["stats"]["participantsInGroups"] == 20
    assert body["stats"]["remainingParticipants"] == 3
    placed = set(_member_ids(body["groups"]))
    assert len(placed) == 20
    assert placed <= {p["id"] for p in created}


def test_members_are_ordered_by_name(client: TestClient, admin_headers, register):
    register(16)

    body = client.post("/admin/sorteio", headers=admin_headers).json()

    for group in body["groups"]:
        names = [m["name"] for m in group["members"]]
        assert names == sorted(names)


def test_precondition_on_participant_count(client: TestClient, admin_headers, register):
    register(15, courses=4)

    response = client.post("/admin/sorteio", headers=admin_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "precondition_failed"
    assert body["current"] == 15
    assert body["required"] == 16


def test_precondition_on_course_diversity(client: TestClient, admin_headers, register):
    register(16, courses=3)

    response = client.post("/admin/sorteio", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["current"] == 3


def test_failed_precondition_keeps_previous_draw(
    client: TestClient, admin_headers, register
):
    created = register(16)
    client.post("/admin/sorteio", headers=admin_headers)
    client.delete(f"/admin/participants/{created[0]['id']}", headers=admin_headers)
    before = _snapshot(client, admin_headers)

    response = client.post("/admin/sorteio", headers=admin_headers)

    assert response.status_code == 400
    assert _snapshot(client, admin_headers) == before


def test_redraw_replaces_previous_groups(client: TestClient, admin_headers, register):
    register(16)
    first = client.post("/admin/sorteio", headers=admin_headers).json()
    second = client.post("/admin/sorteio", headers=admin_headers).json()

    current = _snapshot(client, admin_headers)

    assert {g["id"] for g in first["groups"]}.isdisjoint(g[0] for g in current)
    assert [g[0] for g in current] == [g["id"] for g in second["groups"]]
    assert client.get("/stats").json()["groups"] == 4


def test_failure_mid_draw_rolls_back_everything(
    client: TestClient, admin_headers, register, monkeypatch
):
    register(20)
    client.post("/admin/sorteio", headers=admin_headers)
    before = _snapshot(client, admin_headers)

    original = GroupingEngine._create_group

    async def fail_on_last_group(self, session, index, members, created_at):
        if index == 4:
            raise RuntimeError("simulated write failure")
        return await original(self, session, index, members, created_at)

    monkeypatch.setattr(GroupingEngine, "_create_group", fail_on_last_group)

    response = client.post("/admin/sorteio", headers=admin_headers)

    assert response.status_code == 500
    assert response.json() == {
        "detail": "The draw could not be completed",
        "code": "internal",
    }
    assert _snapshot(client, admin_headers) == before


def test_failed_first_draw_leaves_no_groups(
    client: TestClient, admin_headers, register, monkeypatch
):
    register(16)

    async def always_fail(self, session, index, members, created_at):
        raise RuntimeError("simulated write failure")

    monkeypatch.setattr(GroupingEngine, "_create_group", always_fail)

    assert client.post("/admin/sorteio", headers=admin_headers).status_code == 500
    assert client.get("/admin/sorteio/result", headers=admin_headers).status_code == 404


def test_result_is_not_found_before_any_draw(client: TestClient, admin_headers):
    response = client.get("/admin/sorteio/result", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


def test_reading_the_result_is_idempotent(client: TestClient, admin_headers, register):
    register(17)
    drawn = client.post("/admin/sorteio", headers=admin_headers).json()

    first = client.get("/admin/sorteio/result", headers=admin_headers).json()
    second = client.get("/admin/sorteio/result", headers=admin_headers).json()

    assert first == second
    assert [g["id"] for g in first["groups"]] == [g["id"] for g in drawn["groups"]]
    assert [_member_ids([g]) for g in first["groups"]] == [
        _member_ids([g]) for g in drawn["groups"]
    ]


def test_deleting_a_member_keeps_the_group(client: TestClient, admin_headers, register):
    register(16)
    drawn = client.post("/admin/sorteio", headers=admin_headers).json()
    target = drawn["groups"][0]

    for member in target["members"][:3]:
        client.delete(f"/admin/participants/{member['id']}", headers=admin_headers)
    groups = client.get("/admin/sorteio/result", headers=admin_headers).json()["groups"]
    assert [m["id"] for m in groups[0]["members"]] == [target["members"][3]["id"]]
    assert all(len(g["members"]) == 4 for g in groups[1:])

    client.delete(
        f"/admin/participants/{target['members'][3]['id']}", headers=admin_headers
    )
    groups = client.get("/admin/sorteio/result", headers=admin_headers).json()["groups"]
    assert len(groups) == 4
    assert groups[0]["id"] == target["id"]
    assert groups[0]["members"] == []


def test_clear_all_removes_everything(client: TestClient, admin_headers, register):
    register(16)
    client.post("/admin/sorteio", headers=admin_headers)

    response = client.delete("/admin/clear-all", headers=admin_headers)

    assert response.status_code == 200
    assert client.get("/stats").json() == {"participants": 0, "courses": 0, "groups": 0}
    assert client.get("/admin/sorteio/result", headers=admin_headers).status_code == 404


def test_internal_error_payload_hides_detail():
    error = Internal()

    assert error.status_code == 500
    assert error.to_payload() == {"detail": "Internal server error", "code": "internal"}
