import pytest


@pytest.fixture
def team(client, leader):
    response = client.post(
        "/teams", json={"name": "Test Team", "description": "A team for testing"}, headers=leader["headers"]
    )
    assert response.status_code == 201, response.text
    return response.json()


def member_ids(team):
    return [member["id"] for member in team["members"]]


def test_create_team_makes_creator_leader_and_member(team, leader):
    assert team["name"] == "Test Team"
    assert team["description"] == "A team for testing"
    assert team["leader"]["id"] == leader["id"]
    assert member_ids(team) == [leader["id"]]


def test_create_team_with_duplicate_name(client, team, member):
    response = client.post("/teams", json={"name": "Test Team"}, headers=member["headers"])

    assert response.status_code == 400


def test_create_team_requires_name(client, leader):
    response = client.post("/teams", json={"name": "   "}, headers=leader["headers"])

    assert response.status_code == 422


def test_list_my_teams(client, team, leader, member):
    mine = client.get("/teams", headers=leader["headers"])
    theirs = client.get("/teams", headers=member["headers"])

    assert mine.status_code == 200
    assert [item["name"] for item in mine.json()] == ["Test Team"]
    assert theirs.json() == []


def test_get_team(client, team, leader):
    response = client.get(f"/teams/{team['id']}", headers=leader["headers"])

    assert response.status_code == 200
    assert response.json()["name"] == "Test Team"


def test_non_member_cannot_view_team(client, team, member):
    response = client.get(f"/teams/{team['id']}", headers=member["headers"])

    assert response.status_code == 403


def test_admin_can_view_any_team(client, team, member, promote):
    promote(member["id"])

    response = client.get(f"/teams/{team['id']}", headers=member["headers"])

    assert response.status_code == 200


def test_get_missing_team(client, leader):
    assert client.get("/teams/missing", headers=leader["headers"]).status_code == 404


def test_leader_adds_member(client, team, leader, member):
    response = client.post(f"/teams/{team['id']}/members", json={"userId": member["id"]}, headers=leader["headers"])

    assert response.status_code == 200
    assert member_ids(response.json()) == [leader["id"], member["id"]]
    assert response.json()["members"][1]["username"] == "memberuser"

    # Новый участник теперь видит команду
    assert client.get(f"/teams/{team['id']}", headers=member["headers"]).status_code == 200


def test_adding_existing_member_fails_and_keeps_membership(client, team, leader, member):
    client.post(f"/teams/{team['id']}/members", json={"userId": member["id"]}, headers=leader["headers"])

    response = client.post(f"/teams/{team['id']}/members", json={"userId": member["id"]}, headers=leader["headers"])

    assert response.status_code == 400
    current = client.get(f"/teams/{team['id']}", headers=leader["headers"]).json()
    assert member_ids(current) == [leader["id"], member["id"]]


def test_adding_unknown_user(client, team, leader):
    response = client.post(f"/teams/{team['id']}/members", json={"userId": "ghost"}, headers=leader["headers"])

    assert response.status_code == 404


def test_member_cannot_add_members(client, team, leader, member, outsider):
    client.post(f"/teams/{team['id']}/members", json={"userId": member["id"]}, headers=leader["headers"])

    response = client.post(
        f"/teams/{team['id']}/members", json={"userId": outsider["id"]}, headers=member["headers"]
    )

    assert response.status_code == 403


def test_admin_cannot_manage_membership_of_foreign_team(client, team, leader, member, promote):
    promote(member["id"])

    added = client.post(f"/teams/{team['id']}/members", json={"userId": member["id"]}, headers=member["headers"])
    deleted = client.delete(f"/teams/{team['id']}", headers=member["headers"])

    assert added.status_code == 403
    assert deleted.status_code == 403


def test_leader_removes_member(client, team, leader, member):
    client.post(f"/teams/{team['id']}/members", json={"userId": member["id"]}, headers=leader["headers"])

    response = client.delete(f"/teams/{team['id']}/members/{member['id']}", headers=leader["headers"])

    assert response.status_code == 200
    assert member_ids(response.json()) == [leader["id"]]


def test_leader_cannot_be_removed(client, team, leader):
    response = client.delete(f"/teams/{team['id']}/members/{leader['id']}", headers=leader["headers"])

    assert response.status_code == 400
    current = client.get(f"/teams/{team['id']}", headers=leader["headers"]).json()
    assert member_ids(current) == [leader["id"]]


def test_removing_non_member(client, team, leader, member):
    response = client.delete(f"/teams/{team['id']}/members/{member['id']}", headers=leader["headers"])

    assert response.status_code == 404


def test_member_cannot_remove_members(client, team, leader, member):
    client.post(f"/teams/{team['id']}/members", json={"userId": member["id"]}, headers=leader["headers"])

    response = client.delete(f"/teams/{team['id']}/members/{leader['id']}", headers=member["headers"])

    assert response.status_code == 403


def test_member_cannot_delete_team(client, team, leader, member):
    client.post(f"/teams/{team['id']}/members", json={"userId": member["id"]}, headers=leader["headers"])

    response = client.delete(f"/teams/{team['id']}", headers=member["headers"])

    assert response.status_code == 403


def test_leader_deletes_team_and_tasks_survive(client, team, leader):
    task = client.post(
        "/tasks",
        json={"title": "Team task", "assignedTo": leader["id"], "team": team["id"]},
        headers=leader["headers"],
    ).json()

    response = client.delete(f"/teams/{team['id']}", headers=leader["headers"])

    assert response.status_code == 200
    assert response.json() == {"id": team["id"], "message": "Team deleted successfully"}
    assert client.get(f"/teams/{team['id']}", headers=leader["headers"]).status_code == 404

    remaining = client.get(f"/tasks?team={team['id']}", headers=leader["headers"]).json()
    assert [item["id"] for item in remaining["tasks"]] == [task["id"]]
