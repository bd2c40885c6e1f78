"""End-to-end walkthroughs across auth, teams and tasks."""
from datetime import datetime


def test_admin_manages_own_team(client, register, promote):
    admin = register("admin", "admin@example.com")
    promote(admin["id"])
    user = register("user", "user@example.com")

    team = client.post("/teams", json={"name": "T"}, headers=admin["headers"]).json()
    assert [m["id"] for m in team["members"]] == [admin["id"]]

    team = client.post(f"/teams/{team['id']}/members", json={"userId": user["id"]}, headers=admin["headers"]).json()
    assert [m["id"] for m in team["members"]] == [admin["id"], user["id"]]

    team = client.delete(f"/teams/{team['id']}/members/{user['id']}", headers=admin["headers"]).json()
    assert [m["id"] for m in team["members"]] == [admin["id"]]

    response = client.delete(f"/teams/{team['id']}/members/{admin['id']}", headers=admin["headers"])
    assert response.status_code == 400


def test_assignee_completes_but_only_creator_deletes(client, leader, member):
    task = client.post(
        "/tasks", json={"title": "Ship it", "assignedTo": member["id"]}, headers=leader["headers"]
    ).json()

    response = client.put(f"/tasks/{task['id']}", json={"status": "done"}, headers=member["headers"])
    assert response.status_code == 200
    assert response.json()["status"] == "done"

    assert client.delete(f"/tasks/{task['id']}", headers=member["headers"]).status_code == 403
    assert client.delete(f"/tasks/{task['id']}", headers=leader["headers"]).status_code == 200


def test_filtered_sorted_page_of_done_tasks(client, leader):
    for index in range(8):
        status = "done" if index < 7 else "todo"
        client.post(
            "/tasks",
            json={"title": f"Task {index}", "assignedTo": leader["id"], "status": status},
            headers=leader["headers"],
        )

    response = client.get("/tasks?status=done&sort=-createdAt&page=1&limit=5", headers=leader["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 5
    assert body["totalTasks"] == 7
    assert body["totalPages"] == 2
    assert all(task["status"] == "done" for task in body["tasks"])
    created = [datetime.fromisoformat(task["createdAt"]) for task in body["tasks"]]
    assert created == sorted(created, reverse=True)
