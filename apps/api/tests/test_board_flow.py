"""End-to-end board flow over HTTP: workspace, project, task, move, deactivate."""


def _column_id(project, title):
    return next(c["id"] for c in project["columns"] if c["title"] == title)


def _column(project, title):
    return next(c for c in project["columns"] if c["title"] == title)


async def test_workspace_project_task_lifecycle(client, alice, bob, auth_headers):
    admin = auth_headers(alice)

    # Workspace with bob invited by email
    res = await client.post(
        "/workspaces",
        json={"name": "Platform", "member_emails": [bob.email]},
        headers=admin,
    )
    assert res.status_code == 201
    workspace = res.json()["workspace"]
    assert res.json()["member_status"] == [{"email": bob.email, "status": "Added"}]
    members = {m["user_id"]: m for m in workspace["members"]}
    assert members[str(alice.id)]["role"] == "Admin"
    assert members[str(bob.id)]["role"] == "Member"
    assert all(m["is_active"] for m in members.values())

    # Project with the default board
    res = await client.post(
        "/projects",
        json={"name": "Roadmap", "workspace_id": workspace["id"]},
        headers=admin,
    )
    assert res.status_code == 201
    project = res.json()
    assert [c["title"] for c in project["columns"]] == ["To Do", "In Progress", "Done"]
    assert project["order"] == [c["id"] for c in project["columns"]]

    # Task assigned to bob in "To Do"
    res = await client.post(
        f"/projects/{project['id']}/tasks",
        json={
            "column_id": _column_id(project, "To Do"),
            "task_name": "Write release notes",
            "assignee_user_id": str(bob.id),
            "priority": "Medium",
        },
        headers=admin,
    )
    assert res.status_code == 201
    task_id = res.json()["task_id"]
    project = res.json()["project"]
    task = next(t for t in project["tasks"] if t["id"] == task_id)
    assert task["assignee"]["id"] == str(bob.id)
    assert task_id in _column(project, "To Do")["task_ids"]

    res = await client.get("/me/notifications", headers=auth_headers(bob))
    notifications = res.json()
    assert len(notifications) == 1
    assert notifications[0]["task_id"] == task_id
    assert notifications[0]["project_id"] == project["id"]
    assert notifications[0]["is_read"] is False

    # Move to "Done"
    res = await client.post(
        f"/projects/{project['id']}/tasks/{task_id}/move",
        json={
            "source_column_id": _column_id(project, "To Do"),
            "destination_column_id": _column_id(project, "Done"),
        },
        headers=admin,
    )
    assert res.status_code == 200
    project = res.json()["project"]
    assert task_id not in _column(project, "To Do")["task_ids"]
    assert task_id in _column(project, "Done")["task_ids"]

    # Deactivate
    res = await client.post(
        f"/projects/{project['id']}/tasks/{task_id}/deactivate", headers=admin
    )
    assert res.status_code == 200
    project = res.json()
    task = next(t for t in project["tasks"] if t["id"] == task_id)
    assert task["is_active"] is False
    assert all(task_id not in c["task_ids"] for c in project["columns"])


async def test_service_errors_map_to_status_codes(client, workspace, project, alice, bob, auth_headers):
    admin = auth_headers(alice)
    member = auth_headers(bob)

    res = await client.post(f"/workspaces/{workspace.id}/exit", headers=admin)
    assert res.status_code == 409
    assert "admin" in res.json()["detail"].lower()

    res = await client.post(
        f"/workspaces/{workspace.id}/members",
        json={"member_emails": ["someone@test.com"]},
        headers=member,
    )
    assert res.status_code == 403

    res = await client.post(
        f"/projects/{project.id}/columns/missing/deactivate", headers=admin
    )
    assert res.status_code == 404

    res = await client.post(f"/projects/{project.id}/columns", json={"title": " "}, headers=admin)
    assert res.status_code == 400


async def test_members_endpoints(client, workspace, alice, bob, carol, auth_headers):
    admin = auth_headers(alice)

    res = await client.post(
        f"/workspaces/{workspace.id}/members",
        json={"member_emails": [carol.email, bob.email]},
        headers=admin,
    )
    assert res.status_code == 200
    assert [s["status"] for s in res.json()["members_status"]] == [
        "Added successfully",
        "Member already in workspace",
    ]

    res = await client.patch(
        f"/workspaces/{workspace.id}/members/role",
        json={"user_id": str(carol.id), "role": "Admin"},
        headers=admin,
    )
    assert res.status_code == 200

    res = await client.post(
        f"/workspaces/{workspace.id}/members/remove",
        json={"member_emails": [bob.email]},
        headers=admin,
    )
    assert res.json()["members_status"][0]["status"] == "Deactivated successfully"

    res = await client.get(f"/workspaces/{workspace.id}/members", headers=admin)
    assert {m["user"]["id"] for m in res.json()} == {str(alice.id), str(carol.id)}

    res = await client.post(f"/workspaces/{workspace.id}/exit", headers=admin)
    assert res.status_code == 200


async def test_mark_notification_read(client, project, alice, bob, auth_headers):
    todo = next(c for c in project.columns if c.title == "To Do")
    await client.post(
        f"/projects/{project.id}/tasks",
        json={"column_id": todo.id, "task_name": "Triage", "assignee_user_id": str(bob.id)},
        headers=auth_headers(alice),
    )

    notification = (await client.get("/me/notifications", headers=auth_headers(bob))).json()[0]

    res = await client.patch(
        f"/me/notifications/{notification['id']}/read", headers=auth_headers(alice)
    )
    assert res.status_code == 404

    res = await client.patch(
        f"/me/notifications/{notification['id']}/read", headers=auth_headers(bob)
    )
    assert res.status_code == 200
    res = await client.get("/me/notifications/count", headers=auth_headers(bob))
    assert res.json() == {"count": 0}


async def test_my_tasks_view(client, project, alice, bob, auth_headers):
    todo = next(c for c in project.columns if c.title == "To Do")
    await client.post(
        f"/projects/{project.id}/tasks",
        json={"column_id": todo.id, "task_name": "Triage", "assignee_user_id": str(bob.id)},
        headers=auth_headers(alice),
    )

    res = await client.get("/me/tasks", params={"project_name": "Roadmap"}, headers=auth_headers(bob))

    assert res.status_code == 200
    assert [t["name"] for t in res.json()] == ["Triage"]
    assert res.json()[0]["workspace"] == "Platform"
