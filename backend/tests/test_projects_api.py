"""
API tests for projects router: auth gate, create scenario, role-scoped listing, update/delete, members.
"""
from aev_scheduler.models.activity import Activity
from aev_scheduler.models.task import Task
from conftest import make_project, make_task, make_user


def test_list_requires_session(client):
    r = client.get("/api/projects")
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


def test_create_project_scenario(client, staff_user, staff_headers):
    r = client.post(
        "/api/projects",
        json={"name": "Alpha", "description": "d", "deadline": "2025-01-01"},
        headers=staff_headers,
    )
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["name"] == "Alpha"
    assert data["status"] == "pending"
    assert data["deadline"] == "2025-01-01"
    assert [u["id"] for u in data["users"]] == [str(staff_user.id)]
    assert data["tasks"] == []


def test_create_project_accepts_title(client, staff_headers):
    r = client.post("/api/projects", json={"title": "Beta", "description": "from the form"}, headers=staff_headers)
    assert r.status_code == 201
    assert r.json()["name"] == "Beta"


def test_create_project_requires_name(client, staff_headers):
    r = client.post("/api/projects", json={"description": "nameless"}, headers=staff_headers)
    assert r.status_code == 400


def test_create_project_records_activity(client, db, staff_user, staff_headers):
    project_id = client.post("/api/projects", json={"name": "Alpha"}, headers=staff_headers).json()["id"]
    entries = db.query(Activity).all()
    assert len(entries) == 1
    assert str(entries[0].project_id) == project_id
    assert entries[0].user_id == staff_user.id


def test_create_project_forbidden_for_students(client, student_headers):
    r = client.post("/api/projects", json={"name": "Alpha"}, headers=student_headers)
    assert r.status_code == 403


def test_create_project_failure_returns_500_with_details(client, staff_headers, monkeypatch):
    import aev_scheduler.api.projects as projects_module

    def boom(*args, **kwargs):
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr(projects_module, "record_activity", boom)
    r = client.post("/api/projects", json={"name": "Alpha"}, headers=staff_headers)
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Internal Server Error"
    assert body["details"] == "Project could not be created"
    assert "connection reset" not in r.text
    # rolled back
    assert client.get("/api/projects", headers=staff_headers).json() == []


def test_list_embeds_users_and_tasks(client, app, staff_user, staff_headers):
    project = make_project(app, members=[staff_user], name="Alpha")
    make_task(app, staff_user, project, title="Write report", status="IN_PROGRESS")
    r = client.get("/api/projects", headers=staff_headers)
    assert r.status_code == 200
    [data] = r.json()
    assert data["users"][0]["email"] == staff_user.email
    assert "passwordHash" not in data["users"][0]
    assert data["tasks"] == [{"id": data["tasks"][0]["id"], "title": "Write report", "status": "IN_PROGRESS"}]


def test_students_see_only_their_projects(client, app, staff_user, student_user, staff_headers, student_headers):
    make_project(app, members=[staff_user, student_user], name="Shared")
    make_project(app, members=[staff_user], name="Staff only")
    staff_names = sorted(p["name"] for p in client.get("/api/projects", headers=staff_headers).json())
    student_names = [p["name"] for p in client.get("/api/projects", headers=student_headers).json()]
    assert staff_names == ["Shared", "Staff only"]
    assert student_names == ["Shared"]


def test_get_project(client, app, staff_user, student_headers, staff_headers):
    project = make_project(app, members=[staff_user], name="Alpha")
    assert client.get(f"/api/projects/{project.id}", headers=staff_headers).status_code == 200
    # not a member
    assert client.get(f"/api/projects/{project.id}", headers=student_headers).status_code == 404
    assert client.get("/api/projects/not-a-uuid", headers=staff_headers).status_code == 404


def test_update_project_merges_fields(client, app, staff_user, staff_headers):
    project = make_project(app, members=[staff_user], name="Alpha")
    r = client.patch(f"/api/projects/{project.id}", json={"status": "in_progress"}, headers=staff_headers)
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["status"] == "in_progress"
    assert data["name"] == "Alpha"

    r = client.patch(f"/api/projects/{project.id}", json={"status": "pending"}, headers=staff_headers)
    assert r.json()["status"] == "pending"


def test_update_project_rejects_blank_name(client, app, staff_user, staff_headers):
    project = make_project(app, members=[staff_user], name="Alpha")
    r = client.patch(f"/api/projects/{project.id}", json={"name": "   "}, headers=staff_headers)
    assert r.status_code == 400
    r = client.patch(f"/api/projects/{project.id}", json={"name": "  Beta "}, headers=staff_headers)
    assert r.json()["name"] == "Beta"
    assert client.get(f"/api/projects/{project.id}", headers=staff_headers).json()["name"] == "Beta"


def test_update_project_rejects_unknown_status(client, app, staff_user, staff_headers):
    project = make_project(app, members=[staff_user])
    r = client.patch(f"/api/projects/{project.id}", json={"status": "archived"}, headers=staff_headers)
    assert r.status_code == 400


def test_delete_project(client, app, db, staff_user, staff_headers):
    project = make_project(app, members=[staff_user], name="Alpha")
    make_task(app, staff_user, project)
    client.patch(f"/api/projects/{project.id}", json={"description": "x"}, headers=staff_headers)

    r = client.delete(f"/api/projects/{project.id}", headers=staff_headers)
    assert r.status_code == 200
    assert r.json() == {"message": "Project deleted successfully"}
    assert client.delete(f"/api/projects/{project.id}", headers=staff_headers).status_code == 404

    db.expire_all()
    assert db.query(Task).count() == 0
    [entry] = db.query(Activity).all()
    assert entry.project_id is None


def test_add_member_is_idempotent(client, app, staff_user, student_user, staff_headers):
    project = make_project(app, members=[staff_user])
    url = f"/api/projects/{project.id}/members"
    r = client.post(url, json={"userId": str(student_user.id)}, headers=staff_headers)
    assert r.status_code == 200, r.text
    assert {u["id"] for u in r.json()["users"]} == {str(staff_user.id), str(student_user.id)}
    r = client.post(url, json={"userId": str(student_user.id)}, headers=staff_headers)
    assert len(r.json()["users"]) == 2


def test_add_unknown_member(client, app, staff_user, staff_headers):
    project = make_project(app, members=[staff_user])
    url = f"/api/projects/{project.id}/members"
    assert client.post(url, json={"userId": "nope"}, headers=staff_headers).status_code == 404
    other = make_user(app, role="student")
    assert client.post(
        "/api/projects/00000000-0000-0000-0000-000000000000/members",
        json={"userId": str(other.id)},
        headers=staff_headers,
    ).status_code == 404
