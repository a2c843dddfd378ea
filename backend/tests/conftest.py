"""
Shared fixtures: an app per test backed by its own SQLite file, users and auth headers.
Requires: fastapi, httpx (install with: pip install -e ".[test]").
"""
import os
import uuid

# aev_scheduler.main builds a module-level app; give it something to read before import.
os.environ.setdefault("DATABASE_URL", "sqlite:///./aev_scheduler_test_default.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import bcrypt
import pytest
from fastapi.testclient import TestClient

from aev_scheduler.config import Settings
from aev_scheduler.main import create_app
from aev_scheduler.models.project import Project
from aev_scheduler.models.task import Task
from aev_scheduler.models.user import User
from aev_scheduler.services.auth import create_access_token, hash_password

_real_gensalt = bcrypt.gensalt


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Minimum bcrypt cost so hashing dozens of passwords stays quick."""
    monkeypatch.setattr(bcrypt, "gensalt", lambda rounds=4, prefix=b"2b": _real_gensalt(4, prefix))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        secret_key="test-secret-key",
        staff_registration_code="111111",
        bulk_default_password="defaultPassword",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(client, app):
    """ORM session on the same database the app uses. Call expire_all() before re-reading rows."""
    session = app.state.db.session()
    try:
        yield session
    finally:
        session.close()


def make_user(app, role="staff", email=None, password="testpass123", name=None) -> User:
    """Create a user directly in the DB; returned object is detached with attributes loaded."""
    db = app.state.db.session()
    try:
        email = email or f"{role}-{uuid.uuid4().hex[:8]}@tests.example.com"
        user = User(
            name=name or f"Test {role.title()}",
            email=email,
            password_hash=hash_password(password),
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    finally:
        db.close()


def make_project(app, members=(), name="Project", status="pending") -> Project:
    db = app.state.db.session()
    try:
        project = Project(name=name, status=status)
        for m in members:
            project.users.append(db.get(User, m.id))
        db.add(project)
        db.commit()
        db.refresh(project)
        return project
    finally:
        db.close()


def make_task(app, user, project, title="Task", status="TODO") -> Task:
    db = app.state.db.session()
    try:
        task = Task(title=title, status=status, user_id=user.id, project_id=project.id)
        db.add(task)
        db.commit()
        db.refresh(task)
        return task
    finally:
        db.close()


def auth_headers(settings, user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(settings, user)}"}


@pytest.fixture
def staff_user(client, app):
    return make_user(app, role="staff", name="Sam Staff")


@pytest.fixture
def student_user(client, app):
    return make_user(app, role="student", name="Stu Dent")


@pytest.fixture
def staff_headers(settings, staff_user):
    return auth_headers(settings, staff_user)


@pytest.fixture
def student_headers(settings, student_user):
    return auth_headers(settings, student_user)
