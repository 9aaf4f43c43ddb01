# tests/conftest.py
from __future__ import annotations

import itertools
from datetime import date, datetime, timedelta, timezone

import pytest

from student_registry import store as store_module
from student_registry.store import StudentStore
from student_registry.web import create_app

STAFF_PASSWORD = "secret123"


def student_values(**overrides) -> dict:
    """A valid form submission, as strings the way a browser posts them."""
    values = {
        "name": "Maria Souza",
        "birth_date": "2001-04-17",
        "cpf": "12345678901",
        "rg": "",
        "email": "maria@escola.edu.br",
        "phone": "",
        "address": "",
        "enrollment_number": "2024001",
        "course": "Engenharia Civil",
        "entry_year": "2024",
        "status": "active",
        "notes": "",
    }
    values.update(overrides)
    return values


def student_row(**overrides) -> dict:
    """Insert payload with parsed values, as the form layer hands it to the store."""
    row = {
        "name": "Maria Souza",
        "birth_date": date(2001, 4, 17),
        "cpf": "12345678901",
        "rg": None,
        "email": None,
        "phone": None,
        "address": None,
        "enrollment_number": "2024001",
        "course": "Engenharia Civil",
        "entry_year": 2024,
        "status": "active",
        "notes": None,
    }
    row.update(overrides)
    return row


@pytest.fixture(autouse=True)
def _increasing_clock(monkeypatch):
    """Every call to the store clock moves one second forward."""
    start = datetime(2025, 1, 1, tzinfo=timezone.utc)
    ticks = itertools.count()
    monkeypatch.setattr(store_module, "utcnow", lambda: start + timedelta(seconds=next(ticks)))


@pytest.fixture
def store():
    return StudentStore()


@pytest.fixture
def app(store):
    return create_app(
        store,
        TESTING=True,
        SECRET_KEY="test-secret",
        DEFAULT_ADMIN_EMAIL="root@test",
        DEFAULT_ADMIN_PASSWORD="root-pass",
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(client, store):
    """Sign the test client in as a staff member holding ``role`` ("none" for no role)."""
    def _login(role: str):
        email = f"{role}@staff.test"
        user = store.authenticate(email, STAFF_PASSWORD)
        if user is None:
            user = store.create_user(email, STAFF_PASSWORD, name=f"{role.capitalize()} User")
            if role != "none":
                store.assign_role(user["id"], role)
        r = client.post("/login", data={"email": email, "password": STAFF_PASSWORD})
        assert r.status_code == 302
        return user
    return _login
