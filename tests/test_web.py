import datetime as dt
import re

from student_registry.store import BackendError
from tests.conftest import student_row, student_values


def page(response) -> str:
    return response.get_data(as_text=True)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.get_json() == {"status": "ok"}


def test_default_admin_is_seeded(app, store):
    admin = store.authenticate("root@test", "root-pass")
    assert admin is not None
    assert store.roles_for(admin["id"]) == ["admin"]


def test_landing_page_for_anonymous(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "User profiles" in page(r)


def test_landing_redirects_signed_in_user(client, login_as):
    login_as("secretary")
    r = client.get("/")
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/dashboard")


def test_dashboard_requires_login(client):
    r = client.get("/dashboard", follow_redirects=True)
    assert "Please login first" in page(r)


def test_invalid_credentials(client):
    r = client.post("/login", data={"email": "root@test", "password": "nope"}, follow_redirects=True)
    assert "Invalid credentials" in page(r)


def test_logout(client, login_as):
    login_as("admin")
    client.get("/logout")
    r = client.get("/dashboard", follow_redirects=True)
    assert "Please login first" in page(r)


def test_signup_creates_user_without_role(client, store):
    r = client.post("/signup", data={"name": "New Hire", "email": "hire@school.org", "password": "pw123456"},
                    follow_redirects=True)
    assert "administrator must assign your role" in page(r)
    assert "New student" not in page(r)
    user = store.authenticate("hire@school.org", "pw123456")
    assert store.roles_for(user["id"]) == []


def test_admin_creates_student(client, store, login_as):
    login_as("admin")
    r = client.post("/students/new", data=student_values(), follow_redirects=True)
    assert "Student created" in page(r)
    assert "Maria Souza" in page(r)
    assert "123.456.789-01" in page(r)
    [row] = store.list_students()
    assert row["birth_date"] == dt.date(2001, 4, 17)
    assert row["rg"] is None


def test_ten_digit_cpf_never_reaches_backend(client, store, login_as, monkeypatch):
    login_as("admin")
    calls = []
    monkeypatch.setattr(store, "insert_student", lambda values: calls.append(values))
    r = client.post("/students/new", data=student_values(cpf="1234567890"))
    assert r.status_code == 200
    assert "CPF must contain 11 numeric digits" in page(r)
    assert calls == []


def test_backend_failure_keeps_the_form(client, store, login_as, monkeypatch):
    login_as("admin")

    def fail(values):
        raise BackendError("database unavailable")

    monkeypatch.setattr(store, "insert_student", fail)
    r = client.post("/students/new", data=student_values(name="Joana Prado"))
    assert r.status_code == 200
    assert "database unavailable" in page(r)
    assert 'value="Joana Prado"' in page(r)


def test_duplicate_enrollment_surfaces_backend_message(client, store, login_as):
    store.insert_student(student_row())
    login_as("secretary")
    r = client.post("/students/new", data=student_values())
    assert "Enrollment number already registered" in page(r)
    assert len(store.list_students()) == 1


def test_secretary_sees_masked_cpf_and_no_delete(client, store, login_as):
    row = store.insert_student(student_row())
    login_as("secretary")
    body = page(client.get("/dashboard"))
    assert "***.***.901" in body
    assert "123.456.789-01" not in body
    assert f"/students/{row['id']}/edit" in body
    assert f"/students/{row['id']}/delete" not in body


def test_user_without_role_can_only_view(client, store, login_as):
    row = store.insert_student(student_row())
    login_as("none")
    body = page(client.get("/dashboard"))
    assert f"/students/{row['id']}" in body
    assert f"/students/{row['id']}/edit" not in body
    assert "New student" not in body
    r = client.get("/students/new", follow_redirects=True)
    assert "Access denied" in page(r)


def test_secretary_edit_form_disables_sensitive_fields(client, store, login_as):
    row = store.insert_student(student_row())
    login_as("secretary")
    body = page(client.get(f"/students/{row['id']}/edit"))
    assert re.search(r'name="cpf"[^>]*disabled', body)
    assert re.search(r'name="birth_date"[^>]*disabled', body)
    assert re.search(r'name="status"[^>]*disabled', body)
    assert not re.search(r'name="course"[^>]*disabled', body)


def test_admin_edit_form_has_no_disabled_fields(client, store, login_as):
    row = store.insert_student(student_row())
    login_as("admin")
    body = page(client.get(f"/students/{row['id']}/edit"))
    assert "disabled" not in body.replace("input:disabled, select:disabled", "")


def test_secretary_resubmit_leaves_birth_date_and_cpf(client, store, login_as):
    row = store.insert_student(student_row())
    login_as("secretary")
    data = student_values(cpf="99999999999", birth_date="1990-01-01", status="graduated", course="Direito")
    r = client.post(f"/students/{row['id']}/edit", data=data, follow_redirects=True)
    assert "Student updated" in page(r)
    saved = store.get_student(row["id"])
    assert saved["cpf"] == "12345678901"
    assert saved["birth_date"] == dt.date(2001, 4, 17)
    assert saved["status"] == "active"
    assert saved["course"] == "Direito"


def test_coordinator_changes_status(client, store, login_as):
    row = store.insert_student(student_row())
    login_as("coordinator")
    client.post(f"/students/{row['id']}/edit", data=student_values(status="locked"))
    assert store.get_student(row["id"])["status"] == "locked"


def test_details_page(client, store, login_as):
    row = store.insert_student(student_row(notes="Transferred from another campus"))
    login_as("coordinator")
    body = page(client.get(f"/students/{row['id']}"))
    assert "123.456.789-01" in body
    assert "17/04/2001" in body
    assert "Transferred from another campus" in body


def test_missing_student(client, login_as):
    login_as("admin")
    r = client.get("/students/nope", follow_redirects=True)
    assert "Student not found" in page(r)


def test_search_and_status_filter(client, store, login_as):
    store.insert_student(student_row(name="Ana Lima", enrollment_number="1", course="Medicina"))
    store.insert_student(student_row(name="Bruno Reis", enrollment_number="2", course="Direito", status="inactive"))
    login_as("secretary")
    body = page(client.get("/dashboard", query_string={"q": "medic"}))
    assert "Ana Lima" in body and "Bruno Reis" not in body
    body = page(client.get("/dashboard", query_string={"status": "inactive"}))
    assert "Bruno Reis" in body and "Ana Lima" not in body
    body = page(client.get("/dashboard", query_string={"q": "zzz"}))
    assert "No students found" in body


def test_dashboard_counts(client, store, login_as):
    store.insert_student(student_row(enrollment_number="1", status="active"))
    store.insert_student(student_row(enrollment_number="2", status="locked"))
    login_as("admin")
    view = page(client.get("/dashboard"))
    assert 'Total students</div><div class="value">2<' in view
    assert 'Locked enrollments</div><div class="value">1<' in view


def test_admin_hard_delete(client, store, login_as):
    row = store.insert_student(student_row())
    login_as("admin")
    assert "permanently removed" in page(client.get(f"/students/{row['id']}/delete"))
    r = client.post(f"/students/{row['id']}/delete", follow_redirects=True)
    assert "Student deleted" in page(r)
    assert store.list_students(include_deleted=True) == []


def test_coordinator_soft_delete(client, store, login_as):
    row = store.insert_student(student_row())
    login_as("coordinator")
    assert "marked as inactive" in page(client.get(f"/students/{row['id']}/delete"))
    r = client.post(f"/students/{row['id']}/delete", follow_redirects=True)
    assert "Student deactivated" in page(r)
    assert store.list_students() == []
    assert store.get_student(row["id"], include_deleted=True)["deleted_at"] is not None
    r = client.get(f"/students/{row['id']}", follow_redirects=True)
    assert "Student not found" in page(r)


def test_secretary_cannot_delete(client, store, login_as):
    row = store.insert_student(student_row())
    login_as("secretary")
    r = client.post(f"/students/{row['id']}/delete", follow_redirects=True)
    assert "Access denied" in page(r)
    assert store.get_student(row["id"]) is not None


def test_delete_failure_is_reported(client, store, login_as, monkeypatch):
    row = store.insert_student(student_row())
    login_as("admin")

    def fail(student_id):
        raise BackendError("row locked")

    monkeypatch.setattr(store, "delete_student", fail)
    r = client.post(f"/students/{row['id']}/delete", follow_redirects=True)
    assert "Error deleting student" in page(r)
    assert "Maria Souza" in page(r)


def test_fetch_failure_leaves_dashboard_usable(client, store, login_as, monkeypatch):
    login_as("admin")

    def fail(include_deleted=False):
        raise BackendError("timeout")

    monkeypatch.setattr(store, "list_students", fail)
    r = client.get("/dashboard")
    assert r.status_code == 200
    assert "Error loading students" in page(r)


def test_admin_assigns_roles(client, store, login_as):
    staff = store.create_user("staff@school.org", "pw123456", name="Staff")
    login_as("admin")
    assert "staff@school.org" in page(client.get("/users"))
    r = client.post(f"/users/{staff['id']}/role", data={"role": "coordinator"}, follow_redirects=True)
    assert "Role updated to Coordinator" in page(r)
    assert store.roles_for(staff["id"]) == ["coordinator"]
    client.post(f"/users/{staff['id']}/role", data={"role": "none"})
    assert store.roles_for(staff["id"]) == []


def test_admin_cannot_drop_own_admin_role(client, store, login_as):
    admin = login_as("admin")
    client.post(f"/users/{admin['id']}/role", data={"role": "secretary"})
    assert store.roles_for(admin["id"]) == ["admin"]


def test_users_page_is_admin_only(client, login_as):
    login_as("coordinator")
    r = client.get("/users", follow_redirects=True)
    assert "Access denied" in page(r)


def test_edit_onto_taken_enrollment_number_is_refused(client, store, login_as):
    first = store.insert_student(student_row(enrollment_number="A-1"))
    store.insert_student(student_row(enrollment_number="B-2", cpf="10987654321"))
    login_as("admin")
    r = client.post(f"/students/{first['id']}/edit", data=student_values(enrollment_number="B-2"))
    assert r.status_code == 200
    assert "Enrollment number already registered" in page(r)
    numbers = [s["enrollment_number"] for s in store.list_students()]
    assert sorted(numbers) == ["A-1", "B-2"]
