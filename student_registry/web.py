#!/usr/bin/env python3
"""
web.py - Flask console for student records.

- Staff sign in, then create, view, edit and delete student records.
- What each page offers depends on the signed-in user's role (see roles.py).
- Backend failures surface as flash messages; the page stays usable.
- Run:
    export PORT=8080
    python3 -m student_registry.web
  Or with Gunicorn:
    gunicorn student_registry.web:app --bind 0.0.0.0:$PORT
"""

import time
from functools import wraps

from flask import (
    Flask, current_app, flash, g, jsonify, redirect, render_template, request,
    session, url_for,
)
from jinja2 import DictLoader

from student_registry import config
from student_registry.app_logger import get_logger, setup_logging
from student_registry.details import detail_sections, status_label
from student_registry.forms import form_defaults, locked_fields, read_submission, save_student
from student_registry.masking import mask_cpf
from student_registry.records import (
    DashboardView, build_dashboard, delete_failure_message, delete_student as remove_student,
)
from student_registry.roles import ASSIGNABLE_ROLES, Capability, Role, parse_role, resolve_role
from student_registry.schemas import Status
from student_registry.store import BackendError, StudentStore
from student_registry.templates import TEMPLATES

log = get_logger("web")


def get_store() -> StudentStore:
    return current_app.extensions["student_store"]


def ensure_default_admin(store, email, password):
    """Create the configured admin account if no admin exists."""
    if any(Role.ADMIN.value in store.roles_for(u["id"]) for u in store.list_users()):
        return
    user = store.authenticate(email, password)
    if user is None:
        user = store.create_user(email, password, name="Administrator")
    store.assign_role(user["id"], Role.ADMIN.value)
    log.info("seeded default admin %s", email)


def login_required(capability=None):
    def deco(f):
        @wraps(f)
        def wrapped(*args, **kwargs):
            if g.user is None:
                if "user_id" in session:
                    session.pop("user_id", None)
                    flash("Session expired, please log in again", "warning")
                else:
                    flash("Please login first", "warning")
                return redirect(url_for("index"))
            if capability and not g.role.can(capability):
                log.warning("denied %s to %s (%s)", request.path, g.user["email"], g.role.value)
                flash("Access denied", "danger")
                return redirect(url_for("dashboard"))
            return f(*args, **kwargs)
        return wrapped
    return deco


def find_student(sid):
    student = get_store().get_student(sid)
    if student is None:
        flash("Student not found", "danger")
    return student


def create_app(store=None, **overrides) -> Flask:
    setup_logging()
    app = Flask(__name__)
    app.config.update(config.as_flask_config())
    app.config.update(overrides)
    app.jinja_loader = DictLoader(TEMPLATES)
    app.jinja_env.globals.update(
        Capability=Capability,
        mask_cpf=mask_cpf,
        status_label=status_label,
        statuses=list(Status),
    )
    app.extensions["student_store"] = store if store is not None else StudentStore()

    ensure_default_admin(app.extensions["student_store"],
                         app.config["DEFAULT_ADMIN_EMAIL"], app.config["DEFAULT_ADMIN_PASSWORD"])

    @app.before_request
    def load_user():
        store = get_store()
        g.user = store.get_user(session.get("user_id"))
        g.role = resolve_role(store, g.user["id"]) if g.user else Role.NONE

    @app.context_processor
    def page_context():
        return dict(user=g.get("user"), role=g.get("role", Role.NONE),
                    now=time.strftime("%Y-%m-%d %H:%M:%S"))

    register_routes(app)
    return app


# --------- Routes ----------
def register_routes(app):

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"}), 200

    @app.route("/", methods=["GET"])
    def index():
        if g.user:
            return redirect(url_for("dashboard"))
        return render_template("index.html")

    @app.route("/login", methods=["POST"])
    def login():
        email = (request.form.get("email") or "").strip().lower()
        password = request.form.get("password") or ""
        user = get_store().authenticate(email, password)
        if not user:
            log.info("failed login for %s", email)
            flash("Invalid credentials", "danger")
            return redirect(url_for("index"))
        session["user_id"] = user["id"]
        log.info("login %s", email)
        flash("Logged in", "success")
        return redirect(url_for("dashboard"))

    # Signup creates a staff account without a role; an admin assigns one later
    @app.route("/signup", methods=["POST"])
    def signup():
        name = (request.form.get("name") or "").strip()
        email = (request.form.get("email") or "").strip().lower()
        password = request.form.get("password") or ""
        try:
            user = get_store().create_user(email, password, name=name)
        except BackendError as e:
            flash(str(e), "danger")
            return redirect(url_for("index"))
        session["user_id"] = user["id"]
        flash("Account created. An administrator must assign your role.", "success")
        return redirect(url_for("dashboard"))

    @app.route("/logout")
    def logout():
        session.pop("user_id", None)
        flash("Logged out", "info")
        return redirect(url_for("index"))

    @app.route("/dashboard")
    @login_required()
    def dashboard():
        try:
            view = build_dashboard(get_store(), g.role, request.args.get("q", ""), request.args.get("status"))
        except BackendError as e:
            log.error("loading students failed: %s", e)
            flash("Error loading students", "danger")
            view = DashboardView(role=g.role, records=[])
        return render_template("dashboard.html", view=view)

    @app.route("/students/new", methods=["GET", "POST"])
    @login_required(Capability.CREATE)
    def new_student():
        return student_form(None)

    @app.route("/students/<sid>/edit", methods=["GET", "POST"])
    @login_required(Capability.EDIT)
    def edit_student(sid):
        student = find_student(sid)
        if student is None:
            return redirect(url_for("dashboard"))
        return student_form(student)

    def student_form(student):
        locked = locked_fields(g.role, editing=student is not None)
        values, errors = form_defaults(student), {}
        if request.method == "POST":
            form, values, errors = read_submission(request.form, g.role, student)
            if form is not None:
                try:
                    save_student(get_store(), form, g.role, student)
                except BackendError as e:
                    log.error("saving student failed: %s", e)
                    flash(str(e) or "Error saving student", "danger")
                else:
                    flash("Student updated" if student else "Student created", "success")
                    return redirect(url_for("dashboard"))
        return render_template("student_form.html", student=student, values=values,
                               errors=errors, locked=locked)

    @app.route("/students/<sid>")
    @login_required(Capability.VIEW)
    def view_student(sid):
        student = find_student(sid)
        if student is None:
            return redirect(url_for("dashboard"))
        return render_template("student_detail.html", student=student,
                               sections=detail_sections(student, g.role))

    @app.route("/students/<sid>/delete", methods=["GET", "POST"])
    @login_required(Capability.DELETE)
    def delete_student(sid):
        student = find_student(sid)
        if student is None:
            return redirect(url_for("dashboard"))
        if request.method == "GET":
            return render_template("student_delete.html", student=student,
                                   hard_delete=g.role.can(Capability.HARD_DELETE))
        try:
            message = remove_student(get_store(), sid, g.role)
        except BackendError as e:
            log.error("deleting student %s failed: %s", sid, e)
            flash(delete_failure_message(g.role), "danger")
        else:
            flash(message, "success")
        return redirect(url_for("dashboard"))

    @app.route("/users")
    @login_required(Capability.MANAGE_USERS)
    def list_users():
        store = get_store()
        users = [dict(u, role=resolve_role(store, u["id"])) for u in store.list_users()]
        return render_template("users.html", users=users, assignable_roles=ASSIGNABLE_ROLES)

    @app.route("/users/<user_id>/role", methods=["POST"])
    @login_required(Capability.MANAGE_USERS)
    def set_user_role(user_id):
        role = parse_role(request.form.get("role"))
        if user_id == g.user["id"] and role is not Role.ADMIN:
            flash("You cannot remove your own admin role", "warning")
            return redirect(url_for("list_users"))
        store = get_store()
        if store.get_user(user_id) is None:
            flash("User not found", "danger")
            return redirect(url_for("list_users"))
        try:
            store.revoke_roles(user_id)
            if role is not Role.NONE:
                store.assign_role(user_id, role.value)
        except BackendError as e:
            flash(str(e), "danger")
        else:
            flash(f"Role updated to {role.label}", "success")
        return redirect(url_for("list_users"))


app = create_app()

# Start server (bind to PORT when run directly)
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=config.PORT, debug=False)
