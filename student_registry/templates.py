# --------- HTML templates (served through a DictLoader) ----------

BASE = """<!doctype html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<title>{% block title %}Student Registry{% endblock %}</title>
<style>
:root{--bg:#071428;--card:#0b1220;--accent:#06b6d4;--muted:#94a3b8;--danger:#f87171;--ok:#34d399;--warn:#fbbf24}
*{box-sizing:border-box;font-family:Inter,system-ui,Arial}
body{margin:0;background:linear-gradient(180deg,#071428 0%,#0b1220 80%);color:#e6eef6;padding:24px}
.app{max-width:1100px;margin:0 auto}
.header{display:flex;align-items:center;gap:16px;background:linear-gradient(90deg,rgba(255,255,255,0.02),rgba(255,255,255,0.01));padding:16px;border-radius:12px}
.logo{width:56px;height:56px;border-radius:10px;background:linear-gradient(135deg,var(--accent),#7c3aed);display:flex;align-items:center;justify-content:center;font-weight:700}
.title h1{margin:0;font-size:18px}
.title p{margin:4px 0 0;color:var(--muted);font-size:13px}
.card{background:linear-gradient(180deg,rgba(255,255,255,0.02),rgba(255,255,255,0.01));padding:14px;border-radius:12px;box-shadow:0 8px 28px rgba(2,6,23,0.6);margin-top:12px}
.controls{display:flex;gap:8px;align-items:center}
.btn{background:transparent;border:1px solid rgba(255,255,255,0.06);padding:8px 12px;border-radius:8px;color:inherit;cursor:pointer;text-decoration:none;font-size:14px}
.btn.primary{background:linear-gradient(90deg,var(--accent),#7c3aed);color:#041020;border:0}
.btn.danger{border-color:var(--danger);color:var(--danger)}
.grid{display:grid;grid-template-columns:1fr 1fr;gap:10px}
.grid .wide{grid-column:span 2}
.input, select, textarea{width:100%;background:transparent;border:1px solid rgba(255,255,255,0.06);padding:10px;border-radius:8px;color:inherit}
input:disabled, select:disabled{opacity:.5}
label{display:block;font-size:13px;color:var(--muted);margin-bottom:4px}
.error{color:var(--danger);font-size:12px;margin-top:4px}
.hr{height:1px;background:linear-gradient(90deg,rgba(255,255,255,0.02),rgba(255,255,255,0.03));margin:12px 0;border-radius:4px}
.stats{display:grid;grid-template-columns:repeat(4,1fr);gap:12px}
.stat .value{font-size:28px;font-weight:700}
table{width:100%;border-collapse:collapse}
th,td{text-align:left;padding:8px 6px;border-bottom:1px solid rgba(255,255,255,0.04);font-size:14px}
.mono{font-family:ui-monospace,monospace}
.badge{padding:2px 8px;border-radius:999px;font-size:12px;background:rgba(255,255,255,0.08)}
.badge.active{background:var(--ok);color:#041020}
.badge.inactive{background:var(--danger);color:#041020}
.badge.locked{background:var(--warn);color:#041020}
.badge.graduated{background:linear-gradient(90deg,var(--accent),#7c3aed);color:#041020}
.toast{padding:10px 12px;border-radius:8px;margin-top:12px;font-size:14px;background:rgba(255,255,255,0.04)}
.toast.success{border-left:4px solid var(--ok)}
.toast.danger{border-left:4px solid var(--danger)}
.toast.warning{border-left:4px solid var(--warn)}
.toast.info{border-left:4px solid var(--accent)}
.small{font-size:13px;color:var(--muted)}
dl{display:grid;grid-template-columns:1fr 2fr;gap:6px 16px;margin:0}
dt{color:var(--muted);font-size:13px}
dd{margin:0;font-size:14px;white-space:pre-wrap}
.footer{margin-top:14px;color:var(--muted);text-align:center;font-size:13px}
@media(max-width:900px){.stats,.grid{grid-template-columns:1fr}.grid .wide{grid-column:span 1}}
</style>
</head>
<body>
<div class="app">
  <div class="header">
    <div class="logo">SR</div>
    <div class="title">
      <h1>STUDENT REGISTRY</h1>
      <p>Academic records administration</p>
    </div>
    <div style="margin-left:auto" class="controls small">
      {% if user %}
        <span>Signed in: {{ user.name }} ({{ role.label }})</span>
        <a class="btn" href="{{ url_for('dashboard') }}">Dashboard</a>
        {% if role.can(Capability.MANAGE_USERS) %}<a class="btn" href="{{ url_for('list_users') }}">Users</a>{% endif %}
        <a class="btn" href="{{ url_for('logout') }}">Logout</a>
      {% else %}
        Not signed in
      {% endif %}
    </div>
  </div>

  {% for category, message in get_flashed_messages(with_categories=true) %}
    <div class="toast {{ category }}">{{ message }}</div>
  {% endfor %}

  {% block content %}{% endblock %}

  <div class="footer"><div class="small">Server time: {{ now }}</div></div>
</div>
</body>
</html>
"""

INDEX = """{% extends "base.html" %}
{% block content %}
<div class="card">
  <strong>Academic Management System</strong>
  <div class="small">Student records with access control, CPF masking and soft delete.</div>
  <div class="hr"></div>
  <div class="grid">
    <form method="post" action="{{ url_for('login') }}">
      <strong>Login</strong>
      <div class="hr"></div>
      <p><input name="email" class="input" placeholder="Email" required></p>
      <p><input name="password" type="password" class="input" placeholder="Password" required></p>
      <button class="btn primary" type="submit">Login</button>
    </form>
    <form method="post" action="{{ url_for('signup') }}">
      <strong>Create staff account</strong>
      <div class="hr"></div>
      <p><input name="name" class="input" placeholder="Full name"></p>
      <p><input name="email" class="input" placeholder="Email" required></p>
      <p><input name="password" type="password" class="input" placeholder="Password" required></p>
      <button class="btn" type="submit">Sign up</button>
    </form>
  </div>
</div>

<div class="card">
  <strong>User profiles</strong>
  <div class="hr"></div>
  <dl>
    <dt>Admin</dt><dd>Full access: create, edit, permanent delete, role assignment.</dd>
    <dt>Coordinator</dt><dd>Create and edit, status changes, full CPF, soft delete only.</dd>
    <dt>Secretary</dt><dd>Create and edit basic data, masked CPF.</dd>
  </dl>
</div>
{% endblock %}
"""

DASHBOARD = """{% extends "base.html" %}
{% block content %}
<div class="stats" style="margin-top:12px">
  <div class="card stat"><div class="small">Total students</div><div class="value">{{ view.stats.total }}</div></div>
  <div class="card stat"><div class="small">Active students</div><div class="value">{{ view.stats.active }}</div></div>
  <div class="card stat"><div class="small">Inactive students</div><div class="value">{{ view.stats.inactive }}</div></div>
  <div class="card stat"><div class="small">Locked enrollments</div><div class="value">{{ view.stats.locked }}</div></div>
</div>

<div class="card">
  <div style="display:flex;justify-content:space-between;align-items:center">
    <div><strong>Students</strong><div class="small">Manage student records</div></div>
    {% if view.can(Capability.CREATE) %}
      <a class="btn primary" href="{{ url_for('new_student') }}">New student</a>
    {% endif %}
  </div>
  <div class="hr"></div>
  <form method="get" action="{{ url_for('dashboard') }}" class="controls">
    <input name="q" class="input" value="{{ view.search }}" placeholder="Search by name, enrollment number or course...">
    <select name="status" class="input" style="width:180px">
      <option value="all"{% if view.status == 'all' %} selected{% endif %}>All</option>
      {% for s in statuses %}
        <option value="{{ s.value }}"{% if view.status == s.value %} selected{% endif %}>{{ s.label }}</option>
      {% endfor %}
    </select>
    <button class="btn" type="submit">Filter</button>
  </form>
  <div class="hr"></div>
  <table>
    <thead>
      <tr><th>Enrollment</th><th>Name</th><th>Course</th><th>CPF</th><th>Status</th><th style="text-align:right">Actions</th></tr>
    </thead>
    <tbody>
      {% for s in view.filtered %}
        <tr>
          <td class="mono">{{ s.enrollment_number }}</td>
          <td><strong>{{ s.name }}</strong></td>
          <td>{{ s.course }}</td>
          <td class="mono">{{ mask_cpf(s.cpf, view.role) }}</td>
          <td><span class="badge {{ s.status }}">{{ status_label(s.status) }}</span></td>
          <td style="text-align:right">
            <a class="btn" href="{{ url_for('view_student', sid=s.id) }}">View</a>
            {% if view.can(Capability.EDIT) %}
              <a class="btn" href="{{ url_for('edit_student', sid=s.id) }}">Edit</a>
            {% endif %}
            {% if view.can(Capability.DELETE) %}
              <a class="btn danger" href="{{ url_for('delete_student', sid=s.id) }}">Delete</a>
            {% endif %}
          </td>
        </tr>
      {% else %}
        <tr><td colspan="6" class="small" style="text-align:center;padding:24px">No students found</td></tr>
      {% endfor %}
    </tbody>
  </table>
</div>
{% endblock %}
"""

STUDENT_FORM = """{% extends "base.html" %}
{% macro field(name, label, type="text", required=false, wide=false) %}
  <div{% if wide %} class="wide"{% endif %}>
    <label for="{{ name }}">{{ label }}{% if required %} *{% endif %}</label>
    <input id="{{ name }}" name="{{ name }}" type="{{ type }}" class="input" value="{{ values[name] }}"
      {% if name == 'cpf' %}maxlength="11"{% endif %}{% if name in locked %} disabled{% endif %}>
    {% if errors[name] %}<div class="error">{{ errors[name] }}</div>{% endif %}
  </div>
{% endmacro %}
{% block content %}
<div class="card">
  <strong>{% if student %}Edit student{% else %}New student{% endif %}</strong>
  <div class="small">Fill in the student's data. Fields marked with * are required.</div>
  <div class="hr"></div>
  <form method="post">
    <div class="grid">
      {{ field("name", "Full name", required=true, wide=true) }}
      {{ field("cpf", "CPF", required=true) }}
      {{ field("rg", "RG") }}
      {{ field("birth_date", "Birth date", type="date", required=true) }}
      {{ field("enrollment_number", "Enrollment number", required=true) }}
      {{ field("email", "Email", type="email", wide=true) }}
      {{ field("phone", "Phone") }}
      {{ field("course", "Course", required=true) }}
      {{ field("entry_year", "Entry year", type="number") }}
      <div>
        <label for="status">Status *</label>
        <select id="status" name="status" class="input"{% if 'status' in locked %} disabled{% endif %}>
          {% for s in statuses %}
            <option value="{{ s.value }}"{% if values.status == s.value %} selected{% endif %}>{{ s.label }}</option>
          {% endfor %}
        </select>
        {% if errors.status %}<div class="error">{{ errors.status }}</div>{% endif %}
      </div>
      {{ field("address", "Address", wide=true) }}
      <div class="wide">
        <label for="notes">Notes</label>
        <textarea id="notes" name="notes" rows="3">{{ values.notes }}</textarea>
      </div>
    </div>
    <div class="hr"></div>
    <div class="controls" style="justify-content:flex-end">
      <a class="btn" href="{{ url_for('dashboard') }}">Cancel</a>
      <button class="btn primary" type="submit">{% if student %}Update{% else %}Create{% endif %}</button>
    </div>
  </form>
</div>
{% endblock %}
"""

STUDENT_DETAIL = """{% extends "base.html" %}
{% block content %}
<div class="card">
  <div style="display:flex;justify-content:space-between;align-items:center">
    <div><strong>Student details</strong> <span class="badge {{ student.status }}">{{ status_label(student.status) }}</span></div>
    <a class="btn" href="{{ url_for('dashboard') }}">Close</a>
  </div>
  {% for title, rows in sections %}
    <div class="hr"></div>
    <strong>{{ title }}</strong>
    <dl style="margin-top:8px">
      {% for label, value in rows %}<dt>{{ label }}</dt><dd>{{ value }}</dd>{% endfor %}
    </dl>
  {% endfor %}
</div>
{% endblock %}
"""

STUDENT_DELETE = """{% extends "base.html" %}
{% block content %}
<div class="card">
  <strong>Confirm deletion</strong>
  <div class="hr"></div>
  <p>{{ student.enrollment_number }} &mdash; {{ student.name }}</p>
  {% if hard_delete %}
    <p class="small">This cannot be undone. The student will be permanently removed from the system.</p>
  {% else %}
    <p class="small">The student will be marked as inactive in the system.</p>
  {% endif %}
  <form method="post" class="controls">
    <a class="btn" href="{{ url_for('dashboard') }}">Cancel</a>
    <button class="btn danger" type="submit">{% if hard_delete %}Delete{% else %}Deactivate{% endif %}</button>
  </form>
</div>
{% endblock %}
"""

USERS = """{% extends "base.html" %}
{% block content %}
<div class="card">
  <strong>Users</strong>
  <div class="small">Assign one role per staff account.</div>
  <div class="hr"></div>
  <table>
    <thead><tr><th>Name</th><th>Email</th><th>Role</th><th></th></tr></thead>
    <tbody>
      {% for u in users %}
        <tr>
          <td>{{ u.name }}</td>
          <td>{{ u.email }}</td>
          <td>{{ u.role.label }}</td>
          <td style="text-align:right">
            <form method="post" action="{{ url_for('set_user_role', user_id=u.id) }}" class="controls" style="justify-content:flex-end">
              <select name="role" class="input" style="width:160px">
                <option value="none">No role</option>
                {% for r in assignable_roles %}
                  <option value="{{ r.value }}"{% if u.role == r %} selected{% endif %}>{{ r.label }}</option>
                {% endfor %}
              </select>
              <button class="btn" type="submit">Save</button>
            </form>
          </td>
        </tr>
      {% endfor %}
    </tbody>
  </table>
</div>
{% endblock %}
"""

TEMPLATES = {
    "base.html": BASE,
    "index.html": INDEX,
    "dashboard.html": DASHBOARD,
    "student_form.html": STUDENT_FORM,
    "student_detail.html": STUDENT_DETAIL,
    "student_delete.html": STUDENT_DELETE,
    "users.html": USERS,
}
