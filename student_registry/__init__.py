"""Student registry console: role-gated administration of student records."""

__version__ = "0.1.0"
