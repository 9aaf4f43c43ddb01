"""
Schemas for the registry console

StudentForm validates what staff submit from the create/edit form. Stored rows
stay plain dicts (see store.STUDENT_FIELDS); the form is the only place a
student record is validated before it reaches the backend.
"""

import datetime as dt
import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class Status(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    LOCKED = "locked"
    GRADUATED = "graduated"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class StudentForm(BaseModel):
    """Create/edit payload for a student record"""
    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    name: str = Field(..., min_length=3, max_length=200, description="Full name")
    birth_date: dt.date = Field(..., description="Date of birth")
    cpf: str = Field(..., pattern=r"^[0-9]{11}$", description="National ID, 11 digits")
    rg: Optional[str] = Field(None)
    email: Optional[EmailStr] = Field(None)
    phone: Optional[str] = Field(None)
    address: Optional[str] = Field(None)
    enrollment_number: str = Field(..., min_length=1)
    course: str = Field(..., min_length=1)
    entry_year: Optional[int] = Field(None, ge=1900, le=2100)
    status: Status = Field(...)
    notes: Optional[str] = Field(None)

    @field_validator("birth_date", "email", "entry_year", mode="before")
    @classmethod
    def blank_as_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v
