"""Employee schemas."""
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from worktrack.models.employee import EmployeeRole, EmployeeStatus


class EmployeeBase(BaseModel):
    """Base employee schema."""

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    username: str = Field(min_length=1)
    phone: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    joining_date: Optional[date] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE


class EmployeeCreate(EmployeeBase):
    """Employee creation schema."""

    role: EmployeeRole = EmployeeRole.EMPLOYEE


class EmployeeUpdate(BaseModel):
    """Employee update schema. Role is fixed once assigned."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    username: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    joining_date: Optional[date] = None
    status: Optional[EmployeeStatus] = None


class EmployeeResponse(EmployeeBase):
    """Employee response schema."""

    id: UUID
    role: EmployeeRole
    full_name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
