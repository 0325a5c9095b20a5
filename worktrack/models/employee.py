"""Employee model."""
from enum import Enum
import uuid

from sqlalchemy import Column, Date, DateTime, Enum as SQLEnum, String

from worktrack.database import Base
from worktrack.db.types import GUID
from worktrack.utils.timeutils import utcnow


class EmployeeRole(str, Enum):
    """Principal role."""

    DIRECTOR = "Director"
    PROJECT_HEAD = "Project Head"
    EMPLOYEE = "Employee"


class EmployeeStatus(str, Enum):
    """Employment status."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"
    ON_LEAVE = "On Leave"


class Employee(Base):
    """Employee model. Role is fixed once assigned."""

    __tablename__ = "employees"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    position = Column(String(100), nullable=True)
    department = Column(String(100), nullable=True)
    joining_date = Column(Date, nullable=True)
    status = Column(SQLEnum(EmployeeStatus), default=EmployeeStatus.ACTIVE, nullable=False, index=True)
    role = Column(SQLEnum(EmployeeRole), default=EmployeeRole.EMPLOYEE, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
