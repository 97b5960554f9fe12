"""
Database models for the Check-in Tracker.

Managers register and own an organization. Organizations hold employees,
optionally arranged into groups. Every day each active employee receives
an emailed link carrying an ``EmailToken``; following the link lets the
employee submit one ``Response`` for that UTC day. Resubmitting on the
same day overwrites the stored response, which the unique constraint on
``(employee_id, response_date)`` guarantees.

Employees are deactivated rather than deleted so that their historical
responses keep counting towards past analytics.
"""

from __future__ import annotations

import enum
from datetime import datetime, date
from typing import Optional, List

from werkzeug.security import generate_password_hash, check_password_hash

from . import db
from .util.clock import utcnow


class Status(enum.Enum):
    """Daily wellbeing status.

    ``green`` is positive, ``amber`` neutral and ``red`` negative.
    """
    GREEN = "green"
    AMBER = "amber"
    RED = "red"


class Manager(db.Model):
    __allow_unmapped__ = True
    """A manager account. Passwords are stored as salted hashes only."""
    __tablename__ = "managers"

    id: int = db.Column(db.Integer, primary_key=True)
    name: str = db.Column(db.String(100), nullable=False)
    email: str = db.Column(db.String(120), unique=True, nullable=False)
    password_hash: str = db.Column(db.String(256), nullable=False)
    created_at: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)

    organizations: List[Organization] = db.relationship("Organization", back_populates="manager")

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def __repr__(self) -> str:
        return f"<Manager {self.email}>"


class Organization(db.Model):
    __allow_unmapped__ = True
    """An organization run by a single manager."""
    __tablename__ = "organizations"

    id: int = db.Column(db.Integer, primary_key=True)
    name: str = db.Column(db.String(120), nullable=False)
    manager_id: int = db.Column(db.Integer, db.ForeignKey("managers.id"), nullable=False, index=True)
    created_at: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)

    manager: Manager = db.relationship("Manager", back_populates="organizations")
    employees: List[Employee] = db.relationship("Employee", back_populates="organization")
    groups: List[Group] = db.relationship("Group", back_populates="organization")

    def __repr__(self) -> str:
        return f"<Organization {self.name}>"


class Group(db.Model):
    __allow_unmapped__ = True
    """A named team within an organization."""
    __tablename__ = "groups"

    id: int = db.Column(db.Integer, primary_key=True)
    name: str = db.Column(db.String(100), nullable=False)
    organization_id: int = db.Column(db.Integer, db.ForeignKey("organizations.id"), nullable=False, index=True)
    created_at: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)

    organization: Organization = db.relationship("Organization", back_populates="groups")
    employees: List[Employee] = db.relationship("Employee", back_populates="group")

    __table_args__ = (
        db.UniqueConstraint("organization_id", "name", name="uix_org_group_name"),
    )

    def __repr__(self) -> str:
        return f"<Group {self.name}>"


class Employee(db.Model):
    __allow_unmapped__ = True
    """An employee who receives the daily check-in email.

    The email is unique within an organization. ``group_id`` may be
    reassigned or cleared at any time.
    """
    __tablename__ = "employees"

    id: int = db.Column(db.Integer, primary_key=True)
    email: str = db.Column(db.String(120), nullable=False, index=True)
    organization_id: int = db.Column(db.Integer, db.ForeignKey("organizations.id"), nullable=False, index=True)
    group_id: Optional[int] = db.Column(db.Integer, db.ForeignKey("groups.id"), nullable=True, index=True)
    is_active: bool = db.Column(db.Boolean, nullable=False, default=True)
    created_at: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)

    organization: Organization = db.relationship("Organization", back_populates="employees")
    group: Optional[Group] = db.relationship("Group", back_populates="employees")
    responses: List[Response] = db.relationship("Response", back_populates="employee")
    tokens: List[EmailToken] = db.relationship(
        "EmailToken", back_populates="employee", cascade="all, delete-orphan"
    )

    __table_args__ = (
        db.UniqueConstraint("organization_id", "email", name="uix_org_employee_email"),
    )

    def __repr__(self) -> str:
        return f"<Employee {self.email} active={self.is_active}>"


class Response(db.Model):
    __allow_unmapped__ = True
    """A daily wellbeing response.

    ``organization_id`` and ``group_id`` are copied from the employee at
    submission time. ``response_date`` is the UTC calendar day and,
    together with ``employee_id``, the natural key; ``submitted_at`` is
    the raw timestamp of the latest submission for that day.
    """
    __tablename__ = "responses"

    id: int = db.Column(db.Integer, primary_key=True)
    employee_id: int = db.Column(db.Integer, db.ForeignKey("employees.id"), nullable=False, index=True)
    organization_id: int = db.Column(db.Integer, db.ForeignKey("organizations.id"), nullable=False, index=True)
    group_id: Optional[int] = db.Column(
        db.Integer, db.ForeignKey("groups.id", ondelete="SET NULL"), nullable=True, index=True
    )
    status: Status = db.Column(db.Enum(Status), nullable=False)
    comment: Optional[str] = db.Column(db.String(1000))
    is_anonymous: bool = db.Column(db.Boolean, nullable=False, default=False)
    response_date: date = db.Column(db.Date, nullable=False, index=True)
    submitted_at: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)

    employee: Employee = db.relationship("Employee", back_populates="responses")
    group: Optional[Group] = db.relationship("Group")

    __table_args__ = (
        db.UniqueConstraint("employee_id", "response_date", name="uix_employee_day"),
        db.Index("ix_responses_org_date", "organization_id", "response_date"),
    )

    def __repr__(self) -> str:
        return f"<Response employee={self.employee_id} {self.response_date} {self.status.value}>"


class EmailToken(db.Model):
    __allow_unmapped__ = True
    """Single-use, time-limited credential embedded in a check-in link."""
    __tablename__ = "email_tokens"

    id: int = db.Column(db.Integer, primary_key=True)
    token: str = db.Column(db.String(64), unique=True, nullable=False, index=True)
    employee_id: int = db.Column(db.Integer, db.ForeignKey("employees.id"), nullable=False, index=True)
    expires_at: datetime = db.Column(db.DateTime, nullable=False)
    used: bool = db.Column(db.Boolean, nullable=False, default=False)
    created_at: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)

    employee: Employee = db.relationship("Employee", back_populates="tokens")

    def __repr__(self) -> str:
        return f"<EmailToken employee={self.employee_id} used={self.used}>"
