"""
Serialization schemas using Marshmallow for the Check-in Tracker.

Auto schemas dump SQLAlchemy models to JSON-friendly dictionaries; the
password hash is never included. Plain schemas validate request bodies
before they reach the service layer.
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate, EXCLUDE
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema, auto_field

from .models import Manager, Organization, Group, Employee, Response, Status


class ManagerSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``Manager`` objects."""

    class Meta:
        model = Manager
        include_fk = True
        exclude = ("password_hash",)


class OrganizationSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = Organization
        include_fk = True


class GroupSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = Group
        include_fk = True


class EmployeeSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``Employee`` objects with their group name."""

    group_name = fields.Method("get_group_name")

    class Meta:
        model = Employee
        include_fk = True

    def get_group_name(self, employee: Employee):
        return employee.group.name if employee.group else None


class ResponseSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``Response`` objects."""

    status = fields.Enum(Status, by_value=True)
    comment = auto_field(validate=validate.Length(max=1000), allow_none=True)

    class Meta:
        model = Response
        include_fk = True


class TrendPointSchema(Schema):
    date = fields.Date()
    average = fields.Float()
    status = fields.String()
    count = fields.Integer()


class StatusCountsSchema(Schema):
    green = fields.Integer()
    amber = fields.Integer()
    red = fields.Integer()


class OrganizationReportSchema(Schema):
    organization_id = fields.Integer()
    days = fields.Integer()
    start_date = fields.Date()
    end_date = fields.Date()
    overall_status = fields.String()
    overall_average = fields.Float()
    total_responses = fields.Integer()
    status_counts = fields.Nested(StatusCountsSchema)
    response_rate = fields.Integer()
    total_employees = fields.Integer()
    trend_data = fields.List(fields.Nested(TrendPointSchema))


class GroupReportSchema(Schema):
    group_id = fields.Raw()
    group_name = fields.String()
    status = fields.String()
    average = fields.Float()
    total_responses = fields.Integer()
    employee_count = fields.Integer()
    status_counts = fields.Nested(StatusCountsSchema)


# Request bodies


class RegisterManagerSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True)
    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)


class OrganizationInputSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=120))
    employee_emails = fields.List(fields.String(), load_default=list)


class EmployeeInputSchema(Schema):
    """Either a single ``email`` or a list of ``emails``."""

    class Meta:
        unknown = EXCLUDE

    email = fields.String()
    emails = fields.List(fields.String())
    group_id = fields.Integer(allow_none=True, load_default=None)


class GroupAssignmentSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    group_id = fields.Integer(required=True, allow_none=True)


class NameSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=120))


class SubmitResponseSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    status = fields.Enum(Status, by_value=True, required=True)
    comment = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=1000))
    is_anonymous = fields.Boolean(load_default=False)
