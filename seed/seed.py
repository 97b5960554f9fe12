"""Seed script for demo data.

Creates a demo manager with an organization, two groups and a handful
of employees so the dashboard has something to show. Run it with
``python -m seed.seed`` from the repository root.
"""
from __future__ import annotations

import logging

from checkin_tracker import create_app, db
from checkin_tracker.auth import AuthContext
from checkin_tracker.models import Employee
from checkin_tracker.services.employee_service import assign_group
from checkin_tracker.services.group_service import create_group
from checkin_tracker.services.manager_service import register_manager
from checkin_tracker.services.organization_service import create_organization

logger = logging.getLogger(__name__)

EMPLOYEE_EMAILS = [
    "alex@example.com",
    "sam@example.com",
    "jordan@example.com",
    "casey@example.com",
    "riley@example.com",
]


def run_seeds() -> None:
    """Insert a demo manager, organization, groups and employees."""
    app = create_app()
    with app.app_context():
        db.create_all()
        manager = register_manager("Demo Manager", "manager@example.com", "password123")
        auth = AuthContext(manager_id=manager.id)
        organization, _ = create_organization(auth, "Demo Organization", EMPLOYEE_EMAILS)
        auth = auth.with_organization(organization.id)
        engineering = create_group(auth, organization.id, "Engineering")
        support = create_group(auth, organization.id, "Support")
        employees = Employee.query.filter_by(organization_id=organization.id).order_by(Employee.id).all()
        for index, employee in enumerate(employees[:4]):
            assign_group(auth, employee.id, engineering.id if index % 2 == 0 else support.id)
        logger.info("Seed data inserted for organization %s", organization.id)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_seeds()
