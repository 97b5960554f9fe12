from datetime import date

from checkin_tracker.models import Employee, Group, Response, Status
from checkin_tracker.services.analytics_service import (
    build_group_summaries,
    build_organization_summary,
    response_rate,
)

TODAY = date(2024, 6, 10)
YESTERDAY = date(2024, 6, 9)

GROUPS = [Group(id=1, name="Engineering", organization_id=1), Group(id=2, name="Sales", organization_id=1)]

EMPLOYEES = [
    Employee(id=1, email="a@x.io", organization_id=1, group_id=1, is_active=True),
    Employee(id=2, email="b@x.io", organization_id=1, group_id=1, is_active=True),
    Employee(id=3, email="c@x.io", organization_id=1, group_id=2, is_active=True),
    Employee(id=4, email="d@x.io", organization_id=1, group_id=None, is_active=True),
    Employee(id=5, email="e@x.io", organization_id=1, group_id=2, is_active=False),
]


def _response(employee_id, status, day, group_id=None):
    return Response(
        employee_id=employee_id, organization_id=1, group_id=group_id, status=status, response_date=day
    )


RESPONSES = [
    _response(1, Status.GREEN, YESTERDAY, 1),
    _response(2, Status.AMBER, YESTERDAY, 1),
    _response(1, Status.GREEN, TODAY, 1),
    _response(3, Status.RED, TODAY, 2),
    _response(5, Status.RED, YESTERDAY, 2),
]


def test_organization_summary():
    summary = build_organization_summary(RESPONSES, EMPLOYEES, TODAY)
    assert summary["total_employees"] == 4
    assert summary["total_responses"] == 5
    assert summary["status_counts"] == {"green": 2, "amber": 1, "red": 2}
    assert summary["overall_average"] == 2.0
    assert summary["overall_status"] == "amber"
    assert summary["response_rate"] == 50
    assert [p["date"] for p in summary["trend_data"]] == [YESTERDAY, TODAY]


def test_organization_summary_without_data():
    summary = build_organization_summary([], [], TODAY)
    assert summary["overall_status"] == "none"
    assert summary["overall_average"] == 0
    assert summary["response_rate"] == 0
    assert summary["trend_data"] == []


def test_response_rate_rounds_half_up():
    assert response_rate(1, 8) == 13  # 12.5
    assert response_rate(1, 3) == 33
    assert response_rate(2, 3) == 67
    assert response_rate(3, 0) == 0


def test_group_summaries_cover_active_members_only():
    by_id = {s["group_id"]: s for s in build_group_summaries(RESPONSES, EMPLOYEES, GROUPS)}

    assert by_id[1]["employee_count"] == 2
    assert by_id[1]["total_responses"] == 3
    assert by_id[1]["status"] == "green"

    # Employee 5 is inactive, so their response is not part of Sales.
    assert by_id[2]["employee_count"] == 1
    assert by_id[2]["status_counts"] == {"green": 0, "amber": 0, "red": 1}

    assert by_id["ungrouped"]["group_name"] == "No Group"
    assert by_id["ungrouped"]["employee_count"] == 1
    assert by_id["ungrouped"]["status"] == "none"


def test_group_employee_counts_add_up_to_active_total():
    summaries = build_group_summaries(RESPONSES, EMPLOYEES, GROUPS)
    active = build_organization_summary(RESPONSES, EMPLOYEES, TODAY)["total_employees"]
    assert sum(s["employee_count"] for s in summaries) == active


def test_ungrouped_entry_omitted_when_everyone_has_a_group():
    employees = [e for e in EMPLOYEES if e.group_id is not None]
    ids = [s["group_id"] for s in build_group_summaries(RESPONSES, employees, GROUPS)]
    assert ids == [1, 2]
