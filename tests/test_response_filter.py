from datetime import date

from checkin_tracker.models import Response, Status
from checkin_tracker.services.response_filter import filter_responses


def _response(rid, employee_id, day, organization_id=1, group_id=None):
    return Response(
        id=rid,
        employee_id=employee_id,
        organization_id=organization_id,
        group_id=group_id,
        status=Status.GREEN,
        response_date=day,
    )


POOL = [
    _response(1, 10, date(2024, 3, 1), group_id=5),
    _response(2, 11, date(2024, 3, 2)),
    _response(3, 10, date(2024, 3, 3), group_id=5),
    _response(4, 12, date(2024, 3, 3), organization_id=2),
    _response(5, 11, date(2024, 3, 5), group_id=6),
]


def _ids(responses):
    return [r.id for r in responses]


def test_filters_by_organization_preserving_order():
    assert _ids(filter_responses(POOL, 1)) == [1, 2, 3, 5]


def test_filters_by_group_and_employee():
    assert _ids(filter_responses(POOL, 1, group_id=5)) == [1, 3]
    assert _ids(filter_responses(POOL, 1, employee_id=11)) == [2, 5]


def test_inclusive_date_bounds():
    matched = filter_responses(POOL, 1, start_date=date(2024, 3, 2), end_date=date(2024, 3, 3))
    assert _ids(matched) == [2, 3]


def test_open_ended_bounds():
    assert _ids(filter_responses(POOL, 1, start_date=date(2024, 3, 3))) == [3, 5]
    assert _ids(filter_responses(POOL, 1, end_date=date(2024, 3, 1))) == [1]


def test_filtering_is_idempotent():
    kwargs = {"group_id": 5, "start_date": date(2024, 3, 2)}
    once = filter_responses(POOL, 1, **kwargs)
    assert filter_responses(once, 1, **kwargs) == once
