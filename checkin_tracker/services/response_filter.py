"""In-memory narrowing of response records."""
from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from ..models import Response


def filter_responses(
    responses: Iterable[Response],
    organization_id: int,
    group_id: Optional[int] = None,
    employee_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[Response]:
    """Return the responses matching every given predicate.

    Date bounds are inclusive and compared against ``response_date``,
    never ``submitted_at``. Either bound may be omitted. Relative order
    of the input is preserved, so filtering an already filtered list
    with the same arguments returns it unchanged.
    """
    matched = []
    for response in responses:
        if response.organization_id != organization_id:
            continue
        if group_id is not None and response.group_id != group_id:
            continue
        if employee_id is not None and response.employee_id != employee_id:
            continue
        if start_date is not None and response.response_date < start_date:
            continue
        if end_date is not None and response.response_date > end_date:
            continue
        matched.append(response)
    return matched
