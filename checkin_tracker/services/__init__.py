"""Service layer for the Check-in Tracker.

Business logic that sits between the Flask route handlers and the
database models. Nothing in this package performs HTTP handling:
services return plain Python data or model instances and raise the
exceptions defined in ``checkin_tracker.errors``.

The aggregation core (``scoring``, ``response_filter``, ``trend`` and
the ``build_*`` functions of ``analytics_service``) is pure and works on
records that have already been loaded.
"""

from .scoring import score_statuses, count_statuses
from .response_filter import filter_responses
from .trend import build_trend, trailing_days
from .analytics_service import (
    build_group_summaries,
    build_organization_summary,
    build_trend_series,
    group_report,
    organization_report,
)

__all__ = [
    "score_statuses",
    "count_statuses",
    "filter_responses",
    "build_trend",
    "trailing_days",
    "build_group_summaries",
    "build_organization_summary",
    "build_trend_series",
    "group_report",
    "organization_report",
]
