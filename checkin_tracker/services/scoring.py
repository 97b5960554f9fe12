"""Status scoring.

Reduces a list of daily statuses to an average score and a qualitative
bucket. Weights are green=3, amber=2 and red=1. An average of 2.5 or
more is ``green``, 1.5 up to 2.5 is ``amber`` and anything lower is
``red``.

An empty list is not an error: it scores an average of ``0`` and the
bucket ``none``. Every report uses this same no-data bucket.
"""
from __future__ import annotations

from typing import Iterable, Union

from ..models import Status

STATUS_WEIGHTS = {
    Status.GREEN: 3,
    Status.AMBER: 2,
    Status.RED: 1,
}

NO_DATA = "none"

GREEN_THRESHOLD = 2.5
AMBER_THRESHOLD = 1.5

StatusLike = Union[Status, str]


def _as_status(value: StatusLike) -> Status:
    return value if isinstance(value, Status) else Status(value)


def classify(average: float) -> str:
    """Return the bucket label for a non-empty ``average``."""
    if average >= GREEN_THRESHOLD:
        return Status.GREEN.value
    if average >= AMBER_THRESHOLD:
        return Status.AMBER.value
    return Status.RED.value


def score_statuses(statuses: Iterable[StatusLike]) -> dict:
    """Compute the average score and bucket of ``statuses``.

    Parameters
    ----------
    statuses: Iterable[Status | str]
        Status members or their labels (``"green"``, ``"amber"``,
        ``"red"``).

    Returns
    -------
    dict
        ``{"average": float, "status": str}``. The average lies in
        ``[1, 3]`` for non-empty input and is ``0`` otherwise.
    """
    weights = [STATUS_WEIGHTS[_as_status(s)] for s in statuses]
    if not weights:
        return {"average": 0, "status": NO_DATA}
    average = sum(weights) / len(weights)
    return {"average": average, "status": classify(average)}


def count_statuses(statuses: Iterable[StatusLike]) -> dict[str, int]:
    """Tally statuses into a ``{"green": n, "amber": n, "red": n}`` histogram."""
    counts = {status.value: 0 for status in Status}
    for s in statuses:
        counts[_as_status(s).value] += 1
    return counts
