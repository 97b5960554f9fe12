"""Query-string parsing helpers shared by the route handlers."""
from __future__ import annotations

from datetime import date
from typing import Optional

from dateutil.parser import parse as parse_date  # type: ignore
from flask import request

from ..errors import ValidationError


def int_arg(name: str, default: int, minimum: int = 1) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"'{name}' must be an integer.", {name: raw})
    if value < minimum:
        raise ValidationError(f"'{name}' must be at least {minimum}.", {name: raw})
    return value


def date_arg(name: str) -> Optional[date]:
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return parse_date(raw).date()
    except (ValueError, OverflowError):
        raise ValidationError(f"Invalid '{name}' date. Use ISO format YYYY-MM-DD.", {name: raw})


def bool_arg(name: str, default: bool) -> bool:
    raw = request.args.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off")
