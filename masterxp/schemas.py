# masterxp/schemas.py
"""
Request parsing per endpoint.

Each parser takes the decoded JSON body (or a query value) and returns only
the fields the endpoint accepts, raising InvalidArgument for bad input.
"""

import math
import numbers
from datetime import date

from .errors import InvalidArgument
from .leveling import MAX_XP

MAX_TEXT_LENGTH = 500


def _require_object(body):
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise InvalidArgument("request body must be a JSON object")
    return body


def _clean_text(value):
    if not isinstance(value, str):
        return ""
    return value.strip()


def parse_date(value):
    """Parse YYYY-MM-DD into a date; anything else (times included) is rejected."""
    if not value or not isinstance(value, str):
        raise InvalidArgument("date is required (YYYY-MM-DD)")
    value = value.strip()
    if len(value) != 10:
        raise InvalidArgument("date must be YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidArgument("date must be YYYY-MM-DD") from None


def parse_xp_grant(body):
    body = _require_object(body)
    amount = body.get("amount")
    if isinstance(amount, bool) or not isinstance(amount, numbers.Real):
        raise InvalidArgument("amount must be a positive number")
    if not isinstance(amount, numbers.Integral):
        if not math.isfinite(amount):
            raise InvalidArgument("amount must be a positive number")
        if not float(amount).is_integer():
            raise InvalidArgument("amount must be a whole number")
    if amount <= 0:
        raise InvalidArgument("amount must be a positive number")
    if amount > MAX_XP:
        raise InvalidArgument(f"amount cannot exceed {MAX_XP}")
    return int(amount)


def parse_new_task(body):
    body = _require_object(body)
    text = _clean_text(body.get("text"))
    if not text:
        raise InvalidArgument("text is required")
    if len(text) > MAX_TEXT_LENGTH:
        raise InvalidArgument(f"text must be at most {MAX_TEXT_LENGTH} characters")
    return {"text": text, "date": parse_date(body.get("date"))}


def parse_task_patch(body):
    """
    Whitelist completed / xp_awarded / text. Wrong types and unknown
    fields are dropped; a text field that strips to nothing is rejected.
    """
    body = _require_object(body)
    patch = {}

    if isinstance(body.get("completed"), bool):
        patch["completed"] = body["completed"]

    awarded = body.get("xp_awarded", body.get("xpAwarded"))
    if isinstance(awarded, bool):
        patch["xp_awarded"] = awarded

    if isinstance(body.get("text"), str):
        text = body["text"].strip()
        if not text:
            raise InvalidArgument("text must not be empty")
        if len(text) > MAX_TEXT_LENGTH:
            raise InvalidArgument(f"text must be at most {MAX_TEXT_LENGTH} characters")
        patch["text"] = text

    return patch
