# masterxp/leveling.py
"""
XP / level rules.

Provides:
- apply_xp(current_xp, amount) -> (new_xp, new_level)   pure calculator
- level_for_xp, xp_into_level, xp_to_next_level           derived values
- add_xp(subject_id, amount) -> Account                   persisted grant
"""

import math
import numbers

from flask import current_app

from .errors import InvalidArgument

XP_PER_LEVEL = 100
XP_PER_TASK = 1
# largest value a BIGINT xp column holds
MAX_XP = 2**63 - 1


def _as_int(value, name):
    """Coerce an integral number to int, rejecting bools, strings and fractions."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidArgument(f"{name} must be an integer")
    if isinstance(value, numbers.Integral):
        return int(value)
    if not math.isfinite(value) or not float(value).is_integer():
        raise InvalidArgument(f"{name} must be an integer")
    return int(value)


def level_for_xp(xp):
    """Level 1 covers 0..99 XP, level 2 covers 100..199, and so on."""
    return int(xp or 0) // XP_PER_LEVEL + 1


def xp_into_level(xp):
    return int(xp or 0) % XP_PER_LEVEL


def xp_to_next_level(xp):
    return XP_PER_LEVEL - xp_into_level(xp)


def apply_xp(current_xp, amount):
    """
    Return (new_xp, new_level) after granting `amount` XP.
    Raises InvalidArgument for a non-positive or non-integer amount, or when
    the total would pass what a 64-bit column can hold.
    """
    current_xp = _as_int(current_xp, "current_xp")
    if current_xp < 0:
        raise InvalidArgument("current_xp must be non-negative")
    amount = _as_int(amount, "amount")
    if amount <= 0:
        raise InvalidArgument("amount must be a positive number")

    new_xp = current_xp + amount
    if new_xp > MAX_XP:
        raise InvalidArgument(f"xp cannot exceed {MAX_XP}")
    return new_xp, level_for_xp(new_xp)


def add_xp(subject_id, amount):
    """
    Grant XP to an account, creating it on first sight.
    The increment is a single UPDATE, so concurrent grants never lose each other.
    Commits any pending changes in the session along with the grant.
    Returns the saved Account.
    """
    # import lazily; models import this module for level_for_xp
    from . import store

    account = store.get_or_create_account(subject_id)
    try:
        apply_xp(account.xp, amount)
        account = store.increment_xp(subject_id, int(amount))
    except Exception:
        store.rollback()
        raise
    store.commit()
    current_app.logger.info(
        "granted %s xp to %s (xp=%s level=%s)", amount, subject_id, account.xp, account.level
    )
    return account
