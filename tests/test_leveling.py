"""Tests for masterxp/leveling.py: the XP/level calculator and persisted grants."""

import pytest

from masterxp import leveling
from masterxp.errors import InvalidArgument
from masterxp.leveling import apply_xp, level_for_xp


class TestApplyXp:
    """Pure calculator."""

    @pytest.mark.parametrize(
        "xp, amount, expected",
        [
            (0, 1, (1, 1)),
            (99, 1, (100, 2)),
            (199, 1, (200, 3)),
            (50, 49, (99, 1)),
            (0, 250, (250, 3)),
        ],
    )
    def test_boundaries(self, xp, amount, expected):
        assert apply_xp(xp, amount) == expected

    def test_sum_and_level_formula(self):
        for xp in (0, 1, 57, 99, 100, 101, 999, 12345):
            for amount in (1, 2, 99, 100, 1000):
                new_xp, new_level = apply_xp(xp, amount)
                assert new_xp == xp + amount
                assert new_level == new_xp // 100 + 1

    def test_no_upper_bound(self):
        assert apply_xp(10**9, 1) == (10**9 + 1, (10**9 + 1) // 100 + 1)

    def test_integral_float_accepted(self):
        assert apply_xp(0, 5.0) == (5, 1)

    @pytest.mark.parametrize("amount", [0, -5, -1, 1.5, "10", None, True, float("nan")])
    def test_rejects_bad_amount(self, amount):
        with pytest.raises(InvalidArgument):
            apply_xp(50, amount)

    def test_rejects_negative_current_xp(self):
        with pytest.raises(InvalidArgument):
            apply_xp(-1, 1)

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            apply_xp(50, 0)


class TestDerivedValues:
    def test_level_for_xp(self):
        assert level_for_xp(0) == 1
        assert level_for_xp(99) == 1
        assert level_for_xp(100) == 2
        assert level_for_xp(None) == 1

    def test_progress_within_level(self):
        assert leveling.xp_into_level(0) == 0
        assert leveling.xp_to_next_level(0) == 100
        assert leveling.xp_into_level(142) == 42
        assert leveling.xp_to_next_level(142) == 58
        assert leveling.xp_to_next_level(200) == 100


class TestAddXp:
    """Persisted grants through the store."""

    def test_creates_account_on_first_grant(self, app_ctx):
        account = leveling.add_xp("auth0|new", 5)

        assert account.xp == 5
        assert account.level == 1

    def test_accumulates_and_levels_up(self, app_ctx):
        leveling.add_xp("auth0|grinder", 60)
        account = leveling.add_xp("auth0|grinder", 45)

        assert account.xp == 105
        assert account.level == 2

    def test_rejected_amount_leaves_account_untouched(self, app_ctx):
        from masterxp import store

        leveling.add_xp("auth0|careful", 10)
        with pytest.raises(InvalidArgument):
            leveling.add_xp("auth0|careful", 0)

        account = store.get_account("auth0|careful")
        assert account.xp == 10
        assert account.level == 1


class TestXpCeiling:
    def test_total_may_reach_the_column_limit(self):
        assert apply_xp(leveling.MAX_XP - 1, 1)[0] == leveling.MAX_XP

    def test_total_past_the_column_limit_is_rejected(self):
        with pytest.raises(InvalidArgument):
            apply_xp(leveling.MAX_XP, 1)

    def test_oversized_grant_leaves_account_untouched(self, app_ctx):
        from masterxp import store

        leveling.add_xp("auth0|whale", 5)
        with pytest.raises(InvalidArgument):
            leveling.add_xp("auth0|whale", leveling.MAX_XP)

        assert store.get_account("auth0|whale").xp == 5
