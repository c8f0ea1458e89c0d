"""Tests for XP awards and levelling."""

from vaultledger.domain.entities import UserStats
from vaultledger.domain.stats import award_xp


def test_award_below_threshold():
    stats = award_xp(UserStats(), 40)
    assert stats.xp == 40
    assert stats.level == 1


def test_award_reaching_threshold_levels_up():
    """Test that reaching the threshold carries the excess into the next level."""
    stats = award_xp(UserStats(xp=90), 30)

    assert stats.level == 2
    assert stats.xp == 20
    assert stats.next_level_xp == 150


def test_large_award_levels_up_only_once():
    """Test that a huge award still produces a single level-up."""
    stats = award_xp(UserStats(), 1000)

    assert stats.level == 2
    assert stats.xp == 900
    assert stats.next_level_xp == 150


def test_threshold_growth_rounds_down():
    stats = award_xp(UserStats(level=2, xp=0, next_level_xp=225), 225)

    assert stats.level == 3
    assert stats.next_level_xp == 337
