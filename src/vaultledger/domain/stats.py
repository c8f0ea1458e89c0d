"""Experience points and levelling."""

import math
from dataclasses import replace

from vaultledger.domain.entities import UserStats

LEVEL_GROWTH = 1.5


def award_xp(stats: UserStats, amount: int) -> UserStats:
    """Return stats with ``amount`` XP added.

    The threshold check runs once, so an award larger than the remaining
    distance to the next level yields at most one level-up and may leave
    ``xp`` above ``next_level_xp`` until the next award.
    """
    xp = stats.xp + amount
    if xp < stats.next_level_xp:
        return replace(stats, xp=xp)
    return replace(
        stats,
        xp=xp - stats.next_level_xp,
        level=stats.level + 1,
        next_level_xp=math.floor(stats.next_level_xp * LEVEL_GROWTH),
    )
