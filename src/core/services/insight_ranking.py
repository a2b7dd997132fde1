"""
Insight ranking policy.

Total order: priority (critical first), then time-relevant before not,
then confidence descending. Sorting is stable so ties keep provider call
order.
"""

from collections.abc import Iterable

from src.core.entities.insight import Insight


def ranking_key(insight: Insight) -> tuple[int, bool, float]:
    """Sort key implementing the ranking order."""
    return (insight.priority.rank, not insight.time_relevant, -insight.confidence)


def compare_insights(a: Insight, b: Insight) -> int:
    """Three-way comparison: negative when `a` ranks before `b`."""
    key_a, key_b = ranking_key(a), ranking_key(b)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


def rank_insights(insights: Iterable[Insight]) -> list[Insight]:
    """Stable sort by ranking key."""
    return sorted(insights, key=ranking_key)


def rank_and_truncate(insights: Iterable[Insight], limit: int) -> list[Insight]:
    """Rank and keep the first `limit` insights; a non-positive limit yields none."""
    return rank_insights(insights)[: max(limit, 0)]
