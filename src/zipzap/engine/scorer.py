"""
Frecency scoring for zipzap.

A directory's score blends how often it was visited (its rank) with how
recently it was visited. The recency weight decays smoothly with age, so
there is no hard cutoff after which old directories stop competing.
The same curve is evaluated in Python by score() and inside SQLite by the
expression returned from score_sql(), so ranking can happen in the query.
"""

from typing import Dict, Any, Optional

from ..models.config import RankingConfig


DEFAULT_RANKING = RankingConfig()


def score(rank: float, last_access: int, now: int, ranking: Optional[RankingConfig] = None) -> float:
    """
    Compute the frecency score of an entry.

    Args:
        rank: Visit weight of the entry
        last_access: Unix timestamp of the most recent visit
        now: Unix timestamp to score at
        ranking: Curve constants; defaults to the stock curve

    Returns:
        ``rank * k1 / (k2 * age + 1 + k3)`` with age in seconds; visits
        timestamped after ``now`` count as age 0
    """
    ranking = ranking or DEFAULT_RANKING
    age = max(now - last_access, 0)
    return rank * (ranking.k1 / ((ranking.k2 * age + 1) + ranking.k3))


def needs_aging(total_rank: float, threshold: float) -> bool:
    """Check whether the summed rank has reached the aging threshold."""
    return total_rank >= threshold


def score_sql(rank_column: str = "rank", time_column: str = "time") -> str:
    """
    SQL expression computing score() over table columns.

    Uses the named parameters produced by score_params().
    """
    return f"{rank_column} * (:k1 / ((:k2 * MAX(:now - {time_column}, 0) + 1) + :k3))"


def score_params(now: int, ranking: Optional[RankingConfig] = None) -> Dict[str, Any]:
    """Named parameters for the expression returned by score_sql()."""
    ranking = ranking or DEFAULT_RANKING
    return {
        'k1': ranking.k1,
        'k2': ranking.k2,
        'k3': ranking.k3,
        'now': now,
    }
