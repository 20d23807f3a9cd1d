"""
Ranking

Modules:
- engine: Match results to accumulated points (3 per win, 1 per tie)
"""

from padel_app.ranking.engine import (
    MatchResult,
    RankingTotals,
    calculate_ranking,
    match_outcome,
    match_points,
    results_breakdown,
)

__all__ = [
    "MatchResult",
    "RankingTotals",
    "calculate_ranking",
    "match_outcome",
    "match_points",
    "results_breakdown",
]
