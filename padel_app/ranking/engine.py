"""
Ranking Engine for the Padel App

This module turns a sequence of match results into accumulated standings
for the two player slots, using soccer-style scoring:
- Win: 3 points to the winner, nothing to the loser
- Tie: 1 point each

The core (`calculate_ranking`) is a pure function: no I/O, no shared state.

Usage:
    from padel_app.ranking import MatchResult, calculate_ranking
    totals = calculate_ranking([MatchResult(6, 3), MatchResult(4, 6)])
"""

from dataclasses import dataclass
from typing import Iterable

import pandas as pd

from padel_app.config import DRAW_POINTS, LOSS_POINTS, WIN_POINTS

BREAKDOWN_COLUMNS = [
    "match",
    "score_player1",
    "score_player2",
    "outcome",
    "points_player1",
    "points_player2",
    "cumulative_player1",
    "cumulative_player2",
]


@dataclass(frozen=True)
class MatchResult:
    score_player1: int
    score_player2: int


@dataclass(frozen=True)
class RankingTotals:
    player1: int = 0
    player2: int = 0


def match_outcome(result: MatchResult) -> str:
    """Return "player1", "player2" or "draw" for a single match."""
    if result.score_player1 > result.score_player2:
        return "player1"
    if result.score_player2 > result.score_player1:
        return "player2"
    return "draw"


def match_points(result: MatchResult) -> tuple[int, int]:
    """Points awarded to (player 1, player 2) for a single match."""
    outcome = match_outcome(result)
    if outcome == "player1":
        return WIN_POINTS, LOSS_POINTS
    if outcome == "player2":
        return LOSS_POINTS, WIN_POINTS
    return DRAW_POINTS, DRAW_POINTS


def calculate_ranking(results: Iterable[MatchResult]) -> RankingTotals:
    """
    Accumulate points for both players across all supplied matches.

    Args:
        results: Match results in any order (may be empty)

    Returns:
        RankingTotals with the points of player 1 and player 2
    """
    points_player1 = 0
    points_player2 = 0

    for result in results:
        p1, p2 = match_points(result)
        points_player1 += p1
        points_player2 += p2

    return RankingTotals(player1=points_player1, player2=points_player2)


def results_breakdown(results: Iterable[MatchResult]) -> pd.DataFrame:
    """
    Build a per-match table of outcomes and running point totals.

    Args:
        results: Match results, in the order they were played

    Returns:
        DataFrame with one row per match (columns: BREAKDOWN_COLUMNS).
        The last row's cumulative columns equal calculate_ranking(results).
    """
    rows = []
    for number, result in enumerate(results, start=1):
        p1, p2 = match_points(result)
        rows.append({
            "match": number,
            "score_player1": result.score_player1,
            "score_player2": result.score_player2,
            "outcome": match_outcome(result),
            "points_player1": p1,
            "points_player2": p2,
        })

    if not rows:
        return pd.DataFrame(columns=BREAKDOWN_COLUMNS)

    df = pd.DataFrame(rows)
    df["cumulative_player1"] = df["points_player1"].cumsum()
    df["cumulative_player2"] = df["points_player2"].cumsum()
    return df[BREAKDOWN_COLUMNS]
