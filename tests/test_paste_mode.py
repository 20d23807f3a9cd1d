"""
Tests for match results ingestion.
"""

import math

import pandas as pd
import pytest

from padel_app.config import MAX_INPUT_SIZE
from padel_app.ingestion.paste_mode import (
    SOURCE_TABLE,
    SOURCE_TEXT,
    IngestionError,
    ValidationError,
    collect_results,
    parse_results_text,
    results_from_records,
)
from padel_app.ranking.engine import MatchResult


class TestParseResultsText:
    """Tests for parse_results_text function."""

    def test_dash_separator(self):
        assert parse_results_text("6-3") == [MatchResult(6, 3)]

    def test_spaced_dash(self):
        assert parse_results_text("4 - 6") == [MatchResult(4, 6)]

    def test_colon_separator(self):
        assert parse_results_text("7:5") == [MatchResult(7, 5)]

    def test_space_separator(self):
        assert parse_results_text("6 6") == [MatchResult(6, 6)]

    def test_multiple_lines_keep_order(self):
        text = """6-3
4-6

7:7"""
        assert parse_results_text(text) == [MatchResult(6, 3), MatchResult(4, 6), MatchResult(7, 7)]

    def test_ignores_comments_and_blank_lines(self):
        text = """# Sunday league
6-3

   # rematch
2-6
"""
        assert parse_results_text(text) == [MatchResult(6, 3), MatchResult(2, 6)]

    def test_strips_whitespace(self):
        assert parse_results_text("   6-1   ") == [MatchResult(6, 1)]

    def test_empty_text(self):
        assert parse_results_text("") == []

    def test_invalid_line_reports_line_number(self):
        with pytest.raises(ValidationError, match="Line 2"):
            parse_results_text("6-3\nsix-three")

    def test_single_number_rejected(self):
        with pytest.raises(ValidationError):
            parse_results_text("6")

    def test_three_numbers_rejected(self):
        with pytest.raises(ValidationError):
            parse_results_text("6-3-1")

    def test_dash_after_space_is_separator(self):
        assert parse_results_text("6 -3") == [MatchResult(6, 3)]

    def test_sign_on_first_score(self):
        assert parse_results_text("-1-3") == [MatchResult(-1, 3)]

    def test_sign_on_second_score_rejected(self):
        with pytest.raises(ValidationError, match="Line 1"):
            parse_results_text("6--3")

    def test_too_large(self):
        with pytest.raises(ValidationError, match="too large"):
            parse_results_text("6-3\n" * (MAX_INPUT_SIZE // 4 + 1))

    def test_validation_error_is_ingestion_error(self):
        assert issubclass(ValidationError, IngestionError)


class TestResultsFromRecords:
    """Tests for results_from_records function."""

    def test_basic_rows(self):
        records = [
            {"score_player1": 6, "score_player2": 3},
            {"score_player1": 2, "score_player2": 6},
        ]
        assert results_from_records(records) == [MatchResult(6, 3), MatchResult(2, 6)]

    def test_skips_empty_rows(self):
        records = [
            {"score_player1": None, "score_player2": None},
            {"score_player1": 6, "score_player2": 3},
            {"score_player1": math.nan, "score_player2": math.nan},
        ]
        assert results_from_records(records) == [MatchResult(6, 3)]

    def test_whole_floats_accepted(self):
        assert results_from_records([{"score_player1": 6.0, "score_player2": 4.0}]) == [MatchResult(6, 4)]

    def test_numeric_strings_accepted(self):
        assert results_from_records([{"score_player1": "6", "score_player2": " 4 "}]) == [MatchResult(6, 4)]

    def test_half_row_rejected(self):
        with pytest.raises(ValidationError, match="Row 1"):
            results_from_records([{"score_player1": 6, "score_player2": None}])

    def test_fractional_score_rejected(self):
        with pytest.raises(ValidationError, match="whole number"):
            results_from_records([{"score_player1": 6.5, "score_player2": 4}])

    def test_non_numeric_rejected(self):
        with pytest.raises(ValidationError, match="not a number"):
            results_from_records([{"score_player1": "six", "score_player2": 4}])

    def test_from_dataframe_with_missing_values(self):
        df = pd.DataFrame({
            "score_player1": pd.array([6, None, 3], dtype="Int64"),
            "score_player2": pd.array([4, None, 3], dtype="Int64"),
        })
        assert results_from_records(df.to_dict("records")) == [MatchResult(6, 4), MatchResult(3, 3)]

    def test_empty(self):
        assert results_from_records([]) == []


class TestCollectResults:
    """Tests for collect_results function."""

    RECORDS = [{"score_player1": 1, "score_player2": 6}]

    def test_text_wins_over_table(self):
        assert collect_results("6-3", self.RECORDS) == (SOURCE_TEXT, [MatchResult(6, 3)])

    def test_blank_text_uses_table(self):
        assert collect_results("  \n", self.RECORDS) == (SOURCE_TABLE, [MatchResult(1, 6)])

    def test_both_empty(self):
        assert collect_results("", []) == (SOURCE_TABLE, [])

    def test_table_not_validated_when_text_used(self):
        records = [{"score_player1": 6, "score_player2": None}]
        assert collect_results("6-3", records) == (SOURCE_TEXT, [MatchResult(6, 3)])
