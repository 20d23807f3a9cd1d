"""
Paste-Mode Match Results Ingestion

This module turns match results typed or pasted into the front-end into
MatchResult values for the ranking engine. Two input shapes are supported:
- Free text, one match per line ("6-3", "4 - 6", "7:5", "6 6")
- Table rows, as produced by a data editor (DataFrame.to_dict("records"))

When both are filled in, the pasted text wins (see collect_results).

Usage:
    from padel_app.ingestion.paste_mode import parse_results_text
    results = parse_results_text("6-3\\n4-6\\n")
"""

import re
from typing import Iterable, List, Mapping, Tuple

import pandas as pd

from padel_app.config import MAX_INPUT_SIZE
from padel_app.ranking.engine import MatchResult
from padel_app.utils import setup_logging, validate_input_size

# --- Module Logger ---
logger = setup_logging(__name__)

# One match per line: "6-3", "6 - 3", "6:3" or "6 3".
# Only the first score may carry a sign, so a "-" after it is always the
# separator: "6 -3" reads as 6-3 and "6--3" is rejected.
RESULT_RE = re.compile(r"^(-?\d+)\s*(?:[-:]|\s)\s*(\d+)$")
COMMENT_PREFIX = "#"

SOURCE_TEXT = "text"
SOURCE_TABLE = "table"


class IngestionError(Exception):
    """Custom exception for ingestion errors"""
    pass


class ValidationError(IngestionError):
    """Validation-specific errors"""
    pass


def parse_results_text(text: str) -> List[MatchResult]:
    """
    Parse pasted match results, one match per line.

    Blank lines and lines starting with '#' are ignored.

    Args:
        text: Raw pasted text

    Returns:
        List of MatchResult in the order they appear

    Raises:
        ValidationError: If the text is too large or a line is not a result
    """
    try:
        validate_input_size(text, MAX_INPUT_SIZE)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    results = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue

        m = RESULT_RE.match(line)
        if not m:
            raise ValidationError(
                f"Line {line_number}: could not read '{line}'. Expected a result like '6-3'"
            )
        score_a, score_b = m.groups()
        results.append(MatchResult(int(score_a), int(score_b)))

    logger.debug(f"Parsed {len(results)} results from pasted text")
    return results


def _is_missing(value) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return value is None or bool(pd.isna(value))


def _to_score(value, row_number: int, column: str) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Row {row_number}: {column} '{value}' is not a number")
    if not number.is_integer():
        raise ValidationError(f"Row {row_number}: {column} '{value}' is not a whole number")
    return int(number)


def results_from_records(records: Iterable[Mapping]) -> List[MatchResult]:
    """
    Convert table rows into match results.

    Args:
        records: Mappings with 'score_player1' and 'score_player2' keys

    Returns:
        List of MatchResult; rows with both scores empty are skipped

    Raises:
        ValidationError: If a row has only one score or a non-integer score
    """
    results = []
    skipped = 0

    for row_number, record in enumerate(records, start=1):
        raw_a = record.get("score_player1")
        raw_b = record.get("score_player2")
        missing_a, missing_b = _is_missing(raw_a), _is_missing(raw_b)

        if missing_a and missing_b:
            skipped += 1
            continue
        if missing_a or missing_b:
            raise ValidationError(f"Row {row_number}: both scores are required")

        results.append(MatchResult(
            _to_score(raw_a, row_number, "score_player1"),
            _to_score(raw_b, row_number, "score_player2"),
        ))

    if skipped:
        logger.debug(f"Skipped {skipped} empty rows")
    return results


def collect_results(text: str, records: Iterable[Mapping]) -> Tuple[str, List[MatchResult]]:
    """
    Pick the results input the user filled in.

    Pasted text takes precedence over table rows whenever it is non-blank.

    Returns:
        (source, results) where source is SOURCE_TEXT or SOURCE_TABLE

    Raises:
        ValidationError: If the chosen input is malformed
    """
    if text.strip():
        return SOURCE_TEXT, parse_results_text(text)
    return SOURCE_TABLE, results_from_records(records)
