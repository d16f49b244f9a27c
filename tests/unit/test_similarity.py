"""Unit tests for label name similarity."""

from __future__ import annotations

import pytest

from gh_labeler.similarity import SIMILARITY_THRESHOLD, label_similarity, levenshtein_distance


@pytest.mark.parametrize(
    ("a", "b", "expected"),
    [
        ("", "", 0),
        ("", "abc", 3),
        ("abc", "", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("bug", "bug", 0),
        ("バグ", "バグ修正", 2),
    ],
)
def test_levenshtein_distance(a: str, b: str, expected: int) -> None:
    assert levenshtein_distance(a, b) == expected


def test_identical_names_score_one() -> None:
    assert label_similarity("bug", "bug") == 1.0


def test_comparison_is_case_insensitive() -> None:
    assert label_similarity("Bug", "bUG") == 1.0
    assert label_similarity("Help Wanted", "help wanted") == 1.0


def test_both_empty_scores_one() -> None:
    assert label_similarity("", "") == 1.0


def test_one_empty_scores_zero() -> None:
    assert label_similarity("", "bug") == 0.0


def test_completely_different_names_score_zero() -> None:
    assert label_similarity("abc", "xyz") == 0.0


def test_plural_is_above_threshold() -> None:
    score = label_similarity("bug-reports", "bug-report")
    assert score == pytest.approx(1 - 1 / 11)
    assert score > SIMILARITY_THRESHOLD


def test_length_is_measured_in_code_points() -> None:
    # 2 of 4 characters differ; a byte-length denominator would give a higher score.
    assert label_similarity("バグ修正", "バグ追加") == pytest.approx(0.5)


def test_score_is_symmetric() -> None:
    assert label_similarity("enhancement", "enhancements") == label_similarity(
        "enhancements", "enhancement"
    )


def test_exact_threshold_value() -> None:
    # distance 3 over 10 characters
    assert label_similarity("abcdefghij", "abcdefgxyz") == 0.7
