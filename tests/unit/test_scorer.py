"""
Unit tests for the frecency scorer.
"""

import pytest

from zipzap.engine.scorer import score, needs_aging, score_sql, score_params
from zipzap.models.config import RankingConfig


class TestScore:
    """Test cases for the score function."""

    def test_score_at_zero_age(self):
        """Test the score of a directory visited just now."""
        # 3.75 / (0 + 1 + 0.25) == 3.0
        assert score(1.0, 100, 100) == pytest.approx(3.0)
        assert score(4.0, 100, 100) == pytest.approx(12.0)

    def test_score_after_one_hour(self):
        """Test the score after an hour has passed."""
        expected = 2.0 * 3.75 / (0.0001 * 3600 + 1 + 0.25)
        assert score(2.0, 0, 3600) == pytest.approx(expected)

    def test_score_strictly_decreasing_in_age(self):
        """Test that older visits always score lower for the same rank."""
        ages = [0, 1, 60, 3600, 86400, 86400 * 30, 86400 * 365]
        scores = [score(5.0, 1_000_000_000 - age, 1_000_000_000) for age in ages]

        for newer, older in zip(scores, scores[1:]):
            assert newer > older

    def test_score_strictly_increasing_in_rank(self):
        """Test that a higher rank always scores higher at the same age."""
        ranks = [0.01, 0.5, 1.0, 2.0, 100.0, 8999.0]
        scores = [score(rank, 0, 7200) for rank in ranks]

        for lower, higher in zip(scores, scores[1:]):
            assert higher > lower

    def test_score_approaches_zero(self):
        """Test that very old visits score close to zero."""
        assert score(10.0, 0, 10 ** 12) < 1e-6

    def test_score_zero_rank(self):
        """Test that a zero rank always scores zero."""
        assert score(0.0, 0, 5000) == 0.0

    def test_future_visit_scores_as_age_zero(self):
        """Test that a timestamp after now does not blow up the curve."""
        # k2 * -12500 + 1 + k3 would be exactly zero without clamping
        assert score(1.0, 12500, 0) == pytest.approx(3.0)
        assert score(2.0, 10 ** 9, 0) == score(2.0, 0, 0)

    def test_score_custom_constants(self):
        """Test scoring with a custom curve."""
        ranking = RankingConfig(k1=2.0, k2=0.001, k3=1.0)
        expected = 3.0 * 2.0 / (0.001 * 1000 + 1 + 1.0)
        assert score(3.0, 0, 1000, ranking) == pytest.approx(expected)

    def test_recent_low_rank_beats_stale_high_rank(self):
        """Test that recency can outweigh frequency."""
        now = 1_700_000_000
        recent = score(2.0, now, now)
        stale = score(10.0, now - 86400 * 7, now)
        assert recent > stale


class TestNeedsAging:
    """Test cases for the aging trigger."""

    def test_below_threshold(self):
        assert needs_aging(8999.999, 9000.0) is False

    def test_at_threshold(self):
        assert needs_aging(9000.0, 9000.0) is True

    def test_above_threshold(self):
        assert needs_aging(12000.5, 9000.0) is True


class TestScoreSql:
    """Test cases for the SQL form of the score."""

    def test_expression_uses_named_parameters(self):
        expression = score_sql()
        for name in (':k1', ':k2', ':k3', ':now'):
            assert name in expression
        assert expression.startswith("rank * ")

    def test_custom_columns(self):
        expression = score_sql(rank_column="r", time_column="t")
        assert expression.startswith("r * ")
        assert "MAX(:now - t, 0)" in expression

    def test_params_follow_ranking(self):
        ranking = RankingConfig(k1=1.5, k2=0.002, k3=0.5)
        params = score_params(42, ranking)
        assert params == {'k1': 1.5, 'k2': 0.002, 'k3': 0.5, 'now': 42}

    def test_default_params(self):
        params = score_params(7)
        assert params['k1'] == 3.75
        assert params['k2'] == 0.0001
        assert params['k3'] == 0.25
        assert params['now'] == 7
