"""
Unit tests for the Recommendation Fuser.

Factors are built by hand so each fusion rule is checked in isolation:
voting, ties, the conflict penalty and extractor disagreement.
"""

import pytest

from context_engine.recommendation_fuser import CONFLICT_PENALTY, RecommendationFuser
from tense_analyzer.base_types import ContributingFactor, Recommendation

PS = Recommendation.PAST_SIMPLE
PC = Recommendation.PAST_CONTINUOUS
MIXED = Recommendation.MIXED
EITHER = Recommendation.EITHER


def factor(recommendation, weight, source='temporal', value='x'):
    return ContributingFactor(
        source=source, value=value, weight=weight, recommendation=recommendation, reason='test'
    )


@pytest.fixture(scope="module")
def fuser():
    return RecommendationFuser()


@pytest.mark.unit
class TestVoting:

    def test_no_evidence_is_either(self, fuser):
        result = fuser.fuse({})

        assert result.primary_recommendation == EITHER
        assert result.confidence == 0.0
        assert result.contributing_factors == []

    def test_single_factor(self, fuser):
        result = fuser.fuse({'temporal': [factor(PS, 0.9)]})

        assert result.primary_recommendation == PS
        assert result.confidence == pytest.approx(0.9)

    def test_either_factors_carry_no_vote(self, fuser):
        result = fuser.fuse({
            'connector': [factor(EITHER, 0.7, source='connector')],
            'temporal': [factor(PS, 0.9)],
        })

        assert result.primary_recommendation == PS
        assert result.confidence == pytest.approx(0.9), \
            f"Expected the either factor to be ignored but got: {result.confidence}"
        assert len(result.contributing_factors) == 2

    def test_close_votes_tie_to_either(self, fuser):
        result = fuser.fuse({'temporal': [factor(PS, 0.9), factor(PC, 0.95)]})

        assert result.primary_recommendation == EITHER
        assert result.confidence == pytest.approx(0.925 * CONFLICT_PENALTY, abs=1e-4)

    def test_clear_winner_is_penalized_by_conflict(self, fuser):
        result = fuser.fuse({'temporal': [factor(PS, 0.9), factor(PS, 0.8), factor(PC, 0.7)]})

        assert result.primary_recommendation == PS
        assert result.confidence == pytest.approx(0.8 * CONFLICT_PENALTY, abs=1e-4)

    def test_mixed_without_conflict(self, fuser):
        result = fuser.fuse({
            'connector': [factor(MIXED, 0.7, source='connector'), factor(MIXED, 0.9, source='connector')],
            'temporal': [factor(PC, 0.7)],
        })

        assert result.primary_recommendation == MIXED
        assert result.confidence == pytest.approx((0.7 + 0.9 + 0.7) / 3, abs=1e-4)

    def test_confidence_stays_in_range(self, fuser):
        result = fuser.fuse({'temporal': [factor(PS, 1.0), factor(PS, 1.0)]})

        assert 0.0 <= result.confidence <= 1.0


@pytest.mark.unit
class TestExtractorDisagreement:

    def test_comparable_opposing_extractors_give_either(self, fuser):
        result = fuser.fuse({
            'connector': [factor(PC, 0.9, source='connector')],
            'temporal': [factor(PS, 0.95), factor(PS, 0.9)],
        })

        assert result.primary_recommendation == EITHER
        expected = (0.9 + 0.925) / 2 * CONFLICT_PENALTY
        assert result.confidence == pytest.approx(expected, abs=1e-3)

    def test_lopsided_extractors_keep_the_vote(self, fuser):
        result = fuser.fuse({
            'connector': [factor(PC, 0.5, source='connector')],
            'temporal': [factor(PS, 0.95), factor(PS, 0.9)],
        })

        assert result.primary_recommendation == PS
        expected = (0.5 + 0.95 + 0.9) / 3 * CONFLICT_PENALTY
        assert result.confidence == pytest.approx(expected, abs=1e-3)

    def test_engine_summaries(self, fuser):
        result = fuser.fuse({
            'connector': [factor(PC, 0.9, source='connector')],
            'temporal': [],
        })

        summaries = {s.source: s for s in result.engine_summaries}
        assert summaries['connector'].recommendation == PC
        assert summaries['connector'].confidence == pytest.approx(0.9)
        assert summaries['temporal'].recommendation == EITHER
        assert summaries['temporal'].confidence == 0.0


@pytest.mark.unit
class TestConfiguration:

    def test_custom_penalty(self):
        fuser = RecommendationFuser(conflict_penalty=0.5)
        result = fuser.fuse({'temporal': [factor(PS, 0.9), factor(PS, 0.9), factor(PC, 0.9)]})

        assert result.primary_recommendation == PS
        assert result.confidence == pytest.approx(0.45)

    def test_wider_tie_margin(self):
        fuser = RecommendationFuser(vote_tie_margin=2.0)
        result = fuser.fuse({'temporal': [factor(PS, 0.9), factor(PS, 0.8), factor(PC, 0.7)]})

        assert result.primary_recommendation == EITHER

    def test_warnings_are_passed_through(self, fuser):
        warnings = [{'type': 'tense_mixing', 'message': 'm', 'suggestion': 's'}]
        result = fuser.fuse({'temporal': [factor(PS, 0.9)]}, warnings)

        assert result.to_dict()['warnings'] == warnings
