"""
Recommendation Fuser
Combines the weighted evidence of the connector and temporal extractors into
one primary tense recommendation with a confidence score.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from tense_analyzer.base_types import (
    ContributingFactor, EngineSummary, Recommendation, RecommendationResult
)

logger = logging.getLogger(__name__)

CONFLICT_PENALTY = 0.7
VOTE_TIE_MARGIN = 0.1
COMPARABLE_CONFIDENCE_MARGIN = 0.1

VOTING_RECOMMENDATIONS = (
    Recommendation.PAST_SIMPLE,
    Recommendation.PAST_CONTINUOUS,
    Recommendation.MIXED,
)

OPPOSING_TENSES = {Recommendation.PAST_SIMPLE, Recommendation.PAST_CONTINUOUS}


class RecommendationFuser:
    """
    Weighted vote over past_simple, past_continuous and mixed.

    Rules, in order:
    1. Each factor adds its weight to its recommendation; ``either`` factors
       carry no vote and do not count toward confidence.
    2. The highest sum wins. No evidence, or a lead within ``vote_tie_margin``,
       gives ``either``.
    3. Confidence is the mean weight of the voting factors, multiplied by
       ``conflict_penalty`` when past_simple and past_continuous both got votes.
    4. When the two extractors recommend opposing tenses with confidences
       within ``comparable_confidence_margin`` of each other, the result is
       ``either`` with the average of the two extractor confidences (still
       penalized by rule 3).
    """

    def __init__(self, conflict_penalty: float = CONFLICT_PENALTY,
                 vote_tie_margin: float = VOTE_TIE_MARGIN,
                 comparable_confidence_margin: float = COMPARABLE_CONFIDENCE_MARGIN):
        self.conflict_penalty = conflict_penalty
        self.vote_tie_margin = vote_tie_margin
        self.comparable_confidence_margin = comparable_confidence_margin

    # === VOTING ===

    @staticmethod
    def _voting(factors: Sequence[ContributingFactor]) -> List[ContributingFactor]:
        return [f for f in factors if f.recommendation in VOTING_RECOMMENDATIONS and f.weight > 0]

    @staticmethod
    def tally(factors: Sequence[ContributingFactor]) -> Dict[Recommendation, float]:
        votes = {recommendation: 0.0 for recommendation in VOTING_RECOMMENDATIONS}
        for factor in factors:
            if factor.recommendation in votes:
                votes[factor.recommendation] += factor.weight
        return votes

    def _pick_winner(self, votes: Mapping[Recommendation, float]) -> Recommendation:
        ranked = sorted(votes.items(), key=lambda item: item[1], reverse=True)
        (top, top_votes), (_, runner_up_votes) = ranked[0], ranked[1]
        if top_votes <= 0:
            return Recommendation.EITHER
        if runner_up_votes > 0 and top_votes - runner_up_votes <= self.vote_tie_margin:
            return Recommendation.EITHER
        return top

    @staticmethod
    def _mean_weight(factors: Sequence[ContributingFactor]) -> float:
        if not factors:
            return 0.0
        return sum(f.weight for f in factors) / len(factors)

    def summarize_engine(self, source: str, factors: Sequence[ContributingFactor]) -> EngineSummary:
        """One extractor's verdict taken alone: its vote winner and mean voting weight."""
        voting = self._voting(factors)
        if not voting:
            return EngineSummary(source=source, recommendation=Recommendation.EITHER, confidence=0.0)
        return EngineSummary(
            source=source,
            recommendation=self._pick_winner(self.tally(voting)),
            confidence=self._mean_weight(voting),
        )

    # === FUSION ===

    def fuse(self, engine_factors: Mapping[str, Sequence[ContributingFactor]],
             warnings: Optional[List[Dict[str, str]]] = None) -> RecommendationResult:
        """Fuse the factors of every extractor, keyed by extractor name."""
        all_factors = [factor for factors in engine_factors.values() for factor in factors]
        summaries = [self.summarize_engine(source, factors) for source, factors in engine_factors.items()]
        result = RecommendationResult(
            primary_recommendation=Recommendation.EITHER,
            confidence=0.0,
            contributing_factors=all_factors,
            engine_summaries=summaries,
            warnings=list(warnings or []),
        )

        voting = self._voting(all_factors)
        if not voting:
            return result

        votes = self.tally(voting)
        recommendation = self._pick_winner(votes)
        confidence = self._mean_weight(voting)

        disagreeing = self._disagreeing_engines(summaries)
        if disagreeing:
            first, second = disagreeing
            recommendation = Recommendation.EITHER
            confidence = (first.confidence + second.confidence) / 2
            logger.debug(
                f"Extractors disagree ({first.source}={first.recommendation.value}, "
                f"{second.source}={second.recommendation.value}); falling back to either"
            )

        if votes[Recommendation.PAST_SIMPLE] > 0 and votes[Recommendation.PAST_CONTINUOUS] > 0:
            confidence *= self.conflict_penalty

        result.primary_recommendation = recommendation
        result.confidence = round(min(max(confidence, 0.0), 1.0), 4)
        return result

    def _disagreeing_engines(self, summaries: Sequence[EngineSummary]) -> Optional[List[EngineSummary]]:
        """The two extractors, when they pick opposing tenses with comparable confidence."""
        active = [s for s in summaries if s.recommendation != Recommendation.EITHER]
        if len(active) != 2:
            return None
        first, second = active
        if {first.recommendation, second.recommendation} != OPPOSING_TENSES:
            return None
        if abs(first.confidence - second.confidence) > self.comparable_confidence_margin:
            return None
        return [first, second]
