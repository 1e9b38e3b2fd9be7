"""
Context / Temporal Engine

Two independent evidence extractors (connector semantics and temporal
expressions) and the fuser that turns their weighted votes into one tense
recommendation.

Usage:
    from context_engine import RecommendationEngine

    result = RecommendationEngine().recommend("I was sleeping when the phone rang")
    result.primary_recommendation   # Recommendation.MIXED
"""

from .connector_extractor import ConnectorExtractor
from .recommendation_engine import RecommendationEngine
from .recommendation_fuser import (
    COMPARABLE_CONFIDENCE_MARGIN,
    CONFLICT_PENALTY,
    VOTE_TIE_MARGIN,
    RecommendationFuser,
)
from .temporal_extractor import TemporalExtractor

__all__ = [
    'RecommendationEngine',
    'RecommendationFuser',
    'ConnectorExtractor',
    'TemporalExtractor',
    'CONFLICT_PENALTY',
    'VOTE_TIE_MARGIN',
    'COMPARABLE_CONFIDENCE_MARGIN',
]
