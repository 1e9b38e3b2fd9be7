"""
Real-time analysis layer.

Usage:
    from realtime import RealTimeOrchestrator

    with RealTimeOrchestrator() as orchestrator:
        projection = orchestrator.analyze("I was walking home when it started to rain")
"""

from .analysis_cache import AnalysisCache, make_cache_key
from .orchestrator import RealTimeOrchestrator
from .performance_metrics import PerformanceMetrics
from .projection import empty_projection

__all__ = [
    'RealTimeOrchestrator',
    'AnalysisCache',
    'PerformanceMetrics',
    'make_cache_key',
    'empty_projection',
]
