"""
Real-Time Orchestrator
Entry point for as-you-type analysis. One request moves through:

    rejected -> tier selected -> components run -> projected -> cached

with an incremental shortcut that reuses the previous projection when the
text changed by only a word or two.
"""

import copy
import logging
import time
from typing import Any, Dict, Optional, Tuple

from config import Config
from context_engine.recommendation_engine import RecommendationEngine
from context_engine.recommendation_fuser import RecommendationFuser
from realtime.analysis_cache import AnalysisCache, make_cache_key
from realtime.performance_metrics import PerformanceMetrics
from realtime.projection import (
    build_projection, completion_from_icons, empty_projection, select_fields
)
from rules.error_detector import ErrorDetector
from rules.language_and_grammar.services.language_vocabulary_service import (
    LanguageVocabularyService, get_vocabulary_service
)
from tense_analyzer.base_types import (
    AnalysisTier, DetectionResult, RecommendationResult, StructureResult
)
from tense_analyzer.structure_analyzer import StructureAnalyzer
from tense_analyzer.text_processing import word_count

logger = logging.getLogger(__name__)

# camelCase keys sent by the UI layer
OPTION_ALIASES = {
    'iconsOnly': 'icons_only',
    'suggestionsOnly': 'suggestions_only',
    'maxSuggestions': 'max_suggestions',
    'structureOnly': 'structure_only',
}

TIER_BY_NAME = {tier.value: tier for tier in AnalysisTier if tier != AnalysisTier.NONE}


class RealTimeOrchestrator:
    """
    Owns the shared state of the real-time pipeline: the analysis cache and
    the performance counters. Components are injected so tests can replace
    them; by default they are built from ``config``.
    """

    def __init__(self, config=Config,
                 vocabulary_service: Optional[LanguageVocabularyService] = None,
                 structure_analyzer: Optional[StructureAnalyzer] = None,
                 error_detector: Optional[ErrorDetector] = None,
                 recommendation_engine: Optional[RecommendationEngine] = None,
                 cache: Optional[AnalysisCache] = None,
                 metrics: Optional[PerformanceMetrics] = None):
        self.settings = config.get_realtime_config()
        cache_config = config.get_cache_config()

        vocabulary = vocabulary_service if vocabulary_service is not None else get_vocabulary_service()
        if structure_analyzer is None:
            structure_analyzer = StructureAnalyzer(vocabulary)
        self.structure_analyzer = structure_analyzer
        if error_detector is None:
            error_detector = ErrorDetector(vocabulary, **config.get_error_detection_config())
        self.error_detector = error_detector
        if recommendation_engine is None:
            recommendation_engine = RecommendationEngine(
                vocabulary,
                fuser=RecommendationFuser(**config.get_recommendation_config()),
                structure_analyzer=self.structure_analyzer,
            )
        self.recommendation_engine = recommendation_engine

        # An empty AnalysisCache is falsy, so compare against None
        if cache is None:
            cache = AnalysisCache(
                max_size=cache_config['max_size'],
                ttl_seconds=cache_config['ttl_seconds'],
                cleanup_interval=cache_config['cleanup_interval'],
            )
        self.cache = cache
        if metrics is None:
            metrics = PerformanceMetrics(self.settings['target_analysis_time_ms'])
        self.metrics = metrics

        if cache_config['background_sweep']:
            self.cache.start_background_sweep()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.shutdown()

    # === PUBLIC API ===

    def analyze(self, text: Optional[str], previous_result: Optional[Dict[str, Any]] = None,
                options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Analyze ``text`` for the real-time UI.

        Never raises for learner input: rejected text gets the empty
        projection and component failures give a degraded one.
        """
        started = time.perf_counter()
        text = text or ""
        opts = self.normalize_options(options)

        if self.should_reject(text):
            self.metrics.record_rejection()
            return empty_projection(text)

        if self._can_reuse(previous_result, text):
            projection = self._incremental_projection(previous_result, text)
            self.metrics.record_analysis(self._elapsed_ms(started), projection['level'], incremental=True)
            return projection

        key = make_cache_key(text, opts)
        cached = self.cache.get(key)
        if cached is not None:
            self.metrics.record_analysis(self._elapsed_ms(started), cached['level'], cached=True)
            return cached

        tier = self.select_tier(text, opts['level'])
        projection, degraded = self._run_components(text, tier, opts)
        if not degraded:
            self.cache.set(key, projection)

        self.metrics.record_analysis(self._elapsed_ms(started), tier.value)
        return projection

    def should_reject(self, text: str) -> bool:
        """Too short, too few words or too long for real-time analysis."""
        trimmed = text.strip()
        return (
            len(trimmed) < self.settings['min_chars']
            or word_count(trimmed) < self.settings['min_words']
            or len(text) > self.settings['max_text_length']
        )

    def select_tier(self, text: str, level: Optional[str] = None) -> AnalysisTier:
        """Tier from character length, capped by an explicit ``level``."""
        length = len(text.strip())
        thresholds = self.settings['tier_thresholds']

        if length >= thresholds['advanced']:
            tier = AnalysisTier.ADVANCED
        elif length >= thresholds['intermediate']:
            tier = AnalysisTier.INTERMEDIATE
        elif length >= thresholds['basic']:
            tier = AnalysisTier.BASIC
        else:
            tier = AnalysisTier.NONE

        cap = TIER_BY_NAME.get(level) if level else None
        if cap is not None and cap.rank < tier.rank:
            tier = cap
        return tier

    def normalize_options(self, options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        raw = {OPTION_ALIASES.get(key, key): value for key, value in (options or {}).items()}

        level = raw.get('level')
        if level is not None and level not in TIER_BY_NAME:
            logger.warning(f"Ignoring unknown analysis level: {level}")
            level = None

        max_suggestions = self.settings['max_suggestions']
        requested = raw.get('max_suggestions')
        if requested is not None:
            try:
                max_suggestions = max(0, min(int(requested), max_suggestions))
            except (TypeError, ValueError):
                logger.warning(f"Ignoring invalid max_suggestions: {requested!r}")

        return {
            'level': level,
            'icons_only': bool(raw.get('icons_only', False)),
            'suggestions_only': bool(raw.get('suggestions_only', False)),
            'max_suggestions': max_suggestions,
            'structure_only': bool(raw.get('structure_only', False)),
        }

    def get_performance_stats(self) -> Dict[str, Any]:
        return {
            'metrics': self.metrics.summary(),
            'cache': self.cache.stats(),
        }

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Real-time analysis cache cleared")

    def shutdown(self) -> None:
        self.cache.stop_background_sweep()

    # === INCREMENTAL PATH ===

    def _can_reuse(self, previous_result: Optional[Dict[str, Any]], text: str) -> bool:
        if not previous_result or previous_result.get('is_empty'):
            return False
        if 'icon_states' not in previous_result or 'text' not in previous_result:
            return False
        delta = abs(word_count(text) - word_count(previous_result['text']))
        return delta <= self.settings['incremental_max_word_delta']

    def _incremental_projection(self, previous_result: Dict[str, Any], text: str) -> Dict[str, Any]:
        """
        Reuse the previous projection for ``text``. Only completion is
        recomputed, from the known icon states, so newly introduced errors
        are not seen until the next full run.
        """
        projection = copy.deepcopy(previous_result)
        projection['text'] = text
        projection['is_incremental'] = True
        projection['completion_percentage'] = completion_from_icons(
            projection['icon_states'], projection.get('tense_type', 'unknown')
        )
        return projection

    # === FULL RUN ===

    def _run_components(self, text: str, tier: AnalysisTier,
                        opts: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
        try:
            structure = self.structure_analyzer.analyze(text)
        except Exception as e:
            logger.exception(f"Structure analysis failed for real-time text: {e}")
            self.metrics.record_failure('structure', e)
            projection = empty_projection(text)
            projection['degraded'] = True
            return projection, True

        structure_stage_only = opts['structure_only'] or opts['icons_only']
        detection: Optional[DetectionResult] = None
        recommendation: Optional[RecommendationResult] = None
        degraded = False
        stage = 'error_detection'
        try:
            if not structure_stage_only and tier.rank >= AnalysisTier.INTERMEDIATE.rank:
                detection = self.error_detector.detect_all(text)
                for pass_name in detection.failed_passes:
                    self.metrics.record_failure(f'pass_{pass_name}', RuntimeError(pass_name))

            stage = 'recommendation'
            if not structure_stage_only and tier == AnalysisTier.ADVANCED:
                recommendation = self.recommendation_engine.recommend(text, structure)
        except Exception as e:
            logger.exception(f"Real-time {stage} failed, falling back to structure only: {e}")
            self.metrics.record_failure(stage, e)
            detection, recommendation, degraded = None, None, True

        projection = build_projection(
            text, tier, structure,
            detection=detection,
            recommendation=recommendation,
            recommendation_tips=self._recommendation_tips(recommendation),
            tips=self._structure_tips(structure, tier, structure_stage_only or degraded),
            max_suggestions=opts['max_suggestions'],
            degraded=degraded,
        )
        return select_fields(
            projection,
            icons_only=opts['icons_only'],
            suggestions_only=opts['suggestions_only'],
            structure_only=opts['structure_only'],
        ), degraded

    def _recommendation_tips(self, recommendation: Optional[RecommendationResult]):
        if recommendation is None:
            return []
        tip = self.recommendation_engine.tip_for(recommendation)
        return [tip] if tip else []

    def _structure_tips(self, structure: StructureResult, tier: AnalysisTier, skip: bool):
        if skip or tier.rank < AnalysisTier.INTERMEDIATE.rank:
            return []
        return [
            hint for hint in self.structure_analyzer.generate_recommendations(structure)
            if hint['type'] == 'tense_suggestion'
        ]

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return (time.perf_counter() - started) * 1000
