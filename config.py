"""
Configuration for the Past Tense Analyzer.
"""

import os
from dotenv import load_dotenv
from typing import Dict, Any

# Load environment variables (optional - only if .env file exists)
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == 'true'


class Config:
    """Analyzer configuration."""

    TESTING = False

    # Logging Configuration
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Real-time input limits
    MIN_TEXT_CHARS = int(os.environ.get('MIN_TEXT_CHARS', 5))
    MIN_TEXT_WORDS = int(os.environ.get('MIN_TEXT_WORDS', 2))
    MAX_TEXT_LENGTH = int(os.environ.get('MAX_TEXT_LENGTH', 500))
    MAX_SUGGESTIONS = int(os.environ.get('MAX_SUGGESTIONS', 3))

    # Analysis tiers, by character length
    BASIC_TIER_CHARS = int(os.environ.get('BASIC_TIER_CHARS', 5))
    INTERMEDIATE_TIER_CHARS = int(os.environ.get('INTERMEDIATE_TIER_CHARS', 15))
    ADVANCED_TIER_CHARS = int(os.environ.get('ADVANCED_TIER_CHARS', 30))

    # Incremental re-analysis
    INCREMENTAL_MAX_WORD_DELTA = int(os.environ.get('INCREMENTAL_MAX_WORD_DELTA', 2))

    # Soft budget, only reported in metrics
    TARGET_ANALYSIS_TIME_MS = float(os.environ.get('TARGET_ANALYSIS_TIME_MS', 100))

    # Analysis cache
    CACHE_MAX_SIZE = int(os.environ.get('CACHE_MAX_SIZE', 50))
    CACHE_TTL_SECONDS = float(os.environ.get('CACHE_TTL_SECONDS', 300))
    CACHE_CLEANUP_INTERVAL = float(os.environ.get('CACHE_CLEANUP_INTERVAL', 60))
    CACHE_BACKGROUND_SWEEP = _env_bool('CACHE_BACKGROUND_SWEEP', 'true')

    # Recommendation fusion
    CONFLICT_PENALTY = float(os.environ.get('CONFLICT_PENALTY', 0.7))
    VOTE_TIE_MARGIN = float(os.environ.get('VOTE_TIE_MARGIN', 0.1))
    COMPARABLE_CONFIDENCE_MARGIN = float(os.environ.get('COMPARABLE_CONFIDENCE_MARGIN', 0.1))

    # Error detection
    AUTO_APPLY_CONFIDENCE = float(os.environ.get('AUTO_APPLY_CONFIDENCE', 0.9))

    @classmethod
    def get_realtime_config(cls) -> Dict[str, Any]:
        """Get real-time orchestration configuration."""
        return {
            'min_chars': cls.MIN_TEXT_CHARS,
            'min_words': cls.MIN_TEXT_WORDS,
            'max_text_length': cls.MAX_TEXT_LENGTH,
            'max_suggestions': cls.MAX_SUGGESTIONS,
            'tier_thresholds': {
                'basic': cls.BASIC_TIER_CHARS,
                'intermediate': cls.INTERMEDIATE_TIER_CHARS,
                'advanced': cls.ADVANCED_TIER_CHARS,
            },
            'incremental_max_word_delta': cls.INCREMENTAL_MAX_WORD_DELTA,
            'target_analysis_time_ms': cls.TARGET_ANALYSIS_TIME_MS,
        }

    @classmethod
    def get_cache_config(cls) -> Dict[str, Any]:
        """Get analysis cache configuration."""
        return {
            'max_size': cls.CACHE_MAX_SIZE,
            'ttl_seconds': cls.CACHE_TTL_SECONDS,
            'cleanup_interval': cls.CACHE_CLEANUP_INTERVAL,
            'background_sweep': cls.CACHE_BACKGROUND_SWEEP,
        }

    @classmethod
    def get_recommendation_config(cls) -> Dict[str, Any]:
        """Get recommendation fuser configuration."""
        return {
            'conflict_penalty': cls.CONFLICT_PENALTY,
            'vote_tie_margin': cls.VOTE_TIE_MARGIN,
            'comparable_confidence_margin': cls.COMPARABLE_CONFIDENCE_MARGIN,
        }

    @classmethod
    def get_error_detection_config(cls) -> Dict[str, Any]:
        """Get error detector configuration."""
        return {
            'auto_apply_confidence': cls.AUTO_APPLY_CONFIDENCE,
        }


# For testing only
class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    LOG_LEVEL = 'DEBUG'
    CACHE_BACKGROUND_SWEEP = False
