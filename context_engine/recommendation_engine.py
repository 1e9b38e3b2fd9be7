"""
Recommendation Engine
Entry point of the context/temporal layer: runs both evidence extractors over
the sentence, adds structural warnings and hands everything to the fuser.
"""

import logging
from typing import Dict, List, Optional

from context_engine.connector_extractor import ConnectorExtractor
from context_engine.recommendation_fuser import RecommendationFuser
from context_engine.temporal_extractor import TemporalExtractor
from rules.language_and_grammar.services.language_vocabulary_service import (
    LanguageVocabularyService, get_vocabulary_service
)
from tense_analyzer.base_types import Recommendation, RecommendationResult, Role, StructureResult
from tense_analyzer.structure_analyzer import StructureAnalyzer
from tense_analyzer.text_processing import normalize, split_words

logger = logging.getLogger(__name__)

TIP_MESSAGES = {
    Recommendation.PAST_SIMPLE: 'Use Past Simple for finished, completed actions',
    Recommendation.PAST_CONTINUOUS: 'Use Past Continuous (was/were + verb-ing) for actions in progress',
    Recommendation.MIXED: 'Use Past Continuous for the action in progress and Past Simple for the interruption',
}


class RecommendationEngine:

    def __init__(self, vocabulary_service: Optional[LanguageVocabularyService] = None,
                 fuser: Optional[RecommendationFuser] = None,
                 structure_analyzer: Optional[StructureAnalyzer] = None):
        self.vocabulary = vocabulary_service or get_vocabulary_service()
        self.connector_extractor = ConnectorExtractor(self.vocabulary)
        self.temporal_extractor = TemporalExtractor(self.vocabulary)
        self.fuser = fuser or RecommendationFuser()
        self._structure_analyzer = structure_analyzer

    @property
    def structure_analyzer(self) -> StructureAnalyzer:
        if self._structure_analyzer is None:
            self._structure_analyzer = StructureAnalyzer(self.vocabulary)
        return self._structure_analyzer

    def recommend(self, sentence: Optional[str], structure: Optional[StructureResult] = None) -> RecommendationResult:
        """
        Recommend Past Simple, Past Continuous, a mix of both, or either.

        ``structure`` is the structure analysis of the same sentence; it is
        computed here when the caller does not pass one.
        """
        words = split_words(normalize(sentence))
        if not words:
            return self.fuser.fuse({})

        if structure is None:
            structure = self.structure_analyzer.analyze(sentence)

        engine_factors = {
            'connector': self.connector_extractor.extract(words, structure),
            'temporal': self.temporal_extractor.extract(words),
        }
        result = self.fuser.fuse(engine_factors, self.structural_warnings(structure))

        logger.debug(
            f"Recommendation for '{' '.join(words)}': {result.primary_recommendation.value} "
            f"({result.confidence:.2f}, {len(result.contributing_factors)} factors)"
        )
        return result

    def structural_warnings(self, structure: Optional[StructureResult]) -> List[Dict[str, str]]:
        """Structure problems that undermine any tense recommendation."""
        warnings: List[Dict[str, str]] = []
        if structure is None:
            return warnings

        auxiliary = structure.role(Role.AUXILIARY)
        main_verb = structure.role(Role.MAIN_VERB)
        gerund = structure.role(Role.GERUND)

        if auxiliary and auxiliary.subtype == 'present_auxiliary':
            warnings.append({
                'type': 'present_in_past_context',
                'message': 'Present auxiliary used in a past context',
                'suggestion': f'Change "{auxiliary.text}" to "{auxiliary.suggestion or "was"}"',
            })

        if gerund and auxiliary is None:
            warnings.append({
                'type': 'gerund_without_auxiliary',
                'message': 'Verb-ing form without was/were',
                'suggestion': 'Add "was" or "were" before the -ing verb',
            })

        if auxiliary and main_verb and auxiliary.subtype == 'past_auxiliary' and main_verb.subtype == 'regular_past':
            warnings.append({
                'type': 'tense_mixing',
                'message': 'Past Continuous and Past Simple are mixed in one verb phrase',
                'suggestion': 'Use "was/were + verb-ing" or the past form, not both',
            })

        mismatch = self.structure_analyzer.connector_tense_mismatch(structure)
        if mismatch is not None:
            connector, verb = mismatch
            warnings.append({
                'type': 'connector_tense_mismatch',
                'message': f'"{connector.capitalize()}" suggests past continuous for simultaneous actions',
                'suggestion': f'Change "{verb}" to "was/were + verb-ing"',
            })

        return warnings

    @staticmethod
    def tip_for(result: RecommendationResult) -> Optional[Dict[str, str]]:
        """A short learner tip for the primary recommendation, None for ``either``."""
        message = TIP_MESSAGES.get(result.primary_recommendation)
        if message is None:
            return None
        voting = [f for f in result.contributing_factors if f.recommendation == result.primary_recommendation]
        if voting:
            strongest = max(voting, key=lambda f: f.weight)
            message = f'"{strongest.value}": {message[0].lower()}{message[1:]}'
        return {'message': message, 'recommendation': result.primary_recommendation.value}

    @staticmethod
    def explain(result: RecommendationResult) -> str:
        """Plain-text explanation of a recommendation: confidence, factors, verdict and warnings."""
        lines = [f"Based on the context analysis (confidence: {round(result.confidence * 100)}%)", ""]

        if result.contributing_factors:
            lines.append("Factors found:")
            for number, factor in enumerate(result.contributing_factors, start=1):
                lines.append(
                    f"{number}. {factor.source} \"{factor.value}\": {factor.reason} "
                    f"(weight {factor.weight:g})"
                )
            lines.append("")

        lines.append(f"Recommendation: {result.primary_recommendation.value.replace('_', ' ')}")

        if result.warnings:
            lines.append("")
            lines.append("Warnings:")
            for warning in result.warnings:
                lines.append(f"- {warning['message']}")
                lines.append(f"  Suggestion: {warning['suggestion']}")

        return "\n".join(lines)
