"""
Connector Evidence Extractor
Turns the connectors of a sentence (while, as, when) and known interruption
phrases into weighted tense evidence.
"""

import logging
from typing import Dict, List, Optional, Set

from rules.language_and_grammar.services.language_vocabulary_service import (
    LanguageVocabularyService, get_vocabulary_service
)
from tense_analyzer.base_types import ContributingFactor, Recommendation, Role, StructureResult
from tense_analyzer.text_processing import build_phrase_matcher, find_phrases

logger = logging.getLogger(__name__)

SOURCE = 'connector'
CONTEXT_DEPENDENT = 'context_dependent'


class ConnectorExtractor:
    """
    Reads connector semantics from ``context_patterns.yaml``.

    "when" is context dependent and is read as one of four uses:
    - interruption ("when the phone rang") -> mixed
    - context setting ("when I was young") -> past_continuous
    - sequence (a past-simple main verb and no gerund) -> past_simple
    - general -> either, which carries no vote
    """

    def __init__(self, vocabulary_service: Optional[LanguageVocabularyService] = None):
        self.vocabulary = vocabulary_service or get_vocabulary_service()
        patterns = self.vocabulary.get_context_patterns()

        self.connectors: Dict[str, Dict] = {
            str(word).lower(): spec for word, spec in (patterns.get('connectors') or {}).items()
        }

        when_patterns = patterns.get('when_patterns') or {}
        self.interruption_words: Set[str] = self._words(when_patterns.get('interruption'))
        self.context_setting_words: Set[str] = self._words(when_patterns.get('context_setting'))

        self.interruption_weights: Dict[str, float] = {
            str(phrase).lower(): float(weight)
            for phrase, weight in (patterns.get('interruption_patterns') or {}).items()
        }
        self.interruption_matcher = build_phrase_matcher({'interruption': self.interruption_weights.keys()})

    @staticmethod
    def _words(section) -> Set[str]:
        if not section:
            return set()
        return {str(word).lower() for word in section.get('words') or []}

    def extract(self, words: List[str], structure: Optional[StructureResult] = None) -> List[ContributingFactor]:
        """Evidence from connectors and interruption phrases, in sentence order."""
        factors: List[ContributingFactor] = []
        seen: Set[str] = set()

        for word in words:
            spec = self.connectors.get(word)
            if spec is None or word in seen:
                continue
            seen.add(word)

            weight = float(spec.get('confidence', 0.0))
            if spec.get('recommendation') == CONTEXT_DEPENDENT:
                factors.append(self._classify_when(word, weight, words, structure))
            else:
                factors.append(ContributingFactor(
                    source=SOURCE,
                    value=word,
                    weight=weight,
                    recommendation=Recommendation(spec['recommendation']),
                    reason=spec.get('reason', 'connector'),
                ))

        for match in find_phrases(self.interruption_matcher, words):
            if match.text in seen:
                continue
            seen.add(match.text)
            factors.append(ContributingFactor(
                source=SOURCE,
                value=match.text,
                weight=self.interruption_weights.get(match.text, 0.0),
                recommendation=Recommendation.MIXED,
                reason='interruption_pattern',
            ))

        return factors

    def _classify_when(self, connector: str, weight: float, words: List[str],
                       structure: Optional[StructureResult]) -> ContributingFactor:
        present = set(words)

        if present & self.interruption_words:
            recommendation, reason = Recommendation.MIXED, 'when_interruption'
        elif present & self.context_setting_words:
            recommendation, reason = Recommendation.PAST_CONTINUOUS, 'when_context_setting'
        elif self._is_sequence(structure):
            recommendation, reason = Recommendation.PAST_SIMPLE, 'when_sequence'
        else:
            recommendation, reason = Recommendation.EITHER, 'when_general'

        logger.debug(f"'{connector}' read as {reason}")
        return ContributingFactor(
            source=SOURCE, value=connector, weight=weight, recommendation=recommendation, reason=reason
        )

    @staticmethod
    def _is_sequence(structure: Optional[StructureResult]) -> bool:
        if structure is None:
            return False
        main_verb = structure.role(Role.MAIN_VERB)
        return (
            main_verb is not None
            and main_verb.subtype in ('irregular_past', 'regular_past')
            and structure.role(Role.GERUND) is None
        )
