"""
Temporal Evidence Extractor
Weighted tense evidence from time expressions and from the aspect of the
verbs used in the sentence.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple

from rules.language_and_grammar.services.language_vocabulary_service import (
    LanguageVocabularyService, get_vocabulary_service
)
from tense_analyzer.base_types import ContributingFactor, Recommendation
from tense_analyzer.text_processing import PhraseMatch, build_phrase_matcher, find_phrases
from tense_analyzer.verb_forms import inflected_forms

logger = logging.getLogger(__name__)

SOURCE = 'temporal'

PHRASE_CATEGORIES = (
    'specific_moments',
    'duration_expressions',
    'sudden_actions',
    'sequence_markers',
)


class TemporalExtractor:

    def __init__(self, vocabulary_service: Optional[LanguageVocabularyService] = None):
        self.vocabulary = vocabulary_service or get_vocabulary_service()
        expressions = self.vocabulary.get_temporal_expressions()
        irregular_forms = self.vocabulary.get_grammar_patterns().get('irregular_past_forms') or {}

        self.category_recommendation: Dict[str, Recommendation] = {}
        self.phrase_weights: Dict[str, Dict[str, float]] = {}
        for category in PHRASE_CATEGORIES:
            section = expressions.get(category) or {}
            if not section:
                continue
            self.category_recommendation[category] = Recommendation(section['recommendation'])
            self.phrase_weights[category] = {
                str(phrase).lower(): float(weight) for phrase, weight in (section.get('phrases') or {}).items()
            }
        self.phrase_matcher = build_phrase_matcher(
            {category: weights.keys() for category, weights in self.phrase_weights.items()}
        )

        # surface form -> (lemma, recommendation, confidence, reason)
        self.verb_index: Dict[str, Tuple[str, Recommendation, float, str]] = {}
        for group in (expressions.get('verb_semantics') or {}).values():
            recommendation = Recommendation(group['recommendation'])
            for lemma, meta in (group.get('verbs') or {}).items():
                lemma = str(lemma).lower()
                entry = (lemma, recommendation, float(meta['confidence']), meta.get('reason', 'verb_semantics'))
                for form in inflected_forms(lemma, irregular_forms):
                    self.verb_index.setdefault(form, entry)

    def extract(self, words: List[str]) -> List[ContributingFactor]:
        return self.extract_phrases(words) + self.extract_verb_semantics(words)

    def extract_phrases(self, words: List[str]) -> List[ContributingFactor]:
        """Time expressions, longest match first; overlapping shorter phrases are dropped."""
        factors: List[ContributingFactor] = []
        seen: Set[str] = set()
        for match in self._non_overlapping(find_phrases(self.phrase_matcher, words)):
            if match.text in seen:
                continue
            seen.add(match.text)
            factors.append(ContributingFactor(
                source=SOURCE,
                value=match.text,
                weight=self.phrase_weights[match.label].get(match.text, 0.0),
                recommendation=self.category_recommendation[match.label],
                reason=match.label,
            ))
        return factors

    def extract_verb_semantics(self, words: List[str]) -> List[ContributingFactor]:
        """Activity and duration verbs point to Past Continuous, punctual ones to Past Simple."""
        factors: List[ContributingFactor] = []
        seen_lemmas: Set[str] = set()
        for word in words:
            entry = self.verb_index.get(word)
            if entry is None:
                continue
            lemma, recommendation, confidence, reason = entry
            if lemma in seen_lemmas:
                continue
            seen_lemmas.add(lemma)
            factors.append(ContributingFactor(
                source=SOURCE, value=word, weight=confidence, recommendation=recommendation, reason=reason
            ))
        return factors

    @staticmethod
    def _non_overlapping(matches: List[PhraseMatch]) -> List[PhraseMatch]:
        chosen: List[PhraseMatch] = []
        for match in sorted(matches, key=lambda m: (-m.length, m.start)):
            if any(match.start < kept.end and kept.start < match.end for kept in chosen):
                continue
            chosen.append(match)
        return sorted(chosen, key=lambda m: m.start)
