"""
Gerund Rule
Finds a base verb left without "-ing" after was/were and a doubled
"-inging" suffix.
"""
import re
from typing import List

from rules.base_rule import BaseRule, PatternSpec, word_alternation
from tense_analyzer.verb_forms import gerund_form


class GerundRule(BaseRule):

    def _get_rule_type(self) -> str:
        return 'gerund'

    def _build_patterns(self) -> List[PatternSpec]:
        base_verbs = self.vocabulary.get_word_list('error_vocabulary', 'gerund_base_verbs')
        patterns = []

        if base_verbs:
            patterns.append(PatternSpec(
                pattern=re.compile(
                    rf"\b(?P<aux>was|were)\s+(?P<verb>{word_alternation(base_verbs)})\b", re.IGNORECASE
                ),
                kind='missing_gerund',
                message='Past Continuous needs verb-ing after "{aux}": "{corrected}"',
                correct=lambda match: f"{match.group('aux')} {gerund_form(match.group('verb'))}",
                confidence=0.9,
            ))

        # GUARD: the stem must hold a vowel, so "singing" and "bringing" are left alone
        # GUARD: listed words such as "impinging" are real and never collapsed
        exceptions = self.vocabulary.get_word_list('error_vocabulary', 'double_gerund_exceptions')
        exclusion = word_alternation(exceptions)
        guard = rf"(?!(?:{exclusion})\b)" if exclusion else ""
        patterns.append(PatternSpec(
            pattern=re.compile(rf"\b{guard}(?P<stem>\w*[aeiouy]\w*?)inging\b", re.IGNORECASE),
            kind='double_gerund',
            message='Add "-ing" only once: "{corrected}"',
            correct=lambda match: f"{match.group('stem')}ing",
            confidence=0.9,
        ))
        return patterns
