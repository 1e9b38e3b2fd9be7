"""
Word Order Rule
Flags an adverb placed before was/were ("very was"), a common transfer from
Spanish word order. The fix is only suggested, never applied automatically.
"""
import re
from typing import List

from rules.base_rule import BaseRule, PatternSpec, word_alternation


class WordOrderRule(BaseRule):

    def _get_rule_type(self) -> str:
        return 'word_order'

    def _build_patterns(self) -> List[PatternSpec]:
        adverbs = self.vocabulary.get_word_list('error_vocabulary', 'misplaced_adverbs')
        if not adverbs:
            return []
        return [
            PatternSpec(
                pattern=re.compile(
                    rf"\b(?P<adverb>{word_alternation(adverbs)})\s+(?P<aux>was|were)\b", re.IGNORECASE
                ),
                kind='adverb_order',
                message='In English the adverb goes after the auxiliary: "{corrected}"',
                correct=lambda match: f"{match.group('aux')} {match.group('adverb')}",
                confidence=0.6,
            )
        ]
