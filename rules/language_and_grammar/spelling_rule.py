"""
Spelling Rule
Corrects misspelled gerunds learners commonly produce ("studyng", "comming").
"""
import re
from typing import List

from rules.base_rule import BaseRule, PatternSpec


class SpellingRule(BaseRule):
    """
    Last detector pass. Runs over the text after every earlier correction
    has been applied.
    """

    def _get_rule_type(self) -> str:
        return 'spelling'

    def _build_patterns(self) -> List[PatternSpec]:
        misspellings = self.vocabulary.get_error_vocabulary().get('misspellings') or {}
        return [
            PatternSpec(
                pattern=re.compile(rf"\b{re.escape(str(wrong))}\b", re.IGNORECASE),
                kind='misspelling',
                message=f'The correct spelling is "{right}"',
                correct=lambda match, right=str(right): right,
                confidence=0.95,
            )
            for wrong, right in sorted(misspellings.items())
        ]
