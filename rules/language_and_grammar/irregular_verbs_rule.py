"""
Irregular Verbs Rule
Replaces regularized past forms of irregular verbs ("goed", "eated").
"""
import re
from typing import List

from rules.base_rule import BaseRule, PatternSpec


class IrregularVerbsRule(BaseRule):
    """One table entry per known regularized form in ``error_vocabulary.yaml``."""

    def _get_rule_type(self) -> str:
        return 'irregular_verbs'

    def _build_patterns(self) -> List[PatternSpec]:
        table = self.vocabulary.get_error_vocabulary().get('irregular_verb_errors') or {}
        patterns = []
        for wrong, right in sorted(table.items()):
            right = str(right)
            patterns.append(PatternSpec(
                pattern=re.compile(rf"\b{re.escape(str(wrong))}\b", re.IGNORECASE),
                kind='irregular_verb',
                message=f'The past form is "{right}", not "{{span}}"',
                correct=lambda match, right=right: right,
                confidence=0.98,
            ))
        return patterns
