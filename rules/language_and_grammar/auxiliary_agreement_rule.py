"""
Auxiliary Agreement Rule
Checks that the continuous auxiliary agrees with its subject:
"was" with I/he/she/it, "were" with you/we/they.
"""
import re
from typing import List, Optional

from rules.base_rule import BaseRule, PatternSpec

PAST_AUXILIARY_BY_SUBJECT = {
    'i': 'was', 'he': 'was', 'she': 'was', 'it': 'was',
    'you': 'were', 'we': 'were', 'they': 'were',
}

# (subjects, wrong auxiliary, right auxiliary, kind, message)
# A right auxiliary of None follows the subject ("we am" -> "we were").
AGREEMENT_TABLE = (
    ('I|you|we|they', 'am', None, 'wrong_auxiliary_am', 'Use was/were in the past, not "am": "{corrected}"'),
    ('he|she|it', 'are', 'was', 'wrong_auxiliary_are', 'Use "was" with "{subject}" in the past, not "are"'),
    ('I|he|she|it', 'were', 'was', 'wrong_auxiliary_were', 'Use "was" with "{subject}", not "were"'),
    ('you|we|they', 'was', 'were', 'wrong_auxiliary_was', 'Use "were" with "{subject}", not "was"'),
)


class AuxiliaryAgreementRule(BaseRule):

    def _get_rule_type(self) -> str:
        return 'auxiliary_agreement'

    def _build_patterns(self) -> List[PatternSpec]:
        patterns = []
        for subjects, wrong, right, kind, message in AGREEMENT_TABLE:
            patterns.append(PatternSpec(
                pattern=re.compile(
                    rf"\b(?P<subject>{subjects})\s+{wrong}\s+(?P<gerund>\w+ing)\b", re.IGNORECASE
                ),
                kind=kind,
                message=message,
                correct=self._replace_auxiliary(right),
                confidence=0.95,
            ))
        return patterns

    @staticmethod
    def _replace_auxiliary(auxiliary: Optional[str]):
        def correct(match: re.Match) -> str:
            past = auxiliary or PAST_AUXILIARY_BY_SUBJECT[match.group('subject').lower()]
            return f"{match.group('subject')} {past} {match.group('gerund')}"
        return correct
