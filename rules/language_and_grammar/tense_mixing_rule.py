"""
Tense Mixing Rule
Catches a Past Simple verb glued to a continuous auxiliary ("was walked")
and a present auxiliary in front of a past verb ("am walked").
"""
import re
from typing import List

from rules.base_rule import BaseRule, PatternSpec, word_alternation
from tense_analyzer.verb_forms import gerund_form, lemma_from_past


class TenseMixingRule(BaseRule):
    """
    First detector pass. Both patterns rewrite the pair as past auxiliary +
    gerund, which later passes then treat as correct Past Continuous.
    """

    def _get_rule_type(self) -> str:
        return 'tense_mixing'

    def _build_patterns(self) -> List[PatternSpec]:
        grammar = self.vocabulary.get_grammar_patterns()
        errors = self.vocabulary.get_error_vocabulary()

        self.present_to_past = {
            str(k).lower(): str(v).lower()
            for k, v in (grammar.get('present_to_past_auxiliary') or {}).items()
        }
        self.known_lemmas = {
            str(v).lower() for v in (grammar.get('base_verbs') or []) + (errors.get('gerund_base_verbs') or [])
        }

        # GUARD: participial adjectives ("was tired") are not tense mixing
        exceptions = (errors.get('participial_adjectives') or []) + (grammar.get('not_past_ed_words') or [])
        exclusion = word_alternation(exceptions)
        guard = rf"(?!(?:{exclusion})\b)" if exclusion else ""
        past_verb = rf"(?P<verb>{guard}[a-z]{{2,}}ed)"

        return [
            PatternSpec(
                pattern=re.compile(rf"\b(?P<aux>was|were)\s+{past_verb}\b", re.IGNORECASE),
                kind='continuous_simple_mix',
                message='Use verb-ing after "{aux}", not a past form: "{corrected}"',
                correct=self._to_continuous,
                confidence=0.9,
            ),
            PatternSpec(
                pattern=re.compile(rf"\b(?P<aux>am|is|are)\s+{past_verb}\b", re.IGNORECASE),
                kind='present_past_mix',
                message='Use was/were for the past, not "{aux}": "{corrected}"',
                correct=self._to_past_continuous,
                confidence=0.9,
            ),
        ]

    def _gerund_of(self, past: str) -> str:
        return gerund_form(lemma_from_past(past.lower(), self.known_lemmas))

    def _to_continuous(self, match: re.Match) -> str:
        return f"{match.group('aux')} {self._gerund_of(match.group('verb'))}"

    def _to_past_continuous(self, match: re.Match) -> str:
        auxiliary = self.present_to_past.get(match.group('aux').lower(), 'was')
        return f"{auxiliary} {self._gerund_of(match.group('verb'))}"
