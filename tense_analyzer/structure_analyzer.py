"""
Structure Analyzer
Splits a sentence into words and assigns grammatical roles in a fixed order:
subject, auxiliary, main verb, gerund, complement, connector, time marker.
A word claimed by one role is never reclaimed by a later one.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Set, Tuple

from rules.language_and_grammar.services.language_vocabulary_service import (
    LanguageVocabularyService, get_vocabulary_service
)
from tense_analyzer.base_types import (
    ROLE_ORDER, Role, RoleDetail, StructureError, StructureResult, TenseType, Token, required_roles_for
)
from tense_analyzer.text_processing import (
    PhraseMatch, build_phrase_matcher, clean_text, find_phrases, split_words
)
from tense_analyzer.verb_forms import past_form

logger = logging.getLogger(__name__)

PAST_SIMPLE_MARKER = "past_simple"
PAST_CONTINUOUS_MARKER = "past_continuous"


class StructureAnalyzer:
    """
    Rule-based role classifier for Past Simple / Past Continuous sentences.

    Word lists come from ``grammar_patterns.yaml`` through the vocabulary
    service; the analyzer itself holds no per-request state.
    """

    def __init__(self, vocabulary_service: Optional[LanguageVocabularyService] = None):
        self.vocabulary = vocabulary_service or get_vocabulary_service()
        patterns = self.vocabulary.get_grammar_patterns()

        subjects = patterns.get('subjects', {})
        self.pronouns = self._word_set(subjects.get('pronouns'))
        self.determiners = self._word_set(subjects.get('articles')) | self._word_set(subjects.get('possessives'))
        self.pronoun_determiners = self._word_set(subjects.get('demonstratives')) | self._word_set(subjects.get('quantifiers'))
        self.prepositions = self._word_set(patterns.get('prepositions'))

        person_groups = patterns.get('person_groups', {})
        self.person_auxiliary = {
            word: auxiliary
            for auxiliary, words in person_groups.items()
            for word in self._word_set(words)
        }

        auxiliaries = patterns.get('auxiliaries', {})
        self.past_auxiliaries = self._word_set(auxiliaries.get('past'))
        self.present_auxiliaries = self._word_set(auxiliaries.get('present'))
        self.negative_auxiliaries = self._word_set(auxiliaries.get('negative'))
        self.present_to_past = {k.lower(): v.lower() for k, v in (patterns.get('present_to_past_auxiliary') or {}).items()}

        self.irregular_past = self._word_set(patterns.get('irregular_past_verbs'))
        self.base_verbs = self._word_set(patterns.get('base_verbs'))
        self.irregular_forms = {k.lower(): v.lower() for k, v in (patterns.get('irregular_past_forms') or {}).items()}

        self.connectors = [str(word).lower() for word in patterns.get('connectors') or []]
        self.continuous_connectors = self._word_set(patterns.get('continuous_connectors'))
        self.non_subject_words = self._word_set(patterns.get('non_subject_words'))
        self.not_past_ed_words = self._word_set(patterns.get('not_past_ed_words'))
        self.not_gerund_words = self._word_set(patterns.get('not_gerund_ing_words'))

        time_markers = patterns.get('time_markers', {})
        self.time_marker_matcher = build_phrase_matcher({
            PAST_SIMPLE_MARKER: time_markers.get('past_simple') or [],
            PAST_CONTINUOUS_MARKER: time_markers.get('past_continuous') or [],
        })
        self.time_marker_words = {
            word
            for phrases in time_markers.values()
            for phrase in phrases or []
            for word in split_words(str(phrase).lower())
        }

    @staticmethod
    def _word_set(words) -> Set[str]:
        return {str(word).lower() for word in words or []}

    # === PUBLIC API ===

    def analyze(self, sentence: Optional[str]) -> StructureResult:
        """
        Classify the words of ``sentence`` into grammatical roles.

        Empty or whitespace-only input yields an empty result with tense
        ``unknown``; that is not an error.
        """
        original = sentence or ""
        cleaned_case = clean_text(original)
        cleaned = cleaned_case.lower()
        result = StructureResult(original=original, cleaned=cleaned)

        original_words = split_words(cleaned_case)
        if not original_words:
            return result

        tokens = [
            Token(text=word.lower(), original_text=word, index=i)
            for i, word in enumerate(original_words)
        ]

        # === ROLE DETECTION (fixed order) ===
        tokens = self._detect_subject(tokens, result)
        tokens = self._detect_auxiliary(tokens, result)
        tokens = self._detect_main_verb(tokens, result)
        tokens = self._detect_gerund(tokens, result)

        connector_index = self._find_connector(tokens)
        time_marker = self._find_time_marker(tokens, connector_index)
        reserved = set()
        if connector_index is not None:
            reserved.add(connector_index)
        if time_marker is not None:
            reserved.update(range(time_marker.start, time_marker.end))

        tokens = self._detect_complement(tokens, result, reserved)
        tokens = self._claim_connector(tokens, result, connector_index)
        tokens = self._claim_time_marker(tokens, result, time_marker)

        result.tokens = tokens
        result.tense_type = self._determine_tense(result)
        self._validate(result)
        self._identify_completed_roles(result)

        logger.debug(
            f"Structure of '{cleaned}': tense={result.tense_type.value}, "
            f"roles={[role.value for role in result.roles]}, errors={len(result.errors)}"
        )
        return result

    def generate_recommendations(self, structure: StructureResult) -> List[Dict[str, str]]:
        """Correction hints for the structural errors plus connector and time-marker tense hints."""
        recommendations = []

        for error in structure.errors:
            if error.kind in ('present_in_past', 'base_verb_in_past') and error.suggestion:
                recommendations.append({
                    'type': 'correction',
                    'kind': error.kind,
                    'message': f'Change "{error.text}" to "{error.suggestion}"',
                    'reason': 'Use the past tense form' if error.kind == 'base_verb_in_past'
                    else 'A past context needs a past auxiliary',
                })
            elif error.kind == 'missing_gerund':
                recommendations.append({
                    'type': 'addition',
                    'kind': error.kind,
                    'message': 'Add "-ing" to the verb for Past Continuous',
                    'reason': 'Past Continuous is was/were + verb-ing',
                })
            elif error.kind == 'missing_subject':
                recommendations.append({
                    'type': 'addition',
                    'kind': error.kind,
                    'message': 'Add a subject (I, you, he, she, it, we, they)',
                    'reason': 'English sentences need an explicit subject',
                })

        mismatch = self.connector_tense_mismatch(structure)
        if mismatch is not None:
            connector, verb = mismatch
            recommendations.append({
                'type': 'tense_suggestion',
                'kind': 'connector_tense_mismatch',
                'message': f'"{connector.capitalize()}" suggests past continuous: use was/were + verb-ing, not "{verb}"',
                'reason': f'"{connector}" shows an action in progress at the same time as another',
            })

        marker = structure.role(Role.TIME_MARKER)
        if marker and marker.suggested_tense and marker.suggested_tense != structure.tense_type.value:
            readable = marker.suggested_tense.replace('_', ' ')
            recommendations.append({
                'type': 'tense_suggestion',
                'kind': 'time_marker_mismatch',
                'message': f'"{marker.text}" suggests {readable}',
                'reason': f'This time expression is typical of {readable}',
            })

        return recommendations

    def connector_tense_mismatch(self, structure: StructureResult) -> Optional[Tuple[str, str]]:
        """
        ``(connector, verb)`` when a "while" clause uses a Past Simple verb.

        The clause is read from the connector up to the first past auxiliary
        or -ing form; either of those means the clause is already continuous.
        """
        words = split_words(structure.cleaned)
        start = next((i for i, word in enumerate(words) if word in self.continuous_connectors), None)
        if start is None:
            return None

        for word in words[start + 1:]:
            if word in self.past_auxiliaries or word in self.negative_auxiliaries:
                return None
            if word.endswith('ing') and word not in self.not_gerund_words:
                return None
            if word in self.irregular_past or self._is_regular_past(word):
                return words[start], word
        return None

    # === ROLE DETECTORS ===

    def _claim(self, tokens: List[Token], indexes, role: Role) -> List[Token]:
        claimed = set(indexes)
        return [
            replace(token, role=role, consumed=True) if token.index in claimed else token
            for token in tokens
        ]

    def _is_proper_noun(self, token: Token) -> bool:
        word = token.text
        if len(word) < 2 or not token.original_text[:1].isupper():
            return False
        # GUARD: capitalized time words and connectors at sentence start are not names
        if word in self.non_subject_words or word in self.connectors or word in self.time_marker_words:
            return False
        # Verbs and auxiliaries capitalized at sentence start are not names
        if word in self.past_auxiliaries or word in self.present_auxiliaries or word in self.negative_auxiliaries:
            return False
        if word in self.irregular_past or word in self.base_verbs or word in self.determiners:
            return False
        if word in self.pronoun_determiners or word in self.prepositions:
            return False
        return word.isalpha() or "'" in word or "-" in word

    def _is_verb_like(self, word: str) -> bool:
        return (word in self.past_auxiliaries or word in self.present_auxiliaries
                or word in self.negative_auxiliaries or word in self.irregular_past
                or word in self.base_verbs or self._is_regular_past(word))

    def _fronted_pronoun(self, tokens: List[Token]) -> Optional[int]:
        """Index of a personal pronoun that follows an opening phrase, before any verb."""
        for i, token in enumerate(tokens):
            if token.consumed:
                continue
            if self._is_verb_like(token.text):
                return None
            if token.text in self.pronouns:
                return i if i > 0 else None
        return None

    def _detect_subject(self, tokens: List[Token], result: StructureResult) -> List[Token]:
        # GUARD: "This morning they ..." and "During the night we ..." take the pronoun as subject
        start = self._fronted_pronoun(tokens) or 0

        for i, token in enumerate(tokens):
            if token.consumed or i < start:
                continue
            word = token.text
            next_word = tokens[i + 1].text if i + 1 < len(tokens) else None

            # "All the students": the article opens the noun phrase
            if word in self.pronoun_determiners and next_word in self.determiners:
                continue

            if word in self.pronouns:
                result.roles[Role.SUBJECT] = RoleDetail(
                    text=word, subtype='pronoun', position=i, words=[word]
                )
                return self._claim(tokens, [i], Role.SUBJECT)

            # "That was fun", "Some were sleeping": the word stands alone as the subject
            if word in self.pronoun_determiners and (next_word is None or self._is_verb_like(next_word)):
                result.roles[Role.SUBJECT] = RoleDetail(
                    text=word, subtype='pronoun', position=i, words=[word]
                )
                return self._claim(tokens, [i], Role.SUBJECT)

            # Determiner + noun: both words belong to the subject
            is_determiner = word in self.determiners or word in self.pronoun_determiners
            if is_determiner and i + 1 < len(tokens) and not tokens[i + 1].consumed:
                noun = tokens[i + 1].text
                result.roles[Role.SUBJECT] = RoleDetail(
                    text=f"{word} {noun}", subtype='noun_phrase', position=i, words=[word, noun]
                )
                return self._claim(tokens, [i, i + 1], Role.SUBJECT)

            if self._is_proper_noun(token):
                result.roles[Role.SUBJECT] = RoleDetail(
                    text=token.original_text, subtype='proper_noun', position=i, words=[word]
                )
                return self._claim(tokens, [i], Role.SUBJECT)

        return tokens

    def _suggest_past_auxiliary(self, present: str, result: StructureResult) -> str:
        subject = result.role(Role.SUBJECT)
        if subject is not None:
            if subject.subtype == 'pronoun' and subject.text in self.person_auxiliary:
                return self.person_auxiliary[subject.text]
            if subject.subtype == 'noun_phrase':
                head = subject.words[-1]
                return 'were' if head.endswith('s') and not head.endswith('ss') else 'was'
            if subject.subtype == 'proper_noun':
                return 'was'
        return self.present_to_past.get(present, 'was')

    def _detect_auxiliary(self, tokens: List[Token], result: StructureResult) -> List[Token]:
        for i, token in enumerate(tokens):
            if token.consumed:
                continue
            word = token.text

            if word in self.past_auxiliaries:
                result.roles[Role.AUXILIARY] = RoleDetail(text=word, subtype='past_auxiliary', position=i)
                return self._claim(tokens, [i], Role.AUXILIARY)

            if word in self.present_auxiliaries:
                suggestion = self._suggest_past_auxiliary(word, result)
                result.roles[Role.AUXILIARY] = RoleDetail(
                    text=word, subtype='present_auxiliary', position=i, is_valid=False,
                    error_kind='present_in_past', suggestion=suggestion
                )
                result.errors.append(StructureError(
                    kind='present_in_past',
                    message=f'Use "{suggestion}" instead of "{word}" in a past context',
                    role=Role.AUXILIARY, text=word, suggestion=suggestion
                ))
                return self._claim(tokens, [i], Role.AUXILIARY)

            if word in self.negative_auxiliaries:
                result.roles[Role.AUXILIARY] = RoleDetail(text=word, subtype='negative_auxiliary', position=i)
                return self._claim(tokens, [i], Role.AUXILIARY)

        return tokens

    def _is_regular_past(self, word: str) -> bool:
        return word.endswith('ed') and len(word) > 3 and word not in self.not_past_ed_words

    def _detect_main_verb(self, tokens: List[Token], result: StructureResult) -> List[Token]:
        for i, token in enumerate(tokens):
            if token.consumed:
                continue
            word = token.text

            if word in self.irregular_past:
                result.roles[Role.MAIN_VERB] = RoleDetail(text=word, subtype='irregular_past', position=i)
                return self._claim(tokens, [i], Role.MAIN_VERB)

            if self._is_regular_past(word):
                result.roles[Role.MAIN_VERB] = RoleDetail(text=word, subtype='regular_past', position=i)
                return self._claim(tokens, [i], Role.MAIN_VERB)

            if word in self.base_verbs:
                # GUARD: a base verb after "to" is an infinitive, not the main verb
                if i > 0 and tokens[i - 1].text == 'to':
                    continue
                suggestion = past_form(word, self.irregular_forms)
                result.roles[Role.MAIN_VERB] = RoleDetail(
                    text=word, subtype='base_verb', position=i, is_valid=False,
                    error_kind='base_verb_in_past', suggestion=suggestion
                )
                result.errors.append(StructureError(
                    kind='base_verb_in_past',
                    message=f'Use the past form "{suggestion}" instead of "{word}"',
                    role=Role.MAIN_VERB, text=word, suggestion=suggestion
                ))
                return self._claim(tokens, [i], Role.MAIN_VERB)

        return tokens

    def _detect_gerund(self, tokens: List[Token], result: StructureResult) -> List[Token]:
        for i, token in enumerate(tokens):
            word = token.text
            if token.consumed or word in self.not_gerund_words:
                continue
            if word.endswith('ing') and len(word) > 4:
                result.roles[Role.GERUND] = RoleDetail(text=word, subtype='gerund', position=i)
                return self._claim(tokens, [i], Role.GERUND)
        return tokens

    def _detect_complement(self, tokens: List[Token], result: StructureResult, reserved: Set[int]) -> List[Token]:
        indexes = [t.index for t in tokens if not t.consumed and t.index not in reserved]
        if not indexes:
            return tokens
        words = [tokens[i].text for i in indexes]
        result.roles[Role.COMPLEMENT] = RoleDetail(
            text=' '.join(words), subtype='complement', position=indexes[0], words=words
        )
        return self._claim(tokens, indexes, Role.COMPLEMENT)

    def _find_connector(self, tokens: List[Token]) -> Optional[int]:
        for token in tokens:
            if not token.consumed and token.text in self.connectors:
                return token.index
        return None

    def _find_time_marker(self, tokens: List[Token], connector_index: Optional[int]) -> Optional[PhraseMatch]:
        matches = find_phrases(self.time_marker_matcher, [t.text for t in tokens])

        def available(match: PhraseMatch) -> bool:
            span = range(match.start, match.end)
            if connector_index is not None and connector_index in span:
                return False
            return not any(tokens[i].consumed for i in span)

        # Past Simple markers take precedence over Past Continuous markers
        for label in (PAST_SIMPLE_MARKER, PAST_CONTINUOUS_MARKER):
            for match in matches:
                if match.label == label and available(match):
                    return match
        return None

    def _claim_connector(self, tokens: List[Token], result: StructureResult, index: Optional[int]) -> List[Token]:
        if index is None:
            return tokens
        word = tokens[index].text
        result.roles[Role.CONNECTOR] = RoleDetail(text=word, subtype='connector', position=index)
        return self._claim(tokens, [index], Role.CONNECTOR)

    def _claim_time_marker(self, tokens: List[Token], result: StructureResult, match: Optional[PhraseMatch]) -> List[Token]:
        if match is None:
            return tokens
        result.roles[Role.TIME_MARKER] = RoleDetail(
            text=match.text,
            subtype=f'{match.label}_marker',
            position=match.start,
            words=match.text.split(),
            suggested_tense=match.label,
        )
        return self._claim(tokens, range(match.start, match.end), Role.TIME_MARKER)

    # === TENSE, VALIDATION, COMPLETION ===

    def _determine_tense(self, result: StructureResult) -> TenseType:
        auxiliary = result.role(Role.AUXILIARY)
        main_verb = result.role(Role.MAIN_VERB)
        gerund = result.role(Role.GERUND)

        if auxiliary and auxiliary.subtype == 'past_auxiliary' and gerund:
            return TenseType.PAST_CONTINUOUS
        if main_verb and main_verb.subtype in ('irregular_past', 'regular_past'):
            return TenseType.PAST_SIMPLE
        if auxiliary and auxiliary.subtype == 'present_auxiliary':
            return TenseType.PRESENT_ERROR
        return TenseType.UNKNOWN

    def _validate(self, result: StructureResult) -> None:
        subject = result.role(Role.SUBJECT)
        auxiliary = result.role(Role.AUXILIARY)
        main_verb = result.role(Role.MAIN_VERB)
        gerund = result.role(Role.GERUND)

        if subject is None:
            result.errors.append(StructureError(
                kind='missing_subject', message='The sentence has no subject', role=Role.SUBJECT
            ))

        if result.tense_type == TenseType.PAST_CONTINUOUS:
            if auxiliary is None or not auxiliary.is_valid:
                result.errors.append(StructureError(
                    kind='invalid_auxiliary', message='Past Continuous needs "was" or "were"',
                    role=Role.AUXILIARY
                ))
            if gerund is None:
                result.errors.append(StructureError(
                    kind='missing_gerund', message='Past Continuous needs a verb ending in -ing',
                    role=Role.GERUND
                ))
        elif result.tense_type == TenseType.PAST_SIMPLE:
            if main_verb is None or not main_verb.is_valid:
                result.errors.append(StructureError(
                    kind='invalid_main_verb', message='Past Simple needs a verb in the past form',
                    role=Role.MAIN_VERB
                ))

        result.is_valid = not result.errors

    def _identify_completed_roles(self, result: StructureResult) -> None:
        result.completed_roles = [
            role for role, detail in result.roles.items() if detail.is_valid
        ]
        completed = set(result.completed_roles)
        result.missing_roles = [
            role for role in required_roles_for(result.tense_type) if role not in completed
        ]


def structure_summary(structure: StructureResult) -> Dict[str, Any]:
    """Compact view of a structure result used in logs and the CLI."""
    return {
        'tense_type': structure.tense_type.value,
        'is_valid': structure.is_valid,
        'roles': {role.value: structure.roles[role].text for role in ROLE_ORDER if role in structure.roles},
        'missing_roles': [role.value for role in structure.missing_roles],
        'completion_percentage': structure.completion_percentage,
    }
