"""
Severity tables and the error-kind catalogue.

Severity only ranks errors for reporting; no pass or component branches on it.
"""

from typing import Dict, Iterable, Tuple

from tense_analyzer.base_types import Severity
from tense_analyzer.exceptions import UnknownErrorKindError

SEVERITY_TABLES: Dict[Severity, Tuple[str, ...]] = {
    Severity.CRITICAL: (
        'present_past_mix',
        'wrong_auxiliary_am',
        'wrong_auxiliary_are',
        'present_in_past',
    ),
    Severity.HIGH: (
        'missing_gerund',
        'irregular_verb',
        'continuous_simple_mix',
        'base_verb_in_past',
        'missing_subject',
    ),
    Severity.MEDIUM: (
        'wrong_auxiliary_were',
        'wrong_auxiliary_was',
        'double_gerund',
        'invalid_auxiliary',
        'invalid_main_verb',
        'connector_tense_mismatch',
    ),
    Severity.LOW: (
        'misspelling',
        'adverb_order',
    ),
}

# Which component reports each kind
ERROR_KIND_OWNERS: Dict[str, str] = {
    'continuous_simple_mix': 'tense_mixing',
    'present_past_mix': 'tense_mixing',
    'wrong_auxiliary_am': 'auxiliary_agreement',
    'wrong_auxiliary_are': 'auxiliary_agreement',
    'wrong_auxiliary_were': 'auxiliary_agreement',
    'wrong_auxiliary_was': 'auxiliary_agreement',
    'irregular_verb': 'irregular_verbs',
    'missing_gerund': 'gerund',
    'double_gerund': 'gerund',
    'adverb_order': 'word_order',
    'misspelling': 'spelling',
    'present_in_past': 'structure',
    'base_verb_in_past': 'structure',
    'missing_subject': 'structure',
    'invalid_auxiliary': 'structure',
    'invalid_main_verb': 'structure',
    'connector_tense_mismatch': 'structure',
}

_SEVERITY_BY_KIND: Dict[str, Severity] = {
    kind: severity
    for severity, kinds in SEVERITY_TABLES.items()
    for kind in kinds
}

SEVERITY_RANK: Dict[Severity, int] = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}


def severity_for(kind: str, default: Severity = Severity.LOW) -> Severity:
    return _SEVERITY_BY_KIND.get(kind, default)


def is_critical(kind: str) -> bool:
    return _SEVERITY_BY_KIND.get(kind) == Severity.CRITICAL


def describe_error_kind(kind: str) -> Dict[str, str]:
    """Severity and owning component of a known error kind."""
    if kind not in _SEVERITY_BY_KIND:
        raise UnknownErrorKindError(kind)
    return {
        'kind': kind,
        'severity': _SEVERITY_BY_KIND[kind].value,
        'rule_type': ERROR_KIND_OWNERS.get(kind, 'unknown'),
    }


def known_error_kinds() -> Tuple[str, ...]:
    return tuple(sorted(_SEVERITY_BY_KIND))


def count_by_severity(kinds: Iterable[str]) -> Dict[str, int]:
    counts = {severity.value: 0 for severity in Severity}
    for kind in kinds:
        counts[severity_for(kind).value] += 1
    return counts
