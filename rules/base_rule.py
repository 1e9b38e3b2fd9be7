"""
Base Rule Class - Abstract interface for the error detector passes.
Every pass inherits from this class and declares its table of regex patterns;
matching, case handling and error/correction construction live here.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Pattern, Tuple

from rules.corrections import match_case
from rules.language_and_grammar.services.language_vocabulary_service import (
    LanguageVocabularyService, get_vocabulary_service
)
from rules.severity import severity_for
from tense_analyzer.base_types import Correction, DetectedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternSpec:
    """
    One entry of a rule table.

    ``message`` is a format string; it receives the named groups of the
    match plus ``span`` (matched text) and ``corrected``.
    """
    pattern: Pattern
    kind: str
    message: str
    correct: Callable[[re.Match], str]
    confidence: float


def word_alternation(words: Iterable[str]) -> str:
    """Regex alternation of literal words, longest first so prefixes never shadow longer entries."""
    ordered = sorted({str(w) for w in words if str(w)}, key=lambda w: (-len(w), w))
    return "|".join(re.escape(w) for w in ordered)


class BaseRule(ABC):
    """
    Abstract base class for all detector passes.

    A pass only reports what it finds in the text it is given; applying the
    corrections is the detector's job.
    """

    def __init__(self, vocabulary_service: Optional[LanguageVocabularyService] = None) -> None:
        self.rule_type = self._get_rule_type()
        self.vocabulary = vocabulary_service or get_vocabulary_service()
        self.patterns: List[PatternSpec] = self._build_patterns()

    @abstractmethod
    def _get_rule_type(self) -> str:
        """Returns the unique identifier for this pass."""
        pass

    @abstractmethod
    def _build_patterns(self) -> List[PatternSpec]:
        """Returns the pass's pattern table."""
        pass

    @property
    def error_kinds(self) -> List[str]:
        return sorted({spec.kind for spec in self.patterns})

    def analyze(self, text: str) -> List[Tuple[DetectedError, Correction]]:
        """
        Match every pattern against ``text`` and return one error and one
        correction per match, in pattern-table order.
        """
        findings: List[Tuple[DetectedError, Correction]] = []
        if not text:
            return findings

        for spec in self.patterns:
            for match in spec.pattern.finditer(text):
                span = match.group(0)
                corrected = match_case(span, spec.correct(match))
                if corrected == span:
                    continue
                findings.append(self._create_finding(spec, match, span, corrected))

        return findings

    def _create_finding(self, spec: PatternSpec, match: re.Match, span: str,
                        corrected: str) -> Tuple[DetectedError, Correction]:
        fields: Dict[str, str] = {k: v for k, v in match.groupdict().items() if v is not None}
        fields.update(span=span, corrected=corrected)
        message = spec.message.format(**fields)

        error = DetectedError(
            kind=spec.kind,
            message=message,
            matched_span=span,
            position=match.start(),
            severity=severity_for(spec.kind),
            suggested_correction=corrected,
            confidence=spec.confidence,
            rule_type=self.rule_type,
        )
        correction = Correction(
            original=span,
            corrected=corrected,
            kind=spec.kind,
            reason=message,
            position=match.start(),
            confidence=spec.confidence,
        )
        return error, correction

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rule_type={self.rule_type!r}, patterns={len(self.patterns)})"
