"""
Error Detector
Runs the detector passes in a fixed order over a working copy of the
sentence. Each pass matches against the text as the previous passes left it;
its confident corrections are applied once the pass is done, never mid-pass.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from rules.base_rule import BaseRule
from rules.corrections import apply_corrections
from rules.language_and_grammar.auxiliary_agreement_rule import AuxiliaryAgreementRule
from rules.language_and_grammar.gerund_rule import GerundRule
from rules.language_and_grammar.irregular_verbs_rule import IrregularVerbsRule
from rules.language_and_grammar.services.language_vocabulary_service import (
    LanguageVocabularyService, get_vocabulary_service
)
from rules.language_and_grammar.spelling_rule import SpellingRule
from rules.language_and_grammar.tense_mixing_rule import TenseMixingRule
from rules.language_and_grammar.word_order_rule import WordOrderRule
from rules.severity import count_by_severity, describe_error_kind
from tense_analyzer.base_types import Correction, DetectedError, DetectionResult

logger = logging.getLogger(__name__)

AUTO_APPLY_CONFIDENCE = 0.9

# Later passes assume earlier ones already rewrote their matches
PASS_ORDER = (
    TenseMixingRule,
    AuxiliaryAgreementRule,
    IrregularVerbsRule,
    GerundRule,
    WordOrderRule,
    SpellingRule,
)


class ErrorDetector:
    """
    Multi-pass detector for common Past Simple / Past Continuous mistakes.

    A pass that raises is logged and recorded in ``failed_passes``; the
    remaining passes still run and everything found so far is returned.
    """

    def __init__(self, vocabulary_service: Optional[LanguageVocabularyService] = None,
                 auto_apply_confidence: float = AUTO_APPLY_CONFIDENCE,
                 rules: Optional[Sequence[BaseRule]] = None):
        self.vocabulary = vocabulary_service or get_vocabulary_service()
        self.auto_apply_confidence = auto_apply_confidence
        if rules is None:
            rules = [rule_class(self.vocabulary) for rule_class in PASS_ORDER]
        self.rules: List[BaseRule] = list(rules)
        logger.debug(f"ErrorDetector initialized with passes: {self.pass_names}")

    @property
    def pass_names(self) -> List[str]:
        return [rule.rule_type for rule in self.rules]

    def detect_all(self, sentence: Optional[str]) -> DetectionResult:
        """
        Run every pass and return the original and corrected sentence with
        the full error and correction lists (empty lists when nothing is found).
        """
        original = sentence or ""
        result = DetectionResult(original_sentence=original, corrected_sentence=original)
        working = original

        for rule in self.rules:
            try:
                findings = rule.analyze(working)
            except Exception as e:
                logger.error(f"Detector pass '{rule.rule_type}' failed: {e}", exc_info=True)
                result.failed_passes.append(rule.rule_type)
                continue

            pass_corrections: List[Correction] = []
            for error, correction in findings:
                result.errors.append(error)
                pass_corrections.append(correction)
            result.corrections.extend(pass_corrections)

            confident = [c for c in pass_corrections if c.confidence >= self.auto_apply_confidence]
            if confident:
                working = apply_corrections(working, confident)

        result.corrected_sentence = working
        if result.errors:
            logger.debug(f"Detected {len(result.errors)} error(s) in '{original}'")
        return result

    def analyze_error_severity(self, errors: Iterable[DetectedError]) -> Dict[str, int]:
        """Count errors per severity level."""
        return count_by_severity(error.kind for error in errors)

    def describe_error_kind(self, kind: str) -> Dict[str, str]:
        """Severity and owning pass of ``kind``; raises UnknownErrorKindError for unknown kinds."""
        return describe_error_kind(kind)
