"""
Unit tests for the multi-pass Error Detector.

Each pass is exercised through ``detect_all`` so the tests also cover pass
ordering and the confidence threshold for automatic correction.
"""

import pytest

from rules.base_rule import BaseRule
from rules.error_detector import AUTO_APPLY_CONFIDENCE, ErrorDetector
from rules.language_and_grammar.irregular_verbs_rule import IrregularVerbsRule
from rules.language_and_grammar.spelling_rule import SpellingRule
from tense_analyzer.base_types import Severity
from tense_analyzer.exceptions import UnknownErrorKindError


@pytest.fixture(scope="module")
def detector():
    return ErrorDetector()


class ExplodingRule(BaseRule):
    """Pass that always fails, used to check partial results."""

    def _get_rule_type(self) -> str:
        return 'exploding'

    def _build_patterns(self):
        return []

    def analyze(self, text):
        raise RuntimeError("pattern table corrupted")


def _kinds(result):
    return [error.kind for error in result.errors]


@pytest.mark.unit
class TestPassOrder:

    def test_fixed_pass_order(self, detector):
        assert detector.pass_names == [
            'tense_mixing',
            'auxiliary_agreement',
            'irregular_verbs',
            'gerund',
            'word_order',
            'spelling',
        ]

    def test_later_pass_sees_corrected_text(self, detector):
        """'eated' is rewritten to a gerund by tense mixing before the irregular pass runs."""
        result = detector.detect_all("I was eated")

        assert _kinds(result) == ['continuous_simple_mix'], \
            f"Expected only the tense mixing error but got: {_kinds(result)}"
        assert result.corrected_sentence == "I was eating"


@pytest.mark.unit
class TestDetectorPasses:
    """One scenario per error kind."""

    @pytest.mark.parametrize("sentence,kind,corrected", [
        ("I was walked to school", 'continuous_simple_mix', "I was walking to school"),
        ("I am walked home", 'present_past_mix', "I was walking home"),
        ("They was playing football", 'wrong_auxiliary_was', "They were playing football"),
        ("He are eating", 'wrong_auxiliary_are', "He was eating"),
        ("We am studying", 'wrong_auxiliary_am', "We were studying"),
        ("She were cooking", 'wrong_auxiliary_were', "She was cooking"),
        ("I goed home", 'irregular_verb', "I went home"),
        ("I was walk home", 'missing_gerund', "I was walking home"),
        ("She was walkinging", 'double_gerund', "She was walking"),
        ("I was studyng English", 'misspelling', "I was studying English"),
    ])
    def test_single_error(self, detector, sentence, kind, corrected):
        result = detector.detect_all(sentence)

        assert _kinds(result) == [kind], f"Expected [{kind}] for '{sentence}' but got: {_kinds(result)}"
        assert result.corrected_sentence == corrected, \
            f"Expected '{corrected}' but got: '{result.corrected_sentence}'"
        assert result.corrections[0].applied

    def test_correct_sentence_has_no_errors(self, detector):
        result = detector.detect_all("Yesterday I went to school")

        assert result.errors == []
        assert result.corrections == []
        assert result.corrected_sentence == "Yesterday I went to school"
        assert not result.has_errors

    def test_corrected_sentence_is_clean_on_rerun(self, detector):
        corrected = detector.detect_all("I goed home").corrected_sentence
        rerun = detector.detect_all(corrected)

        assert rerun.errors == [], f"Expected no errors in '{corrected}' but got: {_kinds(rerun)}"

    def test_capitalization_is_preserved(self, detector):
        result = detector.detect_all("Goed he home")

        assert result.corrected_sentence.startswith("Went")

    def test_error_fields(self, detector):
        error = detector.detect_all("I goed home").errors[0]

        assert error.matched_span == "goed"
        assert error.position == 2
        assert error.severity == Severity.HIGH
        assert error.suggested_correction == "went"
        assert error.rule_type == 'irregular_verbs'
        assert error.message == 'The past form is "went", not "goed"'

    def test_low_confidence_correction_is_not_applied(self, detector):
        result = detector.detect_all("I very was tired")

        assert _kinds(result) == ['adverb_order']
        assert result.corrections[0].corrected == "was very"
        assert not result.corrections[0].applied
        assert result.corrected_sentence == "I very was tired"

    def test_several_errors_in_one_sentence(self, detector):
        result = detector.detect_all("They was playing and I goed home")

        assert sorted(_kinds(result)) == ['irregular_verb', 'wrong_auxiliary_was']
        assert result.corrected_sentence == "They were playing and I went home"
        assert result.error_count == 2


@pytest.mark.unit
class TestThresholdAndFailures:

    def test_default_threshold(self):
        assert AUTO_APPLY_CONFIDENCE == 0.9

    def test_raised_threshold_keeps_original(self):
        strict = ErrorDetector(auto_apply_confidence=0.99)
        result = strict.detect_all("I goed home")

        assert _kinds(result) == ['irregular_verb']
        assert result.corrected_sentence == "I goed home"
        assert not result.corrections[0].applied

    def test_failing_pass_gives_partial_results(self):
        detector = ErrorDetector(rules=[IrregularVerbsRule(), ExplodingRule(), SpellingRule()])
        result = detector.detect_all("I goed home and was studyng")

        assert result.failed_passes == ['exploding']
        assert _kinds(result) == ['irregular_verb', 'misspelling']
        assert result.corrected_sentence == "I went home and was studying"

    @pytest.mark.parametrize("sentence", ["", None])
    def test_empty_sentence(self, detector, sentence):
        result = detector.detect_all(sentence)

        assert result.errors == []
        assert result.corrected_sentence == ""


@pytest.mark.unit
class TestSeverity:

    def test_severity_summary(self, detector):
        result = detector.detect_all("I am walked home")
        summary = detector.analyze_error_severity(result.errors)

        assert summary == {'critical': 1, 'high': 0, 'medium': 0, 'low': 0}

    def test_describe_error_kind(self, detector):
        description = detector.describe_error_kind('irregular_verb')

        assert description == {'kind': 'irregular_verb', 'severity': 'high', 'rule_type': 'irregular_verbs'}

    def test_describe_connector_kind(self, detector):
        description = detector.describe_error_kind('connector_tense_mismatch')

        assert description == {'kind': 'connector_tense_mismatch', 'severity': 'medium', 'rule_type': 'structure'}

    def test_unknown_error_kind_is_not_found(self, detector):
        with pytest.raises(UnknownErrorKindError) as excinfo:
            detector.describe_error_kind('made_up_kind')

        assert isinstance(excinfo.value, KeyError)
        assert excinfo.value.kind == 'made_up_kind'
        assert str(excinfo.value) == "Unknown error kind: made_up_kind"

    def test_to_dict(self, detector):
        payload = detector.detect_all("I goed home").to_dict()

        assert payload['original_sentence'] == "I goed home"
        assert payload['corrected_sentence'] == "I went home"
        assert payload['errors'][0]['kind'] == 'irregular_verb'
