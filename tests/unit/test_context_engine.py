"""
Unit tests for the context/temporal layer: connector and temporal evidence
extraction against the shipped vocabularies, and end-to-end recommendations.
"""

import pytest

from context_engine import ConnectorExtractor, RecommendationEngine, TemporalExtractor
from tense_analyzer.base_types import Recommendation
from tense_analyzer.structure_analyzer import StructureAnalyzer
from tense_analyzer.text_processing import normalize, split_words


def words_of(sentence):
    return split_words(normalize(sentence))


@pytest.fixture(scope="module")
def connectors():
    return ConnectorExtractor()


@pytest.fixture(scope="module")
def temporal():
    return TemporalExtractor()


@pytest.fixture(scope="module")
def analyzer():
    return StructureAnalyzer()


@pytest.fixture(scope="module")
def engine(analyzer):
    return RecommendationEngine(structure_analyzer=analyzer)


@pytest.mark.unit
class TestConnectorExtractor:

    def test_while_points_to_past_continuous(self, connectors):
        factors = connectors.extract(words_of("I was reading while she was cooking"))

        assert len(factors) == 1
        assert factors[0].value == 'while'
        assert factors[0].recommendation == Recommendation.PAST_CONTINUOUS
        assert factors[0].weight == pytest.approx(0.9)

    def test_connector_inside_a_word_is_ignored(self, connectors):
        assert connectors.extract(words_of("I was walking")) == []

    def test_when_interruption(self, connectors):
        factors = connectors.extract(words_of("I was sleeping when the phone rang"))

        by_value = {f.value: f for f in factors}
        assert by_value['when'].recommendation == Recommendation.MIXED
        assert by_value['when'].reason == 'when_interruption'
        assert by_value['phone rang'].recommendation == Recommendation.MIXED
        assert by_value['phone rang'].weight == pytest.approx(0.9)

    def test_when_context_setting(self, connectors):
        factors = connectors.extract(words_of("When I was young I lived in Spain"))

        assert [(f.value, f.recommendation, f.reason) for f in factors] == [
            ('when', Recommendation.PAST_CONTINUOUS, 'when_context_setting')
        ]

    def test_when_sequence(self, connectors, analyzer):
        sentence = "When I opened the door I saw him"
        factors = connectors.extract(words_of(sentence), analyzer.analyze(sentence))

        assert factors[0].recommendation == Recommendation.PAST_SIMPLE
        assert factors[0].reason == 'when_sequence'

    def test_when_general(self, connectors):
        factors = connectors.extract(words_of("when I was there"))

        assert factors[0].recommendation == Recommendation.EITHER
        assert factors[0].reason == 'when_general'

    def test_repeated_connector_counts_once(self, connectors):
        factors = connectors.extract(words_of("while I was cooking while he was reading"))

        assert [f.value for f in factors] == ['while']


@pytest.mark.unit
class TestTemporalExtractor:

    def test_specific_moment_and_duration(self, temporal):
        factors = temporal.extract(words_of("Yesterday I was at home all day"))

        summary = [(f.value, f.recommendation, f.reason) for f in factors]
        assert summary == [
            ('yesterday', Recommendation.PAST_SIMPLE, 'specific_moments'),
            ('all day', Recommendation.PAST_CONTINUOUS, 'duration_expressions'),
        ], f"Unexpected temporal factors: {summary}"

    def test_phrase_with_apostrophe(self, temporal):
        factors = temporal.extract_phrases(words_of("I was sleeping at 3 o'clock"))

        assert [f.value for f in factors] == ["at 3 o'clock"]
        assert factors[0].recommendation == Recommendation.PAST_CONTINUOUS

    def test_activity_verb_in_any_form(self, temporal):
        factors = temporal.extract_verb_semantics(words_of("She was working"))

        assert len(factors) == 1
        assert factors[0].value == 'working'
        assert factors[0].recommendation == Recommendation.PAST_CONTINUOUS
        assert factors[0].reason == 'activity_verb'

    def test_punctual_verb(self, temporal):
        factors = temporal.extract_verb_semantics(words_of("He arrived"))

        assert factors[0].recommendation == Recommendation.PAST_SIMPLE
        assert factors[0].weight == pytest.approx(0.9)

    def test_one_factor_per_lemma(self, temporal):
        factors = temporal.extract_verb_semantics(words_of("I walked and walked"))

        assert [f.value for f in factors] == ['walked']

    def test_no_evidence(self, temporal):
        assert temporal.extract(words_of("The cat is black")) == []


@pytest.mark.unit
class TestRecommendationEngine:

    def test_interruption_sentence_is_mixed(self, engine):
        result = engine.recommend("I was sleeping when the phone rang")

        assert result.primary_recommendation == Recommendation.MIXED
        assert result.confidence == pytest.approx((0.7 + 0.9 + 0.7) / 3, abs=1e-3)

    def test_conflicting_time_expressions_tie(self, engine):
        result = engine.recommend("Yesterday I was at home all day")

        assert result.primary_recommendation == Recommendation.EITHER
        assert result.confidence == pytest.approx(0.6475, abs=1e-3)

    def test_disagreeing_extractors(self, engine):
        result = engine.recommend("While I was reading, suddenly the bell sounded yesterday")

        assert result.primary_recommendation == Recommendation.EITHER
        assert result.confidence == pytest.approx((0.9 + 0.925) / 2 * 0.7, abs=1e-3)

    def test_duration_only(self, engine):
        result = engine.recommend("We waited for hours")

        assert result.primary_recommendation == Recommendation.PAST_CONTINUOUS

    @pytest.mark.parametrize("sentence", ["", "   ", None])
    def test_empty_input(self, engine, sentence):
        result = engine.recommend(sentence)

        assert result.primary_recommendation == Recommendation.EITHER
        assert result.confidence == 0.0

    def test_present_auxiliary_warning(self, engine):
        result = engine.recommend("I am walking home")

        types = [w['type'] for w in result.warnings]
        assert 'present_in_past_context' in types, f"Expected a present auxiliary warning but got: {types}"

    def test_gerund_without_auxiliary_warning(self, engine):
        result = engine.recommend("I walking home")

        assert [w['type'] for w in result.warnings] == ['gerund_without_auxiliary']

    def test_tense_mixing_warning(self, engine):
        result = engine.recommend("I was walked home")

        assert [w['type'] for w in result.warnings] == ['tense_mixing']

    def test_tip_names_strongest_factor(self, engine):
        tip = engine.tip_for(engine.recommend("I was sleeping when the phone rang"))

        assert tip['recommendation'] == 'mixed'
        assert tip['message'].startswith('"phone rang"')

    def test_no_tip_for_either(self, engine):
        assert engine.tip_for(engine.recommend("Yesterday I was at home all day")) is None

    def test_while_with_past_simple_warns(self, engine):
        result = engine.recommend("While I studied, she cooked")

        types = [w['type'] for w in result.warnings]
        assert types == ['connector_tense_mismatch'], f"Expected a connector warning but got: {types}"
        assert '"studied"' in result.warnings[0]['suggestion']

    def test_while_with_past_continuous_does_not_warn(self, engine):
        result = engine.recommend("While I was studying, she cooked dinner")

        assert 'connector_tense_mismatch' not in [w['type'] for w in result.warnings]


@pytest.mark.unit
class TestExplanation:

    def test_explanation_lists_factors_and_verdict(self, engine):
        explanation = engine.explain(engine.recommend("I was sleeping when the phone rang"))

        lines = explanation.splitlines()
        assert lines[0] == "Based on the context analysis (confidence: 77%)"
        assert "Factors found:" in lines
        assert any(line.startswith("1. ") for line in lines)
        assert "Recommendation: mixed" in lines
        assert "Warnings:" not in lines

    def test_explanation_includes_warnings(self, engine):
        explanation = engine.explain(engine.recommend("While I studied, she cooked"))

        assert "Warnings:" in explanation
        assert 'Suggestion: Change "studied" to "was/were + verb-ing"' in explanation

    def test_explanation_without_evidence(self, engine):
        explanation = engine.explain(engine.recommend(""))

        assert "Factors found:" not in explanation
        assert "(confidence: 0%)" in explanation
        assert explanation.splitlines()[-1] == "Recommendation: either"
