"""
Unit tests for the YAML vocabulary service.
"""

import pytest

from rules.language_and_grammar.services.language_vocabulary_service import (
    LanguageVocabularyService, get_vocabulary_service
)
from tense_analyzer.exceptions import UnknownVocabularyError


@pytest.fixture(scope="module")
def service():
    return LanguageVocabularyService()


@pytest.mark.unit
class TestShippedVocabularies:
    """The packaged tables load and hold what the analyzers expect."""

    def test_every_table_loads(self, service):
        for name in LanguageVocabularyService.TABLE_FILES:
            assert service.get_table(name), f"Expected table '{name}' to be non-empty"

    def test_grammar_patterns(self, service):
        patterns = service.get_grammar_patterns()

        assert patterns['auxiliaries']['past'] == ['was', 'were']
        assert patterns['irregular_past_forms']['go'] == 'went'

    def test_word_list_is_lowercased(self, service):
        words = service.get_word_list('grammar_patterns', 'subjects', 'pronouns')

        assert 'i' in words
        assert all(word == word.lower() for word in words)

    def test_word_list_missing_path(self, service):
        assert service.get_word_list('grammar_patterns', 'no', 'such', 'path') == []

    def test_unknown_table(self, service):
        with pytest.raises(UnknownVocabularyError):
            service.get_table('spanish_idioms')

    def test_singleton(self):
        assert get_vocabulary_service() is get_vocabulary_service()


@pytest.mark.unit
class TestCustomConfigDir:

    def test_missing_file_gives_empty_table(self, tmp_path):
        service = LanguageVocabularyService(config_dir=tmp_path)

        assert service.get_error_vocabulary() == {}

    def test_invalid_yaml_gives_empty_table(self, tmp_path):
        (tmp_path / 'context_patterns.yaml').write_text("connectors: [while\n", encoding='utf-8')
        service = LanguageVocabularyService(config_dir=tmp_path)

        assert service.get_context_patterns() == {}

    def test_reload_picks_up_changes(self, tmp_path):
        path = tmp_path / 'error_vocabulary.yaml'
        path.write_text("misspellings:\n  studyng: studying\n", encoding='utf-8')
        service = LanguageVocabularyService(config_dir=tmp_path)
        assert service.get_error_vocabulary()['misspellings'] == {'studyng': 'studying'}

        path.write_text("misspellings:\n  walkng: walking\n", encoding='utf-8')
        assert 'studyng' in service.get_error_vocabulary()['misspellings'], "Expected the cached table"

        service.reload_vocabulary('error_vocabulary.yaml')
        assert service.get_error_vocabulary()['misspellings'] == {'walkng': 'walking'}

    def test_reload_all(self, tmp_path):
        path = tmp_path / 'grammar_patterns.yaml'
        path.write_text("connectors: [while]\n", encoding='utf-8')
        service = LanguageVocabularyService(config_dir=tmp_path)
        service.get_grammar_patterns()

        path.write_text("connectors: [when]\n", encoding='utf-8')
        service.reload_all_vocabularies()

        assert service.get_grammar_patterns()['connectors'] == ['when']
