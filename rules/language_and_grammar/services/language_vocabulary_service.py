"""
Language Vocabulary Service

Loads the YAML rule tables shared by the structure analyzer, the error
detector passes and the context engine. Tables are read lazily, cached per
file and can be reloaded at runtime.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Any, Set, List, Optional

import yaml

from tense_analyzer.exceptions import UnknownVocabularyError

logger = logging.getLogger(__name__)


class LanguageVocabularyService:
    """
    Grammar, error, context and temporal vocabularies for the tense analyzer.

    Each table is read from YAML on first use and kept until reloaded.
    """

    TABLE_FILES = {
        'grammar_patterns': 'grammar_patterns.yaml',
        'error_vocabulary': 'error_vocabulary.yaml',
        'context_patterns': 'context_patterns.yaml',
        'temporal_expressions': 'temporal_expressions.yaml',
    }

    def __init__(self, config_dir: Optional[str] = None):
        if config_dir is None:
            # Tables ship in ../config next to the rule passes
            current_dir = Path(__file__).parent
            config_dir = current_dir.parent / "config"

        self.config_dir = Path(config_dir)
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._loaded_files: Set[str] = set()
        self._lock = threading.Lock()

    def _load_yaml_file(self, filename: str) -> Dict[str, Any]:
        """Return the parsed table in filename, reading it on first use."""
        cached = self._cache.get(filename)
        if cached is not None:
            return cached

        with self._lock:
            if filename in self._cache:
                return self._cache[filename]

            file_path = self.config_dir / filename

            if not file_path.exists():
                logger.warning(f"Vocabulary file {file_path} not found. Using empty vocabulary.")
                self._cache[filename] = {}
                return {}

            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = yaml.safe_load(f) or {}
            except (yaml.YAMLError, OSError) as e:
                logger.error(f"Error loading vocabulary file {file_path}: {e}")
                self._cache[filename] = {}
                return {}

            self._cache[filename] = data
            self._loaded_files.add(filename)
            logger.debug(f"Loaded language vocabulary: {filename}")
            return data

    def reload_vocabulary(self, filename: str) -> None:
        """Re-read one table from disk."""
        with self._lock:
            self._cache.pop(filename, None)
        self._load_yaml_file(filename)

    def reload_all_vocabularies(self) -> None:
        """Re-read every table loaded so far."""
        with self._lock:
            loaded_files = list(self._loaded_files)
            self._cache.clear()
            self._loaded_files.clear()

        for filename in loaded_files:
            self._load_yaml_file(filename)

    def get_table(self, name: str) -> Dict[str, Any]:
        """Get a vocabulary table by its configured name."""
        filename = self.TABLE_FILES.get(name)
        if filename is None:
            raise UnknownVocabularyError(name)
        return self._load_yaml_file(filename)

    # === TABLE ACCESSORS ===

    def get_grammar_patterns(self) -> Dict[str, Any]:
        """Get the structure analyzer word lists."""
        return self.get_table('grammar_patterns')

    def get_error_vocabulary(self) -> Dict[str, Any]:
        """Get the error detector vocabulary."""
        return self.get_table('error_vocabulary')

    def get_context_patterns(self) -> Dict[str, Any]:
        """Get connector semantics."""
        return self.get_table('context_patterns')

    def get_temporal_expressions(self) -> Dict[str, Any]:
        """Get temporal phrase tables and verb semantics."""
        return self.get_table('temporal_expressions')

    # === WORD LISTS ===

    def get_word_list(self, table: str, *path: str) -> List[str]:
        """Walk a nested table and return the list found at ``path`` (lowercased)."""
        node: Any = self.get_table(table)
        for key in path:
            if not isinstance(node, dict):
                return []
            node = node.get(key, {})
        if not isinstance(node, list):
            return []
        return [str(word).lower() for word in node]


# === GLOBAL SERVICE INSTANCE ===

_vocabulary_service: Optional[LanguageVocabularyService] = None
_vocabulary_lock = threading.Lock()


def get_vocabulary_service() -> LanguageVocabularyService:
    """Get the shared vocabulary service instance."""
    global _vocabulary_service
    if _vocabulary_service is None:
        with _vocabulary_lock:
            if _vocabulary_service is None:
                _vocabulary_service = LanguageVocabularyService()
    return _vocabulary_service
