"""
Text processing helpers shared by the analyzers.

Sentences are split on whitespace only, so the spaCy pipeline is a blank
English vocabulary used to build Doc objects over those words and to run
PhraseMatcher lookups for multi-word markers ("last night", "all day").
"""

import logging
import re
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import spacy
from spacy.matcher import PhraseMatcher
from spacy.tokens import Doc

logger = logging.getLogger(__name__)

_TYPOGRAPHIC_APOSTROPHES = re.compile(r"[‘’ʼ`]")
_NON_GRAMMATICAL = re.compile(r"[^\w\s'-]")
_WHITESPACE = re.compile(r"\s+")
_WORD_CHAR = re.compile(r"\w")

_nlp = None
_nlp_lock = threading.Lock()


def clean_text(sentence: Optional[str]) -> str:
    """Trim, unify apostrophes, drop non-grammatical punctuation and collapse whitespace. Case is kept."""
    if not sentence:
        return ""
    text = _TYPOGRAPHIC_APOSTROPHES.sub("'", sentence)
    text = _NON_GRAMMATICAL.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def normalize(sentence: Optional[str]) -> str:
    return clean_text(sentence).lower()


def split_words(text: str) -> List[str]:
    """Whitespace tokenization; stray apostrophes and hyphens are not words."""
    return [word for word in text.split() if _WORD_CHAR.search(word)]


def word_count(text: Optional[str]) -> int:
    if not text:
        return 0
    return len(text.split())


def get_nlp():
    """Blank English pipeline, created once per process."""
    global _nlp
    if _nlp is None:
        with _nlp_lock:
            if _nlp is None:
                _nlp = spacy.blank("en")
                logger.debug("Initialized blank spaCy English pipeline")
    return _nlp


def make_doc(words: List[str]) -> Doc:
    """Build a Doc over pre-split words without running the spaCy tokenizer."""
    return Doc(get_nlp().vocab, words=list(words))


@dataclass(frozen=True)
class PhraseMatch:
    label: str
    start: int
    end: int
    text: str

    @property
    def length(self) -> int:
        return self.end - self.start


def build_phrase_matcher(phrases_by_label: Dict[str, Iterable[str]]) -> PhraseMatcher:
    """Case-insensitive PhraseMatcher with one label per phrase group."""
    matcher = PhraseMatcher(get_nlp().vocab, attr="LOWER")
    for label, phrases in phrases_by_label.items():
        patterns = [make_doc(split_words(str(phrase))) for phrase in phrases if split_words(str(phrase))]
        if patterns:
            matcher.add(label, patterns)
    return matcher


def find_phrases(matcher: PhraseMatcher, words: List[str]) -> List[PhraseMatch]:
    """All phrase matches over ``words``, ordered by start and then longest first."""
    if not words:
        return []
    doc = make_doc(words)
    strings = doc.vocab.strings
    matches = [
        PhraseMatch(strings[match_id], start, end, doc[start:end].text.lower())
        for match_id, start, end in matcher(doc)
    ]
    matches.sort(key=lambda m: (m.start, -m.length))
    return matches
