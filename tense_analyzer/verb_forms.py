"""
Verb inflection helpers.

pyinflect supplies the forms for known lemmas; the spelling rules below only
cover words it does not know.
"""

from typing import Dict, Iterable, List, Optional, Set

from pyinflect import getInflection

VOWELS = set("aeiou")


def _inflect(lemma: str, tag: str) -> Optional[str]:
    forms = getInflection(lemma, tag=tag)
    if forms:
        return forms[0].lower()
    return None


def _ends_cvc(word: str) -> bool:
    """Short consonant-vowel-consonant endings double their last letter (stop -> stopped)."""
    if len(word) < 3 or len(word) > 4:
        return False
    a, b, c = word[-3], word[-2], word[-1]
    return a not in VOWELS and b in VOWELS and c not in VOWELS and c not in "wxy"


def regular_past(lemma: str) -> str:
    if lemma.endswith("e"):
        return lemma + "d"
    if lemma.endswith("y") and len(lemma) > 1 and lemma[-2] not in VOWELS:
        return lemma[:-1] + "ied"
    if _ends_cvc(lemma):
        return lemma + lemma[-1] + "ed"
    return lemma + "ed"


def regular_gerund(lemma: str) -> str:
    if lemma.endswith("ie"):
        return lemma[:-2] + "ying"
    if lemma.endswith("e") and not lemma.endswith("ee") and len(lemma) > 2:
        return lemma[:-1] + "ing"
    if _ends_cvc(lemma):
        return lemma + lemma[-1] + "ing"
    return lemma + "ing"


def past_form(lemma: str, irregular_forms: Optional[Dict[str, str]] = None) -> str:
    """Simple past of ``lemma``: irregular table, then pyinflect, then spelling rules."""
    lemma = lemma.lower()
    if irregular_forms and lemma in irregular_forms:
        return irregular_forms[lemma]
    return _inflect(lemma, "VBD") or regular_past(lemma)


def gerund_form(lemma: str) -> str:
    lemma = lemma.lower()
    return _inflect(lemma, "VBG") or regular_gerund(lemma)


def inflected_forms(lemma: str, irregular_forms: Optional[Dict[str, str]] = None) -> Set[str]:
    """Every surface form a verb can take in a sentence."""
    lemma = lemma.lower()
    forms = {lemma, past_form(lemma, irregular_forms), gerund_form(lemma)}
    for tag in ("VBZ", "VBN"):
        form = _inflect(lemma, tag)
        if form:
            forms.add(form)
    if not any(form.endswith("s") and form != lemma for form in forms):
        forms.add(lemma + ("es" if lemma.endswith(("s", "sh", "ch", "x", "o")) else "s"))
    return forms


def _past_candidates(word: str) -> List[str]:
    candidates = []
    if word.endswith("ied") and len(word) > 4:
        candidates.append(word[:-3] + "y")
    if word.endswith("ed"):
        stem = word[:-2]
        candidates.append(stem)
        candidates.append(word[:-1])
        if len(stem) > 2 and stem[-1] == stem[-2]:
            candidates.append(stem[:-1])
    return candidates


def lemma_from_past(word: str, known_lemmas: Iterable[str] = ()) -> str:
    """
    Recover the lemma of a regular past form ("walked" -> "walk", "danced" -> "dance").

    A candidate wins when it is a known lemma or when pyinflect produces
    ``word`` as its past tense.
    """
    word = word.lower()
    candidates = _past_candidates(word)
    if not candidates:
        return word

    known = set(known_lemmas)
    for candidate in candidates:
        if candidate in known:
            return candidate
    for candidate in candidates:
        forms = getInflection(candidate, tag="VBD")
        if forms and word in (form.lower() for form in forms):
            return candidate
    return candidates[0]
