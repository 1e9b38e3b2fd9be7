"""
Correction application.

Corrections are applied longest span first. A shorter correction that
overlaps one already chosen is skipped, and splicing runs from the end of
the text backwards so earlier offsets stay valid.
"""

import logging
from typing import Iterable, List

from tense_analyzer.base_types import Correction

logger = logging.getLogger(__name__)


def match_case(original: str, replacement: str) -> str:
    """Carry the leading capital of ``original`` over to ``replacement``."""
    if original and replacement and original[0].isupper():
        return replacement[0].upper() + replacement[1:]
    return replacement


def _overlaps(a: Correction, b: Correction) -> bool:
    return a.position < b.end and b.position < a.end


def select_non_overlapping(corrections: Iterable[Correction]) -> List[Correction]:
    """Pick corrections longest-first, dropping any that overlap an earlier pick."""
    chosen: List[Correction] = []
    ordered = sorted(corrections, key=lambda c: (-len(c.original), c.position))
    for correction in ordered:
        if any(_overlaps(correction, kept) for kept in chosen):
            logger.debug(f"Skipping overlapping correction '{correction.original}' at {correction.position}")
            continue
        chosen.append(correction)
    return chosen


def apply_corrections(text: str, corrections: Iterable[Correction]) -> str:
    """
    Apply ``corrections`` to ``text`` and mark the ones used as applied.

    Offsets refer to ``text``; a correction whose span no longer matches the
    text at its offset is skipped.
    """
    chosen = select_non_overlapping(corrections)
    for correction in sorted(chosen, key=lambda c: c.position, reverse=True):
        if text[correction.position:correction.end] != correction.original:
            logger.debug(f"Correction '{correction.original}' no longer matches at {correction.position}")
            continue
        text = text[:correction.position] + correction.corrected + text[correction.end:]
        correction.applied = True
    return text
