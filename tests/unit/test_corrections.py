"""
Unit tests for correction application: longest span first, overlaps
skipped, offsets applied from the end of the text.
"""

import pytest

from rules.corrections import apply_corrections, match_case, select_non_overlapping
from tense_analyzer.base_types import Correction


def _correction(original, corrected, position, kind='test'):
    return Correction(
        original=original, corrected=corrected, kind=kind, reason='', position=position, confidence=0.95
    )


@pytest.mark.unit
class TestMatchCase:

    @pytest.mark.parametrize("original,replacement,expected", [
        ("Goed", "went", "Went"),
        ("goed", "went", "went"),
        ("They was playing", "they were playing", "They were playing"),
        ("", "went", "went"),
    ])
    def test_leading_capital_is_carried(self, original, replacement, expected):
        assert match_case(original, replacement) == expected


@pytest.mark.unit
class TestApplyCorrections:

    def test_longest_overlapping_correction_wins(self):
        longer = _correction("was walk", "was walking", 2)
        shorter = _correction("walk", "walked", 6)

        text = apply_corrections("I was walk home", [shorter, longer])

        assert text == "I was walking home", f"Expected the longer span to win but got: '{text}'"
        assert longer.applied
        assert not shorter.applied

    def test_input_order_does_not_matter(self):
        first = apply_corrections("I was walk home", [
            _correction("was walk", "was walking", 2), _correction("walk", "walked", 6)
        ])
        second = apply_corrections("I was walk home", [
            _correction("walk", "walked", 6), _correction("was walk", "was walking", 2)
        ])

        assert first == second == "I was walking home"

    def test_independent_corrections_keep_their_offsets(self):
        goed = _correction("goed", "went", 2)
        eated = _correction("eated", "ate", 11)

        text = apply_corrections("I goed and eated", [goed, eated])

        assert text == "I went and ate"
        assert goed.applied and eated.applied

    def test_stale_span_is_skipped(self):
        stale = _correction("xyz", "abc", 0)

        text = apply_corrections("I goed home", [stale])

        assert text == "I goed home"
        assert not stale.applied

    def test_select_non_overlapping_orders_longest_first(self):
        picks = select_non_overlapping([
            _correction("goed", "went", 2),
            _correction("I goed", "I went", 0),
            _correction("home", "house", 7),
        ])

        assert [c.original for c in picks] == ["I goed", "home"]
