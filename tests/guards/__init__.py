"""
Guard Test Suite

Every ``# GUARD:`` in the analyzer and the detector passes has a pair of
tests here: one showing the guarded text is not flagged, one showing the
real error next to it is still caught.

Guards implemented:
- Guard 1: Structure - infinitive after "to" is not the main verb
- Guard 2: Tense mixing - participial adjectives after was/were
- Guard 3: Gerund - "-inging" that belongs to the stem
- Guard 4: Structure - capitalized time words are not proper-noun subjects
- Guard 5: Structure - a fronted phrase before a personal pronoun is not the subject
"""
