"""
Rule passes for the tense error detector.

Modules are imported directly (``from rules.error_detector import ErrorDetector``)
so that loading one pass never pulls in the whole detector.
"""
