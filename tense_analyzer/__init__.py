"""
Tense analysis core: shared types, text processing and the structure analyzer.
"""
