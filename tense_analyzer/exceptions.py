"""
Exceptions raised by the analysis core.

Grammar mistakes found in learner text are never raised; they are returned as
data. The classes below cover configuration lookups that a boundary layer
should surface as "not found".
"""


class AnalysisError(Exception):
    """Base class for analysis core errors."""


class UnknownErrorKindError(AnalysisError, KeyError):
    """Raised when a caller asks about an error kind no rule produces."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unknown error kind: {kind}")

    def __str__(self) -> str:
        return self.args[0]


class UnknownVocabularyError(AnalysisError, KeyError):
    """Raised when a rule table is requested by a name that is not configured."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown vocabulary table: {name}")

    def __str__(self) -> str:
        return self.args[0]
