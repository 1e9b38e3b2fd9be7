"""
Base Types for the Tense Analysis Core
Shared enums and per-request data structures passed between the structure
analyzer, the error detector, the context engine and the real-time layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Role(str, Enum):
    """Grammatical slot a token can occupy."""
    SUBJECT = "subject"
    AUXILIARY = "auxiliary"
    MAIN_VERB = "main_verb"
    GERUND = "gerund"
    COMPLEMENT = "complement"
    CONNECTOR = "connector"
    TIME_MARKER = "time_marker"


# Detection order; a token claimed by an earlier role is never reclaimed.
ROLE_ORDER: Tuple[Role, ...] = (
    Role.SUBJECT,
    Role.AUXILIARY,
    Role.MAIN_VERB,
    Role.GERUND,
    Role.COMPLEMENT,
    Role.CONNECTOR,
    Role.TIME_MARKER,
)


class TenseType(str, Enum):
    PAST_CONTINUOUS = "past_continuous"
    PAST_SIMPLE = "past_simple"
    PRESENT_ERROR = "present_error"
    UNKNOWN = "unknown"


# Roles a sentence of each tense must fill. Anything that is not a past
# tense is measured against the minimal subject + verb skeleton.
REQUIRED_ROLES: Dict[TenseType, Tuple[Role, ...]] = {
    TenseType.PAST_CONTINUOUS: (Role.SUBJECT, Role.AUXILIARY, Role.GERUND),
    TenseType.PAST_SIMPLE: (Role.SUBJECT, Role.MAIN_VERB),
    TenseType.PRESENT_ERROR: (Role.SUBJECT, Role.MAIN_VERB),
    TenseType.UNKNOWN: (Role.SUBJECT, Role.MAIN_VERB),
}


def required_roles_for(tense_type: TenseType) -> Tuple[Role, ...]:
    return REQUIRED_ROLES.get(TenseType(tense_type), REQUIRED_ROLES[TenseType.UNKNOWN])


def completion_percentage(tense_type: TenseType, completed_roles) -> int:
    """Share of the tense's required roles that are satisfied, rounded half up."""
    required = required_roles_for(tense_type)
    completed = {Role(role) for role in completed_roles}
    satisfied = sum(1 for role in required if role in completed)
    # round() would use banker's rounding; 1/2 must give 50 and 2/3 give 67
    return int(satisfied * 100 / len(required) + 0.5)


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Recommendation(str, Enum):
    PAST_SIMPLE = "past_simple"
    PAST_CONTINUOUS = "past_continuous"
    MIXED = "mixed"
    EITHER = "either"


class AnalysisTier(str, Enum):
    NONE = "none"
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]


_TIER_RANK = {
    AnalysisTier.NONE: 0,
    AnalysisTier.BASIC: 1,
    AnalysisTier.INTERMEDIATE: 2,
    AnalysisTier.ADVANCED: 3,
}


# === STRUCTURE ANALYSIS ===

@dataclass(frozen=True)
class Token:
    """One whitespace-separated word of the normalized sentence."""
    text: str
    original_text: str
    index: int
    role: Optional[Role] = None
    consumed: bool = False


@dataclass
class RoleDetail:
    """What the analyzer found for one role."""
    text: str
    subtype: str
    position: int
    is_valid: bool = True
    error_kind: Optional[str] = None
    suggestion: Optional[str] = None
    words: List[str] = field(default_factory=list)
    suggested_tense: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'text': self.text,
            'subtype': self.subtype,
            'position': self.position,
            'is_valid': self.is_valid,
            'error_kind': self.error_kind,
            'suggestion': self.suggestion,
            'words': list(self.words),
            'suggested_tense': self.suggested_tense,
        }


@dataclass
class StructureError:
    """A structural problem found while classifying or validating roles."""
    kind: str
    message: str
    role: Optional[Role] = None
    text: Optional[str] = None
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'message': self.message,
            'role': self.role.value if self.role else None,
            'text': self.text,
            'suggestion': self.suggestion,
        }


@dataclass
class StructureResult:
    original: str
    cleaned: str
    tokens: List[Token] = field(default_factory=list)
    roles: Dict[Role, RoleDetail] = field(default_factory=dict)
    tense_type: TenseType = TenseType.UNKNOWN
    is_valid: bool = False
    errors: List[StructureError] = field(default_factory=list)
    completed_roles: List[Role] = field(default_factory=list)
    missing_roles: List[Role] = field(default_factory=list)

    @property
    def required_roles(self) -> Tuple[Role, ...]:
        return required_roles_for(self.tense_type)

    @property
    def completion_percentage(self) -> int:
        return completion_percentage(self.tense_type, self.completed_roles)

    def role(self, role: Role) -> Optional[RoleDetail]:
        return self.roles.get(role)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'original': self.original,
            'cleaned': self.cleaned,
            'roles': {role.value: detail.to_dict() for role, detail in self.roles.items()},
            'tense_type': self.tense_type.value,
            'is_valid': self.is_valid,
            'errors': [error.to_dict() for error in self.errors],
            'completed_roles': [role.value for role in self.completed_roles],
            'missing_roles': [role.value for role in self.missing_roles],
            'completion_percentage': self.completion_percentage,
        }


# === ERROR DETECTION ===

@dataclass
class DetectedError:
    kind: str
    message: str
    matched_span: str
    position: int
    severity: Severity
    suggested_correction: str
    confidence: float
    rule_type: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'message': self.message,
            'matched_span': self.matched_span,
            'position': self.position,
            'severity': self.severity.value,
            'suggested_correction': self.suggested_correction,
            'confidence': self.confidence,
            'rule_type': self.rule_type,
        }


@dataclass
class Correction:
    original: str
    corrected: str
    kind: str
    reason: str
    position: int
    confidence: float
    applied: bool = False

    @property
    def end(self) -> int:
        return self.position + len(self.original)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'original': self.original,
            'corrected': self.corrected,
            'kind': self.kind,
            'reason': self.reason,
            'position': self.position,
            'confidence': self.confidence,
            'applied': self.applied,
        }


@dataclass
class DetectionResult:
    original_sentence: str
    corrected_sentence: str
    errors: List[DetectedError] = field(default_factory=list)
    corrections: List[Correction] = field(default_factory=list)
    failed_passes: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def severity_summary(self) -> Dict[str, int]:
        summary = {severity.value: 0 for severity in Severity}
        for error in self.errors:
            summary[error.severity.value] += 1
        return summary

    def to_dict(self) -> Dict[str, Any]:
        return {
            'original_sentence': self.original_sentence,
            'corrected_sentence': self.corrected_sentence,
            'errors': [error.to_dict() for error in self.errors],
            'corrections': [correction.to_dict() for correction in self.corrections],
            'failed_passes': list(self.failed_passes),
            'has_errors': self.has_errors,
            'error_count': self.error_count,
        }


# === RECOMMENDATIONS ===

@dataclass
class ContributingFactor:
    """One piece of weighted evidence for a tense."""
    source: str
    value: str
    weight: float
    recommendation: Recommendation
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'value': self.value,
            'weight': self.weight,
            'recommendation': self.recommendation.value,
            'reason': self.reason,
        }


@dataclass
class EngineSummary:
    """The verdict of one extractor taken on its own."""
    source: str
    recommendation: Recommendation
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'recommendation': self.recommendation.value,
            'confidence': self.confidence,
        }


@dataclass
class RecommendationResult:
    primary_recommendation: Recommendation
    confidence: float
    contributing_factors: List[ContributingFactor] = field(default_factory=list)
    engine_summaries: List[EngineSummary] = field(default_factory=list)
    warnings: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'primary_recommendation': self.primary_recommendation.value,
            'confidence': self.confidence,
            'contributing_factors': [factor.to_dict() for factor in self.contributing_factors],
            'engine_summaries': [summary.to_dict() for summary in self.engine_summaries],
            'warnings': [dict(warning) for warning in self.warnings],
        }


# === REAL-TIME ===

@dataclass
class AnalysisCacheEntry:
    key: str
    payload: Dict[str, Any]
    created_at: float
