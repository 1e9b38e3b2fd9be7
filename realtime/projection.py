"""
UI projection of an analysis: icon states, consolidated suggestions and the
canonical empty result.
"""

from typing import Any, Dict, Iterable, List, Optional

from rules.severity import SEVERITY_RANK, is_critical, severity_for
from tense_analyzer.base_types import (
    AnalysisTier, DetectionResult, RecommendationResult, Role, StructureResult, TenseType,
    completion_percentage
)

# Icon name -> structure role
ICON_ROLES = {
    'subject': Role.SUBJECT,
    'auxiliary': Role.AUXILIARY,
    'verb': Role.MAIN_VERB,
    'gerund': Role.GERUND,
    'complement': Role.COMPLEMENT,
    'connector': Role.CONNECTOR,
}

ICON_ACTIVE = 'active'
ICON_ERROR = 'error'
ICON_MISSING = 'missing'

ERROR_PRIORITY = 1
RECOMMENDATION_PRIORITY = 2
TIP_PRIORITY = 3

MAX_ERROR_SUGGESTIONS = 2
MAX_RECOMMENDATION_SUGGESTIONS = 1
MAX_TIP_SUGGESTIONS = 1

# Fields every projection carries whatever the options ask for
BASE_FIELDS = ('text', 'level', 'is_empty', 'is_incremental', 'degraded')
ICON_FIELDS = ('icon_states', 'completion_percentage', 'tense_type')
SUGGESTION_FIELDS = ('suggestions', 'primary_recommendation', 'confidence')
STRUCTURE_FIELDS = ('icon_states', 'completion_percentage', 'tense_type', 'is_valid', 'critical_errors')


def _icon(state: str, type_: Optional[str] = None) -> Dict[str, Any]:
    return {
        'state': state,
        'active': state == ICON_ACTIVE,
        'error': state == ICON_ERROR,
        'type': type_,
    }


def empty_icon_states() -> Dict[str, Dict[str, Any]]:
    return {name: _icon(ICON_MISSING) for name in ICON_ROLES}


def build_icon_states(structure: StructureResult) -> Dict[str, Dict[str, Any]]:
    """Per-icon state: active for a valid role, error for an invalid one, missing otherwise."""
    icons = {}
    for name, role in ICON_ROLES.items():
        detail = structure.role(role)
        if detail is None:
            icons[name] = _icon(ICON_MISSING)
        elif detail.is_valid:
            icons[name] = _icon(ICON_ACTIVE, detail.text if role == Role.CONNECTOR else detail.subtype)
        else:
            icons[name] = _icon(ICON_ERROR, detail.subtype)
    return icons


def completion_from_icons(icon_states: Dict[str, Dict[str, Any]], tense_type: str) -> int:
    """Completion percentage from already-known icon states."""
    completed = [
        role for name, role in ICON_ROLES.items()
        if icon_states.get(name, {}).get('active')
    ]
    return completion_percentage(TenseType(tense_type), completed)


def empty_projection(text: str = "") -> Dict[str, Any]:
    """The canonical result for rejected input."""
    return {
        'text': text,
        'level': AnalysisTier.NONE.value,
        'icon_states': empty_icon_states(),
        'suggestions': [],
        'tense_type': TenseType.UNKNOWN.value,
        'completion_percentage': 0,
        'is_valid': False,
        'critical_errors': [],
        'corrected_sentence': text,
        'primary_recommendation': 'either',
        'confidence': 0.0,
        'is_empty': True,
        'is_incremental': False,
        'degraded': False,
    }


# === SUGGESTIONS ===

def ranked_error_messages(structure: Optional[StructureResult],
                          detection: Optional[DetectionResult]) -> List[Dict[str, Any]]:
    """Detector errors when the detector ran and found some, else structure errors; most severe first."""
    if detection is not None and detection.errors:
        ordered = sorted(
            detection.errors, key=lambda e: (SEVERITY_RANK[e.severity], e.position)
        )
        return [{'kind': e.kind, 'message': e.message, 'severity': e.severity.value} for e in ordered]

    if structure is None:
        return []
    entries = [
        {'kind': e.kind, 'message': e.message, 'severity': severity_for(e.kind).value}
        for e in structure.errors
    ]
    return sorted(entries, key=lambda e: SEVERITY_RANK[severity_for(e['kind'])])


def critical_errors(structure: Optional[StructureResult],
                    detection: Optional[DetectionResult]) -> List[Dict[str, str]]:
    found = []
    seen = set()
    sources: List[Iterable] = []
    if detection is not None:
        sources.append((e.kind, e.message) for e in detection.errors)
    if structure is not None:
        sources.append((e.kind, e.message) for e in structure.errors)
    for source in sources:
        for kind, message in source:
            if is_critical(kind) and kind not in seen:
                seen.add(kind)
                found.append({'kind': kind, 'message': message})
    return found


def consolidate_suggestions(errors: List[Dict[str, Any]],
                            recommendations: List[Dict[str, Any]],
                            tips: List[Dict[str, Any]],
                            max_suggestions: int) -> List[Dict[str, Any]]:
    """Up to two errors, one recommendation and one tip, ordered by priority and capped."""
    suggestions = []
    for error in errors[:MAX_ERROR_SUGGESTIONS]:
        suggestions.append({
            'type': 'error', 'priority': ERROR_PRIORITY,
            'message': error['message'], 'kind': error.get('kind'),
        })
    for recommendation in recommendations[:MAX_RECOMMENDATION_SUGGESTIONS]:
        suggestions.append({
            'type': 'recommendation', 'priority': RECOMMENDATION_PRIORITY,
            'message': recommendation['message'], 'kind': recommendation.get('recommendation'),
        })
    for tip in tips[:MAX_TIP_SUGGESTIONS]:
        suggestions.append({
            'type': 'tip', 'priority': TIP_PRIORITY,
            'message': tip['message'], 'kind': tip.get('kind'),
        })
    suggestions.sort(key=lambda s: s['priority'])
    return suggestions[:max(0, max_suggestions)]


# === ASSEMBLY ===

def build_projection(text: str, tier: AnalysisTier, structure: StructureResult,
                     detection: Optional[DetectionResult] = None,
                     recommendation: Optional[RecommendationResult] = None,
                     recommendation_tips: Optional[List[Dict[str, Any]]] = None,
                     tips: Optional[List[Dict[str, Any]]] = None,
                     max_suggestions: int = 3,
                     degraded: bool = False) -> Dict[str, Any]:
    return {
        'text': text,
        'level': tier.value,
        'icon_states': build_icon_states(structure),
        'suggestions': consolidate_suggestions(
            ranked_error_messages(structure, detection),
            recommendation_tips or [],
            tips or [],
            max_suggestions,
        ),
        'tense_type': structure.tense_type.value,
        'completion_percentage': structure.completion_percentage,
        'is_valid': structure.is_valid and not (detection is not None and detection.has_errors),
        'critical_errors': critical_errors(structure, detection),
        'corrected_sentence': detection.corrected_sentence if detection is not None else text,
        'primary_recommendation': (
            recommendation.primary_recommendation.value if recommendation is not None else 'either'
        ),
        'confidence': recommendation.confidence if recommendation is not None else 0.0,
        'is_empty': False,
        'is_incremental': False,
        'degraded': degraded,
    }


def select_fields(projection: Dict[str, Any], icons_only: bool = False,
                  suggestions_only: bool = False, structure_only: bool = False) -> Dict[str, Any]:
    """Keep only the fields the caller asked for."""
    if not (icons_only or suggestions_only or structure_only):
        return projection
    wanted = set(BASE_FIELDS)
    if icons_only:
        wanted.update(ICON_FIELDS)
    if suggestions_only:
        wanted.update(SUGGESTION_FIELDS)
    if structure_only:
        wanted.update(STRUCTURE_FIELDS)
    return {key: value for key, value in projection.items() if key in wanted}
