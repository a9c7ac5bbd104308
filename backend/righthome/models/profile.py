"""
Merge/clear helpers for the requirement profile.

Profiles are plain dicts. Every helper returns a new dict and leaves its
input untouched, so a turn never mutates the snapshot it was given.
"""

from typing import Any, Dict, Iterable, List

from .state import RequirementProfile
from .vocabulary import CITY_DERIVED_FIELDS, MATCH_FIELDS, REQUIRED_FIELDS

# Keys that describe the conversation rather than the buyer
_NON_REQUIREMENT_KEYS = ("stage",)


def is_known(value: Any) -> bool:
    """Absent, None and empty values all mean 'unknown'."""
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def normalize_profile(profile: Dict[str, Any]) -> RequirementProfile:
    """Copy a profile, dropping unknown values."""
    return RequirementProfile(**{k: v for k, v in (profile or {}).items() if is_known(v)})


def has_field(profile: Dict[str, Any], field: str) -> bool:
    return is_known((profile or {}).get(field))


def is_empty(profile: Dict[str, Any]) -> bool:
    """True when no requirement has been captured yet."""
    return not any(
        is_known(value) for key, value in (profile or {}).items()
        if key not in _NON_REQUIREMENT_KEYS
    )


def missing_fields(profile: Dict[str, Any]) -> List[str]:
    """Required fields the profile lacks, in prompt order."""
    return [field for field in REQUIRED_FIELDS if not has_field(profile, field)]


def has_match_constraint(profile: Dict[str, Any]) -> bool:
    """True when at least one field narrows the catalog."""
    return any(has_field(profile, field) for field in MATCH_FIELDS)


def clear_fields(profile: Dict[str, Any], fields: Iterable[str]) -> RequirementProfile:
    """
    Remove fields from a copy of the profile.

    Clearing city also clears currency and budgetUnit, which are only ever
    set alongside it.
    """
    to_clear = set(fields)
    if "city" in to_clear:
        to_clear.update(CITY_DERIVED_FIELDS)
    return RequirementProfile(**{k: v for k, v in (profile or {}).items() if k not in to_clear})
