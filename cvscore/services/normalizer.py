"""
Normalization of Textkernel parse and score responses.

The upstream schema is not stable: keys go missing, come back as null, and
some fields switch between a bare string and an object carrying a display
sub-field. Every lookup here is total: a missing, null or wrongly-shaped
segment yields the type default ("" / [] / 0.0) and nothing ever raises.
"""
import math
from typing import Any, Dict, List, Optional, Sequence

from cvscore.models.models import (
    CandidateProfile,
    EducationEntry,
    ExperienceEntry,
    JobProfile,
    ScoreBreakdown,
)

# Display sub-fields tried, in order, when a value arrives as an object.
DISPLAY_KEYS = ("Name", "Raw", "Normalized", "Value")

_MAX_DISPLAY_DEPTH = 4


def unwrap_envelope(raw: Any, field: str = "Value") -> Dict[str, Any]:
    """Return the payload inside ``{"Info": ..., "Value": {...}}`` or the tree itself"""
    if not isinstance(raw, dict):
        return {}
    inner = raw.get(field)
    if isinstance(inner, dict):
        return inner
    return raw


def dig(tree: Any, *path: Any) -> Any:
    """Follow ``path`` (dict keys and list indexes) and return None on any miss"""
    node = tree
    for segment in path:
        if isinstance(segment, int):
            if not isinstance(node, list) or not -len(node) <= segment < len(node):
                return None
            node = node[segment]
        elif isinstance(node, dict):
            node = node.get(segment)
        else:
            return None
        if node is None:
            return None
    return node


def as_text(value: Any) -> str:
    """Plain strings are trimmed; anything else is blank"""
    if isinstance(value, str):
        return value.strip()
    return ""


def as_list(value: Any) -> List[Any]:
    # a scalar standing in for a collection is dropped, never coerced
    if isinstance(value, list):
        return value
    return []


def as_score(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    try:
        score = float(value)
    except OverflowError:  # JSON integers are unbounded
        return 0.0
    if not math.isfinite(score):
        return 0.0
    return score


def display_value(value: Any, keys: Sequence[str] = DISPLAY_KEYS) -> str:
    """Resolve a plain-string-or-named-object field to its display string.

    ``"Go"`` and ``{"Name": "Go"}`` both give ``"Go"``; nested objects such as
    ``{"Name": {"Raw": "BSc"}}`` are followed a few levels down. Anything
    else gives ``""``. The resolved string is trimmed of surrounding
    whitespace, so a whitespace-only value counts as blank.
    """
    node = value
    for _ in range(_MAX_DISPLAY_DEPTH):
        if isinstance(node, str):
            return node.strip()
        if not isinstance(node, dict):
            return ""
        node = next((node[key] for key in keys if node.get(key) not in (None, "")), None)
    return as_text(node)


def display_list(value: Any, keys: Sequence[str] = DISPLAY_KEYS) -> List[str]:
    """Display strings of a list field, in source order, blanks dropped"""
    out = []
    for item in as_list(value):
        text = display_value(item, keys)
        if text:
            out.append(text)
    return out


def _first_list(tree: Any, *candidates: Sequence[Any]) -> List[Any]:
    """First path among ``candidates`` that points at a list"""
    for path in candidates:
        value = dig(tree, *path)
        if isinstance(value, list):
            return value
    return []


def _first_text(value: Any, mapping_key: str, keys: Sequence[str] = DISPLAY_KEYS) -> str:
    """Display text of ``value[0]``, or of ``value[mapping_key]`` when the list arrives as an object"""
    if isinstance(value, list):
        return display_value(dig(value, 0), keys)
    if isinstance(value, dict):
        return display_value(value.get(mapping_key), keys)
    return ""


def _resume_tree(raw: Any) -> Dict[str, Any]:
    tree = unwrap_envelope(raw)
    inner = tree.get("ResumeData")
    return inner if isinstance(inner, dict) else tree


def _job_tree(raw: Any) -> Dict[str, Any]:
    tree = unwrap_envelope(raw)
    inner = tree.get("JobData")
    return inner if isinstance(inner, dict) else tree


def _score_tree(raw: Any) -> Dict[str, Any]:
    tree = unwrap_envelope(raw)
    match = dig(tree, "Matches", 0)
    if isinstance(match, dict):
        return match
    return tree


def _address(location: Any) -> str:
    parts = [
        as_text(dig(location, "Municipality")),
        display_value(dig(location, "Regions", 0)),
        as_text(dig(location, "CountryCode")),
    ]
    return ", ".join(part for part in parts if part)


def _experience(position: Any) -> ExperienceEntry:
    return ExperienceEntry(
        title=display_value(dig(position, "JobTitle"), ("Raw", "Normalized", "Name")),
        company=display_value(dig(position, "Employer"), ("Name", "Raw", "Normalized")),
        start_date=as_text(dig(position, "StartDate", "Date")),
        end_date=as_text(dig(position, "EndDate", "Date")),
        description=as_text(dig(position, "Description")),
    )


def _education(detail: Any) -> EducationEntry:
    return EducationEntry(
        degree=display_value(dig(detail, "Degree"), ("Name", "Raw", "Normalized")),
        institution=display_value(dig(detail, "SchoolName"), ("Raw", "Normalized", "Name")),
        start_date=as_text(dig(detail, "StartDate", "Date")),
        end_date=as_text(dig(detail, "EndDate", "Date")),
        description=as_text(dig(detail, "Text")),
    )


def normalize_candidate(raw: Optional[Dict[str, Any]]) -> CandidateProfile:
    """Map a resume parse result (``Value`` envelope or ``ResumeData`` tree) to a CandidateProfile"""
    data = _resume_tree(raw)
    contact = dig(data, "ContactInformation")

    return CandidateProfile(
        name=display_value(dig(contact, "CandidateName"), ("FormattedName", "Name", "Raw")),
        email=display_value(dig(contact, "EmailAddresses", 0), ("InternetEmailAddress", "Raw")),
        phone=display_value(dig(contact, "Telephones", 0), ("Raw", "Normalized")),
        address=_address(dig(contact, "Location")),
        skills=display_list(dig(data, "Skills")),
        experience=[
            _experience(position)
            for position in _first_list(data, ("EmploymentHistory", "Positions"), ("EmploymentHistory",))
            if isinstance(position, dict)
        ],
        education=[
            _education(detail)
            for detail in _first_list(data, ("Education", "EducationDetails"), ("Education",))
            if isinstance(detail, dict)
        ],
        languages=display_list(
            _first_list(data, ("LanguageCompetencies",), ("Languages",)),
            ("Language", "Name", "Raw"),
        ),
        certifications=display_list(dig(data, "Certifications")),
    )


def normalize_job(raw: Optional[Dict[str, Any]]) -> JobProfile:
    """Map a job order parse result (``Value`` envelope or ``JobData`` tree) to a JobProfile"""
    data = _job_tree(raw)
    skills = display_list(dig(data, "Skills"))

    location = as_text(dig(data, "JobLocations", 0, "Municipality"))
    if not location:
        location = as_text(dig(data, "CurrentLocation", "Municipality"))

    return JobProfile(
        title=_first_text(dig(data, "JobTitles"), "MainJobTitle"),
        company=_first_text(dig(data, "EmployerNames"), "MainEmployerName"),
        location=location,
        required_skills=len(skills),
        skills=skills,
    )


def normalize_score(raw: Optional[Dict[str, Any]]) -> ScoreBreakdown:
    """Map a bimetric score result to a ScoreBreakdown; the overall score is taken as given"""
    data = _score_tree(raw)
    breakdown = dig(data, "ApplicantScoreBreakdown")

    return ScoreBreakdown(
        overall=as_score(dig(data, "SuggestedScore")),
        skills=as_score(dig(breakdown, "Skills")),
        experience=as_score(dig(breakdown, "Experience")),
        education=as_score(dig(breakdown, "Education")),
        languages=as_score(dig(breakdown, "Languages")),
    )
