# models/response.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List

from cvscore.models.models import CandidateProfile, ExportBundle, JobProfile
from cvscore.services.export import COMPONENT_NAMES
from cvscore.services.matching import badge_variant, categorize, rate_component, recommendation


class ComponentScore(BaseModel):
    key: str
    name: str
    percent: int
    rating: str


class ScoreSummary(BaseModel):
    overall_percent: int
    label: str
    badge: str
    recommendation: str
    components: List[ComponentScore] = Field(default_factory=list)


class ScoreResponse(ExportBundle):
    success: bool = True
    summary: ScoreSummary


class CVParseResponse(BaseModel):
    success: bool = True
    parse_result: Dict[str, Any] = Field(default_factory=dict)
    candidate: CandidateProfile


class JobParseResponse(BaseModel):
    success: bool = True
    parse_result: Dict[str, Any] = Field(default_factory=dict)
    job: JobProfile


def summarize(bundle: ExportBundle) -> ScoreSummary:
    overall = bundle.score.overall_percent
    label = categorize(overall)
    return ScoreSummary(
        overall_percent=overall,
        label=label,
        badge=badge_variant(label),
        recommendation=recommendation(label),
        components=[
            ComponentScore(key=key, name=COMPONENT_NAMES[key], percent=percent, rating=rate_component(percent))
            for key, percent in bundle.score.component_percents().items()
        ],
    )


def score_response(bundle: ExportBundle) -> ScoreResponse:
    return ScoreResponse(**dict(bundle), summary=summarize(bundle))
