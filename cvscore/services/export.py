import json
import re
from datetime import date
from enum import Enum
from pathlib import PurePosixPath
from typing import Any, Callable, Dict, Optional

import pandas as pd
from pydantic import BaseModel

from cvscore.models.models import ExportBundle
from cvscore.services.matching import categorize, rate_component, recommendation, to_percent


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    TEXT = "txt"
    CV = "cv"
    JOB = "job"
    PROFILE = "profile"


class ExportArtifact(BaseModel):
    content: str
    filename: str
    media_type: str


SUMMARY_COLUMNS = ["Metric", "Value"]

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")

COMPONENT_NAMES = {
    "skills": "Skills Match",
    "experience": "Experience",
    "education": "Education",
    "languages": "Languages",
}


def _or_na(value: str) -> str:
    return value if value else "N/A"


def _pretty_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def dump_json(bundle: ExportBundle) -> str:
    """Full bundle, raw upstream trees included"""
    return _pretty_json(bundle.model_dump(mode="json"))


def load_bundle(text: str) -> ExportBundle:
    return ExportBundle.model_validate_json(text)


def summary_csv(bundle: ExportBundle) -> str:
    score = bundle.score
    rows = [("Overall Score", score.overall_percent)]
    rows += [
        (COMPONENT_NAMES[key], percent)
        for key, percent in score.component_percents().items()
    ]
    rows += [
        ("Candidate Name", bundle.candidate.name),
        ("Job Title", bundle.job.title),
    ]
    df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    return df.to_csv(index=False, lineterminator="\n")


def summary_report(bundle: ExportBundle) -> str:
    candidate, job, score, files = bundle.candidate, bundle.job, bundle.score, bundle.files
    overall = to_percent(score.overall)
    label = categorize(overall)

    lines = [
        "CV SCORING REPORT",
        "=================",
        "",
        f"Candidate: {_or_na(candidate.name)}",
        f"Position: {_or_na(job.title)}",
        f"CV File: {_or_na(files.cv_name)}",
        f"Job Description File: {_or_na(files.job_name)}",
        "",
        f"OVERALL MATCH SCORE: {overall}% ({label})",
        recommendation(label),
        "",
        "SCORE BREAKDOWN",
        "---------------",
    ]
    for key, percent in score.component_percents().items():
        lines.append(f"- {COMPONENT_NAMES[key]}: {percent}% ({rate_component(percent)})")

    lines += [
        "",
        "CANDIDATE PROFILE",
        "-----------------",
        f"Email: {_or_na(candidate.email)}",
        f"Phone: {_or_na(candidate.phone)}",
        f"Work Experience: {len(candidate.experience)} positions",
        f"Highest Education: {_or_na(candidate.education[0].degree if candidate.education else '')}",
        f"Skills: {_or_na(', '.join(candidate.skills))}",
        "",
        "JOB DETAILS",
        "-----------",
        f"Company: {_or_na(job.company)}",
        f"Location: {_or_na(job.location)}",
        f"Required Skills: {job.required_skills} skills identified",
    ]
    return "\n".join(lines) + "\n"


def _json_name(source_name: str, prefix: str, fallback: str) -> str:
    stem = PurePosixPath(source_name.replace("\\", "/")).stem if source_name else ""
    # filenames end up in a latin-1 Content-Disposition header
    stem = _UNSAFE_FILENAME_CHARS.sub("_", stem).strip("_")
    return f"{prefix}-{stem or fallback}.json"


_EXPORTERS: Dict[ExportFormat, Callable[[ExportBundle, str], ExportArtifact]] = {
    ExportFormat.JSON: lambda b, day: ExportArtifact(
        content=dump_json(b),
        filename=f"cv-scoring-results-{day}.json",
        media_type="application/json",
    ),
    ExportFormat.CSV: lambda b, day: ExportArtifact(
        content=summary_csv(b),
        filename=f"cv-scoring-summary-{day}.csv",
        media_type="text/csv",
    ),
    ExportFormat.TEXT: lambda b, day: ExportArtifact(
        content=summary_report(b),
        filename=f"cv-scoring-report-{day}.txt",
        media_type="text/plain",
    ),
    ExportFormat.CV: lambda b, day: ExportArtifact(
        content=_pretty_json(b.raw.resume),
        filename=_json_name(b.files.cv_name, "parsed-cv", "cv"),
        media_type="application/json",
    ),
    ExportFormat.JOB: lambda b, day: ExportArtifact(
        content=_pretty_json(b.raw.job),
        filename=_json_name(b.files.job_name, "parsed-job", "job"),
        media_type="application/json",
    ),
    ExportFormat.PROFILE: lambda b, day: ExportArtifact(
        content=_pretty_json(b.candidate.model_dump(mode="json")),
        filename=f"edited-cv-data-{day}.json",
        media_type="application/json",
    ),
}


def build_export(bundle: ExportBundle, fmt: ExportFormat, today: Optional[date] = None) -> ExportArtifact:
    day = (today or date.today()).isoformat()
    return _EXPORTERS[ExportFormat(fmt)](bundle, day)
