from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List

from cvscore.services.matching import to_percent


class ExperienceEntry(BaseModel):
    title: str = ""
    company: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class EducationEntry(BaseModel):
    degree: str = ""
    institution: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class CandidateProfile(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    skills: List[str] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)


class JobProfile(BaseModel):
    title: str = ""
    company: str = ""
    location: str = ""
    required_skills: int = 0
    skills: List[str] = Field(default_factory=list)


class ScoreBreakdown(BaseModel):
    """Scores as delivered by the scorer, each 0.0-1.0.

    ``overall`` comes straight from the upstream suggested score and is not
    derived from the four components.
    """
    overall: float = 0.0
    skills: float = 0.0
    experience: float = 0.0
    education: float = 0.0
    languages: float = 0.0

    @property
    def overall_percent(self) -> int:
        return to_percent(self.overall)

    def component_percents(self) -> Dict[str, int]:
        return {
            "skills": to_percent(self.skills),
            "experience": to_percent(self.experience),
            "education": to_percent(self.education),
            "languages": to_percent(self.languages),
        }


class SourceFiles(BaseModel):
    cv_name: str = ""
    job_name: str = ""


class RawTrees(BaseModel):
    """Unwrapped upstream responses, kept untouched for traceability"""
    resume: Dict[str, Any] = Field(default_factory=dict)
    job: Dict[str, Any] = Field(default_factory=dict)
    score: Dict[str, Any] = Field(default_factory=dict)


class ExportBundle(BaseModel):
    model_config = ConfigDict(frozen=True)

    candidate: CandidateProfile = Field(default_factory=CandidateProfile)
    job: JobProfile = Field(default_factory=JobProfile)
    score: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    files: SourceFiles = Field(default_factory=SourceFiles)
    raw: RawTrees = Field(default_factory=RawTrees)
