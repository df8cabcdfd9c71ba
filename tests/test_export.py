import io
import json
from datetime import date

import pandas as pd
import pytest

from cvscore.models.models import (
    CandidateProfile,
    ExportBundle,
    JobProfile,
    RawTrees,
    ScoreBreakdown,
    SourceFiles,
)
from cvscore.services.export import (
    ExportFormat,
    build_export,
    dump_json,
    load_bundle,
    summary_csv,
    summary_report,
)
from cvscore.services.normalizer import normalize_candidate, normalize_job, normalize_score

TODAY = date(2024, 5, 17)


@pytest.fixture
def bundle(resume_value, job_value, score_value):
    return ExportBundle(
        candidate=normalize_candidate(resume_value),
        job=normalize_job(job_value),
        score=normalize_score(score_value),
        files=SourceFiles(cv_name="jane_doe.pdf", job_name="go developer.pdf"),
        raw=RawTrees(resume=resume_value, job=job_value, score=score_value),
    )


def read_summary(text: str) -> dict:
    df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
    return dict(zip(df["Metric"], df["Value"]))


class TestStructuredDump:

    def test_round_trip_is_lossless(self, bundle):
        assert load_bundle(dump_json(bundle)) == bundle

    def test_dump_keeps_raw_trees(self, bundle, resume_value):
        data = json.loads(dump_json(bundle))
        assert data["raw"]["resume"] == resume_value
        assert data["candidate"]["skills"] == ["Go", "Rust", "Go"]

    def test_renormalizing_dumped_raw_trees_is_idempotent(self, bundle):
        data = json.loads(dump_json(bundle))
        assert normalize_candidate(data["raw"]["resume"]) == bundle.candidate
        assert normalize_job(data["raw"]["job"]) == bundle.job
        assert normalize_score(data["raw"]["score"]) == bundle.score

    def test_bundle_is_immutable(self, bundle):
        with pytest.raises(Exception):
            bundle.files = SourceFiles()


class TestSummaryCsv:

    def test_rows(self, bundle):
        rows = read_summary(summary_csv(bundle))
        assert rows == {
            "Overall Score": "82",
            "Skills Match": "90",
            "Experience": "70",
            "Education": "60",
            "Languages": "50",
            "Candidate Name": "Jane Doe",
            "Job Title": "Senior Go Developer",
        }

    def test_delimiter_in_name_is_quoted(self):
        bundle = ExportBundle(
            candidate=CandidateProfile(name='Doe, Jane "JD"'),
            job=JobProfile(title="Engineer, Backend"),
        )
        text = summary_csv(bundle)
        assert '"Doe, Jane ""JD"""' in text

        rows = read_summary(text)
        assert rows["Candidate Name"] == 'Doe, Jane "JD"'
        assert rows["Job Title"] == "Engineer, Backend"
        assert rows["Overall Score"] == "0"

    def test_header(self, bundle):
        assert summary_csv(bundle).splitlines()[0] == "Metric,Value"


class TestSummaryReport:

    def test_report_content(self, bundle):
        report = summary_report(bundle)
        assert "Candidate: Jane Doe" in report
        assert "Position: Senior Go Developer" in report
        assert "OVERALL MATCH SCORE: 82% (Excellent Match)" in report
        assert "- Education: 60% (Fair)" in report
        assert "- Languages: 50% (Fair)" in report
        assert "Highest Education: BSc Computer Science" in report
        assert "Required Skills: 3 skills identified" in report

    def test_empty_bundle_uses_placeholders(self):
        report = summary_report(ExportBundle())
        assert "Candidate: N/A" in report
        assert "OVERALL MATCH SCORE: 0% (Poor Match)" in report

    @pytest.mark.parametrize("overall,label", [(0.79, "Good Match"), (0.8, "Excellent Match"), (0.59, "Poor Match"), (0.6, "Good Match")])
    def test_label_thresholds(self, overall, label):
        report = summary_report(ExportBundle(score=ScoreBreakdown(overall=overall)))
        assert f"({label})" in report


class TestBuildExport:

    @pytest.mark.parametrize("fmt,filename,media_type", [
        (ExportFormat.JSON, "cv-scoring-results-2024-05-17.json", "application/json"),
        (ExportFormat.CSV, "cv-scoring-summary-2024-05-17.csv", "text/csv"),
        (ExportFormat.TEXT, "cv-scoring-report-2024-05-17.txt", "text/plain"),
        (ExportFormat.CV, "parsed-cv-jane_doe.json", "application/json"),
        (ExportFormat.JOB, "parsed-job-go_developer.json", "application/json"),
        (ExportFormat.PROFILE, "edited-cv-data-2024-05-17.json", "application/json"),
    ])
    def test_filenames_and_media_types(self, bundle, fmt, filename, media_type):
        artifact = build_export(bundle, fmt, today=TODAY)
        assert artifact.filename == filename
        assert artifact.media_type == media_type
        assert artifact.content

    def test_cv_export_is_raw_resume(self, bundle, resume_value):
        artifact = build_export(bundle, ExportFormat.CV, today=TODAY)
        assert json.loads(artifact.content) == resume_value

    def test_profile_export_reflects_edits(self, bundle):
        edited = bundle.model_copy(update={"candidate": bundle.candidate.model_copy(update={"name": "J. Doe"})})
        artifact = build_export(edited, ExportFormat.PROFILE, today=TODAY)
        assert json.loads(artifact.content)["name"] == "J. Doe"

    def test_missing_file_names_fall_back(self):
        artifact = build_export(ExportBundle(), ExportFormat.CV, today=TODAY)
        assert artifact.filename == "parsed-cv-cv.json"
