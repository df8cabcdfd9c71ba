import json
import os
from unittest.mock import MagicMock

import pytest

os.environ.setdefault("ENVIRONMENT", "testing")


def make_response(status_code: int = 200, body=None, reason: str = "OK"):
    """Stand-in for requests.Response as returned by requests.post"""
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.reason = reason
    response.text = body if isinstance(body, str) else json.dumps(body if body is not None else {})
    return response


@pytest.fixture
def textkernel_env(monkeypatch):
    monkeypatch.setenv("TEXTKERNEL_ACCOUNT_ID", "12345")
    monkeypatch.setenv("TEXTKERNEL_API_KEY", "test-key")
    monkeypatch.setenv("TEXTKERNEL_BASE_URL", "https://tx.example.test/tx/v10/")
    monkeypatch.delenv("MAX_UPLOAD_MB", raising=False)


@pytest.fixture
def resume_value():
    """Unwrapped Value of a resume parse"""
    return {
        "ResumeData": {
            "ContactInformation": {
                "CandidateName": {"FormattedName": "Jane Doe", "GivenName": "Jane"},
                "EmailAddresses": ["jane@example.com"],
                "Telephones": [{"Raw": "+49 30 1234567", "Normalized": "+49 30 1234567"}],
                "Location": {"Municipality": "Berlin", "Regions": ["BE"], "CountryCode": "DE"},
            },
            "Skills": ["Go", {"Name": "Rust"}, {"Name": ""}, "Go"],
            "EmploymentHistory": {
                "Positions": [
                    {
                        "JobTitle": {"Raw": "Backend Engineer", "Normalized": "Software Engineer"},
                        "Employer": {"Name": {"Raw": "Acme GmbH"}},
                        "StartDate": {"Date": "2019-01-01"},
                        "EndDate": {"Date": "2023-06-30"},
                        "Description": "Built payment APIs",
                    }
                ]
            },
            "Education": {
                "EducationDetails": [
                    {
                        "Degree": {"Name": {"Raw": "BSc Computer Science"}},
                        "SchoolName": {"Raw": "TU Berlin"},
                        "StartDate": {"Date": "2014-10-01"},
                        "EndDate": {"Date": "2018-09-30"},
                        "Text": "Thesis on distributed systems",
                    }
                ]
            },
            "LanguageCompetencies": [{"Language": "English"}, "German"],
            "Certifications": [{"Name": "CKA"}, "AWS SAA"],
        }
    }


@pytest.fixture
def job_value():
    """Unwrapped Value of a job order parse"""
    return {
        "JobData": {
            "JobTitles": [{"Name": "Senior Go Developer"}],
            "EmployerNames": [{"Name": "Globex"}],
            "JobLocations": [{"Municipality": "Hamburg"}],
            "Skills": [{"Name": "Go"}, {"Name": "Kubernetes"}, "PostgreSQL"],
        }
    }


@pytest.fixture
def score_value():
    """Unwrapped Value of a bimetric score"""
    return {
        "Matches": [
            {
                "Id": "job_1",
                "SuggestedScore": 0.82,
                "ApplicantScoreBreakdown": {
                    "Skills": 0.9,
                    "Experience": 0.7,
                    "Education": 0.595,
                    "Languages": 0.5,
                },
            }
        ]
    }


def envelope(value):
    return {"Info": {"Code": "Success", "Message": "Ok"}, "Value": value}
