from unittest.mock import patch

import pytest
import requests

from conftest import envelope, make_response
from cvscore.models.settings import ScoringWeights, TextkernelSettings
from cvscore.services.textkernel import TextkernelClient, upstream_error_message
from cvscore.utils.exceptions import ConfigurationError, ExternalServiceError


@pytest.fixture
def client():
    return TextkernelClient(
        TextkernelSettings(account_id="12345", service_key="secret", base_url="https://tx.example.test/tx/v10/"),
        ScoringWeights(languages=0.0),
    )


class TestTextkernelClient:
    """Test cases for the Textkernel client"""

    def test_missing_credentials(self):
        with pytest.raises(ConfigurationError) as exc_info:
            TextkernelClient(TextkernelSettings(account_id="12345"))
        assert "TEXTKERNEL_API_KEY" in exc_info.value.details["config_key"]

    @patch("cvscore.services.textkernel.requests.post")
    def test_parse_resume_request(self, mock_post, client, resume_value):
        mock_post.return_value = make_response(200, envelope(resume_value))

        result = client.parse_resume("QUJD")

        assert result == resume_value
        url = mock_post.call_args.args[0]
        kwargs = mock_post.call_args.kwargs
        assert url == "https://tx.example.test/tx/v10/parser/resume"
        assert kwargs["headers"]["Tx-AccountId"] == "12345"
        assert kwargs["headers"]["Tx-ServiceKey"] == "secret"
        assert kwargs["json"]["DocumentAsBase64String"] == "QUJD"
        assert len(kwargs["json"]["DocumentLastModified"]) == 10

    @patch("cvscore.services.textkernel.requests.post")
    def test_parse_job_request(self, mock_post, client, job_value):
        mock_post.return_value = make_response(200, envelope(job_value))

        assert client.parse_job("QUJD") == job_value
        assert mock_post.call_args.args[0].endswith("/parser/joborder")

    @patch("cvscore.services.textkernel.requests.post")
    def test_score_uses_singular_source_resume(self, mock_post, client, resume_value, job_value, score_value):
        mock_post.return_value = make_response(200, envelope(score_value))

        assert client.score(resume_value, job_value) == score_value

        url = mock_post.call_args.args[0]
        payload = mock_post.call_args.kwargs["json"]
        assert url.endswith("/scorer/bimetric/joborder")
        assert payload["SourceResume"]["ResumeData"] == resume_value["ResumeData"]
        assert payload["TargetJobs"][0]["JobData"] == job_value["JobData"]
        assert "TargetResumes" not in payload
        assert payload["Settings"]["Skills"] is True
        assert payload["Settings"]["Languages"] is False
        assert payload["Settings"]["LanguagesWeight"] == 0.0

    @patch("cvscore.services.textkernel.requests.post")
    def test_upstream_error_message_is_surfaced(self, mock_post, client):
        mock_post.return_value = make_response(
            422, {"Info": {"Code": "InvalidParameter", "Message": "Document is encrypted"}}, reason="Unprocessable Entity"
        )

        with pytest.raises(ExternalServiceError) as exc_info:
            client.parse_resume("QUJD")

        exc = exc_info.value
        assert exc.status_code == 422
        assert exc.details["upstream_status"] == 422
        assert exc.details["step"] == "Resume parsing"
        assert "Document is encrypted" in exc.message

    @patch("cvscore.services.textkernel.requests.post")
    def test_non_json_error_falls_back_to_status_text(self, mock_post, client):
        mock_post.return_value = make_response(503, "<html>down</html>", reason="Service Unavailable")

        with pytest.raises(ExternalServiceError) as exc_info:
            client.parse_job("QUJD")

        assert "503 Service Unavailable" in exc_info.value.message

    @patch("cvscore.services.textkernel.requests.post")
    def test_transport_failure(self, mock_post, client):
        mock_post.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(ExternalServiceError) as exc_info:
            client.parse_resume("QUJD")

        assert "connection refused" in exc_info.value.message
        assert mock_post.call_count == 1


def test_upstream_error_message_prefers_info_message():
    response = make_response(400, {"Info": {"Message": "  Bad account  "}}, reason="Bad Request")
    assert upstream_error_message(response) == "Bad account"
    assert upstream_error_message(make_response(400, {"Info": {}}, reason="Bad Request")) == "400 Bad Request"
