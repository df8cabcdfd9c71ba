"""
Thin client for the Textkernel Tx v10 parsing and bimetric scoring endpoints.

Every call is made once; a non-success response or a transport failure
raises ExternalServiceError and the caller aborts the whole flow.
"""
import time
from typing import Any, Dict

import requests

from cvscore.helpers.parsing import last_modified
from cvscore.models.settings import ScoringWeights, TextkernelSettings
from cvscore.services.normalizer import dig, unwrap_envelope
from cvscore.utils.exceptions import ExternalServiceError
from cvscore.utils.logging_config import PerformanceMonitor, get_logger
from cvscore.utils.utils import safe_json

logger = get_logger(__name__)

SERVICE_NAME = "textkernel"

PARSE_RESUME_PATH = "/parser/resume"
PARSE_JOB_PATH = "/parser/joborder"
SCORE_PATH = "/scorer/bimetric/joborder"


def upstream_error_message(response: requests.Response) -> str:
    """``Info.Message`` from a Textkernel error body, else ``"<status> <reason>"``"""
    body = safe_json(response.text, {})
    message = dig(body, "Info", "Message")
    if isinstance(message, str) and message.strip():
        return message.strip()
    return f"{response.status_code} {response.reason or ''}".strip()


class TextkernelClient:
    """Issues the parse/score requests with the account headers"""

    def __init__(self, settings: TextkernelSettings, weights: ScoringWeights = None):
        settings.require_credentials()
        self.settings = settings
        self.weights = weights or ScoringWeights()

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Tx-AccountId": self.settings.account_id,
            "Tx-ServiceKey": self.settings.service_key,
        }

    def _post(self, path: str, payload: Dict[str, Any], step: str) -> Dict[str, Any]:
        url = f"{self.settings.base_url}{path}"
        logger.info(f"Calling {SERVICE_NAME} {step}: {url}")

        with PerformanceMonitor(f"{SERVICE_NAME} {step}", logger, threshold_ms=10000):
            try:
                response = requests.post(url, json=payload, headers=self.headers, timeout=self.settings.timeout)
            except requests.RequestException as e:
                raise ExternalServiceError(
                    f"{step} failed: {e}",
                    service_name=SERVICE_NAME,
                    step=step,
                    cause=e,
                ) from e

        if not response.ok:
            message = upstream_error_message(response)
            logger.error(f"{SERVICE_NAME} {step} returned {response.status_code}: {message}")
            raise ExternalServiceError(
                f"{step} failed: {message}",
                service_name=SERVICE_NAME,
                status_code=response.status_code,
                step=step,
            )

        body = safe_json(response.text, None)
        if body is None:
            raise ExternalServiceError(
                f"{step} failed: response was not a JSON object",
                service_name=SERVICE_NAME,
                status_code=response.status_code,
                step=step,
            )
        logger.debug(f"{SERVICE_NAME} {step} succeeded, result keys: {list(body.keys())}")
        return unwrap_envelope(body)

    def parse_resume(self, document_b64: str) -> Dict[str, Any]:
        return self._post(
            PARSE_RESUME_PATH,
            {
                "DocumentAsBase64String": document_b64,
                "DocumentLastModified": last_modified(),
            },
            step="Resume parsing",
        )

    def parse_job(self, document_b64: str) -> Dict[str, Any]:
        return self._post(
            PARSE_JOB_PATH,
            {
                "DocumentAsBase64String": document_b64,
                "DocumentLastModified": last_modified(),
            },
            step="Job parsing",
        )

    def score(self, resume_value: Dict[str, Any], job_value: Dict[str, Any]) -> Dict[str, Any]:
        """Score one resume against one job order.

        Uses the singular ``SourceResume`` / ``TargetJobs`` form of the
        bimetric joborder endpoint.
        """
        stamp = int(time.time() * 1000)
        resume_data = dig(resume_value, "ResumeData")
        job_data = dig(job_value, "JobData")
        payload = {
            "SourceResume": {
                "Id": f"resume_{stamp}",
                "ResumeData": resume_data if isinstance(resume_data, dict) else resume_value,
            },
            "TargetJobs": [
                {
                    "Id": f"job_{stamp}",
                    "JobData": job_data if isinstance(job_data, dict) else job_value,
                }
            ],
            "Settings": self.weights.as_payload(),
        }
        return self._post(SCORE_PATH, payload, step="Scoring")
