import asyncio
from typing import Optional

from fastapi import APIRouter, File, UploadFile

from cvscore.helpers.parsing import encode_document, read_upload
from cvscore.models.response import JobParseResponse
from cvscore.services.normalizer import normalize_job
from cvscore.services.textkernel import TextkernelClient
from cvscore.utils.exceptions import ExceptionContext
from cvscore.utils.logging_config import get_logger, log_api_call
from cvscore.utils.utils import load_settings

router = APIRouter()
logger = get_logger(__name__)


@router.post("/parse", response_model=JobParseResponse)
@log_api_call("parse job description")
async def parse_job_description(job: Optional[UploadFile] = File(None)):
    """Parse a single job description and return the raw tree with its normalized profile"""
    settings = load_settings()
    job_name, data = await read_upload("job", job, settings.uploads)
    logger.info(f"Job description received: {job_name}, {len(data)} bytes")

    client = TextkernelClient(settings.textkernel, settings.weights)

    loop = asyncio.get_running_loop()
    with ExceptionContext("Failed to parse job description", logger, job_name=job_name):
        parse_result = await loop.run_in_executor(None, client.parse_job, encode_document(data))

    return JobParseResponse(parse_result=parse_result, job=normalize_job(parse_result))
