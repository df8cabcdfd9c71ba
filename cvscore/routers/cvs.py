import asyncio
from typing import Optional

from fastapi import APIRouter, File, UploadFile

from cvscore.helpers.parsing import encode_document, read_upload
from cvscore.models.response import CVParseResponse
from cvscore.services.normalizer import normalize_candidate
from cvscore.services.textkernel import TextkernelClient
from cvscore.utils.exceptions import ExceptionContext
from cvscore.utils.logging_config import get_logger, log_api_call
from cvscore.utils.utils import load_settings

router = APIRouter()
logger = get_logger(__name__)


@router.post("/parse", response_model=CVParseResponse)
@log_api_call("parse CV")
async def parse_cv(cv: Optional[UploadFile] = File(None)):
    """Parse a single CV and return the raw parse tree with its normalized profile"""
    settings = load_settings()
    cv_name, data = await read_upload("cv", cv, settings.uploads)
    logger.info(f"CV file received: {cv_name}, {len(data)} bytes")

    client = TextkernelClient(settings.textkernel, settings.weights)

    loop = asyncio.get_running_loop()
    with ExceptionContext("Failed to parse CV", logger, cv_name=cv_name):
        parse_result = await loop.run_in_executor(None, client.parse_resume, encode_document(data))

    return CVParseResponse(parse_result=parse_result, candidate=normalize_candidate(parse_result))
