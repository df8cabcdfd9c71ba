# routers/reports.py
import asyncio
from typing import Optional

from fastapi import APIRouter, File, Response, UploadFile

from cvscore.helpers.parsing import encode_document, read_upload
from cvscore.models.models import ExportBundle
from cvscore.models.response import ScoreResponse, score_response
from cvscore.services.export import ExportFormat, build_export
from cvscore.services.graph import run_scoring
from cvscore.services.textkernel import TextkernelClient
from cvscore.utils.exceptions import ExceptionContext, ValidationError
from cvscore.utils.logging_config import get_logger, log_api_call
from cvscore.utils.utils import load_settings

router = APIRouter(tags=["reports"])
logger = get_logger(__name__)


@router.post("/score", response_model=ScoreResponse)
@log_api_call("score CV against job description")
async def score_cv(cv: Optional[UploadFile] = File(None), job: Optional[UploadFile] = File(None)):
    """Parse both PDFs, score the CV against the job and return the normalized result"""
    if cv is None or job is None:
        raise ValidationError(
            "Both CV and job description files are required",
            field="cv" if cv is None else "job",
        )

    settings = load_settings()
    cv_name, cv_bytes = await read_upload("cv", cv, settings.uploads)
    job_name, job_bytes = await read_upload("job", job, settings.uploads)
    logger.info(f"Received CV {cv_name} ({len(cv_bytes)} bytes) and job {job_name} ({len(job_bytes)} bytes)")

    client = TextkernelClient(settings.textkernel, settings.weights)

    loop = asyncio.get_running_loop()
    with ExceptionContext("Failed to process files and score CV", logger, cv_name=cv_name, job_name=job_name):
        bundle = await loop.run_in_executor(
            None, run_scoring, client,
            encode_document(cv_bytes), encode_document(job_bytes), cv_name, job_name,
        )

    logger.info(f"Scoring completed for {cv_name}: {bundle.score.overall_percent}%")
    return score_response(bundle)


@router.post("/export/{fmt}")
async def export_results(fmt: ExportFormat, bundle: ExportBundle):
    """Render a scoring result as a downloadable JSON, CSV or text file"""
    artifact = build_export(bundle, fmt)
    logger.debug(f"Export {fmt.value}: {artifact.filename} ({len(artifact.content)} chars)")
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
    )
