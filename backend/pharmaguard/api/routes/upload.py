import logging

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from typing import Optional

from pharmaguard.schemas.pharma_schema import AnalysisResponse
from pharmaguard.services.pharmacogenomics.config import get_validation_config
from pharmaguard.services.pipeline.analysis_pipeline import run_analysis_pipeline
from pharmaguard.services.vcf.parser import VcfParseError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/", response_model=AnalysisResponse)
async def upload_vcf(
    file: UploadFile = File(..., description="Patient's VCF file containing genetic variants"),
    patient_id: Optional[str] = Form(None, description="Optional patient identifier"),
) -> AnalysisResponse:
    """
    Upload an uncompressed VCF file and receive one report per target gene.

    - **file**: The VCF file containing variant data.
    - **patient_id**: Optional identifier; defaults to the VCF sample column.
    """
    if not (file.filename or "").lower().endswith(".vcf"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file format. Please upload a .vcf file.",
        )

    max_bytes = get_validation_config().max_upload_bytes
    content = await file.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"VCF file exceeds the {max_bytes} byte upload limit.",
        )

    try:
        text = content.decode("utf-8", errors="replace")
        result = await run_in_threadpool(run_analysis_pipeline, text, patient_id)
    except VcfParseError as e:
        logger.error("Rejected VCF upload %s: %s", file.filename, e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return AnalysisResponse.from_result(result)
