import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from pharmaguard.schemas.pharma_schema import AnalysisResponse, AnalyzeRequest, ExplainResponse
from pharmaguard.services.llm.explanation_service import ExplanationServiceError, generate_explanation
from pharmaguard.services.pharmacogenomics.models import FinalReport
from pharmaguard.services.pipeline.analysis_pipeline import explain_reports, run_analysis_pipeline
from pharmaguard.services.vcf.parser import VcfParseError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/analyze",
    response_model=AnalysisResponse,
    status_code=status.HTTP_200_OK,
    summary="Analyze Pharmacogenomic Risk",
    description="Submit VCF text to receive one CPIC-aligned report per target gene.",
)
async def analyze_pharmacogenomics(req: AnalyzeRequest) -> AnalysisResponse:
    """
    - **vcf_text**: Genetic data as plain VCF text
    - **patient_id**: Optional identifier
    - **explain**: Also request a narrative explanation of the results
    """
    try:
        result = await run_in_threadpool(run_analysis_pipeline, req.vcf_text, req.patient_id)
    except VcfParseError as e:
        logger.error("Validation error in pipeline: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if req.explain:
        result = await explain_reports(result)

    return AnalysisResponse.from_result(result)


@router.post("/explain", response_model=ExplainResponse)
async def explain_final_report(report: FinalReport) -> ExplainResponse:
    """Narrative explanation of an already computed patient summary."""
    try:
        text = await generate_explanation(report)
    except ExplanationServiceError as e:
        logger.error("Explanation service error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Explanation service is unavailable.",
        )
    return ExplainResponse(explanation=text)
