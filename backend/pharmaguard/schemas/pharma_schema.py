from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from pharmaguard.services.pharmacogenomics.models import PharmacogenomicReport
from pharmaguard.services.pipeline.analysis_pipeline import AnalysisResult


class AnalyzeRequest(BaseModel):
    vcf_text: str = Field(..., min_length=1, description="Raw VCF text")
    patient_id: Optional[str] = None
    explain: bool = False


class AnalysisResponse(BaseModel):
    patient_id: str
    vcf_version: str
    total_variants: int
    parse_errors: List[str] = []
    risk_summary: Dict[str, int] = {}
    reports: List[PharmacogenomicReport]
    explanation: Optional[str] = None
    explanation_error: Optional[str] = None

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResponse":
        return cls(
            patient_id=result.patient_id,
            vcf_version=result.vcf_version,
            total_variants=result.total_variants,
            parse_errors=list(result.parse_errors),
            risk_summary=dict(result.risk_summary),
            reports=list(result.reports),
            explanation=result.explanation,
            explanation_error=result.explanation_error,
        )


class ExplainResponse(BaseModel):
    explanation: str
