"""
Analysis Pipeline - Orchestrates VCF text → records → markers → reports.

Receives decoded VCF text from the API route or CLI, runs the tolerant
parser, the structural validation gate and one report per target gene, and
returns an AnalysisResult. The narrative explanation is a separate, optional
step (see ``explain_reports``) whose failure never touches the reports.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Union

from pharmaguard.services.llm.explanation_service import ExplanationServiceError, generate_explanation
from pharmaguard.services.llm.ollama_client import OllamaClient
from pharmaguard.services.pharmacogenomics.config import get_report_policy, get_validation_config
from pharmaguard.services.pharmacogenomics.marker_catalog import TARGET_GENES
from pharmaguard.services.pharmacogenomics.models import PharmacogenomicReport
from pharmaguard.services.pharmacogenomics.risk_engine import (
    RiskEngine,
    build_final_report,
    summarize_risk,
)
from pharmaguard.services.vcf.parser import VcfParseResult, parse_vcf
from pharmaguard.services.vcf.validator import validate_vcf
from pharmaguard.services.vcf.variant_extractor import extract_pharmacogenes

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    patient_id: str
    vcf_version: str
    reports: List[PharmacogenomicReport]
    parse_errors: List[str] = field(default_factory=list)
    total_variants: int = 0
    risk_summary: Dict[str, int] = field(default_factory=dict)
    explanation: Optional[str] = None
    explanation_error: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "patient_id": self.patient_id,
            "vcf_version": self.vcf_version,
            "total_variants": self.total_variants,
            "parse_errors": list(self.parse_errors),
            "risk_summary": dict(self.risk_summary),
            "reports": [r.model_dump(mode="json") for r in self.reports],
            "explanation": self.explanation,
            "explanation_error": self.explanation_error,
        }


def resolve_patient_id(parsed: VcfParseResult, patient_id: Optional[str] = None) -> str:
    """Explicit id, else the VCF sample column, else the configured placeholder."""
    return patient_id or parsed.sample_id or get_report_policy().default_patient_id


def analyze_vcf(
    parsed: VcfParseResult,
    patient_id: Optional[str] = None,
    *,
    genes: Iterable[str] = TARGET_GENES,
    engine: Optional[RiskEngine] = None,
) -> List[PharmacogenomicReport]:
    """
    One report per gene, in the order of ``genes``. Does not validate.
    """
    genes = list(genes)
    engine = engine or RiskEngine()
    pid = resolve_patient_id(parsed, patient_id)
    by_gene = extract_pharmacogenes(parsed.records, genes=genes)

    return [
        engine.generate_report(pid, gene, by_gene[gene], parsed.total_variants)
        for gene in genes
    ]


def run_analysis_pipeline(
    vcf_content: Union[str, bytes],
    patient_id: Optional[str] = None,
    *,
    validate: bool = True,
    genes: Iterable[str] = TARGET_GENES,
) -> AnalysisResult:
    """
    Full pipeline: parse → validate → map markers → phenotype → CPIC rule → reports.

    Raises VcfValidationError (before any report is built) when ``validate``
    is set and the input fails the structural checks.
    """
    start_time = time.time()
    genes = list(genes)

    # ── 1. Parse VCF ──────────────────────────────────────────────────────
    logger.info("Parsing VCF")
    parsed = parse_vcf(vcf_content)

    # ── 2. Structural validation ──────────────────────────────────────────
    if validate:
        policy = get_validation_config()
        by_gene = (
            extract_pharmacogenes(parsed.records, genes=genes) if policy.require_all_genes else None
        )
        validate_vcf(parsed, by_gene=by_gene, require_all_genes=policy.require_all_genes, genes=genes)

    # ── 3. Reports ────────────────────────────────────────────────────────
    pid = resolve_patient_id(parsed, patient_id)
    logger.info("Assembling reports for patient %s", pid)
    reports = analyze_vcf(parsed, pid, genes=genes)

    logger.info("Pipeline execution time: %.2fs", time.time() - start_time)

    return AnalysisResult(
        patient_id=pid,
        vcf_version=parsed.vcf_version,
        reports=reports,
        parse_errors=list(parsed.errors),
        total_variants=parsed.total_variants,
        risk_summary=summarize_risk(reports),
    )


async def explain_reports(result: AnalysisResult, client: Optional[OllamaClient] = None) -> AnalysisResult:
    """
    Attach a narrative explanation to ``result``. A service failure is recorded
    in ``explanation_error``; the reports are left as they are.
    """
    final_report = build_final_report(result.patient_id, result.reports)
    try:
        result.explanation = await generate_explanation(final_report, client=client)
    except ExplanationServiceError as e:
        logger.error("Narrative explanation failed for %s: %s", result.patient_id, e)
        result.explanation_error = str(e)
    return result
