"""
Risk Engine - Matches a gene's phenotype against the CPIC rule table and
assembles the per gene-drug report.

Assembly is a pure function of (patient id, gene, detected variants, total
record count): no state is kept between calls, so genes can be processed in
any order and runs can proceed concurrently.
"""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional, Sequence

from .config import get_report_policy
from .cpic_tables import get_drug_for_gene, get_guideline_rule
from .models import (
    ClinicalRecommendation,
    DetectedVariant,
    Explanation,
    FinalReport,
    GeneResult,
    GuidelineRule,
    PharmacogenomicProfile,
    PharmacogenomicReport,
    Phenotype,
    QualityMetrics,
    RiskAssessment,
    RiskLabel,
    Severity,
)
from .phenotype_mapper import DiplotypeResolver, PhenotypeMapper

logger = logging.getLogger(__name__)

NO_GUIDELINE_ACTION = "No CPIC guideline available for this variant combination."
NO_GUIDELINE_DOSAGE = "Consult pharmacogenomics specialist."


class UnsupportedGeneError(KeyError):
    pass


class RiskEngine:
    """Evaluates pharmacogenomic risk for gene-drug-phenotype combinations."""

    def __init__(
        self,
        phenotype_mapper: Optional[PhenotypeMapper] = None,
        diplotype_resolver: Optional[DiplotypeResolver] = None,
    ):
        self.phenotype_mapper = phenotype_mapper or PhenotypeMapper()
        self.diplotype_resolver = diplotype_resolver or DiplotypeResolver()

    def evaluate_risk(self, gene: str, drug: str, phenotype: Phenotype) -> Optional[GuidelineRule]:
        """
        Exact rule for (gene, drug, phenotype), else the Normal Metabolizer
        rule for the pair, else None.
        """
        rule = get_guideline_rule(gene, drug, phenotype)
        if rule is not None:
            return rule

        logger.info("No CPIC rule for %s/%s/%s, falling back to NM", gene, drug, Phenotype(phenotype).value)
        return get_guideline_rule(gene, drug, Phenotype.NM)

    def generate_report(
        self,
        patient_id: str,
        gene: str,
        variants: Sequence[DetectedVariant],
        total_variants: int,
    ) -> PharmacogenomicReport:
        """Build the report for one target gene and its paired drug."""
        drug = get_drug_for_gene(gene)
        if drug is None:
            raise UnsupportedGeneError(gene)

        phenotype = self.phenotype_mapper.infer_phenotype(gene, variants)
        diplotype = self.diplotype_resolver.resolve_diplotype(gene, variants)
        rule = self.evaluate_risk(gene, drug, phenotype)

        if variants:
            confidence = rule.confidence_score if rule is not None else None
        else:
            confidence = get_report_policy().no_variant_confidence

        if rule is not None:
            risk_label, severity = rule.risk_label, rule.severity
            recommendation = ClinicalRecommendation(action=rule.action, dosage_adjustment=rule.dosage_adjustment)
            explanation = Explanation(summary=rule.summary, mechanism=rule.mechanism)
        else:
            risk_label, severity = RiskLabel.UNKNOWN, Severity.NONE
            recommendation = ClinicalRecommendation(action=NO_GUIDELINE_ACTION, dosage_adjustment=NO_GUIDELINE_DOSAGE)
            explanation = Explanation(
                summary=f"No specific pharmacogenomic variant detected for {gene}. Standard dosing applies.",
                mechanism=(
                    f"{gene} encodes a key drug-metabolizing enzyme. "
                    "No actionable variant was identified in this analysis."
                ),
            )

        logger.info(
            "%s/%s: diplotype=%s phenotype=%s risk=%s",
            gene, drug, diplotype, phenotype.value, risk_label.value,
        )

        return PharmacogenomicReport(
            patient_id=patient_id,
            drug=drug,
            timestamp=datetime.now(timezone.utc).isoformat(),
            risk_assessment=RiskAssessment(
                risk_label=risk_label,
                confidence_score=confidence,
                severity=severity,
            ),
            pharmacogenomic_profile=PharmacogenomicProfile(
                primary_gene=gene,
                diplotype=diplotype,
                phenotype=phenotype,
                detected_variants=list(variants),
            ),
            clinical_recommendation=recommendation,
            llm_generated_explanation=explanation,
            quality_metrics=QualityMetrics(
                vcf_parsing_success=True,
                total_variants_parsed=total_variants,
                target_variants_found=len(variants),
            ),
        )


def create_risk_engine() -> RiskEngine:
    """Factory function to create a RiskEngine instance."""
    return RiskEngine()


def build_final_report(
    patient_id: str,
    reports: Iterable[PharmacogenomicReport],
) -> FinalReport:
    """Condense per-gene reports into the patient-level summary."""
    return FinalReport(
        patient_id=patient_id,
        timestamp=datetime.now(timezone.utc).isoformat(),
        results=[
            GeneResult(
                gene=r.pharmacogenomic_profile.primary_gene,
                diplotype=r.pharmacogenomic_profile.diplotype,
                phenotype=r.pharmacogenomic_profile.phenotype.value,
                risk=r.risk_assessment.risk_label.value,
                cpic_recommendation=r.clinical_recommendation.action,
            )
            for r in reports
        ],
    )


def summarize_risk(reports: Iterable[PharmacogenomicReport]) -> Dict[str, int]:
    """
    Count reports per risk label, plus 'safe', 'adjust_dosage' and
    'high_risk' (Toxic + Ineffective) totals.
    """
    by_label: Counter = Counter(r.risk_assessment.risk_label.value for r in reports)
    summary: Dict[str, int] = {label.value: by_label.get(label.value, 0) for label in RiskLabel}
    summary["safe"] = by_label.get(RiskLabel.SAFE.value, 0)
    summary["adjust_dosage"] = by_label.get(RiskLabel.ADJUST_DOSAGE.value, 0)
    summary["high_risk"] = by_label.get(RiskLabel.TOXIC.value, 0) + by_label.get(RiskLabel.INEFFECTIVE.value, 0)
    return summary

