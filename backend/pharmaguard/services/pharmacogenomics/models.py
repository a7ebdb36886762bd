"""
Internal data models for pharmacogenomics service.
These models represent the static knowledge-base entries, the intermediate
per-gene structures and the final report returned to callers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Phenotype(str, Enum):
    """Metabolizer phenotype assigned per gene."""
    PM = "PM"
    IM = "IM"
    NM = "NM"
    RM = "RM"
    URM = "URM"
    UNKNOWN = "Unknown"


PHENOTYPE_LABELS: Dict[Phenotype, str] = {
    Phenotype.PM: "Poor Metabolizer",
    Phenotype.IM: "Intermediate Metabolizer",
    Phenotype.NM: "Normal Metabolizer",
    Phenotype.RM: "Rapid Metabolizer",
    Phenotype.URM: "Ultra-Rapid Metabolizer",
    Phenotype.UNKNOWN: "Unknown Phenotype",
}


class FunctionImpact(str, Enum):
    """Functional consequence of carrying a marker's alternate allele."""
    NO_FUNCTION = "no_function"
    REDUCED = "reduced"
    NORMAL = "normal"
    INCREASED = "increased"


class RiskLabel(str, Enum):
    SAFE = "Safe"
    ADJUST_DOSAGE = "Adjust Dosage"
    TOXIC = "Toxic"
    INEFFECTIVE = "Ineffective"
    UNKNOWN = "Unknown"


class Severity(str, Enum):
    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class MarkerMapping:
    """One entry of the marker catalog: rsID -> gene and star alleles."""
    rsid: str
    gene: str
    ref: str
    alt: str
    star_allele_ref: str
    star_allele_alt: str
    function_impact: FunctionImpact


@dataclass(frozen=True)
class GuidelineRule:
    """CPIC recommendation for one (gene, drug, phenotype) combination."""
    gene: str
    drug: str
    phenotype: Phenotype
    diplotype_examples: Tuple[str, ...]
    risk_label: RiskLabel
    severity: Severity
    confidence_score: float
    action: str
    dosage_adjustment: str
    summary: str
    mechanism: str

    @property
    def key(self) -> Tuple[str, str, Phenotype]:
        return (self.gene, self.drug, self.phenotype)


@dataclass
class AlleleFunctionCounts:
    """Allele tallies per functional class for a single gene."""
    functional: int = 0
    reduced: int = 0
    no_function: int = 0
    increased: int = 0

    def is_empty(self) -> bool:
        return not (self.functional or self.reduced or self.no_function or self.increased)


class DetectedVariant(BaseModel):
    """A catalog marker observed in the patient's VCF."""
    model_config = ConfigDict(frozen=True)

    rsid: str = Field(..., description="dbSNP reference ID as written in the VCF")
    genotype: str = Field(..., description="Resolved allele-letter genotype, e.g. C/T")
    star_allele: str = Field(..., description="Inferred star allele, e.g. *1/*4")
    chromosome: str = Field(..., description="Chromosome identifier")
    position: int = Field(..., description="Position on chromosome")
    ref: str = Field(..., description="Reference allele")
    alt: str = Field(..., description="Alternate allele(s), comma-joined")


class RiskAssessment(BaseModel):
    """Risk assessment result for a drug-gene interaction."""
    risk_label: RiskLabel = Field(..., description="Risk classification label")
    confidence_score: Optional[float] = Field(None, ge=0.0, le=1.0, description="Confidence score (0-1)")
    severity: Severity = Field(..., description="Severity: none, low, moderate, high, critical")


class PharmacogenomicProfile(BaseModel):
    """Profile details for the report."""
    primary_gene: str = Field(..., description="Gene symbol")
    diplotype: str = Field(..., description="Diplotype result")
    phenotype: Phenotype = Field(..., description="Phenotype code")
    detected_variants: List[DetectedVariant] = Field(default_factory=list, description="List of variants found")


class ClinicalRecommendation(BaseModel):
    """Clinical recommendation based on pharmacogenomic data."""
    action: str = Field(..., description="Recommended action")
    dosage_adjustment: str = Field(..., description="Dosage adjustment guidance")


class Explanation(BaseModel):
    summary: str
    mechanism: str


class QualityMetrics(BaseModel):
    vcf_parsing_success: bool = True
    total_variants_parsed: int = Field(..., ge=0)
    target_variants_found: int = Field(..., ge=0)


class PharmacogenomicReport(BaseModel):
    """Final report for one patient, gene and drug."""
    model_config = ConfigDict(frozen=True)

    patient_id: str = Field(..., description="Patient Identifier")
    drug: str = Field(..., description="Drug Name")
    timestamp: str = Field(..., description="ISO8601 Timestamp")
    risk_assessment: RiskAssessment = Field(..., description="Risk details")
    pharmacogenomic_profile: PharmacogenomicProfile = Field(..., description="PGx Profile")
    clinical_recommendation: ClinicalRecommendation = Field(..., description="Clinical Recommendation")
    llm_generated_explanation: Explanation = Field(..., description="Guideline summary and mechanism")
    quality_metrics: QualityMetrics = Field(..., description="Parsing and detection metrics")


class GeneResult(BaseModel):
    gene: str
    diplotype: str
    phenotype: str
    risk: str
    cpic_recommendation: str


class FinalReport(BaseModel):
    """Compact patient-level summary handed to the narrative service."""
    patient_id: str
    timestamp: str
    results: List[GeneResult] = Field(default_factory=list)
