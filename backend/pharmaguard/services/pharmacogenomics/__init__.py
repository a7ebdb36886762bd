"""
Pharmacogenomics Service

CPIC-aligned pharmacogenomic decision engine for drug risk assessment.
Provides deterministic, rule-based phenotype inference and clinical recommendations.
"""

from .models import (
    AlleleFunctionCounts,
    DetectedVariant,
    FinalReport,
    FunctionImpact,
    GuidelineRule,
    MarkerMapping,
    PharmacogenomicReport,
    Phenotype,
    PHENOTYPE_LABELS,
    RiskLabel,
    Severity,
)
from .marker_catalog import MARKER_CATALOG, TARGET_GENES, get_marker
from .cpic_tables import GENE_TO_DRUG, GUIDELINE_RULES, get_guideline_rule
from .phenotype_mapper import DiplotypeResolver, PhenotypeMapper
from .risk_engine import RiskEngine, UnsupportedGeneError, build_final_report, create_risk_engine, summarize_risk
from .config import (
    get_config,
    update_config,
    reset_config,
    load_config_from_file,
    save_config_to_file,
)

__all__ = [
    # Models
    'AlleleFunctionCounts',
    'DetectedVariant',
    'FinalReport',
    'FunctionImpact',
    'GuidelineRule',
    'MarkerMapping',
    'PharmacogenomicReport',
    'Phenotype',
    'PHENOTYPE_LABELS',
    'RiskLabel',
    'Severity',

    # Static tables
    'MARKER_CATALOG',
    'TARGET_GENES',
    'GENE_TO_DRUG',
    'GUIDELINE_RULES',
    'get_marker',
    'get_guideline_rule',

    # Phenotype Mapping
    'DiplotypeResolver',
    'PhenotypeMapper',

    # Risk Engine
    'RiskEngine',
    'UnsupportedGeneError',
    'create_risk_engine',
    'build_final_report',
    'summarize_risk',

    # Config
    'get_config',
    'update_config',
    'reset_config',
    'load_config_from_file',
    'save_config_to_file',
]
