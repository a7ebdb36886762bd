from .parser import VariantRecord, VcfParseError, VcfParseResult, parse_vcf, resolve_genotype
from .validator import VcfValidationError, validate_vcf
from .variant_extractor import classify_zygosity, extract_pharmacogenes
from .demo import generate_demo_vcf

__all__ = [
    "VariantRecord",
    "VcfParseError",
    "VcfParseResult",
    "parse_vcf",
    "resolve_genotype",
    "VcfValidationError",
    "validate_vcf",
    "classify_zygosity",
    "extract_pharmacogenes",
    "generate_demo_vcf",
]
