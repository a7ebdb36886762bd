"""
PharmaGuard

Pharmacogenomic decision engine: VCF marker detection, metabolizer phenotype
inference and CPIC-based drug risk reports.
"""

__version__ = "2.0.0"
