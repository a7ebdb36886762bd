"""
Shared fixtures: demo VCF inputs for the three reference scenarios.
"""

import pytest

from pharmaguard.services.pharmacogenomics.config import reset_config
from pharmaguard.services.vcf.demo import build_vcf, generate_demo_vcf


@pytest.fixture
def normal_vcf():
    """All target markers homozygous reference."""
    return generate_demo_vcf("normal")


@pytest.fixture
def high_risk_vcf():
    """All target markers homozygous alternate."""
    return generate_demo_vcf("high-risk")


@pytest.fixture
def mixed_vcf():
    """Realistic clinical mix of heterozygous and homozygous calls."""
    return generate_demo_vcf("mixed")


@pytest.fixture
def make_vcf():
    """Build a VCF text from (chrom, pos, rsid, ref, alt, gt) rows."""
    return build_vcf


@pytest.fixture(autouse=True)
def _default_config():
    reset_config()
    yield
    reset_config()
