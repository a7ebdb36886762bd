"""
Unit tests for marker-to-gene mapping and zygosity classification.
"""

import pytest

from pharmaguard.services.pharmacogenomics.marker_catalog import TARGET_GENES
from pharmaguard.services.vcf.parser import parse_vcf
from pharmaguard.services.vcf.variant_extractor import (
    HET,
    HOM_ALT,
    HOM_REF,
    classify_zygosity,
    extract_pharmacogenes,
)


class TestClassifyZygosity:

    @pytest.mark.parametrize("gt,expected", [
        ("0/0", HOM_REF),
        ("0|0", HOM_REF),
        ("0/0:35", HOM_REF),
        ("1/1", HOM_ALT),
        ("1|1", HOM_ALT),
        ("0/1", HET),
        ("1|0", HET),
        ("2/1", HET),
        ("2/2", HET),
        ("./.", HET),
    ])
    def test_two_allele_heuristic(self, gt, expected):
        assert classify_zygosity(gt) == expected


class TestExtractPharmacogenes:

    def test_every_target_gene_present(self):
        by_gene = extract_pharmacogenes([])
        assert list(by_gene) == list(TARGET_GENES)
        assert all(v == [] for v in by_gene.values())

    def test_hom_ref_gets_reference_star_allele(self, make_vcf):
        records = parse_vcf(make_vcf([("chr22", 42522613, "rs3892097", "C", "T", "0/0")])).records
        variant = extract_pharmacogenes(records)["CYP2D6"][0]

        assert variant.star_allele == "*1"
        assert variant.genotype == "C/C"

    def test_hom_alt_star_allele(self, make_vcf):
        records = parse_vcf(make_vcf([("chr10", 96702047, "rs1799853", "C", "T", "1/1")])).records
        variant = extract_pharmacogenes(records)["CYP2C9"][0]

        assert variant.star_allele == "*2/*2"
        assert variant.genotype == "T/T"
        assert variant.chromosome == "chr10"
        assert variant.position == 96702047

    def test_het_star_allele_slco1b1(self, make_vcf):
        records = parse_vcf(make_vcf([("chr12", 21331549, "rs4149056", "T", "C", "0|1")])).records
        assert extract_pharmacogenes(records)["SLCO1B1"][0].star_allele == "*1a/*5"

    def test_lookup_is_case_insensitive(self, make_vcf):
        records = parse_vcf(make_vcf([("chr22", 42522613, "RS3892097", "C", "T", "0/1")])).records
        variants = extract_pharmacogenes(records)["CYP2D6"]

        assert len(variants) == 1
        assert variants[0].rsid == "RS3892097"

    def test_unknown_and_empty_ids_skipped(self, make_vcf):
        records = parse_vcf(make_vcf([
            ("chr1", 100, "rs999999", "A", "G", "1/1"),
            ("chr1", 200, ".", "A", "G", "1/1"),
        ])).records
        by_gene = extract_pharmacogenes(records)

        assert sum(len(v) for v in by_gene.values()) == 0

    def test_gene_subset(self, mixed_vcf):
        by_gene = extract_pharmacogenes(parse_vcf(mixed_vcf).records, genes=["TPMT"])

        assert list(by_gene) == ["TPMT"]
        assert [v.rsid for v in by_gene["TPMT"]] == ["rs1800462", "rs1800460"]

    def test_mixed_demo_counts(self, mixed_vcf):
        by_gene = extract_pharmacogenes(parse_vcf(mixed_vcf).records)
        assert {g: len(v) for g, v in by_gene.items()} == {
            "CYP2D6": 2,
            "CYP2C19": 1,
            "CYP2C9": 2,
            "SLCO1B1": 1,
            "TPMT": 2,
            "DPYD": 2,
        }
