"""
Unit tests for structural VCF validation.
"""

import pytest

from pharmaguard.services.vcf.parser import VcfParseError, VcfParseResult, VariantRecord, parse_vcf
from pharmaguard.services.vcf.validator import VcfValidationError, validate_vcf
from pharmaguard.services.vcf.variant_extractor import extract_pharmacogenes


def _record(chromosome="chr1", position=100, genotype="0/1"):
    return VariantRecord(
        chromosome=chromosome,
        position=position,
        id="rs1",
        ref="A",
        alt="G",
        qual=".",
        filter="PASS",
        info=".",
        format="GT",
        genotype=genotype,
        resolved_genotype="A/G",
    )


def _result(records, has_fileformat=True):
    return VcfParseResult(
        records=records,
        vcf_version="VCFv4.2",
        sample_id="S1",
        has_fileformat=has_fileformat,
    )


class TestValidateVcf:

    def test_valid_demo_passes(self, mixed_vcf):
        validate_vcf(parse_vcf(mixed_vcf))

    def test_validation_error_is_parse_error(self):
        assert issubclass(VcfValidationError, VcfParseError)

    def test_missing_fileformat(self):
        with pytest.raises(VcfValidationError, match="fileformat"):
            validate_vcf(_result([_record()], has_fileformat=False))

    def test_no_records(self):
        with pytest.raises(VcfValidationError, match="no variants"):
            validate_vcf(_result([]))

    def test_only_malformed_lines(self):
        parsed = parse_vcf("##fileformat=VCFv4.2\nchr1\t100\trs1\n")
        with pytest.raises(VcfValidationError, match="1 malformed lines skipped"):
            validate_vcf(parsed)

    @pytest.mark.parametrize("record", [
        _record(chromosome=""),
        _record(position=0),
        _record(position=-5),
        _record(genotype=""),
    ])
    def test_malformed_record(self, record):
        with pytest.raises(VcfValidationError, match="Malformed VCF record"):
            validate_vcf(_result([_record(), record]))

    def test_missing_genes_tolerated_by_default(self, make_vcf):
        parsed = parse_vcf(make_vcf([("chr22", 42522613, "rs3892097", "C", "T", "0/1")]))
        validate_vcf(parsed, by_gene=extract_pharmacogenes(parsed.records))

    def test_require_all_genes_names_missing(self, make_vcf):
        parsed = parse_vcf(make_vcf([("chr22", 42522613, "rs3892097", "C", "T", "0/1")]))
        by_gene = extract_pharmacogenes(parsed.records)

        with pytest.raises(VcfValidationError) as exc_info:
            validate_vcf(parsed, by_gene=by_gene, require_all_genes=True)

        message = str(exc_info.value)
        assert "CYP2C19" in message
        assert "DPYD" in message
        assert "CYP2D6" not in message

    def test_require_all_genes_satisfied(self, normal_vcf):
        parsed = parse_vcf(normal_vcf)
        validate_vcf(parsed, by_gene=extract_pharmacogenes(parsed.records), require_all_genes=True)

    def test_require_all_genes_needs_gene_map(self, normal_vcf):
        with pytest.raises(ValueError, match="per-gene variant map"):
            validate_vcf(parse_vcf(normal_vcf), require_all_genes=True)
