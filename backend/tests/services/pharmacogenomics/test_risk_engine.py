"""
Unit tests for risk engine.
Tests rule matching, fallbacks and per-gene report assembly.
"""

import pytest

from pharmaguard.services.pharmacogenomics import risk_engine as risk_engine_module
from pharmaguard.services.pharmacogenomics.config import update_config
from pharmaguard.services.pharmacogenomics.models import (
    DetectedVariant,
    Phenotype,
    RiskLabel,
    Severity,
)
from pharmaguard.services.pharmacogenomics.risk_engine import (
    NO_GUIDELINE_ACTION,
    NO_GUIDELINE_DOSAGE,
    UnsupportedGeneError,
    build_final_report,
    create_risk_engine,
    summarize_risk,
)


def detected(rsid, genotype, star_allele):
    return DetectedVariant(
        rsid=rsid,
        genotype=genotype,
        star_allele=star_allele,
        chromosome="chr1",
        position=1000,
        ref=genotype[0],
        alt=genotype[-1],
    )


class TestEvaluateRisk:
    """Rule lookup with the Normal Metabolizer fallback."""

    @pytest.fixture
    def engine(self):
        return create_risk_engine()

    def test_codeine_poor_metabolizer(self, engine):
        rule = engine.evaluate_risk("CYP2D6", "CODEINE", Phenotype.PM)

        assert rule.risk_label == RiskLabel.TOXIC
        assert rule.severity == Severity.CRITICAL
        assert rule.confidence_score == 0.97
        assert "morphine" in rule.mechanism.lower()

    def test_clopidogrel_poor_metabolizer(self, engine):
        rule = engine.evaluate_risk("CYP2C19", "CLOPIDOGREL", Phenotype.PM)
        assert rule.risk_label == RiskLabel.INEFFECTIVE

    def test_warfarin_poor_metabolizer(self, engine):
        rule = engine.evaluate_risk("CYP2C9", "WARFARIN", Phenotype.PM)

        assert rule.risk_label == RiskLabel.ADJUST_DOSAGE
        assert rule.severity == Severity.HIGH

    def test_phenotype_as_string(self, engine):
        assert engine.evaluate_risk("TPMT", "AZATHIOPRINE", "IM").phenotype == Phenotype.IM

    def test_missing_phenotype_falls_back_to_normal(self, engine):
        rule = engine.evaluate_risk("CYP2C19", "CLOPIDOGREL", Phenotype.URM)

        assert rule.phenotype == Phenotype.NM
        assert rule.risk_label == RiskLabel.SAFE

    def test_unknown_pair_gives_none(self, engine):
        assert engine.evaluate_risk("CYP2D6", "WARFARIN", Phenotype.PM) is None


class TestGenerateReport:

    @pytest.fixture
    def engine(self):
        return create_risk_engine()

    def test_zero_variants_uses_fallback_confidence(self, engine):
        report = engine.generate_report("P1", "CYP2D6", [], 12)

        assert report.drug == "CODEINE"
        assert report.pharmacogenomic_profile.phenotype == Phenotype.NM
        assert report.pharmacogenomic_profile.diplotype == "*1/*1"
        assert report.pharmacogenomic_profile.detected_variants == []
        assert report.risk_assessment.risk_label == RiskLabel.SAFE
        assert report.risk_assessment.confidence_score == 0.72
        assert report.quality_metrics.target_variants_found == 0
        assert report.quality_metrics.total_variants_parsed == 12
        assert report.quality_metrics.vcf_parsing_success is True

    def test_zero_variants_slco1b1_wildtype(self, engine):
        report = engine.generate_report("P1", "SLCO1B1", [], 0)
        assert report.pharmacogenomic_profile.diplotype == "*1a/*1a"

    def test_fallback_confidence_is_configurable(self, engine):
        update_config(**{"report_policy.no_variant_confidence": 0.5})
        assert engine.generate_report("P1", "TPMT", [], 0).risk_assessment.confidence_score == 0.5

    def test_detected_variant_uses_rule_confidence(self, engine):
        variants = [detected("rs4244285", "G/A", "*1/*2")]
        report = engine.generate_report("P1", "CYP2C19", variants, 3)

        assert report.pharmacogenomic_profile.phenotype == Phenotype.IM
        assert report.pharmacogenomic_profile.diplotype == "*1/*2"
        assert report.risk_assessment.risk_label == RiskLabel.ADJUST_DOSAGE
        assert report.risk_assessment.confidence_score == 0.85
        assert report.quality_metrics.target_variants_found == 1
        assert report.clinical_recommendation.action
        assert report.llm_generated_explanation.summary

    def test_hom_ref_variant_keeps_rule_confidence(self, engine):
        report = engine.generate_report("P1", "CYP2D6", [detected("rs3892097", "C/C", "*1")], 1)

        assert report.pharmacogenomic_profile.phenotype == Phenotype.NM
        assert report.risk_assessment.confidence_score == 0.95

    def test_fallback_rule_confidence(self, engine):
        variants = [detected("rs12248560", "T/T", "*17/*17")]
        report = engine.generate_report("P1", "CYP2C19", variants, 1)

        assert report.pharmacogenomic_profile.phenotype == Phenotype.URM
        assert report.risk_assessment.risk_label == RiskLabel.SAFE
        assert report.risk_assessment.confidence_score == 0.95

    def test_placeholder_when_no_rule(self, engine, monkeypatch):
        monkeypatch.setattr(risk_engine_module, "get_guideline_rule", lambda *args: None)
        report = engine.generate_report("P1", "CYP2D6", [detected("rs3892097", "T/T", "*4/*4")], 1)

        assert report.risk_assessment.risk_label == RiskLabel.UNKNOWN
        assert report.risk_assessment.severity == Severity.NONE
        assert report.risk_assessment.confidence_score is None
        assert report.clinical_recommendation.action == NO_GUIDELINE_ACTION
        assert report.clinical_recommendation.dosage_adjustment == NO_GUIDELINE_DOSAGE
        assert report.llm_generated_explanation.summary == (
            "No specific pharmacogenomic variant detected for CYP2D6. Standard dosing applies."
        )

    def test_placeholder_without_variants_uses_fallback_confidence(self, engine, monkeypatch):
        monkeypatch.setattr(risk_engine_module, "get_guideline_rule", lambda *args: None)
        assert engine.generate_report("P1", "DPYD", [], 0).risk_assessment.confidence_score == 0.72

    def test_unsupported_gene_raises(self, engine):
        with pytest.raises(UnsupportedGeneError):
            engine.generate_report("P1", "BRCA1", [], 0)

    def test_report_is_read_only(self, engine):
        report = engine.generate_report("P1", "CYP2D6", [], 0)
        with pytest.raises(Exception):
            report.drug = "ASPIRIN"

    def test_serializes_to_json(self, engine):
        data = engine.generate_report("P1", "CYP2D6", [], 0).model_dump(mode="json")

        assert data["risk_assessment"]["risk_label"] == "Safe"
        assert data["risk_assessment"]["severity"] == "none"
        assert data["pharmacogenomic_profile"]["phenotype"] == "NM"
        assert data["timestamp"]


class TestSummaries:

    @pytest.fixture
    def reports(self):
        engine = create_risk_engine()
        return [
            engine.generate_report("P1", "CYP2D6", [detected("rs3892097", "T/T", "*4/*4")], 3),
            engine.generate_report("P1", "CYP2C19", [detected("rs4244285", "A/A", "*2/*2")], 3),
            engine.generate_report("P1", "CYP2C9", [detected("rs1799853", "C/T", "*1/*2")], 3),
            engine.generate_report("P1", "TPMT", [], 3),
        ]

    def test_summarize_risk(self, reports):
        summary = summarize_risk(reports)

        assert summary["Toxic"] == 1
        assert summary["Ineffective"] == 1
        assert summary["Adjust Dosage"] == 1
        assert summary["Safe"] == 1
        assert summary["Unknown"] == 0
        assert summary["high_risk"] == 2
        assert summary["adjust_dosage"] == 1
        assert summary["safe"] == 1

    def test_summarize_empty(self):
        summary = summarize_risk([])
        assert summary["high_risk"] == 0
        assert summary["safe"] == 0

    def test_build_final_report(self, reports):
        final = build_final_report("P1", reports)

        assert final.patient_id == "P1"
        assert [r.gene for r in final.results] == ["CYP2D6", "CYP2C19", "CYP2C9", "TPMT"]
        first = final.results[0]
        assert first.diplotype == "*1/*4"
        assert first.phenotype == "PM"
        assert first.risk == "Toxic"
        assert first.cpic_recommendation == reports[0].clinical_recommendation.action
