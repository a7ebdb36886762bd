import json

from pharmaguard.services.vcf.__main__ import main


class TestCli:

    def test_prints_analysis_json(self, tmp_path, capsys, mixed_vcf):
        path = tmp_path / "demo.vcf"
        path.write_text(mixed_vcf)

        assert main(["vcf", str(path), "--patient-id", "CLI-1"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["patient_id"] == "CLI-1"
        assert len(data["reports"]) == 6

    def test_missing_file(self, tmp_path):
        assert main(["vcf", str(tmp_path / "absent.vcf")]) == 2

    def test_validation_failure(self, tmp_path):
        path = tmp_path / "bad.vcf"
        path.write_text("chr1\t100\trs1\tA\tG\t.\tPASS\t.\tGT\t0/1\n")

        assert main(["vcf", str(path)]) == 2
        assert main(["vcf", str(path), "--no-validate"]) == 0

    def test_usage(self, capsys):
        assert main(["vcf"]) == 0
        assert "Usage" in capsys.readouterr().out

    def test_demo_scenario(self, capsys):
        assert main(["vcf", "--demo", "high-risk"]) == 0
        assert json.loads(capsys.readouterr().out)["risk_summary"]["high_risk"] == 5

    def test_unknown_demo_scenario(self):
        assert main(["vcf", "--demo", "nope"]) == 2

    def test_patient_id_without_value(self, tmp_path, mixed_vcf):
        path = tmp_path / "demo.vcf"
        path.write_text(mixed_vcf)
        assert main(["vcf", str(path), "--patient-id"]) == 2
