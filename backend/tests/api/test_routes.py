"""
HTTP-level tests for the FastAPI application.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from pharmaguard.api.routes import analysis as analysis_routes
from pharmaguard.api.routes import upload as upload_routes
from pharmaguard.main import app
from pharmaguard.services.llm.ollama_client import ExplanationServiceError
from pharmaguard.services.pharmacogenomics.config import update_config
from pharmaguard.services.pipeline import analysis_pipeline


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def pipeline_thread(monkeypatch):
    """Records whether the pipeline ran on the event loop thread."""
    seen = {}
    real = analysis_pipeline.run_analysis_pipeline

    def recording_pipeline(*args, **kwargs):
        try:
            asyncio.get_running_loop()
            seen["on_event_loop"] = True
        except RuntimeError:
            seen["on_event_loop"] = False
        return real(*args, **kwargs)

    monkeypatch.setattr(analysis_routes, "run_analysis_pipeline", recording_pipeline)
    monkeypatch.setattr(upload_routes, "run_analysis_pipeline", recording_pipeline)
    return seen


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "PharmaGuard"}


class TestUpload:

    def test_pipeline_runs_in_worker_thread(self, client, pipeline_thread, normal_vcf):
        response = client.post(
            "/api/v1/upload/",
            files={"file": ("patient.vcf", normal_vcf.encode(), "text/plain")},
        )

        assert response.status_code == 200
        assert pipeline_thread == {"on_event_loop": False}

    def test_upload_vcf(self, client, mixed_vcf):
        response = client.post(
            "/api/v1/upload/",
            files={"file": ("patient.vcf", mixed_vcf.encode(), "text/plain")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["patient_id"] == "PATIENT_DEMO"
        assert len(data["reports"]) == 6
        assert data["reports"][0]["pharmacogenomic_profile"]["diplotype"] == "*1/*4"

    def test_upload_with_patient_id(self, client, normal_vcf):
        response = client.post(
            "/api/v1/upload/",
            files={"file": ("patient.vcf", normal_vcf.encode(), "text/plain")},
            data={"patient_id": "P-9"},
        )

        assert response.status_code == 200
        assert response.json()["patient_id"] == "P-9"

    def test_wrong_extension(self, client, normal_vcf):
        response = client.post(
            "/api/v1/upload/",
            files={"file": ("patient.txt", normal_vcf.encode(), "text/plain")},
        )
        assert response.status_code == 400

    def test_oversize_upload(self, client, normal_vcf):
        update_config(**{"validation.max_upload_bytes": 100})
        response = client.post(
            "/api/v1/upload/",
            files={"file": ("patient.vcf", normal_vcf.encode(), "text/plain")},
        )
        assert response.status_code == 413

    def test_invalid_vcf(self, client):
        response = client.post(
            "/api/v1/upload/",
            files={"file": ("patient.vcf", b"not a vcf\n", "text/plain")},
        )

        assert response.status_code == 400
        assert "fileformat" in response.json()["detail"]


class TestAnalyze:

    def test_pipeline_runs_in_worker_thread(self, client, pipeline_thread, normal_vcf):
        response = client.post("/api/v1/analyze", json={"vcf_text": normal_vcf})

        assert response.status_code == 200
        assert pipeline_thread == {"on_event_loop": False}

    def test_analyze_text(self, client, high_risk_vcf):
        response = client.post("/api/v1/analyze", json={"vcf_text": high_risk_vcf, "patient_id": "P-1"})

        assert response.status_code == 200
        data = response.json()
        assert data["patient_id"] == "P-1"
        assert data["risk_summary"]["high_risk"] == 5
        assert data["explanation"] is None

    def test_analyze_invalid(self, client):
        response = client.post("/api/v1/analyze", json={"vcf_text": "##fileformat=VCFv4.2\n"})

        assert response.status_code == 400
        assert "no variants" in response.json()["detail"]

    def test_analyze_empty_text_rejected(self, client):
        assert client.post("/api/v1/analyze", json={"vcf_text": ""}).status_code == 422

    def test_explain_failure_keeps_reports(self, client, mixed_vcf, monkeypatch):
        async def failing_generate(final_report, client=None):
            raise ExplanationServiceError("LLM service returned HTTP 500")

        monkeypatch.setattr(analysis_pipeline, "generate_explanation", failing_generate)
        response = client.post("/api/v1/analyze", json={"vcf_text": mixed_vcf, "explain": True})

        assert response.status_code == 200
        data = response.json()
        assert len(data["reports"]) == 6
        assert data["explanation"] is None
        assert data["explanation_error"] == "LLM service returned HTTP 500"

    def test_explain_success(self, client, mixed_vcf, monkeypatch):
        async def fake_generate(final_report, client=None):
            return "Summary for %s" % final_report.patient_id

        monkeypatch.setattr(analysis_pipeline, "generate_explanation", fake_generate)
        response = client.post("/api/v1/analyze", json={"vcf_text": mixed_vcf, "explain": True})

        assert response.json()["explanation"] == "Summary for PATIENT_DEMO"


class TestExplain:

    @pytest.fixture
    def payload(self):
        return {
            "patient_id": "P1",
            "timestamp": "2024-01-01T00:00:00+00:00",
            "results": [
                {
                    "gene": "TPMT",
                    "diplotype": "*1/*3B",
                    "phenotype": "IM",
                    "risk": "Adjust Dosage",
                    "cpic_recommendation": "Reduce starting dose.",
                }
            ],
        }

    def test_explain(self, client, payload, monkeypatch):
        async def fake_generate(final_report, client=None):
            return "TPMT explanation"

        monkeypatch.setattr(analysis_routes, "generate_explanation", fake_generate)
        response = client.post("/api/v1/explain", json=payload)

        assert response.status_code == 200
        assert response.json() == {"explanation": "TPMT explanation"}

    def test_explain_service_down(self, client, payload, monkeypatch):
        async def failing_generate(final_report, client=None):
            raise ExplanationServiceError("connection refused")

        monkeypatch.setattr(analysis_routes, "generate_explanation", failing_generate)
        assert client.post("/api/v1/explain", json=payload).status_code == 502
