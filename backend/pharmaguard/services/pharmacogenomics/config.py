"""
Configuration for pharmacogenomics service.
Centralizes tunable parameters for parsing, report assembly and the
optional narrative explanation service.
"""

import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

# Load .env file (walks up directories to find it)
load_dotenv(find_dotenv())


class ReportPolicyConfig(BaseModel):
    """Fallback values used when assembling per-gene reports."""

    no_variant_confidence: float = Field(
        default=0.72,
        ge=0.0,
        le=1.0,
        description="Confidence reported for a gene with no marker variant observed"
    )

    default_sample_id: str = Field(
        default="SAMPLE_001",
        description="Sample identifier used when the #CHROM header names no sample"
    )

    default_patient_id: str = Field(
        default="PATIENT_001",
        description="Patient identifier used when neither caller nor file provides one"
    )


class ValidationConfig(BaseModel):
    """Structural pre-flight checks applied by the analysis pipeline."""

    require_all_genes: bool = Field(
        default=False,
        description="If True, a file missing markers for any target gene is rejected"
    )

    max_upload_bytes: int = Field(
        default=int(os.environ.get("PHARMAGUARD_MAX_UPLOAD_BYTES", 5 * 1024 * 1024)),
        gt=0,
        description="Upload size ceiling enforced by the HTTP layer"
    )


class ExplanationServiceConfig(BaseModel):
    """Settings for the Ollama-compatible narrative explanation endpoint."""

    base_url: str = Field(
        default=os.environ.get("PHARMAGUARD_LLM_URL", "http://127.0.0.1:11434"),
        description="Base URL of the LLM service"
    )

    model: str = Field(
        default=os.environ.get("PHARMAGUARD_LLM_MODEL", "llama3"),
        description="Model name sent with each request"
    )

    timeout_seconds: float = Field(
        default=float(os.environ.get("PHARMAGUARD_LLM_TIMEOUT", 30.0)),
        gt=0.0,
        description="Per-request timeout"
    )

    max_tries: int = Field(
        default=2,
        ge=1,
        description="Attempts per request, including the first"
    )


class PharmacogenomicsConfig(BaseModel):
    """Main configuration for pharmacogenomics service."""

    report_policy: ReportPolicyConfig = Field(
        default_factory=ReportPolicyConfig,
        description="Report assembly fallbacks"
    )

    validation: ValidationConfig = Field(
        default_factory=ValidationConfig,
        description="Structural validation configuration"
    )

    explanation: ExplanationServiceConfig = Field(
        default_factory=ExplanationServiceConfig,
        description="Narrative explanation service configuration"
    )

    # Logging
    log_level: str = Field(
        default=os.environ.get("PHARMAGUARD_LOG_LEVEL", "INFO"),
        description="Root log level"
    )


# Global configuration instance
_config: PharmacogenomicsConfig = PharmacogenomicsConfig()


def get_config() -> PharmacogenomicsConfig:
    """Get the global configuration instance."""
    return _config


def update_config(**kwargs) -> PharmacogenomicsConfig:
    """Update configuration parameters."""
    global _config
    current_dict = _config.model_dump()

    for key, value in kwargs.items():
        if '.' in key:
            # Handle nested keys like 'report_policy.no_variant_confidence'
            parts = key.split('.')
            current = current_dict
            for part in parts[:-1]:
                current = current[part]
            current[parts[-1]] = value
        else:
            current_dict[key] = value

    _config = PharmacogenomicsConfig(**current_dict)
    return _config


def reset_config() -> PharmacogenomicsConfig:
    """Restore the default configuration."""
    global _config
    _config = PharmacogenomicsConfig()
    return _config


def load_config_from_file(filepath: str) -> PharmacogenomicsConfig:
    """Load configuration from a JSON file."""
    global _config

    with open(filepath, 'r') as f:
        _config = PharmacogenomicsConfig.model_validate_json(f.read())

    return _config


def save_config_to_file(filepath: str):
    """Save current configuration to a JSON file."""
    with open(filepath, 'w') as f:
        f.write(_config.model_dump_json(indent=2))


# Convenience accessors
def get_report_policy() -> ReportPolicyConfig:
    """Get report assembly policy."""
    return _config.report_policy


def get_validation_config() -> ValidationConfig:
    """Get structural validation configuration."""
    return _config.validation


def get_explanation_config(override: Optional[ExplanationServiceConfig] = None) -> ExplanationServiceConfig:
    """Get narrative service configuration."""
    return override or _config.explanation
