import json

from pharmaguard.services.pharmacogenomics.models import FinalReport


def build_explanation_prompt(report: FinalReport) -> str:
    """
    Constructs the prompt asking the LLM to explain a patient report.

    Args:
        report: Patient-level summary of the per-gene results.

    Returns:
        A formatted prompt string.
    """
    return (
        "Explain this pharmacogenomics report in simple terms:\n"
        f"{json.dumps(report.model_dump(mode='json'), indent=2)}"
    )
