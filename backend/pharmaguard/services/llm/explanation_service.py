import logging
import re
import time
from typing import Optional

from pharmaguard.services.llm.ollama_client import ExplanationServiceError, OllamaClient
from pharmaguard.services.llm.prompt_builder import build_explanation_prompt
from pharmaguard.services.pharmacogenomics.models import FinalReport

logger = logging.getLogger(__name__)

__all__ = ["ExplanationServiceError", "apply_clinical_safety", "generate_explanation"]

CPIC_CITATION = "This assessment is based on CPIC pharmacogenomic guidance."

# Prescriptive wording -> cautious phrasing
_SAFETY_REPLACEMENTS = {
    r"\bmust\b": "may",
    r"\bshould\b": "may be considered",
    r"\bwill cause\b": "is associated with",
    r"\bcauses\b": "is associated with",
    r"\bdefinitely\b": "likely",
}


def apply_clinical_safety(text: str) -> str:
    """
    Replaces prescriptive language with cautious phrasing and makes sure the
    text points back to CPIC guidance.
    """
    safe_text = text.strip()
    for pattern, replacement in _SAFETY_REPLACEMENTS.items():
        safe_text = re.sub(pattern, replacement, safe_text, flags=re.IGNORECASE)

    if "CPIC" not in safe_text:
        safe_text = f"{safe_text} {CPIC_CITATION}" if safe_text else CPIC_CITATION

    return safe_text


async def generate_explanation(report: FinalReport, client: Optional[OllamaClient] = None) -> str:
    """
    Free-text explanation of ``report`` from the LLM service.

    Raises ExplanationServiceError on any service failure; the caller keeps
    its already computed reports.
    """
    start = time.time()
    logger.info("Generating narrative explanation for patient %s", report.patient_id)

    client = client or OllamaClient()
    explanation = await client.generate_text(build_explanation_prompt(report))
    explanation = apply_clinical_safety(explanation)

    logger.info("LLM generation time: %.2f seconds", time.time() - start)
    return explanation
