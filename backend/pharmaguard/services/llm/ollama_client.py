import logging
from typing import Optional

import backoff
import httpx

from pharmaguard.services.pharmacogenomics.config import ExplanationServiceConfig, get_explanation_config

# Configure structured logging
logger = logging.getLogger(__name__)


class ExplanationServiceError(RuntimeError):
    """The narrative explanation service could not produce text."""


def _giveup(e: Exception) -> bool:
    # client errors will not succeed on retry
    return isinstance(e, httpx.HTTPStatusError) and e.response.status_code < 500


class OllamaClient:
    """
    Client for an Ollama-compatible ``/api/generate`` endpoint.

    Transport errors and 5xx responses are retried with exponential backoff;
    whatever still fails is raised as ExplanationServiceError.
    """

    def __init__(
        self,
        config: Optional[ExplanationServiceConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = get_explanation_config(config)
        self.base_url = self.config.base_url.rstrip("/")
        self.model = self.config.model
        self.generate_endpoint = f"{self.base_url}/api/generate"
        self._http_client = http_client

        # retry policy follows this client's own config
        self._post_generate = backoff.on_exception(
            backoff.expo,
            (httpx.RequestError, httpx.HTTPStatusError),
            max_tries=self.config.max_tries,
            giveup=_giveup,
        )(self._post_generate)

    async def generate_text(self, prompt: str) -> str:
        """Send ``prompt`` and return the generated text."""
        logger.info("Sending request to LLM service", extra={"model": self.model})
        try:
            data = await self._post_generate(prompt)
        except httpx.HTTPStatusError as e:
            raise ExplanationServiceError(
                f"LLM service returned HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise ExplanationServiceError(f"Error communicating with LLM service: {e}") from e

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise ExplanationServiceError("LLM service returned an empty response")

        logger.info("LLM request successful", extra={"response_length": len(text)})
        return text

    async def _post_generate(self, prompt: str) -> dict:
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": 0.1,
                "top_p": 0.85,
            },
        }

        if self._http_client is not None:
            response = await self._http_client.post(self.generate_endpoint, json=payload)
        else:
            async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
                response = await client.post(self.generate_endpoint, json=payload)
        response.raise_for_status()

        try:
            return response.json()
        except ValueError as e:
            raise ExplanationServiceError("LLM service returned malformed JSON") from e
