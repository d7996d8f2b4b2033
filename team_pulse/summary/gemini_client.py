# team_pulse/summary/gemini_client.py
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from team_pulse.config.settings import AppSettings
from team_pulse.errors import MissingCredential, ModelRequestFailed
from team_pulse.utils.misc_utils import get_path

NO_SUMMARY_FALLBACK = "No summary returned."
CANDIDATE_TEXT_PATH = ("candidates", 0, "content", "parts", 0, "text")


def extract_candidate_text(data: Any) -> str:
    """Returns the first candidate's text, or the fallback literal."""
    return get_path(data, CANDIDATE_TEXT_PATH, NO_SUMMARY_FALLBACK)


class GeminiClient:
    """Single-shot client for the Gemini ``generateContent`` endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    @classmethod
    def from_settings(cls, app_settings: AppSettings) -> "GeminiClient":
        return cls(
            api_key=app_settings.gemini_api_key,
            model=app_settings.gemini_model,
            base_url=app_settings.gemini_base_url,
            timeout=app_settings.request_timeout,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def invoke_summary_model(self, prompt: str) -> str:
        """Sends one request with ``prompt`` and returns the generated text.

        Raises:
            MissingCredential: no API key is configured.
            ModelRequestFailed: the request could not be sent or the endpoint
                answered with a non-success status (body kept as details).
        """
        if not self.api_key:
            raise MissingCredential("Missing GEMINI_API_KEY in .env file.")

        body: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        logger.debug(f"Requesting summary from {self.model}", prompt_chars=len(prompt))
        try:
            response = await self.client.post(
                self.endpoint, params={"key": self.api_key}, json=body
            )
        except httpx.RequestError as e:
            logger.error(f"Summary request to {self.model} could not be sent: {e}")
            raise ModelRequestFailed(str(e)) from e

        if not response.is_success:
            logger.error(
                f"Summary request failed with status {response.status_code}: {response.text}"
            )
            raise ModelRequestFailed(response.text)

        try:
            data = response.json()
        except ValueError:
            logger.warning("Summary response was not valid JSON.")
            return NO_SUMMARY_FALLBACK

        text = extract_candidate_text(data)
        logger.success(f"Received summary from {self.model} ({len(text)} chars).")
        return text

    async def close(self):
        """Closes the underlying HTTP client."""
        await self.client.aclose()
        logger.info("Closed HTTP client for Gemini")
