"""HTTP client for the external text-generation service.

The service receives a natural-language prompt and answers with free text. The
request envelope is ``{"contents": [{"parts": [{"text": prompt}]}]}`` posted to the
configured endpoint with the API key as the ``key`` query parameter; the answer is
read from ``candidates[0].content.parts[0].text``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from app.config import settings
from app.exceptions import UpstreamFormatError, UpstreamServiceError

logger = logging.getLogger("halalcheck.text_client")


class TextGenerationClient:
    """Thin synchronous client; one call per classification."""

    def __init__(
        self,
        api_key: Optional[str],
        endpoint: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, config=None) -> "TextGenerationClient":
        config = config or settings
        return cls(
            api_key=config.text_api_key,
            endpoint=config.text_api_endpoint,
            timeout=config.text_api_timeout_sec,
        )

    @staticmethod
    def build_payload(prompt: str) -> Dict[str, Any]:
        return {"contents": [{"parts": [{"text": prompt}]}]}

    @staticmethod
    def extract_text(payload: Any) -> str:
        """Pull the generated text out of a response body.

        Raises:
            UpstreamFormatError: when the body carries no candidate
        """
        if not isinstance(payload, dict):
            raise UpstreamFormatError("Text service returned a non-object response")

        candidates = payload.get("candidates") or []
        if not candidates:
            raise UpstreamFormatError("No candidates found in text service response")

        try:
            parts = candidates[0].get("content", {}).get("parts") or []
            text = parts[0].get("text") if parts else None
        except (AttributeError, IndexError, TypeError) as exc:
            raise UpstreamFormatError(
                "Unexpected candidate layout in text service response"
            ) from exc
        if text is not None and not isinstance(text, str):
            raise UpstreamFormatError(
                "Candidate text in text service response is not a string",
                details={"type": type(text).__name__},
            )
        return text or ""

    def generate(self, prompt: str) -> str:
        """Send a prompt and return the generated text ("" when the answer is empty)."""
        if not self.api_key:
            raise UpstreamServiceError("Text generation service is not configured")

        logger.debug("Sending prompt to text service (%d chars)", len(prompt))
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    json=self.build_payload(prompt),
                )
        except httpx.TimeoutException as exc:
            logger.error("Timed out calling text service after %ss", self.timeout)
            raise UpstreamServiceError("Text generation service timed out") from exc
        except httpx.HTTPError as exc:
            logger.error("HTTP error calling text service: %s", exc)
            raise UpstreamServiceError("Unable to reach text generation service") from exc

        if response.status_code >= 400:
            logger.error(
                "Text service returned %s: %s", response.status_code, response.text[:500]
            )
            raise UpstreamServiceError(
                "Text generation service call failed",
                details={"status_code": response.status_code},
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamFormatError("Text service returned invalid JSON") from exc

        return self.extract_text(body)
