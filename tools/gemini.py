"""Gemini REST client for text and image generation.

This module wraps single request/response calls to the Generative Language
API. Every call is independent: no caching, no retries.

Endpoints:
    generateContent: Text (optionally with an inline image and a response
        schema hint). Output text lives at candidates[0].content.parts[0].text.
    predict: Imagen image generation. Output is base64 PNG at
        predictions[0].bytesBase64Encoded.

Error Handling:
    Any non-2xx status, transport error, timeout, or missing output path is
    raised as a single GenerationError. Callers do not distinguish transient
    from permanent failures.
"""

import asyncio
import logging
from typing import Any

import aiohttp

from errors import GenerationError

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

# Optional override for prompts that trip default safety filters on
# harmless product copy (e.g. "chemicals to avoid").
RELAXED_SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ONLY_HIGH"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_ONLY_HIGH"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_ONLY_HIGH"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_ONLY_HIGH"},
]


def _candidate_text(data: Any) -> str:
    """Pull the generated text out of a generateContent response."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise GenerationError("generation failed: response has no candidate text") from e
    if not isinstance(text, str):
        raise GenerationError("generation failed: candidate text is not a string")
    return text


def _prediction_image(data: Any) -> str:
    """Pull the base64 image out of an Imagen predict response."""
    try:
        encoded = data["predictions"][0]["bytesBase64Encoded"]
    except (KeyError, IndexError, TypeError) as e:
        raise GenerationError("image generation failed: response has no prediction") from e
    if not encoded:
        raise GenerationError("image generation failed: empty prediction")
    return f"data:image/png;base64,{encoded}"


class GeminiClient:
    """Thin async client for Gemini text and Imagen image generation.

    The session is owned by the caller (the pipeline) so that all calls in
    one run share a connection pool.

    Example:
        >>> async with aiohttp.ClientSession() as session:
        ...     gemini = GeminiClient(session, api_key="...")
        ...     text = await gemini.generate("Describe a bamboo toothbrush.")
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: str,
        model: str = "gemini-2.0-flash",
        image_model: str = "imagen-3.0-generate-002",
        timeout: float = 60.0,
        safety_settings: list[dict[str, str]] | None = None,
    ):
        self._session = session
        self._api_key = api_key
        self.model = model
        self.image_model = image_model
        self._timeout = timeout
        self._safety_settings = safety_settings

    async def _post(self, url: str, body: dict[str, Any]) -> Any:
        """POST a JSON body and return the decoded JSON response.

        Raises:
            GenerationError: On any transport, status or decoding failure
        """
        try:
            async with self._session.post(
                url,
                params={"key": self._api_key},
                json=body,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as resp:
                if not 200 <= resp.status < 300:
                    detail = await resp.text()
                    logger.warning(
                        "Gemini API error | status=%d body=%s", resp.status, detail[:200]
                    )
                    raise GenerationError(f"generation failed: HTTP {resp.status}")
                return await resp.json()
        except asyncio.TimeoutError as e:
            logger.warning("Gemini request timed out after %.0fs", self._timeout)
            raise GenerationError("generation failed: timeout") from e
        except (aiohttp.ClientError, ValueError) as e:
            logger.warning("Gemini request failed | %s: %s", type(e).__name__, e)
            raise GenerationError(f"generation failed: {type(e).__name__}") from e

    async def generate(
        self,
        prompt: str,
        *,
        image_b64: str | None = None,
        response_schema: dict[str, Any] | None = None,
    ) -> str:
        """Generate text for a prompt.

        Args:
            prompt: Prompt text (must not be empty)
            image_b64: Optional base64 JPEG sent as an inline image part
            response_schema: Optional schema; requests JSON output when set

        Returns:
            Raw model text

        Raises:
            ValueError: If the prompt is empty
            GenerationError: If the call fails or has no text output
        """
        if not prompt or not prompt.strip():
            raise ValueError("prompt must not be empty")

        parts: list[dict[str, Any]] = [{"text": prompt}]
        if image_b64:
            parts.append({"inlineData": {"mimeType": "image/jpeg", "data": image_b64}})

        body: dict[str, Any] = {"contents": [{"parts": parts}]}
        if self._safety_settings:
            body["safetySettings"] = self._safety_settings
        if response_schema:
            body["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
            }

        url = f"{GEMINI_BASE_URL}/{self.model}:generateContent"
        logger.debug("Gemini generate | model=%s prompt_chars=%d", self.model, len(prompt))
        data = await self._post(url, body)
        return _candidate_text(data)

    async def generate_image(self, prompt: str) -> str:
        """Generate one image and return it as a data URL.

        Raises:
            ValueError: If the prompt is empty
            GenerationError: If the call fails or returns no image
        """
        if not prompt or not prompt.strip():
            raise ValueError("prompt must not be empty")

        body = {
            "instances": [{"prompt": prompt}],
            "parameters": {"sampleCount": 1},
        }
        url = f"{GEMINI_BASE_URL}/{self.image_model}:predict"
        logger.debug("Imagen predict | model=%s", self.image_model)
        data = await self._post(url, body)
        return _prediction_image(data)
