"""Structured-output extraction from AI text.

Models inconsistently wrap JSON in Markdown fences, so extraction tries two
strategies in order and returns a tagged result instead of raising:

    1. fenced: the interior of the first ```json ... ``` block (the
       language tag is optional)
    2. raw: the whole text

Required-key validation lives here so every caller gets the same ShapeError
when the model drops a field.

Usage:
    >>> result = parse_payload('```json\\n{"a": 1}\\n```', required=("a",))
    >>> result.success, result.strategy, result.payload
    (True, 'fenced', {'a': 1})
    >>> extract("not json")
    Traceback (most recent call last):
    ...
    errors.FormatError: AI returned data in an unexpected format.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from errors import FormatError, ShapeError

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)

UNEXPECTED_FORMAT = "AI returned data in an unexpected format."


def _fenced_block(text: str) -> str | None:
    match = _FENCED_JSON.search(text)
    if match and match.group(1):
        return match.group(1)
    return None


def _raw_text(text: str) -> str | None:
    return text.strip() or None


# Tried in order; first one that yields a JSON object wins
STRATEGIES: tuple[tuple[str, Callable[[str], str | None]], ...] = (
    ("fenced", _fenced_block),
    ("raw", _raw_text),
)


@dataclass
class ExtractResult:
    """Outcome of an extraction attempt.

    Attributes:
        payload: Parsed JSON object (set even on a shape failure)
        success: True when JSON parsed and all required keys are present
        error: Failure description, None on success
        strategy: Name of the strategy that parsed the payload
        missing: Required keys that were absent (shape failures only)
    """

    payload: dict[str, Any] | None = None
    success: bool = False
    error: str | None = None
    strategy: str | None = None
    missing: list[str] = field(default_factory=list)

    @property
    def is_shape_error(self) -> bool:
        return self.payload is not None and bool(self.missing)

    def unwrap(self) -> dict[str, Any]:
        """Return the payload or raise the classified error.

        Raises:
            ShapeError: JSON parsed but required keys are missing
            FormatError: No strategy produced a JSON object
        """
        if self.success and self.payload is not None:
            return self.payload
        if self.is_shape_error:
            raise ShapeError(self.missing)
        raise FormatError(self.error or UNEXPECTED_FORMAT)


def parse_payload(text: str, required: Iterable[str] = ()) -> ExtractResult:
    """Recover a JSON object from raw AI text without raising.

    Args:
        text: Raw model output
        required: Keys that must be present with a non-null value

    Returns:
        ExtractResult tagged with success or the failure reason
    """
    if not text:
        return ExtractResult(error=UNEXPECTED_FORMAT)

    for name, strategy in STRATEGIES:
        candidate = strategy(text)
        if candidate is None:
            continue
        try:
            payload = json.loads(candidate)
        except json.JSONDecodeError as e:
            logger.debug("JSON parse failed | strategy=%s error=%s", name, e)
            continue
        if not isinstance(payload, dict):
            logger.debug("JSON is not an object | strategy=%s type=%s", name, type(payload).__name__)
            continue

        missing = [key for key in required if payload.get(key) is None]
        if missing:
            return ExtractResult(
                payload=payload,
                error=f"missing required keys: {', '.join(missing)}",
                strategy=name,
                missing=missing,
            )
        return ExtractResult(payload=payload, success=True, strategy=name)

    logger.warning("Unparseable AI output | preview=%r", text[:120])
    return ExtractResult(error=UNEXPECTED_FORMAT)


def extract(text: str, required: Iterable[str] = ()) -> dict[str, Any]:
    """Recover a JSON object from raw AI text.

    Raises:
        FormatError: Neither strategy produced a JSON object
        ShapeError: JSON parsed but required keys are missing
    """
    return parse_payload(text, required).unwrap()
