"""Structured generation on top of a plain text generation API."""

import json
import re
from dataclasses import dataclass
from typing import Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from diet_tracker.domain.errors import ExternalServiceFailure, ResponseParseFailure

ModelT = TypeVar("ModelT", bound=BaseModel)

_EXCERPT_CHARS = 200

_FENCE_PATTERN = re.compile(
    r"^\s*```[A-Za-z0-9_-]*[ \t]*\r?\n?(?P<body>.*?)\r?\n?```\s*$", re.DOTALL
)


class TextGenerationClient(Protocol):
    """Interface for a generative text service."""

    async def generate(self, *, model: str, prompt: str) -> str:
        """Return the generated text for a prompt."""


def strip_code_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence such as ```json ... ```."""
    match = _FENCE_PATTERN.match(text)
    if match:
        return match.group("body").strip()
    return text.strip()


def parse_structured(text: str, model_cls: type[ModelT]) -> ModelT:
    """Parse generated text as JSON and validate it against a schema."""
    cleaned = strip_code_fences(text or "")
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ResponseParseFailure(
            f"Response is not valid JSON: {exc}; excerpt={_excerpt(text)}", text
        ) from exc
    if not isinstance(payload, dict):
        raise ResponseParseFailure(
            f"Response JSON is not an object; excerpt={_excerpt(text)}", text
        )
    try:
        return model_cls.model_validate(payload)
    except ValidationError as exc:
        raise ResponseParseFailure(
            f"Response does not match {model_cls.__name__}: "
            f"{exc.error_count()} errors; excerpt={_excerpt(text)}",
            text,
        ) from exc
    except (ValueError, OverflowError) as exc:
        raise ResponseParseFailure(
            f"Response values are out of range for {model_cls.__name__}: {exc}; "
            f"excerpt={_excerpt(text)}",
            text,
        ) from exc


def _excerpt(text: str) -> str:
    return repr((text or "")[:_EXCERPT_CHARS])


@dataclass
class StructuredGenerator:
    """Makes a single generation call and validates the JSON it returns."""

    client: TextGenerationClient
    model: str

    async def generate(self, prompt: str, model_cls: type[ModelT]) -> ModelT:
        """Return a validated model; raises the two recoverable AI errors."""
        try:
            text = await self.client.generate(model=self.model, prompt=prompt)
        except Exception as exc:
            raise ExternalServiceFailure(f"{type(exc).__name__}: {exc}") from exc
        return parse_structured(text, model_cls)


@dataclass
class UnavailableTextClient:
    """Text client used when no provider key is configured."""

    provider: str

    async def generate(self, *, model: str, prompt: str) -> str:
        raise ExternalServiceFailure(f"No API key configured for {self.provider}")
