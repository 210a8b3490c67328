# backend/text_classifier/nlp.py
"""
LLM-backed request classification.

Features:
- build_prompt(text) -> instruction string asking for a fixed four-key JSON object.
- parse_classification(raw_content) -> ClassificationResult, or ParseError / SchemaError.
- classify_text(text, client) -> one chat completion call, then validation.

Notes:
- Field values are only checked to be strings or null. zip and time_pref have no
  format constraints on purpose; the upstream model is free to phrase them.
- The reply is expected to be a bare JSON object (JSON response mode). Prose or
  code fences around it are not stripped.
"""

import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)

MODEL_NAME = "gpt-4o-mini"
TEMPERATURE = 0.2
RESPONSE_FORMAT = {"type": "json_object"}

PROMPT_TEMPLATE = """
You are a parser of user requests.
Return JSON in the format:
{{
  "zip": string | null,
  "brand": string | null,
  "category": string | null,
  "time_pref": string | null
}}
Text: "{text}"
"""


# ---------- Errors ----------

class InputError(Exception):
    """The caller did not supply any text to classify."""

    def __init__(self, message: str = "Missing text"):
        super().__init__(message)
        self.message = message


class ResponseFormatError(Exception):
    """Base for problems with the text returned by the completion service."""


class ParseError(ResponseFormatError):
    """Completion content is not valid JSON."""


class SchemaError(ResponseFormatError):
    """Completion content is JSON but not the four-field object."""


class ClassificationError(Exception):
    """Base for failures surfaced to HTTP callers as 500."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UpstreamError(ClassificationError):
    """The completion call itself failed."""


class ValidationError(ClassificationError):
    """The completion call succeeded but returned an unusable payload."""


# ---------- Data model ----------

class ClassificationResult(BaseModel):
    """Structured fields extracted from a free-form request."""

    model_config = ConfigDict(
        extra="forbid",
        strict=True,
        json_schema_extra={
            "examples": [
                {
                    "zip": "90210",
                    "brand": "Domino's",
                    "category": "pizza",
                    "time_pref": "2025-10-17T18:00:00Z",
                }
            ]
        },
    )

    zip: Optional[str]
    brand: Optional[str]
    category: Optional[str]
    time_pref: Optional[str]


# ---------- Prompt builder ----------

def build_prompt(text: str) -> str:
    """Render the parser instructions with the user's text embedded verbatim."""
    # str.format does not re-scan substituted values, so braces in text are safe
    return PROMPT_TEMPLATE.format(text=text)


# ---------- Response validator ----------

def _describe_schema_error(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def _reject_constant(name: str):
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"invalid literal {name}")


def parse_classification(raw_content: Any) -> ClassificationResult:
    """
    Parse and validate completion content.

    Raises ParseError when raw_content is not a JSON string and SchemaError when
    the decoded value is not an object with exactly zip/brand/category/time_pref,
    each a string or null.
    """
    if not isinstance(raw_content, str):
        raise ParseError(f"expected text content, got {type(raw_content).__name__}")

    try:
        data = json.loads(raw_content, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise ParseError(f"content is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise SchemaError(f"expected a JSON object, got {type(data).__name__}")

    try:
        return ClassificationResult.model_validate(data)
    except PydanticValidationError as exc:
        raise SchemaError(_describe_schema_error(exc)) from exc


# ---------- Orchestrator ----------

def _first_choice_content(response: Any) -> Any:
    """Return choices[0].message.content, or None when the response has no such field."""
    choices = getattr(response, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None)


async def classify_text(text: str, client: Any) -> ClassificationResult:
    """
    Classify one request with a single chat completion call.

    client is an openai.AsyncOpenAI (or anything exposing an awaitable
    chat.completions.create). There is no retry: upstream failures raise
    UpstreamError, unusable replies raise ValidationError.
    """
    if client is None:
        logger.error("Completion client is not configured (OPENAI_API_KEY missing?)")
        raise UpstreamError("Completion client is not configured")

    prompt = build_prompt(text)

    try:
        response = await client.chat.completions.create(
            model=MODEL_NAME,
            messages=[{"role": "user", "content": prompt}],
            temperature=TEMPERATURE,
            response_format=RESPONSE_FORMAT,
        )
    except Exception as exc:
        logger.error("Completion request failed: %s", exc)
        raise UpstreamError(str(exc)) from exc

    content = _first_choice_content(response)

    try:
        result = parse_classification(content)
    except ResponseFormatError as exc:
        logger.error("Invalid GPT response: %s", exc)
        raise ValidationError(f"Invalid GPT response: {exc}") from exc

    logger.debug("Classified request into %s", result.model_dump())
    return result
