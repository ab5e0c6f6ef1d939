"""Parsing of generated JSON into fully-defaulted summary records."""

import json
import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from yorisoi.exceptions import GenerationParseError

_FENCE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)

ModelT = TypeVar("ModelT", bound=BaseModel)


def strip_code_fence(raw: str) -> str:
    """Returns the body of the first code fence, or the stripped text if unfenced."""
    match = _FENCE.search(raw)
    return (match.group(1) if match else raw).strip()


def parse_json_object(raw: str) -> dict[str, Any]:
    """
    Extracts one JSON object from generated text.

    Raises:
        GenerationParseError: If no JSON object can be decoded.
    """
    body = strip_code_fence(raw or "")
    try:
        value = json.loads(body)
    except json.JSONDecodeError as e:
        start, end = body.find("{"), body.rfind("}")
        if start == -1 or end <= start:
            raise GenerationParseError(raw or "", e) from e
        try:
            value = json.loads(body[start : end + 1])
        except json.JSONDecodeError as inner:
            raise GenerationParseError(raw or "", inner) from inner
    if not isinstance(value, dict):
        raise GenerationParseError(raw or "")
    return value


def normalize_record(
    model: type[ModelT], raw: str, overrides: dict[str, Any] | None = None
) -> ModelT:
    """
    Parses generated text into ``model`` with every field defaulted.

    Array fields the model omitted or mistyped become empty lists through the
    models' before-validators. ``overrides`` replace generated values for
    fields the caller already knows (such as the summary mode).

    Raises:
        GenerationParseError: If the text holds no JSON object or the object
            cannot be coerced into ``model``.
    """
    data = parse_json_object(raw)
    data.update(overrides or {})
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise GenerationParseError(raw, e) from e
