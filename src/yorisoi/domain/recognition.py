"""
Recognition backend responses and the adapter that resolves them.

A backend may answer a poll with a direct result object or with a wrapped
operation envelope (the raw JSON of a long-running operation, which may nest
the result under ``response``, ``latestResponse`` or ``result``). Both are
represented here as a tagged union and resolved by
:func:`resolve_recognition_payload`; nothing else inspects response shapes.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

RecognitionState = Literal["running", "done", "failed", "unknown"]

_RUNNING_STATES = {"queued", "processing", "running", "pending", "in_progress"}
_DONE_STATES = {"completed", "done", "succeeded", "success"}
_FAILED_STATES = {"error", "failed", "failure", "cancelled", "canceled"}

_ENVELOPE_KEYS = ("response", "latestResponse", "latest_response", "result")


class DirectResult(BaseModel, frozen=True):
    """A result object exposed directly by the backend SDK."""

    kind: Literal["direct"] = "direct"
    status: str
    text: str | None = None
    error: str | None = None


class WrappedOperation(BaseModel, frozen=True):
    """A raw long-running operation envelope."""

    kind: Literal["wrapped"] = "wrapped"
    operation: dict[str, Any]


RecognitionPayload = Annotated[
    Union[DirectResult, WrappedOperation], Field(discriminator="kind")
]


class ResolvedRecognition(BaseModel, frozen=True):
    """Backend-neutral view of a recognition response."""

    state: RecognitionState
    text: str | None = None
    error: str | None = None


def _state_from_status(status: Any) -> RecognitionState:
    value = str(getattr(status, "value", status) or "").strip().lower()
    if value in _DONE_STATES:
        return "done"
    if value in _FAILED_STATES:
        return "failed"
    if value in _RUNNING_STATES:
        return "running"
    return "unknown"


def _text_from_results(results: Any) -> str | None:
    if not isinstance(results, list):
        return None
    lines = []
    for result in results:
        alternatives = result.get("alternatives") if isinstance(result, dict) else None
        if alternatives and isinstance(alternatives[0], dict):
            lines.append(str(alternatives[0].get("transcript") or ""))
    return "\n".join(lines).strip() if lines else None


def _text_from_body(body: dict[str, Any]) -> str | None:
    if isinstance(body.get("text"), str):
        return body["text"]
    text = _text_from_results(body.get("results"))
    if text is not None:
        return text
    utterances = body.get("utterances")
    if isinstance(utterances, list) and utterances:
        return "\n".join(
            str(u.get("text") or "") for u in utterances if isinstance(u, dict)
        ).strip()
    return None


def _resolve_operation(operation: dict[str, Any]) -> ResolvedRecognition:
    error = operation.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else error
        return ResolvedRecognition(state="failed", error=str(message))

    state = _state_from_status(operation.get("status"))
    if state == "unknown" and "done" in operation:
        state = "done" if operation.get("done") else "running"

    bodies = [operation] + [
        operation[key] for key in _ENVELOPE_KEYS if isinstance(operation.get(key), dict)
    ]
    for body in bodies:
        nested_state = _state_from_status(body.get("status"))
        if nested_state == "failed":
            return ResolvedRecognition(state="failed", error=str(body.get("error") or ""))
        text = _text_from_body(body)
        if text is not None:
            if state == "unknown":
                state = "done"
            return ResolvedRecognition(state=state, text=text)
    return ResolvedRecognition(state=state)


def resolve_recognition_payload(payload: RecognitionPayload) -> ResolvedRecognition:
    """
    Resolves either response shape into state, text and error.

    ``text`` is None when this payload does not carry an extractable
    transcript; an empty string means the backend recognized nothing.
    """
    if isinstance(payload, DirectResult):
        state = _state_from_status(payload.status)
        if state == "failed":
            return ResolvedRecognition(state=state, error=payload.error or payload.status)
        return ResolvedRecognition(state=state, text=payload.text)
    return _resolve_operation(payload.operation)
