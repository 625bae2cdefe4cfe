"""Stream line classification and record decoding."""

from __future__ import annotations

import json
from typing import Any

from .models import (
    COMPLETE_EVENT,
    IGNORABLE,
    DataEvent,
    DecodeOutcome,
    Decoded,
    MalformedRecord,
    NamedEvent,
    Result,
    SourceKind,
    StreamEvent,
)

DATA_PREFIX = "data: "
EVENT_PREFIX = "event: "

SENTINEL_MESSAGE = "Search completed"
SUBJECT_FIELD = "subdomain"
SOURCE_FIELD = "source"


def decode_line(line: str) -> StreamEvent:
    """Classify one framed line.

    A data payload carrying the "search completed" sentinel is returned as
    a completion event so callers only need to watch for one signal.
    """
    if line.startswith(DATA_PREFIX):
        payload = line[len(DATA_PREFIX) :]
        if is_completion_sentinel(payload):
            return NamedEvent(COMPLETE_EVENT)
        return DataEvent(payload)
    if line.startswith(EVENT_PREFIX):
        return NamedEvent(line[len(EVENT_PREFIX) :].strip())
    return IGNORABLE


def is_completion_sentinel(payload: str) -> bool:
    """Return True for the ``{"message": "Search completed"}`` payload."""
    record = _load_object(payload)
    if record is None or SUBJECT_FIELD in record:
        return False
    return record.get("message") == SENTINEL_MESSAGE


def decode_record(payload: str) -> DecodeOutcome:
    """Validate a data payload against the result schema."""
    try:
        record = json.loads(payload)
    except json.JSONDecodeError as exc:
        return MalformedRecord(reason=f"invalid JSON: {exc.msg}", payload=payload)
    if not isinstance(record, dict):
        return MalformedRecord(reason="payload is not a JSON object", payload=payload)

    subject = record.get(SUBJECT_FIELD)
    source = record.get(SOURCE_FIELD)
    if not isinstance(subject, str) or not subject.strip():
        return MalformedRecord(reason=f"missing or empty '{SUBJECT_FIELD}'", payload=payload)
    if not isinstance(source, str) or not source.strip():
        return MalformedRecord(reason=f"missing or empty '{SOURCE_FIELD}'", payload=payload)

    return Decoded(
        Result(subject=subject.strip(), source=SourceKind.from_label(source))
    )


def _load_object(payload: str) -> dict[str, Any] | None:
    try:
        record = json.loads(payload)
    except json.JSONDecodeError:
        return None
    return record if isinstance(record, dict) else None
