"""Protocols and lightweight model types."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union

COMPLETE_EVENT = "complete"


class SourceKind(str, Enum):
    """Where the server says a subdomain came from."""

    CERTIFICATE_TRANSPARENCY = "Certificate Transparency"
    DNS_ENUMERATION = "DNS Enumeration"
    OTHER = "Other"

    @classmethod
    def from_label(cls, label: str) -> SourceKind:
        """Map a wire label onto a known source, falling back to OTHER."""
        return _SOURCE_ALIASES.get(label.strip().lower(), cls.OTHER)

    @property
    def short_label(self) -> str:
        return _SHORT_LABELS[self]


_SOURCE_ALIASES = {
    "certificate transparency": SourceKind.CERTIFICATE_TRANSPARENCY,
    "ct logs": SourceKind.CERTIFICATE_TRANSPARENCY,
    "dns enumeration": SourceKind.DNS_ENUMERATION,
    "dns enum": SourceKind.DNS_ENUMERATION,
}

_SHORT_LABELS = {
    SourceKind.CERTIFICATE_TRANSPARENCY: "CT Logs",
    SourceKind.DNS_ENUMERATION: "DNS Enum",
    SourceKind.OTHER: "Other",
}


@dataclass(frozen=True)
class Result:
    """A discovered subdomain with its provenance."""

    subject: str
    source: SourceKind


@dataclass(frozen=True)
class DataEvent:
    """A ``data:`` line; ``payload`` is everything after the marker."""

    payload: str


@dataclass(frozen=True)
class NamedEvent:
    """An ``event:`` line, or a data payload reclassified as completion."""

    name: str

    @property
    def is_complete(self) -> bool:
        return self.name == COMPLETE_EVENT


@dataclass(frozen=True)
class IgnorableEvent:
    """Blank line or unrecognized framing."""


IGNORABLE = IgnorableEvent()

StreamEvent = Union[DataEvent, NamedEvent, IgnorableEvent]


@dataclass(frozen=True)
class Decoded:
    """Successful record decode."""

    result: Result


@dataclass(frozen=True)
class MalformedRecord:
    """Record payload that failed schema validation."""

    reason: str
    payload: str


DecodeOutcome = Union[Decoded, MalformedRecord]


class OfferOutcome(Enum):
    ACCEPTED = "accepted"
    DUPLICATE_DROPPED = "duplicate_dropped"


class SessionState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ERRORED = "errored"

    @property
    def is_terminal(self) -> bool:
        return self in {SessionState.COMPLETED, SessionState.CANCELLED, SessionState.ERRORED}


class Transport(Protocol):
    """Contract for a single discovery stream connection."""

    def open(self, target: str) -> None:
        """Send the discovery request; raise TransportError on failure."""

    def chunks(self) -> Iterator[bytes | str]:
        """Yield raw chunks in arrival order; raise TransportError on faults."""

    def close(self) -> None:
        """Release the connection. Must be safe to call more than once."""


class PresentationAdapter(Protocol):
    """Contract for whatever renders search progress."""

    def on_started(self, target: str) -> None:
        """A new search is running."""

    def on_result(self, result: Result, running_count: int) -> None:
        """A new, not previously seen result arrived."""

    def on_no_results(self) -> None:
        """The search completed without any result."""

    def on_completed(self, final_count: int) -> None:
        """The search completed with at least one result."""

    def on_cancelled(self) -> None:
        """The search was stopped before completion."""

    def on_error(self, message: str) -> None:
        """The search failed."""
