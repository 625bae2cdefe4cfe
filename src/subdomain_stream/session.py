"""Search lifecycle state machine."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from .aggregator import ResultAggregator
from .decoding import decode_line, decode_record
from .errors import TransportError
from .framing import LineFramer
from .models import (
    DataEvent,
    MalformedRecord,
    NamedEvent,
    OfferOutcome,
    PresentationAdapter,
    Result,
    SessionState,
    Transport,
)
from .validation import validate_target

TransportFactory = Callable[[], Transport]
Clock = Callable[[], float]

EARLY_CLOSE_MESSAGE = "Stream closed before the search completed."


class SearchSession:
    """One discovery run for one target.

    Sessions are never reused: every start creates a fresh one, which owns
    its transport, framer and aggregator until it leaves ACTIVE.
    """

    def __init__(self, target: str, transport: Transport) -> None:
        self.target = target
        self.transport = transport
        self.state = SessionState.IDLE
        self.error: str | None = None
        self.deadline: float | None = None
        self._framer = LineFramer()
        self._aggregator = ResultAggregator()

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def results(self) -> tuple[Result, ...]:
        return self._aggregator.results

    def count(self) -> int:
        return self._aggregator.count()

    def feed(self, chunk: bytes | str) -> list[str]:
        return self._framer.feed(chunk)

    def flush(self) -> list[str]:
        return self._framer.flush()

    def offer(self, result: Result) -> OfferOutcome:
        return self._aggregator.offer(result)


class SearchController:
    """Owns at most one active SearchSession and drives it from its stream.

    Everything runs on the caller's thread. ``cancel`` and ``start`` may be
    called from inside presenter callbacks; the pump loop re-checks
    ownership after every line and drops whatever it has already read.
    """

    def __init__(
        self,
        *,
        transport_factory: TransportFactory,
        presenter: PresentationAdapter,
        logger: logging.Logger,
        max_duration: float | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self._transport_factory = transport_factory
        self._presenter = presenter
        self._logger = logger
        self._max_duration = max_duration
        self._clock = clock
        self._session: SearchSession | None = None

    @property
    def session(self) -> SearchSession | None:
        """The current session, or the last one after it finished."""
        return self._session

    @property
    def is_searching(self) -> bool:
        return self._session is not None and self._session.is_active

    def start(self, target: str) -> SearchSession:
        """Validate ``target``, retire any active session and open a new stream."""
        target = validate_target(target)
        if self.is_searching:
            self.cancel()

        session = SearchSession(target, self._transport_factory())
        session.state = SessionState.ACTIVE
        self._session = session
        self._logger.info("Starting search for %s", target)
        try:
            self._presenter.on_started(target)
            if not self._owns(session):
                return session
            session.transport.open(target)
        except TransportError as exc:
            self._fail(session, str(exc))
            return session
        except BaseException:
            self.cancel()
            raise
        if self._max_duration is not None:
            session.deadline = self._clock() + self._max_duration
        return session

    def cancel(self) -> None:
        """Stop the active session. No-op when nothing is running."""
        session = self._session
        if session is None or not session.is_active:
            return
        session.state = SessionState.CANCELLED
        session.transport.close()
        self._logger.info("Search for %s stopped", session.target)
        self._presenter.on_cancelled()

    def pump(self) -> SearchSession | None:
        """Consume the active session's stream until it leaves ACTIVE."""
        session = self._session
        if session is None or not session.is_active:
            return session
        try:
            for chunk in session.transport.chunks():
                if not self._owns(session):
                    break
                if self._deadline_passed(session):
                    self._fail(session, f"Search timed out after {self._max_duration:g}s.")
                    break
                for line in session.feed(chunk):
                    self._handle_line(session, line)
                    if not self._owns(session):
                        break
                if not self._owns(session):
                    break
            else:
                for line in session.flush():
                    if not self._owns(session):
                        break
                    self._handle_line(session, line)
                if self._owns(session):
                    self._fail(session, EARLY_CLOSE_MESSAGE)
        except TransportError as exc:
            if self._owns(session):
                self._fail(session, str(exc))
        finally:
            # Only reachable while ACTIVE when an unexpected exception escapes.
            if self._owns(session):
                self.cancel()
        return session

    def search(self, target: str) -> SearchSession | None:
        """Start a search for ``target`` and block until it finishes."""
        self.start(target)
        return self.pump()

    def _owns(self, session: SearchSession) -> bool:
        return self._session is session and session.is_active

    def _deadline_passed(self, session: SearchSession) -> bool:
        return session.deadline is not None and self._clock() >= session.deadline

    def _handle_line(self, session: SearchSession, line: str) -> None:
        event = decode_line(line)
        if isinstance(event, NamedEvent):
            if event.is_complete:
                self._complete(session)
            else:
                self._logger.debug("Ignoring stream event %r", event.name)
            return
        if not isinstance(event, DataEvent):
            return

        outcome = decode_record(event.payload)
        if isinstance(outcome, MalformedRecord):
            self._logger.warning(
                "Dropping malformed record (%s): %s", outcome.reason, outcome.payload
            )
            return
        result = outcome.result
        if session.offer(result) is OfferOutcome.DUPLICATE_DROPPED:
            self._logger.debug("Duplicate %s (%s) dropped", result.subject, result.source.value)
            return
        self._presenter.on_result(result, session.count())

    def _complete(self, session: SearchSession) -> None:
        session.state = SessionState.COMPLETED
        session.transport.close()
        count = session.count()
        self._logger.info("Search for %s completed with %d results", session.target, count)
        if count == 0:
            self._presenter.on_no_results()
        else:
            self._presenter.on_completed(count)

    def _fail(self, session: SearchSession, message: str) -> None:
        session.state = SessionState.ERRORED
        session.error = message
        session.transport.close()
        self._logger.warning("Search for %s failed: %s", session.target, message)
        self._presenter.on_error(message)
