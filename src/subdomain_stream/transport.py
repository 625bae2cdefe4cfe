"""HTTP transport for the discovery event stream."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from types import TracebackType

from requests import Response, Session
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException
from urllib3.exceptions import HTTPError as Urllib3Error
from urllib3.util.retry import Retry

from .errors import TransportError

READ_SIZE = 8192


def make_stream_session(user_agent: str) -> Session:
    """Create a requests session for streaming discovery requests.

    Retries are disabled: a failed stream is reported, never replayed.
    """
    session = Session()
    session.headers.update({"User-Agent": user_agent})
    adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class HttpStreamTransport:
    """One POST request whose body is read incrementally."""

    def __init__(
        self,
        *,
        session: Session,
        url: str,
        connect_timeout: float,
        read_timeout: float,
        logger: logging.Logger,
    ) -> None:
        self._session = session
        self._url = url
        self._timeout = (connect_timeout, read_timeout)
        self._logger = logger
        self._response: Response | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def open(self, target: str) -> None:
        if self._closed:
            raise TransportError("Transport was already closed.")
        try:
            response = self._session.post(
                self._url,
                json={"domain": target},
                headers={"Accept": "text/event-stream", "Cache-Control": "no-cache"},
                stream=True,
                timeout=self._timeout,
            )
        except RequestException as exc:
            raise TransportError(f"Connection error: {exc}") from exc

        self._response = response
        if not response.ok:
            detail = response.reason or "request failed"
            self.close()
            raise TransportError(f"HTTP {response.status_code}: {detail}")
        self._logger.debug("Opened stream %s for %s", self._url, target)

    def chunks(self) -> Iterator[bytes]:
        if self._response is None:
            raise TransportError("Transport is not open.")
        # read1 returns whatever is buffered or arrives next, so close-delimited
        # bodies stream as well as chunked ones; EOF is an empty read.
        raw = self._response.raw
        try:
            while not self._closed:
                chunk = raw.read1(READ_SIZE, decode_content=True)
                if not chunk or self._closed:
                    return
                yield chunk
        except (Urllib3Error, OSError) as exc:
            if self._closed:
                return
            raise TransportError(f"Connection error: {exc}") from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._response is not None:
            self._response.close()
            self._logger.debug("Closed stream %s", self._url)

    def __enter__(self) -> HttpStreamTransport:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
