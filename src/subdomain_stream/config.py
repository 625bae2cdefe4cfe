"""Runtime configuration model."""

from __future__ import annotations

from dataclasses import dataclass

from .validation import validate_runtime_constraints

DEFAULT_BASE_URL = "http://localhost:9382"
DEFAULT_STREAM_PATH = "/api/stream"
DEFAULT_USER_AGENT = "subdomain-stream/1.0"
DEFAULT_CONNECT_TIMEOUT = 10.0
# Discovery can go quiet for a while between CT and DNS results.
DEFAULT_READ_TIMEOUT = 120.0


@dataclass(frozen=True)
class ClientConfig:
    """Validated configuration used by the stream client."""

    targets: tuple[str, ...]
    base_url: str = DEFAULT_BASE_URL
    stream_path: str = DEFAULT_STREAM_PATH
    user_agent: str = DEFAULT_USER_AGENT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    max_duration: float | None = None
    check_dns: bool = False
    output: str | None = None
    show_progress: bool = True

    def __post_init__(self) -> None:
        validate_runtime_constraints(
            targets=self.targets,
            base_url=self.base_url,
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            max_duration=self.max_duration,
        )

    @property
    def stream_url(self) -> str:
        return self.base_url.rstrip("/") + "/" + self.stream_path.lstrip("/")
