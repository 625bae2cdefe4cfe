"""Validation and runtime guardrails."""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import urlparse

import dns.exception
import dns.resolver

from .errors import ConfigError, InvalidTargetError

DOMAIN_PATTERN = re.compile(
    r"^[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9]*\.([a-zA-Z]{2,}|[a-zA-Z]{2,}\.[a-zA-Z]{2,})$"
)


def is_plausible_domain(value: str) -> bool:
    """Return True for domain-like input such as ``example.com`` or ``example.co.uk``."""
    return bool(DOMAIN_PATTERN.match(value.strip()))


def validate_target(value: str) -> str:
    """Return the trimmed target or raise InvalidTargetError."""
    target = value.strip()
    if not target:
        raise InvalidTargetError("Search target must not be empty.")
    if not is_plausible_domain(target):
        raise InvalidTargetError(f"Invalid domain format: {target!r}")
    return target


def is_supported_url(url: str) -> bool:
    """Allow only absolute HTTP(S) URLs with a hostname."""
    parsed = urlparse(url)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def load_lines_from_file(path: str) -> list[str]:
    """Load non-empty, non-comment lines from a UTF-8 text file."""
    content = Path(path).read_text(encoding="utf-8")
    lines = (line.strip() for line in content.splitlines())
    return [line for line in lines if line and not line.startswith("#")]


def validate_runtime_constraints(
    *,
    targets: tuple[str, ...],
    base_url: str,
    connect_timeout: float,
    read_timeout: float,
    max_duration: float | None,
) -> None:
    """Validate CLI/runtime configuration and raise ConfigError on invalid values."""
    if not targets:
        raise ConfigError("Provide at least one target domain or --targets-file.")
    for target in targets:
        validate_target(target)
    if not is_supported_url(base_url):
        raise ConfigError(f"--server must be an http(s) URL, got {base_url!r}.")
    if connect_timeout <= 0 or read_timeout <= 0:
        raise ConfigError("--timeout and --read-timeout must be > 0.")
    if max_duration is not None and max_duration <= 0:
        raise ConfigError("--max-duration must be > 0.")


def domain_exists(domain: str, *, lifetime: float = 8.0) -> bool:
    """Return False only when DNS says ``domain`` does not exist.

    Resolver trouble (timeouts, no reachable nameserver) leaves the
    decision to the discovery server.
    """
    try:
        dns.resolver.resolve(domain, "SOA", lifetime=lifetime)
    except dns.resolver.NXDOMAIN:
        return False
    except dns.exception.DNSException:
        # NoAnswer lands here too: the name exists without an SOA of its own.
        return True
    return True
