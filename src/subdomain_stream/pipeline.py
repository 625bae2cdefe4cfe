"""Run searches for every configured target."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

from .config import ClientConfig
from .console import ConsolePresenter
from .io_csv import result_rows, write_rows
from .models import PresentationAdapter
from .session import SearchController, SearchSession
from .transport import HttpStreamTransport, make_stream_session
from .validation import domain_exists

ResolveFn = Callable[[str], bool]


def iter_searches(
    config: ClientConfig,
    *,
    controller: SearchController,
    resolver: ResolveFn = domain_exists,
    logger: logging.Logger,
) -> Iterator[SearchSession]:
    """Search each target in turn, yielding every session once it has finished."""
    for target in config.targets:
        if config.check_dns and not resolver(target):
            logger.warning("Skipping %s: domain does not exist in DNS.", target)
            continue
        session = controller.search(target)
        if session is not None:
            yield session


def run_searches(
    config: ClientConfig,
    *,
    controller: SearchController,
    resolver: ResolveFn = domain_exists,
    logger: logging.Logger,
) -> list[SearchSession]:
    """Search each target in turn; every start retires the previous session."""
    return list(
        iter_searches(config, controller=controller, resolver=resolver, logger=logger)
    )


def export_results(path: str, sessions: list[SearchSession]) -> int:
    """Write accepted results of all sessions to CSV and return the row count."""
    rows: list[dict[str, str]] = []
    for session in sessions:
        rows.extend(result_rows(session.target, session.results))
    write_rows(path, rows)
    return len(rows)


def run_pipeline(
    config: ClientConfig,
    *,
    logger: logging.Logger,
    presenter: PresentationAdapter | None = None,
) -> list[SearchSession]:
    """Build concrete dependencies, run all searches, and optionally export CSV."""
    http_session = make_stream_session(config.user_agent)
    controller = SearchController(
        transport_factory=lambda: HttpStreamTransport(
            session=http_session,
            url=config.stream_url,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
            logger=logger,
        ),
        presenter=presenter or ConsolePresenter(show_progress=config.show_progress),
        logger=logger,
        max_duration=config.max_duration,
    )
    sessions: list[SearchSession] = []
    try:
        for session in iter_searches(config, controller=controller, logger=logger):
            sessions.append(session)
    finally:
        controller.cancel()
        http_session.close()
        # Also reached on Ctrl+C; only sessions that finished are exported.
        if config.output:
            written = export_results(config.output, sessions)
            logger.info("Wrote %d results to %s", written, config.output)
    return sessions
