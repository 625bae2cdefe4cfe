import csv
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from subdomain_stream.config import ClientConfig
from subdomain_stream.models import Result, SessionState
from subdomain_stream.pipeline import export_results, run_pipeline, run_searches
from subdomain_stream.session import SearchController

STREAMS = {
    "example.com": [
        'data: {"subdomain":"www.example.com","source":"Certificate Transparency"}\n\n',
        'data: {"subdomain":"api.example.com","source":"DNS Enumeration"}\n\n',
        'event: complete\ndata: {"message": "Search completed"}\n\n',
    ],
    "example.org": ['event: complete\ndata: {"message": "Search completed"}\n\n'],
}
INTERRUPTED_TARGET = "example.net"


class ScriptedTransport:
    opened: list[str] = []

    def __init__(self, **_kwargs: Any) -> None:
        self._target = ""
        self.closed = False

    def open(self, target: str) -> None:
        self._target = target
        ScriptedTransport.opened.append(target)

    def chunks(self) -> Iterator[str]:
        if self._target == INTERRUPTED_TARGET:
            raise KeyboardInterrupt
        yield from STREAMS.get(self._target, [])

    def close(self) -> None:
        self.closed = True


class SilentPresenter:
    def __init__(self) -> None:
        self.terminal: list[str] = []

    def on_started(self, target: str) -> None:
        _ = target

    def on_result(self, result: Result, running_count: int) -> None:
        _ = (result, running_count)

    def on_no_results(self) -> None:
        self.terminal.append("no_results")

    def on_completed(self, final_count: int) -> None:
        self.terminal.append(f"completed:{final_count}")

    def on_cancelled(self) -> None:
        self.terminal.append("cancelled")

    def on_error(self, message: str) -> None:
        self.terminal.append(f"error:{message}")


@pytest.fixture(autouse=True)
def _reset_opened() -> None:
    ScriptedTransport.opened = []


def _controller(presenter: SilentPresenter) -> SearchController:
    return SearchController(
        transport_factory=ScriptedTransport,  # type: ignore[arg-type]
        presenter=presenter,
        logger=logging.getLogger("test"),
    )


def test_run_searches_runs_each_target_in_order() -> None:
    presenter = SilentPresenter()
    config = ClientConfig(targets=("example.com", "example.org"), show_progress=False)

    sessions = run_searches(
        config, controller=_controller(presenter), logger=logging.getLogger("test")
    )

    assert [s.target for s in sessions] == ["example.com", "example.org"]
    assert [s.state for s in sessions] == [SessionState.COMPLETED, SessionState.COMPLETED]
    assert presenter.terminal == ["completed:2", "no_results"]


def test_run_searches_skips_unresolvable_targets_when_checking_dns() -> None:
    presenter = SilentPresenter()
    config = ClientConfig(
        targets=("example.com", "example.org"), check_dns=True, show_progress=False
    )

    sessions = run_searches(
        config,
        controller=_controller(presenter),
        resolver=lambda domain: domain == "example.org",
        logger=logging.getLogger("test"),
    )

    assert [s.target for s in sessions] == ["example.org"]
    assert ScriptedTransport.opened == ["example.org"]


def test_export_results_writes_rows_for_all_sessions(tmp_path: Path) -> None:
    presenter = SilentPresenter()
    config = ClientConfig(targets=("example.com", "example.org"), show_progress=False)
    sessions = run_searches(
        config, controller=_controller(presenter), logger=logging.getLogger("test")
    )
    output = tmp_path / "results.csv"

    assert export_results(str(output), sessions) == 2

    with output.open(encoding="utf-8", newline="") as file_obj:
        rows = list(csv.DictReader(file_obj))
    assert rows == [
        {"subdomain": "www.example.com", "source": "Certificate Transparency", "target": "example.com"},
        {"subdomain": "api.example.com", "source": "DNS Enumeration", "target": "example.com"},
    ]


def test_run_pipeline_builds_http_transport_and_exports(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr("subdomain_stream.pipeline.HttpStreamTransport", ScriptedTransport)
    output = tmp_path / "out.csv"
    config = ClientConfig(targets=("example.com",), output=str(output), show_progress=False)
    presenter = SilentPresenter()

    sessions = run_pipeline(config, logger=logging.getLogger("test"), presenter=presenter)

    assert len(sessions) == 1
    assert sessions[0].count() == 2
    assert output.exists()
    assert presenter.terminal == ["completed:2"]


def test_run_pipeline_exports_finished_searches_when_interrupted(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr("subdomain_stream.pipeline.HttpStreamTransport", ScriptedTransport)
    output = tmp_path / "partial.csv"
    config = ClientConfig(
        targets=("example.com", INTERRUPTED_TARGET, "example.org"),
        output=str(output),
        show_progress=False,
    )
    presenter = SilentPresenter()

    with pytest.raises(KeyboardInterrupt):
        run_pipeline(config, logger=logging.getLogger("test"), presenter=presenter)

    with output.open(encoding="utf-8", newline="") as file_obj:
        rows = list(csv.DictReader(file_obj))
    assert [row["subdomain"] for row in rows] == ["www.example.com", "api.example.com"]
    assert presenter.terminal == ["completed:2", "cancelled"]
    assert ScriptedTransport.opened == ["example.com", INTERRUPTED_TARGET]
