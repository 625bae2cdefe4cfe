"""Terminal rendering of search progress."""

from __future__ import annotations

import sys
from typing import TextIO

from tqdm import tqdm

from .models import Result


class ConsolePresenter:
    """Print results as they arrive with a live ``N found`` counter."""

    def __init__(self, *, show_progress: bool = True, out: TextIO | None = None) -> None:
        self._show_progress = show_progress
        self._out = out if out is not None else sys.stdout
        self._bar: tqdm | None = None
        self._target = ""

    def on_started(self, target: str) -> None:
        self._close_bar()
        self._target = target
        self._write(f"Searching for subdomains of {target}...")
        self._bar = tqdm(
            desc=target,
            unit=" found",
            total=None,
            leave=False,
            disable=not self._show_progress,
            file=sys.stderr,
        )

    def on_result(self, result: Result, running_count: int) -> None:
        self._write(f"{result.subject:<60} {result.source.short_label}")
        if self._bar is not None:
            self._bar.update(running_count - self._bar.n)

    def on_no_results(self) -> None:
        self._close_bar()
        self._write(f"No subdomains found for {self._target}.")
        self._write("Try a different domain or check if the domain exists.")

    def on_completed(self, final_count: int) -> None:
        self._close_bar()
        self._write(f"Search completed: {final_count} found for {self._target}.")

    def on_cancelled(self) -> None:
        self._close_bar()
        self._write(f"Search for {self._target} stopped.")

    def on_error(self, message: str) -> None:
        self._close_bar()
        self._write(f"Error: {message}")

    def _write(self, message: str) -> None:
        tqdm.write(message, file=self._out)

    def _close_bar(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
