"""First-seen-wins result aggregation."""

from __future__ import annotations

from .models import OfferOutcome, Result


class ResultAggregator:
    """Ordered, deduplicated collection of results keyed by subject."""

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self._results: list[Result] = []

    def offer(self, result: Result) -> OfferOutcome:
        if result.subject in self._seen:
            return OfferOutcome.DUPLICATE_DROPPED
        self._seen.add(result.subject)
        self._results.append(result)
        return OfferOutcome.ACCEPTED

    def count(self) -> int:
        return len(self._results)

    @property
    def results(self) -> tuple[Result, ...]:
        """Accepted results in arrival order."""
        return tuple(self._results)

    def __contains__(self, subject: object) -> bool:
        return subject in self._seen
