"""CSV serialization helpers."""

from __future__ import annotations

import csv
from collections.abc import Iterable
from pathlib import Path

from .models import Result

CSV_FIELDS = ["subdomain", "source", "target"]


def result_rows(target: str, results: Iterable[Result]) -> list[dict[str, str]]:
    """Flatten accepted results into CSV rows, arrival order preserved."""
    return [
        {"subdomain": result.subject, "source": result.source.value, "target": target}
        for result in results
    ]


def write_rows(path: str, rows: list[dict[str, str]]) -> None:
    """Write result rows to CSV with stable schema."""
    output_path = Path(path)
    with output_path.open("w", newline="", encoding="utf-8") as file_obj:
        writer = csv.DictWriter(file_obj, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
