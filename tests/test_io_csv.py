from pathlib import Path

from subdomain_stream.io_csv import CSV_FIELDS, result_rows, write_rows
from subdomain_stream.models import Result, SourceKind


def test_write_rows_creates_csv_with_schema(tmp_path: Path) -> None:
    output = tmp_path / "out.csv"
    rows = result_rows(
        "example.com",
        [
            Result("www.example.com", SourceKind.CERTIFICATE_TRANSPARENCY),
            Result("mail.example.com", SourceKind.DNS_ENUMERATION),
        ],
    )
    write_rows(str(output), rows)
    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0] == ",".join(CSV_FIELDS)
    assert lines[1] == "www.example.com,Certificate Transparency,example.com"
    assert lines[2] == "mail.example.com,DNS Enumeration,example.com"


def test_write_rows_with_no_results_writes_header_only(tmp_path: Path) -> None:
    output = tmp_path / "empty.csv"
    write_rows(str(output), [])
    assert output.read_text(encoding="utf-8").splitlines() == [",".join(CSV_FIELDS)]
