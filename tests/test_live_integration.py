import os

import pytest

from subdomain_stream.cli import main

requires_live = pytest.mark.skipif(
    os.getenv("RUN_LIVE_INTEGRATION") != "1",
    reason="Set RUN_LIVE_INTEGRATION=1 and SUBDOMAIN_STREAM_URL to execute live integration tests.",
)


@requires_live
def test_live_search_against_running_server() -> None:
    exit_code = main(["example.com", "--no-progress", "--max-duration", "300"])
    assert exit_code == 0
