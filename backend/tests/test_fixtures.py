"""
Example API — Markdown Fixture Replay
=======================================

What:  One test case per *.md file under the configured fixtures directory
       (backend/tests/fixtures by default, FIXTURES_DIR to override).
How:   Each file is parsed and replayed against a fresh app; a failing or
       malformed file fails only its own case.
"""

from pathlib import Path

import pytest

from example_api.config import Settings
from example_api.harness.discovery import discover_fixtures, fixture_id

FIXTURES_DIR = Path(Settings().fixtures_dir)
FIXTURE_PATHS = list(discover_fixtures(FIXTURES_DIR))


def test_fixtures_discovered():
    assert FIXTURE_PATHS, f"no fixtures found under {FIXTURES_DIR}"


@pytest.mark.asyncio
@pytest.mark.parametrize("fixture_path", FIXTURE_PATHS, ids=fixture_id)
async def test_fixture(fixture_runner, fixture_path):
    await fixture_runner.run(fixture_path)
