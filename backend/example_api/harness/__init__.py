# Harness package init
"""
Example API — Markdown Fixture Harness
========================================

What:  Functional tests written as markdown request/response transcripts.

Modules:
    - parser.py:     fixture document → ParsedRequest + ParsedResponse
    - matcher.py:    BodyMatcher strategies for templated bodies
    - discovery.py:  recursive *.md discovery (VCS directories skipped)
    - runner.py:     replays fixtures in-process and collects mismatches
"""

from example_api.harness.discovery import discover_fixtures, fixture_id
from example_api.harness.matcher import (
    BodyMatcher,
    JsonPatternMatcher,
    PatternMatcher,
    TextPatternMatcher,
)
from example_api.harness.parser import load_fixture, parse_fixture, render_fixture
from example_api.harness.runner import FixtureRunner

__all__ = [
    "BodyMatcher",
    "FixtureRunner",
    "JsonPatternMatcher",
    "PatternMatcher",
    "TextPatternMatcher",
    "discover_fixtures",
    "fixture_id",
    "load_fixture",
    "parse_fixture",
    "render_fixture",
]
