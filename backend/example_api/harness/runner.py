"""
Example API — Fixture Runner
==============================

What:  Replays markdown fixtures against the API and checks the live response.
Why:   One fixture file = one functional test, written as a readable transcript.
How:   For every fixture:
           1. Parse the document (parser.load_fixture)
           2. Build a fresh app and an httpx AsyncClient over ASGITransport
              (in-process, no network hop)
           3. Send the request: method, URI, headers in ASGI naming, raw body
           4. Run every check and collect the failures:
                ProtocolMismatch  HTTP version differs
                StatusMismatch    status code differs
                HeaderMissing     expected header absent
                HeaderMismatch    expected header has another value
                BodyMismatch      body does not satisfy the pattern (with diff)
           5. Raise FixtureAssertionError listing all of them, if any
Who:   backend/tests/test_fixtures.py (one pytest case per file) and
       run_directory() for a whole-directory report.

Header names in the expectation are compared case-sensitively with the names
the server sent. Extra response headers are ignored.
"""

import difflib
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

import httpx
from starlette.types import ASGIApp

from example_api.exceptions import FixtureAssertionError, MalformedFixtureError
from example_api.harness.discovery import discover_fixtures, fixture_id
from example_api.harness.matcher import BodyMatcher, PatternMatcher
from example_api.harness.parser import load_fixture
from example_api.schemas.fixture import FixtureOutcome, ParsedRequest, ParsedResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://testserver"


def transport_header_name(name: str) -> str:
    """ASGI carries header names lowercased."""
    return name.strip().lower()


def transport_headers(headers: Dict[str, str]) -> Dict[str, str]:
    return {transport_header_name(name): value for name, value in headers.items()}


def response_headers(response: httpx.Response) -> Dict[str, str]:
    """Response headers keyed by the exact names on the wire; repeats joined with ', '."""
    headers: Dict[str, str] = {}
    for raw_name, raw_value in response.headers.raw:
        name = raw_name.decode("latin-1")
        value = raw_value.decode("latin-1")
        headers[name] = f"{headers[name]}, {value}" if name in headers else value
    return headers


def protocol_version(response: httpx.Response) -> str:
    """'HTTP/1.1' -> '1.1'"""
    return response.http_version.split("/", 1)[-1]


def body_diff(expected: str, actual: str) -> str:
    return "\n".join(
        difflib.unified_diff(
            expected.splitlines(),
            actual.splitlines(),
            fromfile="expected",
            tofile="actual",
            lineterm="",
        )
    )


class FixtureRunner:
    """
    Drives fixtures through the API-under-test.

    Args:
        app_factory: Returns a new ASGI app; called once per fixture so no state
                     crosses fixture boundaries. Defaults to example_api.main.create_app.
        matcher:     Body comparison strategy (default: PatternMatcher).
        base_url:    Base URL the relative fixture URIs are resolved against.
    """

    def __init__(
        self,
        app_factory: Optional[Callable[[], ASGIApp]] = None,
        matcher: Optional[BodyMatcher] = None,
        base_url: str = DEFAULT_BASE_URL,
    ):
        if app_factory is None:
            from example_api.main import create_app
            app_factory = create_app
        self.app_factory = app_factory
        self.matcher = matcher or PatternMatcher()
        self.base_url = base_url

    async def send(self, request: ParsedRequest) -> httpx.Response:
        """
        Dispatch one parsed request to a freshly built app.

        An unhandled exception inside the app comes back as the 500 response
        the app sent, not as a raised exception.
        """
        transport = httpx.ASGITransport(app=self.app_factory(), raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport, base_url=self.base_url) as client:
            return await client.request(
                request.method,
                request.uri,
                headers=transport_headers(request.headers),
                content=request.body.encode("utf-8") if request.body else None,
            )

    def compare(self, expected: ParsedResponse, response: httpx.Response) -> List[str]:
        """Run every check and return one message per failed check."""
        failures: List[str] = []

        actual_version = protocol_version(response)
        if actual_version != expected.protocol_version:
            failures.append(
                f"ProtocolMismatch: expected HTTP/{expected.protocol_version}, got HTTP/{actual_version}"
            )

        if response.status_code != expected.status_code:
            failures.append(
                f"StatusMismatch: expected {expected.status_code}, got {response.status_code}"
            )

        actual_headers = response_headers(response)
        for name, value in expected.headers.items():
            if name not in actual_headers:
                failures.append(f"HeaderMissing: {name}")
            elif actual_headers[name] != value:
                failures.append(
                    f"HeaderMismatch: {name}: expected {value!r}, got {actual_headers[name]!r}"
                )

        try:
            body_matches = self.matcher.matches(expected.body, response.text)
        except ValueError as e:
            failures.append(f"BodyMismatch: invalid body pattern: {e}")
        else:
            if not body_matches:
                failures.append(
                    "BodyMismatch: body does not match pattern\n"
                    + body_diff(expected.body, response.text)
                )

        return failures

    async def run(self, path: Union[str, Path]) -> httpx.Response:
        """
        Run one fixture file.

        Returns the live response when every check passes.

        Raises:
            MalformedFixtureError: The file could not be parsed.
            FixtureAssertionError: One or more checks failed.
        """
        name = fixture_id(path)
        fixture = load_fixture(path)
        logger.debug("Replaying %s: %s %s", name, fixture.request.method, fixture.request.uri)

        response = await self.send(fixture.request)
        failures = self.compare(fixture.response, response)
        if failures:
            logger.info("Fixture %s failed %d check(s)", name, len(failures))
            raise FixtureAssertionError(name, failures)

        logger.debug("Fixture %s passed", name)
        return response

    async def run_directory(self, directory: Union[str, Path]) -> List[FixtureOutcome]:
        """
        Run every fixture under `directory`, one outcome per file.

        A malformed or failing fixture is recorded and the run continues.
        """
        outcomes: List[FixtureOutcome] = []
        for path in discover_fixtures(directory):
            name = fixture_id(path)
            try:
                await self.run(path)
            except MalformedFixtureError as e:
                logger.warning("Skipping malformed fixture: %s", e.message)
                outcomes.append(FixtureOutcome(fixture_id=name, passed=False, failures=[e.message]))
            except FixtureAssertionError as e:
                outcomes.append(FixtureOutcome(fixture_id=name, passed=False, failures=e.failures))
            else:
                outcomes.append(FixtureOutcome(fixture_id=name, passed=True))

        passed = sum(1 for outcome in outcomes if outcome.passed)
        logger.info("Fixture run %s: %d/%d passed", directory, passed, len(outcomes))
        return outcomes
