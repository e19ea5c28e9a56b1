"""
Example API — Fixture Runner Unit Tests
=========================================

What:  Tests for discovery, request dispatch, response checks and
       whole-directory runs.

What we test:
    ✅ Discovery recurses, filters by extension, skips VCS directories
    ✅ Headers reach the app under ASGI names
    ✅ All checks run and are reported together
    ✅ Extra response headers never fail a fixture
    ✅ Header names compare case-sensitively
    ✅ A malformed fixture fails alone in a directory run
    ✅ Undecodable files and app crashes stay inside their own fixture
"""

from pathlib import Path

import httpx
import pytest

from example_api.exceptions import FixtureAssertionError, MalformedFixtureError
from example_api.harness.discovery import discover_fixtures, fixture_id
from example_api.harness.runner import (
    FixtureRunner,
    protocol_version,
    response_headers,
    transport_headers,
)
from example_api.schemas.fixture import ParsedRequest, ParsedResponse


def _response(status=200, headers=None, body='{"id": 1, "title": "Test"}'):
    return httpx.Response(
        status,
        headers=headers if headers is not None else [(b"content-type", b"application/json")],
        content=body.encode("utf-8"),
    )


class TestDiscovery:

    def test_recursive_sorted_md_only(self, write_fixture, tmp_path):
        write_fixture("b.md", "x")
        write_fixture("a.md", "x")
        write_fixture("nested/c.md", "x")
        write_fixture("notes.txt", "x")

        found = [path.relative_to(tmp_path).as_posix() for path in discover_fixtures(tmp_path)]

        assert found == ["a.md", "b.md", "nested/c.md"]

    def test_vcs_directories_skipped(self, write_fixture, tmp_path):
        write_fixture(".git/HEAD.md", "x")
        write_fixture(".svn/entries.md", "x")
        write_fixture("kept.md", "x")

        found = [path.name for path in discover_fixtures(tmp_path)]

        assert found == ["kept.md"]

    def test_restartable(self, write_fixture, tmp_path):
        write_fixture("a.md", "x")
        assert list(discover_fixtures(tmp_path)) == list(discover_fixtures(tmp_path))

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            list(discover_fixtures(tmp_path / "nope"))

    def test_fixture_id_relative_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert fixture_id(tmp_path / "sub" / "a.md") == "sub/a.md"


class TestTransport:

    def test_header_names_lowercased(self):
        assert transport_headers({"X-Auth-Token": "t", " Accept ": "*/*"}) == {
            "x-auth-token": "t",
            "accept": "*/*",
        }

    def test_response_headers_keep_wire_names_and_join_repeats(self):
        response = _response(headers=[(b"x-a", b"1"), (b"X-B", b"2"), (b"x-a", b"3")])

        headers = response_headers(response)

        assert headers["x-a"] == "1, 3"
        assert headers["X-B"] == "2"
        assert "x-b" not in headers

    def test_protocol_version(self):
        assert protocol_version(_response()) == "1.1"


class TestCompare:

    def setup_method(self):
        self.runner = FixtureRunner(app_factory=lambda: None)

    def test_all_checks_pass(self):
        expected = ParsedResponse(
            protocol_version="1.1",
            status_code=200,
            headers={"content-type": "application/json"},
            body='{"id": 1, "title": "Test"}',
        )
        assert self.runner.compare(expected, _response()) == []

    def test_extra_actual_headers_ignored(self):
        expected = ParsedResponse(protocol_version="1.1", status_code=200, body="@json@")
        response = _response(headers=[(b"content-type", b"application/json"), (b"x-extra", b"1")])

        assert self.runner.compare(expected, response) == []

    def test_every_failure_reported(self):
        expected = ParsedResponse(
            protocol_version="2",
            status_code=404,
            headers={"content-type": "text/plain", "x-missing": "1"},
            body='{"id": 2}',
        )

        failures = self.runner.compare(expected, _response())

        assert [failure.split(":", 1)[0] for failure in failures] == [
            "ProtocolMismatch",
            "StatusMismatch",
            "HeaderMismatch",
            "HeaderMissing",
            "BodyMismatch",
        ]
        assert "--- expected" in failures[-1]
        assert "+++ actual" in failures[-1]

    def test_header_names_case_sensitive(self):
        expected = ParsedResponse(
            protocol_version="1.1",
            status_code=200,
            headers={"Content-Type": "application/json"},
            body="@json@",
        )

        assert self.runner.compare(expected, _response()) == ["HeaderMissing: Content-Type"]

    def test_invalid_pattern_reported_as_body_mismatch(self):
        expected = ParsedResponse(protocol_version="1.1", status_code=200, body='{"id": @integer@.nope()}')

        failures = self.runner.compare(expected, _response())

        assert len(failures) == 1
        assert failures[0].startswith("BodyMismatch: invalid body pattern")


class TestRun:

    @pytest.mark.asyncio
    async def test_passing_fixture_returns_response(self, fixture_runner, write_fixture, get_example_document):
        path = write_fixture("get.md", get_example_document)

        response = await fixture_runner.run(path)

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_request_headers_and_body_reach_app(self, fixture_runner, write_fixture):
        path = write_fixture(
            "create.md",
            "```http request\nPOST /api/examples\nContent-Type: application/json\nX-Request-ID: rid-1\n```\n"
            "```json\n{\"title\": \"Hello\"}\n```\n"
            "---\n"
            "```http request\nHTTP/1.1 201 Created\nx-request-id: rid-1\n```\n"
            "```json\n{\"id\": @integer@, \"title\": \"Hello\"}\n```\n",
        )

        response = await fixture_runner.run(path)

        assert response.json()["title"] == "Hello"

    @pytest.mark.asyncio
    async def test_failing_fixture_raises_with_all_failures(self, fixture_runner, write_fixture):
        path = write_fixture(
            "wrong.md",
            "```http request\nGET /api/examples/2\n```\n---\n"
            "```http request\nHTTP/1.1 200 OK\n```\n```json\n{\"id\": 2}\n```\n",
        )

        with pytest.raises(FixtureAssertionError) as exc_info:
            await fixture_runner.run(path)

        assert exc_info.value.fixture_id == fixture_id(path)
        assert len(exc_info.value.failures) == 2
        assert "StatusMismatch: expected 200, got 404" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_malformed_fixture_raises(self, fixture_runner, write_fixture, missing_separator_document):
        path = write_fixture("broken.md", missing_separator_document)

        with pytest.raises(MalformedFixtureError) as exc_info:
            await fixture_runner.run(path)
        assert str(path) in exc_info.value.message

    @pytest.mark.asyncio
    async def test_fresh_app_per_fixture(self, write_fixture, get_example_document):
        built = []

        def factory():
            from example_api.main import create_app
            app = create_app()
            built.append(app)
            return app

        runner = FixtureRunner(app_factory=factory)
        path = write_fixture("get.md", get_example_document)
        await runner.run(path)
        await runner.run(path)

        assert len(built) == 2
        assert built[0] is not built[1]

    @pytest.mark.asyncio
    async def test_unhandled_app_error_replayed_as_500(self, test_settings, write_fixture):
        from example_api.main import create_app

        def factory():
            app = create_app(settings=test_settings)

            @app.get("/api/boom")
            async def boom():
                raise RuntimeError("boom")

            return app

        runner = FixtureRunner(app_factory=factory)
        path = write_fixture(
            "boom.md",
            "```http request\nGET /api/boom\n```\n---\n"
            "```http request\nHTTP/1.1 500 Internal Server Error\ncontent-type: application/json\n```\n"
            "```json\n{\"error\": \"internal_server_error\", \"message\": @string@, \"request_id\": @string@}\n```\n",
        )

        response = await runner.run(path)

        assert response.status_code == 500


class TestRunDirectory:

    @pytest.mark.asyncio
    async def test_malformed_fixture_does_not_affect_others(
        self, fixture_runner, write_fixture, tmp_path, get_example_document, missing_separator_document
    ):
        write_fixture("a_get.md", get_example_document)
        write_fixture("b_broken.md", missing_separator_document)
        write_fixture("c_get.md", get_example_document)

        outcomes = await fixture_runner.run_directory(tmp_path)

        assert [Path(outcome.fixture_id).name for outcome in outcomes] == [
            "a_get.md",
            "b_broken.md",
            "c_get.md",
        ]
        assert [outcome.passed for outcome in outcomes] == [True, False, True]
        assert "b_broken.md" in outcomes[1].failures[0]
        assert "separator" in outcomes[1].failures[0]

    @pytest.mark.asyncio
    async def test_assertion_failures_recorded(self, fixture_runner, write_fixture, tmp_path):
        write_fixture(
            "missing.md",
            "```http request\nGET /api/examples/2\n```\n---\n```http request\nHTTP/1.1 200 OK\n```\n",
        )

        outcomes = await fixture_runner.run_directory(tmp_path)

        assert len(outcomes) == 1
        assert not outcomes[0].passed
        assert outcomes[0].failures[0] == "StatusMismatch: expected 200, got 404"

    @pytest.mark.asyncio
    async def test_undecodable_fixture_does_not_affect_others(
        self, fixture_runner, write_fixture, tmp_path, get_example_document
    ):
        write_fixture("a_get.md", get_example_document)
        (tmp_path / "b_binary.md").write_bytes(b"\xff\xfe\x00GET /api/examples/1\n")
        write_fixture("c_get.md", get_example_document)

        outcomes = await fixture_runner.run_directory(tmp_path)

        assert [outcome.passed for outcome in outcomes] == [True, False, True]
        assert "b_binary.md" in outcomes[1].failures[0]
        assert "not valid UTF-8" in outcomes[1].failures[0]
