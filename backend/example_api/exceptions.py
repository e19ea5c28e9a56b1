"""
Example API — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the API and the fixture harness.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes (API side) and descriptive per-fixture failures (harness side).
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) turn the API errors
       into structured JSON error responses.

Exception Hierarchy:
    ExampleApiError (base)
    ├── NotFoundError            → 404 Not Found
    ├── AuthenticationError      → 403 Forbidden / 401 Unauthorized
    └── MalformedFixtureError    → harness: fixture document cannot be parsed

    FixtureAssertionError (AssertionError)
                                 → harness: live response did not match fixture

FixtureAssertionError derives from AssertionError so pytest reports it as a
test failure (not an error) and prints the collected mismatch list.
"""

from typing import Any, Dict, List, Optional


class ExampleApiError(Exception):
    """
    Base exception for all Example API errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged, not returned to API clients)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(ExampleApiError):
    """
    Raised when a requested resource does not exist.

    When:    GET /api/examples/{id} with any id other than the built-in one.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class AuthenticationError(ExampleApiError):
    """
    Raised when the X-Auth-Token check fails.

    HTTP:
        403 Forbidden:    header absent
        401 Unauthorized: header present but wrong
    """

    def __init__(
        self,
        status_code: int = 403,
        message: str = "Invalid credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.status_code = status_code


class MalformedFixtureError(ExampleApiError):
    """
    Raised when a markdown fixture cannot be parsed.

    When:    Missing `---` separator, empty half, missing ```http request block,
             unparseable start line or header line.
    Scope:   Fails only the fixture it names; other fixtures keep running.
    """

    def __init__(
        self,
        path: str,
        reason: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["path"] = path
        super().__init__(message=f"Malformed fixture {path}: {reason}", context=ctx)
        self.path = path
        self.reason = reason


class FixtureAssertionError(AssertionError):
    """
    Raised when a live response does not satisfy its fixture.

    Every check of a fixture runs before this is raised, so `failures` holds
    all mismatches (protocol, status, each header, body), not just the first.
    """

    def __init__(self, fixture_id: str, failures: List[str]):
        self.fixture_id = fixture_id
        self.failures = list(failures)
        lines = "\n".join(f"  - {failure}" for failure in self.failures)
        super().__init__(f"Fixture {fixture_id} failed:\n{lines}")
