"""
Example API — Fixture Harness Data Models
===========================================

What:  Structured forms of a markdown fixture: the request to send and the
       response to expect, plus the per-file outcome of a directory run.
Why:   Pydantic models compare structurally, so parsing the same document twice
       yields equal objects.
When:  Built fresh for every fixture file, used once, then discarded.
"""

from typing import Dict, List

from pydantic import BaseModel, Field


class ParsedRequest(BaseModel):
    """Request half of a fixture: start line `<METHOD> <URI>`, headers, body."""
    method: str = Field(description="HTTP method, as written (e.g. GET)")
    uri: str = Field(description="Request target, path plus optional query")
    headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Header names exactly as written, in document order",
    )
    body: str = Field(default="", description="Raw request payload")


class ParsedResponse(BaseModel):
    """Response half of a fixture: `<PROTOCOL>/<VERSION> <CODE> <REASON>`, headers, body pattern."""
    protocol_version: str = Field(description="HTTP version without protocol token (e.g. 1.1)")
    status_code: int = Field(description="Expected HTTP status code")
    headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Headers the live response must carry with identical values",
    )
    body: str = Field(default="", description="Expected body pattern")


class ParsedFixture(BaseModel):
    path: str
    request: ParsedRequest
    response: ParsedResponse


class FixtureOutcome(BaseModel):
    """
    Result of running one fixture file as part of a directory run.

    failures holds one entry per failed check, or the parse error message
    when the fixture was malformed.
    """
    fixture_id: str = Field(description="Fixture path relative to the working directory")
    passed: bool
    failures: List[str] = Field(default_factory=list)
