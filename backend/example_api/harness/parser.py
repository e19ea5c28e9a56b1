"""
Example API — Markdown Fixture Parser
=======================================

What:  Turns one markdown fixture document into a ParsedRequest and a
       ParsedResponse.
Why:   Functional tests are written as plain request/response transcripts;
       this is the only place that knows their layout.
How:   Split on the first `---` line, then pull the ```http request block (and
       an optional body block) out of each half with one pattern per half.

Fixture layout:

    ```http request
    POST /api/examples
    content-type: application/json
    ```
    ```json
    {"title": "Hello"}
    ```
    ---
    ```http request
    HTTP/1.1 201 Created
    content-type: application/json
    ```
    ```json
    {"id": @integer@, "title": "Hello"}
    ```

Header names are kept exactly as written. No case folding happens here or in
the runner's header comparison.
"""

import re
from http import HTTPStatus
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from example_api.exceptions import MalformedFixtureError
from example_api.schemas.fixture import ParsedFixture, ParsedRequest, ParsedResponse

SEPARATOR = "---"
BLOCK_MARKER = "```http request"

_SEPARATOR_RE = re.compile(r"^---$", re.MULTILINE)

# Start line, header section up to the closing fence, then an optional second
# fence (label optional) holding the raw body. Backticks end a section.
_BLOCK_TAIL = (
    r"\n(?P<headers>[^`]*)```"
    r"(?:[^`]*```(?P<label>\w*)\n(?P<body>[^`]*)```)?"
)
_REQUEST_RE = re.compile(
    r"```http request\n(?P<method>\w+) (?P<uri>[^\n]+?)[ \t]*" + _BLOCK_TAIL
)
_RESPONSE_RE = re.compile(
    r"```http request\n\w+/(?P<version>\d+(?:\.\d+)?) (?P<status>\d{3})(?:[ \t]+[^\n]*)?"
    + _BLOCK_TAIL
)


def split_document(content: str, source: str = "<string>") -> Tuple[str, str]:
    """Split a fixture into its request and response halves."""
    text = content.replace("\r\n", "\n")
    parts = _SEPARATOR_RE.split(text, maxsplit=1)
    if len(parts) != 2:
        raise MalformedFixtureError(source, f"missing '{SEPARATOR}' separator line")

    request_half, response_half = parts
    if not request_half.strip():
        raise MalformedFixtureError(source, "request half is empty")
    if not response_half.strip():
        raise MalformedFixtureError(source, "response half is empty")
    return request_half, response_half


def parse_headers(section: str, source: str = "<string>") -> Dict[str, str]:
    """Parse `Name: Value` lines; blank lines are skipped, later duplicates win."""
    headers: Dict[str, str] = {}
    for line in section.split("\n"):
        if not line.strip():
            continue
        if ":" not in line:
            raise MalformedFixtureError(source, f"invalid header line {line!r}")
        name, value = line.split(":", 1)
        headers[name.strip()] = value.strip()
    return headers


def _body(match: "re.Match[str]") -> str:
    body = match.group("body")
    if body is None:
        return ""
    # The newline before the closing fence belongs to the fence, not the body
    return body[:-1] if body.endswith("\n") else body


def parse_request(request_half: str, source: str = "<string>") -> ParsedRequest:
    match = _REQUEST_RE.search(request_half)
    if match is None:
        raise MalformedFixtureError(
            source, f"no '{BLOCK_MARKER}' block with a '<METHOD> <URI>' start line"
        )
    return ParsedRequest(
        method=match.group("method"),
        uri=match.group("uri"),
        headers=parse_headers(match.group("headers"), source),
        body=_body(match),
    )


def parse_response(response_half: str, source: str = "<string>") -> ParsedResponse:
    match = _RESPONSE_RE.search(response_half)
    if match is None:
        raise MalformedFixtureError(
            source,
            f"no '{BLOCK_MARKER}' block with a '<PROTOCOL>/<VERSION> <STATUS> <REASON>' start line",
        )
    return ParsedResponse(
        protocol_version=match.group("version"),
        status_code=int(match.group("status")),
        headers=parse_headers(match.group("headers"), source),
        body=_body(match),
    )


def parse_fixture(
    content: str, source: str = "<string>"
) -> Tuple[ParsedRequest, ParsedResponse]:
    """
    Parse a whole fixture document.

    Args:
        content: Full markdown text of the fixture.
        source:  Name used in error messages (normally the file path).

    Raises:
        MalformedFixtureError: Separator, block or start line not found.
    """
    request_half, response_half = split_document(content, source)
    return parse_request(request_half, source), parse_response(response_half, source)


def load_fixture(path: Union[str, Path]) -> ParsedFixture:
    """Read and parse a fixture file."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        raise MalformedFixtureError(str(path), "not valid UTF-8")
    request, response = parse_fixture(content, source=str(path))
    return ParsedFixture(path=str(path), request=request, response=response)


def _render_block(start_line: str, headers: Dict[str, str], body: str, label: Optional[str]) -> str:
    lines = [BLOCK_MARKER, start_line]
    lines.extend(f"{name}: {value}" for name, value in headers.items())
    lines.append("```")
    if body:
        lines.append(f"```{label or ''}")
        lines.append(body)
        lines.append("```")
    return "\n".join(lines) + "\n"


def render_fixture(
    request: ParsedRequest,
    response: ParsedResponse,
    body_label: Optional[str] = "json",
    protocol: str = "HTTP",
) -> str:
    """
    Build a fixture document from a request/response pair.

    parse_fixture(render_fixture(req, resp)) == (req, resp) as long as header
    values carry no surrounding whitespace and bodies contain no backticks.
    """
    try:
        reason = HTTPStatus(response.status_code).phrase
    except ValueError:
        reason = "Unknown"

    request_block = _render_block(
        f"{request.method} {request.uri}", request.headers, request.body, body_label
    )
    response_block = _render_block(
        f"{protocol}/{response.protocol_version} {response.status_code} {reason}",
        response.headers,
        response.body,
        body_label,
    )
    return f"{request_block}{SEPARATOR}\n{response_block}"
