r"""
Example API — Body Pattern Matchers
=====================================

What:  Compare an expected body pattern from a fixture with the live body.
Why:   Some response values cannot be known in advance (generated ids,
       request IDs). Fixtures mark those positions with tokens instead of
       literal values.
How:   A pattern is tokenized into literal and token segments. Literals must
       match exactly; a token accepts any value of its declared shape.

Tokens:
    @string@   @integer@   @number@   @double@   @boolean@   @null@
    @array@    @json@      @uuid@     @wildcard@ (alias @*@)

Expanders narrow a token and can be chained:
    @integer@.greaterThan(1).lowerThan(101)
    @string@.startsWith("abc").endsWith("xyz").contains("m").notEmpty()
    @string@.matchRegex("^\d+-[a-f0-9]{8}$")

Expander arguments are JSON numbers, booleans or null, or double-quoted
strings. String arguments are taken as written: backslashes are kept, so
regexes need no extra escaping. Only \" is unescaped to a quote.

Matchers (all implement BodyMatcher):
    TextPatternMatcher:  plain text, tokens matched in place
    JsonPatternMatcher:  JSON bodies compared structurally; unquoted tokens
                         such as {"id": @integer@} are allowed
    PatternMatcher:      JSON matcher when both sides are JSON, text otherwise
"""

import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

TOKEN_RE = re.compile(
    r"@(?P<kind>string|integer|number|double|boolean|null|array|json|uuid|wildcard|\*)@"
    r"(?P<expanders>(?:\.\w+\((?:\"(?:[^\"\\]|\\.)*\"|[^()\"])*\))*)"
)
_EXPANDER_RE = re.compile(r"\.(?P<name>\w+)\((?P<args>(?:\"(?:[^\"\\]|\\.)*\"|[^()\"])*)\)")
_ARGUMENT_RE = re.compile(
    r"\s*(?:\"(?P<string>(?:[^\"\\]|\\.)*)\"|(?P<literal>[^,\"\s]+))\s*(?:,|$)"
)

_UUID_RE = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)

# How each token kind looks inside plain text
_TEXT_FRAGMENTS: Dict[str, str] = {
    "string": r".*?",
    "integer": r"-?\d+",
    "number": r"-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?",
    "double": r"-?\d+\.\d+(?:[eE][-+]?\d+)?",
    "boolean": r"true|false",
    "null": r"null",
    "array": r".*?",
    "json": r".*?",
    "uuid": _UUID_RE.pattern,
    "wildcard": r".*?",
    "*": r".*?",
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_json_text(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        json.loads(value)
    except ValueError:
        return False
    return True


_TYPE_CHECKS: Dict[str, Callable[[Any], bool]] = {
    "string": lambda v: isinstance(v, str),
    "integer": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "number": _is_number,
    "double": lambda v: isinstance(v, float),
    "boolean": lambda v: isinstance(v, bool),
    "null": lambda v: v is None,
    "array": lambda v: isinstance(v, (list, dict)),
    "json": lambda v: isinstance(v, (list, dict)) or _is_json_text(v),
    "uuid": lambda v: isinstance(v, str) and _UUID_RE.fullmatch(v) is not None,
    "wildcard": lambda v: True,
    "*": lambda v: True,
}


def _not_empty(value: Any) -> bool:
    return value not in ("", None) and not (isinstance(value, (list, dict)) and not value)


def parse_arguments(raw: str) -> Tuple[Any, ...]:
    """Parse the comma separated arguments of one expander call."""
    args: List[Any] = []
    raw = raw.strip()
    position = 0
    while position < len(raw):
        match = _ARGUMENT_RE.match(raw, position)
        if match is None:
            raise ValueError(f"Cannot parse arguments: {raw!r}")
        if match.group("string") is not None:
            args.append(match.group("string").replace('\\"', '"'))
        else:
            args.append(json.loads(match.group("literal")))
        position = match.end()
    return tuple(args)


_EXPANDERS: Dict[str, Callable[..., bool]] = {
    "greaterThan": lambda v, n: _is_number(v) and v > n,
    "lowerThan": lambda v, n: _is_number(v) and v < n,
    "startsWith": lambda v, s: isinstance(v, str) and v.startswith(s),
    "endsWith": lambda v, s: isinstance(v, str) and v.endswith(s),
    "contains": lambda v, s: isinstance(v, str) and s in v,
    "notEmpty": lambda v: _not_empty(v),
    "matchRegex": lambda v, r: isinstance(v, str) and re.search(r, v) is not None,
}
_EXPANDER_ARITY: Dict[str, int] = {"notEmpty": 0}


@dataclass(frozen=True)
class PatternToken:
    """One `@kind@` token with its chained expanders."""

    kind: str
    expanders: Tuple[Tuple[str, Tuple[Any, ...]], ...] = field(default_factory=tuple)

    @classmethod
    def parse(cls, text: str) -> "PatternToken":
        match = TOKEN_RE.fullmatch(text)
        if match is None:
            raise ValueError(f"Not a pattern token: {text!r}")

        expanders = []
        for expander in _EXPANDER_RE.finditer(match.group("expanders")):
            name = expander.group("name")
            if name not in _EXPANDERS:
                raise ValueError(f"Unknown expander '{name}' in pattern {text!r}")
            try:
                args = parse_arguments(expander.group("args"))
            except ValueError:
                raise ValueError(f"Invalid arguments for '{name}' in pattern {text!r}")
            if len(args) != _EXPANDER_ARITY.get(name, 1):
                raise ValueError(f"Invalid arguments for '{name}' in pattern {text!r}")
            if name == "matchRegex":
                try:
                    re.compile(args[0])
                except (re.error, TypeError):
                    raise ValueError(f"Invalid regex for 'matchRegex' in pattern {text!r}")
            expanders.append((name, args))
        return cls(kind=match.group("kind"), expanders=tuple(expanders))

    def accepts(self, value: Any) -> bool:
        if not _TYPE_CHECKS[self.kind](value):
            return False
        return all(_EXPANDERS[name](value, *args) for name, args in self.expanders)

    def text_fragment(self) -> str:
        return _TEXT_FRAGMENTS[self.kind]

    def convert(self, text: str) -> Any:
        """Turn the text a token matched inside a plain body into a typed value."""
        if self.kind == "integer":
            return int(text)
        if self.kind == "number":
            return float(text) if any(c in text for c in ".eE") else int(text)
        if self.kind == "double":
            return float(text)
        if self.kind == "boolean":
            return text == "true"
        if self.kind == "null":
            return None
        if self.kind == "array":
            return json.loads(text) if _is_json_text(text) else text
        return text


Segment = Union[str, PatternToken]


def tokenize(pattern: str) -> List[Segment]:
    """Split a pattern into literal strings and PatternTokens, in order."""
    segments: List[Segment] = []
    position = 0
    for match in TOKEN_RE.finditer(pattern):
        if match.start() > position:
            segments.append(pattern[position:match.start()])
        segments.append(PatternToken.parse(match.group(0)))
        position = match.end()
    if position < len(pattern):
        segments.append(pattern[position:])
    return segments


class BodyMatcher(ABC):
    """
    Contract:
        - matches(pattern, actual) returns True when the live body satisfies
          the expected pattern
        - an unusable pattern (unknown expander, bad arguments) raises ValueError
    """

    @abstractmethod
    def matches(self, pattern: str, actual: str) -> bool:
        ...


class TextPatternMatcher(BodyMatcher):
    """
    Literal text with tokens; the whole body must be consumed.

    Every way of splitting the body between tokens is tried, shortest token
    text first, so an expander rejecting one split does not hide a later
    split that satisfies all of them.
    """

    def matches(self, pattern: str, actual: str) -> bool:
        return self._match_from(tokenize(pattern), 0, actual, 0)

    def _match_from(self, segments: List[Segment], index: int, actual: str, position: int) -> bool:
        if index == len(segments):
            return position == len(actual)

        segment = segments[index]
        if not isinstance(segment, PatternToken):
            return actual.startswith(segment, position) and self._match_from(
                segments, index + 1, actual, position + len(segment)
            )

        fragment = re.compile(segment.text_fragment(), re.DOTALL)
        for end in range(position, len(actual) + 1):
            text = actual[position:end]
            if (
                fragment.fullmatch(text)
                and segment.accepts(segment.convert(text))
                and self._match_from(segments, index + 1, actual, end)
            ):
                return True
        return False


class JsonPatternMatcher(BodyMatcher):
    """
    Structural JSON comparison.

    Objects need the same key set, arrays the same length, scalars the same
    value and JSON type. A string that is exactly one token is checked with
    that token; a string with embedded tokens is matched as text.
    """

    def __init__(self, text_matcher: Optional[TextPatternMatcher] = None):
        self.text_matcher = text_matcher or TextPatternMatcher()

    def matches(self, pattern: str, actual: str) -> bool:
        expected = self.decode_pattern(pattern)
        return self.match_value(expected, json.loads(actual))

    @staticmethod
    def quote_tokens(pattern: str) -> str:
        """Wrap tokens that sit outside JSON strings in quotes so the pattern decodes."""
        out: List[str] = []
        in_string = False
        i = 0
        while i < len(pattern):
            char = pattern[i]
            if in_string:
                out.append(char)
                if char == "\\" and i + 1 < len(pattern):
                    out.append(pattern[i + 1])
                    i += 2
                    continue
                if char == '"':
                    in_string = False
                i += 1
                continue
            if char == '"':
                in_string = True
                out.append(char)
                i += 1
                continue
            if char == "@":
                match = TOKEN_RE.match(pattern, i)
                if match:
                    out.append(json.dumps(match.group(0)))
                    i = match.end()
                    continue
            out.append(char)
            i += 1
        return "".join(out)

    def decode_pattern(self, pattern: str) -> Any:
        """
        Decode a JSON pattern.

        Every token is parsed first, so an unusable token raises ValueError
        even where the structural comparison would never reach it. A pattern
        that is not JSON also raises ValueError.
        """
        tokenize(pattern)
        return json.loads(self.quote_tokens(pattern))

    def match_value(self, expected: Any, actual: Any) -> bool:
        if isinstance(expected, dict):
            if not isinstance(actual, dict) or set(expected) != set(actual):
                return False
            return all(self.match_value(expected[key], actual[key]) for key in expected)

        if isinstance(expected, list):
            if not isinstance(actual, list) or len(expected) != len(actual):
                return False
            return all(self.match_value(e, a) for e, a in zip(expected, actual))

        if isinstance(expected, str):
            if TOKEN_RE.fullmatch(expected):
                return PatternToken.parse(expected).accepts(actual)
            if TOKEN_RE.search(expected):
                return isinstance(actual, str) and self.text_matcher.matches(expected, actual)
            return isinstance(actual, str) and expected == actual

        if isinstance(expected, bool) or expected is None:
            return type(actual) is type(expected) and actual == expected

        # Numbers: 1 and 1.0 are the same JSON number
        return _is_number(actual) and actual == expected


class PatternMatcher(BodyMatcher):
    """Default matcher: structural when both sides are JSON, textual otherwise."""

    def __init__(self):
        self.text = TextPatternMatcher()
        self.json = JsonPatternMatcher(self.text)

    def matches(self, pattern: str, actual: str) -> bool:
        # Unusable tokens raise here, whichever matcher ends up comparing
        tokenize(pattern)
        if pattern.strip() and actual.strip():
            try:
                expected = self.json.decode_pattern(pattern)
                decoded = json.loads(actual)
            except ValueError:
                pass
            else:
                return self.json.match_value(expected, decoded)
        return self.text.matches(pattern, actual)
