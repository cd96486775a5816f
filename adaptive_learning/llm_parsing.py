"""Helpers for pulling JSON out of free-text LLM completions.

The extractor is best-effort. It strips markdown fences, locates the
bracket-delimited span of the expected shape with an explicit scanner,
tries a strict parse, and on failure runs one repair pass before
parsing again.

Known failure modes:
    * An apostrophe inside a single-quoted string value closes that string
      early ({'note': 'it's'} does not recover). Apostrophes inside
      double-quoted strings are kept as-is.
    * Truncated output whose final bracket is missing cannot be completed.
    * Unquoted string values ({a: hello}) are left bare and fail to parse.
    * A bracket inside a single-quoted string can cut the balanced span
      short; the largest-span candidate usually recovers it.
"""
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple
import json
import logging
import re

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json|javascript|js)?[ \t]*\r?\n?", re.IGNORECASE)
_CLOSERS = {"{": "}", "[": "]"}
_JSON_ESCAPES = set('"\\/bfnrtu')
_PY_LITERALS = {"True": "true", "False": "false", "None": "null"}


class LLMParsingError(Exception):
    """Exception raised for errors parsing LLM responses"""
    pass


@dataclass
class ExtractionResult:
    """Outcome of extract_json: a parsed value or the reason there is none."""

    value: Any = None
    error: Optional[str] = None
    repaired: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise LLMParsingError(self.error)
        return self.value


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def _balanced_end(text: str, start: int) -> Optional[int]:
    """Index of the bracket that closes text[start], skipping double-quoted strings."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
            if depth == 0:
                return i
    return None


def candidate_spans(text: str, expected: str = "object") -> List[str]:
    """
    Locate the spans worth parsing, most specific first.

    The expected shape's opener is searched first, then the other shape's.
    For the first opener found, the depth-balanced span and the largest span
    (first opener to last closer) are returned. Without any bracketed span
    the whole text is the only candidate.
    """
    openers = ("[", "{") if expected == "array" else ("{", "[")
    for opener in openers:
        start = text.find(opener)
        if start == -1:
            continue
        spans = []
        end = _balanced_end(text, start)
        if end is not None:
            spans.append(text[start:end + 1])
        last = text.rfind(_CLOSERS[opener])
        if last > start and text[start:last + 1] not in spans:
            spans.append(text[start:last + 1])
        if spans:
            return spans
    return [text]


def _skip_insignificant(text: str, i: int) -> int:
    """Advance past whitespace and // line comments."""
    n = len(text)
    while i < n:
        if text[i].isspace():
            i += 1
        elif text.startswith("//", i):
            newline = text.find("\n", i)
            i = n if newline == -1 else newline + 1
        else:
            break
    return i


def _read_string(text: str, start: int) -> Tuple[str, int]:
    """Read a single- or double-quoted string and re-emit it as a JSON string literal."""
    quote = text[start]
    pieces = []
    i = start + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            if i + 1 >= n:
                pieces.append("\\\\")
                i += 1
                continue
            nxt = text[i + 1]
            if nxt in _JSON_ESCAPES:
                pieces.append(ch + nxt)
                i += 2
            elif nxt == "'":
                pieces.append("'")
                i += 2
            else:
                # lone backslash: keep it literally
                pieces.append("\\\\")
                i += 1
            continue
        if ch == quote:
            return '"' + "".join(pieces) + '"', i + 1
        if ch == '"':
            pieces.append('\\"')
        elif ch < " ":
            pieces.append(json.dumps(ch)[1:-1])
        else:
            pieces.append(ch)
        i += 1
    # unterminated; close it and let the parser decide
    return '"' + "".join(pieces) + '"', n


def repair_json_text(candidate: str) -> str:
    """
    Apply the fixed repair pass to a JSON-ish span.

    Re-quotes single-quoted strings, escapes raw control characters inside
    strings, drops trailing commas and // comments, quotes bare object keys
    and maps Python's True/False/None to JSON literals.
    """
    out = []
    i = 0
    n = len(candidate)
    while i < n:
        ch = candidate[i]
        if ch in "\"'":
            literal, i = _read_string(candidate, i)
            out.append(literal)
        elif candidate.startswith("//", i):
            i = _skip_insignificant(candidate, i)
            out.append(" ")
        elif ch == ",":
            j = _skip_insignificant(candidate, i + 1)
            if j < n and candidate[j] in "}]":
                i = j
            else:
                out.append(ch)
                i += 1
        elif ch.isalnum() or ch in "_$":
            j = i
            while j < n and (candidate[j].isalnum() or candidate[j] in "_$"):
                j += 1
            word = candidate[i:j]
            k = _skip_insignificant(candidate, j)
            if k < n and candidate[k] == ":":
                out.append(json.dumps(word))
            else:
                out.append(_PY_LITERALS.get(word, word))
            i = j
        elif ch.isspace():
            out.append(" ")
            i += 1
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def extract_json(text: Any, expected: str = "object") -> ExtractionResult:
    """
    Extract a JSON value of the expected shape from raw model output.

    Args:
        text: Raw completion text (bytes are decoded as UTF-8)
        expected (str): "object" or "array"; decides which bracket to look for first

    Returns:
        ExtractionResult: the parsed value, or the reason parsing failed
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    if not isinstance(text, str) or not text.strip():
        return ExtractionResult(error="empty response")

    cleaned = strip_code_fences(text)
    last_error: Any = "no JSON found"
    for candidate in candidate_spans(cleaned, expected):
        try:
            return ExtractionResult(value=json.loads(candidate))
        except json.JSONDecodeError as e:
            last_error = e
        try:
            value = json.loads(repair_json_text(candidate))
        except json.JSONDecodeError as e:
            last_error = e
            continue
        logger.debug("Recovered JSON after repair (%d chars)", len(candidate))
        return ExtractionResult(value=value, repaired=True)

    logger.warning("parse failed after repair: %s", last_error)
    return ExtractionResult(error=f"unparseable JSON: {last_error}")


def parse_json_from_text(text: Any, expected: str = "object") -> Any:
    """Return the extracted value, or None when nothing could be parsed."""
    return extract_json(text, expected).value


def _present(value: Any) -> bool:
    return value is not None and value != "" and value != 0


def check_shape(value: Any, expected: str = "object", required: Sequence[str] = (), any_of: bool = False) -> Optional[str]:
    """
    Validate the top-level shape of an extracted value.

    Args:
        value: Parsed JSON value
        expected (str): "object" or "array"
        required: Top-level fields that must be present (objects only)
        any_of (bool): Accept the value when at least one required field is present

    Returns:
        Optional[str]: None when the value is acceptable, otherwise the reason
    """
    if expected == "array":
        return None if isinstance(value, list) else "expected a JSON array"
    if not isinstance(value, dict):
        return "expected a JSON object"
    missing = [field for field in required if not _present(value.get(field))]
    if not missing:
        return None
    if any_of:
        if len(missing) < len(required):
            return None
        return f"missing any of: {', '.join(required)}"
    return f"missing required field(s): {', '.join(missing)}"
