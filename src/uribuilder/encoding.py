"""uribuilder.encoding
Per-component rules for percent-encoding (encode on) or validating (encode off) builder input
"""

import enum
import re

from urllib.parse import quote, unquote

from .errors import InvalidArgumentError
from .parse import _ALPHA, _DIGIT, _PCT_ENCODED, _UNRESERVED
from .template import VARIABLE, VARIABLE_PAT

# Braces belong to the template syntax and are never encoded.
_TEMPLATE_CHARS: str = "{}"


class ComponentKind(enum.Enum):
    """Each kind maps to the characters it allows besides unreserved and pct-encoded."""

    HOST = ("host", "!$&'()*+,;=")
    USER_INFO = ("user info", "!$&'()*+,;=:")
    PATH_SEGMENT = ("path segment", "!$&'()*+,=:@")
    MATRIX_NAME = ("matrix parameter name", "!$&'()*+,:@")
    MATRIX_VALUE = ("matrix parameter value", "!$&'()*+,=:@")
    QUERY_NAME = ("query parameter name", "!$'()*+,;:@/?")
    QUERY_VALUE = ("query parameter value", "!$'()*+,;=:@/?")
    QUERY = ("query", "!$&'()*+,;=:@/?")
    FRAGMENT = ("fragment", "!$&'()*+,;=:@/?")

    def __init__(self, label: str, safe: str) -> None:
        self.label = label
        self.safe = safe
        self.pattern = re.compile(rf"(?:{_UNRESERVED}|{_PCT_ENCODED}|[{re.escape(safe + _TEMPLATE_CHARS)}])*")


def encode_or_check(value: str | None, kind: ComponentKind, encode: bool) -> str:
    """Percent-encodes everything not allowed in kind, or raises if encode is off and value is not legal."""
    if value is None:
        raise InvalidArgumentError(f"the {kind.label} must not be None", component=kind.name)
    if not isinstance(value, str):
        raise InvalidArgumentError(f"the {kind.label} must be a str, not {type(value).__name__}", component=kind.name)
    if encode:
        return quote(value, safe=kind.safe + _TEMPLATE_CHARS)
    if kind.pattern.fullmatch(value) is None:
        raise InvalidArgumentError(
            f"the {kind.label} {value!r} contains illegal characters; "
            "encode them or enable encoding on the builder",
            component=kind.name,
        )
    return value


def escape_braces(text: str) -> str:
    """Replaces { and } with %7B and %7D unless they belong to a {name} variable."""
    result: list[str] = []
    pos: int = 0
    for m in VARIABLE_PAT.finditer(text):
        result.append(_escape_all_braces(text[pos : m.start()]))
        result.append(m.group())
        pos = m.end()
    result.append(_escape_all_braces(text[pos:]))
    return "".join(result)


def _escape_all_braces(text: str) -> str:
    return text.replace("{", "%7B").replace("}", "%7D")


def encode_or_check_literal(value: str | None, kind: ComponentKind, encode: bool) -> str:
    """Like encode_or_check, but braces in already-encoded input are text, not template syntax."""
    if encode or value is None:
        return encode_or_check(value, kind, encode)
    return encode_or_check(_escape_all_braces(value), kind, encode)


# scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." ), where a {name} may stand for any part of it
_SCHEME_TEMPLATE_PAT: re.Pattern[str] = re.compile(
    rf"(?:{_ALPHA}|{VARIABLE})(?:{_ALPHA}|{_DIGIT}|[+\-.]|{VARIABLE})*"
)


def check_scheme(scheme: str | None) -> str:
    """Schemes are never encoded, only checked."""
    if scheme is None:
        raise InvalidArgumentError("the scheme must not be None", component="SCHEME")
    if not isinstance(scheme, str) or _SCHEME_TEMPLATE_PAT.fullmatch(scheme) is None:
        raise InvalidArgumentError(
            f"invalid scheme {scheme!r}: must be a letter followed by letters, digits, '+', '-' or '.'",
            component="SCHEME",
        )
    return scheme


def full_query(query: str | None, encode: bool, decode: bool = False) -> str:
    """Encodes or checks a whole query string, one name=value chunk at a time.

    With decode on, each name and value is percent-decoded first, so "a=%26" stays one parameter.
    """
    if query is None:
        raise InvalidArgumentError("the query must not be None", component=ComponentKind.QUERY.name)
    chunks: list[str] = []
    for chunk in query.split("&"):
        name, eq, value = chunk.partition("=")
        if decode:
            name, value = unquote(name), unquote(value)
        name = encode_or_check(name, ComponentKind.QUERY_NAME, encode)
        if len(eq) == 0:
            chunks.append(name)
        else:
            chunks.append(f"{name}={encode_or_check(value, ComponentKind.QUERY_VALUE, encode)}")
    return "&".join(chunks)
