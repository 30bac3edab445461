"""uribuilder.parse
RFC 3986 grammar, URI-reference parsing and the Uri value returned by UriBuilder.build()
"""

import dataclasses
import re

from typing import Iterable, Self
from urllib.parse import unquote

from .template import VARIABLE

# Each of these ABNF rules is from RFC 3986 or 5234.

# ALPHA = %x41-5A / %x61-7A
_ALPHA: str = r"[A-Za-z]"

# DIGIT = %x30-39
_DIGIT: str = r"[0-9]"

# HEXDIG = DIGIT / "A" / "B" / "C" / "D" / "E" / "F"
_HEXDIG: str = rf"(?:{_DIGIT}|[A-Fa-f])"

# unreserved = ALPHA / DIGIT / "-" / "." / "_" / "~"
_UNRESERVED: str = rf"(?:{_ALPHA}|{_DIGIT}|[-._~])"

# pct-encoded = "%" HEXDIG HEXDIG
_PCT_ENCODED: str = rf"%{_HEXDIG}{_HEXDIG}"

# sub-delims = "!" / "$" / "&" / "'" / "(" / ")" / "*" / "+" / "," / ";" / "="
_SUB_DELIMS: str = r"[!$&'()*+,;=]"

# pchar = unreserved / pct-encoded / sub-delims / ":" / "@"
_PCHAR: str = rf"(?:{_UNRESERVED}|{_PCT_ENCODED}|{_SUB_DELIMS}|[:@])"

# query = *( pchar / "/" / "?" )
_QUERY: str = rf"(?P<query>(?:{_PCHAR}|[/?])*)"

# fragment = *( pchar / "/" / "?" )
_FRAGMENT: str = rf"(?P<fragment>(?:{_PCHAR}|[/?])*)"

# scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
_SCHEME: str = rf"(?P<scheme>{_ALPHA}(?:{_ALPHA}|{_DIGIT}|[+\-.])*)"

# segment = *pchar
_SEGMENT: str = rf"{_PCHAR}*"

# segment-nz = 1*pchar
_SEGMENT_NZ: str = rf"{_PCHAR}+"

# segment-nz-nc = 1*( unreserved / pct-encoded / sub-delims / "@" )
_SEGMENT_NZ_NC: str = rf"(?:{_UNRESERVED}|{_PCT_ENCODED}|{_SUB_DELIMS}|@)+"

# path-absolute = "/" [ segment-nz *( "/" segment ) ]
_PATH_ABSOLUTE: str = rf"(?P<path_absolute>/(?:{_SEGMENT_NZ}(?:/{_SEGMENT})*)?)"

# path-empty = 0<pchar>
_PATH_EMPTY: str = r"(?P<path_empty>)"

# path-rootless = segment-nz *( "/" segment )
_PATH_ROOTLESS: str = rf"(?P<path_rootless>{_SEGMENT_NZ}(?:/{_SEGMENT})*)"

# path-abempty = *( "/" segment )
_PATH_ABEMPTY: str = rf"(?P<path_abempty>(?:/{_SEGMENT})*)"

# path-noscheme = segment-nz-nc *( "/" segment )
_PATH_NOSCHEME: str = rf"(?P<path_noscheme>{_SEGMENT_NZ_NC}(?:/{_SEGMENT})*)"

# userinfo = *( unreserved / pct-encoded / sub-delims / ":" )
_USERINFO: str = rf"(?P<userinfo>(?:{_UNRESERVED}|{_PCT_ENCODED}|{_SUB_DELIMS}|:)*)"

# dec-octet = DIGIT / %x31-39 DIGIT / "1" 2DIGIT / "2" %x30-34 DIGIT / "25" %x30-35
_DEC_OCTET: str = rf"(?:{_DIGIT}|[1-9]{_DIGIT}|1{_DIGIT}{{2}}|2[0-4]{_DIGIT}|25[0-5])"

# IPv4address = dec-octet "." dec-octet "." dec-octet "." dec-octet
_IPV4ADDRESS: str = rf"{_DEC_OCTET}\.{_DEC_OCTET}\.{_DEC_OCTET}\.{_DEC_OCTET}"

# reg-name = *( unreserved / pct-encoded / sub-delims )
_REG_NAME: str = rf"(?:{_UNRESERVED}|{_PCT_ENCODED}|{_SUB_DELIMS})*"

# host = IP-literal / IPv4address / reg-name
# IP literals are not supported by the builder, so they are not accepted here either.
_HOST: str = rf"(?P<host>{_IPV4ADDRESS}|{_REG_NAME})"

# port = *DIGIT
_PORT: str = rf"(?P<port>{_DIGIT}*)"

# authority = [ userinfo "@" ] host [ ":" port ]
_AUTHORITY: str = rf"(?:{_USERINFO}@)?{_HOST}(?::{_PORT})?"

# hier-part = "//" authority path-abempty / path-absolute / path-rootless / path-empty
_HIER_PART: str = rf"(?://{_AUTHORITY}{_PATH_ABEMPTY}|{_PATH_ABSOLUTE}|{_PATH_ROOTLESS}|{_PATH_EMPTY})"

# relative-part = "//" authority path-abempty / path-absolute / path-noscheme / path-empty
_RELATIVE_PART: str = rf"(?://{_AUTHORITY}{_PATH_ABEMPTY}|{_PATH_ABSOLUTE}|{_PATH_NOSCHEME}|{_PATH_EMPTY})"

# URI = scheme ":" hier-part [ "?" query ] [ "#" fragment ]
_URI: str = rf"\A{_SCHEME}:{_HIER_PART}(?:\?{_QUERY})?(?:#{_FRAGMENT})?\Z"
_URI_PAT: re.Pattern[str] = re.compile(_URI)

# relative-ref = relative-part [ "?" query ] [ "#" fragment ]
_RELATIVE_REF: str = rf"\A{_RELATIVE_PART}(?:\?{_QUERY})?(?:#{_FRAGMENT})?\Z"
_RELATIVE_REF_PAT: re.Pattern[str] = re.compile(_RELATIVE_REF)

# RFC 3986 Appendix B, without the scheme. This decomposes anything, including
# strings that still hold {name} placeholders.
_SPLIT_PAT: re.Pattern[str] = re.compile(
    r"\A(?://(?P<authority>[^/?#]*))?(?P<path>[^?#]*)(?:\?(?P<query>[^#]*))?(?:#(?P<fragment>.*))?\Z", re.DOTALL
)


@dataclasses.dataclass
class Uri:
    """A URI-Reference. Build one with UriBuilder or one of the parse_* functions.

    The raw_* fields hold the components exactly as they appear in the reference.
    The properties of the same name without the prefix give the percent-decoded form.
    """

    raw_scheme: str | None
    raw_userinfo: str | None
    raw_host: str | None
    raw_port: str | None
    raw_path: str
    raw_query: str | None
    raw_fragment: str | None

    @property
    def scheme(self: Self) -> str | None:
        return self.raw_scheme

    @property
    def userinfo(self: Self) -> str | None:
        return _unquote_if_not_none(self.raw_userinfo)

    @property
    def host(self: Self) -> str | None:
        return _unquote_if_not_none(self.raw_host)

    @property
    def port(self: Self) -> int | None:
        if self.raw_port is not None and len(self.raw_port) > 0:
            return int(self.raw_port, base=10)
        return None

    @property
    def path(self: Self) -> str:
        return unquote(self.raw_path)

    @property
    def query(self: Self) -> str | None:
        return _unquote_if_not_none(self.raw_query)

    @property
    def fragment(self: Self) -> str | None:
        return _unquote_if_not_none(self.raw_fragment)

    @property
    def is_absolute(self: Self) -> bool:
        return self.raw_scheme is not None

    @property
    def authority(self: Self) -> str | None:
        """userinfo@host:port"""
        if self.raw_host is None:
            return None
        result: str = ""
        if self.raw_userinfo is not None:
            result += f"{self.raw_userinfo}@"
        result += self.raw_host
        if self.raw_port is not None:
            result += f":{self.raw_port}"
        return result

    def serialize(self: Self) -> str:
        """Direct translation of RFC 3986 section 5.3"""
        result: str = ""
        if self.raw_scheme is not None:
            result += f"{self.raw_scheme}:"
        if self.authority is not None:
            result += f"//{self.authority}"
        result += self.raw_path
        if self.raw_query is not None:
            result += f"?{self.raw_query}"
        if self.raw_fragment is not None:
            result += f"#{self.raw_fragment}"
        return result

    def __str__(self: Self) -> str:
        return self.serialize()


def _unquote_if_not_none(s: str | None) -> str | None:
    if s is None:
        return None
    return unquote(s)


def _parse(data: str, pattern: re.Pattern[str], path_kinds: Iterable[str]) -> Uri:
    m: re.Match[str] | None = re.match(pattern, data)
    if m is None:
        raise ValueError("parse failed")

    # Because relative references don't have a scheme group in their regexes,
    # this requires an extra check.
    scheme: str | None = m["scheme"] if "scheme" in m.groupdict() else None

    return Uri(
        raw_scheme=scheme,
        raw_userinfo=m["userinfo"],
        raw_host=m["host"],
        raw_port=m["port"],
        raw_path=m[next(pk for pk in path_kinds if m[pk] is not None)],
        raw_query=m["query"],
        raw_fragment=m["fragment"],
    )


_URI_PATH_KINDS: tuple[str, ...] = ("path_abempty", "path_absolute", "path_empty", "path_rootless")


def parse_uri(data: str) -> Uri:
    """RFC 3986-compliant URI parser (e.g. "http://example.org/path?query#fragment")."""
    return _parse(data, _URI_PAT, _URI_PATH_KINDS)


_RELATIVE_REF_PATH_KINDS: tuple[str, ...] = ("path_abempty", "path_absolute", "path_empty", "path_noscheme")


def parse_relative_ref(data: str) -> Uri:
    """RFC 3986-compliant relative-ref parser (e.g. "//example.org/path?query#fragment" or "a/b")."""
    return _parse(data, _RELATIVE_REF_PAT, _RELATIVE_REF_PATH_KINDS)


def parse_uri_reference(data: str) -> Uri:
    """RFC 3986-compliant URI-Reference parser.
    Only use this when you don't know whether you want to parse a URI or a relative-ref.
    """
    try:
        return parse_uri(data)
    except ValueError:
        pass
    try:
        return parse_relative_ref(data)
    except ValueError:
        pass
    raise ValueError("failed to parse URI-Reference")


@dataclasses.dataclass(frozen=True)
class SplitReference:
    """The pieces of a scheme-specific part. Nothing in here has been validated."""

    userinfo: str | None
    host: str | None
    port: str | None
    path: str
    query: str | None
    fragment: str | None


def split_reference(data: str) -> SplitReference:
    """Splits "//userinfo@host:port/path?query#fragment" the way RFC 3986 Appendix B does.
    Never fails, so it can be used on templates.
    """
    m: re.Match[str] | None = _SPLIT_PAT.match(data)
    assert m is not None  # every string matches

    userinfo: str | None = None
    host: str | None = None
    port: str | None = None
    authority: str | None = m["authority"]
    if authority is not None:
        userinfo, at, hostport = authority.rpartition("@")
        if len(at) == 0:
            userinfo = None
        host, colon, port = hostport.rpartition(":")
        # A port is digits or a single {name} template variable.
        if len(colon) == 0 or not re.fullmatch(rf"{_DIGIT}*|{VARIABLE}", port):
            host, port = hostport, None
        if len(host) == 0:
            host = None

    return SplitReference(
        userinfo=userinfo,
        host=host,
        port=port,
        path=m["path"],
        query=m["query"],
        fragment=m["fragment"],
    )
