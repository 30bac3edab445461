from __future__ import annotations

import pytest

from uribuilder.encoding import ComponentKind, check_scheme, encode_or_check, escape_braces, full_query
from uribuilder.errors import InvalidArgumentError


@pytest.mark.parametrize(
    ("value", "kind", "expected"),
    [
        ("a b", ComponentKind.PATH_SEGMENT, "a%20b"),
        ("{id}", ComponentKind.PATH_SEGMENT, "{id}"),
        ("100%", ComponentKind.PATH_SEGMENT, "100%25"),
        ("ü", ComponentKind.PATH_SEGMENT, "%C3%BC"),
        ("a;b/c", ComponentKind.PATH_SEGMENT, "a%3Bb%2Fc"),
        ("a=b", ComponentKind.MATRIX_NAME, "a%3Db"),
        ("a=b", ComponentKind.MATRIX_VALUE, "a=b"),
        ("a&b", ComponentKind.QUERY_VALUE, "a%26b"),
        ("a=b/c?", ComponentKind.QUERY_VALUE, "a=b/c?"),
        ("a=b", ComponentKind.QUERY_NAME, "a%3Db"),
        ("ex ample/", ComponentKind.HOST, "ex%20ample%2F"),
        ("us er:pw", ComponentKind.USER_INFO, "us%20er:pw"),
        ("frag ment#", ComponentKind.FRAGMENT, "frag%20ment%23"),
    ],
)
def test_encode(value: str, kind: ComponentKind, expected: str) -> None:
    assert encode_or_check(value, kind, True) == expected


@pytest.mark.parametrize("value", ["a%20b", "a{b}", "", "~-._!$&'()*+,=:@"])
def test_check_accepts(value: str) -> None:
    assert encode_or_check(value, ComponentKind.PATH_SEGMENT, False) == value


@pytest.mark.parametrize("value", ["a b", "a%2", "a%zz", "a/b", "a;b", "ü"])
def test_check_rejects(value: str) -> None:
    with pytest.raises(InvalidArgumentError) as exc:
        encode_or_check(value, ComponentKind.PATH_SEGMENT, False)
    assert exc.value.component == "PATH_SEGMENT"


@pytest.mark.parametrize("encode", [True, False])
def test_none_is_rejected(encode: bool) -> None:
    with pytest.raises(InvalidArgumentError, match="must not be None"):
        encode_or_check(None, ComponentKind.FRAGMENT, encode)


def test_non_str_is_rejected() -> None:
    with pytest.raises(InvalidArgumentError):
        encode_or_check(42, ComponentKind.QUERY_VALUE, True)  # type: ignore[arg-type]


@pytest.mark.parametrize("scheme", ["http", "svn+ssh", "a.b-c", "{s}", "http{v}", "X1"])
def test_valid_scheme(scheme: str) -> None:
    assert check_scheme(scheme) == scheme


@pytest.mark.parametrize("scheme", ["1http", "ht tp", "", "http:", "-a", None])
def test_invalid_scheme(scheme: str | None) -> None:
    with pytest.raises(InvalidArgumentError):
        check_scheme(scheme)


def test_escape_braces_keeps_variables() -> None:
    assert escape_braces("{a}/{ b}/{") == "{a}/%7B b%7D/%7B"
    assert escape_braces("{}{x.y-z}}") == "%7B%7D{x.y-z}%7D"
    assert escape_braces("plain") == "plain"


def test_full_query_encode() -> None:
    assert full_query("a=1&b=x y&c", True) == "a=1&b=x%20y&c"


def test_full_query_keeps_template() -> None:
    assert full_query("a={x}&{n}={v}", True) == "a={x}&{n}={v}"


def test_full_query_decode_keeps_parameters_apart() -> None:
    assert full_query("a=%26&b=%3D", True, decode=True) == "a=%26&b=="


def test_full_query_check() -> None:
    assert full_query("a=%20", False) == "a=%20"
    with pytest.raises(InvalidArgumentError):
        full_query("a=x y", False)
