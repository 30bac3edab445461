"""uribuilder.segment
A path segment and the matrix parameters attached to it
"""

from typing import Self
from urllib.parse import unquote

from .encoding import ComponentKind, encode_or_check, encode_or_check_literal, escape_braces


class PathSegment:
    """One element of a path, e.g. ``cars;color=red;color=blue`` in ``/shop/cars;color=red;color=blue``.

    Matrix parameters keep their insertion order and may repeat a name.
    """

    def __init__(self: Self, text: str, matrix_params: list[tuple[str, str]] | None = None) -> None:
        self.text: str = text
        self.matrix_params: list[tuple[str, str]] = matrix_params if matrix_params is not None else []

    @classmethod
    def parse(
        cls,
        raw: str,
        encode: bool,
        decode_matrix: bool = False,
        decode_path: bool = False,
    ) -> Self:
        """Splits "text;name=value;..." into the segment text and its matrix parameters.

        The decode flags percent-decode the respective parts before they are encoded again.
        """
        text, semicolon, matrix = raw.partition(";")
        if decode_path:
            text = unquote(text)
        text = encode_or_check(text, ComponentKind.PATH_SEGMENT, encode)
        if len(semicolon) == 0:
            return cls(text)
        return cls(text, cls.parse_matrix_params(matrix, encode, decode=decode_matrix))

    @staticmethod
    def parse_matrix_params(matrix: str, encode: bool, decode: bool = False) -> list[tuple[str, str]]:
        """Parses "a=1;b=2;a=3". A name without "=" gets an empty value."""
        result: list[tuple[str, str]] = []
        for chunk in matrix.split(";"):
            if len(chunk) == 0:
                continue
            name, _, value = chunk.partition("=")
            if decode:
                name, value = unquote(name), unquote(value)
            result.append(
                (
                    encode_or_check_literal(name, ComponentKind.MATRIX_NAME, encode),
                    encode_or_check_literal(value, ComponentKind.MATRIX_VALUE, encode),
                )
            )
        return result

    def add_matrix_param(self: Self, name: str, value: str) -> None:
        """Expects name and value to be encoded already."""
        self.matrix_params.append((name, value))

    def clone(self: Self) -> Self:
        return self.__class__(self.text, list(self.matrix_params))

    def render(self: Self, buffer: list[str], convert_braces: bool = False) -> None:
        """Appends text;name=value... to buffer. With convert_braces, braces outside {name} become %7B/%7D."""
        convert = escape_braces if convert_braces else _identity
        buffer.append(convert(self.text))
        for name, value in self.matrix_params:
            buffer.append(f";{convert(name)}={convert(value)}")

    def __str__(self: Self) -> str:
        buffer: list[str] = []
        self.render(buffer)
        return "".join(buffer)

    def __repr__(self: Self) -> str:
        return f"{self.__class__.__name__}(text={self.text!r}, matrix_params={self.matrix_params!r})"

    def __eq__(self: Self, other: object) -> bool:
        if not isinstance(other, PathSegment):
            return NotImplemented
        return self.text == other.text and self.matrix_params == other.matrix_params


def _identity(text: str) -> str:
    return text
