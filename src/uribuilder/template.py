"""uribuilder.template
{name} templates and the resolvers that fill them in
"""

import dataclasses
import re

from typing import Any, Iterable, Mapping, Protocol, Self

from .errors import TemplateResolutionError

# variable = "{" name "}"
# name     = ( ALPHA / DIGIT / "_" ) *( ALPHA / DIGIT / "_" / "." / "-" )
# Anything else between braces is literal text.
_NAME: str = r"[A-Za-z0-9_][A-Za-z0-9_.\-]*"
VARIABLE: str = rf"\{{{_NAME}\}}"
VARIABLE_PAT: re.Pattern[str] = re.compile(rf"\{{(?P<name>{_NAME})\}}")


@dataclasses.dataclass(frozen=True)
class LiteralToken:
    text: str


@dataclasses.dataclass(frozen=True)
class VariableToken:
    name: str


Token = LiteralToken | VariableToken


class VariableResolver(Protocol):
    def resolve(self, name: str) -> str: ...


@dataclasses.dataclass(frozen=True)
class Template:
    """An immutable parse of a string into literal runs and {name} variables."""

    source: str
    tokens: tuple[Token, ...]

    @classmethod
    def parse(cls, source: str) -> Self:
        """Never fails: any string, the empty one included, is a template."""
        tokens: list[Token] = []
        pos: int = 0
        for m in VARIABLE_PAT.finditer(source):
            if m.start() > pos:
                tokens.append(LiteralToken(source[pos : m.start()]))
            tokens.append(VariableToken(m["name"]))
            pos = m.end()
        if pos < len(source):
            tokens.append(LiteralToken(source[pos:]))
        return cls(source, tuple(tokens))

    @property
    def variable_names(self: Self) -> tuple[str, ...]:
        """Distinct variable names, in order of first occurrence."""
        return tuple(dict.fromkeys(t.name for t in self.tokens if isinstance(t, VariableToken)))

    def format(self: Self, resolver: VariableResolver) -> str:
        """Copies literals and resolved values verbatim. Errors from the resolver propagate."""
        result: list[str] = []
        for token in self.tokens:
            if isinstance(token, VariableToken):
                result.append(resolver.resolve(token.name))
            else:
                result.append(token.text)
        return "".join(result)

    def __str__(self: Self) -> str:
        return self.source


class NoVariableResolver:
    """Used when the template must not contain any variable."""

    def resolve(self: Self, name: str) -> str:
        raise TemplateResolutionError(
            f"the UriBuilder must not contain any template variable, found {{{name}}}",
            variable=name,
            reason="no-variables",
        )


class MappingResolver:
    def __init__(self: Self, values: Mapping[str, Any]) -> None:
        self._values: Mapping[str, Any] = values

    def resolve(self: Self, name: str) -> str:
        value: Any = self._values.get(name)
        if value is None:
            raise TemplateResolutionError(
                f"the value map must contain a value for every template variable; {name!r} is missing",
                variable=name,
                reason="missing",
            )
        return str(value)


class IteratorResolver:
    """Hands out the given values in order, one per distinct variable name.

    A name that was already resolved gets the same value again, so
    "{a}/{b}/{a}" with ("x", "y", "z") gives "x/y/x".
    Use a new instance per build.
    """

    def __init__(self: Self, values: Iterable[Any]) -> None:
        self._values: tuple[Any, ...] = tuple(values)
        self._next: int = 0
        self._seen: dict[str, str] = {}

    def resolve(self: Self, name: str) -> str:
        value: str | None = self._seen.get(name)
        if value is None:
            if self._next >= len(self._values):
                raise TemplateResolutionError(
                    f"not enough values: {len(self._values)} given, another one is needed for {{{name}}}",
                    variable=name,
                    reason="exhausted",
                )
            if self._values[self._next] is None:
                raise TemplateResolutionError(
                    f"value {self._next} for {{{name}}} is None", variable=name, reason="missing"
                )
            value = str(self._values[self._next])
            self._next += 1
            self._seen[name] = value
        return value
