from __future__ import annotations

import pytest

from uribuilder.errors import TemplateResolutionError
from uribuilder.template import (
    IteratorResolver,
    LiteralToken,
    MappingResolver,
    NoVariableResolver,
    Template,
    VariableToken,
)


def test_parse_tokens() -> None:
    t = Template.parse("a{b}c{d}")
    assert t.tokens == (LiteralToken("a"), VariableToken("b"), LiteralToken("c"), VariableToken("d"))
    assert str(t) == "a{b}c{d}"


def test_parse_empty() -> None:
    assert Template.parse("").tokens == ()


@pytest.mark.parametrize("source", ["{}", "{a b}", "{", "}", "a}{b", "{/x}"])
def test_malformed_braces_are_literal(source: str) -> None:
    t = Template.parse(source)
    assert t.tokens == (LiteralToken(source),)
    assert t.variable_names == ()


def test_variable_names_in_first_occurrence_order() -> None:
    assert Template.parse("{b}/{a}/{b}").variable_names == ("b", "a")


def test_format_copies_literals_and_values() -> None:
    t = Template.parse("http://{host}/x/{id}")
    assert t.format(MappingResolver({"host": "h", "id": 42})) == "http://h/x/42"


def test_format_without_variables_never_calls_resolver() -> None:
    assert Template.parse("a/b").format(NoVariableResolver()) == "a/b"


def test_no_variable_resolver_rejects() -> None:
    with pytest.raises(TemplateResolutionError) as exc:
        Template.parse("a/{b}").format(NoVariableResolver())
    assert exc.value.variable == "b"
    assert exc.value.reason == "no-variables"


@pytest.mark.parametrize("values", [{}, {"a": None}, {"b": "x"}])
def test_mapping_resolver_missing(values: dict) -> None:
    with pytest.raises(TemplateResolutionError) as exc:
        Template.parse("{a}").format(MappingResolver(values))
    assert exc.value.variable == "a"
    assert exc.value.reason == "missing"


def test_iterator_resolver_reuses_first_value() -> None:
    t = Template.parse("{a}/{b}/{a}")
    assert t.format(IteratorResolver(["x", "y", "z"])) == "x/y/x"


def test_iterator_resolver_exhausted() -> None:
    with pytest.raises(TemplateResolutionError) as exc:
        Template.parse("{a}/{b}/{c}").format(IteratorResolver(["x", "y"]))
    assert exc.value.variable == "c"
    assert exc.value.reason == "exhausted"


def test_iterator_resolver_rejects_none() -> None:
    with pytest.raises(TemplateResolutionError) as exc:
        Template.parse("{a}").format(IteratorResolver([None]))
    assert exc.value.reason == "missing"


def test_iterator_resolver_state_is_per_instance() -> None:
    t = Template.parse("{a}-{b}")
    assert t.format(IteratorResolver([1, 2])) == "1-2"
    assert t.format(IteratorResolver([3, 4])) == "3-4"
