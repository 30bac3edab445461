from __future__ import annotations

import pytest

from uribuilder.errors import (
    IllegalStateError,
    InvalidArgumentError,
    PreconditionError,
    TemplateResolutionError,
    UriBuilderError,
    UriSyntaxError,
)


@pytest.mark.parametrize(
    ("error", "builtin"),
    [
        (InvalidArgumentError, ValueError),
        (IllegalStateError, RuntimeError),
        (TemplateResolutionError, ValueError),
        (UriSyntaxError, ValueError),
    ],
)
def test_errors_are_catchable_as_builtins(error: type, builtin: type) -> None:
    assert issubclass(error, UriBuilderError)
    assert issubclass(error, builtin)


def test_precondition_error_is_only_a_builder_error() -> None:
    assert issubclass(PreconditionError, UriBuilderError)
    assert not issubclass(PreconditionError, ValueError)


def test_structured_attributes() -> None:
    err = TemplateResolutionError("boom", variable="a", reason="missing")
    assert str(err) == "boom"
    assert err.variable == "a"
    assert err.reason == "missing"
    assert err.component == "template"

    syntax = UriSyntaxError("bad", reference="a b")
    assert syntax.reference == "a b"
    assert syntax.component is None

    assert InvalidArgumentError("x", component="HOST").component == "HOST"
