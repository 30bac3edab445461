"""Exception hierarchy for uribuilder."""


class UriBuilderError(Exception):
    """Base exception for everything raised by a UriBuilder."""

    def __init__(self, message: str, *, component: str | None = None) -> None:
        super().__init__(message)
        self.component = component


class InvalidArgumentError(UriBuilderError, ValueError):
    """A setter got None or a value that is not legal for its component.

    The builder is left unchanged.
    """


class IllegalStateError(UriBuilderError, RuntimeError):
    """The operation needs builder state that is not there yet."""


class PreconditionError(UriBuilderError):
    """The builder state cannot form a URI (e.g. a port without a host)."""


class TemplateResolutionError(UriBuilderError, ValueError):
    """A template variable could not be resolved at build time.

    ``reason`` is one of ``"no-variables"``, ``"missing"`` or ``"exhausted"``.
    """

    def __init__(self, message: str, *, variable: str, reason: str) -> None:
        super().__init__(message, component="template")
        self.variable = variable
        self.reason = reason


class UriSyntaxError(UriBuilderError, ValueError):
    """The fully resolved string is not a valid URI-reference."""

    def __init__(self, message: str, *, reference: str) -> None:
        super().__init__(message)
        self.reference = reference
