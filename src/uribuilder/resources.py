"""uribuilder.resources
Path templates on resource classes and methods, as read by UriBuilder.path()

    @path("/cars")
    class Cars:
        @path("{id}")
        def get(self, id): ...

    UriBuilder().path(Cars, "get").build("42")  # cars/42
"""

import inspect

from typing import Any, Callable, Iterator, TypeVar

_ATTR: str = "__uri_path__"

T = TypeVar("T")


class PathTemplateError(Exception):
    """Base class for errors while looking up a path template."""


class MissingAnnotationError(PathTemplateError):
    pass


class IllegalPathError(PathTemplateError):
    pass


class AmbiguousPathError(PathTemplateError):
    pass


class NoPathError(PathTemplateError, LookupError):
    pass


def path(template: str) -> Callable[[T], T]:
    """Marks a class or function with the path template it is reachable under."""
    if not isinstance(template, str):
        raise IllegalPathError(f"a path template must be a str, not {type(template).__name__}")

    def decorate(target: T) -> T:
        setattr(target, _ATTR, template)
        return target

    return decorate


def _template_of(target: Any) -> str | None:
    # Only look at the object itself, a subclass does not inherit the path of its parent.
    template: Any = vars(target).get(_ATTR) if hasattr(target, "__dict__") else None
    if template is not None and not isinstance(template, str):
        raise IllegalPathError(f"the path of {target!r} is not a str: {template!r}")
    return template


def get_class_path_template(resource: type) -> str:
    if not inspect.isclass(resource):
        raise IllegalPathError(f"{resource!r} is not a class")
    template: str | None = _template_of(resource)
    if template is None:
        raise MissingAnnotationError(f"the resource class {resource.__qualname__} has no @path")
    return template


def get_method_path_template(method: Callable[..., Any]) -> str:
    template: str | None = _template_of(getattr(method, "__func__", method))
    if template is None:
        raise MissingAnnotationError(f"the method {getattr(method, '__qualname__', method)!r} has no @path")
    return template


def _methods_named(resource: type, name: str) -> Iterator[Callable[..., Any]]:
    for klass in inspect.getmro(resource):
        member: Any = vars(klass).get(name)
        if member is not None and callable(getattr(member, "__func__", member)):
            yield member


def find_method_path_template(resource: type, name: str) -> str:
    """The single path template of the methods called name along the MRO of resource."""
    found: str | None = None
    for method in _methods_named(resource, name):
        try:
            template: str = get_method_path_template(method)
        except MissingAnnotationError:
            continue
        if found is not None and found != template:
            raise AmbiguousPathError(
                f"the class {resource.__qualname__} has more than one method named {name!r} with a @path"
            )
        found = template
    if found is None:
        raise NoPathError(f"the class {resource.__qualname__} has no method named {name!r} with a @path")
    return found
