from __future__ import annotations

import pytest

from uribuilder import UriBuilder
from uribuilder.errors import InvalidArgumentError
from uribuilder.resources import (
    AmbiguousPathError,
    IllegalPathError,
    MissingAnnotationError,
    NoPathError,
    find_method_path_template,
    get_class_path_template,
    get_method_path_template,
    path,
)


@path("/cars")
class Cars:
    @path("{id}")
    def get(self) -> None: ...

    @path("{id}/owner")
    def owner(self) -> None: ...

    @staticmethod
    @path("search")
    def search() -> None: ...

    def plain(self) -> None: ...


class Unannotated:
    pass


class Base:
    @path("a")
    def m(self) -> None: ...


@path("sub")
class Sub(Base):
    @path("b")
    def m(self) -> None: ...


@path("same")
class Same(Base):
    @path("a")
    def m(self) -> None: ...


class Inherits(Cars):
    pass


def test_class_template() -> None:
    assert get_class_path_template(Cars) == "/cars"


def test_class_template_is_not_inherited() -> None:
    with pytest.raises(MissingAnnotationError):
        get_class_path_template(Inherits)


def test_class_template_missing() -> None:
    with pytest.raises(MissingAnnotationError):
        get_class_path_template(Unannotated)


def test_class_template_needs_a_class() -> None:
    with pytest.raises(IllegalPathError):
        get_class_path_template(Cars.get)  # type: ignore[arg-type]


def test_path_template_must_be_a_str() -> None:
    with pytest.raises(IllegalPathError):
        path(42)  # type: ignore[arg-type]


def test_method_template() -> None:
    assert get_method_path_template(Cars.get) == "{id}"
    assert get_method_path_template(Cars().get) == "{id}"
    with pytest.raises(MissingAnnotationError):
        get_method_path_template(Cars.plain)


def test_find_method_template() -> None:
    assert find_method_path_template(Cars, "owner") == "{id}/owner"
    assert find_method_path_template(Cars, "search") == "search"
    assert find_method_path_template(Same, "m") == "a"


def test_find_method_template_ambiguous() -> None:
    with pytest.raises(AmbiguousPathError):
        find_method_path_template(Sub, "m")


@pytest.mark.parametrize("name", ["plain", "nope"])
def test_find_method_template_none(name: str) -> None:
    with pytest.raises(NoPathError):
        find_method_path_template(Cars, name)


def test_builder_path_from_class() -> None:
    assert str(UriBuilder().path(Cars)) == "cars"
    assert str(UriBuilder.from_resource(Cars).path("x")) == "cars/x"


def test_builder_path_from_class_and_method() -> None:
    b = UriBuilder().scheme("http").host("h").path(Cars, "get")
    assert str(b.build("42")) == "http://h/cars/42"


def test_builder_path_from_methods() -> None:
    assert str(UriBuilder().path(Cars.get, Cars.owner)) == "{id}/{id}/owner"
    assert str(UriBuilder().path(Cars.get, Cars.owner).build("7")) == "7/7/owner"


@pytest.mark.parametrize(
    ("args", "cause"),
    [
        ((Unannotated,), MissingAnnotationError),
        ((Cars, "plain"), NoPathError),
        ((Cars, "nope"), NoPathError),
        ((Sub, "m"), AmbiguousPathError),
        ((Cars.plain,), MissingAnnotationError),
    ],
)
def test_builder_surfaces_lookup_errors(args: tuple, cause: type) -> None:
    b = UriBuilder().path("keep")
    with pytest.raises(InvalidArgumentError) as exc:
        b.path(*args)
    assert isinstance(exc.value.__cause__, cause)
    assert str(b) == "keep"


@pytest.mark.parametrize("args", [(Cars, None), (Cars, "get", "owner")])
def test_builder_rejects_bad_method_names(args: tuple) -> None:
    with pytest.raises(InvalidArgumentError):
        UriBuilder().path(*args)
