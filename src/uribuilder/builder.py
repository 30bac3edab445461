"""uribuilder.builder
A mutable URI builder whose components may contain {name} template variables
"""

import inspect
import logging

from typing import Any, Callable, Iterable, Mapping, Self

from . import resources
from .encoding import ComponentKind, check_scheme, encode_or_check, encode_or_check_literal, escape_braces, full_query
from .errors import IllegalStateError, InvalidArgumentError, PreconditionError, UriSyntaxError
from .parse import SplitReference, Uri, parse_uri_reference, split_reference
from .segment import PathSegment
from .template import IteratorResolver, MappingResolver, NoVariableResolver, Template, VariableResolver

_LOGGER = logging.getLogger(__name__)

_NO_VARIABLES: NoVariableResolver = NoVariableResolver()


class UriBuilder:
    """Builds a URI from scheme, user info, host, port, path segments with matrix
    parameters, query and fragment.

    Every setter returns the builder, so calls can be chained::

        UriBuilder().scheme("http").host("example.org").path("cars", "{id}").build("42")

    With encoding on (the default) setters percent-encode what is not allowed in
    their component. With encoding off they reject it instead. ``{`` and ``}``
    are never encoded: ``{name}`` is a template variable that the build methods
    fill in.

    A builder is not thread safe. Clone it before handing it to someone else.
    """

    def __init__(self: Self, encode: bool = True) -> None:
        self._encode: bool = encode
        self._scheme: str | None = None
        self._user_info: str | None = None
        self._host: str | None = None
        self._port: int = -1
        self._path: list[PathSegment] = []
        # Either a str, or a list of name=value chunks that only this builder references.
        self._query: str | list[str] | None = None
        self._fragment: str | None = None

    @classmethod
    def new_instance(cls) -> Self:
        return cls()

    @classmethod
    def from_uri(cls, uri: Uri | str) -> Self:
        return cls().uri(uri)

    @classmethod
    def from_path(cls, path: str) -> Self:
        return cls().path(path)

    @classmethod
    def from_resource(cls, resource: type) -> Self:
        return cls().path(resource)

    # ------------------------------------------------------------------ setters

    def encode(self: Self, enable: bool) -> Self:
        """Turns automatic encoding on or off for the components set from now on."""
        self._encode = enable
        return self

    def is_encode(self: Self) -> bool:
        return self._encode

    def scheme(self: Self, scheme: str) -> Self:
        self._scheme = check_scheme(scheme)
        return self

    def user_info(self: Self, user_info: str) -> Self:
        self._user_info = encode_or_check(user_info, ComponentKind.USER_INFO, self._encode)
        return self

    def host(self: Self, host: str) -> Self:
        host = encode_or_check(host, ComponentKind.HOST, self._encode)
        if len(host) == 0:
            raise InvalidArgumentError("the host must not be empty", component=ComponentKind.HOST.name)
        self._host = host
        return self

    def port(self: Self, port: int) -> Self:
        """A negative port, usually -1, removes the port."""
        if not isinstance(port, int) or isinstance(port, bool):
            raise InvalidArgumentError(f"the port must be an int, not {port!r}", component="PORT")
        self._port = port
        return self

    def fragment(self: Self, fragment: str) -> Self:
        self._fragment = encode_or_check(fragment, ComponentKind.FRAGMENT, self._encode)
        return self

    def path(self: Self, *segments: Any) -> Self:
        """Appends path segments.

        - ``path("a/b", "c")`` appends strings; "/" inside a string separates segments
          and ";name=value" after a segment adds matrix parameters.
        - ``path(Resource)`` appends the @path template of a resource class.
        - ``path(Resource, "method")`` appends the templates of the class and of its method.
        - ``path(Resource.get, Resource.put)`` appends the templates of the given methods.
        """
        if len(segments) > 0 and inspect.isclass(segments[0]):
            return self._path_from_resource(*segments)
        if len(segments) > 0 and all(callable(s) for s in segments):
            return self._path_from_methods(segments)
        self._path.extend(self._to_segments(segments))
        return self

    def _path_from_resource(self: Self, resource: type, *method_names: Any) -> Self:
        if len(method_names) > 1:
            raise InvalidArgumentError("path() takes a resource class and at most one method name", component="PATH")
        templates: list[str] = [_lookup(resources.get_class_path_template, resource)]
        for method_name in method_names:
            if not isinstance(method_name, str):
                raise InvalidArgumentError(f"the method name must be a str, not {method_name!r}", component="PATH")
            templates.append(_lookup(resources.find_method_path_template, resource, method_name))
        self._path.extend(self._to_segments(templates))
        return self

    def _path_from_methods(self: Self, methods: Iterable[Callable[..., Any]]) -> Self:
        templates: list[str] = [_lookup(resources.get_method_path_template, m) for m in methods]
        self._path.extend(self._to_segments(templates))
        return self

    def replace_path(self: Self, *segments: str | None) -> Self:
        """Replaces the path and every matrix parameter. No argument, None or "" just clears it."""
        if len(segments) == 0 or (len(segments) == 1 and not segments[0]):
            self._path = []
            return self
        self._path = self._to_segments(segments)
        return self

    def _to_segments(self: Self, paths: Iterable[str | None], decode: bool = False) -> list[PathSegment]:
        result: list[PathSegment] = []
        for path in paths:
            if path is None:
                raise InvalidArgumentError("path segments must not be None", component=ComponentKind.PATH_SEGMENT.name)
            if not isinstance(path, str):
                raise InvalidArgumentError(
                    f"path segments must be str, not {type(path).__name__}", component=ComponentKind.PATH_SEGMENT.name
                )
            if path.startswith("/"):
                path = path[1:]
            if len(path) == 0:
                continue
            for part in path.split("/"):
                result.append(PathSegment.parse(part, self._encode, decode_matrix=decode, decode_path=decode))
        return result

    def matrix_param(self: Self, name: str, value: Any) -> Self:
        """Appends name=value to the matrix parameters of the last path segment."""
        name = encode_or_check_literal(name, ComponentKind.MATRIX_NAME, self._encode)
        value = encode_or_check_literal(_str_if_not_none(value), ComponentKind.MATRIX_VALUE, self._encode)
        self._last_segment().add_matrix_param(name, value)
        return self

    def replace_matrix_params(self: Self, matrix: str | None) -> Self:
        """Replaces the matrix parameters of the last path segment; None or "" removes them."""
        _check_str_or_none(matrix, "MATRIX")
        last: PathSegment = self._last_segment()
        if not matrix:
            last.matrix_params = []
        else:
            last.matrix_params = PathSegment.parse_matrix_params(matrix, self._encode)
        return self

    def _last_segment(self: Self) -> PathSegment:
        if len(self._path) == 0:
            raise IllegalStateError("there is no path segment to add matrix parameters to; call path() first")
        return self._path[-1]

    def query_param(self: Self, name: str, value: Any) -> Self:
        """Appends name=value to the query."""
        name = encode_or_check(name, ComponentKind.QUERY_NAME, self._encode)
        value = encode_or_check(_str_if_not_none(value), ComponentKind.QUERY_VALUE, self._encode)
        chunk: str = f"{name}={value}"
        if self._query is None:
            self._query = [chunk]
        elif isinstance(self._query, list):
            self._query.append(chunk)
        else:
            self._query = [self._query, chunk]
        return self

    def replace_query_params(self: Self, query: str | None) -> Self:
        """Replaces the whole query; None or "" removes it."""
        _check_str_or_none(query, ComponentKind.QUERY.name)
        if not query:
            self._query = None
        else:
            self._query = full_query(query, self._encode)
        return self

    def scheme_specific_part(self: Self, ssp: str) -> Self:
        """Sets user info, host, port, path, query and fragment from "//userinfo@host:port/path?query#fragment".

        Components missing from ssp are removed from the builder. Scheme and encoding stay as they are.
        """
        if not isinstance(ssp, str):
            raise InvalidArgumentError(
                f"the scheme specific part must be a str, not {ssp!r}", component="SCHEME_SPECIFIC_PART"
            )
        parts: SplitReference = split_reference(ssp)
        user_info: str | None = self._encode_if_not_none(parts.userinfo, ComponentKind.USER_INFO)
        host: str | None = self._encode_if_not_none(parts.host, ComponentKind.HOST)
        port: int = -1
        if parts.port and parts.port.isdigit():
            port = int(parts.port)
        elif parts.port:
            # The port is an int, so a {name} port stays on the host text until build() fills it in.
            if host is None:
                raise InvalidArgumentError(f"the port {parts.port} needs a host", component="PORT")
            host = f"{host}:{parts.port}"
        path: list[PathSegment] = self._to_segments([parts.path])
        query: str | None = full_query(parts.query, self._encode) if parts.query else None
        fragment: str | None = self._encode_if_not_none(parts.fragment, ComponentKind.FRAGMENT)

        self._user_info = user_info
        self._host = host
        self._port = port
        self._path = path
        self._query = query
        self._fragment = fragment
        return self

    def uri(self: Self, uri: Uri | str) -> Self:
        """Copies every component present in uri, replacing what the builder holds for it.

        With encoding on, components are read percent-decoded and encoded again.
        With encoding off, they are taken as they are written in uri.
        """
        if uri is None:
            raise InvalidArgumentError("the URI must not be None", component="URI")
        if isinstance(uri, str):
            try:
                uri = parse_uri_reference(uri)
            except ValueError as e:
                raise InvalidArgumentError(f"{uri!r} is not a URI-reference", component="URI") from e

        scheme: str | None = check_scheme(uri.scheme) if uri.scheme is not None else self._scheme
        if self._encode:
            user_info: str | None = uri.userinfo
            host: str | None = uri.host
            fragment: str | None = uri.fragment
        else:
            user_info = uri.raw_userinfo
            host = uri.raw_host
            fragment = uri.raw_fragment
        # The raw form keeps "/", ";", "&" and "=" apart from their encoded twins; decoding happens per part.
        path: list[PathSegment] = self._to_segments([uri.raw_path], decode=self._encode)

        new_user_info: str | None = self._encode_if_not_none(user_info, ComponentKind.USER_INFO)
        new_host: str | None = self._encode_if_not_none(host or None, ComponentKind.HOST)
        new_query: str | None = None
        if uri.raw_query is not None:
            new_query = full_query(uri.raw_query, self._encode, decode=self._encode)
        new_fragment: str | None = self._encode_if_not_none(fragment, ComponentKind.FRAGMENT)

        self._scheme = scheme
        if new_user_info is not None:
            self._user_info = new_user_info
        if new_host is not None:
            self._host = new_host
        if uri.port is not None:
            self._port = uri.port
        self._path = path
        if new_query is not None:
            self._query = new_query
        if new_fragment is not None:
            self._fragment = new_fragment
        return self

    def _encode_if_not_none(self: Self, value: str | None, kind: ComponentKind) -> str | None:
        if value is None:
            return None
        return encode_or_check(value, kind, self._encode)

    # ------------------------------------------------------------------ copies

    def clone(self: Self) -> Self:
        """An independent copy. Changing one builder afterwards never shows in the other."""
        other: Self = self.__class__(encode=self._encode)
        other._scheme = self._scheme
        other._user_info = self._user_info
        other._host = self._host
        other._port = self._port
        other._path = [segment.clone() for segment in self._path]
        query: str | None = self._freeze_query()
        # The clone is the one that usually changes next, so it gets a buffer of its own.
        other._query = [query] if query is not None else None
        other._fragment = self._fragment
        return other

    def __copy__(self: Self) -> Self:
        return self.clone()

    def _freeze_query(self: Self) -> str | None:
        if isinstance(self._query, list):
            self._query = "&".join(self._query)
        return self._query

    # ------------------------------------------------------------------ output

    def build(self: Self, *values: Any, **named: Any) -> Uri:
        """Builds the URI, filling in template variables.

        - ``build()``: there must not be any variable left.
        - ``build({"id": 42})`` or ``build(id=42)``: values by name.
        - ``build("x", "y")``: values by position; every occurrence of a name
          gets the value of its first occurrence, so "{a}/{b}/{a}" with
          ("x", "y", "z") gives "x/y/x".

        Does not change the builder and can be called any number of times.
        """
        if len(values) == 1 and isinstance(values[0], Mapping):
            return self.build_from_map({**values[0], **named})
        if len(named) > 0:
            if len(values) > 0:
                raise InvalidArgumentError("build() takes positional or named values, not both", component="TEMPLATE")
            return self.build_from_map(named)
        if len(values) > 0:
            return self.build_from_values(*values)
        return self._build(_NO_VARIABLES, convert_braces=True)

    def build_from_map(self: Self, values: Mapping[str, Any]) -> Uri:
        if values is None:
            raise InvalidArgumentError("the value map must not be None", component="TEMPLATE")
        return self._build(MappingResolver(values), convert_braces=False)

    def build_from_values(self: Self, *values: Any) -> Uri:
        return self._build(IteratorResolver(values), convert_braces=False)

    def _build(self: Self, resolver: VariableResolver, convert_braces: bool) -> Uri:
        self._check_authority()
        template: Template = Template.parse(self._to_string(convert_braces))
        _LOGGER.debug("building %r with %s", template.source, type(resolver).__name__)
        reference: str = template.format(resolver)
        try:
            return parse_uri_reference(reference)
        except ValueError as e:
            raise UriSyntaxError(f"could not build a URI from {reference!r}", reference=reference) from e

    def _check_authority(self: Self) -> None:
        if self._host is not None:
            return
        if self._port >= 0:
            raise PreconditionError("a host is required when a port is set", component=ComponentKind.HOST.name)
        if self._user_info is not None:
            raise PreconditionError("a host is required when user info is set", component=ComponentKind.HOST.name)

    def to_string(self: Self) -> str:
        """The URI as it stands, variables not filled in and nothing checked."""
        return self._to_string(convert_braces=False)

    def __str__(self: Self) -> str:
        return self.to_string()

    def __repr__(self: Self) -> str:
        return f"{self.__class__.__name__}({self.to_string()!r}, encode={self._encode})"

    def _to_string(self: Self, convert_braces: bool) -> str:
        convert: Callable[[str], str] = escape_braces if convert_braces else _identity
        result: list[str] = []
        if self._scheme is not None:
            result.append(f"{convert(self._scheme)}://")
        if self._user_info is not None:
            result.append(f"{convert(self._user_info)}@")
        if self._host is not None:
            result.append(convert(self._host))
        if self._port >= 0:
            result.append(f":{self._port}")
        relative: bool = len(result) == 0
        for index, segment in enumerate(self._path):
            if index > 0 or not relative:
                result.append("/")
                segment.render(result, convert_braces)
                continue
            # In the first segment of a relative reference a ":" would end a scheme.
            first: list[str] = []
            segment.render(first, convert_braces)
            result.append("".join(first).replace(":", "%3A"))
        query: str | None = self._freeze_query()
        if query is not None:
            result.append(f"?{convert(query)}")
        if self._fragment is not None:
            result.append(f"#{convert(self._fragment)}")
        return "".join(result)


def _lookup(function: Callable[..., str], *args: Any) -> str:
    """Calls a resources lookup, turning its errors into InvalidArgumentError."""
    try:
        return function(*args)
    except resources.PathTemplateError as e:
        raise InvalidArgumentError(str(e), component="PATH") from e


def _check_str_or_none(value: Any, component: str) -> None:
    if value is not None and not isinstance(value, str):
        raise InvalidArgumentError(f"{component.lower()} must be a str, not {type(value).__name__}", component=component)


def _str_if_not_none(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _identity(text: str) -> str:
    return text
