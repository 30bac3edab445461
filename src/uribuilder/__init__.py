__version__ = "0.1"

from .builder import UriBuilder
from .encoding import ComponentKind, check_scheme, encode_or_check, escape_braces, full_query
from .errors import IllegalStateError, InvalidArgumentError, PreconditionError, TemplateResolutionError, UriBuilderError, UriSyntaxError
from .parse import SplitReference, Uri, parse_relative_ref, parse_uri, parse_uri_reference, split_reference
from .resources import AmbiguousPathError, IllegalPathError, MissingAnnotationError, NoPathError, PathTemplateError, path
from .segment import PathSegment
from .template import IteratorResolver, LiteralToken, MappingResolver, NoVariableResolver, Template, VariableResolver, VariableToken
