"""
Helmsman descriptor model.

Overview
- A component is any class whose public plain functions are the operations a
  command line can select. describe(type) reflects it once into an immutable
  graph:

      ComponentDescriptor ──< MethodDescriptor ──< ParameterDescriptor

- Metadata markers
  • ShortName("st"): alternative name for an operation, a parameter or a component.
  • Description("..."): one line of help text.
  Both work as decorators (on functions and classes) and as typing.Annotated
  metadata on parameters. A bare string inside Annotated metadata is read as
  a description, and a missing description falls back to the first paragraph
  of the docstring.

Exposure rules
- Every class in the MRO except object is inspected; the most-derived class
  defining a name decides what that name is (an override hides its base).
- Exposed: public (no leading underscore) plain functions, async ones included.
- Hidden: properties, classmethods, staticmethods, nested classes, private
  and dunder names, and anything declared on object.

Parameter rules
- Positional and positional-or-keyword parameters bind in declaration order.
- *args is the variadic catch-all; its annotation is the element type and
  its default is an empty tuple.
- A parameter with a default is optional.
- Optional[T] (T | None) is described as T. Unannotated parameters take the
  type of their default when it is not None, otherwise str.
- A parameter whose element type is exactly bool is boolean.
- A sequence or set annotation on anything but *args is rejected when strict
  (the default) and described as an ordinary scalar otherwise.
- Keyword-only and **kwargs parameters are rejected.

Errors
- DuplicateOperationError, DuplicateParameterError and UnsupportedParameterError
  are raised while describing, never while looking things up. Lookups are
  therefore at-most-one-match by construction.
"""
import builtins
import functools
import inspect
import itertools
import operator
import re
import types
import typing
from collections.abc import Sequence, Set

from .faults import DuplicateOperationError, DuplicateParameterError, UnsupportedParameterError, DefinitionError
from .utils import *


class DescriptorType(type):
    """
    Metaclass giving descriptor classes their introspection plumbing.

    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - Names listed in __introspectable__ become read-only properties over the
      matching private fields (see mirror()).
    - __displayable__ (if set) narrows what __repr__/__rich_repr__ show;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _validate_text(cls, value, /):
    if not isinstance(value, str):
        raise TypeError(f"{cls.__typename__} value must be a string")
    if not (value := value.strip()):
        raise ValueError(f"{cls.__typename__} value cannot be empty")
    return value


class ShortName(metaclass=DescriptorType):
    """
    Alternative name for an operation, a parameter or a component.

        class Svn:
            @ShortName("st")
            def status(self): ...

            def commit(self, path: Annotated[str, ShortName("p")]): ...
    """
    __introspectable__ = ("value",)

    def __init__(self, value, /):
        value = _validate_text(type(self), value)
        if not re.fullmatch(r"\w+", value):
            raise ValueError(f"{type(self).__typename__} value must be made of word characters")
        self._value = value

    def __call__(self, target, /):
        if not callable(target):
            raise TypeError(f"@{type(self).__name__}() must be applied to a function or a class")
        target.__shortname__ = self._value
        return target


class Description(metaclass=DescriptorType):
    """
    One line of help text for an operation, a parameter or a component.
    """
    __introspectable__ = ("value",)

    def __init__(self, value, /):
        self._value = _validate_text(type(self), value)

    def __call__(self, target, /):
        if not callable(target):
            raise TypeError(f"@{type(self).__name__}() must be applied to a function or a class")
        target.__description__ = self._value
        return target


def _summary(object, /):
    """First paragraph of a docstring, folded onto one line (or None)."""
    if not (doc := inspect.getdoc(object)):
        return None
    return " ".join(doc.strip().split("\n\n", 1)[0].split()) or None


def _unwrap(annotation, /):
    """
    Split an annotation into (type, shortname, description).

    Annotated metadata is scanned for ShortName/Description markers and bare
    strings; Optional[T] collapses to T.
    """
    shortname = description = None
    if typing.get_origin(annotation) is typing.Annotated:
        for metadata in annotation.__metadata__:
            match metadata:
                case ShortName():
                    shortname = metadata.value
                case Description():
                    description = metadata.value
                case str() if metadata.strip():
                    description = metadata.strip()
        annotation = annotation.__origin__
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        arguments = [argument for argument in typing.get_args(annotation) if argument is not type(None)]
        if len(arguments) == 1:
            annotation, = arguments
    return annotation, shortname, description


def _is_array(annotation, /):
    origin = typing.get_origin(annotation) or annotation
    return (
        isinstance(origin, type)
        and issubclass(origin, (Sequence, Set))
        and not issubclass(origin, (str, bytes, bytearray))
    )


class ParameterDescriptor(metaclass=DescriptorType):
    """
    One formal parameter of an operation.

    Properties
    - name / shortname / description: lookup and help metadata.
    - type: the declared type (Optional and Annotated unwrapped).
    - element: the conversion target (equals type for scalars, the *args
      annotation for the variadic catch-all).
    - position: zero-based index among the operation's parameters.
    - optional / variadic / boolean: binding flags.
    - default: the declared default, () for the catch-all, Unset when required.
    """
    __introspectable__ = (
        "name",
        "shortname",
        "description",
        "type",
        "element",
        "position",
        "optional",
        "variadic",
        "boolean",
        "default",
        "method",
    )
    __displayable__ = (
        "name",
        "shortname",
        "type",
        "optional",
        "variadic",
        "default",
    )

    def __init__(self, method, parameter, position, /, *, strict=True):
        if not isinstance(parameter, inspect.Parameter):
            raise TypeError(f"{type(self).__typename__} expects an inspect.Parameter")

        where = f"{parameter.name!r} of operation {method.name!r}"
        match parameter.kind:
            case inspect.Parameter.KEYWORD_ONLY:
                raise UnsupportedParameterError(f"keyword-only parameter {where} cannot be bound from a command line")
            case inspect.Parameter.VAR_KEYWORD:
                raise UnsupportedParameterError(f"keyword catch-all {where} cannot be bound from a command line")

        annotation, shortname, description = _unwrap(parameter.annotation)
        variadic = parameter.kind is inspect.Parameter.VAR_POSITIONAL
        optional = variadic or parameter.default is not inspect.Parameter.empty

        if annotation is inspect.Parameter.empty:
            if optional and not variadic and parameter.default is not None:
                annotation = type(parameter.default)
            else:
                annotation = str

        if not variadic and _is_array(annotation) and strict:
            raise UnsupportedParameterError(
                f"parameter {where} is a collection; only the *args catch-all may take many values"
            )

        self._method = method
        self._name = parameter.name
        self._shortname = shortname
        self._description = description
        self._type = tuple[annotation, ...] if variadic else annotation
        self._element = annotation
        self._position = position
        self._optional = optional
        self._variadic = variadic
        self._boolean = annotation is bool
        if variadic:
            self._default = ()
        elif optional:
            self._default = parameter.default
        else:
            self._default = Unset

    @property
    def names(self):
        return tuple(filter(None, (self._name, self._shortname)))

    def is_named(self, name, /):
        return any(namesake(name, candidate) for candidate in self.names)


class MethodDescriptor(metaclass=DescriptorType):
    """
    One invocable operation of a component.

    The callback is the plain function resolved while describing; invoke()
    calls it directly with the bound values in declaration order.
    """
    __introspectable__ = (
        "name",
        "shortname",
        "description",
        "parameters",
        "component",
        "callback",
        "coroutine",
    )
    __displayable__ = (
        "name",
        "shortname",
        "description",
        "parameters",
    )

    def __init__(self, component, callback, /, *, strict=True):
        if not isinstance(callback, types.FunctionType):
            raise TypeError(f"{type(self).__typename__} expects a plain function")

        self._component = component
        self._callback = callback
        self._name = callback.__name__
        self._shortname = getattr(callback, "__shortname__", None)
        self._description = getattr(callback, "__description__", None) or _summary(callback)
        self._coroutine = inspect.iscoroutinefunction(callback)

        try:
            signature = inspect.signature(callback, eval_str=True)
        except NameError as error:
            raise DefinitionError(f"cannot resolve annotations of operation {self._name!r}: {error}") from error

        parameters = list(signature.parameters.values())
        if not parameters or parameters[0].kind not in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            raise DefinitionError(f"operation {self._name!r} must accept the component instance first")

        self._parameters = tuple(
            ParameterDescriptor(self, parameter, position, strict=strict)
            for position, parameter in enumerate(parameters[1:])
        )

        for first, second in itertools.combinations(self._parameters, 2):
            if any(second.is_named(name) for name in first.names):
                raise DuplicateParameterError(
                    f"parameters {first.name!r} and {second.name!r} of operation {self._name!r} share a name"
                )

    @property
    def names(self):
        return tuple(filter(None, (self._name, self._shortname)))

    def is_named(self, name, /):
        return any(namesake(name, candidate) for candidate in self.names)

    def getparameter(self, name, /):
        """Return the parameter named (or short-named) name, or None."""
        for parameter in self._parameters:
            if parameter.is_named(name):
                return parameter
        return None

    def invoke(self, instance, arguments, /):
        """
        Call the operation on instance with one value per parameter.

        The catch-all value (a sequence) is spread into trailing positional
        arguments. Whatever the function returns (an awaitable included) is
        handed back unchanged.
        """
        arguments = list(arguments)
        if len(arguments) != len(self._parameters):
            raise TypeError(
                f"{self._name}() expects {len(self._parameters)} bound values, got {len(arguments)}"
            )
        if self._parameters and self._parameters[-1].variadic:
            *arguments, rest = arguments
            arguments.extend(rest)
        return self._callback(instance, *arguments)


class ComponentDescriptor(metaclass=DescriptorType):
    """
    The operation set of a component type.

    Methods are ordered most-derived class first, then by declaration order
    inside each class.
    """
    __introspectable__ = (
        "type",
        "name",
        "shortname",
        "description",
        "methods",
        "strict",
    )
    __displayable__ = (
        "name",
        "shortname",
        "methods",
    )

    def __init__(self, type, /, *, strict=True):
        if not isinstance(type, builtins.type):
            raise TypeError(f"{builtins.type(self).__typename__} argument must be a class, not {builtins.type(type).__name__}")

        self._type = type
        self._name = type.__name__
        self._shortname = vars(type).get("__shortname__")
        self._description = vars(type).get("__description__") or _summary(type)
        self._strict = bool(strict)

        methods = []
        seen = set()
        for owner in type.__mro__:
            if owner is object:
                continue
            for name, member in vars(owner).items():
                if name in seen:
                    continue
                seen.add(name)
                if name.startswith("_") or not isinstance(member, types.FunctionType):
                    continue
                methods.append(MethodDescriptor(self, member, strict=strict))
        self._methods = tuple(methods)

        for first, second in itertools.combinations(self._methods, 2):
            if any(second.is_named(name) for name in first.names):
                raise DuplicateOperationError(
                    f"operations {first.name!r} and {second.name!r} of component {self._name!r} share a name"
                )

    def getmethod(self, name, /):
        """Return the operation named (or short-named) name, or None."""
        for method in self._methods:
            if method.is_named(name):
                return method
        return None


def describe(object, /, *, strict=True):
    """
    Describe a component type once and share the result.

    Accepts a class or an instance of one. Descriptors are immutable, so the
    cached graph is safe to hand to any number of drivers.
    """
    if object is None:
        raise TypeError("describe() argument must be a class or an instance, not None")
    return _describe(object if isinstance(object, type) else type(object), bool(strict))


@functools.cache
def _describe(component, strict, /):
    return ComponentDescriptor(component, strict=strict)


__all__ = (
    "ShortName",
    "Description",
    "ParameterDescriptor",
    "MethodDescriptor",
    "ComponentDescriptor",
    "describe",
)
