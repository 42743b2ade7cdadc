"""
Helmsman value conversion.

Contract
- ValueConverter.tryconvert(text, target) -> Conversion
  Either Conversion.success(value) or Conversion.failure(). Input-shape
  problems (bad format, overflow, unsupported value) are failures; any other
  exception is a bug and propagates to the caller.

DefaultValueConverter
- A class-wide registry of converters keyed by target type, plus optional
  per-instance overrides. A converter is called as converter(text, target)
  and returns a Conversion. Conversion.attempt() wraps a plain callable so
  that the expected exception classes become failures.
- Lookup walks the target's MRO (instance overrides first, then the
  registry), so a converter registered for a base class serves subclasses.
- Enum subclasses resolve by member name (case-insensitive), then by value.
- typing.Literal targets accept exactly one of their (stringified) choices.
- Union targets (int | str) try each member in declaration order; the first
  success wins.
- Anything else is attempted as target(text).

Built-ins
- bool: "+", "-", "true", "false" (any case, surrounding whitespace ignored).
- str, int, float, complex, Decimal, Fraction, Path, UUID.
- datetime, date, time: ISO 8601 via fromisoformat.
- object, typing.Any: the text unchanged.

Registering
    >>> @DefaultValueConverter.register(Version)
    ... def _(text, target):
    ...     return Conversion.attempt(Version.parse, text)
"""
import enum
import types
import typing
from abc import ABC, abstractmethod
from datetime import date, datetime, time
from decimal import Decimal
from fractions import Fraction
from pathlib import Path
from typing import NamedTuple
from uuid import UUID

from .utils import Unset, rename

# Input-shape failures (format, argument, overflow, unsupported operation).
EXPECTED = (ValueError, TypeError, ArithmeticError)


class Conversion(NamedTuple):
    """
    Outcome of one conversion attempt.

    Truthy on success. value is meaningful only when succeeded is True.
    """
    succeeded: bool
    value: typing.Any = None

    def __bool__(self):
        return self.succeeded

    @classmethod
    def success(cls, value, /):
        return cls(True, value)

    @classmethod
    def failure(cls):
        return cls(False, None)

    @classmethod
    def attempt(cls, function, /, *args):
        """
        Call function(*args) and wrap its result.

        The expected exception classes become a failure; everything else
        propagates.
        """
        try:
            return cls.success(function(*args))
        except EXPECTED:
            return cls.failure()


class ValueConverter(ABC):
    """
    Converts one raw command-line value into a typed value.
    """

    @abstractmethod
    def tryconvert(self, text, target, /):
        """Return Conversion.success(value) or Conversion.failure()."""
        raise NotImplementedError


_converters = {}


class DefaultValueConverter(ValueConverter):
    """
    Registry-backed converter used by the driver unless another one is given.

    Parameters
    - converters: Unset | Mapping[type, Callable[[str, type], Conversion]]
      Per-instance overrides consulted before the class-wide registry.
    """

    def __init__(self, converters=Unset, /):
        if converters is Unset:
            converters = {}
        try:
            converters = dict(converters)
        except (TypeError, ValueError):
            raise TypeError("DefaultValueConverter() argument must be a mapping of types to converters") from None
        for target, converter in converters.items():
            if not callable(converter):
                raise TypeError(f"converter for {target!r} must be callable")
        self._converters = converters

    @classmethod
    def register(cls, target, converter=Unset, /):
        """
        Register converter(text, target) -> Conversion for target.

        Without a converter, return a decorator that registers the function
        it is applied to. The last registration for a target wins.
        """
        if converter is Unset:
            @rename("register")
            def wrapper(converter, /):
                return cls.register(target, converter)
            return wrapper
        if not callable(converter):
            raise TypeError("register() converter must be callable")
        _converters[target] = converter
        return converter

    @classmethod
    def unregister(cls, target, /):
        """Forget the class-wide converter for target (if any)."""
        _converters.pop(target, None)

    def _lookup(self, target):
        members = isinstance(target, enum.EnumType)
        for owner in getattr(target, "__mro__", (target,)):
            # An IntEnum must not fall through to the int converter.
            if members and not issubclass(owner, enum.Enum):
                continue
            if owner in self._converters:
                return self._converters[owner]
            if owner in _converters:
                return _converters[owner]
        return None

    def tryconvert(self, text, target, /):
        if not isinstance(text, str):
            raise TypeError(f"tryconvert() first argument must be a string, not {type(text).__name__}")

        if target in (object, typing.Any):
            return Conversion.success(text)

        if typing.get_origin(target) is typing.Literal:
            for choice in typing.get_args(target):
                if str(choice) == text:
                    return Conversion.success(choice)
            return Conversion.failure()

        origin = typing.get_origin(target) or target

        if origin in (typing.Union, types.UnionType):
            for member in typing.get_args(target):
                if member is not type(None) and (conversion := self.tryconvert(text, member)):
                    return conversion
            return Conversion.failure()

        if (converter := self._lookup(origin)) is not None:
            return converter(text, origin)

        if isinstance(origin, type) and issubclass(origin, enum.Enum):
            return _convert_enum(text, origin)

        if not callable(origin):
            raise TypeError(f"no converter for {target!r}")

        return Conversion.attempt(origin, text)


def _convert_enum(text, target, /):
    for member in target:
        if member.name.casefold() == text.strip().casefold():
            return Conversion.success(member)
    for member in target:
        if str(member.value) == text:
            return Conversion.success(member)
    return Conversion.failure()


@DefaultValueConverter.register(bool)
def _convert_bool(text, target, /):
    match text.strip().casefold():
        case "+" | "true":
            return Conversion.success(True)
        case "-" | "false":
            return Conversion.success(False)
        case _:
            return Conversion.failure()


@DefaultValueConverter.register(str)
def _convert_str(text, target, /):
    return Conversion.success(text)


for _target in (int, float, complex, Decimal, Fraction, Path, UUID):
    DefaultValueConverter.register(_target, lambda text, target, /: Conversion.attempt(target, text))

for _target in (datetime, date, time):
    DefaultValueConverter.register(_target, lambda text, target, /: Conversion.attempt(target.fromisoformat, text))

del _target


__all__ = (
    "Conversion",
    "ValueConverter",
    "DefaultValueConverter",
)
