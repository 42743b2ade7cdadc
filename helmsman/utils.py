"""
Helmsman utilities (small shared helpers).

Scope
- Building blocks used by the descriptor, driver and usage layers so that
  "not provided", name matching and read-only exposure behave the same way
  everywhere.

Overview
- UnsetType / Unset
  • Singleton sentinel meaning "value not provided", distinct from None.
  • Falsey, printable as "Unset" and sealed against subclassing.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; every other value (None included) is kept.

- rename(callable, name) / @rename("name")
  • Give generated callables a stable __name__/__qualname__.

- mirror("attr")
  • Read-only property over self._attr that hands out immutable views
    (tuple, frozenset, mappingproxy) instead of the backing containers.

- namesake(first, second)
  • Case-insensitive name comparison used by every descriptor lookup.
    An empty or absent name never matches anything.

- ordinal(number)
  • "first".."tenth", then "11th", "21st", ... for diagnostics.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> namesake("Commit", "COMMIT")
    True
    >>> namesake("", "")
    False
    >>> ordinal(3), ordinal(22)
    ('third', '22nd')
"""
import builtins
import functools
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Sentinel type representing a value that was not provided.

    Used wherever None is a legitimate caller value (a parameter default, an
    explicit "no arguments" vector) and the API must still tell "omitted"
    apart from "given as None". The single instance is exposed as Unset.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns object unless it is Unset, in which case default is returned.
    Falsey values like None, 0, "" or () are preserved as they are.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Return an immutable view of a container, leaving other values untouched.

    - Mapping: a mappingproxy over the very same mapping (keys keep identity).
    - Set: a frozenset copy.
    - Sequence (non-string): a tuple copy.
    """
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    elif isinstance(object, Set):
        return frozenset(object)
    elif isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    else:
        return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private field "_{name}".

    Containers are exposed through immutable views so that descriptor graphs
    cannot be changed through their public attributes after construction.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


def namesake(first, second, /):
    """
    Compare two names the way every lookup in the package does.

    Matching is case-insensitive (casefold). A missing (None/Unset) or empty
    name on either side never matches, so a descriptor without a short name
    cannot be selected by an empty query.
    """
    if not first or not second:
        return False
    if not isinstance(first, str) or not isinstance(second, str):
        return False
    return first.casefold() == second.casefold()


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first".."tenth").
    - Other numbers use numeric ordinals with English suffixes.
    """
    if not isinstance(number, int):
        raise TypeError("ordinal() argument must be an integer")
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, ...)
    if 10 < number % 100 < 20:
        return f"{number}th"
    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "namesake",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
