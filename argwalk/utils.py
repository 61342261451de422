"""
Argwalk utilities shared by the registry, the parser and the results.

- Unset: the "argument omitted" sentinel. Parser entry points accept "" and
  None as real values (an empty program name, an explicit default), so
  omission needs its own marker.
- coalesce(value, default): swap Unset for a default, keep everything else.
- rename(...): give generated callables a readable __name__/__qualname__.
- mirror(name): read-only property over self._<name>; containers come back
  as immutable views so parser state cannot be edited from outside.

    >>> coalesce(Unset, "prog")
    'prog'
    >>> coalesce("", "prog")
    ''
"""
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel.

    - bool(Unset) is False, yet Unset is neither None nor "".
    - UnsetType() always returns the same object; copies and pickles too.
    - str | Unset builds a union usable with isinstance().
    - The type is sealed.
    """

    __slots__ = ()
    __instance = None

    def __new__(cls):
        if UnsetType.__instance is None:
            UnsetType.__instance = super().__new__(cls)
        return UnsetType.__instance

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __or__(self, other, /):
        try:
            return UnsetType | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __reduce__(self):
        return "Unset"

    def __repr__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(object, default=None, /):
    """object, unless it is Unset; then default. Falsey values pass through."""
    if object is Unset:
        return default
    return object


def _rename(function, name, /):
    if not callable(function):
        raise TypeError("rename() target must be callable")
    try:
        function.__name__ = function.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() target must be an updatable callable") from None
    return function


def rename(*parameters):
    """
    Set __name__ and __qualname__ of a callable.

    - rename(function, name) renames in place and returns the function.
    - rename(name) returns a decorator doing the same.

    A non-callable target, a non-string name or a wrong argument count is a
    TypeError.
    """
    if not 1 <= len(parameters) <= 2:
        raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))
    *target, name = parameters
    if not isinstance(name, str):
        raise TypeError("rename() name must be a string")
    if target:
        return _rename(*target, name)

    def decorator(function, /):
        return _rename(function, name)

    return _rename(decorator, "rename")


def _freeze(value, /):
    # str is a Sequence too, but is already immutable
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return MappingProxyType(value)
    if isinstance(value, Sequence):
        return tuple(value)
    if isinstance(value, Set):
        return frozenset(value)
    return value


def mirror(name, /):
    """
    Read-only property serving self._<name>.

    Lists and tuples come back as tuples, dicts as MappingProxyType and sets
    as frozenset. Only the MappingProxyType follows later changes to the
    backing field; tuples and frozensets are snapshots taken on each access.

        class Result:
            positionals = mirror("positionals")  # serves self._positionals
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    attribute = "_" + name

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, attribute))

    return property(getter)


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)
