"""
Argwalk parse results.

What this module provides
- ParsedOption: immutable snapshot of one option's occurrences (owning flag,
  storage key and the ordered tuple of string values).
- ParseResult: read-only mapping from storage key to ParsedOption plus the
  ordered positional tokens of one parse call.
- apply_selection(): pure resolution of a repeated occurrence against what
  was already stored under the same key.

Typed extraction
- ParsedOption.value_as(type, index=0) converts a stored string:
  • fixed-width ctypes integers (c_uint8, c_int32, c_size_t, ...) saturate to
    the type's range and come back as a plain int;
  • int keeps the exact value; integers accept C-style prefixes (0x.., 0..);
  • float / c_double / c_longdouble parse as float; c_float saturates to ±FLT_MAX;
  • bool / c_bool is true for any non-zero integer;
  • any other type is built from the string: type(value).
"""
import ctypes
import functools
import operator
import re
from collections.abc import Mapping
from types import MappingProxyType

from .options import Selection
from .utils import mirror

_INTEGERS = frozenset({
    ctypes.c_byte, ctypes.c_ubyte,
    ctypes.c_short, ctypes.c_ushort,
    ctypes.c_int, ctypes.c_uint,
    ctypes.c_long, ctypes.c_ulong,
    ctypes.c_longlong, ctypes.c_ulonglong,
    ctypes.c_int8, ctypes.c_uint8,
    ctypes.c_int16, ctypes.c_uint16,
    ctypes.c_int32, ctypes.c_uint32,
    ctypes.c_int64, ctypes.c_uint64,
    ctypes.c_size_t, ctypes.c_ssize_t,
})

_FLT_MAX = 3.4028234663852886e+38

# C base-0 integer literal: hexadecimal, octal (leading zero) or decimal
_INTEGER = re.compile(r"\s*(?P<sign>[+-]?)(?:0[xX](?P<hex>[0-9a-fA-F]+)|(?P<oct>0[0-7]*)|(?P<dec>[1-9][0-9]*))\s*")


def _strtoi(text, /):
    if not (match := _INTEGER.fullmatch(text)):
        raise ValueError("invalid integer literal %r" % text)
    if match["hex"]:
        value = int(match["hex"], 16)
    elif match["oct"]:
        value = int(match["oct"], 8)
    else:
        value = int(match["dec"])
    return -value if match["sign"] == "-" else value


@functools.cache
def _bounds(type, /):
    bits = 8 * ctypes.sizeof(type)
    if type(-1).value < 0:
        return -(1 << bits - 1), (1 << bits - 1) - 1
    return 0, (1 << bits) - 1


def _convert(text, type, /):
    if type in _INTEGERS:
        lower, upper = _bounds(type)
        return min(max(_strtoi(text), lower), upper)
    if type is int:
        return _strtoi(text)
    if type is bool or type is ctypes.c_bool:
        return _strtoi(text) != 0
    if type in (float, ctypes.c_double, ctypes.c_longdouble):
        return float(text)
    if type is ctypes.c_float:
        value = float(text)
        # finite overflow saturates, infinities and nan are kept
        if abs(value) > _FLT_MAX and value not in (float("inf"), float("-inf")):
            value = _FLT_MAX if value > 0 else -_FLT_MAX
        return ctypes.c_float(value).value
    return type(text)


class ParsedOption:
    """
    Values collected for one option during a single parse call.

    Properties
    - flag: the flag that produced the values.
    - key: the key the values are filed under (value-name, or the flag itself
      for valueless options).
    - values: tuple of strings in encounter order (at most one entry unless
      the option selects take_all).
    """

    flag = mirror("flag")
    key = mirror("key")
    values = mirror("values")

    def __init__(self, flag, key, values=()):
        self._flag = flag
        self._key = key
        self._values = tuple(values)

    def value_as(self, type, /, index=0):
        """
        Convert the value at index to type.

        Integer text is read strictly, unlike C strtol/strtoull:
        - trailing junk is rejected, so "5abc" raises ValueError instead of
          giving 5;
        - negatives are not wrapped for unsigned types but clamped, so "-1"
          as c_uint8 gives 0, not 255.

        Raises
        - IndexError: when index is beyond the stored values.
        - ValueError: when a numeric type is requested for non-numeric text.
        """
        try:
            text = self._values[index]
        except IndexError:
            raise IndexError(
                "value index %d is out of range for %r (%d stored)" % (index, self._key, len(self._values))
            ) from None
        return _convert(text, type)

    def __len__(self):
        return len(self._values)

    def __iter__(self):
        return iter(self._values)

    def __getitem__(self, index, /):
        return self._values[index]

    def __eq__(self, other):
        if not isinstance(other, ParsedOption):
            return NotImplemented
        return (self._flag, self._key, self._values) == (other._flag, other._key, other._values)

    def __hash__(self):
        return hash((self._flag, self._key, self._values))

    def __rich_repr__(self):
        yield "flag", self._flag
        yield "key", self._key
        yield "values", self._values

    def __repr__(self):
        return f"parsed-option({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"


def apply_selection(existing, incoming, selection, /):
    """
    Resolve a new occurrence against the entry already stored under its key.

    Parameters
    - existing: ParsedOption | None
      what the key holds so far (None on first occurrence).
    - incoming: ParsedOption
      the occurrence just resolved by the walk.
    - selection: Selection

    Returns
    - ParsedOption: the entry to store. Neither argument is modified.

    Rules
    - first occurrence: incoming is stored as-is, whatever the policy.
    - TAKE_FIRST: the existing entry is kept untouched.
    - TAKE_LAST: the stored values are replaced by the incoming values.
    - TAKE_ALL: the incoming values are appended.
    """
    if existing is None:
        return incoming
    match Selection(selection):
        case Selection.TAKE_FIRST:
            return existing
        case Selection.TAKE_LAST:
            return ParsedOption(existing.flag, existing.key, incoming.values)
        case Selection.TAKE_ALL:
            return ParsedOption(existing.flag, existing.key, existing.values + incoming.values)


class ParseResult(Mapping):
    """
    Read-only outcome of a successful parse call.

    Lookups canonicalize through the registry the result was parsed with, so
    a value-bearing option can be queried by its value-name or by its flag,
    and a valueless option by its flag in any accepted spelling.
    """

    positionals = mirror("positionals")

    def __init__(self, registry, parsed=(), positionals=()):
        self._registry = registry
        self._parsed = dict(parsed)
        self._positionals = tuple(positionals)

    @property
    def parsed_options(self):
        """read-only view of key → ParsedOption, without canonicalization."""
        return MappingProxyType(self._parsed)

    def _canonical(self, key, /):
        if key in self._parsed:
            return key
        return self._registry.resolve(key)

    def has(self, key, /):
        """whether an option was parsed under key (value-name or flag)."""
        return self._canonical(key) in self._parsed

    def __getitem__(self, key, /):
        try:
            return self._parsed[self._canonical(key)]
        except KeyError:
            raise KeyError(key) from None

    def __contains__(self, key, /):
        return self.has(key)

    def __iter__(self):
        return iter(self._parsed)

    def __len__(self):
        return len(self._parsed)

    def __rich_repr__(self):
        yield "parsed", self._parsed
        yield "positionals", self._positionals

    def __repr__(self):
        return f"parse-result({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"


__all__ = (
    "ParsedOption",
    "ParseResult",
    "apply_selection",
)
