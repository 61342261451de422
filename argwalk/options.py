r"""
Argwalk option specifications and registry.

Overview
- Policies
  • Arity: whether a flag consumes no value, an optional value, or a required value.
  • Selection: how repeated occurrences of a flag resolve into stored values
    (take_first / take_last / take_all).

- Specs
  • OptionSpec: immutable record of one registered option (flag, value-name,
    arity, selection, required-ness, default, callback, help).

- Registry
  • Registry.register(...): normalize and validate a flag, then store its spec.
  • Registry.resolve(key): canonicalize a flag or value-name to the key its
    parsed values are filed under.

Namespaces
- Two explicit key sets are tracked: flags that take no value, and value-names
  claimed by value-bearing options. A single routine (_check_namespaces) runs
  at registration and rejects any collision between them:
  • a value-name may not be claimed twice,
  • a value-name may not equal a valueless flag,
  • a valueless flag may not equal a claimed value-name.

Flag normalization
- "output"   → "--output"
- "-output"  → "--output"
- "--output" → "--output" (two or more dashes are kept as-is)
- "", "-", "--" are rejected, and "--help" (any case) is reserved.

Quick example:
    >>> registry = Registry()
    >>> registry.register("count", "N").flag
    '--count'
    >>> registry.resolve("--count")
    'N'
"""
import functools
import operator
import re
from enum import StrEnum

from .faults import FaultCode, InvalidOptionError
from .utils import mirror


class Arity(StrEnum):
    """whether a value token follows the flag."""
    NONE = "none"
    OPTIONAL = "optional"
    REQUIRED = "required"


class Selection(StrEnum):
    """policy applied when the same flag occurs more than once."""
    TAKE_FIRST = "take_first"
    TAKE_LAST = "take_last"
    TAKE_ALL = "take_all"


def normalize_flag(flag, /):
    """
    return the canonical two-dash form of a flag.

    raises
    - InvalidOptionError: when the flag is not a string, contains whitespace,
      or normalizes to a bare "--".
    """
    if not isinstance(flag, str):
        raise InvalidOptionError(
            "option flag must be a string, not %s" % type(flag).__name__,
            title="malformed option flag",
            code=FaultCode.MALFORMED_FLAG,
            hint="register the flag by name, for example: --output-file",
        )
    if re.search(r"\s", flag):
        raise InvalidOptionError(
            "option flag %r cannot contain whitespace" % flag,
            title="malformed option flag",
            code=FaultCode.MALFORMED_FLAG,
            hint="join words with dashes, for example: --output-file",
        )

    if not flag.startswith("-"):
        flag = "--" + flag
    elif not flag.startswith("--"):
        flag = "-" + flag

    if flag == "--":
        raise InvalidOptionError(
            "option flag cannot be empty",
            title="malformed option flag",
            code=FaultCode.MALFORMED_FLAG,
            hint="give the option a name, for example: --verbose",
        )
    return flag


class OptionSpec:
    """
    One registered option.

    Instances are built by Registry.register() after validation and are
    read-only afterwards; every field is exposed through a mirrored property.

    Properties
    - flag: canonical flag string ("--name").
    - value_name: key for value-bearing options; None for valueless flags.
    - arity / selection: policies (see Arity and Selection).
    - required: whether the flag must appear at least once per parse.
    - default: string used when an optional value is absent (and handed to
      the callback of valueless flags).
    - callback: single-argument callable or None.
    - help: description used by the help listing.
    """

    __introspectable__ = (
        "flag",
        "value_name",
        "arity",
        "selection",
        "required",
        "default",
        "callback",
        "help",
    )

    __displayable__ = (
        "flag",
        "value_name",
        "arity",
        "selection",
        "required",
    )

    flag = mirror("flag")
    value_name = mirror("value_name")
    arity = mirror("arity")
    selection = mirror("selection")
    required = mirror("required")
    default = mirror("default")
    callback = mirror("callback")
    help = mirror("help")

    def __init__(self, flag, value_name, arity, selection, required, default, callback, help):
        self._flag = flag
        self._value_name = value_name
        self._arity = arity
        self._selection = selection
        self._required = required
        self._default = default
        self._callback = callback
        self._help = help

    @property
    def key(self):
        """
        the key parsed values are filed under: the value-name for value-bearing
        options, the flag itself otherwise.
        """
        return self._flag if self._arity is Arity.NONE else self._value_name

    def __rich_repr__(self):
        for name in self.__displayable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return f"option-spec({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"


def _coerce_policy(enum, value, name, /):
    try:
        return enum(value)
    except ValueError:
        raise InvalidOptionError(
            "option %s must be one of %s, not %r" % (name, ", ".join(map(repr, map(str, enum))), value),
            title="invalid option %s" % name,
            code=FaultCode.INVALID_POLICY,
            hint="use %s.%s or its string value" % (enum.__name__, next(iter(enum)).name),
        ) from None


class Registry:
    """
    Ordered collection of OptionSpec keyed by canonical flag.

    Iteration yields specs in registration order; membership and indexing
    accept any spelling that normalizes to a registered flag.
    """

    def __init__(self):
        self._specs = {}
        # flags registered with Arity.NONE
        self._valueless = set()
        # value-name → owning flag
        self._value_names = {}

    specs = mirror("specs")

    @property
    def required(self):
        """required flags, in registration order."""
        return tuple(flag for flag, spec in self._specs.items() if spec.required)

    def _check_namespaces(self, flag, value_name, arity, /):
        if flag.lower() == "--help":
            raise InvalidOptionError(
                "option flag %r is reserved" % flag,
                title="reserved option flag",
                code=FaultCode.RESERVED_FLAG,
                hint="'--help' is always available; pick another name",
            )
        if flag in self._specs:
            raise InvalidOptionError(
                "the handler for option %r is already defined" % flag,
                title="duplicated option flag",
                code=FaultCode.DUPLICATED_FLAG,
                hint="register each flag once",
            )

        if arity is Arity.NONE:
            if flag in self._value_names:
                raise InvalidOptionError(
                    "option flag %r is already claimed as the value-name of %r" % (flag, self._value_names[flag]),
                    title="namespace collision",
                    code=FaultCode.NAMESPACE_COLLISION,
                    hint="rename the flag or the other option's value-name",
                )
            if value_name and value_name in self._value_names:
                raise InvalidOptionError(
                    "value-name %r is already claimed by option %r" % (value_name, self._value_names[value_name]),
                    title="duplicated value-name",
                    code=FaultCode.DUPLICATED_VALUE_NAME,
                    hint="pick a value-name no other option uses",
                )
            return

        if not value_name:
            raise InvalidOptionError(
                "option %r takes a value but has no value-name" % flag,
                title="missing value-name",
                code=FaultCode.MISSING_VALUE_NAME,
                hint="pass value_name, for example: register(%r, %r)" % (flag, flag.lstrip("-").upper()),
            )
        if value_name in self._value_names:
            raise InvalidOptionError(
                "value-name %r is already claimed by option %r" % (value_name, self._value_names[value_name]),
                title="duplicated value-name",
                code=FaultCode.DUPLICATED_VALUE_NAME,
                hint="pick a value-name no other option uses",
            )
        if value_name in self._valueless:
            raise InvalidOptionError(
                "value-name %r collides with the valueless option flag of the same name" % value_name,
                title="namespace collision",
                code=FaultCode.NAMESPACE_COLLISION,
                hint="rename the value-name or the valueless flag",
            )

    def register(
            self,
            flag,
            value_name="",
            required=False,
            help="",
            arity=Arity.REQUIRED,
            selection=Selection.TAKE_LAST,
            callback=None,
            default="",
    ):
        """
        Validate and store a new option.

        Parameters
        - flag: str
          option name; normalized by normalize_flag().
        - value_name: str
          key for parsed values of value-bearing options (required unless
          arity is Arity.NONE).
        - required: bool
          the flag must appear at least once per parse.
        - help: str
          description for the help listing.
        - arity: Arity | str
        - selection: Selection | str
        - callback: Callable[[str], object] | None
          invoked with the resolved value on every occurrence.
        - default: str
          value used when an optional value is absent.

        Returns
        - OptionSpec: the stored spec.

        Raises
        - InvalidOptionError: on any malformed, reserved, duplicated or
          colliding registration. Nothing is stored in that case.
        """
        flag = normalize_flag(flag)
        arity = _coerce_policy(Arity, arity, "arity")
        selection = _coerce_policy(Selection, selection, "selection")

        if not isinstance(value_name, str):
            raise InvalidOptionError(
                "value-name of option %r must be a string" % flag,
                title="missing value-name",
                code=FaultCode.MISSING_VALUE_NAME,
                hint="pass value_name as a string, or leave it empty for valueless flags",
            )
        if callback is not None and not callable(callback):
            raise InvalidOptionError(
                "callback of option %r must be callable" % flag,
                title="invalid option callback",
                code=FaultCode.INVALID_CALLBACK,
                hint="pass a function taking the resolved value, or leave it unset",
            )

        self._check_namespaces(flag, value_name, arity)

        spec = OptionSpec(
            flag,
            value_name if arity is not Arity.NONE else None,
            arity,
            selection,
            bool(required),
            str(default),
            callback,
            str(help),
        )
        self._specs[flag] = spec
        if arity is Arity.NONE:
            self._valueless.add(flag)
        else:
            self._value_names[value_name] = flag
        return spec

    def get(self, flag, default=None, /):
        """return the spec registered under flag (no normalization), or default."""
        return self._specs.get(flag, default)

    def resolve(self, key, /):
        """
        canonicalize a lookup key to the key parsed values are filed under.

        - a claimed value-name resolves to itself;
        - a flag (any accepted spelling) resolves to its spec's key;
        - anything else resolves to None.
        """
        if key in self._value_names:
            return key
        try:
            spec = self._specs.get(normalize_flag(key))
        except InvalidOptionError:
            return None
        return spec.key if spec is not None else None

    def __getitem__(self, flag, /):
        return self._specs[normalize_flag(flag)]

    def __contains__(self, flag, /):
        try:
            return normalize_flag(flag) in self._specs
        except InvalidOptionError:
            return False

    def __iter__(self):
        return iter(self._specs.values())

    def __len__(self):
        return len(self._specs)

    def __repr__(self):
        return f"registry({", ".join(self._specs)})"


__all__ = (
    "Arity",
    "Selection",
    "OptionSpec",
    "Registry",
    "normalize_flag",
)
