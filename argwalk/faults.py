"""
Argwalk faults: every error and warning the package can surface.

Each fault carries a message plus read-only options (title, code, hint, docs,
prog, shell, colorful, fancy, status and fault-specific context such as
flags or index). The options decide both how the fault looks and what
surfacing it does:

- library mode (shell=False): errors are raised; warnings go through
  warnings.warn, so the host can filter, record or escalate them.
- shell mode (shell=True): the fault is printed with rich on stderr; errors
  then exit the process with options["status"] (1 unless given).

Faults are surfaced with trigger(fault, **options), which layers the options
over a copy of the fault (copy.replace) and calls its __trigger__.

Host hooks, read from __main__ when present:
- __codes__: FaultCode → label shown instead of the number.
- __docs__: FaultCode → short documentation attached to parse faults.
- __prog__: program name shown in fault headers.
- __styles__: palette overrides (prog-name, code, title, message, hint-arrow,
  hint, docs).
"""
import copy
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    stable identifiers of every fault.

    - 211xx: registration (raised by register())
    - 221xx: argument list and parse outcome (raised or exited by parse())
    - 231xx: parse warnings (non-fatal)
    """
    MALFORMED_FLAG              = 21101
    RESERVED_FLAG               = 21102
    DUPLICATED_FLAG             = 21103
    MISSING_VALUE_NAME          = 21104
    DUPLICATED_VALUE_NAME       = 21105
    NAMESPACE_COLLISION         = 21106
    INVALID_POLICY              = 21107
    INVALID_CALLBACK            = 21108

    UNTERMINATED_ARGUMENT_LIST  = 22101
    ABSENT_TOKEN                = 22102
    MISSING_REQUIRED_OPTION     = 22111
    HELP_REQUESTED              = 22121

    UNKNOWN_OPTION              = 23111
    MISSING_VALUE               = 23112

    def normalize(self):
        """label for this code: the host's __codes__ entry, else the number."""
        labels = getattr(__import__("__main__"), "__codes__", {})
        return str(labels.get(self, self.value))


class _Fault:
    """message + options storage, rendering and copying shared by errors and warnings."""

    __palette__ = {}

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | Unset):
            raise TypeError("fault message must be a string")
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    def __replace__(self, *unused, **overrides):
        if unused:
            raise TypeError("fault options are keyword-only")
        return type(self)(self.message, **(dict(self.options) | overrides))

    def __rich__(self):
        main = __import__("__main__")
        options = self.options
        styles = defaultdict(str, self.__palette__ | getattr(main, "__styles__", {}))

        def text(fragment, key):
            if not fragment:
                return Text("")
            return Text(str(fragment), styles[key] if options.get("colorful", True) else "")

        code = options.get("code")
        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", options.get("prog", "argwalk")), "prog-name"),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "", "code"),
            " | ",
            text(options.get("title", type(self).__name__).title(), "title"),
            " ]",
        )

        body = [text(coalesce(self.message, ""), "message")]
        if hint := options.get("hint"):
            body.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
        if docs := options.get("docs"):
            body.append(text(docs, "docs"))

        if options.get("fancy", False):
            return Panel(Group(*body), title=header, title_align="left")
        return Group(header, *body)


class ParserException(_Fault, Exception):
    """base of every argwalk error."""

    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "title": "bold #FF4DA6",
        "message": "#C8C8D0",
        "hint-arrow": "dim #9CE19C",
        "hint": "italic #9CE19C",
        "docs": "dim #C8C8D0",
    }

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(self.options.get("status", 1))


class InvalidOptionError(ParserException, ValueError):
    """register() refused an option (malformed, reserved, duplicated or colliding)."""


class InvalidArgumentListError(ParserException, ValueError):
    """the argument list has no terminator where expected, or an absent token before it."""


class MissingRequiredOptionError(ParserException):
    """required flags that never appeared during the walk, in registration order."""

    @property
    def flags(self):
        return tuple(self.options.get("flags", ()))


class HelpRequestedError(ParserException):
    """
    '--help' was in the argument list.

    shell mode prints options["help"] on stdout and exits with status 0
    instead of rendering the fault itself.
    """

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        Console().print(self.options.get("help", ""), soft_wrap=True)
        sys.exit(self.options.get("status", 0))


class ParserWarning(_Fault, Warning):
    """base of the non-fatal diagnostics emitted while walking."""

    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",
        "title": "bold #FFC2E0",
        "message": "#D6D6DE",
        "hint-arrow": "dim #B8EFAF",
        "hint": "italic #B8EFAF",
        "docs": "dim #D6D6DE",
    }

    def __trigger__(self):
        if self.options.get("shell", False):
            console.print(self)
        else:
            warnings.warn(self, stacklevel=len(inspect.stack()))


class UnknownOptionWarning(ParserWarning):
    """a '--' token names no registered option; nothing was consumed."""


class MissingValueWarning(ParserWarning):
    """a value-required flag came last; the occurrence was dropped."""


def trigger(fault, /, **options):
    """
    surface fault with options layered over its own.

    fault needs callable __trigger__ and __replace__ (every argwalk fault has
    them); the original fault object is left untouched.
    """
    if not all(callable(getattr(fault, name, None)) for name in ("__trigger__", "__replace__")):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """documentation the host registered for code in __main__.__docs__, or None."""
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "ParserException",
    "InvalidOptionError",
    "InvalidArgumentListError",
    "MissingRequiredOptionError",
    "HelpRequestedError",
    "ParserWarning",
    "UnknownOptionWarning",
    "MissingValueWarning",
    "trigger",
    "getdoc",
)
