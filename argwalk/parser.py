"""
Argwalk parser engine: walk a terminated argument list into a ParseResult.

What this module provides
- ArgumentParser: owns a Registry of options and parses argument lists
  against it.
  • register(...) / @option(...): declare options (see argwalk.options).
  • walk(argv): the engine; returns a tagged Outcome and never exits.
  • parse(argv): the frontend; turns the outcome into a ParseResult, an
    exception (library mode) or printed help/usage plus process exit (shell mode).
  • parse_args(args): parse the current process arguments.
  • clear(): forget the last result and reset required-flag tracking.

- Outcome, Parsed, HelpRequested, MissingRequired: the tagged results of walk().

Argument list
- argv is a sequence whose element at argc (default: the last element) is the
  terminator None. argv[0] is the program token, only used for the display name.
- A missing terminator, or an absent (None) or non-string token before it, is
  an InvalidArgumentListError; parser state is reset before it propagates.

Walk (tokens 1..argc-1, left to right)
- "--help" anywhere (any case) short-circuits everything: nothing else is
  parsed, no callback runs, no required check is made.
- "--name" known:
  • none:     presence only;
  • optional: the next token is the value unless it starts with "--" or is
              the terminator, then the default is used;
  • required: the next token is the value, even when it starts with "--";
              when there is none, a MissingValueWarning is raised and the
              occurrence is dropped (nothing stored, no callback, and it does
              not satisfy a required flag).
  the occurrence is resolved with apply_selection(), the callback (if any)
  fires once per occurrence, and a required flag is marked as seen.
- "--name" unknown: UnknownOptionWarning, no value is consumed.
- anything else: positional, kept in encounter order.
"""
import functools
import sys
from collections.abc import Sequence

from rich.console import Console

from .faults import *
from .helper import HELP_FLAG, display_name, render_help, render_usage
from .options import Arity, Registry, Selection
from .results import ParsedOption, ParseResult, apply_selection
from .utils import Unset, coalesce, mirror, rename


@functools.cache  # Memoize to avoid recomputing common ordinals in messages
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
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

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


class Outcome:
    """base of the tagged results returned by ArgumentParser.walk()."""
    __slots__ = ()

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__match_args__)

    def __hash__(self):
        return hash((type(self), *(getattr(self, name) for name in self.__match_args__)))

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join(
            "%s=%r" % (name, getattr(self, name)) for name in self.__match_args__
        ))


class Parsed(Outcome):
    """the walk completed and every required flag was seen."""
    __slots__ = ("result",)
    __match_args__ = ("result",)

    def __init__(self, result):
        self.result = result


class HelpRequested(Outcome):
    """'--help' appeared in the argument list."""
    __slots__ = ()
    __match_args__ = ()


class MissingRequired(Outcome):
    """the walk completed but some required flags were never seen (registration order)."""
    __slots__ = ("flags",)
    __match_args__ = ("flags",)

    def __init__(self, flags):
        self.flags = tuple(flags)


class ArgumentParser:
    """
    Declarative option parser.

    Parameters
    - prog: Unset | str (positional-only)
      display name in usage/help; defaults to the last path segment of the
      program token of the argument list being parsed.
    - shell: bool
      False (library mode): help and missing required flags raise
      HelpRequestedError / MissingRequiredOptionError, warnings go through
      warnings.warn.
      True (shell mode): help is printed to stdout and the process exits with
      status 0; missing required flags print usage plus a diagnostic to stderr
      and exit with status 1; warnings are printed to stderr.
    - colorful: bool
      style usage/help and diagnostics (see __styles__ in __main__).
    - fancy: bool
      render diagnostics inside a panel.

    Lifecycle
    - register every option, then parse; clear() and parse again as needed.
    - each parse builds a fresh ParseResult; a failed parse leaves the parser
      with an empty result.
    """

    __introspectable__ = (
        "registry",
        "shell",
        "colorful",
        "fancy",
    )

    registry = mirror("registry")
    shell = mirror("shell")
    colorful = mirror("colorful")
    fancy = mirror("fancy")

    def __init__(self, prog=Unset, /, *, shell=False, colorful=True, fancy=False):
        if not isinstance(prog, str | Unset):
            raise TypeError("ArgumentParser() 'prog' must be a string")
        self._prog = prog
        self._argv0 = Unset
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._registry = Registry()
        # required flag → seen during the current walk
        self._tracking = {}
        self._result = ParseResult(self._registry)

    @property
    def prog(self):
        """
        Display name used in usage/help and diagnostics.

        Precedence: explicit 'prog', then __prog__ in __main__, then the program
        token of the last parsed argument list, then sys.argv[0], then "prog".
        """
        if self._prog is not Unset:
            return self._prog
        if isinstance(prog := getattr(__import__("__main__"), "__prog__", None), str):
            return prog
        argv0 = coalesce(self._argv0, sys.argv[0] if sys.argv and sys.argv[0] else "prog")
        return display_name(argv0)

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
        Register an option; see Registry.register() for the parameters.

        Returns the stored OptionSpec.
        """
        spec = self._registry.register(
            flag,
            value_name,
            required=required,
            help=help,
            arity=arity,
            selection=selection,
            callback=callback,
            default=default,
        )
        return spec

    def option(self, flag, /, value_name="", **options):
        """
        Decorator form of register(): the decorated function becomes the
        option's callback and is returned unchanged.

            @parser.option("--tag", "T", selection="take_all")
            def on_tag(value): ...
        """
        @rename("option")
        def wrapper(callback, /):
            if not callable(callback):
                raise TypeError("@option() must be applied to a callable")
            self.register(flag, value_name, callback=callback, **options)
            return callback

        return wrapper

    def clear(self):
        """
        Reset required-flag tracking and drop the parsed options and
        positionals. Registered options are kept.
        """
        self._tracking = dict.fromkeys(self._registry.required, False)
        self._result = ParseResult(self._registry)

    @property
    def result(self):
        """the ParseResult of the last successful parse (empty otherwise)."""
        return self._result

    @property
    def parsed_options(self):
        """read-only mapping of the last result (key → ParsedOption)."""
        return self._result.parsed_options

    @property
    def positionals(self):
        """positional tokens of the last result, in encounter order."""
        return self._result.positionals

    def has_parsed_option(self, key, /):
        """whether the last result holds key (value-name or flag)."""
        return self._result.has(key)

    def trigger(self, fault, /, **options):
        """surface a fault with this parser's display settings merged in."""
        trigger(
            fault,
            **options,
            prog=self.prog,
            shell=self._shell,
            colorful=self._colorful,
            fancy=self._fancy,
        )

    def _check(self, argv, argc, /):
        """
        validate the argument list shape and return argc.

        nothing is parsed here, so no callback can fire on a malformed list.
        """
        if isinstance(argv, str) or not isinstance(argv, Sequence):
            raise TypeError("parse() argument must be a sequence of strings terminated by None")
        argc = coalesce(argc, len(argv) - 1)

        if not isinstance(argc, int) or not 0 <= argc < len(argv) or argv[argc] is not None:
            self.clear()
            raise InvalidArgumentListError(
                "argument list is not terminated by None at index %r" % argc,
                title="unterminated argument list",
                code=FaultCode.UNTERMINATED_ARGUMENT_LIST,
                hint="append None after the last argument, for example: [*sys.argv, None]",
                docs=getdoc(FaultCode.UNTERMINATED_ARGUMENT_LIST),
            )

        for index in range(argc):
            if not isinstance(argv[index], str):
                self.clear()
                raise InvalidArgumentListError(
                    "absent argument at index %d, before the terminator at index %d" % (index, argc),
                    title="absent argument",
                    code=FaultCode.ABSENT_TOKEN,
                    index=index,
                    hint="only the terminator may be None; every other entry must be a string",
                    docs=getdoc(FaultCode.ABSENT_TOKEN),
                )
        return argc

    def walk(self, argv, /, argc=Unset):
        """
        Run the engine over argv and return an Outcome.

        - Parsed(result): success; result is also kept as self.result.
        - HelpRequested(): '--help' was present; nothing else was processed.
        - MissingRequired(flags): some required flags were never seen.

        Warnings (unknown flags, missing trailing values) are triggered along
        the way. InvalidArgumentListError and any callback exception
        propagate after the parser state is reset.
        """
        argc = self._check(argv, argc)
        self.clear()
        self._argv0 = argv[0] if argc > 0 and argv[0] else Unset

        if any(token.lower() == HELP_FLAG for token in argv[1:argc]):
            return HelpRequested()

        parsed = {}
        positionals = []

        index = 1
        try:
            while index < argc:
                token = argv[index]

                if not token.startswith("--"):
                    positionals.append(token)
                    index += 1
                    continue

                if (spec := self._registry.get(token)) is None:
                    self.trigger(UnknownOptionWarning(
                        "unknown option flag %r at %s position" % (token, _ordinal(index)),
                        title="unknown option",
                        code=FaultCode.UNKNOWN_OPTION,
                        input=token,
                        index=index,
                        hint="try '%s --help' to see all available options" % self.prog,
                        docs=getdoc(FaultCode.UNKNOWN_OPTION),
                    ))
                    index += 1
                    continue

                match spec.arity:
                    case Arity.NONE:
                        value, values = spec.default, ()
                    case Arity.OPTIONAL:
                        if index + 1 < argc and not argv[index + 1].startswith("--"):
                            index += 1
                            value = argv[index]
                        else:
                            value = spec.default
                        values = (value,)
                    case Arity.REQUIRED:
                        if index + 1 >= argc:
                            self.trigger(MissingValueWarning(
                                "required value not present for option %r at %s position" % (token, _ordinal(index)),
                                title="missing option value",
                                code=FaultCode.MISSING_VALUE,
                                input=token,
                                index=index,
                                hint="pass a value after it, for example: %s %s" % (token, spec.value_name),
                                docs=getdoc(FaultCode.MISSING_VALUE),
                            ))
                            index += 1
                            continue
                        index += 1
                        value = argv[index]
                        values = (value,)

                parsed[spec.key] = apply_selection(
                    parsed.get(spec.key),
                    ParsedOption(spec.flag, spec.key, values),
                    spec.selection,
                )

                if spec.callback is not None:
                    spec.callback(value)

                if spec.flag in self._tracking:
                    self._tracking[spec.flag] = True

                index += 1
        except Exception:
            self.clear()
            raise

        if missing := tuple(flag for flag, seen in self._tracking.items() if not seen):
            self.clear()
            return MissingRequired(missing)

        self._result = ParseResult(self._registry, parsed, positionals)
        return Parsed(self._result)

    def parse(self, argv, /, argc=Unset):
        """
        Parse argv and return the ParseResult.

        Library mode raises HelpRequestedError or MissingRequiredOptionError
        (with .flags); shell mode prints and exits instead (see the class
        docstring).
        """
        match self.walk(argv, argc):
            case Parsed(result):
                return result
            case HelpRequested():
                self.trigger(HelpRequestedError(
                    "help requested",
                    title="help requested",
                    code=FaultCode.HELP_REQUESTED,
                    help=self.render_help(),
                    status=0,
                ))
            case MissingRequired(flags):
                if self._shell:
                    self.print_usage()
                self.trigger(MissingRequiredOptionError(
                    "missing option arguments:" + "".join("\n\t" + flag for flag in flags),
                    title="missing required options",
                    code=FaultCode.MISSING_REQUIRED_OPTION,
                    flags=flags,
                    hint="try '%s --help' to see all available options" % self.prog,
                    docs=getdoc(FaultCode.MISSING_REQUIRED_OPTION),
                    status=1,
                ))

    def parse_args(self, args=Unset, /):
        """
        Parse the process arguments: sys.argv[1:] unless args is given.
        """
        args = list(coalesce(args, sys.argv[1:]))
        return self.parse([sys.argv[0] if sys.argv else self.prog, *args, None])

    def render_usage(self):
        return render_usage(self)

    def render_help(self):
        return render_help(self)

    def print_usage(self, file=None):
        """print the usage line (stderr by default)."""
        console = Console(file=file) if file is not None else Console(stderr=True)
        console.print(self.render_usage(), soft_wrap=True)

    def print_help(self, file=None):
        """print the full help (stdout by default)."""
        Console(file=file).print(self.render_help(), soft_wrap=True)

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "argument-parser(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


__all__ = (
    "ArgumentParser",
    "Outcome",
    "Parsed",
    "HelpRequested",
    "MissingRequired",
)
