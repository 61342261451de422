"""
Argwalk help and usage rendering.

Two forms are produced as rich Text, so they can be printed with or without
color and inspected through Text.plain:

- render_usage(parser): a compact usage line
      usage: prog [--help] [--verbose] --count N [--level [L]]
  options are bracketed when not required; an optional value is bracketed
  inside its option. Items wrap at WIDTH columns with a hanging indent under
  the first item.

- render_help(parser): the usage line, then an "options:" listing with the
  help text of every option aligned at column OFFSET. When the option text
  reaches that column, its help starts on the next line instead.

Palette keys
- usage-label, program-name, group-label, option-name, value-name,
  argument-description
Define a mapping named __styles__ in __main__ to override any entry.
"""
import re
from collections import defaultdict, deque

from rich.console import Console
from rich.containers import Lines
from rich.text import Text

from .options import Arity

WIDTH = 100
OFFSET = 24
PADDING = 2

HELP_FLAG = "--help"
HELP_TEXT = "show this help message and exit"


def display_name(argv0, /):
    """last path segment of the program token (either separator)."""
    return re.split(r"[\\/]", argv0)[-1]


def _palette(parser, /):
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "group-label": "bold #FFFFFF",
        "option-name": "bold #00E6FF",
        "value-name": "bold #FFD600",
        "argument-description": "#9CA3AF",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not parser.colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    return text


def _segments(spec, text, /):
    """names column pieces for one option: flag, then its value-name if any."""
    yield text(spec.flag, "option-name")
    match spec.arity:
        case Arity.OPTIONAL:
            yield Text.assemble("[", text(spec.value_name, "value-name"), "]")
        case Arity.REQUIRED:
            yield text(spec.value_name, "value-name")


def render_usage(parser, prog=None, /):
    """
    Build the compact usage line for parser.

    prog overrides the display name (defaults to parser.prog).
    """
    text = _palette(parser)

    usage = Text()
    usage.append(text("usage", "usage-label")).append(":")
    usage.append(" ")
    usage.append(text(prog if prog is not None else parser.prog, "program-name"))
    usage.append(" ")

    offset = len(usage)  # continuation lines start under the first item
    inputs = deque([Text.assemble("[", text(HELP_FLAG, "option-name"), "]")])

    for spec in parser.registry:
        item = Text(" ").join(_segments(spec, text))
        inputs.append(item if spec.required else Text.assemble("[", item, "]"))

    lines = Lines([inputs.popleft()])
    while inputs:
        if len(lines[-1]) + 1 + len(input := inputs.popleft()) > WIDTH - offset:
            lines.append(input)
        else:
            lines[-1].append(Text(" ") + input)

    usage.append(lines.pop(0))
    for line in lines:
        usage.append("\n").append(" " * offset).append(line)
    return usage


def render_help(parser, prog=None, /):
    """
    Build the full help: usage line, blank line, then the option listing.
    """
    text = _palette(parser)
    console = Console(width=WIDTH)

    help = render_usage(parser, prog)
    help.append("\n\n")
    help.append(text("options", "group-label")).append(":")

    rows = [(Text.assemble(text(HELP_FLAG, "option-name")), HELP_TEXT)]
    for spec in parser.registry:
        rows.append((Text(" ").join(_segments(spec, text)), spec.help))

    for names, descr in rows:
        section = Text(" " * PADDING).append(names)
        if descr := text(descr, "argument-description"):
            # Description flow: if the names column reaches the offset, break line before description
            if len(section) >= OFFSET:
                section.append("\n").append(" " * OFFSET)
            else:
                section.append(" " * (OFFSET - len(section)))
            wrapped = descr.wrap(console, WIDTH - OFFSET)
            section.append(wrapped.pop(0))
            for line in wrapped:
                section.append("\n").append(" " * OFFSET).append(line)
        help.append("\n").append(section)

    return help


__all__ = (
    "render_usage",
    "render_help",
    "display_name",
    "WIDTH",
    "OFFSET",
)
