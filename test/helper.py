"""
Helper module behavioral tests (usage line, help listing, display name).

Scope
- Validate the compact usage line: bracketing by required-ness and arity.
- Validate the help listing: column alignment, long names, wrapping.
- Validate color handling through the parser's colorful switch.

Conventions
- Test method names follow CamelCase per project convention.
- Layout assertions run against Text.plain of colorless parsers.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from argwalk import ArgumentParser, Arity, WIDTH, OFFSET, display_name, render_help, render_usage


class TestUsage(TestCase):
    """Behavioral tests for render_usage()."""

    def setUp(self):
        self.parser = ArgumentParser("tool", colorful=False)

    def testHelpOnly(self):
        self.assertEqual(render_usage(self.parser).plain, "usage: tool [--help]")

    def testBracketing(self):
        self.parser.register("--verbose", arity=Arity.NONE)
        self.parser.register("--count", "N", required=True)
        self.parser.register("--level", "L", arity=Arity.OPTIONAL)
        self.parser.register("--name", "NAME")
        self.assertEqual(
            render_usage(self.parser).plain,
            "usage: tool [--help] [--verbose] --count N [--level [L]] [--name NAME]",
        )

    def testProgOverride(self):
        self.assertEqual(render_usage(self.parser, "other").plain, "usage: other [--help]")

    def testWrapsWithHangingIndent(self):
        for number in range(20):
            self.parser.register("--option-%02d" % number, "VALUE%02d" % number)
        lines = render_usage(self.parser).plain.splitlines()
        self.assertGreater(len(lines), 1)
        indent = len("usage: tool ")
        for line in lines:
            self.assertLessEqual(len(line), WIDTH)
        for line in lines[1:]:
            self.assertTrue(line.startswith(" " * indent))
            self.assertEqual(line[indent], "[")

    def testColorless(self):
        self.parser.register("--count", "N", required=True)
        self.assertEqual(render_usage(self.parser).spans, [])

    def testColorful(self):
        parser = ArgumentParser("tool")
        parser.register("--count", "N", required=True)
        self.assertNotEqual(render_usage(parser).spans, [])


class TestHelp(TestCase):
    """Behavioral tests for render_help()."""

    def setUp(self):
        self.parser = ArgumentParser("tool", colorful=False)

    def testLayout(self):
        self.parser.register("--verbose", arity=Arity.NONE, help="be chatty")
        self.parser.register("--count", "N", required=True, help="how many")
        lines = render_help(self.parser).plain.splitlines()
        self.assertEqual(lines[0], "usage: tool [--help] [--verbose] --count N")
        self.assertEqual(lines[1], "")
        self.assertEqual(lines[2], "options:")
        self.assertEqual(lines[3], "  --help".ljust(OFFSET) + "show this help message and exit")
        self.assertEqual(lines[4], "  --verbose".ljust(OFFSET) + "be chatty")
        self.assertEqual(lines[5], "  --count N".ljust(OFFSET) + "how many")

    def testOptionalValueShownBracketed(self):
        self.parser.register("--level", "L", arity=Arity.OPTIONAL, help="verbosity")
        lines = render_help(self.parser).plain.splitlines()
        self.assertEqual(lines[-1], "  --level [L]".ljust(OFFSET) + "verbosity")

    def testLongNamesBreakLine(self):
        self.parser.register("--a-very-long-option-name", "VALUE", help="described below")
        lines = render_help(self.parser).plain.splitlines()
        self.assertEqual(lines[-2], "  --a-very-long-option-name VALUE")
        self.assertEqual(lines[-1], " " * OFFSET + "described below")

    def testMissingHelpLeavesNameOnly(self):
        self.parser.register("--quiet", arity=Arity.NONE)
        lines = render_help(self.parser).plain.splitlines()
        self.assertEqual(lines[-1].rstrip(), "  --quiet")

    def testLongHelpWraps(self):
        self.parser.register("--count", "N", help=" ".join(["word"] * 60))
        lines = render_help(self.parser).plain.splitlines()
        rows = lines[lines.index("options:") + 2:]
        self.assertGreater(len(rows), 1)
        for row in rows:
            self.assertLessEqual(len(row.rstrip()), WIDTH)
        for row in rows[1:]:
            self.assertTrue(row.startswith(" " * OFFSET + "word"))

    def testPrintHelp(self):
        self.parser.register("--count", "N", help="how many")
        stream = io.StringIO()
        self.parser.print_help(stream)
        self.assertIn("--count N", stream.getvalue())

    def testPrintUsage(self):
        stream = io.StringIO()
        self.parser.print_usage(stream)
        self.assertEqual(stream.getvalue().strip(), "usage: tool [--help]")


class TestDisplayName(TestCase):
    """Behavioral tests for display_name()."""

    def testPosixPath(self):
        self.assertEqual(display_name("/usr/bin/tool"), "tool")

    def testWindowsPath(self):
        self.assertEqual(display_name("C:\\bin\\tool.exe"), "tool.exe")

    def testBareName(self):
        self.assertEqual(display_name("tool"), "tool")


if __name__ == "__main__":
    unittest.main()
