"""
Help formatter behavioral tests.

Scope
- Validate the greedy word-wrap primitive.
- Validate usage, sections, two-column alignment and default annotations.
- Validate layout parameters and terminal-width injection.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (HelpFormatter, TerminalWrapHelpFormatter, wrap, Argument).
"""

from __future__ import annotations

import io
import sys
import unittest
from unittest import TestCase

from rich.console import Console

from cmdarg import Argument, Arity, HelpFormatter, TerminalWrapHelpFormatter, wrap

HELP = Argument("help", "h", help="Show this help message and exit", default="false")
COUNT = Argument("count", "c", arity=Arity.REQUIRED, help="A counter", default="5")
INPUT = Argument("input", required=True, help="The input file")
OUTPUT = Argument("output", required=True, help="The output file")


class TestWrap(TestCase):
    """Behavioral tests for the greedy packing primitive."""

    def testNarrowWidth(self):
        self.assertEqual(wrap(["alpha", "beta", "gamma"], 9), ["alpha", "beta", "gamma"])

    def testExactFit(self):
        self.assertEqual(wrap(["alpha", "beta", "gamma"], 10), ["alpha beta", "gamma"])

    def testLongTokenStandsAlone(self):
        self.assertEqual(wrap(["a", "verylongtoken", "b"], 5), ["a", "verylongtoken", "b"])

    def testEmpty(self):
        self.assertEqual(wrap([], 10), [""])

    def testNoLineExceedsWidthUnlessSingleToken(self):
        tokens = "the quick brown fox jumps over the extraordinarily lazy dog".split()
        for width in range(1, 30):
            with self.subTest(width=width):
                lines = wrap(tokens, width)
                self.assertEqual(" ".join(lines).split(), tokens)
                for line in lines:
                    self.assertTrue(len(line) <= width or " " not in line)


class TestHelpFormatter(TestCase):
    """Behavioral tests for the help layout."""

    def testFullLayout(self):
        text = HelpFormatter("prog").format_help([INPUT, OUTPUT], [HELP, COUNT])
        self.assertEqual(text, (
            "usage: prog [-h] [-c COUNT] INPUT OUTPUT\n"
            "\n"
            "Required positional arguments:\n"
            "    INPUT" + " " * 23 + "The input file\n"
            "    OUTPUT" + " " * 22 + "The output file\n"
            "\n"
            "Optional arguments:\n"
            "    -h, --help" + " " * 18 + "Show this help message and exit\n"
            "    -c, --count COUNT" + " " * 11 + "A counter (default: '5')\n"
        ))

    def testIdempotent(self):
        formatter = HelpFormatter("prog", "Some description.", "Some epilogue.")
        self.assertEqual(
            formatter.format_help([INPUT], [HELP, COUNT]),
            formatter.format_help([INPUT], [HELP, COUNT]),
        )

    def testEmptySectionsOmitted(self):
        text = HelpFormatter("prog").format_help([], [])
        self.assertEqual(text, "usage: prog\n")

    def testDescriptionAndEpilogue(self):
        text = HelpFormatter("prog", "Copy things.", "Bye.").format_help([], [HELP])
        lines = text.splitlines()
        self.assertEqual(lines[1:3], ["", "Copy things."])
        self.assertEqual(lines[-2:], ["", "Bye."])

    def testDescriptionAlongsideArgumentHelp(self):
        formatter = HelpFormatter("prog", "Copy things.")
        self.assertEqual(formatter.description, "Copy things.")
        text = formatter.format_help([INPUT], [COUNT])
        self.assertIn("\nCopy things.\n", text)
        self.assertIn("    INPUT" + " " * 23 + "The input file\n", text)
        self.assertIn("A counter (default: '5')\n", text)

    def testExplicitEmptyProgKept(self):
        formatter = HelpFormatter("")
        self.assertEqual(formatter.prog, "")
        self.assertEqual(formatter.format_help([], []), "usage:\n")

    def testDescriptionWrapped(self):
        text = HelpFormatter("prog", "word " * 40, max_length=20).format_help([], [])
        for line in text.splitlines():
            self.assertLessEqual(len(line), 20)

    def testOptionalArityAndNoShort(self):
        color = Argument("color", arity=Arity.OPTIONAL, help="Colorize", default="auto")
        text = HelpFormatter("prog").format_help([], [color])
        self.assertIn("usage: prog [--color [COLOR]]\n", text)
        self.assertIn("        --color [COLOR]" + " " * 9 + "Colorize (default: 'auto')\n", text)

    def testNoDefaultForPresenceFlags(self):
        verbose = Argument("verbose", "v", help="Talk more", default="false")
        self.assertNotIn("default", HelpFormatter("prog").format_help([], [verbose]))

    def testOverflowingLeftColumnPushesHelpDown(self):
        long = Argument("supercalifragilistichespiralidoso", "s", help="Long one")
        lines = HelpFormatter("prog").format_help([], [long]).splitlines()
        index = lines.index("    --supercalifragilistichespiralidoso")
        self.assertEqual(lines[index - 1], "    -s,")
        self.assertEqual(lines[index + 1], " " * 32 + "Long one")

    def testUsageContinuationIndent(self):
        arguments = [Argument("option%d" % i, arity=Arity.REQUIRED) for i in range(6)]
        lines = HelpFormatter("prog", max_length=40).format_help([], arguments).splitlines()
        usage = [line for line in lines[:lines.index("")]]
        self.assertGreater(len(usage), 1)
        for line in usage[1:]:
            self.assertTrue(line.startswith(" " * 12))
            self.assertFalse(line.startswith(" " * 13))

    def testLongProgramNameOnItsOwnLine(self):
        prog = "p" * 40
        lines = HelpFormatter(prog).format_help([INPUT], []).splitlines()
        self.assertEqual(lines[0], "usage: " + prog)
        self.assertEqual(lines[1], " " * 32 + "INPUT")

    def testParametersExposed(self):
        formatter = HelpFormatter("prog", indent_base=2, indent_help=20, max_length=60, indent_max_usage=10)
        self.assertEqual(
            (formatter.indent_base, formatter.indent_help, formatter.max_length, formatter.indent_max_usage),
            (2, 20, 60, 10),
        )

    def testParametersValidated(self):
        with self.assertRaises(TypeError):
            HelpFormatter("prog", max_length="80")
        with self.assertRaises(ValueError):
            HelpFormatter("prog", indent_base=-1)
        with self.assertRaises(ValueError):
            HelpFormatter("prog", indent_base=10, indent_help=5)
        with self.assertRaises(TypeError):
            HelpFormatter("prog", description=3)


class TestTerminalWrapHelpFormatter(TestCase):
    """Behavioral tests for terminal-width injection."""

    def testTerminalWidth(self):
        console = Console(file=io.StringIO(), force_terminal=True, width=50, height=25)
        self.assertEqual(TerminalWrapHelpFormatter("prog", console=console).max_length, 50)

    def testNotATerminalIsUnbounded(self):
        console = Console(file=io.StringIO(), force_terminal=False)
        self.assertEqual(TerminalWrapHelpFormatter("prog", console=console).max_length, sys.maxsize)

    def testLayoutForwarded(self):
        console = Console(file=io.StringIO(), force_terminal=False)
        formatter = TerminalWrapHelpFormatter("prog", console=console, indent_help=24)
        self.assertEqual(formatter.indent_help, 24)


if __name__ == "__main__":
    unittest.main()
