"""
Faults and results behavioral tests.

Scope
- Validate fault rendering (plain and rich), options merging and trigger().
- Validate the typed parse results and their resolve() exit paths.
- Validate the Unset sentinel helpers shared by every layer.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import io
import unittest
import warnings
from unittest import TestCase

from rich.console import Console
from rich.text import Text

from cmdarg import (
    EmptyOptionValueWarning,
    FaultCode,
    HelpRequested,
    InvalidValueError,
    ParseFailure,
    Parsed,
    Registration,
    UnknownSwitchError,
    trigger,
)
from cmdarg.utils import Unset, UnsetType, coalesce, mirror


def _console():
    return Console(file=io.StringIO(), force_terminal=False, color_system=None)


class TestFaults(TestCase):
    """Behavioral tests for fault objects and trigger()."""

    def testRegistrationCodes(self):
        self.assertEqual(
            (Registration.SUCCESS, Registration.INVALID_ARGUMENT, Registration.DUPLICATED_ARGUMENT),
            (0, -1, -2),
        )

    def testPlainRendering(self):
        fault = UnknownSwitchError("unrecognized option '--x'", prog="tool", hint="try 'tool --help'")
        self.assertEqual(str(fault), "tool: unrecognized option '--x'\n  → try 'tool --help'")

    def testRenderingWithoutProg(self):
        self.assertEqual(str(InvalidValueError("bad")), "bad")

    def testRichRendering(self):
        text = InvalidValueError("bad", prog="tool").__rich__()
        self.assertIsInstance(text, Text)
        self.assertEqual(text.plain, "tool: bad")

    def testOptionsAreReadOnly(self):
        fault = InvalidValueError("bad", code=FaultCode.INVALID_VALUE)
        self.assertEqual(fault.code, FaultCode.INVALID_VALUE)
        with self.assertRaises(TypeError):
            fault.options["code"] = 0  # type: ignore[index]

    def testReplaceMergesOptions(self):
        fault = InvalidValueError("bad", code=FaultCode.INVALID_VALUE)
        replaced = copy.replace(fault, prog="tool")
        self.assertIsInstance(replaced, InvalidValueError)
        self.assertEqual(dict(replaced.options), {"code": FaultCode.INVALID_VALUE, "prog": "tool"})
        self.assertNotIn("prog", fault.options)

    def testTriggerRaisesExceptions(self):
        with self.assertRaises(InvalidValueError) as context:
            trigger(InvalidValueError("bad"), prog="tool")
        self.assertEqual(str(context.exception), "tool: bad")

    def testTriggerWarnsWarnings(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            trigger(EmptyOptionValueWarning("empty value"), stacklevel=1)
        self.assertEqual(len(caught), 1)
        self.assertIs(caught[0].category, EmptyOptionValueWarning)

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))


class TestResults(TestCase):
    """Behavioral tests for Parsed, HelpRequested and ParseFailure."""

    def testParsedIsMapping(self):
        result = Parsed({"count": "10"})
        self.assertEqual(dict(result), {"count": "10"})
        self.assertEqual(len(result), 1)
        self.assertIs(result.resolve(), result)

    def testParsedSnapshot(self):
        values = {"count": "10"}
        result = Parsed(values)
        values["count"] = "11"
        self.assertEqual(result["count"], "10")

    def testHelpRequestedResolve(self):
        stdout = _console()
        with self.assertRaises(SystemExit) as context:
            HelpRequested("usage: prog\n").resolve(stdout)
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(stdout.file.getvalue(), "usage: prog\n")

    def testParseFailureResolve(self):
        stderr = _console()
        failure = ParseFailure(InvalidValueError("bad", prog="prog"), "usage: prog\n")
        self.assertEqual(failure.status, 1)
        with self.assertRaises(SystemExit) as context:
            failure.resolve(stderr=stderr)
        self.assertEqual(context.exception.code, 1)
        self.assertEqual(stderr.file.getvalue(), "prog: bad\n\nusage: prog\n")
        self.assertEqual(stderr.file.getvalue(), failure.text)


class TestUtils(TestCase):
    """Behavioral tests for the Unset sentinel and helpers."""

    def testUnsetIsSingletonAndFalsy(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "x"), "x")
        self.assertEqual(coalesce("", "x"), "")
        self.assertIsNone(coalesce(Unset))

    def testUnsetUnions(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(3, str | Unset)

    def testMirrorFreezesContainers(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        with self.assertRaises(TypeError):
            holder.table["b"] = 2
        self.assertEqual(holder._table, {"a": 1})


if __name__ == "__main__":
    unittest.main()
