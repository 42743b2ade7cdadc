"""
Usage writer and fault rendering tests.

Scope
- Each DefaultUsageWriter notification builds the matching fault, records it
  and (unless deferred) prints header, fault and usage.
- Signature and parameter list layout.
- "did you mean" hints for unknown commands and switches.
- Fault codes, host overrides (__codes__, __docs__) and copy.replace support.

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured with a plain, wide rich Console writing to a StringIO.
"""
import copy
import io
import sys
import unittest
from typing import Annotated
from unittest import TestCase, mock

from rich.console import Console

from helmsman import (
    CommandNameRequiredError,
    DefaultUsageWriter,
    FaultCode,
    InvalidArgumentCountError,
    InvalidArgumentNameError,
    InvalidArgumentValueError,
    InvalidCommandNameError,
    InvalidSwitchFormatError,
    InvocationError,
    ShortName,
    UsageFault,
    describe,
    getdoc,
)

__version__ = "2.1.0"
__copyright__ = "Copyright (c) the svn people"


class Svn:
    """A pretend version control client."""

    @ShortName("st")
    def status(self):
        """Show the working copy status."""

    @ShortName("ci")
    def commit(
            self,
            path: Annotated[str, ShortName("p"), "file or directory to commit"],
            message: Annotated[str, ShortName("m"), "log message"],
    ):
        """Send changes to the repository."""

    def log(self, verbose: Annotated[bool, "show changed paths"] = False, limit: int = 10, path: str = "."):
        """Show the log messages."""

    def diff(self, *files: str):
        """Display local modifications."""


class UsageTestCase(TestCase):

    def setUp(self):
        self.buffer = io.StringIO()
        self.console = Console(file=self.buffer, width=120, color_system=None, force_terminal=False)
        self.descriptor = describe(Svn)
        self.writer = DefaultUsageWriter(self.descriptor, self.console, colorful=False)

    @property
    def output(self):
        return self.buffer.getvalue()

    def method(self, name):
        return self.descriptor.getmethod(name)


class TestNotifications(UsageTestCase):

    def testCommandNameRequired(self):
        self.writer.command_name_required()
        fault, = self.writer.faults
        self.assertIsInstance(fault, CommandNameRequiredError)
        self.assertIn("a command name is required", self.output)
        self.assertIn("choose one of: status, commit, log, diff", self.output)
        for name in ("status[st]", "commit[ci]", "log", "diff"):
            self.assertIn(name, self.output)

    def testInvalidCommandNameSuggestsTheClosestName(self):
        self.writer.invalid_command_name("stat")
        fault, = self.writer.faults
        self.assertIsInstance(fault, InvalidCommandNameError)
        self.assertEqual(fault.name, "stat")
        self.assertIn("'stat' is not a known command", self.output)
        self.assertIn("did you mean 'status'?", self.output)

    def testInvalidArgumentCountShowsOnlyThatMethod(self):
        self.writer.invalid_argument_count(self.method("commit"))
        fault, = self.writer.faults
        self.assertIsInstance(fault, InvalidArgumentCountError)
        self.assertIs(fault.method, self.method("commit"))
        self.assertIn("wrong number of arguments for 'commit'", self.output)
        self.assertIn("commit[ci]", self.output)
        self.assertNotIn("status[st]", self.output)

    def testInvalidSwitchFormat(self):
        self.writer.invalid_switch_format("stray")
        fault, = self.writer.faults
        self.assertIsInstance(fault, InvalidSwitchFormatError)
        self.assertEqual(fault.token, "stray")
        self.assertIn("cannot tell which argument 'stray' belongs to", self.output)

    def testInvalidArgumentNameSuggestsTheClosestSwitch(self):
        self.writer.invalid_argument_name(self.method("commit"), "pth")
        fault, = self.writer.faults
        self.assertIsInstance(fault, InvalidArgumentNameError)
        self.assertIn("'commit' has no argument named 'pth'", self.output)
        self.assertIn("did you mean '--path'?", self.output)

    def testInvalidArgumentValue(self):
        limit = self.method("log").getparameter("limit")
        self.writer.invalid_argument_value(limit, "ten")
        fault, = self.writer.faults
        self.assertIsInstance(fault, InvalidArgumentValueError)
        self.assertIs(fault.parameter, limit)
        self.assertEqual(fault.value, "ten")
        self.assertIn("'ten' is not a valid int for '--limit'", self.output)

    def testException(self):
        error = ValueError("broken")
        self.writer.exception(self.method("status"), error)
        fault, = self.writer.faults
        self.assertIsInstance(fault, InvocationError)
        self.assertIs(fault.exception, error)
        self.assertIn("'status' failed: broken", self.output)
        self.assertIn("raised ValueError", self.output)

    def testFaultHeader(self):
        self.writer.invalid_switch_format("stray")
        self.assertIn("[ svn — 21112 | Invalid Switch Format ]", self.output)

    def testDeferredWriterOnlyCollects(self):
        writer = DefaultUsageWriter(self.descriptor, self.console, deferred=True)
        writer.command_name_required()
        writer.invalid_command_name("x")
        writer.usage()
        self.assertEqual(self.output, "")
        self.assertEqual([type(fault) for fault in writer.faults], [CommandNameRequiredError, InvalidCommandNameError])

    def testFancyOutput(self):
        writer = DefaultUsageWriter(self.descriptor, self.console, colorful=False, fancy=True)
        writer.invalid_switch_format("stray")
        self.assertIn("cannot tell which argument 'stray' belongs to", self.output)

    def testComponentMayBeGivenAsAnInstance(self):
        self.assertIs(DefaultUsageWriter(Svn(), self.console).component, self.descriptor)

    def testInvalidConsoleRaises(self):
        with self.assertRaises(TypeError):
            DefaultUsageWriter(self.descriptor, io.StringIO())


class TestLayout(UsageTestCase):

    def testHeader(self):
        self.writer.usage()
        lines = self.output.splitlines()
        self.assertEqual(lines[0], "A pretend version control client. - v2.1.0")
        self.assertEqual(lines[1], "Copyright (c) the svn people")

    def testSignatures(self):
        self.writer.usage()
        self.assertIn("commit[ci] <--path[-p]> <--message[-m]>", self.output)
        self.assertIn("log [--verbose-] [--limit=10] [--path=.]", self.output)
        self.assertIn("diff [--files ...]", self.output)

    def testDescriptionsAndParameterList(self):
        self.writer.usage()
        self.assertIn("  - Send changes to the repository.", self.output)
        self.assertIn("--path:     file or directory to commit", self.output)
        self.assertIn("--message:  log message", self.output)
        self.assertIn("--verbose[+|-]:  show changed paths", self.output)


class TestFaults(TestCase):

    def testCodesAreStable(self):
        self.assertEqual(InvalidArgumentNameError.__code__, FaultCode.INVALID_ARGUMENT_NAME)
        self.assertEqual(FaultCode.COMMAND_NAME_REQUIRED, 21101)
        self.assertEqual(InvalidArgumentNameError("x").code, FaultCode.INVALID_ARGUMENT_NAME)

    def testHostMayRemapCodes(self):
        with mock.patch.object(sys.modules["__main__"], "__codes__", {FaultCode.INVALID_COMMAND_NAME: "E-CMD"}, create=True):
            self.assertEqual(FaultCode.INVALID_COMMAND_NAME.normalize(), "E-CMD")
        self.assertEqual(FaultCode.INVALID_COMMAND_NAME.normalize(), "21102")

    def testHostMayDocumentCodes(self):
        with mock.patch.object(sys.modules["__main__"], "__docs__", {FaultCode.INVOCATION_EXCEPTION: "see the manual"}, create=True):
            self.assertEqual(getdoc(FaultCode.INVOCATION_EXCEPTION), "see the manual")
            self.assertIsNone(getdoc(FaultCode.INVALID_ARGUMENT_COUNT))
        with self.assertRaises(TypeError):
            getdoc(21131)

    def testReplaceKeepsTheMessage(self):
        fault = InvalidSwitchFormatError("message", token="x", colorful=True)
        replaced = copy.replace(fault, colorful=False)
        self.assertIsInstance(replaced, InvalidSwitchFormatError)
        self.assertEqual(str(replaced), "message")
        self.assertEqual(replaced.token, "x")
        self.assertFalse(replaced.options["colorful"])

    def testOptionsAreReadOnly(self):
        fault = UsageFault("message", token="x")
        with self.assertRaises(TypeError):
            fault.options["token"] = "y"
        with self.assertRaises(AttributeError):
            fault.missing  # NOQA: B-018


if __name__ == "__main__":
    unittest.main()
