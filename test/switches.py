"""
Switch grammar tests.

Scope
- Accepted slash and dash forms, with ':' and '=' separators and glued values.
- Tokens that must fall back to positional handling (whitespace, bare prefixes).
- has_value and the compact representation.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from helmsman import Switch


class TestSwitchParsing(TestCase):
    """Behavioral tests for Switch.tryparse."""

    def testBareSwitchesInEveryPrefix(self):
        for token in ("/name", "-name", "--name"):
            with self.subTest(token=token):
                switch = Switch.tryparse(token)
                self.assertEqual(switch, Switch("name", ""))
                self.assertFalse(switch.has_value)

    def testSeparatedValues(self):
        for prefix in ("/", "-", "--"):
            for separator in (":", "="):
                token = f"{prefix}path{separator}program.cs"
                with self.subTest(token=token):
                    self.assertEqual(Switch.tryparse(token), Switch("path", "program.cs"))

    def testGluedBooleanValues(self):
        self.assertEqual(Switch.tryparse("/flag+").value, "+")
        self.assertEqual(Switch.tryparse("/flag-").value, "-")
        self.assertEqual(Switch.tryparse("--flag-").value, "-")
        self.assertEqual(Switch.tryparse("--flag:-").value, "-")
        self.assertEqual(Switch.tryparse("--flag=+").value, "+")

    def testValueKeepsEverythingAfterTheSeparator(self):
        self.assertEqual(Switch.tryparse("--message=deleted old files").value, "deleted old files")
        self.assertEqual(Switch.tryparse("/define:key=value").value, "key=value")
        self.assertEqual(Switch.tryparse("-m:").value, "")

    def testNameIsCaseSensitiveText(self):
        self.assertEqual(Switch.tryparse("--Path=x").name, "Path")

    def testWhitespaceRejectsTheWholeToken(self):
        for token in ("/name value", "/ name", "- name=value", "-- name =value", "-na me", "--name =value"):
            with self.subTest(token=token):
                self.assertIsNone(Switch.tryparse(token))

    def testBlankTokensAreNeverSwitches(self):
        for token in (None, "", " ", "    ", "\t"):
            with self.subTest(token=token):
                self.assertIsNone(Switch.tryparse(token))

    def testBarePrefixesAreNotSwitches(self):
        for token in ("/", "-", "--", "---name", "//name", "/:value", "--=value"):
            with self.subTest(token=token):
                self.assertIsNone(Switch.tryparse(token))

    def testPlainWordsAreNotSwitches(self):
        for token in ("name", "program.cs", "svn:ignore", "*", "."):
            with self.subTest(token=token):
                self.assertIsNone(Switch.tryparse(token))

    def testNonStringTokenRaises(self):
        with self.assertRaises(TypeError):
            Switch.tryparse(42)

    def testRepresentation(self):
        self.assertEqual(repr(Switch("name", "value")), "name('value')")
        self.assertEqual(repr(Switch("name")), "name('')")

    def testHasValue(self):
        self.assertTrue(Switch("name", "x").has_value)
        self.assertFalse(Switch("name", "").has_value)


if __name__ == "__main__":
    unittest.main()
