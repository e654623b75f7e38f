"""
Tests for the internal helpers in argsmith.utils.

Scope
- Unset sentinel: singleton identity, falsy semantics, representation, finality,
  copy and pickle identity.
- coalesce(): only Unset is replaced; other falsey values are preserved.
- ordinal(): word forms for the first ten positions, numeric suffixes afterwards.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from argsmith.utils import *


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testNotEqualToNone(self):
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, None)

    def testCopyAndPicklePreserveIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinalClass(self):
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testUnionWithTypes(self):
        self.assertIsInstance(Unset, str | UnsetType)
        self.assertIsInstance("text", str | UnsetType)


class TestCoalesce(TestCase):
    """Behavioral tests for coalesce()."""

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testDefaultIsNone(self):
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalseyValues(self):
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 5), 0)
        self.assertEqual(coalesce("", "fallback"), "")


class TestOrdinal(TestCase):
    """Behavioral tests for ordinal()."""

    def testWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testTeens(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(113), "113th")

    def testSuffixes(self):
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(24), "24th")

    def testRejectsNonIntegers(self):
        with self.assertRaises(TypeError):
            ordinal("1")
        with self.assertRaises(TypeError):
            ordinal(True)


if __name__ == "__main__":
    unittest.main()
