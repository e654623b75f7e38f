"""
Argument node behavioral tests (value storage, satisfaction, binding).

Scope
- add_value(): per-kind storage and integer validation.
- is_satisfied() / reset(): satisfaction rules and per-parse reset.
- set_default(), mark_multi_value(), bind(): builder policies.
- Accessors and help labels.

Conventions
- Test method names follow CamelCase per project convention.
- Nodes are driven directly, without a parser around them.
"""
import unittest
from types import SimpleNamespace
from unittest import TestCase

from argsmith import nodes
from argsmith.faults import *
from argsmith.nodes import Kind


class TestIntNode(TestCase):
    """Behavioral tests for Int nodes."""

    def setUp(self):
        self.node = nodes.create(Kind.INT, "count", "c", "how many")

    def testFreshNodeIsUnsatisfied(self):
        self.assertFalse(nodes.is_satisfied(self.node))
        self.assertFalse(self.node.used)

    def testAcceptsSignedDecimals(self):
        self.assertTrue(nodes.add_value(self.node, "42"))
        self.assertEqual(nodes.int_value(self.node), 42)
        nodes.add_value(self.node, "-7")
        self.assertEqual(nodes.int_value(self.node), -7)
        self.assertTrue(self.node.used)
        self.assertTrue(nodes.is_satisfied(self.node))

    def testRejectsMalformedValues(self):
        for raw in ("4x2", "", "-", "+5", "1.5", " 3", "٣"):
            with self.subTest(raw=raw):
                nodes.reset(self.node)
                with self.assertRaises(MalformedValueError) as context:
                    nodes.add_value(self.node, raw)
                self.assertEqual(context.exception.options["token"], raw)
                self.assertIs(context.exception.code, FaultCode.MALFORMED_VALUE)
                self.assertTrue(self.node.faulty)
                self.assertFalse(nodes.is_satisfied(self.node))

    def testMalformedValueOverridesDefault(self):
        nodes.set_default(self.node, 5)
        with self.assertRaises(MalformedValueError):
            nodes.add_value(self.node, "five")
        self.assertFalse(nodes.is_satisfied(self.node))

    def testResetClearsFaultAndValue(self):
        with self.assertRaises(MalformedValueError):
            nodes.add_value(self.node, "nope")
        nodes.reset(self.node)
        self.assertFalse(self.node.faulty)
        self.assertFalse(self.node.used)
        with self.assertRaises(NotPopulatedError):
            nodes.int_value(self.node)

    def testResetIsIdempotent(self):
        nodes.set_default(self.node, 3)
        nodes.add_value(self.node, "9")
        nodes.reset(self.node)
        nodes.reset(self.node)
        self.assertEqual(nodes.int_value(self.node), 3)
        self.assertFalse(self.node.used)

    def testDefaultRoundTrip(self):
        nodes.set_default(self.node, 5)
        self.assertTrue(nodes.is_satisfied(self.node))
        self.assertEqual(nodes.int_value(self.node), 5)
        nodes.add_value(self.node, "9")
        self.assertEqual(nodes.int_value(self.node), 9)
        nodes.reset(self.node)
        self.assertEqual(nodes.int_value(self.node), 5)

    def testDefaultTypeIsChecked(self):
        with self.assertRaises(TypeError):
            nodes.set_default(self.node, "5")
        with self.assertRaises(TypeError):
            nodes.set_default(self.node, True)

    def testScalarIndexOutOfRange(self):
        nodes.add_value(self.node, "1")
        with self.assertRaises(IndexError):
            nodes.int_value(self.node, 1)

    def testTypeMismatch(self):
        nodes.add_value(self.node, "1")
        with self.assertRaises(TypeMismatchError) as context:
            nodes.string_value(self.node)
        self.assertIs(context.exception.options["actual"], Kind.INT)
        with self.assertRaises(TypeMismatchError):
            nodes.bool_value(self.node)


class TestMultiValueNode(TestCase):
    """Behavioral tests for multi-value nodes."""

    def setUp(self):
        self.node = nodes.create(Kind.INT, "nums")
        nodes.mark_multi_value(self.node, 2)

    def testMinimumSize(self):
        nodes.add_value(self.node, "1")
        self.assertFalse(nodes.is_satisfied(self.node))
        nodes.add_value(self.node, "2")
        self.assertTrue(nodes.is_satisfied(self.node))
        self.assertEqual(nodes.values(self.node), (1, 2))
        self.assertEqual(nodes.int_value(self.node, 1), 2)
        self.assertEqual(nodes.collected(self.node), 2)

    def testResetClearsValues(self):
        nodes.add_value(self.node, "1")
        nodes.reset(self.node)
        self.assertEqual(nodes.collected(self.node), 0)
        self.assertFalse(self.node.used)

    def testRemarkingKeepsCollectedValues(self):
        nodes.add_value(self.node, "1")
        nodes.mark_multi_value(self.node, 3)
        self.assertEqual(nodes.values(self.node), (1,))
        self.assertEqual(self.node.payload.min_size, 3)

    def testMinSizeMustBePositive(self):
        with self.assertRaises(ValueError):
            nodes.mark_multi_value(self.node, 0)
        with self.assertRaises(TypeError):
            nodes.mark_multi_value(self.node, "2")

    def testDefaultSatisfiesAndReadsBack(self):
        nodes.set_default(self.node, 4)
        self.assertTrue(nodes.is_satisfied(self.node))
        self.assertEqual(nodes.int_value(self.node), 4)
        self.assertEqual(nodes.values(self.node), (4,))


class TestStringNode(TestCase):
    """Behavioral tests for String nodes."""

    def testStoresVerbatim(self):
        node = nodes.create(Kind.STRING, "name")
        nodes.add_value(node, "--weird value=")
        self.assertEqual(nodes.string_value(node), "--weird value=")

    def testPositionalMark(self):
        node = nodes.create(Kind.STRING, "file")
        self.assertFalse(nodes.is_positional(node))
        nodes.mark_positional(node)
        self.assertTrue(nodes.is_positional(node))


class TestBoolAndHelpNodes(TestCase):
    """Behavioral tests for Bool and Help nodes."""

    def testBoolDefaultsToFalse(self):
        node = nodes.create(Kind.BOOL, "verbose", "v")
        self.assertFalse(nodes.bool_value(node))
        self.assertTrue(nodes.is_satisfied(node))
        self.assertFalse(nodes.takes_value(node))

    def testBoolInvoke(self):
        node = nodes.create(Kind.BOOL, "verbose", "v")
        nodes.invoke(node)
        self.assertTrue(nodes.bool_value(node))
        self.assertTrue(node.used)
        nodes.reset(node)
        self.assertFalse(nodes.bool_value(node))

    def testBoolIgnoresPayload(self):
        node = nodes.create(Kind.BOOL, "verbose")
        nodes.add_value(node, "no")
        self.assertTrue(nodes.bool_value(node))

    def testBoolCustomDefault(self):
        node = nodes.create(Kind.BOOL, "color")
        nodes.set_default(node, True)
        self.assertTrue(nodes.bool_value(node))
        nodes.reset(node)
        self.assertTrue(nodes.bool_value(node))

    def testHelp(self):
        node = nodes.create(Kind.HELP, "help", "h")
        self.assertTrue(nodes.is_satisfied(node))
        nodes.invoke(node)
        self.assertTrue(node.used)
        with self.assertRaises(TypeError):
            nodes.set_default(node, True)
        with self.assertRaises(TypeError):
            nodes.bind(node, SimpleNamespace(), "help")

    def testValueBuildersRejectFlags(self):
        node = nodes.create(Kind.BOOL, "verbose")
        with self.assertRaises(TypeError):
            nodes.mark_positional(node)
        with self.assertRaises(TypeError):
            nodes.mark_multi_value(node)

    def testIntInvokeWaitsForValue(self):
        node = nodes.create(Kind.INT, "count")
        nodes.invoke(node)
        self.assertFalse(node.used)


class TestBinding(TestCase):
    """Behavioral tests for caller-owned storage."""

    def testAttributeBinding(self):
        namespace = SimpleNamespace()
        node = nodes.create(Kind.INT, "count")
        nodes.set_default(node, 1)
        nodes.bind(node, namespace, "count")
        self.assertEqual(namespace.count, 1)
        nodes.add_value(node, "8")
        self.assertEqual(namespace.count, 8)
        self.assertEqual(nodes.int_value(node), 8)
        nodes.reset(node)
        self.assertEqual(namespace.count, 1)

    def testMappingBinding(self):
        options = {}
        node = nodes.create(Kind.STRING, "name")
        nodes.bind(node, options, "name")
        nodes.add_value(node, "value")
        self.assertEqual(options, {"name": "value"})

    def testBoolBinding(self):
        namespace = SimpleNamespace()
        node = nodes.create(Kind.BOOL, "verbose")
        nodes.bind(node, namespace, "verbose")
        nodes.reset(node)
        self.assertIs(namespace.verbose, False)
        nodes.invoke(node)
        self.assertIs(namespace.verbose, True)

    def testSequenceBinding(self):
        collected = []
        node = nodes.create(Kind.STRING, "files")
        nodes.mark_multi_value(node)
        nodes.bind(node, collected)
        nodes.add_value(node, "a")
        nodes.add_value(node, "b")
        self.assertEqual(collected, ["a", "b"])
        nodes.reset(node)
        self.assertEqual(collected, [])

    def testMultiValueAttributeBinding(self):
        namespace = SimpleNamespace()
        node = nodes.create(Kind.INT, "nums")
        nodes.mark_multi_value(node)
        nodes.bind(node, namespace, "nums")
        nodes.add_value(node, "3")
        self.assertEqual(namespace.nums, [3])
        nodes.reset(node)
        self.assertEqual(namespace.nums, [])

    def testScalarRequiresAttribute(self):
        node = nodes.create(Kind.INT, "count")
        with self.assertRaises(TypeError):
            nodes.bind(node, [])

    def testSequenceRequiresMutableSequence(self):
        node = nodes.create(Kind.INT, "nums")
        nodes.mark_multi_value(node)
        with self.assertRaises(TypeError):
            nodes.bind(node, (1, 2))


class TestLabels(TestCase):
    """Behavioral tests for help metadata."""

    def testRequirements(self):
        node = nodes.create(Kind.INT, "nums")
        nodes.mark_multi_value(node, 2)
        nodes.mark_positional(node)
        nodes.set_default(node, 5)
        self.assertEqual(nodes.requirements(node), "repeated, positional, min args = 2, default = 5")
        self.assertEqual(nodes.requirements(node, " | "), "repeated | positional | min args = 2 | default = 5")

    def testRequirementsOfPlainArguments(self):
        self.assertEqual(nodes.requirements(nodes.create(Kind.STRING, "name")), "")
        self.assertEqual(nodes.requirements(nodes.create(Kind.BOOL, "verbose")), "")

    def testLabels(self):
        node = nodes.create(Kind.INT, "count", "c")
        self.assertEqual(nodes.flag_label(node), "-c")
        self.assertEqual(nodes.long_label(node), "--count=<int>")
        node = nodes.create(Kind.STRING, "name")
        self.assertEqual(nodes.flag_label(node), "  ")
        self.assertEqual(nodes.long_label(node), "--name=<string>")
        self.assertEqual(nodes.long_label(nodes.create(Kind.BOOL, "verbose")), "--verbose")


if __name__ == "__main__":
    unittest.main()
