"""
Help rendering tests (plain description and rich rendering).

Scope
- describe(): one line per argument, help last, requirement tags.
- render() / display(): usage line and argument table.
"""
import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import TestCase

from rich.console import Console

from argsmith import ArgParser
from argsmith import helper


def _copy_parser(**options):
    parser = ArgParser("copy", colorful=False, **options)
    parser.declare_string_argument("source").positional().multi_value()
    parser.declare_int_argument("jobs", "number of workers", flag="j").default(1)
    parser.declare_help("help", "Copy files around", flag="h")
    parser.declare_bool_flag("verbose", "talk more", flag="v")
    return parser


def _render(parser):
    console = Console(file=io.StringIO(), color_system=None, width=100)
    console.print(helper.render(parser))
    return console.file.getvalue()


class TestDescribe(TestCase):
    """Behavioral tests for the plain help description."""

    def testLayout(self):
        self.assertEqual(_copy_parser().help_description(), (
            "Parser name: copy\n"
            "Copy files around\n"
            "    --source=<string>    [repeated, positional]\n"
            "-j  --jobs=<int>  number of workers  [default = 1]\n"
            "-v  --verbose  talk more\n"
            "-h  --help  Display this help and exit\n"
        ))

    def testWithoutDescription(self):
        parser = ArgParser("bare")
        parser.declare_int_argument("nums").multi_value(3)
        self.assertEqual(parser.help_description(), (
            "Parser name: bare\n"
            "    --nums=<int>    [repeated, min args = 3]\n"
        ))

    def testBoolDefaultTag(self):
        parser = ArgParser("prog")
        parser.declare_bool_flag("color").default(True)
        self.assertIn("--color    [default = true]", parser.help_description())


class TestRender(TestCase):
    """Behavioral tests for rich help rendering."""

    def testUsageLine(self):
        output = _render(_copy_parser())
        self.assertIn("usage: copy [-j <int>] [-v] [-h] <source>...", output)
        self.assertIn("Copy files around", output)
        self.assertIn("arguments:", output)

    def testArgumentRows(self):
        output = _render(_copy_parser())
        self.assertIn("--jobs=<int>", output)
        self.assertIn("number of workers", output)
        self.assertIn("[default = 1]", output)
        self.assertIn("[repeated, positional]", output)

    def testRequiredArgumentsAreNotBracketed(self):
        parser = ArgParser("prog", colorful=False)
        parser.declare_string_argument("name")
        self.assertIn("usage: prog --name <string>", _render(parser))

    def testFancyPanel(self):
        output = _render(_copy_parser(fancy=True))
        self.assertIn("copy", output)
        self.assertIn("usage: copy", output)

    def testDisplayTargetsStreams(self):
        parser = _copy_parser()
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            parser.print_help()
        self.assertIn("usage: copy", stdout.getvalue())
        self.assertEqual(stderr.getvalue(), "")
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            parser.print_help(stderr=True)
        self.assertIn("usage: copy", stderr.getvalue())


if __name__ == "__main__":
    unittest.main()
