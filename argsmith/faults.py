"""
argsmith faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the parser
  can report. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- ArgumentException / ArgumentWarning: base types that carry message + options
  and know how to render themselves in a friendly, lowercased, and actionable way.
- ParseExit: groups the faults recorded during one parse for rendering.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Families
- declaration errors are programmer errors in wiring the parser; they are
  raised immediately from the declare_* calls and the handle builders.
- parse faults are user errors in the argument vector; the parser records
  them, keeps scanning, and reports a single aggregate success flag.
- access errors come from reading values back after a parse; they are raised.

Integration
- ArgParser records parse faults while scanning and exposes them via `faults`.
- In shell mode, the recorded faults are rendered via rich on stderr.
"""
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - declaration (210xx)
      • DUPLICATE_NAME, DUPLICATE_FLAG, MULTIPLE_POSITIONAL, MULTIPLE_HELP
    - parsing (220xx)
      • MALFORMED_VALUE, NO_POSITIONAL_DECLARED, UNSATISFIED_ARGUMENT
    - access (230xx)
      • TYPE_MISMATCH, UNKNOWN_ARGUMENT, NOT_POPULATED
    - warnings (240xx)
      • EMPTY_INLINE_VALUE
    """
    # --- declaration errors (210xx) ---
    DUPLICATE_NAME          = 21001
    DUPLICATE_FLAG          = 21002
    MULTIPLE_POSITIONAL     = 21003
    MULTIPLE_HELP           = 21004

    # --- parse faults (220xx) ---
    MALFORMED_VALUE         = 22001
    NO_POSITIONAL_DECLARED  = 22002
    UNSATISFIED_ARGUMENT    = 22003

    # --- access errors (230xx) ---
    TYPE_MISMATCH           = 23001
    UNKNOWN_ARGUMENT        = 23002
    NOT_POPULATED           = 23003

    # --- warnings (240xx) ---
    EMPTY_INLINE_VALUE      = 24001

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(sys.modules["__main__"], "__codes__", {}).get(self, self.value))


def _renderer(fault, palette, title_style, message_style):
    """
    shared rich rendering for exceptions and warnings.

    styles come from `palette`, overridden by a __styles__ mapping in __main__;
    when the fault was surfaced with colorful=False every style is dropped.
    """
    main = sys.modules["__main__"]
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", True)
    fancy = fault.options.get("fancy", False)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    parser = fault.options.get("parser")
    prog = text(getattr(main, "__prog__", parser.name if parser is not None else "argsmith"), styler("prog-name"))

    header = Text.assemble("[ ", prog)
    if (code := fault.options.get("code")) is not None:
        header.append_text(Text.assemble(" — ", text(code.normalize(), styler("code"))))
    if title := fault.options.get("title"):
        header.append_text(Text.assemble(" | ", text(title.title(), styler(title_style))))
    header.append(" ]")

    message = text(fault.message, styler(message_style))
    parts = [message]
    if hint := fault.options.get("hint"):
        parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fancy:
        return Panel(Group(*parts), title=header, title_align="left")
    return Group(header, *parts)


class ArgumentException(Exception):
    """
    base type for every error raised or recorded by argsmith.

    the message is the one-sentence body; options carry the structured context
    (code, title, hint, and whatever the raising site knows: name, flag, token,
    index, ...). options are read-only after construction.
    """

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __str__(self):
        return self.message

    def __rich__(self):
        return _renderer(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error-title", "error-message")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DeclarationError(ArgumentException): ...
class DuplicateNameError(DeclarationError): ...
class DuplicateFlagError(DeclarationError): ...
class MultiplePositionalError(DeclarationError): ...
class MultipleHelpError(DeclarationError): ...


class ParseFault(ArgumentException): ...
class MalformedValueError(ParseFault): ...
class NoPositionalDeclaredError(ParseFault): ...
class UnsatisfiedArgumentError(ParseFault): ...


class AccessError(ArgumentException): ...
class TypeMismatchError(AccessError): ...
class UnknownArgumentError(TypeMismatchError): ...
class NotPopulatedError(AccessError): ...


class ArgumentWarning(ABC, Warning):
    """
    base type for non-fatal conditions met while parsing.
    """

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __str__(self):
        return self.message

    def __rich__(self):
        return _renderer(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning-title", "warning-message")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyInlineValueWarning(ArgumentWarning): ...


class ParseExit(ExceptionGroup):
    """
    the faults of one failed parse, grouped for rendering.
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad parse", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad parse", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = sys.modules["__main__"]
        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "title": "bold #FF4DA6",
        } | getattr(main, "__styles__", {}))
        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        parser = self.options.get("parser")
        prog = text(getattr(main, "__prog__", parser.name if parser is not None else "argsmith"), "prog-name")
        header = Text.assemble("[ ", prog, " — ", text(self.message.title(), "title"), " ]")

        renders = [exception.__replace__(colorful=colorful, fancy=False) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions
      are raised and warnings go through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(sys.modules["__main__"], "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "ArgumentException",
    "DeclarationError",
    "DuplicateNameError",
    "DuplicateFlagError",
    "MultiplePositionalError",
    "MultipleHelpError",
    "ParseFault",
    "MalformedValueError",
    "NoPositionalDeclaredError",
    "UnsatisfiedArgumentError",
    "AccessError",
    "TypeMismatchError",
    "UnknownArgumentError",
    "NotPopulatedError",
    "ArgumentWarning",
    "EmptyInlineValueWarning",
    "ParseExit",
    "trigger",
    "getdoc",
)
