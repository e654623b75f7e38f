"""
argsmith parser layer: declare arguments, walk an argument vector, read values back.

What this module provides
- ArgParser: the public facade. It owns a Registry, exposes the declare_*
  builders and the typed accessors, and runs the tokenizer state machine.
- Argument handles (BoolArgument, IntArgument, StringArgument, HelpArgument):
  returned by declare_*; chainable builders over one declared node.

Quick start
    from argsmith import ArgParser

    parser = ArgParser("copy")
    parser.declare_string_argument("source").positional().multi_value()
    parser.declare_int_argument("jobs", flag="j").default(1)
    parser.declare_bool_flag("verbose", flag="v")
    parser.declare_help("help", "Copy files around", flag="h")

    if parser.parse(["copy", "-vj", "4", "a.txt", "b.txt"]):
        parser.int_value("jobs")         # 4
        parser.string_value("source", 1)  # "b.txt"

Token grammar
    value           := any token not matching flag/long-argument grammar
    flag-cluster    := '-' letter+ ['=' value]
    long-argument   := '--' name ['=' value]

Design notes
- Short flags cluster (-abc is -a -b -c); only the last flag of a cluster can
  take the following bare token as its value.
- A token that looks like a flag cluster but names an undeclared letter is a
  plain value (this is how negative numbers get through).
- Parsing never stops early: faults are recorded, the whole vector is consumed,
  and a single success flag is returned.
"""
import shlex
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from . import helper
from . import nodes
from .faults import *
from .nodes import Kind
from .registry import Registry
from .utils import *


class TokenType(Enum):
    VALUE = "value"
    FLAGS = "flags"
    ARGUMENT = "argument"
    EMPTY = "empty"


@dataclass
class ParseState:
    """
    transient bookkeeping of one parse() call.

    - token: the part of the current raw token still to be decoded.
    - type: classification of `token`.
    - pending: name of the argument named last (by flag or long name).
    - got_value: whether `pending` already consumed a value.
    - index: position of the next token to fetch.
    - position: position of the token being decoded (for messages).
    """
    tokens: list = field(repr=False)
    index: int
    token: str = ""
    type: TokenType = TokenType.EMPTY
    pending: str | None = None
    got_value: bool = False
    position: int = 0


class Argument:
    """
    base handle over one declared argument.
    """

    def __init__(self, registry, node):
        self._registry = registry
        self._node = node

    @property
    def name(self):
        return self._node.name

    @property
    def flag(self):
        return self._node.flag

    @property
    def description(self):
        return self._node.description

    @property
    def kind(self):
        return self._node.kind

    def __rich_repr__(self):
        yield from self._node.__rich_repr__()

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join("%s=%r" % pair[:2] for pair in self.__rich_repr__()))


class HelpArgument(Argument): ...


class BoolArgument(Argument):
    def default(self, value, /):
        nodes.set_default(self._node, value)
        return self

    def bind(self, target, attribute, /):
        nodes.bind(self._node, target, attribute)
        return self


class ValueArgument(Argument):
    """
    handle shared by the value-bearing kinds.

    builders
    - positional(): this argument receives bare values; at most one per parser.
    - multi_value(min_size=1): collect a sequence of values, requiring min_size.
    - default(value): make the argument optional.
    - bind(target, attribute=Unset): write values into caller-owned storage.
    """

    def positional(self):
        self._registry.set_positional(self._node.name)
        return self

    def multi_value(self, min_size=1):
        nodes.mark_multi_value(self._node, min_size)
        return self

    def default(self, value, /):
        nodes.set_default(self._node, value)
        return self

    def bind(self, target, attribute=Unset, /):
        nodes.bind(self._node, target, attribute)
        return self

    @property
    def is_positional(self):
        return nodes.is_positional(self._node)

    @property
    def is_multi_value(self):
        return nodes.is_multi_value(self._node)


class IntArgument(ValueArgument): ...


class StringArgument(ValueArgument): ...


class ArgParser:
    """
    declare arguments, parse an argument vector, read typed values back.

    runtime options
    - shell: render help (when requested) and faults (when parsing fails) to the console.
    - colorful: style rich output; when False, plain text only.
    - fancy: wrap rich output in panels.
    """

    def __init__(self, name, description=Unset, /, *, shell=False, colorful=True, fancy=False):
        if not isinstance(name, str):
            raise TypeError("parser name must be a string")
        if not isinstance(description, str | UnsetType):
            raise TypeError("parser description must be a string")
        self.name = name
        self.description = coalesce(description)
        self.shell = bool(shell)
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)
        self._registry = Registry()
        self._faults = []

    @property
    def registry(self):
        return self._registry

    @property
    def faults(self):
        """
        every fault and warning recorded by the last parse(), in order.
        """
        return tuple(self._faults)

    def declare_bool_flag(self, name, description=Unset, /, *, flag=None):
        return BoolArgument(self._registry, self._registry.declare(Kind.BOOL, flag, name, coalesce(description)))

    def declare_int_argument(self, name, description=Unset, /, *, flag=None):
        return IntArgument(self._registry, self._registry.declare(Kind.INT, flag, name, coalesce(description)))

    def declare_string_argument(self, name, description=Unset, /, *, flag=None):
        return StringArgument(self._registry, self._registry.declare(Kind.STRING, flag, name, coalesce(description)))

    def declare_help(self, name, description=Unset, /, *, flag=None):
        """
        declare the help switch; `description` describes the program itself.
        """
        if not isinstance(description, str | UnsetType):
            raise TypeError("program description must be a string")
        handle = HelpArgument(self._registry, self._registry.declare(Kind.HELP, flag, name, helper.HELP_DESCRIPTION))
        self.description = coalesce(description, self.description)
        return handle

    def is_help_requested(self):
        return self._registry.help_requested

    def int_value(self, name, index=0):
        return nodes.int_value(self._registry.node(name), index)

    def string_value(self, name, index=0):
        return nodes.string_value(self._registry.node(name), index)

    def bool_value(self, name):
        return nodes.bool_value(self._registry.node(name))

    def values(self, name):
        return nodes.values(self._registry.node(name))

    def help_description(self):
        return helper.describe(self)

    def print_help(self, *, stderr=False):
        helper.display(self, stderr=stderr)

    def parse(self, tokens=Unset, /, *, index=1):
        """
        parse an argument vector; return True when every argument is satisfied.

        parameters
        - tokens:
          • Unset: read sys.argv.
          • str: a shell-like command line, split via shlex.split.
          • Iterable[str]: the argument vector itself.
          in every form the element at `index - 1` and before (by default the
          program name) is skipped.
        - index: position of the first token to decode.

        behavior
        - resets every argument, then walks the tokens with the state machine.
        - faults never abort the scan; they are recorded in `faults`.
        - when help was requested the result is True regardless of the other
          arguments (and help is printed in shell mode).
        """
        tokens = self._tokenize(tokens)
        if not isinstance(index, int) or isinstance(index, bool) or index < 0:
            raise TypeError("parse() argument 'index' must be a non-negative integer")

        self._registry.reset_all()
        self._faults.clear()

        state = ParseState(tokens, index)
        success = True
        while True:
            if state.type is TokenType.EMPTY:
                if state.index >= len(tokens):
                    break
                state.token = tokens[state.index]
                state.position = state.index
                state.index += 1
                state.type = self._classify(state.token)
                continue
            match state.type:
                case TokenType.VALUE:
                    success &= self._process_value(state)
                case TokenType.FLAGS:
                    success &= self._process_flags(state)
                case TokenType.ARGUMENT:
                    success &= self._process_argument(state)

        return self._finalize(success)

    def _tokenize(self, tokens):
        if tokens is Unset:
            return list(sys.argv)
        if isinstance(tokens, str):
            return shlex.split(tokens)
        if isinstance(tokens, Iterable):
            tokens = list(tokens)
            for token in tokens:
                if not isinstance(token, str):
                    raise TypeError("parse() argument must be a string or an iterable of strings")
            return tokens
        raise TypeError("parse() argument must be a string or an iterable of strings")

    def _classify(self, token):
        if not token:
            return TokenType.EMPTY
        if token in ("-", "--") or not token.startswith("-"):
            return TokenType.VALUE
        if not token.startswith("--"):
            flags = token[1:].partition("=")[0]
            if flags and all(self._registry.lookup_by_flag(flag) is not None for flag in flags):
                return TokenType.FLAGS
            return TokenType.VALUE
        if self._registry.lookup_by_long_name(token) is not None:
            return TokenType.ARGUMENT
        return TokenType.VALUE

    def _process_value(self, state):
        target = state.pending
        if target is not None:
            node = self._registry.node(target)
            if not (nodes.takes_value(node) and (nodes.is_multi_value(node) or not state.got_value)):
                target = None
        try:
            success = self._registry.route_value(target, state.token)
        except ParseFault as fault:
            self._record(fault, state)
            success = False
        state.token = ""
        state.type = TokenType.EMPTY
        state.got_value = True
        return success

    def _process_flags(self, state):
        flags, separator, value = state.token[1:].partition("=")
        for flag in flags:
            state.pending = self._registry.lookup_by_flag(flag)
            self._registry.invoke(state.pending)
        state.got_value = False
        self._inline(state, "-" + flags, separator, value)
        return True

    def _process_argument(self, state):
        state.pending = name = self._registry.lookup_by_long_name(state.token)
        self._registry.invoke(name)
        state.got_value = False
        separator, value = state.token[2 + len(name):2 + len(name) + 1], state.token[3 + len(name):]
        self._inline(state, "--" + name, separator, value)
        return True

    def _inline(self, state, input, separator, value):
        if value:
            state.token = value
            state.type = TokenType.VALUE
            return
        if separator:
            # '--name=' behaves like '--name'; the value may follow as the next token
            self._record(EmptyInlineValueWarning(
                "empty inline value for %r" % input,
                title="empty inline value",
                code=FaultCode.EMPTY_INLINE_VALUE,
                hint="add a value after '=' (for example: %s=<value>) or pass it after a space" % input,
                input=input,
                name=state.pending,
            ), state)
        state.token = ""
        state.type = TokenType.EMPTY

    def _record(self, fault, state):
        self._faults.append(type(fault)(
            "%s at %s position" % (fault.message, ordinal(state.position)) if state.position else fault.message,
            **{**fault.options, "index": state.position, "parser": self},
        ))

    def _unsatisfied(self, name):
        node = self._registry.node(name)
        if nodes.is_positional(node):
            usage = "a bare value"
        elif node.flag is not None:
            usage = "-%s <value> or --%s=<value>" % (node.flag, name)
        else:
            usage = "--%s=<value>" % name
        if nodes.is_multi_value(node):
            message = "argument %r needs at least %d values, got %d" % (
                name, node.payload.min_size, nodes.collected(node)
            )
        else:
            message = "argument %r is required" % name
        return UnsatisfiedArgumentError(
            message,
            title="unsatisfied argument",
            code=FaultCode.UNSATISFIED_ARGUMENT,
            hint="pass it as %s" % usage,
            name=name,
            parser=self,
        )

    def _finalize(self, success):
        """
        fold the satisfaction check into the result and surface the faults.

        - help requested: success, help printed in shell mode.
        - otherwise every unsatisfied argument that is not already known to be
          malformed is recorded as an UnsatisfiedArgumentError.
        - warnings are always surfaced; errors are rendered in shell mode only.
        """
        options = {"parser": self, "shell": self.shell, "colorful": self.colorful, "fancy": self.fancy}

        if self._registry.help_requested:
            success = True
            if self.shell:
                self.print_help()
        else:
            for name in self._registry.unsatisfied():
                success = False
                if not self._registry.node(name).faulty:
                    self._faults.append(self._unsatisfied(name))

        for fault in self._faults:
            if isinstance(fault, ArgumentWarning):
                trigger(fault, **options)

        if not success and self.shell:
            if exceptions := [fault for fault in self._faults if isinstance(fault, ArgumentException)]:
                trigger(ParseExit(exceptions), **options)

        return success


__all__ = (
    "ArgParser",
    "Argument",
    "BoolArgument",
    "ValueArgument",
    "IntArgument",
    "StringArgument",
    "HelpArgument",
    "TokenType",
    "ParseState",
)
