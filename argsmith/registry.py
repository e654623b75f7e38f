"""
argsmith argument registry.

The registry owns every declared node (keyed by logical name, in declaration
order), the sparse flag → name table, and the identity of the single
positional and the single help argument. The tokenizer consults it to classify
tokens and routes values through it; the parser facade reads typed values back
from it.
"""
import re

from . import nodes
from .faults import *
from .nodes import Kind

_NAME = re.compile(r"[^\s=\-][^\s=]*")


class Registry:
    """
    the set of declared arguments of one parser.

    invariants
    - names are unique and a name keeps its kind forever.
    - a flag maps to exactly one name, or to nothing.
    - at most one node is positional; at most one node is the help switch.
    """

    def __init__(self):
        self._nodes = {}
        self._flags = {}
        self._positional = None
        self._help = None

    def declare(self, kind, flag, name, description=None):
        """
        register a new argument and return its node.

        raises
        - DuplicateNameError when `name` is already declared.
        - DuplicateFlagError when `flag` (other than None) is already mapped.
        - MultipleHelpError when a second help argument is declared.
        - TypeError / ValueError for malformed names, flags or descriptions.
        """
        if not isinstance(kind, Kind):
            raise TypeError("declare() argument 'kind' must be a Kind")
        if not isinstance(name, str):
            raise TypeError("argument names must be strings")
        if not _NAME.fullmatch(name):
            raise ValueError("argument name %r must be non-empty, without whitespace or '=', "
                             "and must not start with '-'" % name)
        if flag is not None:
            if not isinstance(flag, str):
                raise TypeError("argument flags must be single-character strings")
            if len(flag) != 1 or flag in "-=" or flag.isspace():
                raise ValueError("argument flag %r must be a single character other than '-', '=' "
                                 "or whitespace" % flag)
        if description is not None and not isinstance(description, str):
            raise TypeError("argument descriptions must be strings")

        if name in self._nodes:
            raise DuplicateNameError(
                "argument %r is already declared" % name,
                title="duplicate name",
                code=FaultCode.DUPLICATE_NAME,
                hint="pick another name for the new argument",
                name=name,
            )
        if flag is not None and flag in self._flags:
            raise DuplicateFlagError(
                "flag '-%s' is already bound to argument %r" % (flag, self._flags[flag]),
                title="duplicate flag",
                code=FaultCode.DUPLICATE_FLAG,
                hint="pick another letter for %r or declare it without a flag" % name,
                name=name,
                flag=flag,
            )
        if kind is Kind.HELP and self._help is not None:
            raise MultipleHelpError(
                "help is already declared as %r" % self._help,
                title="multiple help",
                code=FaultCode.MULTIPLE_HELP,
                hint="declare a single help argument per parser",
                name=name,
            )

        self._nodes[name] = node = nodes.create(kind, name, flag, description)
        if flag is not None:
            self._flags[flag] = name
        if kind is Kind.HELP:
            self._help = name
        return node

    def set_positional(self, name):
        """
        make `name` the positional argument, eagerly enforcing uniqueness.
        """
        node = self.node(name)
        if self._positional is not None and self._positional != name:
            raise MultiplePositionalError(
                "argument %r cannot be positional, %r already is" % (name, self._positional),
                title="multiple positional",
                code=FaultCode.MULTIPLE_POSITIONAL,
                hint="only one argument can receive bare values",
                name=name,
                positional=self._positional,
            )
        nodes.mark_positional(node)
        self._positional = name

    @property
    def positional(self):
        return self._positional

    @property
    def help(self):
        return self._help

    @property
    def help_requested(self):
        return self._help is not None and self._nodes[self._help].used

    def node(self, name):
        try:
            return self._nodes[name]
        except (KeyError, TypeError):
            raise UnknownArgumentError(
                "argument %r is not declared" % (name,),
                title="unknown argument",
                code=FaultCode.UNKNOWN_ARGUMENT,
                hint="declare it before reading it",
                name=name,
            ) from None

    def lookup_by_flag(self, flag):
        return self._flags.get(flag)

    def lookup_by_long_name(self, token):
        """
        resolve a `--name[=value]` token to a declared name, or None.

        the match is the longest declared name that is a prefix of the token
        body and ends exactly at '=' or at the end of the token.
        """
        if not token.startswith("--"):
            return None
        body = token[2:]
        match = None
        for name in self._nodes:
            if body.startswith(name) and body[len(name):len(name) + 1] in ("", "="):
                if match is None or len(name) > len(match):
                    match = name
        return match

    def invoke(self, name):
        nodes.invoke(self.node(name))

    def route_value(self, name, raw):
        """
        hand `raw` to the named node, or to the positional node when name is None.

        raises NoPositionalDeclaredError when a bare value has no positional
        target; MalformedValueError propagates from int nodes.
        """
        if name is None:
            if self._positional is None:
                raise NoPositionalDeclaredError(
                    "no positional argument can take %r" % raw,
                    title="unexpected value",
                    code=FaultCode.NO_POSITIONAL_DECLARED,
                    hint="remove this extra value or name the argument it belongs to",
                    token=raw,
                )
            name = self._positional
        return nodes.add_value(self.node(name), raw)

    def unsatisfied(self):
        """
        names of the non-help arguments that are not satisfied, in declaration order.
        """
        return [name for name, node in self._nodes.items() if name != self._help and not nodes.is_satisfied(node)]

    def all_satisfied(self):
        if self.help_requested:
            return True
        return not self.unsatisfied()

    def reset_all(self):
        for node in self._nodes.values():
            nodes.reset(node)

    def __iter__(self):
        return iter(self._nodes.items())

    def __contains__(self, name):
        return name in self._nodes

    def __len__(self):
        return len(self._nodes)


__all__ = (
    "Registry",
)
