r"""
argsmith argument value nodes.

Overview
- Node: one declared argument. Shared fields (name, flag, description, the
  per-parse `used`/`faulty` marks) live on the node itself; the kind-specific
  fields live in its payload, a closed set of variants:
  • BoolPayload   → presence switch, implicitly defaulted to False.
  • IntPayload    → signed decimal integers, positional/multi-value capable.
  • StringPayload → raw text, positional/multi-value capable.
  • HelpPayload   → the help switch; stores nothing.
- Storage: where a node keeps its value(s), again a closed set:
  • Owned(value, values) → held by the node.
  • Bound(target, attribute) → written into a caller-owned object.

Every operation in this module dispatches on the payload/storage variant with
a match statement; nodes carry no behavior of their own.

Binding rules
- scalar arguments bind through an attribute name: the value is written with
  setattr(target, attribute, value), or with target[attribute] = value when the
  target is a mutable mapping.
- multi-value arguments bind either to a mutable sequence directly (no
  attribute; cleared on every reset and appended to while parsing) or to an
  attribute, which receives a fresh list on every reset.
- bound targets are aliased, never copied or replaced.

Satisfaction
- a node that received a malformed value during the current parse is faulty
  and never satisfied.
- otherwise: defaulted nodes (Bool always) are satisfied; multi-value nodes
  need at least `min_size` values; scalar nodes need to have been used once.
- Help is always satisfied.
"""
import re
from collections.abc import MutableMapping, MutableSequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .faults import *
from .utils import *

_DECIMAL = re.compile(r"-?[0-9]+")


class Kind(Enum):
    BOOL = "bool"
    INT = "int"
    STRING = "string"
    HELP = "help"


@dataclass(eq=False)
class Owned:
    value: Any = Unset
    values: list = field(default_factory=list)


@dataclass(eq=False)
class Bound:
    target: Any
    attribute: str | UnsetType = Unset


@dataclass(eq=False)
class BoolPayload:
    default: bool = False
    storage: Owned | Bound = field(default_factory=Owned)


@dataclass(eq=False)
class ValuePayload:
    """
    fields shared by the value-bearing kinds (Int and String).
    """
    positional: bool = False
    multi: bool = False
    min_size: int = 1
    default: Any = Unset
    storage: Owned | Bound = field(default_factory=Owned)


@dataclass(eq=False)
class IntPayload(ValuePayload): ...


@dataclass(eq=False)
class StringPayload(ValuePayload): ...


@dataclass(eq=False)
class HelpPayload: ...


@dataclass(eq=False)
class Node:
    name: str
    payload: BoolPayload | IntPayload | StringPayload | HelpPayload
    flag: str | None = None
    description: str | None = None
    used: bool = False
    faulty: bool = False

    @property
    def kind(self):
        match self.payload:
            case BoolPayload():
                return Kind.BOOL
            case IntPayload():
                return Kind.INT
            case StringPayload():
                return Kind.STRING
            case HelpPayload():
                return Kind.HELP

    def __rich_repr__(self):
        yield "name", self.name
        yield "kind", self.kind.value
        yield "flag", self.flag, None
        yield "description", self.description, None
        yield "used", self.used


def create(kind, name, flag=None, description=None):
    """
    build a fresh node of the given kind with default policies.
    """
    match kind:
        case Kind.BOOL:
            payload = BoolPayload()
        case Kind.INT:
            payload = IntPayload()
        case Kind.STRING:
            payload = StringPayload()
        case Kind.HELP:
            payload = HelpPayload()
        case _:
            raise TypeError("create() argument 'kind' must be a Kind")
    node = Node(name, payload, flag, description)
    reset(node)
    return node


def _write(storage, value):
    match storage:
        case Owned():
            storage.value = value
        case Bound(target=MutableMapping() as target, attribute=attribute):
            target[attribute] = value
        case Bound(target=target, attribute=attribute):
            setattr(target, attribute, value)


def _read(storage):
    match storage:
        case Owned(value=value):
            return value
        case Bound(target=MutableMapping() as target, attribute=attribute):
            return target.get(attribute, Unset)
        case Bound(target=target, attribute=attribute):
            return getattr(target, attribute, Unset)


def _sequence(storage):
    match storage:
        case Owned(values=values):
            return values
        case Bound(target=target, attribute=UnsetType()):
            return target
        case Bound():
            values = _read(storage)
            if not isinstance(values, MutableSequence):
                # the caller replaced the bound attribute; start a fresh list
                _write(storage, values := [])
            return values


def _clear(storage):
    match storage:
        case Owned():
            storage.values.clear()
        case Bound(target=target, attribute=UnsetType()):
            del target[:]
        case Bound():
            _write(storage, [])


def _expect(node, kind):
    if node.kind is not kind:
        raise TypeMismatchError(
            "argument %r is a %s argument, not a %s argument" % (node.name, node.kind.value, kind.value),
            title="type mismatch",
            code=FaultCode.TYPE_MISMATCH,
            hint="read it with the %s_value() accessor instead" % node.kind.value,
            name=node.name,
            expected=kind,
            actual=node.kind,
        )
    return node.payload


def _valued(node, operation):
    if not isinstance(node.payload, ValuePayload):
        raise TypeError("%s() applies only to int and string arguments, not to %s argument %r" % (
            operation, node.kind.value, node.name
        ))
    return node.payload


def takes_value(node):
    """
    whether the node waits for a value after being named on the command line.
    """
    return isinstance(node.payload, ValuePayload)


def is_multi_value(node):
    return isinstance(node.payload, ValuePayload) and node.payload.multi


def has_default(node):
    """
    whether the node can be omitted: Bool and Help always, Int and String with a default.
    """
    return not isinstance(node.payload, ValuePayload) or node.payload.default is not Unset


def is_positional(node):
    return isinstance(node.payload, ValuePayload) and node.payload.positional


def add_value(node, raw):
    """
    store one raw token into the node.

    behavior
    - Bool ignores the payload and stores True.
    - Help marks itself used and stores nothing.
    - Int accepts a signed ASCII decimal (leading '-' allowed, digits only after
      it); anything else marks the node faulty and raises MalformedValueError.
    - String stores the text verbatim.
    - multi-value nodes append, scalar nodes overwrite.

    returns True once the value is stored; the node is marked used.
    """
    match node.payload:
        case BoolPayload(storage=storage):
            _write(storage, True)
        case HelpPayload():
            pass
        case IntPayload() as payload:
            if not _DECIMAL.fullmatch(raw):
                node.faulty = True
                raise MalformedValueError(
                    "%r is not a valid integer for argument %r" % (raw, node.name),
                    title="malformed value",
                    code=FaultCode.MALFORMED_VALUE,
                    hint="pass a whole number such as 42 or -7",
                    name=node.name,
                    token=raw,
                )
            _store(payload, int(raw))
        case StringPayload() as payload:
            _store(payload, raw)
    node.used = True
    return True


def _store(payload, value):
    if payload.multi:
        _sequence(payload.storage).append(value)
    else:
        _write(payload.storage, value)


def invoke(node):
    """
    the hook run when a flag or long name mentions the node.

    Bool and Help are complete once named; Int and String wait for a value.
    """
    match node.payload:
        case BoolPayload() | HelpPayload():
            add_value(node, "")
        case ValuePayload():
            pass


def is_satisfied(node):
    if node.faulty:
        return False
    match node.payload:
        case BoolPayload() | HelpPayload():
            return True
        case ValuePayload(default=default) if default is not Unset:
            return True
        case ValuePayload(multi=True, min_size=min_size, storage=storage):
            return len(_sequence(storage)) >= min_size
        case ValuePayload():
            return node.used


def reset(node):
    """
    forget everything the previous parse stored in the node.

    idempotent; safe to call before any value was ever set. bound scalar
    targets without a default are left untouched.
    """
    node.used = False
    node.faulty = False
    match node.payload:
        case BoolPayload(default=default, storage=storage):
            _write(storage, default)
        case ValuePayload(multi=True, storage=storage):
            _clear(storage)
        case ValuePayload(default=default, storage=storage) if default is not Unset:
            _write(storage, default)
        case ValuePayload(storage=Owned() as storage):
            storage.value = Unset
        case ValuePayload() | HelpPayload():
            pass


def mark_positional(node):
    _valued(node, "positional").positional = True


def mark_multi_value(node, min_size=1):
    """
    switch the node to multi-value mode with a minimum value count.

    the sequence store is initialized on the first call only; later calls just
    update min_size and keep what was collected.
    """
    if not isinstance(min_size, int) or isinstance(min_size, bool):
        raise TypeError("multi_value() argument 'min_size' must be an integer")
    if min_size < 1:
        raise ValueError("multi_value() argument 'min_size' must be a positive integer")
    payload = _valued(node, "multi_value")
    if not payload.multi:
        payload.multi = True
        match payload.storage:
            case Owned() as storage:
                storage.value = Unset
                storage.values = []
            case Bound(attribute=UnsetType()):
                pass
            case Bound() as storage:
                _write(storage, [])
    payload.min_size = min_size


def set_default(node, value):
    match node.payload:
        case BoolPayload() as payload:
            if not isinstance(value, bool):
                raise TypeError("default() of flag %r must be a bool" % node.name)
        case IntPayload() as payload:
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError("default() of int argument %r must be an integer" % node.name)
        case StringPayload() as payload:
            if not isinstance(value, str):
                raise TypeError("default() of string argument %r must be a string" % node.name)
        case _:
            raise TypeError("help argument %r cannot have a default" % node.name)
    payload.default = value
    if not is_multi_value(node):
        _write(payload.storage, value)


def bind(node, target, attribute=Unset):
    """
    route the node's value(s) into caller-owned storage.

    - attribute given: the value lives in target.<attribute> (or target[attribute]
      for mutable mappings).
    - attribute omitted: only for multi-value arguments; target must be a
      mutable sequence and receives the collected values in place.
    """
    if isinstance(node.payload, HelpPayload):
        raise TypeError("help argument %r cannot be bound" % node.name)
    if attribute is Unset:
        if not is_multi_value(node):
            raise TypeError("scalar argument %r must be bound through an attribute or key" % node.name)
        if not isinstance(target, MutableSequence):
            raise TypeError("multi-value argument %r must be bound to a mutable sequence" % node.name)
        node.payload.storage = Bound(target)
        return
    if not isinstance(attribute, str):
        raise TypeError("bind() argument 'attribute' must be a string")
    node.payload.storage = storage = Bound(target, attribute)
    if is_multi_value(node):
        _write(storage, [])
    elif node.payload.default is not Unset:
        _write(storage, node.payload.default)


def _populated(node, payload):
    if not node.used and payload.default is Unset:
        raise NotPopulatedError(
            "argument %r was not given a value" % node.name,
            title="not populated",
            code=FaultCode.NOT_POPULATED,
            hint="check the result of parse() before reading values",
            name=node.name,
        )


def _value(node, payload, index):
    _populated(node, payload)
    if payload.multi:
        values = _sequence(payload.storage)
        if not values and payload.default is not Unset and index == 0:
            return payload.default
        return values[index]
    if index != 0:
        raise IndexError("argument %r holds a single value" % node.name)
    return _read(payload.storage)


def int_value(node, index=0):
    return _value(node, _expect(node, Kind.INT), index)


def string_value(node, index=0):
    return _value(node, _expect(node, Kind.STRING), index)


def bool_value(node):
    return _read(_expect(node, Kind.BOOL).storage)


def values(node):
    """
    every value the node currently holds, as a tuple.
    """
    payload = _valued(node, "values")
    _populated(node, payload)
    if payload.multi:
        return tuple(_sequence(payload.storage)) or ((payload.default,) if payload.default is not Unset else ())
    return (_read(payload.storage),)


def collected(node):
    """
    how many values the node received during the current parse.
    """
    payload = _valued(node, "collected")
    if payload.multi:
        return len(_sequence(payload.storage))
    return int(node.used)


def requirements(node, sep=", "):
    """
    compose the requirement tags shown next to an argument in help output.
    """
    tags = []
    match node.payload:
        case ValuePayload() as payload:
            if payload.multi:
                tags.append("repeated")
            if payload.positional:
                tags.append("positional")
            if payload.min_size != 1:
                tags.append("min args = %d" % payload.min_size)
            if payload.default is not Unset:
                tags.append("default = %s" % payload.default)
        case BoolPayload(default=True):
            tags.append("default = true")
    return sep.join(tags)


def flag_label(node):
    return "-" + node.flag if node.flag is not None else "  "


def long_label(node):
    match node.payload:
        case IntPayload():
            return "--%s=<int>" % node.name
        case StringPayload():
            return "--%s=<string>" % node.name
        case _:
            return "--" + node.name


__all__ = (
    # Variants
    "Kind",
    "Node",
    "Owned",
    "Bound",
    "BoolPayload",
    "ValuePayload",
    "IntPayload",
    "StringPayload",
    "HelpPayload",

    # Construction and builders
    "create",
    "mark_positional",
    "mark_multi_value",
    "set_default",
    "bind",

    # Parsing hooks
    "takes_value",
    "is_multi_value",
    "has_default",
    "is_positional",
    "add_value",
    "invoke",
    "is_satisfied",
    "reset",

    # Accessors
    "int_value",
    "string_value",
    "bool_value",
    "values",
    "collected",

    # Help rendering
    "requirements",
    "flag_label",
    "long_label",
)
