"""
argsmith help rendering.

Two renderers over the same per-argument metadata (flag label, long label,
description, requirement tags):

- describe(parser) → plain text, one line per argument, help last:

      Parser name: copy
      Copy files around
      -j  --jobs=<int>  number of workers  [default = 1]
          --source=<string>    [repeated, positional]
      -h  --help  Display this help and exit

- render(parser) → a rich renderable (usage line, table of arguments), styled
  with the palette below; display(parser) prints it.

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- Define __prog__ in __main__ to override the program name in the usage line.
- When the parser is not colorful, styling is suppressed.
"""
import sys
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import nodes
from .nodes import Kind

HELP_DESCRIPTION = "Display this help and exit"


def _arguments(parser):
    """
    declared arguments in declaration order, help last.
    """
    registry = parser.registry
    ordered = [(name, node) for name, node in registry if name != registry.help]
    if registry.help is not None:
        ordered.append((registry.help, registry.node(registry.help)))
    return ordered


def describe(parser):
    lines = ["Parser name: " + parser.name]
    if parser.description:
        lines.append(parser.description)
    for _, node in _arguments(parser):
        line = "  ".join((nodes.flag_label(node), nodes.long_label(node), node.description or ""))
        if requirements := nodes.requirements(node):
            line += "  [%s]" % requirements
        lines.append(line.rstrip())
    return "\n".join(lines) + "\n"


def _usage(parser, text, styler):
    registry = parser.registry
    main = sys.modules["__main__"]
    parts = [text(getattr(main, "__prog__", parser.name), styler("program-name"))]
    for name, node in _arguments(parser):
        if nodes.is_positional(node):
            continue
        label = "-" + node.flag if node.flag is not None else "--" + name
        if nodes.takes_value(node):
            label += " <%s>" % node.kind.value
        if nodes.has_default(node):
            parts.append(Text.assemble("[", text(label, styler("option-name")), "]"))
        else:
            parts.append(text(label, styler("option-name")))
    if registry.positional is not None:
        node = registry.node(registry.positional)
        metavar = "<%s>" % registry.positional
        if nodes.is_multi_value(node):
            metavar += "..."
        parts.append(text(metavar, styler("metavar")))
    return Text.assemble(text("usage: ", styler("usage-label")), Text(" ").join(parts))


def render(parser):
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "description-section": "italic #A3A3A3",
        "group-label": "bold #FFFFFF",
        "option-name": "bold #00E6FF",
        "flag-name": "bold #22C55E",
        "help-name": "bold #FF4D94",
        "metavar": "bold #FFD600",
        "argument-description": "#9CA3AF",
        "requirements": "#737373",
        "panel-title": "bold #FF4D94",
    } | getattr(sys.modules["__main__"], "__styles__", {}))

    def styler(style):
        return styles[style] if parser.colorful else ""

    def text(fragment, style=""):
        if not parser.colorful:
            return Text(str(fragment))
        return Text(str(fragment), style)

    renders = [_usage(parser, text, styler)]
    if parser.description:
        renders.append(text(parser.description, styler("description-section")))

    table = Table.grid(padding=(0, 2))
    for _ in range(4):
        table.add_column()
    for _, node in _arguments(parser):
        match node.kind:
            case Kind.BOOL:
                style = "flag-name"
            case Kind.HELP:
                style = "help-name"
            case _:
                style = "option-name"
        requirements = nodes.requirements(node)
        table.add_row(
            text(nodes.flag_label(node).strip(), styler(style)),
            text(nodes.long_label(node), styler(style)),
            text(node.description or "", styler("argument-description")),
            text("[%s]" % requirements if requirements else "", styler("requirements")),
        )
    if table.row_count:
        renders.append(Text(""))
        renders.append(text("arguments:", styler("group-label")))
        renders.append(table)

    if parser.fancy:
        return Panel(Group(*renders), title=text(parser.name, styler("panel-title")), title_align="left")
    return Group(*renders)


def display(parser, *, stderr=False):
    Console(stderr=stderr).print(render(parser))


__all__ = (
    "HELP_DESCRIPTION",
    "describe",
    "render",
    "display",
)
