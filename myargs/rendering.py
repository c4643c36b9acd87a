"""
myargs help rendering.

Theme
- Immutable colour configuration handed to the renderer. The palette is a
  read-only mapping of style keys to rich style strings; overrides passed at
  construction are merged onto the default palette.
- colorful=False drops every style; fancy=True wraps help in a panel.

render_help(parser, theme, ...)
- Builds a rich renderable: usage line, description, arguments (grouped by
  kind or in registration order), epilog. Each argument shows its symbol,
  long name, requiredness, default and help text.

Palette keys
- usage-label, program-name, usage-section, description-section, epilog-section
- group-label, argument-description
- flag-name, keyword-name, metavar
- required-tag, default-tag, default-value
- panel-title
"""
from collections import deque
from types import MappingProxyType

from rich.console import Console, Group
from rich.containers import Lines
from rich.panel import Panel
from rich.text import Text

from .arguments import ArgumentKind
from .utils import *

_DEFAULT_STYLES = MappingProxyType({
    # === Head sections ===
    "usage-label": "bold #00E6FF",  # cyan, signature info
    "program-name": "bold #FF4D94",  # magenta-pink
    "usage-section": "bold #36C5F0",  # sky-blue
    "description-section": "italic #A3A3A3",
    "epilog-section": "#737373",

    # === Groups / arguments ===
    "group-label": "bold #FFFFFF",
    "argument-description": "#9CA3AF",

    # === Names / metavars ===
    "flag-name": "bold #22C55E",  # green for flags
    "keyword-name": "bold #00E6FF",  # cyan for keywords
    "metavar": "bold #FFD600",  # amber for values

    # === Tags ===
    "required-tag": "bold #EF4444",
    "default-tag": "#9CA3AF dim",
    "default-value": "#FFD600",

    # === Fancy panel ===
    "panel-title": "bold #FF4D94",
})


class Theme(metaclass=IntrospectiveType):
    """
    Immutable help/fault colour configuration.

    Parameters
    - styles: Mapping[str, str] of palette overrides (see module docstring).
    - colorful: apply styles at all (False renders plain text).
    - fancy: wrap the help in a rich panel.
    """

    __introspectable__ = (
        "styles",
        "colorful",
        "fancy",
    )

    __displayable__ = (
        "colorful",
        "fancy",
    )

    def __init__(self, styles=Unset, /, *, colorful=True, fancy=False):
        styles = coalesce(styles, {})
        if not hasattr(styles, "items"):
            raise TypeError(f"{type(self).__typename__} 'styles' must be a mapping")
        for key, value in styles.items():
            if key not in _DEFAULT_STYLES:
                raise ValueError(f"{type(self).__typename__} unknown style {key!r}")
            if not isinstance(value, str):
                raise TypeError(f"{type(self).__typename__} style {key!r} must be a string")

        self._styles = MappingProxyType(dict(_DEFAULT_STYLES) | dict(styles))
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)

    def replace(self, **overrides):
        """
        return a copy with some fields replaced (styles are merged, not swapped).
        """
        return type(self)(
            dict(self._styles) | dict(overrides.pop("styles", {})),
            colorful=overrides.pop("colorful", self._colorful),
            fancy=overrides.pop("fancy", self._fancy),
            **overrides,
        )

    def style(self, key, /):
        return self._styles.get(key, "") if self._colorful else ""

    def text(self, fragment, key="", /):
        if fragment is None or fragment == "":
            return Text("")
        return Text(str(fragment), self.style(key) if key else "")

    def __eq__(self, other):
        if not isinstance(other, Theme):
            return NotImplemented
        return (self._styles, self._colorful, self._fancy) == (other._styles, other._colorful, other._fancy)

    def __hash__(self):
        return hash((tuple(self._styles.items()), self._colorful, self._fancy))


def _metavar(spec, theme):
    label = spec.long_name.upper().replace("-", "_")
    return Text(" ").join(theme.text(label, "metavar") for _ in range(spec.arity))


def _names(spec, prefix, theme, *, short=False):
    style = "flag-name" if spec.kind is ArgumentKind.FLAG else "keyword-name"
    names = []
    if spec.short_symbol:
        names.append(theme.text(prefix + spec.short_symbol, style))
    if not (short and names):
        names.append(theme.text(prefix * 2 + spec.long_name, style))
    return Text(", ").join(names)


def _usage(parser, theme, width):
    """
    explicit usage wins; otherwise synthesize "usage: prog [-h] [-c COUNT] OUTPUT".
    """
    config = parser.config
    usage = Text()
    usage.append("usage", theme.style("usage-label")).append(":").append(" ")

    if config.usage:
        return usage.append(theme.text(config.usage, "usage-section"))

    usage.append(theme.text(config.program, "program-name")).append(" ")
    offset = len(usage)

    inputs = deque()
    for spec in parser.registry:
        match spec.kind:
            case ArgumentKind.FLAG:
                inputs.append(Text.assemble("[", _names(spec, config.prefix, theme, short=True), "]"))
            case ArgumentKind.KEYWORD:
                item = Text.assemble(_names(spec, config.prefix, theme, short=True), " ", _metavar(spec, theme))
                inputs.append(item if spec.required else Text.assemble("[", item, "]"))
            case ArgumentKind.POSITIONAL:
                item = _metavar(spec, theme)
                inputs.append(item if spec.required else Text.assemble("[", item, "]"))

    # wrap usage items across the width with a hanging indent
    try:
        lines = Lines([inputs.popleft()])
    except IndexError:
        lines = Lines()
    while inputs:
        if len(lines[-1]) + 1 + len(input := inputs.popleft()) > width - offset:
            lines.append(input)
        else:
            lines[-1].append(Text(" ") + input)

    try:
        usage.append(lines.pop(0))
    except IndexError:
        pass
    for line in lines:
        usage.append("\n").append(" " * offset).append(line)
    return usage


def _entry(spec, prefix, theme, console, width):
    """
    one argument row: names column, then help text and tags with a hanging indent.
    """
    padding = 2
    indent = 24

    if spec.kind is ArgumentKind.POSITIONAL:
        names = _metavar(spec, theme)
    elif spec.kind is ArgumentKind.KEYWORD:
        names = Text.assemble(_names(spec, prefix, theme), " ", _metavar(spec, theme))
    else:
        names = _names(spec, prefix, theme)

    section = Text(" " * padding).append(names)

    descr = theme.text(spec.help_text, "argument-description")
    if spec.required:
        descr.append(" " if descr else "").append(theme.text("[required]", "required-tag"))
    if spec.default_value is not None:
        descr.append(" " if descr else "").append(Text.assemble(
            theme.text("[default: ", "default-tag"),
            theme.text(spec.default_value or "''", "default-value"),
            theme.text("]", "default-tag"),
        ))

    if not descr:
        return section

    if len(section) >= indent - 1:
        section.append("\n").append(" " * indent)
    else:
        section.append(" " * (indent - len(section)))

    wrapped = descr.wrap(console, max(width - indent, 16))
    try:
        section.append(wrapped.pop(0))
    except IndexError:
        pass
    for line in wrapped:
        section.append("\n").append(" " * indent).append(line)
    return section


def render_help(parser, theme=Unset, /, *, console=Unset, description=True, usage=True, epilog=True, group=True):
    """
    build the help renderable for a parser.

    parameters
    - parser: ArgumentParser (reads its config and registry).
    - theme: Theme; defaults to the parser's theme.
    - console: Console used for width and wrapping; a stderr-less default console otherwise.
    - description/usage/epilog: include those sections.
    - group: list arguments under "flags:"/"keywords:"/"positionals:" headers;
      when False, a single "arguments:" list in registration order.
    """
    theme = coalesce(theme, parser.theme)
    if not isinstance(theme, Theme):
        raise TypeError("render_help() 'theme' must be a theme")
    console = coalesce(console, Console())
    config = parser.config
    width = console.width - 4 * theme.fancy

    renders = []

    if usage:
        renders.append(_usage(parser, theme, width).append("\n"))

    if description and config.description:
        renders.append(theme.text(config.description, "description-section").append("\n"))

    if group:
        sections = {}
        for spec in parser.registry:
            sections.setdefault(pluralize(spec.kind.value), []).append(spec)
    else:
        sections = {"arguments": parser.registry.all()}

    body = Text()
    for index, (label, specs) in enumerate(sections.items()):
        if not specs:
            continue
        body.append(theme.text(label, "group-label")).append(":").append("\n")
        for spec in specs:
            body.append(_entry(spec, config.prefix, theme, console, width)).append("\n")
        body.append("\n" * (index < len(sections) - 1))
    if body:
        renders.append(body)

    if epilog and config.epilog:
        renders.append(theme.text(config.epilog, "epilog-section").append("\n"))

    if not renders:
        return Group()

    renders[-1].rstrip()
    renderable = Group(*renders)

    if theme.fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[", " ", f"{config.program} HELP".upper(), " ", "]", style=theme.style("panel-title")),
            title_align="left",
        )
    return renderable


__all__ = (
    "Theme",
    "render_help",
)
