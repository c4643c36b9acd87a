"""
myargs faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain (registration, parsing, validation, warnings).
- ArgumentException / ArgumentWarning: base types that carry a message plus
  options (code, title, hint, argument, token, index, ...) and know how to
  render themselves with rich.
- ParseError: the aggregate raised once after a full parse pass when one or
  more fatal faults were collected. It is an ExceptionGroup, so hosts can use
  `except* MissingRequiredArgumentError`.
- trigger(): surface a fault (raise exceptions, warn warnings).
- report(): print a fault to the error console without raising.
- getdoc(): optional description lookup for a code from the host application.

Policy
- Registration faults are programming errors of the host: they are raised on
  the spot.
- Parse faults are collected during the pass and reported together; the
  library never terminates the process, the host decides what to do.
"""
import copy
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - registration (2110x)
      • DUPLICATE_ARGUMENT, AMBIGUOUS_SHORT_SYMBOL
    - parsing (2111x)
      • UNKNOWN_ARGUMENT, UNEXPECTED_POSITIONAL, MISSING_VALUE
    - validation (2112x)
      • MISSING_REQUIRED_ARGUMENT
    - warnings (22xxx)
      • AMBIGUOUS_SYMBOL_WARNING, FLAG_VALUE_IGNORED, EMPTY_VALUE, BARE_NAME

    normalize() allows host remapping to custom labels while keeping the
    numeric codes stable.
    """
    # --- registration errors (21xxx) ---
    DUPLICATE_ARGUMENT          = 21101
    AMBIGUOUS_SHORT_SYMBOL      = 21102

    # --- parsing errors (21xxx) ---
    UNKNOWN_ARGUMENT            = 21111
    UNEXPECTED_POSITIONAL       = 21112
    MISSING_VALUE               = 21113

    # --- validation errors (21xxx) ---
    MISSING_REQUIRED_ARGUMENT   = 21121

    # --- warnings (22xxx) ---
    AMBIGUOUS_SYMBOL_WARNING    = 22101
    FLAG_VALUE_IGNORED          = 22111
    EMPTY_VALUE                 = 22112
    BARE_NAME                   = 22113

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_PALETTES = {
    "error": {
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #00E5FF",  # neon cyan fault code
        "title": "bold #FF4DA6",  # pinky title
        "message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    },
    "warning": {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",  # amber fault code for warnings
        "title": "bold #FFC2E0",
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    },
}


def _render(fault, palette):
    """
    build the rich renderable shared by exceptions and warnings.

    layout
    - header: "[ prog — code | title ]"
    - body: the message, then " → hint" when a hint is present.
    - fancy=True wraps the body in a panel titled with the header.
    """
    options = fault.options
    colorful = options.get("colorful", True)
    styles = defaultdict(str, _PALETTES[palette] | options.get("styles", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), styles[style] if colorful else "")

    prog = options.get("program") or getattr(__import__("__main__"), "__prog__", "myargs")
    code = options.get("code")

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", "code"),
        " | ",
        text(options.get("title", palette), "title"),
        " ]",
    )
    parts = [text(fault.message, "message")]
    if hint := options.get("hint"):
        parts.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if options.get("fancy", False):
        return Panel(Group(*parts), title=header, title_align="left")
    return Group(header, *parts)


class ArgumentException(Exception):
    """
    base of every myargs error.

    the message is the one-line description; the options carry the structured
    context used by renderers and by hosts inspecting the fault:
    code, title, hint, docs, argument (long name), token, index.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def argument(self):
        return self.options.get("argument")

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return self.message

    def __rich__(self):
        return _render(self, "error")

    def __trigger__(self) -> None:
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DuplicateArgumentError(ArgumentException): ...
class AmbiguousShortSymbolError(ArgumentException): ...
class UnknownArgumentError(ArgumentException): ...
class UnexpectedPositionalError(ArgumentException): ...
class MissingValueError(ArgumentException): ...
class MissingRequiredArgumentError(ArgumentException): ...


class ArgumentWarning(ABC, Warning):
    """
    base of every myargs warning (soft feedback that never stops a parse).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def argument(self):
        return self.options.get("argument")

    def __str__(self):
        return self.message

    def __rich__(self):
        return _render(self, "warning")

    def __trigger__(self) -> None:
        warnings.warn(self, stacklevel=self.options.get("stacklevel", 2))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class AmbiguousShortSymbolWarning(ArgumentWarning): ...
class FlagValueIgnoredWarning(ArgumentWarning): ...
class EmptyValueWarning(ArgumentWarning): ...
class BareNameWarning(ArgumentWarning): ...


class ParseError(ExceptionGroup[ArgumentException]):
    """
    aggregate of the fatal faults collected during one parse pass.

    attributes
    - exceptions: the collected faults, in encounter order (validation faults last).
    - result: the partial ParseResult, so hosts can still inspect what was bound.
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad arguments", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad arguments", tuple(exceptions))
        self.options = MappingProxyType(options)

    @property
    def result(self):
        return self.options.get("result")

    def derive(self, exceptions):
        return type(self)(exceptions, **self.options)

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        prog = self.options.get("program") or getattr(__import__("__main__"), "__prog__", "myargs")

        header = Text.assemble(
            "[ ",
            Text(str(prog), "bold #E6E6F0" if colorful else ""),
            " — ",
            Text(self.message.title(), "bold #FF4DA6" if colorful else ""),
            " ]",
        )
        renders = [copy.replace(exception, colorful=colorful) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __trigger__(self) -> None:
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - exceptions are raised, warnings are emitted through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def report(fault, /, *, console=console, **options):
    """
    print a fault (or a ParseError) with rich, without raising or exiting.
    """
    if not hasattr(fault, "__rich__") or not hasattr(fault, "__replace__"):
        raise TypeError("report() argument must be a fault")
    console.print(copy.replace(fault, **options))


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ArgumentException",
    "DuplicateArgumentError",
    "AmbiguousShortSymbolError",
    "UnknownArgumentError",
    "UnexpectedPositionalError",
    "MissingValueError",
    "MissingRequiredArgumentError",
    "ArgumentWarning",
    "AmbiguousShortSymbolWarning",
    "FlagValueIgnoredWarning",
    "EmptyValueWarning",
    "BareNameWarning",
    "ParseError",
    "trigger",
    "report",
    "getdoc",
)
