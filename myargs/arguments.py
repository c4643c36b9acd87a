r"""
myargs argument specifications.

Overview
- ArgumentKind: what an argument is on the command line.
  • FLAG: presence-only switch (-v/--verbose); bound to "true" when seen.
  • KEYWORD: named argument taking exactly one value (--count=5, -c 5, -c5).
  • POSITIONAL: unnamed argument bound by declaration order from bare tokens.

- ArgumentSpec: one registered argument (long name, optional short symbol,
  kind, requiredness, arity, default, help) plus its bound value.

- Bound values are a tagged variant keyed by arity:
  • Scalar(value): a single string (flags, keywords, arity-1 positionals,
    and every default).
  • Multi(values): a tuple of strings (positionals with arity > 1).

Metadata (sanitized on construction)
- long_name: non-empty string without whitespace or "=".
- short_symbol: None or a single non-space character other than "=".
- required: bool; always False for flags.
- arity: int >= 1; exactly 1 for flags and keywords.
- default_value: None or str; always None for flags.
- help_text: None or a non-empty string (trimmed).

Specs expose their metadata through read-only properties. The bound value is
only written by the parser (see _bind/_unbind), never by host code.
"""
import re
from enum import Enum
from typing import NamedTuple

from .utils import *


class ArgumentKind(Enum):
    """
    kind of a registered argument; the value doubles as its help group label.
    """
    FLAG = "flag"
    KEYWORD = "keyword"
    POSITIONAL = "positional"


class Scalar(NamedTuple):
    """
    a single bound value.
    """
    value: str

    def unwrap(self):
        return self.value


class Multi(NamedTuple):
    """
    several bound values, in input order (arity > 1).
    """
    values: tuple[str, ...]

    def unwrap(self):
        return tuple(self.values)


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate the long name and the short symbol.

    Rules
    - long_name: required string, trimmed, non-empty, no whitespace and no "="
      (the parser splits inline values at the first "=").
    - short_symbol: None or exactly one character that is neither whitespace
      nor "=". Prefix checks happen at registration, where the prefix is known.

    Raises
    - TypeError: wrong types.
    - ValueError: empty or malformed values.
    """
    if not isinstance(name := metadata["long_name"], str):
        raise TypeError(f"{cls.__typename__} 'long_name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'long_name' cannot be empty")
    elif not re.fullmatch(r"[^\s=]+", name):
        raise ValueError(f"{cls.__typename__} 'long_name' cannot contain whitespaces or '='")
    metadata["long_name"] = name

    if not isinstance(symbol := metadata["short_symbol"], str | None):
        raise TypeError(f"{cls.__typename__} 'short_symbol' must be a string or None")
    elif isinstance(symbol, str) and (len(symbol) != 1 or symbol.isspace() or symbol == "="):
        raise ValueError(f"{cls.__typename__} 'short_symbol' must be a single character other than '='")


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate requiredness, arity, default and help per kind.

    Kind rules
    - FLAG: required is False, arity is 1, default_value is None.
    - KEYWORD: arity is 1.
    - POSITIONAL: arity is any integer >= 1.

    Side effects
    - Mutates the provided metadata dict in place (trimmed help text).
    """
    if not isinstance(kind := metadata["kind"], ArgumentKind):
        raise TypeError(f"{cls.__typename__} 'kind' must be an argument kind")

    if not isinstance(metadata["required"], bool):
        raise TypeError(f"{cls.__typename__} 'required' must be a boolean")

    if not isinstance(arity := metadata["arity"], int) or isinstance(arity, bool):
        raise TypeError(f"{cls.__typename__} 'arity' must be an integer")
    elif arity < 1:
        raise ValueError(f"{cls.__typename__} 'arity' must be a positive integer")
    elif arity != 1 and kind is not ArgumentKind.POSITIONAL:
        raise ValueError(f"{kind.value} {cls.__typename__} 'arity' must be 1")

    if not isinstance(default := metadata["default_value"], str | None):
        raise TypeError(f"{cls.__typename__} 'default_value' must be a string or None")

    if kind is ArgumentKind.FLAG:
        if metadata["required"]:
            raise ValueError(f"flag {cls.__typename__} cannot be required")
        if default is not None:
            raise ValueError(f"flag {cls.__typename__} cannot have a 'default_value'")

    if not isinstance(help := metadata["help_text"], str | None):
        raise TypeError(f"{cls.__typename__} 'help_text' must be a string or None")
    elif isinstance(help, str) and not (help := help.strip()):
        raise ValueError(f"{cls.__typename__} 'help_text' cannot be empty")
    metadata["help_text"] = help


class ArgumentSpec(metaclass=IntrospectiveType):
    """
    One registered argument.

    Properties
    - long_name, short_symbol, kind, required, arity, default_value, help_text:
      sanitized, read-only metadata.
    - value: Scalar | Multi once bound, Unset before.
    - bound: True once a value (input or default) has been bound.

    Binding is the parser's job; specs are created through ArgumentParser.add_*
    or directly and handed to Registry.register().
    """

    __introspectable__ = (
        "long_name",
        "short_symbol",
        "kind",
        "required",
        "arity",
        "default_value",
        "help_text",
        "value",
    )

    __displayable__ = (
        "long_name",
        "short_symbol",
        "kind",
        "required",
        "value",
    )

    def __init__(
            self,
            kind,
            long_name,
            /,
            short_symbol=None,
            required=False,
            arity=1,
            default_value=None,
            help_text=None,
    ):
        metadata = {
            "kind": kind,
            "long_name": long_name,
            "short_symbol": short_symbol,
            "required": required,
            "arity": arity,
            "default_value": default_value,
            "help_text": help_text,
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_names(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._value = Unset

    @property
    def bound(self):
        return self._value is not Unset

    @property
    def is_flag(self):
        return self._kind is ArgumentKind.FLAG

    @property
    def is_keyword(self):
        return self._kind is ArgumentKind.KEYWORD

    @property
    def is_positional(self):
        return self._kind is ArgumentKind.POSITIONAL

    def _bind(self, *values):
        """
        bind parsed values: Scalar for arity 1, Multi otherwise (last write wins).
        """
        if len(values) != self._arity:
            raise ValueError(f"{type(self).__typename__} {self._long_name!r} expects {self._arity} value(s)")
        self._value = Scalar(values[0]) if self._arity == 1 else Multi(tuple(values))

    def _bind_default(self, default):
        # defaults are bound verbatim, whatever the arity
        self._value = Scalar(default)

    def _unbind(self):
        self._value = Unset

    def resolve(self):
        """
        return the plain bound object: str, tuple[str, ...] or None when unbound.
        """
        return self._value.unwrap() if self._value is not Unset else None


__all__ = (
    "ArgumentKind",
    "ArgumentSpec",
    "Scalar",
    "Multi",
)
