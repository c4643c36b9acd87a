"""
myargs parser engine.

Overview
- ParserConfig: immutable, named-field parser configuration (program metadata,
  prefix character, auto-help, unknown-argument policy, symbol strictness).
- ArgumentParser: owns a config, a Registry and a Theme; populated with
  add_flag/add_keyword/add_positional, consumed once by parse(), read back with
  get_flag/get_keyword/get_positional, released with close().
- ParseResult: read-only mapping of long name -> value returned by parse(),
  carrying the non-fatal faults met during the pass.

Token grammar (P is the prefix character, "-" by default)
    PPname          flag, or keyword taking the next token as value
    PPname=value    keyword with inline value (ignored, with a warning, for flags)
    Pn              flag, or keyword taking the next token as value
    Pn=value        keyword with inline value
    Pnvalue         keyword n with attached value
    Pab             cluster of short flags
    Pabc=value      cluster; keywords in it share the inline value
    PP              end of options: every following token is bare
    P, bareword     bare token, bound to positionals in declaration order

Quick example:
    >>> parser = ArgumentParser("prog")
    >>> parser.add_flag("v", "verbose", "more output")
    >>> parser.add_keyword("c", "count", default="1")
    >>> result = parser.parse(["prog", "-v", "--count=5"])
    >>> parser.get_flag("verbose"), parser.get_keyword("count")
    (True, '5')
"""
import copy
import difflib
import functools
import os.path
import sys
from collections import deque
from collections.abc import Iterable, Mapping

from rich.console import Console

from .arguments import ArgumentKind, ArgumentSpec
from .faults import *
from .registry import Registry
from .rendering import Theme, render_help
from .utils import *

_POLICIES = ("collect", "raise", "ignore")


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _sanitize_strings(cls, metadata, /):
    """
    Internal: program/usage/description/epilog must be None or non-empty strings.

    program falls back to the basename of sys.argv[0] when Unset.
    """
    metadata["program"] = coalesce(metadata["program"], os.path.basename(sys.argv[0] if sys.argv else "") or "prog")
    for name in ("program", "usage", "description", "epilog"):
        if not isinstance(value := metadata[name], str | None):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string or None")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = value
    if metadata["program"] is None:
        raise TypeError(f"{cls.__typename__} 'program' cannot be None")


def _sanitize_behavior(cls, metadata, /):
    """
    Internal: prefix, argument_default and on_unknown.
    """
    if not isinstance(prefix := metadata["prefix"], str):
        raise TypeError(f"{cls.__typename__} 'prefix' must be a string")
    elif len(prefix) != 1 or prefix.isspace() or prefix == "=":
        raise ValueError(f"{cls.__typename__} 'prefix' must be a single character other than '='")

    metadata["argument_default"] = coalesce(metadata["argument_default"])
    if not isinstance(metadata["argument_default"], str | None):
        raise TypeError(f"{cls.__typename__} 'argument_default' must be a string or None")

    if metadata["on_unknown"] not in _POLICIES:
        raise ValueError(f"{cls.__typename__} 'on_unknown' must be one of {', '.join(map(repr, _POLICIES))}")


class ParserConfig(metaclass=IntrospectiveType):
    """
    Immutable parser configuration.

    Fields
    - program, usage, description, epilog: descriptive metadata for help output.
    - add_help: register the -h/--help flag first.
    - prefix: option prefix character ("--" is the long prefix).
    - allow_abbrev: accepted for compatibility; no abbreviation is resolved.
    - argument_default: fallback value for optional keyword/positional arguments that
      end up unbound and have no default of their own.
    - on_unknown: "collect" (report on the result), "raise" (fatal, part of the
      ParseError) or "ignore" for unknown options and extra bare tokens.
    - strict_symbols: reject shared short symbols at registration.
    """

    __introspectable__ = (
        "program",
        "usage",
        "description",
        "epilog",
        "add_help",
        "prefix",
        "allow_abbrev",
        "argument_default",
        "on_unknown",
        "strict_symbols",
    )

    __displayable__ = (
        "program",
        "add_help",
        "prefix",
        "on_unknown",
        "strict_symbols",
    )

    def __init__(
            self,
            program=Unset,
            usage=None,
            description=None,
            epilog=None,
            add_help=True,
            *,
            prefix="-",
            allow_abbrev=True,
            argument_default=Unset,
            on_unknown="collect",
            strict_symbols=False,
    ):
        metadata = {
            "program": program,
            "usage": usage,
            "description": description,
            "epilog": epilog,
            "add_help": bool(add_help),
            "prefix": prefix,
            "allow_abbrev": bool(allow_abbrev),
            "argument_default": argument_default,
            "on_unknown": on_unknown,
            "strict_symbols": bool(strict_symbols),
        }
        _sanitize_strings(type(self), metadata)
        _sanitize_behavior(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def replace(self, **overrides):
        """
        return a copy with the given fields replaced.
        """
        fields = {name: getattr(self, name) for name in type(self).__introspectable__}
        if unknown := overrides.keys() - fields.keys():
            raise TypeError(f"{type(self).__typename__} has no field(s) {', '.join(sorted(unknown))}")
        fields |= overrides
        positional = [fields.pop(name) for name in ("program", "usage", "description", "epilog", "add_help")]
        return type(self)(*positional, **fields)

    def __replace__(self, **overrides):
        return self.replace(**overrides)

    def __eq__(self, other):
        if not isinstance(other, ParserConfig):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in type(self).__introspectable__)

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in type(self).__introspectable__))


class ParseResult(Mapping):
    """
    Read-only outcome of one parse pass.

    Mapping of long name -> value:
    - flags: bool
    - keywords and arity-1 positionals: str or None
    - positionals with arity > 1: tuple[str, ...], or the default string, or None

    faults holds the non-fatal faults (unknown arguments, unexpected
    positionals) in encounter order; fatal ones are raised as ParseError.
    """

    def __init__(self, values, kinds, faults=()):
        self._values = dict(values)
        self._kinds = dict(kinds)
        self._faults = tuple(faults)

    @property
    def faults(self):
        return self._faults

    def __getitem__(self, name, /):
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def get_flag(self, name, /):
        return self._kinds.get(name) is ArgumentKind.FLAG and bool(self._values[name])

    def get_keyword(self, name, /):
        return self._values[name] if self._kinds.get(name) is ArgumentKind.KEYWORD else None

    def get_positional(self, name, /):
        return self._values[name] if self._kinds.get(name) is ArgumentKind.POSITIONAL else None

    def __repr__(self):
        return "parse-result(%s)" % ", ".join("%s=%r" % item for item in self._values.items())

    def __rich_repr__(self):
        yield from self._values.items()
        yield "faults", self._faults


class ArgumentParser:
    """
    Command-line argument parser.

    Lifecycle
    - construct with metadata (or from a ParserConfig),
    - register arguments with add_flag/add_keyword/add_positional,
    - call parse() exactly once,
    - read values back (get_* or the returned ParseResult),
    - close() (or use the parser as a context manager).

    Errors
    - registration problems raise immediately (TypeError/ValueError,
      DuplicateArgumentError, AmbiguousShortSymbolError);
    - parse problems are collected over the whole pass; fatal ones are raised
      together as ParseError, the others are reported on ParseResult.faults.
    - the parser never exits the process.
    """

    def __init__(
            self,
            program=Unset,
            usage=None,
            description=None,
            epilog=None,
            add_help=True,
            *,
            prefix="-",
            allow_abbrev=True,
            argument_default=Unset,
            on_unknown="collect",
            strict_symbols=False,
            theme=Unset,
    ):
        self._setup(ParserConfig(
            program,
            usage,
            description,
            epilog,
            add_help,
            prefix=prefix,
            allow_abbrev=allow_abbrev,
            argument_default=argument_default,
            on_unknown=on_unknown,
            strict_symbols=strict_symbols,
        ), theme)

    @classmethod
    def from_config(cls, config, /, *, theme=Unset):
        """
        build a parser from an existing ParserConfig.
        """
        if not isinstance(config, ParserConfig):
            raise TypeError("from_config() argument must be a parser config")
        self = cls.__new__(cls)
        self._setup(config, theme)
        return self

    def _setup(self, config, theme):
        if not isinstance(theme := coalesce(theme, Theme()), Theme):
            raise TypeError("argument parser 'theme' must be a theme")

        self._config = config
        self._theme = theme
        self._registry = Registry(prefix=config.prefix, strict_symbols=config.strict_symbols)
        self._result = Unset
        self._parsed = False
        self._closed = False
        self._help = None

        # per-pass state
        self._tokens = deque()
        self._index = 0
        self._slots = deque()
        self._pending = []
        self._faults = []
        self._fatal = []
        self._warnings = []

        if config.add_help:
            self._help = self.add_flag("h", "help", "show this help message and exit")

    # ── introspection ───────────────────────────────────────────────────────

    @property
    def config(self):
        return self._config

    @property
    def theme(self):
        return self._theme

    @property
    def registry(self):
        self._ensure_open()
        return self._registry

    @property
    def result(self):
        """
        the ParseResult of the (single) parse pass, or None before it.
        """
        return coalesce(self._result)

    @property
    def parsed(self):
        return self._parsed

    @property
    def closed(self):
        return self._closed

    def __repr__(self):
        return "argument-parser(program=%r, arguments=%d, parsed=%r, closed=%r)" % (
            self._config.program, len(self._registry), self._parsed, self._closed
        )

    def _ensure_open(self):
        if self._closed:
            raise RuntimeError("argument parser is closed")

    def _ensure_mutable(self):
        self._ensure_open()
        if self._parsed:
            raise RuntimeError("argument parser was already consumed by parse()")

    # ── registration ────────────────────────────────────────────────────────

    def add_flag(self, symbol, name, help=None):
        """
        register a presence-only flag (-symbol / --name) and return its spec.
        """
        self._ensure_mutable()
        return self._registry.register(ArgumentSpec(
            ArgumentKind.FLAG, name, short_symbol=symbol, help_text=help
        ))

    def add_keyword(self, symbol, name, required=False, default=None, help=None):
        """
        register a keyword argument taking exactly one value and return its spec.
        """
        self._ensure_mutable()
        return self._registry.register(ArgumentSpec(
            ArgumentKind.KEYWORD, name,
            short_symbol=symbol, required=required, default_value=default, help_text=help
        ))

    def add_positional(self, symbol, name, required=True, arity=1, default=None, help=None):
        """
        register a positional argument consuming `arity` bare tokens and return its spec.

        the symbol is kept for help output only; positionals are never
        addressed by name or symbol on the command line.
        """
        self._ensure_mutable()
        return self._registry.register(ArgumentSpec(
            ArgumentKind.POSITIONAL, name,
            short_symbol=symbol, required=required, arity=arity, default_value=default, help_text=help
        ))

    # ── faults ──────────────────────────────────────────────────────────────

    def _fault(self, fault, /):
        """
        route one parse fault according to its kind and the unknown policy.
        """
        fault = copy.replace(fault, program=self._config.program)
        if isinstance(fault, ArgumentWarning):
            # emitted once the result exists, see parse()
            return self._warnings.append(fault)
        if isinstance(fault, UnknownArgumentError | UnexpectedPositionalError):
            match self._config.on_unknown:
                case "ignore":
                    return
                case "collect":
                    return self._faults.append(fault)
        self._fatal.append(fault)

    def _unknown(self, input, index):
        names = {}
        for spec in self._registry:
            if not spec.is_positional:
                names[self._config.prefix * 2 + spec.long_name] = spec
                if spec.short_symbol:
                    names[self._config.prefix + spec.short_symbol] = spec
        suggestions = difflib.get_close_matches(input, names.keys(), 5)
        route = "%s %shelp" % (self._config.program, self._config.prefix * 2)
        try:
            hint = "did you mean %r?" % suggestions[0]
            if self._help is not None:
                hint += " you can also run '%s' to see all options" % route
        except IndexError:
            hint = "try '%s' to see all available options" % route if self._help else "check the accepted options"
        self._fault(UnknownArgumentError(
            "unknown option or flag %r at %s position" % (input, _ordinal(index)),
            title="unknown argument",
            code=FaultCode.UNKNOWN_ARGUMENT,
            token=input,
            index=index,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_ARGUMENT),
        ))

    # ── tokenizer / binder ──────────────────────────────────────────────────

    def _is_option(self, token):
        return token.startswith(self._config.prefix) and token != self._config.prefix

    def _take_value(self, spec, input, value):
        """
        bind a keyword value: the inline one when given, else the next token.
        """
        start = self._index
        if value is None:
            if self._tokens and not self._is_option(self._tokens[0]):
                value = self._tokens.popleft()
                self._index += 1
            else:
                return self._fault(MissingValueError(
                    "keyword %r at %s position expects a value" % (input, _ordinal(start)),
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    argument=spec.long_name,
                    token=input,
                    index=start,
                    hint="pass it inline (%s=<value>) or after a space (%s <value>)" % (input, input),
                    docs=getdoc(FaultCode.MISSING_VALUE),
                ))
        elif not value:
            self._fault(EmptyValueWarning(
                "empty inline value for keyword %r at %s position" % (input, _ordinal(start)),
                title="empty value",
                code=FaultCode.EMPTY_VALUE,
                argument=spec.long_name,
                token=input,
                index=start,
                hint="add a value after '=' (for example: %s=<value>)" % input,
                docs=getdoc(FaultCode.EMPTY_VALUE),
            ))
        spec._bind(value)

    def _ignored_value(self, argument, input, value):
        self._fault(FlagValueIgnoredWarning(
            "%r at %s position does not take a value; %r was ignored" % (input, _ordinal(self._index), value),
            title="flag value ignored",
            code=FaultCode.FLAG_VALUE_IGNORED,
            argument=argument,
            token=input,
            index=self._index,
            hint="remove everything from '=' (for example: %s)" % input,
            docs=getdoc(FaultCode.FLAG_VALUE_IGNORED),
        ))

    def _parse_long(self, token):
        """
        PPname or PPname=value; only flags and keywords are addressable by name.
        """
        name, separator, value = token[2:].partition("=")
        value = value if separator else None
        input = self._config.prefix * 2 + name

        spec = self._registry.find_by_long_name(name, ArgumentKind.FLAG, ArgumentKind.KEYWORD)
        if spec is None:
            return self._unknown(input, self._index)

        if spec.is_flag:
            if value is not None:
                self._ignored_value(spec.long_name, input, value)
            spec._bind("true")
        else:
            self._take_value(spec, input, value)

    def _parse_short(self, token):
        """
        Pcluster or Pcluster=value; each character is matched on its own.
        """
        cluster, separator, value = token[1:].partition("=")
        value = value if separator else None

        if not cluster:
            return self._unknown(token, self._index)

        consumed = False
        owner = None
        for position, symbol in enumerate(cluster):
            input = self._config.prefix + symbol
            spec = self._registry.find_by_short_symbol(symbol, ArgumentKind.FLAG, ArgumentKind.KEYWORD)
            if spec is None:
                self._unknown(input, self._index)
            elif spec.is_flag:
                spec._bind("true")
                owner = spec.long_name
            elif value is not None:
                # one value slot per token: every keyword of the cluster shares it
                self._take_value(spec, input, value)
                consumed = True
            elif rest := cluster[position + 1:]:
                spec._bind(rest)
                return
            else:
                self._take_value(spec, input, None)

        # no keyword in the cluster took the inline value
        if value is not None and not consumed:
            self._ignored_value(owner, self._config.prefix + cluster, value)

    def _parse_bare(self, token):
        """
        bind a bare token to the current positional slot (declaration order).
        """
        if not self._slots:
            return self._fault(UnexpectedPositionalError(
                "unexpected positional %r at %s position" % (token, _ordinal(self._index)),
                title="unexpected positional",
                code=FaultCode.UNEXPECTED_POSITIONAL,
                token=token,
                index=self._index,
                hint="remove this extra value or quote it together with the previous one",
                docs=getdoc(FaultCode.UNEXPECTED_POSITIONAL),
            ))

        if self._registry.find_by_long_name(token, ArgumentKind.FLAG, ArgumentKind.KEYWORD):
            self._fault(BareNameWarning(
                "bare %r at %s position matches an option name but is bound as a positional" % (
                    token, _ordinal(self._index)
                ),
                title="bare option name",
                code=FaultCode.BARE_NAME,
                argument=self._slots[0].long_name,
                token=token,
                index=self._index,
                hint="write '%s%s' to pass the option" % (self._config.prefix * 2, token),
                docs=getdoc(FaultCode.BARE_NAME),
            ))

        self._pending.append(token)
        if len(self._pending) == (spec := self._slots[0]).arity:
            spec._bind(*self._pending)
            self._pending.clear()
            self._slots.popleft()

    # ── validation ──────────────────────────────────────────────────────────

    def _validate(self):
        """
        post-pass: short positionals, required arguments, then defaults.

        a required argument left unbound fails even when it declares a default.
        """
        if self._pending:
            spec = self._slots[0]
            self._fault(MissingValueError(
                "positional %r expects %d values but got %d" % (spec.long_name, spec.arity, len(self._pending)),
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                argument=spec.long_name,
                hint="pass exactly %d values for %s" % (spec.arity, spec.long_name.upper()),
                docs=getdoc(FaultCode.MISSING_VALUE),
            ))
            self._pending.clear()

        for spec in self._registry:
            if spec.bound:
                continue
            if spec.required:
                kind = spec.kind.value
                self._fault(MissingRequiredArgumentError(
                    "missing required %s %r" % (kind, spec.long_name),
                    title="missing required argument",
                    code=FaultCode.MISSING_REQUIRED_ARGUMENT,
                    argument=spec.long_name,
                    hint="pass %s" % (
                        spec.long_name.upper() if spec.is_positional else
                        "%s%s=<value>" % (self._config.prefix * 2, spec.long_name)
                    ),
                    docs=getdoc(FaultCode.MISSING_REQUIRED_ARGUMENT),
                ))
            elif spec.default_value is not None:
                spec._bind_default(spec.default_value)
            elif self._config.argument_default is not None and not spec.is_flag:
                spec._bind_default(self._config.argument_default)

    # ── parse ───────────────────────────────────────────────────────────────

    def parse(self, argv=None, /):
        """
        parse an argument vector (argv[0] is the program name and is skipped).

        parameters
        - argv: sequence of strings; None reads sys.argv.

        returns
        - ParseResult

        raises
        - RuntimeError: the parser is closed or was already consumed.
        - TypeError: argv is not an iterable of strings.
        - ParseError: one or more fatal faults; `error.result` holds the partial result.
        """
        self._ensure_mutable()

        argv = sys.argv if argv is None else argv
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("parse() argument must be a sequence of strings")
        argv = list(argv)
        if not all(isinstance(token, str) for token in argv):
            raise TypeError("parse() argument must be a sequence of strings")

        self._parsed = True
        self._tokens = deque(argv[1:])
        self._index = 0
        self._slots = deque(self._registry.positionals())
        self._pending.clear()
        self._faults.clear()
        self._fatal.clear()
        self._warnings.clear()

        ended = False
        while self._tokens:
            token = self._tokens.popleft()
            self._index += 1

            if ended or not self._is_option(token):
                self._parse_bare(token)
            elif token == self._config.prefix * 2:
                ended = True
            elif token.startswith(self._config.prefix * 2):
                self._parse_long(token)
            else:
                self._parse_short(token)

        self._validate()

        self._result = ParseResult(
            {spec.long_name: spec.bound if spec.is_flag else spec.resolve() for spec in self._registry},
            {spec.long_name: spec.kind for spec in self._registry},
            self._faults,
        )

        pending, self._warnings = self._warnings, []
        for warning in pending:
            trigger(warning, stacklevel=4)

        if self._fatal:
            trigger(ParseError(list(self._fatal)), result=self._result, program=self._config.program)
        return self._result

    # ── retrieval ───────────────────────────────────────────────────────────

    def get_flag(self, name, /):
        """
        True iff `name` is a flag and was present on the command line.
        """
        self._ensure_open()
        spec = self._registry.find_by_long_name(name)
        return spec is not None and spec.is_flag and spec.bound

    def get_keyword(self, name, /):
        """
        value of keyword `name` (bound value, else its default), None otherwise.
        """
        self._ensure_open()
        spec = self._registry.find_by_long_name(name)
        if spec is None or not spec.is_keyword:
            return None
        return spec.resolve() if spec.bound else spec.default_value

    def get_positional(self, name, /):
        """
        value of positional `name`: str for arity 1, tuple of str for larger
        arities (a default is returned verbatim), None when absent.
        """
        self._ensure_open()
        spec = self._registry.find_by_long_name(name)
        if spec is None or not spec.is_positional:
            return None
        return spec.resolve() if spec.bound else spec.default_value

    # ── help ────────────────────────────────────────────────────────────────

    def print_help(self, console=Unset, /, **sections):
        """
        render the help to a console (stdout by default).

        sections: description/usage/epilog/group booleans, see render_help().
        """
        self._ensure_open()
        console = coalesce(console, Console())
        console.print(render_help(self, self._theme, console=console, **sections))

    def format_help(self, width=80, /, **sections):
        """
        return the help as plain text.
        """
        self._ensure_open()
        console = Console(width=width, color_system=None, force_terminal=False, highlight=False)
        with console.capture() as capture:
            console.print(render_help(self, self._theme.replace(colorful=False), console=console, **sections))
        return capture.get()

    # ── disposal ────────────────────────────────────────────────────────────

    def close(self):
        """
        release every spec and bound value; calling it again is a no-op.
        """
        if self._closed:
            return
        self._registry.clear()
        self._tokens.clear()
        self._slots.clear()
        self._pending.clear()
        self._faults.clear()
        self._fatal.clear()
        self._warnings.clear()
        self._result = Unset
        self._help = None
        self._closed = True

    def __enter__(self):
        self._ensure_open()
        return self

    def __exit__(self, *exception):
        self.close()


__all__ = (
    "ParserConfig",
    "ParseResult",
    "ArgumentParser",
)
