"""
myargs argument registry.

The registry is the ordered collection of ArgumentSpec objects a parser owns.
It is keyed by long name (unique) and searchable by short symbol (shared
symbols are tolerated unless strict_symbols is set; the first registered spec
wins lookups).

Iteration order is registration order everywhere: help rendering, the
post-parse validation pass and all() rely on it.
"""
from .arguments import ArgumentKind, ArgumentSpec
from .faults import *


class Registry:
    """
    Ordered, name-keyed collection of argument specifications.

    Parameters
    - prefix: the option prefix character; long names and short symbols may
      not start with it (they would be unreachable from the command line).
    - strict_symbols: when True, registering a short symbol that another spec
      already uses raises AmbiguousShortSymbolError; otherwise an
      AmbiguousShortSymbolWarning is emitted and the first spec keeps winning.
    """

    def __init__(self, *, prefix="-", strict_symbols=False):
        if not isinstance(prefix, str) or len(prefix) != 1:
            raise TypeError("registry 'prefix' must be a single character")
        self._prefix = prefix
        self._strict = bool(strict_symbols)
        self._specs = {}

    def register(self, spec, /):
        """
        append a spec and return it.

        raises
        - TypeError: spec is not an ArgumentSpec.
        - ValueError: the long name or the symbol starts with the prefix.
        - DuplicateArgumentError: the long name is already registered.
        - AmbiguousShortSymbolError: shared symbol while strict_symbols is set.
        """
        if not isinstance(spec, ArgumentSpec):
            raise TypeError("register() argument must be an argument spec")
        if spec.long_name.startswith(self._prefix):
            raise ValueError(f"long name {spec.long_name!r} cannot start with the prefix {self._prefix!r}")
        if spec.short_symbol == self._prefix:
            raise ValueError(f"short symbol cannot be the prefix {self._prefix!r}")

        if spec.long_name in self._specs:
            trigger(DuplicateArgumentError(
                "argument %r is already registered" % spec.long_name,
                title="duplicate argument",
                code=FaultCode.DUPLICATE_ARGUMENT,
                argument=spec.long_name,
                hint="pick another long name or drop one of the declarations",
                docs=getdoc(FaultCode.DUPLICATE_ARGUMENT),
            ))

        if spec.short_symbol and (owner := self.find_by_short_symbol(spec.short_symbol)):
            options = {
                "code": FaultCode.AMBIGUOUS_SHORT_SYMBOL if self._strict else FaultCode.AMBIGUOUS_SYMBOL_WARNING,
                "title": "ambiguous short symbol",
                "argument": spec.long_name,
                "symbol": spec.short_symbol,
                "owner": owner.long_name,
                "hint": "'%s%s' keeps resolving to %r; pick another symbol" % (
                    self._prefix, spec.short_symbol, owner.long_name
                ),
            }
            message = "short symbol %r of %r is already used by %r" % (
                spec.short_symbol, spec.long_name, owner.long_name
            )
            if self._strict:
                trigger(AmbiguousShortSymbolError(message, docs=getdoc(options["code"]), **options))
            trigger(AmbiguousShortSymbolWarning(message, docs=getdoc(options["code"]), stacklevel=4, **options))

        self._specs[spec.long_name] = spec
        return spec

    def find_by_long_name(self, name, /, *kinds):
        """
        return the spec registered under `name`, or None.

        when kinds are given, a spec of another kind is treated as missing.
        """
        spec = self._specs.get(name)
        if spec is None or (kinds and spec.kind not in kinds):
            return None
        return spec

    def find_by_short_symbol(self, symbol, /, *kinds):
        """
        return the first registered spec using `symbol`, or None.

        when kinds are given, specs of other kinds are skipped, so a later spec
        of a matching kind can still be found.
        """
        for spec in self._specs.values():
            if spec.short_symbol == symbol and (not kinds or spec.kind in kinds):
                return spec
        return None

    def all(self):
        return tuple(self._specs.values())

    def positionals(self):
        return tuple(spec for spec in self._specs.values() if spec.kind is ArgumentKind.POSITIONAL)

    def clear(self):
        """
        unbind and drop every spec; the registry can be reused afterwards.
        """
        for spec in self._specs.values():
            spec._unbind()
        self._specs.clear()

    @property
    def prefix(self):
        return self._prefix

    @property
    def strict_symbols(self):
        return self._strict

    def __len__(self):
        return len(self._specs)

    def __iter__(self):
        return iter(tuple(self._specs.values()))

    def __contains__(self, name, /):
        return name in self._specs

    def __repr__(self):
        return "registry(%s)" % ", ".join(map(repr, self._specs))

    def __rich_repr__(self):
        for spec in self._specs.values():
            yield spec


__all__ = (
    "Registry",
)
