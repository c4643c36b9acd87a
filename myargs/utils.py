"""
myargs utilities (internal helpers shared by the specs, the registry and the parser)

Overview
- UnsetType / Unset
  • Singleton sentinel meaning "not provided", distinct from None (None is a
    legitimate default for several parameters, e.g. a spec without help text).

- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/""/0 are preserved.

- rename(callable, name) / @rename("name")
  • Give generated accessors a stable __name__/__qualname__ for tracebacks.

- mirror("attr")
  • Read-only property over a private backing field (self._attr). Containers
    come back as immutable snapshots (tuple/MappingProxyType/frozenset).

- pluralize(text)
  • Tiny English pluralizer used for help group labels ("flag" -> "flags").

Names not listed in __all__ are internal and may change without notice.
"""
import builtins
import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is neither None nor 0.
    - Printable: repr(Unset) -> "Unset".
    - Sealed and process-wide singleton: UnsetType() always yields Unset.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset; otherwise return `object` unchanged.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set __name__/__qualname__ on a callable, or return a decorator doing so.

    Forms
    - rename(callable, name) -> callable
    - rename(name)           -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    # shallow: nested containers are the caller's business
    if isinstance(object, str | tuple | frozenset | MappingProxyType):
        return object
    if isinstance(object, Sequence):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property exposing the backing attribute "_{name}".

    Container values are returned as immutable snapshots so callers cannot
    mutate a spec, a registry or a configuration through its public surface.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


class IntrospectiveType(type):
    """
    Metaclass for the package's record-like classes (specs, configuration, theme).

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      backed by "_{name}" (see mirror()).
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages ("argument-spec 'long_name' must be a string").
    - Provide stable __repr__/__rich_repr__ built from __displayable__ when set,
      otherwise from __introspectable__.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        if "__repr__" not in namespace:
            @rename("__repr__")
            def __repr__(self):
                return f"{type(self).__typename__}({
                    ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
                })"
            self.__repr__ = __repr__

        if "__rich_repr__" not in namespace:
            @rename("__rich_repr__")
            def __rich_repr__(self):
                for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                    yield name, getattr(self, name)
            self.__rich_repr__ = __rich_repr__

        return self


@functools.cache
def pluralize(text, /):
    """
    Best-effort English pluralizer for help labels.

    Only the last word of a phrase is pluralized; casing of that word is kept.

    Examples
    - pluralize("flag")              -> "flags"
    - pluralize("keyword")           -> "keywords"
    - pluralize("positional")        -> "positionals"
    - pluralize("required entry")    -> "required entries"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    if not (match := re.search(r"(\S+)(\s*)$", text)):
        return text

    head, last, trail = text[:match.start(1)], match.group(1), match.group(2)
    lower = last.lower()

    if lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if last.isupper():
        plural = plural.upper()
    elif last[:1].isupper():
        plural = plural[:1].upper() + plural[1:]

    return head + plural + trail


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",

    # Metaclasses
    "IntrospectiveType",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
