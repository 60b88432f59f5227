"""
Courier utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the registries, the dispatcher and the
  completion engine so that every layer agrees on the same semantics.

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided” without conflating with None.
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, preserve None/0/""/[] as given.

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables.

- mirror("attr")
  • Read-only property over a private backing field (self._attr), returning
    immutable views for containers.

- matching(candidates, prefix)
  • Order-preserving, de-duplicated prefix filter used by completion.

- tokenize(line, partial=False)
  • Plain whitespace splitting for str lines, validation for token lists.

- ordinal(number)
  • English ordinal words for diagnostics (“first”, “second”, “12th”).
"""
import builtins
import functools
from collections.abc import Iterable, Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and singleton per process.
    """

    def __or__(self, other, /):
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

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
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


def freeze(object, /):
    """
    Shallow immutable view of a container value.

    - Sequence (non-string) → tuple
    - Mapping → MappingProxyType
    - Set → frozenset
    - anything else is returned as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, str | bytes | bytearray):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The property reads "_{name}" on the instance and hands out frozen views
    (see freeze()) so public state cannot be mutated through the accessor.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return freeze(getattr(self, "_" + name))

    return property(getter)


def matching(candidates, prefix, /):
    """
    Keep the candidates starting with prefix, in order, without duplicates.

    Non-string candidates are rejected with TypeError: completion sources must
    only ever produce text.
    """
    if not isinstance(prefix, str):
        raise TypeError("matching() second argument must be a string")
    seen = set()
    matches = []
    for candidate in candidates:
        if not isinstance(candidate, str):
            raise TypeError("matching() candidates must be strings, got %r" % type(candidate).__name__)
        if candidate in seen:
            continue
        seen.add(candidate)
        if candidate.startswith(prefix):
            matches.append(candidate)
    return matches


def tokenize(line, /, *, partial=False):
    """
    Normalize a command line into a list of tokens.

    - str: split on whitespace (no quoting or escaping); with partial=True a
      trailing space yields a final empty token, the “next word” being typed, and
      a blank line yields [""] (the command name being typed).
    - Iterable[str]: taken as already split; every item must be a string.
    """
    if isinstance(line, str):
        tokens = line.split()
        if partial and (not tokens or line[-1:].isspace()):
            tokens.append("")
        return tokens
    if not isinstance(line, Iterable):
        raise TypeError("tokenize() argument must be a string or an iterable of strings")
    tokens = list(line)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("tokenize() argument must be a string or an iterable of strings")
    return tokens


@functools.cache
def ordinal(number, /):
    """
    English ordinal for small positions, numeric suffix form otherwise.

    Examples
    - ordinal(1)  -> "first"
    - ordinal(3)  -> "third"
    - ordinal(12) -> "12th"
    - ordinal(22) -> "22nd"
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError("ordinal() argument must be an integer")
    if number < 1:
        raise ValueError("ordinal() argument must be positive")
    words = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")
    if number <= len(words):
        return words[number - 1]
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return "%d%s" % (number, suffix)


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value; pair it
with coalesce(value, default) to materialize the fallback.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "freeze",
    "mirror",
    "matching",
    "tokenize",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
