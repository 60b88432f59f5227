"""
Resolvers: converting raw tokens into typed values.

A resolver pairs a display label ("number", "string", ...) with a convert
function and an optional failure hook. The registry keys resolvers by
“kind”, any hashable: Python classes (str, int, float) or names for
fixed-width numbers ("int8" ... "int64", "float32", "float64").

Resolution contract (ResolverRegistry.resolve)
- no resolver for the kind → MissingResolverError (a wiring bug).
- convert raising, or returning None or an empty sized value → unresolved.
- unresolved → the resolver's hook, else the registry fallback
  fallback(label, token, context), then a silent Abort.
- an Abort raised by convert or by a hook propagates unchanged, and so does
  a ConfigurationError: neither is ever reported twice.
"""
import logging
import math
import re
import struct
from collections.abc import Hashable, Sized

from .faults import Abort, ConfigurationError, FaultCode, MissingResolverError
from .utils import rename

logger = logging.getLogger(__name__)


class Resolver:
    __slots__ = ("_label", "_convert", "_on_failure")

    def __init__(self, label, convert, /, on_failure=None):
        if not isinstance(label, str):
            raise TypeError("Resolver() label must be a string")
        if not (label := label.strip()):
            raise ValueError("Resolver() label must be a non-empty string")
        if not callable(convert):
            raise TypeError("Resolver() convert must be callable")
        if on_failure is not None and not callable(on_failure):
            raise TypeError("Resolver() on_failure must be callable")
        self._label = label
        self._convert = convert
        self._on_failure = on_failure

    label = property(lambda self: self._label)
    convert = property(lambda self: self._convert)
    on_failure = property(lambda self: self._on_failure)

    def failing(self, hook, /):
        """copy of this resolver reporting failures through hook(token, context)."""
        return self.__replace__(on_failure=hook)

    def __replace__(self, **overrides):
        return type(self)(
            overrides.get("label", self._label),
            overrides.get("convert", self._convert),
            on_failure=overrides.get("on_failure", self._on_failure),
        )

    def __repr__(self):
        return "%s(%r, %s)" % (type(self).__name__, self._label, getattr(self._convert, "__qualname__", self._convert))


_INTEGER = re.compile(r"[+-]?[0-9]+")


def integer(bits=None, /):
    """convert function for signed integers, range checked when bits is given."""

    @rename("integer" if bits is None else "int%d" % bits)
    def convert(token, context, /):
        if not _INTEGER.fullmatch(token):
            raise ValueError("invalid integer literal %r" % token)
        value = int(token)
        if bits is not None and not -(1 << bits - 1) <= value < 1 << bits - 1:
            raise OverflowError("%d does not fit in %d bits" % (value, bits))
        return value

    return convert


def floating(bits=None, /):
    """
    convert function for finite floating point numbers, rounded to single
    precision for 32 bits; "nan", "inf" and values overflowing the width are
    rejected.
    """

    @rename("floating" if bits is None else "float%d" % bits)
    def convert(token, context, /):
        if "_" in token or token != token.strip():
            raise ValueError("invalid float literal %r" % token)
        value = float(token)
        if bits == 32:
            value, = struct.unpack("f", struct.pack("f", value))
        if not math.isfinite(value):
            raise ValueError("%r is not a finite number" % token)
        return value

    return convert


def text(token, context, /):
    return token


def _unresolved(value):
    return value is None or (isinstance(value, Sized) and not len(value))


class ResolverRegistry:
    """
    Kind → Resolver mapping plus the registry-wide failure fallback.

    fallback(label, token, context) is called for failures of resolvers
    without their own hook; the dispatcher wires it to its settings.
    """

    def __init__(self, fallback, /, *, builtins=True):
        if not callable(fallback):
            raise TypeError("ResolverRegistry() fallback must be callable")
        self._fallback = fallback
        self._resolvers = {}
        if builtins:
            self.register(str, Resolver("string", text))
            self.register(int, Resolver("number", integer()))
            self.register(float, Resolver("number", floating()))
            for bits in (8, 16, 32, 64):
                self.register("int%d" % bits, Resolver("number", integer(bits)))
            for bits in (32, 64):
                self.register("float%d" % bits, Resolver("number", floating(bits)))

    @property
    def fallback(self):
        return self._fallback

    def register(self, kind, resolver, /):
        if not isinstance(kind, Hashable):
            raise TypeError("register() kind must be hashable")
        if not isinstance(resolver, Resolver):
            raise TypeError("register() resolver must be a resolver")
        self._resolvers[kind] = resolver
        return resolver

    def get(self, kind, /):
        return self._resolvers.get(kind)

    def resolve(self, kind, token, context, /):
        if (resolver := self.get(kind)) is None:
            name = getattr(kind, "__qualname__", None) or repr(kind)
            raise MissingResolverError(
                "no resolver is registered for kind %s" % name,
                hint="register one with register_resolver(%s, Resolver(...)) before dispatching" % name,
            )
        try:
            value = resolver.convert(token, context)
        except (Abort, ConfigurationError):
            raise
        except Exception as error:
            logger.debug("resolver %r rejected %r: %s", resolver.label, token, error)
            value = None
        if not _unresolved(value):
            return value

        logger.debug("could not resolve %r as %s", token, resolver.label)
        if resolver.on_failure is not None:
            resolver.on_failure(token, context)
        else:
            self._fallback(resolver.label, token, context)
        raise Abort(code=FaultCode.UNRESOLVED_ARGUMENT)

    def __contains__(self, kind):
        return kind in self._resolvers

    def __len__(self):
        return len(self._resolvers)

    def __iter__(self):
        return iter(self._resolvers)


__all__ = (
    "Resolver",
    "ResolverRegistry",
    "integer",
    "floating",
    "text",
)
