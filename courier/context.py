"""
Invocation contexts.

Context bundles what a single dispatch knows: the invoker, the tail tokens,
the matched descriptor (None when the lookup failed) and the dispatcher
that owns the registries and settings. It carries every per-call reply and
error behavior: preconditions, resolution, replies.

Lifetime
- A Context is a context manager. The dispatcher enters it for the duration
  of one dispatch and closes it afterwards; replying or resolving through a
  closed context raises RuntimeError.
- A muted context (used for completion) discards replies so computing
  suggestions never messages the invoker.

CompletionContext is what completion providers receive: the same view of
the partial line, a muted Context over it and resolve_first() for peeking at
earlier tokens.
"""
from .faults import Abort, ConfigurationError, FaultCode


class Context:
    __slots__ = ("_invoker", "_args", "_descriptor", "_dispatcher", "_muted", "_state")

    def __init__(self, invoker, args, descriptor, dispatcher, /, *, muted=False):
        self._invoker = invoker
        self._args = tuple(args)
        self._descriptor = descriptor
        self._dispatcher = dispatcher
        self._muted = bool(muted)
        self._state = "pending"

    invoker = property(lambda self: self._invoker)
    args = property(lambda self: self._args)
    descriptor = property(lambda self: self._descriptor)
    dispatcher = property(lambda self: self._dispatcher)
    muted = property(lambda self: self._muted)

    @property
    def settings(self):
        return self._dispatcher.settings

    @property
    def active(self):
        return self._state == "active"

    def __enter__(self):
        if self._state != "pending":
            raise RuntimeError("context cannot be entered twice")
        self._state = "active"
        return self

    def __exit__(self, *exc_info):
        self._state = "closed"
        return False

    def _ensure(self):
        if self._state == "closed":
            raise RuntimeError("context is no longer active; it must not outlive its dispatch")

    def reply(self, message, /, *format):
        """
        send the messaging prefix plus message to the invoker.

        printf-style arguments are applied only when given, so a literal "%"
        in a plain message is safe.
        """
        self._ensure()
        if format:
            message = message % format
        if self._muted:
            return
        self._invoker.send(self.settings.prefix + message)

    def abort(self, message="", /, *, prefix=True, code=None):
        raise Abort(message, prefix=prefix, code=code)

    def resolve(self, index, kind, /):
        """resolve the tail token at index; a missing token is an invalid usage."""
        self._ensure()
        if index >= len(self._args):
            self.invalid_usage()
        return self.resolve_token(self._args[index], kind)

    def resolve_token(self, token, kind, /):
        self._ensure()
        return self._dispatcher.resolvers.resolve(kind, token, self)

    def is_principal(self):
        return isinstance(self._invoker, self.settings.principal)

    def require_principal(self):
        if not self.is_principal():
            self.settings.not_principal(self)
            raise Abort(code=FaultCode.NOT_A_PRINCIPAL)

    def principal(self):
        """the invoker, after checking it is a principal."""
        self.require_principal()
        return self._invoker

    def require_args(self, length, /):
        if len(self._args) < length:
            self.invalid_usage()

    def invalid_usage(self):
        self.settings.invalid_usage(self)
        raise Abort(code=FaultCode.INVALID_USAGE)

    def check_permission(self, permission, /):
        if not self._invoker.has_permission(permission):
            self.settings.no_permission(self)
            raise Abort(code=FaultCode.NO_PERMISSION)

    def join(self, start=0, /):
        """the tail tokens from start onwards, space separated."""
        return " ".join(self._args[start:])

    @staticmethod
    def join_nicely(elements, /):
        """
        human list: "a", "a and b", "a, b and c".
        """
        elements = list(map(str, elements))
        if len(elements) < 2:
            return "".join(elements)
        return "%s and %s" % (", ".join(elements[:-1]), elements[-1])

    def __repr__(self):
        name = self._descriptor.name if self._descriptor is not None else None
        return "%s(invoker=%r, args=%r, descriptor=%r, state=%s)" % (
            type(self).__name__, self._invoker, self._args, name, self._state
        )


class CompletionContext:
    """
    What a completion provider sees.

    args are the tokens after the command name, the last one being the
    partial token under completion.
    """
    __slots__ = ("_invoker", "_args", "_descriptor", "_dispatcher", "_context")

    def __init__(self, invoker, args, descriptor, dispatcher, /):
        self._invoker = invoker
        self._args = tuple(args)
        self._descriptor = descriptor
        self._dispatcher = dispatcher
        self._context = Context(invoker, args, descriptor, dispatcher, muted=True)

    invoker = property(lambda self: self._invoker)
    args = property(lambda self: self._args)
    descriptor = property(lambda self: self._descriptor)
    dispatcher = property(lambda self: self._dispatcher)
    context = property(lambda self: self._context)

    @property
    def current(self):
        """the partial token being completed."""
        return self._args[-1] if self._args else ""

    def resolve_first(self, kind, index, /):
        """
        resolve the token at index, or None when it is missing or unresolvable.

        configuration errors still propagate: a missing resolver is a bug,
        not a completion miss.
        """
        try:
            return self._dispatcher.resolvers.resolve(kind, self._args[index], self._context)
        except ConfigurationError:
            raise
        except (Abort, IndexError):
            return None

    def __repr__(self):
        name = self._descriptor.name if self._descriptor is not None else None
        return "%s(invoker=%r, args=%r, descriptor=%r)" % (type(self).__name__, self._invoker, self._args, name)


__all__ = (
    "Context",
    "CompletionContext",
)
