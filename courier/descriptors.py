"""
Command descriptors and invocation strategies.

What this module provides
- Descriptor: the immutable record for one sub-command (name, aliases,
  display strings, preconditions, completion spec, invocation strategy).
- Strategies
  • DirectCallback(fn): fn(context) receives the whole invocation context.
  • BoundHandler(plan, fn): fn(*values) where each value comes from a slot
    of the plan (context, invoker, principal, resolved token, joined tail).
    The plan is checked against fn's signature when the handler is built,
    so arity mistakes surface at registration, not at the first dispatch.
- Slots: CONTEXT, INVOKER, PRINCIPAL, Resolved(kind), Joined().
- subcommand(...): declarative builder deriving the strategy from a
  function signature whose defaults are slots.

Quick example
    from courier import subcommand, CONTEXT, Resolved

    @subcommand(aliases=("g",), parameters="<who> <amount>", completions="@principals")
    def give(context=CONTEXT, who=Resolved(str), amount=Resolved(int), /):
        context.reply("gave %s %d", who, amount)

    give.minimum     # 2, one per resolved slot
"""
import builtins
import inspect
import re
from abc import ABC, abstractmethod
from collections.abc import Hashable, Iterable
from inspect import Parameter
from typing import final

from .faults import HandlerSignatureError
from .utils import *


@final
class DefaultType:
    """
    Sentinel completion spec meaning “no completions offered”.

    Singleton, falsey, printable as "DEFAULT", non-subclassable.
    """

    def __new__(cls):
        try:
            return cls.__instance
        except AttributeError:
            cls.__instance = super().__new__(cls)
            return cls.__instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "DEFAULT"

    def __reduce__(self):
        return "DEFAULT"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'DefaultType' is not an acceptable base type")


DEFAULT = DefaultType()


class Slot(ABC):
    """one entry of a BoundHandler parameter plan."""
    __slots__ = ()

    @abstractmethod
    def extract(self, context, /):
        """produce the value for this slot from an invocation context."""


@final
class ContextSlot(Slot):
    __slots__ = ()

    def extract(self, context, /):
        return context

    def __repr__(self):
        return "CONTEXT"


@final
class InvokerSlot(Slot):
    __slots__ = ()

    def extract(self, context, /):
        return context.invoker

    def __repr__(self):
        return "INVOKER"


@final
class PrincipalSlot(Slot):
    # Aborts through the not-a-principal callback when the invoker is not one.
    __slots__ = ()

    def extract(self, context, /):
        return context.principal()

    def __repr__(self):
        return "PRINCIPAL"


@final
class Resolved(Slot):
    """
    A tail token converted through the resolver registered for kind.

    index is the position in the tail tokens; when omitted, BoundHandler
    assigns positions in plan order, continuing after the previous resolved
    slot.
    """
    __slots__ = ("_kind", "_index")

    def __init__(self, kind, /, index=Unset):
        if not isinstance(kind, Hashable):
            raise TypeError("Resolved() kind must be hashable")
        if index is not Unset and (not isinstance(index, int) or isinstance(index, bool)):
            raise TypeError("Resolved() index must be an integer")
        if index is not Unset and index < 0:
            raise ValueError("Resolved() index must be non-negative")
        self._kind = kind
        self._index = index

    kind = property(lambda self: self._kind)
    index = property(lambda self: self._index)

    def extract(self, context, /):
        if self._index is Unset:
            raise RuntimeError("Resolved() slot was never bound to a position")
        return context.resolve(self._index, self._kind)

    def __replace__(self, **overrides):
        return type(self)(overrides.get("kind", self._kind), index=overrides.get("index", self._index))

    def __eq__(self, other):
        if not isinstance(other, Resolved):
            return NotImplemented
        return (self._kind, self._index) == (other._kind, other._index)

    def __hash__(self):
        return hash((Resolved, self._kind, self._index))

    def __repr__(self):
        kind = getattr(self._kind, "__name__", None) or repr(self._kind)
        if self._index is Unset:
            return "Resolved(%s)" % kind
        return "Resolved(%s, index=%d)" % (kind, self._index)


@final
class Joined(Slot):
    """The tail tokens from start onwards joined with single spaces."""
    __slots__ = ("_start",)

    def __init__(self, start=Unset, /):
        if start is not Unset and (not isinstance(start, int) or isinstance(start, bool) or start < 0):
            raise TypeError("Joined() start must be a non-negative integer")
        self._start = start

    start = property(lambda self: self._start)

    def extract(self, context, /):
        return context.join(coalesce(self._start, 0))

    def __eq__(self, other):
        if not isinstance(other, Joined):
            return NotImplemented
        return self._start == other._start

    def __hash__(self):
        return hash((Joined, self._start))

    def __repr__(self):
        return "Joined()" if self._start is Unset else "Joined(%d)" % self._start


CONTEXT = ContextSlot()
INVOKER = InvokerSlot()
PRINCIPAL = PrincipalSlot()


class Strategy(ABC):
    """how a descriptor runs once every precondition passed."""
    __slots__ = ()

    @abstractmethod
    def invoke(self, context, /): ...


def _signature(callback):
    try:
        return inspect.signature(callback)
    except (TypeError, ValueError):
        # Builtins and some C callables are not introspectable; they are trusted.
        return None


def _qualname(callback):
    return getattr(callback, "__qualname__", None) or repr(callback)


@final
class DirectCallback(Strategy):
    __slots__ = ("_callback",)

    def __init__(self, callback, /):
        if not callable(callback):
            raise TypeError("DirectCallback() argument must be callable")
        if (signature := _signature(callback)) is not None:
            try:
                signature.bind(None)
            except TypeError:
                raise HandlerSignatureError(
                    "callback %s%s cannot receive the invocation context" % (_qualname(callback), signature),
                    hint="accept exactly one positional parameter, the context",
                ) from None
        self._callback = callback

    callback = property(lambda self: self._callback)

    def invoke(self, context, /):
        return self._callback(context)

    def __repr__(self):
        return "DirectCallback(%s)" % _qualname(self._callback)


@final
class BoundHandler(Strategy):
    """
    Bind an explicit parameter plan to a callback.

    Validation (construction time, raises HandlerSignatureError)
    - every plan entry must be a Slot;
    - the callback must accept len(plan) positional arguments;
    - when a parameter is annotated with a class and its slot resolves a
      class kind, the kind must be a subclass of the annotation.
    """
    __slots__ = ("_plan", "_callback")

    def __init__(self, plan, callback, /):
        if not callable(callback):
            raise TypeError("BoundHandler() second argument must be callable")
        if isinstance(plan, str) or not isinstance(plan, Iterable):
            raise TypeError("BoundHandler() first argument must be an iterable of slots")

        bound = []
        cursor = 0
        for position, slot in enumerate(plan):
            if not isinstance(slot, Slot):
                raise HandlerSignatureError(
                    "plan entry %r at %s position of %s is not a slot" % (slot, ordinal(position + 1), _qualname(callback)),
                    hint="use CONTEXT, INVOKER, PRINCIPAL, Resolved(kind) or Joined()",
                )
            if isinstance(slot, Resolved):
                if slot.index is Unset:
                    slot = slot.__replace__(index=cursor)
                cursor = slot.index + 1
            elif isinstance(slot, Joined) and slot.start is Unset:
                slot = Joined(cursor)
            bound.append(slot)

        if (signature := _signature(callback)) is not None:
            try:
                arguments = signature.bind(*bound).arguments
            except TypeError as error:
                raise HandlerSignatureError(
                    "callback %s%s does not fit the plan %r: %s" % (_qualname(callback), signature, tuple(bound), error),
                    hint="declare one positional parameter per slot",
                ) from None
            for name, value in arguments.items():
                annotation = signature.parameters[name].annotation
                if (
                    isinstance(value, Resolved) and
                    isinstance(value.kind, type) and
                    annotation is not Parameter.empty and
                    isinstance(annotation, type) and
                    not issubclass(value.kind, annotation)
                ):
                    raise HandlerSignatureError(
                        "parameter %r of %s is annotated %s but resolves %s" % (
                            name, _qualname(callback), annotation.__name__, value.kind.__name__
                        ),
                        hint="align the annotation with the resolved kind",
                    )

        self._plan = tuple(bound)
        self._callback = callback

    plan = property(lambda self: self._plan)
    callback = property(lambda self: self._callback)

    @property
    def required(self):
        """number of tail tokens the plan reads through resolvers."""
        return max((slot.index + 1 for slot in self._plan if isinstance(slot, Resolved)), default=0)

    def invoke(self, context, /):
        return self._callback(*(slot.extract(context) for slot in self._plan))

    def __repr__(self):
        return "BoundHandler(%r, %s)" % (self._plan, _qualname(self._callback))


def _keyword(value, what, /):
    if not isinstance(value, str):
        raise TypeError("Descriptor() %s must be a string" % what)
    if not re.fullmatch(r"\S+", value):
        raise ValueError("Descriptor() %s must be a non-empty string without whitespace, got %r" % (what, value))
    return value


def _strings(value, what, /):
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise TypeError("Descriptor() %s must be an iterable of strings" % what)
    value = tuple(value)
    if not all(isinstance(item, str) for item in value):
        raise TypeError("Descriptor() %s must be an iterable of strings" % what)
    return value


class Descriptor:
    """
    Immutable description of one sub-command.

    Fields
    - name / aliases: lookup keys sharing one flat namespace.
    - description / parameters / help: display only.
    - permission: capability token queried on the invoker, or None.
    - minimum: minimum number of tail tokens.
    - principal: whether the invoker must be a principal.
    - completions: space separated per-position spec or DEFAULT.
    - strategy: DirectCallback | BoundHandler (a plain callable is wrapped in
      a DirectCallback).
    """
    __slots__ = (
        "_name",
        "_aliases",
        "_description",
        "_parameters",
        "_help",
        "_permission",
        "_minimum",
        "_principal",
        "_completions",
        "_strategy",
    )

    __introspectable__ = (
        "name",
        "aliases",
        "description",
        "parameters",
        "help",
        "permission",
        "minimum",
        "principal",
        "completions",
        "strategy",
    )

    def __init__(
            self,
            name,
            strategy,
            /,
            *,
            aliases=(),
            description="",
            parameters="",
            help=(),
            permission=None,
            minimum=0,
            principal=False,
            completions=DEFAULT,
    ):
        self._name = _keyword(name, "name")
        self._aliases = tuple(dict.fromkeys(_keyword(alias, "alias") for alias in _strings(aliases, "aliases")))

        for value, what in ((description, "description"), (parameters, "parameters")):
            if not isinstance(value, str):
                raise TypeError("Descriptor() %s must be a string" % what)
        self._description = description
        self._parameters = parameters
        self._help = _strings(help, "help")

        if permission is not None and not isinstance(permission, Hashable):
            raise TypeError("Descriptor() permission must be hashable")
        self._permission = permission

        if not isinstance(minimum, int) or isinstance(minimum, bool):
            raise TypeError("Descriptor() minimum must be an integer")
        if minimum < 0:
            raise ValueError("Descriptor() minimum must be non-negative")
        self._minimum = minimum

        if not isinstance(principal, bool):
            raise TypeError("Descriptor() principal must be a boolean")
        self._principal = principal

        if completions is not DEFAULT and not isinstance(completions, str):
            raise TypeError("Descriptor() completions must be a string or DEFAULT")
        self._completions = completions

        if isinstance(strategy, Strategy):
            self._strategy = strategy
        elif builtins.callable(strategy):
            self._strategy = DirectCallback(strategy)
        else:
            raise TypeError("Descriptor() strategy must be a strategy or a callable")

    name = mirror("name")
    aliases = mirror("aliases")
    description = mirror("description")
    parameters = mirror("parameters")
    help = mirror("help")
    permission = mirror("permission")
    minimum = mirror("minimum")
    principal = mirror("principal")
    completions = mirror("completions")
    strategy = mirror("strategy")

    @property
    def keys(self):
        """name followed by every alias."""
        return (self._name, *self._aliases)

    def permitted(self, invoker, /):
        return self._permission is None or bool(invoker.has_permission(self._permission))

    def invoke(self, context, /):
        return self._strategy.invoke(context)

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "descriptor(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


def strategy(callback, /):
    """
    Derive an invocation strategy from a function signature.

    - every parameter defaults to a Slot (or there are none) → BoundHandler
    - exactly one parameter without default → DirectCallback
    - anything else → HandlerSignatureError
    """
    if not callable(callback):
        raise TypeError("strategy() argument must be callable")
    if (signature := _signature(callback)) is None:
        return DirectCallback(callback)
    parameters = list(signature.parameters.values())
    if all(isinstance(parameter.default, Slot) for parameter in parameters):
        return BoundHandler([parameter.default for parameter in parameters], callback)
    if len(parameters) == 1 and parameters[0].default is Parameter.empty:
        return DirectCallback(callback)
    offender = next(parameter for parameter in parameters if not isinstance(parameter.default, Slot))
    raise HandlerSignatureError(
        "callback %s parameter %r must default to a slot" % (_qualname(callback), offender.name),
        hint="give every parameter a slot default, or take a single context parameter",
    )


def subcommand(source=Unset, /, **metadata):
    """
    Build a Descriptor from a function, or return a decorator that does.

    Defaults derived from the function
    - name: function name, underscores turned into dashes.
    - description: first line of the docstring.
    - minimum: number of tokens the bound plan resolves (0 for direct callbacks).

    Any Descriptor keyword (aliases, parameters, help, permission, minimum,
    principal, completions, name, description) can be given explicitly.
    """

    @rename("subcommand")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@subcommand() must be applied to a callable")
        options = dict(metadata)
        handler = strategy(callback)
        name = options.pop("name", Unset)
        if name is Unset:
            name = getattr(callback, "__name__", "").strip("_").replace("_", "-")
        if "description" not in options:
            options["description"] = (inspect.getdoc(callback) or "").partition("\n")[0].strip()
        if "minimum" not in options:
            options["minimum"] = handler.required if isinstance(handler, BoundHandler) else 0
        return Descriptor(name, handler, **options)

    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "DEFAULT",
    "DefaultType",
    "Slot",
    "CONTEXT",
    "INVOKER",
    "PRINCIPAL",
    "Resolved",
    "Joined",
    "Strategy",
    "DirectCallback",
    "BoundHandler",
    "Descriptor",
    "strategy",
    "subcommand",
)
