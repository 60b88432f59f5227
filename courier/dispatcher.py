"""
Courier dispatcher: settings, default callbacks and the dispatch pipeline.

Dispatch pipeline (fixed order, callers may rely on it)
1. empty line → Settings.default tokens (("help",) unless configured).
2. head token → descriptor lookup; tail tokens → Context.
3. unknown head → invalid_command callback, abort.
4. principal required and invoker is not one → not_principal, abort.
5. fewer tail tokens than descriptor.minimum → invalid_usage, abort.
6. permission set and not held → no_permission, abort.
7. the descriptor's strategy runs.
An Abort raised anywhere along the way is caught: its message (if any) is
sent to the invoker, prefixed when the abort asks for it, and dispatch
returns Outcome.aborted(...). Success returns Outcome.completed(value).

Configuration errors are never translated: they are shown on the operator
console (Settings.diagnostics) and re-raised. Ordinary exceptions raised by
command logic are contained: traceback to the operator, Settings.crash to
the invoker (crash=None disables containment).

Quick start
    from courier import Dispatcher, Settings, CONTEXT, Resolved

    dispatcher = Dispatcher(Settings(name="arena", prefix="[arena] "))

    @dispatcher.command(parameters="<amount>", completions="1|10|100")
    def bet(context=CONTEXT, amount=Resolved(int), /):
        context.reply("you bet %d", amount)

    dispatcher.dispatch(invoker, ["bet", "10"])     # Outcome.completed(None)
    dispatcher.complete(invoker, ["bet", "1"])      # ["1", "10", "100"]
"""
import logging
from collections.abc import Iterable
from typing import final

from .completions import DEFER, CompletionEngine, CompletionRegistry
from .context import Context
from .descriptors import subcommand
from .faults import Abort, ConfigurationError, FaultCode, Outcome, console
from .invokers import Principal
from .registry import CommandRegistry
from .resolvers import ResolverRegistry
from .utils import *

logger = logging.getLogger(__name__)


def invalid_command(context, /):
    """default: point the invoker at the help command."""
    context.reply("Invalid sub-command. Run '%s help' for a list of commands.", context.settings.name)


def no_permission(context, /):
    context.reply("You do not have permission to run this command!")


def not_principal(context, /):
    context.reply("You must be a player to use this command!")


def invalid_usage(context, /):
    """default: show the expected form, e.g. “Invalid usage. Try 'arena bet <amount>'.”"""
    descriptor = context.descriptor
    usage = " ".join(filter(None, (context.settings.name, descriptor.name, descriptor.parameters)))
    context.reply("Invalid usage. Try '%s'.", usage)


def resolution_failure(label, token, context, /):
    context.reply("Invalid %s: %s", label, token)


CRASH = "An error occurred while executing the command. Check the console for errors."


@final
class Settings:
    """
    Immutable dispatcher configuration.

    Fields (keyword-only, defaults in brackets)
    - name: root command label used in messages [__main__.__prog__ or "command"].
    - prefix: messaging prefix prepended to replies [""].
    - default: tokens dispatched for an empty line [("help",)].
    - principal: class (or tuple of classes) principals are instances of [Principal].
    - invalid_command, no_permission, not_principal, invalid_usage:
      callbacks receiving the Context [module defaults].
    - resolution_failure: callback(label, token, context) for resolvers
      without their own hook [module default].
    - crash: reply for contained handler crashes, None to propagate [CRASH].
    - diagnostics: print configuration errors and crashes on stderr [True].

    Derive variants with __replace__(**overrides) (copy.replace on 3.13+).
    """
    __fields__ = (
        "name",
        "prefix",
        "default",
        "principal",
        "invalid_command",
        "no_permission",
        "not_principal",
        "invalid_usage",
        "resolution_failure",
        "crash",
        "diagnostics",
    )
    __slots__ = tuple("_" + field for field in __fields__)

    def __init__(
            self,
            *,
            name=Unset,
            prefix="",
            default=("help",),
            principal=Principal,
            invalid_command=invalid_command,
            no_permission=no_permission,
            not_principal=not_principal,
            invalid_usage=invalid_usage,
            resolution_failure=resolution_failure,
            crash=CRASH,
            diagnostics=True,
    ):
        name = coalesce(name, getattr(__import__("__main__"), "__prog__", "command"))
        if not isinstance(name, str):
            raise TypeError("Settings() name must be a string")
        if not (name := name.strip()):
            raise ValueError("Settings() name must be a non-empty string")
        self._name = name

        if not isinstance(prefix, str):
            raise TypeError("Settings() prefix must be a string")
        self._prefix = prefix

        if not isinstance(default, str | Iterable):
            raise TypeError("Settings() default must be a string or an iterable of strings")
        if not (default := tuple(tokenize(default))):
            raise ValueError("Settings() default must contain at least one token")
        self._default = default

        classes = principal if isinstance(principal, tuple) else (principal,)
        if not classes or not all(isinstance(cls, type) for cls in classes):
            raise TypeError("Settings() principal must be a class or a tuple of classes")
        self._principal = principal

        for field, callback in (
                ("invalid_command", invalid_command),
                ("no_permission", no_permission),
                ("not_principal", not_principal),
                ("invalid_usage", invalid_usage),
                ("resolution_failure", resolution_failure),
        ):
            if not callable(callback):
                raise TypeError("Settings() %s must be callable" % field)
            setattr(self, "_" + field, callback)

        if crash is not None and not isinstance(crash, str):
            raise TypeError("Settings() crash must be a string or None")
        self._crash = crash

        if not isinstance(diagnostics, bool):
            raise TypeError("Settings() diagnostics must be a boolean")
        self._diagnostics = diagnostics

    name = mirror("name")
    prefix = mirror("prefix")
    default = mirror("default")
    principal = mirror("principal")
    invalid_command = mirror("invalid_command")
    no_permission = mirror("no_permission")
    not_principal = mirror("not_principal")
    invalid_usage = mirror("invalid_usage")
    resolution_failure = mirror("resolution_failure")
    crash = mirror("crash")
    diagnostics = mirror("diagnostics")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        if unknown := overrides.keys() - set(type(self).__fields__):
            raise TypeError("__replace__() got unexpected fields: %s" % ", ".join(sorted(unknown)))
        return type(self)(**{field: getattr(self, field) for field in type(self).__fields__} | overrides)

    def __rich_repr__(self):
        for field in type(self).__fields__:
            yield field, getattr(self, field)

    def __repr__(self):
        return "settings(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


class Dispatcher:
    """
    Owns the three registries and runs dispatch and completion over them.

    Registration methods return the dispatcher so setup can be chained;
    command(...) is a decorator returning the registered descriptor.
    """

    def __init__(self, settings=Unset, /):
        settings = Settings() if settings is Unset else settings
        if not isinstance(settings, Settings):
            raise TypeError("Dispatcher() argument must be a settings instance")
        self._settings = settings
        self._commands = CommandRegistry()
        self._resolvers = ResolverRegistry(settings.resolution_failure)
        self._completions = CompletionRegistry()
        self._engine = CompletionEngine(self)

        self._completions.register_static("principals", DEFER)
        self._completions.register_static("nothing", ())
        self._completions.register_provider("commands", lambda context: [
            descriptor.name for descriptor in self._commands.reachable() if descriptor.permitted(context.invoker)
        ])

    settings = property(lambda self: self._settings)
    commands = property(lambda self: self._commands)
    resolvers = property(lambda self: self._resolvers)
    completions = property(lambda self: self._completions)

    def register(self, descriptor, /):
        self._commands.register(descriptor)
        return self

    def command(self, source=Unset, /, **metadata):
        """
        Declarative registration: build a descriptor with subcommand() and
        register it. Usable as @dispatcher.command or @dispatcher.command(...).
        """

        @rename("command")
        def wrapper(callback, /):
            return self._commands.register(subcommand(callback, **metadata))

        return wrapper(source) if source is not Unset else wrapper

    def register_resolver(self, kind, resolver, /):
        self._resolvers.register(kind, resolver)
        return self

    def register_static_completion(self, key, candidates, /):
        self._completions.register_static(key, candidates)
        return self

    def register_completion_provider(self, key, provider, /):
        self._completions.register_provider(key, provider)
        return self

    def dispatch(self, invoker, tokens=(), /):
        """run one command line for invoker and report how it ended."""
        tokens = tokenize(tokens) or list(self._settings.default)
        head, *tail = tokens
        descriptor = self._commands.lookup(head)
        logger.debug("dispatching %r %r for %r", head, tail, invoker)

        try:
            with Context(invoker, tail, descriptor, self) as context:
                try:
                    value = self._run(context)
                except Abort as abort:
                    logger.debug("dispatch of %r aborted: %r", head, abort)
                    if abort.message:
                        invoker.send((self._settings.prefix if abort.prefix else "") + abort.message)
                    return Outcome.aborted(abort)
        except ConfigurationError as error:
            if self._settings.diagnostics:
                error.report()
            raise
        return Outcome.completed(value)

    def _run(self, context):
        settings = self._settings
        if (descriptor := context.descriptor) is None:
            settings.invalid_command(context)
            raise Abort(code=FaultCode.UNKNOWN_COMMAND)
        if descriptor.principal:
            context.require_principal()
        context.require_args(descriptor.minimum)
        if descriptor.permission is not None:
            context.check_permission(descriptor.permission)

        try:
            return descriptor.invoke(context)
        except (Abort, ConfigurationError):
            raise
        except Exception:
            if settings.crash is None:
                raise
            if settings.diagnostics:
                console.print_exception()
            else:
                logger.exception("command %r crashed", descriptor.name)
            raise Abort(settings.crash, code=FaultCode.HANDLER_CRASH) from None

    def complete(self, invoker, tokens, /):
        """suggestions for the last token of a partial line (None: defer to host)."""
        try:
            return self._engine.complete(invoker, tokens)
        except ConfigurationError as error:
            if self._settings.diagnostics:
                error.report()
            raise

    def __repr__(self):
        return "%s(%r, commands=%r)" % (type(self).__name__, self._settings.name, [
            descriptor.name for descriptor in self._commands.all_primary()
        ])


__all__ = (
    "Settings",
    "Dispatcher",
    "CRASH",
    "invalid_command",
    "no_permission",
    "not_principal",
    "invalid_usage",
    "resolution_failure",
)
