"""
Argument completion: suggestion sources and the completion engine.

Completion spec grammar (one Descriptor.completions string)
- positions are separated by single spaces: "@principals add|remove 1|10|100"
- "@key" asks the CompletionRegistry for the source registered under key
- anything else is a set of literal alternatives separated by "|", where
  "~~" stands for a space inside an alternative ("new~~game|load")
- positions past the end of the spec have no completions

Candidate sets
- None: defer to the host's own completion (DEFER sources, providers that
  return None); the host usually knows live names the engine cannot list.
- list[str]: suggestions, possibly empty. Always prefix-filtered against the
  token being typed, de-duplicated, in source order.

The engine replays the dispatcher's lookup but never runs preconditions or
handlers; providers receive a CompletionContext whose inner Context is muted.
A provider that aborts yields no suggestions; configuration errors propagate.
"""
import logging
from collections.abc import Iterable
from typing import final

from .context import CompletionContext
from .descriptors import DEFAULT
from .faults import Abort, MissingCompletionError
from .utils import matching, tokenize

logger = logging.getLogger(__name__)

MARKER = "@"
SPACE = "~~"


@final
class DeferType:
    """
    Sentinel static source meaning “let the host complete this position”.

    Singleton, printable as "DEFER", non-subclassable.
    """

    def __new__(cls):
        try:
            return cls.__instance
        except AttributeError:
            cls.__instance = super().__new__(cls)
            return cls.__instance

    def __repr__(self):
        return "DEFER"

    def __reduce__(self):
        return "DEFER"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'DeferType' is not an acceptable base type")


DEFER = DeferType()


def _key(key):
    if not isinstance(key, str):
        raise TypeError("completion key must be a string")
    if not key or any(character.isspace() for character in key):
        raise ValueError("completion key must be a non-empty string without whitespace, got %r" % key)
    return key


class CompletionRegistry:
    """
    Completion sources by key: static candidate lists or provider callables.

    Static lists are copied on registration, so one list registered under two
    keys gives two independent sources. Static entries take precedence over
    providers registered under the same key.
    """

    def __init__(self):
        self._static = {}
        self._providers = {}

    def register_static(self, key, candidates, /):
        key = _key(key)
        if candidates is DEFER:
            self._static[key] = DEFER
            return
        if isinstance(candidates, str) or not isinstance(candidates, Iterable):
            raise TypeError("register_static() candidates must be an iterable of strings or DEFER")
        candidates = tuple(candidates)
        if not all(isinstance(candidate, str) for candidate in candidates):
            raise TypeError("register_static() candidates must be an iterable of strings or DEFER")
        self._static[key] = candidates

    def register_provider(self, key, provider, /):
        key = _key(key)
        if not callable(provider):
            raise TypeError("register_provider() provider must be callable")
        self._providers[key] = provider

    def candidates(self, key, context, /):
        """
        candidates for key: None when deferred, a fresh list otherwise.

        raises MissingCompletionError for unknown keys.
        """
        static = self._static.get(key)
        if static is DEFER:
            return None
        if static is not None:
            return list(static)
        if (provider := self._providers.get(key)) is None:
            raise MissingCompletionError(
                "no completion source is registered for key %r" % key,
                hint="register one with register_static_completion(%r, ...) or register_completion_provider(%r, ...)" % (key, key),
            )
        result = provider(context)
        return None if result is None else list(result)

    def __contains__(self, key):
        return key in self._static or key in self._providers


def positions(spec, /):
    """
    split a completion spec into per-position specs.

    trailing empty positions are dropped ("a b " has two positions).
    """
    specs = spec.split(" ")
    while specs and not specs[-1]:
        specs.pop()
    return specs


def alternatives(spec, /):
    """literal alternatives of one position, "~~" turned into spaces."""
    return [alternative.replace(SPACE, " ") for alternative in spec.split("|") if alternative]


class CompletionEngine:
    def __init__(self, dispatcher, /):
        self._dispatcher = dispatcher

    def complete(self, invoker, tokens, /):
        tokens = tokenize(tokens, partial=True)
        if not tokens:
            return []

        head, *tail = tokens
        commands = self._dispatcher.commands
        if not tail:
            return matching(
                (descriptor.name for descriptor in commands.reachable() if descriptor.permitted(invoker)),
                head,
            )

        descriptor = commands.lookup(head)
        if descriptor is None or descriptor.completions is DEFAULT:
            return []

        specs = positions(descriptor.completions)
        if (index := len(tail) - 1) >= len(specs):
            return []

        spec, current = specs[index], tail[-1]
        if not spec.startswith(MARKER):
            return matching(alternatives(spec), current)

        completion = CompletionContext(invoker, tail, descriptor, self._dispatcher)
        try:
            with completion.context:
                candidates = self._dispatcher.completions.candidates(spec[len(MARKER):], completion)
        except Abort as abort:
            logger.debug("completion source %s of %r aborted: %r", spec, descriptor.name, abort)
            return []
        if candidates is None:
            logger.debug("completion of %r deferred to the host (%s)", descriptor.name, spec)
            return None
        return matching(candidates, current)


__all__ = (
    "DEFER",
    "DeferType",
    "MARKER",
    "CompletionRegistry",
    "CompletionEngine",
    "positions",
    "alternatives",
)
