"""
Invoker abstractions (the host boundary).

An invoker is whoever issues a command line. The dispatcher only needs two
things from it: a way to send a plain-text reply and a permission query.
Principals are the concrete, addressable invokers some commands insist on
(a logged-in user as opposed to a scheduler or a remote console).

ConsoleInvoker is a small rich-backed adapter for terminals and demos; real
hosts implement Invoker (or just the two methods, duck typing is enough).
"""
from abc import ABC, abstractmethod

from rich.console import Console
from rich.markup import escape


class Invoker(ABC):
    @abstractmethod
    def send(self, message, /):
        """deliver a reply to this invoker."""

    @abstractmethod
    def has_permission(self, permission, /):
        """return True when this invoker holds the given capability token."""


class Principal(Invoker, ABC):
    """marker base for concrete, addressable invokers."""

    @property
    @abstractmethod
    def name(self): ...


class ConsoleInvoker(Invoker):
    """
    Print replies to a rich console.

    permissions is a collection of granted tokens; the wildcard "*" grants
    everything. Replies are escaped so rich markup inside a reply is shown
    literally.
    """

    def __init__(self, *, permissions=(), console=None):
        if isinstance(permissions, str):
            raise TypeError("ConsoleInvoker() permissions must be a collection of tokens, not a string")
        self._permissions = frozenset(permissions)
        self._console = console if console is not None else Console()

    @property
    def permissions(self):
        return self._permissions

    def send(self, message, /):
        self._console.print(escape(str(message)))

    def has_permission(self, permission, /):
        return "*" in self._permissions or permission in self._permissions


class ConsolePrincipal(ConsoleInvoker, Principal):
    def __init__(self, name, /, **options):
        if not isinstance(name, str) or not name.strip():
            raise TypeError("ConsolePrincipal() name must be a non-empty string")
        super().__init__(**options)
        self._name = name.strip()

    @property
    def name(self):
        return self._name

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self._name)


__all__ = (
    "Invoker",
    "Principal",
    "ConsoleInvoker",
    "ConsolePrincipal",
)
