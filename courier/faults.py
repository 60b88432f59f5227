"""
Courier faults (abort signals, outcomes and configuration errors).

Scope
- FaultCode: canonical, stable numeric identifiers for every way a dispatch
  can stop early, plus the configuration faults that indicate wiring bugs.
- Abort: the expected, control-flow signal raised by preconditions and
  resolvers. The dispatcher always catches it; it never reaches the host.
- Outcome: the value dispatch() hands back to the host once the Abort (if
  any) has been caught, so callers can branch on it without try/except.
- ConfigurationError and subclasses: programmer/setup faults (missing
  resolver, missing completion source, handler plan mismatch). Never caught
  or translated; rendered for the operator console via rich.

Two audiences
- Invokers see at most one plain-text reply per failure (sent by callbacks
  or by the dispatcher from Abort.message).
- Operators see rich panels on stderr for configuration errors and
  tracebacks for contained handler crashes.

Integration
- Hosts may expose a __codes__ mapping in __main__ to relabel codes, a
  __docs__ mapping for extra documentation lines and __styles__ to restyle
  the operator panels.
"""
from collections import defaultdict
from enum import IntEnum
from typing import final

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - aborts (11xxx): expected outcomes of a dispatch, reported to the invoker.
      • UNKNOWN_COMMAND, NOT_A_PRINCIPAL, INVALID_USAGE, NO_PERMISSION,
        UNRESOLVED_ARGUMENT, HANDLER_CRASH
    - configuration (21xxx): wiring bugs, reported to the operator.
      • MISSING_RESOLVER, MISSING_COMPLETION, HANDLER_SIGNATURE

    normalize() allows host remapping to custom labels while keeping the
    numeric identifiers stable.
    """
    # --- aborts (11xxx) ---
    UNKNOWN_COMMAND             = 11101
    NOT_A_PRINCIPAL             = 11111
    INVALID_USAGE               = 11112
    NO_PERMISSION               = 11113
    UNRESOLVED_ARGUMENT         = 11121
    HANDLER_CRASH               = 11131

    # --- configuration (21xxx) ---
    MISSING_RESOLVER            = 21101
    MISSING_COMPLETION          = 21102
    HANDLER_SIGNATURE           = 21111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class Abort(Exception):
    """
    stop the current dispatch.

    - message: text sent to the invoker; empty means “already handled”.
    - prefix: whether the dispatcher prepends the messaging prefix.
    - code: optional FaultCode describing why the dispatch stopped.
    """

    def __init__(self, message="", /, *, prefix=True, code=None):
        if not isinstance(message, str):
            raise TypeError("Abort() message must be a string")
        if code is not None and not isinstance(code, FaultCode):
            raise TypeError("Abort() code must be a fault-code")
        super().__init__(message)
        self.message = message
        self.prefix = bool(prefix)
        self.code = code

    @property
    def silent(self):
        return not self.message

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        options = {"prefix": self.prefix, "code": self.code} | overrides
        return type(self)(options.pop("message", self.message), **options)

    def __repr__(self):
        return "%s(%r, prefix=%r, code=%r)" % (type(self).__name__, self.message, self.prefix, self.code)


@final
class Outcome:
    """
    Result of a dispatch as seen by the host.

    Either completed (ok is True, value holds what the handler returned) or
    aborted (message/prefix/code mirror the Abort that stopped the call).
    unwrap() turns an aborted outcome back into the Abort it came from.
    """
    __slots__ = ("_ok", "_value", "_message", "_prefix", "_code")

    def __init__(self, ok, /, *, value=None, message="", prefix=True, code=None):
        self._ok = bool(ok)
        self._value = value
        self._message = message
        self._prefix = prefix
        self._code = code

    @classmethod
    def completed(cls, value=None, /):
        return cls(True, value=value)

    @classmethod
    def aborted(cls, abort, /):
        if not isinstance(abort, Abort):
            raise TypeError("Outcome.aborted() argument must be an abort")
        return cls(False, message=abort.message, prefix=abort.prefix, code=abort.code)

    ok = property(lambda self: self._ok)
    value = property(lambda self: self._value)
    message = property(lambda self: self._message)
    prefix = property(lambda self: self._prefix)
    code = property(lambda self: self._code)

    def unwrap(self):
        if not self._ok:
            raise Abort(self._message, prefix=self._prefix, code=self._code)
        return self._value

    def __bool__(self):
        return self._ok

    def __eq__(self, other):
        if not isinstance(other, Outcome):
            return NotImplemented
        return (
            (self._ok, self._value, self._message, self._prefix, self._code) ==
            (other._ok, other._value, other._message, other._prefix, other._code)
        )

    __hash__ = None

    def __repr__(self):
        if self._ok:
            return "Outcome.completed(%r)" % (self._value,)
        return "Outcome.aborted(message=%r, prefix=%r, code=%r)" % (self._message, self._prefix, self._code)


class ConfigurationError(Exception):
    """
    a wiring bug discovered while exercising a command.

    carries a FaultCode and a one-line hint; renders itself as a rich panel
    for the operator console and is never translated into a reply.
    """
    title = "configuration error"
    default = None

    def __init__(self, message, /, *, code=Unset, hint=Unset):
        if not isinstance(message, str):
            raise TypeError("%s() message must be a string" % type(self).__name__)
        super().__init__(message)
        self.message = message
        self.code = coalesce(code, self.default)
        self.hint = coalesce(hint)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "underline #00E5FF dim",
        } | getattr(main, "__styles__", {}))

        header = Text.assemble(
            "[ ",
            (str(getattr(main, "__prog__", "courier")), styles["prog-name"]),
            " — ",
            (self.code.normalize() if self.code is not None else "?", styles["code"]),
            " | ",
            (self.title.title(), styles["error-title"]),
            " ]",
        )
        renders = [Text(self.message, styles["error-message"])]
        if self.hint:
            renders.append(Text.assemble((" → ", styles["hint-arrow"]), (self.hint, styles["hint"])))
        if self.code is not None and (docs := getdoc(self.code)):
            renders.append(Text(docs, styles["docs"]))
        return Panel(Group(*renders), title=header, title_align="left")

    def report(self):
        """print this fault to the operator console (stderr)."""
        console.print(self)


class MissingResolverError(ConfigurationError):
    title = "missing resolver"
    default = FaultCode.MISSING_RESOLVER


class MissingCompletionError(ConfigurationError):
    title = "missing completion source"
    default = FaultCode.MISSING_COMPLETION


class HandlerSignatureError(ConfigurationError):
    title = "handler signature mismatch"
    default = FaultCode.HANDLER_SIGNATURE


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    returns None when nothing is registered.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "Abort",
    "Outcome",
    "ConfigurationError",
    "MissingResolverError",
    "MissingCompletionError",
    "HandlerSignatureError",
    "getdoc",
)
