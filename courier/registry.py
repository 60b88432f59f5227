"""
Command registry: one flat namespace of names and aliases.

Every key (a descriptor's name or any of its aliases) maps to the same
descriptor instance. Keys collide silently: the last registration wins for
the colliding key, which is only traced at debug level. Primary names are
tracked separately; listings, help and first-token completion use
reachable(), which skips a name a later alias has taken over.
"""
import logging
from types import MappingProxyType

from .descriptors import Descriptor

logger = logging.getLogger(__name__)


class CommandRegistry:
    def __init__(self):
        self._entries = {}
        self._primary = {}

    def register(self, descriptor, /):
        if not isinstance(descriptor, Descriptor):
            raise TypeError("register() argument must be a descriptor")
        for key in descriptor.keys:
            if (previous := self._entries.get(key)) is not None and previous is not descriptor:
                logger.debug("command key %r now maps to %r instead of %r", key, descriptor.name, previous.name)
            self._entries[key] = descriptor
        self._primary[descriptor.name] = descriptor
        logger.debug("registered command %r (aliases: %s)", descriptor.name, ", ".join(descriptor.aliases) or "none")
        return descriptor

    def lookup(self, token, /):
        return self._entries.get(token)

    def all_primary(self):
        """descriptors by primary name, in registration order."""
        return tuple(self._primary.values())

    def reachable(self):
        """primary descriptors whose name still runs them (not taken over by a later alias)."""
        return tuple(descriptor for name, descriptor in self._primary.items() if self._entries.get(name) is descriptor)

    @property
    def entries(self):
        return MappingProxyType(self._entries)

    def __contains__(self, token):
        return token in self._entries

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join(map(repr, self._primary)))


__all__ = ("CommandRegistry",)
