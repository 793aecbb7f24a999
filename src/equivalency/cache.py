"""MemberCache: LRU-backed cache of class-level member descriptions.

Introspecting a class (walking its MRO, resolving annotations with
``typing.get_type_hints`` and collecting properties) is done once per class
and reused for every instance of that class encountered during a comparison.
LRU eviction occurs silently when ``max_size`` is exceeded.

Each ``MemberCache`` instance maintains its own ``LRUCache``; there is no
class-level shared state, so two validators never interfere with each other.
Access to the ``LRUCache`` is guarded by a lock, so one cache (and the
options holding it) may be used by several threads at once.

Example::

    from equivalency.cache import MemberCache

    cache = MemberCache(max_size=256)
    members = cache.members_of(Order)       # introspects Order
    members_again = cache.members_of(Order)  # served from memory
"""

from __future__ import annotations

import threading

from cachetools import LRUCache

from equivalency.graph.members import Member, class_members

__all__ = ["MemberCache"]


class MemberCache:
    """LRU-backed cache of ``class_members`` results, keyed by class.

    Args:
        max_size: Maximum number of classes to hold.  Defaults to 512.
    """

    def __init__(self, max_size: int = 512) -> None:
        self._cache: LRUCache[type, tuple[Member, ...]] = LRUCache(maxsize=max_size)
        self._lock: threading.Lock = threading.Lock()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        """The maximum number of classes this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of classes stored in the cache."""
        with self._lock:
            return int(self._cache.currsize)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def members_of(self, cls: type) -> tuple[Member, ...]:
        """Return the declared members of ``cls``, introspecting it on first use."""
        try:
            with self._lock:
                return self._cache[cls]
        except KeyError:
            pass
        except TypeError:  # unhashable metaclass instances
            return class_members(cls)
        members = class_members(cls)
        with self._lock:
            self._cache[cls] = members
        return members
