import threading
from typing import Callable, Iterable, Set


class CollectionCache:
  """
  Process-local set of known collection names.

  Lookups that miss call `list_names` (the store's authoritative list)
  and merge the result in. Names are only ever added, so a refresh can
  never forget a keyword that was known-good. There is no other
  invalidation: collections created elsewhere are picked up on the next
  miss. Errors raised by `list_names` propagate to the caller.
  """

  def __init__(self, list_names: Callable[[], Iterable[str]]):
    self._list_names = list_names
    self._names: Set[str] = set()
    self._lock = threading.Lock()

  def __contains__(self, name: str) -> bool:
    with self._lock:
      return name in self._names

  def add(self, name: str) -> None:
    with self._lock:
      self._names.add(name)

  def refresh(self) -> None:
    """Merge the store's current collection list into the cache"""
    # The store round-trip happens outside the lock, concurrent misses
    # may both refresh
    self.merge(self._list_names())

  def merge(self, names: Iterable[str]) -> None:
    names = list(names)
    with self._lock:
      self._names.update(names)

  def exists(self, name: str) -> bool:
    """Check the cache, refreshing once on a miss"""
    if name in self:
      return True
    self.refresh()
    return name in self
