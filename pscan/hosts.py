"""
Host List Module

Ordered, deduplicated collection of scan targets (DNS names or IP literals).
"""

import bisect
from typing import Iterable, Iterator, List, Tuple

from .errors import HostExistsError, HostNotFoundError


class HostSet:
    """
    Sorted list of unique host identifiers.

    Every search, add and remove leaves the list sorted. Entries appended
    verbatim by the hosts file loader keep their file order (duplicates
    included) until the next one of those calls.

    Not thread-safe: callers must not mutate a HostSet while a scan is
    iterating it.
    """

    def __init__(self, hosts: Iterable[str] = ()):
        self.hosts: List[str] = []
        for host in hosts:
            self.add(host)

    def search(self, host: str) -> Tuple[bool, int]:
        """
        Sorts the list in place, then binary searches for `host`.

        Returns:
            (True, index) when found, (False, -1) otherwise
        """
        self.hosts.sort()
        i = bisect.bisect_left(self.hosts, host)
        if i < len(self.hosts) and self.hosts[i] == host:
            return True, i
        return False, -1

    def add(self, host: str) -> None:
        if not host:
            raise ValueError("Host must be a non-empty string")

        found, _ = self.search(host)
        if found:
            raise HostExistsError(host)

        # search() just sorted the list
        bisect.insort(self.hosts, host)

    def remove(self, host: str) -> None:
        found, i = self.search(host)
        if not found:
            raise HostNotFoundError(host)
        del self.hosts[i]

    def extend_raw(self, hosts: Iterable[str]) -> None:
        """Appends entries verbatim: no dedup, no sort."""
        self.hosts.extend(hosts)

    def __contains__(self, host: str) -> bool:
        found, _ = self.search(host)
        return found

    def __iter__(self) -> Iterator[str]:
        return iter(self.hosts)

    def __len__(self) -> int:
        return len(self.hosts)

    def __repr__(self) -> str:
        return f"HostSet({self.hosts!r})"
