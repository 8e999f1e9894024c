"""Route bookkeeping for the ziffy sender and handler limiting for the receiver."""

from __future__ import annotations

import ipaddress
import socket
import threading
from itertools import pairwise
from operator import attrgetter
from queue import Empty, Queue
from typing import Iterable

from chronokit.ziffy_config import PathInfo, SwitchTrafficInfo

RACK_MASK_BITS = 64
_FACE_FACE = 0xFACEFACE
_ALL_ONES = (1 << 128) - 1


def sort_switches_by_hop(switches: Iterable[SwitchTrafficInfo]) -> list[SwitchTrafficInfo]:
    """Return the switches ordered by hop count."""
    return sorted(switches, key=attrgetter("hop"))


def clear_paths(routes: Iterable[PathInfo], rack_sw_hostname: str = "") -> list[PathInfo]:
    """Sort every route by hop and drop duplicate replies for the same hop.

    Of several replies with the same hop, the last one in sorted order is kept.
    """
    cleared = []
    for route in routes:
        ordered = sort_switches_by_hop(route.switches)
        kept = [sw for sw, nxt in pairwise(ordered) if sw.hop != nxt.hop]
        kept.extend(ordered[-1:])
        cleared.append(PathInfo(switches=kept, rack_sw_hostname=rack_sw_hostname))
    return cleared


def form_new_dest(destination: str, index: int) -> ipaddress.IPv6Address:
    """Return an address in the /64 of destination ending in :face:face:0:<index>.

    Only the low 16 bits of index are used.
    """
    addr = ipaddress.ip_address(destination)
    if addr.version != 6:
        raise ValueError(f"{destination} is not an IPv6 address")
    host_bits = 128 - RACK_MASK_BITS
    prefix = int(addr) & (_ALL_ONES ^ ((1 << host_bits) - 1))
    return ipaddress.IPv6Address(prefix | (_FACE_FACE << 32) | (index & 0xFFFF))


def lookup_name(ip: str) -> str:
    """Return the reverse DNS name of ip, or ip itself when it has none."""
    try:
        return socket.gethostbyaddr(ip)[0]
    except (OSError, UnicodeError):
        return ip


class RouteTable:
    """The paths collected by a sender, indexed by route number."""

    def __init__(self, rack_sw_hostname: str = "") -> None:
        self.rack_sw_hostname = rack_sw_hostname
        self.routes: list[PathInfo] = []

    def __len__(self) -> int:
        return len(self.routes)

    def __getitem__(self, index: int) -> PathInfo:
        return self.routes[index]

    def __iter__(self):
        return iter(self.routes)

    def new_route(self) -> int:
        """Start an empty route and return its index."""
        self.routes.append(PathInfo(rack_sw_hostname=self.rack_sw_hostname))
        return len(self.routes) - 1

    def add(self, info: SwitchTrafficInfo) -> None:
        """Append a reply to the route it belongs to."""
        if not 0 <= info.route_idx < len(self.routes):
            raise IndexError(f"no route with index {info.route_idx}")
        self.routes[info.route_idx].switches.append(info)

    def drain(self, queue: "Queue[SwitchTrafficInfo]") -> int:
        """Move every reply waiting in the queue into its route; return how many."""
        moved = 0
        while True:
            try:
                info = queue.get_nowait()
            except Empty:
                return moved
            self.add(info)
            moved += 1

    def cleared(self) -> list[PathInfo]:
        """Return the routes sorted by hop with duplicate replies removed."""
        return clear_paths(self.routes, self.rack_sw_hostname)


class HandlerLimiter:
    """Thread-safe counter bounding the number of concurrent packet handlers."""

    def __init__(self, limit: int, running: int = 0) -> None:
        self.limit = limit
        self._running = running
        self._lock = threading.Lock()

    @property
    def running(self) -> int:
        with self._lock:
            return self._running

    def acquire(self) -> bool:
        """Take a handler slot; return False when all slots are in use."""
        with self._lock:
            if self.limit > self._running:
                self._running += 1
                return True
            return False

    def release(self) -> bool:
        """Give back a slot; return False if the count went negative."""
        with self._lock:
            self._running -= 1
            return self._running >= 0