"""Aggregation and reporting of the switches found by a ziffy sweep."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional, Sequence, Union

from tabulate import tabulate

from chronokit.ziffy_config import PathInfo, SwitchPrintInfo, TCStatus
from chronokit.ziffy_paths import lookup_name

log = logging.getLogger(__name__)

Resolver = Callable[[str], str]
SwitchKey = tuple[str, int]

HEADER = (
    "uniq",
    "width",
    "hop",
    "ip_address",
    "intf",
    "hostname",
    "flows",
    "TC",
    "avg_CF(ns)",
    "max_CF(ns)",
    "min_CF(ns)",
)
MAX_COL_WIDTH = 100


def _has_interface_prefix(name: str) -> bool:
    return "." in name and name.startswith("eth")


def host_without_prefix(name: str) -> str:
    """Return a device name without its leading "ethN." interface part."""
    if _has_interface_prefix(name):
        return name.split(".", 1)[1]
    return name


def interface_prefix(name: str) -> str:
    """Return the leading "ethN" interface part of a device name, or ""."""
    if _has_interface_prefix(name):
        return name.split(".", 1)[0]
    return ""


def _debug_summary(routes: Sequence[PathInfo], resolve: Resolver) -> None:
    """Log which switches did not change the correction field."""
    not_tc: list = []
    tested: set[str] = set()
    enabled = 0
    for route in routes:
        for sw, nxt in zip(route.switches, route.switches[1:]):
            if nxt.corr_field - sw.corr_field == 0 and sw.ip not in tested:
                not_tc.append(sw)
            tested.add(sw.ip)
            enabled += 1

    log.debug(
        "%d switches tested: %d TC enabled | %d TC not enabled",
        len(tested),
        enabled,
        len(not_tc),
    )
    for broken in not_tc:
        log.debug("%s: PTP TC not enabled", resolve(broken.ip))
        path = routes[broken.route_idx].switches
        for position, sw in enumerate(path, start=1):
            marker = "V" if position == len(path) else "|"
            log.debug(" %s %s", marker, resolve(sw.ip))

    log.debug("TESTED:")
    names = sorted((resolve(ip) for ip in tested), reverse=True)
    for index, name in enumerate(names):
        log.debug("%d %s", index, name)


def compute_info(
    routes: Iterable[PathInfo],
    cf_threshold: float,
    resolve: Optional[Resolver] = None,
) -> dict[SwitchKey, SwitchPrintInfo]:
    """Aggregate per-switch correction field figures over all routes.

    Correction values are in nanoseconds.  A switch whose average change of
    the correction field exceeds cf_threshold is taken to be a transparent
    clock; the last switch of a path, or one whose successor is not on the
    next hop, cannot be judged.  Results are keyed by (hostname, hop).
    """
    resolve = resolve or lookup_name
    discovered: dict[SwitchKey, SwitchPrintInfo] = {}

    for route in routes:
        switches = route.switches
        for index, sw in enumerate(switches):
            corr_field = 0.0
            last = False
            name = resolve(sw.ip)
            host = host_without_prefix(name)
            intf = interface_prefix(name)

            if sw.ip == switches[-1].ip:
                last = True
            else:
                nxt = switches[index + 1]
                # Non-adjacent hops: the switch in between did not answer or
                # the reply was lost, so the difference means nothing.
                if nxt.hop != sw.hop + 1:
                    last = True
                else:
                    corr_field = nxt.corr_field - sw.corr_field

            if sw.hop == 1 and route.rack_sw_hostname:
                host = route.rack_sw_hostname

            key = (host, sw.hop)
            entry = discovered.get(key)
            if entry is None:
                discovered[key] = SwitchPrintInfo(
                    ip=sw.ip,
                    hostname=host,
                    interface=intf,
                    total_cf=corr_field,
                    routes=1,
                    hop=sw.hop,
                    last=last,
                    max_cf=corr_field,
                    min_cf=corr_field,
                    div_routes=1,
                )
                continue
            entry.routes += 1
            if not last:
                entry.total_cf += corr_field
                entry.div_routes += 1
                entry.max_cf = max(entry.max_cf, corr_field)
                entry.min_cf = min(entry.min_cf, corr_field)

    for sw in discovered.values():
        if sw.last:
            sw.avg_cf = 0.0
            sw.tc_enable = TCStatus.UNKNOWN
            continue
        sw.avg_cf = sw.total_cf / sw.div_routes
        sw.tc_enable = TCStatus.ON if abs(sw.avg_cf) > cf_threshold else TCStatus.OFF
    return discovered


def sorted_switches(info: Mapping[SwitchKey, SwitchPrintInfo]) -> list[SwitchPrintInfo]:
    """Return the aggregated switches ordered by hop."""
    return sorted(info.values(), key=lambda sw: sw.hop)


def hop_count(switches: Iterable[SwitchPrintInfo], hop: int) -> int:
    """Return how many switches sit at the given hop."""
    return sum(1 for sw in switches if sw.hop == hop)


def column_index(header: Sequence[str], name: str) -> int:
    """Return the position of a column in the header."""
    try:
        return list(header).index(name)
    except ValueError:
        raise ValueError(f"no column named {name!r}") from None


def print_rows(switches: Sequence[SwitchPrintInfo]) -> list[list[str]]:
    """Return the report as rows of text, header first."""
    rows = [list(HEADER)]
    seen: set[str] = set()
    unique = 1
    for sw in switches:
        if sw.last:
            avg = max_cf = min_cf = ""
        else:
            avg, max_cf, min_cf = (f"{v:.4f}" for v in (sw.avg_cf, sw.max_cf, sw.min_cf))
        uniq = ""
        if sw.hostname not in seen:
            uniq = str(unique)
            seen.add(sw.hostname)
            unique += 1
        rows.append(
            [
                uniq,
                str(hop_count(switches, sw.hop)),
                str(sw.hop),
                sw.ip,
                sw.interface,
                sw.hostname,
                str(sw.routes),
                str(sw.tc_enable),
                avg,
                max_cf,
                min_cf,
            ]
        )
    return rows


def render_table(rows: Sequence[Sequence[str]]) -> str:
    """Render report rows as a text table with a blank row before each new hop."""
    header, *data = rows
    hop_index = column_index(header, "hop")
    blank = [""] * len(header)
    body: list[Sequence[str]] = []
    current_hop = 0
    for row in data:
        next_hop = int(row[hop_index])
        if next_hop > current_hop:
            body.append(blank)
        body.append(row)
        current_hop = next_hop
    return tabulate(
        body,
        headers=header,
        tablefmt="grid",
        disable_numparse=True,
        maxcolwidths=MAX_COL_WIDTH,
    )


def pretty_print(
    routes: Sequence[PathInfo],
    cf_threshold: float,
    resolve: Optional[Resolver] = None,
) -> None:
    """Print the switch report to standard output."""
    resolve = resolve or lookup_name
    _debug_summary(routes, resolve)
    info = compute_info(routes, cf_threshold, resolve)
    print(render_table(print_rows(sorted_switches(info))))


def write_csv(
    routes: Sequence[PathInfo],
    path: Union[str, Path],
    cf_threshold: float,
    resolve: Optional[Resolver] = None,
) -> None:
    """Write the switch report to a CSV file."""
    info = compute_info(routes, cf_threshold, resolve)
    rows = print_rows(sorted_switches(info))
    with open(path, "w", newline="", encoding="utf-8") as handle:
        csv.writer(handle, lineterminator="\n").writerows(rows)