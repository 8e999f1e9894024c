# chronokit

Utilities for leap second data and for analysing the results of PTP
(Precision Time Protocol) path probing.

## Installation

```
pip install .
pip install ".[test]"   # with pytest, to run the tests
```

Python 3.10 or later is required. Table output uses `tabulate`.

## `chronokit.leaphash`

`compute(data)` checks the integrity of an official `leap-seconds.list`
document. It takes the document text and returns its SHA-1 checksum as five
groups of eight hex digits separated by spaces. For a genuine file the
result equals the value on the file's `#h` line.

```python
from chronokit.leaphash import compute

with open("leap-seconds.list", encoding="ascii") as fh:
    print(compute(fh.read()))
```

Comment lines are ignored. The last-modification (`#$`) and expiry (`#@`)
values are included. Trailing comments on data lines are stripped, and
spaces and tabs are dropped from every counted line.

## `chronokit.leapsectz`

Reads and writes the leap second table of TZif time zone files, such as
`/usr/share/zoneinfo/right/UTC` (the default, `LEAP_FILE`).

- `parse(srcfile)` returns every `LeapSecond` in the file. With no
  argument, `None` or an empty string it reads `LEAP_FILE`.
- `latest(srcfile)` returns the leap second with the latest effective time.
- `read(stream)` parses an open binary stream. Version 1, 2 and 3 files
  are accepted; for version 2 and 3 the 64-bit second part is used.
- `read_header(stream)` reads the six header counts into a `Header`.
  `Header.pack()` encodes them again.
- `LeapSecond(tleap, nleap)` is one record. `LeapSecond.time()` returns
  the UTC `datetime` at which it takes effect.
- `write(stream, version, leap_seconds, name="")` writes a minimal TZif
  file holding only the given leap seconds. `version` is `VERSION_1` (0)
  or `VERSION_2` (`ord("2")`). An empty name is written as `UTC`.
- `prepare_header`, `write_pre_data` and `write_post_data` write the
  individual parts of such a file.

```python
from chronokit.leapsectz import latest

print(latest().time())
```

Errors all derive from `LeapSecondError`:

- `BadDataError` means the data is malformed or truncated.
- `UnsupportedVersionError` means the version is unknown, or `write` was
  given a version other than 1 or 2.
- `NoLeapSecondsError` means the file has no leap second records.

## Transparent-clock path analysis

These modules process the replies collected while probing a network for
switches that do not act as PTP transparent clocks. A PTP event packet sent
with a given hop limit is dropped by the switch at that hop. That switch
returns an ICMPv6 "hop limit exceeded" message carrying the packet it
received. If the correction field barely changes between two adjacent
hops, the switch between them did not update it.

### `chronokit.ziffy_config`

- `Config` holds the probe settings. Durations are in seconds. Creating a
  `Config` raises `ValueError` for a DSCP outside 0–63, a message type
  other than `sync`, `delay_req` or `signaling`, or an unknown log level.
- `SwitchTrafficInfo` is one reply: the switch IP, its correction field,
  the route index and the hop.
- `PathInfo` is the list of replies for one route, plus the rack switch
  hostname.
- `SwitchPrintInfo` holds the aggregated figures for one switch.
- `TCStatus` is `On`, `Off` or `Unknown`.

### `chronokit.ziffy_paths`

- `RouteTable` collects replies by route. `new_route()` starts a route and
  returns its index. `add(info)` files a reply under its route.
  `drain(queue)` moves every reply waiting in a `queue.Queue` into the
  table. `cleared()` returns the routes in cleaned form.
- `clear_paths(routes, rack_sw_hostname)` sorts each route by hop and
  keeps one reply per hop. `sort_switches_by_hop(switches)` does the
  sorting on its own.
- `form_new_dest(destination, index)` returns the address
  `<destination /64>:face:face:0:<index>`, using the low 16 bits of
  `index`.
- `lookup_name(ip)` returns the reverse DNS name of an address, or the
  address itself if there is none.
- `HandlerLimiter(limit, running=0)` is a thread-safe bound on concurrent
  handlers, with `acquire()`, `release()` and a `running` count.

### `chronokit.ziffy_report`

- `compute_info(routes, cf_threshold, resolve=None)` aggregates the
  routes per `(hostname, hop)`. Correction values and the threshold are
  in nanoseconds. A switch whose absolute average correction-field change
  exceeds the threshold is marked `On`. Otherwise it is `Off`. The last
  switch of a path, and one not followed by the next hop, is marked
  `Unknown`. `resolve` maps an IP to a name and defaults to
  `lookup_name`. An `ethN.` interface prefix on the name is split off
  into the interface column (`host_without_prefix`, `interface_prefix`).
- `sorted_switches`, `hop_count`, `column_index` and `print_rows` build
  the report rows.
- `render_table(rows)` formats the rows as a grid table. A blank row
  separates each new hop.
- `pretty_print(routes, cf_threshold, resolve=None)` prints the table to
  standard output and logs a debug summary.
- `write_csv(routes, path, cf_threshold, resolve=None)` writes the same
  rows to a CSV file.

```python
from chronokit.ziffy_config import SwitchTrafficInfo
from chronokit.ziffy_paths import RouteTable
from chronokit.ziffy_report import pretty_print

table = RouteTable()
table.new_route()
table.add(SwitchTrafficInfo(ip="2001:db8::1", corr_field=0.0, hop=1))
table.add(SwitchTrafficInfo(ip="2001:db8::2", corr_field=400.0, hop=2))
pretty_print(table.cleared(), 250.0, resolve=lambda ip: ip)
```

## What this package does not do

The package does not send probe packets, capture traffic, listen for ICMP
replies or LLDP frames, or answer probes as a receiver. It also has no
command-line program. It works on replies that have already been
collected, as `SwitchTrafficInfo` records.