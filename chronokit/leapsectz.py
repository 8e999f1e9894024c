"""Leap second information from TZif time zone database files."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Union

LEAP_FILE = Path("/usr/share/zoneinfo/right/UTC")

VERSION_1 = 0
VERSION_2 = ord("2")
VERSION_3 = ord("3")

_MAGIC = b"TZif"
_HEADER = struct.Struct(">6I")
_LEAP_V1 = struct.Struct(">Ii")
_LEAP_V2 = struct.Struct(">Qi")
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_U32 = 0xFFFFFFFF
_U64 = 0xFFFFFFFFFFFFFFFF


class LeapSecondError(Exception):
    """Base class for leap second file errors."""


class BadDataError(LeapSecondError, ValueError):
    """The time zone information is malformed."""

    def __init__(self, message: str = "malformed time zone information") -> None:
        super().__init__(message)


class UnsupportedVersionError(LeapSecondError, ValueError):
    """The TZif version is not supported."""

    def __init__(self, message: str = "unsupported version") -> None:
        super().__init__(message)


class NoLeapSecondsError(LeapSecondError, LookupError):
    """The file holds no leap second records."""

    def __init__(self, message: str = "no leap seconds information found") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class LeapSecond:
    """One leap second record: transition time and cumulative correction."""

    tleap: int
    nleap: int

    def time(self) -> datetime:
        """Return the UTC instant at which the leap second takes effect."""
        seconds = (self.tleap - self.nleap + 1) & _U64
        if seconds >= 1 << 63:
            seconds -= 1 << 64
        return _EPOCH + timedelta(seconds=seconds)


@dataclass(frozen=True)
class Header:
    """Counts from a TZif header, in file order."""

    is_utc_cnt: int = 0
    is_std_cnt: int = 0
    leap_cnt: int = 0
    time_cnt: int = 0
    type_cnt: int = 0
    char_cnt: int = 0

    def pack(self) -> bytes:
        """Return the big-endian encoding of the counts."""
        return _HEADER.pack(
            self.is_utc_cnt,
            self.is_std_cnt,
            self.leap_cnt,
            self.time_cnt,
            self.type_cnt,
            self.char_cnt,
        )


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise BadDataError()
    return data


def read_header(stream: BinaryIO) -> Header:
    """Read the six header counts from the stream."""
    return Header(*_HEADER.unpack(_read_exact(stream, _HEADER.size)))


def read(stream: BinaryIO) -> list[LeapSecond]:
    """Parse leap second records from a TZif stream."""
    leap_seconds: list[LeapSecond] = []
    for part in range(2):
        if stream.read(4) != _MAGIC:
            raise BadDataError()
        preamble = stream.read(16)
        if len(preamble) != 16:
            raise BadDataError()
        version = preamble[0]
        if version not in (VERSION_1, VERSION_2, VERSION_3):
            raise UnsupportedVersionError()
        if part > version:
            raise BadDataError()

        hdr = read_header(stream)
        time_size = 5 if part == 0 else 9
        skip = hdr.time_cnt * time_size + hdr.type_cnt * 6 + hdr.char_cnt
        first_of_two = part == 0 and version > VERSION_1
        if first_of_two:
            skip += hdr.leap_cnt * 8 + hdr.is_utc_cnt + hdr.is_std_cnt
        _read_exact(stream, skip)
        if first_of_two:
            continue

        record = _LEAP_V1 if version == VERSION_1 else _LEAP_V2
        for _ in range(hdr.leap_cnt):
            tleap, nleap = record.unpack(_read_exact(stream, record.size))
            leap_seconds.append(LeapSecond(tleap, nleap))
        stream.read(hdr.is_utc_cnt + hdr.is_std_cnt)
        break

    if not leap_seconds:
        raise NoLeapSecondsError()
    return leap_seconds


def parse(srcfile: Optional[Union[str, Path]] = None) -> list[LeapSecond]:
    """Return the leap seconds in srcfile, or in the system file if none is given."""
    path = Path(srcfile) if srcfile else Path(LEAP_FILE)
    with path.open("rb") as stream:
        return read(stream)


def latest(srcfile: Optional[Union[str, Path]] = None) -> LeapSecond:
    """Return the most recent leap second in srcfile, or in the system file."""
    result = LeapSecond(0, 0)
    for leap in parse(srcfile):
        if leap.time() > result.time():
            result = leap
    return result


def prepare_header(version: int, leap_count: int, name: str) -> bytes:
    """Build the TZif preamble and header for a file of leap_count records."""
    hdr = Header(
        is_utc_cnt=1,
        is_std_cnt=1,
        leap_cnt=leap_count,
        time_cnt=0,
        type_cnt=1,
        char_cnt=len(name.encode("utf-8")),
    )
    return _MAGIC + bytes([version]) + bytes(15) + hdr.pack()


def write_pre_data(stream: BinaryIO, name: str) -> None:
    """Write the single local time type record and the zone designation."""
    stream.write(bytes(6))
    stream.write(name.encode("utf-8"))


def write_post_data(stream: BinaryIO) -> None:
    """Write the standard/wall and UT/local indicators."""
    stream.write(bytes(2))


def write(
    stream: BinaryIO,
    version: int,
    leap_seconds: Iterable[LeapSecond],
    name: str = "",
) -> None:
    """Write leap seconds as a TZif file of version 1 (0) or 2 (ord('2'))."""
    if version not in (VERSION_1, VERSION_2):
        raise UnsupportedVersionError()
    leaps = list(leap_seconds)
    formatted = (name or "UTC") + "\x00"
    header = prepare_header(version, len(leaps), formatted)

    stream.write(header)
    write_pre_data(stream, formatted)
    for leap in leaps:
        stream.write(struct.pack(">II", leap.tleap & _U32, leap.nleap & _U32))
    write_post_data(stream)

    if version != VERSION_2:
        return

    stream.write(header)
    write_pre_data(stream, formatted)
    for leap in leaps:
        stream.write(_LEAP_V2.pack(leap.tleap & _U64, leap.nleap))
    write_post_data(stream)
    stream.write(("\n" + name + "\n").encode("utf-8"))